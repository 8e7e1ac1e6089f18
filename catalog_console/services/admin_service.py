from __future__ import annotations

from typing import Any

from catalog_console.core import endpoints
from catalog_console.infrastructure.api_client import ApiClient
from catalog_console.models.schemas import (
    Admin,
    CreateAdminRequest,
    Log,
    MessageResponse,
    UpdateAdminRequest,
    UpdatePasswordRequest,
    UpdateProfileRequest,
)
from catalog_console.services.session_service import SessionManager


class AdminService:
    """Admin management and self-service.

    Management calls are gated on the superadmin flag of the current session
    so the console can hide them early; the backend still authorizes each
    request on its own.
    """

    def __init__(self, api_client: ApiClient, session_manager: SessionManager) -> None:
        self.api_client = api_client
        self.session_manager = session_manager

    async def list_admins(self) -> list[Admin]:
        self.session_manager.require_superadmin()
        rows = await self.api_client.get(endpoints.ADMIN_LIST)
        return [Admin.model_validate(row) for row in rows or []]

    async def get_admin(self, admin_id: str) -> Admin:
        self.session_manager.require_superadmin()
        return Admin.model_validate(await self.api_client.get(endpoints.admin(admin_id)))

    async def create_admin(self, payload: CreateAdminRequest | dict[str, Any]) -> Admin:
        self.session_manager.require_superadmin()
        body = CreateAdminRequest.model_validate(payload).model_dump()
        return Admin.model_validate(await self.api_client.post(endpoints.ADMIN_CREATE, json=body))

    async def update_admin(self, admin_id: str, payload: UpdateAdminRequest | dict[str, Any]) -> Admin:
        self.session_manager.require_superadmin()
        body = UpdateAdminRequest.model_validate(payload).model_dump(exclude_none=True)
        return Admin.model_validate(await self.api_client.patch(endpoints.admin(admin_id), json=body))

    async def delete_admin(self, admin_id: str) -> None:
        session = self.session_manager.require_superadmin()
        if session.admin_id == admin_id:
            raise ValueError("Cannot delete the admin of the current session")
        await self.api_client.delete(endpoints.admin(admin_id))

    async def change_admin_password(self, admin_id: str, new_password: str) -> Admin:
        self.session_manager.require_superadmin()
        if not new_password:
            raise ValueError("New password is required")
        payload = await self.api_client.patch(
            endpoints.ADMIN_CHANGE_PASSWORD,
            json={"adminId": admin_id, "newPassword": new_password},
        )
        return Admin.model_validate(payload)

    async def list_logs(self) -> list[Log]:
        rows = await self.api_client.get(endpoints.ADMINS_ACTIVITY)
        return [Log.model_validate(row) for row in rows or []]

    async def update_my_profile(self, payload: UpdateProfileRequest | dict[str, Any]) -> Admin:
        body = UpdateProfileRequest.model_validate(payload).model_dump(exclude_none=True)
        return Admin.model_validate(await self.api_client.patch(endpoints.ADMINS_ME_PROFILE, json=body))

    async def update_my_password(self, current_password: str, new_password: str) -> MessageResponse:
        body = UpdatePasswordRequest(currentPassword=current_password, newPassword=new_password).model_dump()
        payload = await self.api_client.patch(endpoints.ADMINS_ME_PASSWORD, json=body)
        return MessageResponse.model_validate(payload or {})
