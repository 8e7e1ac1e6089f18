from __future__ import annotations

from catalog_console.core import endpoints
from catalog_console.infrastructure.api_client import ApiClient
from catalog_console.models.schemas import Unit


class UnitService:
    def __init__(self, api_client: ApiClient) -> None:
        self.api_client = api_client

    async def list_units(self) -> list[Unit]:
        rows = await self.api_client.get(endpoints.UNITS)
        return [Unit.model_validate(row) for row in rows or []]

    async def create_unit(self, name: str) -> Unit:
        payload = await self.api_client.post(endpoints.UNITS, json={"name": _clean_name(name)})
        return Unit.model_validate(payload)

    async def update_unit(self, unit_id: str, name: str) -> Unit:
        payload = await self.api_client.patch(endpoints.unit(unit_id), json={"name": _clean_name(name)})
        return Unit.model_validate(payload)

    async def delete_unit(self, unit_id: str) -> None:
        await self.api_client.delete(endpoints.unit(unit_id))


def _clean_name(name: str) -> str:
    cleaned = name.strip()
    if not cleaned:
        raise ValueError("Unit name is required")
    return cleaned
