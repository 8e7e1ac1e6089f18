from __future__ import annotations

from typing import Any

from catalog_console.core import endpoints
from catalog_console.infrastructure.api_client import ApiClient
from catalog_console.models.schemas import Currency, DashboardSummary, GeneralSettings


class DashboardService:
    def __init__(self, api_client: ApiClient) -> None:
        self.api_client = api_client

    async def summary(self) -> DashboardSummary:
        return DashboardSummary.model_validate(await self.api_client.get(endpoints.DASHBOARD_SUMMARY))

    async def general_settings(self) -> GeneralSettings:
        return GeneralSettings.model_validate(await self.api_client.get(endpoints.SETTINGS_GENERAL))

    async def update_general_settings(self, updates: dict[str, Any]) -> GeneralSettings:
        known = set(GeneralSettings.model_fields)
        unknown = sorted(set(updates) - known)
        if unknown:
            raise ValueError(f"Unknown settings: {', '.join(unknown)}")
        payload = await self.api_client.patch(endpoints.SETTINGS_GENERAL, json=updates)
        return GeneralSettings.model_validate(payload)

    async def currency(self) -> Currency:
        return Currency.model_validate(await self.api_client.get(endpoints.CURRENCY))
