from __future__ import annotations

import re

from catalog_console.core import endpoints
from catalog_console.infrastructure.api_client import ApiClient
from catalog_console.models.schemas import Country

# Two regional indicator symbols form a flag emoji.
_FLAG_PREFIX = re.compile(r"^[\U0001F1E6-\U0001F1FF]{2}")


def has_flag(name: str) -> bool:
    return bool(name) and _FLAG_PREFIX.match(name) is not None


def strip_flag(name: str) -> str:
    return _FLAG_PREFIX.sub("", name).strip()


class CountryService:
    def __init__(self, api_client: ApiClient) -> None:
        self.api_client = api_client

    async def list_countries(self) -> list[Country]:
        rows = await self.api_client.get(endpoints.COUNTRIES)
        return [Country.model_validate(row) for row in rows or []]

    async def find_by_name(self, name: str) -> Country | None:
        wanted = strip_flag(name).lower()
        for country in await self.list_countries():
            if strip_flag(country.name).lower() == wanted:
                return country
        return None

    async def create_country(self, name: str) -> Country:
        cleaned = name.strip()
        if not cleaned:
            raise ValueError("Country name is required")
        return Country.model_validate(await self.api_client.post(endpoints.COUNTRIES, json={"name": cleaned}))

    async def update_country(self, country_id: str, name: str) -> Country:
        cleaned = name.strip()
        if not cleaned:
            raise ValueError("Country name is required")
        payload = await self.api_client.patch(endpoints.country(country_id), json={"name": cleaned})
        return Country.model_validate(payload)

    async def delete_country(self, country_id: str) -> None:
        await self.api_client.delete(endpoints.country(country_id))
