from __future__ import annotations

from typing import Any

from catalog_console.core import endpoints
from catalog_console.infrastructure.api_client import ApiClient, FileTuple
from catalog_console.models.schemas import Category, Subcategory

CATEGORY_FORM_FIELDS = (
    "name_uz",
    "name_en",
    "name_ru",
    "name_kz",
    "description_uz",
    "description_en",
    "description_ru",
    "description_kz",
)
SUBCATEGORY_FIELDS = ("name_uz", "name_en", "name_ru", "name_kz", "categoryId")


class CategoryService:
    """Categories are written as multipart forms so an image can ride along."""

    def __init__(self, api_client: ApiClient) -> None:
        self.api_client = api_client

    async def list_categories(self) -> list[Category]:
        rows = await self.api_client.get(endpoints.CATEGORIES)
        return [Category.model_validate(row) for row in rows or []]

    async def create_category(self, fields: dict[str, str], image: FileTuple | None = None) -> Category:
        payload = await self.api_client.send_form(
            "POST",
            endpoints.CATEGORIES,
            data=_category_form(fields),
            files={"image": image} if image else None,
        )
        return Category.model_validate(payload)

    async def update_category(
        self,
        category_id: str,
        fields: dict[str, str],
        image: FileTuple | None = None,
    ) -> Category:
        payload = await self.api_client.send_form(
            "PATCH",
            endpoints.category(category_id),
            data=_category_form(fields),
            files={"image": image} if image else None,
        )
        return Category.model_validate(payload)

    async def delete_category(self, category_id: str) -> None:
        await self.api_client.delete(endpoints.category(category_id))


class SubcategoryService:
    def __init__(self, api_client: ApiClient) -> None:
        self.api_client = api_client

    async def list_subcategories(self) -> list[Subcategory]:
        rows = await self.api_client.get(endpoints.SUBCATEGORIES)
        return [Subcategory.model_validate(row) for row in rows or []]

    async def list_for_category(self, category_id: str) -> list[Subcategory]:
        return [row for row in await self.list_subcategories() if row.categoryId == category_id]

    async def create_subcategory(self, fields: dict[str, Any]) -> Subcategory:
        payload = await self.api_client.post(endpoints.SUBCATEGORIES, json=_subcategory_body(fields))
        return Subcategory.model_validate(payload)

    async def update_subcategory(self, subcategory_id: str, fields: dict[str, Any]) -> Subcategory:
        payload = await self.api_client.patch(
            endpoints.subcategory(subcategory_id),
            json=_subcategory_body(fields),
        )
        return Subcategory.model_validate(payload)

    async def delete_subcategory(self, subcategory_id: str) -> None:
        await self.api_client.delete(endpoints.subcategory(subcategory_id))


def _category_form(fields: dict[str, str]) -> dict[str, str]:
    return {key: str(fields[key]) for key in CATEGORY_FORM_FIELDS if fields.get(key) is not None}


def _subcategory_body(fields: dict[str, Any]) -> dict[str, Any]:
    return {key: fields[key] for key in SUBCATEGORY_FIELDS if fields.get(key) is not None}
