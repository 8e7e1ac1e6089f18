from __future__ import annotations

from catalog_console.core import endpoints
from catalog_console.infrastructure.api_client import ApiClient
from catalog_console.models.schemas import CarouselItem


class CarouselService:
    def __init__(self, api_client: ApiClient) -> None:
        self.api_client = api_client

    async def list_items(self) -> list[CarouselItem]:
        rows = await self.api_client.get(endpoints.CAROUSEL)
        return [CarouselItem.model_validate(row) for row in rows or []]

    async def add_image(self, *, filename: str, content: bytes, content_type: str) -> CarouselItem:
        if not content_type.startswith("image/"):
            raise ValueError("Carousel accepts images only")
        payload = await self.api_client.send_form(
            "POST",
            endpoints.CAROUSEL,
            files={"file": (filename, content, content_type)},
        )
        return CarouselItem.model_validate(payload)

    async def delete_item(self, item_id: str) -> None:
        await self.api_client.delete(endpoints.carousel_item(item_id))
