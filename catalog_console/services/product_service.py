from __future__ import annotations

from typing import Any

from pydantic import ValidationError as SchemaValidationError

from catalog_console.core import endpoints
from catalog_console.core.errors import ValidationError
from catalog_console.infrastructure.api_client import ApiClient
from catalog_console.models.schemas import (
    FileOrderEntry,
    MessageResponse,
    Product,
    ProductFile,
    ProductWriteRequest,
    UpdateFileOrderRequest,
)


class ProductService:
    def __init__(self, api_client: ApiClient) -> None:
        self.api_client = api_client

    async def list_products(self) -> list[Product]:
        rows = await self.api_client.get(endpoints.PRODUCTS)
        return [Product.model_validate(row) for row in rows or []]

    async def get_product(self, product_id: str) -> Product:
        return Product.model_validate(await self.api_client.get(endpoints.product(product_id)))

    async def list_by_category(self, category_id: str) -> list[Product]:
        rows = await self.api_client.get(endpoints.products_by_category(category_id))
        return [Product.model_validate(row) for row in rows or []]

    async def create_product(self, payload: ProductWriteRequest | dict[str, Any]) -> Product:
        body = _write_payload(payload)
        return Product.model_validate(await self.api_client.post(endpoints.PRODUCTS, json=body))

    async def update_product(self, product_id: str, payload: ProductWriteRequest | dict[str, Any]) -> Product:
        body = _write_payload(payload)
        return Product.model_validate(
            await self.api_client.patch(endpoints.product(product_id), json=body)
        )

    async def delete_product(self, product_id: str) -> None:
        # Soft delete on the backend side.
        await self.api_client.delete(endpoints.product(product_id))

    async def add_file(
        self,
        product_id: str,
        *,
        filename: str,
        content: bytes,
        content_type: str,
        is_video: bool,
    ) -> ProductFile:
        payload = await self.api_client.send_form(
            "POST",
            endpoints.product_files(product_id),
            files={"file": (filename, content, content_type)},
            params={"isVideo": "true" if is_video else "false"},
        )
        return ProductFile.model_validate(payload)

    async def remove_file(self, product_id: str, file_id: str) -> None:
        await self.api_client.delete(endpoints.product_file(product_id, file_id))

    async def update_file_order(self, product_id: str, entries: list[FileOrderEntry]) -> MessageResponse:
        body = UpdateFileOrderRequest(files=entries).model_dump()
        payload = await self.api_client.patch(endpoints.product_file_order(product_id), json=body)
        return MessageResponse.model_validate(payload or {})


def _write_payload(payload: ProductWriteRequest | dict[str, Any]) -> dict[str, Any]:
    if isinstance(payload, ProductWriteRequest):
        return payload.to_payload()
    try:
        return ProductWriteRequest.model_validate(payload).to_payload()
    except SchemaValidationError as exc:
        messages = [_schema_message(item) for item in exc.errors()]
        raise ValidationError(400, "; ".join(messages), {"message": messages, "statusCode": 400}) from exc


def _schema_message(error: Any) -> str:
    location = ".".join(str(part) for part in error.get("loc", ())) or "payload"
    return f"{location}: {error.get('msg', 'invalid value')}"
