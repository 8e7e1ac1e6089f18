from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from catalog_console.core.errors import ApiError
from catalog_console.models.schemas import Category, Currency, FileOrderEntry, Product, Subcategory


@dataclass(frozen=True)
class FileCard:
    id: str
    url: str
    name: str
    is_video: bool
    is_existing: bool


@dataclass(frozen=True)
class PendingUpload:
    filename: str
    content: bytes
    content_type: str
    card_id: str | None = None

    @property
    def is_video(self) -> bool:
        return self.content_type.startswith("video/")


@dataclass
class ProductDraft:
    """Caller-owned state of one product form.

    ``product_id`` is filled in as soon as the product record exists on the
    server, so saving the same draft again updates instead of creating.
    """

    metadata: dict[str, Any]
    product_id: str | None = None


@dataclass
class CatalogSnapshot:
    products: list[Product]
    categories: list[Category]
    subcategories: list[Subcategory]
    currency: Currency | None = None


@dataclass
class SaveResult:
    product: Product
    created: bool
    uploaded: dict[str, str] = field(default_factory=dict)
    order: list[FileOrderEntry] = field(default_factory=list)
    snapshot: CatalogSnapshot | None = None
    refresh_error: ApiError | None = None
