from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Sequence, TypeVar

from catalog_console.core.config import Settings
from catalog_console.core.errors import ApiError, ProductMediaError
from catalog_console.infrastructure.logging import get_logger
from catalog_console.models.schemas import FileOrderEntry, Product, ProductFile
from catalog_console.orchestrator.types import (
    CatalogSnapshot,
    FileCard,
    PendingUpload,
    ProductDraft,
    SaveResult,
)
from catalog_console.services.category_service import CategoryService, SubcategoryService
from catalog_console.services.dashboard_service import DashboardService
from catalog_console.services.product_service import ProductService

logger = get_logger(__name__)

T = TypeVar("T")

PHASE_UPSERT = "upsert"
PHASE_UPLOAD = "upload"
PHASE_ORDER = "order"
PHASE_REFRESH = "refresh"


def pair_uploads(new_files: Sequence[PendingUpload], ordered_cards: Sequence[FileCard]) -> list[str | None]:
    """Temporary card id for each pending upload, in submission order.

    Uploads carrying their card id are matched on it; the remaining uploads
    take the new cards no upload claimed, in card order. Two uploads naming
    the same card raise ``ValueError``.
    """
    claimed: set[str] = set()
    for upload in new_files:
        if upload.card_id is None:
            continue
        if upload.card_id in claimed:
            raise ValueError(f"Card {upload.card_id} is referenced by more than one upload")
        claimed.add(upload.card_id)

    free_card_ids = iter([card.id for card in ordered_cards if not card.is_existing and card.id not in claimed])
    return [upload.card_id if upload.card_id is not None else next(free_card_ids, None) for upload in new_files]


def build_file_order(ordered_cards: Sequence[FileCard], id_map: dict[str, str]) -> list[FileOrderEntry]:
    entries: list[FileOrderEntry] = []
    for position, card in enumerate(ordered_cards):
        file_id = card.id if card.is_existing else id_map.get(card.id)
        if not file_id:
            continue
        entries.append(FileOrderEntry(fileId=file_id, order=position))
    return entries


class ProductSaveOrchestrator:
    """Runs the product save workflow: upsert, upload, order, refresh.

    Phases run strictly in sequence; uploads inside the upload phase run
    concurrently. Nothing is rolled back when a later phase fails.
    """

    def __init__(
        self,
        *,
        settings: Settings,
        product_service: ProductService,
        category_service: CategoryService,
        subcategory_service: SubcategoryService,
        dashboard_service: DashboardService,
    ) -> None:
        self.settings = settings
        self.product_service = product_service
        self.category_service = category_service
        self.subcategory_service = subcategory_service
        self.dashboard_service = dashboard_service

    async def save(
        self,
        draft: ProductDraft,
        *,
        new_files: Sequence[PendingUpload],
        ordered_cards: Sequence[FileCard],
    ) -> SaveResult:
        # Pairing is checked up front so bad input never creates a product.
        keys = pair_uploads(new_files, ordered_cards)
        created = draft.product_id is None
        product = await self._upsert(draft)
        draft.product_id = product.id
        log = logger.bind(product_id=product.id)
        log.info("product_save_phase_completed", phase=PHASE_UPSERT, created=created)

        id_map: dict[str, str] = {}
        if new_files:
            id_map = await self._media_phase(PHASE_UPLOAD, self._upload(product.id, new_files, keys))
            log.info("product_save_phase_completed", phase=PHASE_UPLOAD, uploaded=len(id_map))

        order = build_file_order(ordered_cards, id_map)
        if len(order) < len(ordered_cards):
            log.warning("product_save_unresolved_cards", dropped=len(ordered_cards) - len(order))
        if order:
            await self._media_phase(PHASE_ORDER, self.product_service.update_file_order(product.id, order))
            log.info("product_save_phase_completed", phase=PHASE_ORDER, files=len(order))

        result = SaveResult(product=product, created=created, uploaded=id_map, order=order)
        try:
            result.snapshot = await self.refresh()
        except ApiError as exc:
            log.warning("product_save_refresh_failed", status=exc.status, error=exc.message)
            result.refresh_error = exc
        else:
            log.info("product_save_phase_completed", phase=PHASE_REFRESH)
        return result

    async def refresh(self) -> CatalogSnapshot:
        products, categories, subcategories = await asyncio.gather(
            self.product_service.list_products(),
            self.category_service.list_categories(),
            self.subcategory_service.list_subcategories(),
        )
        snapshot = CatalogSnapshot(products=products, categories=categories, subcategories=subcategories)
        if self.settings.fetch_currency_on_refresh:
            try:
                snapshot.currency = await self.dashboard_service.currency()
            except ApiError as exc:
                logger.info("currency_unavailable", status=exc.status)
        return snapshot

    async def _upsert(self, draft: ProductDraft) -> Product:
        metadata: dict[str, Any] = dict(draft.metadata)
        if draft.product_id is not None:
            return await self.product_service.update_product(draft.product_id, metadata)
        return await self.product_service.create_product(metadata)

    async def _upload(
        self,
        product_id: str,
        new_files: Sequence[PendingUpload],
        keys: Sequence[str | None],
    ) -> dict[str, str]:
        uploaded: list[ProductFile] = await asyncio.gather(
            *(
                self.product_service.add_file(
                    product_id,
                    filename=upload.filename,
                    content=upload.content,
                    content_type=upload.content_type,
                    is_video=upload.is_video,
                )
                for upload in new_files
            )
        )
        id_map: dict[str, str] = {}
        for key, upload, server_file in zip(keys, new_files, uploaded):
            if key is None:
                logger.warning("product_upload_without_card", product_id=product_id, filename=upload.filename)
                continue
            id_map[key] = server_file.id
        return id_map

    async def _media_phase(self, phase: str, step: Awaitable[T]) -> T:
        try:
            return await step
        except ApiError as exc:
            if exc.is_validation_error():
                raise ProductMediaError(phase=phase, cause=exc) from exc
            raise
