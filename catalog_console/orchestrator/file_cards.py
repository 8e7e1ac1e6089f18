from __future__ import annotations

import fnmatch
from dataclasses import replace
from typing import Iterable, Iterator

from catalog_console.core.utils import generate_temp_id
from catalog_console.models.schemas import Product
from catalog_console.orchestrator.types import FileCard, PendingUpload

DEFAULT_ACCEPT = ("image/*", "video/*")
DEFAULT_MAX_FILES = 10


def validate_media_files(
    uploads: Iterable[PendingUpload],
    *,
    accept: Iterable[str] = DEFAULT_ACCEPT,
    max_files: int = DEFAULT_MAX_FILES,
) -> list[str]:
    rows = list(uploads)
    patterns = [pattern.strip().lower() for pattern in accept if pattern.strip()]
    errors: list[str] = []
    if len(rows) > max_files:
        errors.append(f"At most {max_files} files are allowed")
    for upload in rows:
        content_type = upload.content_type.lower()
        if patterns and not any(fnmatch.fnmatchcase(content_type, pattern) for pattern in patterns):
            errors.append(f"{upload.filename}: file type {upload.content_type or 'unknown'} is not allowed")
        if not upload.content:
            errors.append(f"{upload.filename}: file is empty")
    return errors


class FileCardList:
    """Ordered media cards of one product form, existing and pending.

    The sequence order is the display order the admin picked. Pending uploads
    are keyed by the temporary id of their card.
    """

    def __init__(self, cards: Iterable[FileCard] = ()) -> None:
        self._cards: list[FileCard] = list(cards)
        self._pending: dict[str, PendingUpload] = {}

    @classmethod
    def from_product(cls, product: Product | None) -> "FileCardList":
        if product is None:
            return cls()
        return cls(
            FileCard(
                id=item.id,
                url=item.url,
                name=item.url.rstrip("/").rsplit("/", 1)[-1] or ("Video" if item.isVideo else "Image"),
                is_video=item.isVideo,
                is_existing=True,
            )
            for item in product.files
        )

    def __iter__(self) -> Iterator[FileCard]:
        return iter(list(self._cards))

    def __len__(self) -> int:
        return len(self._cards)

    @property
    def cards(self) -> list[FileCard]:
        return list(self._cards)

    @property
    def existing_count(self) -> int:
        return sum(1 for card in self._cards if card.is_existing)

    @property
    def pending_count(self) -> int:
        return sum(1 for card in self._cards if not card.is_existing)

    def add_files(self, uploads: Iterable[PendingUpload], *, preview_url_prefix: str = "blob:") -> list[FileCard]:
        added: list[FileCard] = []
        for upload in uploads:
            card_id = generate_temp_id()
            card = FileCard(
                id=card_id,
                url=f"{preview_url_prefix}{card_id}",
                name=upload.filename,
                is_video=upload.is_video,
                is_existing=False,
            )
            self._cards.append(card)
            self._pending[card_id] = replace(upload, card_id=card_id)
            added.append(card)
        return added

    def remove(self, card_id: str) -> FileCard:
        for index, card in enumerate(self._cards):
            if card.id == card_id:
                del self._cards[index]
                self._pending.pop(card_id, None)
                return card
        raise KeyError(card_id)

    def move(self, from_index: int, to_index: int) -> None:
        size = len(self._cards)
        if not (0 <= from_index < size and 0 <= to_index < size):
            raise IndexError("Card index out of range")
        if from_index == to_index:
            return
        card = self._cards.pop(from_index)
        self._cards.insert(to_index, card)

    def reorder(self, card_ids: list[str]) -> None:
        by_id = {card.id: card for card in self._cards}
        if sorted(card_ids) != sorted(by_id):
            raise ValueError("Reordered ids must match the current cards")
        self._cards = [by_id[card_id] for card_id in card_ids]

    def pending_uploads(self) -> list[PendingUpload]:
        """Pending uploads in the relative order of their cards."""
        return [self._pending[card.id] for card in self._cards if not card.is_existing and card.id in self._pending]
