from __future__ import annotations

from enum import Enum
from typing import Any, Mapping

from pydantic import BaseModel


class Language(str, Enum):
    UZ = "uz"
    EN = "en"
    RU = "ru"
    KZ = "kz"


DEFAULT_LANGUAGE = Language.UZ

NAME_FIELDS: dict[Language, str] = {
    Language.UZ: "name_uz",
    Language.EN: "name_en",
    Language.RU: "name_ru",
    Language.KZ: "name_kz",
}

DESCRIPTION_FIELDS: dict[Language, str] = {
    Language.UZ: "description_uz",
    Language.EN: "description_en",
    Language.RU: "description_ru",
    Language.KZ: "description_kz",
}

STRUCTURE_FIELDS: dict[Language, str] = {
    Language.UZ: "structure_uz",
    Language.EN: "structure_en",
    Language.RU: "structure_ru",
    Language.KZ: "structure_kz",
}

LOCALIZED_FIELDS: dict[str, dict[Language, str]] = {
    "name": NAME_FIELDS,
    "description": DESCRIPTION_FIELDS,
    "structure": STRUCTURE_FIELDS,
}


def localized(record: BaseModel | Mapping[str, Any], field: str, language: Language) -> str:
    try:
        key = LOCALIZED_FIELDS[field][language]
    except KeyError as exc:
        raise ValueError(f"Field {field!r} is not localized") from exc
    if isinstance(record, BaseModel):
        value = getattr(record, key, "")
    else:
        value = record.get(key, "")
    return str(value or "")


def display_name(record: BaseModel | Mapping[str, Any], language: Language = DEFAULT_LANGUAGE) -> str:
    """Localized name, falling back to the default language when blank."""
    value = localized(record, "name", language)
    if value or language == DEFAULT_LANGUAGE:
        return value
    return localized(record, "name", DEFAULT_LANGUAGE)
