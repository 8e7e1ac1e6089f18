from __future__ import annotations

import uuid
from datetime import datetime, timezone

TEMP_ID_PREFIX = "new-"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def generate_temp_id() -> str:
    """Client-side placeholder id for a file that has not been uploaded yet."""
    return f"{TEMP_ID_PREFIX}{uuid.uuid4().hex[:12]}"


def is_temp_id(value: str) -> bool:
    return value.startswith(TEMP_ID_PREFIX)
