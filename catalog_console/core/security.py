from __future__ import annotations

import base64
import binascii
import json

from pydantic import ValidationError as SchemaValidationError

from catalog_console.core.errors import TokenDecodeError
from catalog_console.core.utils import utc_now
from catalog_console.models.schemas import TokenClaims


def _b64url_decode(raw: str) -> bytes:
    standard = raw.replace("-", "+").replace("_", "/")
    padding = "=" * (-len(standard) % 4)
    return base64.b64decode((standard + padding).encode("ascii"), validate=True)


def decode_token(token: str) -> TokenClaims:
    """Decode the payload segment of an access token.

    The signature is not checked here: the backend verifies it on every
    request, and the decoded claims are only used for display and routing.
    """
    parts = token.split(".")
    if len(parts) != 3:
        raise TokenDecodeError("Invalid token format")

    try:
        payload = json.loads(_b64url_decode(parts[1]).decode("utf-8"))
    except (binascii.Error, UnicodeError, ValueError) as exc:
        raise TokenDecodeError("Token payload is not valid JSON") from exc
    if not isinstance(payload, dict):
        raise TokenDecodeError("Token payload is not an object")

    try:
        return TokenClaims.model_validate(payload)
    except SchemaValidationError as exc:
        raise TokenDecodeError("Token payload is missing required claims") from exc


def is_expired(claims: TokenClaims, *, now: float | None = None, leeway_seconds: int = 0) -> bool:
    if claims.exp is None:
        return False
    current = utc_now().timestamp() if now is None else now
    return int(claims.exp) + leeway_seconds < int(current)
