from __future__ import annotations

from enum import Enum
from typing import Any

SESSION_EXPIRED_MESSAGE = "Session expired, please log in again."
TIMEOUT_MESSAGE = "Request timed out."
UNKNOWN_ERROR_MESSAGE = "An unknown error occurred."


class ErrorKind(str, Enum):
    UNAUTHORIZED = "unauthorized"
    VALIDATION = "validation"
    TIMEOUT = "timeout"
    NETWORK = "network"
    HTTP = "http"


class ApiError(Exception):
    """Error raised for every failed backend call.

    Carries the numeric status (0 for transport failures, 408 for timeouts)
    and the decoded error body, so call sites can branch on the kind of
    failure without matching on the message.
    """

    kind = ErrorKind.HTTP

    def __init__(self, status: int, message: str, data: Any = None) -> None:
        super().__init__(message)
        self.status = status
        self.message = message
        self.data = data
        self.validation_errors = _extract_validation_errors(data)

    def get_validation_errors(self) -> list[str]:
        return list(self.validation_errors) if self.validation_errors is not None else [self.message]

    def is_validation_error(self) -> bool:
        return False

    def __repr__(self) -> str:
        return f"{type(self).__name__}(status={self.status}, message={self.message!r})"


class UnauthorizedError(ApiError):
    """Credential missing, expired or rejected (HTTP 401)."""

    kind = ErrorKind.UNAUTHORIZED


class ValidationError(ApiError):
    """HTTP 400 with a structured field-error payload."""

    kind = ErrorKind.VALIDATION

    def is_validation_error(self) -> bool:
        return self.validation_errors is not None


class ApiTimeoutError(ApiError):
    kind = ErrorKind.TIMEOUT

    def __init__(self, message: str = TIMEOUT_MESSAGE) -> None:
        super().__init__(408, message)


class NetworkError(ApiError):
    kind = ErrorKind.NETWORK

    def __init__(self, message: str) -> None:
        super().__init__(0, message)


class ProductMediaError(ApiError):
    """Upload or ordering failure after the product record was saved.

    Never classified as a validation error: the product form has no field to
    attach it to.
    """

    def __init__(self, *, phase: str, cause: ApiError) -> None:
        super().__init__(cause.status, cause.message, cause.data)
        self.phase = phase
        self.validation_errors = None


class TokenDecodeError(ValueError):
    """Raised when an access token cannot be decoded into admin claims."""


class PermissionDeniedError(RuntimeError):
    """Raised when the current session lacks the superadmin flag."""


def _extract_validation_errors(data: Any) -> list[str] | None:
    if not isinstance(data, dict) or "message" not in data:
        return None
    message = data["message"]
    if isinstance(message, list):
        return [str(item) for item in message]
    if isinstance(message, str):
        return [message]
    return None


def error_from_response(*, status: int, reason: str, data: Any) -> ApiError:
    server_message = data.get("message") if isinstance(data, dict) else None
    if isinstance(server_message, list):
        server_message = "; ".join(str(item) for item in server_message)
    if status == 401:
        return UnauthorizedError(401, server_message or SESSION_EXPIRED_MESSAGE, data)
    message = server_message or f"HTTP Error {status}: {reason}"
    if status == 400 and _extract_validation_errors(data) is not None:
        return ValidationError(400, message, data)
    return ApiError(status, message, data)


def describe_error(exc: BaseException) -> str:
    if isinstance(exc, UnauthorizedError):
        return SESSION_EXPIRED_MESSAGE
    if isinstance(exc, ApiTimeoutError):
        return TIMEOUT_MESSAGE
    if isinstance(exc, NetworkError):
        return exc.message
    if isinstance(exc, ValidationError) and exc.is_validation_error():
        return "; ".join(exc.get_validation_errors())
    if isinstance(exc, ApiError):
        return exc.message
    if isinstance(exc, TokenDecodeError):
        return "Could not decode the authentication token."
    return str(exc) or UNKNOWN_ERROR_MESSAGE
