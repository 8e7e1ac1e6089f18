from __future__ import annotations

from time import monotonic
from typing import Any, Callable

import httpx

from catalog_console.core import endpoints
from catalog_console.core.config import Settings
from catalog_console.core.errors import (
    ApiError,
    ApiTimeoutError,
    NetworkError,
    UnauthorizedError,
    error_from_response,
)
from catalog_console.infrastructure.logging import get_logger
from catalog_console.infrastructure.token_store import TokenStore

logger = get_logger(__name__)

UnauthorizedListener = Callable[[], None]
FileTuple = tuple[str, bytes, str]


class ApiClient:
    """Async HTTP client for the catalog admin backend.

    Attaches the current bearer token to every request except login, maps
    failures onto the ``ApiError`` hierarchy and notifies listeners on any
    401 before raising.
    """

    def __init__(
        self,
        *,
        settings: Settings,
        token_store: TokenStore,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.settings = settings
        self.token_store = token_store
        self._unauthorized_listeners: list[UnauthorizedListener] = []
        self._client = httpx.AsyncClient(
            base_url=settings.api_base_url,
            timeout=httpx.Timeout(settings.request_timeout_seconds),
            transport=transport,
        )

    def add_unauthorized_listener(self, listener: UnauthorizedListener) -> None:
        if listener not in self._unauthorized_listeners:
            self._unauthorized_listeners.append(listener)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *_exc: object) -> None:
        await self.aclose()

    async def get(self, path: str, *, params: dict[str, Any] | None = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, *, json: Any = None) -> Any:
        return await self.request("POST", path, json=json)

    async def patch(self, path: str, *, json: Any = None) -> Any:
        return await self.request("PATCH", path, json=json)

    async def delete(self, path: str) -> Any:
        return await self.request("DELETE", path)

    async def send_form(
        self,
        method: str,
        path: str,
        *,
        files: dict[str, FileTuple] | None = None,
        data: dict[str, str] | None = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        return await self.request(method, path, files=files, data=data, params=params)

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: dict[str, Any] | None = None,
        files: dict[str, FileTuple] | None = None,
        data: dict[str, str] | None = None,
    ) -> Any:
        headers = {"Accept": "application/json"}
        token = self.token_store.token
        if token and path != endpoints.ADMIN_LOGIN:
            headers["Authorization"] = f"Bearer {token}"

        started = monotonic()
        try:
            response = await self._client.request(
                method,
                path,
                json=json,
                params=params,
                files=files,
                data=data,
                headers=headers,
            )
        except httpx.TimeoutException as exc:
            logger.warning("api_request_timed_out", method=method, path=path)
            raise ApiTimeoutError() from exc
        except httpx.TransportError as exc:
            logger.warning("api_request_unreachable", method=method, path=path, error=str(exc))
            raise NetworkError(f"Cannot reach server: {exc}") from exc

        elapsed_ms = round((monotonic() - started) * 1000, 1)
        if response.is_success:
            logger.debug(
                "api_request_completed",
                method=method,
                path=path,
                status=response.status_code,
                elapsed_ms=elapsed_ms,
            )
            return _decode_body(response)

        error = error_from_response(
            status=response.status_code,
            reason=response.reason_phrase,
            data=_decode_error_body(response),
        )
        logger.warning(
            "api_request_failed",
            method=method,
            path=path,
            status=response.status_code,
            kind=error.kind.value,
            elapsed_ms=elapsed_ms,
        )
        # A rejected login is a credential error, not an expired session.
        if isinstance(error, UnauthorizedError) and path != endpoints.ADMIN_LOGIN:
            self._notify_unauthorized()
        raise error

    def _notify_unauthorized(self) -> None:
        for listener in list(self._unauthorized_listeners):
            listener()


def _decode_body(response: httpx.Response) -> Any:
    if response.status_code == 204 or not response.content:
        return None
    try:
        return response.json()
    except ValueError as exc:
        raise ApiError(response.status_code, "Backend returned a non-JSON response") from exc


def _decode_error_body(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return None
