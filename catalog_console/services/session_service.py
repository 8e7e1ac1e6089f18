from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable

from pydantic import ValidationError as SchemaValidationError

from catalog_console.core import endpoints
from catalog_console.core.config import Settings
from catalog_console.core.errors import ApiError, PermissionDeniedError, TokenDecodeError
from catalog_console.core.security import decode_token, is_expired
from catalog_console.infrastructure.api_client import ApiClient
from catalog_console.infrastructure.logging import get_logger
from catalog_console.infrastructure.token_store import ROLE_ADMIN, ROLE_SUPERADMIN, TokenStore
from catalog_console.models.schemas import LoginApiResponse, LoginRequest, TokenClaims

logger = get_logger(__name__)


class SessionState(str, Enum):
    UNVALIDATED = "unvalidated"
    VALIDATING = "validating"
    AUTHENTICATED = "authenticated"
    UNAUTHENTICATED = "unauthenticated"


@dataclass(frozen=True)
class Session:
    token: str
    admin_id: str
    username: str
    is_superadmin: bool

    @property
    def role(self) -> str:
        return ROLE_SUPERADMIN if self.is_superadmin else ROLE_ADMIN

    @classmethod
    def from_token(cls, token: str, claims: TokenClaims | None = None) -> "Session":
        if claims is None:
            claims = decode_token(token)
        return cls(
            token=token,
            admin_id=claims.id,
            username=claims.username,
            is_superadmin=claims.isSuperadmin,
        )


StateListener = Callable[[SessionState, "Session | None"], None]


class SessionManager:
    """Owns the current admin session and every write to the token store."""

    def __init__(
        self,
        *,
        settings: Settings,
        api_client: ApiClient,
        token_store: TokenStore,
    ) -> None:
        self.settings = settings
        self.api_client = api_client
        self.token_store = token_store
        self._state = SessionState.UNVALIDATED
        self._session: Session | None = None
        self._listeners: list[StateListener] = []
        api_client.add_unauthorized_listener(self.on_unauthorized)

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def session(self) -> Session | None:
        return self._session

    @property
    def is_authenticated(self) -> bool:
        return self._state == SessionState.AUTHENTICATED

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def validate_session(self) -> SessionState:
        persisted = self.token_store.load()
        if persisted.is_empty:
            self._transition(SessionState.UNAUTHENTICATED, None)
            return self._state

        if not persisted.is_complete:
            logger.info("session_partial_state_cleared")
            self._clear(reason="partial_state")
            return self._state

        self._transition(SessionState.VALIDATING, None)
        try:
            token = str(persisted.token)
            claims = decode_token(token)
            if self.settings.reject_expired_tokens and is_expired(claims):
                raise TokenDecodeError("Token expired")
            session = Session.from_token(token, claims)
            if self.settings.session_probe_endpoint:
                await self.api_client.get(self.settings.session_probe_endpoint)
        except (TokenDecodeError, ApiError) as exc:
            logger.info("session_validation_failed", error=str(exc))
            self._clear(reason="validation_failed")
            return self._state

        # Cached identity is refreshed from the decoded claims.
        self.token_store.save(
            token=session.token,
            user_id=session.admin_id,
            username=session.username,
            is_superadmin=session.is_superadmin,
        )
        logger.info("session_validated", admin_id=session.admin_id, username=session.username)
        self._transition(SessionState.AUTHENTICATED, session)
        return self._state

    async def login(self, username: str, password: str) -> Session:
        try:
            credentials = LoginRequest(username=username, password=password)
        except SchemaValidationError as exc:
            raise ValueError("Username and password are required") from exc

        payload = await self.api_client.post(endpoints.ADMIN_LOGIN, json=credentials.model_dump())
        try:
            response = LoginApiResponse.model_validate(payload or {})
        except SchemaValidationError as exc:
            raise TokenDecodeError("Login response did not contain an access token") from exc

        session = Session.from_token(response.accessToken)
        self.token_store.save(
            token=session.token,
            user_id=session.admin_id,
            username=session.username,
            is_superadmin=session.is_superadmin,
        )
        logger.info("admin_logged_in", admin_id=session.admin_id, username=session.username)
        self._transition(SessionState.AUTHENTICATED, session)
        return session

    def logout(self) -> None:
        self._clear(reason="logout")

    def on_unauthorized(self) -> None:
        self._clear(reason="unauthorized")

    def require_superadmin(self) -> Session:
        session = self._session
        if session is None or not self.is_authenticated:
            raise PermissionDeniedError("Not logged in")
        if not session.is_superadmin:
            raise PermissionDeniedError("Superadmin privileges required")
        return session

    def _clear(self, *, reason: str) -> None:
        was_authenticated = self._state == SessionState.AUTHENTICATED
        self.token_store.clear()
        if was_authenticated:
            logger.info("session_cleared", reason=reason)
        self._transition(SessionState.UNAUTHENTICATED, None)

    def _transition(self, state: SessionState, session: Session | None) -> None:
        changed = state != self._state or session != self._session
        self._state = state
        self._session = session
        if not changed:
            return
        for listener in list(self._listeners):
            listener(state, session)
