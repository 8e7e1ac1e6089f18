from __future__ import annotations

from dataclasses import dataclass

from catalog_console.infrastructure.local_storage import LocalStorage

TOKEN_KEY = "admin_access_token"
USER_ID_KEY = "userId"
USERNAME_KEY = "username"
ROLE_KEY = "userRole"

ROLE_SUPERADMIN = "superadmin"
ROLE_ADMIN = "admin"

PERSISTED_KEYS = (TOKEN_KEY, USER_ID_KEY, USERNAME_KEY, ROLE_KEY)


@dataclass(frozen=True)
class PersistedSession:
    token: str | None
    user_id: str | None
    username: str | None
    role: str | None

    @property
    def is_complete(self) -> bool:
        return all((self.token, self.user_id, self.username, self.role))

    @property
    def is_empty(self) -> bool:
        return not any((self.token, self.user_id, self.username, self.role))


class TokenStore:
    """Process-wide holder of the bearer token and its cached identity.

    Every request reads ``token``. Only the session manager calls ``save``
    and ``clear``.
    """

    def __init__(self, storage: LocalStorage) -> None:
        self.storage = storage

    @property
    def token(self) -> str | None:
        return self.storage.get(TOKEN_KEY) or None

    def load(self) -> PersistedSession:
        return PersistedSession(
            token=self.storage.get(TOKEN_KEY) or None,
            user_id=self.storage.get(USER_ID_KEY) or None,
            username=self.storage.get(USERNAME_KEY) or None,
            role=self.storage.get(ROLE_KEY) or None,
        )

    def save(self, *, token: str, user_id: str, username: str, is_superadmin: bool) -> None:
        self.storage.set(TOKEN_KEY, token)
        self.storage.set(USER_ID_KEY, user_id)
        self.storage.set(USERNAME_KEY, username)
        self.storage.set(ROLE_KEY, ROLE_SUPERADMIN if is_superadmin else ROLE_ADMIN)

    def clear(self) -> None:
        for key in PERSISTED_KEYS:
            self.storage.remove(key)
