from __future__ import annotations

import os
from dataclasses import dataclass, fields
from typing import Any

from dotenv import load_dotenv


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None or not value.strip():
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_float(value: str | None, default: float) -> float:
    if value is None or not value.strip():
        return default
    return float(value)


def _env_int(value: str | None, default: int) -> int:
    if value is None or not value.strip():
        return default
    return int(value)


@dataclass(frozen=True)
class Settings:
    api_base_url: str = "http://localhost:3000"
    request_timeout_seconds: float = 10.0
    storage_path: str = "~/.catalog-console/session.json"
    reject_expired_tokens: bool = True
    session_probe_endpoint: str | None = None
    upload_accept: str = "image/*,video/*"
    upload_max_files: int = 10
    fetch_currency_on_refresh: bool = True
    log_level: str = "INFO"
    log_json: bool = False

    @property
    def resolved_storage_path(self) -> str:
        return os.path.expanduser(self.storage_path)

    @property
    def upload_accept_list(self) -> list[str]:
        return [item.strip() for item in self.upload_accept.split(",") if item.strip()]

    @classmethod
    def from_env(cls, env_file: str | None = None) -> "Settings":
        load_dotenv(env_file)
        defaults = cls()
        probe = os.getenv("CATALOG_SESSION_PROBE_ENDPOINT", "").strip()
        return cls(
            api_base_url=os.getenv("CATALOG_API_BASE_URL", defaults.api_base_url).rstrip("/"),
            request_timeout_seconds=max(
                0.1,
                _env_float(os.getenv("CATALOG_REQUEST_TIMEOUT_SECONDS"), defaults.request_timeout_seconds),
            ),
            storage_path=os.getenv("CATALOG_STORAGE_PATH", defaults.storage_path),
            reject_expired_tokens=_env_bool(
                os.getenv("CATALOG_REJECT_EXPIRED_TOKENS"), defaults.reject_expired_tokens
            ),
            session_probe_endpoint=probe or None,
            upload_accept=os.getenv("CATALOG_UPLOAD_ACCEPT", defaults.upload_accept),
            upload_max_files=max(1, _env_int(os.getenv("CATALOG_UPLOAD_MAX_FILES"), defaults.upload_max_files)),
            fetch_currency_on_refresh=_env_bool(
                os.getenv("CATALOG_FETCH_CURRENCY_ON_REFRESH"), defaults.fetch_currency_on_refresh
            ),
            log_level=os.getenv("CATALOG_LOG_LEVEL", defaults.log_level).upper(),
            log_json=_env_bool(os.getenv("CATALOG_LOG_JSON"), defaults.log_json),
        )

    def with_overrides(self, **overrides: Any) -> "Settings":
        known = {item.name for item in fields(self)}
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise ValueError(f"Unknown settings: {', '.join(unknown)}")
        current = {item.name: getattr(self, item.name) for item in fields(self)}
        current.update(overrides)
        return Settings(**current)
