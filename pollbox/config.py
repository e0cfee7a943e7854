"""Configuration utilities for the poll service.

This module loads application configuration with the following rules:
- Primary source: `pollbox_config.json` at the project root.
- Overrides: environment variables, then optional text files under `config/`.
- Validation: Pydantic models enforce required fields and value constraints.

The admin password is the one value that may legitimately be absent; the
login route reports that case as a server misconfiguration rather than
refusing to start.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, ValidationError as PydanticValidationError, field_validator


CONFIG_DIR = Path("config")
ROOT_POLLBOX_CONFIG = Path("pollbox_config.json")
DEFAULT_DATABASE_URL = "sqlite+pysqlite:///:memory:"
logger = logging.getLogger(__name__)


def _read_config_file(rel_path: str) -> Optional[str]:
    path = CONFIG_DIR / rel_path
    try:
        if path.exists():
            return path.read_text(encoding="utf-8").strip()
    except (OSError, UnicodeDecodeError) as e:
        # Recoverable: log and ignore unreadable override
        logger.warning("Failed to read override %s: %s", path, e)
        return None
    return None


def _env(key: str, default: Optional[str] = None) -> Optional[str]:
    return os.environ.get(key, default)


class DatabaseConfig(BaseModel):
    dsn: str
    append_max_attempts: int = Field(default=5, gt=0)

    @field_validator("dsn")
    @classmethod
    def dsn_must_be_non_empty(cls, v: str) -> str:
        if not isinstance(v, str) or not v.strip():
            raise ValueError("database.dsn must be a non-empty string")
        return v


class AdminConfig(BaseModel):
    password: Optional[str] = None

    @field_validator("password")
    @classmethod
    def blank_password_is_unset(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not str(v).strip():
            return None
        return v


class HttpConfig(BaseModel):
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])


class ClientConfig(BaseModel):
    base_url: str = "http://127.0.0.1:8000"
    state_path: str = ".pollbox/state.json"
    timeout_seconds: float = Field(default=10.0, gt=0)


class AppConfig(BaseModel):
    database: DatabaseConfig
    admin: AdminConfig
    http: HttpConfig
    client: ClientConfig


def _read_json_file(path: Path) -> dict:
    try:
        if path.exists():
            return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.error("Failed to read JSON config %s: %s", path, e)
    return {}


def load_config() -> AppConfig:
    """Load configuration with validation.

    Precedence (highest first):
    1) Environment variables
    2) Text files in `config/` (optional)
    3) pollbox_config.json at project root (primary base)
    4) Safe defaults for development
    """

    base = _read_json_file(ROOT_POLLBOX_CONFIG)

    def _base(path: str, default: Optional[str] = None) -> Optional[str]:
        cur: object = base
        for key in path.split("."):
            if not isinstance(cur, dict) or key not in cur:
                return default
            cur = cur[key]
        if isinstance(cur, list):
            return ",".join(str(v) for v in cur)
        return str(cur) if cur is not None else default

    # Database
    dsn = (
        _env("TEST_DATABASE_URL")
        or _env("DATABASE_URL")
        or _read_config_file("database.url")
        or _base("database.dsn")
        or DEFAULT_DATABASE_URL
    )
    attempts_text = _env("APPEND_MAX_ATTEMPTS") or _read_config_file("database.append_max_attempts") or _base("database.append_max_attempts", "5")

    # Admin secret (may be unset)
    admin_password = _env("ADMIN_PASSWORD") or _read_config_file("admin.password") or _base("admin.password")

    # HTTP
    origins_text = _env("CORS_ORIGINS") or _read_config_file("http.cors_origins") or _base("http.cors_origins", "*")
    origins = [o.strip() for o in str(origins_text).split(",") if o.strip()]

    # Client
    client_base_url = _env("POLLBOX_BASE_URL") or _read_config_file("client.base_url") or _base("client.base_url", "http://127.0.0.1:8000")
    state_path = _env("POLLBOX_STATE_PATH") or _read_config_file("client.state_path") or _base("client.state_path", ".pollbox/state.json")
    timeout_text = _env("POLLBOX_TIMEOUT") or _read_config_file("client.timeout_seconds") or _base("client.timeout_seconds", "10")

    try:
        cfg = AppConfig(
            database=DatabaseConfig(dsn=dsn, append_max_attempts=int(str(attempts_text).strip())),
            admin=AdminConfig(password=admin_password),
            http=HttpConfig(cors_origins=origins or ["*"]),
            client=ClientConfig(
                base_url=str(client_base_url),
                state_path=str(state_path),
                timeout_seconds=float(str(timeout_text).strip()),
            ),
        )
        return cfg
    except (PydanticValidationError, ValueError) as e:
        logger.error("Invalid application configuration: %s", e)
        raise


__all__ = [
    "AppConfig",
    "DatabaseConfig",
    "AdminConfig",
    "HttpConfig",
    "ClientConfig",
    "load_config",
]
