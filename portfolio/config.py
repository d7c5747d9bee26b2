"""Configuration loading for the portfolio API.

Rules:
- Primary source: `portfolio_config.json` at the project root.
- Overrides: text files under `config/`, then environment variables.
- Validation: Pydantic models enforce required fields and value constraints.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field, ValidationError as PydanticValidationError, field_validator


CONFIG_DIR = Path("config")
ROOT_CONFIG = Path("portfolio_config.json")
DEFAULT_DSN = "sqlite+pysqlite:///:memory:"
logger = logging.getLogger(__name__)


def _read_config_file(rel_path: str) -> Optional[str]:
    path = CONFIG_DIR / rel_path
    try:
        if path.exists():
            return path.read_text(encoding="utf-8").strip()
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Failed to read override %s: %s", path, e)
        return None
    return None


def _env(key: str, default: Optional[str] = None) -> Optional[str]:
    return os.environ.get(key, default)


def _truthy(value: Optional[str]) -> bool:
    return str(value or "").strip().lower() in {"1", "true", "yes", "on"}


class DatabaseConfig(BaseModel):
    dsn: str

    @field_validator("dsn")
    @classmethod
    def dsn_must_be_non_empty(cls, v: str) -> str:
        if not isinstance(v, str) or not v.strip():
            raise ValueError("database.dsn must be a non-empty string")
        return v


class CorsConfig(BaseModel):
    origins: List[str] = Field(default_factory=lambda: ["*"])


class MigrationsConfig(BaseModel):
    auto_apply: bool = False
    directory: str = "migrations"


class ClientConfig(BaseModel):
    """Settings for the admin reorder controller talking to this API."""

    base_url: str = "http://localhost:5001/api/v1"
    timeout_seconds: float = Field(default=10.0, gt=0)

    @field_validator("base_url")
    @classmethod
    def base_url_must_be_http(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError("client.base_url must start with http:// or https://")
        return v.rstrip("/")


class AppConfig(BaseModel):
    database: DatabaseConfig
    cors: CorsConfig
    migrations: MigrationsConfig
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
    3) portfolio_config.json at project root
    4) Safe defaults for development
    """

    base = _read_json_file(ROOT_CONFIG)

    def _base(path: str, default: Optional[str] = None) -> Optional[str]:
        cur: object = base
        for key in path.split("."):
            if not isinstance(cur, dict) or key not in cur:
                return default
            cur = cur[key]
        if isinstance(cur, list):
            return ",".join(str(v) for v in cur)
        return str(cur) if cur is not None else default

    dsn = (
        _env("TEST_DATABASE_URL")
        or _env("DATABASE_URL")
        or _read_config_file("database.url")
        or _base("database.dsn")
        or DEFAULT_DSN
    )

    origins_text = _env("CORS_ORIGINS") or _read_config_file("cors.origins") or _base("cors.origins", "*")
    origins = [o.strip() for o in str(origins_text).split(",") if o.strip()]

    auto_apply_text = _env("AUTO_APPLY_MIGRATIONS") or _read_config_file("migrations.auto_apply") or _base("migrations.auto_apply", "false")
    migrations_dir = _env("MIGRATIONS_DIR") or _read_config_file("migrations.directory") or _base("migrations.directory", "migrations")

    api_url = _env("PORTFOLIO_API_URL") or _read_config_file("client.base_url") or _base("client.base_url", "http://localhost:5001/api/v1")
    timeout_text = _env("PORTFOLIO_API_TIMEOUT") or _read_config_file("client.timeout_seconds") or _base("client.timeout_seconds", "10")

    try:
        cfg = AppConfig(
            database=DatabaseConfig(dsn=dsn),
            cors=CorsConfig(origins=origins or ["*"]),
            migrations=MigrationsConfig(auto_apply=_truthy(auto_apply_text), directory=str(migrations_dir)),
            client=ClientConfig(base_url=str(api_url), timeout_seconds=float(str(timeout_text).strip())),
        )
        return cfg
    except (PydanticValidationError, ValueError) as e:
        logger.error("Invalid application configuration: %s", e)
        raise


__all__ = [
    "AppConfig",
    "DatabaseConfig",
    "CorsConfig",
    "MigrationsConfig",
    "ClientConfig",
    "load_config",
]
