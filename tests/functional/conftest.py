from __future__ import annotations

"""Functional test bootstrap.

Points the app at a file-backed SQLite database shared across the process
and applies the SQLite migrations once per session. Each test starts from
empty tables and an empty event buffer.

Scoped under tests/functional/ so Behave (integration) runs are unaffected.
"""

import os
import pathlib
from typing import Any, Callable, Dict, Optional

import pytest

# Must be set before anything imports portfolio.config consumers
_ROOT = pathlib.Path(__file__).resolve().parents[2]
_DB_FILE = _ROOT / "tmp" / "functional_tests.db"
_DB_FILE.parent.mkdir(parents=True, exist_ok=True)
if _DB_FILE.exists():
    _DB_FILE.unlink()

os.environ["TEST_DATABASE_URL"] = f"sqlite:///{_DB_FILE}"
os.environ["DATABASE_URL"] = os.environ["TEST_DATABASE_URL"]
# Migrations are applied explicitly below, not on app startup
os.environ["AUTO_APPLY_MIGRATIONS"] = "0"

_TABLES = ("menu_item", "section", "footer_block", "project")


@pytest.fixture(scope="session", autouse=True)
def functional_sqlite_bootstrap() -> None:
    from portfolio.db.base import get_engine, reset_engine
    from portfolio.db.migrations_runner import apply_migrations

    reset_engine()
    apply_migrations(get_engine(os.environ["TEST_DATABASE_URL"]), migrations_dir=str(_ROOT / "sqlite_migrations"))
    yield
    reset_engine()


@pytest.fixture(autouse=True)
def clean_tables() -> None:
    from sqlalchemy import text as sql_text

    from portfolio.db.base import get_engine
    from portfolio.logic.events import get_buffered_events

    with get_engine().begin() as conn:
        for table in _TABLES:
            conn.execute(sql_text(f"DELETE FROM {table}"))
    get_buffered_events(clear=True)
    yield


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def client():
    from fastapi.testclient import TestClient

    from portfolio.main import create_app

    with TestClient(create_app()) as c:
        yield c


@pytest.fixture
def add_menu_item() -> Callable[..., Dict[str, Any]]:
    """Insert a menu item directly and return its row."""
    from portfolio.db.base import get_engine
    from portfolio.logic import repository_menu

    def _add(
        label: str,
        order: int,
        *,
        url: Optional[str] = None,
        is_active: bool = True,
        source_slug: Optional[str] = None,
    ) -> Dict[str, Any]:
        with get_engine().begin() as conn:
            return repository_menu.insert_item(
                conn,
                label=label,
                url=url or f"/{label.lower()}",
                order=order,
                is_active=is_active,
                source_slug=source_slug,
            )

    return _add


@pytest.fixture
def execute_sql() -> Callable[..., None]:
    from sqlalchemy import text as sql_text

    from portfolio.db.base import get_engine

    def _exec(statement: str, params: Optional[Dict[str, Any]] = None) -> None:
        with get_engine().begin() as conn:
            conn.execute(sql_text(statement), params or {})

    return _exec
