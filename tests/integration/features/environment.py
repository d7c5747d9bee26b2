"""Behave environment hooks for the menu reorder integration features.

Loads ``.env`` / ``tests/integration/.env.test`` via python-dotenv. When
``TEST_BASE_URL`` is set the features run against that live API (with
``TEST_DATABASE_URL`` pointing at its database); otherwise the app is
served in-process against a throwaway SQLite file.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Any

import httpx
from dotenv import load_dotenv
from sqlalchemy import create_engine, text

_ROOT = Path(__file__).resolve().parents[3]
_TABLES = ("menu_item", "section", "footer_block", "project")


def before_all(context: Any) -> None:  # pragma: no cover - executed by Behave
    load_dotenv(override=False)
    load_dotenv(dotenv_path=_ROOT / "tests" / "integration" / ".env.test", override=False)

    from portfolio.main import API_PREFIX

    context.api_prefix = API_PREFIX
    base_url = os.environ.get("TEST_BASE_URL", "").strip().rstrip("/")
    if base_url:
        db_url = os.environ.get("TEST_DATABASE_URL", "").strip()
        assert db_url, "TEST_DATABASE_URL is required alongside TEST_BASE_URL"
        context.db_url = db_url
        context.in_process = False
        context.client = httpx.Client(base_url=base_url, timeout=5.0)
        try:
            context.client.get("/health")
        except httpx.RequestError as exc:
            raise AssertionError(f"API not reachable at TEST_BASE_URL={base_url}: {exc}")
        return

    tmp_dir = Path(tempfile.mkdtemp(prefix="portfolio-behave-"))
    context.db_url = f"sqlite:///{tmp_dir / 'integration.db'}"
    os.environ["TEST_DATABASE_URL"] = context.db_url
    os.environ["AUTO_APPLY_MIGRATIONS"] = "1"
    os.environ["MIGRATIONS_DIR"] = str(_ROOT / "sqlite_migrations")

    from fastapi.testclient import TestClient

    from portfolio.main import create_app

    context.in_process = True
    context.client = TestClient(create_app())
    context.client.__enter__()


def before_scenario(context: Any, scenario: Any) -> None:  # pragma: no cover - executed by Behave
    engine = create_engine(context.db_url, future=True)
    with engine.begin() as conn:
        for table in _TABLES:
            conn.execute(text(f"DELETE FROM {table}"))
    engine.dispose()
    context.vars = {}


def after_all(context: Any) -> None:  # pragma: no cover - executed by Behave
    client = getattr(context, "client", None)
    if client is None:
        return
    if context.in_process:
        client.__exit__(None, None, None)
    else:
        client.close()
