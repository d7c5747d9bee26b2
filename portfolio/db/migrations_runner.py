"""Lightweight SQL migrations runner.

Applies ``.sql`` files in lexical order from a migrations directory
(``migrations/`` for PostgreSQL, ``sqlite_migrations/`` for SQLite). Applied
filenames are journaled in the ``schema_migrations`` table of the target
database so each database tracks its own history. Rollback scripts are
skipped in forward runs.
"""

from __future__ import annotations

import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable

from sqlalchemy import text as sql_text
from sqlalchemy.engine import Connection, Engine

logger = logging.getLogger(__name__)

_JOURNAL_DDL = (
    "CREATE TABLE IF NOT EXISTS schema_migrations ("
    "filename VARCHAR(255) PRIMARY KEY, "
    "applied_at VARCHAR(32) NOT NULL)"
)


def _iter_sql_files(root: Path) -> Iterable[Path]:
    for p in sorted(root.glob("*.sql")):
        if "rollback" in p.name.lower():
            continue
        yield p


def _split_statements(sql: str) -> list[str]:
    statements: list[str] = []
    for chunk in sql.split(";"):
        lines = [ln for ln in chunk.splitlines() if not ln.strip().startswith("--")]
        stmt = "\n".join(lines).strip()
        if not stmt or stmt.upper() in {"BEGIN", "COMMIT", "END"}:
            continue
        statements.append(stmt)
    return statements


def _exec_sql_compat(conn: Connection, sql: str) -> None:
    """Execute a migration file inside the caller's transaction.

    pysqlite refuses several statements in one execute() call, so SQLite
    scripts are split on ``;``. Other dialects receive the script as-is.
    """
    name = (getattr(conn.dialect, "name", "") or "").lower()
    if "sqlite" in name:
        for stmt in _split_statements(sql):
            conn.exec_driver_sql(stmt)
        return
    conn.exec_driver_sql(sql)


def applied_migrations(engine: Engine) -> list[str]:
    """Return journaled filenames in application order."""
    with engine.begin() as conn:
        conn.exec_driver_sql(_JOURNAL_DDL)
        rows = conn.execute(
            sql_text("SELECT filename FROM schema_migrations ORDER BY applied_at ASC, filename ASC")
        ).fetchall()
    return [str(r[0]) for r in rows]


def apply_migrations(engine: Engine, migrations_dir: str | os.PathLike[str] = "migrations") -> list[str]:
    """Apply pending migrations; return the filenames applied by this run."""
    root = Path(migrations_dir)
    if not root.exists():  # pragma: no cover - optional
        logger.warning("migrations_dir_missing path=%s", str(root))
        return []

    already = set(applied_migrations(engine))
    newly_applied: list[str] = []

    with engine.begin() as conn:
        for sql_path in _iter_sql_files(root):
            fname = sql_path.name
            if fname in already:
                continue
            sql = sql_path.read_text(encoding="utf-8")
            if not sql.strip():
                continue
            _exec_sql_compat(conn, sql)
            conn.execute(
                sql_text("INSERT INTO schema_migrations (filename, applied_at) VALUES (:f, :at)"),
                {
                    "f": fname,
                    # ISO-8601 UTC without fractional seconds
                    "at": datetime.now(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z"),
                },
            )
            newly_applied.append(fname)
            logger.info("migration_applied file=%s", fname)

    return newly_applied


__all__ = ["apply_migrations", "applied_migrations"]
