"""Read-side data access for footer blocks and projects."""

from __future__ import annotations

from typing import Any, Dict, List
import json
import logging

from sqlalchemy import text as sql_text
from sqlalchemy.exc import SQLAlchemyError

from portfolio.db.base import get_engine
from portfolio.errors import StorageError

logger = logging.getLogger(__name__)


def _json_list(raw: Any) -> List[str]:
    if isinstance(raw, list):
        return [str(v) for v in raw]
    try:
        parsed = json.loads(raw or "[]")
    except (TypeError, ValueError):
        logger.warning("project.json_list_unparseable value=%r", raw)
        return []
    return [str(v) for v in parsed] if isinstance(parsed, list) else []


def list_footer_grouped() -> Dict[str, List[Dict[str, Any]]]:
    """Return active footer blocks keyed by group, ascending order within each."""
    eng = get_engine()
    try:
        with eng.connect() as conn:
            rows = conn.execute(
                sql_text(
                    'SELECT id, "group", label, url, icon, "order" FROM footer_block '
                    'WHERE is_active = :active ORDER BY "group" ASC, "order" ASC, id ASC'
                ),
                {"active": True},
            ).fetchall()
    except SQLAlchemyError as exc:
        logger.error("footer.list_failed", exc_info=True)
        raise StorageError("Could not read footer blocks") from exc
    grouped: Dict[str, List[Dict[str, Any]]] = {}
    for r in rows:
        block = {
            "id": int(r[0]),
            "group": str(r[1]),
            "label": str(r[2]),
            "url": r[3],
            "icon": r[4],
            "order": int(r[5]),
        }
        grouped.setdefault(block["group"], []).append(block)
    return grouped


def list_projects() -> List[Dict[str, Any]]:
    """Return every project, newest first."""
    eng = get_engine()
    try:
        with eng.connect() as conn:
            rows = conn.execute(
                sql_text(
                    "SELECT id, created_at, title, slug, project_type, short_description, content, "
                    "images, technologies, live_url FROM project ORDER BY created_at DESC, id DESC"
                )
            ).fetchall()
    except SQLAlchemyError as exc:
        logger.error("projects.list_failed", exc_info=True)
        raise StorageError("Could not read projects") from exc
    return [
        {
            "id": int(r[0]),
            "created_at": r[1],
            "title": str(r[2]),
            "slug": str(r[3]),
            "project_type": str(r[4]),
            "short_description": r[5] or "",
            "content": r[6] or "",
            "images": _json_list(r[7]),
            "technologies": _json_list(r[8]),
            "live_url": r[9],
        }
        for r in rows
    ]


__all__ = ["list_footer_grouped", "list_projects"]
