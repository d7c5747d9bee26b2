"""Section data access and write flows.

Owns the ``section`` table and invokes the menu sync handlers around each
write. The section write commits on its own; the menu mirror update is a
best-effort side effect whose failure is logged, published and reported in
the result but never rolls the section change back.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional
import logging

from sqlalchemy import text as sql_text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from portfolio.db.base import get_engine
from portfolio.errors import InvalidInput, NotFound, PortfolioError, StorageError
from portfolio.logic import section_sync
from portfolio.logic.events import MENU_SYNCED, MENU_SYNC_FAILED, publish

logger = logging.getLogger(__name__)

_COLUMNS = "id, slug, title, body, image_url"
_EDITABLE = ("slug", "title", "body", "image_url")


def _row_to_section(row: Any) -> Dict[str, Any]:
    return {
        "id": int(row[0]),
        "slug": str(row[1]),
        "title": str(row[2]),
        "body": row[3] or "",
        "image_url": row[4],
    }


def _run_sync(hook: Callable[[], section_sync.SyncOutcome], *, section_id: Optional[int], slug: str) -> Dict[str, Any]:
    """Invoke a sync handler and turn its outcome or failure into a report."""
    try:
        outcome = hook()
    except PortfolioError as exc:
        logger.error(
            "section.menu_sync_failed",
            extra={"section_id": section_id, "slug": slug, "code": exc.code},
            exc_info=True,
        )
        publish(MENU_SYNC_FAILED, {"section_id": section_id, "slug": slug, "error": exc.code, "message": exc.message})
        return {"ok": False, "error": exc.message}
    report = {"ok": True, **section_sync.outcome_to_dict(outcome)}
    report.pop("slug", None)
    publish(MENU_SYNCED, {"section_id": section_id, **section_sync.outcome_to_dict(outcome)})
    return report


def list_sections() -> List[Dict[str, Any]]:
    eng = get_engine()
    try:
        with eng.connect() as conn:
            rows = conn.execute(sql_text(f"SELECT {_COLUMNS} FROM section ORDER BY id ASC")).fetchall()
    except SQLAlchemyError as exc:
        logger.error("section.list_failed", exc_info=True)
        raise StorageError("Could not read sections") from exc
    return [_row_to_section(r) for r in rows]


def get_section(section_id: int) -> Optional[Dict[str, Any]]:
    eng = get_engine()
    try:
        with eng.connect() as conn:
            row = conn.execute(
                sql_text(f"SELECT {_COLUMNS} FROM section WHERE id = :id"),
                {"id": int(section_id)},
            ).fetchone()
    except SQLAlchemyError as exc:
        logger.error("section.get_failed id=%s", section_id, exc_info=True)
        raise StorageError("Could not read section") from exc
    return _row_to_section(row) if row else None


def create_section(*, slug: str, title: str, body: str = "", image_url: Optional[str] = None) -> Dict[str, Any]:
    """Insert a section then mirror it into the menu.

    Returns ``{"section": ..., "menu_sync": report}``.
    """
    eng = get_engine()
    try:
        with eng.begin() as conn:
            row = conn.execute(
                sql_text(
                    "INSERT INTO section (slug, title, body, image_url) "
                    f"VALUES (:slug, :title, :body, :image_url) RETURNING {_COLUMNS}"
                ),
                {"slug": slug, "title": title, "body": body or "", "image_url": image_url},
            ).fetchone()
    except IntegrityError as exc:
        raise InvalidInput(f"A section with slug '{slug}' already exists") from exc
    except SQLAlchemyError as exc:
        logger.error("section.create_failed slug=%s", slug, exc_info=True)
        raise StorageError("Could not create section") from exc
    section = _row_to_section(row)
    logger.info("section.created", extra={"section_id": section["id"], "slug": slug})
    report = _run_sync(
        lambda: section_sync.on_source_created(section["slug"], section["title"]),
        section_id=section["id"],
        slug=section["slug"],
    )
    return {"section": section, "menu_sync": report}


def update_section(section_id: int, changes: Dict[str, Any]) -> Dict[str, Any]:
    """Apply an edit, then follow it in the menu using the pre-edit slug."""
    unknown = sorted(set(changes) - set(_EDITABLE))
    if unknown:
        raise InvalidInput(f"Fields not editable: {', '.join(unknown)}")
    eng = get_engine()
    try:
        with eng.begin() as conn:
            row = conn.execute(
                sql_text(f"SELECT {_COLUMNS} FROM section WHERE id = :id"),
                {"id": int(section_id)},
            ).fetchone()
            if not row:
                raise NotFound(f"Section {section_id} not found")
            old_slug = str(row[1])
            if changes:
                assignments = ", ".join(f"{k} = :{k}" for k in changes)
                params = dict(changes)
                params["id"] = int(section_id)
                conn.execute(sql_text(f"UPDATE section SET {assignments} WHERE id = :id"), params)
            updated = conn.execute(
                sql_text(f"SELECT {_COLUMNS} FROM section WHERE id = :id"),
                {"id": int(section_id)},
            ).fetchone()
    except IntegrityError as exc:
        raise InvalidInput(f"A section with slug '{changes.get('slug')}' already exists") from exc
    except SQLAlchemyError as exc:
        logger.error("section.update_failed id=%s", section_id, exc_info=True)
        raise StorageError("Could not update section") from exc
    section = _row_to_section(updated)
    logger.info("section.updated", extra={"section_id": section["id"], "old_slug": old_slug, "slug": section["slug"]})
    report = _run_sync(
        lambda: section_sync.on_source_updated(old_slug, section["slug"], section["title"]),
        section_id=section["id"],
        slug=section["slug"],
    )
    return {"section": section, "menu_sync": report}


def delete_section(section_id: int) -> Dict[str, Any]:
    """Remove the section's menu mirror, then the section itself."""
    section = get_section(section_id)
    if section is None:
        raise NotFound(f"Section {section_id} not found")
    report = _run_sync(
        lambda: section_sync.on_source_deleted(section["slug"]),
        section_id=section["id"],
        slug=section["slug"],
    )
    eng = get_engine()
    try:
        with eng.begin() as conn:
            conn.execute(sql_text("DELETE FROM section WHERE id = :id"), {"id": int(section_id)})
    except SQLAlchemyError as exc:
        logger.error("section.delete_failed id=%s", section_id, exc_info=True)
        raise StorageError("Could not delete section") from exc
    logger.info("section.deleted", extra={"section_id": section["id"], "slug": section["slug"]})
    return {"section": None, "menu_sync": report}


__all__ = [
    "list_sections",
    "get_section",
    "create_section",
    "update_section",
    "delete_section",
]
