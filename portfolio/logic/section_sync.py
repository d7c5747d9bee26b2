"""Section -> menu item reconciliation.

Keeps one mirrored menu item per content section, linked by the stable
``source_slug`` key rather than by position:

- section created  -> mirror created at the end of the menu (or refreshed
  when it already exists, so re-runs are safe)
- section updated  -> label/url/source_slug rewritten in place, ``order``
  preserved; legacy sections without a mirror get one
- section deleted  -> every mirror with that slug removed

The handlers are plain functions invoked synchronously by whichever CRUD
layer owns sections; they never reposition existing items. Each runs in its
own transaction and raises ``StorageError`` when the write fails.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional
import logging

from sqlalchemy import text as sql_text
from sqlalchemy.engine import Connection
from sqlalchemy.exc import SQLAlchemyError

from portfolio.db.base import get_engine
from portfolio.errors import InvalidInput, StorageError
from portfolio.logic import repository_menu

logger = logging.getLogger(__name__)

CREATED = "created"
UPDATED = "updated"
DELETED = "deleted"


@dataclass(frozen=True)
class SyncOutcome:
    action: str
    slug: str
    menu_item_id: Optional[int] = None
    removed: int = 0


def normalize_slug(slug: str) -> str:
    """Return ``slug`` as a site-relative URL (leading ``/``)."""
    return slug if slug.startswith("/") else f"/{slug}"


def _require(slug: Optional[str], title: Optional[str]) -> None:
    if not isinstance(slug, str) or not slug.strip():
        raise InvalidInput("Section slug must be a non-empty string")
    if not isinstance(title, str) or not title.strip():
        raise InvalidInput("Section title must be a non-empty string")


def _upsert(conn: Connection, slug: str, title: str, order: Optional[int] = None) -> SyncOutcome:
    """Refresh the mirror for ``slug`` or create it.

    New mirrors are appended at ``count(items)`` unless ``order`` is given.
    """
    url = normalize_slug(slug)
    existing = repository_menu.get_item_by_source_slug(conn, slug)
    if existing:
        item = repository_menu.update_item_by_source_slug(conn, slug, label=title, url=url)
        return SyncOutcome(UPDATED, slug, menu_item_id=(item or existing)["id"])
    final_order = repository_menu.count_items(conn) if order is None else int(order)
    item = repository_menu.insert_item(conn, label=title, url=url, order=final_order, source_slug=slug)
    return SyncOutcome(CREATED, slug, menu_item_id=item["id"])


def on_source_created(slug: str, title: str) -> SyncOutcome:
    _require(slug, title)
    eng = get_engine()
    try:
        with eng.begin() as conn:
            outcome = _upsert(conn, slug, title)
    except SQLAlchemyError as exc:
        logger.error("section_sync.create_failed slug=%s", slug, exc_info=True)
        raise StorageError(f"Could not sync menu item for section '{slug}'") from exc
    logger.info("section_sync.%s", outcome.action, extra={"slug": slug, "menu_item_id": outcome.menu_item_id})
    return outcome


def on_source_updated(old_slug: Optional[str], new_slug: str, new_title: str) -> SyncOutcome:
    """Follow a section edit, including a change of its slug.

    ``old_slug`` is the slug before the edit; when unknown the new slug is
    used for the lookup.
    """
    _require(new_slug, new_title)
    lookup = old_slug or new_slug
    eng = get_engine()
    try:
        with eng.begin() as conn:
            item = repository_menu.update_item_by_source_slug(
                conn,
                lookup,
                label=new_title,
                url=normalize_slug(new_slug),
                new_slug=new_slug,
            )
            if item is not None:
                outcome = SyncOutcome(UPDATED, new_slug, menu_item_id=item["id"])
            else:
                # Sections created before mirroring existed have no item yet
                outcome = _upsert(conn, new_slug, new_title)
    except SQLAlchemyError as exc:
        logger.error("section_sync.update_failed old=%s new=%s", old_slug, new_slug, exc_info=True)
        raise StorageError(f"Could not sync menu item for section '{new_slug}'") from exc
    logger.info(
        "section_sync.%s",
        outcome.action,
        extra={"old_slug": old_slug, "slug": new_slug, "menu_item_id": outcome.menu_item_id},
    )
    return outcome


def on_source_deleted(slug: str) -> SyncOutcome:
    if not isinstance(slug, str) or not slug.strip():
        raise InvalidInput("Section slug must be a non-empty string")
    eng = get_engine()
    try:
        with eng.begin() as conn:
            removed = repository_menu.delete_items_by_source_slug(conn, slug)
    except SQLAlchemyError as exc:
        logger.error("section_sync.delete_failed slug=%s", slug, exc_info=True)
        raise StorageError(f"Could not remove menu item for section '{slug}'") from exc
    logger.info("section_sync.deleted", extra={"slug": slug, "removed": removed})
    return SyncOutcome(DELETED, slug, removed=removed)


def sync_all_sections() -> List[SyncOutcome]:
    """Back-fill mirrors for every existing section.

    Sections are walked by id; existing mirrors are refreshed and missing
    ones are created with ``order`` equal to the section's index. Manual
    menu items are left alone.
    """
    eng = get_engine()
    outcomes: List[SyncOutcome] = []
    try:
        with eng.begin() as conn:
            rows = conn.execute(sql_text("SELECT slug, title FROM section ORDER BY id ASC")).fetchall()
            for index, row in enumerate(rows):
                outcomes.append(_upsert(conn, str(row[0]), str(row[1]), order=index))
    except SQLAlchemyError as exc:
        logger.error("section_sync.sync_all_failed", exc_info=True)
        raise StorageError("Could not sync menu items from sections") from exc
    logger.info(
        "section_sync.sync_all",
        extra={
            "sections": len(outcomes),
            "created": sum(1 for o in outcomes if o.action == CREATED),
            "updated": sum(1 for o in outcomes if o.action == UPDATED),
        },
    )
    return outcomes


def outcome_to_dict(outcome: SyncOutcome) -> Dict[str, Any]:
    return {
        "action": outcome.action,
        "slug": outcome.slug,
        "menu_item_id": outcome.menu_item_id,
        "removed": outcome.removed,
    }


__all__ = [
    "SyncOutcome",
    "CREATED",
    "UPDATED",
    "DELETED",
    "normalize_slug",
    "on_source_created",
    "on_source_updated",
    "on_source_deleted",
    "sync_all_sections",
    "outcome_to_dict",
]
