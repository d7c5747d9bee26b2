"""Menu item data access (the Order Store).

These functions encapsulate SQL for the ``menu_item`` table so route
handlers, the reorder engine and the section sync never embed SQL. Helpers
that accept a ``conn`` participate in the caller's transaction; the
administrative helpers open their own.

Canonical sequence: ascending ``order``, ties broken by ``id``.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional
import logging

from sqlalchemy import text as sql_text
from sqlalchemy.engine import Connection
from sqlalchemy.exc import SQLAlchemyError

from portfolio.db.base import get_engine
from portfolio.errors import InvalidInput, NotFound, StorageError

logger = logging.getLogger(__name__)

_COLUMNS = 'id, label, url, image_url, "order", is_active, source_slug'
_ORDER_BY = 'ORDER BY "order" ASC, id ASC'

# Manually editable columns -> quoted SQL identifiers
_EDITABLE = {
    "label": "label",
    "url": "url",
    "image_url": "image_url",
    "order": '"order"',
    "is_active": "is_active",
}


def _row_to_item(row: Any) -> Dict[str, Any]:
    return {
        "id": int(row[0]),
        "label": str(row[1]),
        "url": str(row[2]),
        "image_url": row[3],
        "order": int(row[4]),
        "is_active": bool(row[5]),
        "source_slug": row[6],
    }


def _public(item: Dict[str, Any]) -> Dict[str, Any]:
    return {k: item[k] for k in ("id", "label", "url", "image_url", "order")}


def list_active_items() -> List[Dict[str, Any]]:
    """Return active items in canonical order with the public field set."""
    eng = get_engine()
    try:
        with eng.connect() as conn:
            rows = conn.execute(
                sql_text(f"SELECT {_COLUMNS} FROM menu_item WHERE is_active = :active {_ORDER_BY}"),
                {"active": True},
            ).fetchall()
    except SQLAlchemyError as exc:
        logger.error("menu.list_active_failed", exc_info=True)
        raise StorageError("Could not read menu items") from exc
    return [_public(_row_to_item(r)) for r in rows]


def list_all_items() -> List[Dict[str, Any]]:
    """Return every item (active and inactive) in canonical order."""
    eng = get_engine()
    try:
        with eng.connect() as conn:
            rows = conn.execute(sql_text(f"SELECT {_COLUMNS} FROM menu_item {_ORDER_BY}")).fetchall()
    except SQLAlchemyError as exc:
        logger.error("menu.list_all_failed", exc_info=True)
        raise StorageError("Could not read menu items") from exc
    return [_row_to_item(r) for r in rows]


def get_item(item_id: int) -> Optional[Dict[str, Any]]:
    eng = get_engine()
    try:
        with eng.connect() as conn:
            row = conn.execute(
                sql_text(f"SELECT {_COLUMNS} FROM menu_item WHERE id = :id"),
                {"id": int(item_id)},
            ).fetchone()
    except SQLAlchemyError as exc:
        logger.error("menu.get_failed id=%s", item_id, exc_info=True)
        raise StorageError("Could not read menu item") from exc
    return _row_to_item(row) if row else None


def count_items(conn: Connection) -> int:
    row = conn.execute(sql_text("SELECT COUNT(*) FROM menu_item")).fetchone()
    return int(row[0]) if row and row[0] is not None else 0


def get_item_by_source_slug(conn: Connection, slug: str) -> Optional[Dict[str, Any]]:
    row = conn.execute(
        sql_text(f"SELECT {_COLUMNS} FROM menu_item WHERE source_slug = :slug"),
        {"slug": slug},
    ).fetchone()
    return _row_to_item(row) if row else None


def insert_item(
    conn: Connection,
    *,
    label: str,
    url: str,
    order: int,
    image_url: Optional[str] = None,
    is_active: bool = True,
    source_slug: Optional[str] = None,
) -> Dict[str, Any]:
    row = conn.execute(
        sql_text(
            'INSERT INTO menu_item (label, url, image_url, "order", is_active, source_slug) '
            "VALUES (:label, :url, :image_url, :ord, :active, :slug) "
            f"RETURNING {_COLUMNS}"
        ),
        {
            "label": label,
            "url": url,
            "image_url": image_url,
            "ord": int(order),
            "active": bool(is_active),
            "slug": source_slug,
        },
    ).fetchone()
    return _row_to_item(row)


def update_item_by_source_slug(
    conn: Connection,
    slug: str,
    *,
    label: str,
    url: str,
    new_slug: Optional[str] = None,
) -> Optional[Dict[str, Any]]:
    """Rewrite the mirrored fields of the item linked to ``slug``; ``order`` is untouched."""
    result = conn.execute(
        sql_text(
            "UPDATE menu_item SET label = :label, url = :url, source_slug = :new_slug "
            "WHERE source_slug = :slug"
        ),
        {"label": label, "url": url, "new_slug": new_slug or slug, "slug": slug},
    )
    if not result.rowcount:
        return None
    return get_item_by_source_slug(conn, new_slug or slug)


def delete_items_by_source_slug(conn: Connection, slug: str) -> int:
    result = conn.execute(
        sql_text("DELETE FROM menu_item WHERE source_slug = :slug"),
        {"slug": slug},
    )
    return int(result.rowcount or 0)


def create_menu_item(
    *,
    label: str,
    url: str,
    image_url: Optional[str] = None,
    order: Optional[int] = None,
    is_active: bool = True,
) -> Dict[str, Any]:
    """Create a manual (non-mirrored) item; without ``order`` it is appended last."""
    eng = get_engine()
    try:
        with eng.begin() as conn:
            final_order = count_items(conn) if order is None else int(order)
            item = insert_item(
                conn,
                label=label,
                url=url,
                image_url=image_url,
                order=final_order,
                is_active=is_active,
            )
    except SQLAlchemyError as exc:
        logger.error("menu.create_failed label=%s", label, exc_info=True)
        raise StorageError("Could not create menu item") from exc
    logger.info("menu.item_created", extra={"menu_item_id": item["id"], "order": item["order"]})
    return item


def update_menu_item(item_id: int, changes: Dict[str, Any]) -> Dict[str, Any]:
    """Apply a manual edit. Only the editable columns are accepted."""
    unknown = sorted(set(changes) - set(_EDITABLE))
    if unknown:
        raise InvalidInput(f"Fields not editable: {', '.join(unknown)}")
    eng = get_engine()
    try:
        with eng.begin() as conn:
            if changes:
                assignments = ", ".join(f"{_EDITABLE[k]} = :{k}" for k in changes)
                params = dict(changes)
                params["id"] = int(item_id)
                result = conn.execute(
                    sql_text(f"UPDATE menu_item SET {assignments} WHERE id = :id"),
                    params,
                )
                if not result.rowcount:
                    raise NotFound(f"Menu item {item_id} not found")
            row = conn.execute(
                sql_text(f"SELECT {_COLUMNS} FROM menu_item WHERE id = :id"),
                {"id": int(item_id)},
            ).fetchone()
            if not row:
                raise NotFound(f"Menu item {item_id} not found")
    except SQLAlchemyError as exc:
        logger.error("menu.update_failed id=%s", item_id, exc_info=True)
        raise StorageError("Could not update menu item") from exc
    return _row_to_item(row)


def delete_menu_item(item_id: int) -> None:
    eng = get_engine()
    try:
        with eng.begin() as conn:
            result = conn.execute(
                sql_text("DELETE FROM menu_item WHERE id = :id"),
                {"id": int(item_id)},
            )
            if not result.rowcount:
                raise NotFound(f"Menu item {item_id} not found")
    except SQLAlchemyError as exc:
        logger.error("menu.delete_failed id=%s", item_id, exc_info=True)
        raise StorageError("Could not delete menu item") from exc
    logger.info("menu.item_deleted", extra={"menu_item_id": int(item_id)})


__all__ = [
    "list_active_items",
    "list_all_items",
    "get_item",
    "count_items",
    "get_item_by_source_slug",
    "insert_item",
    "update_item_by_source_slug",
    "delete_items_by_source_slug",
    "create_menu_item",
    "update_menu_item",
    "delete_menu_item",
]
