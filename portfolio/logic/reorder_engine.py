"""Menu reorder engine.

Applies a client-supplied ordering of menu items as one atomic batch:
either every ``order`` value in the batch is written or none is. The engine
trusts the caller to submit the complete reordered list; it does not check
that ``order`` values are contiguous or unique, and it carries no version
token, so concurrent saves resolve as last-write-wins.
"""

from __future__ import annotations

from typing import Any, List
import logging

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import text as sql_text
from sqlalchemy.exc import SQLAlchemyError

from portfolio.db.base import get_engine
from portfolio.errors import InvalidInput, NotFound, StorageError
from portfolio.logic.events import MENU_REORDERED, publish
from portfolio.models.menu import ReorderItem

logger = logging.getLogger(__name__)


def parse_ordering(raw: Any) -> List[ReorderItem]:
    """Validate a raw ``items`` value into ``ReorderItem`` pairs.

    Raises ``InvalidInput`` for anything other than a non-empty list of
    objects carrying integer-coercible ``id`` and ``order``.
    """
    if not isinstance(raw, (list, tuple)) or not raw:
        raise InvalidInput("Expected a non-empty array of items with {id, order}.")
    parsed: List[ReorderItem] = []
    for position, entry in enumerate(raw):
        if isinstance(entry, ReorderItem):
            parsed.append(entry)
            continue
        try:
            parsed.append(ReorderItem.model_validate(entry))
        except PydanticValidationError as exc:
            raise InvalidInput(f"Item at position {position} must be an object with integer id and order.") from exc
    return parsed


def apply_order(new_ordering: Any) -> int:
    """Write every (id, order) pair in a single transaction.

    Returns the number of rows updated, equal to the input length. An id
    that matches no row aborts the whole batch; the caller sees
    ``StorageError`` and storage is left unchanged.
    """
    pairs = parse_ordering(new_ordering)

    eng = get_engine()
    try:
        with eng.begin() as conn:
            for pair in pairs:
                result = conn.execute(
                    sql_text('UPDATE menu_item SET "order" = :ord WHERE id = :id'),
                    {"ord": int(pair.order), "id": int(pair.id)},
                )
                if not result.rowcount:
                    raise NotFound(f"Menu item {pair.id} not found")
    except NotFound as exc:
        logger.error(
            "menu.reorder.aborted",
            extra={"reason": "unknown_id", "items_count": len(pairs), "detail": exc.message},
        )
        raise StorageError(f"Reorder aborted: {exc.message}") from exc
    except SQLAlchemyError as exc:
        logger.error("menu.reorder.aborted", extra={"reason": "storage", "items_count": len(pairs)}, exc_info=True)
        raise StorageError("Reorder aborted: the transaction was rolled back") from exc

    updated = len(pairs)
    logger.info(
        "menu.reorder.applied",
        extra={"items_count": updated, "ids": [p.id for p in pairs]},
    )
    publish(MENU_REORDERED, {"updated": updated, "ordering": [[p.id, p.order] for p in pairs]})
    return updated


__all__ = ["parse_ordering", "apply_order"]
