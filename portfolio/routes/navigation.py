"""Navigation endpoints: public menu and footer, admin menu listing and reorder."""

from __future__ import annotations

import logging

import anyio
from fastapi import APIRouter, Request

from portfolio.errors import InvalidInput
from portfolio.logic import reorder_engine, repository_content, repository_menu
from portfolio.models.content import FooterBlock
from portfolio.models.envelope import ErrorEnvelope, ok
from portfolio.models.menu import MenuItemPublic, ReorderResult


router = APIRouter(prefix="/navigation")
logger = logging.getLogger(__name__)

_REORDER_ERRORS = {
    400: {"model": ErrorEnvelope, "description": "Malformed or empty ordering"},
    500: {"model": ErrorEnvelope, "description": "Transaction aborted; nothing was written"},
}


@router.get(
    "/menu",
    summary="Active menu items in display order",
    operation_id="getMenu",
)
def get_menu():
    return ok([MenuItemPublic.model_validate(i).model_dump() for i in repository_menu.list_active_items()])


@router.get(
    "/menu/all",
    summary="All menu items, including inactive ones, for the admin reorder tool",
    operation_id="getMenuAll",
)
def get_menu_all():
    return ok(repository_menu.list_all_items())


@router.patch(
    "/menu/reorder",
    summary="Persist a complete menu ordering atomically",
    operation_id="reorderMenu",
    responses=_REORDER_ERRORS,
)
async def reorder_menu(request: Request):
    try:
        body = await request.json()
    except ValueError as exc:
        raise InvalidInput("Malformed JSON in request body.") from exc
    if not isinstance(body, dict):
        raise InvalidInput("Expected a JSON object with an 'items' array.")
    items = body.get("items")
    logger.info(
        "menu.reorder.request",
        extra={
            "items_count": len(items) if isinstance(items, list) else None,
            "request_id": getattr(request.state, "request_id", None),
        },
    )
    # Validation happens inside the engine before any storage access
    updated = await anyio.to_thread.run_sync(reorder_engine.apply_order, items)
    return ok(ReorderResult(updated=updated).model_dump())


@router.get(
    "/footer",
    summary="Active footer blocks grouped by category",
    operation_id="getFooter",
)
def get_footer():
    grouped = repository_content.list_footer_grouped()
    return ok(
        {group: [FooterBlock.model_validate(b).model_dump() for b in blocks] for group, blocks in grouped.items()}
    )


__all__ = ["router"]
