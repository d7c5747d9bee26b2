"""Administrative content endpoints.

Manual menu item management and section CRUD. Section writes trigger the
menu sync; its outcome is reported under ``menu_sync`` without failing the
section write.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter

from portfolio.logic import repository_menu, repository_sections
from portfolio.models.envelope import ok
from portfolio.models.menu import MenuItem, MenuItemCreate, MenuItemUpdate
from portfolio.models.section import SectionCreate, SectionUpdate, SectionWriteResult
from portfolio.errors import NotFound


router = APIRouter(prefix="/admin")
logger = logging.getLogger(__name__)


@router.post("/menu-items", status_code=201, summary="Create a manual menu item", operation_id="createMenuItem")
def create_menu_item(payload: MenuItemCreate):
    item = repository_menu.create_menu_item(**payload.model_dump())
    return ok(MenuItem.model_validate(item).model_dump())


@router.patch("/menu-items/{item_id}", summary="Edit a menu item", operation_id="updateMenuItem")
def update_menu_item(item_id: int, payload: MenuItemUpdate):
    item = repository_menu.update_menu_item(item_id, payload.changes())
    return ok(MenuItem.model_validate(item).model_dump())


@router.delete("/menu-items/{item_id}", summary="Delete a menu item", operation_id="deleteMenuItem")
def delete_menu_item(item_id: int):
    repository_menu.delete_menu_item(item_id)
    return ok({"deleted": item_id})


@router.get("/sections", summary="List sections", operation_id="listSections")
def list_sections():
    return ok(repository_sections.list_sections())


@router.get("/sections/{section_id}", summary="Get a section", operation_id="getSection")
def get_section(section_id: int):
    section = repository_sections.get_section(section_id)
    if section is None:
        raise NotFound(f"Section {section_id} not found")
    return ok(section)


@router.post("/sections", status_code=201, summary="Create a section and its menu item", operation_id="createSection")
def create_section(payload: SectionCreate):
    result = repository_sections.create_section(**payload.model_dump())
    return ok(SectionWriteResult.model_validate(result).model_dump())


@router.patch("/sections/{section_id}", summary="Edit a section and follow it in the menu", operation_id="updateSection")
def update_section(section_id: int, payload: SectionUpdate):
    result = repository_sections.update_section(section_id, payload.changes())
    return ok(SectionWriteResult.model_validate(result).model_dump())


@router.delete("/sections/{section_id}", summary="Delete a section and its menu item", operation_id="deleteSection")
def delete_section(section_id: int):
    result = repository_sections.delete_section(section_id)
    return ok(SectionWriteResult.model_validate(result).model_dump())


__all__ = ["router"]
