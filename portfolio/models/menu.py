"""Pydantic models for menu items and reorder payloads."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class MenuItemPublic(BaseModel):
    """Field set exposed to the public site."""

    id: int
    label: str
    url: str
    image_url: Optional[str] = None
    order: int


class MenuItem(MenuItemPublic):
    """Full administrative view, including inactive and mirrored items."""

    is_active: bool = True
    source_slug: Optional[str] = None


class MenuItemCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    label: str = Field(min_length=1)
    url: str = Field(min_length=1)
    image_url: Optional[str] = None
    order: Optional[int] = None
    is_active: bool = True


class MenuItemUpdate(BaseModel):
    """Manual edit; ``source_slug`` is owned by the section sync and not editable."""

    model_config = ConfigDict(extra="forbid")

    label: Optional[str] = Field(default=None, min_length=1)
    url: Optional[str] = Field(default=None, min_length=1)
    image_url: Optional[str] = None
    order: Optional[int] = None
    is_active: Optional[bool] = None

    def changes(self) -> dict:
        """Fields explicitly sent; nulls only clear the nullable ``image_url``."""
        sent = self.model_dump(exclude_unset=True)
        return {k: v for k, v in sent.items() if v is not None or k == "image_url"}


class ReorderItem(BaseModel):
    id: int
    order: int


class ReorderResult(BaseModel):
    updated: int


__all__ = [
    "MenuItemPublic",
    "MenuItem",
    "MenuItemCreate",
    "MenuItemUpdate",
    "ReorderItem",
    "ReorderResult",
]
