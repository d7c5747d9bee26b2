"""Pydantic models for content sections and their menu sync report."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Section(BaseModel):
    id: int
    slug: str
    title: str
    body: str = ""
    image_url: Optional[str] = None


class SectionCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    slug: str = Field(min_length=1)
    title: str = Field(min_length=1)
    body: str = ""
    image_url: Optional[str] = None


class SectionUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    slug: Optional[str] = Field(default=None, min_length=1)
    title: Optional[str] = Field(default=None, min_length=1)
    body: Optional[str] = None
    image_url: Optional[str] = None

    def changes(self) -> dict:
        sent = self.model_dump(exclude_unset=True)
        return {k: v for k, v in sent.items() if v is not None or k == "image_url"}


class MenuSyncReport(BaseModel):
    """Outcome of the best-effort menu mirror update after a section write."""

    ok: bool
    action: Optional[str] = None
    menu_item_id: Optional[int] = None
    removed: int = 0
    error: Optional[str] = None


class SectionWriteResult(BaseModel):
    section: Optional[Section] = None
    menu_sync: MenuSyncReport
