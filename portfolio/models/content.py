"""Pydantic models for footer blocks and projects (read API)."""

from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel


class FooterBlock(BaseModel):
    id: int
    group: str
    label: str
    url: Optional[str] = None
    icon: Optional[str] = None
    order: int


class Project(BaseModel):
    id: int
    created_at: datetime
    title: str
    slug: str
    project_type: Literal["development", "design"]
    short_description: str = ""
    content: str = ""
    images: List[str] = []
    technologies: List[str] = []
    live_url: Optional[str] = None
