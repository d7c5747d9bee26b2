"""APIRouter registration for the portfolio API."""

from __future__ import annotations

from fastapi import APIRouter

from portfolio.routes.admin import router as admin_router
from portfolio.routes.navigation import router as navigation_router
from portfolio.routes.projects import router as projects_router

api_router = APIRouter()
api_router.include_router(navigation_router, tags=["Navigation"])
api_router.include_router(projects_router, tags=["Projects"])
api_router.include_router(admin_router, tags=["Admin"])

__all__ = ["api_router"]
