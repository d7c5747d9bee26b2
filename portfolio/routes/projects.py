"""Project listing endpoint."""

from __future__ import annotations

from fastapi import APIRouter

from portfolio.logic import repository_content
from portfolio.models.content import Project
from portfolio.models.envelope import ok


router = APIRouter()


@router.get("/projects", summary="All projects, newest first", operation_id="listProjects")
def list_projects():
    projects = [Project.model_validate(p).model_dump(mode="json") for p in repository_content.list_projects()]
    return ok(projects)


__all__ = ["router"]
