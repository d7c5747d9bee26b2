"""Response envelope helpers shared by every endpoint."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel


class ErrorEnvelope(BaseModel):
    """Failure body, documented on routes via ``responses=``."""

    success: Literal[False] = False
    error: str
    message: str


def ok(data: Any) -> dict:
    """Wrap ``data`` in the success envelope as a plain JSON-ready dict."""
    return {"success": True, "data": data}


__all__ = ["ErrorEnvelope", "ok"]
