"""FastAPI application package for the portfolio backend.

Exposes the application factory. Cross-cutting wiring (logging, envelopes,
request-id, CORS) lives in `portfolio/main.py`; persistence and business
rules live in `portfolio/logic/` and HTTP handlers in `portfolio/routes/`.
The admin drag-and-drop reorder tool is modelled in `portfolio/client/`.
"""

from __future__ import annotations

from portfolio.main import create_app

__all__ = ["create_app"]
