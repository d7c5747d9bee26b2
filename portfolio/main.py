from __future__ import annotations

import logging
from typing import Callable

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from sqlalchemy import text as sql_text
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from portfolio.config import load_config
from portfolio.db.base import get_engine
from portfolio.db.migrations_runner import apply_migrations
from portfolio.errors import PortfolioError
from portfolio.http.envelope import (
    handle_http_exception,
    handle_portfolio_error,
    handle_request_validation_error,
    handle_unexpected_error,
)
from portfolio.http.request_id import RequestIdMiddleware
from portfolio.logging_setup import configure_logging
from portfolio.middleware.cors import apply_cors
from portfolio.routes import api_router

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"
SERVICE_VERSION = "1.0.0"


def _health_check() -> Callable[[], dict]:
    def check() -> dict:
        try:
            with get_engine().connect() as conn:
                conn.execute(sql_text("SELECT 1"))
            return {"status": "ok", "db": True}
        except SQLAlchemyError as e:
            logger.error("Health DB check failed", exc_info=True)
            return {"status": "degraded", "db": False, "reason": type(e).__name__}

    return check


def create_app() -> FastAPI:
    # Configure global logging before app instantiation so all modules emit
    try:
        configure_logging()
    except Exception:
        logging.getLogger(__name__).error("global_logging_configuration_failed", exc_info=True)

    cfg = load_config()
    app = FastAPI(title="Portfolio API", version=SERVICE_VERSION)

    app.add_exception_handler(PortfolioError, handle_portfolio_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(HTTPException, handle_http_exception)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    app.add_middleware(RequestIdMiddleware)
    apply_cors(app, origins=cfg.cors.origins)

    @app.on_event("startup")
    def _apply_migrations_on_startup() -> None:
        if not cfg.migrations.auto_apply:
            logger.info("AUTO_APPLY_MIGRATIONS disabled; skipping migrations at startup")
            return
        try:
            applied = apply_migrations(get_engine(), migrations_dir=cfg.migrations.directory)
            logger.info("startup_migrations applied=%s", applied)
        except Exception:
            logger.error("Failed to apply migrations at startup", exc_info=True)
            raise

    app.include_router(api_router, prefix=API_PREFIX)

    health_check = _health_check()

    @app.get("/health")
    def health():
        return health_check()

    @app.get("/")
    def index():
        return {
            "success": True,
            "data": {
                "message": "Portfolio API",
                "version": SERVICE_VERSION,
                "endpoints": [
                    f"GET {API_PREFIX}/navigation/menu",
                    f"GET {API_PREFIX}/navigation/menu/all",
                    f"PATCH {API_PREFIX}/navigation/menu/reorder",
                    f"GET {API_PREFIX}/navigation/footer",
                    f"GET {API_PREFIX}/projects",
                    f"{API_PREFIX}/admin/sections",
                    f"{API_PREFIX}/admin/menu-items",
                ],
            },
        }

    return app


# Intentionally do not instantiate the app at import time to prevent side effects.
