"""Database bootstrap utilities for the portfolio API.

Exposes the shared engine accessor and the journaled SQL migrations runner.
Route handlers never see connections directly; repositories in
`portfolio/logic/` own all SQL.
"""

from portfolio.db.base import get_engine, reset_engine
from portfolio.db.migrations_runner import apply_migrations

__all__ = [
    "get_engine",
    "reset_engine",
    "apply_migrations",
]
