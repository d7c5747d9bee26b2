"""Central error taxonomy and mapping.

Single source of truth for the error codes and HTTP statuses reported in
the failure envelope ``{success: false, error, message}``. Logic modules
raise these exceptions; the handlers in ``portfolio.http.envelope`` render
them.
"""

from __future__ import annotations

ERROR_MAP = {
    "invalid_input": {"code": "INVALID_INPUT", "status": 400},
    "not_found": {"code": "NOT_FOUND", "status": 404},
    "storage_error": {"code": "STORAGE_ERROR", "status": 500},
    "internal_error": {"code": "INTERNAL_ERROR", "status": 500},
}


class PortfolioError(Exception):
    """Base class for errors surfaced to API callers."""

    kind = "internal_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    @property
    def code(self) -> str:
        return ERROR_MAP[self.kind]["code"]

    @property
    def status(self) -> int:
        return int(ERROR_MAP[self.kind]["status"])


class InvalidInput(PortfolioError):
    """Malformed or empty request; raised before any storage access."""

    kind = "invalid_input"


class NotFound(PortfolioError):
    kind = "not_found"


class StorageError(PortfolioError):
    """A transaction was aborted (connectivity, constraint, unknown row)."""

    kind = "storage_error"


__all__ = [
    "ERROR_MAP",
    "PortfolioError",
    "InvalidInput",
    "NotFound",
    "StorageError",
]
