"""Errors raised by the admin API client."""

from __future__ import annotations


class ApiClientError(Exception):
    """The API answered with a failure envelope or an unreadable body."""

    def __init__(self, code: str, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.status_code = status_code


class NetworkError(ApiClientError):
    """No response was received (connection refused, timeout, DNS...)."""

    def __init__(self, message: str) -> None:
        super().__init__("NETWORK_ERROR", message)


__all__ = ["ApiClientError", "NetworkError"]
