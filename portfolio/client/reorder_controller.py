"""Admin menu reorder controller.

Owns one ``ReorderState`` and feeds it gesture events and API results.
Runs on a single event loop: the only suspension points are the initial
fetch and the save request, and at most one save is in flight at a time.
"""

from __future__ import annotations

from typing import Any, Optional
import logging

import httpx
from pydantic import ValidationError

from portfolio.client import reorder_state as rs
from portfolio.client.errors import ApiClientError, NetworkError
from portfolio.config import ClientConfig, load_config

logger = logging.getLogger(__name__)

MENU_ALL_PATH = "/navigation/menu/all"
REORDER_PATH = "/navigation/menu/reorder"


def _unwrap(response: httpx.Response) -> Any:
    """Return ``data`` from a success envelope or raise ``ApiClientError``."""
    try:
        body = response.json()
    except ValueError as exc:
        raise ApiClientError(
            "PARSE_ERROR",
            f"Response from {response.request.url} is not valid JSON (status {response.status_code}).",
            response.status_code,
        ) from exc
    if not isinstance(body, dict) or body.get("success") is not True or response.is_error:
        code = body.get("error", "HTTP_ERROR") if isinstance(body, dict) else "HTTP_ERROR"
        message = body.get("message", "Request failed") if isinstance(body, dict) else "Request failed"
        raise ApiClientError(str(code), str(message), response.status_code)
    return body.get("data")


class MenuReorderController:
    def __init__(self, client: httpx.AsyncClient, *, owns_client: bool = False) -> None:
        self._client = client
        self._owns_client = owns_client
        self.state: rs.ReorderState = rs.initial_state()

    @classmethod
    def from_config(cls, cfg: Optional[ClientConfig] = None) -> "MenuReorderController":
        cfg = cfg or load_config().client
        client = httpx.AsyncClient(base_url=cfg.base_url, timeout=cfg.timeout_seconds)
        return cls(client, owns_client=True)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "MenuReorderController":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def _send(self, method: str, path: str, **kwargs: Any) -> Any:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.RequestError as exc:
            raise NetworkError(f"Could not reach the API: {exc}") from exc
        return _unwrap(response)

    # -- lifecycle ---------------------------------------------------------

    async def load(self) -> rs.ReorderState:
        """Fetch every menu item (active and inactive). No automatic retry."""
        try:
            items = await self._send("GET", MENU_ALL_PATH)
        except ApiClientError as exc:
            logger.error("menu_reorder.load_failed code=%s message=%s", exc.code, exc.message)
            self.state = rs.load_failed(self.state)
            return self.state
        try:
            if not isinstance(items, list):
                raise TypeError(f"expected a list of menu items, got {type(items).__name__}")
            self.state = rs.load_succeeded(self.state, items)
        except (ValidationError, TypeError) as exc:
            logger.error("menu_reorder.load_failed code=BAD_PAYLOAD message=%s", exc)
            self.state = rs.load_failed(self.state)
            return self.state
        logger.info("menu_reorder.loaded count=%s", len(self.state.items))
        return self.state

    # -- gestures ----------------------------------------------------------

    def drag_start(self, index: int) -> rs.ReorderState:
        self.state = rs.drag_start(self.state, index)
        return self.state

    def drag_over(self, index: int) -> rs.ReorderState:
        self.state = rs.drag_over(self.state, index)
        return self.state

    def drag_leave(self) -> rs.ReorderState:
        self.state = rs.drag_leave(self.state)
        return self.state

    def drop(self, target_index: int) -> rs.ReorderState:
        self.state = rs.drop(self.state, target_index)
        return self.state

    def drag_end(self) -> rs.ReorderState:
        self.state = rs.drag_end(self.state)
        return self.state

    def move(self, from_index: int, to_index: int) -> rs.ReorderState:
        """Full gesture: start, hover, drop, end."""
        self.drag_start(from_index)
        self.drag_over(to_index)
        self.drop(to_index)
        return self.drag_end()

    # -- save --------------------------------------------------------------

    @property
    def can_save(self) -> bool:
        return rs.can_save(self.state)

    async def save(self) -> bool:
        """Submit the complete ordering; return True when it was persisted.

        Ignored when nothing is pending or a save is already running. On
        failure the items and pending changes are kept for a retry.
        """
        if not rs.can_save(self.state):
            return False
        self.state = rs.begin_save(self.state)
        payload = rs.reorder_payload(self.state)
        try:
            data = await self._send("PATCH", REORDER_PATH, json=payload)
        except NetworkError as exc:
            logger.error("menu_reorder.save_failed code=%s message=%s", exc.code, exc.message)
            self.state = rs.save_failed(self.state, rs.NETWORK_ERROR_TEXT)
            return False
        except ApiClientError as exc:
            logger.error(
                "menu_reorder.save_failed code=%s status=%s message=%s",
                exc.code,
                exc.status_code,
                exc.message,
            )
            self.state = rs.save_failed(self.state, rs.SAVE_ERROR_TEXT)
            return False
        updated = data.get("updated") if isinstance(data, dict) else None
        self.state = rs.save_succeeded(self.state, updated)
        logger.info("menu_reorder.saved updated=%s", updated)
        return True


__all__ = ["MenuReorderController", "MENU_ALL_PATH", "REORDER_PATH"]
