"""Domain event constants and publisher.

Defines the event types emitted by the reorder engine and the section
sync, and a simple publish() callable that logs and buffers them.
"""

from __future__ import annotations

from collections import deque
from typing import Any, Deque, Dict, List
import logging

logger = logging.getLogger(__name__)

MENU_REORDERED = "menu.reordered"
MENU_SYNCED = "menu.synced"
MENU_SYNC_FAILED = "menu.sync_failed"


# Most recent events only; older entries drop off in long-running processes
EVENT_BUFFER_SIZE = 256
EVENT_BUFFER: Deque[Dict[str, Any]] = deque(maxlen=EVENT_BUFFER_SIZE)


def publish(event_type: str, payload: Dict[str, Any]) -> None:
    """Publish a domain event.

    Events are logged for observability and buffered for inspection.
    """
    logger.info("event_publish type=%s payload=%s", event_type, payload)
    EVENT_BUFFER.append({"type": event_type, "payload": payload})


def get_buffered_events(clear: bool = True) -> List[Dict[str, Any]]:
    """Return buffered domain events; optionally clear the buffer."""
    events = list(EVENT_BUFFER)
    if clear:
        EVENT_BUFFER.clear()
    return events


__all__ = [
    "MENU_REORDERED",
    "MENU_SYNCED",
    "MENU_SYNC_FAILED",
    "publish",
    "get_buffered_events",
    "EVENT_BUFFER",
    "EVENT_BUFFER_SIZE",
]
