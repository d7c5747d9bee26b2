"""Admin-side menu reorder tool.

``reorder_state`` holds the drag-and-drop state and its pure transitions;
``reorder_controller`` drives them from gestures and talks to the API.
"""

from portfolio.client.errors import ApiClientError, NetworkError
from portfolio.client.reorder_controller import MenuReorderController
from portfolio.client.reorder_state import ReorderState, initial_state

__all__ = [
    "ApiClientError",
    "NetworkError",
    "MenuReorderController",
    "ReorderState",
    "initial_state",
]
