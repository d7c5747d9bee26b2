"""Drag-and-drop reorder state and its transitions.

Pure functions: ``(state, event args) -> new state``. No IO, no clock, no
mutation of the input; the same gesture sequence always yields the same
state, so the tool can be tested without a browser.

``pending_changes`` is never set from a gesture directly. It is always
recomputed by comparing the current id sequence with ``original_order``
position by position, so dragging an item away and back clears it again.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Sequence, Tuple

from portfolio.models.menu import MenuItem

LOADING = "loading"
READY = "ready"
LOAD_ERROR = "error"

SUCCESS = "success"
ERROR = "error"

LOAD_ERROR_TEXT = "Could not load the menu items."
SAVE_ERROR_TEXT = "Could not save the order. Try again."
NETWORK_ERROR_TEXT = "Could not reach the server."


@dataclass(frozen=True)
class Feedback:
    kind: str
    text: str


@dataclass(frozen=True)
class ReorderState:
    items: Tuple[MenuItem, ...] = ()
    original_order: Tuple[int, ...] = ()
    dragged_index: Optional[int] = None
    drop_target_index: Optional[int] = None
    pending_changes: FrozenSet[int] = frozenset()
    save_in_flight: bool = False
    status: str = LOADING
    feedback: Optional[Feedback] = None

    @property
    def ids(self) -> Tuple[int, ...]:
        return tuple(item.id for item in self.items)

    @property
    def has_pending(self) -> bool:
        return bool(self.pending_changes)


def initial_state() -> ReorderState:
    return ReorderState()


def derive_pending_changes(sequence: Sequence[int], original_order: Sequence[int]) -> FrozenSet[int]:
    """Ids whose rank in ``sequence`` differs from ``original_order``."""
    return frozenset(
        item_id
        for rank, item_id in enumerate(sequence)
        if rank >= len(original_order) or original_order[rank] != item_id
    )


def _in_range(state: ReorderState, index: Optional[int]) -> bool:
    return isinstance(index, int) and 0 <= index < len(state.items)


# ---------------------------------------------------------------------------
# Load
# ---------------------------------------------------------------------------


def load_succeeded(state: ReorderState, items: Iterable[Any]) -> ReorderState:
    """Populate from the full (active and inactive) item list as fetched."""
    loaded = tuple(MenuItem.model_validate(i) for i in items)
    return replace(
        state,
        items=loaded,
        original_order=tuple(i.id for i in loaded),
        dragged_index=None,
        drop_target_index=None,
        pending_changes=frozenset(),
        status=READY,
        feedback=None,
    )


def load_failed(state: ReorderState, text: str = LOAD_ERROR_TEXT) -> ReorderState:
    return replace(state, items=(), original_order=(), status=LOAD_ERROR, feedback=Feedback(ERROR, text))


# ---------------------------------------------------------------------------
# Gestures
# ---------------------------------------------------------------------------


def drag_start(state: ReorderState, index: int) -> ReorderState:
    # The list is frozen while a save is in flight
    if state.save_in_flight or not _in_range(state, index):
        return state
    return replace(state, dragged_index=index)


def drag_over(state: ReorderState, index: int) -> ReorderState:
    """Presentation hint only; the list is not touched."""
    if not _in_range(state, index):
        return state
    return replace(state, drop_target_index=index)


def drag_leave(state: ReorderState) -> ReorderState:
    return replace(state, drop_target_index=None)


def drop(state: ReorderState, target_index: int) -> ReorderState:
    """Move the dragged row to ``target_index`` (splice, not swap).

    Rows between source and target shift by one; every row's ``order`` is
    reassigned to its new 0-based position.
    """
    from_index = state.dragged_index
    if state.save_in_flight or from_index is None or from_index == target_index:
        return state
    if not _in_range(state, target_index) or not _in_range(state, from_index):
        return state

    rows: List[MenuItem] = list(state.items)
    moved = rows.pop(from_index)
    rows.insert(target_index, moved)
    reordered = tuple(row.model_copy(update={"order": position}) for position, row in enumerate(rows))

    return replace(
        state,
        items=reordered,
        pending_changes=derive_pending_changes([r.id for r in reordered], state.original_order),
        dragged_index=None,
        drop_target_index=None,
        feedback=None,
    )


def drag_end(state: ReorderState) -> ReorderState:
    """Clear gesture tracking unconditionally (also covers cancelled drags)."""
    return replace(state, dragged_index=None, drop_target_index=None)


# ---------------------------------------------------------------------------
# Save
# ---------------------------------------------------------------------------


def can_save(state: ReorderState) -> bool:
    return state.has_pending and not state.save_in_flight


def begin_save(state: ReorderState) -> ReorderState:
    if not can_save(state):
        return state
    # A drag left open when Save is pressed is abandoned
    return replace(state, save_in_flight=True, dragged_index=None, drop_target_index=None, feedback=None)


def reorder_payload(state: ReorderState) -> Dict[str, List[Dict[str, int]]]:
    """Request body for the reorder endpoint: the complete list, not the diff."""
    return {"items": [{"id": item.id, "order": item.order} for item in state.items]}


def save_succeeded(state: ReorderState, updated: Optional[int] = None) -> ReorderState:
    count = len(state.items) if updated is None else int(updated)
    return replace(
        state,
        original_order=state.ids,
        pending_changes=frozenset(),
        save_in_flight=False,
        feedback=Feedback(SUCCESS, f"Order saved. {count} items updated."),
    )


def save_failed(state: ReorderState, text: str = SAVE_ERROR_TEXT) -> ReorderState:
    """Keep items and pending changes so the user can retry without re-dragging."""
    return replace(state, save_in_flight=False, feedback=Feedback(ERROR, text))


# ---------------------------------------------------------------------------
# Presentation helpers
# ---------------------------------------------------------------------------


def save_button_label(state: ReorderState) -> str:
    if state.save_in_flight:
        return "Saving..."
    count = len(state.pending_changes)
    if not count:
        return "No pending changes"
    return f"Save order ({count} change{'s' if count > 1 else ''})"


def row_highlight(state: ReorderState, index: int) -> str:
    """``drop-target`` while hovered, ``changed`` when pending, else ``normal``."""
    if state.drop_target_index == index:
        return "drop-target"
    if _in_range(state, index) and state.items[index].id in state.pending_changes:
        return "changed"
    return "normal"


__all__ = [
    "Feedback",
    "ReorderState",
    "initial_state",
    "derive_pending_changes",
    "load_succeeded",
    "load_failed",
    "drag_start",
    "drag_over",
    "drag_leave",
    "drop",
    "drag_end",
    "can_save",
    "begin_save",
    "reorder_payload",
    "save_succeeded",
    "save_failed",
    "save_button_label",
    "row_highlight",
]
