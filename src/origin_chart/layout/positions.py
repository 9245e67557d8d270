"""Position resolution for origins and selections.

Normalizes whatever slot data a node carries into a sorted, non-empty list
of slots in [MIN_POSITION, MAX_POSITION].
"""

from __future__ import annotations

__all__ = ["get_positions", "primary_position"]

from typing import Any

from origin_chart.layout.constants import CENTER_POSITION, MAX_POSITION, MIN_POSITION


def _is_slot(value: Any) -> bool:
    # bool is an int subclass but never a slot
    return (
        isinstance(value, int)
        and not isinstance(value, bool)
        and MIN_POSITION <= value <= MAX_POSITION
    )


def get_positions(node: Any) -> list[int]:
    """Return the node's slots, sorted and de-duplicated.

    Falls back to the center slot when the node is missing, has no
    positions, or none of its positions is a valid slot.
    """
    raw = getattr(node, "positions", None)
    if isinstance(raw, int) and not isinstance(raw, bool):
        raw = [raw]
    if not raw:
        return [CENTER_POSITION]
    try:
        slots = sorted({p for p in raw if _is_slot(p)})
    except TypeError:
        slots = []
    return slots or [CENTER_POSITION]


def primary_position(node: Any) -> int:
    """Return the slot used to sort and place the node's card."""
    explicit = getattr(node, "primary_position", None)
    if _is_slot(explicit):
        return explicit
    return get_positions(node)[0]

