"""Slot connectivity between consecutive steps.

Position N connects to positions N-1, N and N+1, clamped to the slot range.
The rule is symmetric, so it holds the same whichever way the chart is
traversed; direction only decides which neighbouring selection counts as
the last confirmed one.
"""

from __future__ import annotations

__all__ = [
    "adjacent_positions",
    "allowed_positions",
    "is_position_allowed",
    "meets_requirements",
    "resolve_last_selection",
    "resolve_path_positions",
]

import logging
from collections.abc import Iterable
from typing import Any

from origin_chart.layout.constants import MAX_POSITION, MIN_POSITION
from origin_chart.layout.positions import get_positions
from origin_chart.parser.model import STEP_ORDER, Direction, SelectionLike, SelectionMap

logger = logging.getLogger(__name__)


def adjacent_positions(position: int) -> list[int]:
    """Return the slots reachable from ``position`` in the next step."""
    result = []
    if position > MIN_POSITION:
        result.append(position - 1)
    result.append(position)
    if position < MAX_POSITION:
        result.append(position + 1)
    return result


def allowed_positions(source_positions: Iterable[int] | None) -> set[int] | None:
    """Expand a set of slots by the +/-1 rule.

    Returns None when there is no source, meaning every slot is allowed.
    """
    if source_positions is None:
        return None
    allowed: set[int] = set()
    for p in source_positions:
        allowed.update(adjacent_positions(p))
    return allowed


def is_position_allowed(node: Any, allowed: set[int] | None) -> bool:
    """True if any of the node's slots is in ``allowed``."""
    if allowed is None:
        return True
    return any(p in allowed for p in get_positions(node))


def resolve_path_positions(node: Any, last_selection: SelectionLike | None) -> list[int]:
    """Return the node's slots that connect to ``last_selection``.

    An empty intersection yields the node's full, unfiltered slot list
    rather than an empty one.
    """
    positions = get_positions(node)
    if last_selection is None:
        return positions

    allowed = allowed_positions(get_positions(last_selection))
    active = [p for p in positions if p in allowed]
    if not active:
        logger.debug(
            "Origin %s has no slot adjacent to %s; using all slots %s",
            getattr(node, "id", None), last_selection.id, positions,
        )
        return positions
    return active


def meets_requirements(node: Any, last_selection: SelectionLike | None) -> bool:
    """Check the node's previous/excluded step lists against ``last_selection``."""
    if last_selection is None:
        return True
    requirements = getattr(node, "requirements", None)
    if requirements is None:
        return True

    last_id = last_selection.id
    previous = requirements.previous_steps or []
    if previous and last_id not in previous:
        return False
    excluded = requirements.excluded_steps or []
    if last_id in excluded:
        return False
    return True


def resolve_last_selection(
    step_index: int,
    selections: SelectionMap,
    direction: Direction = Direction.FORWARD,
) -> SelectionLike | None:
    """Find the nearest confirmed selection relative to ``step_index``.

    FORWARD walks toward lower step indices, BACKWARD toward higher ones.
    The step at ``step_index`` itself is never considered.
    """
    if direction == Direction.FORWARD:
        indices = range(step_index - 1, -1, -1)
    else:
        indices = range(step_index + 1, len(STEP_ORDER))

    for i in indices:
        selection = selections.get(STEP_ORDER[i])
        if selection is not None:
            logger.debug(
                "Last selection for step %d (%s): %s at step %d",
                step_index, direction.value, selection.id, i,
            )
            return selection
    return None
