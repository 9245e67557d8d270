"""Per-step card layout.

Builds one StepLayout row: grid placement and selection state for every
origin in the step, gated by the last confirmed selection in guided mode.
"""

from __future__ import annotations

__all__ = ["build_step_layout", "default_step_label"]

import re
from collections.abc import Callable, Iterable

from origin_chart.layout.connectivity import (
    allowed_positions,
    is_position_allowed,
    meets_requirements,
    resolve_last_selection,
)
from origin_chart.layout.positions import get_positions, primary_position
from origin_chart.parser.model import (
    STEP_ORDER,
    Card,
    Direction,
    OriginNode,
    SelectionLike,
    SelectionMap,
    StepKey,
    StepLayout,
)

StepLabeler = Callable[[StepKey], str]

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z])(?=[A-Z])")


def default_step_label(step: StepKey) -> str:
    """'trialsAndTravails' -> 'Trials And Travails'."""
    words = _CAMEL_BOUNDARY.split(step.value)
    return " ".join(w[:1].upper() + w[1:] for w in words)


def _is_selectable(
    node: OriginNode,
    last_selection: SelectionLike | None,
    allowed: set[int] | None,
    guided_mode: bool,
) -> bool:
    if not guided_mode:
        return True
    if last_selection is None:
        return True
    if not meets_requirements(node, last_selection):
        return False
    return is_position_allowed(node, allowed)


def build_step_layout(
    nodes: Iterable[OriginNode],
    step_index: int,
    selections: SelectionMap,
    guided_mode: bool = True,
    direction: Direction = Direction.FORWARD,
    step_label: StepLabeler = default_step_label,
) -> StepLayout:
    """Compute the card row for the step at ``step_index``.

    ``nodes`` should already be sorted by primary position; duplicates by
    id are skipped (first occurrence wins).
    """
    step_key = STEP_ORDER[step_index]
    selected = selections.get(step_key)

    last_selection = resolve_last_selection(step_index, selections, direction)
    allowed = (
        allowed_positions(get_positions(last_selection))
        if last_selection is not None
        else None
    )

    cards: list[Card] = []
    max_position = 0
    seen: set[str] = set()

    for node in nodes:
        if node.id in seen:
            continue
        seen.add(node.id)

        positions = get_positions(node)
        position = primary_position(node)
        max_position = max(max_position, position)

        is_selectable = _is_selectable(node, last_selection, allowed, guided_mode)

        cards.append(Card(
            id=node.id,
            position=position,
            grid_column=position + 1,
            grid_row=step_index + 1,
            is_selected=selected is not None and selected.id == node.id,
            is_selectable=is_selectable,
            is_valid_next=is_position_allowed(node, allowed),
            is_disabled=guided_mode and not is_selectable,
            is_multi_position=len(positions) > 1,
            all_positions=positions,
            name=node.name,
            img=node.img,
            xp_cost=node.xp_cost,
            is_advanced=node.is_advanced,
            has_choices=node.has_choices,
            node=node,
        ))

    return StepLayout(
        step_key=step_key,
        step_index=step_index,
        step_label=step_label(step_key),
        cards=cards,
        max_position=max_position,
        has_selection=selected is not None,
    )
