"""Layout coordinator: groups origins by step, lays out each row, then connects rows.

The whole chart is recomputed from scratch on every call; nothing is cached
and no input is mutated.
"""

from __future__ import annotations

__all__ = [
    "calculate_chart_dimensions",
    "compute_full_chart",
    "get_valid_next_options",
    "group_by_step",
]

import logging
from collections import defaultdict
from collections.abc import Iterable

from origin_chart.layout.connectivity import (
    allowed_positions,
    is_position_allowed,
    meets_requirements,
)
from origin_chart.layout.constants import CARD_HEIGHT, CARD_WIDTH, X_GAP, Y_GAP
from origin_chart.layout.edges import build_connections
from origin_chart.layout.positions import get_positions, primary_position
from origin_chart.layout.steps import StepLabeler, build_step_layout, default_step_label
from origin_chart.parser.model import (
    STEP_ORDER,
    ChartDimensions,
    ChartLayout,
    Direction,
    OriginNode,
    SelectionLike,
    SelectionMap,
    StepKey,
)

logger = logging.getLogger(__name__)


def group_by_step(origins: Iterable[OriginNode]) -> dict[StepKey, list[OriginNode]]:
    """Bucket origins by step, each bucket sorted by primary position.

    Origins without a recognised step are left out.
    """
    groups: dict[StepKey, list[OriginNode]] = defaultdict(list)
    for origin in origins:
        step = StepKey.parse(origin.step)
        if step is None:
            logger.debug("Dropping origin %s: no recognised step", origin.id)
            continue
        groups[step].append(origin)

    # Stable sort keeps catalog order among equal positions
    for nodes in groups.values():
        nodes.sort(key=primary_position)
    return dict(groups)


def compute_full_chart(
    origins: Iterable[OriginNode],
    selections: SelectionMap,
    guided_mode: bool = True,
    direction: Direction = Direction.FORWARD,
    step_label: StepLabeler = default_step_label,
) -> ChartLayout:
    """Compute the layout of every step row and the connections between them."""
    groups = group_by_step(origins)
    layout = ChartLayout()

    # Rows are always built in canonical forward order
    for step_index, step_key in enumerate(STEP_ORDER):
        step_layout = build_step_layout(
            groups.get(step_key, []),
            step_index,
            selections,
            guided_mode=guided_mode,
            direction=direction,
            step_label=step_label,
        )
        layout.steps.append(step_layout)
        layout.max_columns = max(layout.max_columns, step_layout.max_position + 1)

    layout.connections = build_connections(layout.steps, selections)
    return layout


def get_valid_next_options(
    current_selection: SelectionLike | None,
    candidates: Iterable[OriginNode],
) -> list[OriginNode]:
    """Filter ``candidates`` to those reachable from ``current_selection``.

    Applies the same adjacency and requirement checks as guided mode.
    """
    candidates = list(candidates)
    if current_selection is None:
        return candidates

    allowed = allowed_positions(get_positions(current_selection))
    return [
        node for node in candidates
        if is_position_allowed(node, allowed)
        and meets_requirements(node, current_selection)
    ]


def calculate_chart_dimensions(max_columns: int, num_rows: int) -> ChartDimensions:
    """Pixel dimensions of a chart with the given grid size."""
    return ChartDimensions(
        width=max_columns * (CARD_WIDTH + X_GAP),
        height=num_rows * (CARD_HEIGHT + Y_GAP),
        card_width=CARD_WIDTH,
        card_height=CARD_HEIGHT,
        column_gap=X_GAP,
        row_gap=Y_GAP,
    )
