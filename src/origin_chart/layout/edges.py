"""Connection edges between consecutive step rows."""

from __future__ import annotations

__all__ = ["build_connections", "edge_path"]

from origin_chart.layout.connectivity import allowed_positions, is_position_allowed
from origin_chart.layout.constants import CARD_HEIGHT, CARD_WIDTH, X_GAP, Y_GAP
from origin_chart.layout.positions import get_positions
from origin_chart.parser.model import Edge, SelectionMap, StepLayout


def _fmt(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return f"{value:g}"


def edge_path(from_col: int, from_row: int, to_col: int, to_row: int) -> str:
    """Quadratic curve from the bottom-center of one cell to the top-center of another.

    Columns and rows are 1-based grid coordinates. The control point is the
    segment midpoint.
    """
    x1 = (from_col - 1) * (CARD_WIDTH + X_GAP) + CARD_WIDTH / 2
    y1 = (from_row - 1) * (CARD_HEIGHT + Y_GAP) + CARD_HEIGHT
    x2 = (to_col - 1) * (CARD_WIDTH + X_GAP) + CARD_WIDTH / 2
    y2 = (to_row - 1) * (CARD_HEIGHT + Y_GAP)
    cx = (x1 + x2) / 2
    cy = (y1 + y2) / 2
    return (
        f"M {_fmt(x1)} {_fmt(y1)} "
        f"Q {_fmt(cx)} {_fmt(cy)} "
        f"{_fmt(x2)} {_fmt(y2)}"
    )


def build_connections(steps: list[StepLayout], selections: SelectionMap) -> list[Edge]:
    """Emit edges for every consecutive pair of step rows.

    A row with a selection only fans out from the selected card; a row with
    no selection fans out from every card so all reachable paths are shown.
    """
    connections: list[Edge] = []

    for from_step, to_step in zip(steps, steps[1:]):
        selection = selections.get(from_step.step_key)

        for from_card in from_step.cards:
            if not (from_card.is_selected or not from_step.has_selection):
                continue

            path_node = selection if from_card.is_selected else from_card.node
            allowed = allowed_positions(get_positions(path_node))

            for to_card in to_step.cards:
                if not is_position_allowed(to_card.node, allowed):
                    continue
                connections.append(Edge(
                    id=f"conn-{from_card.id}-{to_card.id}",
                    from_step=from_step.step_index,
                    to_step=to_step.step_index,
                    from_position=from_card.position,
                    to_position=to_card.position,
                    from_id=from_card.id,
                    to_id=to_card.id,
                    is_active=from_card.is_selected,
                    is_valid=from_card.is_selected and to_card.is_selectable,
                    path_data=edge_path(
                        from_card.grid_column, from_card.grid_row,
                        to_card.grid_column, to_card.grid_row,
                    ),
                ))

    return connections
