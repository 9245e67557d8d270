"""Whole-path queries over the chart, using a networkx DAG of cards.

Nodes are ``(step_index, card_id)`` tuples so an id reused across steps
cannot merge two cards.
"""

from __future__ import annotations

__all__ = ["build_path_graph", "count_complete_paths", "randomize_selections"]

import logging
import random
from collections.abc import Iterable

import networkx as nx

from origin_chart.layout.connectivity import meets_requirements
from origin_chart.layout.engine import compute_full_chart
from origin_chart.parser.model import (
    STEP_ORDER,
    ChartLayout,
    OriginNode,
    Selection,
    StepKey,
)

logger = logging.getLogger(__name__)


def build_path_graph(layout: ChartLayout) -> nx.DiGraph:
    """Turn a chart layout into a DAG with one edge per connection."""
    G = nx.DiGraph()
    for step in layout.steps:
        for card in step.cards:
            G.add_node(
                (step.step_index, card.id),
                step_index=step.step_index,
                position=card.position,
                selectable=card.is_selectable,
                node=card.node,
            )
    for edge in layout.connections:
        G.add_edge(
            (edge.from_step, edge.from_id),
            (edge.to_step, edge.to_id),
            active=edge.is_active,
            valid=edge.is_valid,
        )
    return G


def _open_path_graph(origins: list[OriginNode], guided_mode: bool) -> nx.DiGraph:
    """Every transition a path could take starting from no selections."""
    layout = compute_full_chart(origins, {}, guided_mode=guided_mode)
    G = build_path_graph(layout)

    if not guided_mode:
        # Free mode ignores adjacency: any card may follow any card
        for from_step, to_step in zip(layout.steps, layout.steps[1:]):
            for a in from_step.cards:
                for b in to_step.cards:
                    G.add_edge((from_step.step_index, a.id), (to_step.step_index, b.id))
        return G

    blocked = [
        (u, v) for u, v in G.edges
        if not meets_requirements(G.nodes[v]["node"], G.nodes[u]["node"])
    ]
    G.remove_edges_from(blocked)
    return G


def count_complete_paths(origins: Iterable[OriginNode], guided_mode: bool = True) -> int:
    """Number of distinct six-step paths a character could take."""
    G = _open_path_graph(list(origins), guided_mode)
    last_index = len(STEP_ORDER) - 1

    ways: dict[tuple[int, str], int] = {}
    for n in nx.topological_sort(G):
        if G.nodes[n]["step_index"] == 0:
            ways[n] = 1
        else:
            ways[n] = sum(ways[p] for p in G.predecessors(n))

    return sum(
        count for n, count in ways.items()
        if G.nodes[n]["step_index"] == last_index
    )


def randomize_selections(
    origins: Iterable[OriginNode],
    guided_mode: bool = True,
    rng: random.Random | None = None,
) -> dict[StepKey, Selection]:
    """Pick a random selectable origin for each step, first to last.

    The chart is recomputed after every pick so each choice is gated by the
    one before it. Steps with nothing selectable stay unselected.
    """
    rng = rng or random.Random()
    origins = list(origins)
    selections: dict[StepKey, Selection] = {}

    for step_index, step_key in enumerate(STEP_ORDER):
        layout = compute_full_chart(origins, selections, guided_mode=guided_mode)
        candidates = [c for c in layout.steps[step_index].cards if c.is_selectable]
        if not candidates:
            logger.debug("No selectable origin for %s", step_key.value)
            continue
        choice = rng.choice(candidates)
        selections[step_key] = Selection.of(choice.node)

    return selections
