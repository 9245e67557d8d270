"""Chart layout subpackage.

Public API:
- compute_full_chart: lay out every step row and the connections between them
- get_valid_next_options: filter candidates reachable from one selection
- calculate_chart_dimensions: pixel size of a chart grid
- count_complete_paths / randomize_selections: whole-path queries
"""

from origin_chart.layout.engine import (
    calculate_chart_dimensions,
    compute_full_chart,
    get_valid_next_options,
)
from origin_chart.layout.paths import count_complete_paths, randomize_selections

__all__ = [
    "calculate_chart_dimensions",
    "compute_full_chart",
    "count_complete_paths",
    "get_valid_next_options",
    "randomize_selections",
]
