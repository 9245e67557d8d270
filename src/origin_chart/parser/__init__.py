"""Origin catalog model and loading.

Public API:
- OriginNode, Selection, StepKey, Direction: input model
- load_catalog / parse_catalog: build OriginNodes from compendium JSON
- validate_catalog: report data problems before layout
"""

from origin_chart.parser.catalog import (
    load_catalog,
    parse_catalog,
    parse_origin,
    parse_selections,
    validate_catalog,
)
from origin_chart.parser.model import (
    STEP_ORDER,
    Direction,
    OriginNode,
    Requirements,
    Selection,
    StepKey,
)

__all__ = [
    "STEP_ORDER",
    "Direction",
    "OriginNode",
    "Requirements",
    "Selection",
    "StepKey",
    "load_catalog",
    "parse_catalog",
    "parse_origin",
    "parse_selections",
    "validate_catalog",
]
