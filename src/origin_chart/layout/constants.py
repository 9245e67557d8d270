"""Layout constants used across layout modules.

Centralizes the slot range and the chart cell geometry shared by
steps.py, edges.py and engine.py.
"""

# ---------------------------------------------------------------------------
# Slots
# ---------------------------------------------------------------------------
MIN_POSITION: int = 0
"""Leftmost slot in a step row."""

MAX_POSITION: int = 8
"""Rightmost slot in a step row."""

CENTER_POSITION: int = 4
"""Slot assumed for an origin with missing or malformed position data."""

# ---------------------------------------------------------------------------
# Card geometry (pixels)
# ---------------------------------------------------------------------------
CARD_WIDTH: int = 150
"""Width of one origin card cell."""

CARD_HEIGHT: int = 200
"""Height of one origin card cell."""

X_GAP: int = 20
"""Horizontal gap between card columns."""

Y_GAP: int = 40
"""Vertical gap between step rows."""
