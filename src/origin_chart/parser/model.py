"""Data model for origin path charts."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union


class StepKey(Enum):
    """One of the six ordered stages of the origin path."""

    HOME_WORLD = "homeWorld"
    BIRTHRIGHT = "birthright"
    LURE_OF_THE_VOID = "lureOfTheVoid"
    TRIALS_AND_TRAVAILS = "trialsAndTravails"
    MOTIVATION = "motivation"
    CAREER = "career"

    @classmethod
    def parse(cls, value: Any) -> StepKey | None:
        """Return the step for a raw value, or None if it is not recognised."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None

    @property
    def index(self) -> int:
        return STEP_ORDER.index(self)


STEP_ORDER: tuple[StepKey, ...] = (
    StepKey.HOME_WORLD,
    StepKey.BIRTHRIGHT,
    StepKey.LURE_OF_THE_VOID,
    StepKey.TRIALS_AND_TRAVAILS,
    StepKey.MOTIVATION,
    StepKey.CAREER,
)


class Direction(Enum):
    """Traversal direction used to pick the authoritative neighbouring selection."""

    FORWARD = "forward"
    BACKWARD = "backward"


@dataclass
class Requirements:
    """Explicit gating on the last confirmed selection."""

    previous_steps: list[str] = field(default_factory=list)
    excluded_steps: list[str] = field(default_factory=list)
    text: str = ""

    @property
    def is_empty(self) -> bool:
        return not (self.text or self.previous_steps or self.excluded_steps)


@dataclass
class OriginNode:
    """A selectable catalog entry belonging to one step."""

    id: str
    step: StepKey | None = None
    positions: list[int] = field(default_factory=list)
    requirements: Requirements = field(default_factory=Requirements)
    name: str = ""
    img: str = ""
    identifier: str = ""
    # Compendium document id, when the record had one
    source_id: str = ""
    xp_cost: int = 0
    is_advanced: bool = False
    has_choices: bool = False
    # Explicit primary slot; None means "first position"
    primary_position: int | None = None


@dataclass(frozen=True)
class Selection:
    """The narrow read-only view of a confirmed choice: id and positions only."""

    id: str
    positions: tuple[int, ...] = ()

    @classmethod
    def of(cls, node: OriginNode) -> Selection:
        return cls(id=node.id, positions=tuple(node.positions))


# Either value satisfies the id/positions shape the engine reads.
SelectionLike = Union[Selection, OriginNode]
SelectionMap = Mapping[StepKey, SelectionLike]


@dataclass
class Card:
    """View data for one origin within a step row."""

    id: str
    position: int
    grid_column: int
    grid_row: int
    is_selected: bool
    is_selectable: bool
    is_valid_next: bool
    is_disabled: bool
    is_multi_position: bool
    all_positions: list[int]
    name: str = ""
    img: str = ""
    xp_cost: int = 0
    is_advanced: bool = False
    has_choices: bool = False
    node: OriginNode | None = field(default=None, repr=False, compare=False)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "img": self.img,
            "position": self.position,
            "gridColumn": self.grid_column,
            "gridRow": self.grid_row,
            "isSelected": self.is_selected,
            "isSelectable": self.is_selectable,
            "isValidNext": self.is_valid_next,
            "isDisabled": self.is_disabled,
            "isMultiPosition": self.is_multi_position,
            "allPositions": list(self.all_positions),
            "xpCost": self.xp_cost,
            "isAdvanced": self.is_advanced,
            "hasChoices": self.has_choices,
        }


@dataclass
class StepLayout:
    """All cards of one step plus row-level summary data."""

    step_key: StepKey
    step_index: int
    step_label: str = ""
    cards: list[Card] = field(default_factory=list)
    max_position: int = 0
    has_selection: bool = False

    @property
    def selected_card(self) -> Card | None:
        for card in self.cards:
            if card.is_selected:
                return card
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "stepKey": self.step_key.value,
            "stepIndex": self.step_index,
            "stepLabel": self.step_label,
            "cards": [c.to_dict() for c in self.cards],
            "maxPosition": self.max_position,
            "hasSelection": self.has_selection,
        }


@dataclass
class Edge:
    """A renderable connection between cards of consecutive steps."""

    id: str
    from_step: int
    to_step: int
    from_position: int
    to_position: int
    from_id: str
    to_id: str
    is_active: bool
    is_valid: bool
    path_data: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "fromStep": self.from_step,
            "toStep": self.to_step,
            "fromPosition": self.from_position,
            "toPosition": self.to_position,
            "fromId": self.from_id,
            "toId": self.to_id,
            "isActive": self.is_active,
            "isValid": self.is_valid,
            "pathData": self.path_data,
        }


@dataclass
class ChartLayout:
    """Complete chart: one StepLayout per canonical step plus connections."""

    steps: list[StepLayout] = field(default_factory=list)
    connections: list[Edge] = field(default_factory=list)
    max_columns: int = 0

    def step(self, key: StepKey) -> StepLayout | None:
        """Return the layout for a step key, or None."""
        for step in self.steps:
            if step.step_key == key:
                return step
        return None

    def active_connections(self) -> list[Edge]:
        return [e for e in self.connections if e.is_active]

    def to_dict(self) -> dict[str, Any]:
        return {
            "steps": [s.to_dict() for s in self.steps],
            "connections": [e.to_dict() for e in self.connections],
            "maxColumns": self.max_columns,
        }


@dataclass
class ChartDimensions:
    """Pixel size of the chart grid."""

    width: int
    height: int
    card_width: int
    card_height: int
    column_gap: int
    row_gap: int

    def to_dict(self) -> dict[str, int]:
        return {
            "width": self.width,
            "height": self.height,
            "cardWidth": self.card_width,
            "cardHeight": self.card_height,
            "columnGap": self.column_gap,
            "rowGap": self.row_gap,
        }
