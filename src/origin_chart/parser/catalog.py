"""Loader for origin catalogs exported from a compendium.

Accepts compendium-style records (``{"_id", "name", "img", "system": {...}}``)
as well as flat dicts carrying the same keys at the top level. Missing
fields are defaulted; only structurally unusable input raises.
"""

from __future__ import annotations

import json
import logging
from collections import Counter
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from origin_chart.layout.constants import MAX_POSITION, MIN_POSITION
from origin_chart.parser.model import STEP_ORDER, OriginNode, Requirements, Selection, StepKey

logger = logging.getLogger(__name__)


def _int_or(value: Any, default: int) -> int:
    if isinstance(value, bool):
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _str_list(value: Any) -> list[str]:
    if not value:
        return []
    if isinstance(value, str):
        return [value]
    return [str(v) for v in value]


def _slot_value(value: Any) -> int | None:
    """Coerce an int or digit string to int; anything else is None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value)
    return None


def _parse_positions(system: Mapping[str, Any]) -> list[int]:
    raw = system.get("positions")
    if raw is None and "position" in system:
        # Legacy single-slot field
        raw = [system["position"]]
    if raw is None:
        return []
    if not isinstance(raw, (list, tuple)):
        raw = [raw]
    values = (_slot_value(p) for p in raw)
    return [p for p in values if p is not None]


def _parse_requirements(raw: Any) -> Requirements:
    if not isinstance(raw, Mapping):
        return Requirements()
    return Requirements(
        previous_steps=_str_list(raw.get("previousSteps")),
        excluded_steps=_str_list(raw.get("excludedSteps")),
        text=str(raw.get("text") or ""),
    )


def parse_origin(record: Any) -> OriginNode:
    """Build an OriginNode from one catalog record."""
    if not isinstance(record, Mapping):
        raise ValueError(
            f"Origin records must be JSON objects, got {type(record).__name__}"
        )

    system = record.get("system")
    if not isinstance(system, Mapping):
        system = record

    # Requirements name origins by identifier slug, so the slug is the id
    source_id = str(record.get("_id") or record.get("id") or "")
    identifier = str(system.get("identifier") or "")
    grants = system.get("grants")
    choices = grants.get("choices") if isinstance(grants, Mapping) else None
    xp_cost = _int_or(system.get("xpCost"), 0)

    return OriginNode(
        id=identifier or source_id,
        step=StepKey.parse(system.get("step")),
        positions=_parse_positions(system),
        requirements=_parse_requirements(system.get("requirements")),
        name=str(record.get("name") or ""),
        img=str(record.get("img") or ""),
        identifier=identifier,
        source_id=source_id,
        xp_cost=xp_cost,
        is_advanced=bool(system.get("isAdvancedOrigin")) or xp_cost > 0,
        has_choices=bool(system.get("hasChoices") or choices),
        primary_position=_slot_value(system.get("primaryPosition")),
    )


def parse_catalog(data: Any) -> list[OriginNode]:
    """Parse a list of records, or a mapping holding an ``origins`` list."""
    if isinstance(data, Mapping):
        data = data.get("origins")
    if not isinstance(data, list):
        raise ValueError(
            "Catalog must be a JSON list of origins or an object with an "
            "'origins' list"
        )

    origins = []
    for record in data:
        node = parse_origin(record)
        if node.step is None:
            logger.warning(
                "Origin %r (%s) has no recognised step and will not appear "
                "in the chart", node.name or node.id, node.id,
            )
        origins.append(node)
    return origins


def load_catalog(path: Path | str) -> list[OriginNode]:
    """Read and parse a catalog JSON file."""
    path = Path(path)
    try:
        data = json.loads(path.read_text())
    except json.JSONDecodeError as e:
        raise ValueError(f"{path}: invalid JSON ({e})") from e
    origins = parse_catalog(data)
    logger.info("Loaded %d origins from %s", len(origins), path)
    return origins


def validate_catalog(origins: Iterable[OriginNode]) -> list[str]:
    """Report data problems the layout engine would silently paper over."""
    origins = list(origins)
    errors: list[str] = []
    known_ids = {o.id for o in origins}

    for origin in origins:
        label = origin.name or origin.id or "(unnamed)"
        if not origin.id:
            errors.append(f"Origin '{label}' has no id")
        if origin.step is None:
            errors.append(f"Origin '{label}' has no recognised step")
        if not origin.positions:
            errors.append(f"Origin '{label}' has no positions")
        for p in origin.positions:
            if not MIN_POSITION <= p <= MAX_POSITION:
                errors.append(
                    f"Origin '{label}' has invalid position {p} "
                    f"(must be {MIN_POSITION}-{MAX_POSITION})"
                )
        reqs = origin.requirements
        for ref in reqs.previous_steps + reqs.excluded_steps:
            if ref not in known_ids:
                errors.append(f"Origin '{label}' requirement references unknown origin '{ref}'")

    counts = Counter((o.step, o.id) for o in origins if o.step is not None)
    for (step, origin_id), count in sorted(counts.items(), key=lambda kv: (kv[0][0].index, kv[0][1])):
        if count > 1:
            errors.append(f"Duplicate origin id '{origin_id}' in step {step.value} ({count}x)")

    return errors


def parse_selections(
    pairs: Iterable[str],
    origins: Iterable[OriginNode],
) -> dict[StepKey, Selection]:
    """Turn ``step=id`` strings into a selection map over ``origins``."""
    by_step: dict[StepKey, dict[str, OriginNode]] = {step: {} for step in STEP_ORDER}
    for origin in origins:
        if origin.step is not None:
            by_step[origin.step].setdefault(origin.id, origin)
            if origin.source_id:
                by_step[origin.step].setdefault(origin.source_id, origin)

    selections: dict[StepKey, Selection] = {}
    for pair in pairs:
        step_value, sep, origin_id = pair.partition("=")
        if not sep:
            raise ValueError(f"Selection '{pair}' must look like step=originId")
        step = StepKey.parse(step_value.strip())
        if step is None:
            valid = ", ".join(s.value for s in STEP_ORDER)
            raise ValueError(f"Unknown step '{step_value}' (expected one of: {valid})")
        node = by_step[step].get(origin_id.strip())
        if node is None:
            raise ValueError(f"No origin '{origin_id}' in step {step.value}")
        selections[step] = Selection.of(node)
    return selections
