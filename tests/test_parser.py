"""Tests for the origin catalog loader."""

import logging
from pathlib import Path

import pytest

from origin_chart.layout.engine import compute_full_chart
from origin_chart.layout.positions import get_positions
from origin_chart.parser.catalog import (
    load_catalog,
    parse_catalog,
    parse_origin,
    parse_selections,
    validate_catalog,
)
from origin_chart.parser.model import OriginNode, Requirements, Selection, StepKey

EXAMPLES_DIR = Path(__file__).resolve().parent.parent / "examples"
ORIGINS_JSON = EXAMPLES_DIR / "origins.json"


def test_parse_compendium_record():
    node = parse_origin({
        "_id": "abc123",
        "name": "Void Born",
        "img": "icons/void.webp",
        "type": "originPath",
        "system": {
            "identifier": "void-born",
            "step": "homeWorld",
            "positions": [3, 1],
            "xpCost": 0,
            "requirements": {
                "text": "Born in the void",
                "previousSteps": ["x"],
                "excludedSteps": [],
            },
        },
    })
    assert node.id == "void-born"
    assert node.source_id == "abc123"
    assert node.name == "Void Born"
    assert node.identifier == "void-born"
    assert node.step == StepKey.HOME_WORLD
    assert node.positions == [3, 1]
    assert node.requirements.previous_steps == ["x"]
    assert node.requirements.text == "Born in the void"
    assert not node.is_advanced


def test_parse_flat_record():
    node = parse_origin({"id": "renown", "step": "motivation", "positions": [4]})
    assert node.id == "renown"
    assert node.step == StepKey.MOTIVATION
    assert node.positions == [4]


def test_parse_legacy_single_position():
    node = parse_origin({"id": "old", "system": {"step": "career", "position": 6}})
    assert node.positions == [6]


def test_parse_defaults_missing_fields():
    node = parse_origin({})
    assert node.id == ""
    assert node.step is None
    assert node.positions == []
    assert node.requirements.is_empty
    assert node.xp_cost == 0


def test_parse_lenient_values():
    node = parse_origin({
        "id": "odd",
        "system": {
            "step": "notAStep",
            "positions": ["2", "x", True, 5],
            "xpCost": "lots",
            "requirements": "none",
            "primaryPosition": 5,
        },
    })
    assert node.step is None
    assert node.positions == [2, 5]
    assert node.xp_cost == 0
    assert node.requirements.is_empty
    assert node.primary_position == 5


def test_parse_advanced_and_choices():
    node = parse_origin({
        "id": "adv",
        "system": {
            "step": "career",
            "positions": [2],
            "xpCost": 300,
            "grants": {"choices": [{"label": "Pick one", "count": 1}]},
        },
    })
    assert node.is_advanced
    assert node.has_choices
    assert node.xp_cost == 300


def test_parse_rejects_non_mapping():
    with pytest.raises(ValueError, match="JSON objects"):
        parse_origin(["not", "a", "record"])


def test_parse_catalog_accepts_list_or_object():
    records = [{"id": "a", "step": "homeWorld", "positions": [1]}]
    assert [o.id for o in parse_catalog(records)] == ["a"]
    assert [o.id for o in parse_catalog({"origins": records})] == ["a"]


def test_parse_catalog_rejects_other_shapes():
    with pytest.raises(ValueError, match="origins"):
        parse_catalog({"items": []})
    with pytest.raises(ValueError):
        parse_catalog("nope")


def test_parse_catalog_warns_on_stepless(caplog):
    records = [
        {"id": "kept", "step": "career", "positions": [1]},
        {"id": "lost", "name": "Lost Origin", "positions": [1]},
    ]
    with caplog.at_level(logging.WARNING, logger="origin_chart.parser.catalog"):
        origins = parse_catalog(records)
    assert len(origins) == 2
    assert "Lost Origin" in caplog.text
    assert "kept" not in caplog.text


def test_load_example_catalog():
    origins = load_catalog(ORIGINS_JSON)
    assert len(origins) == 38
    assert {o.step for o in origins} == set(StepKey)
    vengeance = next(o for o in origins if o.id == "vengeance")
    assert get_positions(vengeance) == [3, 5]
    assert next(o for o in origins if o.id == "tainted").has_choices


def test_load_invalid_json(tmp_path):
    bad = tmp_path / "bad.json"
    bad.write_text("{not json")
    with pytest.raises(ValueError, match="invalid JSON"):
        load_catalog(bad)


def test_validate_example_catalog_clean():
    assert validate_catalog(load_catalog(ORIGINS_JSON)) == []


def test_validate_reports_problems():
    origins = [
        OriginNode(id="ok", step=StepKey.HOME_WORLD, positions=[1]),
        OriginNode(id="no-step", positions=[1]),
        OriginNode(id="no-pos", step=StepKey.BIRTHRIGHT),
        OriginNode(id="bad-pos", step=StepKey.BIRTHRIGHT, positions=[9]),
        OriginNode(id="ok", step=StepKey.HOME_WORLD, positions=[2]),
        OriginNode(id="ref", step=StepKey.CAREER, positions=[3],
                   requirements=Requirements(previous_steps=["ghost"])),
    ]
    errors = validate_catalog(origins)
    text = "\n".join(errors)
    assert "'no-step' has no recognised step" in text
    assert "'no-pos' has no positions" in text
    assert "invalid position 9" in text
    assert "Duplicate origin id 'ok' in step homeWorld" in text
    assert "unknown origin 'ghost'" in text
    assert len(errors) == 5


def test_parse_selections():
    origins = load_catalog(ORIGINS_JSON)
    selections = parse_selections(["homeWorld=void-born", "motivation = vengeance"], origins)
    assert selections[StepKey.HOME_WORLD] == Selection("void-born", (3,))
    assert selections[StepKey.MOTIVATION].positions == (3, 5)


@pytest.mark.parametrize("pair, message", [
    ("homeWorld", "step=originId"),
    ("nowhere=void-born", "Unknown step"),
    ("career=void-born", "No origin 'void-born'"),
])
def test_parse_selections_errors(pair, message):
    origins = load_catalog(ORIGINS_JSON)
    with pytest.raises(ValueError, match=message):
        parse_selections([pair], origins)


def _compendium_chart_records():
    return [
        {"_id": "Xq7aB", "name": "Void Born",
         "system": {"identifier": "void-born", "step": "homeWorld", "positions": [4]}},
        {"_id": "Kd91z", "name": "Scavenger",
         "system": {"identifier": "scavenger", "step": "birthright", "positions": [4],
                    "requirements": {"previousSteps": ["void-born"]}}},
    ]


def test_identifier_is_id_for_compendium_documents():
    origins = parse_catalog(_compendium_chart_records())
    assert [o.id for o in origins] == ["void-born", "scavenger"]
    assert [o.source_id for o in origins] == ["Xq7aB", "Kd91z"]
    assert validate_catalog(origins) == []


def test_slug_requirements_unlock_with_random_document_ids():
    origins = parse_catalog(_compendium_chart_records())
    for pair in ("homeWorld=void-born", "homeWorld=Xq7aB"):
        selections = parse_selections([pair], origins)
        assert selections[StepKey.HOME_WORLD].id == "void-born"
        chart = compute_full_chart(origins, selections)
        card = chart.step(StepKey.BIRTHRIGHT).cards[0]
        assert card.id == "scavenger"
        assert card.is_selectable


def test_validate_reports_document_id_used_as_requirement():
    records = _compendium_chart_records()
    records[1]["system"]["requirements"]["previousSteps"] = ["Xq7aB"]
    errors = validate_catalog(parse_catalog(records))
    assert errors == ["Origin 'scavenger' requirement references unknown origin 'Xq7aB'"]


def test_primary_position_accepts_digit_string():
    node = parse_origin({"id": "p", "system": {"step": "career", "positions": [2, 6],
                                               "primaryPosition": "6"}})
    assert node.primary_position == 6
    assert parse_origin({"id": "p", "system": {"primaryPosition": "six"}}).primary_position is None
    assert parse_origin({"id": "p", "system": {"primaryPosition": True}}).primary_position is None
