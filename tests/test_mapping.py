import math

import pytest

from takeoff.mapping import (
    ALLOWED_COLUMNS,
    build_takeoff_items,
    casework_item_type,
    door_item_type,
    insulation_item_type,
    sanitize_item,
    sanitize_numeric,
    summarize,
    summary_message,
    wall_classification,
)


@pytest.mark.parametrize("value,expected", [
    (12, 12),
    (12.5, 12.5),
    ("24.5", 24.5),
    ("12'", 12.0),
    ("  8.0 LF", 8.0),
    (".5", 0.5),
    ("1e2", 100.0),
    ("N/A", None),
    ("tbd", None),
    ("Varies", None),
    ("", None),
    ("approx 10", None),
    (None, None),
    (True, None),
    (float("nan"), None),
    (float("inf"), None),
    ({"length": 3}, None),
])
def test_sanitize_numeric(value, expected):
    assert sanitize_numeric(value) == expected


def test_sanitize_item_drops_unknown_columns_and_clamps_confidence():
    row = sanitize_item({
        "item_type": "wall",
        "quantity": "10 LF",
        "confidence_score": 140,
        "bogus_column": "x",
        "plan_id": "should-not-pass",
    })
    assert row == {"item_type": "wall", "quantity": 10.0, "confidence_score": 100}

    assert sanitize_item({"confidence_score": -5})["confidence_score"] == 0
    assert sanitize_item({"confidence_score": "high"})["confidence_score"] is None
    assert "plan_id" not in ALLOWED_COLUMNS


def test_sheet_info_row_always_first(sheet_json):
    items = build_takeoff_items({}, 3)
    assert len(items) == 1
    info = items[0]
    assert info["item_type"] == "sheet_info"
    assert info["description"] == "Unknown Sheet - Page 3"
    assert info["page_number"] == 3

    items = build_takeoff_items(sheet_json, 1)
    assert items[0]["item_type"] == "sheet_info"
    assert items[0]["sheet_number"] == "A1.01"
    assert items[0]["description"] == "FLOOR PLAN - Level 1 Floor Plan"


def test_every_row_carries_page_number_and_allowed_columns(sheet_json):
    items = build_takeoff_items(sheet_json, 7)
    assert all(item["page_number"] == 7 for item in items)
    for item in items:
        assert set(sanitize_item(item)) <= ALLOWED_COLUMNS


def test_build_takeoff_items_maps_each_scope(sheet_json):
    items = build_takeoff_items(sheet_json, 1)
    types = [item["item_type"] for item in items]
    assert types == [
        "sheet_info",
        "wall_type_legend",
        "wall",
        "wall",
        "clarification_needed",
        "room",
        "fire_door",
    ]

    legend = items[1]
    assert legend["wall_type"] == "A1"
    assert legend["wall_materials"]["stud_spacing"] == '16" o.c.'
    assert legend["confidence_score"] == 92

    wall = items[2]
    assert wall["linear_footage"] == 24.5
    assert wall["unit"] == "LF"
    assert wall["wall_classification"] == "interior"
    assert wall["dimensions"]["coordinates"]["points"][1] == {"x": 40, "y": 10}
    assert wall["notes"].startswith("[Confidence: 88%]")

    exterior = items[3]
    assert exterior["wall_classification"] == "exterior"
    assert exterior["confidence_score"] == 50
    assert sanitize_item(exterior)["linear_footage"] == 12.0

    clarification = items[4]
    assert clarification["needs_clarification"] is True

    room = sanitize_item(items[5])
    assert room["room_area"] is None
    assert room["confidence_score"] == 100

    door = items[6]
    assert door["quantity"] == 2
    assert door["door_size"] == "3'-0\"x7'-0\"x"


def test_non_list_sections_are_ignored():
    items = build_takeoff_items({"walls": "none", "doors": [None, "x", {"mark": "1"}]}, 1)
    assert [i["item_type"] for i in items] == ["sheet_info", "door"]


def test_malformed_nested_values_are_tolerated():
    items = build_takeoff_items({
        "sheet_type": "FLOOR PLAN",
        "drawing_info": "A1.01",
        "walls": [{"wall_type_code": "A1", "length_ft": 12, "coordinates": [1, 2, 3, 4]}],
        "doors": [{"mark": "101", "coordinates": "near stair"}],
        "windows": [{"mark": "W1", "coordinates": [5, 6]}],
        "bathroom_partitions": [{"stall_count": "3", "urinal_screen_count": "TBD"}],
    }, 4)

    sheet, wall, door, window, partition = items
    assert sheet["description"] == "FLOOR PLAN - Page 4"
    assert sheet["sheet_number"] is None
    assert wall["linear_footage"] == 12
    assert wall["dimensions"]["coordinates"] is None
    assert door["dimensions"]["coordinates"] is None
    assert window["dimensions"]["coordinates"] is None
    assert partition["quantity"] == 3


def test_item_type_helpers():
    assert wall_classification({"is_existing": True, "is_exterior": True}) == "existing"
    assert door_item_type("hollow_metal") == "hollow_metal_door"
    assert door_item_type("wood") == "door"
    assert casework_item_type("kitchen_base") == "kitchen_cabinet"
    assert casework_item_type("vanity") == "bathroom_vanity"
    assert casework_item_type(None) == "casework"
    assert insulation_item_type("sound") == "sound_insulation"
    assert insulation_item_type(None) == "thermal_insulation"


def test_millwork_unit_follows_measure():
    items = build_takeoff_items({"millwork": [
        {"item_type": "base_trim", "linear_ft": 120},
        {"item_type": "paneling", "area_sqft": 40},
        {"item_type": "crown"},
    ]}, 1)
    assert [(i["item_type"], i["unit"], i["quantity"]) for i in items[1:]] == [
        ("millwork_base_trim", "LF", 120),
        ("millwork_paneling", "SF", 40),
        ("millwork_crown", "EA", 1),
    ]


def test_deck_height_parses_feet():
    items = build_takeoff_items({"deck_heights": [{"floor_level": "L2", "height_ft_in": "10.5 ft"}]}, 1)
    assert items[1]["wall_height"] == 10.5
    assert not math.isnan(items[1]["wall_height"])


def test_summarize_counts(sheet_json):
    summary = summarize(sheet_json)
    assert summary["walls"] == 2
    assert summary["wallTypes"] == 1
    assert summary["doors"] == 1
    assert summary["ceilings"] == 0

    message = summary_message("FLOOR PLAN", 7, summary)
    assert message.startswith("Sheet: FLOOR PLAN | Items: 7 | Walls: 2")
