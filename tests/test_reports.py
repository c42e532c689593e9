import io
import re

import pytest
from openpyxl import load_workbook

from takeoff import reports
from takeoff.materials import UserInputs
from takeoff.models import Plan, TakeoffItem


@pytest.fixture
def items():
    return [
        TakeoffItem(item_type="sheet_info", quantity=1, unit="EA", page_number=1),
        TakeoffItem(
            item_type="wall_type_legend",
            wall_type="A1",
            description="Rated corridor wall",
            wall_materials={"stud_size": '6"', "stud_spacing": '16" o.c.', "fire_rating": "1 HR",
                            "drywall_layers_each_side": 2, "drywall_type": "type_x"},
            quantity=1,
            unit="EA",
        ),
        TakeoffItem(item_type="wall", wall_type="A1", linear_footage=30, quantity=30, unit="LF", room_name="Corridor"),
        TakeoffItem(item_type="wall", wall_type="A1", linear_footage=20, quantity=20, unit="LF", room_name="Lobby"),
        TakeoffItem(item_type="wall", wall_type="B4", linear_footage=12.5, quantity=12.5, unit="LF"),
        TakeoffItem(item_type="door", quantity=3, unit="EA"),
    ]


@pytest.fixture
def plan():
    return Plan(name="Riverside Lofts")


def test_wall_type_totals_prefer_segments(items):
    totals = reports.wall_type_totals(items)
    assert totals == [
        {"type_code": "A1", "total_lf": 50, "count": 2},
        {"type_code": "B4", "total_lf": 12.5, "count": 1},
    ]


def test_wall_type_totals_fall_back_to_model_totals():
    items = [TakeoffItem(item_type="wall_type_total", wall_type="C2", linear_footage=80)]
    assert reports.wall_type_totals(items) == [{"type_code": "C2", "total_lf": 80, "count": 0}]


def test_export_filename():
    name = reports.export_filename("Riverside Lofts, Ph.2", "Wall_Takeoff", "xlsx")
    assert re.fullmatch(r"Riverside_Lofts__Ph_2_Wall_Takeoff_\d{4}-\d{2}-\d{2}\.xlsx", name)


def test_excel_without_estimate_settings(plan, items):
    wb = load_workbook(io.BytesIO(reports.export_wall_takeoff_excel(plan, items)))
    assert wb.sheetnames == ["Wall Type Summary", "Wall Type Legend", "Wall Details"]

    summary = list(wb["Wall Type Summary"].iter_rows(values_only=True))
    assert summary[0][0] == "Wall Type"
    assert summary[1][:4] == ("A1", "Rated corridor wall", 50, 2)
    assert summary[1][5] == 16
    assert summary[2][4] == "TBD"

    details = list(wb["Wall Details"].iter_rows(values_only=True))
    assert len(details) == 4
    assert details[1][:3] == ("A1", "Corridor", 30)


def test_excel_with_material_sheets(plan, items):
    content = reports.export_wall_takeoff_excel(plan, items, UserInputs(deck_height=9, waste_factor=0))
    wb = load_workbook(io.BytesIO(content))
    assert wb.sheetnames[3:] == ["Material Quantities", "Project Totals", "Estimate Settings"]

    materials = list(wb["Material Quantities"].iter_rows(values_only=True))
    assert [row[0] for row in materials[1:]] == ["A1", "B4"]
    assert materials[1][10] == "4x10"
    assert materials[1][13] == 2

    totals = {row[0]: row[1] for row in wb["Project Totals"].iter_rows(min_row=2, values_only=True)}
    assert totals["Total Linear Footage"] == 62.5


def test_pdf_summary(plan, items):
    content = reports.export_takeoff_pdf(plan, items)
    assert content.startswith(b"%PDF")

    rows = reports.item_type_summary(items)
    assert {"item_type": "wall", "unit": "LF", "count": 3, "quantity": 62.5} in rows
    assert {"item_type": "door", "unit": "EA", "count": 1, "quantity": 3.0} in rows
