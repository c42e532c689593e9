import math

from takeoff.materials import (
    UserInputs,
    WallInput,
    WallTypeSpec,
    calculate_wall_materials,
    generate_material_report,
    parse_wall_materials,
    sheet_size_for_height,
    wall_spec_from_legend,
)


def test_sheet_size_follows_deck_height():
    assert sheet_size_for_height(8) == "4x8"
    assert sheet_size_for_height(9) == "4x10"
    assert sheet_size_for_height(10) == "4x10"
    assert sheet_size_for_height(12) == "4x12"


def test_single_wall_quantities():
    spec = WallTypeSpec(type_code="A1")
    inputs = UserInputs(deck_height=10, waste_factor=0)

    m = calculate_wall_materials(WallInput("A1", 100), spec, inputs)

    assert m.square_footage == 2000
    # 100 LF @ 16" o.c. plus one per 10 LF
    assert m.stud_quantity == 75 + 10
    assert m.top_track_lf == m.bottom_track_lf == 100
    assert m.sheet_size == "4x10"
    assert m.drywall_sheets == 50
    assert m.joint_compound_boxes == math.ceil(2000 * 0.12)
    assert m.tape_rolls == math.ceil(2000 * 0.01)
    assert m.screws_lbs == math.ceil(2000 * 0.015)
    assert m.corner_bead_lf == 100
    assert m.paint_gallons == 12
    assert m.primer_gallons == 5
    assert m.insulation_sqft is None


def test_waste_factor_inflates_framing_and_board():
    spec = WallTypeSpec(type_code="A1")
    lean = calculate_wall_materials(WallInput("A1", 100), spec, UserInputs(waste_factor=0))
    padded = calculate_wall_materials(WallInput("A1", 100), spec, UserInputs(waste_factor=10))

    assert padded.stud_quantity > lean.stud_quantity
    assert padded.top_track_lf >= 110
    assert padded.drywall_sheets >= 55
    assert padded.paint_gallons == lean.paint_gallons
    assert padded.corner_bead_lf == lean.corner_bead_lf


def test_insulated_double_layer_wall():
    spec = WallTypeSpec(type_code="B2", layers_each_side=2, stud_spacing=24, insulation=True)
    inputs = UserInputs(deck_height=8, waste_factor=0, finish_level=5, insulation_type="mineral wool")

    m = calculate_wall_materials(WallInput("B2", 48), spec, inputs)

    assert m.stud_quantity == 24 + 5
    assert m.drywall_sheets == math.ceil(48 * 8 * 2 * 2 / 32)
    assert m.joint_compound_boxes == math.ceil(48 * 8 * 2 * 2 * 0.15)
    assert m.insulation_sqft == 384
    assert m.insulation_type == "mineral wool"


def test_report_groups_by_type_and_totals():
    walls = [WallInput("A1", 40), WallInput("A1", 60), WallInput("C3", 20)]
    report = generate_material_report(walls, {"A1": WallTypeSpec(type_code="A1")}, UserInputs())

    assert [m.wall_type_code for m in report.by_wall_type] == ["A1", "C3"]
    assert report.by_wall_type[0].linear_footage == 100
    assert report.project_totals["total_linear_footage"] == 120
    assert report.project_totals["total_studs"] == sum(m.stud_quantity for m in report.by_wall_type)
    assert report.generated_at
    assert report.to_dict()["user_inputs"]["waste_factor"] == 10


def test_parse_wall_materials_is_tolerant():
    assert parse_wall_materials(None) == {}
    assert parse_wall_materials({"a": 1}) == {"a": 1}
    assert parse_wall_materials('{"stud_size": "6\\""}') == {"stud_size": '6"'}
    assert parse_wall_materials("not json") == {}
    assert parse_wall_materials("[1, 2]") == {}


def test_wall_spec_from_legend_row():
    spec = wall_spec_from_legend("A1", "Rated corridor wall", {
        "stud_size": '6"',
        "stud_gauge": "20 ga",
        "stud_spacing": '16" o.c.',
        "drywall_layers_each_side": "2",
        "drywall_type": "type_x",
        "fire_rating": "1 HR",
        "insulation": "None",
    })
    assert spec.description == "Rated corridor wall"
    assert spec.stud_size == '6"'
    assert spec.stud_gauge == 20
    assert spec.stud_spacing == 16
    assert spec.layers_each_side == 2
    assert spec.fire_rating == "1 HR"
    assert spec.insulation is False

    default = wall_spec_from_legend("Z9", None, None)
    assert default.description == "Wall Type Z9"
    assert default.stud_spacing == 16
