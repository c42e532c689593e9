"""
Drywall/framing material quantities from wall takeoff data.

Quantities are rounded up per wall type; waste factor applies to studs,
track, board and insulation but not to paint or corner bead.
"""
import json
import math
import re
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional

# Drywall sheet sizes
DRYWALL_SHEETS = {
    "4x8": {"width": 4, "height": 8, "sqft": 32},
    "4x10": {"width": 4, "height": 10, "sqft": 40},
    "4x12": {"width": 4, "height": 12, "sqft": 48},
}

# boxes per SF by finish level
JOINT_COMPOUND_RATES = {0: 0, 1: 0.05, 2: 0.08, 3: 0.10, 4: 0.12, 5: 0.15}
TAPE_RATE = 0.01  # rolls per SF
SCREW_RATE = 0.015  # lbs per SF
PAINT_COVERAGE = 350  # SF per gallon
PRIMER_COVERAGE = 400  # SF per gallon

DEFAULT_STUD_SIZE = '3-5/8"'
DEFAULT_DRYWALL_THICKNESS = '5/8"'


@dataclass
class WallTypeSpec:
    type_code: str
    description: str = ""
    stud_size: str = DEFAULT_STUD_SIZE
    stud_spacing: float = 16
    stud_gauge: int = 25
    layers_each_side: int = 1
    drywall_type: str = "regular"
    drywall_thickness: str = DEFAULT_DRYWALL_THICKNESS
    fire_rating: Optional[str] = None
    insulation: bool = False
    insulation_type: Optional[str] = None


@dataclass
class WallInput:
    wall_type_code: str
    linear_footage: float
    deck_height: float = 10


@dataclass
class UserInputs:
    deck_height: float = 10
    stud_gauge: int = 25
    drywall_type: str = "regular"
    drywall_thickness: str = DEFAULT_DRYWALL_THICKNESS
    finish_level: int = 4
    paint_type: str = "latex"
    paint_coats: int = 2
    insulation_type: Optional[str] = None
    waste_factor: float = 10  # percent


@dataclass
class MaterialQuantities:
    wall_type_code: str
    linear_footage: float
    square_footage: float
    deck_height: float

    stud_quantity: int
    stud_size: str
    stud_gauge: int
    top_track_lf: int
    bottom_track_lf: int

    sheet_size: str
    drywall_sheets: int
    drywall_type: str
    drywall_thickness: str
    drywall_layers: int

    joint_compound_boxes: int
    finish_level: int
    tape_rolls: int
    screws_lbs: int
    corner_bead_lf: int

    paint_gallons: int
    paint_type: str
    paint_coats: int
    primer_gallons: int

    insulation_sqft: Optional[int] = None
    insulation_type: Optional[str] = None


@dataclass
class WallMaterialReport:
    by_wall_type: List[MaterialQuantities]
    user_inputs: UserInputs
    project_totals: Dict[str, float] = field(default_factory=dict)
    generated_at: str = ""

    def to_dict(self):
        return asdict(self)


def sheet_size_for_height(deck_height: float) -> str:
    if deck_height > 10:
        return "4x12"
    if deck_height > 8:
        return "4x10"
    return "4x8"


def calculate_wall_materials(wall: WallInput, spec: WallTypeSpec, user_inputs: UserInputs) -> MaterialQuantities:
    deck_height = user_inputs.deck_height or wall.deck_height or 10
    linear_ft = wall.linear_footage
    waste = 1 + (user_inputs.waste_factor / 100)

    sqft_one_side = linear_ft * deck_height
    total_sqft = sqft_one_side * 2

    # one extra stud per 10 LF for corners and intersections
    stud_spacing = spec.stud_spacing or 16
    studs = math.ceil(linear_ft * (12 / stud_spacing) * waste) + math.ceil(linear_ft / 10)
    track_lf = math.ceil(linear_ft * waste)

    layers = spec.layers_each_side or 1
    board_sqft = total_sqft * layers * waste
    sheet_size = sheet_size_for_height(deck_height)
    sheets = math.ceil(board_sqft / DRYWALL_SHEETS[sheet_size]["sqft"])

    finish_level = user_inputs.finish_level if user_inputs.finish_level is not None else 4
    compound_rate = JOINT_COMPOUND_RATES.get(finish_level, 0.12)
    paint_coats = user_inputs.paint_coats or 2
    gauge = user_inputs.stud_gauge or 25

    insulation_sqft = None
    insulation_type = None
    if spec.insulation:
        insulation_sqft = math.ceil(sqft_one_side * waste)
        insulation_type = user_inputs.insulation_type or spec.insulation_type or "batt"

    return MaterialQuantities(
        wall_type_code=wall.wall_type_code,
        linear_footage=linear_ft,
        square_footage=total_sqft,
        deck_height=deck_height,
        stud_quantity=studs,
        stud_size=spec.stud_size or DEFAULT_STUD_SIZE,
        stud_gauge=gauge,
        top_track_lf=track_lf,
        bottom_track_lf=track_lf,
        sheet_size=sheet_size,
        drywall_sheets=sheets,
        drywall_type=user_inputs.drywall_type or spec.drywall_type or "regular",
        drywall_thickness=user_inputs.drywall_thickness or spec.drywall_thickness or DEFAULT_DRYWALL_THICKNESS,
        drywall_layers=layers,
        joint_compound_boxes=math.ceil(board_sqft * compound_rate),
        finish_level=finish_level,
        tape_rolls=math.ceil(board_sqft * TAPE_RATE),
        screws_lbs=math.ceil(board_sqft * SCREW_RATE),
        corner_bead_lf=math.ceil(total_sqft / 20),
        paint_gallons=math.ceil(total_sqft * paint_coats / PAINT_COVERAGE),
        paint_type=user_inputs.paint_type or "latex",
        paint_coats=paint_coats,
        primer_gallons=math.ceil(total_sqft / PRIMER_COVERAGE),
        insulation_sqft=insulation_sqft,
        insulation_type=insulation_type,
    )


def default_wall_spec(type_code: str) -> WallTypeSpec:
    return WallTypeSpec(type_code=type_code, description=f"Wall Type {type_code}")


def generate_material_report(walls, wall_specs: Dict[str, WallTypeSpec], user_inputs: UserInputs) -> WallMaterialReport:
    totals_by_type: Dict[str, float] = {}
    for wall in walls:
        totals_by_type[wall.wall_type_code] = totals_by_type.get(wall.wall_type_code, 0) + wall.linear_footage

    by_wall_type = []
    for type_code, total_lf in totals_by_type.items():
        spec = wall_specs.get(type_code) or default_wall_spec(type_code)
        by_wall_type.append(calculate_wall_materials(
            WallInput(type_code, total_lf, user_inputs.deck_height), spec, user_inputs
        ))

    project_totals = {
        "total_linear_footage": sum(m.linear_footage for m in by_wall_type),
        "total_square_footage": sum(m.square_footage for m in by_wall_type),
        "total_studs": sum(m.stud_quantity for m in by_wall_type),
        "total_track_lf": sum(m.top_track_lf + m.bottom_track_lf for m in by_wall_type),
        "total_drywall_sheets": sum(m.drywall_sheets for m in by_wall_type),
        "total_joint_compound": sum(m.joint_compound_boxes for m in by_wall_type),
        "total_tape": sum(m.tape_rolls for m in by_wall_type),
        "total_screws": sum(m.screws_lbs for m in by_wall_type),
        "total_paint_gallons": sum(m.paint_gallons for m in by_wall_type),
        "total_primer_gallons": sum(m.primer_gallons for m in by_wall_type),
    }

    return WallMaterialReport(
        by_wall_type=by_wall_type,
        user_inputs=user_inputs,
        project_totals=project_totals,
        generated_at=datetime.now(timezone.utc).isoformat(),
    )


def parse_wall_materials(raw) -> dict:
    if not raw:
        return {}
    if isinstance(raw, dict):
        return raw
    try:
        parsed = json.loads(raw)
    except (TypeError, ValueError):
        return {}
    return parsed if isinstance(parsed, dict) else {}


def _first_number(value, default):
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value
    match = re.search(r"\d+(?:\.\d+)?", str(value or ""))
    return float(match.group(0)) if match else default


def wall_spec_from_legend(type_code, description, wall_materials) -> WallTypeSpec:
    """Build a spec from a stored ``wall_type_legend`` row's material JSON."""
    materials = parse_wall_materials(wall_materials)
    spec = default_wall_spec(type_code)
    if description:
        spec.description = description
    if materials.get("stud_size"):
        spec.stud_size = str(materials["stud_size"])
    spec.stud_spacing = _first_number(materials.get("stud_spacing"), spec.stud_spacing)
    spec.stud_gauge = int(_first_number(materials.get("stud_gauge"), spec.stud_gauge))
    spec.layers_each_side = int(_first_number(materials.get("drywall_layers_each_side"), spec.layers_each_side))
    if materials.get("drywall_type"):
        spec.drywall_type = str(materials["drywall_type"])
    spec.fire_rating = materials.get("fire_rating") or None
    insulation = materials.get("insulation")
    if insulation and str(insulation).strip().lower() not in ("none", "n/a", "no"):
        spec.insulation = True
        spec.insulation_type = str(insulation)
    return spec
