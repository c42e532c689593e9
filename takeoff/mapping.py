"""
Mapping of the vision model's sheet JSON into ``TakeoffItem`` rows.

Every page produces at least a ``sheet_info`` row so schedules, detail
sheets and notes pages can be cross-referenced later even when they carry
no countable items.
"""
import math
import re

ALLOWED_COLUMNS = {
    "page_number", "item_type", "description", "quantity", "unit", "dimensions", "confidence_score",
    "room_name", "wall_type", "ceiling_type", "linear_footage", "wall_height", "ceiling_area_sqft",
    "door_material", "window_material", "notes", "specifications", "door_size", "hardware_package",
    "hardware_components", "window_size", "ceiling_height", "wall_materials", "ceiling_type_detail",
    "door_schedule_reference", "window_schedule_reference", "sheet_number", "sheet_title", "drawing_scale",
    "revision_number", "revision_date", "detail_references", "section_references", "room_number", "room_area",
    "material_spec", "raw_dimensions", "calculated_from_scale", "scale_factor", "plan_upload_id",
    "needs_clarification", "clarification_notes", "wall_classification", "cross_reference_notes",
    "spec_reference", "door_type",
}

NUMERIC_COLUMNS = ("quantity", "linear_footage", "wall_height", "ceiling_area_sqft", "room_area", "scale_factor")

NON_NUMERIC_WORDS = {"", "n/a", "tbd", "varies", "vary", "na"}

DEFAULT_CONFIDENCE = 50

_LEADING_FLOAT = re.compile(r"^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def sanitize_numeric(value):
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value if math.isfinite(value) else None
    if isinstance(value, str):
        if value.strip().lower() in NON_NUMERIC_WORDS:
            return None
        match = _LEADING_FLOAT.match(value)
        if not match:
            return None
        number = float(match.group(0))
        return number if math.isfinite(number) else None
    return None


def sanitize_item(item: dict) -> dict:
    filtered = {k: v for k, v in item.items() if k in ALLOWED_COLUMNS}

    if "confidence_score" in filtered:
        score = sanitize_numeric(filtered["confidence_score"])
        filtered["confidence_score"] = max(0, min(100, score)) if score is not None else None

    for column in NUMERIC_COLUMNS:
        if column in filtered:
            filtered[column] = sanitize_numeric(filtered[column])

    return filtered


def _or(value, default="N/A"):
    return value or default


def _join(values, default="N/A"):
    if isinstance(values, (list, tuple)) and values:
        return ", ".join(str(v) for v in values)
    return default


def _confidence(entry):
    return entry.get("confidence") or DEFAULT_CONFIDENCE


def _dict(value):
    return value if isinstance(value, dict) else {}


def _point(coords):
    coords = _dict(coords)
    if not coords:
        return None
    return {"x": coords.get("x"), "y": coords.get("y")}


# =================== SHEET INFO ===================
def _sheet_info(parsed, page):
    info = _dict(parsed.get("drawing_info"))
    sheet_type = parsed.get("sheet_type")
    title = info.get("title") or info.get("sheet_number") or f"Page {page}"
    return {
        "item_type": "sheet_info",
        "description": f"{sheet_type or 'Unknown Sheet'} - {title}",
        "quantity": 1,
        "unit": "EA",
        "sheet_number": info.get("sheet_number"),
        "sheet_title": info.get("title"),
        "drawing_scale": info.get("scale"),
        "revision_number": info.get("revision_number"),
        "revision_date": info.get("revision_date"),
        "notes": (
            f"Sheet Type: {_or(sheet_type, 'Unknown')} | Floor: {_or(info.get('floor_level'))} | "
            f"Phase: {_or(info.get('phase'))} | Scale: {_or(info.get('scale'))}"
        ),
    }


# =================== SCOPE BUILDERS ===================
def _specification(spec):
    return {
        "item_type": "specification",
        "description": spec.get("item"),
        "specifications": spec.get("specification"),
        "quantity": spec.get("quantity") or None,
        "unit": "LS",
        "notes": (
            f"{spec.get('division')} - {spec.get('section')}\n"
            f"Standards: {_join(spec.get('standards'))}\n{spec.get('notes') or ''}"
        ),
    }


def _wall_type_legend(wt):
    return {
        "item_type": "wall_type_legend",
        "wall_type": wt.get("type_code"),
        "description": wt.get("description"),
        "wall_materials": {
            "stud_size": wt.get("stud_size"),
            "stud_gauge": wt.get("stud_gauge"),
            "stud_spacing": wt.get("stud_spacing"),
            "max_height": wt.get("max_height"),
            "drywall_layers_each_side": wt.get("drywall_layers_each_side"),
            "drywall_type": wt.get("drywall_type"),
            "sheathing": wt.get("sheathing"),
            "fire_rating": wt.get("fire_rating"),
            "ul_number": wt.get("ul_number"),
            "stc_rating": wt.get("stc_rating"),
            "insulation": wt.get("insulation"),
            "insulation_r_value": wt.get("insulation_r_value"),
        },
        "unit": "EA",
        "quantity": 1,
        "confidence_score": _confidence(wt),
        "notes": (
            f"Fire: {_or(wt.get('fire_rating'))} | UL: {_or(wt.get('ul_number'))} | "
            f"STC: {_or(wt.get('stc_rating'))} | Studs: {_or(wt.get('stud_size'), 'TBD')} "
            f"{wt.get('stud_gauge') or ''} @ {_or(wt.get('stud_spacing'), 'TBD')} | "
            f"Max Ht: {_or(wt.get('max_height'), 'TBD')}"
        ),
    }


def wall_classification(wall):
    if wall.get("is_existing"):
        return "existing"
    if wall.get("is_exterior"):
        return "exterior"
    return "interior"


def _wall(wall):
    coords = _dict(wall.get("coordinates"))
    confidence = _confidence(wall)
    flags = ("[EXISTING] " if wall.get("is_existing") else "") + ("[EXTERIOR] " if wall.get("is_exterior") else "")
    return {
        "item_type": "wall",
        "quantity": wall.get("length_ft"),
        "unit": "LF",
        "confidence_score": confidence,
        "dimensions": {
            "length_ft": wall.get("length_ft"),
            "height_ft": wall.get("height_ft"),
            "from_to": wall.get("from_to"),
            "coordinates": {
                "points": [
                    {"x": coords.get("start_x"), "y": coords.get("start_y")},
                    {"x": coords.get("end_x"), "y": coords.get("end_y")},
                ]
            } if coords else None,
        },
        "room_name": wall.get("room_name"),
        "wall_type": wall.get("wall_type_code"),
        "wall_height": wall.get("height_ft"),
        "linear_footage": wall.get("length_ft"),
        "wall_classification": wall_classification(wall),
        "notes": f"[Confidence: {confidence}%] {flags}{wall.get('notes') or ''}",
    }


def _wall_type_total(total):
    return {
        "item_type": "wall_type_total",
        "wall_type": total.get("type_code"),
        "quantity": total.get("total_linear_ft"),
        "unit": "LF",
        "linear_footage": total.get("total_linear_ft"),
        "notes": f"Total: {total.get('wall_count')} wall segments",
    }


def _clarification(q):
    affects = q.get("affects") or _join(q.get("affects_wall_types"))
    return {
        "item_type": "clarification_needed",
        "description": q.get("question"),
        "quantity": 1,
        "unit": "EA",
        "needs_clarification": True,
        "notes": f"Type: {_or(q.get('question_type'), 'general')} | Context: {_or(q.get('context'))} | Affects: {affects}",
    }


def _room(room):
    return {
        "item_type": "room",
        "description": room.get("room_name"),
        "room_name": room.get("room_name"),
        "room_number": room.get("room_number"),
        "room_area": room.get("area_sqft"),
        "quantity": room.get("area_sqft"),
        "unit": "SF",
        "ceiling_height": room.get("ceiling_height"),
        "ceiling_type": room.get("ceiling_type"),
        "confidence_score": _confidence(room),
        "notes": (
            f"Perimeter: {room.get('perimeter_lf') or 0} LF | Height: {_or(room.get('ceiling_height'), 'TBD')} | "
            f"Floor: {_or(room.get('floor_level'))}"
        ),
    }


def _ceiling(ceiling):
    confidence = _confidence(ceiling)
    category = ceiling.get("ceiling_category")
    material = ceiling.get("material")
    return {
        "item_type": "ceiling",
        "description": f"{category or 'ceiling'} - {material or ceiling.get('ceiling_type_code') or 'TBD'}",
        "quantity": ceiling.get("area_sqft"),
        "unit": "SF",
        "confidence_score": confidence,
        "room_name": ceiling.get("room_name"),
        "room_number": ceiling.get("room_number"),
        "ceiling_type": category or "drywall",
        "ceiling_type_detail": material,
        "ceiling_area_sqft": ceiling.get("area_sqft"),
        "ceiling_height": ceiling.get("ceiling_height"),
        "dimensions": {
            "area_sqft": ceiling.get("area_sqft"),
            "perimeter_lf": ceiling.get("perimeter_lf"),
            "grid_type": ceiling.get("grid_type"),
            "tile_size": ceiling.get("tile_size"),
            "layers": ceiling.get("layers"),
        },
        "notes": (
            f"[Confidence: {confidence}%] Category: {_or(category)} | Material: {_or(material, 'TBD')} | "
            f"Perimeter: {ceiling.get('perimeter_lf') or 0} LF | Fire: {_or(ceiling.get('fire_rating'))} | "
            f"UL: {_or(ceiling.get('ul_number'))} | Insulation: {_or(ceiling.get('insulation_type'), 'None')} "
            f"{ceiling.get('insulation_r_value') or ''} | "
            f"Seismic: {'Yes' if ceiling.get('seismic_bracing_required') else 'No'} | "
            f"Floor: {_or(ceiling.get('floor_level'))} | Unit: {_or(ceiling.get('unit_type'))}"
        ),
    }


def _ceiling_type_legend(ct):
    return {
        "item_type": "ceiling_type_legend",
        "description": f"{ct.get('type_code')} - {ct.get('description')}",
        "ceiling_type": ct.get("category"),
        "ceiling_type_detail": ct.get("material"),
        "quantity": 1,
        "unit": "EA",
        "notes": (
            f"Category: {_or(ct.get('category'))} | Material: {_or(ct.get('material'), 'TBD')} | "
            f"Fire: {_or(ct.get('fire_rating'))} | UL: {_or(ct.get('ul_number'))} | "
            f"STC: {_or(ct.get('stc_rating'))} | NRC: {_or(ct.get('nrc_rating'))}"
        ),
    }


def door_item_type(door_type):
    if door_type == "hollow_metal":
        return "hollow_metal_door"
    if door_type == "fire_rated":
        return "fire_door"
    return "door"


def _door(door):
    confidence = _confidence(door)
    width, height, thickness = door.get("width") or "", door.get("height") or "", door.get("thickness") or ""
    return {
        "item_type": door_item_type(door.get("door_type")),
        "description": f"{door.get('mark') or ''} - {width}x{height} {door.get('style') or ''} {door.get('material') or ''}",
        "quantity": door.get("quantity") or 1,
        "unit": "EA",
        "confidence_score": confidence,
        "room_name": door.get("room_name"),
        "door_material": door.get("material"),
        "door_type": door.get("door_type"),
        "door_size": f"{width}x{height}x{thickness}",
        "hardware_package": door.get("hardware_set"),
        "dimensions": {
            "width": door.get("width"),
            "height": door.get("height"),
            "thickness": door.get("thickness"),
            "wood_species": door.get("wood_species"),
            "wood_veneer": door.get("wood_veneer"),
            "style": door.get("style"),
            "frame_type": door.get("frame_type"),
            "frame_material": door.get("frame_material"),
            "frame_gauge": door.get("frame_gauge"),
            "hardware_set": door.get("hardware_set"),
            "coordinates": _point(door.get("coordinates")),
        },
        "notes": (
            f"[Confidence: {confidence}%] Mark: {_or(door.get('mark'))} | Type: {_or(door.get('door_type'))} | "
            f"Material: {_or(door.get('material'), 'TBD')} | Species: {_or(door.get('wood_species'))} | "
            f"Veneer: {_or(door.get('wood_veneer'))} | Frame: {_or(door.get('frame_type'))} | "
            f"HW Set: {_or(door.get('hardware_set'))} | Fire: {_or(door.get('fire_rating'))} | "
            f"Floor: {_or(door.get('floor_level'))} | Unit: {_or(door.get('unit_type'))}"
        ),
    }


def _door_hardware_set(hw):
    lock = hw.get("lockset_function") or hw.get("lockset_type")
    return {
        "item_type": "door_hardware_set",
        "description": f"Set {hw.get('set_number')} - {_or(lock)}",
        "quantity": 1,
        "unit": "EA",
        "hardware_package": hw.get("set_number"),
        "hardware_components": {
            "lockset_type": hw.get("lockset_type"),
            "lockset_function": hw.get("lockset_function"),
            "manufacturer": hw.get("manufacturer"),
            "finish": hw.get("finish"),
            "hinge_type": hw.get("hinge_type"),
            "hinge_qty": hw.get("hinge_qty"),
            "closer_type": hw.get("closer_type"),
            "stop_type": hw.get("stop_type"),
            "threshold": hw.get("threshold"),
            "weatherstrip": hw.get("weatherstrip"),
            "ada_compliant": hw.get("ada_compliant"),
        },
        "confidence_score": _confidence(hw),
        "notes": (
            f"Set: {_or(hw.get('set_number'))} | Lock: {_or(lock)} | Mfr: {_or(hw.get('manufacturer'), 'TBD')} | "
            f"Finish: {_or(hw.get('finish'), 'TBD')} | Hinge: {_or(hw.get('hinge_type'), 'TBD')} | "
            f"Closer: {_or(hw.get('closer_type'))} | ADA: {'Yes' if hw.get('ada_compliant') else 'No'}"
        ),
    }


def _window(window):
    confidence = _confidence(window)
    width, height = window.get("width") or "", window.get("height") or ""
    return {
        "item_type": "window_mulled" if window.get("multi_lite") else "window",
        "description": f"{window.get('mark') or ''} - {width}x{height} {window.get('type') or ''} {window.get('material') or ''}",
        "quantity": window.get("quantity") or 1,
        "unit": "EA",
        "confidence_score": confidence,
        "room_name": window.get("room_name"),
        "window_material": window.get("material"),
        "window_size": f"{width}x{height}",
        "dimensions": {
            "width": window.get("width"),
            "height": window.get("height"),
            "type": window.get("type"),
            "material": window.get("material"),
            "manufacturer": window.get("manufacturer"),
            "glass_type": window.get("glass_type"),
            "frame_color": window.get("frame_color"),
            "multi_lite": window.get("multi_lite"),
            "lite_config": window.get("lite_config"),
            "u_value": window.get("u_value"),
            "shgc": window.get("shgc"),
            "coordinates": _point(window.get("coordinates")),
        },
        "notes": (
            f"[Confidence: {confidence}%] Mark: {_or(window.get('mark'))} | Type: {_or(window.get('type'))} | "
            f"Material: {_or(window.get('material'), 'TBD')} | Mfr: {_or(window.get('manufacturer'), 'TBD')} | "
            f"Glass: {_or(window.get('glass_type'))} | Lites: {_or(window.get('lite_config'))} | "
            f"Elevation: {_or(window.get('elevation'))} | Floor: {_or(window.get('floor_level'))}"
        ),
    }


def _millwork(mw):
    linear_ft, area_sqft = mw.get("linear_ft"), mw.get("area_sqft")
    if linear_ft:
        unit = "LF"
    elif area_sqft:
        unit = "SF"
    else:
        unit = "EA"
    return {
        "item_type": f"millwork_{mw.get('item_type') or 'trim'}",
        "description": f"{mw.get('item_type') or 'Trim'} - {mw.get('profile') or ''} {mw.get('size') or ''} {mw.get('material') or ''}",
        "quantity": linear_ft or area_sqft or 1,
        "unit": unit,
        "linear_footage": linear_ft,
        "room_name": mw.get("room_name"),
        "material_spec": mw.get("material"),
        "confidence_score": _confidence(mw),
        "notes": (
            f"Type: {_or(mw.get('item_type'))} | Profile: {_or(mw.get('profile'))} | Size: {_or(mw.get('size'))} | "
            f"Material: {_or(mw.get('material'), 'TBD')} | Finish: {_or(mw.get('finish'))} | "
            f"Floor: {_or(mw.get('floor_level'))} | Unit: {_or(mw.get('unit_type'))}"
        ),
    }


def casework_item_type(item_type):
    item_type = item_type or ""
    if "kitchen" in item_type:
        return "kitchen_cabinet"
    if "vanity" in item_type:
        return "bathroom_vanity"
    return "casework"


def _casework(cw):
    return {
        "item_type": casework_item_type(cw.get("item_type")),
        "description": f"{cw.get('item_type') or 'Cabinet'} - {cw.get('size') or ''} {cw.get('door_style') or ''} {cw.get('material') or ''}",
        "quantity": cw.get("quantity") or 1,
        "unit": "EA",
        "room_name": cw.get("room_name"),
        "material_spec": cw.get("material"),
        "confidence_score": _confidence(cw),
        "dimensions": {
            "size": cw.get("size"),
            "door_style": cw.get("door_style"),
            "material": cw.get("material"),
            "finish": cw.get("finish"),
            "countertop": cw.get("countertop"),
            "hardware": cw.get("hardware"),
        },
        "notes": (
            f"Type: {_or(cw.get('item_type'))} | Size: {_or(cw.get('size'))} | Style: {_or(cw.get('door_style'))} | "
            f"Material: {_or(cw.get('material'), 'TBD')} | Finish: {_or(cw.get('finish'))} | "
            f"Countertop: {_or(cw.get('countertop'))} | Floor: {_or(cw.get('floor_level'))}"
        ),
    }


def _bathroom_partition(bp):
    count = (sanitize_numeric(bp.get("stall_count")) or 0) + (sanitize_numeric(bp.get("urinal_screen_count")) or 0)
    return {
        "item_type": "bathroom_partition",
        "description": f"{bp.get('type') or 'Partition'} - {bp.get('material') or ''} {bp.get('core') or ''}",
        "quantity": count or 1,
        "unit": "EA",
        "room_name": bp.get("room_name"),
        "material_spec": f"{bp.get('material') or ''} {bp.get('core') or ''}".strip(),
        "confidence_score": _confidence(bp),
        "dimensions": {
            "type": bp.get("type"),
            "material": bp.get("material"),
            "core": bp.get("core"),
            "manufacturer": bp.get("manufacturer"),
            "color": bp.get("color"),
            "configuration": bp.get("configuration"),
            "stall_count": bp.get("stall_count"),
            "urinal_screen_count": bp.get("urinal_screen_count"),
        },
        "notes": (
            f"Type: {_or(bp.get('type'))} | Material: {_or(bp.get('material'), 'TBD')} | Core: {_or(bp.get('core'))} | "
            f"Mfr: {_or(bp.get('manufacturer'), 'TBD')} | Color: {_or(bp.get('color'))} | "
            f"Stalls: {bp.get('stall_count') or 0} | Urinal Screens: {bp.get('urinal_screen_count') or 0}"
        ),
    }


def _bathroom_accessory(ba):
    return {
        "item_type": "bathroom_accessory",
        "description": f"{ba.get('item_type') or 'Accessory'} - {ba.get('manufacturer') or ''} {ba.get('model') or ''}",
        "quantity": ba.get("quantity") or 1,
        "unit": "EA",
        "room_name": ba.get("room_name"),
        "material_spec": ba.get("material"),
        "confidence_score": _confidence(ba),
        "dimensions": {
            "item_type": ba.get("item_type"),
            "manufacturer": ba.get("manufacturer"),
            "model": ba.get("model"),
            "material": ba.get("material"),
            "finish": ba.get("finish"),
            "ada_compliant": ba.get("ada_compliant"),
        },
        "notes": (
            f"Type: {_or(ba.get('item_type'))} | Mfr: {_or(ba.get('manufacturer'), 'TBD')} | "
            f"Model: {_or(ba.get('model'))} | Material: {_or(ba.get('material'))} | Finish: {_or(ba.get('finish'))} | "
            f"ADA: {'Yes' if ba.get('ada_compliant') else 'No'}"
        ),
    }


def insulation_item_type(purpose):
    if purpose == "sound":
        return "sound_insulation"
    if purpose == "fire":
        return "fire_insulation"
    return "thermal_insulation"


def _insulation(ins):
    return {
        "item_type": insulation_item_type(ins.get("purpose")),
        "description": f"{ins.get('type') or 'Insulation'} R-{ins.get('r_value') or 'TBD'} - {ins.get('location') or ''}",
        "quantity": 1,
        "unit": "EA",
        "room_name": ins.get("location"),
        "material_spec": ins.get("type"),
        "confidence_score": _confidence(ins),
        "notes": (
            f"Location: {_or(ins.get('location'))} | Type: {_or(ins.get('type'), 'TBD')} | "
            f"R-Value: {_or(ins.get('r_value'), 'TBD')} | Thickness: {_or(ins.get('thickness'), 'TBD')} | "
            f"Purpose: {_or(ins.get('purpose'), 'thermal')} | Wall Types: {_join(ins.get('wall_types'))} | "
            f"{ins.get('notes') or ''}"
        ),
    }


def _structural_hardware(hw):
    seismic = bool(hw.get("is_seismic"))
    return {
        "item_type": "seismic_hardware" if seismic else "structural_hardware",
        "description": hw.get("item"),
        "quantity": hw.get("quantity") or 1,
        "unit": "EA",
        "room_name": hw.get("location"),
        "confidence_score": _confidence(hw),
        "notes": f"{hw.get('manufacturer') or 'Simpson Strong-Tie'} | {'[SEISMIC] ' if seismic else ''}{hw.get('notes') or ''}",
    }


def _seismic_requirement(seismic):
    return {
        "item_type": "seismic_requirement",
        "description": seismic.get("description"),
        "quantity": 1,
        "unit": "EA",
        "notes": (
            f"Type: {_or(seismic.get('requirement_type'), 'general')} | Applies to: {_or(seismic.get('applies_to'), 'both')} | "
            f"Category: {_or(seismic.get('seismic_category'), 'TBD')} | {seismic.get('notes') or ''}"
        ),
    }


def _insulation_spec(ins):
    return {
        "item_type": "insulation",
        "description": f"{ins.get('type') or 'Insulation'} R-{ins.get('r_value') or 'TBD'}",
        "quantity": 1,
        "unit": "EA",
        "room_name": ins.get("location"),
        "notes": (
            f"Location: {_or(ins.get('location'))} | Type: {_or(ins.get('type'), 'TBD')} | "
            f"R-Value: {_or(ins.get('r_value'), 'TBD')} | Thickness: {_or(ins.get('thickness'), 'TBD')} | "
            f"Facing: {_or(ins.get('facing'))} | {ins.get('notes') or ''}"
        ),
    }


def _beam(beam):
    length_ft = beam.get("length_ft")
    return {
        "item_type": beam.get("type") or "beam",
        "description": beam.get("size"),
        "quantity": length_ft or 1,
        "unit": "LF" if length_ft else "EA",
        "linear_footage": length_ft,
        "room_name": beam.get("location"),
        "confidence_score": _confidence(beam),
        "notes": f"Type: {beam.get('type') or 'beam'}",
    }


def _soffit(soffit):
    return {
        "item_type": "soffit",
        "quantity": soffit.get("length_ft") or 1,
        "unit": "LF",
        "linear_footage": soffit.get("length_ft"),
        "room_name": soffit.get("location"),
        "confidence_score": _confidence(soffit),
        "dimensions": {
            "width_inches": soffit.get("width_inches"),
            "depth_inches": soffit.get("depth_inches"),
            "length_ft": soffit.get("length_ft"),
        },
        "notes": f'{soffit.get("width_inches")}"W x {soffit.get("depth_inches")}"D | Framing: {_or(soffit.get("framing"), "TBD")}',
    }


def _deck_height(dh):
    height = dh.get("height_ft_in")
    return {
        "item_type": "deck_height",
        "description": f"{dh.get('floor_level')} - {height}",
        "quantity": 1,
        "unit": "EA",
        "room_name": dh.get("area"),
        "wall_height": sanitize_numeric(re.sub(r"[^\d.]", "", height)) if isinstance(height, str) else None,
        "notes": f"Floor: {dh.get('floor_level')} | Height: {height} | Area: {_or(dh.get('area'), 'General')}",
    }


def _general_note(note):
    return {
        "item_type": "general_note",
        "description": note.get("note"),
        "quantity": 1,
        "unit": "EA",
        "notes": f"Category: {_or(note.get('category'), 'other')} | Applies to: {_or(note.get('applies_to'), 'All')}",
    }


def _ul_assembly(ul):
    return {
        "item_type": "ul_assembly",
        "description": f"{ul.get('ul_number')} - {ul.get('description')}",
        "quantity": 1,
        "unit": "EA",
        "notes": (
            f"Fire Rating: {ul.get('fire_rating')} | Type: {_or(ul.get('assembly_type'), 'wall')} | "
            f"Wall Types: {_join(ul.get('wall_types_using'))} | Ceiling Types: {_join(ul.get('ceiling_types_using'))}"
        ),
    }


# key in the model's JSON -> row builder, in storage order
BUILDERS = [
    ("specifications", _specification),
    ("wall_types_legend", _wall_type_legend),
    ("walls", _wall),
    ("wall_type_totals", _wall_type_total),
    ("clarifications_needed", _clarification),
    ("rooms", _room),
    ("ceilings", _ceiling),
    ("ceiling_types_legend", _ceiling_type_legend),
    ("doors", _door),
    ("door_hardware_sets", _door_hardware_set),
    ("windows", _window),
    ("millwork", _millwork),
    ("casework", _casework),
    ("bathroom_partitions", _bathroom_partition),
    ("bathroom_accessories", _bathroom_accessory),
    ("insulation", _insulation),
    ("structural_hardware", _structural_hardware),
    ("seismic_requirements", _seismic_requirement),
    ("insulation_specs", _insulation_spec),
    ("beams_headers", _beam),
    ("soffits", _soffit),
    ("deck_heights", _deck_height),
    ("general_notes", _general_note),
    ("ul_assemblies", _ul_assembly),
]


def _entries(parsed, key):
    entries = parsed.get(key) or []
    if not isinstance(entries, list):
        return []
    return [e for e in entries if isinstance(e, dict)]


def build_takeoff_items(parsed: dict, page_number) -> list:
    """Turn one page's model answer into unsanitized takeoff rows."""
    page = page_number or 1
    items = [_sheet_info(parsed, page)]
    for key, builder in BUILDERS:
        for entry in _entries(parsed, key):
            items.append(builder(entry))
    for item in items:
        item["page_number"] = page
    return items


def _count(parsed, key):
    value = parsed.get(key)
    return len(value) if isinstance(value, list) else 0


def summarize(parsed: dict) -> dict:
    return {
        "walls": _count(parsed, "walls"),
        "wallTypes": _count(parsed, "wall_types_legend"),
        "rooms": _count(parsed, "rooms"),
        "ceilings": _count(parsed, "ceilings"),
        "ceilingTypes": _count(parsed, "ceiling_types_legend"),
        "doors": _count(parsed, "doors"),
        "doorHardwareSets": _count(parsed, "door_hardware_sets"),
        "windows": _count(parsed, "windows"),
        "millwork": _count(parsed, "millwork"),
        "casework": _count(parsed, "casework"),
        "bathroomPartitions": _count(parsed, "bathroom_partitions"),
        "bathroomAccessories": _count(parsed, "bathroom_accessories"),
        "insulation": _count(parsed, "insulation") + _count(parsed, "insulation_specs"),
        "hardware": _count(parsed, "structural_hardware"),
        "seismicItems": _count(parsed, "seismic_requirements"),
        "beams": _count(parsed, "beams_headers"),
        "soffits": _count(parsed, "soffits"),
        "deckHeights": _count(parsed, "deck_heights"),
        "notes": _count(parsed, "general_notes"),
        "ulAssemblies": _count(parsed, "ul_assemblies"),
    }


def summary_message(sheet_type, items_stored, summary):
    return (
        f"Sheet: {sheet_type or 'Unknown'} | Items: {items_stored} | Walls: {summary['walls']} | "
        f"Rooms: {summary['rooms']} | Ceilings: {summary['ceilings']} | Doors: {summary['doors']} | "
        f"Windows: {summary['windows']} | Millwork: {summary['millwork']} | Casework: {summary['casework']}"
    )
