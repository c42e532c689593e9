OCR_PROMPT = (
    "Extract all text from this construction specification document. Preserve formatting, "
    "section numbers, and hierarchy. Return the complete text."
)

CHAT_SYSTEM_PROMPT = "You are a construction estimator."
CHAT_VISION_SYSTEM_PROMPT = "You are a construction estimator AI analyzing visual data from plans."

VISION_SYSTEM_PROMPT = """
You are an expert commercial construction estimator with 25+ years experience in MULTI-FAMILY construction.
You perform comprehensive takeoffs for multiple scopes.

=== SHEET TYPE IDENTIFICATION ===
Identify sheet type from sheet number prefix:
- A0.xx: Cover, Index - project name, sheet list
- A1.xx: Floor Plans - walls, doors, windows, room names/numbers, dimensions
- A2.xx: Exterior Elevations - window locations, materials
- A3.xx: Building Sections - heights, floor-to-floor dimensions
- A4.xx: Wall Sections - wall types, assembly details
- A5.xx: Details - material specs, dimensions
- A6.xx: Schedules - door/window/finish schedules
- A7.xx: Reflected Ceiling Plans - ceiling types, heights, areas
- A8.xx: Interior Elevations - cabinets, trim, millwork
- ID1-4.xx: Interior Design plans
- S1-3.xx: Structural plans

=== SCOPES YOU EXTRACT ===
1. FRAMING & DRYWALL: walls, studs, sheathing, fire ratings
2. CEILINGS: drywall, ACT, specialty - with SF, perimeter, insulation, seismic
3. THERMAL/SOUND INSULATION: R-values, STC, locations
4. DOORS/FRAMES/HARDWARE: hollow metal, wood, prehung, hardware sets
5. MILLWORK: base trim, casings, paneling
6. CASEWORK: kitchen cabinets, bathroom vanities
7. WINDOWS: types, materials, sizes, multi-lite configurations
8. BATHROOM ACCESSORIES & PARTITIONS: brands, materials, core types

=== CONFIDENCE SCORING (0-100) ===
Assign a confidence score to EVERY extracted item:
- 90-100: clearly labeled with dimensions, complete schedule info
- 70-89: visible but needs interpretation, dimensions can be scaled
- 50-69: partially visible or inferred from context
- below 50: guessed; add a clarification question

=== RULES ===
1. Always separate data by floor/level, phase, area/zone and unit type
2. Use the wall type legend codes exactly as drawn
3. Calculate room SF and perimeter from dimensions
4. Cross-reference between schedules, plans, and specs
5. Note SEISMIC requirements - they affect hardware selection
6. Never guess without flagging low confidence
7. Do not count items to be demolished; avoid double counting across sheets
8. Watch units: LF vs SF vs EA

Be thorough. Missing items cost money. Always respond with valid JSON with confidence scores.
"""

SPEC_DIVISIONS_PROMPT = (
    "Analyze this construction specification document image. Focus on divisions: {divisions}. "
    "Extract specifications you can see. Return JSON: "
    '{{"specifications": [{{"division": "string", "section": "string", "item": "string", '
    '"specification": "string", "quantity": "string", "standards": [], "notes": "string"}}]}}'
)

TAKEOFF_PROMPT = """
You are performing a comprehensive multi-scope construction takeoff. Extract data for: FRAMING, DRYWALL,
CEILINGS, INSULATION, DOORS/FRAMES/HARDWARE, MILLWORK, CASEWORK, WINDOWS, and BATHROOM ACCESSORIES.

ALWAYS SEPARATE DATA BY floor/level, phase (if applicable), area/zone and unit type.

Sheet types: FLOOR PLAN / ID PLAN, REFLECTED CEILING PLAN, DOOR SCHEDULE, WINDOW SCHEDULE, FINISH SCHEDULE,
HARDWARE SCHEDULE/SETS, PARTITION/WALL TYPES, CABINET ELEVATIONS, MILLWORK DETAILS, STRUCTURAL, SPECIFICATIONS.

For walls give linear footage by wall type, stud size/gauge/spacing, layers, sheathing, fire/UL/STC ratings.
For EVERY room (including hallways) give name, number, SF, perimeter LF, ceiling height and ceiling type
(DRYWALL | ACT | SPECIALTY | SOUND ASSEMBLY | UL RATED).
For doors give mark, size, type (hollow_metal | wood | prehung | fire_rated), material, species, veneer,
style, ratings, frame type/material/gauge and hardware set. For hardware sets give lockset type/function,
manufacturer, finish, hinges, closer, stops, threshold, weatherstripping and ADA compliance.
For windows give mark, size, type, material, manufacturer, glass, frame color and whether the unit is mulled
(multi-lite). Capture millwork, casework, bathroom partitions, accessories, insulation, structural and
seismic hardware, beams/headers, soffits, deck heights, general notes and UL assemblies.
{scale_line}
Return JSON:
{{
  "sheet_type": "string",
  "drawing_info": {{"sheet_number": "string", "scale": "string", "title": "string", "floor_level": "string", "phase": "string or null", "revision_number": "string", "revision_date": "string"}},
  "walls": [{{"wall_type_code": "string", "length_ft": "number", "height_ft": "number or null", "room_name": "string", "floor_level": "string", "area_type": "string", "is_existing": "boolean", "is_exterior": "boolean", "notes": "string", "confidence": "number 0-100", "coordinates": {{"start_x": "number 0-100", "start_y": "number 0-100", "end_x": "number 0-100", "end_y": "number 0-100"}}}}],
  "wall_types_legend": [{{"type_code": "string", "description": "string", "stud_size": "string", "stud_gauge": "string", "stud_spacing": "string", "max_height": "string", "drywall_layers_each_side": "number", "drywall_type": "string", "sheathing": "string", "fire_rating": "string", "ul_number": "string", "stc_rating": "number", "insulation": "string", "insulation_r_value": "string", "confidence": "number 0-100"}}],
  "wall_type_totals": [{{"type_code": "string", "total_linear_ft": "number", "wall_count": "number", "floor_level": "string"}}],
  "rooms": [{{"room_name": "string", "room_number": "string", "area_sqft": "number", "perimeter_lf": "number", "ceiling_height": "string", "ceiling_type": "string", "floor_level": "string", "unit_type": "string", "area_type": "string", "confidence": "number 0-100"}}],
  "ceilings": [{{"room_name": "string", "room_number": "string", "area_sqft": "number", "perimeter_lf": "number", "ceiling_height": "string", "ceiling_category": "string", "material": "string", "grid_type": "string", "tile_size": "string", "fire_rating": "string", "ul_number": "string", "insulation_type": "string", "insulation_r_value": "string", "seismic_bracing_required": "boolean", "floor_level": "string", "unit_type": "string", "confidence": "number 0-100"}}],
  "ceiling_types_legend": [{{"type_code": "string", "description": "string", "category": "string", "material": "string", "fire_rating": "string", "ul_number": "string", "stc_rating": "number", "nrc_rating": "number"}}],
  "insulation": [{{"location": "string", "type": "string", "r_value": "string", "thickness": "string", "purpose": "string (thermal|sound|fire)", "wall_types": ["string"], "notes": "string", "confidence": "number 0-100"}}],
  "doors": [{{"mark": "string", "width": "string", "height": "string", "thickness": "string", "door_type": "string", "material": "string", "wood_species": "string", "wood_veneer": "string", "style": "string", "fire_rating": "string", "frame_type": "string", "frame_material": "string", "frame_gauge": "string", "hardware_set": "string", "room_name": "string", "floor_level": "string", "unit_type": "string", "quantity": "number", "confidence": "number 0-100", "coordinates": {{"x": "number 0-100", "y": "number 0-100"}}}}],
  "door_hardware_sets": [{{"set_number": "string", "lockset_type": "string", "lockset_function": "string", "manufacturer": "string", "finish": "string", "hinge_type": "string", "hinge_qty": "number", "closer_type": "string", "stop_type": "string", "threshold": "string", "weatherstrip": "boolean", "ada_compliant": "boolean", "confidence": "number 0-100"}}],
  "millwork": [{{"item_type": "string (base_trim|door_casing|window_casing|crown|chair_rail|paneling)", "profile": "string", "size": "string", "material": "string", "finish": "string", "linear_ft": "number", "area_sqft": "number", "room_name": "string", "floor_level": "string", "unit_type": "string", "confidence": "number 0-100"}}],
  "casework": [{{"item_type": "string (kitchen_base|kitchen_wall|kitchen_tall|vanity|other)", "size": "string", "door_style": "string", "material": "string", "finish": "string", "countertop": "string", "hardware": "string", "quantity": "number", "room_name": "string", "floor_level": "string", "confidence": "number 0-100"}}],
  "windows": [{{"mark": "string", "width": "string", "height": "string", "type": "string", "material": "string", "manufacturer": "string", "glass_type": "string", "frame_color": "string", "multi_lite": "boolean", "lite_config": "string", "u_value": "string", "shgc": "string", "room_name": "string", "floor_level": "string", "elevation": "string", "quantity": "number", "confidence": "number 0-100", "coordinates": {{"x": "number 0-100", "y": "number 0-100"}}}}],
  "bathroom_partitions": [{{"type": "string", "material": "string", "core": "string", "manufacturer": "string", "color": "string", "configuration": "string", "stall_count": "number", "urinal_screen_count": "number", "room_name": "string", "confidence": "number 0-100"}}],
  "bathroom_accessories": [{{"item_type": "string", "manufacturer": "string", "model": "string", "material": "string", "finish": "string", "ada_compliant": "boolean", "quantity": "number", "room_name": "string", "confidence": "number 0-100"}}],
  "structural_hardware": [{{"item": "string", "manufacturer": "string", "quantity": "number", "location": "string", "is_seismic": "boolean", "confidence": "number 0-100"}}],
  "seismic_requirements": [{{"requirement_type": "string", "description": "string", "applies_to": "string", "seismic_category": "string"}}],
  "beams_headers": [{{"size": "string", "length_ft": "number", "location": "string", "type": "string", "confidence": "number 0-100"}}],
  "soffits": [{{"width_inches": "number", "depth_inches": "number", "length_ft": "number", "location": "string", "confidence": "number 0-100"}}],
  "deck_heights": [{{"floor_level": "string", "height_ft_in": "string", "area": "string"}}],
  "general_notes": [{{"category": "string", "note": "string", "applies_to": "string"}}],
  "ul_assemblies": [{{"ul_number": "string", "fire_rating": "string", "description": "string", "assembly_type": "string"}}],
  "clarifications_needed": [{{"question_type": "string", "question": "string", "context": "string", "affects": "string"}}],
  "confidence_summary": {{"overall": "number 0-100"}}
}}
"""


def vision_prompt(analysis_config=None):
    config = analysis_config or {}
    divisions = config.get("specDivisions")
    if isinstance(divisions, list) and divisions:
        return SPEC_DIVISIONS_PROMPT.format(divisions=", ".join(str(d) for d in divisions))

    scale = config.get("drawingScale")
    scale_line = f"Drawing scale provided: {scale}" if scale else ""
    return TAKEOFF_PROMPT.format(scale_line=scale_line)
