import io
import logging
import re
from collections import OrderedDict
from datetime import datetime

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter
from reportlab.lib import colors
from reportlab.lib.pagesizes import landscape, letter
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from .materials import WallInput, generate_material_report, wall_spec_from_legend

logger = logging.getLogger(__name__)

header_font = Font(bold=True, size=11, color="FFFFFF")
header_fill = PatternFill(start_color="4F81BD", end_color="4F81BD", fill_type="solid")
border_style = Border(
    left=Side(style="thin"),
    right=Side(style="thin"),
    top=Side(style="thin"),
    bottom=Side(style="thin"),
)


# =================== TAKEOFF DATA ===================
def wall_rows(items):
    return [
        {
            "wall_type": item.wall_type or "UNTYPED",
            "linear_footage": item.linear_footage or 0,
            "room_name": item.room_name or "",
            "description": item.description or "",
            "notes": item.notes or "",
        }
        for item in items
        if item.item_type == "wall"
    ]


def legend_rows(items):
    legend = OrderedDict()
    for item in items:
        if item.item_type != "wall_type_legend" or not item.wall_type:
            continue
        legend.setdefault(item.wall_type, item)
    return legend


def wall_type_totals(items):
    """Totals by wall type from wall segments, else from the model's own totals."""
    totals = OrderedDict()
    for wall in wall_rows(items):
        entry = totals.setdefault(wall["wall_type"], {"type_code": wall["wall_type"], "total_lf": 0, "count": 0})
        entry["total_lf"] += wall["linear_footage"]
        entry["count"] += 1
    if totals:
        return list(totals.values())

    for item in items:
        if item.item_type == "wall_type_total" and item.wall_type:
            entry = totals.setdefault(item.wall_type, {"type_code": item.wall_type, "total_lf": 0, "count": 0})
            entry["total_lf"] += item.linear_footage or 0
    return list(totals.values())


def export_filename(project_name, suffix, extension):
    safe = re.sub(r"[^a-zA-Z0-9]", "_", project_name or "Project")
    return f"{safe}_{suffix}_{datetime.today().strftime('%Y-%m-%d')}.{extension}"


# =================== EXCEL ===================
def _write_sheet(ws, headers, rows, widths):
    ws.append(headers)
    for col in range(1, len(headers) + 1):
        cell = ws.cell(row=1, column=col)
        cell.font = header_font
        cell.fill = header_fill
        cell.border = border_style
        cell.alignment = Alignment(horizontal="center", vertical="center")
    for row in rows:
        ws.append(row)
    for index, width in enumerate(widths, start=1):
        ws.column_dimensions[get_column_letter(index)].width = width


def build_material_report(items, user_inputs):
    legend = legend_rows(items)
    specs = {
        code: wall_spec_from_legend(code, row.description, row.wall_materials)
        for code, row in legend.items()
    }
    walls = [WallInput(t["type_code"], t["total_lf"], user_inputs.deck_height) for t in wall_type_totals(items)]
    return generate_material_report(walls, specs, user_inputs)


def export_wall_takeoff_excel(plan, items, user_inputs=None) -> bytes:
    items = list(items)
    legend = legend_rows(items)
    totals = wall_type_totals(items)

    wb = Workbook()

    ws_summary = wb.active
    ws_summary.title = "Wall Type Summary"
    summary_rows = []
    for total in totals:
        row = legend.get(total["type_code"])
        spec = wall_spec_from_legend(total["type_code"], row.description, row.wall_materials) if row else None
        summary_rows.append([
            total["type_code"],
            (row.description or "") if row else "",
            round(total["total_lf"], 2),
            total["count"],
            spec.stud_size if spec else "TBD",
            spec.stud_spacing if spec else "TBD",
            (spec.fire_rating or "N/A") if spec else "N/A",
            spec.layers_each_side if spec else 1,
            spec.drywall_type if spec else "TBD",
        ])
    _write_sheet(
        ws_summary,
        ["Wall Type", "Description", "Total Linear Ft", "Wall Count", "Stud Size", "Stud Spacing",
         "Fire Rating", "Layers/Side", "Drywall Type"],
        summary_rows,
        [12, 40, 15, 12, 12, 12, 12, 12, 15],
    )

    ws_legend = wb.create_sheet("Wall Type Legend")
    legend_data = []
    for code, row in legend.items():
        materials = row.wall_materials if isinstance(row.wall_materials, dict) else {}
        legend_data.append([
            code,
            row.description or "",
            materials.get("sheathing") or "",
            materials.get("stud_size") or "",
            materials.get("stud_spacing") or "",
            materials.get("fire_rating") or "",
            materials.get("stc_rating") or "",
            materials.get("drywall_layers_each_side") or 1,
            materials.get("drywall_type") or "",
        ])
    _write_sheet(
        ws_legend,
        ["Type Code", "Description", "Composition", "Stud Size", "Stud Spacing", "Fire Rating",
         "STC Rating", "Layers/Side", "Drywall Type"],
        legend_data,
        [12, 50, 40, 12, 12, 12, 12, 12, 15],
    )

    ws_details = wb.create_sheet("Wall Details")
    _write_sheet(
        ws_details,
        ["Wall Type", "Room/Location", "Linear Footage", "Description", "Notes"],
        [[w["wall_type"], w["room_name"], w["linear_footage"], w["description"], w["notes"]] for w in wall_rows(items)],
        [12, 25, 15, 40, 40],
    )

    if user_inputs is not None:
        report = build_material_report(items, user_inputs)

        ws_materials = wb.create_sheet("Material Quantities")
        _write_sheet(
            ws_materials,
            ["Wall Type", "Linear Ft", "Square Ft", "Deck Height", "Studs (EA)", "Stud Size", "Stud Gauge",
             "Top Track (LF)", "Bottom Track (LF)", "Drywall Sheets", "Sheet Size", "Drywall Type",
             "Drywall Thickness", "Layers/Side", "Joint Compound (boxes)", "Finish Level", "Tape (rolls)",
             "Screws (lbs)", "Corner Bead (LF)", "Primer (gal)", "Paint (gal)", "Paint Type", "Paint Coats"],
            [[m.wall_type_code, m.linear_footage, m.square_footage, m.deck_height, m.stud_quantity, m.stud_size,
              m.stud_gauge, m.top_track_lf, m.bottom_track_lf, m.drywall_sheets, m.sheet_size, m.drywall_type,
              m.drywall_thickness, m.drywall_layers, m.joint_compound_boxes, m.finish_level, m.tape_rolls,
              m.screws_lbs, m.corner_bead_lf, m.primer_gallons, m.paint_gallons, m.paint_type, m.paint_coats]
             for m in report.by_wall_type],
            [12, 10, 10, 10, 10, 10, 10, 12, 14, 14, 10, 12, 14, 12, 20, 12, 12, 12, 15, 12, 12, 12, 12],
        )

        t = report.project_totals
        ws_totals = wb.create_sheet("Project Totals")
        _write_sheet(
            ws_totals,
            ["Item", "Quantity", "Unit"],
            [
                ["Total Linear Footage", t["total_linear_footage"], "LF"],
                ["Total Square Footage", t["total_square_footage"], "SF"],
                ["Total Studs", t["total_studs"], "EA"],
                ["Total Track", t["total_track_lf"], "LF"],
                ["Total Drywall Sheets", t["total_drywall_sheets"], "sheets"],
                ["Total Joint Compound", t["total_joint_compound"], "boxes"],
                ["Total Tape", t["total_tape"], "rolls"],
                ["Total Screws", t["total_screws"], "lbs"],
                ["Total Primer", t["total_primer_gallons"], "gallons"],
                ["Total Paint", t["total_paint_gallons"], "gallons"],
            ],
            [25, 15, 10],
        )

        u = report.user_inputs
        ws_inputs = wb.create_sheet("Estimate Settings")
        _write_sheet(
            ws_inputs,
            ["Setting", "Value", "Unit"],
            [
                ["Deck Height", u.deck_height, "feet"],
                ["Stud Gauge", u.stud_gauge, "ga"],
                ["Drywall Type", u.drywall_type, ""],
                ["Drywall Thickness", u.drywall_thickness, ""],
                ["Finish Level", u.finish_level, "(0-5)"],
                ["Paint Type", u.paint_type, ""],
                ["Paint Coats", u.paint_coats, "coats"],
                ["Waste Factor", u.waste_factor, "%"],
                ["Generated At", report.generated_at, ""],
            ],
            [20, 25, 10],
        )

    buffer = io.BytesIO()
    wb.save(buffer)
    logger.info("Exported wall takeoff for plan %s (%d wall types)", plan.pk, len(totals))
    return buffer.getvalue()


# =================== PDF ===================
def item_type_summary(items):
    summary = OrderedDict()
    for item in items:
        key = (item.item_type, item.unit or "")
        entry = summary.setdefault(key, {"count": 0, "quantity": 0.0})
        entry["count"] += 1
        entry["quantity"] += item.quantity or 0
    return [
        {"item_type": item_type, "unit": unit, "count": e["count"], "quantity": round(e["quantity"], 2)}
        for (item_type, unit), e in sorted(summary.items())
    ]


def _styled_table(data):
    table = Table(data, repeatRows=1)
    table.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), colors.grey),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.whitesmoke),
        ("ALIGN", (0, 0), (1, -1), "LEFT"),
        ("ALIGN", (2, 0), (-1, -1), "RIGHT"),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("BOTTOMPADDING", (0, 0), (-1, 0), 8),
        ("GRID", (0, 0), (-1, -1), 1, colors.black),
    ]))
    return table


def export_takeoff_pdf(plan, items) -> bytes:
    items = list(items)
    styles = getSampleStyleSheet()
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(buffer, pagesize=landscape(letter), title=f"{plan.name} Takeoff Summary")

    elements = [
        Paragraph(f"<b>{plan.name}</b> - Takeoff Summary", styles["Heading1"]),
        Paragraph(f"Generated: {datetime.today().strftime('%m/%d/%Y')}", styles["Normal"]),
        Spacer(1, 12),
    ]

    type_rows = [["Item Type", "Unit", "Count", "Quantity"]]
    for row in item_type_summary(items):
        type_rows.append([row["item_type"], row["unit"], row["count"], f"{row['quantity']:,.2f}"])
    elements.append(_styled_table(type_rows))

    totals = wall_type_totals(items)
    if totals:
        elements.append(Spacer(1, 18))
        elements.append(Paragraph("Wall Type Totals", styles["Heading2"]))
        wall_data = [["Wall Type", "Description", "Count", "Total LF"]]
        legend = legend_rows(items)
        for total in totals:
            row = legend.get(total["type_code"])
            description = (row.description or "") if row else ""
            wall_data.append([total["type_code"], description, total["count"], f"{total['total_lf']:,.2f}"])
        elements.append(_styled_table(wall_data))

    doc.build(elements)
    return buffer.getvalue()
