"""
Review IO - Hand entries to a reviewer and read their edits back

Two formats:
- JSON: list of entry dicts (FlightLogEntry.to_dict)
- Excel: one "Entries" sheet, styled header, suspicious cells highlighted

Reviewers may edit any cell and delete rows. Rows that come back empty are
dropped; rows without an id get a fresh one.
"""

import json
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, List, Sequence

import openpyxl
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

from .flight_utils import (
    is_valid_aircraft_id,
    is_valid_route,
    parse_entry_date,
    parse_flight_time,
)
from .models import FlightLogEntry, TIME_FIELDS
from .normalizer import make_entry_id


SHEET_TITLE = "Entries"

# (entry attribute, column header)
REVIEW_COLUMNS = [
    ("id", "ID"),
    ("date", "Date"),
    ("aircraft_id", "Aircraft ID"),
    ("aircraft_type", "Aircraft Type"),
    ("route", "Route"),
    ("total_time", "Total Time"),
    ("pic_time", "PIC Time"),
    ("dual_time", "Dual Time"),
    ("landings", "Landings"),
    ("confidence", "Confidence"),
]

HEADER_FONT = Font(bold=True)
HEADER_FILL = PatternFill(start_color="D9E1F2", end_color="D9E1F2", fill_type="solid")
SUSPECT_FILL = PatternFill(start_color="FFF2CC", end_color="FFF2CC", fill_type="solid")


def _coerce_entry(raw: Dict[str, Any], index: int) -> FlightLogEntry:
    """Entry from reviewer-edited values (blank -> default, "1:30" -> 1.5)."""
    data: Dict[str, Any] = {}
    for key in ("date", "aircraft_id", "aircraft_type", "route"):
        val = raw.get(key)
        data[key] = "" if val is None else str(val).strip()
    # Excel turns typed dates into datetimes
    parsed_date = raw.get("date")
    if isinstance(parsed_date, (datetime, date)):
        data["date"] = parse_entry_date(parsed_date).isoformat()
    data["aircraft_id"] = data["aircraft_id"].upper()
    data["aircraft_type"] = data["aircraft_type"].upper()
    data["route"] = data["route"].upper()

    for key in TIME_FIELDS:
        data[key] = parse_flight_time(raw.get(key))
    data["landings"] = int(parse_flight_time(raw.get("landings")))

    conf = raw.get("confidence")
    try:
        data["confidence"] = None if conf in (None, "") else float(conf)
    except (TypeError, ValueError):
        data["confidence"] = None

    entry_id = raw.get("id")
    data["id"] = str(entry_id).strip() if entry_id not in (None, "") else make_entry_id(index)
    return FlightLogEntry.from_dict(data)


def _is_blank(raw: Dict[str, Any]) -> bool:
    return all(raw.get(attr) in (None, "") for attr, _ in REVIEW_COLUMNS if attr != "id")


def _rows_to_entries(rows: List[Dict[str, Any]]) -> List[FlightLogEntry]:
    kept = [r for r in rows if not _is_blank(r)]
    entries = [_coerce_entry(r, i) for i, r in enumerate(kept)]

    # ids stay unique even if a reviewer copied a row
    seen = set()
    for i, entry in enumerate(entries):
        if entry.id in seen:
            entry.id = make_entry_id(i, prefix="edited")
        seen.add(entry.id)
    return entries


# =============================================================================
# JSON
# =============================================================================

def save_review_json(entries: Sequence[FlightLogEntry], path: Path) -> Path:
    out_path = Path(path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(json.dumps([e.to_dict() for e in entries], indent=2), encoding="utf-8")
    return out_path


def load_review_json(path: Path) -> List[FlightLogEntry]:
    """
    Raises:
        ValueError: file does not hold a JSON list of objects
    """
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, list) or not all(isinstance(r, dict) for r in data):
        raise ValueError(f"Review file {path} must hold a JSON list of entries")
    return _rows_to_entries(data)


# =============================================================================
# Excel
# =============================================================================

def export_review_workbook(entries: Sequence[FlightLogEntry], path: Path) -> Path:
    """Write entries to an .xlsx sheet for review."""
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = SHEET_TITLE

    for col_idx, (_, header) in enumerate(REVIEW_COLUMNS, start=1):
        cell = ws.cell(row=1, column=col_idx, value=header)
        cell.font = HEADER_FONT
        cell.fill = HEADER_FILL
        cell.alignment = Alignment(horizontal="center")

    for row_idx, entry in enumerate(entries, start=2):
        values = entry.to_dict()
        for col_idx, (attr, _) in enumerate(REVIEW_COLUMNS, start=1):
            cell = ws.cell(row=row_idx, column=col_idx, value=values.get(attr))
            if attr == "aircraft_id" and not is_valid_aircraft_id(entry.aircraft_id):
                cell.fill = SUSPECT_FILL
            elif attr == "route" and not is_valid_route(entry.route):
                cell.fill = SUSPECT_FILL
            elif attr in TIME_FIELDS:
                cell.number_format = "0.0"

    # Auto-fit column widths (approximate)
    for col_idx, (_, header) in enumerate(REVIEW_COLUMNS, start=1):
        max_len = len(header)
        for row_idx in range(2, len(entries) + 2):
            cell_val = ws.cell(row=row_idx, column=col_idx).value
            if cell_val is not None:
                max_len = max(max_len, min(40, len(str(cell_val))))
        ws.column_dimensions[get_column_letter(col_idx)].width = max_len + 3

    ws.freeze_panes = "A2"

    out_path = Path(path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    wb.save(str(out_path))
    return out_path


def load_review_workbook(path: Path) -> List[FlightLogEntry]:
    """
    Read entries back from a review workbook.

    Columns are located by header text, so reordered columns still load.

    Raises:
        ValueError: the sheet has no recognizable header row
    """
    wb = openpyxl.load_workbook(str(path), data_only=True)
    try:
        ws = wb[SHEET_TITLE] if SHEET_TITLE in wb.sheetnames else wb.worksheets[0]
        rows = list(ws.iter_rows(values_only=True))
    finally:
        wb.close()

    if not rows:
        raise ValueError(f"Review workbook {path} is empty")

    by_header = {header.lower(): attr for attr, header in REVIEW_COLUMNS}
    header_row = [str(v or "").strip().lower() for v in rows[0]]
    col_map = {i: by_header[h] for i, h in enumerate(header_row) if h in by_header}
    if "date" not in col_map.values():
        raise ValueError(f"Review workbook {path} has no entry header row")

    records: List[Dict[str, Any]] = []
    for values in rows[1:]:
        record = {attr: values[i] for i, attr in col_map.items() if i < len(values)}
        records.append(record)
    return _rows_to_entries(records)


def save_review_file(entries: Sequence[FlightLogEntry], path: Path) -> Path:
    """JSON or Excel by file extension."""
    if Path(path).suffix.lower() == ".xlsx":
        return export_review_workbook(entries, path)
    return save_review_json(entries, path)


def load_review_file(path: Path) -> List[FlightLogEntry]:
    if Path(path).suffix.lower() == ".xlsx":
        return load_review_workbook(path)
    return load_review_json(path)
