"""
CSV Export - ForeFlight logbook import format

Column order and header text are fixed by ForeFlight's importer:

    Date,Aircraft ID,Aircraft Type,Route,Total Time,PIC Time,Dual Time,Landings

Rows are joined with "\\n". An empty batch still produces the header.
"""

from datetime import date
from pathlib import Path
from typing import List, Optional, Sequence

from .flight_utils import format_flight_time, parse_entry_date
from .models import FlightLogEntry


CSV_HEADERS = [
    'Date',
    'Aircraft ID',
    'Aircraft Type',
    'Route',
    'Total Time',
    'PIC Time',
    'Dual Time',
    'Landings',
]


class ExportError(Exception):
    """Raised when the CSV file could not be written."""


def escape_csv_field(value: str) -> str:
    """Quote fields containing a comma, double quote or newline."""
    s = str(value)
    if ',' in s or '"' in s or '\n' in s:
        return '"' + s.replace('"', '""') + '"'
    return s


def format_date_for_csv(date_value: str) -> str:
    """YYYY-MM-DD from the entry's calendar fields; unparseable text is kept as-is."""
    parsed = parse_entry_date(date_value)
    if parsed is None:
        return str(date_value or '')
    return f"{parsed.year:04d}-{parsed.month:02d}-{parsed.day:02d}"


def entry_to_row(entry: FlightLogEntry) -> List[str]:
    return [
        escape_csv_field(format_date_for_csv(entry.date)),
        escape_csv_field(entry.aircraft_id or ''),
        escape_csv_field(entry.aircraft_type or ''),
        escape_csv_field(entry.route or ''),
        format_flight_time(entry.total_time or 0),
        format_flight_time(entry.pic_time or 0),
        format_flight_time(entry.dual_time or 0),
        str(int(entry.landings)) if entry.landings else '0',
    ]


def generate_csv(entries: Sequence[FlightLogEntry]) -> str:
    header = ','.join(CSV_HEADERS)
    if not entries:
        return header + '\n'

    csv_lines = [header]
    for entry in entries:
        csv_lines.append(','.join(entry_to_row(entry)))
    return '\n'.join(csv_lines)


def default_export_filename(today: Optional[date] = None) -> str:
    return f"logbook-export-{(today or date.today()).isoformat()}.csv"


def write_csv(entries: Sequence[FlightLogEntry], path: Path) -> Path:
    """
    Write the ForeFlight CSV (UTF-8).

    Raises:
        ExportError: the file could not be written; entries are untouched.
    """
    out_path = Path(path)
    content = generate_csv(entries)
    try:
        out_path.parent.mkdir(parents=True, exist_ok=True)
        with open(out_path, 'w', encoding='utf-8', newline='') as f:
            f.write(content)
    except OSError as e:
        raise ExportError(f"Failed to write CSV file {out_path}: {e}") from e
    return out_path


def generate_sample_csv() -> str:
    """Two-entry example of the export format."""
    sample_entries = [
        FlightLogEntry(id='sample-0', date='2024-01-15', aircraft_id='N12345',
                       aircraft_type='C172', route='KPAO-KSQL', total_time=1.2,
                       pic_time=1.2, dual_time=0, landings=2),
        FlightLogEntry(id='sample-1', date='2024-01-18', aircraft_id='N67890',
                       aircraft_type='PA28', route='KSQL-KHWD', total_time=1.8,
                       pic_time=0, dual_time=1.8, landings=3),
    ]
    return generate_csv(sample_entries)
