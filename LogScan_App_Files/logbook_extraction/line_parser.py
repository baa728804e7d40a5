"""
Line Parser - Turn one line of plain OCR text into a partial flight entry

Every field extractor runs against the whole cleaned line; column splitting is
only reported for debugging.
"""

import re
from typing import List, Optional

from . import field_extractors
from .models import PartialFlightLogEntry


_WS_RE = re.compile(r'\s+')
_COLUMN_GAP_RE = re.compile(r'\s{2,}')


def clean_line(line: str) -> str:
    """Trim and collapse whitespace runs to single spaces."""
    return _WS_RE.sub(' ', str(line or '').strip())


def split_columns(line: str) -> List[str]:
    """
    Candidate columns: the raw line split on gaps of two or more spaces.

    Not used for field assignment.
    """
    return [part for part in _COLUMN_GAP_RE.split(str(line or '').strip()) if part.strip()]


def parse_line(line: str, verbose: bool = False) -> Optional[PartialFlightLogEntry]:
    """
    Extract whatever logbook fields a single line holds.

    Returns None when no field was found. Callers still decide whether the
    result is a real row (see models.is_record).
    """
    cleaned = clean_line(line)
    if not cleaned:
        return None

    if verbose:
        print(f"  - Line parts: {split_columns(line)}")

    entry: PartialFlightLogEntry = {}

    value = field_extractors.extract_date(cleaned)
    if value is not None:
        entry['date'] = value

    value = field_extractors.extract_aircraft_id(cleaned)
    if value is not None:
        entry['aircraft_id'] = value

    value = field_extractors.extract_aircraft_type(cleaned)
    if value is not None:
        entry['aircraft_type'] = value

    value = field_extractors.extract_route(cleaned)
    if value is not None:
        entry['route'] = value

    entry.update(field_extractors.extract_times(cleaned))

    landings = field_extractors.extract_landings(cleaned)
    if landings is not None:
        entry['landings'] = landings

    return entry or None
