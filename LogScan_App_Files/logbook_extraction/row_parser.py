"""
Row Parser - Assign fields of a grouped logbook row by column position

Each word's left x picks a ColumnBand; the band's field kind decides which
(narrow) matcher runs on the word. Layout bands come from config and can be
swapped for other logbook forms.
"""

import re
from typing import Iterable, List, Optional, Sequence

from .config import ColumnBand, DEFAULT_COLUMN_LAYOUT
from .field_extractors import format_date_parts, normalize_aircraft_type
from .models import OcrLine, OcrWord, PartialFlightLogEntry, is_record


_SLASH_DATE_RE = re.compile(r'\b(\d{1,2})/(\d{1,2})(?:/(\d{2,4}))?\b')
_N_NUMBER_RE = re.compile(r'^N\d+[A-Z]*$', re.IGNORECASE)
_TYPE_CODE_RE = re.compile(r'^(C|PA|SR|DA|BE)\w*\d+$', re.IGNORECASE)
_AIRPORT_RE = re.compile(r'^[A-Z]{3,4}$', re.IGNORECASE)
_LEADING_NUMBER_RE = re.compile(r'^\s*([+-]?(?:\d+\.?\d*|\.\d+))')

TIME_RANGE = (0.1, 20.0)
LANDINGS_RANGE = (1, 50)


def _leading_number(text: str) -> Optional[float]:
    """Numeric prefix of text ("1.2h" -> 1.2), None if it does not start with a number."""
    match = _LEADING_NUMBER_RE.match(text)
    if not match:
        return None
    return float(match.group(1))


def row_words(row: Iterable[OcrLine]) -> List[OcrWord]:
    """Words of a row; a line whose words carry no boxes counts as a single word."""
    words: List[OcrWord] = []
    for line in row:
        if any(w.has_geometry for w in line.words):
            words.extend(line.words)
        else:
            words.append(OcrWord(text=line.text, bounding_box=list(line.bounding_box),
                                 confidence=line.confidence))
    return words


def band_for(x: float, layout: Sequence[ColumnBand]) -> Optional[ColumnBand]:
    """First band containing x."""
    for band in layout:
        if band.contains(x):
            return band
    return None


def _apply_date(entry: PartialFlightLogEntry, text: str) -> None:
    match = _SLASH_DATE_RE.search(text)
    if match:
        entry['date'] = format_date_parts(match.group(1), match.group(2), match.group(3))


def _apply_aircraft(entry: PartialFlightLogEntry, text: str) -> None:
    if _N_NUMBER_RE.match(text):
        entry['aircraft_id'] = text.upper()
    elif _TYPE_CODE_RE.match(text):
        entry['aircraft_type'] = normalize_aircraft_type(text)


def _apply_route(entry: PartialFlightLogEntry, text: str) -> None:
    if not _AIRPORT_RE.match(text):
        return
    code = text.upper()
    route = entry.get('route')
    if not route:
        entry['route'] = code
    elif '-' not in route:
        entry['route'] = f"{route}-{code}"


def _apply_times(entry: PartialFlightLogEntry, text: str) -> None:
    num = _leading_number(text)
    if num is None:
        return
    t_lo, t_hi = TIME_RANGE
    l_lo, l_hi = LANDINGS_RANGE
    if t_lo <= num <= t_hi and '.' in text:
        for key in ('total_time', 'pic_time', 'dual_time'):
            if not entry.get(key):
                entry[key] = num
                break
    elif num == int(num) and l_lo <= num <= l_hi:
        if not entry.get('landings'):
            entry['landings'] = int(num)


_BAND_HANDLERS = {
    'date': _apply_date,
    'aircraft': _apply_aircraft,
    'route': _apply_route,
    'times': _apply_times,
}


def parse_row(row: Sequence[OcrLine],
              layout: Sequence[ColumnBand] = DEFAULT_COLUMN_LAYOUT,
              verbose: bool = False) -> Optional[PartialFlightLogEntry]:
    """
    Parse one grouped row (lines ordered left to right).

    Returns None when fewer than two fields were found.
    """
    entry: PartialFlightLogEntry = {}

    for word in row_words(row):
        text = (word.text or '').strip()
        x = word.left
        if not text or x is None:
            continue
        band = band_for(x, layout)
        if band is None:
            continue
        _BAND_HANDLERS[band.field_kind](entry, text)

    if verbose:
        print(f"  - Row {' | '.join(ln.text for ln in row)!r} -> {entry}")

    return entry if is_record(entry) else None
