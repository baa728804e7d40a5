"""
Field Extractors - Pattern matchers for individual logbook fields

Each extractor takes free OCR text and returns the field value or None.
Nothing here raises on bad input: a miss simply leaves the field out.

Multiple candidates resolve by pattern priority, then by position in the text
(first match wins). Flight times are assigned purely by order of appearance
(total, PIC, dual); there is no semantic check that a number really is the
column it lands in.
"""

import re
from datetime import date
from typing import Dict, List, Optional, Tuple


# =============================================================================
# Date
# =============================================================================

# (pattern, group order) in priority order. Group order names which capture is
# month / day / year.
DATE_PATTERNS: List[Tuple[re.Pattern, Tuple[int, int, int]]] = [
    # MM/DD, MM/DD/YY, MM/DD/YYYY
    (re.compile(r'\b(\d{1,2})/(\d{1,2})(?:/(\d{2,4}))?\b'), (1, 2, 3)),
    # MM-DD, MM-DD-YY, MM-DD-YYYY
    (re.compile(r'\b(\d{1,2})-(\d{1,2})(?:-(\d{2,4}))?\b'), (1, 2, 3)),
    # YYYY/MM/DD or YYYY-MM-DD
    (re.compile(r'\b(\d{4})[/-](\d{1,2})[/-](\d{1,2})\b'), (2, 3, 1)),
]


def expand_year(year: Optional[str], today: Optional[date] = None) -> str:
    """
    Resolve a logbook year.

    Missing -> current year, two digits -> 19xx when > 50 else 20xx.
    """
    if not year:
        return str((today or date.today()).year)
    if len(year) == 2:
        return ('19' if int(year) > 50 else '20') + year
    return year


def format_date_parts(month: str, day: str, year: Optional[str],
                      today: Optional[date] = None) -> str:
    """Build YYYY-MM-DD from captured parts (no calendar validation)."""
    return f"{expand_year(year, today)}-{month.zfill(2)}-{day.zfill(2)}"


def extract_date(text: str, today: Optional[date] = None) -> Optional[str]:
    """
    Find the first logbook date in text.

    Examples:
        "01/15/2024 N12345" -> "2024-01-15"
        "3-7-98"            -> "1998-03-07"
        "2024/01/05"        -> "2024-01-05"
    """
    if not text:
        return None
    for pattern, (m_idx, d_idx, y_idx) in DATE_PATTERNS:
        match = pattern.search(text)
        if match:
            return format_date_parts(match.group(m_idx), match.group(d_idx),
                                     match.group(y_idx), today)
    return None


# =============================================================================
# Aircraft identification
# =============================================================================

AIRCRAFT_ID_PATTERNS = [
    re.compile(r'\bN\d{1,5}[A-Z]{0,3}\b', re.IGNORECASE),  # US N-number
    re.compile(r'\b[A-Z]{2,3}\d{2,4}[A-Z]?\b'),            # letters + digits
    re.compile(r'\b\d{4}[A-Z]{1,2}\b'),                    # digits + letters
]


def extract_aircraft_id(text: str) -> Optional[str]:
    if not text:
        return None
    for pattern in AIRCRAFT_ID_PATTERNS:
        match = pattern.search(text)
        if match:
            return match.group(0).upper()
    return None


# =============================================================================
# Aircraft type
# =============================================================================

AIRCRAFT_TYPE_PATTERNS = [
    re.compile(r'\b(C-?172|C-?152|C-?182|C-?206|C-?150|C-?177)\b', re.IGNORECASE),  # Cessna
    re.compile(r'\b(PA-?28|PA-?44|PA-?34|PA-?46)\b', re.IGNORECASE),                 # Piper
    re.compile(r'\b(SR-?20|SR-?22)\b', re.IGNORECASE),                               # Cirrus
    re.compile(r'\b(DA-?40|DA-?42|DA-?20)\b', re.IGNORECASE),                        # Diamond
    re.compile(r'\b(BE-?35|BE-?36|A-?36)\b', re.IGNORECASE),                         # Beechcraft
    re.compile(r'\bCESSNA\s+172\b', re.IGNORECASE),
    re.compile(r'\bPIPER\s+CHEROKEE\b', re.IGNORECASE),
]

# Full names / spellings -> canonical type designator
AIRCRAFT_TYPE_ALIASES: Dict[str, str] = {
    'CESSNA172': 'C172',
    'CESSNA152': 'C152',
    'CESSNA182': 'C182',
    'PIPER28': 'PA28',
    'PIPERPA28': 'PA28',
    'PIPERCHEROKEE': 'PA28',
}


def normalize_aircraft_type(aircraft_text: str) -> str:
    """Uppercase, strip separators and map known full names to short codes."""
    normalized = re.sub(r'[^A-Z0-9]', '', str(aircraft_text or '').upper())
    return AIRCRAFT_TYPE_ALIASES.get(normalized, normalized)


def extract_aircraft_type(text: str) -> Optional[str]:
    if not text:
        return None
    for pattern in AIRCRAFT_TYPE_PATTERNS:
        match = pattern.search(text)
        if match:
            return normalize_aircraft_type(match.group(0))
    return None


# =============================================================================
# Route
# =============================================================================

ROUTE_PATTERNS = [
    re.compile(r'\b([A-Z]{3,4})\s*[-/]\s*([A-Z]{3,4})\b'),  # KPAO-KSQL, KPAO/KSQL
    re.compile(r'\b([A-Z]{3,4})\s+([A-Z]{3,4})\b'),         # KPAO KSQL
    re.compile(r'\b(K[A-Z]{3})\s*[-/]\s*(K[A-Z]{3})\b'),
]


def extract_route(text: str) -> Optional[str]:
    if not text:
        return None
    for pattern in ROUTE_PATTERNS:
        match = pattern.search(text)
        if match:
            return f"{match.group(1)}-{match.group(2)}".upper()
    return None


# =============================================================================
# Flight times
# =============================================================================

TIME_PATTERN = re.compile(r'\b(\d{1,2}\.\d{1,2})\b')


def extract_times(text: str) -> Dict[str, float]:
    """
    Decimal hours in order of appearance: total, PIC, dual.

    Returns only the slots that were filled ({} when no decimals).
    """
    times: Dict[str, float] = {}
    if not text:
        return times
    values = [float(m.group(1)) for m in TIME_PATTERN.finditer(text)]
    for key, value in zip(("total_time", "pic_time", "dual_time"), values):
        times[key] = value
    return times


# =============================================================================
# Landings
# =============================================================================

LANDING_PATTERNS = [
    re.compile(r'\b(\d{1,2})\s*(?:landing|ldg|land)', re.IGNORECASE),  # "2 landings", "3 ldg"
    re.compile(r'(?:landing|ldg|land)\s*[:=]?\s*(\d{1,2})', re.IGNORECASE),  # "ldg: 2"
]
EXPLICIT_LANDINGS_RANGE = (1, 50)

# One or two digits not glued to another number, decimal point, date
# separator or identifier.
STANDALONE_INT_PATTERN = re.compile(r'(?<![\w./:-])(\d{1,2})(?![\w./:-])')
STANDALONE_LANDINGS_RANGE = (1, 20)


def extract_landings(text: str) -> Optional[int]:
    if not text:
        return None

    lo, hi = EXPLICIT_LANDINGS_RANGE
    for pattern in LANDING_PATTERNS:
        match = pattern.search(text)
        if match:
            count = int(match.group(1))
            if lo <= count <= hi:
                return count

    lo, hi = STANDALONE_LANDINGS_RANGE
    for match in STANDALONE_INT_PATTERN.finditer(text):
        num = int(match.group(1))
        if lo <= num <= hi:
            return num
    return None
