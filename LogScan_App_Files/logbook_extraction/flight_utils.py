"""
Flight utilities - formatting and sanity checks shared by export and review.
"""

import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional


_N_NUMBER_RE = re.compile(r'^N\d{1,5}[A-Z]{0,2}$')
_ROUTE_RE = re.compile(r'^[A-Z]{3,4}-[A-Z]{3,4}$')

# Formats accepted when re-reading an entry date (edited values included).
ENTRY_DATE_FORMATS = ("%Y-%m-%d", "%Y/%m/%d", "%m/%d/%Y")


def format_flight_time(hours) -> str:
    """
    Render decimal hours with one decimal place.

    Ties round up on the exact binary value (1.25 -> "1.3"), matching the
    ForeFlight exporter this output has to agree with.
    """
    try:
        value = Decimal(float(hours or 0))
    except (TypeError, ValueError, InvalidOperation):
        value = Decimal(0)
    return str(value.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def parse_flight_time(time_str) -> float:
    """
    Parse flight time text into decimal hours.

    "1:30" -> 1.5, "1.3 hrs" -> 1.3, unparseable -> 0.0
    """
    if isinstance(time_str, (int, float)):
        return float(time_str)
    cleaned = re.sub(r'[^\d.:]', '', str(time_str or ''))

    if ':' in cleaned:
        hours, _, minutes = cleaned.partition(':')
        try:
            return float(hours or 0) + float(minutes or 0) / 60.0
        except ValueError:
            return 0.0

    try:
        return float(cleaned)
    except ValueError:
        return 0.0


def is_valid_aircraft_id(registration: str) -> bool:
    """Basic US N-number check."""
    return bool(_N_NUMBER_RE.match(str(registration or '').upper()))


def is_valid_route(route: str) -> bool:
    """ICAO/IATA pair joined by a hyphen."""
    return bool(_ROUTE_RE.match(str(route or '').upper()))


def parse_entry_date(value) -> Optional[date]:
    """Parse an entry date into a calendar date, or None."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    s = str(value or '').strip()
    if not s:
        return None
    for fmt in ENTRY_DATE_FORMATS:
        try:
            return datetime.strptime(s, fmt).date()
        except ValueError:
            continue
    return None
