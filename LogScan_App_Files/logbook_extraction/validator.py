"""
Validator - Business rules checked before a ForeFlight export

All rules run for every entry; messages name the 1-indexed entry position.
"""

from typing import List, Sequence

from .flight_utils import parse_entry_date
from .models import FlightLogEntry, ValidationResult


NO_ENTRIES_MESSAGE = "No flight log entries to export"


def validate_entry(entry: FlightLogEntry, position: int) -> List[str]:
    """Error messages for one entry (position is 1-indexed)."""
    errors: List[str] = []
    prefix = f"Entry {position}"

    if not entry.date:
        errors.append(f"{prefix}: Missing date")
    elif parse_entry_date(entry.date) is None:
        errors.append(f"{prefix}: Invalid date format")

    if not entry.aircraft_id:
        errors.append(f"{prefix}: Missing aircraft ID")

    total = entry.total_time or 0
    pic = entry.pic_time or 0
    dual = entry.dual_time or 0

    if total <= 0:
        errors.append(f"{prefix}: Invalid total time")

    if pic > 0 and dual > 0:
        errors.append(f"{prefix}: Cannot have both PIC time and dual time for the same flight")

    if pic and pic > total:
        errors.append(f"{prefix}: PIC time cannot exceed total time")

    if dual and dual > total:
        errors.append(f"{prefix}: Dual time cannot exceed total time")

    return errors


def validate_entries(entries: Sequence[FlightLogEntry]) -> ValidationResult:
    """Validate a batch; valid iff no messages were produced."""
    errors: List[str] = []

    if not entries:
        errors.append(NO_ENTRIES_MESSAGE)

    for position, entry in enumerate(entries, start=1):
        errors.extend(validate_entry(entry, position))

    return ValidationResult(valid=not errors, errors=errors)
