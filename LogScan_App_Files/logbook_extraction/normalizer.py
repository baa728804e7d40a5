"""
Normalizer - Turn partial entries into complete FlightLogEntry records
"""

from typing import Iterable, List

from .models import DEFAULT_CONFIDENCE, FlightLogEntry, PartialFlightLogEntry


def make_entry_id(index: int, prefix: str = "entry") -> str:
    return f"{prefix}-{index}"


def normalize_entry(partial: PartialFlightLogEntry, index: int,
                    id_prefix: str = "entry",
                    confidence: float = DEFAULT_CONFIDENCE) -> FlightLogEntry:
    """Fill absent strings with "" and absent numbers with 0."""
    conf = partial.get('confidence')
    return FlightLogEntry(
        id=make_entry_id(index, id_prefix),
        date=str(partial.get('date') or ''),
        aircraft_id=str(partial.get('aircraft_id') or ''),
        aircraft_type=str(partial.get('aircraft_type') or ''),
        route=str(partial.get('route') or ''),
        total_time=float(partial.get('total_time') or 0),
        pic_time=float(partial.get('pic_time') or 0),
        dual_time=float(partial.get('dual_time') or 0),
        landings=int(partial.get('landings') or 0),
        confidence=confidence if conf is None else float(conf),
    )


def normalize_entries(partials: Iterable[PartialFlightLogEntry],
                      id_prefix: str = "entry",
                      confidence: float = DEFAULT_CONFIDENCE) -> List[FlightLogEntry]:
    """
    One FlightLogEntry per partial, detection order preserved.

    Ids are sequential within the batch (entry-0, entry-1, ...).
    """
    return [
        normalize_entry(p, i, id_prefix=id_prefix, confidence=confidence)
        for i, p in enumerate(partials)
    ]
