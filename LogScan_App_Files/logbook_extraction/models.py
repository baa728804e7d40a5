"""
Models - Flight log records and OCR result types

FlightLogEntry is the unit exported to ForeFlight. Every parsing stage works on
partial entries: plain dicts keyed by the FlightLogEntry field names that hold
only the fields actually found.

OCR types mirror the Azure Read result (pages -> lines -> words) with flat
bounding boxes [x1, y1, x2, y2, ...] starting at the top-left corner.
"""

from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional


# Confidence used when neither OCR nor the parser supplies one.
DEFAULT_CONFIDENCE = 0.8

# A parsed line/row with fewer populated fields than this is an OCR artifact.
MIN_POPULATED_FIELDS = 2

STRING_FIELDS = ("date", "aircraft_id", "aircraft_type", "route")
TIME_FIELDS = ("total_time", "pic_time", "dual_time")
ENTRY_FIELDS = STRING_FIELDS + TIME_FIELDS + ("landings",)

# Partial entries are dicts with a subset of ENTRY_FIELDS (plus optional confidence).
PartialFlightLogEntry = Dict[str, Any]


def count_populated(partial: Optional[PartialFlightLogEntry]) -> int:
    """Number of fields present in a partial entry."""
    if not partial:
        return 0
    return sum(1 for k, v in partial.items() if k in ENTRY_FIELDS and v is not None)


def is_record(partial: Optional[PartialFlightLogEntry]) -> bool:
    """True when a partial entry has enough fields to be a logbook row."""
    return count_populated(partial) >= MIN_POPULATED_FIELDS


@dataclass
class FlightLogEntry:
    """One logbook row ready for review and export."""
    id: str
    date: str = ""
    aircraft_id: str = ""
    aircraft_type: str = ""
    route: str = ""
    total_time: float = 0.0
    pic_time: float = 0.0
    dual_time: float = 0.0
    landings: int = 0
    confidence: Optional[float] = DEFAULT_CONFIDENCE

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FlightLogEntry":
        """Build an entry from a (possibly hand-edited) dict, ignoring unknown keys."""
        kwargs = {k: data[k] for k in cls.__dataclass_fields__ if k in data}
        return cls(**kwargs)


@dataclass
class ValidationResult:
    valid: bool
    errors: List[str] = field(default_factory=list)


# =============================================================================
# OCR result types
# =============================================================================

def _bbox_coord(bbox: List[float], idx: int) -> Optional[float]:
    if bbox is None or len(bbox) < 2:
        return None
    try:
        return float(bbox[idx])
    except (TypeError, ValueError):
        return None


@dataclass
class OcrWord:
    text: str
    bounding_box: List[float] = field(default_factory=list)
    confidence: Optional[float] = None

    @property
    def left(self) -> Optional[float]:
        return _bbox_coord(self.bounding_box, 0)

    @property
    def top(self) -> Optional[float]:
        return _bbox_coord(self.bounding_box, 1)

    @property
    def has_geometry(self) -> bool:
        return self.left is not None and self.top is not None


@dataclass
class OcrLine:
    text: str
    bounding_box: List[float] = field(default_factory=list)
    confidence: float = DEFAULT_CONFIDENCE
    words: List[OcrWord] = field(default_factory=list)

    @property
    def left(self) -> Optional[float]:
        return _bbox_coord(self.bounding_box, 0)

    @property
    def top(self) -> Optional[float]:
        return _bbox_coord(self.bounding_box, 1)

    @property
    def has_geometry(self) -> bool:
        return self.left is not None and self.top is not None


@dataclass
class OcrPage:
    number: int = 1
    width: Optional[float] = None
    height: Optional[float] = None
    unit: str = "pixel"
    lines: List[OcrLine] = field(default_factory=list)


@dataclass
class OcrResponse:
    """
    Result of one OCR call.

    `error` is set (and `pages` empty) when the service failed; an empty but
    successful result is not an error.
    """
    pages: List[OcrPage] = field(default_factory=list)
    raw_text: str = ""
    status: str = "succeeded"
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def lines(self) -> List[OcrLine]:
        return [ln for page in self.pages for ln in page.lines]

    @property
    def has_geometry(self) -> bool:
        return any(ln.has_geometry for ln in self.lines)

    @classmethod
    def failure(cls, message: str, status: str = "failed") -> "OcrResponse":
        return cls(pages=[], raw_text="", status=status, error=message)

    @classmethod
    def from_text(cls, text: str) -> "OcrResponse":
        """Wrap plain OCR text (no geometry) as a one-page response."""
        lines = [OcrLine(text=ln) for ln in (text or "").split("\n") if ln.strip()]
        return cls(pages=[OcrPage(lines=lines)], raw_text=(text or "").strip())
