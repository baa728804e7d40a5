"""
Pipeline - OCR result to flight log entries

Two parsing strategies produce the same output (partial entries):
- SpatialRowStrategy: needs bounding boxes; groups lines into rows and reads
  fields by column position
- TextLineStrategy: plain text, one line at a time

Strategies are tried in order; one that cannot run on the input (no geometry)
or that finds nothing hands over to the next.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Protocol, Sequence

from . import config as cfg
from . import line_parser
from . import row_grouper
from . import row_parser
from .config import ColumnBand
from .models import FlightLogEntry, OcrResponse, PartialFlightLogEntry, is_record
from .normalizer import normalize_entries
from .ocr_client import AzureReadClient, load_image_bytes


class ParsingStrategy(Protocol):
    name: str

    def can_parse(self, response: OcrResponse) -> bool:
        ...

    def parse(self, response: OcrResponse, verbose: bool = False) -> List[PartialFlightLogEntry]:
        ...


class SpatialRowStrategy:
    """Row grouping + column bands over lines that carry bounding boxes."""

    name = "spatial"

    def __init__(self, layout: Optional[Sequence[ColumnBand]] = None,
                 row_tolerance: Optional[float] = None):
        self.layout = tuple(layout) if layout is not None else cfg.load_column_layout()
        self.row_tolerance = cfg.row_tolerance() if row_tolerance is None else float(row_tolerance)

    def can_parse(self, response: OcrResponse) -> bool:
        return response.has_geometry

    def parse(self, response: OcrResponse, verbose: bool = False) -> List[PartialFlightLogEntry]:
        entries: List[PartialFlightLogEntry] = []
        # Coordinates are only comparable within one page.
        for page in response.pages:
            rows = row_grouper.group_lines_by_row(page.lines, tolerance=self.row_tolerance)
            for row in rows:
                entry = row_parser.parse_row(row, layout=self.layout, verbose=verbose)
                if entry is not None:
                    entries.append(entry)
        if verbose:
            print(f"  - Structured parsing found {len(entries)} entries")
        return entries


class TextLineStrategy:
    """Line-by-line parsing of the flat OCR text."""

    name = "text"

    def can_parse(self, response: OcrResponse) -> bool:
        return bool(response.raw_text.strip())

    def parse(self, response: OcrResponse, verbose: bool = False) -> List[PartialFlightLogEntry]:
        lines = [ln for ln in response.raw_text.split('\n') if ln.strip()]
        if verbose:
            print(f"  - Text parsing over {len(lines)} lines")

        entries: List[PartialFlightLogEntry] = []
        for line in lines:
            entry = line_parser.parse_line(line, verbose=verbose)
            if is_record(entry):
                entries.append(entry)
            elif verbose:
                print(f"  - Skipped line: {line!r}")
        if verbose:
            print(f"  - Text parsing found {len(entries)} entries")
        return entries


def default_strategies(layout: Optional[Sequence[ColumnBand]] = None,
                       row_tolerance: Optional[float] = None) -> List[ParsingStrategy]:
    return [SpatialRowStrategy(layout=layout, row_tolerance=row_tolerance), TextLineStrategy()]


def parse_logbook_data(response: OcrResponse,
                       strategies: Optional[Sequence[ParsingStrategy]] = None,
                       verbose: bool = False) -> List[PartialFlightLogEntry]:
    """Partial entries from the first strategy that yields any."""
    entries, _ = _run_strategies(response, strategies, verbose)
    return entries


def _run_strategies(response: OcrResponse,
                    strategies: Optional[Sequence[ParsingStrategy]],
                    verbose: bool):
    if strategies is None:
        strategies = default_strategies()
    for strategy in strategies:
        if not strategy.can_parse(response):
            continue
        if verbose:
            print(f"Using {strategy.name} parsing")
        entries = strategy.parse(response, verbose=verbose)
        if entries:
            return entries, strategy.name
    return [], None


@dataclass
class ScanResult:
    """Entries extracted from one logbook image."""
    entries: List[FlightLogEntry] = field(default_factory=list)
    strategy: Optional[str] = None
    raw_text: str = ""
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class LogbookPipeline:
    """Scan one logbook page: OCR -> parse -> normalize."""

    def __init__(self, ocr_client: Optional[AzureReadClient] = None,
                 layout: Optional[Sequence[ColumnBand]] = None,
                 row_tolerance: Optional[float] = None,
                 verbose: bool = False):
        """
        Args:
            ocr_client: Read API client; only needed for image input
            layout: Column bands for the structured path (default: config/user_inputs)
            row_tolerance: Same-row vertical tolerance (default 20)
            verbose: Print progress
        """
        self.ocr_client = ocr_client
        self.strategies = default_strategies(layout=layout, row_tolerance=row_tolerance)
        self.verbose = verbose

    def entries_from_ocr(self, response: OcrResponse) -> ScanResult:
        """Parse an OCR response; a failed response yields its error and no entries."""
        if not response.ok:
            return ScanResult(error=response.error, raw_text=response.raw_text)

        partials, strategy = _run_strategies(response, self.strategies, self.verbose)
        entries = normalize_entries(partials)
        if self.verbose:
            print(f"Total entries parsed: {len(entries)}")
        return ScanResult(entries=entries, strategy=strategy, raw_text=response.raw_text)

    def entries_from_text(self, text: str) -> ScanResult:
        return self.entries_from_ocr(OcrResponse.from_text(text))

    def process_image(self, image_bytes: bytes) -> ScanResult:
        if self.ocr_client is None:
            raise ValueError("LogbookPipeline needs an ocr_client to process images")
        return self.entries_from_ocr(self.ocr_client.analyze(image_bytes))

    def process_image_file(self, path: Path) -> ScanResult:
        try:
            data = load_image_bytes(path)
        except OSError as e:
            return ScanResult(error=f"Could not read image {path}: {e}")
        return self.process_image(data)
