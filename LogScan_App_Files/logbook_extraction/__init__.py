"""
LogScan Logbook Extraction

Turns OCR output of a photographed pilot logbook page into flight log entries
and exports them in ForeFlight's CSV import format.

Modules:
- models: FlightLogEntry, partial entries, OCR result types
- field_extractors: Regex matchers for date, aircraft, route, times, landings
- line_parser: Plain-text line -> partial entry
- row_grouper: Cluster OCR boxes into table rows
- row_parser: Column-band field assignment for a grouped row
- normalizer: Partial entries -> complete FlightLogEntry records
- validator: Pre-export business rules
- csv_export: ForeFlight CSV serializer
- config: OCR credentials, column layout, env knobs
- ocr_client: Azure Computer Vision Read API client + image preparation
- pipeline: Parsing strategies with fallback, page scan orchestration
- review_io: JSON / Excel review round-trip
- flight_utils: Flight time formatting and identifier checks
"""

__version__ = "1.0.0"
__all__ = [
    "models",
    "field_extractors",
    "line_parser",
    "row_grouper",
    "row_parser",
    "normalizer",
    "validator",
    "csv_export",
    "config",
    "ocr_client",
    "pipeline",
    "review_io",
    "flight_utils",
]
