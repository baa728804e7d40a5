"""
Dump how a saved Read API result is split into logbook rows.

For every grouped row prints each word with its x position and column band,
the structured-row parse, and the line parser's view of the raw text. Use it
to tune user_inputs/column_layout.json for a new logbook form.

Usage:
    python tools/dump_ocr_rows.py <read_result.json> [--layout column_layout.json] [--tolerance 20]
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

APP_ROOT = Path(__file__).resolve().parents[1] / "LogScan_App_Files"
if str(APP_ROOT) not in sys.path:
    sys.path.insert(0, str(APP_ROOT))

from logbook_extraction import config, line_parser, row_grouper, row_parser  # noqa: E402
from logbook_extraction.ocr_client import load_read_result  # noqa: E402


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Show row grouping and column bands for a saved OCR result.")
    parser.add_argument("ocr_json", type=str, help="Saved Read API result JSON")
    parser.add_argument("--layout", type=str, help="Column layout JSON (default: user_inputs/column_layout.json)")
    parser.add_argument("--tolerance", type=float, default=None, help="Same-row tolerance (default 20)")
    args = parser.parse_args(argv)

    response = load_read_result(Path(args.ocr_json))
    if not response.ok:
        print(f"[ERROR] {response.error}")
        return 1

    layout = config.load_column_layout(Path(args.layout) if args.layout else None)
    tolerance = config.row_tolerance() if args.tolerance is None else args.tolerance

    for page in response.pages:
        print(f"=== Page {page.number} ({len(page.lines)} lines) ===")
        rows = row_grouper.group_lines_by_row(page.lines, tolerance=tolerance)
        for idx, row in enumerate(rows, start=1):
            print(f"[Row {idx}] top={row[0].top:.0f}")
            for word in row_parser.row_words(row):
                band = row_parser.band_for(word.left, layout) if word.left is not None else None
                kind = band.field_kind if band else "-"
                print(f"    x={word.left!s:>7}  {kind:9} {word.text}")
            print(f"    structured -> {row_parser.parse_row(row, layout=layout)}")

    print("=== Text lines ===")
    for line in response.raw_text.split("\n"):
        if not line.strip():
            continue
        print(f"{line!r}")
        print(f"    columns -> {line_parser.split_columns(line)}")
        print(f"    parsed  -> {line_parser.parse_line(line)}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
