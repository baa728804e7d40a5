#!/usr/bin/env python3
"""
LogScan - CLI Entry Point

Scan a photographed logbook page into flight entries, review them, then
export a ForeFlight CSV:
1. scan: OCR the image (Azure Read API) or load a saved OCR result
2. review: edit the JSON / .xlsx file written by scan (any editor / Excel)
3. export: validate the reviewed entries and write the CSV

Usage:
    python run_logscan.py scan <image> [options]
    python run_logscan.py export <review file> [options]
    python run_logscan.py check-config
    python run_logscan.py sample-csv

Examples:
    # OCR a page and write entries for review
    python run_logscan.py scan page.jpg --review page_entries.xlsx

    # Re-parse a saved OCR result without calling the service
    python run_logscan.py scan --ocr-json page_ocr.json --review page_entries.json

    # Export reviewed entries
    python run_logscan.py export page_entries.xlsx --output logbook.csv

Credentials: user_inputs/azure_credentials.json ({"endpoint", "key"}) or
LOGSCAN_AZURE_ENDPOINT / LOGSCAN_AZURE_KEY.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from logbook_extraction import config, csv_export, review_io
from logbook_extraction.config import ConfigurationError
from logbook_extraction.ocr_client import AzureReadClient, load_read_result
from logbook_extraction.pipeline import LogbookPipeline
from logbook_extraction.validator import validate_entries


def _print_entries(entries) -> None:
    for entry in entries:
        print(
            f"{entry.id:>10}  {entry.date:10}  {entry.aircraft_id:8}  {entry.aircraft_type:6}  "
            f"{entry.route:11}  {entry.total_time:4.1f}  {entry.pic_time:4.1f}  "
            f"{entry.dual_time:4.1f}  {entry.landings}"
        )


def _load_ocr_config(args):
    if getattr(args, "credentials", None):
        return config.load_ocr_config(Path(args.credentials))
    return config.load_ocr_config()


def cmd_scan(args) -> int:
    layout = config.load_column_layout(Path(args.layout)) if args.layout else None

    if args.ocr_json:
        pipeline = LogbookPipeline(layout=layout, verbose=args.verbose)
        response = load_read_result(Path(args.ocr_json))
        result = pipeline.entries_from_ocr(response)
    elif not args.image:
        print("Error: Give an image or --ocr-json")
        return 1
    else:
        image_path = Path(args.image)
        if not image_path.is_file():
            print(f"Error: Image not found: {image_path}")
            return 1
        try:
            ocr_cfg = _load_ocr_config(args)
        except ConfigurationError as e:
            print(f"Error: {e}")
            return 2
        client = AzureReadClient(ocr_cfg, verbose=args.verbose)
        pipeline = LogbookPipeline(ocr_client=client, layout=layout, verbose=args.verbose)
        result = pipeline.process_image_file(image_path)

        if args.save_ocr and client.last_payload is not None:
            try:
                Path(args.save_ocr).write_text(json.dumps(client.last_payload, indent=2), encoding="utf-8")
            except OSError as e:
                print(f"Error: Could not save OCR result to {args.save_ocr}: {e}")
                return 1
            if args.verbose:
                print(f"OCR result saved to: {args.save_ocr}")

    if not result.ok:
        print(f"Error: {result.error}")
        return 1

    if args.verbose:
        print(f"Parsed {len(result.entries)} entries ({result.strategy or 'no'} parsing)")

    if args.review:
        out = review_io.save_review_file(result.entries, Path(args.review))
        print(f"Review file written: {out}")
    else:
        _print_entries(result.entries)
    return 0


def cmd_export(args) -> int:
    review_path = Path(args.review_file)
    if not review_path.exists():
        print(f"Error: Review file not found: {review_path}")
        return 1
    try:
        entries = review_io.load_review_file(review_path)
    except (ValueError, OSError) as e:
        print(f"Error: {e}")
        return 1
    if args.verbose:
        print(f"Loaded {len(entries)} entries from {review_path}")

    validation = validate_entries(entries)
    if not validation.valid:
        print("Cannot export, fix these entries first:")
        for msg in validation.errors:
            print(f"  - {msg}")
        return 1

    output = Path(args.output) if args.output else Path(csv_export.default_export_filename())
    try:
        out = csv_export.write_csv(entries, output)
    except csv_export.ExportError as e:
        print(f"Error: {e}")
        return 1
    print(f"Exported {len(entries)} entries to {out}")
    return 0


def cmd_check_config(args) -> int:
    try:
        ocr_cfg = _load_ocr_config(args)
    except ConfigurationError as e:
        print(f"OCR config valid: NO ({e})")
        return 2
    print("OCR config valid: YES")
    for key, value in ocr_cfg.describe().items():
        print(f"  {key}: {value}")
    layout = config.load_column_layout()
    print("Column layout:")
    for band in layout:
        print(f"  {band.field_kind:9} x in [{band.min_x}, {band.max_x})")
    return 0


def cmd_sample_csv(args) -> int:
    print(csv_export.generate_sample_csv())
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='LogScan - logbook photo to ForeFlight CSV',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )
    sub = parser.add_subparsers(dest='command', required=True)

    scan = sub.add_parser('scan', help='OCR a logbook page into flight entries')
    scan.add_argument('image', type=str, nargs='?', help='Logbook page image (jpg/png)')
    scan.add_argument('--ocr-json', type=str,
                      help='Use a saved Read API result instead of calling the service')
    scan.add_argument('--save-ocr', type=str, help='Save the raw Read API result to this JSON file')
    scan.add_argument('--review', type=str, help='Write entries to a review file (.json or .xlsx)')
    scan.add_argument('--layout', type=str, help='Column layout JSON (default: user_inputs/column_layout.json)')
    scan.add_argument('--credentials', type=str, help='Credentials JSON (default: user_inputs/azure_credentials.json)')
    scan.add_argument('--verbose', '-v', action='store_true', help='Verbose output')
    scan.set_defaults(func=cmd_scan)

    export = sub.add_parser('export', help='Validate reviewed entries and write the CSV')
    export.add_argument('review_file', type=str, help='Review file (.json or .xlsx)')
    export.add_argument('--output', type=str, help='CSV path (default: logbook-export-<date>.csv)')
    export.add_argument('--verbose', '-v', action='store_true', help='Verbose output')
    export.set_defaults(func=cmd_export)

    check = sub.add_parser('check-config', help='Show the (masked) OCR configuration')
    check.add_argument('--credentials', type=str, help='Credentials JSON (default: user_inputs/azure_credentials.json)')
    check.set_defaults(func=cmd_check_config)

    sample = sub.add_parser('sample-csv', help='Print an example export')
    sample.set_defaults(func=cmd_sample_csv)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
