import sys
import unittest
from pathlib import Path


# Allow `import logbook_extraction.*` when running from repo root.
APP_ROOT = Path(__file__).resolve().parents[1]
if str(APP_ROOT) not in sys.path:
    sys.path.insert(0, str(APP_ROOT))


from logbook_extraction import line_parser  # noqa: E402
from logbook_extraction.models import is_record  # noqa: E402


class TestLineParser(unittest.TestCase):
    def test_full_logbook_line(self) -> None:
        entry = line_parser.parse_line("01/15/2024  N12345  C172  KPAO-KSQL  1.2  2")
        self.assertEqual(
            entry,
            {
                "date": "2024-01-15",
                "aircraft_id": "N12345",
                "aircraft_type": "C172",
                "route": "KPAO-KSQL",
                "total_time": 1.2,
                "landings": 2,
            },
        )

    def test_dual_flight_line(self) -> None:
        entry = line_parser.parse_line("3/7/98 N5432 PA-28 KSQL/KHWD 1.8 0.0 1.8 3 ldg")
        self.assertEqual(
            entry,
            {
                "date": "1998-03-07",
                "aircraft_id": "N5432",
                "aircraft_type": "PA28",
                "route": "KSQL-KHWD",
                "total_time": 1.8,
                "pic_time": 0.0,
                "dual_time": 1.8,
                "landings": 3,
            },
        )

    def test_clean_line_collapses_whitespace(self) -> None:
        self.assertEqual(line_parser.clean_line("  a   b\t c "), "a b c")

    def test_split_columns_on_wide_gaps(self) -> None:
        self.assertEqual(
            line_parser.split_columns("01/15/2024  N12345   C172 KPAO"),
            ["01/15/2024", "N12345", "C172 KPAO"],
        )
        self.assertEqual(line_parser.split_columns("a b c"), ["a b c"])

    def test_nothing_found(self) -> None:
        self.assertIsNone(line_parser.parse_line(""))
        self.assertIsNone(line_parser.parse_line("   "))
        self.assertIsNone(line_parser.parse_line("Signature ______"))

    def test_single_field_line_is_not_a_record(self) -> None:
        entry = line_parser.parse_line("TOTALS 14.3")
        self.assertEqual(entry, {"total_time": 14.3})
        self.assertFalse(is_record(entry))


if __name__ == "__main__":
    unittest.main()
