import sys
import unittest
from pathlib import Path


# Allow `import logbook_extraction.*` when running from repo root.
APP_ROOT = Path(__file__).resolve().parents[1]
if str(APP_ROOT) not in sys.path:
    sys.path.insert(0, str(APP_ROOT))


from logbook_extraction.config import ColumnBand  # noqa: E402
from logbook_extraction.models import OcrLine, OcrWord  # noqa: E402
from logbook_extraction import row_parser  # noqa: E402


def _line(text: str, x: float, y: float = 100, words=None) -> OcrLine:
    return OcrLine(text=text, bounding_box=[x, y, x + 60, y, x + 60, y + 20, x, y + 20],
                   words=words or [])


def _word(text: str, x: float, y: float = 100) -> OcrWord:
    return OcrWord(text=text, bounding_box=[x, y, x + 30, y, x + 30, y + 20, x, y + 20])


class TestRowParser(unittest.TestCase):
    def test_default_layout_row(self) -> None:
        row = [
            _line("01/15/24", 50),
            _line("N12345", 250),
            _line("C172", 380),
            _line("KPAO", 520),
            _line("KSQL", 600),
            _line("1.2", 720),
            _line("1.2", 800),
            _line("2", 900),
        ]
        self.assertEqual(
            row_parser.parse_row(row),
            {
                "date": "2024-01-15",
                "aircraft_id": "N12345",
                "aircraft_type": "C172",
                "route": "KPAO-KSQL",
                "total_time": 1.2,
                "pic_time": 1.2,
                "landings": 2,
            },
        )

    def test_word_positions_override_line_position(self) -> None:
        line = _line("N123AB PA28", 210, words=[_word("N123AB", 210), _word("PA28", 760)])
        # PA28 sits in the times band by position, so it is not an aircraft type there
        self.assertIsNone(row_parser.parse_row([line]))

        line = _line("N123AB PA28", 210, words=[_word("N123AB", 210), _word("PA28", 330)])
        self.assertEqual(row_parser.parse_row([line]), {"aircraft_id": "N123AB", "aircraft_type": "PA28"})

    def test_only_first_two_airports_form_route(self) -> None:
        row = [_line("KPAO", 510), _line("KSQL", 580), _line("KHWD", 650), _line("1.0", 720)]
        entry = row_parser.parse_row(row)
        self.assertEqual(entry["route"], "KPAO-KSQL")

    def test_times_fill_slots_in_order(self) -> None:
        row = [_line("N1", 250), _line("1.5", 710), _line("0.5", 760), _line("1.0", 810), _line("9.9", 860)]
        entry = row_parser.parse_row(row)
        self.assertEqual((entry["total_time"], entry["pic_time"], entry["dual_time"]), (1.5, 0.5, 1.0))

    def test_large_decimal_falls_through_to_landings(self) -> None:
        row = [_line("N1", 250), _line("25.0", 720)]
        self.assertEqual(row_parser.parse_row(row), {"aircraft_id": "N1", "landings": 25})

    def test_single_field_row_is_rejected(self) -> None:
        self.assertIsNone(row_parser.parse_row([_line("01/15/24", 50), _line("Remarks", 300)]))

    def test_custom_layout(self) -> None:
        layout = (
            ColumnBand("date", None, 100),
            ColumnBand("times", 100, 300),
            ColumnBand("aircraft", 300, None),
        )
        row = [_line("2/3/2022", 10), _line("1.4", 150), _line("N77", 400)]
        self.assertEqual(
            row_parser.parse_row(row, layout=layout),
            {"date": "2022-02-03", "total_time": 1.4, "aircraft_id": "N77"},
        )

    def test_line_box_used_when_words_have_no_boxes(self) -> None:
        row = [
            _line("N12345", 250, words=[OcrWord(text="N12345")]),
            _line("1.2", 720, words=[OcrWord(text="1.2")]),
        ]
        self.assertEqual(row_parser.parse_row(row), {"aircraft_id": "N12345", "total_time": 1.2})

    def test_unboxed_words_skipped_when_others_have_boxes(self) -> None:
        line = _line("x", 50, words=[OcrWord(text="01/15/24"), _word("N1", 250), _word("1.1", 720)])
        self.assertEqual(row_parser.parse_row([line]), {"aircraft_id": "N1", "total_time": 1.1})

    def test_band_for(self) -> None:
        layout = row_parser.DEFAULT_COLUMN_LAYOUT
        self.assertEqual(row_parser.band_for(199.9, layout).field_kind, "date")
        self.assertEqual(row_parser.band_for(200, layout).field_kind, "aircraft")
        self.assertEqual(row_parser.band_for(700, layout).field_kind, "times")
        self.assertEqual(row_parser.band_for(-5, layout).field_kind, "date")


if __name__ == "__main__":
    unittest.main()
