import sys
import unittest
from datetime import date, datetime
from pathlib import Path


# Allow `import logbook_extraction.*` when running from repo root.
APP_ROOT = Path(__file__).resolve().parents[1]
if str(APP_ROOT) not in sys.path:
    sys.path.insert(0, str(APP_ROOT))


from logbook_extraction import field_extractors as fx  # noqa: E402


class TestExtractDate(unittest.TestCase):
    def test_slash_date_with_four_digit_year(self) -> None:
        self.assertEqual(fx.extract_date("01/15/2024 N12345"), "2024-01-15")

    def test_dash_date_with_two_digit_year(self) -> None:
        self.assertEqual(fx.extract_date("3-7-98 PA28"), "1998-03-07")
        self.assertEqual(fx.extract_date("3-7-05 PA28"), "2005-03-07")

    def test_two_digit_year_pivot(self) -> None:
        self.assertEqual(fx.extract_date("1/2/50"), "2050-01-02")
        self.assertEqual(fx.extract_date("1/2/51"), "1951-01-02")

    def test_iso_style_dates_match_month_day_first(self) -> None:
        # MM-DD and MM/DD patterns run before YYYY-MM-DD and match inside it
        today = date(2026, 1, 1)
        self.assertEqual(fx.extract_date("2024-01-15", today=today), "2026-01-15")
        self.assertEqual(fx.extract_date("2024/01/15 N1", today=today), "2026-01-15")
        self.assertEqual(fx.extract_date("2024/1/5", today=today), "2026-01-05")

    def test_missing_year_uses_current_year(self) -> None:
        self.assertEqual(fx.extract_date("7/4 KPAO", today=date(2023, 5, 1)), "2023-07-04")
        self.assertEqual(fx.extract_date("7/4"), f"{date.today().year}-07-04")

    def test_pattern_priority_beats_position(self) -> None:
        # slash pattern is tried first even when a dash date appears earlier
        self.assertEqual(fx.extract_date("02-20-2024 then 01/15/2024"), "2024-01-15")

    def test_round_trip_mm_dd_yyyy(self) -> None:
        for d in (date(2024, 1, 15), date(1999, 12, 31), date(2020, 2, 29), date(2031, 7, 4)):
            text = f"{d.month:02d}/{d.day:02d}/{d.year}"
            out = fx.extract_date(text)
            self.assertEqual(datetime.strptime(out, "%Y-%m-%d").date(), d)

    def test_no_date(self) -> None:
        self.assertIsNone(fx.extract_date("no date here"))
        self.assertIsNone(fx.extract_date(""))
        self.assertIsNone(fx.extract_date(None))


class TestExtractAircraft(unittest.TestCase):
    def test_n_number_case_insensitive(self) -> None:
        self.assertEqual(fx.extract_aircraft_id("flew n123ab today"), "N123AB")

    def test_fallback_styles(self) -> None:
        self.assertEqual(fx.extract_aircraft_id("flew PA28 today"), "PA28")
        self.assertEqual(fx.extract_aircraft_id("reg 1234AB"), "1234AB")

    def test_no_aircraft_id(self) -> None:
        self.assertIsNone(fx.extract_aircraft_id("KPAO-KSQL 1.2"))

    def test_aircraft_type_codes(self) -> None:
        self.assertEqual(fx.extract_aircraft_type("N12345 C-172 KPAO"), "C172")
        self.assertEqual(fx.extract_aircraft_type("sr22"), "SR22")
        self.assertEqual(fx.extract_aircraft_type("PA-28 checkout"), "PA28")

    def test_aircraft_type_full_names(self) -> None:
        self.assertEqual(fx.extract_aircraft_type("cessna 172 pattern work"), "C172")
        self.assertEqual(fx.extract_aircraft_type("Piper Cherokee"), "PA28")

    def test_unknown_type(self) -> None:
        self.assertIsNone(fx.extract_aircraft_type("Boeing 737"))

    def test_normalize_aircraft_type(self) -> None:
        self.assertEqual(fx.normalize_aircraft_type("Cessna-172"), "C172")
        self.assertEqual(fx.normalize_aircraft_type("da-40"), "DA40")


class TestExtractRoute(unittest.TestCase):
    def test_separators(self) -> None:
        self.assertEqual(fx.extract_route("KPAO-KSQL"), "KPAO-KSQL")
        self.assertEqual(fx.extract_route("KPAO/KSQL"), "KPAO-KSQL")
        self.assertEqual(fx.extract_route("KPAO - KSQL"), "KPAO-KSQL")
        self.assertEqual(fx.extract_route("KPAO KSQL"), "KPAO-KSQL")

    def test_no_route(self) -> None:
        self.assertIsNone(fx.extract_route("1.2 2"))


class TestExtractTimes(unittest.TestCase):
    def test_positional_assignment(self) -> None:
        self.assertEqual(
            fx.extract_times("1.2 1.2 0.0"),
            {"total_time": 1.2, "pic_time": 1.2, "dual_time": 0.0},
        )

    def test_only_total(self) -> None:
        self.assertEqual(fx.extract_times("KPAO-KSQL 1.5"), {"total_time": 1.5})

    def test_extra_decimals_ignored(self) -> None:
        self.assertEqual(
            fx.extract_times("12.25 3.5 1.0 4.4"),
            {"total_time": 12.25, "pic_time": 3.5, "dual_time": 1.0},
        )

    def test_no_times(self) -> None:
        self.assertEqual(fx.extract_times(""), {})
        self.assertEqual(fx.extract_times("N12345 C172"), {})


class TestExtractLandings(unittest.TestCase):
    def test_explicit_phrase(self) -> None:
        self.assertEqual(fx.extract_landings("3 landings"), 3)
        self.assertEqual(fx.extract_landings("LDG: 4"), 4)
        self.assertEqual(fx.extract_landings("30 ldg"), 30)

    def test_standalone_integer(self) -> None:
        self.assertEqual(fx.extract_landings("01/15/2024 N12345 C172 KPAO-KSQL 1.2 2"), 2)

    def test_numbers_inside_dates_and_times_are_not_landings(self) -> None:
        self.assertIsNone(fx.extract_landings("01/15/2024 1.2"))
        self.assertIsNone(fx.extract_landings("N12345"))

    def test_standalone_out_of_range(self) -> None:
        self.assertIsNone(fx.extract_landings("25"))


if __name__ == "__main__":
    unittest.main()
