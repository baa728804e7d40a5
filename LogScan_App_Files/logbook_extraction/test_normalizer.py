import sys
import unittest
from pathlib import Path


# Allow `import logbook_extraction.*` when running from repo root.
APP_ROOT = Path(__file__).resolve().parents[1]
if str(APP_ROOT) not in sys.path:
    sys.path.insert(0, str(APP_ROOT))


from logbook_extraction.models import FlightLogEntry  # noqa: E402
from logbook_extraction.normalizer import normalize_entries  # noqa: E402


class TestNormalizer(unittest.TestCase):
    def test_fills_defaults_and_ids(self) -> None:
        entries = normalize_entries([
            {"date": "2024-01-15", "total_time": 1.2},
            {"aircraft_id": "N1", "landings": 3},
        ])
        self.assertEqual(
            entries[0],
            FlightLogEntry(id="entry-0", date="2024-01-15", aircraft_id="", aircraft_type="",
                           route="", total_time=1.2, pic_time=0.0, dual_time=0.0,
                           landings=0, confidence=0.8),
        )
        self.assertEqual(entries[1].id, "entry-1")
        self.assertEqual(entries[1].date, "")
        self.assertEqual(entries[1].total_time, 0.0)
        self.assertEqual(entries[1].landings, 3)

    def test_order_preserved_and_ids_unique(self) -> None:
        partials = [{"route": f"KAAA-KB{c}C", "date": "2024-01-01"} for c in "XYZ"]
        entries = normalize_entries(partials)
        self.assertEqual([e.route for e in entries], ["KAAA-KBXC", "KAAA-KBYC", "KAAA-KBZC"])
        self.assertEqual(len({e.id for e in entries}), 3)

    def test_supplied_confidence_is_kept(self) -> None:
        entries = normalize_entries([{"date": "2024-01-01", "total_time": 1.0, "confidence": 0.55}])
        self.assertEqual(entries[0].confidence, 0.55)

    def test_empty_input(self) -> None:
        self.assertEqual(normalize_entries([]), [])


if __name__ == "__main__":
    unittest.main()
