"""Tests for GTFSLoader and typed record parsing."""

import sys
import tempfile
import unittest
from datetime import date
from pathlib import Path

# Add src to path so we can import bustrack
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from bustrack.exceptions import InvalidTableName, SourceUnavailable
from bustrack.gtfs_loader import GTFSLoader
from bustrack.models import CalendarEntry, CalendarException, ExceptionType, StopTime, time_to_minutes

from fixtures import write_static_tables


class TestGTFSLoader(unittest.TestCase):
    """Test GTFS static table loading."""

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.static_dir = write_static_tables(self._tmp.name)
        self.loader = GTFSLoader(self.static_dir)

    def tearDown(self):
        self._tmp.cleanup()

    def test_load_routes_csv(self):
        """Rows come back as string mappings keyed by header."""
        routes = self.loader.load("routes")
        self.assertEqual(len(routes), 6)
        self.assertEqual(routes[0]["route_id"], "66-3136")
        self.assertEqual(routes[0]["route_short_name"], "66")
        self.assertEqual(routes[0]["route_type"], "3")

    def test_values_are_trimmed(self):
        (self.static_dir / "stops.txt").write_text(
            "stop_id, stop_name\n 1853 , UQ Lakes station stop A \n", encoding="utf-8"
        )
        stops = self.loader.load("stops")
        self.assertEqual(stops, [{"stop_id": "1853", "stop_name": "UQ Lakes station stop A"}])

    def test_invalid_table_name(self):
        with self.assertRaises(InvalidTableName):
            self.loader.load("agency")
        with self.assertRaises(ValueError):
            self.loader.read("shapes")

    def test_missing_table_raises_on_read(self):
        (self.static_dir / "calendar_dates.txt").unlink()
        with self.assertRaises(SourceUnavailable):
            self.loader.read("calendar_dates")

    def test_missing_table_degrades_to_empty(self):
        (self.static_dir / "calendar_dates.txt").unlink()
        with self.assertLogs("bustrack.gtfs_loader", level="ERROR"):
            self.assertEqual(self.loader.load("calendar_dates"), [])

    def test_undecodable_table_degrades_to_empty(self):
        (self.static_dir / "stops.txt").write_bytes(b"stop_id,stop_name\n1853,\xff\xfe\n")
        with self.assertRaises(SourceUnavailable):
            self.loader.read("stops")
        with self.assertLogs("bustrack.gtfs_loader", level="ERROR"):
            self.assertEqual(self.loader.load("stops"), [])


class TestRecordParsing(unittest.TestCase):
    """Test the typed records built from table rows."""

    def test_calendar_entry_weekdays_start_on_sunday(self):
        entry = CalendarEntry.from_row(
            {
                "service_id": "WKEND",
                "monday": "0",
                "tuesday": "0",
                "wednesday": "0",
                "thursday": "0",
                "friday": "0",
                "saturday": "1",
                "sunday": "1",
                "start_date": "20230101",
                "end_date": "20231231",
            }
        )
        self.assertEqual(entry.weekdays, (True, False, False, False, False, False, True))
        self.assertEqual(entry.start_date, date(2023, 1, 1))
        self.assertTrue(entry.runs_on(date(2023, 8, 13)))  # Sunday
        self.assertFalse(entry.runs_on(date(2023, 8, 14)))  # Monday

    def test_calendar_entry_rejects_bad_flag(self):
        row = {
            "service_id": "X",
            "monday": "yes",
            "tuesday": "0",
            "wednesday": "0",
            "thursday": "0",
            "friday": "0",
            "saturday": "0",
            "sunday": "0",
            "start_date": "20230101",
            "end_date": "20231231",
        }
        with self.assertRaises(ValueError):
            CalendarEntry.from_row(row)

    def test_calendar_exception_types(self):
        removed = CalendarException.from_row(
            {"service_id": "WKDAY", "date": "20230815", "exception_type": "2"}
        )
        self.assertEqual(removed.exception_type, ExceptionType.REMOVED)
        self.assertEqual(removed.date, date(2023, 8, 15))

        with self.assertRaises(ValueError):
            CalendarException.from_row({"service_id": "WKDAY", "date": "20230815", "exception_type": "3"})
        with self.assertRaises(ValueError):
            CalendarException.from_row({"service_id": "WKDAY", "date": "2023-08-15", "exception_type": "1"})

    def test_stop_time_minutes_past_midnight(self):
        stop_time = StopTime.from_row(
            {"trip_id": "T", "stop_id": "1853", "arrival_time": "25:10:30", "stop_sequence": "4"}
        )
        self.assertEqual(stop_time.stop_sequence, 4)
        self.assertEqual(stop_time.arrival_minutes, 25 * 60 + 10)

    def test_time_to_minutes_formats(self):
        self.assertEqual(time_to_minutes("8:07:00"), 487)
        self.assertEqual(time_to_minutes("08:07"), 487)
        for text in ("8", "8:07:00:00", "ab:07", ""):
            with self.assertRaises(ValueError):
                time_to_minutes(text)

    def test_stop_time_rejects_bad_arrival_time(self):
        with self.assertRaises(ValueError):
            StopTime.from_row({"trip_id": "T", "stop_id": "1853", "arrival_time": "noon", "stop_sequence": "1"})


if __name__ == "__main__":
    unittest.main()
