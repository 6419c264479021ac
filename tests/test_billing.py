import sys
import os
import unittest
from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

# Add the parent directory to sys.path to import the togglinvoice package
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
from togglinvoice.config import InvoiceConfig
from togglinvoice.errors import MalformedInputError
from togglinvoice.reports.billing import split_by_day, to_billable, expand_entries, DayChunk

UTC = timezone.utc
MIN = 15 * 60 * 1000


def utc(*args):
    return datetime(*args, tzinfo=UTC)


class TestSplitByDay(unittest.TestCase):
    """Test splitting time ranges at day boundaries."""

    def test_same_day_range_is_one_chunk(self):
        chunks = list(split_by_day(utc(2016, 7, 4, 9, 0), utc(2016, 7, 4, 11, 30), UTC))
        self.assertEqual(len(chunks), 1)
        self.assertEqual(chunks[0].start, utc(2016, 7, 4, 9, 0))
        self.assertEqual(chunks[0].end, utc(2016, 7, 4, 11, 30))
        self.assertEqual(chunks[0].duration, 150 * 60 * 1000)

    def test_zero_length_range_yields_single_empty_chunk(self):
        start = utc(2016, 7, 4, 9, 0)
        chunks = list(split_by_day(start, start, UTC))
        self.assertEqual(len(chunks), 1)
        self.assertEqual(chunks[0].duration, 0)

    def test_chunks_tile_range_across_boundaries(self):
        start = utc(2016, 7, 1, 22, 0)
        end = utc(2016, 7, 4, 3, 0)
        chunks = list(split_by_day(start, end, UTC))

        # three midnights crossed
        self.assertEqual(len(chunks), 4)
        self.assertEqual(chunks[0].start, start)
        self.assertEqual(chunks[-1].end, end)
        for prev, nxt in zip(chunks, chunks[1:]):
            self.assertEqual(prev.end, nxt.start)
            self.assertEqual(nxt.start.hour, 0)
        self.assertEqual([c.duration // 3600000 for c in chunks], [2, 24, 24, 3])
        self.assertEqual(sum(c.duration for c in chunks), 53 * 3600 * 1000)

    def test_start_at_midnight_has_no_empty_leading_chunk(self):
        chunks = list(split_by_day(utc(2016, 7, 2), utc(2016, 7, 2, 5, 0), UTC))
        self.assertEqual(len(chunks), 1)
        self.assertEqual(chunks[0].duration, 5 * 3600 * 1000)

    def test_end_at_midnight_has_no_empty_trailing_chunk(self):
        chunks = list(split_by_day(utc(2016, 7, 1, 20, 0), utc(2016, 7, 2), UTC))
        self.assertEqual(len(chunks), 1)
        self.assertEqual(chunks[0].duration, 4 * 3600 * 1000)

    def test_day_boundaries_follow_time_zone(self):
        plus_two = timezone(timedelta(hours=2))
        # 21:30Z-22:10Z is 23:30-00:10 at UTC+2
        chunks = list(split_by_day(utc(2016, 7, 4, 21, 30), utc(2016, 7, 4, 22, 10), plus_two))
        self.assertEqual(len(chunks), 2)
        self.assertEqual(chunks[0].end, datetime(2016, 7, 5, tzinfo=plus_two))
        self.assertEqual([c.duration for c in chunks], [30 * 60 * 1000, 10 * 60 * 1000])

        self.assertEqual(len(list(split_by_day(utc(2016, 7, 4, 21, 30), utc(2016, 7, 4, 22, 10), UTC))), 1)

    def test_autumn_dst_day_has_25_hours(self):
        berlin = ZoneInfo("Europe/Berlin")
        start = datetime(2016, 10, 29, 20, 0, tzinfo=berlin)
        end = datetime(2016, 10, 31, 2, 0, tzinfo=berlin)
        chunks = list(split_by_day(start, end, berlin))

        self.assertEqual([c.duration // 3600000 for c in chunks], [4, 25, 2])
        for chunk in chunks[:-1]:
            self.assertEqual((chunk.end.hour, chunk.end.minute), (0, 0))
        self.assertEqual(chunks[1].start.utcoffset(), timedelta(hours=2))
        self.assertEqual(chunks[1].end.utcoffset(), timedelta(hours=1))
        self.assertEqual(sum(c.duration for c in chunks), 31 * 3600 * 1000)

    def test_spring_dst_day_has_23_hours(self):
        berlin = ZoneInfo("Europe/Berlin")
        start = datetime(2016, 3, 26, 20, 0, tzinfo=berlin)
        end = datetime(2016, 3, 28, 2, 0, tzinfo=berlin)
        chunks = list(split_by_day(start, end, berlin))

        self.assertEqual([c.duration // 3600000 for c in chunks], [4, 23, 2])
        self.assertEqual(chunks[1].start, datetime(2016, 3, 27, tzinfo=berlin))
        self.assertEqual(chunks[1].end, datetime(2016, 3, 28, tzinfo=berlin))
        self.assertEqual(sum(c.duration for c in chunks), 29 * 3600 * 1000)

    def test_split_is_repeatable(self):
        start, end = utc(2016, 7, 1, 22, 0), utc(2016, 7, 2, 1, 0)
        self.assertEqual(list(split_by_day(start, end, UTC)), list(split_by_day(start, end, UTC)))


class TestToBillable(unittest.TestCase):
    """Test the minimum billing floor and minute truncation."""

    fmt = "%Y-%m-%dT%H:%M:%S%z"

    def _bill(self, start, end):
        chunk = DayChunk(start, end, int((end - start).total_seconds() * 1000))
        return to_billable({"description": "Work"}, chunk, MIN, self.fmt)

    def test_short_chunk_is_floored_to_minimum(self):
        entry = self._bill(utc(2016, 7, 4, 10, 0), utc(2016, 7, 4, 10, 10))
        self.assertEqual(entry.dur_billable, MIN)

    def test_chunk_equal_to_minimum(self):
        entry = self._bill(utc(2016, 7, 4, 10, 0), utc(2016, 7, 4, 10, 15))
        self.assertEqual(entry.dur_billable, MIN)

    def test_longer_chunk_keeps_its_duration(self):
        entry = self._bill(utc(2016, 7, 4, 10, 0), utc(2016, 7, 4, 10, 16))
        self.assertEqual(entry.dur_billable, 16 * 60 * 1000)

    def test_zero_chunk_is_billed_minimum(self):
        entry = self._bill(utc(2016, 7, 4, 10, 0), utc(2016, 7, 4, 10, 0))
        self.assertEqual(entry.dur_billable, MIN)

    def test_seconds_are_truncated(self):
        entry = self._bill(utc(2016, 7, 4, 10, 0, 45), utc(2016, 7, 4, 10, 20, 10))
        self.assertEqual(entry.start_billable, "2016-07-04T10:00:00+0000")
        self.assertEqual(entry.end_billable, "2016-07-04T10:20:00+0000")
        self.assertEqual(entry.dur_billable, 20 * 60 * 1000)

    def test_timestamps_round_trip(self):
        entry = self._bill(utc(2016, 7, 4, 10, 0), utc(2016, 7, 4, 11, 0))
        self.assertEqual(entry.start_dt(self.fmt), utc(2016, 7, 4, 10, 0))
        self.assertEqual(entry.end_dt(self.fmt), utc(2016, 7, 4, 11, 0))

    def test_entry_data_is_copied(self):
        raw = {"description": "Work", "tags": ["a"]}
        chunk = DayChunk(utc(2016, 7, 4, 10, 0), utc(2016, 7, 4, 11, 0), 3600000)
        entry = to_billable(raw, chunk, MIN, self.fmt)
        entry.raw_data["tags"].append("b")
        self.assertEqual(raw["tags"], ["a"])
        self.assertEqual(entry.description, "Work")
        self.assertFalse(entry.is_total_row)


class TestExpandEntries(unittest.TestCase):
    """Test expanding raw Toggl entries into billable chunks."""

    def setUp(self):
        self.config = InvoiceConfig(tz=UTC)

    def test_entry_crossing_midnight(self):
        entries = expand_entries([{
            "description": "x",
            "start": "2016-07-04T23:30:00Z",
            "end": "2016-07-05T00:10:00Z",
        }], self.config)

        self.assertEqual(len(entries), 2)
        first, second = entries
        self.assertEqual(first.start_billable, "2016-07-04T23:30:00+0000")
        self.assertEqual(first.end_billable, "2016-07-05T00:00:00+0000")
        self.assertEqual(first.dur_billable, 30 * 60 * 1000)
        self.assertEqual(second.start_billable, "2016-07-05T00:00:00+0000")
        self.assertEqual(second.end_billable, "2016-07-05T00:10:00+0000")
        self.assertEqual(second.dur_billable, MIN)
        self.assertEqual({e.description for e in entries}, {"x"})

    def test_order_is_preserved(self):
        entries = expand_entries([
            {"description": "b", "start": "2016-07-05T10:00:00+00:00", "end": "2016-07-05T11:00:00+00:00"},
            {"description": "a", "start": "2016-07-04T10:00:00+00:00", "end": "2016-07-04T11:00:00+00:00"},
        ], self.config)
        self.assertEqual([e.description for e in entries], ["b", "a"])

    def test_offsets_are_converted_to_configured_zone(self):
        entries = expand_entries([{
            "description": "late",
            "start": "2016-07-05T01:30:00+02:00",
            "end": "2016-07-05T01:50:00+02:00",
        }], self.config)
        self.assertEqual(len(entries), 1)
        self.assertEqual(entries[0].start_billable, "2016-07-04T23:30:00+0000")

    def test_dst_day_is_billed_in_named_zone(self):
        config = InvoiceConfig(tz=ZoneInfo("Europe/Berlin"))
        entries = expand_entries([{
            "description": "night shift",
            "start": "2016-10-29T21:30:00+00:00",
            "end": "2016-10-30T23:30:00+00:00",
        }], config)

        self.assertEqual([e.dur_billable // 60000 for e in entries], [30, 25 * 60, 30])
        self.assertEqual(entries[0].start_billable, "2016-10-29T23:30:00+0200")
        self.assertEqual(entries[1].start_billable, "2016-10-30T00:00:00+0200")
        self.assertEqual(entries[1].end_billable, "2016-10-31T00:00:00+0100")
        self.assertEqual(entries[2].end_billable, "2016-10-31T00:30:00+0100")

    def test_running_entry_is_skipped(self):
        with self.assertLogs('togglinvoice.reports.billing', level='WARNING'):
            entries = expand_entries([{"description": "running", "start": "2016-07-04T10:00:00Z", "end": None}],
                                     self.config)
        self.assertEqual(entries, [])

    def test_invalid_timestamp_raises(self):
        with self.assertRaises(MalformedInputError):
            expand_entries([{"description": "bad", "start": "yesterday", "end": "2016-07-04T10:00:00Z"}],
                           self.config)

    def test_non_object_entry_raises(self):
        with self.assertRaises(MalformedInputError):
            expand_entries(["not an entry"], self.config)


if __name__ == '__main__':
    unittest.main()
