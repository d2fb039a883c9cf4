"""Tests for the duplicate guard."""
import unittest
from datetime import datetime, timedelta, timezone

from smsflow.transactions.dedup import DuplicateGuard, parse_timestamp, record_timestamp
from smsflow.transactions.models import TransactionData

from fakes import FixedClock, InMemoryStore

NOW = datetime(2025, 8, 27, 10, 0, 0, tzinfo=timezone.utc)


def iso(dt):
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def candidate(amount=153.0):
    return TransactionData(is_transaction=True, amount=amount, confidence=0.95)


class TestDuplicateGuard(unittest.TestCase):
    """Test amount + time-window matching."""

    def _guard(self, records, window=60, fail_on=()):
        self.store = InMemoryStore(records, fail_on=fail_on)
        return DuplicateGuard(self.store, window_seconds=window, clock=FixedClock(NOW))

    def test_same_amount_inside_window_is_duplicate(self):
        guard = self._guard([{"amount": 153.0, "dateTime": iso(NOW - timedelta(seconds=30))}])
        self.assertTrue(guard.is_duplicate(candidate()))
        self.assertEqual(self.store.queries, [{"amount": 153.0}])

    def test_window_bounds_are_inclusive(self):
        guard = self._guard([{"amount": 153.0, "dateTime": iso(NOW - timedelta(seconds=60))}])
        self.assertTrue(guard.is_duplicate(candidate()))

        guard = self._guard([{"amount": 153.0, "dateTime": iso(NOW)}])
        self.assertTrue(guard.is_duplicate(candidate()))

    def test_same_amount_outside_window_is_not_duplicate(self):
        guard = self._guard([{"amount": 153.0, "dateTime": iso(NOW - timedelta(seconds=61))}])
        self.assertFalse(guard.is_duplicate(candidate()))

    def test_future_record_is_not_duplicate(self):
        guard = self._guard([{"amount": 153.0, "dateTime": iso(NOW + timedelta(seconds=5))}])
        self.assertFalse(guard.is_duplicate(candidate()))

    def test_different_amount_is_not_duplicate(self):
        guard = self._guard([{"amount": 154.0, "dateTime": iso(NOW)}])
        self.assertFalse(guard.is_duplicate(candidate()))

    def test_missing_amount_is_never_duplicate(self):
        guard = self._guard([{"amount": None, "dateTime": iso(NOW)}])
        self.assertFalse(guard.is_duplicate(candidate(amount=None)))
        self.assertEqual(self.store.queries, [])

    def test_falls_back_to_timestamp_field(self):
        guard = self._guard([{"amount": 153.0, "timestamp": iso(NOW - timedelta(seconds=10))}])
        self.assertTrue(guard.is_duplicate(candidate()))

    def test_unparseable_timestamps_are_skipped(self):
        guard = self._guard([
            {"amount": 153.0, "dateTime": "yesterday"},
            {"amount": 153.0},
        ])
        self.assertFalse(guard.is_duplicate(candidate()))

    def test_lookup_failure_fails_open(self):
        guard = self._guard([{"amount": 153.0, "dateTime": iso(NOW)}], fail_on={"findAll"})
        self.assertFalse(guard.is_duplicate(candidate()))

    def test_configurable_window(self):
        guard = self._guard([{"amount": 153.0, "dateTime": iso(NOW - timedelta(minutes=4))}], window=300)
        self.assertTrue(guard.is_duplicate(candidate()))

    def test_explicit_now_overrides_clock(self):
        guard = self._guard([{"amount": 153.0, "dateTime": iso(NOW)}])
        self.assertFalse(guard.is_duplicate(candidate(), now=NOW + timedelta(hours=1)))


class TestParseTimestamp(unittest.TestCase):
    """Test stored timestamp parsing."""

    def test_iso_with_z(self):
        self.assertEqual(parse_timestamp("2025-08-27T10:00:00.000Z"), NOW)

    def test_naive_iso_is_utc(self):
        self.assertEqual(parse_timestamp("2025-08-27T10:00:00"), NOW)

    def test_offset_iso(self):
        self.assertEqual(parse_timestamp("2025-08-27T15:30:00+05:30"), NOW)

    def test_epoch_milliseconds(self):
        epoch_ms = int(NOW.timestamp() * 1000)
        self.assertEqual(parse_timestamp(epoch_ms), NOW)
        self.assertEqual(parse_timestamp(str(epoch_ms)), NOW)

    def test_invalid_values(self):
        self.assertIsNone(parse_timestamp(None))
        self.assertIsNone(parse_timestamp(""))
        self.assertIsNone(parse_timestamp("not a date"))

    def test_small_numbers_are_not_epochs(self):
        self.assertIsNone(parse_timestamp("20250827"))
        self.assertIsNone(parse_timestamp(20250827))
        self.assertIsNone(parse_timestamp(0))

    def test_record_prefers_date_time(self):
        record = {"dateTime": "2025-08-27T10:00:00Z", "timestamp": "2020-01-01T00:00:00Z"}
        self.assertEqual(record_timestamp(record), NOW)


if __name__ == "__main__":
    unittest.main()
