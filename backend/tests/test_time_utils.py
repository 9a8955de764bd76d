from datetime import datetime, timezone, timedelta

import pytest

from eventpos.time_utils import parse_iso_datetime, to_utc_naive, to_utc_z, event_day


class TestParse:

    @pytest.mark.parametrize("raw", [None, "", "   "])
    def test_blank_is_none(self, raw):
        assert parse_iso_datetime(raw) is None

    def test_trailing_z(self):
        assert parse_iso_datetime("2026-10-17T13:00:00Z") == datetime(2026, 10, 17, 13, 0)

    def test_offset_converted_to_utc(self):
        assert parse_iso_datetime("2026-10-17T22:30:00-03:00") == datetime(2026, 10, 18, 1, 30)

    def test_naive_taken_as_utc(self):
        assert parse_iso_datetime("2026-10-17T09:15") == datetime(2026, 10, 17, 9, 15)

    def test_rejects_garbage(self):
        with pytest.raises(ValueError):
            parse_iso_datetime("tomorrow")


class TestConversions:

    def test_to_utc_naive(self):
        aware = datetime(2026, 10, 17, 10, 0, tzinfo=timezone(timedelta(hours=-3)))
        assert to_utc_naive(aware) == datetime(2026, 10, 17, 13, 0)
        assert to_utc_naive(datetime(2026, 10, 17, 13, 0)).tzinfo is None

    def test_to_utc_z(self):
        assert to_utc_z(datetime(2026, 10, 17, 13, 0, 5, 999)) == "2026-10-17T13:00:05Z"
        assert to_utc_z(None) is None

    def test_event_day_in_utc(self):
        assert event_day(datetime(2026, 10, 17, 23, 59), "UTC").isoformat() == "2026-10-17"
