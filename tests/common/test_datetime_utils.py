from datetime import datetime, timezone

from src.geoclock.geoclock.common.datetime_utils import (
    from_utc_naive,
    parse_iso_datetime,
    split_local,
    to_utc_naive,
)

from conftest import TZ, local


def test_naive_iso_is_taken_as_local_time():
    parsed = parse_iso_datetime("2025-03-01T18:00", TZ)
    assert parsed == local(2025, 3, 1, 18, 0)


def test_offset_iso_is_converted_to_local():
    parsed = parse_iso_datetime("2025-03-01T11:00:00+00:00", TZ)
    assert parsed.utcoffset().total_seconds() == 7 * 3600
    assert (parsed.hour, parsed.minute) == (18, 0)


def test_storage_round_trip_keeps_instant():
    value = local(2025, 3, 1, 2, 30)
    stored = to_utc_naive(value)
    assert stored.tzinfo is None
    assert stored == datetime(2025, 2, 28, 19, 30)
    assert from_utc_naive(stored, TZ) == value
    assert from_utc_naive(None, TZ) is None


def test_split_local_for_wire():
    value = datetime(2025, 2, 28, 19, 30, 5, tzinfo=timezone.utc)
    assert split_local(value, TZ) == ("2025-03-01", "02:30:05")
    assert split_local(None, TZ) == ("", "")


def test_trailing_z_means_utc():
    assert parse_iso_datetime("2025-03-01T11:00:00.000Z", TZ) == local(2025, 3, 1, 18, 0)
    assert parse_iso_datetime("2025-03-01T11:00:00z", TZ) == local(2025, 3, 1, 18, 0)
