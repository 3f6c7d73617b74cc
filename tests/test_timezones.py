"""Tests for client-local datetime normalization."""

from datetime import datetime, timezone

import pytest

from app.services.errors import ValidationError
from app.services.timezones import (
    as_utc,
    current_month_window,
    ensure_utc,
    isoformat_utc,
    resolve_timezone,
    to_utc,
)

UTC = timezone.utc


class TestResolveTimezone:
    def test_known_zone(self):
        assert resolve_timezone("Europe/Madrid").key == "Europe/Madrid"

    @pytest.mark.parametrize("name", [None, "", "   ", "Mars/Olympus_Mons"])
    def test_missing_or_unknown_zone_falls_back_to_utc(self, name):
        assert resolve_timezone(name).key == "UTC"


class TestToUtc:
    def test_wall_clock_is_interpreted_in_client_zone(self):
        # Madrid is UTC+2 in June
        assert to_utc("2025-06-15T12:00:00", "Europe/Madrid") == datetime(2025, 6, 15, 10, 0, tzinfo=UTC)

    def test_winter_offset(self):
        assert to_utc("2025-01-15 12:00", "Europe/Madrid") == datetime(2025, 1, 15, 11, 0, tzinfo=UTC)

    def test_explicit_offset_wins_over_header_zone(self):
        assert to_utc("2025-06-15T12:00:00+05:00", "Europe/Madrid") == datetime(2025, 6, 15, 7, 0, tzinfo=UTC)

    def test_z_suffix(self):
        assert to_utc("2025-06-15T12:00:00Z", "America/New_York") == datetime(2025, 6, 15, 12, 0, tzinfo=UTC)

    def test_unknown_zone_treats_input_as_utc(self):
        assert to_utc("2025-06-15T12:00:00", "Not/AZone") == datetime(2025, 6, 15, 12, 0, tzinfo=UTC)

    def test_date_only_string_is_midnight_local(self):
        assert to_utc("2025-06-15", "Europe/Madrid") == datetime(2025, 6, 14, 22, 0, tzinfo=UTC)

    def test_unparseable_value_is_returned_unchanged(self):
        assert to_utc("next tuesday", "Europe/Madrid") == "next tuesday"

    def test_none_passes_through(self):
        assert to_utc(None, "Europe/Madrid") is None

    def test_result_is_always_utc(self):
        result = to_utc("2025-03-30T03:30:00", "Asia/Tokyo")
        assert result.tzinfo == UTC
        assert result == datetime(2025, 3, 29, 18, 30, tzinfo=UTC)


class TestEnsureUtc:
    def test_rejects_unparsed_string(self):
        with pytest.raises(ValidationError) as exc:
            ensure_utc("garbage", "scheduled_at")
        assert "scheduled_at" in exc.value.message
        assert exc.value.status_code == 422

    def test_naive_datetime_is_taken_as_utc(self):
        assert ensure_utc(datetime(2025, 6, 15, 9, 0)) == datetime(2025, 6, 15, 9, 0, tzinfo=UTC)


class TestHelpers:
    def test_as_utc_none(self):
        assert as_utc(None) is None

    def test_isoformat_uses_z_suffix(self):
        assert isoformat_utc(datetime(2025, 6, 15, 10, 0, tzinfo=UTC)) == "2025-06-15T10:00:00Z"

    def test_isoformat_naive_value(self):
        assert isoformat_utc(datetime(2025, 6, 15, 10, 0)) == "2025-06-15T10:00:00Z"

    def test_month_window(self):
        start, end = current_month_window(datetime(2025, 6, 15, 13, 45, tzinfo=UTC))
        assert start == datetime(2025, 6, 1, tzinfo=UTC)
        assert end == datetime(2025, 6, 30, 23, 59, 59, 999999, tzinfo=UTC)

    def test_month_window_december_rolls_year(self):
        start, end = current_month_window(datetime(2025, 12, 31, 23, 0, tzinfo=UTC))
        assert start == datetime(2025, 12, 1, tzinfo=UTC)
        assert end == datetime(2025, 12, 31, 23, 59, 59, 999999, tzinfo=UTC)
