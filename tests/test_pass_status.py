# tests/test_pass_status.py
"""Unit tests for pass status derivation (pure functions, no database)."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import copy
from datetime import datetime, timedelta

import pytest
from parkwatch.services.pass_status import (
    derive_status, format_time_remaining, parse_time_remaining, pass_type_label, resolve_valid_until,
)

T0 = datetime(2026, 3, 6, 9, 0, 0)


def make_pass(hours=8, created_at=T0, valid_until="default"):
    if valid_until == "default":
        valid_until = created_at + timedelta(hours=hours)
    return {"hours": hours, "created_at": created_at, "valid_until": valid_until}


class TestDeriveStatus:
    def test_eight_hour_pass_active_after_seven_hours(self):
        assert derive_status(make_pass(), T0 + timedelta(hours=7)) == "active"

    def test_eight_hour_pass_expired_after_nine_hours(self):
        assert derive_status(make_pass(), T0 + timedelta(hours=9)) == "expired"

    def test_expired_exactly_at_valid_until(self):
        assert derive_status(make_pass(), T0 + timedelta(hours=8)) == "expired"

    def test_same_inputs_same_answer_and_record_untouched(self):
        record = make_pass()
        snapshot = copy.deepcopy(record)
        now = T0 + timedelta(hours=3)
        assert derive_status(record, now) == derive_status(record, now)
        assert record == snapshot

    def test_unparsable_created_at_is_unknown(self):
        assert derive_status(make_pass(created_at="not a date", valid_until=None), T0) == "Unknown"

    def test_legacy_row_falls_back_to_created_at_plus_hours(self):
        record = make_pass(hours=24, valid_until=None)
        assert resolve_valid_until(record) == T0 + timedelta(hours=24)
        assert derive_status(record, T0 + timedelta(hours=23)) == "active"

    def test_iso_strings_with_z_suffix(self):
        record = make_pass(created_at="2026-03-06T09:00:00Z", valid_until="2026-03-06T17:00:00Z")
        assert derive_status(record, "2026-03-06T16:59:00Z") == "active"
        assert derive_status(record, "2026-03-06T17:00:01Z") == "expired"

    def test_works_on_objects_as_well_as_dicts(self):
        class Row:
            hours = 8
            created_at = T0
            valid_until = T0 + timedelta(hours=8)
        assert derive_status(Row(), T0) == "active"


class TestTimeRemaining:
    def test_hours_and_minutes(self):
        assert format_time_remaining(T0 + timedelta(hours=8), T0 + timedelta(hours=6, minutes=30)) == "1h 30m"

    def test_days_and_hours_from_24h(self):
        assert format_time_remaining(T0 + timedelta(hours=30), T0) == "1d 6h"
        assert format_time_remaining(T0 + timedelta(hours=24), T0) == "1d 0h"

    def test_expired_when_zero_or_negative(self):
        assert format_time_remaining(T0, T0) == "Expired"
        assert format_time_remaining(T0, T0 + timedelta(minutes=1)) == "Expired"

    def test_unparsable_is_unknown(self):
        assert format_time_remaining("garbage", T0) == "Unknown"
        assert format_time_remaining(None, T0) == "Unknown"

    def test_never_increases_as_clock_advances(self):
        valid_until = T0 + timedelta(hours=48)
        minutes = [
            parse_time_remaining(format_time_remaining(valid_until, T0 + timedelta(minutes=step)))
            for step in range(0, 49 * 60, 37)
        ]
        assert minutes == sorted(minutes, reverse=True)
        assert minutes[-1] == 0

    def test_parse_rejects_other_text(self):
        with pytest.raises(ValueError):
            parse_time_remaining("soon")


class TestPassTypeLabel:
    @pytest.mark.parametrize("hours,label", [(8, "8 hour"), (24, "24 hour"), (48, "Weekend"), (5, "5 hour")])
    def test_labels(self, hours, label):
        assert pass_type_label(hours) == label
