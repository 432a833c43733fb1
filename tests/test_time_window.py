import datetime

import pytest

from med_reminder.exceptions import MalformedScheduleError
from med_reminder.orch.models import CheckMode, Classification
from med_reminder.orch.utils.time_window import (
    classify,
    matches_mode,
    parse_schedule_time,
)


@pytest.mark.parametrize(
    "value, minutes",
    [("08:00", 480), ("8:05", 485), ("00:00", 0), ("23:59", 1439), ("08:00:00", 480)],
)
def test_parse_schedule_time(value, minutes):
    assert parse_schedule_time(value) == minutes


@pytest.mark.parametrize("value", ["", "8", "24:00", "08:60", "ab:cd", "8:5", "08-00", None])
def test_parse_schedule_time_rejects_malformed(value):
    with pytest.raises(MalformedScheduleError):
        parse_schedule_time(value)


@pytest.mark.parametrize("hour, minute", [(7, 59), (8, 0), (8, 1)])
def test_immediate_is_due_within_one_minute(hour, minute):
    outcome = classify("08:00", datetime.time(hour, minute), CheckMode.IMMEDIATE)
    assert outcome == Classification.DUE_NOW


@pytest.mark.parametrize("hour, minute", [(7, 58), (8, 2)])
def test_immediate_outside_window_is_not_yet(hour, minute):
    outcome = classify("08:00", datetime.time(hour, minute), CheckMode.IMMEDIATE)
    assert outcome == Classification.NOT_YET


def test_missed_boundary_at_grace_period():
    assert classify("08:00", datetime.time(8, 29), CheckMode.MISSED) == Classification.NOT_YET
    assert classify("08:00", datetime.time(8, 30), CheckMode.MISSED) == Classification.MISSED


def test_missed_stays_missed_for_rest_of_day():
    assert classify("08:00", datetime.time(23, 59), CheckMode.MISSED) == Classification.MISSED


def test_accepts_datetime_and_ignores_seconds():
    now = datetime.datetime(2026, 10, 19, 8, 30, 59)
    assert classify("08:00", now, CheckMode.MISSED) == Classification.MISSED


def test_custom_grace_and_tolerance():
    assert classify("08:00", datetime.time(8, 10), CheckMode.MISSED, grace_minutes=10) == Classification.MISSED
    assert (
        classify("08:00", datetime.time(8, 5), CheckMode.IMMEDIATE, tolerance_minutes=5)
        == Classification.DUE_NOW
    )


def test_no_wraparound_at_day_rollover():
    # 23:59 dose is not "due" at 00:00 of the next day
    assert classify("23:59", datetime.time(0, 0), CheckMode.IMMEDIATE) == Classification.NOT_YET
    # 23:45 dose is not "missed" at 00:15; it expired with the previous day
    assert classify("23:45", datetime.time(0, 15), CheckMode.MISSED) == Classification.NOT_YET


def test_classify_raises_for_malformed_time():
    with pytest.raises(MalformedScheduleError):
        classify("noon", datetime.time(12, 0), CheckMode.MISSED)


def test_matches_mode():
    assert matches_mode(Classification.DUE_NOW, CheckMode.IMMEDIATE)
    assert not matches_mode(Classification.MISSED, CheckMode.IMMEDIATE)
    assert matches_mode(Classification.MISSED, CheckMode.MISSED)
    assert not matches_mode(Classification.NOT_YET, CheckMode.MISSED)
