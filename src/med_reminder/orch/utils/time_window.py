# src/med_reminder/orch/utils/time_window.py
# -*- coding: utf-8 -*-

"""
Classifies a scheduled dose against the current wall-clock time.

All arithmetic is same-day integer minutes (hour * 60 + minute). There is no
wraparound: a dose scheduled at 23:59 is never "due" at 00:00 the next day.
"""

import datetime
import logging
import re
from typing import Union

from med_reminder.exceptions import MalformedScheduleError
from med_reminder.orch.models import CheckMode, Classification
from med_reminder.orch.models.policy import (
    DEFAULT_GRACE_MINUTES,
    DEFAULT_TOLERANCE_MINUTES,
)

logger = logging.getLogger(__name__)

# H:MM or HH:MM, optionally followed by :SS (SQL time columns)
_TIME_PATTERN = re.compile(r"^\s*(\d{1,2}):(\d{2})(?::(\d{2}))?\s*$")


def parse_schedule_time(value: str) -> int:
    """Returns minutes since midnight for an ``H:MM``/``HH:MM`` string."""
    if not isinstance(value, str):
        raise MalformedScheduleError(value)
    match = _TIME_PATTERN.match(value)
    if not match:
        raise MalformedScheduleError(value)

    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        raise MalformedScheduleError(value, f"Scheduled time out of range: {value!r}")
    return hour * 60 + minute


def to_minutes(current: Union[datetime.time, datetime.datetime]) -> int:
    return current.hour * 60 + current.minute


def classify(
    scheduled_time: str,
    current_time: Union[datetime.time, datetime.datetime],
    mode: CheckMode,
    grace_minutes: int = DEFAULT_GRACE_MINUTES,
    tolerance_minutes: int = DEFAULT_TOLERANCE_MINUTES,
) -> Classification:
    """
    immediate-reminder: DUE_NOW when within +/- ``tolerance_minutes`` of the
    scheduled minute. missed-alert: MISSED once ``grace_minutes`` have passed.
    Everything else is NOT_YET.

    Raises MalformedScheduleError when ``scheduled_time`` cannot be parsed.
    """
    scheduled = parse_schedule_time(scheduled_time)
    now = to_minutes(current_time)

    if mode == CheckMode.IMMEDIATE:
        if abs(now - scheduled) <= tolerance_minutes:
            return Classification.DUE_NOW
        return Classification.NOT_YET

    if mode == CheckMode.MISSED:
        if now >= scheduled + grace_minutes:
            return Classification.MISSED
        return Classification.NOT_YET

    raise ValueError(f"Unknown check mode: {mode!r}")


def matches_mode(classification: Classification, mode: CheckMode) -> bool:
    """True when ``classification`` is the outcome the given mode notifies on."""
    if mode == CheckMode.IMMEDIATE:
        return classification == Classification.DUE_NOW
    return classification == Classification.MISSED
