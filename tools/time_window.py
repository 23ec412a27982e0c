"""
Time Window Evaluator
Classifies how far "now" is from a scheduled time of day
"""

import re
from datetime import datetime, date, time
from enum import Enum
from typing import Optional

from config import schedule_config


TIME_OF_DAY_PATTERN = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")

DUE_WINDOW_BEFORE_MINUTES = schedule_config.DUE_WINDOW_BEFORE_MINUTES
LATE_AFTER_MINUTES = schedule_config.LATE_AFTER_MINUTES
MISSED_CUTOFF_MINUTES = schedule_config.MISSED_CUTOFF_MINUTES


class WindowState(str, Enum):
    """Where a slot sits relative to now"""
    FUTURE = "future"                  # more than 10 min ahead
    DUE_NOW = "due_now"                # 10 min before .. 30 min after
    LATE = "late"                      # 30 min .. 4 h after
    MISSED_CUTOFF = "missed_cutoff"    # more than 4 h after


def parse_time_of_day(value: str) -> time:
    """
    Parse a zero-padded 24-hour "HH:MM" string.

    Raises ValueError for anything else, including "8:00" and "08:00:00".
    """
    if not isinstance(value, str):
        raise ValueError(f"Time of day must be a string, got {type(value).__name__}")
    match = TIME_OF_DAY_PATTERN.match(value)
    if not match:
        raise ValueError(f"Invalid time of day '{value}', expected HH:MM")
    return time(int(match.group(1)), int(match.group(2)))


def is_valid_time_of_day(value) -> bool:
    return isinstance(value, str) and TIME_OF_DAY_PATTERN.match(value) is not None


def scheduled_instant(
    scheduled_time: str,
    on_date: Optional[date] = None,
    now: Optional[datetime] = None
) -> datetime:
    """The slot's instant at HH:MM:00.000 on on_date (default: now's date)"""
    if on_date is None:
        on_date = (now or datetime.now()).date()
    return datetime.combine(on_date, parse_time_of_day(scheduled_time))


def minutes_since(
    now: datetime,
    scheduled_time: str,
    on_date: Optional[date] = None
) -> float:
    """Minutes elapsed from the scheduled instant to now; negative if ahead"""
    instant = scheduled_instant(scheduled_time, on_date=on_date, now=now)
    return (now - instant).total_seconds() / 60


def is_late(diff_minutes: float) -> bool:
    """Late-but-loggable: strictly between 30 minutes and 4 hours"""
    return LATE_AFTER_MINUTES < diff_minutes < MISSED_CUTOFF_MINUTES


def is_past_cutoff(diff_minutes: float) -> bool:
    return diff_minutes > MISSED_CUTOFF_MINUTES


def classify_minutes(diff_minutes: float) -> WindowState:
    if diff_minutes < -DUE_WINDOW_BEFORE_MINUTES:
        return WindowState.FUTURE
    if diff_minutes <= LATE_AFTER_MINUTES:
        return WindowState.DUE_NOW
    if diff_minutes <= MISSED_CUTOFF_MINUTES:
        # Exactly 240 stays in the late window for display, yet is_late(240)
        # and is_past_cutoff(240) are both False: a dose logged then is
        # neither flagged late nor overridden to missed.
        return WindowState.LATE
    return WindowState.MISSED_CUTOFF


def classify(
    now: datetime,
    scheduled_time: str,
    on_date: Optional[date] = None
) -> WindowState:
    """Classify a slot on on_date (default today) against now"""
    return classify_minutes(minutes_since(now, scheduled_time, on_date=on_date))
