"""Derived attendance figures: durations, streaks, goal progress, weekly activity.

Everything here is pure arithmetic over already-fetched records. Timestamps are
expected to be aware datetimes in the library timezone, so ``check_in.date()``
is the calendar day the student attended.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional, Set, Tuple

from ..common.datetime_utils import round_half_up
from ..core.constants import (
    DEFAULT_ATTENDANCE_GOAL,
    GOAL_ACHIEVED_MESSAGE,
    IN_PROGRESS_LABEL,
    STREAK_LOOKBACK_DAYS,
    WEEKLY_WINDOW_DAYS,
)
from ..core.exceptions import InvalidDurationError
from .model import AttendanceRecord

logger = logging.getLogger(__name__)


def duration_between(start: datetime, end: datetime) -> timedelta:
    if end < start:
        raise InvalidDurationError("Check-out time is earlier than check-in time")
    return end - start


def split_minutes(delta: timedelta) -> Tuple[int, int]:
    """Truncated (hours, minutes) of a non-negative duration."""
    total_minutes = int(delta.total_seconds() // 60)
    return total_minutes // 60, total_minutes % 60


def format_duration(start: datetime, end: Optional[datetime]) -> str:
    """Format as "{H}h {M}m" for a closed record, "In Progress" for an open one.

    A check-out before its check-in is reported and shown as "0h 0m".
    """

    if end is None:
        return IN_PROGRESS_LABEL
    try:
        delta = duration_between(start, end)
    except InvalidDurationError:
        logger.warning("negative duration: check_in=%s check_out=%s", start.isoformat(), end.isoformat())
        delta = timedelta(0)
    hours, minutes = split_minutes(delta)
    return f"{hours}h {minutes}m"


def completed_minutes(record: AttendanceRecord) -> float:
    """Minutes spent in the library; open or inconsistent records count as 0."""
    if record.check_out is None:
        return 0.0
    try:
        return duration_between(record.check_in, record.check_out).total_seconds() / 60
    except InvalidDurationError:
        logger.warning("ignoring record %s with check-out before check-in", record.record_id)
        return 0.0


def attendance_dates(records: Iterable[AttendanceRecord]) -> Set[date]:
    return {r.check_in.date() for r in records}


def calculate_streak(days: Iterable[date], today: date, *, lookback: int = STREAK_LOOKBACK_DAYS) -> int:
    """Consecutive attended days ending today; a miss today means 0."""

    attended = set(days)
    streak = 0
    for offset in range(lookback):
        if today - timedelta(days=offset) not in attended:
            break
        streak += 1
    return streak


@dataclass(frozen=True)
class GoalProgress:
    goal: int
    count: int
    percentage: int
    remaining: int

    @property
    def achieved(self) -> bool:
        return self.percentage >= 100

    @property
    def message(self) -> str:
        return GOAL_ACHIEVED_MESSAGE if self.achieved else f"{self.remaining} days to go"


def goal_progress(goal: Optional[int], count: int) -> GoalProgress:
    goal = int(goal) if goal and int(goal) > 0 else DEFAULT_ATTENDANCE_GOAL
    percentage = min(100, int(round_half_up(count / goal * 100)))
    return GoalProgress(goal=goal, count=count, percentage=percentage, remaining=max(0, goal - count))


@dataclass(frozen=True)
class DayActivity:
    day: date
    hours: float

    @property
    def label(self) -> str:
        return self.day.strftime("%a")


@dataclass(frozen=True)
class WeeklyActivity:
    days: List[DayActivity]
    total_hours: float
    average_hours: float
    streak: int


def weekly_activity(records: Iterable[AttendanceRecord], today: date) -> WeeklyActivity:
    """Hours per day for today and the six days before it, oldest first."""

    records = list(records)
    window = [today - timedelta(days=WEEKLY_WINDOW_DAYS - 1 - i) for i in range(WEEKLY_WINDOW_DAYS)]
    minutes_by_day = {d: 0.0 for d in window}
    for r in records:
        d = r.check_in.date()
        if d in minutes_by_day:
            minutes_by_day[d] += completed_minutes(r)

    days = [DayActivity(day=d, hours=round_half_up(minutes_by_day[d] / 60, 1)) for d in window]
    total = sum(d.hours for d in days)
    return WeeklyActivity(
        days=days,
        total_hours=round_half_up(total, 1),
        average_hours=round_half_up(total / WEEKLY_WINDOW_DAYS, 1),
        streak=calculate_streak(attendance_dates(records), today),
    )
