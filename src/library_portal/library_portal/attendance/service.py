from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta, tzinfo
from typing import Dict, List, Optional, Sequence

from ..common.datetime_utils import day_bounds, month_bounds, now_local
from ..common.validators import optional_text
from ..core.constants import (
    DEFAULT_CHECKIN_COOLDOWN_MINUTES,
    DEFAULT_HISTORY_LIMIT,
    DEFAULT_PURPOSE,
    IN_PROGRESS_LABEL,
)
from ..core.exceptions import CheckInCooldownError, ValidationError
from ..users.model import Profile, StudentIdentity
from ..users.repository import ProfileRepository
from .metrics import (
    GoalProgress,
    WeeklyActivity,
    attendance_dates,
    calculate_streak,
    completed_minutes,
    duration_between,
    format_duration,
    goal_progress,
    split_minutes,
    weekly_activity,
)
from .model import AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StudentDashboard:
    profile: Optional[Profile]
    recent: Sequence[AttendanceRecord]
    is_checked_in: bool
    current_session_minutes: Optional[int]


@dataclass(frozen=True)
class StudentStats:
    weekly: WeeklyActivity
    goal: GoalProgress
    streak: int
    calendar: List[date]


@dataclass(frozen=True)
class AdminDaySummary:
    check_ins_today: int
    average_duration: str


def record_to_ui(record: AttendanceRecord, identity: Optional[StudentIdentity] = None) -> Dict[str, object]:
    """Display row for one record; open records read "In Progress"."""

    row: Dict[str, object] = {
        "id": record.record_id,
        "user_id": record.user_id,
        "check_in": record.check_in.isoformat(),
        "check_out": record.check_out.isoformat() if record.check_out else None,
        "date": record.check_in.strftime("%b %d, %Y"),
        "check_in_time": record.check_in.strftime("%I:%M %p"),
        "check_out_time": record.check_out.strftime("%I:%M %p") if record.check_out else IN_PROGRESS_LABEL,
        "duration": format_duration(record.check_in, record.check_out),
        "purpose": record.purpose or DEFAULT_PURPOSE,
    }
    if identity is not None:
        row["full_name"] = identity.full_name or "Unknown"
        row["student_id"] = identity.student_id or "N/A"
    return row


class AttendanceService:
    """Use case: check-in / check-out and the figures shown around them.

    The check-in cooldown is a read-then-insert on our side only; the backend
    does not enforce one open record per student.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        profiles: ProfileRepository,
        *,
        tz: tzinfo,
        cooldown_minutes: int = DEFAULT_CHECKIN_COOLDOWN_MINUTES,
    ):
        self._attendance = attendance
        self._profiles = profiles
        self._tz = tz
        self._cooldown_minutes = int(cooldown_minutes)

    @property
    def tz(self) -> tzinfo:
        return self._tz

    def _now(self, now: Optional[datetime]) -> datetime:
        return now.astimezone(self._tz) if now is not None else now_local(self._tz)

    def check_in(self, user_id: str, *, purpose: Optional[str] = None, now: datetime | None = None) -> AttendanceRecord:
        now = self._now(now)

        latest = self._attendance.get_latest_for_user(user_id)
        if latest is not None:
            elapsed = (now - latest.check_in).total_seconds() / 60
            if elapsed < self._cooldown_minutes:
                raise CheckInCooldownError(math.ceil(self._cooldown_minutes - elapsed))

        record = self._attendance.create_checkin(
            user_id=user_id,
            check_in=now,
            purpose=optional_text(purpose, "Purpose") or DEFAULT_PURPOSE,
        )
        logger.info("check-in user=%s record=%s", user_id, record.record_id)
        return record

    def check_out(self, user_id: str, *, now: datetime | None = None) -> AttendanceRecord:
        now = self._now(now)

        record = self._attendance.get_latest_open_for_user(user_id)
        if record is None:
            raise ValidationError("You are not checked in")
        duration_between(record.check_in, now)

        self._attendance.update_checkout(record_id=record.record_id, check_out=now)
        logger.info("check-out user=%s record=%s", user_id, record.record_id)
        return AttendanceRecord(
            record_id=record.record_id,
            user_id=record.user_id,
            check_in=record.check_in,
            check_out=now,
            purpose=record.purpose,
        )

    def is_checked_in(self, user_id: str) -> bool:
        latest = self._attendance.get_latest_for_user(user_id)
        return latest is not None and latest.is_open

    def dashboard(self, user_id: str, *, now: datetime | None = None) -> StudentDashboard:
        now = self._now(now)
        recent = list(self._attendance.list_recent_for_user(user_id, DEFAULT_HISTORY_LIMIT))
        checked_in = bool(recent) and recent[0].is_open

        current = None
        if checked_in:
            # Elapsed time of the open session only; history rows still say "In Progress".
            hours, minutes = split_minutes(max(now - recent[0].check_in, timedelta(0)))
            current = hours * 60 + minutes

        return StudentDashboard(
            profile=self._profiles.get_by_id(user_id),
            recent=recent,
            is_checked_in=checked_in,
            current_session_minutes=current,
        )

    def stats(self, user_id: str, *, now: datetime | None = None) -> StudentStats:
        now = self._now(now)
        today = now.date()

        records = self._attendance.list_for_user(user_id)
        profile = self._profiles.get_by_id(user_id)
        month_start, month_end = month_bounds(now)
        month_count = self._attendance.count_for_user_between(user_id, month_start, month_end)

        days = attendance_dates(records)
        return StudentStats(
            weekly=weekly_activity(records, today),
            goal=goal_progress(profile.attendance_goal if profile else None, month_count),
            streak=calculate_streak(days, today),
            calendar=sorted(days),
        )

    def records_for_day(self, day: date) -> List[Dict[str, object]]:
        """Admin view of one calendar day, newest first, joined to student identities."""

        start, end = day_bounds(day, self._tz)
        records = self._attendance.list_between(start, end)
        identities = self._profiles.get_identities(r.user_id for r in records)
        return [record_to_ui(r, identities.get(r.user_id, StudentIdentity(None, None))) for r in records]

    def admin_day_summary(self, *, now: datetime | None = None) -> AdminDaySummary:
        now = self._now(now)
        start, end = day_bounds(now.date(), self._tz)
        records = self._attendance.list_between(start, end)

        closed = [completed_minutes(r) for r in records if not r.is_open]
        if closed:
            hours, minutes = split_minutes(timedelta(minutes=sum(closed) / len(closed)))
            average = f"{hours}h {minutes}m"
        else:
            average = "0h 0m"
        return AdminDaySummary(check_ins_today=len(records), average_duration=average)
