from datetime import date, datetime, timedelta, timezone

import pytest

from conftest import InMemoryAttendance, InMemoryProfiles
from library_portal.attendance.model import AttendanceRecord
from library_portal.attendance.service import AttendanceService, record_to_ui
from library_portal.core.exceptions import CheckInCooldownError, ValidationError
from library_portal.users.model import Profile

UTC = timezone.utc


def _service(records=None, profiles=None):
    attendance = InMemoryAttendance(records)
    svc = AttendanceService(
        attendance,
        InMemoryProfiles(profiles or [Profile("u1", "Ann Lee", "ann@example.com", student_id="S-1", attendance_goal=4)]),
        tz=UTC,
        cooldown_minutes=10,
    )
    return svc, attendance


def test_checkin_cooldown_then_allowed(fixed_now):
    svc, attendance = _service()

    svc.check_in("u1", now=fixed_now)
    assert svc.is_checked_in("u1")

    with pytest.raises(CheckInCooldownError) as exc:
        svc.check_in("u1", now=fixed_now + timedelta(minutes=3))
    assert exc.value.remaining_minutes == 7
    assert str(exc.value) == "You can check in again after 7 minute(s). Please wait."

    svc.check_in("u1", now=fixed_now + timedelta(minutes=10))
    assert len([r for r in attendance.records if r.is_open]) == 2


def test_checkin_defaults_purpose(fixed_now):
    svc, _ = _service()
    record = svc.check_in("u1", purpose="  ", now=fixed_now)
    assert record.purpose == "Study"


def test_checkout_closes_latest_open_record(fixed_now):
    svc, attendance = _service()
    svc.check_in("u1", now=fixed_now)

    closed = svc.check_out("u1", now=fixed_now + timedelta(hours=2, minutes=5))

    assert closed.check_out == fixed_now + timedelta(hours=2, minutes=5)
    assert not svc.is_checked_in("u1")
    assert record_to_ui(attendance.records[0])["duration"] == "2h 5m"


def test_checkout_without_open_record(fixed_now):
    svc, _ = _service()
    with pytest.raises(ValidationError, match="You are not checked in"):
        svc.check_out("u1", now=fixed_now)


def test_dashboard_reports_open_session_minutes(fixed_now):
    records = [AttendanceRecord("a-1", "u1", fixed_now - timedelta(minutes=95))]
    svc, _ = _service(records)

    dash = svc.dashboard("u1", now=fixed_now)

    assert dash.is_checked_in
    assert dash.current_session_minutes == 95
    assert dash.profile.full_name == "Ann Lee"
    assert record_to_ui(dash.recent[0])["check_out_time"] == "In Progress"


def test_stats_month_goal_and_streak(fixed_now):
    day = timedelta(days=1)
    records = [
        AttendanceRecord("a-1", "u1", fixed_now - 2 * day, fixed_now - 2 * day + timedelta(hours=1)),
        AttendanceRecord("a-2", "u1", fixed_now - day, fixed_now - day + timedelta(hours=3)),
        AttendanceRecord("a-3", "u1", fixed_now - timedelta(hours=1), fixed_now),
        AttendanceRecord("a-4", "u1", datetime(2026, 2, 27, 9, tzinfo=UTC), datetime(2026, 2, 27, 10, tzinfo=UTC)),
    ]
    svc, _ = _service(records)

    stats = svc.stats("u1", now=fixed_now)

    assert stats.streak == 3
    assert stats.goal.count == 3
    assert stats.goal.percentage == 75
    assert stats.weekly.total_hours == 5.0
    assert stats.calendar[0] == date(2026, 2, 27)


def test_records_for_day_joins_identities(fixed_now):
    records = [
        AttendanceRecord("a-1", "u1", fixed_now),
        AttendanceRecord("a-2", "ghost", fixed_now - timedelta(hours=1), fixed_now),
    ]
    svc, _ = _service(records)

    rows = svc.records_for_day(fixed_now.date())

    assert [r["id"] for r in rows] == ["a-1", "a-2"]
    assert rows[0]["student_id"] == "S-1"
    assert rows[1]["full_name"] == "Unknown"
    assert rows[1]["student_id"] == "N/A"


def test_records_for_day_joins_every_known_profile(fixed_now):
    profiles = [
        Profile("u1", "Ann Lee", "ann@example.com", student_id="S-1"),
        Profile("u2", "Ben Ortiz", "ben@example.com", student_id="S-2"),
    ]
    records = [
        AttendanceRecord("a-1", "u1", fixed_now),
        AttendanceRecord("a-2", "u2", fixed_now - timedelta(hours=1), fixed_now),
    ]
    svc, _ = _service(records, profiles)

    rows = svc.records_for_day(fixed_now.date())

    assert [(r["full_name"], r["student_id"]) for r in rows] == [("Ann Lee", "S-1"), ("Ben Ortiz", "S-2")]


def test_admin_day_summary_averages_closed_records(fixed_now):
    records = [
        AttendanceRecord("a-1", "u1", fixed_now - timedelta(hours=3), fixed_now - timedelta(hours=1)),
        AttendanceRecord("a-2", "u2", fixed_now - timedelta(hours=2), fixed_now - timedelta(hours=1)),
        AttendanceRecord("a-3", "u3", fixed_now),
    ]
    svc, _ = _service(records)

    summary = svc.admin_day_summary(now=fixed_now)

    assert summary.check_ins_today == 3
    assert summary.average_duration == "1h 30m"
