from __future__ import annotations

from contextlib import contextmanager
from dataclasses import replace
from datetime import datetime, timezone
from typing import Dict, List, Optional

import pytest

from library_portal.attendance.model import AttendanceRecord
from library_portal.bookings.model import SeatBooking
from library_portal.core.enums import BookingStatus, FeedbackStatus, Role
from library_portal.core.exceptions import AuthenticationError, PrivilegedFunctionError, SessionExpiredError
from library_portal.feedback.model import Feedback
from library_portal.timeslots.model import TimeSlot
from library_portal.users.model import AuthIdentity, Profile, StudentIdentity

UTC = timezone.utc


@pytest.fixture
def fixed_now() -> datetime:
    # Wednesday
    return datetime(2026, 3, 18, 10, 0, 0, tzinfo=UTC)


class InMemoryProfiles:
    def __init__(self, profiles: Optional[List[Profile]] = None):
        self.by_id: Dict[str, Profile] = {p.user_id: p for p in profiles or []}
        self.updates: List[tuple] = []

    def get_by_id(self, user_id: str) -> Optional[Profile]:
        return self.by_id.get(user_id)

    def list_by_ids(self, user_ids):
        ids = set(user_ids)
        return [p for p in self.by_id.values() if p.user_id in ids]

    def get_identities(self, user_ids):
        ids = set(user_ids)
        return {
            uid: StudentIdentity(full_name=p.full_name, student_id=p.student_id)
            for uid, p in self.by_id.items()
            if uid in ids
        }

    def upsert(self, *, user_id, full_name, email, student_id=None, seat_number=None, phone=None):
        self.by_id[user_id] = Profile(
            user_id=user_id,
            full_name=full_name,
            email=email,
            student_id=student_id,
            seat_number=seat_number,
            phone=phone,
        )

    def update_fields(self, user_id, fields):
        self.updates.append((user_id, dict(fields)))
        current = self.by_id.get(user_id) or Profile(user_id=user_id, full_name="", email="")
        self.by_id[user_id] = replace(current, **fields)


class InMemoryRoles:
    def __init__(self, roles: Optional[Dict[str, Role]] = None):
        self.roles: Dict[str, Role] = dict(roles or {})

    def get_role(self, user_id):
        return self.roles.get(user_id)

    def list_user_ids(self, role):
        return [uid for uid, r in self.roles.items() if r == role]

    def count(self, role):
        return len(self.list_user_ids(role))

    def assign(self, user_id, role):
        self.roles[user_id] = role


class FakeAuthGateway:
    """Accounts keyed by email; tokens are ``token-<user_id>``."""

    def __init__(self):
        self.accounts: Dict[str, tuple] = {}
        self.active_token: Optional[str] = None
        self.tokens_seen: List[Optional[str]] = []
        self.signed_out: List[str] = []
        self.expires_at: Optional[int] = None
        self.revoked_refresh_tokens: set = set()
        self.refreshed: List[str] = []

    def add(self, email: str, password: str, user_id: str) -> None:
        self.accounts[email] = (password, user_id)

    def sign_up(self, *, email, password, full_name):
        user_id = f"u-{len(self.accounts) + 1}"
        self.add(email, password, user_id)
        return AuthIdentity(user_id=user_id, email=email, access_token=f"token-{user_id}")

    def sign_in(self, *, email, password):
        account = self.accounts.get(email)
        if account is None or account[0] != password:
            raise AuthenticationError("Invalid login credentials")
        return AuthIdentity(
            user_id=account[1],
            email=email,
            access_token=f"token-{account[1]}",
            refresh_token=f"refresh-{account[1]}",
            expires_at=self.expires_at,
        )

    def refresh(self, refresh_token):
        if refresh_token in self.revoked_refresh_tokens:
            raise SessionExpiredError()
        self.refreshed.append(refresh_token)
        n = len(self.refreshed)
        return AuthIdentity(
            user_id="", email="", access_token=f"renewed-{n}", refresh_token=f"{refresh_token}-{n}", expires_at=4102444800
        )

    def sign_out(self, access_token):
        self.signed_out.append(access_token)

    @contextmanager
    def acting_as(self, access_token):
        previous = self.active_token
        self.active_token = access_token
        self.tokens_seen.append(access_token)
        try:
            yield
        finally:
            self.active_token = previous


class FakeAccountFunctions:
    def __init__(self, *, fail_with: Optional[str] = None):
        self.calls: List[tuple] = []
        self.deleted: List[str] = []
        self._fail_with = fail_with

    def create_account(self, *, function, email, password, full_name):
        self.calls.append((function, email, full_name))
        if self._fail_with:
            raise PrivilegedFunctionError(self._fail_with)
        return f"new-{len(self.calls)}"

    def delete_user(self, user_id):
        if self._fail_with:
            raise PrivilegedFunctionError(self._fail_with)
        self.deleted.append(user_id)


class InMemoryAttendance:
    def __init__(self, records: Optional[List[AttendanceRecord]] = None):
        self.records: List[AttendanceRecord] = list(records or [])
        self._id = len(self.records)

    def _newest_first(self, items):
        return sorted(items, key=lambda r: r.check_in, reverse=True)

    def list_recent_for_user(self, user_id, limit):
        return self._newest_first(r for r in self.records if r.user_id == user_id)[:limit]

    def list_for_user(self, user_id, *, since=None):
        return self._newest_first(
            r for r in self.records if r.user_id == user_id and (since is None or r.check_in >= since)
        )

    def get_latest_for_user(self, user_id):
        items = self.list_recent_for_user(user_id, 1)
        return items[0] if items else None

    def get_latest_open_for_user(self, user_id):
        items = [r for r in self.list_for_user(user_id) if r.is_open]
        return items[0] if items else None

    def count_for_user_between(self, user_id, start, end):
        return sum(1 for r in self.records if r.user_id == user_id and start <= r.check_in < end)

    def list_between(self, start, end, *, user_id=None):
        return self._newest_first(
            r for r in self.records if start <= r.check_in < end and (user_id is None or r.user_id == user_id)
        )

    def count_open(self, *, since=None):
        return sum(1 for r in self.records if r.is_open and (since is None or r.check_in >= since))

    def create_checkin(self, *, user_id, check_in, purpose):
        self._id += 1
        record = AttendanceRecord(record_id=f"a-{self._id}", user_id=user_id, check_in=check_in, purpose=purpose)
        self.records.append(record)
        return record

    def update_checkout(self, *, record_id, check_out):
        self.records = [replace(r, check_out=check_out) if r.record_id == record_id else r for r in self.records]


class InMemorySlots:
    def __init__(self):
        self.inserted: Dict[str, list] = {}

    def list_for_user(self, user_id):
        return [
            TimeSlot(slot_id=str(i), user_id=user_id, start_time=s.start_time, end_time=s.end_time)
            for i, s in enumerate(sorted(self.inserted.get(user_id, []), key=lambda s: s.start_time))
        ]

    def insert_many(self, user_id, slots):
        self.inserted.setdefault(user_id, []).extend(slots)


class InMemoryBookings:
    def __init__(self, bookings: Optional[List[SeatBooking]] = None):
        self.by_id: Dict[str, SeatBooking] = {b.booking_id: b for b in bookings or []}

    def list_for_user(self, user_id):
        return sorted((b for b in self.by_id.values() if b.user_id == user_id), key=lambda b: b.booking_date, reverse=True)

    def list_all(self):
        return sorted(self.by_id.values(), key=lambda b: (b.booking_date, b.start_time), reverse=True)

    def get_by_id(self, booking_id):
        return self.by_id.get(booking_id)

    def create(self, *, user_id, seat_number, booking_date, start_time, end_time):
        booking_id = f"b-{len(self.by_id) + 1}"
        self.by_id[booking_id] = SeatBooking(
            booking_id=booking_id,
            user_id=user_id,
            seat_number=seat_number,
            booking_date=booking_date,
            start_time=start_time,
            end_time=end_time,
            status=BookingStatus.PENDING,
        )

    def update_status(self, booking_id, status):
        self.by_id[booking_id] = replace(self.by_id[booking_id], status=status)


class InMemoryFeedback:
    def __init__(self, items: Optional[List[Feedback]] = None):
        self.by_id: Dict[str, Feedback] = {f.feedback_id: f for f in items or []}

    def list_for_user(self, user_id):
        return [f for f in self.by_id.values() if f.user_id == user_id]

    def list_all(self):
        return list(self.by_id.values())

    def get_by_id(self, feedback_id):
        return self.by_id.get(feedback_id)

    def create(self, *, user_id, subject, message, rating):
        feedback_id = f"f-{len(self.by_id) + 1}"
        self.by_id[feedback_id] = Feedback(
            feedback_id=feedback_id,
            user_id=user_id,
            subject=subject,
            message=message,
            rating=rating,
            status=FeedbackStatus.PENDING,
        )

    def update_status(self, feedback_id, status):
        self.by_id[feedback_id] = replace(self.by_id[feedback_id], status=status)


class StaticStatusSource:
    def __init__(self, data):
        self.data = data
        self.calls = 0

    def fetch_status(self):
        self.calls += 1
        return self.data


class FakeChangeFeed:
    def __init__(self):
        self.callback = None
        self.unsubscribed = False

    @property
    def is_open(self):
        return self.callback is not None and not self.unsubscribed

    def subscribe(self, callback, *, timeout=10.0):
        self.callback = callback

    def unsubscribe(self, *, timeout=5.0):
        self.unsubscribed = True

    def notify(self):
        # Delivery keeps working after unsubscribe, like a late in-flight event.
        self.callback()
