from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from ..core.constants import DEFAULT_ATTENDANCE_GOAL
from ..core.enums import Role


@dataclass(frozen=True)
class Profile:
    """One per user account (row of ``profiles``)."""

    user_id: str
    full_name: str
    email: str
    phone: Optional[str] = None
    student_id: Optional[str] = None
    seat_number: Optional[str] = None
    attendance_goal: int = DEFAULT_ATTENDANCE_GOAL
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class StudentIdentity:
    """Display identity used when joining attendance rows to their owners."""

    full_name: Optional[str]
    student_id: Optional[str]


@dataclass(frozen=True)
class AuthIdentity:
    user_id: str
    email: str
    access_token: Optional[str]
    refresh_token: Optional[str] = None
    expires_at: Optional[int] = None


@dataclass(frozen=True)
class SessionUser:
    """What we store into Flask session after login.

    The role is resolved once at sign-in and travels with the session.
    """

    user_id: str
    email: str
    full_name: str
    role: Role
    access_token: str
    refresh_token: Optional[str] = None
    expires_at: Optional[int] = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    def to_session(self) -> Dict[str, Any]:
        return {
            "user_id": self.user_id,
            "email": self.email,
            "name": self.full_name,
            "role": self.role.value,
            "access_token": self.access_token,
            "refresh_token": self.refresh_token,
            "expires_at": self.expires_at,
        }

    @classmethod
    def from_session(cls, data) -> Optional["SessionUser"]:
        if not data.get("user_id") or not data.get("access_token"):
            return None
        try:
            role = Role(data.get("role"))
        except ValueError:
            return None
        return cls(
            user_id=str(data["user_id"]),
            email=str(data.get("email") or ""),
            full_name=str(data.get("name") or ""),
            role=role,
            access_token=str(data["access_token"]),
            refresh_token=data.get("refresh_token"),
            expires_at=_epoch(data.get("expires_at")),
        )


@dataclass(frozen=True)
class NewStudent:
    full_name: str
    email: str
    password: str
    student_id: str
    seat_number: Optional[str] = None
    phone: Optional[str] = None


def _epoch(value) -> Optional[int]:
    try:
        return int(value) if value is not None else None
    except (TypeError, ValueError):
        return None
