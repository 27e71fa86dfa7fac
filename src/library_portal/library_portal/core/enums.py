from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Role assignment stored in user_roles; gates admin screens."""

    ADMIN = "admin"
    STUDENT = "student"

    @property
    def landing_page(self) -> str:
        return "/admin" if self is Role.ADMIN else "/student"


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class FeedbackStatus(str, Enum):
    """Feedback only moves forward: pending -> reviewed -> resolved."""

    PENDING = "pending"
    REVIEWED = "reviewed"
    RESOLVED = "resolved"

    @property
    def rank(self) -> int:
        return [FeedbackStatus.PENDING, FeedbackStatus.REVIEWED, FeedbackStatus.RESOLVED].index(self)


class AnnouncementPriority(str, Enum):
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"


class QrScanMode(str, Enum):
    """How a scanned QR payload is treated before check-in."""

    VERIFY = "verify"
    TRIGGER = "trigger"


class ReportFormat(str, Enum):
    EXCEL = "xlsx"
    PDF = "pdf"
