from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one check-in event (row of ``attendance``).

    ``check_out`` is None while the student is still in the library.
    """

    record_id: str
    user_id: str
    check_in: datetime
    check_out: Optional[datetime] = None
    purpose: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self.check_out is None

    @property
    def day(self) -> date:
        return self.check_in.date()


@dataclass(frozen=True)
class AttendanceReportRow:
    """Read-model used by reports and exports: a record joined to its owner."""

    student_id: str
    student_name: str
    check_in: datetime
    check_out: Optional[datetime]
    duration: str
    date: date
