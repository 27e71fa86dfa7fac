from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta, tzinfo
from typing import List, Optional, Tuple

from ..attendance.metrics import format_duration
from ..attendance.model import AttendanceReportRow
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import day_bounds, now_local, parse_iso_date
from ..core.constants import ALL_TIME_REPORT_START
from ..core.enums import ReportFormat
from ..core.exceptions import ValidationError
from ..users.model import StudentIdentity
from ..users.repository import ProfileRepository
from .certificate import render_certificate
from .exporters import EXCEL_MIMETYPE, PDF_MIMETYPE, export_excel, export_pdf

logger = logging.getLogger(__name__)

NO_RECORDS_MESSAGE = "No attendance records found for the selected criteria."

PRESETS = ("today", "week", "month", "all")


@dataclass(frozen=True)
class ExportedFile:
    content: io.BytesIO
    filename: str
    mimetype: str


def preset_range(preset: str, today: date) -> Tuple[date, date]:
    """Quick ranges; weeks start on Sunday."""

    if preset == "today":
        return today, today
    if preset == "week":
        # date.weekday(): Monday=0 .. Sunday=6
        return today - timedelta(days=(today.weekday() + 1) % 7), today
    if preset == "month":
        return today.replace(day=1), today
    if preset == "all":
        return parse_iso_date(ALL_TIME_REPORT_START), today
    raise ValidationError(f"Unknown report preset: {preset}")


def report_filename(prefix: str, start: date, end: date, fmt: ReportFormat) -> str:
    return f"{prefix}_{start.isoformat()}_to_{end.isoformat()}.{fmt.value}"


def parse_format(value: Optional[str]) -> ReportFormat:
    v = (value or "").strip().lower()
    if v in ("excel", "xlsx"):
        return ReportFormat.EXCEL
    if v == "pdf":
        return ReportFormat.PDF
    raise ValidationError("Report format must be excel or pdf")


class ReportService:
    """Use case: attendance reports (admin and personal) and certificates."""

    def __init__(self, attendance: AttendanceRepository, profiles: ProfileRepository, *, tz: tzinfo):
        self._attendance = attendance
        self._profiles = profiles
        self._tz = tz

    def resolve_range(
        self,
        *,
        start: Optional[str],
        end: Optional[str],
        preset: Optional[str] = None,
        now: datetime | None = None,
    ) -> Tuple[date, date]:
        today = (now or now_local(self._tz)).date()
        if preset:
            return preset_range(preset, today)
        try:
            start_d = parse_iso_date(start) if start else today
            end_d = parse_iso_date(end) if end else today
        except (TypeError, ValueError):
            raise ValidationError("Invalid date (YYYY-MM-DD)")
        if start_d > end_d:
            raise ValidationError("Start date must not be after end date")
        return start_d, end_d

    def build_rows(self, *, start: date, end: date, user_id: Optional[str] = None) -> List[AttendanceReportRow]:
        """Records in [start, end] (both days inclusive), newest first, joined to owners."""

        range_start, _ = day_bounds(start, self._tz)
        _, range_end = day_bounds(end, self._tz)
        records = self._attendance.list_between(range_start, range_end, user_id=user_id)
        if not records:
            raise ValidationError(NO_RECORDS_MESSAGE)

        identities = self._profiles.get_identities(r.user_id for r in records)
        rows = []
        for r in records:
            who = identities.get(r.user_id, StudentIdentity(None, None))
            rows.append(
                AttendanceReportRow(
                    student_id=who.student_id or "N/A",
                    student_name=who.full_name or "Unknown User",
                    check_in=r.check_in,
                    check_out=r.check_out,
                    duration=format_duration(r.check_in, r.check_out),
                    date=r.check_in.date(),
                )
            )
        return rows

    def export(
        self,
        *,
        fmt: ReportFormat,
        start: date,
        end: date,
        user_id: Optional[str] = None,
        personal: bool = False,
        now: datetime | None = None,
    ) -> ExportedFile:
        rows = self.build_rows(start=start, end=end, user_id=user_id)
        span = f"{start.isoformat()} to {end.isoformat()}"
        if personal:
            prefix, title = "my_attendance", f"Personal Attendance Report ({span})"
        else:
            prefix, title = "attendance_report", f"Attendance Report ({span})"

        if fmt == ReportFormat.EXCEL:
            content, mimetype = export_excel(rows), EXCEL_MIMETYPE
        else:
            content = export_pdf(rows, title=title, generated_at=now or now_local(self._tz))
            mimetype = PDF_MIMETYPE
        logger.info("report %s exported (%d rows)", prefix, len(rows))
        return ExportedFile(content=content, filename=report_filename(prefix, start, end, fmt), mimetype=mimetype)

    def certificate(self, user_id: str, *, now: datetime | None = None) -> ExportedFile:
        records = self._attendance.list_for_user(user_id)
        if not records:
            raise ValidationError("You need at least one attendance record to generate a certificate.")

        profile = self._profiles.get_by_id(user_id)
        issued_on = (now or now_local(self._tz)).date()
        content = render_certificate(
            full_name=(profile.full_name if profile else "") or "Student",
            student_id=(profile.student_id if profile else None) or "N/A",
            sessions=len(records),
            issued_on=issued_on,
        )
        return ExportedFile(
            content=content,
            filename=f"attendance_certificate_{issued_on.isoformat()}.pdf",
            mimetype=PDF_MIMETYPE,
        )
