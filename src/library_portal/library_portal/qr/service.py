from __future__ import annotations

import io
import logging
from datetime import datetime, timedelta
from typing import Optional

from ..attendance.model import AttendanceRecord
from ..attendance.service import AttendanceService
from ..common.datetime_utils import now_local
from ..common.validators import require_text
from ..core.enums import QrScanMode
from ..core.exceptions import InvalidQrPayloadError, ValidationError
from ..users.repository import ProfileRepository
from .codec import decode_payload, encode_payload, render_png

logger = logging.getLogger(__name__)


class QrAttendanceService:
    """Issue student QR codes and turn scans into check-ins.

    ``VERIFY`` accepts only a fresh token carrying the scanning student's own
    id; ``TRIGGER`` accepts any non-empty scan and ignores its content.
    """

    def __init__(
        self,
        attendance: AttendanceService,
        profiles: ProfileRepository,
        *,
        mode: QrScanMode = QrScanMode.VERIFY,
        max_age_minutes: int = 1440,
    ):
        self._attendance = attendance
        self._profiles = profiles
        self._mode = mode
        self._max_age = timedelta(minutes=int(max_age_minutes))

    @property
    def mode(self) -> QrScanMode:
        return self._mode

    def _student_id_of(self, user_id: str) -> str:
        profile = self._profiles.get_by_id(user_id)
        if not profile or not profile.student_id:
            raise ValidationError("No student ID on this profile")
        return profile.student_id

    def qr_image_for(self, user_id: str, *, now: datetime | None = None) -> io.BytesIO:
        now = now or now_local(self._attendance.tz)
        return render_png(encode_payload(self._student_id_of(user_id), now))

    def check_in_from_scan(self, user_id: str, scanned: Optional[str], *, now: datetime | None = None) -> AttendanceRecord:
        text = (require_text(scanned, "QR code") or "").strip()
        if not text:
            raise InvalidQrPayloadError("QR code is empty")

        now = now or now_local(self._attendance.tz)
        if self._mode == QrScanMode.VERIFY:
            payload = decode_payload(text)
            if payload.student_id != self._student_id_of(user_id):
                logger.warning("rejected QR scan by %s: token belongs to %s", user_id, payload.student_id)
                raise InvalidQrPayloadError("This QR code belongs to another student")
            age = now - payload.issued_at
            if age > self._max_age or age < -self._max_age:
                logger.warning("rejected QR scan by %s: token issued at %s", user_id, payload.issued_at.isoformat())
                raise InvalidQrPayloadError("QR code has expired")

        return self._attendance.check_in(user_id, now=now)
