from datetime import timedelta, timezone

import pytest

from conftest import InMemoryAttendance, InMemoryProfiles
from library_portal.attendance.service import AttendanceService
from library_portal.core.enums import QrScanMode
from library_portal.core.exceptions import InvalidQrPayloadError, ValidationError
from library_portal.qr.codec import decode_payload, encode_payload
from library_portal.qr.service import QrAttendanceService
from library_portal.users.model import Profile


def _service(mode=QrScanMode.VERIFY, max_age_minutes=60):
    profiles = InMemoryProfiles(
        [
            Profile("u1", "Ann Lee", "ann@example.com", student_id="S-1"),
            Profile("u2", "Ben Ode", "ben@example.com"),
        ]
    )
    attendance = InMemoryAttendance()
    svc = AttendanceService(attendance, profiles, tz=timezone.utc)
    return QrAttendanceService(svc, profiles, mode=mode, max_age_minutes=max_age_minutes), attendance


def test_payload_is_compact_json(fixed_now):
    token = encode_payload("S-1", fixed_now)
    assert token == '{"student_id":"S-1","timestamp":%d}' % int(fixed_now.timestamp() * 1000)
    assert decode_payload(token).issued_at == fixed_now


@pytest.mark.parametrize("text", ["not json", "[1, 2]", '{"student_id": "S-1"}', '{"timestamp": 1}'])
def test_decode_payload_rejects_garbage(text):
    with pytest.raises(InvalidQrPayloadError, match="Invalid QR code"):
        decode_payload(text)


def test_verify_mode_accepts_own_fresh_token(fixed_now):
    svc, attendance = _service()
    record = svc.check_in_from_scan("u1", encode_payload("S-1", fixed_now - timedelta(minutes=5)), now=fixed_now)
    assert record.user_id == "u1"
    assert len(attendance.records) == 1


def test_verify_mode_rejects_other_students_token(fixed_now):
    svc, attendance = _service()
    with pytest.raises(InvalidQrPayloadError, match="another student"):
        svc.check_in_from_scan("u1", encode_payload("S-9", fixed_now), now=fixed_now)
    assert attendance.records == []


def test_verify_mode_rejects_expired_token(fixed_now):
    svc, _ = _service()
    with pytest.raises(InvalidQrPayloadError, match="expired"):
        svc.check_in_from_scan("u1", encode_payload("S-1", fixed_now - timedelta(hours=2)), now=fixed_now)


def test_trigger_mode_ignores_content(fixed_now):
    svc, attendance = _service(mode=QrScanMode.TRIGGER)
    svc.check_in_from_scan("u2", "anything at all", now=fixed_now)
    assert attendance.records[0].user_id == "u2"


def test_empty_scan_is_rejected(fixed_now):
    svc, _ = _service(mode=QrScanMode.TRIGGER)
    with pytest.raises(InvalidQrPayloadError, match="empty"):
        svc.check_in_from_scan("u1", "   ", now=fixed_now)


def test_qr_image_needs_student_id(fixed_now):
    svc, _ = _service()
    assert svc.qr_image_for("u1", now=fixed_now).getvalue().startswith(b"\x89PNG")
    with pytest.raises(ValidationError):
        svc.qr_image_for("u2", now=fixed_now)


def test_rendered_code_scans_back(fixed_now):
    pytest.importorskip("pyzbar.pyzbar")
    from library_portal.qr.codec import decode_image, render_png

    token = encode_payload("S-1", fixed_now)
    assert decode_image(render_png(token)) == token
