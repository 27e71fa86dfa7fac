from __future__ import annotations

import io
import json
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import BinaryIO, Optional, Union

import qrcode
from PIL import Image

from ..core.exceptions import InvalidQrPayloadError


@dataclass(frozen=True)
class QrPayload:
    student_id: str
    issued_at: datetime


def encode_payload(student_id: str, issued_at: datetime) -> str:
    """Compact JSON token: ``{"student_id": ..., "timestamp": <epoch ms>}``."""
    return json.dumps(
        {"student_id": student_id, "timestamp": int(issued_at.timestamp() * 1000)},
        separators=(",", ":"),
    )


def decode_payload(text: str) -> QrPayload:
    try:
        data = json.loads(text)
    except (TypeError, ValueError):
        raise InvalidQrPayloadError("Invalid QR code")
    if not isinstance(data, dict):
        raise InvalidQrPayloadError("Invalid QR code")

    student_id = data.get("student_id")
    timestamp = data.get("timestamp")
    if not student_id or not isinstance(timestamp, (int, float)) or isinstance(timestamp, bool):
        raise InvalidQrPayloadError("Invalid QR code")
    try:
        issued_at = datetime.fromtimestamp(timestamp / 1000, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        raise InvalidQrPayloadError("Invalid QR code")
    return QrPayload(student_id=str(student_id), issued_at=issued_at)


def render_png(data: str, *, box_size: int = 10, border: int = 2) -> io.BytesIO:
    qr = qrcode.QRCode(
        version=None,
        error_correction=qrcode.constants.ERROR_CORRECT_H,
        box_size=box_size,
        border=border,
    )
    qr.add_data(data)
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")

    buf = io.BytesIO()
    img.save(buf, format="PNG")
    buf.seek(0)
    return buf


def decode_image(source: Union[BinaryIO, bytes]) -> Optional[str]:
    """Text of the first QR code in an image, or None when there is none.

    "No QR in frame" is ordinary scanner noise, not an error.
    """

    # pyzbar loads the native zbar library on import; only scanning needs it.
    from pyzbar.pyzbar import decode as pyzbar_decode

    if isinstance(source, (bytes, bytearray)):
        source = io.BytesIO(source)
    try:
        img = Image.open(source).convert("RGB")
    except (OSError, ValueError):
        raise InvalidQrPayloadError("Uploaded file is not an image")
    decoded = pyzbar_decode(img)
    if not decoded:
        return None
    return decoded[0].data.decode("utf-8").strip()
