from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, Mapping

from ..common.datetime_utils import parse_clock
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class LibraryPreferences:
    """Admin-side preferences kept locally; not shared with any backend table."""

    library_name: str = " Library"
    opening_time: str = "09:00"
    closing_time: str = "18:00"
    qr_attendance_enabled: bool = True
    auto_checkout_enabled: bool = False
    notice_text: str = ""
    email_notifications: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "LibraryPreferences":
        """Build from a stored or submitted object; unknown keys are ignored."""

        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in data.items() if k in known}
        for flag in ("qr_attendance_enabled", "auto_checkout_enabled", "email_notifications"):
            if flag in values and not isinstance(values[flag], bool):
                raise ValidationError(f"{flag} must be true or false")
        for text in ("library_name", "opening_time", "closing_time", "notice_text"):
            if text in values:
                values[text] = "" if values[text] is None else str(values[text])
        for clock in ("opening_time", "closing_time"):
            if clock in values:
                try:
                    parse_clock(values[clock])
                except ValueError:
                    raise ValidationError(f"{clock} must be HH:MM")
        return cls(**values)
