from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import AnnouncementPriority


@dataclass(frozen=True)
class Announcement:
    announcement_id: str
    title: str
    content: str
    priority: AnnouncementPriority
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
