from __future__ import annotations

import logging
from datetime import tzinfo
from typing import Any, Dict, Sequence

from ..backend.base import backend_client, fetchall
from ..backend.connection import BackendConnection
from ..common.datetime_utils import parse_timestamp
from ..core.enums import AnnouncementPriority
from .model import Announcement
from .repository import AnnouncementRepository

logger = logging.getLogger(__name__)


class SupabaseAnnouncementRepository(AnnouncementRepository):
    def __init__(self, conn_factory: BackendConnection, tz: tzinfo):
        self._conn_factory = conn_factory
        self._tz = tz

    def _to_announcement(self, row: Dict[str, Any]) -> Announcement:
        try:
            priority = AnnouncementPriority(row.get("priority") or AnnouncementPriority.NORMAL.value)
        except ValueError:
            logger.warning("announcement %s has unknown priority %r", row.get("id"), row.get("priority"))
            priority = AnnouncementPriority.NORMAL
        return Announcement(
            announcement_id=str(row["id"]),
            title=row.get("title") or "",
            content=row.get("content") or "",
            priority=priority,
            created_at=parse_timestamp(row.get("created_at"), self._tz),
            updated_at=parse_timestamp(row.get("updated_at"), self._tz),
        )

    def list_recent(self, limit: int) -> Sequence[Announcement]:
        with backend_client(self._conn_factory, action="announcements.recent") as client:
            response = (
                client.table("announcements")
                .select("*")
                .order("created_at", desc=True)
                .limit(limit)
                .execute()
            )
            return [self._to_announcement(r) for r in fetchall(response)]
