from __future__ import annotations

from typing import Protocol, Sequence

from .model import Announcement


class AnnouncementRepository(Protocol):
    def list_recent(self, limit: int) -> Sequence[Announcement]:
        raise NotImplementedError
