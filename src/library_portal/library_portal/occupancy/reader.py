from __future__ import annotations

import logging
import threading
from typing import Optional

from ..core.exceptions import BackendError, SessionExpiredError
from .model import OccupancySnapshot, decode_status
from .repository import ChangeFeed, LibraryStatusSource

logger = logging.getLogger(__name__)


class OccupancyReader:
    """Library occupancy, cached while the change feed is live.

    With an open feed the snapshot is refreshed on start and on every change
    notification. Without one (realtime disabled, subscribe failed, or closed)
    every read goes to the source. A failed refresh keeps the previous snapshot.
    """

    def __init__(self, source: LibraryStatusSource, *, feed: Optional[ChangeFeed] = None):
        self._source = source
        self._feed = feed
        self._lock = threading.Lock()
        self._snapshot: Optional[OccupancySnapshot] = None

    @property
    def is_listening(self) -> bool:
        return self._feed is not None and self._feed.is_open

    def snapshot(self) -> Optional[OccupancySnapshot]:
        with self._lock:
            return self._snapshot

    def refresh(self) -> Optional[OccupancySnapshot]:
        # A notification that arrives after stop() still lands here and
        # updates the cache; nothing tracks whether the reader is running.
        try:
            snapshot = decode_status(self._source.fetch_status())
        except (BackendError, SessionExpiredError) as e:
            logger.warning("occupancy refresh failed: %s", e)
            return self.snapshot()
        with self._lock:
            self._snapshot = snapshot
        return snapshot

    def current(self) -> Optional[OccupancySnapshot]:
        """Snapshot for one read: the cache while listening, otherwise a fresh load."""
        if not self.is_listening:
            return self.refresh()
        snapshot = self.snapshot()
        return snapshot if snapshot is not None else self.refresh()

    def start(self) -> None:
        self.refresh()
        if self._feed is not None and not self._feed.is_open:
            self._feed.subscribe(self._on_change)

    def stop(self) -> None:
        if self._feed is not None:
            self._feed.unsubscribe()

    def _on_change(self) -> None:
        self.refresh()
