from __future__ import annotations

import asyncio
import logging
import threading
from typing import Any, Callable, Optional

from supabase import acreate_client

from .connection import BackendConfig

logger = logging.getLogger(__name__)

ChangeCallback = Callable[[], None]


class SupabaseChangeFeed:
    """Row-change notifications for one table via the async realtime client.

    The realtime client is asyncio-only, so it runs on a private event loop
    thread. Payloads are ignored: a notification is only a refresh trigger.
    """

    def __init__(self, config: BackendConfig, *, table: str, channel_name: str, schema: str = "public"):
        self._config = config
        self._table = table
        self._channel_name = channel_name
        self._schema = schema
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._thread: Optional[threading.Thread] = None
        self._client: Any = None
        self._channel: Any = None

    @property
    def is_open(self) -> bool:
        return self._channel is not None

    def subscribe(self, callback: ChangeCallback, *, timeout: float = 10.0) -> None:
        if self.is_open:
            return
        self._loop = asyncio.new_event_loop()
        self._thread = threading.Thread(target=self._loop.run_forever, name=f"realtime-{self._table}", daemon=True)
        self._thread.start()
        future = asyncio.run_coroutine_threadsafe(self._open(callback), self._loop)
        try:
            future.result(timeout=timeout)
        except Exception:
            self._stop_loop()
            raise
        logger.info("realtime subscription opened on %s.%s", self._schema, self._table)

    async def _open(self, callback: ChangeCallback) -> None:
        self._client = await acreate_client(self._config.url, self._config.anon_key)
        if self._config.reader_token:
            # postgres_changes is filtered by row-level security for the joining role.
            await self._client.realtime.set_auth(self._config.reader_token)
        else:
            logger.warning("realtime joins as anon; attendance changes are only delivered if anon may select them")
        channel = self._client.channel(self._channel_name)

        def _on_change(_payload) -> None:
            try:
                callback()
            except Exception:
                logger.exception("change-feed callback failed")

        channel.on_postgres_changes("*", schema=self._schema, table=self._table, callback=_on_change)
        await channel.subscribe()
        self._channel = channel

    async def _close(self) -> None:
        if self._client is not None and self._channel is not None:
            await self._client.remove_channel(self._channel)
        self._channel = None
        self._client = None

    def unsubscribe(self, *, timeout: float = 5.0) -> None:
        if self._loop is None:
            return
        try:
            if self.is_open:
                asyncio.run_coroutine_threadsafe(self._close(), self._loop).result(timeout=timeout)
                logger.info("realtime subscription closed on %s.%s", self._schema, self._table)
        finally:
            self._stop_loop()

    def _stop_loop(self) -> None:
        loop, thread = self._loop, self._thread
        self._loop = None
        self._thread = None
        self._channel = None
        if loop is not None:
            loop.call_soon_threadsafe(loop.stop)
        if thread is not None:
            thread.join(timeout=5.0)
        if loop is not None and not loop.is_running():
            loop.close()
