from __future__ import annotations

from typing import Any

from ..backend.base import backend_client, fetchone
from ..backend.connection import BackendConnection
from .repository import LibrarySettingsRepository, LibraryStatusSource

STATUS_PROCEDURE = "get_library_status"


class SupabaseLibraryStatusSource(LibraryStatusSource):
    """Reads the aggregate; also called from boot and change-feed threads, where
    there is no request token, so it runs in the connection's background scope."""

    def __init__(self, conn_factory: BackendConnection):
        self._conn_factory = conn_factory

    def fetch_status(self) -> Any:
        with self._conn_factory.background():
            with backend_client(self._conn_factory, action=STATUS_PROCEDURE) as client:
                return client.rpc(STATUS_PROCEDURE).execute().data


class SupabaseLibrarySettingsRepository(LibrarySettingsRepository):
    def __init__(self, conn_factory: BackendConnection):
        self._conn_factory = conn_factory

    def get_total_seats(self) -> int:
        with backend_client(self._conn_factory, action="library_settings.get") as client:
            response = client.table("library_settings").select("total_seats").limit(1).execute()
            row = fetchone(response)
        return int(row.get("total_seats") or 0) if row else 0
