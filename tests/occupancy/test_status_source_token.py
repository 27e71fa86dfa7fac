from types import SimpleNamespace

from library_portal.backend.connection import BackendConfig, BackendConnection
from library_portal.occupancy.supabase_occupancy_repository import SupabaseLibraryStatusSource


class RecordingConnection(BackendConnection):
    """Hands out a stub client and records the token each call would carry."""

    def __init__(self, config, **kwargs):
        super().__init__(config, **kwargs)
        self.tokens = []

    def connect(self):
        self.tokens.append(self.current_token())
        status = SimpleNamespace(data=[{"current_occupied": 1, "total_seats": 10, "available": 9}])
        return SimpleNamespace(rpc=lambda name: SimpleNamespace(execute=lambda: status))


def _config(reader_token):
    return BackendConfig(url="http://localhost:54321", anon_key="anon", reader_token=reader_token)


def test_status_read_outside_request_uses_reader_token():
    conn = RecordingConnection(_config("reader-jwt"))

    SupabaseLibraryStatusSource(conn).fetch_status()

    assert conn.tokens == ["reader-jwt"]
    assert conn.current_token() is None


def test_status_read_in_request_keeps_user_token():
    conn = RecordingConnection(_config("reader-jwt"), token_provider=lambda: "user-jwt")
    SupabaseLibraryStatusSource(conn).fetch_status()
    assert conn.tokens == ["user-jwt"]


def test_reader_token_is_not_used_for_ordinary_queries():
    conn = RecordingConnection(_config("reader-jwt"))
    conn.connect()
    assert conn.tokens == [None]
