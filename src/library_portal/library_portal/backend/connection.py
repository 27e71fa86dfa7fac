from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Callable, Iterator, Optional

from supabase import Client, ClientOptions, create_client

TokenProvider = Callable[[], Optional[str]]

_token_override: ContextVar[Optional[str]] = ContextVar("backend_token_override", default=None)


@dataclass(frozen=True)
class BackendConfig:
    url: str
    anon_key: str
    reader_token: Optional[str] = None


class BackendConnection:
    """Client factory for the managed backend.

    A short-lived client is created per operation and authorized with the
    signed-in user's access token; row-level security is evaluated against it.
    """

    def __init__(self, config: BackendConfig, *, token_provider: Optional[TokenProvider] = None):
        self._config = config
        self._token_provider = token_provider or (lambda: None)

    @property
    def config(self) -> BackendConfig:
        return self._config

    def current_token(self) -> Optional[str]:
        return _token_override.get() or self._token_provider()

    @contextmanager
    def as_user(self, access_token: Optional[str]) -> Iterator[None]:
        reset = _token_override.set(access_token)
        try:
            yield
        finally:
            _token_override.reset(reset)

    @contextmanager
    def background(self) -> Iterator[None]:
        """Scope for reads with no signed-in user: the request token when there is
        one, otherwise the configured reader token."""
        with self.as_user(self.current_token() or self._config.reader_token):
            yield

    def connect(self) -> Client:
        client = create_client(
            self._config.url,
            self._config.anon_key,
            options=ClientOptions(auto_refresh_token=False, persist_session=False),
        )
        token = self.current_token()
        if token:
            client.postgrest.auth(token)
            client.functions.set_auth(token)
        return client
