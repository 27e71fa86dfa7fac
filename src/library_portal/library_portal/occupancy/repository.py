from __future__ import annotations

from typing import Any, Protocol


class LibraryStatusSource(Protocol):
    def fetch_status(self) -> Any:
        """Raw result of the aggregate procedure (row list or object)."""

        raise NotImplementedError


class LibrarySettingsRepository(Protocol):
    def get_total_seats(self) -> int:
        raise NotImplementedError


class ChangeFeed(Protocol):
    @property
    def is_open(self) -> bool:
        raise NotImplementedError

    def subscribe(self, callback, *, timeout: float = 10.0) -> None:
        raise NotImplementedError

    def unsubscribe(self, *, timeout: float = 5.0) -> None:
        raise NotImplementedError
