from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Mapping

from ..core.exceptions import ValidationError
from .model import LibraryPreferences

logger = logging.getLogger(__name__)


class LocalSettingsStore:
    """One JSON object on local disk, read on load and overwritten wholesale on save."""

    def __init__(self, path: Path):
        self._path = Path(path)
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> LibraryPreferences:
        with self._lock:
            if not self._path.exists():
                return LibraryPreferences()
            try:
                data = json.loads(self._path.read_text(encoding="utf-8"))
            except (OSError, ValueError) as e:
                logger.warning("ignoring unreadable settings file %s: %s", self._path, e)
                return LibraryPreferences()
        if not isinstance(data, dict):
            logger.warning("ignoring settings file %s: not a JSON object", self._path)
            return LibraryPreferences()
        try:
            return LibraryPreferences.from_mapping(data)
        except ValidationError as e:
            logger.warning("ignoring invalid settings file %s: %s", self._path, e)
            return LibraryPreferences()

    def save(self, data: Mapping[str, Any]) -> LibraryPreferences:
        prefs = LibraryPreferences.from_mapping(data)
        payload = json.dumps(prefs.to_dict(), indent=2)
        with self._lock:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=str(self._path.parent), prefix=".settings-", suffix=".json")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    fh.write(payload)
                os.replace(tmp, self._path)
            except OSError:
                if os.path.exists(tmp):
                    os.unlink(tmp)
                raise
        logger.info("library settings saved to %s", self._path)
        return prefs
