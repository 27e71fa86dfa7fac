import json

import pytest

from library_portal.core.exceptions import ValidationError
from library_portal.settings.model import LibraryPreferences
from library_portal.settings.store import LocalSettingsStore


def test_missing_file_gives_defaults(tmp_path):
    prefs = LocalSettingsStore(tmp_path / "settings.json").load()
    assert prefs == LibraryPreferences()
    assert prefs.opening_time == "09:00"
    assert prefs.qr_attendance_enabled is True


def test_save_then_load(tmp_path):
    store = LocalSettingsStore(tmp_path / "nested" / "settings.json")

    store.save({"library_name": "North Library", "closing_time": "21:30", "unknown": 1})

    assert json.loads(store.path.read_text())["closing_time"] == "21:30"
    loaded = store.load()
    assert loaded.library_name == "North Library"
    assert loaded.notice_text == ""


def test_corrupt_file_falls_back_to_defaults(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("{not json")
    assert LocalSettingsStore(path).load() == LibraryPreferences()

    path.write_text('["a list"]')
    assert LocalSettingsStore(path).load() == LibraryPreferences()


@pytest.mark.parametrize(
    "data",
    [{"qr_attendance_enabled": "yes"}, {"opening_time": "nine"}],
)
def test_invalid_values_are_rejected(tmp_path, data):
    store = LocalSettingsStore(tmp_path / "settings.json")
    with pytest.raises(ValidationError):
        store.save(data)
    assert not store.path.exists()
