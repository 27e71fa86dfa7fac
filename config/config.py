import os
from pathlib import Path


def _flag(name: str, default: str) -> bool:
    return bool(int(os.environ.get(name, default)))


class Config:
    """Values shared by every environment; each settings module overrides a few."""

    SECRET_KEY = os.environ.get("SECRET_KEY") or "dev-secret-key"

    # Managed backend (anon key only; privileged work happens in backend functions)
    SUPABASE_URL = os.environ.get("SUPABASE_URL", "http://localhost:54321")
    SUPABASE_ANON_KEY = os.environ.get("SUPABASE_ANON_KEY", "")
    # JWT for background reads (occupancy aggregate and realtime join) made outside a request
    SUPABASE_READER_TOKEN = os.environ.get("SUPABASE_READER_TOKEN") or None

    LIBRARY_TIMEZONE = os.environ.get("LIBRARY_TIMEZONE", "UTC")
    CHECKIN_COOLDOWN_MINUTES = int(os.environ.get("CHECKIN_COOLDOWN_MINUTES", "10"))
    QR_SCAN_MODE = os.environ.get("QR_SCAN_MODE", "verify")
    QR_MAX_AGE_MINUTES = int(os.environ.get("QR_MAX_AGE_MINUTES", "1440"))

    # Stand-in for the browser's local storage of the admin settings page
    LOCAL_SETTINGS_PATH = os.environ.get(
        "LOCAL_SETTINGS_PATH", str(Path(__file__).resolve().parents[1] / "instance" / "library_settings.json")
    )

    ENABLE_REALTIME = _flag("ENABLE_REALTIME", "1")
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")


SUPABASE_CONFIG = {
    "url": Config.SUPABASE_URL,
    "anon_key": Config.SUPABASE_ANON_KEY,
    "reader_token": Config.SUPABASE_READER_TOKEN,
}
