import os
import tempfile

from .config import Config

SECRET_KEY = "test-secret"
SUPABASE_CONFIG = {
    "url": os.getenv("SUPABASE_URL", "http://localhost:54321"),
    "anon_key": os.getenv("SUPABASE_ANON_KEY", "test-anon-key"),
    "reader_token": None,
}

LIBRARY_TIMEZONE = "UTC"
CHECKIN_COOLDOWN_MINUTES = 10
QR_SCAN_MODE = "verify"
QR_MAX_AGE_MINUTES = 1440
LOCAL_SETTINGS_PATH = os.path.join(tempfile.gettempdir(), "library_portal_test_settings.json")

DEBUG = False
TESTING = True

ENABLE_REALTIME = False
LOG_LEVEL = Config.LOG_LEVEL
