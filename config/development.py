import os

from .config import Config, SUPABASE_CONFIG

SECRET_KEY = Config.SECRET_KEY
SUPABASE_CONFIG = dict(SUPABASE_CONFIG)

LIBRARY_TIMEZONE = Config.LIBRARY_TIMEZONE
CHECKIN_COOLDOWN_MINUTES = Config.CHECKIN_COOLDOWN_MINUTES
QR_SCAN_MODE = Config.QR_SCAN_MODE
QR_MAX_AGE_MINUTES = Config.QR_MAX_AGE_MINUTES
LOCAL_SETTINGS_PATH = Config.LOCAL_SETTINGS_PATH

DEBUG = bool(int(os.getenv("DEBUG", "1")))

# Realtime is handy locally but can be switched off when no backend is running.
ENABLE_REALTIME = Config.ENABLE_REALTIME
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
