import os

from .config import Config, SUPABASE_CONFIG

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")
SUPABASE_CONFIG = dict(SUPABASE_CONFIG)

LIBRARY_TIMEZONE = Config.LIBRARY_TIMEZONE
CHECKIN_COOLDOWN_MINUTES = Config.CHECKIN_COOLDOWN_MINUTES
QR_SCAN_MODE = Config.QR_SCAN_MODE
QR_MAX_AGE_MINUTES = Config.QR_MAX_AGE_MINUTES
LOCAL_SETTINGS_PATH = Config.LOCAL_SETTINGS_PATH

DEBUG = False

ENABLE_REALTIME = Config.ENABLE_REALTIME
LOG_LEVEL = Config.LOG_LEVEL
