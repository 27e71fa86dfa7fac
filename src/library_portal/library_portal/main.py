from __future__ import annotations

import atexit
import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, g, has_request_context, session

from config import get_settings_module

from .announcements.controller import register as register_announcements
from .attendance.controller import register as register_attendance
from .bookings.controller import register as register_bookings
from .common.http import register_error_handlers
from .container import Container, build_container
from .feedback.controller import register as register_feedback
from .occupancy.controller import register as register_occupancy
from .qr.controller import register as register_qr
from .reports.controller import register as register_reports
from .settings.controller import register as register_settings
from .timeslots.controller import register as register_timeslots
from .users.controller import register as register_users


def session_access_token() -> Optional[str]:
    """Access token of the signed-in user, when called inside a request."""
    if not has_request_context():
        return None
    return g.get("access_token") or session.get("access_token")


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    log_level = str(getattr(settings, "LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(level=log_level, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")
    app.logger.setLevel(log_level)

    supabase_config = getattr(settings, "SUPABASE_CONFIG")
    app.logger.info("settings=%s backend=%s", settings_module, supabase_config.get("url"))

    if container is None:
        container = build_container(
            supabase_config=supabase_config,
            timezone=getattr(settings, "LIBRARY_TIMEZONE", "UTC"),
            cooldown_minutes=int(getattr(settings, "CHECKIN_COOLDOWN_MINUTES", 10)),
            qr_scan_mode=getattr(settings, "QR_SCAN_MODE", "verify"),
            qr_max_age_minutes=int(getattr(settings, "QR_MAX_AGE_MINUTES", 1440)),
            settings_path=getattr(settings, "LOCAL_SETTINGS_PATH"),
            enable_realtime=bool(getattr(settings, "ENABLE_REALTIME", False)),
            token_provider=session_access_token,
        )
        container.start()
        atexit.register(container.close)

    app.extensions["library_portal"] = container

    register_error_handlers(app)
    register_users(app, container)
    register_attendance(app, container)
    register_qr(app, container)
    register_occupancy(app, container)
    register_bookings(app, container)
    register_feedback(app, container)
    register_announcements(app, container)
    register_timeslots(app, container)
    register_reports(app, container)
    register_settings(app, container)

    return app
