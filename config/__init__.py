import os
from typing import Optional

_ALIASES = {
    "prod": "production",
    "production": "production",
    "test": "testing",
    "testing": "testing",
    "dev": "development",
    "development": "development",
}


def get_settings_module(env: Optional[str] = None) -> str:
    """Dotted path of the settings module for ``env`` (default: ``$APP_ENV``).

    Unknown names fall back to development.
    """
    name = (env or os.getenv("APP_ENV") or "development").strip().lower()
    return f"config.{_ALIASES.get(name, 'development')}"
