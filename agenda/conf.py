"""Agenda app settings.

All options live in a single ``AGENDA`` dict in the Django settings module.
Values are looked up on every call so overrides made at runtime (tests)
take effect immediately.
"""

from pathlib import Path
from typing import Any

from django.conf import settings

DEFAULTS: dict[str, Any] = {
    "EVENTS_FILE": None,
    "UPLOAD_DIR": None,
    "UPLOAD_URL": "/uploads",
    "MAX_IMAGE_BYTES": 2 * 1024 * 1024,
    "TIMEZONE": "Europe/Zurich",
    "LOCK_TIMEOUT": 5.0,
    "ROTATE_CSRF": False,
}


def agenda_setting(name: str) -> Any:
    if name not in DEFAULTS:
        raise KeyError(f"Unknown agenda setting: {name}")
    user_settings = getattr(settings, "AGENDA", {})
    value = user_settings.get(name, DEFAULTS[name])
    if value is None and name == "EVENTS_FILE":
        value = Path(settings.BASE_DIR) / "data" / "events.json"
    if value is None and name == "UPLOAD_DIR":
        value = Path(settings.BASE_DIR) / "data" / "uploads"
    return value
