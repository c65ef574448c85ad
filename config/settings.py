"""Django settings for the agenda project.

Deployment values come from ``AGENDA_*`` environment variables. There is no
database: events live in a JSON file and sessions in signed cookies.
Authentication is expected to be enforced by the reverse proxy in front of
``/admin``.
"""

import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent
DATA_DIR = Path(os.environ.get("AGENDA_DATA_DIR", BASE_DIR / "data"))

SECRET_KEY = os.environ.get("AGENDA_SECRET_KEY", "insecure-dev-key-change-me")
DEBUG = os.environ.get("AGENDA_DEBUG", "0") == "1"
ALLOWED_HOSTS = [h for h in os.environ.get("AGENDA_ALLOWED_HOSTS", "localhost,127.0.0.1,testserver").split(",") if h]

INSTALLED_APPS = [
    "django.contrib.contenttypes",
    "django.contrib.auth",
    "django.contrib.sessions",
    "rest_framework",
    "agenda.apps.AgendaConfig",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "config.urls"
WSGI_APPLICATION = "config.wsgi.application"

DATABASES = {}

SESSION_ENGINE = "django.contrib.sessions.backends.signed_cookies"
SESSION_COOKIE_HTTPONLY = True
SESSION_COOKIE_SAMESITE = "Strict"
SESSION_COOKIE_SECURE = not DEBUG and os.environ.get("AGENDA_INSECURE_COOKIES", "0") != "1"

LANGUAGE_CODE = "de-ch"
TIME_ZONE = "Europe/Zurich"
USE_I18N = False
USE_TZ = True

# Multipart bodies up to this size stay in memory; larger files spool to disk.
FILE_UPLOAD_MAX_MEMORY_SIZE = 2 * 1024 * 1024

REST_FRAMEWORK = {
    "DEFAULT_RENDERER_CLASSES": ["rest_framework.renderers.JSONRenderer"],
    "DEFAULT_PARSER_CLASSES": [
        "rest_framework.parsers.MultiPartParser",
        "rest_framework.parsers.FormParser",
    ],
    "DEFAULT_AUTHENTICATION_CLASSES": [],
    "DEFAULT_PERMISSION_CLASSES": ["rest_framework.permissions.AllowAny"],
    "UNAUTHENTICATED_USER": None,
    "EXCEPTION_HANDLER": "agenda.handlers.exceptions.agenda_exception_handler",
}

AGENDA = {
    "EVENTS_FILE": os.environ.get("AGENDA_EVENTS_FILE", str(DATA_DIR / "events.json")),
    "UPLOAD_DIR": os.environ.get("AGENDA_UPLOAD_DIR", str(DATA_DIR / "uploads")),
    "UPLOAD_URL": "/uploads",
    "MAX_IMAGE_BYTES": 2 * 1024 * 1024,
    "TIMEZONE": TIME_ZONE,
    "LOCK_TIMEOUT": 5.0,
    "ROTATE_CSRF": os.environ.get("AGENDA_ROTATE_CSRF", "0") == "1",
}

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "plain": {"format": "%(asctime)s %(levelname)s %(name)s: %(message)s"},
    },
    "handlers": {
        "console": {"class": "logging.StreamHandler", "formatter": "plain"},
    },
    "loggers": {
        "agenda": {
            "handlers": ["console"],
            "level": os.environ.get("AGENDA_LOG_LEVEL", "INFO"),
            "propagate": True,
        },
        "django": {"handlers": ["console"], "level": "WARNING"},
    },
}
