"""Pytest configuration and shared fixtures."""

import io
from pathlib import Path

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from PIL import Image
from rest_framework.test import APIClient


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture(autouse=True)
def agenda_settings(settings, tmp_path: Path):
    """Point the event file and upload directory at a temp directory."""
    settings.SESSION_COOKIE_SECURE = False
    settings.AGENDA = {
        "EVENTS_FILE": str(tmp_path / "events.json"),
        "UPLOAD_DIR": str(tmp_path / "uploads"),
        "UPLOAD_URL": "/uploads",
        "MAX_IMAGE_BYTES": 2 * 1024 * 1024,
        "TIMEZONE": "Europe/Zurich",
        "LOCK_TIMEOUT": 0.5,
        "ROTATE_CSRF": False,
    }
    return settings.AGENDA


@pytest.fixture
def events_file(tmp_path: Path) -> Path:
    return tmp_path / "events.json"


@pytest.fixture
def upload_dir(tmp_path: Path) -> Path:
    return tmp_path / "uploads"


def _image_bytes(image_format: str = "PNG") -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (4, 4), color=(200, 30, 30)).save(buffer, format=image_format)
    return buffer.getvalue()


@pytest.fixture
def image_bytes():
    """Factory for small real images encoded in the given Pillow format."""
    return _image_bytes


@pytest.fixture
def png_upload() -> SimpleUploadedFile:
    return SimpleUploadedFile("poster.png", _image_bytes("PNG"), content_type="image/png")
