"""Validation and storage of uploaded event images.

Uploads are stored as-is; no resizing or re-encoding happens here.
"""

import logging
import os
import re
import secrets
import tempfile
from pathlib import Path

from django.core.files.uploadedfile import UploadedFile
from PIL import Image, UnidentifiedImageError

from agenda.domain.errors import (
    ImageTooLargeError,
    ImageUploadError,
    StorageError,
    UnsupportedImageTypeError,
)

logger = logging.getLogger(__name__)

# Pillow format name -> stored extension
ALLOWED_FORMATS = {
    "JPEG": "jpg",
    "PNG": "png",
    "WEBP": "webp",
}

SLUG_MAX = 50
_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")


def slugify_title(title: str) -> str:
    """Lowercase, filesystem-safe form of ``title``; ``event`` if nothing is left."""
    slug = _NON_ALNUM_RE.sub("-", title.lower()).strip("-")
    slug = slug[:SLUG_MAX].rstrip("-")
    return slug or "event"


def sniff_image_extension(upload: UploadedFile) -> str:
    """Return the stored extension for the upload's actual content.

    The client-supplied name and content type are ignored.

    Raises:
        UnsupportedImageTypeError: If Pillow does not identify an allowed format.
    """
    try:
        upload.seek(0)
        with Image.open(upload) as image:
            image_format = image.format
    except (UnidentifiedImageError, Image.DecompressionBombError, SyntaxError) as err:
        raise UnsupportedImageTypeError() from err
    except OSError as err:
        raise ImageUploadError() from err
    finally:
        upload.seek(0)

    if image_format not in ALLOWED_FORMATS:
        raise UnsupportedImageTypeError()
    return ALLOWED_FORMATS[image_format]


class ImageIngest:
    """Accepts uploads into a web-servable directory."""

    def __init__(self, upload_dir: str | os.PathLike, public_prefix: str, max_bytes: int) -> None:
        self._upload_dir = Path(upload_dir)
        self._public_prefix = public_prefix.rstrip("/")
        self._max_bytes = max_bytes

    def accept(self, upload: UploadedFile | None, title: str) -> str | None:
        """Validate and store ``upload``, returning its public path.

        Returns ``None`` when no file was submitted.

        Raises:
            ImageTooLargeError: Declared size above the cap, checked before reading.
            UnsupportedImageTypeError: Sniffed type is not JPEG, PNG or WebP.
            ImageUploadError: The upload could not be read.
            StorageError: The file could not be written to the upload directory.
        """
        if upload is None:
            return None

        if upload.size is None or upload.size > self._max_bytes:
            raise ImageTooLargeError(self._max_bytes)

        extension = sniff_image_extension(upload)
        filename = f"{slugify_title(title)}-{secrets.token_hex(4)}.{extension}"
        self._store(upload, filename)

        logger.info("Stored image %s (%d bytes)", filename, upload.size)
        return f"{self._public_prefix}/{filename}"

    def discard(self, public_path: str | None) -> None:
        """Remove an image previously returned by ``accept``."""
        if not public_path or not public_path.startswith(self._public_prefix + "/"):
            return
        filename = public_path[len(self._public_prefix) + 1:]
        if "/" in filename or filename.startswith("."):
            return
        try:
            (self._upload_dir / filename).unlink()
        except FileNotFoundError:
            pass
        except OSError as err:
            logger.warning("Could not remove image %s: %s", filename, err)

    def _store(self, upload: UploadedFile, filename: str) -> None:
        tmp_name = None
        try:
            self._upload_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self._upload_dir, prefix=".upload-", suffix=".tmp")
            with os.fdopen(fd, "wb") as f:
                for chunk in upload.chunks():
                    f.write(chunk)
            os.chmod(tmp_name, 0o644)
            os.replace(tmp_name, self._upload_dir / filename)
        except OSError as err:
            logger.error("Failed to store image %s: %s", filename, err)
            if tmp_name is not None:
                try:
                    os.unlink(tmp_name)
                except FileNotFoundError:
                    pass
            raise StorageError("Failed to save image") from err
