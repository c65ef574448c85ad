"""Tests for image upload validation and storage.

Run with: pytest tests/test_image_ingest.py -v
"""

import re

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile

from agenda.domain.errors import ImageTooLargeError, StorageError, UnsupportedImageTypeError
from agenda.services.image_ingest import ImageIngest, slugify_title


@pytest.fixture
def ingest(upload_dir) -> ImageIngest:
    return ImageIngest(upload_dir, public_prefix="/uploads", max_bytes=2 * 1024 * 1024)


def stored_files(upload_dir):
    if not upload_dir.exists():
        return []
    return sorted(p.name for p in upload_dir.iterdir())


class TestSlugifyTitle:
    """Tests for slugify_title."""

    @pytest.mark.parametrize(
        "title, expected",
        [
            ("Summer BBQ 2025", "summer-bbq-2025"),
            ("  --Hello,   World!--  ", "hello-world"),
            ("Apéro", "ap-ro"),
            ("!!!", "event"),
            ("../../etc/passwd", "etc-passwd"),
        ],
    )
    def test_slug(self, title, expected):
        """Titles become lowercase, hyphenated, filesystem-safe slugs."""
        assert slugify_title(title) == expected

    def test_length_is_capped(self):
        """Slugs are capped at 50 characters."""
        assert len(slugify_title("a" * 120)) == 50


class TestAccept:
    """Tests for ImageIngest.accept"""

    def test_no_file_means_no_image(self, ingest, upload_dir):
        """No upload returns None and writes nothing."""
        assert ingest.accept(None, "Talk") is None
        assert stored_files(upload_dir) == []

    @pytest.mark.parametrize("image_format, extension", [("PNG", "png"), ("JPEG", "jpg"), ("WEBP", "webp")])
    def test_allowed_formats_are_stored(self, ingest, upload_dir, image_bytes, image_format, extension):
        """JPEG, PNG and WebP content is stored under a slugged name with the sniffed extension."""
        content = image_bytes(image_format)
        upload = SimpleUploadedFile("upload.bin", content, content_type="application/octet-stream")

        public_path = ingest.accept(upload, "Summer BBQ")

        assert re.fullmatch(rf"/uploads/summer-bbq-[0-9a-f]{{8}}\.{extension}", public_path)
        filename = public_path.rsplit("/", 1)[1]
        assert stored_files(upload_dir) == [filename]
        assert (upload_dir / filename).read_bytes() == content

    def test_oversized_upload_is_rejected_without_writing(self, upload_dir, image_bytes):
        """An upload above the size cap raises ImageTooLargeError and writes nothing."""
        ingest = ImageIngest(upload_dir, public_prefix="/uploads", max_bytes=10)
        upload = SimpleUploadedFile("big.png", image_bytes("PNG"), content_type="image/png")

        with pytest.raises(ImageTooLargeError):
            ingest.accept(upload, "Talk")
        assert stored_files(upload_dir) == []

    def test_spoofed_extension_is_rejected(self, ingest, upload_dir):
        """Non-image bytes behind an image filename raise UnsupportedImageTypeError."""
        upload = SimpleUploadedFile("photo.jpg", b"<?php echo 'hi'; ?>", content_type="image/jpeg")

        with pytest.raises(UnsupportedImageTypeError):
            ingest.accept(upload, "Talk")
        assert stored_files(upload_dir) == []

    def test_disallowed_real_image_format_is_rejected(self, ingest, upload_dir, image_bytes):
        """A real image in a format outside the allow-list is rejected."""
        upload = SimpleUploadedFile("anim.png", image_bytes("GIF"), content_type="image/png")

        with pytest.raises(UnsupportedImageTypeError):
            ingest.accept(upload, "Talk")
        assert stored_files(upload_dir) == []

    def test_unwritable_directory_raises_storage_error(self, tmp_path, png_upload):
        """An unusable upload directory raises StorageError."""
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        ingest = ImageIngest(blocker / "uploads", public_prefix="/uploads", max_bytes=2 * 1024 * 1024)

        with pytest.raises(StorageError):
            ingest.accept(png_upload, "Talk")


class TestDiscard:
    """Tests for ImageIngest.discard"""

    def test_removes_stored_image(self, ingest, upload_dir, png_upload):
        """discard deletes a stored image by its public path."""
        public_path = ingest.accept(png_upload, "Talk")
        ingest.discard(public_path)
        assert stored_files(upload_dir) == []

    def test_ignores_paths_outside_upload_dir(self, ingest, tmp_path):
        """discard never touches files outside the upload directory."""
        outside = tmp_path / "keep.txt"
        outside.write_text("keep")
        ingest.discard("/uploads/../keep.txt")
        ingest.discard("/elsewhere/keep.txt")
        assert outside.exists()
