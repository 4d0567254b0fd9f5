"""
Wine Catalog Backend — File Service Unit Tests
================================================

What:  Tests for FileService validation, storage and image path resolution.
How:   Each test gets its own FileService rooted in a temporary directory.
       python-magic is replaced by a stub module so the tests do not depend
       on libmagic being installed.
"""

import sys
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

from app.exceptions import FileStorageError, ValidationError
from app.services.file_service import FileService, label_filename


def fake_magic(mime_type="image/jpeg"):
    return SimpleNamespace(from_buffer=MagicMock(return_value=mime_type))


class TestFileValidation:

    @pytest.fixture(autouse=True)
    def _service(self, temp_storage):
        self.service = FileService(storage_root=temp_storage)

    # ── Extension Validation ──────────────────────────────────────────────

    @pytest.mark.parametrize("filename", ["label.jpg", "label.png", "label.JPG", "label.Png"])
    def test_validate_extension_allowed(self, filename):
        assert self.service.validate_extension(filename) in {".jpg", ".png"}

    def test_validate_extension_jpeg_normalized(self):
        assert self.service.validate_extension("label.JPEG") == ".jpg"

    @pytest.mark.parametrize("filename", ["label.gif", "scan.pdf", "noextension", "malware.exe"])
    def test_validate_extension_rejected(self, filename):
        with pytest.raises(ValidationError, match="not supported") as exc_info:
            self.service.validate_extension(filename)
        assert exc_info.value.field == "picture"

    # ── Size Validation ───────────────────────────────────────────────────

    def test_validate_size_within_limit(self):
        self.service.validate_size(None, 1000)

    def test_validate_size_empty_file(self):
        with pytest.raises(ValidationError, match="empty"):
            self.service.validate_size(0, 0)

    def test_validate_size_over_limit(self):
        with patch("app.services.file_service.settings") as mock_settings:
            mock_settings.max_file_size = 1024 * 1024
            with pytest.raises(ValidationError, match="too large"):
                self.service.validate_size(None, 1024 * 1024 + 1)

    def test_validate_size_reported_length_over_limit(self):
        with patch("app.services.file_service.settings") as mock_settings:
            mock_settings.max_file_size = 1024 * 1024
            with pytest.raises(ValidationError, match="too large"):
                self.service.validate_size(5 * 1024 * 1024, 10)

    # ── MIME Validation ───────────────────────────────────────────────────

    def test_validate_mime_type_jpeg(self, sample_image_bytes):
        with patch.dict(sys.modules, {"magic": fake_magic("image/jpeg")}):
            assert self.service.validate_mime_type(sample_image_bytes) == "image/jpeg"

    def test_validate_mime_type_rejects_non_image(self):
        with patch.dict(sys.modules, {"magic": fake_magic("application/pdf")}):
            with pytest.raises(ValidationError, match="not supported"):
                self.service.validate_mime_type(b"%PDF-1.4")

    def test_validate_mime_type_detection_failure(self):
        broken = SimpleNamespace(from_buffer=MagicMock(side_effect=RuntimeError("no libmagic")))
        with patch.dict(sys.modules, {"magic": broken}):
            with pytest.raises(FileStorageError):
                self.service.validate_mime_type(b"\xff\xd8\xff")


class TestFileStorage:

    @pytest.fixture(autouse=True)
    def _service(self, temp_storage):
        self.service = FileService(storage_root=temp_storage)

    def test_directories_created(self):
        assert self.service.uploads_dir.is_dir()
        assert self.service.images_dir.is_dir()
        assert self.service.is_writable()

    def test_label_filename(self):
        assert label_filename("front", "abc.jpg") == "front-label-abc.jpg"

    @pytest.mark.asyncio
    async def test_validate_and_store_moves_file_into_images(self, sample_image_bytes):
        with patch.dict(sys.modules, {"magic": fake_magic("image/jpeg")}):
            stored_name, image_path, mime_type = await self.service.validate_and_store(
                filename="Front Label.JPEG",
                content=sample_image_bytes,
                side="front",
                content_length=len(sample_image_bytes),
            )

        assert stored_name.endswith(".jpg")
        assert "Front Label" not in stored_name
        assert mime_type == "image/jpeg"
        assert image_path.name == f"front-label-{stored_name}"
        assert image_path.read_bytes() == sample_image_bytes
        assert list(self.service.uploads_dir.iterdir()) == []

    @pytest.mark.asyncio
    async def test_validate_and_store_extension_follows_detected_type(self):
        png_bytes = b"\x89PNG\r\n\x1a\n" + b"\x00" * 16
        with patch.dict(sys.modules, {"magic": fake_magic("image/png")}):
            stored_name, image_path, mime_type = await self.service.validate_and_store(
                filename="label.jpg",
                content=png_bytes,
                side="front",
            )

        assert mime_type == "image/png"
        assert stored_name.endswith(".png")
        assert image_path.suffix == ".png"

    @pytest.mark.asyncio
    async def test_validate_and_store_rejects_before_writing(self):
        with pytest.raises(ValidationError):
            await self.service.validate_and_store(filename="label.gif", content=b"GIF89a", side="back")
        assert list(self.service.images_dir.iterdir()) == []

    # ── Image Resolution ──────────────────────────────────────────────────

    def test_resolve_image_inside_directory(self):
        path = self.service.resolve_image("front-label-abc.jpg")
        assert path.parent == self.service.images_dir.resolve()

    @pytest.mark.parametrize("name", ["../secret.txt", "../../etc/passwd", "/etc/passwd"])
    def test_resolve_image_rejects_traversal(self, name):
        with pytest.raises(ValidationError, match="Invalid image path"):
            self.service.resolve_image(name)

    # ── Cleanup ───────────────────────────────────────────────────────────

    @pytest.mark.asyncio
    async def test_delete_image_removes_file(self):
        image = self.service.images_dir / "back-label-abc.png"
        image.write_bytes(b"png")

        await self.service.delete_image("/images/back-label-abc.png")
        assert not image.exists()

    @pytest.mark.asyncio
    async def test_cleanup_file_nonexistent(self, tmp_path):
        await self.service.cleanup_file(str(tmp_path / "nonexistent.jpg"))
