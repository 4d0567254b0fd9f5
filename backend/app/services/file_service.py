"""
Wine Catalog Backend — Label Picture Storage
==============================================

What:  Validates, stores, serves and removes label picture files.
Why:   Centralizes all file system operations with security checks.
How:   Uploads are written to a staging directory and then renamed into the
       served image directory, so a half-written file is never visible under
       /images.
Who:   Called by PictureService (uploads/deletes) and the image route (serving).

Directory Structure:
    storage/
    ├── uploads/                       ← staging, files live here for milliseconds
    │   └── 6f1c...-9012.jpg
    └── images/                        ← served by GET /images/{name}
        ├── front-label-6f1c...-9012.jpg
        └── back-label-a1b2...-5678.png

Security Model:
    1. Extension check:   fast rejection before anything is read
    2. Size check:        empty and oversized uploads are rejected
    3. MIME type check:   python-magic inspects the header bytes
    4. UUID filename:     the client's filename never reaches the file system
    5. Path resolution:   served paths must stay inside the image directory
"""

import logging
import os
import uuid
from pathlib import Path
from typing import Optional, Tuple

import aiofiles

from app.config import settings
from app.exceptions import ValidationError, FileStorageError

logger = logging.getLogger(__name__)

ALLOWED_MIME_TYPES = {
    "image/png": ".png",
    "image/jpeg": ".jpg",
    "image/jpg": ".jpg",
}

ALLOWED_EXTENSIONS = {".png", ".jpg", ".jpeg"}

UPLOADS_DIR = "uploads"
IMAGES_DIR = "images"


def label_filename(side: str, filename: str) -> str:
    """On-disk name of a label picture, e.g. ("front", "x.jpg") → "front-label-x.jpg"."""
    return f"{side}-label-{filename}"


class FileService:
    """
    Manages the label picture lifecycle on disk.

    Lifecycle of an uploaded picture:
        1. validate_and_store(): extension → size → MIME
        2. Content written to uploads/<uuid><ext> (aiofiles)
        3. Renamed to images/<side>-label-<uuid><ext> (os.replace, atomic on one device)
        4. delete_image() when the owning wine is deleted
    """

    def __init__(self, storage_root: Optional[str] = None):
        """
        Args:
            storage_root: Override the default storage path (used in tests).
                          If None, uses settings.storage_root.
        """
        self.storage_root = Path(storage_root or settings.storage_root).resolve()
        self.uploads_dir = self.storage_root / UPLOADS_DIR
        self.images_dir = self.storage_root / IMAGES_DIR
        self.ensure_directories()
        logger.info("FileService initialized with storage_root=%s", self.storage_root)

    def ensure_directories(self) -> None:
        """Create the staging and image directories (idempotent)."""
        self.uploads_dir.mkdir(parents=True, exist_ok=True)
        self.images_dir.mkdir(parents=True, exist_ok=True)

    def is_writable(self) -> bool:
        """Used by the health check."""
        return self.images_dir.is_dir() and os.access(self.images_dir, os.W_OK)

    def validate_extension(self, filename: str) -> str:
        """
        Validate file extension (first line of defense).

        Returns: Normalized extension (lowercase with dot, .jpeg → .jpg).
        Raises:  ValidationError if extension is not allowed.
        """
        ext = Path(filename).suffix.lower()
        if ext not in ALLOWED_EXTENSIONS:
            raise ValidationError(
                message=(
                    f"File type '{ext or filename}' is not supported. "
                    f"Allowed types: {', '.join(sorted(ALLOWED_EXTENSIONS))}"
                ),
                field="picture",
                context={"extension": ext, "allowed": sorted(ALLOWED_EXTENSIONS)},
            )
        return ".jpg" if ext == ".jpeg" else ext

    def validate_size(self, content_length: Optional[int], actual_size: int) -> None:
        """
        Validate file size against configured maximum.

        Args:
            content_length: Size reported by the multipart part (may be None or inaccurate)
            actual_size: Actual byte count of the uploaded file
        """
        max_mb = settings.max_file_size / (1024 * 1024)

        if actual_size == 0:
            raise ValidationError(
                message="The uploaded picture is empty.",
                field="picture",
            )

        if content_length and content_length > settings.max_file_size:
            raise ValidationError(
                message=f"Picture is too large. Maximum size is {max_mb:.0f}MB.",
                field="picture",
                context={"max_size_mb": max_mb, "reported_size": content_length},
            )

        if actual_size > settings.max_file_size:
            raise ValidationError(
                message=(
                    f"Picture is too large ({actual_size / (1024 * 1024):.1f}MB). "
                    f"Maximum size is {max_mb:.0f}MB."
                ),
                field="picture",
                context={"max_size_mb": max_mb, "actual_size": actual_size},
            )

    def validate_mime_type(self, file_content: bytes) -> str:
        """
        Validate actual MIME type by inspecting file content bytes.

        How:     python-magic matches the first bytes against known signatures
                 (JPEG starts with FF D8 FF, PNG with 89 50 4E 47).
        Returns: Detected MIME type string (e.g., "image/jpeg")
        Raises:  ValidationError if the type is not an allowed image,
                 FileStorageError if detection itself fails.
        """
        try:
            import magic
            mime_type = magic.from_buffer(file_content[:2048], mime=True)
        except Exception as e:
            logger.error("MIME type detection failed: %s", str(e))
            raise FileStorageError(
                message="Could not verify the picture type. Please try again.",
                context={"error": str(e)},
            )

        if mime_type not in ALLOWED_MIME_TYPES:
            raise ValidationError(
                message=(
                    f"File content type '{mime_type}' is not supported. "
                    f"The picture must be a PNG or JPEG image."
                ),
                field="picture",
                context={"detected_mime": mime_type, "allowed": list(ALLOWED_MIME_TYPES.keys())},
            )

        return mime_type

    async def store_file(self, content: bytes, extension: str, side: str) -> Tuple[str, Path]:
        """
        Write validated content to staging, then move it into the image directory.

        Returns: Tuple of (stored filename without side prefix, absolute image path).
        Raises:  FileStorageError if the write or the rename fails.
        """
        filename = f"{uuid.uuid4()}{extension}"
        staged_path = self.uploads_dir / filename
        image_path = self.images_dir / label_filename(side, filename)

        try:
            self.ensure_directories()
            async with aiofiles.open(staged_path, "wb") as f:
                await f.write(content)
            os.replace(staged_path, image_path)
        except OSError as e:
            logger.error("Failed to store picture %s: %s", filename, str(e))
            await self.cleanup_file(str(staged_path))
            raise FileStorageError(
                message="Failed to save the uploaded picture. Please try again.",
                context={"path": str(image_path), "os_error": str(e)},
            )

        logger.info("Picture stored: %s (%d bytes)", image_path.name, len(content))
        return filename, image_path

    async def validate_and_store(
        self,
        filename: str,
        content: bytes,
        side: str,
        content_length: Optional[int] = None,
    ) -> Tuple[str, Path, str]:
        """
        Complete validation and storage pipeline for one label picture.

        Returns: Tuple of (stored filename, absolute image path, detected MIME type).
        """
        self.validate_extension(filename)
        self.validate_size(content_length, len(content))
        mime_type = self.validate_mime_type(content)
        # The detected type decides the stored extension, not the client's name
        ext = ALLOWED_MIME_TYPES[mime_type]
        stored_name, image_path = await self.store_file(content, ext, side)
        return stored_name, image_path, mime_type

    def resolve_image(self, name: str) -> Path:
        """
        Map a served image name to its path inside the image directory.

        Raises:
            ValidationError if the name escapes the image directory (../, absolute paths).
        """
        images_root = self.images_dir.resolve()
        full_path = (images_root / name).resolve()
        if full_path.parent != images_root:
            raise ValidationError(message="Invalid image path", field="filename")
        return full_path

    async def delete_image(self, image_url: str) -> None:
        """Remove the file behind a picture's image_url (/images/<name>)."""
        name = image_url.rsplit("/", 1)[-1]
        await self.cleanup_file(str(self.resolve_image(name)))

    async def cleanup_file(self, file_path: str) -> None:
        """
        Remove a file from storage if it exists.

        Best-effort: a leftover file is not a user-facing error, so failures
        are logged rather than raised.
        """
        try:
            path = Path(file_path)
            if path.exists():
                os.remove(path)
                logger.info("Removed file: %s", path.name)
            else:
                logger.debug("Cleanup: file already gone: %s", path.name)
        except OSError as e:
            logger.warning("Failed to remove file %s: %s", file_path, str(e))


# ── Singleton Instance ────────────────────────────────────────────────────
file_service = FileService()
