"""
File utilities for media uploads.
Validates files on the client before they are sent and reads them asynchronously.
"""

import io
import mimetypes
from pathlib import Path
from typing import List, Optional, Tuple, Union

import aiofiles
from PIL import Image, UnidentifiedImageError

from galactavista.config import get_settings
from galactavista.utils.exceptions import ValidationError

PathLike = Union[str, Path]


class FileValidator:
    """Utility class for media file validation operations."""

    # Supported media formats and their extensions
    SUPPORTED_FORMATS = {
        "image/jpeg": [".jpg", ".jpeg"],
        "image/jpg": [".jpg", ".jpeg"],
        "image/png": [".png"],
        "image/gif": [".gif"],
        "image/webp": [".webp"],
        "video/mp4": [".mp4"],
        "video/avi": [".avi"],
        "video/mov": [".mov"],
    }

    # Pillow format names per image MIME type
    IMAGE_FORMATS = {
        "image/jpeg": ["jpeg"],
        "image/jpg": ["jpeg"],
        "image/png": ["png"],
        "image/gif": ["gif"],
        "image/webp": ["webp"],
    }

    def __init__(self, max_file_size: Optional[int] = None, allowed_types: Optional[List[str]] = None):
        settings = get_settings()
        self.max_file_size = max_file_size or settings.max_upload_size
        self.allowed_types = list(allowed_types or settings.allowed_media_types)

    @classmethod
    def guess_content_type(cls, filename: str) -> Optional[str]:
        """
        Guess the MIME type from the file extension.

        Known media extensions map to the types the server accepts; anything
        else falls back to the ``mimetypes`` registry.
        """
        extension = Path(filename).suffix.lower()
        for mime_type, extensions in cls.SUPPORTED_FORMATS.items():
            if extension in extensions:
                return mime_type
        guessed, _ = mimetypes.guess_type(filename)
        return guessed

    def validate_file_size(self, file_size: int) -> int:
        """
        Validate file size.

        Raises:
            ValidationError: If file size is zero or exceeds the limit
        """
        if file_size <= 0:
            raise ValidationError("File is empty")

        if file_size > self.max_file_size:
            max_mb = self.max_file_size / (1024 * 1024)
            actual_mb = file_size / (1024 * 1024)
            raise ValidationError(
                f"File size exceeds {max_mb:.0f}MB limit. Current size: {actual_mb:.2f}MB"
            )

        return file_size

    def validate_mime_type(self, mime_type: Optional[str]) -> str:
        """
        Validate MIME type.

        Raises:
            ValidationError: If MIME type is not allowed
        """
        if not mime_type or mime_type not in self.allowed_types:
            raise ValidationError(
                f"File type not allowed. Allowed types: {', '.join(self.allowed_types)}"
            )
        return mime_type

    def validate_image_content(self, content: bytes, mime_type: str) -> Tuple[int, int]:
        """
        Check that image bytes really are the declared format.

        Returns:
            Tuple of (width, height)

        Raises:
            ValidationError: If the bytes are not an image of the declared type
        """
        try:
            with Image.open(io.BytesIO(content)) as img:
                pil_format = (img.format or "").lower()
                width, height = img.size
        except (UnidentifiedImageError, OSError) as e:
            raise ValidationError(f"Invalid image file: {e}") from e

        expected = self.IMAGE_FORMATS.get(mime_type, [])
        if expected and pil_format not in expected:
            raise ValidationError(f"File content doesn't match declared type {mime_type}")

        return width, height

    async def validate_file(self, path: PathLike, content_type: Optional[str] = None) -> Tuple[str, bytes]:
        """
        Comprehensive validation of a file about to be uploaded.

        Args:
            path: Path of the local file
            content_type: Declared MIME type, guessed from the name when omitted

        Returns:
            Tuple of (mime_type, content)

        Raises:
            ValidationError: If any validation fails
        """
        file_path = Path(path)
        if not file_path.is_file():
            raise ValidationError(f"File not found: {file_path}")

        self.validate_file_size(file_path.stat().st_size)
        mime_type = self.validate_mime_type(content_type or self.guess_content_type(file_path.name))

        content = await read_file_bytes(file_path)
        if mime_type.startswith("image/"):
            self.validate_image_content(content, mime_type)

        return mime_type, content


async def read_file_bytes(path: PathLike) -> bytes:
    """Read a whole file without blocking the event loop."""
    async with aiofiles.open(path, "rb") as f:
        return await f.read()


def format_file_size(size: int) -> str:
    """
    Format a byte count for display, e.g. ``1.5 KB``.
    """
    if size <= 0:
        return "0 Bytes"
    units = ["Bytes", "KB", "MB", "GB"]
    i = 0
    while size >= 1024 ** (i + 1) and i < len(units) - 1:
        i += 1
    value = round(size / 1024 ** i, 2)
    return f"{value:g} {units[i]}"
