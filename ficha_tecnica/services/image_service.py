"""Image upload validation."""

import logging
from typing import Tuple

from ficha_tecnica.config import Settings, settings as default_settings
from ficha_tecnica.utils.exceptions import ImageProcessingError

logger = logging.getLogger(__name__)

SUPPORTED_MIME_TYPES = ("image/jpeg", "image/png")


class ImageService:
    """Service for checking uploaded recipe photos."""

    def __init__(self, settings: Settings = default_settings):
        self.max_size = settings.max_upload_size

    def validate_image(self, file_content: bytes, filename: str) -> Tuple[bytes, str]:
        """
        Validate an uploaded image.

        Args:
            file_content: Image file bytes
            filename: Original filename, for logging

        Returns:
            Tuple of (image_bytes, mime_type)

        Raises:
            ImageProcessingError: If image is empty, too large or not JPEG/PNG
        """
        if not file_content:
            raise ImageProcessingError("Image file is empty")

        if len(file_content) > self.max_size:
            raise ImageProcessingError(
                f"Image file too large (max {self.max_size / 1024 / 1024:g}MB)"
            )

        mime_type = self.detect_mime_type(file_content)
        if mime_type not in SUPPORTED_MIME_TYPES:
            logger.warning("Rejected upload %s with unsupported format", filename)
            raise ImageProcessingError("Unsupported image format. Supported: JPEG, PNG")

        return file_content, mime_type

    @staticmethod
    def detect_mime_type(file_content: bytes) -> str:
        """Detect MIME type from magic bytes."""
        if file_content.startswith(b"\xff\xd8\xff"):
            return "image/jpeg"
        if file_content.startswith(b"\x89PNG\r\n\x1a\n"):
            return "image/png"
        return "application/octet-stream"
