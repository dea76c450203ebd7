"""
WordBank Backend — Image Upload Validation
============================================

What:  Validates an uploaded image before it is committed to the repository.
How:   Reduces the client filename to a safe basename, then checks the
       extension, emptiness and size.
Who:   Called by the multipart decoder in routes/words.py.

The filename is kept (not replaced by a UUID) because the answers document
refers to images by name: imgUrl is "./<image_dir>/<filename>".
"""

import logging
from pathlib import PurePosixPath, PureWindowsPath
from typing import Optional

from wordbank.config import settings
from wordbank.exceptions import ValidationError
from wordbank.schemas.word import ImagePayload

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {".png", ".jpg", ".jpeg", ".gif", ".webp", ".svg"}


class ImageService:
    """Validation pipeline for uploaded word images."""

    def __init__(self, max_file_size: Optional[int] = None):
        self.max_file_size = max_file_size or settings.max_file_size

    def sanitize_filename(self, filename: str) -> str:
        """
        Strip any directory part a client may have sent.

        Browsers on Windows have been known to send full paths, so both
        separators are handled.
        """
        name = PureWindowsPath(PurePosixPath(filename.strip()).name).name
        if name in {"", ".", ".."}:
            raise ValidationError(
                message="The image has no usable filename.",
                field="image",
                context={"filename": filename},
            )
        return name

    def validate_extension(self, filename: str) -> str:
        """Returns the lowercase extension; raises ValidationError if not allowed."""
        ext = PurePosixPath(filename).suffix.lower()
        if ext not in ALLOWED_EXTENSIONS:
            raise ValidationError(
                message=(
                    f"File type '{ext or filename}' is not supported. "
                    f"Allowed types: {', '.join(sorted(ALLOWED_EXTENSIONS))}"
                ),
                field="image",
                context={"extension": ext, "allowed": sorted(ALLOWED_EXTENSIONS)},
            )
        return ext

    def validate_size(self, content: bytes) -> None:
        if not content:
            raise ValidationError(message="The image file is empty.", field="image")

        if len(content) > self.max_file_size:
            max_mb = self.max_file_size / (1024 * 1024)
            raise ValidationError(
                message=(
                    f"File size ({len(content) / (1024 * 1024):.1f}MB) "
                    f"exceeds maximum of {max_mb:.0f}MB."
                ),
                field="image",
                context={"max_size_mb": max_mb, "actual_size": len(content)},
            )

    def prepare(self, filename: str, content: bytes) -> ImagePayload:
        """
        Complete validation pipeline.

        Returns:
            ImagePayload with the sanitized filename and the raw bytes.
        Raises:
            ValidationError on the first failed check.
        """
        name = self.sanitize_filename(filename)
        self.validate_extension(name)
        self.validate_size(content)
        logger.debug("Image accepted: %s (%d bytes)", name, len(content))
        return ImagePayload(filename=name, content=content)


image_service = ImageService()
