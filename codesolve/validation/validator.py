"""Upload checks applied to an image before any text extraction is attempted."""
from __future__ import annotations

from codesolve.ocr.base_ocr import ImageAsset

ALLOWED_CONTENT_TYPES = frozenset(
    {"image/jpeg", "image/jpg", "image/png", "image/gif", "image/bmp"}
)
MAX_IMAGE_BYTES = 10 * 1024 * 1024


class ImageValidationError(ValueError):
    """Raised for images that must not be sent to any recognizer.

    reason values: unsupported_type | too_large | empty
    """

    def __init__(self, reason: str, message: str) -> None:
        super().__init__(message)
        self.reason = reason
        self.message = message


class ImageValidator:
    def __init__(self, max_bytes: int = MAX_IMAGE_BYTES) -> None:
        self._max_bytes = max_bytes

    @property
    def max_bytes(self) -> int:
        return self._max_bytes

    def validate(self, image: ImageAsset) -> None:
        content_type = (image.content_type or "").lower().strip()
        if content_type not in ALLOWED_CONTENT_TYPES:
            raise ImageValidationError(
                "unsupported_type",
                f"Unsupported content_type={image.content_type!r}; "
                "upload a JPEG, PNG, GIF or BMP image.",
            )
        if image.size == 0:
            raise ImageValidationError("empty", "Uploaded image is empty.")
        if image.size > self._max_bytes:
            raise ImageValidationError(
                "too_large",
                f"Image is {image.size} bytes; the limit is {self._max_bytes} bytes.",
            )
