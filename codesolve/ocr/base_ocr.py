from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

# Recognizer output with this many characters or fewer (after strip) is a failed read.
MIN_TEXT_LENGTH = 10


class Provenance(str, Enum):
    LOCAL = "local"
    REMOTE = "remote"
    PLACEHOLDER = "placeholder"


@dataclass(frozen=True)
class ImageAsset:
    data: bytes
    content_type: str
    filename: str

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class ExtractionResult:
    text: str
    provenance: Provenance
    success: bool = True
    error: str | None = None


class BackendError(Exception):
    """A single recognition backend failed; the caller moves on to the next one."""

    def __init__(self, backend: str, message: str) -> None:
        super().__init__(f"{backend}: {message}")
        self.backend = backend
        self.message = message


class TextRecognizer:
    name: Provenance
    timeout_seconds: float = 10.0

    @property
    def available(self) -> bool:
        return True

    async def recognize(self, image: ImageAsset) -> str:
        raise NotImplementedError


def is_usable_text(text: str | None) -> bool:
    return bool(text) and len(text.strip()) > MIN_TEXT_LENGTH
