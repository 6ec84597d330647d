"""Extraction orchestrator — ordered recognizer fallback ending in canned text.

Recognizers are tried one at a time in list order. Any exception (timeouts
included) or too little text counts as a failed attempt and the next
recognizer is tried. Unavailable recognizers (e.g. remote OCR without an API
key) are skipped without being called. When every recognizer fails the placeholder
generator supplies the text, so only image validation errors reach callers.
"""
from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Sequence

from codesolve.ocr.base_ocr import (
    ExtractionResult,
    ImageAsset,
    Provenance,
    TextRecognizer,
    is_usable_text,
)
from codesolve.ocr.placeholder import PlaceholderGenerator
from codesolve.validation.validator import ImageValidator

logger = logging.getLogger(__name__)


class ExtractionOrchestrator:
    def __init__(
        self,
        recognizers: Sequence[TextRecognizer],
        placeholder: PlaceholderGenerator,
        validator: ImageValidator | None = None,
    ) -> None:
        self._recognizers = tuple(recognizers)
        self._placeholder = placeholder
        self._validator = validator or ImageValidator()

    @property
    def recognizers(self) -> tuple[TextRecognizer, ...]:
        return self._recognizers

    @property
    def max_image_bytes(self) -> int:
        return self._validator.max_bytes

    # ------------------------------------------------------------------ #
    #  Public entry points                                                 #
    # ------------------------------------------------------------------ #

    async def extract(self, image: ImageAsset) -> str:
        result = await self.extract_result(image)
        return result.text

    async def extract_result(self, image: ImageAsset) -> ExtractionResult:
        # Raises ImageValidationError; nothing below this line does.
        self._validator.validate(image)

        for recognizer in self._recognizers:
            if not recognizer.available:
                logger.info(
                    "recognizer_skipped_unavailable",
                    extra={"backend": recognizer.name.value, "image_filename": image.filename},
                )
                continue

            result = await self._attempt(recognizer, image)
            if result.success:
                return result

        text = await self._placeholder.produce(image)
        logger.info(
            "extraction_placeholder_used",
            extra={"image_filename": image.filename, "chars": len(text)},
        )
        return ExtractionResult(text=text, provenance=Provenance.PLACEHOLDER)

    # ------------------------------------------------------------------ #
    #  Single recognizer attempt                                           #
    # ------------------------------------------------------------------ #

    async def _attempt(self, recognizer: TextRecognizer, image: ImageAsset) -> ExtractionResult:
        backend = recognizer.name.value
        t0 = time.monotonic()
        try:
            text = await asyncio.wait_for(
                recognizer.recognize(image), timeout=recognizer.timeout_seconds
            )
        except asyncio.TimeoutError:
            error = f"timed out after {recognizer.timeout_seconds}s"
        except Exception as exc:
            error = str(exc) or type(exc).__name__
        else:
            duration_ms = int((time.monotonic() - t0) * 1000)
            if is_usable_text(text):
                logger.info(
                    "recognizer_succeeded",
                    extra={"backend": backend, "chars": len(text), "duration_ms": duration_ms},
                )
                return ExtractionResult(text=text, provenance=recognizer.name)
            error = "text too short"

        duration_ms = int((time.monotonic() - t0) * 1000)
        logger.warning(
            "recognizer_failed",
            extra={
                "backend": backend,
                "error": error,
                "duration_ms": duration_ms,
                "image_filename": image.filename,
            },
        )
        return ExtractionResult(text="", provenance=recognizer.name, success=False, error=error)
