from __future__ import annotations

from codesolve.core.config import settings
from codesolve.ocr.engines import LocalRecognizer, RemoteRecognizer
from codesolve.ocr.orchestrator import ExtractionOrchestrator
from codesolve.ocr.placeholder import PlaceholderGenerator
from codesolve.validation.validator import ImageValidator


def get_extraction_orchestrator() -> ExtractionOrchestrator:
    """Return an orchestrator wired from the current settings.

    Recognizer order is fixed: local Tesseract first, then OCR.space (only
    when OCR_SPACE_API_KEY is set), then the filename-keyed placeholder.
    """
    recognizers = [
        LocalRecognizer(
            language=settings.ocr_language,
            timeout_seconds=settings.local_ocr_timeout_seconds,
        ),
        RemoteRecognizer(
            settings.ocr_space_api_key,
            url=settings.ocr_space_url,
            language=settings.ocr_language,
            timeout_seconds=settings.remote_ocr_timeout_seconds,
        ),
    ]
    return ExtractionOrchestrator(
        recognizers,
        PlaceholderGenerator(delay_seconds=settings.placeholder_delay_seconds),
        ImageValidator(max_bytes=settings.max_image_bytes),
    )
