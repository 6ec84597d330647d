"""LocalRecognizer using Tesseract and RemoteRecognizer for the OCR.space API."""
from __future__ import annotations

import asyncio
import base64
import io
import logging
import string

import httpx
import pytesseract
from PIL import Image, UnidentifiedImageError

from codesolve.ocr.base_ocr import BackendError, ImageAsset, Provenance, TextRecognizer

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# LocalRecognizer — Tesseract
# ---------------------------------------------------------------------------

TESSERACT_LANGUAGE = "eng"
# Quotes, backslash and space are left out: pytesseract shell-splits the config.
TESSERACT_CHAR_WHITELIST = (
    string.ascii_letters + string.digits + "+-*/=<>()[]{}.,:;!?_%#&|^~@$"
)
TESSERACT_PAGE_SEGMENTATION_MODE = 6  # single uniform block of text
TESSERACT_ENGINE_MODE = 3  # default (LSTM where available)


class LocalRecognizer(TextRecognizer):
    """Recognizer backed by a local Tesseract install (no network calls).

    Install dependency:
        apt-get install tesseract-ocr
        pip install pytesseract pillow

    The engine is probed lazily on first use; a missing binary surfaces as a
    BackendError from recognize().
    """

    name = Provenance.LOCAL

    def __init__(self, language: str = TESSERACT_LANGUAGE, timeout_seconds: float = 10.0) -> None:
        self._language = language
        self.timeout_seconds = timeout_seconds
        self._engine_version: str | None = None  # lazy-init on first recognize

    @property
    def config(self) -> str:
        return (
            f"--oem {TESSERACT_ENGINE_MODE} --psm {TESSERACT_PAGE_SEGMENTATION_MODE} "
            f"-c tessedit_char_whitelist={TESSERACT_CHAR_WHITELIST} "
            "-c preserve_interword_spaces=1"
        )

    def _ensure_engine(self) -> None:
        if self._engine_version is not None:
            return
        try:
            version = pytesseract.get_tesseract_version()
        except (pytesseract.TesseractNotFoundError, OSError) as exc:
            raise BackendError(self.name.value, f"tesseract is not available: {exc}") from exc
        self._engine_version = str(version)
        logger.info("tesseract_initialized", extra={"tesseract_version": self._engine_version})

    async def recognize(self, image: ImageAsset) -> str:
        """Run Tesseract on *image* in a worker thread and return the stripped text."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._run_tesseract, image)

    def _run_tesseract(self, image: ImageAsset) -> str:
        self._ensure_engine()

        try:
            with Image.open(io.BytesIO(image.data)) as img, img.convert("RGB") as rgb:
                text = pytesseract.image_to_string(
                    rgb,
                    lang=self._language,
                    config=self.config,
                    # Kills the tesseract subprocess if it overruns.
                    timeout=self.timeout_seconds,
                )
        except UnidentifiedImageError as exc:
            raise BackendError(self.name.value, f"cannot decode image {image.filename!r}") from exc
        except (pytesseract.TesseractError, RuntimeError, OSError) as exc:
            raise BackendError(self.name.value, str(exc)) from exc

        text = text.strip()
        logger.info(
            "tesseract_complete",
            extra={"image_filename": image.filename, "chars": len(text)},
        )
        return text


# ---------------------------------------------------------------------------
# RemoteRecognizer — OCR.space
# ---------------------------------------------------------------------------

OCR_SPACE_URL = "https://api.ocr.space/parse/image"
OCR_SPACE_ENGINE = "2"


class RemoteRecognizer(TextRecognizer):
    """Recognizer backed by the OCR.space HTTP API.

    Config (via .env):
        OCR_SPACE_API_KEY=...      # remote OCR is skipped when unset
        OCR_SPACE_URL=https://api.ocr.space/parse/image
    """

    name = Provenance.REMOTE

    def __init__(
        self,
        api_key: str | None,
        *,
        url: str = OCR_SPACE_URL,
        language: str = TESSERACT_LANGUAGE,
        timeout_seconds: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key.strip() if api_key else None
        self._url = url
        self._language = language
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    @property
    def available(self) -> bool:
        return bool(self._api_key)

    def build_form(self, image: ImageAsset) -> dict[str, str]:
        content_type = image.content_type.lower()
        if content_type == "image/jpg":
            content_type = "image/jpeg"
        encoded = base64.b64encode(image.data).decode("ascii")
        return {
            "apikey": self._api_key or "",
            "base64Image": f"data:{content_type};base64,{encoded}",
            "language": self._language,
            "OCREngine": OCR_SPACE_ENGINE,
            "scale": "true",
            "isOverlayRequired": "false",
        }

    async def recognize(self, image: ImageAsset) -> str:
        if not self.available:
            raise BackendError(self.name.value, "OCR_SPACE_API_KEY is not configured")

        async with httpx.AsyncClient(timeout=self.timeout_seconds, transport=self._transport) as client:
            try:
                response = await client.post(self._url, data=self.build_form(image))
            except httpx.HTTPError as exc:
                raise BackendError(self.name.value, f"request failed: {exc}") from exc

        if not response.is_success:
            raise BackendError(self.name.value, f"HTTP {response.status_code}: {response.text[:200]}")

        try:
            body = response.json()
        except ValueError as exc:
            raise BackendError(self.name.value, "response is not JSON") from exc

        if not isinstance(body, dict):
            raise BackendError(self.name.value, "unexpected response shape")

        if body.get("IsErroredOnProcessing"):
            error = body.get("ErrorMessage") or "unknown processing error"
            if isinstance(error, list):
                error = "; ".join(str(e) for e in error)
            raise BackendError(self.name.value, f"processing error: {error}")

        parsed = body.get("ParsedResults") or []
        text = "\n".join(
            str(result.get("ParsedText") or "") for result in parsed if isinstance(result, dict)
        ).strip()
        if not text:
            raise BackendError(self.name.value, "no text in response")

        logger.info(
            "ocr_space_complete",
            extra={"image_filename": image.filename, "chars": len(text)},
        )
        return text
