"""HTTP route tests — collaborators replaced through FastAPI dependency overrides."""
from __future__ import annotations

import uuid
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from codesolve.api.routes import get_feedback_service
from codesolve.feedback.service import FeedbackOutcome
from codesolve.generation.generator import SolutionGenerator, get_solution_generator
from codesolve.main import app
from codesolve.ocr.base_ocr import BackendError, ImageAsset, Provenance, TextRecognizer
from codesolve.ocr.factory import get_extraction_orchestrator
from codesolve.ocr.orchestrator import ExtractionOrchestrator
from codesolve.ocr.placeholder import PlaceholderGenerator
from codesolve.validation.validator import ImageValidator


class _FailingRecognizer(TextRecognizer):
    name = Provenance.LOCAL

    async def recognize(self, image: ImageAsset) -> str:
        raise BackendError("local", "engine unavailable")


class _StaticRecognizer(TextRecognizer):
    name = Provenance.LOCAL

    async def recognize(self, image: ImageAsset) -> str:
        return "Count the vowels in a sentence."


@pytest.fixture
def client():
    yield TestClient(app)
    app.dependency_overrides.clear()


def _use_orchestrator(recognizer: TextRecognizer, max_bytes: int = 10 * 1024 * 1024) -> None:
    app.dependency_overrides[get_extraction_orchestrator] = lambda: ExtractionOrchestrator(
        [recognizer], PlaceholderGenerator(), ImageValidator(max_bytes=max_bytes)
    )


def test_health(client) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "remote_ocr_configured": False}


def test_extract_returns_recognized_text(client, png_bytes) -> None:
    _use_orchestrator(_StaticRecognizer())

    response = client.post("/problems/extract", files={"file": ("vowels.png", png_bytes, "image/png")})

    assert response.status_code == 200
    assert response.json() == {"text": "Count the vowels in a sentence.", "provenance": "local"}


def test_extract_falls_back_to_placeholder(client, png_bytes) -> None:
    _use_orchestrator(_FailingRecognizer())

    response = client.post("/problems/extract", files={"file": ("sort_test.png", png_bytes, "image/png")})

    body = response.json()
    assert response.status_code == 200
    assert body["provenance"] == "placeholder"
    assert "sort an array of integers in ascending order" in body["text"]


def test_extract_rejects_unsupported_type(client) -> None:
    _use_orchestrator(_StaticRecognizer())

    response = client.post("/problems/extract", files={"file": ("notes.txt", b"hello", "text/plain")})

    assert response.status_code == 415


def test_extract_rejects_oversized_image(client, png_bytes) -> None:
    _use_orchestrator(_StaticRecognizer(), max_bytes=len(png_bytes) - 1)

    response = client.post("/problems/extract", files={"file": ("big.png", png_bytes, "image/png")})

    assert response.status_code == 413


def test_extract_reads_at_most_one_byte_past_limit(client) -> None:
    seen_sizes: list[int] = []

    class RecordingValidator(ImageValidator):
        def validate(self, image: ImageAsset) -> None:
            seen_sizes.append(image.size)
            super().validate(image)

    app.dependency_overrides[get_extraction_orchestrator] = lambda: ExtractionOrchestrator(
        [_StaticRecognizer()], PlaceholderGenerator(), RecordingValidator(max_bytes=16)
    )

    response = client.post("/problems/extract", files={"file": ("big.png", b"\x89" * 4096, "image/png")})

    assert response.status_code == 413
    assert seen_sizes == [17]


def test_extract_rejects_empty_image(client) -> None:
    _use_orchestrator(_StaticRecognizer())

    response = client.post("/problems/extract", files={"file": ("empty.png", b"", "image/png")})

    assert response.status_code == 400


def test_solutions_demo_mode(client) -> None:
    app.dependency_overrides[get_solution_generator] = lambda: SolutionGenerator()

    response = client.post("/solutions", json={"problem": "Compute a factorial"})

    body = response.json()
    assert response.status_code == 200
    assert body["status"] == "success"
    assert body["solutions"]["python"]["language"] == "python"
    assert "factorial" in body["solutions"]["java"]["code"]


def test_solutions_rejects_blank_problem(client) -> None:
    app.dependency_overrides[get_solution_generator] = lambda: SolutionGenerator()

    assert client.post("/solutions", json={"problem": ""}).status_code == 422
    assert client.post("/solutions", json={"problem": "   "}).status_code == 422


def test_submit_feedback(client) -> None:
    service = MagicMock()
    service.submit = AsyncMock(
        return_value=FeedbackOutcome(success=True, message="Feedback saved locally.", feedback_id="abc")
    )
    app.dependency_overrides[get_feedback_service] = lambda: service

    response = client.post(
        "/feedback",
        json={
            "issue_type": "compile_error",
            "description": "Missing semicolon",
            "original_problem": "Reverse a string",
            "generated_code": "class A {}",
            "language": "java",
            "timestamp": "2024-05-01T12:00:00Z",
        },
    )

    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Feedback saved locally.", "feedback_id": "abc"}
    report = service.submit.await_args.args[0]
    assert report.language == "java"
    assert report.timestamp == datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def test_feedback_history_and_clear(client) -> None:
    row = MagicMock()
    row.id = uuid.uuid4()
    row.issue_type = "other"
    row.description = "d"
    row.original_problem = "p"
    row.generated_code = "c"
    row.language = "python"
    row.reported_at = datetime(2024, 5, 1, tzinfo=timezone.utc)
    row.status = "pending"
    row.api_id = None

    service = MagicMock()
    service.history = AsyncMock(return_value=[row])
    service.clear = AsyncMock(return_value=1)
    app.dependency_overrides[get_feedback_service] = lambda: service

    history = client.get("/feedback").json()
    assert len(history) == 1
    assert history[0]["id"] == str(row.id)
    assert history[0]["status"] == "pending"

    assert client.delete("/feedback").json() == {"removed": 1}
