from __future__ import annotations

import logging
from dataclasses import asdict

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from codesolve.core.config import settings
from codesolve.db.session import get_session
from codesolve.feedback.service import FeedbackReport, FeedbackService, get_feedback_analyzer
from codesolve.generation.generator import SolutionGenerator, get_solution_generator
from codesolve.ocr.base_ocr import ImageAsset
from codesolve.ocr.factory import get_extraction_orchestrator
from codesolve.ocr.orchestrator import ExtractionOrchestrator
from codesolve.schemas import (
    ExtractionOut,
    FeedbackClearResponse,
    FeedbackIn,
    FeedbackOut,
    FeedbackResponse,
    SolutionRequest,
    SolutionResponse,
)
from codesolve.validation.validator import ImageValidationError

logger = logging.getLogger(__name__)
router = APIRouter()

_VALIDATION_STATUS = {"unsupported_type": 415, "too_large": 413, "empty": 400}


def get_feedback_service(session: AsyncSession = Depends(get_session)) -> FeedbackService:
    return FeedbackService(session, get_feedback_analyzer())


@router.get("/health")
async def health() -> dict[str, str | bool]:
    return {"status": "ok", "remote_ocr_configured": bool(settings.ocr_space_api_key)}


@router.post("/problems/extract", response_model=ExtractionOut)
async def extract_problem(
    file: UploadFile = File(...),
    orchestrator: ExtractionOrchestrator = Depends(get_extraction_orchestrator),
) -> ExtractionOut:
    image = ImageAsset(
        # One byte past the limit is enough to reject an oversized upload.
        data=await file.read(orchestrator.max_image_bytes + 1),
        content_type=file.content_type or "application/octet-stream",
        filename=file.filename or "",
    )
    try:
        result = await orchestrator.extract_result(image)
    except ImageValidationError as exc:
        raise HTTPException(status_code=_VALIDATION_STATUS.get(exc.reason, 400), detail=exc.message) from exc

    logger.info(
        "problem_extracted",
        extra={"upload_filename": image.filename, "provenance": result.provenance.value},
    )
    return ExtractionOut(text=result.text, provenance=result.provenance.value)


@router.post("/solutions", response_model=SolutionResponse)
async def generate_solutions(
    request: SolutionRequest,
    generator: SolutionGenerator = Depends(get_solution_generator),
) -> SolutionResponse:
    try:
        result = await generator.generate(request.problem)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return SolutionResponse.model_validate(asdict(result))


@router.post("/feedback", response_model=FeedbackResponse)
async def submit_feedback(
    feedback: FeedbackIn,
    service: FeedbackService = Depends(get_feedback_service),
) -> FeedbackResponse:
    outcome = await service.submit(FeedbackReport(**feedback.model_dump()))
    return FeedbackResponse(
        success=outcome.success,
        message=outcome.message,
        feedback_id=outcome.feedback_id,
    )


@router.get("/feedback", response_model=list[FeedbackOut])
async def feedback_history(
    service: FeedbackService = Depends(get_feedback_service),
) -> list[FeedbackOut]:
    rows = await service.history()
    return [
        FeedbackOut(
            id=row.id,
            issue_type=row.issue_type,
            description=row.description,
            original_problem=row.original_problem,
            generated_code=row.generated_code,
            language=row.language,
            timestamp=row.reported_at,
            status=row.status,
            api_id=row.api_id,
        )
        for row in rows
    ]


@router.delete("/feedback", response_model=FeedbackClearResponse)
async def clear_feedback(
    service: FeedbackService = Depends(get_feedback_service),
) -> FeedbackClearResponse:
    return FeedbackClearResponse(removed=await service.clear())
