"""Feedback collection — store every report, forward it for analysis when possible.

A report is always written to the database first (status ``pending``). If an
analyzer is configured and answers, the row is marked ``submitted``; otherwise
it stays local and the caller is told so. Only a database failure is reported
back as unsuccessful.
"""
from __future__ import annotations

import asyncio
import logging
import time
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from openai import AsyncOpenAI
from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from tenacity import retry, stop_after_attempt, wait_exponential

from codesolve.core.config import settings
from codesolve.db.models import Feedback

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FeedbackReport:
    issue_type: str
    description: str
    original_problem: str
    generated_code: str
    language: str
    timestamp: datetime


@dataclass(frozen=True)
class FeedbackOutcome:
    success: bool
    message: str
    feedback_id: str | None = None


class FeedbackAnalyzer(Protocol):
    async def analyze(self, report: FeedbackReport) -> str:
        """Return a short analysis of *report*; raise when unavailable."""


_ANALYSIS_SYSTEM_PROMPT = (
    "You are receiving feedback about code generation quality. "
    "Acknowledge the feedback and provide insights for improvement."
)


class OpenAIFeedbackAnalyzer:
    def __init__(self, api_key: str, model: str = "gpt-4o-mini") -> None:
        self._model = model
        self._client = AsyncOpenAI(api_key=api_key)

    @retry(stop=stop_after_attempt(3), wait=wait_exponential(multiplier=1, min=1, max=10), reraise=True)
    async def analyze(self, report: FeedbackReport) -> str:
        response = await self._client.chat.completions.create(
            model=self._model,
            max_tokens=500,
            temperature=0.3,
            messages=[
                {"role": "system", "content": _ANALYSIS_SYSTEM_PROMPT},
                {
                    "role": "user",
                    "content": f"""Feedback Report:
Issue Type: {report.issue_type}
Language: {report.language}
Original Problem: {report.original_problem}
Generated Code: {report.generated_code}
User Description: {report.description}
Timestamp: {report.timestamp.isoformat()}

Please analyze this feedback and provide suggestions for improvement.""",
                },
            ],
        )
        return response.choices[0].message.content or ""


class FeedbackService:
    def __init__(
        self,
        session: AsyncSession,
        analyzer: FeedbackAnalyzer | None = None,
        *,
        analysis_timeout_seconds: float = 30.0,
    ) -> None:
        self._session = session
        self._analyzer = analyzer
        self._analysis_timeout_seconds = analysis_timeout_seconds

    async def submit(self, report: FeedbackReport) -> FeedbackOutcome:
        row = Feedback(
            id=uuid.uuid4(),
            issue_type=report.issue_type,
            description=report.description,
            original_problem=report.original_problem,
            generated_code=report.generated_code,
            language=report.language,
            reported_at=report.timestamp,
            status="pending",
        )
        try:
            self._session.add(row)
            # Committed before any network call so the report survives a slow or cancelled analyzer.
            await self._session.commit()
        except SQLAlchemyError:
            logger.exception("feedback_save_failed")
            await self._session.rollback()
            return FeedbackOutcome(success=False, message="Failed to submit feedback. Please try again.")

        logger.info("feedback_saved", extra={"feedback_id": str(row.id), "issue_type": report.issue_type})
        return await self._forward(row, report)

    async def _forward(self, row: Feedback, report: FeedbackReport) -> FeedbackOutcome:
        local = FeedbackOutcome(
            success=True,
            message="Feedback saved locally. Will be submitted when API is available.",
            feedback_id=str(row.id),
        )
        if self._analyzer is None:
            return local

        try:
            analysis = await asyncio.wait_for(
                self._analyzer.analyze(report), timeout=self._analysis_timeout_seconds
            )
        except Exception as exc:
            logger.warning(
                "feedback_analysis_failed",
                extra={"feedback_id": str(row.id), "error": str(exc) or type(exc).__name__},
            )
            return local

        row.status = "submitted"
        row.api_id = f"api_{int(time.time() * 1000)}"
        row.analysis = analysis
        try:
            await self._session.commit()
        except SQLAlchemyError:
            logger.exception("feedback_status_update_failed", extra={"feedback_id": str(row.id)})
            await self._session.rollback()
            return local

        logger.info("feedback_submitted", extra={"feedback_id": str(row.id), "api_id": row.api_id})
        return FeedbackOutcome(
            success=True,
            message="Feedback submitted successfully and analyzed by AI",
            feedback_id=row.api_id,
        )

    async def history(self) -> list[Feedback]:
        stmt = select(Feedback).order_by(Feedback.created_at)
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def clear(self) -> int:
        result = await self._session.execute(delete(Feedback))
        await self._session.commit()
        removed = result.rowcount or 0
        logger.info("feedback_cleared", extra={"removed": removed})
        return removed


def get_feedback_analyzer() -> FeedbackAnalyzer | None:
    if not settings.openai_api_key:
        return None
    return OpenAIFeedbackAnalyzer(settings.openai_api_key, model=settings.llm_model)
