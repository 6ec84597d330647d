from __future__ import annotations

import uuid
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


class ExtractionOut(BaseModel):
    text: str
    provenance: Literal["local", "remote", "placeholder"]


class SolutionRequest(BaseModel):
    problem: str = Field(min_length=1)


class SolutionOut(BaseModel):
    code: str
    explanation: str
    language: Literal["python", "java"]


class DualSolutionOut(BaseModel):
    python: SolutionOut
    java: SolutionOut


class SolutionResponse(BaseModel):
    solutions: DualSolutionOut
    status: Literal["success", "error"]
    message: str


class FeedbackIn(BaseModel):
    issue_type: str = Field(min_length=1, max_length=64)
    description: str
    original_problem: str
    generated_code: str
    language: Literal["python", "java"]
    timestamp: datetime


class FeedbackResponse(BaseModel):
    success: bool
    message: str
    feedback_id: str | None = None


class FeedbackOut(BaseModel):
    id: uuid.UUID
    issue_type: str
    description: str
    original_problem: str
    generated_code: str
    language: str
    timestamp: datetime
    status: str
    api_id: str | None


class FeedbackClearResponse(BaseModel):
    removed: int
