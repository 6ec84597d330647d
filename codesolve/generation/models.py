from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

Language = Literal["python", "java"]


@dataclass(frozen=True)
class Solution:
    code: str
    explanation: str
    language: Language


@dataclass(frozen=True)
class DualSolution:
    python: Solution
    java: Solution


@dataclass(frozen=True)
class GenerationResult:
    solutions: DualSolution
    status: Literal["success", "error"]
    message: str
