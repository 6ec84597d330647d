"""LLM-backed dual-language solution generation.

Generates a Python and a Java solution for a problem statement in parallel
using the first configured provider:

    OPENAI_API_KEY=...        # OpenAI chat completions (preferred)
    ANTHROPIC_API_KEY=...     # Anthropic Messages API (used when OpenAI is unset)

With neither key set, or when the provider call fails, canned demo solutions
are returned so the caller always has something to render.
"""
from __future__ import annotations

import asyncio
import logging
import re
from typing import Protocol

import httpx
from openai import AsyncOpenAI
from tenacity import retry, stop_after_attempt, wait_exponential

from codesolve.core.config import settings
from codesolve.generation.mock_solutions import mock_solution
from codesolve.generation.models import DualSolution, GenerationResult, Language, Solution

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"```\w*\n?")


def strip_code_fences(text: str) -> str:
    return _FENCE_RE.sub("", text).replace("```", "").strip()


def _code_prompt(problem: str, language: Language) -> str:
    return f"""Generate a clean {language} solution for this coding problem. Return ONLY the working code without any comments, explanations, or markdown formatting:

{problem}

Requirements:
- No comments in the code
- No explanations
- Clean, working code only
- Proper syntax and structure"""


class SolutionProvider(Protocol):
    label: str

    async def solve(self, problem: str, language: Language) -> Solution:
        """Generate one solution in *language*."""


# ---------------------------------------------------------------------------
# OpenAI
# ---------------------------------------------------------------------------

class OpenAIProvider:
    label = "OpenAI"

    def __init__(self, api_key: str, model: str = "gpt-4o-mini") -> None:
        self._model = model
        self._client = AsyncOpenAI(api_key=api_key)

    @retry(stop=stop_after_attempt(3), wait=wait_exponential(multiplier=1, min=1, max=10), reraise=True)
    async def _complete(self, messages: list[dict], *, max_tokens: int, temperature: float) -> str:
        response = await self._client.chat.completions.create(
            model=self._model,
            messages=messages,
            max_tokens=max_tokens,
            temperature=temperature,
        )
        return response.choices[0].message.content or ""

    async def solve(self, problem: str, language: Language) -> Solution:
        raw_code = await self._complete(
            [
                {
                    "role": "system",
                    "content": f"You are a coding expert. Generate clean, working {language} code "
                    "without any comments or explanations. Return only the code.",
                },
                {"role": "user", "content": _code_prompt(problem, language)},
            ],
            max_tokens=1000,
            temperature=0.1,
        )
        code = strip_code_fences(raw_code)

        explanation = await self._complete(
            [
                {
                    "role": "user",
                    "content": f"Explain this {language} code solution in a clear, step-by-step manner:\n\n{code}",
                }
            ],
            max_tokens=500,
            temperature=0.3,
        )
        return Solution(code=code, explanation=explanation.strip(), language=language)


# ---------------------------------------------------------------------------
# Anthropic (plain HTTP, Messages API)
# ---------------------------------------------------------------------------

ANTHROPIC_API_URL = "https://api.anthropic.com/v1/messages"
ANTHROPIC_VERSION = "2023-06-01"


class AnthropicProvider:
    label = "Anthropic Claude"

    def __init__(
        self,
        api_key: str,
        model: str = "claude-3-5-sonnet-latest",
        *,
        timeout_seconds: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._timeout_seconds = timeout_seconds
        self._transport = transport

    @retry(stop=stop_after_attempt(3), wait=wait_exponential(multiplier=1, min=1, max=10), reraise=True)
    async def _message(self, prompt: str) -> str:
        async with httpx.AsyncClient(timeout=self._timeout_seconds, transport=self._transport) as client:
            response = await client.post(
                ANTHROPIC_API_URL,
                headers={
                    "x-api-key": self._api_key,
                    "anthropic-version": ANTHROPIC_VERSION,
                    "content-type": "application/json",
                },
                json={
                    "model": self._model,
                    "max_tokens": 1500,
                    "messages": [{"role": "user", "content": prompt}],
                },
            )
        response.raise_for_status()
        blocks = response.json().get("content") or []
        return blocks[0].get("text", "") if blocks else ""

    async def solve(self, problem: str, language: Language) -> Solution:
        prompt = (
            _code_prompt(problem, language)
            + '\n\nThen on a new line starting with "EXPLANATION:", provide a brief explanation '
            "of how the solution works."
        )
        content = await self._message(prompt)
        code_part, _, explanation = content.partition("EXPLANATION:")
        return Solution(
            code=strip_code_fences(code_part),
            explanation=explanation.strip() or "Solution generated successfully.",
            language=language,
        )


# ---------------------------------------------------------------------------
# Generator facade
# ---------------------------------------------------------------------------

class SolutionGenerator:
    """Generation facade — delegates to an LLM provider or demo solutions."""

    def __init__(self, provider: SolutionProvider | None = None, *, mock_delay_seconds: float = 0.0) -> None:
        self._provider = provider
        self._mock_delay_seconds = mock_delay_seconds

    @property
    def provider(self) -> SolutionProvider | None:
        return self._provider

    async def generate(self, problem: str) -> GenerationResult:
        if not problem or not problem.strip():
            raise ValueError("problem must not be empty")

        logger.info("generation_started", extra={"problem_preview": problem[:100]})

        if self._provider is None:
            if self._mock_delay_seconds > 0:
                await asyncio.sleep(self._mock_delay_seconds)
            return GenerationResult(
                solutions=self._mock(problem),
                status="success",
                message="Demo solutions generated (connect API keys for real AI solutions)",
            )

        tasks = [
            asyncio.create_task(self._provider.solve(problem, "python")),
            asyncio.create_task(self._provider.solve(problem, "java")),
        ]
        try:
            python_solution, java_solution = await asyncio.gather(*tasks)
        except Exception as exc:
            # The other language is useless without this one; stop paying for it.
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            logger.warning(
                "generation_failed_fallback",
                extra={"provider": self._provider.label, "error": str(exc)},
            )
            return GenerationResult(
                solutions=self._mock(problem),
                status="error",
                message="API error occurred, showing demo solutions",
            )

        logger.info("generation_complete", extra={"provider": self._provider.label})
        return GenerationResult(
            solutions=DualSolution(python=python_solution, java=java_solution),
            status="success",
            message=f"Solutions generated successfully using {self._provider.label}",
        )

    @staticmethod
    def _mock(problem: str) -> DualSolution:
        return DualSolution(
            python=mock_solution(problem, "python"),
            java=mock_solution(problem, "java"),
        )


def get_solution_generator() -> SolutionGenerator:
    if settings.openai_api_key:
        return SolutionGenerator(OpenAIProvider(settings.openai_api_key, model=settings.llm_model))
    if settings.anthropic_api_key:
        return SolutionGenerator(AnthropicProvider(settings.anthropic_api_key, model=settings.anthropic_model))
    return SolutionGenerator()
