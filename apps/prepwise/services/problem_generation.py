from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from prepwise.core.utils import require_fields
from prepwise.schemas.problems import (
    ENVELOPE_KEYS,
    Difficulty,
    GeneratedResult,
    GenerationSource,
    MockInterviewProblem,
    ProblemKind,
    RoundType,
)
from prepwise.services.fallbacks import fallback_mock_problem, fallback_problem
from prepwise.services.problem_validation import (
    SchemaViolationError,
    decode_problem_envelope,
    validate_generated_problem,
)
from prepwise.services.prompt_builder import build_interview_prompt, build_mock_problem_prompt
from prepwise.services.response_parser import parse_model_json

logger = logging.getLogger(__name__)


@dataclass
class ProblemGenerationService:
    """Generate interview problems with Gemini, guarded by validation and fallbacks.

    Without an API key every call returns the static sample for the requested type
    and never touches the network.
    """

    gemini: Any = None

    def __post_init__(self) -> None:
        if self.gemini is None:
            from prepwise.core.dependencies import get_gemini_client

            self.gemini = get_gemini_client()

    def _fallback_result(
        self, interview_type: str, kinds: list[ProblemKind], source: GenerationSource
    ) -> GeneratedResult:
        return GeneratedResult(
            interview_type=interview_type,
            payloads=[fallback_problem(kind, Difficulty.medium) for kind in kinds],
            source=source,
        )

    def generate_interview_questions(
        self,
        designation: str,
        companies: str,
        round: str,
        interview_type: str | None = None,
    ) -> GeneratedResult:
        require_fields(designation=designation, companies=companies, round=round)
        prompt = build_interview_prompt(designation, companies, round, interview_type)
        requested = interview_type or prompt.template.value

        if not self.gemini.is_configured:
            logger.warning("Gemini API key not configured; returning sample %s problem(s)", requested)
            return self._fallback_result(requested, prompt.kinds, GenerationSource.offline)

        text = self.gemini.generate_text(self.gemini.build_text_request(prompt.text))
        envelope = parse_model_json(text)

        try:
            payloads = decode_problem_envelope(envelope)
        except SchemaViolationError as exc:
            logger.warning("Generated %s content failed validation: %s", requested, exc)
            return self._fallback_result(requested, prompt.kinds, GenerationSource.fallback)

        by_kind = {p.kind: p for p in payloads}
        missing = [ENVELOPE_KEYS[k] for k in prompt.kinds if k.value not in by_kind]
        if missing:
            logger.warning("Generated %s content is missing %s", requested, ", ".join(missing))
            return self._fallback_result(requested, prompt.kinds, GenerationSource.fallback)

        return GeneratedResult(
            interview_type=requested,
            payloads=[by_kind[k.value] for k in prompt.kinds],
            source=GenerationSource.ai,
        )

    def generate_mock_interview_problem(
        self,
        round_type: RoundType | str,
        company_name: str,
        role_level: str,
        difficulty: Difficulty | str = Difficulty.medium,
    ) -> MockInterviewProblem:
        require_fields(company_name=company_name, role_level=role_level)
        round_type = RoundType(round_type)
        difficulty = Difficulty(difficulty)

        def _fallback() -> MockInterviewProblem:
            return fallback_mock_problem(
                round_type, difficulty, company_name=company_name, role_level=role_level
            )

        if not self.gemini.is_configured:
            logger.warning("Gemini API key not configured; returning sample %s problem", round_type.value)
            return _fallback()

        prompt = build_mock_problem_prompt(round_type, company_name, role_level, difficulty)
        data = parse_model_json(self.gemini.generate_text(self.gemini.build_text_request(prompt)))
        data.setdefault("type", round_type.value)

        result = validate_generated_problem(data, round_type)
        if not result:
            logger.warning(
                "Generated %s problem failed validation: %s", round_type.value, "; ".join(result.errors)
            )
            return _fallback()

        data["id"] = str(data.get("id") or f"{round_type.value}_{uuid.uuid4().hex[:12]}")
        data["companyName"] = company_name
        data["roleLevel"] = role_level
        try:
            return MockInterviewProblem.model_validate(data)
        except ValidationError as exc:
            logger.warning("Generated %s problem could not be decoded: %s", round_type.value, exc)
            return _fallback()
