from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from prepwise.schemas.problems import (
    MockInterviewEvaluation,
    MockInterviewProblem,
    MockInterviewSubmission,
)
from prepwise.services.fallbacks import fallback_evaluation, fallback_feedback
from prepwise.services.problem_validation import validate_evaluation
from prepwise.services.prompt_builder import (
    build_mock_evaluation_request,
    build_submission_evaluation_request,
)
from prepwise.services.response_parser import parse_model_json

logger = logging.getLogger(__name__)


def normalize_score(value: Any) -> int:
    """Round a numeric score and clamp it to 0..100."""
    score = float(value)
    if math.isnan(score):
        return 0
    return int(round(max(0.0, min(100.0, score))))


@dataclass
class EvaluationService:
    """Score submissions with Gemini, falling back to canned feedback."""

    gemini: Any = None

    def __post_init__(self) -> None:
        if self.gemini is None:
            from prepwise.core.dependencies import get_gemini_client

            self.gemini = get_gemini_client()

    def evaluate_submission(
        self,
        designation: str | None,
        code: str | None = None,
        drawing_image: str | None = None,
    ) -> str:
        """Free-form feedback on code and/or a design diagram."""
        request = build_submission_evaluation_request(designation, code, drawing_image)

        if not self.gemini.is_configured:
            logger.warning("Gemini API key not configured; returning sample feedback")
            return fallback_feedback(
                has_code=bool((code or "").strip()),
                has_image=bool((drawing_image or "").strip()),
            )

        logger.info("Evaluating %s submission", request.template)
        return self.gemini.generate_text(request.body)

    def evaluate_mock_interview_submission(
        self,
        problem: MockInterviewProblem,
        submission: MockInterviewSubmission,
    ) -> MockInterviewEvaluation:
        if not self.gemini.is_configured:
            logger.warning("Gemini API key not configured; returning fallback evaluation")
            return fallback_evaluation(problem, submission)

        request = build_mock_evaluation_request(problem, submission)
        data = parse_model_json(self.gemini.generate_text(request.body))

        result = validate_evaluation(data)
        if not result:
            logger.warning(
                "Evaluation for %s failed validation: %s; using fallback",
                problem.id,
                "; ".join(result.errors),
            )
            return fallback_evaluation(problem, submission)

        data["problemId"] = problem.id
        data["score"] = normalize_score(data["score"])
        try:
            return MockInterviewEvaluation.model_validate(data)
        except ValidationError as exc:
            logger.warning("Evaluation for %s could not be decoded: %s", problem.id, exc)
            return fallback_evaluation(problem, submission)
