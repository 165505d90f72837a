"""Build the instruction text (and request bodies) sent to Gemini.

Nothing here touches the network. The JSON examples embedded in prompts are rendered
from the fallback payloads, so the shape the model is asked for is always the shape
the validators accept.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from prepwise.connectors.gemini_connector import GeminiClient
from prepwise.core.exceptions import InputValidationError
from prepwise.prompts import load_prompt, render_prompt
from prepwise.schemas.problems import (
    Difficulty,
    MockInterviewProblem,
    MockInterviewSubmission,
    ProblemKind,
    RoundType,
)
from prepwise.services.fallbacks import fallback_envelope, fallback_insights, fallback_mock_problem


class InterviewTemplate(str, Enum):
    dsa = "dsa"
    theory = "theory"
    combined = "combined"
    general = "general"


class EvaluationTemplate(str, Enum):
    combined = "combined"
    design = "design"
    dsa = "dsa"
    code = "code"


TEMPLATE_KINDS: dict[InterviewTemplate, list[ProblemKind]] = {
    InterviewTemplate.dsa: [ProblemKind.dsa],
    InterviewTemplate.theory: [ProblemKind.theory],
    InterviewTemplate.combined: [ProblemKind.machine_coding, ProblemKind.system_design],
    InterviewTemplate.general: [ProblemKind.theory],
}

_THEORY_TYPES = {"theory", "theory_and_debugging", "js_concepts"}
# An unset type keeps the historical default of a coding + design pair.
_COMBINED_TYPES = {"", "coding", "design", "machine_coding", "system_design"}

_ROUND_DURATION = {
    RoundType.dsa: "30 minutes",
    RoundType.theory_and_debugging: "20 minutes",
    RoundType.machine_coding: "60 minutes",
    RoundType.system_design: "60 minutes",
}

_ROUND_FOCUS = {
    RoundType.dsa: "algorithms, data structures",
    RoundType.theory_and_debugging: "frontend concepts, frameworks",
    RoundType.machine_coding: "React, component design",
    RoundType.system_design: "system architecture",
}

# Stripped from the mock problem example; assigned server-side.
_MOCK_SERVER_FIELDS = {"id", "company_name", "role_level"}


@dataclass(frozen=True)
class InterviewPrompt:
    template: InterviewTemplate
    text: str
    kinds: list[ProblemKind] = field(default_factory=list)


@dataclass(frozen=True)
class EvaluationRequest:
    template: str
    text: str
    body: dict[str, Any]


def _schema(example: Any) -> str:
    return json.dumps(example, indent=2, ensure_ascii=False)


def select_interview_template(interview_type: str | None) -> InterviewTemplate:
    normalized = (interview_type or "").strip().lower()
    if normalized == "dsa":
        return InterviewTemplate.dsa
    if normalized in _THEORY_TYPES:
        return InterviewTemplate.theory
    if normalized in _COMBINED_TYPES:
        return InterviewTemplate.combined
    return InterviewTemplate.general


def build_interview_prompt(
    designation: str,
    companies: str,
    round: str,
    interview_type: str | None = None,
) -> InterviewPrompt:
    """Pick exactly one of the four interview templates and fill it in."""
    template = select_interview_template(interview_type)
    kinds = TEMPLATE_KINDS[template]
    text = render_prompt(
        "interview",
        template.value,
        designation=designation,
        companies=companies,
        round=round,
        interview_type=(interview_type or "").strip() or "general",
        schema=_schema(fallback_envelope(kinds)),
    )
    return InterviewPrompt(template=template, text=text, kinds=list(kinds))


def experience_level(role_level: str) -> str:
    lowered = (role_level or "").lower()
    if "senior" in lowered:
        return "senior"
    if "junior" in lowered:
        return "junior"
    return "mid-level"


def build_mock_problem_prompt(
    round_type: RoundType | str,
    company_name: str,
    role_level: str,
    difficulty: Difficulty | str = Difficulty.medium,
) -> str:
    round_type = RoundType(round_type)
    difficulty = Difficulty(difficulty)
    example = fallback_mock_problem(round_type, difficulty).model_dump(
        mode="json", by_alias=True, exclude_defaults=True, exclude=_MOCK_SERVER_FIELDS
    )
    return render_prompt(
        "mock_interview",
        "problem",
        company_name=company_name,
        role_level=role_level,
        round_type=round_type.value,
        difficulty=difficulty.value,
        experience_level=experience_level(role_level),
        duration=_ROUND_DURATION[round_type],
        focus_areas=_ROUND_FOCUS[round_type],
        schema=_schema(example),
    )


def build_submission_evaluation_request(
    designation: str | None,
    code: str | None = None,
    drawing_image: str | None = None,
) -> EvaluationRequest:
    """Choose the evaluation prompt by which modalities were submitted."""
    designation = (designation or "").strip()
    if not designation:
        raise InputValidationError(
            "Designation is required for evaluation", details={"missing": ["designation"]}
        )
    code = (code or "").strip()
    image = (drawing_image or "").strip()

    if code and image:
        template = EvaluationTemplate.combined
    elif image:
        template = EvaluationTemplate.design
    elif code:
        looks_like_dsa = "Problem Statement" in code or "Test Results" in code
        template = EvaluationTemplate.dsa if looks_like_dsa else EvaluationTemplate.code
    else:
        raise InputValidationError(
            "No code or design provided for evaluation",
            details={"missing": ["code", "drawingImage"]},
        )

    text = render_prompt("evaluation", template.value, designation=designation, code=code)
    body = GeminiClient.build_text_request(text, image_base64=image or None)
    return EvaluationRequest(template=template.value, text=text, body=body)


def _evaluation_data(problem: MockInterviewProblem, submission: MockInterviewSubmission) -> str:
    code = submission.code or "No code provided"
    if problem.type == RoundType.dsa:
        return f"Problem: {problem.title}\n{problem.problem_statement or ''}\n\nCode: {code}"
    if problem.type == RoundType.machine_coding:
        return (
            f"Problem: {problem.title}\nRequirements: {', '.join(problem.requirements)}"
            f"\n\nCode: {code}"
        )
    if problem.type == RoundType.system_design:
        design = "[Image provided]" if submission.drawing_image else "No diagram provided"
        return (
            f"Problem: {problem.title}\n"
            f"Requirements: {', '.join(problem.functional_requirements)}"
            f"\n\nDesign: {design}\nCode: {code}"
        )
    return (
        f"Question: {problem.question or problem.description}\n"
        f"Expected: {problem.expected_answer or ''}"
        f"\n\nAnswer: {submission.answer or 'No answer provided'}"
    )


def build_mock_evaluation_request(
    problem: MockInterviewProblem, submission: MockInterviewSubmission
) -> EvaluationRequest:
    example = {
        "problemId": problem.id,
        "score": 85,
        "feedback": "Detailed feedback here",
        "strengths": ["Real strengths will be generated"],
        "areasForImprovement": ["Real areas for improvement will be generated"],
        "suggestions": ["Real suggestions will be generated"],
    }
    text = render_prompt(
        "mock_interview",
        "evaluation",
        instructions=load_prompt("mock_interview", f"criteria_{problem.type.value}"),
        evaluation_data=_evaluation_data(problem, submission),
        schema=_schema(example),
    )
    image = submission.drawing_image if problem.type == RoundType.system_design else None
    body = GeminiClient.build_text_request(text, image_base64=image or None)
    return EvaluationRequest(template=problem.type.value, text=text, body=body)


def build_insights_prompt(company_name: str, role_level: str) -> str:
    sample = fallback_insights(company_name, role_level)
    example = {**sample, "totalRounds": 1, "rounds": sample["rounds"][:1]}
    return render_prompt(
        "insights",
        "interview_rounds",
        company_name=company_name,
        role_level=role_level,
        schema=_schema(example),
    )
