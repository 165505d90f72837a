"""Turn raw model text and stored problem documents into normalized objects."""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping

from prepwise.core.exceptions import MalformedResponseError
from prepwise.schemas.problems import (
    ENVELOPE_KEYS,
    InterviewType,
    MockInterviewProblem,
    ParsedProblemData,
    ProblemKind,
    RoundType,
    UnifiedProblemContent,
    UnifiedProblemDoc,
    UnifiedProblemType,
)

logger = logging.getLogger(__name__)

_UNIFIED_TO_LEGACY: dict[str, tuple[InterviewType, ProblemKind]] = {
    UnifiedProblemType.dsa.value: (InterviewType.dsa, ProblemKind.dsa),
    UnifiedProblemType.machine_coding.value: (InterviewType.coding, ProblemKind.machine_coding),
    UnifiedProblemType.system_design.value: (InterviewType.design, ProblemKind.system_design),
    UnifiedProblemType.js_concepts.value: (InterviewType.theory, ProblemKind.theory),
    UnifiedProblemType.behavioral.value: (InterviewType.theory, ProblemKind.theory),
}

_ROUND_TO_UNIFIED: dict[RoundType, UnifiedProblemType] = {
    RoundType.dsa: UnifiedProblemType.dsa,
    RoundType.machine_coding: UnifiedProblemType.machine_coding,
    RoundType.system_design: UnifiedProblemType.system_design,
    RoundType.theory_and_debugging: UnifiedProblemType.js_concepts,
}


def extract_json_object(text: str | None) -> str:
    """Return the first balanced top-level ``{...}`` in `text`.

    Braces inside JSON string literals (including escaped quotes) do not count.
    Raises `MalformedResponseError` when no complete object is present.
    """
    if not text:
        raise MalformedResponseError(details={"reason": "empty response"})

    start = text.find("{")
    while start != -1:
        depth = 0
        in_string = False
        escaped = False
        for idx in range(start, len(text)):
            ch = text[idx]
            if in_string:
                if escaped:
                    escaped = False
                elif ch == "\\":
                    escaped = True
                elif ch == '"':
                    in_string = False
                continue
            if ch == '"':
                in_string = True
            elif ch == "{":
                depth += 1
            elif ch == "}":
                depth -= 1
                if depth == 0:
                    return text[start : idx + 1]
        # Unbalanced from this brace; try the next candidate.
        start = text.find("{", start + 1)

    raise MalformedResponseError(details={"reason": "no JSON object found"})


def parse_model_json(text: str | None) -> dict[str, Any]:
    """Extract and decode the JSON object embedded in model output."""
    candidate = extract_json_object(text)
    try:
        parsed = json.loads(candidate)
    except json.JSONDecodeError as exc:
        raise MalformedResponseError(details={"reason": f"invalid JSON: {exc.msg}"}) from exc
    if not isinstance(parsed, dict):
        raise MalformedResponseError(details={"reason": "JSON root is not an object"})
    return parsed


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _split_lines(value: Any) -> list[str]:
    if isinstance(value, list):
        return [str(v) for v in value if str(v).strip()]
    return [line.strip() for line in _text(value).split("\n") if line.strip()]


def _legacy_variant(kind: ProblemKind, doc: Mapping[str, Any]) -> dict[str, Any]:
    problem = doc.get("problem") if isinstance(doc.get("problem"), Mapping) else {}
    title = _text(doc.get("title"))
    description = _text(problem.get("description"))
    difficulty = _text(doc.get("difficulty")) or "medium"
    estimated_time = _text(doc.get("estimatedTime"))
    constraints = _split_lines(problem.get("constraints"))
    follow_ups = [str(q) for q in (problem.get("follow_up_questions") or []) if isinstance(q, str)]

    base: dict[str, Any] = {
        "title": title,
        "description": description,
        "difficulty": difficulty,
        "estimatedTime": estimated_time,
    }
    if kind == ProblemKind.dsa:
        sample_input = _text(problem.get("sample_input"))
        sample_output = _text(problem.get("sample_output"))
        examples = (
            [{"input": sample_input, "output": sample_output}]
            if sample_input or sample_output
            else []
        )
        return {
            **base,
            "problemStatement": description,
            "inputFormat": _text(problem.get("input_format")),
            "outputFormat": _text(problem.get("output_format")),
            "constraints": constraints,
            "examples": examples,
            "category": "",
            "tags": [],
            "hints": [],
            "followUpQuestions": follow_ups,
        }
    if kind == ProblemKind.machine_coding:
        return {
            **base,
            "requirements": [],
            "constraints": constraints,
            "acceptanceCriteria": [],
            "technologies": [],
            "hints": [],
        }
    if kind == ProblemKind.system_design:
        return {
            **base,
            "functionalRequirements": [],
            "nonFunctionalRequirements": [],
            "constraints": constraints,
            "scale": {},
            "expectedDeliverables": [],
            "technologies": [],
            "followUpQuestions": follow_ups,
        }
    return {
        **base,
        "question": description,
        "expectedAnswer": "",
        "keyPoints": [],
        "hints": [],
        "followUpQuestions": follow_ups,
    }


def is_unified_document(doc: Mapping[str, Any]) -> bool:
    return isinstance(doc.get("problem"), Mapping) and isinstance(doc.get("type"), str)


def unified_to_legacy(doc: Mapping[str, Any]) -> dict[str, Any]:
    """Map a unified `{title, type, problem:{...}}` document onto the legacy shape.

    The single matching variant field is synthesized as a JSON string. Sub-fields the
    unified shape does not carry default to empty strings and arrays.
    """
    unified_type = doc.get("type")
    interview_type, kind = _UNIFIED_TO_LEGACY.get(
        unified_type, (InterviewType.theory, ProblemKind.theory)
    )
    legacy = {k: v for k, v in doc.items() if k != "problem"}
    legacy["interviewType"] = interview_type.value
    for key in ENVELOPE_KEYS.values():
        legacy.pop(key, None)
    legacy[ENVELOPE_KEYS[kind]] = json.dumps(_legacy_variant(kind, doc), ensure_ascii=False)
    return legacy


def _parse_field(name: str, raw: Any, *, problem_id: Any) -> dict[str, Any] | None:
    if raw is None or raw == "":
        return None
    if isinstance(raw, Mapping):
        return dict(raw)
    if not isinstance(raw, str):
        logger.warning("Problem %s: field %s has unexpected type %s", problem_id, name, type(raw).__name__)
        return None
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError as exc:
        logger.warning("Problem %s: could not parse %s: %s", problem_id, name, exc.msg)
        return None
    if not isinstance(parsed, dict):
        logger.warning("Problem %s: field %s is not a JSON object", problem_id, name)
        return None
    return parsed


def parse_problem_document(doc: Mapping[str, Any]) -> ParsedProblemData:
    """Normalize a stored problem document (unified or legacy) for clients.

    Each legacy variant field is decoded independently; a field that fails to decode
    becomes None without affecting the others.
    """
    if is_unified_document(doc):
        doc = unified_to_legacy(doc)

    data = dict(doc)
    problem_id = data.get("id") or data.get("_id")
    if "_id" in data:
        data.setdefault("id", str(data.pop("_id")))
    for key in ENVELOPE_KEYS.values():
        data[key] = _parse_field(key, data.get(key), problem_id=problem_id)
    return ParsedProblemData.model_validate(data)


def to_unified_doc(
    problem: MockInterviewProblem, *, company: str = "", role: str = ""
) -> UnifiedProblemDoc:
    """Compact unified document for a generated mock interview problem."""
    first = problem.examples[0] if problem.examples else None
    return UnifiedProblemDoc(
        title=problem.title or f"{role} Interview Problem".strip(),
        type=_ROUND_TO_UNIFIED[problem.type],
        difficulty=problem.difficulty,
        company=company or problem.company_name or "",
        role=role or problem.role_level or "",
        problem=UnifiedProblemContent(
            description=problem.description,
            input_format=problem.input_format or "",
            output_format=problem.output_format or "",
            constraints="\n".join(problem.constraints),
            sample_input=first.input if first else "",
            sample_output=first.output if first else "",
            follow_up_questions=list(problem.follow_up_questions),
        ),
    )
