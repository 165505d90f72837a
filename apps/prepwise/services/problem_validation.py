"""Structural validation of AI-generated content.

Every check here is pure: it returns a `ValidationResult` describing each failing
field and never raises or logs. Callers decide whether to log and whether to swap in
fallback content. Extra keys are always ignored.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

from pydantic import TypeAdapter, ValidationError

from prepwise.schemas.problems import (
    ENVELOPE_KEYS,
    Difficulty,
    MockInterviewProblem,
    ProblemKind,
    ProblemPayload,
    RoundType,
)

DIFFICULTIES = frozenset(d.value for d in Difficulty)
USER_SCALE_KEYS = frozenset({"users", "dailyActiveUsers", "monthlyActiveUsers"})

_PAYLOAD_ADAPTER: TypeAdapter[ProblemPayload] = TypeAdapter(ProblemPayload)


@dataclass(frozen=True)
class ValidationResult:
    ok: bool
    errors: tuple[str, ...] = ()

    def __bool__(self) -> bool:
        return self.ok

    @classmethod
    def from_errors(cls, errors: Iterable[str]) -> "ValidationResult":
        errs = tuple(errors)
        return cls(ok=not errs, errors=errs)

    def prefixed(self, prefix: str) -> "ValidationResult":
        return ValidationResult(self.ok, tuple(f"{prefix}.{e}" for e in self.errors))


class SchemaViolationError(Exception):
    """Generated content parsed as JSON but does not have the required shape."""

    def __init__(self, result: ValidationResult) -> None:
        self.result = result
        super().__init__("; ".join(result.errors) or "schema violation")


@dataclass
class _Checker:
    data: Mapping[str, Any]
    errors: list[str] = field(default_factory=list)

    def string(self, name: str, *, non_blank: bool = False) -> None:
        value = self.data.get(name)
        if not isinstance(value, str):
            self.errors.append(f"{name}: expected string")
        elif non_blank and not value.strip():
            self.errors.append(f"{name}: must not be blank")

    def optional_string(self, name: str) -> None:
        if self.data.get(name) is not None:
            self.string(name)

    def string_list(self, name: str, *, non_empty: bool = False) -> None:
        value = self.data.get(name)
        if not isinstance(value, list):
            self.errors.append(f"{name}: expected array")
            return
        if non_empty and not value:
            self.errors.append(f"{name}: must not be empty")
        for idx, item in enumerate(value):
            if not isinstance(item, str):
                self.errors.append(f"{name}[{idx}]: expected string")

    def optional_string_list(self, name: str) -> None:
        if self.data.get(name) is not None:
            self.string_list(name)

    def difficulty(self) -> None:
        if self.data.get("difficulty") not in DIFFICULTIES:
            self.errors.append("difficulty: expected one of easy, medium, hard")

    def examples(self) -> None:
        value = self.data.get("examples")
        if not isinstance(value, list) or not value:
            self.errors.append("examples: expected non-empty array")
            return
        for idx, ex in enumerate(value):
            if not isinstance(ex, Mapping):
                self.errors.append(f"examples[{idx}]: expected object")
                continue
            for key in ("input", "output"):
                if not isinstance(ex.get(key), str):
                    self.errors.append(f"examples[{idx}].{key}: expected string")

    def scale(self) -> None:
        self.errors.extend(f"scale{e}" for e in _scale_errors(self.data.get("scale")))

    def result(self) -> ValidationResult:
        return ValidationResult.from_errors(self.errors)


def _scale_errors(scale: Any) -> list[str]:
    if not isinstance(scale, Mapping):
        return [": expected object"]
    errors: list[str] = []
    if len(scale) < 2:
        errors.append(": expected at least two metrics")
    for key, value in scale.items():
        if not isinstance(value, str):
            errors.append(f".{key}: expected string")
    if not any(k in USER_SCALE_KEYS or "user" in str(k).lower() for k in scale):
        errors.append(": missing a user-count metric")
    return errors


def _checker(data: Any) -> _Checker | None:
    return _Checker(data) if isinstance(data, Mapping) else None


_NOT_OBJECT = ValidationResult(ok=False, errors=("expected object",))


def validate_scale(scale: Any) -> ValidationResult:
    return ValidationResult.from_errors(f"scale{e}" for e in _scale_errors(scale))


def validate_dsa_problem(data: Any) -> ValidationResult:
    c = _checker(data)
    if c is None:
        return _NOT_OBJECT
    for name in ("title", "description", "problemStatement", "inputFormat", "outputFormat"):
        c.string(name)
    c.string_list("constraints")
    c.examples()
    c.difficulty()
    c.string("estimatedTime")
    c.optional_string("category")
    c.string_list("tags")
    c.optional_string_list("hints")
    c.optional_string_list("followUpQuestions")
    return c.result()


def validate_machine_coding_problem(data: Any) -> ValidationResult:
    c = _checker(data)
    if c is None:
        return _NOT_OBJECT
    c.string("title")
    c.string("description")
    for name in ("requirements", "constraints", "acceptanceCriteria", "technologies"):
        c.string_list(name)
    c.difficulty()
    c.string("estimatedTime")
    c.optional_string_list("hints")
    return c.result()


def validate_system_design_problem(data: Any) -> ValidationResult:
    c = _checker(data)
    if c is None:
        return _NOT_OBJECT
    c.string("title")
    c.string("description")
    for name in (
        "functionalRequirements",
        "nonFunctionalRequirements",
        "constraints",
        "expectedDeliverables",
        "technologies",
    ):
        c.string_list(name)
    c.scale()
    c.difficulty()
    c.string("estimatedTime")
    c.optional_string_list("followUpQuestions")
    return c.result()


def validate_theory_problem(data: Any) -> ValidationResult:
    c = _checker(data)
    if c is None:
        return _NOT_OBJECT
    for name in ("title", "description", "question", "expectedAnswer"):
        c.string(name)
    c.string_list("keyPoints")
    c.difficulty()
    c.string("estimatedTime")
    c.optional_string("category")
    c.optional_string_list("tags")
    c.optional_string_list("hints")
    c.optional_string_list("followUpQuestions")
    return c.result()


VALIDATORS = {
    ProblemKind.dsa: validate_dsa_problem,
    ProblemKind.machine_coding: validate_machine_coding_problem,
    ProblemKind.system_design: validate_system_design_problem,
    ProblemKind.theory: validate_theory_problem,
}


def validate_problem(kind: ProblemKind | str, data: Any) -> ValidationResult:
    return VALIDATORS[ProblemKind(kind)](data)


def is_valid_dsa_problem(data: Any) -> bool:
    return validate_dsa_problem(data).ok


def is_valid_machine_coding_problem(data: Any) -> bool:
    return validate_machine_coding_problem(data).ok


def is_valid_system_design_problem(data: Any) -> bool:
    return validate_system_design_problem(data).ok


def is_valid_theory_problem(data: Any) -> bool:
    return validate_theory_problem(data).ok


def present_kinds(envelope: Mapping[str, Any]) -> list[ProblemKind]:
    """Variant tags whose envelope key is present and non-null."""
    return [kind for kind, key in ENVELOPE_KEYS.items() if envelope.get(key) is not None]


def validate_problem_schema(envelope: Any) -> ValidationResult:
    """Validate a response envelope holding zero or more variant keys.

    Absent (or null) keys are vacuously valid; every present key must pass its
    variant check.
    """
    if not isinstance(envelope, Mapping):
        return _NOT_OBJECT
    errors: list[str] = []
    for kind in present_kinds(envelope):
        key = ENVELOPE_KEYS[kind]
        errors.extend(validate_problem(kind, envelope[key]).prefixed(key).errors)
    return ValidationResult.from_errors(errors)


def is_valid_problem_schema(envelope: Any) -> bool:
    return validate_problem_schema(envelope).ok


def decode_problem(kind: ProblemKind | str, data: Any) -> ProblemPayload:
    """Validate one variant and decode it into its typed model."""
    kind = ProblemKind(kind)
    result = validate_problem(kind, data)
    if not result:
        raise SchemaViolationError(result.prefixed(ENVELOPE_KEYS[kind]))
    try:
        return _PAYLOAD_ADAPTER.validate_python({**data, "kind": kind.value})
    except ValidationError as exc:
        errors = (
            f"{ENVELOPE_KEYS[kind]}.{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
            for err in exc.errors()
        )
        raise SchemaViolationError(ValidationResult.from_errors(errors)) from exc


def decode_problem_envelope(envelope: Any) -> list[ProblemPayload]:
    """Decode every variant present in an envelope, in declaration order."""
    result = validate_problem_schema(envelope)
    if not result:
        raise SchemaViolationError(result)
    return [decode_problem(kind, envelope[ENVELOPE_KEYS[kind]]) for kind in present_kinds(envelope)]


def validate_generated_problem(problem: Any, round_type: RoundType | str) -> ValidationResult:
    """Type-specific check for a generated mock interview problem."""
    if isinstance(problem, MockInterviewProblem):
        problem = problem.model_dump(mode="json", by_alias=True)
    c = _checker(problem)
    if c is None:
        return _NOT_OBJECT

    round_type = RoundType(round_type)
    c.string("title", non_blank=True)
    c.string("description", non_blank=True)
    c.difficulty()
    c.string("estimatedTime", non_blank=True)
    if problem.get("type") is not None and problem.get("type") != round_type.value:
        c.errors.append(f"type: expected {round_type.value}")

    if round_type == RoundType.dsa:
        c.string("problemStatement", non_blank=True)
        c.string("inputFormat")
        c.string("outputFormat")
        c.string_list("constraints")
        c.examples()
    elif round_type == RoundType.machine_coding:
        c.string_list("requirements", non_empty=True)
        c.string_list("acceptanceCriteria", non_empty=True)
        c.optional_string_list("technologies")
    elif round_type == RoundType.system_design:
        c.string_list("functionalRequirements", non_empty=True)
        c.string_list("nonFunctionalRequirements", non_empty=True)
        if problem.get("scale") is not None:
            c.scale()
    else:
        c.string("question", non_blank=True)
        c.string("expectedAnswer", non_blank=True)
        c.optional_string_list("keyPoints")
    return c.result()


def validate_evaluation(data: Any) -> ValidationResult:
    """An evaluation needs a numeric score and string feedback."""
    c = _checker(data)
    if c is None:
        return _NOT_OBJECT
    score = data.get("score")
    if isinstance(score, bool) or not isinstance(score, (int, float)):
        c.errors.append("score: expected number")
    c.string("feedback")
    for name in ("strengths", "areasForImprovement", "suggestions"):
        c.optional_string_list(name)
    return c.result()


def validate_insights(data: Any) -> ValidationResult:
    """Minimal envelope check: `rounds` must be present and an array."""
    if not isinstance(data, Mapping):
        return _NOT_OBJECT
    if not isinstance(data.get("rounds"), list):
        return ValidationResult(ok=False, errors=("rounds: expected array",))
    return ValidationResult(ok=True)
