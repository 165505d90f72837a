from __future__ import annotations

import json
from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Difficulty(str, Enum):
    easy = "easy"
    medium = "medium"
    hard = "hard"


class ProblemKind(str, Enum):
    """Variant tag of a generated problem payload."""

    dsa = "dsa"
    machine_coding = "machine_coding"
    system_design = "system_design"
    theory = "theory"


class RoundType(str, Enum):
    """Round types used by mock interviews and simulations."""

    dsa = "dsa"
    machine_coding = "machine_coding"
    system_design = "system_design"
    theory_and_debugging = "theory_and_debugging"


class InterviewType(str, Enum):
    """Legacy interview type stored alongside JSON-string problem fields."""

    coding = "coding"
    design = "design"
    dsa = "dsa"
    theory = "theory"


class UnifiedProblemType(str, Enum):
    machine_coding = "machine_coding"
    dsa = "dsa"
    system_design = "system_design"
    js_concepts = "js_concepts"
    behavioral = "behavioral"


class GenerationSource(str, Enum):
    """Where a generated payload came from."""

    ai = "ai"
    offline = "offline"
    fallback = "fallback"


# Envelope key carrying each variant on the wire.
ENVELOPE_KEYS: dict[ProblemKind, str] = {
    ProblemKind.dsa: "dsaProblem",
    ProblemKind.machine_coding: "machineCodingProblem",
    ProblemKind.system_design: "systemDesignProblem",
    ProblemKind.theory: "theoryProblem",
}


class CamelModel(BaseModel):
    """Base model speaking camelCase on the wire and snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ProblemExample(CamelModel):
    input: str
    output: str
    explanation: Optional[str] = None


class _ProblemBase(CamelModel):
    title: str = Field(..., description="Short problem title.")
    description: str = Field(..., description="Problem context shown to the candidate.")
    difficulty: Difficulty
    estimated_time: str = Field(..., description="Human-readable duration, e.g. '30-45 minutes'.")

    def to_wire(self) -> dict[str, Any]:
        data = super().to_wire()
        data.pop("kind", None)
        return data

    def to_json(self) -> str:
        return json.dumps(self.to_wire(), ensure_ascii=False)


class DSAProblem(_ProblemBase):
    kind: Literal["dsa"] = "dsa"
    problem_statement: str
    input_format: str
    output_format: str
    constraints: list[str] = Field(default_factory=list)
    examples: list[ProblemExample] = Field(default_factory=list)
    category: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    hints: list[str] = Field(default_factory=list)
    follow_up_questions: list[str] = Field(default_factory=list)


class MachineCodingProblem(_ProblemBase):
    kind: Literal["machine_coding"] = "machine_coding"
    requirements: list[str] = Field(default_factory=list)
    constraints: list[str] = Field(default_factory=list)
    acceptance_criteria: list[str] = Field(default_factory=list)
    technologies: list[str] = Field(default_factory=list)
    hints: list[str] = Field(default_factory=list)


class SystemDesignProblem(_ProblemBase):
    kind: Literal["system_design"] = "system_design"
    functional_requirements: list[str] = Field(default_factory=list)
    non_functional_requirements: list[str] = Field(default_factory=list)
    constraints: list[str] = Field(default_factory=list)
    scale: dict[str, str] = Field(
        default_factory=dict,
        description="Scale metrics; at least two entries including a user-count metric.",
    )
    expected_deliverables: list[str] = Field(default_factory=list)
    technologies: list[str] = Field(default_factory=list)
    follow_up_questions: list[str] = Field(default_factory=list)


class TheoryProblem(_ProblemBase):
    kind: Literal["theory"] = "theory"
    question: str
    expected_answer: str
    key_points: list[str] = Field(default_factory=list)
    category: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    hints: list[str] = Field(default_factory=list)
    follow_up_questions: list[str] = Field(default_factory=list)


ProblemPayload = Annotated[
    Union[DSAProblem, MachineCodingProblem, SystemDesignProblem, TheoryProblem],
    Field(discriminator="kind"),
]


class GeneratedResult(BaseModel):
    """Outcome of one generation request.

    `payloads` holds exactly one variant, except for the combined machine-coding +
    system-design request which yields both.
    """

    interview_type: str
    payloads: list[ProblemPayload]
    source: GenerationSource = GenerationSource.ai

    def payload(self, kind: ProblemKind | str) -> Optional[ProblemPayload]:
        kind = ProblemKind(kind)
        for item in self.payloads:
            if item.kind == kind.value:
                return item
        return None

    def as_legacy(self) -> dict[str, str]:
        """Wire form: one JSON-encoded string per variant, empty when absent."""
        out: dict[str, str] = {}
        for kind, key in ENVELOPE_KEYS.items():
            item = self.payload(kind)
            out[key] = item.to_json() if item is not None else ""
        return out


class MockInterviewProblem(CamelModel):
    """Superset record covering every round type; only `type`-relevant fields are set."""

    id: str
    type: RoundType
    title: str
    description: str
    difficulty: Difficulty
    estimated_time: str
    company_name: Optional[str] = None
    role_level: Optional[str] = None

    # dsa
    problem_statement: Optional[str] = None
    input_format: Optional[str] = None
    output_format: Optional[str] = None
    examples: list[ProblemExample] = Field(default_factory=list)
    # dsa / machine coding / system design
    constraints: list[str] = Field(default_factory=list)
    # machine coding
    requirements: list[str] = Field(default_factory=list)
    acceptance_criteria: list[str] = Field(default_factory=list)
    technologies: list[str] = Field(default_factory=list)
    # system design
    functional_requirements: list[str] = Field(default_factory=list)
    non_functional_requirements: list[str] = Field(default_factory=list)
    scale: Optional[dict[str, str]] = None
    expected_deliverables: list[str] = Field(default_factory=list)
    # theory
    question: Optional[str] = None
    expected_answer: Optional[str] = None
    key_points: list[str] = Field(default_factory=list)

    hints: list[str] = Field(default_factory=list)
    follow_up_questions: list[str] = Field(default_factory=list)


class MockInterviewSubmission(CamelModel):
    code: Optional[str] = None
    answer: Optional[str] = None
    drawing_image: Optional[str] = Field(
        default=None, description="Base64 PNG without a data URI prefix."
    )

    @property
    def has_content(self) -> bool:
        return any((value or "").strip() for value in (self.code, self.answer, self.drawing_image))


class MockInterviewEvaluation(CamelModel):
    problem_id: str
    score: int = Field(..., ge=0, le=100)
    feedback: str
    strengths: list[str] = Field(default_factory=list)
    areas_for_improvement: list[str] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)


class UnifiedProblemContent(BaseModel):
    description: str = ""
    input_format: str = ""
    output_format: str = ""
    constraints: str = Field(default="", description="Newline-delimited constraints.")
    sample_input: str = ""
    sample_output: str = ""
    follow_up_questions: list[str] = Field(default_factory=list)


class UnifiedProblemDoc(BaseModel):
    """Compact `interview_problems` document shape."""

    title: str
    type: UnifiedProblemType
    difficulty: Difficulty = Difficulty.medium
    company: str = ""
    role: str = ""
    problem: UnifiedProblemContent = Field(default_factory=UnifiedProblemContent)


class ParsedProblemData(CamelModel):
    """Normalized problem document handed to clients.

    At most one of the structured variant fields is populated.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    id: Optional[str] = None
    user_id: Optional[str] = None
    designation: Optional[str] = None
    companies: Optional[str] = None
    round: Optional[Union[str, int]] = None
    interview_type: Optional[str] = None
    title: Optional[str] = None
    difficulty: Optional[str] = None
    dsa_problem: Optional[dict[str, Any]] = None
    machine_coding_problem: Optional[dict[str, Any]] = None
    system_design_problem: Optional[dict[str, Any]] = None
    theory_problem: Optional[dict[str, Any]] = None


class GenerateProblemsRequest(CamelModel):
    designation: str
    companies: str
    round: str
    interview_type: str = Field(default="coding", description="dsa | theory | coding | design | ...")


class SubmissionCreate(CamelModel):
    user_id: str
    designation: str
    feedback: str
    code: Optional[str] = None
    drawing_image: Optional[str] = None


class EvaluateSubmissionRequest(CamelModel):
    designation: str
    code: str
    drawing_image: Optional[str] = None


class MockProblemRequest(CamelModel):
    round_type: RoundType
    company_name: str
    role_level: str
    difficulty: Difficulty = Difficulty.medium
    save: bool = Field(default=False, description="Also store the problem in interview_problems.")


class MockEvaluationRequest(CamelModel):
    problem: MockInterviewProblem
    submission: MockInterviewSubmission
