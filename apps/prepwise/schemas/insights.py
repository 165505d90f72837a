from __future__ import annotations

from typing import Any, Optional

from pydantic import Field

from prepwise.schemas.problems import CamelModel, MockInterviewProblem, RoundType


class InterviewRound(CamelModel):
    """One round of a company's interview loop."""

    name: str
    description: str = ""
    sample_problems: list[str] = Field(default_factory=list)
    duration: str = ""
    focus_areas: list[str] = Field(default_factory=list)
    evaluation_criteria: list[str] = Field(default_factory=list)
    difficulty: str = "medium"
    tips: list[str] = Field(default_factory=list)


class InterviewInsightsData(CamelModel):
    total_rounds: int = Field(..., description="Number of rounds in the loop.")
    estimated_duration: str = Field(..., description="Overall duration, e.g. '4-5 hours'.")
    rounds: list[InterviewRound] = Field(default_factory=list)
    overall_tips: list[str] = Field(default_factory=list)
    company_specific_notes: str = ""


class InterviewInsightsRequest(CamelModel):
    company_name: Any = None
    role_level: Any = None


class InterviewInsightsResponse(CamelModel):
    """Cache entry as returned to callers; `data` is passed through unchanged."""

    company_name: str
    role_level: str
    data: dict[str, Any]
    updated_at: Optional[str] = None


class SimulationRound(CamelModel):
    round_number: int
    round: InterviewRound
    round_type: RoundType
    total_time: int = Field(..., description="Round duration in minutes.")
    problems: list[MockInterviewProblem] = Field(default_factory=list)


class SimulationPlan(CamelModel):
    company_name: str
    role_level: str
    starting_round: int = 1
    total_duration: int = Field(..., description="Whole loop duration in minutes.")
    rounds: list[SimulationRound] = Field(default_factory=list)


class SimulationPlanRequest(CamelModel):
    insights: dict[str, Any]
    company_name: str
    role_level: str
    starting_round: int = 1
