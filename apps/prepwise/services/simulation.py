"""Turn cached interview insights into a timed, round-by-round simulation plan."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Mapping

from pydantic import ValidationError

from prepwise.core.exceptions import AIServiceError, InputValidationError, MalformedResponseError
from prepwise.core.utils import require_fields
from prepwise.schemas.insights import InterviewRound, SimulationPlan, SimulationRound
from prepwise.schemas.problems import Difficulty, MockInterviewProblem, RoundType

logger = logging.getLogger(__name__)

DEFAULT_TOTAL_MINUTES = 120
MINUTES_PER_PROBLEM = 20
MIN_PROBLEMS_PER_ROUND = 2

_DURATION_RE = re.compile(r"(\d+)-(\d+)\s*(hours?|minutes?)", re.IGNORECASE)

_ROUND_KEYWORDS: tuple[tuple[RoundType, tuple[str, ...], tuple[str, ...]], ...] = (
    (RoundType.dsa, ("dsa", "algorithm"), ("algorithm", "data structure")),
    (RoundType.machine_coding, ("coding", "machine"), ("react", "component")),
    (RoundType.system_design, ("design", "system"), ("architecture", "design")),
)


def determine_round_type(round: InterviewRound | Mapping[str, Any]) -> RoundType:
    """Classify a round by keywords in its name, then its focus areas."""
    if isinstance(round, InterviewRound):
        name, focus_areas = round.name, round.focus_areas
    else:
        name, focus_areas = str(round.get("name") or ""), round.get("focusAreas") or []

    name = name.lower()
    focus = [str(area).lower() for area in focus_areas]
    for round_type, name_words, focus_words in _ROUND_KEYWORDS:
        if any(w in name for w in name_words):
            return round_type
        if any(w in area for area in focus for w in focus_words):
            return round_type
    return RoundType.theory_and_debugging


def parse_duration_minutes(text: str | None, default: int) -> int:
    """Upper bound of a ``"<a>-<b> hours|minutes"`` range, in minutes."""
    match = _DURATION_RE.search(text or "")
    if not match:
        return default
    value = int(match.group(2))
    if match.group(3).lower().startswith("hour"):
        value *= 60
    return value


def calculate_time_distribution(total_minutes: int, count: int) -> list[int]:
    """Split `total_minutes` evenly over `count` problems.

    The remainder goes one minute at a time to the first problems, so the parts
    always sum to the total.
    """
    if count <= 0:
        return []
    base, remainder = divmod(max(total_minutes, 0), count)
    return [base + (1 if idx < remainder else 0) for idx in range(count)]


def problems_per_round(round_minutes: int) -> int:
    return max(MIN_PROBLEMS_PER_ROUND, round_minutes // MINUTES_PER_PROBLEM)


def round_difficulty(round: InterviewRound) -> Difficulty:
    try:
        return Difficulty((round.difficulty or "").strip().lower())
    except ValueError:
        return Difficulty.medium


def build_simulation_plan(
    insights: Mapping[str, Any],
    company_name: str,
    role_level: str,
    starting_round: int = 1,
) -> SimulationPlan:
    require_fields(companyName=company_name, roleLevel=role_level)

    data = insights.get("data", insights) if isinstance(insights, Mapping) else None
    rounds = data.get("rounds") if isinstance(data, Mapping) else None
    estimated = data.get("estimatedDuration") if isinstance(data, Mapping) else None
    if not isinstance(rounds, list) or not rounds or not estimated:
        raise InputValidationError("Invalid insights data: missing rounds or estimated duration")

    try:
        parsed = [InterviewRound.model_validate(r) for r in rounds]
    except ValidationError as exc:
        raise InputValidationError(
            "Invalid insights data: malformed round",
            details=exc.errors(include_url=False, include_context=False),
        ) from exc

    total_minutes = parse_duration_minutes(str(estimated), DEFAULT_TOTAL_MINUTES)
    round_minutes = total_minutes // len(parsed)
    starting_round = min(max(starting_round, 1), len(parsed))
    plan_rounds = [
        SimulationRound(
            round_number=number,
            round=r,
            round_type=determine_round_type(r),
            total_time=round_minutes,
        )
        for number, r in enumerate(parsed, start=1)
    ]
    logger.info(
        "Planned %d simulation round(s) for %s/%s", len(plan_rounds), company_name, role_level
    )
    return SimulationPlan(
        company_name=company_name,
        role_level=role_level,
        starting_round=starting_round,
        total_duration=total_minutes,
        rounds=plan_rounds,
    )


@dataclass
class SimulationService:
    """Builds a simulation plan and fills every round with generated problems."""

    generator: Any = None

    def __post_init__(self) -> None:
        if self.generator is None:
            from prepwise.core.dependencies import get_problem_generation_service

            self.generator = get_problem_generation_service()

    def _round_problems(
        self, plan_round: SimulationRound, company_name: str, role_level: str
    ) -> list[MockInterviewProblem]:
        count = problems_per_round(plan_round.total_time)
        difficulty = round_difficulty(plan_round.round)
        minutes = calculate_time_distribution(plan_round.total_time, count)

        problems: list[MockInterviewProblem] = []
        for index, problem_minutes in enumerate(minutes, start=1):
            try:
                problem = self.generator.generate_mock_interview_problem(
                    plan_round.round_type, company_name, role_level, difficulty
                )
            except (AIServiceError, MalformedResponseError) as exc:
                logger.warning(
                    "Skipping problem %d of round %d: %s", index, plan_round.round_number, exc
                )
                continue
            problems.append(
                problem.model_copy(
                    update={
                        "id": f"round_{plan_round.round_number}_problem_{index}",
                        "estimated_time": f"{problem_minutes} minutes",
                    }
                )
            )
        return problems

    def generate_simulation(
        self,
        insights: Mapping[str, Any],
        company_name: str,
        role_level: str,
        starting_round: int = 1,
    ) -> SimulationPlan:
        plan = build_simulation_plan(insights, company_name, role_level, starting_round)
        for plan_round in plan.rounds:
            plan_round.problems = self._round_problems(plan_round, company_name, role_level)
        return plan
