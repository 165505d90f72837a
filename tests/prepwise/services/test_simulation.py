from __future__ import annotations

import pytest
from prepwise.core.exceptions import AIServiceError, InputValidationError
from prepwise.schemas.problems import Difficulty, RoundType
from prepwise.services.fallbacks import fallback_insights
from prepwise.services.problem_generation import ProblemGenerationService
from prepwise.services.simulation import (
    SimulationService,
    build_simulation_plan,
    calculate_time_distribution,
    determine_round_type,
    parse_duration_minutes,
    problems_per_round,
)


class _OfflineGemini:
    is_configured = False


class _FakeGenerator:
    def __init__(self, fail_on: set[int] | None = None) -> None:
        self.calls: list[tuple] = []
        self.fail_on = fail_on or set()
        self._offline = ProblemGenerationService(gemini=_OfflineGemini())

    def generate_mock_interview_problem(  # noqa: ANN001
        self, round_type, company, role, difficulty
    ):
        self.calls.append((round_type, company, role, difficulty))
        if len(self.calls) in self.fail_on:
            raise AIServiceError("AI service is temporarily unavailable")
        return self._offline.generate_mock_interview_problem(round_type, company, role, difficulty)


@pytest.mark.parametrize(
    ("round", "expected"),
    [
        ({"name": "DSA Round"}, RoundType.dsa),
        ({"name": "Onsite 1", "focusAreas": ["Data Structures"]}, RoundType.dsa),
        ({"name": "Machine Coding"}, RoundType.machine_coding),
        ({"name": "Frontend Practical", "focusAreas": ["React hooks"]}, RoundType.machine_coding),
        ({"name": "Frontend System Design"}, RoundType.system_design),
        ({"name": "Deep dive", "focusAreas": ["Architecture"]}, RoundType.system_design),
        ({"name": "Behavioral/Cultural Fit"}, RoundType.theory_and_debugging),
        ({"name": "JavaScript/TypeScript Theory"}, RoundType.theory_and_debugging),
    ],
)
def test_determine_round_type(round, expected):
    assert determine_round_type(round) == expected


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("4-5 hours", 300),
        ("45-60 minutes", 60),
        ("1-2 Hours", 120),
        ("about an hour", 30),
        (None, 30),
    ],
)
def test_parse_duration_minutes(text, expected):
    assert parse_duration_minutes(text, 30) == expected


def test_time_distribution_is_even_and_sums_to_total():
    assert calculate_time_distribution(60, 3) == [20, 20, 20]
    assert calculate_time_distribution(50, 3) == [17, 17, 16]
    assert sum(calculate_time_distribution(97, 4)) == 97
    assert calculate_time_distribution(60, 0) == []


def test_plan_from_sample_insights():
    insights = {"companyName": "Acme", "roleLevel": "L5", "data": fallback_insights("Acme", "L5")}

    plan = build_simulation_plan(insights, "Acme", "L5", starting_round=2)

    assert plan.total_duration == 300
    assert plan.starting_round == 2
    assert [r.round_type for r in plan.rounds] == [
        RoundType.dsa,
        RoundType.machine_coding,
        RoundType.system_design,
        RoundType.theory_and_debugging,
        RoundType.theory_and_debugging,
    ]
    assert [r.round_number for r in plan.rounds] == [1, 2, 3, 4, 5]
    assert [r.total_time for r in plan.rounds] == [60] * 5
    assert all(r.problems == [] for r in plan.rounds)


def test_plan_accepts_bare_insights_data_and_clamps_starting_round():
    plan = build_simulation_plan(fallback_insights("Acme", "L5"), "Acme", "L5", starting_round=9)
    assert plan.starting_round == 5


@pytest.mark.parametrize(
    "insights",
    [{}, {"data": {"rounds": []}}, {"data": {"rounds": [{"name": "x"}]}}, {"data": None}],
)
def test_plan_rejects_incomplete_insights(insights):
    with pytest.raises(InputValidationError, match="missing rounds or estimated duration"):
        build_simulation_plan(insights, "Acme", "L5")


@pytest.mark.parametrize(("minutes", "count"), [(0, 2), (39, 2), (60, 3), (100, 5)])
def test_problems_per_round(minutes, count):
    assert problems_per_round(minutes) == count


def test_simulation_fills_every_round_with_timed_problems():
    generator = _FakeGenerator()
    service = SimulationService(generator=generator)

    plan = service.generate_simulation(fallback_insights("Acme", "Senior"), "Acme", "Senior")

    assert [len(r.problems) for r in plan.rounds] == [3, 3, 3, 3, 3]
    first = plan.rounds[0].problems
    assert [p.id for p in first] == ["round_1_problem_1", "round_1_problem_2", "round_1_problem_3"]
    assert {p.estimated_time for p in first} == {"20 minutes"}
    assert all(p.type == RoundType.dsa for p in first)
    assert first[0].company_name == "Acme"
    assert plan.rounds[2].problems[0].type == RoundType.system_design
    assert generator.calls[6] == (RoundType.system_design, "Acme", "Senior", Difficulty.hard)
    assert len(generator.calls) == 15


def test_simulation_splits_uneven_round_time_across_problems():
    insights = {
        "data": {
            "estimatedDuration": "1-50 minutes",
            "rounds": [{"name": "DSA Round", "difficulty": "Unknown"}],
        }
    }
    generator = _FakeGenerator()
    plan = SimulationService(generator=generator).generate_simulation(insights, "Acme", "L4")

    problems = plan.rounds[0].problems
    assert [p.estimated_time for p in problems] == ["25 minutes", "25 minutes"]
    assert generator.calls[0][3] == Difficulty.medium


def test_simulation_skips_problems_that_fail_to_generate():
    insights = {"data": {"estimatedDuration": "1-1 hours", "rounds": [{"name": "DSA Round"}]}}
    generator = _FakeGenerator(fail_on={2})

    plan = SimulationService(generator=generator).generate_simulation(insights, "Acme", "L4")

    assert [p.id for p in plan.rounds[0].problems] == ["round_1_problem_1", "round_1_problem_3"]
