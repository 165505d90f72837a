from __future__ import annotations

import pytest
from prepwise.schemas.problems import (
    Difficulty,
    MockInterviewSubmission,
    ProblemKind,
    RoundType,
)
from prepwise.services.fallbacks import (
    OFFLINE_FEEDBACK,
    fallback_envelope,
    fallback_evaluation,
    fallback_feedback,
    fallback_insights,
    fallback_mock_problem,
    fallback_problem,
    fallback_problem_data,
)
from prepwise.services.problem_validation import (
    is_valid_problem_schema,
    validate_insights,
    validate_problem,
)


@pytest.mark.parametrize("kind", list(ProblemKind))
@pytest.mark.parametrize("difficulty", list(Difficulty))
def test_fallback_payload_satisfies_its_own_check(kind, difficulty):
    data = fallback_problem_data(kind, difficulty)
    assert validate_problem(kind, data).ok is True
    assert data["difficulty"] == difficulty.value


def test_fallback_is_deterministic_and_not_shared():
    first = fallback_problem_data(ProblemKind.dsa, "easy")
    first["title"] = "mutated"
    second = fallback_problem_data(ProblemKind.dsa, "easy")
    assert second["title"] == "Two Sum with Sorted Array"
    assert fallback_problem(ProblemKind.theory, "hard") == fallback_problem(ProblemKind.theory, "hard")


def test_estimated_time_scales_with_difficulty():
    easy = fallback_problem_data(ProblemKind.machine_coding, "easy")["estimatedTime"]
    hard = fallback_problem_data(ProblemKind.machine_coding, "hard")["estimatedTime"]
    assert easy != hard


def test_fallback_envelope_holds_each_requested_variant():
    envelope = fallback_envelope([ProblemKind.machine_coding, ProblemKind.system_design])
    assert set(envelope) == {"machineCodingProblem", "systemDesignProblem"}
    assert is_valid_problem_schema(envelope) is True
    assert set(fallback_envelope("dsa")) == {"dsaProblem"}


def test_fallback_mock_problem_ids_and_context():
    problem = fallback_mock_problem("system_design", "easy", company_name="Acme", role_level="L4")
    assert problem.id == "fallback_system_design_easy"
    assert problem.type == RoundType.system_design
    assert problem.company_name == "Acme"
    assert problem.role_level == "L4"


def test_fallback_evaluation_scores_by_content():
    problem = fallback_mock_problem(RoundType.dsa)

    answered = fallback_evaluation(problem, MockInterviewSubmission(code="return 1"))
    assert answered.score == 75
    assert answered.problem_id == problem.id
    assert answered.strengths

    empty = fallback_evaluation(problem, MockInterviewSubmission(code="   "))
    assert empty.score == 0
    assert empty.strengths == []


def test_fallback_evaluation_feedback_differs_per_round_type():
    submission = MockInterviewSubmission(answer="closures capture scope")
    feedback = {
        fallback_evaluation(fallback_mock_problem(rt), submission).feedback for rt in RoundType
    }
    assert len(feedback) == len(RoundType)


def test_fallback_feedback_text():
    assert fallback_feedback(has_code=True, has_image=False) == OFFLINE_FEEDBACK
    assert fallback_feedback(has_code=False, has_image=True) == OFFLINE_FEEDBACK
    assert fallback_feedback(has_code=False, has_image=False) != OFFLINE_FEEDBACK


def test_fallback_insights_shape():
    data = fallback_insights("Acme", "Senior")
    assert validate_insights(data).ok is True
    assert data["totalRounds"] == len(data["rounds"]) == 5
    assert data["estimatedDuration"] == "4-5 hours"
    assert "Acme" in data["companySpecificNotes"]
