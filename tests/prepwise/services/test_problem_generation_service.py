from __future__ import annotations

import json

import pytest
from prepwise.connectors.gemini_connector import GeminiClient
from prepwise.core.exceptions import InputValidationError, MalformedResponseError
from prepwise.schemas.problems import (
    GenerationSource,
    MachineCodingProblem,
    ProblemKind,
    RoundType,
)
from prepwise.services.fallbacks import fallback_mock_problem, fallback_problem_data
from prepwise.services.problem_generation import ProblemGenerationService
from prepwise.services.problem_validation import is_valid_problem_schema


class _FakeGemini:
    def __init__(self, replies: list[str] | None = None, *, configured: bool = True) -> None:
        self.is_configured = configured
        self._replies = list(replies or [])
        self.prompts: list[str] = []

    build_text_request = staticmethod(GeminiClient.build_text_request)

    def generate_text(self, body):  # type: ignore[no-untyped-def]
        self.prompts.append(body["contents"][0]["parts"][0]["text"])
        return self._replies.pop(0)


def test_offline_mode_returns_sample_without_network_call():
    gemini = _FakeGemini(configured=False)
    service = ProblemGenerationService(gemini=gemini)

    result = service.generate_interview_questions("Frontend Engineer", "Acme", "1", "dsa")

    assert result.source == GenerationSource.offline
    assert [p.kind for p in result.payloads] == ["dsa"]
    assert gemini.prompts == []
    legacy = result.as_legacy()
    assert json.loads(legacy["dsaProblem"])["title"] == "Two Sum with Sorted Array"
    assert legacy["machineCodingProblem"] == ""


def test_offline_mode_with_real_client_never_opens_a_socket():
    # The conftest blocks sockets; an unconfigured client must not need one.
    service = ProblemGenerationService(gemini=GeminiClient(api_key=None))
    result = service.generate_interview_questions("SDE", "Acme", "1", "coding")
    assert result.source == GenerationSource.offline
    assert is_valid_problem_schema(
        {k: json.loads(v) for k, v in result.as_legacy().items() if v}
    )


def test_valid_ai_output_is_decoded():
    mc = fallback_problem_data(ProblemKind.machine_coding, "hard")
    sd = fallback_problem_data(ProblemKind.system_design, "hard")
    reply = "Sure!\n" + json.dumps({"machineCodingProblem": mc, "systemDesignProblem": sd})
    gemini = _FakeGemini([reply])

    result = ProblemGenerationService(gemini=gemini).generate_interview_questions(
        "SDE", "Acme", "1", "coding"
    )

    assert result.source == GenerationSource.ai
    assert isinstance(result.payload("machine_coding"), MachineCodingProblem)
    assert result.payload("system_design").difficulty == "hard"
    assert "Acme" in gemini.prompts[0]


def test_invalid_ai_output_falls_back():
    reply = json.dumps({"dsaProblem": {"title": "x"}})
    result = ProblemGenerationService(gemini=_FakeGemini([reply])).generate_interview_questions(
        "SDE", "Acme", "1", "dsa"
    )
    assert result.source == GenerationSource.fallback
    assert result.payload("dsa").title == "Two Sum with Sorted Array"


def test_missing_requested_variant_falls_back():
    reply = json.dumps(
        {"machineCodingProblem": fallback_problem_data(ProblemKind.machine_coding, "easy")}
    )
    result = ProblemGenerationService(gemini=_FakeGemini([reply])).generate_interview_questions(
        "SDE", "Acme", "1", "design"
    )
    assert result.source == GenerationSource.fallback
    assert {p.kind for p in result.payloads} == {"machine_coding", "system_design"}


def test_malformed_ai_output_propagates():
    service = ProblemGenerationService(gemini=_FakeGemini(["I cannot help with that."]))
    with pytest.raises(MalformedResponseError):
        service.generate_interview_questions("SDE", "Acme", "1", "dsa")


def test_missing_fields_rejected_before_any_call():
    gemini = _FakeGemini(["{}"])
    with pytest.raises(InputValidationError) as excinfo:
        ProblemGenerationService(gemini=gemini).generate_interview_questions("", "Acme", " ")
    assert excinfo.value.details == {"missing": ["designation", "round"]}
    assert gemini.prompts == []


def test_mock_problem_offline_returns_fallback():
    problem = ProblemGenerationService(
        gemini=_FakeGemini(configured=False)
    ).generate_mock_interview_problem("machine_coding", "Acme", "Senior", "easy")
    assert problem.id == "fallback_machine_coding_easy"
    assert problem.company_name == "Acme"


def test_mock_problem_from_ai_gets_id_and_context():
    data = fallback_mock_problem(RoundType.dsa, "hard").model_dump(
        mode="json", by_alias=True, exclude={"id", "company_name", "role_level"}
    )
    data["title"] = "Merge Intervals"
    gemini = _FakeGemini([json.dumps(data)])

    problem = ProblemGenerationService(gemini=gemini).generate_mock_interview_problem(
        RoundType.dsa, "Acme", "L5", "hard"
    )

    assert problem.title == "Merge Intervals"
    assert problem.id.startswith("dsa_")
    assert problem.company_name == "Acme"
    assert problem.role_level == "L5"


def test_mock_problem_missing_type_fields_falls_back():
    gemini = _FakeGemini(
        [json.dumps({"title": "t", "description": "d", "difficulty": "easy", "estimatedTime": "5"})]
    )
    problem = ProblemGenerationService(gemini=gemini).generate_mock_interview_problem(
        "system_design", "Acme", "L5", "easy"
    )
    assert problem.id == "fallback_system_design_easy"
