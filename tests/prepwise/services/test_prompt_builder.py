from __future__ import annotations

import pytest
from prepwise.core.exceptions import InputValidationError
from prepwise.schemas.problems import MockInterviewSubmission, ProblemKind, RoundType
from prepwise.services.fallbacks import fallback_mock_problem
from prepwise.services.prompt_builder import (
    InterviewTemplate,
    build_insights_prompt,
    build_interview_prompt,
    build_mock_evaluation_request,
    build_mock_problem_prompt,
    build_submission_evaluation_request,
    experience_level,
    select_interview_template,
)


@pytest.mark.parametrize(
    ("interview_type", "template"),
    [
        ("dsa", InterviewTemplate.dsa),
        ("DSA ", InterviewTemplate.dsa),
        ("theory", InterviewTemplate.theory),
        ("js_concepts", InterviewTemplate.theory),
        ("coding", InterviewTemplate.combined),
        ("design", InterviewTemplate.combined),
        (None, InterviewTemplate.combined),
        ("behavioral", InterviewTemplate.general),
    ],
)
def test_template_selection(interview_type, template):
    assert select_interview_template(interview_type) == template


def test_dsa_prompt_embeds_schema_and_context():
    prompt = build_interview_prompt("Frontend Engineer", "Acme, Globex", "2", "dsa")
    assert prompt.kinds == [ProblemKind.dsa]
    assert "Frontend Engineer" in prompt.text
    assert "Acme, Globex" in prompt.text
    assert '"dsaProblem"' in prompt.text
    assert '"problemStatement"' in prompt.text
    assert '"machineCodingProblem"' not in prompt.text


def test_combined_prompt_asks_for_both_variants():
    prompt = build_interview_prompt("SDE2", "Acme", "1", "coding")
    assert prompt.kinds == [ProblemKind.machine_coding, ProblemKind.system_design]
    assert '"machineCodingProblem"' in prompt.text
    assert '"systemDesignProblem"' in prompt.text


def test_general_prompt_names_the_interview_type():
    prompt = build_interview_prompt("SDE2", "Acme", "3", "behavioral")
    assert prompt.template == InterviewTemplate.general
    assert "behavioral" in prompt.text
    assert '"theoryProblem"' in prompt.text


def test_experience_level_from_role():
    assert experience_level("Senior Frontend Engineer") == "senior"
    assert experience_level("junior dev") == "junior"
    assert experience_level("SDE2") == "mid-level"


def test_mock_problem_prompt_leaves_out_server_assigned_fields():
    text = build_mock_problem_prompt(RoundType.system_design, "Acme", "Senior SDE", "hard")
    assert "Acme" in text
    assert "senior" in text
    assert '"functionalRequirements"' in text
    assert '"companyName"' not in text
    assert '"id"' not in text


def test_submission_evaluation_picks_template_by_modality():
    combined = build_submission_evaluation_request("SDE", "const x = 1;", "aW1n")
    assert combined.template == "combined"
    parts = combined.body["contents"][0]["parts"]
    assert parts[1] == {"inlineData": {"mimeType": "image/png", "data": "aW1n"}}

    design = build_submission_evaluation_request("SDE", None, "aW1n")
    assert design.template == "design"

    code = build_submission_evaluation_request("SDE", "function f() { return {}; }")
    assert code.template == "code"
    assert "function f() { return {}; }" in code.text
    assert len(code.body["contents"][0]["parts"]) == 1

    dsa = build_submission_evaluation_request("SDE", "Problem Statement: two sum\n...")
    assert dsa.template == "dsa"


def test_submission_evaluation_requires_designation_and_content():
    with pytest.raises(InputValidationError, match="Designation is required"):
        build_submission_evaluation_request("  ", "code")
    with pytest.raises(InputValidationError, match="No code or design provided"):
        build_submission_evaluation_request("SDE", "  ", None)


def test_mock_evaluation_attaches_image_only_for_system_design():
    submission = MockInterviewSubmission(code="x", drawing_image="aW1n")

    design = build_mock_evaluation_request(fallback_mock_problem(RoundType.system_design), submission)
    assert len(design.body["contents"][0]["parts"]) == 2
    assert "[Image provided]" in design.text

    dsa = build_mock_evaluation_request(fallback_mock_problem(RoundType.dsa), submission)
    assert len(dsa.body["contents"][0]["parts"]) == 1
    assert "fallback_dsa_medium" in dsa.text


def test_insights_prompt_mentions_company_and_role():
    text = build_insights_prompt("Acme", "Staff Engineer")
    assert "Acme" in text
    assert "Staff Engineer" in text
    assert '"rounds"' in text
