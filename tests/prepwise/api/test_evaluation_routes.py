from __future__ import annotations

from fastapi import FastAPI
from fastapi.testclient import TestClient
from prepwise.api.evaluation import router
from prepwise.core.dependencies import get_evaluation_service
from prepwise.core.exceptions import register_exception_handlers
from prepwise.services.evaluation import EvaluationService
from prepwise.services.fallbacks import OFFLINE_FEEDBACK


class _OfflineGemini:
    is_configured = False


def _create_app() -> FastAPI:
    app = FastAPI()
    register_exception_handlers(app)
    app.include_router(router)
    app.dependency_overrides[get_evaluation_service] = lambda: EvaluationService(
        gemini=_OfflineGemini()
    )
    return app


def test_evaluate_submission_offline_feedback():
    client = TestClient(_create_app())
    resp = client.post(
        "/api/evaluation/evaluate-submission",
        json={"designation": "Frontend Engineer", "code": "const a = 1;"},
    )
    assert resp.status_code == 200
    assert resp.json() == {"feedback": OFFLINE_FEEDBACK}


def test_evaluate_submission_requires_code():
    client = TestClient(_create_app())
    resp = client.post("/api/evaluation/evaluate-submission", json={"designation": "SDE"})
    assert resp.status_code == 422
    assert resp.json()["code"] == "validation_error"


def test_evaluate_submission_rejects_blank_designation():
    client = TestClient(_create_app())
    resp = client.post(
        "/api/evaluation/evaluate-submission", json={"designation": "  ", "code": "x"}
    )
    assert resp.status_code == 422
    assert resp.json()["error"] == "Designation is required for evaluation"
