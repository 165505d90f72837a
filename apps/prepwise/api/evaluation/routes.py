from __future__ import annotations

from fastapi import APIRouter, Depends
from starlette.concurrency import run_in_threadpool

from prepwise.core.dependencies import get_evaluation_service
from prepwise.schemas.problems import EvaluateSubmissionRequest
from prepwise.services.evaluation import EvaluationService

router = APIRouter(prefix="/api/evaluation", tags=["evaluation"])


@router.post("/evaluate-submission")
async def evaluate_submission(
    payload: EvaluateSubmissionRequest,
    service: EvaluationService = Depends(get_evaluation_service),
) -> dict[str, str]:
    feedback = await run_in_threadpool(
        service.evaluate_submission,
        payload.designation,
        payload.code,
        payload.drawing_image,
    )
    return {"feedback": feedback}
