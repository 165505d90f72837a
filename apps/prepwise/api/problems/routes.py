from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, status
from starlette.concurrency import run_in_threadpool

from prepwise.core.dependencies import (
    get_problem_generation_service,
    get_problem_store,
    get_submission_service,
)
from prepwise.schemas.problems import GenerateProblemsRequest, ParsedProblemData, SubmissionCreate
from prepwise.services.problem_generation import ProblemGenerationService
from prepwise.services.problem_store import ProblemStore
from prepwise.services.response_parser import parse_problem_document
from prepwise.services.submissions import SubmissionService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/problems", tags=["problems"])


@router.post("/generate")
async def generate_problems(
    payload: GenerateProblemsRequest,
    service: ProblemGenerationService = Depends(get_problem_generation_service),
) -> dict[str, Any]:
    """Generate interview problems; variant fields are JSON strings, empty when absent."""
    result = await run_in_threadpool(
        service.generate_interview_questions,
        payload.designation,
        payload.companies,
        payload.round,
        payload.interview_type,
    )
    return {
        "interviewType": result.interview_type,
        **result.as_legacy(),
        "source": result.source.value,
    }


@router.post("/parse", response_model=ParsedProblemData, response_model_by_alias=True)
def parse_problem(document: dict[str, Any] = Body(...)) -> ParsedProblemData:
    """Normalize a stored problem document (unified or legacy shape)."""
    return parse_problem_document(document)


@router.get("/{problem_id}", response_model=ParsedProblemData, response_model_by_alias=True)
async def get_problem(
    problem_id: str,
    store: ProblemStore = Depends(get_problem_store),
) -> ParsedProblemData:
    problem = await run_in_threadpool(store.get_problem, problem_id)
    if problem is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Problem not found")
    return problem


@router.post("/{problem_id}/submissions", status_code=status.HTTP_201_CREATED)
async def save_submission(
    problem_id: str,
    payload: SubmissionCreate,
    service: SubmissionService = Depends(get_submission_service),
) -> dict[str, str]:
    submission_id = await run_in_threadpool(
        service.save_submission, payload.user_id, problem_id, payload
    )
    logger.info("Saved submission %s for problem %s", submission_id, problem_id)
    return {"id": submission_id}
