from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from starlette.concurrency import run_in_threadpool

from prepwise.core.dependencies import (
    get_evaluation_service,
    get_interview_insights_service,
    get_problem_generation_service,
    get_problem_store,
    get_simulation_service,
)
from prepwise.schemas.insights import (
    InterviewInsightsRequest,
    InterviewInsightsResponse,
    SimulationPlan,
    SimulationPlanRequest,
)
from prepwise.schemas.problems import (
    MockEvaluationRequest,
    MockInterviewEvaluation,
    MockInterviewProblem,
    MockProblemRequest,
)
from prepwise.services.evaluation import EvaluationService
from prepwise.services.interview_insights import InterviewInsightsService
from prepwise.services.problem_generation import ProblemGenerationService
from prepwise.services.problem_store import ProblemStore
from prepwise.services.simulation import SimulationService

logger = logging.getLogger(__name__)

simulation_router = APIRouter(prefix="/api/interview-simulation", tags=["interview-simulation"])
insights_router = APIRouter(prefix="/api/interview-insights", tags=["interview-insights"])


@simulation_router.post(
    "/generate-problem", response_model=MockInterviewProblem, response_model_by_alias=True
)
async def generate_problem(
    payload: MockProblemRequest,
    service: ProblemGenerationService = Depends(get_problem_generation_service),
    store: ProblemStore = Depends(get_problem_store),
) -> MockInterviewProblem:
    problem = await run_in_threadpool(
        service.generate_mock_interview_problem,
        payload.round_type,
        payload.company_name,
        payload.role_level,
        payload.difficulty,
    )
    if payload.save:
        stored_id = await run_in_threadpool(
            store.save_problem, problem, company=payload.company_name, role=payload.role_level
        )
        logger.info("Stored generated %s problem as %s", problem.type.value, stored_id)
    return problem


@simulation_router.post(
    "/evaluate-submission", response_model=MockInterviewEvaluation, response_model_by_alias=True
)
async def evaluate_submission(
    payload: MockEvaluationRequest,
    service: EvaluationService = Depends(get_evaluation_service),
) -> MockInterviewEvaluation:
    return await run_in_threadpool(
        service.evaluate_mock_interview_submission, payload.problem, payload.submission
    )


@simulation_router.post("/plan", response_model=SimulationPlan, response_model_by_alias=True)
async def plan_simulation(
    payload: SimulationPlanRequest,
    service: SimulationService = Depends(get_simulation_service),
) -> SimulationPlan:
    return await run_in_threadpool(
        service.generate_simulation,
        payload.insights,
        payload.company_name,
        payload.role_level,
        starting_round=payload.starting_round,
    )


@insights_router.post("", response_model=InterviewInsightsResponse, response_model_by_alias=True)
async def interview_insights(
    payload: InterviewInsightsRequest,
    refresh: bool = Query(False, description="Regenerate and overwrite the cached entry"),
    service: InterviewInsightsService = Depends(get_interview_insights_service),
) -> InterviewInsightsResponse:
    company, role = payload.company_name, payload.role_level
    if company is None or role is None:
        raise HTTPException(
            status_code=400,
            detail="Missing required fields: companyName and roleLevel are required",
        )
    if not isinstance(company, str) or not isinstance(role, str):
        raise HTTPException(
            status_code=400,
            detail="Invalid field types: companyName and roleLevel must be strings",
        )
    company, role = company.strip(), role.strip()
    if not company or not role:
        raise HTTPException(
            status_code=400, detail="Empty fields: companyName and roleLevel cannot be empty"
        )

    if refresh:
        return await run_in_threadpool(service.refresh_insights, company, role)
    return await run_in_threadpool(service.get_insights, company, role)
