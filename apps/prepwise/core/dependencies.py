"""Central dependency providers (FastAPI routes and scripts).

These helpers keep heavy clients (Mongo, Gemini) process-scoped and reusable,
avoiding per-request connection creation and enabling test-time cache
clearing/overrides.
"""

from __future__ import annotations

from functools import lru_cache
from typing import TYPE_CHECKING

from pymongo.database import Database

from prepwise.core.settings import settings

if TYPE_CHECKING:
    from prepwise.connectors.gemini_connector import GeminiClient
    from prepwise.connectors.mongo_connector import MongoConnector
    from prepwise.services.evaluation import EvaluationService
    from prepwise.services.interview_insights import InterviewInsightsService
    from prepwise.services.problem_generation import ProblemGenerationService
    from prepwise.services.problem_store import ProblemStore
    from prepwise.services.simulation import SimulationService
    from prepwise.services.submissions import SubmissionService


@lru_cache(maxsize=1)
def get_mongo_connector() -> MongoConnector:
    from prepwise.connectors.mongo_connector import MongoConnector

    return MongoConnector()


@lru_cache(maxsize=1)
def get_mongo_database() -> Database:
    return get_mongo_connector().database


@lru_cache(maxsize=1)
def get_gemini_client() -> GeminiClient:
    from prepwise.connectors.gemini_connector import GeminiClient

    return GeminiClient(api_key=settings.gemini_key_value)


@lru_cache(maxsize=1)
def get_problem_generation_service() -> ProblemGenerationService:
    from prepwise.services.problem_generation import ProblemGenerationService

    return ProblemGenerationService(gemini=get_gemini_client())


@lru_cache(maxsize=1)
def get_evaluation_service() -> EvaluationService:
    from prepwise.services.evaluation import EvaluationService

    return EvaluationService(gemini=get_gemini_client())


@lru_cache(maxsize=1)
def get_interview_insights_service() -> InterviewInsightsService:
    from prepwise.services.interview_insights import InterviewInsightsService

    return InterviewInsightsService(
        database=get_mongo_database(),
        collection_name=settings.interview_insights_collection,
        gemini=get_gemini_client(),
    )


@lru_cache(maxsize=1)
def get_submission_service() -> SubmissionService:
    from prepwise.services.submissions import SubmissionService

    return SubmissionService(
        database=get_mongo_database(), collection_name=settings.submissions_collection
    )


@lru_cache(maxsize=1)
def get_problem_store() -> ProblemStore:
    from prepwise.services.problem_store import ProblemStore

    return ProblemStore(
        database=get_mongo_database(), collection_name=settings.interview_problems_collection
    )


@lru_cache(maxsize=1)
def get_simulation_service() -> SimulationService:
    from prepwise.services.simulation import SimulationService

    return SimulationService(generator=get_problem_generation_service())
