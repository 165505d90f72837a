import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Environment is loaded by Pydantic Settings (see prepwise.core.settings).
from prepwise.api import register_routes
from prepwise.core.dependencies import (
    get_interview_insights_service,
    get_submission_service,
)
from prepwise.core.exceptions import register_exception_handlers
from prepwise.core.logging import setup_logging
from prepwise.core.settings import settings

# Initialize logging early so all modules inherit the handlers/level
setup_logging()

app = FastAPI(title="Prepwise API")
register_exception_handlers(app)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_routes(app)

logger = logging.getLogger(__name__)
logger.info("Prepwise API initialized")


@app.on_event("startup")
def _ensure_indexes_on_startup() -> None:
    """Ensure Mongo indexes are created once at boot.

    Best-effort: logs a warning on failure but does not block app startup.
    """
    try:
        get_interview_insights_service().ensure_indexes()
        logger.info("InterviewInsights indexes ensured")
    except Exception as exc:  # pragma: no cover - external dependency
        logger.warning("Failed to ensure InterviewInsights indexes: %s", exc)

    try:
        get_submission_service().ensure_indexes()
        logger.info("Submission indexes ensured")
    except Exception as exc:  # pragma: no cover - external dependency
        logger.warning("Failed to ensure Submission indexes: %s", exc)


def run() -> None:
    import uvicorn

    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
