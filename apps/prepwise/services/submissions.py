from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from pymongo import DESCENDING
from pymongo.errors import (
    AutoReconnect,
    ConnectionFailure,
    OperationFailure,
    PyMongoError,
    ServerSelectionTimeoutError,
)

from prepwise.core.exceptions import PersistenceError
from prepwise.core.settings import settings
from prepwise.core.utils import iso, require_fields, utcnow
from prepwise.schemas.problems import SubmissionCreate

logger = logging.getLogger(__name__)

_UNAUTHORIZED_CODE = 13


def classify_persistence_error(exc: PyMongoError, action: str) -> PersistenceError:
    """Map a pymongo failure onto a user-facing `PersistenceError`."""
    message = str(exc)
    lowered = message.lower()

    if isinstance(exc, OperationFailure) and (
        exc.code == _UNAUTHORIZED_CODE
        or "unauthorized" in lowered
        or "not authorized" in lowered
    ):
        return PersistenceError(
            f"You do not have permission to {action}",
            code="permission_denied",
            status_code=403,
        )
    if isinstance(exc, (ServerSelectionTimeoutError, AutoReconnect, ConnectionFailure)):
        return PersistenceError(
            f"Network error: Unable to {action}. Please check your connection.",
            code="network_error",
            status_code=503,
        )
    return PersistenceError(f"Database error: {message}")


@dataclass
class SubmissionService:
    """Persist evaluated submissions.

    Unlike the insights cache, writes here are required: failures surface to the
    caller as a classified `PersistenceError`.
    """

    database: Any | None = None
    collection_name: str = settings.submissions_collection

    def __post_init__(self) -> None:
        if self.database is None:
            from prepwise.core.dependencies import get_mongo_database

            self.database = get_mongo_database()
        self._collection = self.database.get_collection(self.collection_name)

    def ensure_indexes(self) -> None:
        try:
            self._collection.create_index(
                [("userId", 1), ("createdAt", DESCENDING)], name="user_created"
            )
        except PyMongoError as exc:
            logger.warning("Could not create submission indexes: %s", exc)

    def save_submission(
        self, user_id: str, problem_id: str, submission: SubmissionCreate
    ) -> str:
        require_fields(
            userId=user_id,
            problemId=problem_id,
            designation=submission.designation,
            feedback=submission.feedback,
        )
        doc = {
            **submission.model_dump(by_alias=True, exclude_none=True, exclude={"user_id"}),
            "userId": user_id,
            "problemId": problem_id,
            "createdAt": utcnow(),
        }
        try:
            result = self._collection.insert_one(doc)
        except PyMongoError as exc:
            logger.error("Failed to save submission for %s/%s: %s", user_id, problem_id, exc)
            raise classify_persistence_error(exc, "save submissions") from exc
        return str(result.inserted_id)

    def list_for_user(self, user_id: str) -> list[dict[str, Any]]:
        """A user's submissions, newest first."""
        require_fields(userId=user_id)
        try:
            docs = list(self._collection.find({"userId": user_id}).sort("createdAt", DESCENDING))
        except PyMongoError as exc:
            raise classify_persistence_error(exc, "fetch submissions") from exc

        out: list[dict[str, Any]] = []
        for doc in docs:
            item = {k: v for k, v in doc.items() if k != "_id"}
            item["id"] = str(doc.get("_id"))
            item["createdAt"] = iso(doc.get("createdAt"))
            out.append(item)
        return out
