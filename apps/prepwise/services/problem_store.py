from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from bson import ObjectId
from bson.errors import InvalidId
from pymongo.errors import PyMongoError

from prepwise.core.settings import settings
from prepwise.core.utils import require_fields, utcnow
from prepwise.schemas.problems import MockInterviewProblem, ParsedProblemData
from prepwise.services.response_parser import parse_problem_document, to_unified_doc
from prepwise.services.submissions import classify_persistence_error

logger = logging.getLogger(__name__)


def _id_filter(problem_id: str) -> dict[str, Any]:
    try:
        return {"_id": ObjectId(problem_id)}
    except (InvalidId, TypeError):
        return {"_id": problem_id}


@dataclass
class ProblemStore:
    """Read and write `interview_problems` documents.

    Reads accept both stored shapes (unified and legacy) and always hand back the
    normalized `ParsedProblemData`.
    """

    database: Any | None = None
    collection_name: str = settings.interview_problems_collection

    def __post_init__(self) -> None:
        if self.database is None:
            from prepwise.core.dependencies import get_mongo_database

            self.database = get_mongo_database()
        self._collection = self.database.get_collection(self.collection_name)

    def get_problem(self, problem_id: str) -> ParsedProblemData | None:
        require_fields(problemId=problem_id)
        try:
            doc = self._collection.find_one(_id_filter(problem_id))
        except PyMongoError as exc:
            raise classify_persistence_error(exc, "fetch problems") from exc
        if doc is None:
            logger.info("Problem %s not found", problem_id)
            return None
        return parse_problem_document(doc)

    def save_problem(
        self, problem: MockInterviewProblem, *, company: str = "", role: str = ""
    ) -> str:
        """Store a generated problem in the unified shape and return its id."""
        doc = to_unified_doc(problem, company=company, role=role).model_dump(
            mode="json", by_alias=True
        )
        doc["createdAt"] = utcnow()
        try:
            result = self._collection.insert_one(doc)
        except PyMongoError as exc:
            raise classify_persistence_error(exc, "save problems") from exc
        return str(result.inserted_id)
