from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from pymongo.errors import PyMongoError

from prepwise.core.settings import settings
from prepwise.core.utils import iso, require_fields, utcnow
from prepwise.schemas.insights import InterviewInsightsResponse
from prepwise.schemas.problems import GenerationSource
from prepwise.services.fallbacks import fallback_insights
from prepwise.services.problem_validation import validate_insights
from prepwise.services.prompt_builder import build_insights_prompt
from prepwise.services.response_parser import parse_model_json

logger = logging.getLogger(__name__)


@dataclass
class InterviewInsightsService:
    """Read-through cache of interview-loop insights keyed by (company, role).

    Keys are matched exactly (case-sensitive, no trimming). The cache is
    best-effort: read failures count as a miss and write failures are logged and
    dropped, so generation always proceeds.
    """

    database: Any | None = None
    collection_name: str = settings.interview_insights_collection
    gemini: Any = None

    def __post_init__(self) -> None:
        if self.database is None:
            from prepwise.core.dependencies import get_mongo_database

            self.database = get_mongo_database()
        self._collection = self.database.get_collection(self.collection_name)

        if self.gemini is None:
            from prepwise.core.dependencies import get_gemini_client

            self.gemini = get_gemini_client()

    def ensure_indexes(self) -> None:
        """Create best-effort indexes for cache lookups."""
        try:
            self._collection.create_index(
                [("companyName", 1), ("roleLevel", 1)], name="company_role"
            )
        except PyMongoError as exc:
            logger.warning("Could not create interview insights indexes: %s", exc)

    # -----------------
    # Cache
    # -----------------
    def get_cached(self, company_name: str, role_level: str) -> dict[str, Any] | None:
        try:
            return self._collection.find_one({"companyName": company_name, "roleLevel": role_level})
        except PyMongoError as exc:
            logger.warning("Error fetching cached insights (continuing without cache): %s", exc)
            return None

    def _insert(self, doc: dict[str, Any]) -> None:
        try:
            self._collection.insert_one(dict(doc))
        except PyMongoError as exc:
            logger.warning("Error saving insights to cache (continuing without cache): %s", exc)

    def _overwrite(self, existing: dict[str, Any], doc: dict[str, Any]) -> None:
        try:
            self._collection.replace_one({"_id": existing["_id"]}, dict(doc))
        except PyMongoError as exc:
            logger.warning("Error updating cached insights (continuing without cache): %s", exc)

    # -----------------
    # Generation
    # -----------------
    def generate(
        self, company_name: str, role_level: str
    ) -> tuple[dict[str, Any], GenerationSource]:
        """Return insights data and where it came from; only `ai` results are cacheable."""
        if not self.gemini.is_configured:
            logger.warning("Gemini API key not configured; using sample insights")
            return fallback_insights(company_name, role_level), GenerationSource.offline

        prompt = build_insights_prompt(company_name, role_level)
        data = parse_model_json(self.gemini.generate_text(self.gemini.build_text_request(prompt)))
        result = validate_insights(data)
        if not result:
            logger.warning(
                "Generated insights for %s/%s failed validation: %s",
                company_name,
                role_level,
                "; ".join(result.errors),
            )
            return fallback_insights(company_name, role_level), GenerationSource.fallback
        return data, GenerationSource.ai

    def _generate_doc(
        self, company_name: str, role_level: str
    ) -> tuple[dict[str, Any], GenerationSource]:
        data, source = self.generate(company_name, role_level)
        doc = {
            "companyName": company_name,
            "roleLevel": role_level,
            "data": data,
            "updatedAt": utcnow(),
        }
        return doc, source

    def _response(self, doc: dict[str, Any]) -> InterviewInsightsResponse:
        return InterviewInsightsResponse(
            company_name=doc["companyName"],
            role_level=doc["roleLevel"],
            data=doc["data"],
            updated_at=iso(doc.get("updatedAt")),
        )

    def get_insights(self, company_name: str, role_level: str) -> InterviewInsightsResponse:
        require_fields(companyName=company_name, roleLevel=role_level)

        cached = self.get_cached(company_name, role_level)
        if cached:
            logger.info("Returning cached interview insights for %s/%s", company_name, role_level)
            return self._response(cached)

        logger.info("Generating new interview insights for %s/%s", company_name, role_level)
        doc, source = self._generate_doc(company_name, role_level)
        if source == GenerationSource.ai:
            self._insert(doc)
        return self._response(doc)

    def refresh_insights(self, company_name: str, role_level: str) -> InterviewInsightsResponse:
        """Regenerate unconditionally, then overwrite the cache entry or create one."""
        require_fields(companyName=company_name, roleLevel=role_level)

        doc, source = self._generate_doc(company_name, role_level)
        if source != GenerationSource.ai:
            logger.info("Not caching %s insights for %s/%s", source.value, company_name, role_level)
            return self._response(doc)

        existing = self.get_cached(company_name, role_level)
        if existing and "_id" in existing:
            self._overwrite(existing, doc)
        else:
            self._insert(doc)
        return self._response(doc)
