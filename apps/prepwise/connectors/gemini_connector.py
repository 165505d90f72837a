"""Thin client for the Gemini `generateContent` REST endpoint."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import requests
from pydantic import BaseModel

from prepwise.core.exceptions import AIServiceError, ConfigurationError
from prepwise.core.settings import settings

logger = logging.getLogger(__name__)


class GeminiPart(BaseModel):
    text: Optional[str] = None


class GeminiContent(BaseModel):
    parts: List[GeminiPart] = []
    role: Optional[str] = None


class GeminiCandidate(BaseModel):
    content: Optional[GeminiContent] = None
    finishReason: Optional[str] = None


class GeminiResponse(BaseModel):
    candidates: List[GeminiCandidate] = []

    @property
    def text(self) -> str:
        if not self.candidates:
            return ""
        content = self.candidates[0].content
        if content is None or not content.parts:
            return ""
        return content.parts[0].text or ""


def classify_ai_error(status: int | None, message: str | None = None) -> AIServiceError:
    """Map an upstream failure onto a short user-facing error.

    `status` is None when the request never got an HTTP response.
    """
    detail = (message or "").strip()
    lowered = detail.lower()
    if status is None:
        return AIServiceError(
            "Network error: Unable to connect to AI service. Please check your internet connection.",
            code="network_error",
            status_code=503,
        )
    if status == 429 or "rate limit" in lowered or "quota" in lowered:
        return AIServiceError(
            "AI service rate limit exceeded. Please wait a moment and try again.",
            code="rate_limited",
            status_code=429,
        )
    if status == 400:
        return AIServiceError(
            "Invalid request to AI service. Please check your input and try again.",
            code="invalid_request",
            status_code=400,
        )
    if status == 401:
        return AIServiceError(
            "AI service authentication failed. Please contact support.",
            code="ai_auth_failed",
            status_code=502,
        )
    if status == 403:
        return AIServiceError(
            "Access to AI service is restricted. Please try again later.",
            code="ai_forbidden",
            status_code=502,
        )
    if status >= 500:
        return AIServiceError(
            "AI service is temporarily unavailable. Please try again later.",
            code="ai_unavailable",
            status_code=503,
        )
    return AIServiceError(
        f"AI service error: {detail or 'Unknown error'}",
        code="ai_service_error",
        status_code=502,
    )


def _provider_message(resp: requests.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return resp.reason or ""
    if isinstance(body, dict):
        err = body.get("error")
        if isinstance(err, dict) and isinstance(err.get("message"), str):
            return err["message"]
    return resp.reason or ""


class GeminiClient:
    """Call Gemini over REST with an API key.

    A client without a key reports `is_configured == False`; services use that to
    switch into offline mode instead of calling out.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = settings.gemini_model,
        base_url: str = settings.gemini_base_url,
        timeout: int = settings.gemini_timeout_seconds,
        session: Optional[requests.Session] = None,
    ):
        self.api_key = (api_key or "").strip() or None
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/models/{self.model}:generateContent"

    @staticmethod
    def build_text_request(
        prompt: str,
        *,
        image_base64: Optional[str] = None,
        mime_type: str = "image/png",
    ) -> Dict[str, Any]:
        parts: List[Dict[str, Any]] = [{"text": prompt}]
        if image_base64:
            parts.append({"inlineData": {"mimeType": mime_type, "data": image_base64}})
        return {"contents": [{"role": "user", "parts": parts}]}

    def generate_content(self, body: Dict[str, Any]) -> GeminiResponse:
        if not self.is_configured:
            raise ConfigurationError(
                "Gemini API key is not configured", code="missing_gemini_api_key"
            )
        try:
            resp = self.session.post(
                self.endpoint,
                params={"key": self.api_key},
                json=body,
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.error("Gemini request failed: %s", exc.__class__.__name__)
            raise classify_ai_error(None, str(exc)) from exc

        if not resp.ok:
            message = _provider_message(resp)
            logger.error("Gemini API error: %s %s", resp.status_code, message)
            raise classify_ai_error(resp.status_code, message)

        try:
            payload = resp.json()
        except ValueError as exc:
            raise AIServiceError(
                "AI service returned an unreadable response. Please try again.",
                code="invalid_ai_payload",
                status_code=502,
            ) from exc
        return GeminiResponse.model_validate(payload if isinstance(payload, dict) else {})

    def generate_text(self, body: Dict[str, Any]) -> str:
        text = self.generate_content(body).text
        if not text.strip():
            raise AIServiceError(
                "AI service returned an empty response. Please try again.",
                code="empty_response",
                status_code=502,
            )
        return text
