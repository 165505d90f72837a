from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.status import HTTP_500_INTERNAL_SERVER_ERROR

logger = logging.getLogger(__name__)


def _error_payload(
    *,
    error: str,
    type_: str,
    code: str | None = None,
    details: Any | None = None,
) -> dict[str, Any]:
    payload: dict[str, Any] = {"error": error, "code": code, "type": type_}
    if details is not None:
        payload["details"] = details
    return payload


class PrepwiseException(Exception):
    """Base exception for Prepwise.

    Every failure a caller can see resolves to one of these: a short human-readable
    message plus a stable machine code. FastAPI translates them via the handlers
    registered in `register_exception_handlers`.
    """

    status_code: int = 400
    default_code: str | None = None

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        status_code: int | None = None,
        details: Any | None = None,
    ) -> None:
        self.message = message
        self.code = code if code is not None else self.default_code
        self.status_code = status_code if status_code is not None else self.status_code
        self.details = details
        super().__init__(message)


class ConfigurationError(PrepwiseException):
    """Raised when configuration is invalid (server-side)."""

    status_code = 500
    default_code = "configuration_error"


class InputValidationError(PrepwiseException):
    """Raised when required request fields are missing, before any network call."""

    status_code = 422
    default_code = "invalid_input"


class MalformedResponseError(PrepwiseException):
    """Raised when model output holds no JSON object or the JSON does not decode."""

    status_code = 502
    default_code = "malformed_ai_response"

    def __init__(
        self,
        message: str = "Invalid response from AI service. Please try again.",
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)


class AIServiceError(PrepwiseException):
    """Raised when the generative AI service fails or rejects a request."""

    status_code = 503
    default_code = "ai_service_error"


class PersistenceError(PrepwiseException):
    """Raised when a required document-store write fails."""

    status_code = 500
    default_code = "database_error"


_HTTP_CODES = {
    400: "bad_request",
    404: "not_found",
    405: "method_not_allowed",
}


def _error_response(
    status_code: int,
    *,
    error: str,
    type_: str,
    code: str | None = None,
    details: Any | None = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=_error_payload(error=error, code=code, type_=type_, details=details),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the JSON error envelope (``error``, ``code``, ``type``, ``details``)."""

    @app.exception_handler(PrepwiseException)
    async def _prepwise_exception_handler(
        _request: Request, exc: PrepwiseException
    ) -> JSONResponse:
        if exc.status_code >= 500:
            logger.warning("%s (%s): %s", exc.__class__.__name__, exc.code, exc.message)
        return _error_response(
            exc.status_code,
            error=exc.message,
            code=exc.code,
            type_=exc.__class__.__name__,
            details=exc.details,
        )

    @app.exception_handler(RequestValidationError)
    async def _validation_exception_handler(
        _request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return _error_response(
            422,
            error="Validation error",
            code="validation_error",
            type_=exc.__class__.__name__,
            details=jsonable_encoder(exc.errors()),
        )

    @app.exception_handler(StarletteHTTPException)
    async def _http_exception_handler(
        _request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        detail = exc.detail
        return _error_response(
            exc.status_code,
            error=detail if isinstance(detail, str) else "Request failed",
            code=_HTTP_CODES.get(exc.status_code, "http_exception"),
            type_=exc.__class__.__name__,
            details=None if isinstance(detail, str) else detail,
        )

    @app.exception_handler(Exception)
    async def _unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s: %s", request.method, request.url.path, exc)
        return _error_response(
            HTTP_500_INTERNAL_SERVER_ERROR,
            error="Internal server error",
            code="internal_error",
            type_="InternalServerError",
        )
