# questionbank_api/middleware.py
"""
Middleware and error translation for the FastAPI application.
"""
import uuid

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from questionbank.errors import (
    AnalysisError,
    DocumentNotFoundError,
    ExtractionFailure,
    PersistenceConflict,
    QuestionBankError,
    ValidationError,
)
from questionbank.logging_config import get_logger

logger = get_logger("api.errors")

# Most specific first; QuestionBankError catches the rest
ERROR_STATUS_CODES = (
    (DocumentNotFoundError, 404),
    (ValidationError, 422),
    (ExtractionFailure, 502),
    (PersistenceConflict, 409),
    (AnalysisError, 500),
    (QuestionBankError, 500),
)


def status_code_for(exc: QuestionBankError) -> int:
    """Map an engine error to its HTTP status code."""
    for error_type, status_code in ERROR_STATUS_CODES:
        if isinstance(exc, error_type):
            return status_code
    return 500


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Add security headers and a request id to all responses."""

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"

        request_id = request.headers.get("X-Request-ID", str(uuid.uuid4()))
        response.headers["X-Request-ID"] = request_id

        return response


async def question_bank_error_handler(request: Request, exc: QuestionBankError) -> JSONResponse:
    status_code = status_code_for(exc)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} FAILED: {type(exc).__name__}: {exc}")
    else:
        logger.warning(f"{request.method} {request.url.path} -> {status_code}: {exc}")

    return JSONResponse(
        status_code=status_code,
        content={
            "error": type(exc).__name__,
            "message": str(exc),
            "document_id": exc.document_id,
        },
    )


def setup_middleware(app: FastAPI) -> None:
    """Install middleware and engine error handlers on the application."""
    app.add_middleware(RequestIdMiddleware)
    app.add_exception_handler(QuestionBankError, question_bank_error_handler)
