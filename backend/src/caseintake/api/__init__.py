"""HTTP layer for the case intake service.

Routers live in the submodules. This module holds the error envelope and
the handlers that translate domain errors into it, so every failed request
answers with the same JSON shape:

    {"success": false, "error": "...", "error_code": "...", "details": [...]}
"""

from typing import Any

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..errors import (
    AuthError,
    CaseIntakeError,
    NotFoundError,
    ParseError,
    StorageError,
    ValidationError,
)
from ..logging import get_logger

logger = get_logger(__name__)


class ErrorDetail(BaseModel):
    """One specific problem behind an error response."""

    code: str
    message: str
    field: str | None = None
    details: dict[str, Any] | None = None


class ErrorResponse(BaseModel):
    """Body of every non-2xx response produced by this service."""

    success: bool = False
    error: str
    error_code: str
    details: list[ErrorDetail] | None = None


def _error_response(
    status_code: int,
    message: str,
    error_code: str,
    details: list[ErrorDetail] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    body = ErrorResponse(error=message, error_code=error_code, details=details)
    return JSONResponse(status_code=status_code, content=body.model_dump(), headers=headers)


def status_code_for(exc: CaseIntakeError) -> int:
    """HTTP status for a domain error."""
    if isinstance(exc, AuthError):
        return exc.status_code
    if isinstance(exc, ValidationError):
        return 422
    if isinstance(exc, NotFoundError):
        return 404
    if isinstance(exc, ParseError):
        return 400
    if isinstance(exc, StorageError):
        return 500
    return 400


def _details_for(exc: CaseIntakeError) -> list[ErrorDetail] | None:
    if isinstance(exc, ValidationError) and exc.field:
        return [ErrorDetail(code=exc.error_code, message=exc.message, field=exc.field)]
    if isinstance(exc, ParseError):
        return [
            ErrorDetail(
                code=exc.error_code,
                message=exc.reason,
                details={"filename": exc.filename},
            )
        ]
    return None


async def case_intake_error_handler(request: Request, exc: CaseIntakeError) -> JSONResponse:
    status_code = status_code_for(exc)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")

    headers = {"X-Error-Code": exc.error_code}
    if status_code == 401:
        headers["WWW-Authenticate"] = "Bearer"

    return _error_response(
        status_code, exc.message, exc.error_code, _details_for(exc), headers
    )


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    return _error_response(exc.status_code, str(exc.detail), "HTTP_ERROR", headers=exc.headers)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return _error_response(500, "An unexpected error occurred", "INTERNAL_ERROR")


def register_exception_handlers(app: FastAPI) -> None:
    """Install the error envelope handlers on ``app``."""
    app.add_exception_handler(CaseIntakeError, case_intake_error_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
