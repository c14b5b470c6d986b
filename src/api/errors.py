"""
Domain error taxonomy and its HTTP rendering.

Services raise these exceptions; the handlers registered by
`register_error_handlers` turn them into `{"error": kind, "message": text}`
responses with the matching status code.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class ErrorBody(BaseModel):
    error: str = Field(..., description="Error kind, e.g. NotFound or InvalidState.")
    message: str = Field(..., description="Human-readable explanation.")


class ApiError(Exception):
    """Base class for errors that map onto a client-facing HTTP response."""

    kind = "Error"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    headers: Optional[Dict[str, str]] = None

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ApiError):
    """Malformed or out-of-range input."""

    kind = "ValidationError"
    status_code = status.HTTP_400_BAD_REQUEST


class Unauthorized(ApiError):
    """Missing or invalid bearer/refresh credentials."""

    kind = "Unauthorized"
    status_code = status.HTTP_401_UNAUTHORIZED
    headers = {"WWW-Authenticate": "Bearer"}


class Forbidden(ApiError):
    """Caller is authenticated but not allowed to perform the operation."""

    kind = "Forbidden"
    status_code = status.HTTP_403_FORBIDDEN


class NotFound(ApiError):
    kind = "NotFound"
    status_code = status.HTTP_404_NOT_FOUND


class Conflict(ApiError):
    """Duplicate signup, double accept, duplicate rating."""

    kind = "Conflict"
    status_code = status.HTTP_409_CONFLICT


class InvalidState(ApiError):
    """A lifecycle transition was attempted from a state that does not allow it."""

    kind = "InvalidState"
    status_code = status.HTTP_409_CONFLICT


def _error_response(kind: str, message: str, status_code: int, headers: Optional[Dict[str, str]] = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": kind, "message": message},
        headers=headers,
    )


async def _handle_api_error(request: Request, exc: ApiError) -> JSONResponse:
    logger.info("%s %s -> %s: %s", request.method, request.url.path, exc.kind, exc.message)
    return _error_response(exc.kind, exc.message, exc.status_code, exc.headers)


async def _handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Collapse pydantic's error list into one readable line.
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    message = "; ".join(parts) or "Invalid request."
    return _error_response(ValidationError.kind, message, status.HTTP_400_BAD_REQUEST)


# PUBLIC_INTERFACE
def register_error_handlers(app: FastAPI) -> None:
    """Install the taxonomy handlers on a FastAPI application."""
    app.add_exception_handler(ApiError, _handle_api_error)
    app.add_exception_handler(RequestValidationError, _handle_request_validation)


_STATUS_DESCRIPTIONS = {
    status.HTTP_400_BAD_REQUEST: "ValidationError: malformed or out-of-range input",
    status.HTTP_401_UNAUTHORIZED: "Unauthorized: missing or invalid credentials",
    status.HTTP_403_FORBIDDEN: "Forbidden: role or ownership check failed",
    status.HTTP_404_NOT_FOUND: "NotFound: the referenced entity does not exist",
    status.HTTP_409_CONFLICT: "Conflict or InvalidState: duplicate, lost race, or disallowed transition",
}


# PUBLIC_INTERFACE
def error_responses(*status_codes: int) -> Dict[int, Dict[str, Any]]:
    """Build the `responses=` mapping that documents error bodies in OpenAPI."""
    return {
        code: {"model": ErrorBody, "description": _STATUS_DESCRIPTIONS[code]}
        for code in status_codes
    }
