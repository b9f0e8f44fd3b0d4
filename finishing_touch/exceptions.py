"""
Error responses as RFC 7807 problem details.

Services raise the AppException subclasses below; the handlers registered by
register_exception_handlers() render them, framework HTTP errors and request
validation failures as "application/problem+json" bodies with a stable
machine-readable code.

See: https://datatracker.ietf.org/doc/html/rfc7807
"""

import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from finishing_touch.config import settings
from finishing_touch.middleware.correlation import generate_id, get_request_id

logger = logging.getLogger(__name__)

PROBLEM_TYPE_BASE = "https://finishingtouch.app/problems"
PROBLEM_MEDIA_TYPE = "application/problem+json"


class ErrorCode(str, Enum):
    UNAUTHORIZED = "AUTH_001"
    FORBIDDEN = "AUTH_002"
    VALIDATION_ERROR = "VAL_001"
    NOT_FOUND = "RES_001"
    CONFLICT = "RES_003"
    INTERNAL_ERROR = "SRV_001"


STATUS_TITLES = {
    400: "Bad Request",
    401: "Unauthorized",
    403: "Forbidden",
    404: "Not Found",
    405: "Method Not Allowed",
    409: "Conflict",
    422: "Validation Error",
    500: "Internal Server Error",
}

STATUS_CODES = {
    400: ErrorCode.VALIDATION_ERROR,
    401: ErrorCode.UNAUTHORIZED,
    403: ErrorCode.FORBIDDEN,
    404: ErrorCode.NOT_FOUND,
    409: ErrorCode.CONFLICT,
    422: ErrorCode.VALIDATION_ERROR,
}


class ProblemDetail(BaseModel):
    """
    Problem details body.

    Attributes:
        type: URI naming the problem type, derived from the error code
        title: Short summary for the status code
        status: HTTP status code
        detail: Explanation of this occurrence
        instance: Request path that failed
        code: Machine-readable error code (AUTH_001, RES_001, ...)
        timestamp: When the error happened, ISO 8601 UTC
        trace_id: Request ID, matching the X-Request-ID response header
        errors: Per-field messages for validation failures
    """

    type: str
    title: str
    status: int
    detail: str
    instance: Optional[str] = None
    code: str
    timestamp: str
    trace_id: str
    errors: Optional[List[Dict[str, Any]]] = None


class AppException(HTTPException):
    """Base class for errors raised by the service layer."""

    status_code = 500
    code = ErrorCode.INTERNAL_ERROR

    def __init__(
        self,
        detail: str,
        errors: Optional[List[Dict[str, Any]]] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        super().__init__(status_code=type(self).status_code, detail=detail, headers=headers)
        self.errors = errors


class NotFoundError(AppException):
    status_code = 404
    code = ErrorCode.NOT_FOUND

    def __init__(self, resource: str, resource_id: Optional[str] = None):
        if resource_id is None:
            super().__init__(f"{resource} not found")
        else:
            super().__init__(f"{resource} with ID {resource_id} was not found")


class ConflictError(AppException):
    """The request breaks a business rule: double punch, declined estimate, taken number."""

    status_code = 409
    code = ErrorCode.CONFLICT


class UnauthorizedError(AppException):
    status_code = 401
    code = ErrorCode.UNAUTHORIZED

    def __init__(self, detail: str = "Could not validate credentials"):
        super().__init__(detail, headers={"WWW-Authenticate": "Bearer"})


class ForbiddenError(AppException):
    status_code = 403
    code = ErrorCode.FORBIDDEN

    def __init__(self, detail: str = "Permission denied"):
        super().__init__(detail)


def _trace_id() -> str:
    request_id = get_request_id()
    return request_id if request_id != "unknown" else generate_id()


def problem_response(
    request: Request,
    status_code: int,
    code: ErrorCode,
    detail: str,
    errors: Optional[List[Dict[str, Any]]] = None,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    problem = ProblemDetail(
        type=f"{PROBLEM_TYPE_BASE}/{code.value.lower().replace('_', '-')}",
        title=STATUS_TITLES.get(status_code, "Error"),
        status=status_code,
        detail=detail,
        instance=request.url.path,
        code=code.value,
        timestamp=datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ"),
        trace_id=_trace_id(),
        errors=errors,
    )
    return JSONResponse(
        status_code=status_code,
        content=problem.model_dump(exclude_none=True),
        media_type=PROBLEM_MEDIA_TYPE,
        headers=headers,
    )


async def handle_app_exception(request: Request, exc: AppException) -> JSONResponse:
    logger.warning("%s %s: %s", exc.code.value, request.url.path, exc.detail)
    return problem_response(
        request, exc.status_code, exc.code, exc.detail, errors=exc.errors, headers=exc.headers
    )


async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Routing errors and HTTPExceptions raised directly by endpoints (login failures)."""
    return problem_response(
        request,
        exc.status_code,
        STATUS_CODES.get(exc.status_code, ErrorCode.INTERNAL_ERROR),
        str(exc.detail),
        headers=getattr(exc, "headers", None),
    )


async def handle_validation_exception(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {
            "field": ".".join(str(part) for part in error["loc"]),
            "message": error["msg"],
            "type": error["type"],
        }
        for error in exc.errors()
    ]
    return problem_response(
        request, 422, ErrorCode.VALIDATION_ERROR, "Request validation failed", errors=errors
    )


async def handle_unexpected_exception(request: Request, exc: Exception) -> JSONResponse:
    """Persistence failures and bugs. Details are hidden unless DEBUG is on."""
    logger.exception("Unhandled %s on %s", type(exc).__name__, request.url.path)
    detail = str(exc) if settings.DEBUG else "An unexpected error occurred"
    return problem_response(request, 500, ErrorCode.INTERNAL_ERROR, detail)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppException, handle_app_exception)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(RequestValidationError, handle_validation_exception)
    app.add_exception_handler(Exception, handle_unexpected_exception)
