"""Standardized API error responses.

Every error leaves the API with the same body:

    {"error": "Not Found", "message": "...", "statusCode": 404, "timestamp": "..."}

plus ``details`` in the development environment. Endpoints keep raising
``HTTPException`` the usual FastAPI way; the handlers registered here reshape
it. Database errors are mapped by their SQLSTATE code.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import DBAPIError, NoResultFound, SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from litework.core.config import get_settings

log = logging.getLogger("litework.errors")

# PostgreSQL SQLSTATE codes we translate
UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"
INSUFFICIENT_PRIVILEGE = "42501"


@dataclass(frozen=True)
class ApiErrorKind:
    status: int
    error: str
    message: str


API_ERRORS: dict[str, ApiErrorKind] = {
    # Client errors (4xx)
    "BAD_REQUEST": ApiErrorKind(
        400, "Bad Request", "The request could not be understood or was missing required parameters."
    ),
    "UNAUTHORIZED": ApiErrorKind(401, "Unauthorized", "Authentication is required to access this resource."),
    "FORBIDDEN": ApiErrorKind(403, "Forbidden", "You do not have permission to access this resource."),
    "NOT_FOUND": ApiErrorKind(404, "Not Found", "The requested resource could not be found."),
    "CONFLICT": ApiErrorKind(409, "Conflict", "The request conflicts with the current state of the server."),
    "VALIDATION_ERROR": ApiErrorKind(422, "Validation Error", "The request data failed validation."),
    "RATE_LIMIT": ApiErrorKind(429, "Too Many Requests", "Rate limit exceeded. Please try again later."),
    # Server errors (5xx)
    "INTERNAL_ERROR": ApiErrorKind(
        500, "Internal Server Error", "An unexpected error occurred. Please try again later."
    ),
    "DATABASE_ERROR": ApiErrorKind(500, "Database Error", "A database error occurred. Please try again later."),
    "SERVICE_UNAVAILABLE": ApiErrorKind(
        503, "Service Unavailable", "The service is temporarily unavailable. Please try again later."
    ),
}

# Status code -> error kind for reshaping HTTPException; 500 maps to the generic kind
_KIND_BY_STATUS = {k.status: name for name, k in API_ERRORS.items() if name != "DATABASE_ERROR"}


def error_body(kind_name: str, message: str | None = None, details: Any = None) -> dict[str, Any]:
    kind = API_ERRORS[kind_name]
    body: dict[str, Any] = {
        "error": kind.error,
        "message": message or kind.message,
        "statusCode": kind.status,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    if details is not None and get_settings().is_development:
        body["details"] = jsonable_encoder(details)
    return body


def error_response(
    kind_name: str,
    message: str | None = None,
    details: Any = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    body = error_body(kind_name, message, details)
    return JSONResponse(status_code=body["statusCode"], content=body, headers=headers)


def database_error_code(exc: BaseException) -> str | None:
    """SQLSTATE of a DBAPI error (asyncpg/psycopg), or the SQLite equivalent by message."""
    orig = getattr(exc, "orig", None)
    code = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    if code:
        return str(code)
    text = str(orig if orig is not None else exc)
    if "UNIQUE constraint failed" in text:
        return UNIQUE_VIOLATION
    if "FOREIGN KEY constraint failed" in text:
        return FOREIGN_KEY_VIOLATION
    return None


def database_error_response(exc: SQLAlchemyError, context: str | None = None) -> JSONResponse:
    """Map a SQLAlchemy error to the matching HTTP error."""
    log.warning("Database error%s: %s", f" in {context}" if context else "", exc)
    if isinstance(exc, NoResultFound):
        return error_response("NOT_FOUND")
    code = database_error_code(exc) if isinstance(exc, DBAPIError) else None
    if code == UNIQUE_VIOLATION:
        return error_response("CONFLICT", "A record with this data already exists")
    if code == FOREIGN_KEY_VIOLATION:
        return error_response("BAD_REQUEST", "Invalid reference to related data")
    if code == INSUFFICIENT_PRIVILEGE:
        return error_response("FORBIDDEN", "Insufficient permissions")
    log.exception("Unmapped database error", exc_info=exc)
    return error_response("DATABASE_ERROR", "A database error occurred", details=str(exc))


async def _http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    kind_name = _KIND_BY_STATUS.get(exc.status_code)
    if kind_name is None:
        kind_name = "INTERNAL_ERROR" if exc.status_code >= 500 else "BAD_REQUEST"
    message = exc.detail if isinstance(exc.detail, str) else None
    details = None if isinstance(exc.detail, str) else exc.detail
    body = error_body(kind_name, message, details)
    # Keep the real status (e.g. 405) even when it shares a generic kind
    body["statusCode"] = exc.status_code
    return JSONResponse(status_code=exc.status_code, content=body, headers=getattr(exc, "headers", None))


async def _validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    problems = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path"))
        problems.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return error_response("VALIDATION_ERROR", "; ".join(problems) or None, details=exc.errors())


async def _sqlalchemy_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    return database_error_response(exc, context=f"{request.method} {request.url.path}")


async def _unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    log.exception("Unhandled error in %s %s", request.method, request.url.path, exc_info=exc)
    return error_response("INTERNAL_ERROR", details=str(exc))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, _sqlalchemy_exception_handler)
    app.add_exception_handler(Exception, _unhandled_exception_handler)
