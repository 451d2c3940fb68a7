"""
Exception Handlers

Turns every failure into one of the two JSON envelopes:
- {"error": "<message>"}
- {"errors": {"<field>": "<message>"}}

ShortyError subclasses render themselves. Framework errors (unknown
routes, request validation) and raw SQLAlchemy errors are mapped here.
Anything else is a bug: it is logged with its traceback, sent to Sentry
and answered with a generic 500 that leaks no detail.
"""

import logging
from typing import Any, Sequence

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from shorty.core.exceptions import DatabaseError, InvalidRequestError, ShortyError
from shorty.core.monitoring import report_exception

logger = logging.getLogger(__name__)

# Leading loc entries that name the request part rather than a field
_LOCATION_PREFIXES = {"body", "query", "path", "header", "cookie"}


def _field_name(loc: Sequence[Any]) -> str:
    parts = [str(part) for part in loc]
    if parts and parts[0] in _LOCATION_PREFIXES:
        parts = parts[1:]
    return ".".join(parts) or "body"


def field_errors(errors: Sequence[dict[str, Any]]) -> dict[str, str]:
    """
    Collapse pydantic error dicts into a field -> message mapping.

    Only the first message per field is kept.
    """
    out: dict[str, str] = {}
    for error in errors:
        out.setdefault(_field_name(error.get("loc", ())), error.get("msg", "is invalid"))
    return out


def validation_error_fields(exc: ValidationError) -> dict[str, str]:
    return field_errors(exc.errors())


async def shorty_error_handler(request: Request, exc: ShortyError) -> JSONResponse:
    if isinstance(exc, DatabaseError):
        logger.error(f"{request.method} {request.url.path} failed: {exc.reason}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if any(error.get("type") == "json_invalid" for error in errors):
        return await shorty_error_handler(request, InvalidRequestError())
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"errors": field_errors(errors)},
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail).lower()},
        headers=getattr(exc, "headers", None),
    )


async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error(f"{request.method} {request.url.path} database error: {str(exc)}", exc_info=exc)
    return await shorty_error_handler(request, DatabaseError("unhandled", original_error=exc))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unhandled exception on {request.method} {request.url.path}: {exc}", exc_info=exc)
    report_exception(exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "internal server error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Attach all exception handlers to the app.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(ShortyError, shorty_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
