"""
Error taxonomy and the handlers that render it.

Services raise these as HTTPExceptions so FastAPI can render them directly;
store failures (SQLAlchemyError) are never wrapped and only translated to a
response at the edge.
"""

from __future__ import annotations

from typing import Any, Optional

import structlog
from fastapi import FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from starlette.responses import JSONResponse

from orgbase_shared.schemas.common import ErrorBody, ErrorResponse

log = structlog.get_logger()


class ServiceError(HTTPException):
    """Base class for errors raised by the service layer."""

    status_code = 400
    code = "SERVICE_ERROR"
    default_detail = "Request failed"

    def __init__(self, detail: Optional[str] = None):
        super().__init__(status_code=self.status_code, detail=detail or self.default_detail)


class NotAuthorized(ServiceError):
    status_code = 403
    code = "NOT_AUTHORIZED"
    default_detail = "You are not authorized to perform this action"


class NotFound(ServiceError):
    status_code = 404
    code = "NOT_FOUND"
    default_detail = "Not found"


def error_body(
    code: str, message: str, status: int, fields: Optional[list[dict]] = None
) -> dict[str, Any]:
    body = ErrorBody(code=code, message=message, status=status, fields=fields)
    return ErrorResponse(error=body).model_dump(exclude_none=True)


def field_errors(errors: list[dict]) -> list[dict]:
    """Flatten pydantic error dicts into [{field, message}]."""
    result = []
    for err in errors:
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "path", "query")]
        result.append({"field": ".".join(loc) or "__root__", "message": err.get("msg", "")})
    return result


# ---------------------------------------------------------------------------
# Exception handlers
# ---------------------------------------------------------------------------

_STATUS_CODES = {401: "NOT_AUTHENTICATED", 403: "NOT_AUTHORIZED", 404: "NOT_FOUND"}


async def _http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    code = getattr(exc, "code", None) or _STATUS_CODES.get(exc.status_code, "HTTP_ERROR")
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(code, str(exc.detail), exc.status_code),
        headers=getattr(exc, "headers", None),
    )


async def _validation_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    errors = exc.errors() if hasattr(exc, "errors") else []
    return JSONResponse(
        status_code=422,
        content=jsonable_encoder(
            error_body("VALIDATION_ERROR", "Invalid request data", 422, field_errors(errors))
        ),
    )


async def _store_failure_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    log.error(
        "store.failure",
        path=request.url.path,
        method=request.method,
        error=type(exc).__name__,
    )
    return JSONResponse(
        status_code=503,
        content=error_body("STORE_FAILURE", "The data store could not complete the request", 503),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(HTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(ValidationError, _validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, _store_failure_handler)
