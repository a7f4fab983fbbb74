"""
API error types and the handlers that render them
"""
import logging
from datetime import datetime, timezone
from http import HTTPStatus
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger("gym_backend.errors")


class ApiError(Exception):
    """Base for errors that map directly onto an HTTP status"""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class BadRequestError(ApiError):
    status_code = 400


class NotFoundError(ApiError):
    status_code = 404


class ServiceUnavailableError(ApiError):
    status_code = 503


def status_phrase(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return "Error"


def error_body(
    status_code: int,
    message: str,
    path: str,
    details: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    return {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "status": status_code,
        "error": status_phrase(status_code),
        "message": message,
        "path": path,
        "details": details,
    }


def _field_name(loc) -> str:
    # loc is ("body" | "query" | "header" | "path", field, ...)
    parts = [str(p) for p in loc[1:]] if len(loc) > 1 else [str(p) for p in loc]
    return ".".join(parts)


async def handle_api_error(request: Request, exc: ApiError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.status_code, exc.message, request.url.path),
    )


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    field_errors: Dict[str, str] = {}
    for error in exc.errors():
        field_errors.setdefault(_field_name(error.get("loc", ())), error.get("msg", "invalid"))
    return JSONResponse(
        status_code=400,
        content=error_body(400, "Validación fallida", request.url.path, {"fieldErrors": field_errors}),
    )


async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else status_phrase(exc.status_code)
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.status_code, message, request.url.path),
        headers=getattr(exc, "headers", None),
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unhandled error on %s %s", request.method, request.url.path, exc_info=exc
    )
    return JSONResponse(
        status_code=500,
        content=error_body(500, "Error interno", request.url.path),
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, handle_api_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(Exception, handle_unexpected_error)
