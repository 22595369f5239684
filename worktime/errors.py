"""
Error taxonomy and the JSON error body (``{"error": "..."}``) returned by the API.

Services raise ``WorkTimeError`` subclasses; the handlers registered by
``register_exception_handlers`` turn them into responses.
"""

from __future__ import annotations

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

log = structlog.get_logger(__name__)


class WorkTimeError(Exception):
    status_code = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationFailed(WorkTimeError):
    status_code = 400


class Unauthorized(WorkTimeError):
    status_code = 401


class Forbidden(WorkTimeError):
    status_code = 403


class NotFound(WorkTimeError):
    status_code = 404


class Conflict(WorkTimeError):
    status_code = 409


class StorageError(WorkTimeError):
    status_code = 500


def error_response(status_code: int, message: str, **extra) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message, **extra})


async def handle_worktime_error(request: Request, exc: WorkTimeError) -> JSONResponse:
    if exc.status_code >= 500:
        log.error(
            "request_failed",
            path=request.url.path,
            status_code=exc.status_code,
            error=exc.message,
        )
    else:
        log.info(
            "request_rejected",
            path=request.url.path,
            status_code=exc.status_code,
            error=exc.message,
        )
    return error_response(exc.status_code, exc.message)


async def handle_http_exception(request: Request, exc: HTTPException) -> JSONResponse:
    return error_response(exc.status_code, str(exc.detail))


async def handle_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    details = [
        {"field": ".".join(str(p) for p in err["loc"][1:]), "message": err["msg"]}
        for err in exc.errors()
    ]
    log.info("request_invalid", path=request.url.path, details=details)
    return error_response(400, "Nieprawidłowe dane żądania", details=details)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(WorkTimeError, handle_worktime_error)
    app.add_exception_handler(HTTPException, handle_http_exception)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
