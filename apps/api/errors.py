"""Map ClipScribe errors to JSON responses."""

from __future__ import annotations

import logging
import math

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from clipscribe.error_codes import ErrorCode
from clipscribe.exceptions import PipelineError, ValidationError

logger = logging.getLogger("clipscribe.api")

RATE_LIMIT_MESSAGE = "Too many requests from this IP, please try again later."
UNEXPECTED_MESSAGE = "An unexpected error occurred"

_STATUS_FOR_CODE: dict[ErrorCode, int] = {
    ErrorCode.VALIDATION_ERROR: 400,
    ErrorCode.DERIVATION_ERROR: 422,
    ErrorCode.TRANSCRIPTION_ERROR: 502,
    ErrorCode.PERSISTENCE_ERROR: 500,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.RATE_LIMITED: 429,
    ErrorCode.UNKNOWN: 500,
}


class RateLimitExceeded(Exception):
    def __init__(self, *, retry_after_s: float) -> None:
        super().__init__(RATE_LIMIT_MESSAGE)
        self.retry_after_s = float(retry_after_s)


def error_body(kind: ErrorCode, message: str) -> dict[str, str]:
    return {"errorKind": kind.value, "message": message}


def status_for(exc: PipelineError) -> int:
    if isinstance(exc, ValidationError) and exc.too_large:
        return 413
    return _STATUS_FOR_CODE.get(exc.error_code, 500)


async def _pipeline_error_handler(request: Request, exc: PipelineError) -> JSONResponse:
    status = status_for(exc)
    log = logger.error if status >= 500 else logger.info
    log(
        "%s %s failed: kind=%s stage=%s run_id=%s",
        request.method,
        request.url.path,
        exc.error_code.value,
        exc.stage,
        exc.run_id,
    )
    return JSONResponse(status_code=status, content=error_body(exc.error_code, exc.message))


async def _rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    retry_after = max(1, int(math.ceil(exc.retry_after_s)))
    return JSONResponse(
        status_code=429,
        content=error_body(ErrorCode.RATE_LIMITED, RATE_LIMIT_MESSAGE),
        headers={"Retry-After": str(retry_after)},
    )


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content=error_body(ErrorCode.VALIDATION_ERROR, "invalid request"),
    )


async def _unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled error on %s %s", request.method, request.url.path)
    settings = getattr(request.app.state, "settings", None)
    message = UNEXPECTED_MESSAGE
    if settings is not None and bool(getattr(settings, "expose_error_details", False)):
        message = f"{type(exc).__name__}: {exc}"
    return JSONResponse(status_code=500, content=error_body(ErrorCode.UNKNOWN, message))


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(PipelineError, _pipeline_error_handler)
    app.add_exception_handler(RateLimitExceeded, _rate_limit_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(Exception, _unexpected_error_handler)
