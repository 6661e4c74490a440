"""Domain exceptions and their HTTP mapping."""

from __future__ import annotations

from typing import Any

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from bestof_api.responses import error_response

logger = structlog.get_logger()


class BestOfError(Exception):
    """Base class for errors raised by the service layer."""

    status_code = 500
    code = "INTERNAL_ERROR"

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationError(BestOfError):
    status_code = 400
    code = "VALIDATION_ERROR"


class NotFoundError(BestOfError):
    status_code = 404
    code = "NOT_FOUND"


class ConflictError(BestOfError):
    status_code = 409
    code = "CONFLICT"


class ConfigurationError(BestOfError):
    status_code = 500
    code = "CONFIGURATION_ERROR"


class UpstreamError(BestOfError):
    """A third-party API (Google Places, Resend) or the database refused the request."""

    status_code = 502
    code = "UPSTREAM_ERROR"


async def _handle_domain_error(request: Request, exc: BestOfError) -> JSONResponse:
    log = logger.bind(path=request.url.path, code=exc.code)
    if exc.status_code >= 500:
        log.error("request_error", error=exc.message, details=exc.details)
    else:
        log.info("request_rejected", error=exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content=error_response(exc.code, exc.message, details=exc.details),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BestOfError, _handle_domain_error)  # type: ignore[arg-type]
