"""Error Handlers — map domain, validation, and unexpected failures to JSON envelopes.

Invariants:
    - Every error body has the FoundingCircleError.to_response() shape:
      {"error": {"code", "message", "category", "severity", ...}}
    - Business outcomes (4xx) are logged at INFO, store outages (503) at ERROR
    - A 503 carries Retry-After so load balancers and clients back off
    - Request bodies hold applicant emails: validation logs name the failing
      fields, never their input values
    - Unexpected exceptions answer 500 INTERNAL_ERROR with no internals
"""

import logging
from datetime import datetime, timezone

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from foundingcircle.core.errors import (
    ErrorCategory, ErrorSeverity, FoundingCircleError,
)

logger = logging.getLogger(__name__)

STORE_RETRY_AFTER_SECONDS = 5


def _envelope(code: str, message: str, category: ErrorCategory,
              severity: ErrorSeverity, **extra) -> dict:
    return {
        "error": {
            "code": code,
            "message": message,
            "category": category.value,
            "severity": severity.value,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            **extra,
        },
    }


def register_error_handlers(app: FastAPI) -> None:

    @app.exception_handler(FoundingCircleError)
    async def founding_circle_error_handler(request: Request, exc: FoundingCircleError):
        level = logging.INFO if exc.is_business_outcome else logging.ERROR
        logger.log(
            level,
            f"{type(exc).__name__}: {exc.message}",
            extra={
                "error_code": exc.code,
                "path": request.url.path,
                "member_id": exc.context.member_id,
                "queue_number": exc.context.queue_number,
            },
        )
        headers = None
        if exc.http_status == status.HTTP_503_SERVICE_UNAVAILABLE:
            headers = {"Retry-After": str(STORE_RETRY_AFTER_SECONDS)}
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_response(), headers=headers,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        details = [
            {
                "field": ".".join(str(loc) for loc in e["loc"]),
                "message": e["msg"],
                "type": e["type"],
            }
            for e in exc.errors()
        ]
        logger.info(
            f"Rejected request on {request.url.path}: "
            + ", ".join(d["field"] for d in details),
            extra={"error_code": "VALIDATION_ERROR", "path": request.url.path},
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_envelope(
                "VALIDATION_ERROR", "Invalid request data",
                ErrorCategory.VALIDATION, ErrorSeverity.ERROR, details=details,
            ),
        )

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        logger.error(
            f"Unhandled {type(exc).__name__} on {request.url.path}",
            extra={"error_code": "INTERNAL_ERROR", "path": request.url.path},
            exc_info=True,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_envelope(
                "INTERNAL_ERROR", "An unexpected error occurred",
                ErrorCategory.INTERNAL, ErrorSeverity.CRITICAL,
            ),
        )
