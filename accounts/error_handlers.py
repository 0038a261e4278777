"""Exception handlers turning form and service failures into JSON responses."""

from __future__ import annotations

from typing import Any

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from accounts.dependencies import get_request_locale
from accounts.forms.validation import FormValidationError
from accounts.services.user_service import UserServiceError

logger = structlog.get_logger(__name__)


def _error_response(
    status_code: int,
    detail: str,
    code: str,
    errors: dict[str, str] | None = None,
) -> JSONResponse:
    """Build standardized JSON error payload."""
    content: dict[str, Any] = {"detail": detail, "code": code}
    if errors is not None:
        content["errors"] = errors
    return JSONResponse(status_code=status_code, content=content)


def _sanitize_detail(detail: str, status_code: int, environment: str) -> str:
    """Hide internal failure details outside development."""
    if environment != "development" and status_code >= 500:
        return "Internal server error."
    return detail


def _correlation_id(request: Request) -> str:
    return getattr(
        request.state,
        "correlation_id",
        request.headers.get("x-correlation-id", "unknown"),
    )


def register_exception_handlers(app: FastAPI, environment: str) -> None:
    """Register handlers for form validation, user service and unexpected errors."""

    @app.exception_handler(FormValidationError)
    async def handle_form_validation(request: Request, exc: FormValidationError) -> JSONResponse:
        """Render collected field errors in the client's language."""
        errors = exc.validation.translate(get_request_locale(request))
        logger.info(
            "form_rejected",
            correlation_id=_correlation_id(request),
            path=request.url.path,
            fields=sorted(errors),
        )
        return _error_response(
            status_code=422,
            detail="Invalid form submission.",
            code="invalid_form",
            errors=errors,
        )

    @app.exception_handler(UserServiceError)
    async def handle_user_service_error(request: Request, exc: UserServiceError) -> JSONResponse:
        """Map service failures to their declared status and code."""
        logger.warning(
            "user_service_error",
            correlation_id=_correlation_id(request),
            path=request.url.path,
            code=exc.code,
            status_code=exc.status_code,
        )
        return _error_response(status_code=exc.status_code, detail=exc.detail, code=exc.code)

    @app.exception_handler(Exception)
    async def handle_unexpected_exception(request: Request, exc: Exception) -> JSONResponse:
        """Mask internal errors and enforce contract payload."""
        logger.error(
            "unhandled_exception",
            correlation_id=_correlation_id(request),
            path=request.url.path,
            method=request.method,
            error=str(exc),
        )
        detail = _sanitize_detail(str(exc), 500, environment)
        return _error_response(status_code=500, detail=detail, code="internal_error")
