"""Centralized error handling and logging for the Smart Meeting Assistant API.

This module provides:
- Global exception handler for FastAPI
- Structured logging with correlation IDs
- Environment-aware error responses (generic in production, detailed in dev)
- Redaction of credentials and meeting content from logs
"""

import logging
import sys
import traceback
import uuid
from contextvars import ContextVar
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from pythonjsonlogger.json import JsonFormatter
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from core.config import get_settings
from core.exceptions import MeetingValidationError
from core.security_config import get_allowed_error_fields, is_sensitive_key
from schemas.api import ErrorResponse
from services.ai.exceptions import GenerationConfigurationError, GenerationServiceError


# Sensitive keys live in `core.security_config.SENSITIVE_KEYS`; `is_sensitive_key`
# is the single source of truth for redaction.

# Context variable for correlation ID tracking across async calls
_correlation_id_var: ContextVar[str | None] = ContextVar("correlation_id", default=None)

logger = logging.getLogger(__name__)

# Error type mappings for consistent responses
ERROR_TYPE_MESSAGES: dict[type[Exception], str] = {
    ValidationError: "Invalid request data provided",
    GenerationConfigurationError: "The text generation service is not configured",
    GenerationServiceError: "The text generation service failed to respond",
}


def get_correlation_id() -> str:
    """Get or create a correlation ID for request tracing."""
    correlation_id: str | None = _correlation_id_var.get()
    if not correlation_id:
        correlation_id = str(uuid.uuid4())
        _correlation_id_var.set(correlation_id)
    return correlation_id


def set_correlation_id(correlation_id: str | None) -> None:
    """Set the correlation ID for the current context."""
    _correlation_id_var.set(correlation_id)


class StructuredLogger:
    """Logger that prefixes correlation IDs and redacts sensitive values.

    Keyword arguments passed to the level methods become structured data on
    the record (``extra={"structured_data": ...}``). Values under sensitive
    keys, including meeting transcripts and questions, are replaced with
    ``[REDACTED]`` at any nesting depth.
    """

    def __init__(self, logger_name: str):
        self.logger = logging.getLogger(logger_name)

    def _log_with_context(
        self,
        level: int,
        message: str,
        extra_data: dict[str, Any] | None = None,
        exc_info: bool = False,
    ) -> None:
        correlation_id = get_correlation_id()
        log_data = {
            "correlation_id": correlation_id,
            "message": message,
            **self._sanitize_data(extra_data or {}),
        }

        # JsonFormatter merges `extra` into the JSON object in production;
        # elsewhere the correlation id is prefixed for readability.
        if get_settings().ENVIRONMENT != "production":
            message = f"[{correlation_id}] {message}"
        self.logger.log(
            level, message, extra={"structured_data": log_data}, exc_info=exc_info
        )

    def _sanitize_data(self, data: dict[str, Any]) -> dict[str, Any]:
        """Remove or mask sensitive data from log entries."""
        if not isinstance(data, dict) or not data:
            return {}

        header_redaction = self._redact_header_like(data)
        if header_redaction is not None:
            return header_redaction

        return {
            key: "[REDACTED]" if is_sensitive_key(key) else self._sanitize_value(value)
            for key, value in data.items()
        }

    def _sanitize_value(self, value: Any) -> Any:
        if isinstance(value, dict):
            return self._sanitize_data(value)
        if isinstance(value, list):
            return [self._sanitize_value(item) for item in value]
        return value

    def _redact_header_like(self, data: dict[str, Any]) -> dict[str, Any] | None:
        """Redact ``{"name": <sensitive>, "value": ...}`` pairs, else return None."""
        if "value" not in data or "name" not in data:
            return None

        header_name = data.get("name")
        if not isinstance(header_name, str) or not is_sensitive_key(header_name):
            return None

        redacted: dict[str, Any] = {}
        for sub_k, sub_v in data.items():
            if sub_k.lower() in {"value", "val", "v"}:
                redacted[sub_k] = "[REDACTED]"
            elif isinstance(sub_v, dict):
                redacted[sub_k] = self._sanitize_data(sub_v)
            else:
                redacted[sub_k] = "[REDACTED]" if is_sensitive_key(sub_k) else sub_v
        return redacted

    def info(self, message: str, **kwargs: Any) -> None:
        self._log_with_context(logging.INFO, message, kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self._log_with_context(logging.WARNING, message, kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self._log_with_context(logging.ERROR, message, kwargs)

    def exception(self, message: str, **kwargs: Any) -> None:
        """Log at error level with the active traceback."""
        self._log_with_context(logging.ERROR, message, kwargs, exc_info=True)


# Global structured logger instance
structured_logger = StructuredLogger(__name__)


class ExceptionNormalizationMiddleware(BaseHTTPMiddleware):
    """Catch any uncaught Exception and delegate to global_exception_handler."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:  # noqa: BLE001
            return await global_exception_handler(request, exc)


def _build_error_response(
    *,
    correlation_id: str,
    error_type: str,
    message: str,
    environment: str,
    details: dict[str, Any] | None = None,
    traceback_str: str | None = None,
    exception_type: str | None = None,
    validation_errors: Any | None = None,
    status_code: int = 500,
) -> JSONResponse:
    """Construct a sanitized JSON error response respecting environment rules."""
    allowed_fields = get_allowed_error_fields(environment)

    error_body: dict[str, Any] = {
        "correlation_id": correlation_id,
        "type": error_type,
    }

    if "details" in allowed_fields and details:
        error_body["details"] = details
    if "traceback" in allowed_fields and traceback_str:
        error_body["traceback"] = traceback_str
    if "exception_type" in allowed_fields and exception_type:
        error_body["exception_type"] = exception_type
    if "validation_errors" in allowed_fields and validation_errors is not None:
        error_body["validation_errors"] = validation_errors

    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(
            message=message,
            error=error_body,
            success=False,
        ).model_dump(mode="json"),
    )


def _validation_errors(exc: ValidationError | RequestValidationError) -> list[Any]:
    # Echoed input may be a transcript; keep only location, type and message.
    return [
        {"loc": list(err.get("loc", ())), "type": err.get("type"), "msg": err.get("msg")}
        for err in exc.errors()
    ]


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Global exception handler providing structured, sanitized responses.

    Mapping:
    - HTTP exceptions keep their status code
    - request/pydantic validation errors -> 422
    - ``MeetingValidationError`` (blank transcript/question) -> 400
    - ``GenerationServiceError`` and subclasses -> 502
    - anything else -> 500
    """
    environment = get_settings().ENVIRONMENT
    correlation_id = get_correlation_id()

    if isinstance(exc, StarletteHTTPException):
        detail = getattr(exc, "detail", "An error occurred")
        http_error_body: dict[str, Any] = {
            "correlation_id": correlation_id,
            "type": "http_error",
        }
        if environment != "production":
            http_error_body["details"] = {"detail": detail}
            http_error_body["exception_type"] = exc.__class__.__name__
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(
                message="An HTTP error occurred", error=http_error_body, success=False
            ).model_dump(),
        )

    if isinstance(exc, ValidationError | RequestValidationError):
        validation_details = _validation_errors(exc)
        structured_logger.warning(
            "Validation error", validation_errors=validation_details
        )
        return _build_error_response(
            correlation_id=correlation_id,
            error_type="validation_error",
            message=ERROR_TYPE_MESSAGES[ValidationError],
            environment=environment,
            validation_errors=validation_details,
            status_code=422,
        )

    if isinstance(exc, MeetingValidationError):
        structured_logger.warning("Meeting input rejected", field=exc.field)
        # The message names the missing field only, so it is safe everywhere.
        return _build_error_response(
            correlation_id=correlation_id,
            error_type="meeting_validation_error",
            message=str(exc),
            environment=environment,
            details={"field": exc.field},
            status_code=400,
        )

    if isinstance(exc, GenerationServiceError):
        structured_logger.error(
            "Generation service failure",
            error_code=exc.error_code,
            exception_type=exc.__class__.__name__,
        )
        message = (
            ERROR_TYPE_MESSAGES[GenerationConfigurationError]
            if isinstance(exc, GenerationConfigurationError)
            else ERROR_TYPE_MESSAGES[GenerationServiceError]
        )
        return _build_error_response(
            correlation_id=correlation_id,
            error_type=exc.error_code,
            message=message,
            environment=environment,
            details={"reason": exc.message},
            exception_type=exc.__class__.__name__,
            status_code=502,
        )

    # Generic fallback
    structured_logger.exception(
        "Unhandled exception", exception_type=exc.__class__.__name__, error=str(exc)
    )
    traceback_str: str | None = None
    if environment != "production":
        traceback_str = "".join(traceback.format_exception(exc)).strip()

    return _build_error_response(
        correlation_id=correlation_id,
        error_type="internal_server_error",
        message="An internal error occurred",
        environment=environment,
        traceback_str=traceback_str,
        exception_type=exc.__class__.__name__,
    )


def setup_logging() -> None:
    """Configure root logging once: JSON in production, readable text elsewhere."""
    settings = get_settings()

    log_level = logging.DEBUG if settings.ENVIRONMENT == "development" else logging.INFO
    root_logger = logging.getLogger()

    # Idempotent: never stack handlers
    if root_logger.handlers:
        return

    formatter: logging.Formatter
    if settings.ENVIRONMENT == "production":
        formatter = JsonFormatter(
            "%(asctime)s %(levelname)s %(name)s %(message)s",
            rename_fields={"asctime": "timestamp", "levelname": "level"},
        )
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)
    handler.setLevel(log_level)

    root_logger.setLevel(log_level)
    root_logger.addHandler(handler)

    # Quiet noisy third-party loggers in production
    if settings.ENVIRONMENT == "production":
        logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
        logging.getLogger("httpx").setLevel(logging.WARNING)
