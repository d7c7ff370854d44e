# resumeforge/core/errors.py
"""Domain errors and the FastAPI handlers that turn them into consistent error bodies.

Every failure that reaches a client has the shape:

    {"success": false, "error": "<CODE>", "message": "<human text>", "details": "<optional>"}

Internal details (tracebacks, provider payloads) never leave the process; at most a
short ``details`` string intended for diagnostics is attached.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger("api.errors")


class ErrorCode:
    INVALID_INPUT = "INVALID_INPUT"
    VALIDATION_FAILED = "VALIDATION_FAILED"
    EXTERNAL_SERVICE_ERROR = "EXTERNAL_SERVICE_ERROR"
    PERSISTENCE_ERROR = "PERSISTENCE_ERROR"
    NOT_FOUND = "NOT_FOUND"
    FORBIDDEN = "FORBIDDEN"
    VERSION_CONFLICT = "VERSION_CONFLICT"
    FEATURE_DISABLED = "FEATURE_DISABLED"
    ADAPTATION_FAILED = "ADAPTATION_FAILED"
    METHOD_NOT_ALLOWED = "METHOD_NOT_ALLOWED"
    INTERNAL_ERROR = "INTERNAL_ERROR"

    # Figma adapter
    MISSING_FIGMA_LINK = "MISSING_FIGMA_LINK"
    INVALID_FIGMA_LINK = "INVALID_FIGMA_LINK"
    INVALID_RESUME_DATA = "INVALID_RESUME_DATA"
    FIGMA_AGENT_NOT_READY = "FIGMA_AGENT_NOT_READY"


class ResumeForgeError(Exception):
    """Base error carrying a machine-readable code and an HTTP status."""

    code: str = ErrorCode.INTERNAL_ERROR
    status_code: int = 500

    def __init__(
        self,
        message: str,
        *,
        code: Optional[str] = None,
        status_code: Optional[int] = None,
        details: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        if status_code is not None:
            self.status_code = status_code
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"success": False, "error": self.code, "message": self.message}
        if self.details:
            body["details"] = self.details
        return body


class InvalidInputError(ResumeForgeError):
    code = ErrorCode.INVALID_INPUT
    status_code = 400


class SchemaValidationError(ResumeForgeError):
    """Raised when a value does not conform to ParsedResume / JobSpec.

    ``fields`` lists the offending field paths (e.g. ``experience.0.company``).
    """

    code = ErrorCode.VALIDATION_FAILED
    status_code = 422

    def __init__(self, message: str, *, fields: Optional[list[str]] = None, **kwargs: Any):
        self.fields = list(fields or [])
        if self.fields and "details" not in kwargs:
            kwargs["details"] = "Invalid fields: " + ", ".join(self.fields)
        super().__init__(message, **kwargs)


class ExternalServiceError(ResumeForgeError):
    code = ErrorCode.EXTERNAL_SERVICE_ERROR
    status_code = 502


class PersistenceError(ResumeForgeError):
    code = ErrorCode.PERSISTENCE_ERROR
    status_code = 500


class NotFoundError(ResumeForgeError):
    code = ErrorCode.NOT_FOUND
    status_code = 404


class ForbiddenError(ResumeForgeError):
    code = ErrorCode.FORBIDDEN
    status_code = 403


class VersionConflictError(ResumeForgeError):
    code = ErrorCode.VERSION_CONFLICT
    status_code = 409


class FeatureDisabledError(ResumeForgeError):
    code = ErrorCode.FEATURE_DISABLED
    status_code = 403


class TailoringFailedError(ResumeForgeError):
    code = ErrorCode.ADAPTATION_FAILED
    status_code = 502


# Provider error classification -------------------------------------------------

PROVIDER_MESSAGES = {
    "rate_limited": "The AI service is temporarily rate limited. Please try again in a moment.",
    "access_denied": "The AI service rejected our credentials. Please contact support.",
    "not_found": "The configured AI model could not be found.",
    "unavailable": "The AI service is currently unavailable. Please try again later.",
}


def classify_provider_error(raw: str) -> str:
    """Map a provider error string to one of the PROVIDER_MESSAGES keys."""
    text = (raw or "").lower()
    if "429" in text or "rate limit" in text or "quota" in text or "ratelimit" in text:
        return "rate_limited"
    if "401" in text or "403" in text or "permission" in text or "unauthorized" in text or "api key" in text:
        return "access_denied"
    if "404" in text or "not found" in text or "does not exist" in text:
        return "not_found"
    return "unavailable"


def provider_error(raw: str) -> ExternalServiceError:
    """Build a user-facing ExternalServiceError from a raw provider failure."""
    kind = classify_provider_error(raw)
    status = 429 if kind == "rate_limited" else 502
    return ExternalServiceError(PROVIDER_MESSAGES[kind], status_code=status, details=kind)


# FastAPI wiring -----------------------------------------------------------------

def _error_body(code: str, message: str, details: Optional[str] = None) -> dict[str, Any]:
    body: dict[str, Any] = {"success": False, "error": code, "message": message}
    if details:
        body["details"] = details
    return body


def register_error_handlers(app: FastAPI) -> None:

    @app.exception_handler(ResumeForgeError)
    async def _handle_domain_error(request: Request, exc: ResumeForgeError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s (%s)", request.method, request.url.path, exc.code, exc.message)
        else:
            logger.info("%s %s rejected: %s (%s)", request.method, request.url.path, exc.code, exc.message)
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def _handle_request_validation(request: Request, exc: RequestValidationError):
        fields = [".".join(str(p) for p in err.get("loc", ()) if p != "body") for err in exc.errors()]
        return JSONResponse(
            status_code=400,
            content=_error_body(ErrorCode.INVALID_INPUT, "Invalid request", "Invalid fields: " + ", ".join(fields)),
        )

    @app.exception_handler(Exception)
    async def _handle_unexpected(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content=_error_body(ErrorCode.INTERNAL_ERROR, "An unexpected error occurred"),
        )
