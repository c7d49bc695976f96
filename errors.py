"""
Application error hierarchy and FastAPI exception handlers.

AppError is the base for all typed HTTP-facing errors. The global exception
handler converts AppError subclasses to consistent JSON responses.

CaptchaError is the internal hierarchy raised by the captcha layer (credential
store, token extractor, verification client). The verification gate turns
those into typed results; they never reach the HTTP layer directly.
"""

from __future__ import annotations

from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse


class AppError(Exception):
    """Base application error. All typed errors inherit from this."""

    status_code: int = 500
    error_code: str = "internal_error"

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        details: Optional[Any] = None,
        action: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.field = field
        self.details = details
        self.action = action

    def to_dict(self) -> dict:
        payload: dict = {"error": self.message, "code": self.error_code}
        if self.field is not None:
            payload["field"] = self.field
        if self.details is not None:
            payload["details"] = self.details
        if self.action is not None:
            payload["action"] = self.action
        return payload


class ValidationError(AppError):
    status_code = 400
    error_code = "validation_error"


class ChallengeRequiredError(AppError):
    """No challenge token was submitted with the form."""

    status_code = 400
    error_code = "captcha_required"


class ChallengeFailedError(AppError):
    """The challenge service rejected the token; the user must retake it."""

    status_code = 400
    error_code = "captcha_failed"


class ChallengeConfigurationError(AppError):
    """The challenge service rejected our integration (keys, site, request)."""

    status_code = 500
    error_code = "captcha_misconfigured"


class ServiceUnavailableError(AppError):
    """The challenge result could not be determined (network, upstream)."""

    status_code = 503
    error_code = "captcha_unavailable"


# ── Captcha layer ─────────────────────────────────────────────────────────────


class CaptchaError(Exception):
    """Base exception for the captcha verification layer."""


class CaptchaConfigurationError(CaptchaError):
    """Site key or secret key is missing. Fatal at startup."""


class MissingTokenError(CaptchaError):
    """The inbound request carries no challenge token."""


class CaptchaVerificationError(CaptchaError):
    """Verification could not produce a response (indeterminate)."""


class CaptchaTransportError(CaptchaVerificationError):
    """Network failure or timeout talking to the verification endpoint."""


class CaptchaUnexpectedStatusError(CaptchaVerificationError):
    """The verification endpoint answered with a non-2xx status."""

    def __init__(self, message: str, *, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


class CaptchaMalformedResponseError(CaptchaVerificationError):
    """The verification endpoint body does not match the expected schema."""


def register_error_handlers(app: FastAPI) -> None:
    """Register global exception handlers on the FastAPI app."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        # Sentry integration: if sentry_sdk is initialized it will auto-capture
        # unhandled exceptions before this handler fires.
        return JSONResponse(
            status_code=500,
            content={"error": "An internal server error occurred.", "code": "internal_error"},
        )
