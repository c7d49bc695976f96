"""
FastAPI dependency providers.

All injectable dependencies are defined here as plain async functions
used with FastAPI's Depends() system.
"""

from __future__ import annotations

from fastapi import Depends, Request
from pydantic import ValidationError as PydanticValidationError

from config import AppSettings
from errors import (
    ChallengeConfigurationError,
    ChallengeFailedError,
    ChallengeRequiredError,
    ServiceUnavailableError,
    ValidationError,
)
from schemas.dto.requests.auth import RegisterRequest
from schemas.models.captcha import GateResult, GateStatus, RejectionReason
from services.captcha import CredentialStore, VerificationGate, verify_with_retry
from services.captcha.token_extractor import TOKEN_PARAM

RESET_CHALLENGE_ACTION = "reset_challenge"


def get_settings(request: Request) -> AppSettings:
    """Return the AppSettings instance stored on app.state."""
    return request.app.state.settings


def get_gate(request: Request) -> VerificationGate:
    """Return the VerificationGate built at startup."""
    return request.app.state.gate


def get_credential_store(request: Request) -> CredentialStore:
    return request.app.state.credentials


def raise_for_gate_result(result: GateResult) -> None:
    """
    Translate a non-accepted GateResult into the matching AppError.

    Raw error codes are never put in the response body; operators get them
    from the gate's logs.
    """
    if result.accepted:
        return

    if result.indeterminate:
        raise ServiceUnavailableError(
            "Captcha verification is temporarily unavailable. Please try again.",
            action=RESET_CHALLENGE_ACTION,
        )
    if result.status is GateStatus.MISSING_TOKEN:
        raise ChallengeRequiredError(
            "Please complete the captcha.",
            field=TOKEN_PARAM,
            action=RESET_CHALLENGE_ACTION,
        )

    # REJECTED
    if result.reason is RejectionReason.CLIENT_FAULT:
        raise ChallengeFailedError(
            "Captcha verification failed, please try again.",
            field=TOKEN_PARAM,
            action=RESET_CHALLENGE_ACTION,
        )
    raise ChallengeConfigurationError(
        "Captcha verification is misconfigured. Please try again later."
    )


async def get_register_form(request: Request) -> RegisterRequest:
    """Validate the registration form, raising ValidationError on the first bad field."""
    form = await request.form()
    try:
        return RegisterRequest(
            email=form.get("email"),
            password=form.get("password"),
            user_name=form.get("user_name"),
        )
    except PydanticValidationError as e:
        first = e.errors()[0]
        field = str(first["loc"][0]) if first.get("loc") else None
        raise ValidationError(first["msg"], field=field) from e


async def require_registration_challenge(
    request: Request,
    body: RegisterRequest = Depends(get_register_form),
    gate: VerificationGate = Depends(get_gate),
    settings: AppSettings = Depends(get_settings),
) -> RegisterRequest:
    """
    Validate the form, then block unless the submitted ArCaptcha token is accepted.

    The form is checked first: tokens are single-use, so a form that would be
    rejected anyway must not spend one.
    """
    form = await request.form()
    result = await verify_with_retry(
        gate,
        form,
        attempts=settings.arcaptcha.arcaptcha_retry_attempts,
        backoff_seconds=settings.arcaptcha.arcaptcha_retry_backoff_seconds,
    )
    raise_for_gate_result(result)
    return body
