"""
Registration endpoints guarded by the ArCaptcha challenge.

GET  /auth/captcha   — public widget configuration (site key, field name)
POST /auth/register  — form submission; proceeds only if the challenge passed

Creating the account is owned by the registration service that mounts these
routes; this router only decides whether it may run.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from dependencies import get_credential_store, require_registration_challenge
from schemas.dto.requests.auth import RegisterRequest
from schemas.dto.responses.auth import CaptchaConfigResponse, RegisterResponse
from schemas.dto.responses.common import ErrorResponse
from services.captcha import CredentialStore
from services.captcha.token_extractor import TOKEN_PARAM
from shared.logging import get_logger

router = APIRouter(prefix="/auth", tags=["auth"])
log = get_logger(__name__)


@router.get("/captcha", response_model=CaptchaConfigResponse)
async def captcha_config(
    credentials: CredentialStore = Depends(get_credential_store),
) -> CaptchaConfigResponse:
    return CaptchaConfigResponse(
        site_key=credentials.site_key, token_param=TOKEN_PARAM
    )


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=201,
    responses={
        400: {"model": ErrorResponse, "description": "Captcha missing or failed, or invalid form"},
        500: {"model": ErrorResponse, "description": "Captcha integration misconfigured"},
        503: {"model": ErrorResponse, "description": "Captcha verification unavailable"},
    },
)
async def register(
    body: RegisterRequest = Depends(require_registration_challenge),
) -> RegisterResponse:
    log.info("registration_challenge_passed", user_name=body.user_name)
    return RegisterResponse(
        success=True,
        message="Captcha verified, registration accepted.",
        email=body.email,
        user_name=body.user_name,
    )
