"""ArCaptcha implementation of CaptchaProvider.

Sends one JSON POST per call and parses the body into a VerificationResponse.
Nothing is retried or cached here: tokens are single-use, so retry policy
belongs to the caller (see services.captcha.retry).

Failures are raised as typed CaptchaVerificationError subclasses rather than
collapsed into False; the gate decides what each one means.
"""

from __future__ import annotations

import httpx
from pydantic import ValidationError

from config import ARCAPTCHA_VERIFY_URL
from errors import (
    CaptchaMalformedResponseError,
    CaptchaTransportError,
    CaptchaUnexpectedStatusError,
)
from infrastructure.http_client import HttpClient
from schemas.models.captcha import (
    CredentialPair,
    VerificationRequest,
    VerificationResponse,
)
from shared.logging import get_logger

log = get_logger(__name__)

_JSON_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}


class ArcaptchaProvider:
    def __init__(
        self,
        http_client: HttpClient,
        verify_url: str = ARCAPTCHA_VERIFY_URL,
        error_codes_field: str = "errorCodes",
    ) -> None:
        self._http = http_client
        self._verify_url = verify_url
        self._error_codes_field = error_codes_field

    async def verify(
        self, token: str, credentials: CredentialPair
    ) -> VerificationResponse:
        body = VerificationRequest.build(token, credentials).to_wire()

        # CancelledError is not an httpx error and propagates untouched,
        # which closes the in-flight request.
        try:
            response = await self._http.post(
                self._verify_url, json=body, headers=_JSON_HEADERS
            )
        except httpx.RequestError as e:
            log.error(
                "arcaptcha_request_failed",
                error=str(e),
                error_type=type(e).__name__,
            )
            raise CaptchaTransportError(
                f"ArCaptcha verify request failed: {type(e).__name__}"
            ) from e

        if not 200 <= response.status_code < 300:
            log.error(
                "arcaptcha_api_error",
                status_code=response.status_code,
                response_text=response.text[:200],
            )
            raise CaptchaUnexpectedStatusError(
                f"ArCaptcha verify returned HTTP {response.status_code}",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as e:
            log.error("arcaptcha_response_not_json", response_text=response.text[:200])
            raise CaptchaMalformedResponseError(
                "ArCaptcha verify response is not JSON"
            ) from e

        try:
            return VerificationResponse.from_payload(payload, self._error_codes_field)
        except (ValidationError, ValueError) as e:
            log.error("arcaptcha_response_invalid", error=str(e))
            raise CaptchaMalformedResponseError(
                "ArCaptcha verify response does not match the expected schema"
            ) from e
