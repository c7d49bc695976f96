"""
Verification gate — the single entry point the registration flow calls.

    extract token ──missing──────────────────────────▶ MISSING_TOKEN
         │
    call remote ──transport / status / body failure──▶ TRANSPORT_ERROR |
         │                                             UNEXPECTED_STATUS |
         │                                             MALFORMED_RESPONSE
    classify ─────────────────────────────────────────▶ ACCEPTED | REJECTED

Every invocation ends in exactly one GateResult. The gate holds no mutable
state, so one instance serves any number of concurrent requests.
"""

from __future__ import annotations

from typing import Any, Mapping

from errors import (
    CaptchaMalformedResponseError,
    CaptchaTransportError,
    CaptchaUnexpectedStatusError,
    MissingTokenError,
)
from infrastructure.captcha.protocol import CaptchaProvider
from schemas.models.captcha import GateResult, GateStatus, RejectionReason
from services.captcha.classifier import classify
from services.captcha.credentials import CredentialStore
from services.captcha.token_extractor import extract_token
from shared.logging import get_logger

log = get_logger(__name__)


class VerificationGate:
    def __init__(self, provider: CaptchaProvider, credentials: CredentialStore) -> None:
        self._provider = provider
        self._credentials = credentials

    async def verify_registration_challenge(
        self, params: Mapping[str, Any]
    ) -> GateResult:
        try:
            token = extract_token(params)
        except MissingTokenError as e:
            log.info("arcaptcha_token_missing")
            return GateResult.failure(GateStatus.MISSING_TOKEN, str(e))

        try:
            response = await self._provider.verify(token, self._credentials.get())
        except CaptchaTransportError as e:
            return self._indeterminate(GateStatus.TRANSPORT_ERROR, e)
        except CaptchaUnexpectedStatusError as e:
            return self._indeterminate(GateStatus.UNEXPECTED_STATUS, e)
        except CaptchaMalformedResponseError as e:
            return self._indeterminate(GateStatus.MALFORMED_RESPONSE, e)

        outcome = classify(response)
        result = GateResult.from_outcome(outcome)
        codes = sorted(code.value for code in outcome.error_codes)

        if result.accepted:
            log.info("arcaptcha_verification_accepted")
        elif outcome.reason is RejectionReason.CLIENT_FAULT:
            log.info(
                "arcaptcha_verification_rejected",
                reason=outcome.reason.value,
                error_codes=codes,
            )
        else:
            # Integration defect: bad keys or a malformed request. Alert operators.
            log.error(
                "arcaptcha_integration_error",
                reason=RejectionReason.SERVER_FAULT.value,
                error_codes=codes,
            )
        return result

    @staticmethod
    def _indeterminate(status: GateStatus, exc: Exception) -> GateResult:
        log.warning(
            "arcaptcha_verification_indeterminate",
            status=status.value,
            error=str(exc),
        )
        return GateResult.failure(status, str(exc))
