"""
Turns a VerificationResponse into an accept/reject decision.

Rules:
- success is authoritative: any error codes sent alongside it are ignored.
- A failure whose codes are all user-side (missing/invalid response) is a
  CLIENT_FAULT; the user retakes the challenge.
- Every other failure, including one with no codes or unrecognised codes, is
  a SERVER_FAULT. Nothing but success=true is ever accepted.
"""

from __future__ import annotations

from schemas.models.captcha import (
    CLIENT_ERROR_CODES,
    RejectionReason,
    VerificationOutcome,
    VerificationResponse,
)


def classify(response: VerificationResponse) -> VerificationOutcome:
    if response.success:
        return VerificationOutcome.accept()

    codes = response.error_codes
    if codes and codes <= CLIENT_ERROR_CODES:
        return VerificationOutcome.reject(RejectionReason.CLIENT_FAULT, codes)
    return VerificationOutcome.reject(RejectionReason.SERVER_FAULT, codes)
