"""
Caller-side retry around the verification gate.

Only TRANSPORT_ERROR and UNEXPECTED_STATUS are retried: the remote never
ruled on the token. A REJECTED result is final (the token may already be
consumed) and MISSING_TOKEN or MALFORMED_RESPONSE will not change on retry.
"""

from __future__ import annotations

import asyncio
from typing import Any, Mapping

from schemas.models.captcha import GateResult
from services.captcha.gate import VerificationGate
from shared.logging import get_logger

log = get_logger(__name__)

MAX_BACKOFF_SECONDS = 5.0


async def verify_with_retry(
    gate: VerificationGate,
    params: Mapping[str, Any],
    *,
    attempts: int = 1,
    backoff_seconds: float = 0.25,
) -> GateResult:
    """Run the gate up to ``attempts`` times with exponential backoff."""
    attempts = max(1, attempts)

    result = await gate.verify_registration_challenge(params)
    for attempt in range(1, attempts):
        if not result.retryable:
            break
        delay = min(backoff_seconds * (2 ** (attempt - 1)), MAX_BACKOFF_SECONDS)
        log.info(
            "arcaptcha_verification_retry",
            attempt=attempt + 1,
            max_attempts=attempts,
            delay_seconds=delay,
            previous_status=result.status.value,
        )
        await asyncio.sleep(delay)
        result = await gate.verify_registration_challenge(params)
    return result
