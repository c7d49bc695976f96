"""CaptchaProvider protocol — the gate depends on this, not the concrete implementation."""

from typing import Protocol

from schemas.models.captcha import CredentialPair, VerificationResponse


class CaptchaProvider(Protocol):
    async def verify(
        self, token: str, credentials: CredentialPair
    ) -> VerificationResponse: ...
