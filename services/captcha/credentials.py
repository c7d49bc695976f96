"""
Credential store for the ArCaptcha site/secret key pair.

Built once at startup. An absent or blank key is a fatal configuration error
raised from from_settings(), so a misconfigured process never starts serving.
"""

from __future__ import annotations

from pydantic import SecretStr

from config import ArcaptchaSettings
from errors import CaptchaConfigurationError
from schemas.models.captcha import CredentialPair
from shared.logging import get_logger

log = get_logger(__name__)


class CredentialStore:
    def __init__(self, credentials: CredentialPair) -> None:
        self._credentials = credentials

    @classmethod
    def from_settings(cls, settings: ArcaptchaSettings) -> "CredentialStore":
        site = settings.arcaptcha_site_key.strip()
        secret = settings.arcaptcha_secret_key.strip()

        missing = [
            name
            for name, value in (
                ("ARCAPTCHA_SITE_KEY", site),
                ("ARCAPTCHA_SECRET_KEY", secret),
            )
            if not value
        ]
        if missing:
            log.critical("arcaptcha_credentials_missing", missing=missing)
            raise CaptchaConfigurationError(
                f"ArCaptcha is not configured: {', '.join(missing)} must be set"
            )

        return cls(CredentialPair(site_key=site, secret_key=SecretStr(secret)))

    def get(self) -> CredentialPair:
        return self._credentials

    @property
    def site_key(self) -> str:
        """Public site key, safe to embed in the widget's data-site-key."""
        return self._credentials.site_key
