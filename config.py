"""
Application configuration via pydantic-settings.

All settings are loaded from environment variables (and .env file).

ArCaptcha keys are read here but never validated here: the credential store
performs the fail-fast check at startup so that the settings object itself
can still be built (e.g. for the health endpoint) on a misconfigured host.
"""

from __future__ import annotations

from typing import Optional

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ARCAPTCHA_VERIFY_URL = "https://api.arcaptcha.ir/arcaptcha/api/verify"


class ArcaptchaSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    arcaptcha_site_key: str = ""
    arcaptcha_secret_key: str = ""
    arcaptcha_verify_url: str = ARCAPTCHA_VERIFY_URL
    arcaptcha_timeout_seconds: float = 5.0

    # Name of the JSON field carrying error codes in the verify response
    arcaptcha_error_codes_field: str = "errorCodes"

    # Caller-side retry on transport/status failures; 1 disables retrying
    arcaptcha_retry_attempts: int = 1
    arcaptcha_retry_backoff_seconds: float = 0.25

    @property
    def configured(self) -> bool:
        return bool(
            self.arcaptcha_site_key.strip() and self.arcaptcha_secret_key.strip()
        )


class LoggingSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    log_level: str = "INFO"
    log_format: str = "console"  # "json" in production


class SentrySettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    sentry_dsn: str = ""
    sentry_send_pii: bool = False
    sentry_traces_sample_rate: float = 0.1


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    env: str = "development"
    app_name: str = "arcaptcha-gate"

    cors_origins: list[str] = ["*"]

    # OpenAPI docs URL (None disables the docs UI in production)
    docs_url: Optional[str] = "/docs"

    # Sub-configs (composed via model_validator below)
    arcaptcha: Optional[ArcaptchaSettings] = None
    logging: Optional[LoggingSettings] = None
    sentry: Optional[SentrySettings] = None

    @model_validator(mode="after")
    def _populate_sub_configs(self) -> "AppSettings":
        if self.arcaptcha is None:
            self.arcaptcha = ArcaptchaSettings()
        if self.logging is None:
            self.logging = LoggingSettings()
        if self.sentry is None:
            self.sentry = SentrySettings()
        return self

    @property
    def is_production(self) -> bool:
        return self.env == "production"
