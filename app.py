"""
FastAPI application factory.
create_app() is the single entry point for building the app.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import httpx
import sentry_sdk
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import AppSettings
from errors import register_error_handlers
from infrastructure.captcha.arcaptcha import ArcaptchaProvider
from infrastructure.http_client import HttpClient
from routes.auth_routes import router as auth_router
from routes.health_routes import router as health_router
from services.captcha import CredentialStore, VerificationGate
from shared.logging import get_logger, setup_logging

log = get_logger(__name__)


def create_app(
    settings: Optional[AppSettings] = None,
    http_transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """Create and return a fully configured FastAPI application.

    ``http_transport`` replaces the network transport of the outbound client
    (tests pass an httpx.MockTransport).
    """
    if settings is None:
        settings = AppSettings()

    setup_logging(settings.logging, settings.sentry)

    # Initialise Sentry before anything else so it captures startup errors.
    # ERROR logs (integration faults, unreachable verifier) become events.
    if settings.sentry.sentry_dsn:
        sentry_sdk.init(
            dsn=settings.sentry.sentry_dsn,
            send_default_pii=settings.sentry.sentry_send_pii,
            traces_sample_rate=settings.sentry.sentry_traces_sample_rate,
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        # ── Startup ──────────────────────────────────────────────────────────
        captcha = settings.arcaptcha

        # Raises CaptchaConfigurationError on missing keys; startup aborts.
        credentials = CredentialStore.from_settings(captcha)

        http_client = HttpClient(
            timeout=captcha.arcaptcha_timeout_seconds, transport=http_transport
        )
        provider = ArcaptchaProvider(
            http_client,
            verify_url=captcha.arcaptcha_verify_url,
            error_codes_field=captcha.arcaptcha_error_codes_field,
        )

        app.state.settings = settings
        app.state.http_client = http_client
        app.state.credentials = credentials
        app.state.gate = VerificationGate(provider, credentials)

        log.info(
            "arcaptcha_gate_ready",
            verify_url=captcha.arcaptcha_verify_url,
            timeout_seconds=captcha.arcaptcha_timeout_seconds,
            retry_attempts=captcha.arcaptcha_retry_attempts,
        )

        yield

        # ── Shutdown ─────────────────────────────────────────────────────────
        await http_client.aclose()

    app = FastAPI(
        title=settings.app_name,
        version="1.0.0",
        docs_url=settings.docs_url,
        redoc_url=None,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)
    app.include_router(health_router)
    app.include_router(auth_router)

    return app
