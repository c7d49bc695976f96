"""Fixtures building the full FastAPI app against a mocked verify endpoint."""

from __future__ import annotations

import json
from typing import Callable, Optional

import httpx
import pytest
from fastapi.testclient import TestClient

from app import create_app
from config import AppSettings, ArcaptchaSettings, LoggingSettings, SentrySettings

VERIFY_URL = "https://captcha.test/arcaptcha/api/verify"


class FakeVerifier:
    """Scripted stand-in for the remote verify endpoint, mounted via MockTransport."""

    def __init__(self) -> None:
        self.requests: list[dict] = []
        self._responder: Callable[[httpx.Request], httpx.Response] = (
            lambda request: httpx.Response(200, json={"success": True})
        )

    def reply(self, status_code: int = 200, payload: Optional[object] = None, text: str = "") -> None:
        def responder(request: httpx.Request) -> httpx.Response:
            if payload is None:
                return httpx.Response(status_code, text=text)
            return httpx.Response(status_code, json=payload)

        self._responder = responder

    def fail_with(self, exc_type: type[httpx.TransportError]) -> None:
        def responder(request: httpx.Request) -> httpx.Response:
            raise exc_type("simulated failure", request=request)

        self._responder = responder

    def sequence(self, *responders: Callable[[httpx.Request], httpx.Response]) -> None:
        queue = list(responders)

        def responder(request: httpx.Request) -> httpx.Response:
            return queue.pop(0)(request)

        self._responder = responder

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(json.loads(request.content))
        return self._responder(request)


def build_settings(**captcha_overrides) -> AppSettings:
    captcha = dict(
        arcaptcha_site_key="site-123",
        arcaptcha_secret_key="secret-456",
        arcaptcha_verify_url=VERIFY_URL,
        arcaptcha_retry_backoff_seconds=0.0,
    )
    captcha.update(captcha_overrides)
    return AppSettings(
        env="test",
        arcaptcha=ArcaptchaSettings(**captcha),
        logging=LoggingSettings(log_level="WARNING", log_format="console"),
        sentry=SentrySettings(sentry_dsn=""),
    )


@pytest.fixture
def verifier() -> FakeVerifier:
    return FakeVerifier()


@pytest.fixture
def make_client(verifier):
    clients: list[TestClient] = []

    def _make(**captcha_overrides) -> TestClient:
        app = create_app(
            build_settings(**captcha_overrides),
            http_transport=httpx.MockTransport(verifier),
        )
        client = TestClient(app)
        client.__enter__()
        clients.append(client)
        return client

    yield _make

    for client in clients:
        client.__exit__(None, None, None)


@pytest.fixture
def client(make_client) -> TestClient:
    return make_client()


@pytest.fixture
def settings_factory():
    return build_settings
