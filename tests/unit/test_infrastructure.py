"""Unit tests for the infrastructure layer (HttpClient, ArcaptchaProvider)."""

import json
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from errors import (
    CaptchaMalformedResponseError,
    CaptchaTransportError,
    CaptchaUnexpectedStatusError,
)
from infrastructure.captcha.arcaptcha import ArcaptchaProvider
from infrastructure.http_client import HttpClient
from schemas.models.captcha import ErrorCode

VERIFY_URL = "https://captcha.test/verify"


# ── HttpClient ────────────────────────────────────────────────────────────────


class TestHttpClient:
    async def test_post_delegates_to_httpx(self, mocker):
        client = HttpClient()
        fake_resp = MagicMock(status_code=200)
        mocker.patch.object(client._client, "post", return_value=fake_resp)
        resp = await client.post("http://example.com")
        assert resp.status_code == 200
        await client.aclose()

    async def test_post_propagates_exception(self, mocker):
        client = HttpClient()
        mocker.patch.object(
            client._client, "post", side_effect=httpx.ConnectError("refused")
        )
        with pytest.raises(httpx.ConnectError, match="refused"):
            await client.post("http://example.com")
        await client.aclose()

    async def test_timeout_is_bounded(self):
        async with HttpClient(timeout=2.5) as client:
            assert client._client.timeout.read == 2.5
            assert client._client.timeout.connect == 2.5

    async def test_context_manager(self):
        async with HttpClient() as client:
            assert client is not None


# ── ArcaptchaProvider (mocked HttpClient) ─────────────────────────────────────


class TestArcaptchaProvider:
    def _make(self):
        http = MagicMock()
        return ArcaptchaProvider(http_client=http, verify_url=VERIFY_URL), http

    def _resp(self, status_code=200, payload=None, text=None):
        resp = MagicMock(status_code=status_code)
        if payload is not None:
            resp.json.return_value = payload
            resp.text = json.dumps(payload)
        else:
            resp.json.side_effect = ValueError("no json")
            resp.text = text or ""
        return resp

    async def test_returns_parsed_success(self, credentials):
        provider, http = self._make()
        http.post = AsyncMock(return_value=self._resp(payload={"success": True}))
        result = await provider.verify("good-token", credentials)
        assert result.success is True

    async def test_sends_json_body_once(self, credentials):
        provider, http = self._make()
        http.post = AsyncMock(return_value=self._resp(payload={"success": True}))
        await provider.verify("tok-42", credentials)
        http.post.assert_awaited_once()
        args, kwargs = http.post.call_args
        assert args[0] == VERIFY_URL
        assert kwargs["json"] == {
            "challenge_id": "tok-42",
            "site_key": "test-site-key",
            "secret_key": "test-secret-key",
        }
        assert kwargs["headers"]["Content-Type"] == "application/json"

    async def test_returns_error_codes(self, credentials):
        provider, http = self._make()
        http.post = AsyncMock(
            return_value=self._resp(
                payload={"success": False, "errorCodes": ["invalid-input-response"]}
            )
        )
        result = await provider.verify("bad-token", credentials)
        assert result.success is False
        assert result.error_codes == {ErrorCode.INVALID_RESPONSE}

    @pytest.mark.parametrize(
        "exc",
        [
            httpx.ConnectError("refused"),
            httpx.ReadTimeout("timed out"),
            httpx.ConnectTimeout("timed out"),
        ],
    )
    async def test_network_failure_is_transport_error(self, credentials, exc):
        provider, http = self._make()
        http.post = AsyncMock(side_effect=exc)
        with pytest.raises(CaptchaTransportError):
            await provider.verify("token", credentials)

    @pytest.mark.parametrize("status", [301, 400, 403, 500, 502, 503])
    async def test_non_2xx_is_unexpected_status(self, credentials, status):
        provider, http = self._make()
        http.post = AsyncMock(return_value=self._resp(status_code=status, text="err"))
        with pytest.raises(CaptchaUnexpectedStatusError) as exc_info:
            await provider.verify("token", credentials)
        assert exc_info.value.status_code == status

    async def test_non_json_body_is_malformed(self, credentials):
        provider, http = self._make()
        http.post = AsyncMock(return_value=self._resp(text="<html>oops</html>"))
        with pytest.raises(CaptchaMalformedResponseError):
            await provider.verify("token", credentials)

    @pytest.mark.parametrize(
        "payload",
        [
            ["success"],
            {"success": "perhaps"},
            {"success": "yes"},
            {"success": "on"},
            {"success": "t"},
            {"success": "y"},
            {"success": 1},
            {"success": False, "errorCodes": 7},
        ],
    )
    async def test_schema_mismatch_is_malformed(self, credentials, payload):
        provider, http = self._make()
        http.post = AsyncMock(return_value=self._resp(payload=payload))
        with pytest.raises(CaptchaMalformedResponseError):
            await provider.verify("token", credentials)


# ── ArcaptchaProvider over a real httpx stack ─────────────────────────────────


class TestArcaptchaProviderWire:
    async def test_request_shape_on_the_wire(self, credentials):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"success": True, "extra": 1})

        async with HttpClient(transport=httpx.MockTransport(handler)) as http:
            provider = ArcaptchaProvider(http, verify_url=VERIFY_URL)
            result = await provider.verify("wire-token", credentials)

        assert result.success is True
        assert len(seen) == 1
        request = seen[0]
        assert request.method == "POST"
        assert str(request.url) == VERIFY_URL
        assert request.headers["content-type"] == "application/json"
        assert json.loads(request.content) == {
            "challenge_id": "wire-token",
            "site_key": "test-site-key",
            "secret_key": "test-secret-key",
        }

    async def test_configured_error_codes_field(self, credentials):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200, json={"success": False, "codes": ["invalid-input-secret"]}
            )

        async with HttpClient(transport=httpx.MockTransport(handler)) as http:
            provider = ArcaptchaProvider(
                http, verify_url=VERIFY_URL, error_codes_field="codes"
            )
            result = await provider.verify("t", credentials)

        assert result.error_codes == {ErrorCode.INVALID_SECRET}

    async def test_timeout_is_transport_error(self, credentials):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        async with HttpClient(transport=httpx.MockTransport(handler)) as http:
            provider = ArcaptchaProvider(http, verify_url=VERIFY_URL)
            with pytest.raises(CaptchaTransportError):
                await provider.verify("t", credentials)
