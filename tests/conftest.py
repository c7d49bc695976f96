"""
Shared test configuration.

Patches dotenv so pydantic-settings never reads the project's real .env file
during tests. Tests control config exclusively through monkeypatch.setenv()
or explicit settings objects.
"""

import pytest
from pydantic import SecretStr

from schemas.models.captcha import CredentialPair
from services.captcha import CredentialStore

SITE_KEY = "test-site-key"
SECRET_KEY = "test-secret-key"


@pytest.fixture(autouse=True)
def disable_dotenv_loading(monkeypatch):
    """Prevent pydantic-settings from loading .env files in all tests."""
    import pydantic_settings.sources.providers.dotenv as ps_dotenv

    monkeypatch.setattr(ps_dotenv, "dotenv_values", lambda *a, **kw: {})


@pytest.fixture
def credentials() -> CredentialPair:
    return CredentialPair(site_key=SITE_KEY, secret_key=SecretStr(SECRET_KEY))


@pytest.fixture
def credential_store(credentials) -> CredentialStore:
    return CredentialStore(credentials)
