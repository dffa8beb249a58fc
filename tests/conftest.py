"""
Pytest configuration and fixtures for security registration tests.

Provides fixtures for:
- Security settings (with and without provider blocks)
- Fresh registration state and service registry per test
"""

import pytest

from jwt_security.config.settings import (
    AzureADSecuritySettings,
    FacebookSecuritySettings,
    GoogleSecuritySettings,
    SecuritySettings,
    TwitterSecuritySettings,
    get_security_settings,
    get_settings,
)
from jwt_security.core.auth.registration_state import RegistrationState, reset_registration_state
from jwt_security.infrastructure.registry.service_collection import ServiceCollection

TEST_SECRET = "test-signing-secret-with-enough-length"
TEST_ISSUER = "https://auth.test.local"
TEST_AUDIENCE = "test-api"


@pytest.fixture(autouse=True)
def isolate_process_state():
    """Reset process-wide registration flags and cached settings."""
    reset_registration_state()
    get_settings.cache_clear()
    get_security_settings.cache_clear()
    yield
    reset_registration_state()
    get_settings.cache_clear()
    get_security_settings.cache_clear()


@pytest.fixture
def security_settings() -> SecuritySettings:
    """Minimal valid settings (no provider blocks)."""
    return SecuritySettings(secret=TEST_SECRET, issuer=TEST_ISSUER, audience=TEST_AUDIENCE)


@pytest.fixture
def provider_settings() -> SecuritySettings:
    """Settings with every built-in provider configured."""
    return SecuritySettings(
        secret=TEST_SECRET,
        issuer=TEST_ISSUER,
        audience=TEST_AUDIENCE,
        facebook=FacebookSecuritySettings(app_id="fb-app", app_secret="fb-secret"),
        google=GoogleSecuritySettings(
            client_id="google-client",
            client_secret="google-secret",
            redirect_uri="https://app.test.local/signin-google",
        ),
        twitter=TwitterSecuritySettings(consumer_key="tw-key", consumer_secret="tw-secret"),
        azure_ad=AzureADSecuritySettings(
            tenant="contoso.onmicrosoft.com",
            resource_id="api://contoso",
            client_id="aad-client",
            client_secret="aad-secret",
        ),
    )


@pytest.fixture
def state() -> RegistrationState:
    return RegistrationState()


@pytest.fixture
def services() -> ServiceCollection:
    return ServiceCollection()
