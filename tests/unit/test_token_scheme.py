"""Unit tests for the JWT bearer token scheme"""

from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from jwt_security.config.settings import SecuritySettings
from jwt_security.core.auth.exceptions import AuthenticationError, MissingRequiredSetting
from jwt_security.core.auth.token_scheme import (
    JWT_BEARER_SCHEME,
    TokenValidationPolicy,
    configure_jwt_bearer_scheme,
)

TEST_SECRET = "test-signing-secret-with-enough-length"
TEST_ISSUER = "https://auth.test.local"
TEST_AUDIENCE = "test-api"

pytestmark = pytest.mark.unit


def _token(
    secret=TEST_SECRET,
    issuer=TEST_ISSUER,
    audience=TEST_AUDIENCE,
    expires_in=timedelta(minutes=5),
    **claims,
):
    now = datetime.now(timezone.utc)
    payload = {
        "iss": issuer,
        "aud": audience,
        "iat": int(now.timestamp()),
        "exp": int((now + expires_in).timestamp()),
        **claims,
    }
    return jwt.encode(payload, secret, algorithm="HS256")


class TestConfigure:

    def test_policy_fields(self, services, security_settings):
        policy = configure_jwt_bearer_scheme(services, security_settings)

        assert policy.scheme_name == JWT_BEARER_SCHEME
        assert policy.signing_key == TEST_SECRET.encode("utf-8")
        assert policy.issuer == TEST_ISSUER
        assert policy.audience == TEST_AUDIENCE
        assert policy.clock_skew == timedelta(minutes=5)
        assert policy.validate_lifetime is True

    def test_policy_registered_as_singleton(self, services, security_settings):
        policy = configure_jwt_bearer_scheme(services, security_settings)

        assert services.create_scope().resolve(TokenValidationPolicy) is policy

    def test_custom_clock_skew(self, services):
        settings = SecuritySettings(secret="s-key", issuer="i", audience="a", clock_skew_minutes=1)

        policy = configure_jwt_bearer_scheme(services, settings)

        assert policy.clock_skew == timedelta(minutes=1)

    @pytest.mark.parametrize("missing", ["secret", "issuer", "audience"])
    def test_missing_required_setting(self, services, missing):
        values = {"secret": "s-key", "issuer": "i", "audience": "a", missing: None}

        with pytest.raises(MissingRequiredSetting) as exc_info:
            configure_jwt_bearer_scheme(services, SecuritySettings(**values))

        assert exc_info.value.setting == missing
        assert missing in str(exc_info.value)
        assert TokenValidationPolicy not in services

    def test_empty_secret_is_missing(self, services):
        with pytest.raises(MissingRequiredSetting, match="secret"):
            configure_jwt_bearer_scheme(services, SecuritySettings(secret="", issuer="i", audience="a"))

    def test_repr_hides_signing_key(self, services, security_settings):
        policy = configure_jwt_bearer_scheme(services, security_settings)

        assert TEST_SECRET not in repr(policy)


class TestValidate:

    @pytest.fixture
    def policy(self, services, security_settings):
        return configure_jwt_bearer_scheme(services, security_settings)

    def test_valid_token(self, policy):
        principal = policy.validate(_token(role=["admin", "user"], email="a@b.com"))

        assert principal.find_first("email") == "a@b.com"
        assert principal.find_all("role") == ["admin", "user"]

    def test_wrong_secret(self, policy):
        with pytest.raises(AuthenticationError):
            policy.validate(_token(secret="another-secret-value"))

    def test_wrong_issuer(self, policy):
        with pytest.raises(AuthenticationError):
            policy.validate(_token(issuer="https://evil.test"))

    def test_wrong_audience(self, policy):
        with pytest.raises(AuthenticationError):
            policy.validate(_token(audience="other-api"))

    def test_expired_within_clock_skew_accepted(self, policy):
        token = _token(expires_in=timedelta(minutes=-2))

        assert policy.validate(token).find_first("iss") == TEST_ISSUER

    def test_expired_beyond_clock_skew_rejected(self, policy):
        with pytest.raises(AuthenticationError):
            policy.validate(_token(expires_in=timedelta(minutes=-10)))

    def test_token_without_exp_rejected(self, policy):
        token = jwt.encode(
            {"iss": TEST_ISSUER, "aud": TEST_AUDIENCE, "sub": "x"},
            TEST_SECRET,
            algorithm="HS256",
        )

        with pytest.raises(AuthenticationError):
            policy.validate(token)

    def test_token_without_aud_rejected(self, policy):
        payload = jwt.get_unverified_claims(_token())
        del payload["aud"]

        with pytest.raises(AuthenticationError):
            policy.validate(jwt.encode(payload, TEST_SECRET, algorithm="HS256"))

    def test_token_without_iss_rejected(self, policy):
        payload = jwt.get_unverified_claims(_token())
        del payload["iss"]

        with pytest.raises(AuthenticationError):
            policy.validate(jwt.encode(payload, TEST_SECRET, algorithm="HS256"))

    def test_garbage_token(self, policy):
        with pytest.raises(AuthenticationError):
            policy.validate("not-a-jwt")
