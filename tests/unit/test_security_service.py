"""Unit tests for SecurityService token issuance"""

from dataclasses import dataclass

import pytest

from jwt_security.core.auth.claim_types import get_claim_type_catalog
from jwt_security.core.auth.exceptions import ClaimExtractionError
from jwt_security.core.auth.security_service import SecurityService
from jwt_security.core.auth.token_scheme import configure_jwt_bearer_scheme
from jwt_security.domain.models.claims import IdType
from jwt_security.domain.models.users import UserModel

pytestmark = pytest.mark.unit


@dataclass
class Customer:
    customer_id: str
    tier: str


def customer_claims(builder):
    builder.add_claim(IdType.NAME_IDENTIFIER, lambda c: c.customer_id)
    builder.add_claim("tier", lambda c: c.tier)
    builder.add_claim(IdType.ROLE, "customer")
    builder.add_claim(IdType.ROLE, "reader")


class TestBuildClaims:

    def test_default_claims_for_user_model(self, security_settings):
        service = SecurityService(security_settings)
        catalog = get_claim_type_catalog()

        claims = service.build_claims(UserModel(id="alice", password="pw", role="admin"))

        assert [(c.type, c.value) for c in claims] == [
            (catalog.resolve(IdType.NAME_IDENTIFIER), "alice"),
            (catalog.resolve(IdType.ROLE), "admin"),
        ]

    def test_default_claims_without_role(self, security_settings):
        service = SecurityService(security_settings)

        claims = service.build_claims(UserModel(id="alice", password="pw"))

        assert len(claims) == 1

    def test_customizer_replaces_defaults(self, security_settings):
        service = SecurityService(security_settings, customer_claims)

        claims = service.build_claims(Customer("c-9", "gold"))

        assert [c.value for c in claims] == ["c-9", "gold", "customer", "reader"]

    def test_extraction_error_propagates(self, security_settings):
        service = SecurityService(security_settings, lambda b: b.add_claim("x", lambda u: u.missing))

        with pytest.raises(ClaimExtractionError):
            service.build_claims(Customer("c-9", "gold"))


class TestGenerateToken:

    def test_token_validates_with_policy(self, services, security_settings):
        policy = configure_jwt_bearer_scheme(services, security_settings)
        service = SecurityService(security_settings, customer_claims)
        catalog = get_claim_type_catalog()

        token = service.generate_token(Customer("c-9", "gold"))
        principal = policy.validate(token.access_token)

        assert token.token_type == "bearer"
        assert token.expires_in == 30 * 60
        assert principal.find_first(catalog.resolve(IdType.NAME_IDENTIFIER)) == "c-9"
        assert principal.find_first("tier") == "gold"
        assert principal.find_all(catalog.resolve(IdType.ROLE)) == ["customer", "reader"]

    def test_tokens_are_unique(self, security_settings):
        service = SecurityService(security_settings)
        user = UserModel(id="alice", password="pw")

        assert service.generate_token(user).access_token != service.generate_token(user).access_token
