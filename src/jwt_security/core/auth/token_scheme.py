"""JWT bearer token scheme.

Builds the single token validation policy shared by every provider and
registers it with the service registry. The request pipeline consults the
policy on inbound requests.
"""

import logging
from dataclasses import dataclass, field
from datetime import timedelta

from jose import JWTError, jwt

from jwt_security.config.settings import SecuritySettings
from jwt_security.core.auth.exceptions import AuthenticationError, MissingRequiredSetting
from jwt_security.domain.models.claims import Claim, Principal
from jwt_security.infrastructure.registry.service_collection import ServiceRegistry

logger = logging.getLogger(__name__)

JWT_BEARER_SCHEME = "JwtBearer"
DEFAULT_ALGORITHM = "HS256"
DEFAULT_CLOCK_SKEW = timedelta(minutes=5)

REQUIRED_SETTINGS = ("secret", "issuer", "audience")


@dataclass(frozen=True)
class TokenValidationPolicy:
    """Bearer token validation parameters.

    Attributes:
        scheme_name: Authentication scheme name
        signing_key: Symmetric key derived from the shared secret
        issuer: Expected iss claim
        audience: Expected aud claim
        clock_skew: Tolerance applied to exp/nbf/iat
        algorithms: Accepted signing algorithms
    """
    signing_key: bytes = field(repr=False)
    issuer: str
    audience: str
    clock_skew: timedelta = DEFAULT_CLOCK_SKEW
    scheme_name: str = JWT_BEARER_SCHEME
    algorithms: tuple[str, ...] = (DEFAULT_ALGORITHM,)
    validate_issuer_signing_key: bool = True
    validate_issuer: bool = True
    validate_audience: bool = True
    validate_lifetime: bool = True

    def validate(self, token: str) -> Principal:
        """Validate a bearer token and return its claims.

        Raises:
            AuthenticationError: If the token is invalid or expired
        """
        try:
            payload = jwt.decode(
                token,
                self.signing_key,
                algorithms=list(self.algorithms),
                audience=self.audience,
                issuer=self.issuer,
                options={
                    "verify_signature": self.validate_issuer_signing_key,
                    "verify_aud": self.validate_audience,
                    "verify_iss": self.validate_issuer,
                    "verify_exp": self.validate_lifetime,
                    "verify_nbf": self.validate_lifetime,
                    "verify_iat": self.validate_lifetime,
                    "require_exp": self.validate_lifetime,
                    "require_aud": self.validate_audience,
                    "require_iss": self.validate_issuer,
                    "leeway": int(self.clock_skew.total_seconds()),
                },
            )
        except JWTError as e:
            logger.warning(f"Bearer token rejected: {e}")
            raise AuthenticationError(f"Invalid token: {e}") from e

        return Principal(claims=tuple(_payload_to_claims(payload)))


def configure_jwt_bearer_scheme(
    registry: ServiceRegistry,
    settings: SecuritySettings,
) -> TokenValidationPolicy:
    """Build the bearer policy from settings and register it.

    Callers guard this with RegistrationFlag.TOKEN_SCHEME so it runs once.

    Raises:
        MissingRequiredSetting: If secret, issuer or audience is empty
    """
    for name in REQUIRED_SETTINGS:
        if not getattr(settings, name, None):
            raise MissingRequiredSetting(name)

    policy = TokenValidationPolicy(
        signing_key=settings.secret.encode("utf-8"),
        issuer=settings.issuer,
        audience=settings.audience,
        clock_skew=settings.clock_skew,
    )
    registry.add_singleton(TokenValidationPolicy, policy)

    logger.info(
        f"Configured {policy.scheme_name} scheme (issuer={policy.issuer}, "
        f"audience={policy.audience}, clock_skew={policy.clock_skew})"
    )
    return policy


def _payload_to_claims(payload: dict):
    for claim_type, value in payload.items():
        values = value if isinstance(value, list) else [value]
        for item in values:
            yield Claim(claim_type, str(item))
