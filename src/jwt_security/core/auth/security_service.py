"""Security service: issues bearer tokens for authenticated users.

Claims come from the registered claims customizer for the user model, or
from the default NameIdentifier/Role claims for the default UserModel.
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Generic, Iterable, Optional

from jose import jwt

from jwt_security.config.settings import SecuritySettings
from jwt_security.core.auth.claim_types import ClaimTypeCatalog, get_claim_type_catalog
from jwt_security.core.auth.claims_builder import ClaimsBuilder
from jwt_security.core.auth.token_scheme import DEFAULT_ALGORITHM
from jwt_security.domain.models.claims import Claim, IdType
from jwt_security.domain.models.users import TUserModel, UserModel

logger = logging.getLogger(__name__)

ClaimsCustomizer = Callable[[ClaimsBuilder], None]


@dataclass
class AccessToken:
    """Result of token creation"""

    access_token: str
    token_type: str = "bearer"
    expires_in: int = 1800  # seconds


class SecurityService(Generic[TUserModel]):
    """Builds claims for a user and signs them into a bearer token."""

    def __init__(
        self,
        settings: SecuritySettings,
        add_claims: Optional[ClaimsCustomizer] = None,
        catalog: Optional[ClaimTypeCatalog] = None,
    ):
        self.settings = settings
        self.add_claims = add_claims
        self.catalog = catalog or get_claim_type_catalog()
        self.catalog.load()

    def build_claims(self, user: TUserModel) -> tuple[Claim, ...]:
        """Run the claims customizer (or defaults) against user.

        Raises:
            ClaimExtractionError: If a claim accessor fails
        """
        builder = ClaimsBuilder(user, catalog=self.catalog)
        if self.add_claims is not None:
            self.add_claims(builder)
        else:
            self._add_default_claims(builder, user)
        return builder.build()

    def generate_token(self, user: TUserModel) -> AccessToken:
        """Create a signed access token for user."""
        claims = self.build_claims(user)

        now = datetime.now(timezone.utc)
        expires_at = now + self.settings.token_lifetime

        payload = _claims_to_payload(claims)
        payload.update({
            "iss": self.settings.issuer,
            "aud": self.settings.audience,
            "iat": int(now.timestamp()),
            "nbf": int(now.timestamp()),
            "exp": int(expires_at.timestamp()),
            "jti": str(uuid.uuid4()),
        })

        token = jwt.encode(payload, self.settings.secret, algorithm=DEFAULT_ALGORITHM)
        logger.info(f"Issued token with {len(claims)} claims (jti={payload['jti']})")

        return AccessToken(
            access_token=token,
            expires_in=int(self.settings.token_lifetime.total_seconds()),
        )

    def _add_default_claims(self, builder: ClaimsBuilder, user: TUserModel) -> None:
        if isinstance(user, UserModel):
            builder.add_claim(IdType.NAME_IDENTIFIER, lambda u: u.id)
            if user.role:
                builder.add_claim(IdType.ROLE, lambda u: u.role)


def _claims_to_payload(claims: Iterable[Claim]) -> dict:
    """Fold claims into a JWT payload; repeated types become lists."""
    payload: dict = {}
    for claim in claims:
        if claim.type not in payload:
            payload[claim.type] = claim.value
        elif isinstance(payload[claim.type], list):
            payload[claim.type].append(claim.value)
        else:
            payload[claim.type] = [payload[claim.type], claim.value]
    return payload
