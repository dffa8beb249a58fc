"""Claims builder.

Collects claim types with either literal values or accessor functions that
are applied to a bound user model when the claims are built.

Example:
    def add_claims(builder: ClaimsBuilder[MyUser]) -> None:
        builder.add_claim(IdType.NAME, lambda user: user.name)
        builder.add_claim("tenant", lambda user: user.tenant_id)

Accessors run synchronously inside build(); if one blocks on I/O that is
the caller's concern.
"""

import logging
from typing import Callable, Generic, Optional, Union

from jwt_security.core.auth.claim_types import ClaimTypeCatalog, get_claim_type_catalog
from jwt_security.core.auth.exceptions import ClaimExtractionError
from jwt_security.domain.models.claims import Claim, IdType
from jwt_security.domain.models.users import TUserModel

logger = logging.getLogger(__name__)

ClaimValue = Union[str, Callable[[TUserModel], str]]


class ClaimsBuilder(Generic[TUserModel]):
    """Ordered claim accumulator bound to an optional user instance."""

    def __init__(
        self,
        user: Optional[TUserModel] = None,
        catalog: Optional[ClaimTypeCatalog] = None,
    ):
        self._user = user
        self._catalog = catalog or get_claim_type_catalog()
        self._entries: list[tuple[str, ClaimValue]] = []

    @property
    def user(self) -> Optional[TUserModel]:
        return self._user

    def add_claim(
        self,
        claim_type: Union[str, IdType],
        value: ClaimValue,
    ) -> "ClaimsBuilder[TUserModel]":
        """Append a claim.

        Args:
            claim_type: Claim type string or IdType (resolved immediately)
            value: Literal value, or accessor applied to the user at build time

        Returns:
            This builder for chaining

        Raises:
            UnknownIdType: If an IdType cannot be resolved
        """
        if isinstance(claim_type, IdType):
            claim_type = self._catalog.resolve(claim_type)
        elif not isinstance(claim_type, str):
            raise TypeError(f"claim_type must be str or IdType, got {type(claim_type).__name__}")

        if not isinstance(value, str) and not callable(value):
            raise TypeError(f"value for claim '{claim_type}' must be str or callable")

        self._entries.append((claim_type, value))
        return self

    def build(self) -> tuple[Claim, ...]:
        """Produce all claims in insertion order.

        Each call returns a fresh tuple; the builder keeps its entries.

        Raises:
            ClaimExtractionError: If any accessor fails; no claims are returned
        """
        claims = []
        for claim_type, value in self._entries:
            if callable(value):
                value = self._extract(claim_type, value)
            claims.append(Claim(claim_type, value))
        return tuple(claims)

    def _extract(self, claim_type: str, accessor: Callable[[TUserModel], str]) -> str:
        if self._user is None:
            raise ClaimExtractionError(claim_type, ValueError("no user bound to claims builder"))
        try:
            value = accessor(self._user)
        except Exception as e:
            logger.warning(f"Claim accessor for '{claim_type}' failed: {e}")
            raise ClaimExtractionError(claim_type, e) from e
        if not isinstance(value, str):
            raise ClaimExtractionError(
                claim_type,
                TypeError(f"accessor returned {type(value).__name__}, expected str"),
            )
        return value
