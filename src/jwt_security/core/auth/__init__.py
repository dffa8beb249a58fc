"""Authentication registration and claims assembly.

Registers authentication providers into a service registry:
- default: id/password UserModel with a host authenticator
- custom: host user model with a claims customizer
- facebook, google, twitter, azure_ad: built-in third-party providers
"""

from .authenticators import Authenticator, ExternalAuthenticator, SecurityClient
from .builder import AddSecurityBuilder, ProviderId, ProviderRegistration
from .claim_types import ClaimTypeCatalog, get_claim_type_catalog
from .claims_builder import ClaimsBuilder
from .exceptions import (
    AuthenticationError,
    ClaimExtractionError,
    DuplicateProviderAuthenticatorType,
    MissingRequiredSetting,
    SecurityError,
    UnknownIdType,
)
from .extensions import RequestPipeline, add_security, use_security
from .registration_state import (
    RegistrationFlag,
    RegistrationState,
    get_registration_state,
    reset_registration_state,
)
from .security_service import AccessToken, SecurityService
from .token_scheme import TokenValidationPolicy, configure_jwt_bearer_scheme

__all__ = [
    "AccessToken",
    "AddSecurityBuilder",
    "AuthenticationError",
    "Authenticator",
    "ClaimExtractionError",
    "ClaimTypeCatalog",
    "ClaimsBuilder",
    "DuplicateProviderAuthenticatorType",
    "ExternalAuthenticator",
    "MissingRequiredSetting",
    "ProviderId",
    "ProviderRegistration",
    "RegistrationFlag",
    "RegistrationState",
    "RequestPipeline",
    "SecurityClient",
    "SecurityError",
    "SecurityService",
    "TokenValidationPolicy",
    "UnknownIdType",
    "add_security",
    "configure_jwt_bearer_scheme",
    "get_claim_type_catalog",
    "get_registration_state",
    "reset_registration_state",
    "use_security",
]
