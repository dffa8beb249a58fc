"""Security registration builder.

Registers authentication providers into a service registry. Shared wiring
(token scheme, documentation annotation) and every provider registration are
guarded by a RegistrationState, so repeating any call is a silent no-op.

Example:
    builder = AddSecurityBuilder(settings, services)
    (builder
        .add_security(MyAuthenticator)
        .add_facebook_security(add_claims=facebook_claims)
        .add_google_security())
"""

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Hashable, Optional, Protocol

from jwt_security.config.settings import (
    AzureADSecuritySettings,
    FacebookSecuritySettings,
    GoogleSecuritySettings,
    SecuritySettings,
    TwitterSecuritySettings,
)
from jwt_security.core.auth.authenticators import (
    Authenticator,
    AzureADAuthenticator,
    ExternalAuthenticator,
    FacebookAuthenticator,
    GoogleAuthenticator,
    SecurityClient,
    TwitterAuthenticator,
)
from jwt_security.core.auth.claim_types import get_claim_type_catalog
from jwt_security.core.auth.exceptions import (
    DuplicateProviderAuthenticatorType,
    MissingRequiredSetting,
)
from jwt_security.core.auth.registration_state import (
    RegistrationFlag,
    RegistrationState,
    get_registration_state,
)
from jwt_security.core.auth.security_service import ClaimsCustomizer, SecurityService
from jwt_security.core.auth.token_scheme import (
    TokenValidationPolicy,
    configure_jwt_bearer_scheme,
)
from jwt_security.domain.models.users import (
    AzureADAuthModel,
    FacebookAuthModel,
    GoogleAuthModel,
    TwitterAuthModel,
)
from jwt_security.infrastructure.registry.service_collection import (
    ServiceRegistry,
    ServiceScope,
    service_key,
)

logger = logging.getLogger(__name__)

AuthenticatorFactory = Callable[[], Any]

# Serializes check-then-register when sharing a configured policy
_attach_lock = threading.Lock()


class DocumentationAnnotator(Protocol):
    """Marks the API documentation surface as bearer-protected."""

    def annotate_security(self, enabled: bool) -> None:
        ...


class ProviderId(str, Enum):
    """Built-in third-party providers"""
    FACEBOOK = "facebook"
    GOOGLE = "google"
    TWITTER = "twitter"
    AZURE_AD = "azure_ad"


@dataclass(frozen=True)
class _ProviderSpec:
    flag: RegistrationFlag
    settings_type: type
    user_model: type
    authenticator_base: type
    default_authenticator: type
    issues_tokens: bool


_PROVIDERS: dict[ProviderId, _ProviderSpec] = {
    ProviderId.FACEBOOK: _ProviderSpec(
        flag=RegistrationFlag.FACEBOOK,
        settings_type=FacebookSecuritySettings,
        user_model=FacebookAuthModel,
        authenticator_base=Authenticator,
        default_authenticator=FacebookAuthenticator,
        issues_tokens=True,
    ),
    ProviderId.GOOGLE: _ProviderSpec(
        flag=RegistrationFlag.GOOGLE,
        settings_type=GoogleSecuritySettings,
        user_model=GoogleAuthModel,
        authenticator_base=ExternalAuthenticator,
        default_authenticator=GoogleAuthenticator,
        issues_tokens=False,
    ),
    ProviderId.TWITTER: _ProviderSpec(
        flag=RegistrationFlag.TWITTER,
        settings_type=TwitterSecuritySettings,
        user_model=TwitterAuthModel,
        authenticator_base=ExternalAuthenticator,
        default_authenticator=TwitterAuthenticator,
        issues_tokens=False,
    ),
    ProviderId.AZURE_AD: _ProviderSpec(
        flag=RegistrationFlag.AZURE_AD,
        settings_type=AzureADSecuritySettings,
        user_model=AzureADAuthModel,
        authenticator_base=ExternalAuthenticator,
        default_authenticator=AzureADAuthenticator,
        issues_tokens=False,
    ),
}


@dataclass(frozen=True)
class ProviderRegistration:
    """Request to register one built-in provider.

    Attributes:
        provider: Which provider
        authenticator: Optional zero-argument factory replacing the built-in
            authenticator
        add_claims: Optional claims customizer (token-issuing providers only)
    """
    provider: ProviderId
    authenticator: Optional[AuthenticatorFactory] = None
    add_claims: Optional[ClaimsCustomizer] = None


class AddSecurityBuilder:
    """Fluent, idempotent registration of authentication providers."""

    def __init__(
        self,
        settings: SecuritySettings,
        registry: ServiceRegistry,
        state: Optional[RegistrationState] = None,
        add_swagger_security: bool = False,
        documentation_annotator: Optional[DocumentationAnnotator] = None,
    ):
        """Bind settings and registry, wiring shared infrastructure once.

        A registry created after the token scheme was configured on this
        state receives the existing policy instead of a new one.

        Args:
            settings: Security settings for the whole process
            registry: Target service registry
            state: Registration flags (defaults to the process-wide state)
            add_swagger_security: Mark API docs as bearer-protected
            documentation_annotator: Required when add_swagger_security is set

        Raises:
            MissingRequiredSetting: If secret, issuer or audience is missing
            ValueError: If docs annotation is requested without an annotator
        """
        self.settings = settings
        self.registry = registry
        self.state = state or get_registration_state()

        if not self.state.run_once(RegistrationFlag.TOKEN_SCHEME, self._configure_token_scheme):
            self._attach_token_scheme()

        if add_swagger_security:
            if documentation_annotator is None:
                raise ValueError("add_swagger_security requires a documentation_annotator")
            self.state.run_once(
                RegistrationFlag.DOCUMENTATION,
                lambda: self._annotate_documentation(documentation_annotator),
            )

    # ------------------------------------------------------------------
    # Default / custom user model
    # ------------------------------------------------------------------

    def add_security(self, authenticator: AuthenticatorFactory) -> "AddSecurityBuilder":
        """Register the default UserModel flow with authenticator.

        No-op once either the default or a custom flow is registered.
        """
        def register():
            factory = _construct(authenticator)
            get_claim_type_catalog().load()
            self.registry.add_scoped(
                SecurityService,
                lambda scope: SecurityService(self.settings),
            )
            self.registry.add_scoped(Authenticator, factory)
            logger.info(f"Registered default authenticator {_name(authenticator)}")

        self.state.run_once(
            RegistrationFlag.DEFAULT_PROVIDER,
            register,
            excludes=(RegistrationFlag.CUSTOM_PROVIDER,),
        )
        return self

    def add_custom_security(
        self,
        authenticator: AuthenticatorFactory,
        user_model: type,
        add_claims: Optional[ClaimsCustomizer] = None,
    ) -> "AddSecurityBuilder":
        """Register a host user model with its authenticator and claims.

        No-op once either the default or a custom flow is registered.
        """
        def register():
            factory = _construct(authenticator)
            get_claim_type_catalog().load()
            self._register_token_issuer(user_model, add_claims)
            self.registry.add_scoped(service_key(Authenticator, user_model), factory)
            logger.info(
                f"Registered custom authenticator {_name(authenticator)} "
                f"for {user_model.__name__}"
            )

        self.state.run_once(
            RegistrationFlag.CUSTOM_PROVIDER,
            register,
            excludes=(RegistrationFlag.DEFAULT_PROVIDER,),
        )
        return self

    # ------------------------------------------------------------------
    # Built-in providers
    # ------------------------------------------------------------------

    def add_provider(
        self,
        provider: ProviderId,
        authenticator: Optional[AuthenticatorFactory] = None,
        add_claims: Optional[ClaimsCustomizer] = None,
    ) -> "AddSecurityBuilder":
        """Register a built-in provider; no-op if already registered.

        Raises:
            MissingRequiredSetting: If the provider's settings block is absent
            ValueError: If add_claims is given for a provider that does not
                issue local tokens
        """
        provider = ProviderId(provider)
        spec = _PROVIDERS[provider]

        if add_claims is not None and not spec.issues_tokens:
            raise ValueError(f"Provider '{provider.value}' does not support claim customization")

        self.state.run_once(
            spec.flag,
            lambda: self._register_provider(provider, spec, authenticator, add_claims),
        )
        return self

    def add_providers(self, *registrations: ProviderRegistration) -> "AddSecurityBuilder":
        """Register several providers in one call.

        Registrations naming the same provider collapse to one, but only if
        they agree on the authenticator and the claims customizer.

        Raises:
            DuplicateProviderAuthenticatorType: On conflicting authenticators
            ValueError: On conflicting claims customizers
        """
        unique: dict[ProviderId, ProviderRegistration] = {}
        for registration in registrations:
            provider = ProviderId(registration.provider)
            seen = unique.get(provider)
            if seen is None:
                unique[provider] = registration
            elif seen.authenticator is not registration.authenticator:
                raise DuplicateProviderAuthenticatorType(
                    provider.value, (seen.authenticator, registration.authenticator)
                )
            elif seen.add_claims is not registration.add_claims:
                raise ValueError(
                    f"Conflicting claims customizers for provider '{provider.value}'"
                )

        for provider, registration in unique.items():
            self.add_provider(provider, registration.authenticator, registration.add_claims)
        return self

    def add_facebook_security(
        self, add_claims: Optional[ClaimsCustomizer] = None
    ) -> "AddSecurityBuilder":
        return self.add_provider(ProviderId.FACEBOOK, add_claims=add_claims)

    def add_google_security(self) -> "AddSecurityBuilder":
        return self.add_provider(ProviderId.GOOGLE)

    def add_twitter_security(self) -> "AddSecurityBuilder":
        return self.add_provider(ProviderId.TWITTER)

    def add_azure_ad_security(self) -> "AddSecurityBuilder":
        return self.add_provider(ProviderId.AZURE_AD)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _register_provider(
        self,
        provider: ProviderId,
        spec: _ProviderSpec,
        authenticator: Optional[AuthenticatorFactory],
        add_claims: Optional[ClaimsCustomizer],
    ) -> None:
        provider_settings = getattr(self.settings, provider.value)
        if provider_settings is None:
            raise MissingRequiredSetting(f"{provider.value} settings")

        if authenticator is not None:
            factory = _construct(authenticator)
        else:
            factory = _provider_authenticator(spec, provider_settings)

        get_claim_type_catalog().load()
        self.registry.add_singleton(spec.settings_type, provider_settings)

        if spec.issues_tokens:
            self._register_token_issuer(spec.user_model, add_claims)
        self.registry.add_scoped(service_key(spec.authenticator_base, spec.user_model), factory)

        logger.info(
            f"Registered {provider.value} provider "
            f"({_name(authenticator or spec.default_authenticator)})"
        )

    def _register_token_issuer(
        self, user_model: type, add_claims: Optional[ClaimsCustomizer]
    ) -> None:
        if add_claims is not None:
            self.registry.add_singleton(service_key(ClaimsCustomizer, user_model), add_claims)
        self.registry.add_scoped(
            service_key(SecurityService, user_model),
            lambda scope: SecurityService(self.settings, add_claims),
        )

    def _configure_token_scheme(self) -> TokenValidationPolicy:
        policy = configure_jwt_bearer_scheme(self.registry, self.settings)
        self.registry.add_singleton(SecuritySettings, self.settings)
        return policy

    def _attach_token_scheme(self) -> None:
        """Share the already configured policy with a registry that lacks it."""
        with _attach_lock:
            if TokenValidationPolicy in self.registry:
                return
            policy = self.state.result(RegistrationFlag.TOKEN_SCHEME)
            self.registry.add_singleton(TokenValidationPolicy, policy)
            self.registry.add_singleton(SecuritySettings, self.settings)
        logger.info(f"Attached existing {policy.scheme_name} scheme to a new registry")

    def _annotate_documentation(self, annotator: DocumentationAnnotator) -> None:
        annotator.annotate_security(True)
        logger.info("API documentation marked as bearer-protected")


def _construct(factory: AuthenticatorFactory) -> Callable[[ServiceScope], Any]:
    if not callable(factory):
        raise TypeError(f"Authenticator must be a class or factory, got {factory!r}")
    return lambda scope: factory()


def _provider_authenticator(spec: _ProviderSpec, provider_settings: Any) -> Callable[[ServiceScope], Any]:
    client_key: Hashable = service_key(SecurityClient, spec.user_model)

    def create(scope: ServiceScope):
        return spec.default_authenticator(provider_settings, scope.resolve(client_key))

    return create


def _name(obj: Any) -> str:
    return getattr(obj, "__name__", type(obj).__name__)
