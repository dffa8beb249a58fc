"""FastAPI wiring for add_security / use_security."""

from typing import Optional

from fastapi import FastAPI

from jwt_security.api.openapi import OpenAPISecurityAnnotator
from jwt_security.api.pipeline import FastAPIRequestPipeline
from jwt_security.config.settings import SecuritySettings
from jwt_security.core.auth.builder import AddSecurityBuilder
from jwt_security.core.auth.extensions import add_security, use_security
from jwt_security.core.auth.registration_state import RegistrationState
from jwt_security.core.auth.token_scheme import TokenValidationPolicy
from jwt_security.infrastructure.registry.service_collection import ServiceCollection


def add_fastapi_security(
    app: FastAPI,
    services: ServiceCollection,
    settings: SecuritySettings,
    add_swagger_security: bool = False,
    state: Optional[RegistrationState] = None,
) -> AddSecurityBuilder:
    """Attach services to app and start security registration.

    Returns:
        Builder for provider registrations
    """
    app.state.services = services
    return add_security(
        services,
        settings,
        add_swagger_security=add_swagger_security,
        documentation_annotator=OpenAPISecurityAnnotator(app),
        state=state,
    )


def use_fastapi_security(
    app: FastAPI,
    state: Optional[RegistrationState] = None,
) -> FastAPIRequestPipeline:
    """Activate bearer authentication using the registered token policy.

    Raises:
        LookupError: If add_fastapi_security has not configured the policy
    """
    services: Optional[ServiceCollection] = getattr(app.state, "services", None)
    if services is None:
        raise LookupError("No services attached to app; call add_fastapi_security first")
    policy = services.create_scope().resolve(TokenValidationPolicy)
    pipeline = use_security(FastAPIRequestPipeline(app, policy), state=state)
    # Activation runs once per state; every app still needs the policy
    pipeline.attach()
    return pipeline
