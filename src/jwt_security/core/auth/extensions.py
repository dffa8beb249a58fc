"""Security entry points.

add_security wires the shared token scheme and returns a builder for
provider registrations; use_security activates authentication in the host
request pipeline. Both are safe to call repeatedly.
"""

import logging
from typing import Optional, Protocol, TypeVar

from jwt_security.config.settings import SecuritySettings
from jwt_security.core.auth.builder import AddSecurityBuilder, DocumentationAnnotator
from jwt_security.core.auth.registration_state import (
    RegistrationFlag,
    RegistrationState,
    get_registration_state,
)
from jwt_security.infrastructure.registry.service_collection import ServiceRegistry

logger = logging.getLogger(__name__)


class RequestPipeline(Protocol):
    """Host request pipeline hook"""

    def use_authentication(self) -> None:
        ...


TPipeline = TypeVar("TPipeline", bound=RequestPipeline)


def add_security(
    registry: ServiceRegistry,
    settings: SecuritySettings,
    add_swagger_security: bool = False,
    documentation_annotator: Optional[DocumentationAnnotator] = None,
    state: Optional[RegistrationState] = None,
) -> AddSecurityBuilder:
    """Configure the token scheme once and return a registration builder.

    Raises:
        MissingRequiredSetting: If secret, issuer or audience is missing
    """
    return AddSecurityBuilder(
        settings,
        registry,
        state=state,
        add_swagger_security=add_swagger_security,
        documentation_annotator=documentation_annotator,
    )


def use_security(
    pipeline: TPipeline,
    state: Optional[RegistrationState] = None,
) -> TPipeline:
    """Activate bearer authentication in pipeline, at most once per state."""
    state = state or get_registration_state()
    if state.run_once(RegistrationFlag.PIPELINE, pipeline.use_authentication):
        logger.info("Authentication activated in request pipeline")
    return pipeline
