"""JWT Security Service

FastAPI application factory wiring bearer security and provider
registrations.
"""

import logging
from contextlib import asynccontextmanager
from typing import Callable, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from jwt_security.api.routes import auth
from jwt_security.api.security import add_fastapi_security, use_fastapi_security
from jwt_security.config.settings import (
    SecuritySettings,
    Settings,
    get_security_settings,
    get_settings,
)
from jwt_security.core.auth.builder import AddSecurityBuilder
from jwt_security.core.auth.exceptions import AuthenticationError
from jwt_security.core.auth.registration_state import RegistrationState
from jwt_security.infrastructure.registry.service_collection import ServiceCollection

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def create_app(
    configure_security: Optional[Callable[[AddSecurityBuilder], None]] = None,
    security_settings: Optional[SecuritySettings] = None,
    settings: Optional[Settings] = None,
    services: Optional[ServiceCollection] = None,
    state: Optional[RegistrationState] = None,
) -> FastAPI:
    """Create the FastAPI application.

    Args:
        configure_security: Registers providers on the security builder,
            e.g. ``lambda b: b.add_security(MyAuthenticator)``
        security_settings: Defaults to environment-bound settings
        settings: Defaults to environment-bound service settings
        services: Registry to populate (a new one by default)
        state: Registration state (process-wide by default)

    Raises:
        MissingRequiredSetting: If secret, issuer or audience is missing
    """
    settings = settings or get_settings()
    security_settings = security_settings or get_security_settings()
    services = services if services is not None else ServiceCollection()

    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan events"""
        logger.info(f"Starting {settings.service_name} v{settings.service_version}")
        logger.info(f"Environment: {settings.environment}")
        yield
        logger.info(f"Shutting down {settings.service_name}")

    app = FastAPI(
        title="JWT Security Service",
        version=settings.service_version,
        description="Bearer token issuance and validation",
        lifespan=lifespan
    )

    builder = add_fastapi_security(
        app,
        services,
        security_settings,
        add_swagger_security=settings.enable_swagger_security,
        state=state,
    )
    if configure_security is not None:
        configure_security(builder)
    use_fastapi_security(app, state=state)

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {
            "status": "healthy",
            "service": settings.service_name,
            "version": settings.service_version,
            "environment": settings.environment
        }

    app.include_router(auth.router)

    @app.exception_handler(AuthenticationError)
    async def authentication_exception_handler(request: Request, exc: AuthenticationError):
        """Authentication failures raised outside dependencies"""
        logger.warning(f"Authentication failed: {exc}")
        return JSONResponse(
            status_code=401,
            content={"error": "authentication_failed", "message": str(exc)},
            headers={"WWW-Authenticate": "Bearer"},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Global exception handler for unhandled errors"""
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_server_error",
                "message": "An unexpected error occurred. Please try again later."
            }
        )

    return app
