"""OpenAPI security annotation for FastAPI apps."""

import logging

from fastapi import FastAPI

from jwt_security.core.auth.token_scheme import JWT_BEARER_SCHEME

logger = logging.getLogger(__name__)

BEARER_SECURITY_SCHEME = {
    "type": "http",
    "scheme": "bearer",
    "bearerFormat": "JWT",
    "description": "JWT Authorization header using the Bearer scheme",
}


class OpenAPISecurityAnnotator:
    """Adds a global bearer requirement to an app's OpenAPI schema"""

    def __init__(self, app: FastAPI):
        self.app = app

    def annotate_security(self, enabled: bool) -> None:
        if not enabled:
            return

        generate_schema = self.app.openapi

        def openapi() -> dict:
            if self.app.openapi_schema:
                return self.app.openapi_schema
            schema = generate_schema()
            components = schema.setdefault("components", {})
            components.setdefault("securitySchemes", {})[JWT_BEARER_SCHEME] = BEARER_SECURITY_SCHEME
            schema["security"] = [{JWT_BEARER_SCHEME: []}]
            self.app.openapi_schema = schema
            return schema

        self.app.openapi = openapi
        self.app.openapi_schema = None
        logger.info(f"OpenAPI schema for '{self.app.title}' requires {JWT_BEARER_SCHEME}")
