"""
Bearer authentication for FastAPI.

Provides:
- FastAPIRequestPipeline: activates the token policy on an app
- get_current_principal: dependency validating the Authorization header
"""

import logging
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from jwt_security.core.auth.exceptions import AuthenticationError
from jwt_security.core.auth.token_scheme import TokenValidationPolicy
from jwt_security.domain.models.claims import Principal

logger = logging.getLogger(__name__)

# HTTP Bearer token scheme (missing header handled below)
bearer_scheme = HTTPBearer(auto_error=False)


class FastAPIRequestPipeline:
    """Request pipeline hook for a FastAPI application"""

    def __init__(self, app: FastAPI, policy: TokenValidationPolicy):
        self.app = app
        self.policy = policy

    def attach(self) -> None:
        """Make the policy available to this app's request dependencies."""
        self.app.state.token_validation_policy = self.policy

    def use_authentication(self) -> None:
        self.attach()
        logger.info(f"{self.policy.scheme_name} authentication enabled for '{self.app.title}'")


def get_token_policy(request: Request) -> TokenValidationPolicy:
    """Return the active token policy for the current app."""
    policy = getattr(request.app.state, "token_validation_policy", None)
    if policy is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Authentication is not configured",
        )
    return policy


async def get_current_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    policy: TokenValidationPolicy = Depends(get_token_policy),
) -> Principal:
    """
    Validate the bearer token and return its claims.

    Raises:
        HTTPException: 401 if the token is missing or invalid
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if credentials is None:
        raise credentials_exception

    try:
        return policy.validate(credentials.credentials)
    except AuthenticationError:
        raise credentials_exception
