"""Authentication Routes

Key Endpoints:
- POST /api/v1/auth/token: Issue a token for the default UserModel flow
- POST /api/v1/auth/facebook/token: Issue a token for a Facebook user
- GET /api/v1/auth/me: Claims of the current bearer token
"""

import logging
from typing import Hashable

from fastapi import APIRouter, Depends, HTTPException, Request, status
from pydantic import BaseModel

from jwt_security.api.pipeline import get_current_principal
from jwt_security.core.auth.authenticators import Authenticator
from jwt_security.core.auth.security_service import AccessToken, SecurityService
from jwt_security.domain.models.claims import Principal
from jwt_security.domain.models.users import FacebookAuthModel, UserModel
from jwt_security.infrastructure.registry.service_collection import ServiceScope, service_key

# Initialize router and logger
router = APIRouter(prefix="/api/v1/auth", tags=["authentication"])
logger = logging.getLogger(__name__)


# Response Models
class TokenResponse(BaseModel):
    """Issued bearer token"""

    access_token: str
    token_type: str = "bearer"
    expires_in: int  # seconds


class ClaimResponse(BaseModel):
    type: str
    value: str


class PrincipalResponse(BaseModel):
    """Claims carried by the caller's token"""

    claims: list[ClaimResponse]


# Dependency injection
def get_service_scope(request: Request) -> ServiceScope:
    """Create a per-request resolution scope"""
    return request.app.state.services.create_scope()


def _resolve(scope: ServiceScope, key: Hashable, flow: str):
    service = scope.try_resolve(key)
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"{flow} authentication is not enabled",
        )
    return service


def _token_response(token: AccessToken) -> TokenResponse:
    return TokenResponse(
        access_token=token.access_token,
        token_type=token.token_type,
        expires_in=token.expires_in,
    )


@router.post("/token", response_model=TokenResponse)
async def issue_token(user: UserModel, scope: ServiceScope = Depends(get_service_scope)):
    """Validate id/password and issue a bearer token"""
    authenticator: Authenticator = _resolve(scope, Authenticator, "Default")
    security_service: SecurityService = _resolve(scope, SecurityService, "Default")

    if not await authenticator.is_valid_user(user):
        logger.warning(f"Token request rejected for user {user.id}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        )

    return _token_response(security_service.generate_token(user))


@router.post("/facebook/token", response_model=TokenResponse)
async def issue_facebook_token(
    model: FacebookAuthModel, scope: ServiceScope = Depends(get_service_scope)
):
    """Validate a Facebook user access token and issue a bearer token"""
    authenticator: Authenticator = _resolve(
        scope, service_key(Authenticator, FacebookAuthModel), "Facebook"
    )
    security_service: SecurityService = _resolve(
        scope, service_key(SecurityService, FacebookAuthModel), "Facebook"
    )

    if not await authenticator.is_valid_user(model):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid Facebook token",
        )

    return _token_response(security_service.generate_token(model))


@router.get("/me", response_model=PrincipalResponse)
async def get_me(principal: Principal = Depends(get_current_principal)):
    """Return the claims of the current bearer token"""
    return PrincipalResponse(
        claims=[ClaimResponse(type=c.type, value=c.value) for c in principal.claims]
    )
