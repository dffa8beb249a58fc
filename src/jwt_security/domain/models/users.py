"""User Models

Auth request/response models for the default credential flow and the
built-in third-party providers.
"""

from typing import Optional, Protocol, TypeVar, runtime_checkable

from pydantic import BaseModel, Field


@runtime_checkable
class AuthenticationUser(Protocol):
    """Marker capability for any host-supplied user model.

    Claims are only ever read from a user through caller-supplied accessors,
    so no attributes are required.
    """


TUserModel = TypeVar("TUserModel", bound=AuthenticationUser)


class UserModel(BaseModel):
    """Default credential model (id/password)"""
    id: str = Field(..., min_length=1, description="User identifier")
    password: str = Field(..., description="User password")
    role: Optional[str] = Field(None, description="Optional role claim")


class FacebookAuthModel(BaseModel):
    """Facebook login request carrying the client-side user access token"""
    user_access_token: str


class GoogleAuthModel(BaseModel):
    """Google authorization-code exchange request"""
    authorization_code: str


class GoogleResponseModel(BaseModel):
    """Tokens returned by Google for an exchanged code"""
    access_token: str
    id_token: Optional[str] = None
    expires_in: int = 0
    token_type: str = "Bearer"
    refresh_token: Optional[str] = None
    is_authenticated: bool = False


class TwitterAuthModel(BaseModel):
    """Twitter OAuth 1.0a callback values"""
    oauth_token: Optional[str] = None
    oauth_verifier: Optional[str] = None


class TwitterResponseModel(BaseModel):
    """Request/access token returned by Twitter"""
    oauth_token: Optional[str] = None
    oauth_token_secret: Optional[str] = None
    oauth_callback_confirmed: bool = False
    is_authenticated: bool = False


class AzureADAuthModel(BaseModel):
    """Azure AD client-credential request (optionally scoped)"""
    scope: Optional[str] = None


class AzureADResponseModel(BaseModel):
    """Token returned by Azure AD"""
    access_token: str
    token_type: str = "Bearer"
    expires_in: int = 0
    is_authenticated: bool = False
