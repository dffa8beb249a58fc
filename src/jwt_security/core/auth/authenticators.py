"""Authenticator interfaces and built-in provider authenticators.

Two shapes of authenticator exist:
- Authenticator: validates a user model and answers yes/no; a local bearer
  token is then issued by SecurityService (default, custom and Facebook).
- ExternalAuthenticator: exchanges a request model with a third-party
  provider and returns that provider's response (Google, Twitter, Azure AD).

The network exchange itself lives behind SecurityClient, which the host
application registers for each built-in provider it enables.
"""

import logging
from abc import ABC, abstractmethod
from typing import Generic, Protocol, TypeVar

from jwt_security.config.settings import (
    AzureADSecuritySettings,
    FacebookSecuritySettings,
    GoogleSecuritySettings,
    TwitterSecuritySettings,
)
from jwt_security.core.auth.exceptions import AuthenticationError
from jwt_security.domain.models.users import (
    AzureADAuthModel,
    AzureADResponseModel,
    FacebookAuthModel,
    GoogleAuthModel,
    GoogleResponseModel,
    TUserModel,
    TwitterAuthModel,
    TwitterResponseModel,
)

logger = logging.getLogger(__name__)

TRequest = TypeVar("TRequest", contravariant=True)
TResponse = TypeVar("TResponse", covariant=True)
TAuthModel = TypeVar("TAuthModel")
TResponseModel = TypeVar("TResponseModel")


class SecurityClient(Protocol[TRequest, TResponse]):
    """Performs the provider-specific network exchange."""

    async def post_security_request(self, request: TRequest) -> TResponse:
        ...


class Authenticator(ABC, Generic[TUserModel]):
    """Validates a user model before a local token is issued.

    Example:
        class MyAuthenticator(Authenticator[UserModel]):
            async def is_valid_user(self, user: UserModel) -> bool:
                return user.id == "admin" and user.password == "..."
    """

    @abstractmethod
    async def is_valid_user(self, user: TUserModel) -> bool:
        """Return True if the user's credentials are valid."""
        pass


class ExternalAuthenticator(ABC, Generic[TAuthModel, TResponseModel]):
    """Authenticates against a third-party provider."""

    @abstractmethod
    async def is_valid_user(self, model: TAuthModel) -> TResponseModel:
        """Run the provider exchange and return its response.

        Raises:
            AuthenticationError: If the provider rejects the request
        """
        pass


class FacebookAuthenticator(Authenticator[FacebookAuthModel]):
    """Checks a Facebook user access token via the debug_token exchange."""

    def __init__(self, settings: FacebookSecuritySettings, client: SecurityClient):
        self.settings = settings
        self.client = client

    async def is_valid_user(self, user: FacebookAuthModel) -> bool:
        if not user.user_access_token:
            return False
        is_valid = bool(await self.client.post_security_request(user))
        logger.info(f"Facebook token validation for app {self.settings.app_id}: {is_valid}")
        return is_valid


class GoogleAuthenticator(ExternalAuthenticator[GoogleAuthModel, GoogleResponseModel]):
    """Exchanges a Google authorization code for tokens."""

    def __init__(self, settings: GoogleSecuritySettings, client: SecurityClient):
        self.settings = settings
        self.client = client

    async def is_valid_user(self, model: GoogleAuthModel) -> GoogleResponseModel:
        if not model.authorization_code:
            raise AuthenticationError("Google authorization code is required")

        response = await self.client.post_security_request(model)
        if not response.access_token:
            raise AuthenticationError("Google did not return an access token")

        logger.info(f"Google code exchanged for client {self.settings.client_id}")
        return response.model_copy(update={"is_authenticated": True})


class TwitterAuthenticator(ExternalAuthenticator[TwitterAuthModel, TwitterResponseModel]):
    """Obtains a Twitter request token for the configured consumer."""

    def __init__(self, settings: TwitterSecuritySettings, client: SecurityClient):
        self.settings = settings
        self.client = client

    async def is_valid_user(self, model: TwitterAuthModel) -> TwitterResponseModel:
        response = await self.client.post_security_request(model)
        if not response.oauth_token or not response.oauth_callback_confirmed:
            raise AuthenticationError("Twitter did not confirm the OAuth callback")

        logger.info(f"Twitter request token obtained for consumer {self.settings.consumer_key}")
        return response.model_copy(update={"is_authenticated": True})


class AzureADAuthenticator(ExternalAuthenticator[AzureADAuthModel, AzureADResponseModel]):
    """Acquires an Azure AD token for the configured resource."""

    def __init__(self, settings: AzureADSecuritySettings, client: SecurityClient):
        self.settings = settings
        self.client = client

    async def is_valid_user(self, model: AzureADAuthModel) -> AzureADResponseModel:
        response = await self.client.post_security_request(model)
        if not response.access_token:
            raise AuthenticationError(f"Azure AD rejected request for tenant {self.settings.tenant}")

        logger.info(f"Azure AD token acquired from {self.settings.authority}")
        return response.model_copy(update={"is_authenticated": True})
