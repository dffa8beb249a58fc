"""Domain models for JWT Security"""

from jwt_security.domain.models.claims import Claim, IdType, Principal
from jwt_security.domain.models.users import (
    AuthenticationUser,
    AzureADAuthModel,
    AzureADResponseModel,
    FacebookAuthModel,
    GoogleAuthModel,
    GoogleResponseModel,
    TUserModel,
    TwitterAuthModel,
    TwitterResponseModel,
    UserModel,
)

__all__ = [
    # Claim models
    "Claim",
    "IdType",
    "Principal",
    # User models
    "AuthenticationUser",
    "TUserModel",
    "UserModel",
    "FacebookAuthModel",
    "GoogleAuthModel",
    "GoogleResponseModel",
    "TwitterAuthModel",
    "TwitterResponseModel",
    "AzureADAuthModel",
    "AzureADResponseModel",
]
