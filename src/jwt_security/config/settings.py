"""Configuration Settings for JWT Security

Binds environment variables into immutable security settings.
"""

from datetime import timedelta
from functools import lru_cache
from typing import Optional

from pydantic import BaseModel
from pydantic_settings import BaseSettings


class FacebookSecuritySettings(BaseModel):
    """Facebook app credentials"""

    app_id: str
    app_secret: str

    class Config:
        frozen = True


class GoogleSecuritySettings(BaseModel):
    """Google OAuth client credentials"""

    client_id: str
    client_secret: str
    redirect_uri: str

    class Config:
        frozen = True


class TwitterSecuritySettings(BaseModel):
    """Twitter consumer credentials"""

    consumer_key: str
    consumer_secret: str
    request_token_url: str = "https://api.twitter.com/oauth/request_token"

    class Config:
        frozen = True


class AzureADSecuritySettings(BaseModel):
    """Azure AD tenant and client settings"""

    aad_instance: str = "https://login.microsoftonline.com/{0}"
    tenant: str
    resource_id: str
    client_id: str
    client_secret: str

    @property
    def authority(self) -> str:
        """Tenant-specific authority URL"""
        return self.aad_instance.format(self.tenant)

    class Config:
        frozen = True


class SecuritySettings(BaseSettings):
    """Token signing settings plus optional per-provider blocks.

    Environment example:
        SECURITY_SECRET=...
        SECURITY_ISSUER=https://auth.example.com
        SECURITY_AUDIENCE=example-api
        SECURITY_FACEBOOK__APP_ID=...
        SECURITY_FACEBOOK__APP_SECRET=...
    """

    secret: Optional[str] = None
    issuer: Optional[str] = None
    audience: Optional[str] = None

    clock_skew_minutes: int = 5
    token_expire_minutes: int = 30

    facebook: Optional[FacebookSecuritySettings] = None
    google: Optional[GoogleSecuritySettings] = None
    twitter: Optional[TwitterSecuritySettings] = None
    azure_ad: Optional[AzureADSecuritySettings] = None

    @property
    def clock_skew(self) -> timedelta:
        return timedelta(minutes=self.clock_skew_minutes)

    @property
    def token_lifetime(self) -> timedelta:
        return timedelta(minutes=self.token_expire_minutes)

    class Config:
        env_prefix = "SECURITY_"
        env_nested_delimiter = "__"
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        frozen = True
        extra = "ignore"


class Settings(BaseSettings):
    """Service settings for the bundled FastAPI app"""

    # Service info
    service_name: str = "jwt-security"
    service_version: str = "1.0.0"
    environment: str = "development"

    # Logging
    log_level: str = "INFO"

    # Mark OpenAPI docs as bearer-protected
    enable_swagger_security: bool = True

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"


@lru_cache()
def get_security_settings() -> SecuritySettings:
    """Get cached security settings instance

    Returns:
        SecuritySettings instance
    """
    return SecuritySettings()


@lru_cache()
def get_settings() -> Settings:
    """Get cached service settings instance"""
    return Settings()
