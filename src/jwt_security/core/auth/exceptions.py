"""Security exceptions.

Configuration errors abort startup; claim extraction and authentication
errors surface per call.
"""

from typing import Any, Iterable


class SecurityError(Exception):
    """Base class for all security errors."""


class MissingRequiredSetting(SecurityError):
    """A required security setting is absent or empty."""

    def __init__(self, setting: str):
        self.setting = setting
        super().__init__(f"Missing required security setting: {setting}")


class UnknownIdType(SecurityError):
    """Catalog lookup before load, or with a value outside IdType."""

    def __init__(self, id_type: Any, reason: str = "not a known IdType"):
        self.id_type = id_type
        super().__init__(f"Cannot resolve claim type for {id_type!r}: {reason}")


class ClaimExtractionError(SecurityError):
    """A claim accessor failed while building claims."""

    def __init__(self, claim_type: str, cause: BaseException):
        self.claim_type = claim_type
        self.cause = cause
        super().__init__(f"Failed to extract claim '{claim_type}': {cause}")


class DuplicateProviderAuthenticatorType(SecurityError):
    """Two different authenticators were bound to one provider in one call."""

    def __init__(self, provider: str, authenticators: Iterable[Any]):
        self.provider = provider
        self.authenticators = tuple(authenticators)
        names = ", ".join(_describe(a) for a in self.authenticators)
        super().__init__(
            f"Conflicting authenticators for provider '{provider}': {names}"
        )


class AuthenticationError(SecurityError):
    """Authentication failed (invalid credentials or token)."""


def _describe(authenticator: Any) -> str:
    if authenticator is None:
        return "<built-in>"
    return getattr(authenticator, "__qualname__", repr(authenticator))
