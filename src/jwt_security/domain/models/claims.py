"""Claim Data Models

Purpose: Define the value objects describing an authenticated principal

Key Components:
- IdType: Closed set of canonical identity fields
- Claim: A (type, value) pair
- Principal: The ordered claims carried by a validated token
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class IdType(Enum):
    """Canonical identity fields resolvable to claim-type URIs"""
    ACTOR = "Actor"
    ANONYMOUS = "Anonymous"
    AUTHENTICATION = "Authentication"
    AUTHENTICATION_INSTANT = "AuthenticationInstant"
    AUTHENTICATION_METHOD = "AuthenticationMethod"
    COUNTRY = "Country"
    DATE_OF_BIRTH = "DateOfBirth"
    DNS = "Dns"
    EMAIL = "Email"
    EXPIRATION = "Expiration"
    EXPIRED = "Expired"
    GENDER = "Gender"
    GIVEN_NAME = "GivenName"
    GROUP_SID = "GroupSid"
    HASH = "Hash"
    HOME_PHONE = "HomePhone"
    IS_PERSISTENT = "IsPersistent"
    LOCALITY = "Locality"
    MOBILE_PHONE = "MobilePhone"
    NAME = "Name"
    NAME_IDENTIFIER = "NameIdentifier"
    OTHER_PHONE = "OtherPhone"
    POSTAL_CODE = "PostalCode"
    PRIMARY_GROUP_SID = "PrimaryGroupSid"
    PRIMARY_SID = "PrimarySid"
    ROLE = "Role"
    SERIAL_NUMBER = "SerialNumber"
    SID = "Sid"
    STATE_OR_PROVINCE = "StateOrProvince"
    STREET_ADDRESS = "StreetAddress"
    SURNAME = "Surname"
    SYSTEM = "System"
    THUMBPRINT = "Thumbprint"
    UPN = "Upn"
    URI = "Uri"
    USER_DATA = "UserData"
    VERSION = "Version"
    WEBPAGE = "Webpage"
    WINDOWS_ACCOUNT_NAME = "WindowsAccountName"
    X500_DISTINGUISHED_NAME = "X500DistinguishedName"


@dataclass(frozen=True)
class Claim:
    """One fact about an authenticated principal

    Attributes:
        type: Claim type, usually a canonical URI
        value: Claim value
    """
    type: str
    value: str

    def to_dict(self) -> dict:
        return {"type": self.type, "value": self.value}


@dataclass(frozen=True)
class Principal:
    """Claims extracted from a validated bearer token"""
    claims: tuple[Claim, ...]

    def find_first(self, claim_type: str) -> Optional[str]:
        """Return the first value for claim_type, or None"""
        for claim in self.claims:
            if claim.type == claim_type:
                return claim.value
        return None

    def find_all(self, claim_type: str) -> list[str]:
        return [claim.value for claim in self.claims if claim.type == claim_type]
