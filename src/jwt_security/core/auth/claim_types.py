"""Claim type catalog.

Maps IdType members to the canonical WS-* identity claim URIs.
"""

import logging
import threading
from typing import Dict, Optional

from jwt_security.core.auth.exceptions import UnknownIdType
from jwt_security.domain.models.claims import IdType

logger = logging.getLogger(__name__)

_XMLSOAP_2005 = "http://schemas.xmlsoap.org/ws/2005/05/identity/claims/"
_MICROSOFT_2008 = "http://schemas.microsoft.com/ws/2008/06/identity/claims/"

_CANONICAL_CLAIM_TYPES: Dict[IdType, str] = {
    IdType.ACTOR: "http://schemas.xmlsoap.org/ws/2009/09/identity/claims/actor",
    IdType.ANONYMOUS: _XMLSOAP_2005 + "anonymous",
    IdType.AUTHENTICATION: _XMLSOAP_2005 + "authentication",
    IdType.AUTHENTICATION_INSTANT: _MICROSOFT_2008 + "authenticationinstant",
    IdType.AUTHENTICATION_METHOD: _MICROSOFT_2008 + "authenticationmethod",
    IdType.COUNTRY: _XMLSOAP_2005 + "country",
    IdType.DATE_OF_BIRTH: _XMLSOAP_2005 + "dateofbirth",
    IdType.DNS: _XMLSOAP_2005 + "dns",
    IdType.EMAIL: _XMLSOAP_2005 + "emailaddress",
    IdType.EXPIRATION: _MICROSOFT_2008 + "expiration",
    IdType.EXPIRED: _MICROSOFT_2008 + "expired",
    IdType.GENDER: _XMLSOAP_2005 + "gender",
    IdType.GIVEN_NAME: _XMLSOAP_2005 + "givenname",
    IdType.GROUP_SID: _MICROSOFT_2008 + "groupsid",
    IdType.HASH: _XMLSOAP_2005 + "hash",
    IdType.HOME_PHONE: _XMLSOAP_2005 + "homephone",
    IdType.IS_PERSISTENT: _MICROSOFT_2008 + "ispersistent",
    IdType.LOCALITY: _XMLSOAP_2005 + "locality",
    IdType.MOBILE_PHONE: _XMLSOAP_2005 + "mobilephone",
    IdType.NAME: _XMLSOAP_2005 + "name",
    IdType.NAME_IDENTIFIER: _XMLSOAP_2005 + "nameidentifier",
    IdType.OTHER_PHONE: _XMLSOAP_2005 + "otherphone",
    IdType.POSTAL_CODE: _XMLSOAP_2005 + "postalcode",
    IdType.PRIMARY_GROUP_SID: _MICROSOFT_2008 + "primarygroupsid",
    IdType.PRIMARY_SID: _MICROSOFT_2008 + "primarysid",
    IdType.ROLE: _MICROSOFT_2008 + "role",
    IdType.SERIAL_NUMBER: _MICROSOFT_2008 + "serialnumber",
    IdType.SID: _XMLSOAP_2005 + "sid",
    IdType.STATE_OR_PROVINCE: _XMLSOAP_2005 + "stateorprovince",
    IdType.STREET_ADDRESS: _XMLSOAP_2005 + "streetaddress",
    IdType.SURNAME: _XMLSOAP_2005 + "surname",
    IdType.SYSTEM: _XMLSOAP_2005 + "system",
    IdType.THUMBPRINT: _XMLSOAP_2005 + "thumbprint",
    IdType.UPN: _XMLSOAP_2005 + "upn",
    IdType.URI: _XMLSOAP_2005 + "uri",
    IdType.USER_DATA: _MICROSOFT_2008 + "userdata",
    IdType.VERSION: _MICROSOFT_2008 + "version",
    IdType.WEBPAGE: _XMLSOAP_2005 + "webpage",
    IdType.WINDOWS_ACCOUNT_NAME: _MICROSOFT_2008 + "windowsaccountname",
    IdType.X500_DISTINGUISHED_NAME: _XMLSOAP_2005 + "x500distinguishedname",
}


class ClaimTypeCatalog:
    """Read-only IdType -> claim type mapping, populated once by load()."""

    def __init__(self):
        self._claim_types: Dict[IdType, str] = {}
        self._lock = threading.Lock()

    @property
    def is_loaded(self) -> bool:
        return bool(self._claim_types)

    def load(self) -> None:
        """Populate the mapping if it is still empty."""
        if self._claim_types:
            return
        with self._lock:
            if self._claim_types:
                return
            # Publish a complete dict in one assignment
            self._claim_types = dict(_CANONICAL_CLAIM_TYPES)
            logger.info(f"Loaded {len(self._claim_types)} claim types")

    def resolve(self, id_type: IdType) -> str:
        """Return the canonical claim type for id_type.

        Raises:
            UnknownIdType: If called before load() or with a non-IdType value
        """
        if not self._claim_types:
            raise UnknownIdType(id_type, "claim type catalog not loaded")
        if not isinstance(id_type, IdType):
            raise UnknownIdType(id_type)
        try:
            return self._claim_types[id_type]
        except KeyError:
            raise UnknownIdType(id_type) from None


_catalog_instance: Optional[ClaimTypeCatalog] = None
_catalog_lock = threading.Lock()


def get_claim_type_catalog() -> ClaimTypeCatalog:
    """Get the process-wide claim type catalog (not loaded until load())."""
    global _catalog_instance

    if _catalog_instance is None:
        with _catalog_lock:
            if _catalog_instance is None:
                _catalog_instance = ClaimTypeCatalog()
    return _catalog_instance
