from __future__ import annotations

import base64
import binascii
import json
from typing import Any, Dict, Optional

from src.core.exceptions import IdentityError

IDENTITY_HEADER = "x-rh-identity"
REQUEST_ID_HEADER = "x-rh-insights-request-id"

# Headers passed along with every message published on behalf of a request
FORWARDABLE_HEADERS = (IDENTITY_HEADER, REQUEST_ID_HEADER)

# Any one of these entitlements grants access to the API
REQUIRED_ENTITLEMENTS = ("hybrid_cloud", "insights")


# PUBLIC_INTERFACE
def decode_identity(encoded: str) -> Dict[str, Any]:
    """
    Decode the base64 JSON identity header.

    Raises:
        IdentityError: when the value is not base64, not JSON, or not an object.
    """
    try:
        decoded = json.loads(base64.b64decode(encoded, validate=True))
    except (binascii.Error, ValueError) as exc:
        raise IdentityError("Unable to decode identity header") from exc
    if not isinstance(decoded, dict):
        raise IdentityError("Identity header is not a JSON object")
    return decoded


# PUBLIC_INTERFACE
def encode_identity(identity: Dict[str, Any]) -> str:
    """Encode an identity document the way the gateway does."""
    return base64.b64encode(json.dumps(identity).encode("utf-8")).decode("ascii")


class User:
    """User section of a decoded identity."""

    def __init__(self, identity: Dict[str, Any]) -> None:
        self._identity = identity.get("identity") or {}

    def _find_key(self, key: str) -> Any:
        value = self._identity.get(key)
        if value is None:
            raise IdentityError(f"{key} doesn't exist")
        return value

    @property
    def tenant(self) -> str:
        """External tenant of the user (the account number)."""
        return str(self._find_key("account_number"))

    @property
    def username(self) -> Optional[str]:
        return (self._identity.get("user") or {}).get("username")


class Entitlement:
    """Entitlements section of a decoded identity."""

    def __init__(self, identity: Dict[str, Any]) -> None:
        self._entitlements = identity.get("entitlements") or {}

    def is_entitled(self, name: str) -> bool:
        entry = self._entitlements.get(name) or {}
        return entry.get("is_entitled") is True

    @property
    def hybrid_cloud(self) -> bool:
        return self.is_entitled("hybrid_cloud")

    @property
    def insights(self) -> bool:
        return self.is_entitled("insights")


# PUBLIC_INTERFACE
def request_is_entitled(entitlement: Entitlement) -> bool:
    """True when any of the required entitlements is granted."""
    return any(entitlement.is_entitled(name) for name in REQUIRED_ENTITLEMENTS)
