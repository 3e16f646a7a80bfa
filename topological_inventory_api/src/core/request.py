from __future__ import annotations

import re
from typing import Any, Dict, Mapping, Optional

from starlette.requests import Request

from src.core.exceptions import IdentityError
from src.core.identity import (
    FORWARDABLE_HEADERS,
    IDENTITY_HEADER,
    REQUEST_ID_HEADER,
    Entitlement,
    User,
    decode_identity,
)

# Paths served without an identity
_OPTIONAL_AUTH_PATHS = (
    re.compile(r"/v\d+\.\d+/openapi\.json$"),
    re.compile(r"^/health$"),
)


class CurrentRequest:
    """
    Identity-related view of the request being served.

    The identity header is decoded lazily, so requests on optional-auth paths
    never fail on a malformed or missing header.
    """

    def __init__(self, headers: Mapping[str, str], path: str) -> None:
        self.headers = {k.lower(): v for k, v in headers.items()}
        self.path = path
        self._identity: Optional[Dict[str, Any]] = None

    @classmethod
    def from_request(cls, request: Request) -> "CurrentRequest":
        current = getattr(request.state, "current_request", None)
        if current is None:
            current = cls(request.headers, request.url.path)
            request.state.current_request = current
        return current

    @property
    def identity(self) -> Dict[str, Any]:
        if self._identity is None:
            encoded = self.headers.get(IDENTITY_HEADER)
            if not encoded:
                raise IdentityError(f"{IDENTITY_HEADER} header is missing")
            self._identity = decode_identity(encoded)
        return self._identity

    @property
    def user(self) -> User:
        return User(self.identity)

    @property
    def entitlement(self) -> Entitlement:
        return Entitlement(self.identity)

    @property
    def request_id(self) -> Optional[str]:
        return self.headers.get(REQUEST_ID_HEADER)

    @property
    def required_auth(self) -> bool:
        return not any(p.search(self.path) for p in _OPTIONAL_AUTH_PATHS)

    @property
    def forwardable(self) -> Dict[str, str]:
        """Headers to pass on to other services acting for this request."""
        return {k: self.headers[k] for k in FORWARDABLE_HEADERS if k in self.headers}

    def tenant_or_none(self) -> Optional[str]:
        """Account number for logging; never raises."""
        try:
            return self.user.tenant
        except IdentityError:
            return None

    def username_or_none(self) -> Optional[str]:
        try:
            return self.user.username
        except IdentityError:
            return None
