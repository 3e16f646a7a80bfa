"""
API error types.

Every error carries the HTTP status it maps to; the exception handlers in
src.api.main render them as error documents.
"""
from __future__ import annotations

from typing import Iterable, Optional

from src.schemas.common import ErrorDocument


class ApiError(Exception):
    """Base class for errors rendered as an error document."""

    status_code: int = 400
    default_message: str = "Bad Request"

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    @property
    def error_document(self) -> ErrorDocument:
        return ErrorDocument().add(self.status_code, self.message)


class UnpermittedParameters(ApiError):
    """Raised when request parameters contain keys outside the whitelist."""

    def __init__(self, params: Iterable[str]) -> None:
        self.params = list(params)
        noun = "parameter" if len(self.params) == 1 else "parameters"
        super().__init__(f"found unpermitted {noun}: {', '.join(self.params)}")


class ParameterMissing(ApiError):
    """Raised when a required parameter is absent or blank."""

    def __init__(self, param: str) -> None:
        self.param = param
        super().__init__(f"param is missing or the value is empty: {param}")


class InvalidParameterValue(ApiError):
    """Raised when a parameter value cannot be cast to its column type."""

    def __init__(self, param: str, value: object) -> None:
        self.param = param
        super().__init__(f"Invalid value for {param}: {value}")


class BodyParseError(ApiError):
    default_message = "Failed to parse POST body, expected JSON"


class FilterError(ApiError):
    """Raised with every problem found while translating a filter parameter."""


class RecordNotFound(ApiError):
    status_code = 404
    default_message = "Record not found"


class IdentityError(ApiError):
    status_code = 401
    default_message = "Unauthorized"


class EntitlementError(ApiError):
    status_code = 403
    default_message = "Forbidden"


class ParameterTypeError(ApiError):
    """Raised when a bracketed query key conflicts with an earlier key of another shape."""
