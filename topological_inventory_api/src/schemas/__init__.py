"""
Public Pydantic schemas used by FastAPI routes, services, and tests.

Record payloads are driven by the versioned OpenAPI documents (see src.openapi);
the models here cover the envelopes around them: error documents, paginated
collections and action responses.
"""

from .common import (  # noqa: F401
    CollectionResponse,
    ErrorDocument,
    MessageResponse,
    OrderResponse,
)
