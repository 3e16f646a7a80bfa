from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class MessageResponse(BaseModel):
    """Standard message response."""
    message: str = Field(..., description="Human readable message")
    details: Optional[dict] = Field(default=None, description="Optional extra data")


class ErrorEntry(BaseModel):
    """Single entry of an error document."""
    status: str = Field(..., description="HTTP status code, as a string")
    detail: str = Field(..., description="Human-readable error message")


# PUBLIC_INTERFACE
class ErrorDocument(BaseModel):
    """
    Error envelope returned by every exception handler.

    Example:
        {"errors": [{"status": "404", "detail": "Record not found"}]}
    """
    errors: List[ErrorEntry] = Field(default_factory=list)

    def add(self, status: int | str = 400, detail: str = "") -> "ErrorDocument":
        """Append an error and return the document for chaining."""
        self.errors.append(ErrorEntry(status=str(status), detail=detail))
        return self

    @property
    def status(self) -> int:
        """HTTP status of the first error, 400 for an empty document."""
        if not self.errors:
            return 400
        return int(self.errors[0].status)

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")


class CollectionMetadata(BaseModel):
    count: int = Field(..., description="Total number of records matching the query")
    limit: int = Field(..., description="Max number of records returned")
    offset: int = Field(..., description="Number of records skipped")


class CollectionLinks(BaseModel):
    model_config = ConfigDict(extra="forbid")

    first: str
    last: str
    prev: Optional[str] = None
    next: Optional[str] = None


# PUBLIC_INTERFACE
class CollectionResponse(BaseModel):
    """Paginated collection envelope returned by every list endpoint."""
    meta: CollectionMetadata
    links: CollectionLinks
    data: List[Dict[str, Any]] = Field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Dump without the absent prev/next links."""
        body = self.model_dump(mode="json")
        body["links"] = {k: v for k, v in body["links"].items() if v is not None}
        return body


class OrderResponse(BaseModel):
    """Answer to a service plan order."""
    task_id: str = Field(..., description="Id of the task tracking the order")
