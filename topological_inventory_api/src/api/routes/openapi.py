from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Request

from src.api.request_path import request_path_parts
from src.core.exceptions import RecordNotFound
from src.openapi.docs import Docs, api_version_from_path_version

router = APIRouter(tags=["System"])


# PUBLIC_INTERFACE
@router.get(
    "/openapi.json",
    response_model=Dict[str, Any],
    summary="OpenAPI document",
    description="The published API contract of this version. No identity required.",
)
def openapi_document(request: Request) -> Dict[str, Any]:
    version = request_path_parts(request.url.path).get("full_version_string")
    try:
        return Docs.instance()[api_version_from_path_version(version or "")].content
    except KeyError:
        raise RecordNotFound()
