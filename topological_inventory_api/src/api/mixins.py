"""
Collection actions shared by the resource routers.

Each action works from the request and the model it lists or changes; the
routers only bind URLs to them.
"""
from __future__ import annotations

import logging
import re
from datetime import datetime
from typing import Any, Dict, List, Optional
from urllib.parse import urlencode

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, Response
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.requests import Request

from src.api.params import ResourceParams
from src.core.deps import get_tenant_session
from src.db.reflection import classify
from src.openapi.docs import ObjectDefinition
from src.repositories.base import CollectionRepository
from src.schemas.common import CollectionLinks, CollectionMetadata, CollectionResponse

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 100
MAX_LIMIT = 1000

_LEADING_INTEGER = re.compile(r"^\s*([-+]?\d+)")


def _to_int(value: Any, default: int) -> int:
    """Leading integer of the value, 0 when there is none; `default` for None."""
    if value is None:
        return default
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    match = _LEADING_INTEGER.match(str(value))
    return int(match.group(1)) if match else 0


# PUBLIC_INTERFACE
def serialize_record(record: Any, definition: ObjectDefinition) -> Dict[str, Any]:
    """
    API representation of a record.

    Documented attributes only, write-only ones left out. Ids are rendered as
    strings and timestamps as ISO-8601.
    """
    write_only = set(definition.write_only_attributes)
    body: Dict[str, Any] = {}
    for name in definition.all_attributes:
        if name in write_only or not hasattr(record, name):
            continue
        value = getattr(record, name)
        if value is not None and (name == "id" or name.endswith("_id")):
            value = str(value)
        elif isinstance(value, datetime):
            value = value.isoformat()
        body[name] = value
    return body


class PaginatedResponse:
    """One page of a query, with the links to navigate the others."""

    def __init__(self, request: Request, limit: Any = None, offset: Any = None) -> None:
        self.request = request
        self.limit = min(max(_to_int(limit, DEFAULT_LIMIT), 1), MAX_LIMIT)
        self.offset = max(_to_int(offset, 0), 0)

    def _link(self, offset: int) -> str:
        query = [
            (k, v) for k, v in self.request.query_params.multi_items() if k not in ("limit", "offset")
        ]
        query += [("limit", str(self.limit)), ("offset", str(offset))]
        return f"{self.request.url.path}?{urlencode(query)}"

    def links(self, count: int) -> CollectionLinks:
        prev_link: Optional[str] = None
        next_link: Optional[str] = None
        if self.offset > 0:
            prev_link = self._link(max(self.offset - self.limit, 0))
        if self.offset + self.limit < count:
            next_link = self._link(self.offset + self.limit)
        return CollectionLinks(
            first=self._link(0),
            last=self._link(max(count - self.limit, 0)),
            prev=prev_link,
            next=next_link,
        )

    def response(self, data: List[Dict[str, Any]], count: int) -> CollectionResponse:
        return CollectionResponse(
            meta=CollectionMetadata(count=count, limit=self.limit, offset=self.offset),
            links=self.links(count),
            data=data,
        )


async def raise_unless_primary_instance_exists(params: ResourceParams, session: AsyncSession) -> None:
    if not params.subcollection:
        return
    primary = CollectionRepository(session, params.primary_collection_model)
    await primary.find(params.request_path_parts["primary_collection_id"])


# PUBLIC_INTERFACE
async def index(request: Request, session: AsyncSession, model: type) -> JSONResponse:
    """List records, narrowed by filter, subcollection and attribute parameters."""
    params = ResourceParams(request, model)
    await raise_unless_primary_instance_exists(params, session)

    repo = CollectionRepository(session, model)
    statement = params.filtered()
    if params.through_relation_name:
        statement = statement.join(getattr(model, params.through_relation_name))
    statement = repo.where(statement, params.params_for_list())

    page = PaginatedResponse(request, params.pagination_limit, params.pagination_offset)
    records, count = await repo.paginate(statement, limit=page.limit, offset=page.offset)
    definition = params.api_doc_definition
    body = page.response([serialize_record(r, definition) for r in records], count)
    return JSONResponse(content=body.to_dict())


# PUBLIC_INTERFACE
async def show(request: Request, session: AsyncSession, model: type, record_id: str) -> Dict[str, Any]:
    params = ResourceParams(request, model)
    record = await CollectionRepository(session, model).find(record_id)
    return serialize_record(record, params.api_doc_definition)


# PUBLIC_INTERFACE
async def create(request: Request, session: AsyncSession, model: type) -> JSONResponse:
    """Create a record; answers 201 with the record and its Location."""
    params = ResourceParams(request, model)
    attributes = await params.params_for_create()
    read_only = set(params.api_doc_definition.read_only_attributes)
    attributes = {k: v for k, v in attributes.items() if k not in read_only}

    record = await CollectionRepository(session, model).create(attributes)
    return JSONResponse(
        status_code=201,
        content=serialize_record(record, params.api_doc_definition),
        headers={"Location": params.instance_link(record)},
    )


# PUBLIC_INTERFACE
async def update(request: Request, session: AsyncSession, model: type, record_id: str) -> Response:
    params = ResourceParams(request, model)
    attributes = await params.params_for_update()
    await CollectionRepository(session, model).update(record_id, attributes)
    return Response(status_code=204)


# PUBLIC_INTERFACE
async def destroy(request: Request, session: AsyncSession, model: type, record_id: str) -> Response:
    await CollectionRepository(session, model).destroy(record_id)
    return Response(status_code=204)


# PUBLIC_INTERFACE
def add_subcollection_route(router: APIRouter, primary: str, name: str, model: type) -> None:
    """
    Register GET /{<primary>_id}/<name> on a collection router.

    `primary` is the singular name of the router's collection, e.g. "source"
    for /sources/{source_id}/endpoints.
    """

    async def list_subcollection(
        request: Request,
        session: AsyncSession = Depends(get_tenant_session),
    ) -> JSONResponse:
        return await index(request, session, model)

    list_subcollection.__name__ = f"list_{primary}_{name}"
    router.add_api_route(
        f"/{{{primary}_id}}/{name}",
        list_subcollection,
        methods=["GET"],
        response_model=CollectionResponse,
        summary=f"List {model.__name__}s for {classify(primary)}",
    )
