"""
Request parameter whitelisting.

Collection endpoints accept exactly the attributes documented for their model
in the OpenAPI document; anything else is rejected with a 400 before the
database is touched.
"""
from __future__ import annotations

import json
from functools import cached_property
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import Select
from starlette.requests import Request

from src.api.query import parse_nested_query
from src.api.request_path import is_subcollection, request_path_parts
from src.core.exceptions import BodyParseError, ParameterMissing, UnpermittedParameters
from src.db.reflection import (
    classify,
    model_for_class_name,
    reflect_on_all_associations,
    reflect_on_association,
    singularize,
)
from src.openapi.docs import Docs, ObjectDefinition, api_version_from_path_version
from src.repositories.filter import Filter

_SCALAR_TYPES = (str, int, float, bool, type(None))


# PUBLIC_INTERFACE
def permit(
    params: Dict[str, Any],
    scalars: Iterable[str],
    hashes: Iterable[str] = (),
    arrays: Iterable[str] = (),
) -> Dict[str, Any]:
    """
    Return the whitelisted subset of `params`.

    Raises:
        UnpermittedParameters: for keys not listed, or listed keys whose value
            has the wrong shape (e.g. a dict under a scalar key).
    """
    scalars, hashes, arrays = set(scalars), set(hashes), set(arrays)
    permitted: Dict[str, Any] = {}
    unpermitted: List[str] = []
    for key, value in params.items():
        if key in scalars and isinstance(value, _SCALAR_TYPES):
            permitted[key] = value
        elif key in hashes and isinstance(value, dict):
            permitted[key] = value
        elif key in arrays and isinstance(value, list):
            permitted[key] = value
        else:
            unpermitted.append(key)
    if unpermitted:
        raise UnpermittedParameters(unpermitted)
    return permitted


def _blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (dict, list)):
        return not value
    return False


# PUBLIC_INTERFACE
def require(params: Dict[str, Any], keys: Iterable[str]) -> List[Any]:
    """
    Return the values of the required keys.

    Raises:
        ParameterMissing: for the first key that is absent or blank.
    """
    values = []
    for key in keys:
        value = params.get(key)
        if _blank(value):
            raise ParameterMissing(key)
        values.append(value)
    return values


class ResourceParams:
    """
    Per-request derivation of the parameters a collection action works with.

    `model` is the model listed or changed by the action; for
    `/container_images/1/tags` it is Tag, and the primary collection model is
    ContainerImage.
    """

    def __init__(self, request: Request, model: type) -> None:
        self.request = request
        self.model = model
        self._body: Optional[Dict[str, Any]] = None

    @cached_property
    def request_path_parts(self) -> Dict[str, Optional[str]]:
        return request_path_parts(self.request.url.path)

    @property
    def subcollection(self) -> bool:
        return is_subcollection(self.request_path_parts)

    @cached_property
    def api_version(self) -> str:
        version = self.request_path_parts.get("full_version_string")
        if not version:
            return Docs.instance().latest_version
        return api_version_from_path_version(version)

    @cached_property
    def api_doc_definition(self) -> ObjectDefinition:
        return Docs.instance()[self.api_version].definitions[self.model.__name__]

    # PUBLIC_INTERFACE
    async def body_params(self) -> Dict[str, Any]:
        """
        The JSON request body, parsed once.

        Raises:
            BodyParseError: when the body is not a JSON object.
        """
        if self._body is None:
            raw = await self.request.body()
            try:
                parsed = json.loads(raw or b"")
            except ValueError as exc:
                raise BodyParseError() from exc
            if not isinstance(parsed, dict):
                raise BodyParseError()
            self._body = parsed
        return self._body

    @cached_property
    def params(self) -> Dict[str, Any]:
        params = parse_nested_query(self.request.query_params.multi_items())
        params.update(self.request.path_params)
        return params

    def _permit_attributes(self, body: Dict[str, Any], attributes: Iterable[str]) -> Dict[str, Any]:
        attributes = list(attributes)
        definition = self.api_doc_definition
        hashes = [a for a in definition.hash_attributes if a in attributes]
        arrays = [a for a in definition.array_attributes if a in attributes]
        scalars = [a for a in attributes if a not in hashes and a not in arrays]
        return permit(body, scalars, hashes, arrays)

    # PUBLIC_INTERFACE
    async def params_for_create(self) -> Dict[str, Any]:
        definition = self.api_doc_definition
        permitted = self._permit_attributes(await self.body_params(), definition.all_attributes)
        required = definition.required_attributes
        if required:
            require(permitted, required)
        return permitted

    # PUBLIC_INTERFACE
    async def params_for_update(self) -> Dict[str, Any]:
        definition = self.api_doc_definition
        read_only = set(definition.read_only_attributes)
        attributes = [a for a in definition.all_attributes if a not in read_only]
        return self._permit_attributes(await self.body_params(), attributes)

    @property
    def subcollection_foreign_key(self) -> Optional[str]:
        name = self.request_path_parts.get("primary_collection_name")
        if not name:
            return None
        return f"{singularize(name)}_id"

    @property
    def permitted_params(self) -> List[str]:
        permitted = self.api_doc_definition.all_attributes + ["limit", "offset"]
        if self.subcollection_foreign_key:
            permitted.append(self.subcollection_foreign_key)
        return permitted

    @cached_property
    def primary_collection_model(self) -> Optional[type]:
        name = self.request_path_parts.get("primary_collection_name")
        if not name:
            return None
        return model_for_class_name(classify(singularize(name)))

    def _subcollection_association(self):
        if not self.subcollection:
            return None
        return reflect_on_association(
            self.primary_collection_model, self.request_path_parts["subcollection_name"]
        )

    @property
    def params_for_polymorphic_subcollection(self) -> Dict[str, Any]:
        association = self._subcollection_association()
        if association is None or not association.as_:
            return {}
        return {
            f"{association.as_}_type": self.primary_collection_model.__name__,
            f"{association.as_}_id": self.request_path_parts["primary_collection_id"],
        }

    @cached_property
    def safe_params_for_list(self) -> Dict[str, Any]:
        # limit and offset are accepted for pagination, they never reach the filtering
        merged = {**self.params, **self.params_for_polymorphic_subcollection}
        return permit(merged, self.permitted_params, hashes=["filter"])

    @cached_property
    def through_relation_klass(self) -> Optional[type]:
        association = self._subcollection_association()
        if association is None or association.through is None:
            return None
        return reflect_on_association(self.primary_collection_model, association.through).klass

    @property
    def through_relation_name(self) -> Optional[str]:
        # Named from the listed model's side, so it can be joined on
        klass = self.through_relation_klass
        if klass is None:
            return None
        for association in reflect_on_all_associations(self.model):
            if not association.as_ and association.secondary is None and association.klass is klass:
                return association.name
        return None

    @property
    def subcollection_foreign_key_using_through_relation(self) -> Optional[str]:
        if self.through_relation_klass is None:
            return None
        return self.subcollection_foreign_key

    @property
    def all_attributes_for_index(self) -> List[str]:
        attributes = list(self.api_doc_definition.all_attributes)
        if self.subcollection_foreign_key_using_through_relation:
            attributes.append(self.subcollection_foreign_key_using_through_relation)
        return attributes

    # PUBLIC_INTERFACE
    def params_for_list(self) -> Dict[str, Any]:
        """
        Equality conditions for the listed records.

        The primary collection key of a through subcollection is moved under the
        mapping table: {"container_image_id": 7} becomes
        {"container_image_tags": {"container_image_id": 7}}.
        """
        attributes = set(self.all_attributes_for_index)
        safe_params = {k: v for k, v in self.safe_params_for_list.items() if k in attributes}
        through_key = self.subcollection_foreign_key_using_through_relation
        if through_key and safe_params.get(through_key) is not None:
            safe_params[self.through_relation_klass.__tablename__] = {
                through_key: safe_params.pop(through_key)
            }
        return safe_params

    # PUBLIC_INTERFACE
    def filtered(self) -> Select:
        return Filter(
            self.model, self.safe_params_for_list.get("filter"), self.api_doc_definition
        ).apply()

    @property
    def pagination_limit(self) -> Any:
        return self.safe_params_for_list.get("limit")

    @property
    def pagination_offset(self) -> Any:
        return self.safe_params_for_list.get("offset")

    # PUBLIC_INTERFACE
    def instance_link(self, instance: Any) -> str:
        """Absolute URL of a record of the model: <base>/<prefix>/v<version>/<collection>/<id>."""
        path = self.request.url.path
        version = self.request_path_parts.get("full_version_string") or f"v{self.api_version}"
        prefix = path.split(f"/{version}/", 1)[0]
        base = str(self.request.base_url).rstrip("/")
        return f"{base}{prefix}/{version}/{instance.__tablename__}/{instance.id}"
