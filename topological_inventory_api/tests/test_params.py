from __future__ import annotations

from typing import Any, Dict, Optional

import pytest
from starlette.requests import Request

from src.api.params import ResourceParams, permit, require
from src.core.exceptions import BodyParseError, ParameterMissing, UnpermittedParameters
from src.db.models import Authentication, ServiceOffering, ServicePlan, Source, Tag, Vm


def make_request(
    path: str,
    query: str = "",
    path_params: Optional[Dict[str, Any]] = None,
    body: bytes = b"",
    method: str = "GET",
) -> Request:
    scope = {
        "type": "http",
        "method": method,
        "scheme": "http",
        "server": ("test", 80),
        "path": path,
        "raw_path": path.encode(),
        "root_path": "",
        "query_string": query.encode(),
        "headers": [(b"host", b"test")],
        "path_params": path_params or {},
    }

    async def receive():
        return {"type": "http.request", "body": body, "more_body": False}

    return Request(scope, receive)


class TestPermit:
    def test_returns_whitelisted_keys(self):
        assert permit({"name": "a", "extra": {"k": 1}}, ["name"], hashes=["extra"]) == {
            "name": "a",
            "extra": {"k": 1},
        }

    def test_rejects_unknown_keys(self):
        with pytest.raises(UnpermittedParameters) as exc:
            permit({"name": "a", "foo": 1, "bar": 2}, ["name"])
        assert exc.value.message == "found unpermitted parameters: foo, bar"
        assert exc.value.status_code == 400

    def test_rejects_wrong_shapes(self):
        with pytest.raises(UnpermittedParameters, match="found unpermitted parameter: name"):
            permit({"name": {"eq": "a"}}, ["name"])


class TestRequire:
    def test_returns_values(self):
        assert require({"a": 1, "b": "x"}, ["a", "b"]) == [1, "x"]

    @pytest.mark.parametrize("params", [{}, {"name": ""}, {"name": "  "}, {"name": None}])
    def test_missing_or_blank(self, params):
        with pytest.raises(ParameterMissing) as exc:
            require(params, ["name"])
        assert exc.value.message == "param is missing or the value is empty: name"

    def test_false_is_present(self):
        assert require({"default": False}, ["default"]) == [False]


class TestListParams:
    def test_plain_collection(self):
        params = ResourceParams(make_request("/api/v0.1/vms", "limit=5&offset=2&name=web"), Vm)
        assert not params.subcollection
        assert params.params_for_list() == {"name": "web"}
        assert params.pagination_limit == "5"
        assert params.pagination_offset == "2"

    def test_unknown_query_parameter(self):
        params = ResourceParams(make_request("/api/v0.1/vms", "foo=1"), Vm)
        with pytest.raises(UnpermittedParameters, match="found unpermitted parameter: foo"):
            params.params_for_list()

    def test_subcollection_foreign_key(self):
        request = make_request("/api/v0.1/sources/5/vms", path_params={"source_id": "5"})
        params = ResourceParams(request, Vm)
        assert params.subcollection
        assert params.primary_collection_model is Source
        assert params.params_for_list() == {"source_id": "5"}

    def test_polymorphic_subcollection(self):
        request = make_request("/api/v0.1/endpoints/3/authentications", path_params={"endpoint_id": "3"})
        params = ResourceParams(request, Authentication)
        assert params.params_for_polymorphic_subcollection == {
            "resource_type": "Endpoint",
            "resource_id": "3",
        }
        assert params.params_for_list() == {"resource_type": "Endpoint", "resource_id": "3"}

    def test_through_subcollection(self):
        request = make_request(
            "/api/v0.1/container_images/7/tags", path_params={"container_image_id": "7"}
        )
        params = ResourceParams(request, Tag)
        assert params.through_relation_name == "container_image_tags"
        assert params.subcollection_foreign_key_using_through_relation == "container_image_id"
        assert params.params_for_list() == {"container_image_tags": {"container_image_id": "7"}}

    def test_filter_is_permitted_as_a_hash(self):
        params = ResourceParams(make_request("/api/v0.1/vms", "filter[name][eq]=web"), Vm)
        assert params.safe_params_for_list["filter"] == {"name": {"eq": "web"}}
        assert params.params_for_list() == {}

    def test_unversioned_path_uses_latest_document(self):
        params = ResourceParams(make_request("/vms"), Vm)
        assert params.api_version == "0.1"


class TestBodyParams:
    async def test_create_requires_documented_required_attributes(self):
        request = make_request("/api/v0.1/sources", body=b'{"name": "x"}', method="POST")
        with pytest.raises(ParameterMissing, match="source_type_id"):
            await ResourceParams(request, Source).params_for_create()

    async def test_create_rejects_unknown_attributes(self):
        body = b'{"name": "x", "source_type_id": "1", "color": "red"}'
        request = make_request("/api/v0.1/sources", body=body, method="POST")
        with pytest.raises(UnpermittedParameters, match="color"):
            await ResourceParams(request, Source).params_for_create()

    async def test_create_accepts_hash_attributes(self):
        body = b'{"name": "small", "create_json_schema": {"type": "object"}}'
        request = make_request("/api/v0.1/service_plans", body=body, method="POST")
        permitted = await ResourceParams(request, ServicePlan).params_for_create()
        assert permitted == {"name": "small", "create_json_schema": {"type": "object"}}

    async def test_scalar_under_hash_attribute_is_rejected(self):
        request = make_request("/api/v0.1/service_offerings", body=b'{"extra": "x"}', method="POST")
        with pytest.raises(UnpermittedParameters, match="extra"):
            await ResourceParams(request, ServiceOffering).params_for_create()

    async def test_update_rejects_read_only_attributes(self):
        request = make_request("/api/v0.1/sources/1", body=b'{"id": "2"}', method="PATCH")
        with pytest.raises(UnpermittedParameters, match="id"):
            await ResourceParams(request, Source).params_for_update()

    @pytest.mark.parametrize("body", [b"{not json", b"[1, 2]", b""])
    async def test_body_must_be_a_json_object(self, body):
        request = make_request("/api/v0.1/sources", body=body, method="POST")
        with pytest.raises(BodyParseError) as exc:
            await ResourceParams(request, Source).body_params()
        assert exc.value.message == "Failed to parse POST body, expected JSON"


def test_instance_link():
    params = ResourceParams(make_request("/api/v0.1/sources"), Vm)
    vm = Vm(id=12)
    assert params.instance_link(vm) == "http://test/api/v0.1/vms/12"
