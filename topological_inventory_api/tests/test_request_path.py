from __future__ import annotations

import pytest

from src.api.request_path import is_subcollection, request_path_parts


def test_collection_path():
    assert request_path_parts("/api/v0.1/sources") == {
        "full_version_string": "v0.1",
        "primary_collection_name": "sources",
        "primary_collection_id": None,
        "subcollection_name": None,
    }


def test_subcollection_path_under_custom_prefix():
    parts = request_path_parts("/r/insights/platform/topological-inventory/v0.1/container_images/7/tags")
    assert parts["full_version_string"] == "v0.1"
    assert parts["primary_collection_name"] == "container_images"
    assert parts["primary_collection_id"] == "7"
    assert parts["subcollection_name"] == "tags"
    assert is_subcollection(parts)


def test_instance_path_is_not_a_subcollection():
    parts = request_path_parts("/api/v0.1/sources/12")
    assert parts["primary_collection_id"] == "12"
    assert not is_subcollection(parts)


@pytest.mark.parametrize("path", ["/health", "/api/sources", "/"])
def test_unversioned_paths(path):
    assert request_path_parts(path) == {}
    assert not is_subcollection({})
