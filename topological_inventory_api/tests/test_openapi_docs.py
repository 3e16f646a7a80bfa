from __future__ import annotations

import pytest

from src.openapi.docs import Docs, api_version_from_path_version


@pytest.fixture
def doc():
    return Docs.instance()["0.1"]


def test_versions_are_loaded_from_the_package():
    docs = Docs.instance()
    assert "0.1" in docs.versions
    assert docs.latest_version == docs.versions[-1]
    assert docs["0.1"].version == "0.1.0"


def test_references_are_resolved(doc):
    source = doc.definitions["Source"]
    id_schema = source.attribute_schema("id")
    assert id_schema["pattern"] == r"^\d+$"
    assert id_schema["readOnly"] is True
    assert source.attribute_schema("nope") is None


def test_source_definition(doc):
    source = doc.definitions["Source"]
    assert source.all_attributes == ["id", "name", "uid", "source_type_id", "created_at", "updated_at"]
    assert source.required_attributes == ["name", "source_type_id"]
    assert set(source.read_only_attributes) == {"id", "created_at", "updated_at"}


def test_write_only_and_hash_attributes(doc):
    assert doc.definitions["Authentication"].write_only_attributes == ["password"]
    assert doc.definitions["ServicePlan"].hash_attributes == ["create_json_schema"]
    assert doc.definitions["Vm"].required_attributes is None


def test_unknown_definition(doc):
    assert "Widget" not in doc.definitions
    with pytest.raises(KeyError):
        doc.definitions["Widget"]


def test_definitions_are_memoized(doc):
    assert doc.definitions["Tag"] is doc.definitions["Tag"]


@pytest.mark.parametrize("path_version, version", [("v0.1", "0.1"), ("v0x1", "0.1"), ("v1.0", "1.0")])
def test_api_version_from_path_version(path_version, version):
    assert api_version_from_path_version(path_version) == version
