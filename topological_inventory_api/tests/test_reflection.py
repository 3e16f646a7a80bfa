from __future__ import annotations

import pytest

from src.db.models import (
    Authentication,
    ContainerImage,
    ContainerImageTag,
    Endpoint,
    Source,
    Tag,
)
from src.db.reflection import (
    classify,
    model_for_class_name,
    model_for_table,
    reflect_on_all_associations,
    reflect_on_association,
    singularize,
    underscore,
)


@pytest.mark.parametrize(
    "plural, singular",
    [
        ("sources", "source"),
        ("container_images", "container_image"),
        ("service_offerings", "service_offering"),
        ("vms", "vm"),
        ("availabilities", "availability"),
        ("addresses", "address"),
        ("boxes", "box"),
        ("source", "source"),
    ],
)
def test_singularize(plural, singular):
    assert singularize(plural) == singular


def test_class_name_inflections():
    assert classify("container_image") == "ContainerImage"
    assert underscore("ContainerImage") == "container_image"
    assert underscore("Vm") == "vm"


def test_model_lookups():
    assert model_for_class_name("ContainerImage") is ContainerImage
    assert model_for_class_name("Widget") is None
    assert model_for_class_name(None) is None
    assert model_for_table("container_image_tags") is ContainerImageTag
    assert model_for_table("widgets") is None


def test_polymorphic_association():
    association = reflect_on_association(Endpoint, "authentications")
    assert association.klass is Authentication
    assert association.as_ == "resource"
    assert association.through is None


def test_through_association():
    association = reflect_on_association(ContainerImage, "tags")
    assert association.klass is Tag
    assert association.through == "container_image_tags"
    assert reflect_on_association(Tag, "container_images").through == "container_image_tags"


def test_unknown_association():
    assert reflect_on_association(Source, "widgets") is None
    assert reflect_on_association(None, "vms") is None


def test_all_associations():
    names = [a.name for a in reflect_on_all_associations(Source)]
    assert "vms" in names and "authentications" in names
