from __future__ import annotations

from datetime import datetime

import pytest

from src.core.exceptions import InvalidParameterValue
from src.db.models import ServiceOffering, ServicePlan, Task, Vm
from src.repositories import coerce_value


@pytest.mark.parametrize(
    "model, attribute, value",
    [
        (Task, "context", {"service_instance": {"id": "12"}}),
        (Task, "context", "plain text"),
        (ServiceOffering, "extra", {"a": [1, 2]}),
        (ServicePlan, "create_json_schema", {"type": "object"}),
    ],
)
def test_json_columns_take_values_unchanged(model, attribute, value):
    assert coerce_value(model, attribute, value) == value


def test_scalar_columns_are_cast():
    assert coerce_value(Vm, "id", " 7 ") == 7
    assert coerce_value(Vm, "name", 12) == "12"
    assert coerce_value(Vm, "id", ["1", "2"]) == [1, 2]
    assert isinstance(coerce_value(Task, "completed_at", "2024-05-01T10:00:00Z"), datetime)


@pytest.mark.parametrize("attribute, value", [("id", "x1"), ("id", {"a": 1}), ("name", {"a": 1})])
def test_uncastable_values(attribute, value):
    with pytest.raises(InvalidParameterValue):
        coerce_value(Vm, attribute, value)
