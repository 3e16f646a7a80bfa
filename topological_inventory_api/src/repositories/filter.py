"""
Translation of the `filter` query parameter into SQLAlchemy criteria.

    ?filter[name][starts_with_i]=prod&filter[id][]=1&filter[id][]=2

Attribute types come from the model's OpenAPI definition, so only documented
attributes can be filtered on. Every problem found is collected and raised at
once as a FilterError.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from sqlalchemy import Select, func, or_, select
from sqlalchemy.orm import InstrumentedAttribute

from src.core.exceptions import FilterError
from src.openapi.docs import ObjectDefinition

logger = logging.getLogger(__name__)

INTEGER_COMPARISON_KEYWORDS = ("eq", "gt", "gte", "lt", "lte", "nil", "not_nil")
STRING_COMPARISON_KEYWORDS = (
    "contains",
    "contains_i",
    "eq",
    "eq_i",
    "starts_with",
    "starts_with_i",
    "ends_with",
    "ends_with_i",
    "nil",
    "not_nil",
)
BOOLEAN_COMPARISON_KEYWORDS = ("eq", "nil", "not_nil")
ALL_COMPARISON_KEYWORDS = tuple(dict.fromkeys(INTEGER_COMPARISON_KEYWORDS + STRING_COMPARISON_KEYWORDS))

_TRUE_VALUES = {"true", "t", "1", "yes"}
_FALSE_VALUES = {"false", "f", "0", "no"}


# PUBLIC_INTERFACE
def compact_filter(raw_filter: Any) -> Dict[str, Any]:
    """
    Flatten nested attribute keys.

    {"name": {"eq": "a"}} is kept as is, while a nested key that is not a
    comparator becomes a dotted attribute: {"source": {"name": "a"}} turns into
    {"source.name": "a"}.
    """
    result: Dict[str, Any] = {}
    if not raw_filter or not isinstance(raw_filter, dict):
        return result
    for key, value in raw_filter.items():
        if not isinstance(value, dict):
            result[key] = value
            continue
        for sub_key, sub_value in value.items():
            if sub_key in ALL_COMPARISON_KEYWORDS:
                result.setdefault(key, {})[sub_key] = sub_value
            else:
                result[f"{key}.{sub_key}"] = sub_value
    return result


def parse_integer(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError(value)
    if isinstance(value, int):
        return value
    return int(str(value).strip())


def parse_timestamp(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


def parse_boolean(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise ValueError(value)


class Filter:
    """Applies a raw filter hash to a select over `model`."""

    def __init__(self, model: type, raw_filter: Any, api_doc_definition: ObjectDefinition) -> None:
        self.model = model
        self.raw_filter = raw_filter
        self.api_doc_definition = api_doc_definition
        self.errors: List[str] = []
        self.query: Optional[Select] = None

    # PUBLIC_INTERFACE
    def apply(self, query: Optional[Select] = None) -> Select:
        """
        Return `query` (default: select of the model) narrowed by the filter.

        Raises:
            FilterError: with all problems joined by ", ".
        """
        self.query = query if query is not None else select(self.model)
        for key, value in compact_filter(self.raw_filter).items():
            attribute = self._attribute_for_key(key)
            if attribute is None:
                continue
            attribute_type = self._attribute_type(key, attribute)
            if attribute_type is None:
                continue
            getattr(self, f"_{attribute_type}")(key, value)

        if self.errors:
            message = ", ".join(self.errors)
            logger.debug("Rejected filter %r: %s", self.raw_filter, message)
            raise FilterError(message)
        return self.query

    def _attribute_for_key(self, key: str) -> Optional[Dict[str, Any]]:
        attribute = self.api_doc_definition.attribute_schema(key)
        if attribute is None or not isinstance(getattr(self.model, key, None), InstrumentedAttribute):
            self.errors.append(f"found unpermitted parameter: {key}")
            return None
        return attribute

    def _attribute_type(self, key: str, attribute: Dict[str, Any]) -> Optional[str]:
        kind = attribute.get("type")
        if kind == "string":
            if attribute.get("format") == "date-time":
                return "timestamp"
            if attribute.get("pattern") == r"^\d+$":
                return "integer"
            return "string"
        if kind in ("integer", "number"):
            return "integer"
        if kind == "boolean":
            return "boolean"
        self.errors.append(f"unsupported attribute type for: {key}")
        return None

    def _column(self, key: str) -> InstrumentedAttribute:
        return getattr(self.model, key)

    def _where(self, *criteria) -> None:
        self.query = self.query.where(*criteria)

    def _cast(self, key: str, value: Any, parser: Callable[[Any], Any]) -> Any:
        try:
            if isinstance(value, list):
                return [parser(v) for v in value]
            if value is None:
                return None
            return parser(value)
        except (TypeError, ValueError):
            self.errors.append(f"Invalid value for {key}: {value}")
            return None

    def _comparisons(self, key: str, value: Any, keywords, kind: str, parser, handlers) -> None:
        if not isinstance(value, dict):
            value = {"eq": value}
        for comparator, operand in value.items():
            if comparator not in keywords:
                self.errors.append(f"unsupported {kind} comparator: {comparator}")
                continue
            if comparator in ("nil", "not_nil"):
                self._nil(key, comparator)
                continue
            cast = self._cast(key, operand, parser)
            if cast is None:
                continue
            handlers[comparator](self._column(key), cast)

    def _nil(self, key: str, comparator: str) -> None:
        column = self._column(key)
        self._where(column.is_(None) if comparator == "nil" else column.is_not(None))

    def _ordered(self, column: InstrumentedAttribute, operator: str, operand: Any) -> None:
        values = operand if isinstance(operand, list) else [operand]
        ops = {
            "gt": column.__gt__,
            "gte": column.__ge__,
            "lt": column.__lt__,
            "lte": column.__le__,
        }
        self._where(*(ops[operator](v) for v in values))

    def _eq(self, column: InstrumentedAttribute, operand: Any) -> None:
        if isinstance(operand, list):
            self._where(column.in_(operand))
        else:
            self._where(column == operand)

    def _integer(self, key: str, value: Any) -> None:
        self._comparisons(key, value, INTEGER_COMPARISON_KEYWORDS, "integer", parse_integer, self._ordered_handlers())

    def _timestamp(self, key: str, value: Any) -> None:
        self._comparisons(key, value, INTEGER_COMPARISON_KEYWORDS, "timestamp", parse_timestamp, self._ordered_handlers())

    def _boolean(self, key: str, value: Any) -> None:
        self._comparisons(key, value, BOOLEAN_COMPARISON_KEYWORDS, "boolean", parse_boolean, {"eq": self._eq})

    def _ordered_handlers(self):
        return {
            "eq": self._eq,
            "gt": lambda c, v: self._ordered(c, "gt", v),
            "gte": lambda c, v: self._ordered(c, "gte", v),
            "lt": lambda c, v: self._ordered(c, "lt", v),
            "lte": lambda c, v: self._ordered(c, "lte", v),
        }

    def _string(self, key: str, value: Any) -> None:
        def any_of(build):
            def handler(column, operand):
                values = operand if isinstance(operand, list) else [operand]
                self._where(or_(*(build(column, v) for v in values)))
            return handler

        handlers = {
            "eq": self._eq,
            "eq_i": any_of(lambda c, v: func.lower(c) == v.lower()),
            "contains": any_of(lambda c, v: c.contains(v, autoescape=True)),
            "contains_i": any_of(lambda c, v: c.icontains(v, autoescape=True)),
            "starts_with": any_of(lambda c, v: c.startswith(v, autoescape=True)),
            "starts_with_i": any_of(lambda c, v: c.istartswith(v, autoescape=True)),
            "ends_with": any_of(lambda c, v: c.endswith(v, autoescape=True)),
            "ends_with_i": any_of(lambda c, v: c.iendswith(v, autoescape=True)),
        }
        self._comparisons(key, value, STRING_COMPARISON_KEYWORDS, "string", str, handlers)
