"""
Bracketed query string parsing.

`filter[name][eq]=a&filter[id][]=1&filter[id][]=2&limit=10` becomes
{"filter": {"name": {"eq": "a"}, "id": ["1", "2"]}, "limit": "10"}.
"""
from __future__ import annotations

import re
from typing import Any, Dict, Iterable, List, Tuple

from src.core.exceptions import ParameterTypeError

_SEGMENT = re.compile(r"\[([^\[\]]*)\]")


def _split_key(key: str) -> List[str]:
    head, sep, rest = key.partition("[")
    if not sep:
        return [key]
    segments = _SEGMENT.findall(sep + rest)
    # Unbalanced brackets keep the whole key as a plain name
    if "".join(f"[{s}]" for s in segments) != sep + rest:
        return [key]
    return [head] + segments


def _type_name(value: Any) -> str:
    if isinstance(value, dict):
        return "Hash"
    if isinstance(value, list):
        return "Array"
    return "String"


def _assign(target: Dict[str, Any], segments: List[str], value: str) -> None:
    name = segments[0]
    rest = segments[1:]
    if not rest:
        target[name] = value
        return

    if rest[0] == "":
        existing = target.setdefault(name, [])
        if not isinstance(existing, list):
            raise ParameterTypeError(
                f"expected Array (got {_type_name(existing)}) for param `{name}'"
            )
        if len(rest) == 1:
            existing.append(value)
            return
        # name[][child]=... starts a new element once the last one already has the child
        child = rest[1]
        if existing and isinstance(existing[-1], dict) and child not in existing[-1]:
            element = existing[-1]
        else:
            element = {}
            existing.append(element)
        _assign(element, rest[1:], value)
        return

    existing = target.setdefault(name, {})
    if not isinstance(existing, dict):
        raise ParameterTypeError(
            f"expected Hash (got {_type_name(existing)}) for param `{name}'"
        )
    _assign(existing, rest, value)


# PUBLIC_INTERFACE
def parse_nested_query(items: Iterable[Tuple[str, str]]) -> Dict[str, Any]:
    """Build nested params from (key, value) pairs, keeping their order."""
    params: Dict[str, Any] = {}
    for key, value in items:
        if not key:
            continue
        _assign(params, _split_key(key), value)
    return params
