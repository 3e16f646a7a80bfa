"""
Versioned OpenAPI documents.

The documents are published API contracts shipped with the package
(src/openapi/openapi-3-v<major>.<minor>.json). The request layer reads the
component schemas to decide which attributes a client may send, filter on and
get back for each model.
"""
from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

logger = logging.getLogger(__name__)

DOCS_DIR = Path(__file__).resolve().parent
_DOC_FILE_PATTERN = re.compile(r"^openapi-3-v(?P<version>\d+\.\d+)\.json$")


class ObjectDefinition:
    """One schema under components/schemas."""

    def __init__(self, doc: "DocV3", name: str, schema: Dict[str, Any]) -> None:
        self.doc = doc
        self.name = name
        self.schema = schema

    @property
    def properties(self) -> Dict[str, Any]:
        return self.schema.get("properties") or {}

    def attribute_schema(self, name: str) -> Optional[Dict[str, Any]]:
        """Property schema with any `$ref` resolved, or None for unknown names."""
        prop = self.properties.get(name)
        if prop is None:
            return None
        return self.doc.resolve(prop)

    def _names_where(self, predicate) -> List[str]:
        return [name for name in self.properties if predicate(self.attribute_schema(name) or {})]

    @property
    def all_attributes(self) -> List[str]:
        return list(self.properties)

    @property
    def read_only_attributes(self) -> List[str]:
        return self._names_where(lambda p: p.get("readOnly") is True)

    @property
    def write_only_attributes(self) -> List[str]:
        return self._names_where(lambda p: p.get("writeOnly") is True)

    @property
    def required_attributes(self) -> Optional[List[str]]:
        return self.schema.get("required")

    @property
    def hash_attributes(self) -> List[str]:
        return self._names_where(lambda p: p.get("type") == "object")

    @property
    def array_attributes(self) -> List[str]:
        return self._names_where(lambda p: p.get("type") == "array")

    def __repr__(self) -> str:
        return f"<ObjectDefinition {self.name}>"


class ComponentCollection:
    """Lazy, memoized mapping of schema name -> ObjectDefinition."""

    def __init__(self, doc: "DocV3", path: str) -> None:
        self.doc = doc
        self.path = path
        self._cache: Dict[str, ObjectDefinition] = {}

    def _raw(self) -> Dict[str, Any]:
        node: Any = self.doc.content
        for part in self.path.split("/"):
            node = node.get(part) or {}
        return node

    def __getitem__(self, name: str) -> ObjectDefinition:
        if name not in self._cache:
            raw = self._raw()
            if name not in raw:
                raise KeyError(f"{name} is not defined in {self.path}")
            self._cache[name] = ObjectDefinition(self.doc, name, raw[name])
        return self._cache[name]

    def __contains__(self, name: object) -> bool:
        return name in self._raw()

    def __iter__(self) -> Iterator[str]:
        return iter(self._raw())


class DocV3:
    """An OpenAPI 3 document."""

    def __init__(self, content: Dict[str, Any]) -> None:
        self.content = content
        self.definitions = ComponentCollection(self, "components/schemas")

    @property
    def version(self) -> str:
        return self.content.get("info", {}).get("version", "")

    def resolve(self, node: Dict[str, Any]) -> Dict[str, Any]:
        """Follow local `#/...` references until a concrete schema is reached."""
        seen = set()
        while "$ref" in node:
            ref = node["$ref"]
            if ref in seen or not ref.startswith("#/"):
                raise ValueError(f"Unresolvable reference: {ref}")
            seen.add(ref)
            target: Any = self.content
            for part in ref[2:].split("/"):
                target = target[part]
            node = target
        return node


class Docs:
    """All documents found in a directory, keyed by 'major.minor' version."""

    _instance: Optional["Docs"] = None

    def __init__(self, directory: Path = DOCS_DIR) -> None:
        self.directory = directory
        self._docs: Dict[str, DocV3] = {}
        for path in sorted(directory.glob("openapi-3-v*.json")):
            match = _DOC_FILE_PATTERN.match(path.name)
            if not match:
                continue
            with path.open(encoding="utf-8") as f:
                self._docs[match.group("version")] = DocV3(json.load(f))
            logger.debug("Loaded OpenAPI document %s", path.name)

    @classmethod
    def instance(cls) -> "Docs":
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @property
    def versions(self) -> List[str]:
        return sorted(self._docs, key=lambda v: tuple(int(x) for x in v.split(".")))

    @property
    def latest_version(self) -> str:
        return self.versions[-1]

    def __getitem__(self, version: str) -> DocV3:
        return self._docs[version]


# PUBLIC_INTERFACE
def api_version_from_path_version(path_version: str) -> str:
    """
    'v0.1' -> '0.1'. The namespace form 'v0x1' maps to the same version.
    """
    return path_version.lstrip("vV").replace("x", ".")
