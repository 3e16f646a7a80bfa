"""
Association reflection over the mapped models.

Gives the request layer a name-based view of the relationships declared on the
models, close to how routes name them: `/container_images/1/tags` looks up the
`tags` association of `ContainerImage`.

Two relationship flavours matter:
  - polymorphic ownership, declared with `relationship(..., info={"as": "<name>"})`;
    the target table carries `<name>_type` / `<name>_id` columns
  - through associations, declared with `secondary=<mapping table>`; the mapping
    table must itself be mapped and reachable from the owner by a plain
    relationship
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, List, Optional

from sqlalchemy import Table, inspect
from sqlalchemy.orm import RelationshipProperty

from src.db.base import Base


@dataclass(frozen=True)
class Association:
    name: str
    owner: type
    klass: type
    as_: Optional[str] = None
    secondary: Optional[Table] = None

    @property
    def through(self) -> Optional[str]:
        """Name of the owner's association to the mapping table, for through associations."""
        if self.secondary is None:
            return None
        for assoc in reflect_on_all_associations(self.owner):
            if assoc.secondary is None and assoc.klass.__table__ is self.secondary:
                return assoc.name
        return None


def _association(owner: type, rel: RelationshipProperty) -> Association:
    secondary = rel.secondary if isinstance(rel.secondary, Table) else None
    return Association(
        name=rel.key,
        owner=owner,
        klass=rel.mapper.class_,
        as_=rel.info.get("as"),
        secondary=secondary,
    )


# PUBLIC_INTERFACE
def reflect_on_all_associations(model: type) -> List[Association]:
    """All relationships declared on a model, in declaration order."""
    return [_association(model, rel) for rel in inspect(model).relationships]


# PUBLIC_INTERFACE
def reflect_on_association(model: Optional[type], name: Optional[str]) -> Optional[Association]:
    """The named relationship of a model, or None."""
    if model is None or not name:
        return None
    rel = inspect(model).relationships.get(name)
    if rel is None:
        return None
    return _association(model, rel)


def _models() -> Dict[str, type]:
    return {m.class_.__name__: m.class_ for m in Base.registry.mappers}


# PUBLIC_INTERFACE
def model_for_class_name(name: Optional[str]) -> Optional[type]:
    """Mapped class by class name, or None."""
    if not name:
        return None
    return _models().get(name)


# PUBLIC_INTERFACE
def model_for_table(table_name: str) -> Optional[type]:
    """Mapped class by table name, or None."""
    for mapper in Base.registry.mappers:
        if mapper.local_table.name == table_name:
            return mapper.class_
    return None


_SINGULAR_RULES = (
    (re.compile(r"(ss)$"), r"\1"),
    (re.compile(r"([^aeiou])ies$"), r"\1y"),
    (re.compile(r"(x|ch|ss|sh)es$"), r"\1"),
    (re.compile(r"s$"), ""),
)


# PUBLIC_INTERFACE
def singularize(word: str) -> str:
    """
    Singular form of a collection name.

    Handles the plurals used by the API collections:
    >>> singularize("availabilities")
    'availability'
    >>> singularize("container_images")
    'container_image'
    """
    for pattern, replacement in _SINGULAR_RULES:
        if pattern.search(word):
            return pattern.sub(replacement, word)
    return word


# PUBLIC_INTERFACE
def classify(word: str) -> str:
    """'container_image' -> 'ContainerImage'."""
    return "".join(part.capitalize() for part in word.split("_") if part)


# PUBLIC_INTERFACE
def underscore(class_name: str) -> str:
    """'ContainerImage' -> 'container_image'."""
    return re.sub(r"(?<=[a-z0-9])([A-Z])", r"_\1", class_name).lower()
