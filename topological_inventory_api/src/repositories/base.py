from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Tuple

from sqlalchemy import JSON, Executable, Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.exceptions import InvalidParameterValue, RecordNotFound
from src.db.reflection import model_for_class_name, model_for_table
from src.repositories.filter import parse_boolean, parse_timestamp

logger = logging.getLogger(__name__)


class BaseRepository:
    """
    Base class for repositories providing common helpers.

    Note:
      Tenant scoping is applied by the session itself (see src.db.session).
      Ensure the session you're using has tenant context set via tenant_context.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def execute(self, statement: Executable, params: Optional[dict[str, Any]] = None):
        """Execute a SQLAlchemy statement."""
        return await self.session.execute(statement, params or {})

    async def scalars(self, statement: Executable, params: Optional[dict[str, Any]] = None):
        """Execute and return scalars."""
        result = await self.execute(statement, params)
        return result.scalars()

    async def scalar_one_or_none(self, statement: Executable, params: Optional[dict[str, Any]] = None):
        """Execute and return a single scalar or None."""
        result = await self.execute(statement, params)
        return result.scalar_one_or_none()

    async def commit(self) -> None:
        """Commit current transaction."""
        await self.session.commit()

    async def add_all(self, entities: Iterable[Any]) -> None:
        """Add multiple entities to session."""
        self.session.add_all(list(entities))

    async def add(self, entity: Any) -> None:
        """Add a single entity to session."""
        self.session.add(entity)


def coerce_value(model: type, attribute: str, value: Any) -> Any:
    """
    Cast a request value to the Python type of the model column.

    Lists are cast element-wise. Columns without a plain Python type (JSON)
    take the value unchanged.

    Raises:
        InvalidParameterValue: when the value cannot be cast.
    """
    if value is None:
        return None
    if isinstance(value, list):
        return [coerce_value(model, attribute, v) for v in value]

    column = getattr(model, attribute)
    if isinstance(column.type, JSON):
        return value
    try:
        python_type = column.type.python_type
    except NotImplementedError:
        return value

    try:
        if python_type is bool:
            return parse_boolean(value)
        if python_type is int:
            if isinstance(value, (bool, dict)):
                raise ValueError(value)
            return int(str(value).strip())
        if python_type is datetime:
            return parse_timestamp(value)
        if python_type is str:
            if isinstance(value, (dict, list)):
                raise ValueError(value)
            return str(value)
        return python_type(value)
    except (TypeError, ValueError):
        raise InvalidParameterValue(attribute, value)


class CollectionRepository(BaseRepository):
    """
    Generic data access for one API collection.

    Lookups go through the session, so they only see the rows of the tenant
    the session is scoped to.
    """

    def __init__(self, session: AsyncSession, model: type) -> None:
        super().__init__(session)
        self.model = model

    # PUBLIC_INTERFACE
    async def find(self, record_id: Any):
        """
        Return the record with the given id.

        Raises:
            RecordNotFound: for unknown ids and ids that are not numbers.
        """
        try:
            pk = int(str(record_id))
        except (TypeError, ValueError):
            raise RecordNotFound()
        record = await self.scalar_one_or_none(select(self.model).where(self.model.id == pk))
        if record is None:
            raise RecordNotFound()
        return record

    # PUBLIC_INTERFACE
    def where(self, statement: Select, params: Dict[str, Any]) -> Select:
        """
        Narrow a select with equality conditions.

        A dict value is keyed by table name and applies to that table's columns:
        {"container_image_tags": {"container_image_id": 7}}. List values become IN.
        """
        for key, value in params.items():
            if isinstance(value, dict):
                target = model_for_table(key)
                if target is None:
                    raise InvalidParameterValue(key, value)
                for sub_key, sub_value in value.items():
                    statement = statement.where(self._condition(target, sub_key, sub_value))
            else:
                statement = statement.where(self._condition(self.model, key, value))
        return statement

    @staticmethod
    def _condition(model: type, attribute: str, value: Any):
        column = getattr(model, attribute)
        cast = coerce_value(model, attribute, value)
        if isinstance(cast, list):
            return column.in_(cast)
        if cast is None:
            return column.is_(None)
        return column == cast

    # PUBLIC_INTERFACE
    async def paginate(self, statement: Select, *, limit: int, offset: int) -> Tuple[List[Any], int]:
        """Return one page of records ordered by id, and the total count."""
        count_stmt = select(func.count()).select_from(statement.order_by(None).subquery())
        count = (await self.execute(count_stmt)).scalar_one()
        page = statement.order_by(self.model.id).limit(limit).offset(offset)
        records = list(await self.scalars(page))
        return records, count

    def _assign(self, record: Any, attributes: Dict[str, Any]) -> None:
        for key, value in attributes.items():
            setattr(record, key, coerce_value(self.model, key, value))

    def _referenced_model(self, attribute: str) -> Optional[type]:
        column = self.model.__table__.columns.get(attribute)
        if column is None:
            return None
        for fk in column.foreign_keys:
            return model_for_table(fk.column.table.name)
        return None

    async def _find_reference(self, target: Optional[type], attribute: str, value: Any) -> None:
        if target is None:
            raise InvalidParameterValue(attribute, value)
        try:
            await CollectionRepository(self.session, target).find(value)
        except RecordNotFound:
            raise InvalidParameterValue(attribute, value)

    # PUBLIC_INTERFACE
    async def check_references(self, attributes: Dict[str, Any], record: Any = None) -> None:
        """
        Look up every record the attributes point at, through this session.

        Covers foreign key columns and polymorphic <name>_type/<name>_id pairs;
        missing pair halves are taken from `record`. References the session
        cannot see, such as records of another tenant, are rejected.

        Raises:
            InvalidParameterValue: for references to unknown or invisible records.
        """
        for key, value in attributes.items():
            target = self._referenced_model(key)
            if target is not None and value is not None:
                await self._find_reference(target, key, value)

        columns = self.model.__table__.columns
        prefixes = {k[: -len(suffix)] for k in attributes for suffix in ("_type", "_id") if k.endswith(suffix)}
        for prefix in sorted(prefixes):
            type_key, id_key = f"{prefix}_type", f"{prefix}_id"
            if type_key not in columns or id_key not in columns:
                continue
            if self._referenced_model(id_key) is not None:
                continue
            type_name = attributes.get(type_key, getattr(record, type_key, None))
            record_id = attributes.get(id_key, getattr(record, id_key, None))
            if type_name is None or record_id is None:
                continue
            target = model_for_class_name(str(type_name))
            if target is None:
                raise InvalidParameterValue(type_key, type_name)
            await self._find_reference(target, id_key, record_id)

    # PUBLIC_INTERFACE
    async def create(self, attributes: Dict[str, Any]):
        """Insert a record and return it."""
        await self.check_references(attributes)
        record = self.model()
        self._assign(record, attributes)
        await self.add(record)
        await self.commit()
        logger.info("Created %s id=%s", self.model.__name__, record.id)
        return record

    # PUBLIC_INTERFACE
    async def update(self, record_id: Any, attributes: Dict[str, Any]):
        """Update a record in place and return it."""
        record = await self.find(record_id)
        await self.check_references(attributes, record)
        self._assign(record, attributes)
        await self.commit()
        logger.info("Updated %s id=%s", self.model.__name__, record.id)
        return record

    # PUBLIC_INTERFACE
    async def destroy(self, record_id: Any) -> None:
        """Delete a record."""
        record = await self.find(record_id)
        await self.session.delete(record)
        await self.commit()
        logger.info("Deleted %s id=%s", self.model.__name__, record_id)
