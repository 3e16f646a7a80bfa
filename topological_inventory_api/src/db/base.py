from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import BigInteger, DateTime, ForeignKey, Integer, MetaData, Text, func
from sqlalchemy.orm import DeclarativeBase, Mapped, declared_attr, mapped_column


# Standardized naming convention for alembic-friendly constraints/indexes.
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

# SQLite only autoincrements INTEGER PRIMARY KEY columns
BigIntegerPk = BigInteger().with_variant(Integer(), "sqlite")


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


class Base(DeclarativeBase):
    """Declarative base class with metadata naming conventions."""
    metadata = MetaData(naming_convention=NAMING_CONVENTION)


class IdPkMixin:
    """Mixin that provides an autoincrementing bigint primary key."""
    id: Mapped[int] = mapped_column(BigIntegerPk, primary_key=True, autoincrement=True)


class TimestampMixin:
    """Mixin that provides created_at and updated_at timestamp columns."""
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=_utcnow,
        onupdate=_utcnow,
        server_default=func.now(),
        nullable=False,
    )


class TenantMixin:
    """
    Mixin that provides tenant scoping and FK to tenants.id.

    Rows of these models are filtered by, and stamped with, the tenant bound to
    the session (see src.db.session.tenant_context).
    """

    @declared_attr
    def tenant_id(cls) -> Mapped[int]:
        return mapped_column(
            BigInteger,
            ForeignKey("tenants.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        )


class SourceRefMixin:
    """Columns shared by inventory records collected from a source."""

    source_ref: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    @declared_attr
    def source_id(cls) -> Mapped[int]:
        return mapped_column(
            BigInteger, ForeignKey("sources.id", ondelete="CASCADE"), nullable=False, index=True
        )
