from __future__ import annotations

from typing import Optional

from sqlalchemy import Text
from sqlalchemy.orm import Mapped, mapped_column

from src.db.base import Base, IdPkMixin, TimestampMixin


class Tenant(IdPkMixin, TimestampMixin, Base):
    """Tenant, one per external account number."""
    __tablename__ = "tenants"

    name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    external_tenant: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
