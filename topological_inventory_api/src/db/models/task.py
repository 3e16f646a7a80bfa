from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from sqlalchemy import JSON, BigInteger, DateTime, ForeignKey, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.db.base import Base, IdPkMixin, TenantMixin, TimestampMixin


class Task(IdPkMixin, TenantMixin, TimestampMixin, Base):
    """Asynchronous operation tracked on behalf of a client (e.g. a service order)."""
    __tablename__ = "tasks"

    name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    state: Mapped[Optional[str]] = mapped_column(Text, nullable=True)  # pending/queued/running/completed
    status: Mapped[Optional[str]] = mapped_column(Text, nullable=True)  # ok/warn/error
    context: Mapped[Optional[Any]] = mapped_column(JSON, nullable=True)
    completed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    source_id: Mapped[Optional[int]] = mapped_column(
        BigInteger, ForeignKey("sources.id", ondelete="SET NULL"), nullable=True, index=True
    )
