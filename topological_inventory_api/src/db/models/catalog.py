from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from sqlalchemy import JSON, BigInteger, DateTime, ForeignKey, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.db.base import Base, IdPkMixin, SourceRefMixin, TenantMixin, TimestampMixin


class ServiceOffering(IdPkMixin, SourceRefMixin, TenantMixin, TimestampMixin, Base):
    """Catalog item offered by a source."""
    __tablename__ = "service_offerings"

    name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    display_name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    extra: Mapped[Optional[dict[str, Any]]] = mapped_column(JSON, nullable=True)
    source_created_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    source_deleted_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    service_plans: Mapped[list["ServicePlan"]] = relationship("ServicePlan", viewonly=True)
    service_instances: Mapped[list["ServiceInstance"]] = relationship("ServiceInstance", viewonly=True)


class ServicePlan(IdPkMixin, SourceRefMixin, TenantMixin, TimestampMixin, Base):
    """Orderable plan of a service offering."""
    __tablename__ = "service_plans"

    name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    create_json_schema: Mapped[Optional[dict[str, Any]]] = mapped_column(JSON, nullable=True)
    source_created_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    source_deleted_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    service_offering_id: Mapped[Optional[int]] = mapped_column(
        BigInteger, ForeignKey("service_offerings.id", ondelete="CASCADE"), nullable=True, index=True
    )

    service_instances: Mapped[list["ServiceInstance"]] = relationship("ServiceInstance", viewonly=True)


class ServiceInstance(IdPkMixin, SourceRefMixin, TenantMixin, TimestampMixin, Base):
    """Provisioned instance of a service plan."""
    __tablename__ = "service_instances"

    name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    external_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    source_created_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    source_deleted_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    service_offering_id: Mapped[Optional[int]] = mapped_column(
        BigInteger, ForeignKey("service_offerings.id", ondelete="CASCADE"), nullable=True, index=True
    )
    service_plan_id: Mapped[Optional[int]] = mapped_column(
        BigInteger, ForeignKey("service_plans.id", ondelete="CASCADE"), nullable=True, index=True
    )
