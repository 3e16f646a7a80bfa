from __future__ import annotations

from typing import Optional

from sqlalchemy import BigInteger, Boolean, ForeignKey, Integer, Text, UniqueConstraint, false
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.db.base import Base, IdPkMixin, TenantMixin, TimestampMixin


class SourceType(IdPkMixin, TimestampMixin, Base):
    """Kind of provider a source connects to (openshift, amazon, ...)."""
    __tablename__ = "source_types"

    name: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    product_name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    vendor: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    sources: Mapped[list["Source"]] = relationship("Source", back_populates="source_type")


class Source(IdPkMixin, TenantMixin, TimestampMixin, Base):
    """A connected provider account whose inventory is collected."""
    __tablename__ = "sources"

    name: Mapped[str] = mapped_column(Text, nullable=False)
    uid: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    source_type_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("source_types.id", ondelete="RESTRICT"), nullable=False, index=True
    )

    source_type: Mapped["SourceType"] = relationship("SourceType", back_populates="sources")
    endpoints: Mapped[list["Endpoint"]] = relationship("Endpoint", viewonly=True)
    authentications: Mapped[list["Authentication"]] = relationship(
        "Authentication",
        primaryjoin="and_(Authentication.resource_type == 'Source', "
        "foreign(Authentication.resource_id) == Source.id)",
        viewonly=True,
        info={"as": "resource"},
    )
    service_offerings: Mapped[list["ServiceOffering"]] = relationship("ServiceOffering", viewonly=True)
    service_plans: Mapped[list["ServicePlan"]] = relationship("ServicePlan", viewonly=True)
    service_instances: Mapped[list["ServiceInstance"]] = relationship("ServiceInstance", viewonly=True)
    flavors: Mapped[list["Flavor"]] = relationship("Flavor", viewonly=True)
    vms: Mapped[list["Vm"]] = relationship("Vm", viewonly=True)
    container_images: Mapped[list["ContainerImage"]] = relationship("ContainerImage", viewonly=True)
    tasks: Mapped[list["Task"]] = relationship("Task", viewonly=True)


class Endpoint(IdPkMixin, TenantMixin, TimestampMixin, Base):
    """Network location of a source's API."""
    __tablename__ = "endpoints"
    __table_args__ = (
        UniqueConstraint("source_id", "role", name="uq_endpoints_source_role"),
    )

    role: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    scheme: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    host: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    port: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    path: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    default: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default=false())
    verify_ssl: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True)
    certificate_authority: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    source_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("sources.id", ondelete="CASCADE"), nullable=False, index=True
    )

    source: Mapped["Source"] = relationship("Source", viewonly=True)
    authentications: Mapped[list["Authentication"]] = relationship(
        "Authentication",
        primaryjoin="and_(Authentication.resource_type == 'Endpoint', "
        "foreign(Authentication.resource_id) == Endpoint.id)",
        viewonly=True,
        info={"as": "resource"},
    )


class Authentication(IdPkMixin, TenantMixin, TimestampMixin, Base):
    """Credentials owned by a source or an endpoint (polymorphic resource)."""
    __tablename__ = "authentications"

    authtype: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    username: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    password: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    status: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    status_details: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    resource_type: Mapped[str] = mapped_column(Text, nullable=False)
    resource_id: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)
