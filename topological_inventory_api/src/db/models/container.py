from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import BigInteger, DateTime, ForeignKey, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.db.base import Base, IdPkMixin, SourceRefMixin, TenantMixin, TimestampMixin


class ContainerImage(IdPkMixin, SourceRefMixin, TenantMixin, TimestampMixin, Base):
    """Container image known to a container platform source."""
    __tablename__ = "container_images"

    name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    tag: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    digest: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    source_created_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    source_deleted_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    container_image_tags: Mapped[list["ContainerImageTag"]] = relationship(
        "ContainerImageTag", viewonly=True
    )
    tags: Mapped[list["Tag"]] = relationship(
        "Tag", secondary="container_image_tags", viewonly=True
    )


class Tag(IdPkMixin, TenantMixin, TimestampMixin, Base):
    """Key/value label attached to inventory records."""
    __tablename__ = "tags"
    __table_args__ = (
        UniqueConstraint("tenant_id", "namespace", "name", "value", name="uq_tags_tenant_namespace_name_value"),
    )

    name: Mapped[str] = mapped_column(Text, nullable=False)
    namespace: Mapped[str] = mapped_column(Text, nullable=False, default="", server_default="")
    value: Mapped[str] = mapped_column(Text, nullable=False, default="", server_default="")
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    container_image_tags: Mapped[list["ContainerImageTag"]] = relationship(
        "ContainerImageTag", viewonly=True
    )
    container_images: Mapped[list["ContainerImage"]] = relationship(
        "ContainerImage", secondary="container_image_tags", viewonly=True
    )


class ContainerImageTag(IdPkMixin, TenantMixin, TimestampMixin, Base):
    """Mapping of tags to container images."""
    __tablename__ = "container_image_tags"
    __table_args__ = (
        UniqueConstraint("container_image_id", "tag_id", name="uq_container_image_tags_image_tag"),
    )

    container_image_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("container_images.id", ondelete="CASCADE"), nullable=False, index=True
    )
    tag_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("tags.id", ondelete="CASCADE"), nullable=False, index=True
    )

    container_image: Mapped["ContainerImage"] = relationship("ContainerImage", viewonly=True)
    tag: Mapped["Tag"] = relationship("Tag", viewonly=True)
