from __future__ import annotations

from typing import Optional

from sqlalchemy import BigInteger, ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.db.base import Base, IdPkMixin, SourceRefMixin, TenantMixin, TimestampMixin


class Flavor(IdPkMixin, SourceRefMixin, TenantMixin, TimestampMixin, Base):
    """Instance size offered by a cloud source."""
    __tablename__ = "flavors"

    name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    cpus: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    memory: Mapped[Optional[int]] = mapped_column(BigInteger, nullable=True)  # bytes
    disk_size: Mapped[Optional[int]] = mapped_column(BigInteger, nullable=True)  # bytes
    disk_count: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    vms: Mapped[list["Vm"]] = relationship("Vm", viewonly=True)


class Vm(IdPkMixin, SourceRefMixin, TenantMixin, TimestampMixin, Base):
    """Virtual machine collected from a source."""
    __tablename__ = "vms"

    name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    uid_ems: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    hostname: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    power_state: Mapped[Optional[str]] = mapped_column(Text, nullable=True)  # on/off/suspended/...
    cpus: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    memory: Mapped[Optional[int]] = mapped_column(BigInteger, nullable=True)
    flavor_id: Mapped[Optional[int]] = mapped_column(
        BigInteger, ForeignKey("flavors.id", ondelete="SET NULL"), nullable=True, index=True
    )
