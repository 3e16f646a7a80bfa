"""
Persistence layer: declarative models, the async engine and the tenant scope
carried by each session.
"""

from .base import Base
from .config import Settings, get_settings
from .session import (
    TENANT_KEY,
    current_tenant_id,
    get_async_session,
    get_engine,
    tenant_context,
    without_tenant,
)

# Registers every model table on Base.metadata
from . import models as models  # noqa: F401

__all__ = [
    "Base",
    "Settings",
    "TENANT_KEY",
    "current_tenant_id",
    "get_async_session",
    "get_engine",
    "get_settings",
    "models",
    "tenant_context",
    "without_tenant",
]
