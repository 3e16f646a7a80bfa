"""
ORM models for the topological inventory: tenants, sources and their
endpoints/credentials, service catalogs, compute, container images and tasks.

Importing this package ensures model classes are registered with the Base
metadata for Alembic and runtime usage.
"""

from .tenant import Tenant  # noqa: F401
from .source import (  # noqa: F401
    SourceType,
    Source,
    Endpoint,
    Authentication,
)
from .catalog import (  # noqa: F401
    ServiceOffering,
    ServicePlan,
    ServiceInstance,
)
from .compute import (  # noqa: F401
    Flavor,
    Vm,
)
from .container import (  # noqa: F401
    ContainerImage,
    Tag,
    ContainerImageTag,
)
from .task import Task  # noqa: F401
