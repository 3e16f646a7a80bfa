"""
Data access for the API collections.

- CollectionRepository: find/where/paginate/create/update/destroy over one model
- Filter: the `filter` query parameter as SQLAlchemy criteria

Both rely on the session's tenant scope (src.core.deps.get_tenant_session) and
never filter by tenant themselves.
"""

from .base import CollectionRepository, coerce_value  # noqa: F401
from .filter import Filter, FilterError  # noqa: F401
