from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from src.repositories.base import CollectionRepository


class BaseService:
    """
    Base class of operations spanning several collections, such as ordering a
    service plan. The collections share the request's tenant-scoped session.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    def repository(self, model: type) -> CollectionRepository:
        return CollectionRepository(self.session, model)
