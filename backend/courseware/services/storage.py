"""
Courseware Backend — Storage Collaborator Interface
=====================================================

What:  Abstract contract the resource handlers use to reach persistence,
       plus the SQLAlchemy implementation used by the running service.
How:   Stores speak in plain documents: dicts keyed by attribute name that
       always carry the storage-assigned `id`.
Who:   ResourceService calls the contract; routes construct the concrete store
       per request from the injected session.

Contract:
    find_all()       -> list of documents (order is the store's own)
    find_by_id(id)   -> document, or None when no instance has that id
    insert(values)   -> the persisted document including its new id

    Stores raise whatever their backend raises (SQLAlchemyError, ValueError
    for an unparseable id, ...). Translating failures is the service's job.
"""

import logging
import uuid
from datetime import datetime, timezone
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence, Type

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from courseware.database import Base

logger = logging.getLogger(__name__)

Document = Dict[str, Any]


def _as_utc(value: Any) -> Any:
    # SQLite drops offsets; PostgreSQL returns the session timezone
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
    return value


class ResourceStore(ABC):
    """
    Persistence for one resource collection.

    Implementations must be safe to call from concurrent coroutines; the
    service layer does no locking of its own.
    """

    @abstractmethod
    async def find_all(self) -> List[Document]:
        """Return every stored instance."""
        ...

    @abstractmethod
    async def find_by_id(self, resource_id: str) -> Optional[Document]:
        """
        Return the instance with this id, or None if there is none.

        Raises:
            ValueError (or a backend error) when the id is not in a format
            the store can look up.
        """
        ...

    @abstractmethod
    async def insert(self, values: Document) -> Document:
        """Persist a new instance and return it with its assigned `id`."""
        ...


class SQLAlchemyResourceStore(ResourceStore):
    """
    ResourceStore over an AsyncSession and one ORM record class.

    Args:
        session:  Request-scoped session (from get_db_session)
        record:   ORM class whose columns include every name in `fields` plus `id`
        fields:   Attribute names copied between documents and records
    """

    def __init__(self, session: AsyncSession, record: Type[Base], fields: Sequence[str]):
        self.session = session
        self.record = record
        self.fields = tuple(fields)

    def _to_document(self, row: Any) -> Document:
        document = {name: _as_utc(getattr(row, name)) for name in self.fields}
        document["id"] = str(row.id)
        return document

    async def find_all(self) -> List[Document]:
        query = select(self.record)
        if hasattr(self.record, "created_at"):
            query = query.order_by(self.record.created_at)
        result = await self.session.execute(query)
        return [self._to_document(row) for row in result.scalars().all()]

    async def find_by_id(self, resource_id: str) -> Optional[Document]:
        # Malformed ids raise ValueError here, before any query is sent
        key = uuid.UUID(str(resource_id))
        result = await self.session.execute(
            select(self.record).where(self.record.id == key)
        )
        row = result.scalar_one_or_none()
        return self._to_document(row) if row is not None else None

    async def insert(self, values: Document) -> Document:
        unknown = set(values) - set(self.fields)
        if unknown:
            raise ValueError(f"Unknown column(s) for {self.record.__tablename__}: {sorted(unknown)}")

        row = self.record(**values)
        self.session.add(row)
        # Commit here so the instance is durable before the response is built
        await self.session.commit()
        # Read back what the engine stored so create and find_by_id agree
        await self.session.refresh(row)
        logger.debug("Inserted %s %s", self.record.__tablename__, row.id)
        return self._to_document(row)
