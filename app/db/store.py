"""Record store used by the job service.

The service only needs four calls: get, insert, update and delete over named
collections of plain dict records. `SqlStore` maps the collections onto the
ORM models; any backend error surfaces as `PersistenceFailure`.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any

from sqlalchemy import inspect, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.errors import PersistenceFailure
from app.models import BusinessSettingsModel, CommunicationModel, ExpenseModel, JobModel

logger = logging.getLogger(__name__)

Record = dict[str, Any]

COLLECTIONS = {
    "jobs": JobModel,
    "communications": CommunicationModel,
    "business_settings": BusinessSettingsModel,
    "expenses": ExpenseModel,
}

# Ordering applied by `get` per collection
_ORDERING = {
    "jobs": (JobModel.route_position, JobModel.created_at),
    "communications": (CommunicationModel.date.desc(),),
    "business_settings": (BusinessSettingsModel.created_at,),
    "expenses": (ExpenseModel.created_at.desc(),),
}


class Store(ABC):
    """Abstract persistence backend."""

    @abstractmethod
    async def get(self, collection: str, filters: Record | None = None) -> list[Record]:
        ...

    @abstractmethod
    async def insert(self, collection: str, record: Record) -> Record:
        ...

    @abstractmethod
    async def update(self, collection: str, record_id: str, fields: Record) -> Record:
        ...

    @abstractmethod
    async def delete(self, collection: str, record_id: str) -> None:
        ...


def _plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    return value


def _columns(model) -> list[str]:
    return [attr.key for attr in inspect(model).column_attrs]


def _to_record(obj) -> Record:
    return {key: getattr(obj, key) for key in _columns(type(obj))}


class SqlStore(Store):
    """Store over an async SQLAlchemy session factory."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    def _model(self, collection: str):
        try:
            return COLLECTIONS[collection]
        except KeyError:
            raise PersistenceFailure(f"Unknown collection: {collection}") from None

    def _clean(self, model, record: Record) -> Record:
        allowed = set(_columns(model))
        return {k: _plain(v) for k, v in record.items() if k in allowed}

    async def get(self, collection: str, filters: Record | None = None) -> list[Record]:
        model = self._model(collection)
        stmt = select(model)
        for key, value in (filters or {}).items():
            stmt = stmt.where(getattr(model, key) == _plain(value))
        stmt = stmt.order_by(*_ORDERING[collection])
        try:
            async with self._session_factory() as db:
                result = await db.execute(stmt)
                return [_to_record(obj) for obj in result.scalars().all()]
        except SQLAlchemyError as e:
            logger.error("Read from %s failed: %s", collection, e)
            raise PersistenceFailure(f"Could not read {collection}") from e

    async def insert(self, collection: str, record: Record) -> Record:
        model = self._model(collection)
        obj = model(**self._clean(model, record))
        try:
            async with self._session_factory() as db:
                db.add(obj)
                await db.commit()
                await db.refresh(obj)
                return _to_record(obj)
        except SQLAlchemyError as e:
            logger.error("Insert into %s failed: %s", collection, e)
            raise PersistenceFailure(f"Could not save to {collection}") from e

    async def update(self, collection: str, record_id: str, fields: Record) -> Record:
        model = self._model(collection)
        try:
            async with self._session_factory() as db:
                obj = await db.get(model, record_id)
                if obj is None:
                    raise PersistenceFailure(f"{collection} record {record_id} not found")
                for k, v in self._clean(model, fields).items():
                    setattr(obj, k, v)
                await db.commit()
                await db.refresh(obj)
                return _to_record(obj)
        except SQLAlchemyError as e:
            logger.error("Update of %s/%s failed: %s", collection, record_id, e)
            raise PersistenceFailure(f"Could not update {collection}") from e

    async def delete(self, collection: str, record_id: str) -> None:
        model = self._model(collection)
        try:
            async with self._session_factory() as db:
                obj = await db.get(model, record_id)
                if obj is not None:
                    await db.delete(obj)
                    await db.commit()
        except SQLAlchemyError as e:
            logger.error("Delete of %s/%s failed: %s", collection, record_id, e)
            raise PersistenceFailure(f"Could not delete from {collection}") from e
