# bookgram/services/record_store.py
"""
Collection-addressed record store over the SQLModel tables.

Every call works on flat snake_case row dicts, runs its blocking session
work in the threadpool and reports failures as RemoteStoreError (or
SchemaMismatchError when a write names a column the table does not have).
"""
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, SQLModel, select
from starlette.concurrency import run_in_threadpool

from bookgram.errors import RemoteStoreError, SchemaMismatchError, classify_store_error
from bookgram.models import COLLECTIONS

logger = logging.getLogger(__name__)

Row = Dict[str, Any]


class RecordStore:
    def __init__(self, engine):
        self.engine = engine

    # ---------------------------------------------------------
    # helpers
    # ---------------------------------------------------------

    def _model(self, collection: str):
        model = COLLECTIONS.get(collection)
        if model is None:
            raise RemoteStoreError(collection, "unknown collection")
        return model

    def _check_columns(self, collection: str, values: Row):
        columns = self._model(collection).__table__.columns.keys()
        for key in values:
            if key not in columns:
                raise SchemaMismatchError(
                    collection,
                    f"Could not find the '{key}' column of '{collection}' in the schema cache",
                )

    @staticmethod
    def _to_row(obj: SQLModel) -> Row:
        return obj.model_dump()

    async def _run(self, collection: str, fn, *args):
        try:
            return await run_in_threadpool(fn, *args)
        except RemoteStoreError:
            raise
        except SQLAlchemyError as e:
            error = classify_store_error(collection, e)
            logger.error(f"Store error on '{collection}': {error.detail}")
            raise error from e

    # ---------------------------------------------------------
    # operations
    # ---------------------------------------------------------

    async def insert_one(self, collection: str, values: Row) -> Row:
        """Insert a row and return it with its server-assigned identity."""
        self._check_columns(collection, values)
        model = self._model(collection)

        def _insert():
            with Session(self.engine) as session:
                obj = model(**values)
                session.add(obj)
                session.commit()
                session.refresh(obj)
                return self._to_row(obj)

        return await self._run(collection, _insert)

    async def select(
        self,
        collection: str,
        filters: Optional[Row] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> List[Row]:
        model = self._model(collection)
        if filters:
            self._check_columns(collection, filters)
        if order_by:
            self._check_columns(collection, {order_by: None})

        def _select():
            with Session(self.engine) as session:
                query = select(model)
                for key, value in (filters or {}).items():
                    query = query.where(getattr(model, key) == value)
                if order_by:
                    column = getattr(model, order_by)
                    query = query.order_by(column.desc() if descending else column.asc())
                return [self._to_row(obj) for obj in session.exec(query).all()]

        return await self._run(collection, _select)

    async def get(self, collection: str, key: Any) -> Optional[Row]:
        model = self._model(collection)

        def _get():
            with Session(self.engine) as session:
                obj = session.get(model, key)
                return self._to_row(obj) if obj else None

        return await self._run(collection, _get)

    async def update(self, collection: str, key: Any, values: Row) -> Row:
        self._check_columns(collection, values)
        model = self._model(collection)

        def _update():
            with Session(self.engine) as session:
                obj = session.get(model, key)
                if obj is None:
                    raise RemoteStoreError(collection, f"row {key!r} not found")
                for field, value in values.items():
                    setattr(obj, field, value)
                session.add(obj)
                session.commit()
                session.refresh(obj)
                return self._to_row(obj)

        return await self._run(collection, _update)

    async def delete(self, collection: str, key: Any) -> None:
        model = self._model(collection)

        def _delete():
            with Session(self.engine) as session:
                obj = session.get(model, key)
                if obj is not None:
                    session.delete(obj)
                    session.commit()

        await self._run(collection, _delete)

    async def delete_where(self, collection: str, filters: Row) -> int:
        self._check_columns(collection, filters)
        model = self._model(collection)

        def _delete_where():
            with Session(self.engine) as session:
                statement = delete(model)
                for key, value in filters.items():
                    statement = statement.where(getattr(model, key) == value)
                result = session.execute(statement)
                session.commit()
                return result.rowcount

        return await self._run(collection, _delete_where)

    async def upsert(self, collection: str, values: Row) -> Row:
        """Insert or update by primary key."""
        self._check_columns(collection, values)
        model = self._model(collection)

        def _upsert():
            with Session(self.engine) as session:
                obj = session.get(model, values.get("id")) if values.get("id") is not None else None
                if obj is None:
                    obj = model(**values)
                else:
                    for field, value in values.items():
                        setattr(obj, field, value)
                session.add(obj)
                session.commit()
                session.refresh(obj)
                return self._to_row(obj)

        return await self._run(collection, _upsert)
