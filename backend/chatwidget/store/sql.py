import asyncio
import logging
from typing import List

from sqlalchemy import MetaData, delete, insert, select, update
from sqlalchemy.exc import CompileError, IntegrityError, SQLAlchemyError

from .base import ErrorKind, Query, Store, StoreError

logger = logging.getLogger(__name__)


class SqlAlchemyStore(Store):
    """Runs queries through SQLAlchemy Core, one session per round trip."""

    def __init__(self, session_factory, metadata: MetaData):
        self._session_factory = session_factory
        self._metadata = metadata

    async def run(self, query: Query) -> List[dict]:
        return await asyncio.to_thread(self._run_sync, query)

    def _table(self, name):
        table = self._metadata.tables.get(name)
        if table is None:
            raise StoreError(ErrorKind.UNDEFINED_TABLE, f"relation {name!r} does not exist")
        return table

    def _column(self, table, name):
        if name not in table.c:
            raise StoreError(ErrorKind.UNDEFINED_COLUMN, f"column {table.name}.{name} does not exist")
        return table.c[name]

    def _build(self, query: Query):
        table = self._table(query.table)
        if query.columns:
            returned = [self._column(table, name) for name in query.columns]
        else:
            returned = list(table.c)

        if query.action == "insert":
            return insert(table).values(**query.payload).returning(*returned)

        if query.action == "update":
            stmt = update(table).values(**query.payload)
        elif query.action == "delete":
            stmt = delete(table)
        else:
            stmt = select(*returned)

        for op, name, value in query.filters:
            column = self._column(table, name)
            stmt = stmt.where(column == value if op == "eq" else column.in_(value))

        if query.action == "select":
            for name, desc in query.orders:
                column = self._column(table, name)
                stmt = stmt.order_by((column.desc() if desc else column.asc()).nulls_last())
            return stmt
        return stmt.returning(*returned)

    def _run_sync(self, query: Query) -> List[dict]:
        with self._session_factory() as db:
            try:
                stmt = self._build(query)
                rows = [dict(row) for row in db.execute(stmt).mappings().all()]
                if query.action != "select":
                    db.commit()
            except IntegrityError as exc:
                db.rollback()
                raise StoreError(ErrorKind.CONSTRAINT_VIOLATION, str(exc.orig)) from exc
            except CompileError as exc:
                # unknown keys in an insert/update payload
                raise StoreError(ErrorKind.UNDEFINED_COLUMN, str(exc)) from exc
            except SQLAlchemyError as exc:
                db.rollback()
                logger.debug("Statement against %s failed", query.table, exc_info=True)
                raise StoreError(ErrorKind.STORE_ERROR, str(exc)) from exc
        return rows
