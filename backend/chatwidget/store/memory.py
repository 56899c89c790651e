import copy
from typing import Dict, List

from sqlalchemy import MetaData

from .base import ErrorKind, Query, Store, StoreError


def _sort_key(column, desc):
    # nulls sort last in both directions
    def key(row):
        value = row.get(column)
        if desc:
            return (value is not None, value)
        return (value is None, value)
    return key


class MemoryStore(Store):
    """
    In-process store with the same query semantics as the SQL backend.

    Tables and columns come from ``metadata``; column ``default`` and
    ``onupdate`` values are applied the way SQLAlchemy would apply them.
    Rows keep insertion order and sorting is stable.
    """

    def __init__(self, metadata: MetaData):
        self._metadata = metadata
        self._rows: Dict[str, List[dict]] = {name: [] for name in metadata.tables}

    def rows(self, table: str) -> List[dict]:
        return [dict(row) for row in self._rows[table]]

    async def run(self, query: Query) -> List[dict]:
        table = self._metadata.tables.get(query.table)
        if table is None:
            raise StoreError(ErrorKind.UNDEFINED_TABLE, f"relation {query.table!r} does not exist")
        for name in [f[1] for f in query.filters] + [o[0] for o in query.orders] + query.columns:
            self._check_column(table, name)

        if query.action == "insert":
            affected = [self._insert(table, query.payload)]
        elif query.action == "update":
            affected = self._update(table, self._matching(query), query.payload)
        elif query.action == "delete":
            affected = self._matching(query)
            deleted = {id(row) for row in affected}
            self._rows[table.name] = [row for row in self._rows[table.name] if id(row) not in deleted]
        else:
            affected = self._matching(query)
            for column, desc in reversed(query.orders):
                affected = sorted(affected, key=_sort_key(column, desc), reverse=desc)

        return [self._project(row, query.columns) for row in affected]

    def _check_column(self, table, name):
        if name not in table.c:
            raise StoreError(ErrorKind.UNDEFINED_COLUMN, f"column {table.name}.{name} does not exist")

    def _matching(self, query: Query) -> List[dict]:
        rows = self._rows[query.table]
        for op, column, value in query.filters:
            if op == "eq":
                rows = [row for row in rows if row.get(column) == value]
            else:
                rows = [row for row in rows if row.get(column) in value]
        return rows

    def _insert(self, table, payload: dict) -> dict:
        for name in payload:
            self._check_column(table, name)
        row = {}
        for column in table.c:
            if column.name in payload:
                row[column.name] = copy.deepcopy(payload[column.name])
            else:
                row[column.name] = self._generated(column.default)
        self._check_constraints(table, row)
        self._rows[table.name].append(row)
        return row

    def _update(self, table, rows: List[dict], values: dict) -> List[dict]:
        for name in values:
            self._check_column(table, name)
        for row in rows:
            updated = dict(row)
            updated.update(copy.deepcopy(values))
            for column in table.c:
                if column.onupdate is not None and column.name not in values:
                    updated[column.name] = self._generated(column.onupdate)
            self._check_constraints(table, updated, replacing=row)
            row.update(updated)
        return rows

    def _generated(self, default):
        if default is None:
            return None
        if default.is_callable:
            return default.arg(None)
        if default.is_scalar:
            return copy.deepcopy(default.arg)
        return None

    def _check_constraints(self, table, row: dict, replacing=None):
        for column in table.c:
            value = row.get(column.name)
            if value is None:
                if not column.nullable:
                    raise StoreError(
                        ErrorKind.CONSTRAINT_VIOLATION,
                        f"null value in column {column.name!r} violates not-null constraint",
                    )
                continue
            if column.primary_key or column.unique:
                for other in self._rows[table.name]:
                    if other is not replacing and other.get(column.name) == value:
                        raise StoreError(
                            ErrorKind.CONSTRAINT_VIOLATION,
                            f"duplicate key value violates unique constraint on {table.name}.{column.name}",
                        )

    def _project(self, row: dict, columns: List[str]) -> dict:
        if not columns:
            return copy.deepcopy(row)
        return {name: copy.deepcopy(row.get(name)) for name in columns}
