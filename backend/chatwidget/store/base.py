from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, List, Optional, Tuple


class ErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    MULTIPLE_ROWS = "multiple_rows"
    UNDEFINED_TABLE = "undefined_table"
    UNDEFINED_COLUMN = "undefined_column"
    CONSTRAINT_VIOLATION = "constraint_violation"
    STORE_ERROR = "store_error"


class StoreError(Exception):
    def __init__(self, kind: ErrorKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message

    def __str__(self):
        return f"{self.kind.value}: {self.message}"


@dataclass
class StoreResponse:
    data: Any = None
    error: Optional[StoreError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def not_found(self) -> bool:
        return self.error is not None and self.error.kind is ErrorKind.NOT_FOUND


class Query:
    """
    Chainable description of one round trip against a table.

    The action defaults to ``select``. ``insert``, ``update`` and ``delete``
    return the affected rows. With ``single()`` the payload is one row and
    anything other than exactly one match is an error.
    """

    def __init__(self, store: "Store", table: str):
        self._store = store
        self.table = table
        self.action = "select"
        self.columns: List[str] = []
        self.payload: Optional[dict] = None
        self.filters: List[Tuple[str, str, Any]] = []
        self.orders: List[Tuple[str, bool]] = []
        self.expect_single = False

    def select(self, columns: str = "*") -> "Query":
        if columns.strip() == "*":
            self.columns = []
        else:
            self.columns = [c.strip() for c in columns.split(",") if c.strip()]
        return self

    def insert(self, record: dict) -> "Query":
        self.action = "insert"
        self.payload = dict(record)
        return self

    def update(self, values: dict) -> "Query":
        self.action = "update"
        self.payload = dict(values)
        return self

    def delete(self) -> "Query":
        self.action = "delete"
        return self

    def eq(self, column: str, value: Any) -> "Query":
        self.filters.append(("eq", column, value))
        return self

    def in_(self, column: str, values: Iterable[Any]) -> "Query":
        self.filters.append(("in", column, list(values)))
        return self

    def order(self, column: str, desc: bool = False) -> "Query":
        self.orders.append((column, desc))
        return self

    def single(self) -> "Query":
        self.expect_single = True
        return self

    async def execute(self) -> StoreResponse:
        try:
            rows = await self._store.run(self)
        except StoreError as exc:
            return StoreResponse(error=exc)
        if not self.expect_single:
            return StoreResponse(data=rows)
        if not rows:
            return StoreResponse(error=StoreError(ErrorKind.NOT_FOUND, f"no rows returned from {self.table}"))
        if len(rows) > 1:
            return StoreResponse(error=StoreError(
                ErrorKind.MULTIPLE_ROWS, f"{len(rows)} rows returned from {self.table}, expected one"
            ))
        return StoreResponse(data=rows[0])


class Store:
    def table(self, name: str) -> Query:
        return Query(self, name)

    async def run(self, query: Query) -> List[dict]:
        """Execute ``query`` and return the affected rows as dicts, projected to ``query.columns``."""
        raise NotImplementedError
