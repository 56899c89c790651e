"""
Query-builder access to the widget tables.

`Store.table(name)` returns a `Query`; awaiting `Query.execute()` yields a
`StoreResponse` carrying either the rows or a tagged `StoreError`. Execution
never raises.

Backends
--------
- SqlAlchemyStore
    Compiles queries to SQLAlchemy Core statements and runs them on a worker
    thread, one session per call.

- MemoryStore
    Keeps rows in per-table lists. Used by tests and local demos.
"""
from .base import ErrorKind, Query, Store, StoreError, StoreResponse
from .memory import MemoryStore
from .sql import SqlAlchemyStore

__all__ = [
    "ErrorKind",
    "MemoryStore",
    "Query",
    "SqlAlchemyStore",
    "Store",
    "StoreError",
    "StoreResponse",
]
