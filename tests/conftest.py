"""
Shared fixtures: the two store backends and a data access layer over each.
"""

from __future__ import annotations

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from chatwidget import models
from chatwidget.crud import DataAccessLayer
from chatwidget.store import ErrorKind, MemoryStore, SqlAlchemyStore, Store, StoreError


class FailingStore(Store):
    """Every round trip fails the way an unreachable database would."""

    def __init__(self) -> None:
        self.calls = 0

    async def run(self, query):
        self.calls += 1
        raise StoreError(ErrorKind.STORE_ERROR, "connection refused")


@pytest.fixture
def memory_store() -> MemoryStore:
    return MemoryStore(models.Base.metadata)


@pytest.fixture
def sql_store(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'widget.db'}",
        connect_args={"check_same_thread": False},
    )
    models.Base.metadata.create_all(bind=engine)
    yield SqlAlchemyStore(sessionmaker(bind=engine), models.Base.metadata)
    engine.dispose()


@pytest.fixture(params=["memory", "sql"])
def store(request) -> Store:
    return request.getfixturevalue(f"{request.param}_store")


@pytest.fixture
def dal(store: Store) -> DataAccessLayer:
    return DataAccessLayer(store)


@pytest.fixture
def failing_store() -> FailingStore:
    return FailingStore()


@pytest.fixture
def add_user(store: Store):
    async def _add(user_id: str) -> None:
        response = await store.table("users").insert({"id": user_id}).execute()
        assert response.ok, response.error
    return _add
