"""
Request-scoped database access.

One adapter per process; each request gets its own session scope from it,
committed when the endpoint returns and rolled back when it raises. Tests
swap the adapter by overriding `get_storage_adapter`.
"""

from typing import Annotated, Iterator, Optional

from fastapi import Depends
from sqlalchemy.orm import Session

from orgtasks.storage.base import StorageAdapter
from orgtasks.storage.postgres_adapter import PostgresAdapter, PostgresConfig

_adapter: Optional[PostgresAdapter] = None


def get_postgres_adapter() -> PostgresAdapter:
    global _adapter
    if _adapter is None:
        _adapter = PostgresAdapter(PostgresConfig())
    return _adapter


def get_storage_adapter() -> StorageAdapter:
    return get_postgres_adapter()


def get_db(adapter: Annotated[StorageAdapter, Depends(get_storage_adapter)]) -> Iterator[Session]:
    with adapter.get_session() as session:
        yield session


def close_postgres_adapter() -> None:
    global _adapter
    if _adapter is not None:
        _adapter.close()
        _adapter = None
