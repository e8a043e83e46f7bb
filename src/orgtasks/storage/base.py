from abc import ABC, abstractmethod
from typing import ContextManager
from sqlalchemy.orm import Session


class StorageAdapter(ABC):
    """
    Relational storage used by the task service, the audit recorder and the
    request scope.

    Every `get_session()` is an independent unit of work: it commits when the
    block exits cleanly and rolls back when it raises. The audit recorder
    depends on that independence to keep its writes out of the caller's
    transaction.
    """

    @abstractmethod
    def connect(self) -> None:
        """Create the engine and session factory. Idempotent."""

    @abstractmethod
    def close(self) -> None:
        """Dispose of pooled connections."""

    @abstractmethod
    def health_check(self) -> bool:
        """True when a trivial query succeeds; never raises."""

    @abstractmethod
    def get_session(self) -> ContextManager[Session]:
        """Open a transactional session scope."""

    @abstractmethod
    def create_schema(self) -> None:
        """Create any missing tables."""
