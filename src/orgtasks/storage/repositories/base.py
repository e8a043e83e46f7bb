from typing import Any, ClassVar, Dict, Generic, Optional, Type, TypeVar

from sqlalchemy.orm import Session

from orgtasks.storage.models import Base

T = TypeVar("T", bound=Base)


class BaseRepository(Generic[T]):
    """
    Row-level CRUD over one mapped class, named by `model`.

    Repositories never commit: they flush so generated values are visible, and
    the caller owns the transaction.
    """

    model: ClassVar[Type[Base]]

    def create(self, session: Session, entity: T) -> T:
        session.add(entity)
        session.flush()
        return entity

    def get(self, session: Session, id: str) -> Optional[T]:
        return session.get(self.model, id)

    def update(self, session: Session, id: str, updates: Dict[str, Any]) -> Optional[T]:
        entity = self.get(session, id)
        if entity is None:
            return None
        for key, value in updates.items():
            setattr(entity, key, value)
        session.flush()
        return entity

    def delete(self, session: Session, id: str) -> bool:
        entity = self.get(session, id)
        if entity is None:
            return False
        session.delete(entity)
        session.flush()
        return True
