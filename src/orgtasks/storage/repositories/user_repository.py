from typing import Optional
from sqlalchemy.orm import Session

from orgtasks.storage.models import UserModel
from .base import BaseRepository


class UserRepository(BaseRepository[UserModel]):

    model = UserModel

    def get_user(self, session: Session, user_id: str) -> Optional[UserModel]:
        return self.get(session, user_id)
