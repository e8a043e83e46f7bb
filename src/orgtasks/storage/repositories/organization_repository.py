from typing import List
from sqlalchemy.orm import Session
from sqlalchemy import select

from orgtasks.storage.models import OrganizationModel
from .base import BaseRepository


class OrganizationRepository(BaseRepository[OrganizationModel]):
    """Repository for Organizations and their one-level parent/child links."""

    model = OrganizationModel

    def list_children(self, session: Session, parent_id: str) -> List[OrganizationModel]:
        """Direct children only."""
        stmt = select(OrganizationModel).where(OrganizationModel.parent_id == parent_id)
        return list(session.scalars(stmt).all())
