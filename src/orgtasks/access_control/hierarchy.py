from typing import Any, Callable, Iterable, List

from sqlalchemy.orm import Session

from orgtasks.storage.repositories.organization_repository import OrganizationRepository


class OrganizationHierarchyResolver:
    """
    Resolves the direct children of an organization.

    Hierarchies are at most two levels deep (an organization's parent has no
    parent of its own), so one lookup is all any decision ever needs. The
    resolver is read-only and holds no cache, so two calls against the same
    data always agree.
    """

    def __init__(self, children_lookup: Callable[[str], Iterable[Any]]):
        self._children_lookup = children_lookup

    @classmethod
    def from_repository(cls, repo: OrganizationRepository, session: Session) -> "OrganizationHierarchyResolver":
        return cls(lambda org_id: repo.list_children(session, org_id))

    def get_child_ids(self, organization_id: str) -> List[str]:
        return [org.id for org in self._children_lookup(organization_id)]
