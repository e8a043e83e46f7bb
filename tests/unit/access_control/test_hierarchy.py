from orgtasks.access_control.hierarchy import OrganizationHierarchyResolver
from orgtasks.storage.models import OrganizationModel
from orgtasks.storage.repositories.organization_repository import OrganizationRepository


def test_children_from_lookup():
    children = {"org-123": [OrganizationModel(id="org-sub-456", name="Labs", parent_id="org-123")]}
    resolver = OrganizationHierarchyResolver(lambda org_id: children.get(org_id, []))

    assert resolver.get_child_ids("org-123") == ["org-sub-456"]
    assert resolver.get_child_ids("org-sub-456") == []


def test_children_from_repository(org_tree, session):
    resolver = OrganizationHierarchyResolver.from_repository(OrganizationRepository(), session)

    assert resolver.get_child_ids("org-123") == ["org-sub-456"]
    assert resolver.get_child_ids("org-999") == []
    assert resolver.get_child_ids("does-not-exist") == []


def test_resolution_is_stable(org_tree, session):
    resolver = OrganizationHierarchyResolver.from_repository(OrganizationRepository(), session)
    assert resolver.get_child_ids("org-123") == resolver.get_child_ids("org-123")
