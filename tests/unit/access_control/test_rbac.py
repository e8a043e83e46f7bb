import pytest

from orgtasks.access_control.hierarchy import OrganizationHierarchyResolver
from orgtasks.access_control.models import Principal, Role, TaskScope
from orgtasks.access_control.rbac import RBACEngine
from orgtasks.storage.models import TaskModel

# org-123 -> org-sub-456 -> org-grandchild (never produced in practice, but must not leak)
CHILDREN = {
    "org-123": ["org-sub-456"],
    "org-sub-456": ["org-grandchild"],
}


class _Org:
    def __init__(self, id):
        self.id = id


@pytest.fixture
def hierarchy():
    return OrganizationHierarchyResolver(lambda org_id: [_Org(c) for c in CHILDREN.get(org_id, [])])


@pytest.fixture
def engine():
    return RBACEngine()


def make_task(organization_id="org-123", owner_id="someone-else"):
    return TaskModel(id="task-1", title="T", organization_id=organization_id, owner_id=owner_id)


owner = Principal(id="owner-1", role=Role.OWNER, organization_id="org-123")
admin = Principal(id="admin-1", role=Role.ADMIN, organization_id="org-123")
viewer = Principal(id="user-789", role=Role.VIEWER, organization_id="org-456")


class TestCreate:

    def test_owner_and_admin_may_create(self, engine):
        assert engine.can_create_task(owner).allowed
        assert engine.can_create_task(admin).allowed

    def test_viewer_may_not_create(self, engine):
        decision = engine.can_create_task(viewer)
        assert not decision.allowed
        assert decision.reason == "only owners and admins can create tasks"


class TestAccessibleOrganizations:

    def test_owner_reaches_direct_children(self, engine, hierarchy):
        assert engine.accessible_organization_ids(owner, hierarchy) == {"org-123", "org-sub-456"}

    def test_admin_is_limited_to_own_organization(self, engine, hierarchy):
        assert engine.accessible_organization_ids(admin, hierarchy) == {"org-123"}

    def test_viewer_is_not_organization_scoped(self, engine, hierarchy):
        with pytest.raises(ValueError):
            engine.accessible_organization_ids(viewer, hierarchy)

    def test_repeated_calls_agree(self, engine, hierarchy):
        first = engine.accessible_organization_ids(owner, hierarchy)
        assert engine.accessible_organization_ids(owner, hierarchy) == first


class TestViewOrUpdate:

    def test_owner_views_task_in_child_organization(self, engine, hierarchy):
        assert engine.can_view_or_update_task(owner, make_task("org-sub-456"), hierarchy).allowed

    def test_owner_does_not_reach_grandchildren(self, engine, hierarchy):
        decision = engine.can_view_or_update_task(owner, make_task("org-grandchild"), hierarchy)
        assert not decision.allowed

    def test_owner_denied_outside_hierarchy(self, engine, hierarchy):
        assert not engine.can_view_or_update_task(owner, make_task("org-999"), hierarchy).allowed

    def test_admin_denied_in_child_organization(self, engine, hierarchy):
        decision = engine.can_view_or_update_task(admin, make_task("org-sub-456"), hierarchy)
        assert not decision.allowed
        assert decision.reason == "access denied to this task"

    def test_admin_allowed_in_own_organization(self, engine, hierarchy):
        assert engine.can_view_or_update_task(admin, make_task("org-123"), hierarchy).allowed

    def test_viewer_needs_ownership(self, engine, hierarchy):
        # organization is irrelevant for viewers
        assert engine.can_view_or_update_task(viewer, make_task("org-999", owner_id="user-789"), hierarchy).allowed
        assert not engine.can_view_or_update_task(viewer, make_task("org-456"), hierarchy).allowed


class TestDelete:

    @pytest.mark.parametrize("principal", [owner, admin, viewer])
    def test_anyone_deletes_own_task(self, engine, principal):
        assert engine.can_delete_task(principal, make_task(owner_id=principal.id)).allowed

    def test_admin_delete_ignores_organization(self, engine):
        assert engine.can_delete_task(admin, make_task("org-999")).allowed

    def test_viewer_cannot_delete_others_task(self, engine):
        decision = engine.can_delete_task(viewer, make_task("org-456"))
        assert not decision.allowed
        assert decision.reason == "you can only delete your own tasks or be an admin/owner"


class TestListScope:

    def test_viewer_scope_is_ownership(self, engine, hierarchy):
        assert engine.list_tasks_scope(viewer, hierarchy) == TaskScope(owner_id="user-789")

    def test_owner_scope_is_hierarchy(self, engine, hierarchy):
        scope = engine.list_tasks_scope(owner, hierarchy)
        assert scope.owner_id is None
        assert scope.organization_ids == {"org-123", "org-sub-456"}

    def test_admin_scope_is_own_organization(self, engine, hierarchy):
        assert engine.list_tasks_scope(admin, hierarchy).organization_ids == {"org-123"}


def test_audit_log_visibility(engine):
    assert engine.can_view_audit_log(owner).allowed
    assert engine.can_view_audit_log(admin).allowed

    decision = engine.can_view_audit_log(viewer)
    assert not decision.allowed
    assert decision.reason == "only owners and admins can view audit logs"


def test_decisions_are_deterministic(engine, hierarchy):
    task = make_task("org-sub-456")
    results = {engine.can_view_or_update_task(owner, task, hierarchy) for _ in range(3)}
    assert len(results) == 1
