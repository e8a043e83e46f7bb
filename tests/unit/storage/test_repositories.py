from datetime import datetime, timedelta

import pytest

from orgtasks.access_control.models import TaskScope
from orgtasks.storage.models import TaskModel, UserModel, utcnow
from orgtasks.storage.repositories.organization_repository import OrganizationRepository
from orgtasks.storage.repositories.task_repository import TaskRepository
from orgtasks.storage.repositories.user_repository import UserRepository


@pytest.fixture
def tasks(org_tree, session):
    repo = TaskRepository()
    base = datetime(2024, 1, 1)
    rows = [
        TaskModel(id="t1", title="Write report", description="quarterly numbers", priority="high",
                  owner_id="admin-1", organization_id="org-123", created_at=base),
        TaskModel(id="t2", title="Plan offsite", status="done", category="meeting",
                  owner_id="user-789", organization_id="org-123", created_at=base + timedelta(days=1)),
        TaskModel(id="t3", title="Lab inventory", owner_id="sub-admin", organization_id="org-sub-456",
                  created_at=base + timedelta(days=2)),
        TaskModel(id="t4", title="Globex report", owner_id="outsider", organization_id="org-999",
                  created_at=base + timedelta(days=3)),
    ]
    for row in rows:
        repo.create(session, row)
    session.commit()
    return repo


def test_organization_children(org_tree, session):
    repo = OrganizationRepository()
    children = repo.list_children(session, "org-123")
    assert [c.id for c in children] == ["org-sub-456"]
    assert repo.list_children(session, "org-sub-456") == []
    assert repo.get(session, "org-sub-456").parent_id == "org-123"


def test_user_repository(org_tree, session):
    repo = UserRepository()
    user = repo.create(session, UserModel(
        id="new-user", email="new@acme.test", first_name="Ada", last_name="Lovelace",
        role="viewer", organization_id="org-123",
    ))
    assert user.is_active
    assert user.full_name == "Ada Lovelace"

    repo.update(session, "new-user", {"role": "admin"})
    assert repo.get_user(session, "new-user").role == "admin"
    assert repo.delete(session, "new-user")
    assert repo.get_user(session, "new-user") is None


def test_scope_by_organizations(tasks, session):
    scope = TaskScope(organization_ids=frozenset({"org-123", "org-sub-456"}))
    found = tasks.list_scoped(session, scope)
    assert [t.id for t in found] == ["t3", "t2", "t1"]


def test_scope_by_owner(tasks, session):
    found = tasks.list_scoped(session, TaskScope(owner_id="user-789"))
    assert [t.id for t in found] == ["t2"]


def test_filters_and_search(tasks, session):
    scope = TaskScope(organization_ids=frozenset({"org-123", "org-sub-456", "org-999"}))

    assert [t.id for t in tasks.list_scoped(session, scope, status="done")] == ["t2"]
    assert [t.id for t in tasks.list_scoped(session, scope, priority="high")] == ["t1"]
    assert [t.id for t in tasks.list_scoped(session, scope, category="meeting")] == ["t2"]
    assert {t.id for t in tasks.list_scoped(session, scope, search="REPORT")} == {"t1", "t4"}
    # description is searched too
    assert [t.id for t in tasks.list_scoped(session, scope, search="quarterly")] == ["t1"]


def test_sort_and_page(tasks, session):
    scope = TaskScope(organization_ids=frozenset({"org-123", "org-sub-456", "org-999"}))

    ascending = tasks.list_scoped(session, scope, sort_by="title", descending=False)
    assert [t.title for t in ascending] == ["Globex report", "Lab inventory", "Plan offsite", "Write report"]

    page = tasks.list_scoped(session, scope, limit=2, offset=2)
    assert [t.id for t in page] == ["t2", "t1"]


def test_task_update_and_delete(tasks, session):
    updated = tasks.update(session, "t1", {"status": "in_progress"})
    assert updated.status == "in_progress"
    assert tasks.update(session, "missing", {"status": "done"}) is None

    assert tasks.delete(session, "t1")
    assert not tasks.delete(session, "t1")


def test_task_flags():
    past = utcnow() - timedelta(days=1)
    assert TaskModel(status="todo", due_date=past).is_overdue
    assert not TaskModel(status="done", due_date=past).is_overdue
    assert not TaskModel(status="todo", due_date=None).is_overdue
    assert TaskModel(status="done").is_completed
