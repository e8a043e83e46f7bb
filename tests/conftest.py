"""
Pytest configuration and shared fixtures.
"""

import os
import sys
import pytest

sys.path.append(os.path.join(os.getcwd(), "src"))

from orgtasks.storage.models import OrganizationModel, UserModel  # noqa: E402
from orgtasks.storage.postgres_adapter import PostgresAdapter, PostgresConfig  # noqa: E402


@pytest.fixture(scope="session", autouse=True)
def setup_test_environment() -> None:
    """Set up test environment variables."""
    os.environ.setdefault("APP_ENV", "test")
    os.environ.setdefault("DEBUG", "true")


@pytest.fixture
def storage():
    """In-memory SQLite adapter with the full schema."""
    adapter = PostgresAdapter(PostgresConfig(DATABASE_URL="sqlite://"))
    adapter.connect()
    adapter.create_schema()
    yield adapter
    adapter.close()


@pytest.fixture
def session(storage):
    with storage.get_session() as session:
        yield session


@pytest.fixture
def org_tree(storage):
    """
    org-123 with child org-sub-456, plus the unrelated org-999.

    Users: owner-1 / admin-1 / user-789 (viewer) in org-123,
    sub-admin in org-sub-456, outsider in org-999.
    """
    with storage.get_session() as s:
        s.add_all([
            OrganizationModel(id="org-123", name="Acme"),
            OrganizationModel(id="org-sub-456", name="Acme Labs", parent_id="org-123"),
            OrganizationModel(id="org-999", name="Globex"),
        ])
        s.flush()
        s.add_all([
            UserModel(id="owner-1", email="owner@acme.test", role="owner", organization_id="org-123"),
            UserModel(id="admin-1", email="admin@acme.test", role="admin", organization_id="org-123"),
            UserModel(id="user-789", email="viewer@acme.test", role="viewer", organization_id="org-123"),
            UserModel(id="sub-admin", email="admin@labs.test", role="admin", organization_id="org-sub-456"),
            UserModel(id="outsider", email="someone@globex.test", role="admin", organization_id="org-999"),
        ])
    return storage
