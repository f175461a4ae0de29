# tests/conftest.py

"""
Pytest configuration and shared fixtures for testing.

Authorization collaborators are replaced with in-memory fakes through
FastAPI dependency overrides; no test talks to Supabase.
"""

import pytest
from fastapi import APIRouter, Depends
from fastapi.testclient import TestClient
from typing import Generator

from main import create_app
from dependencies.auth import CurrentUser, get_current_user, get_optional_user
from dependencies.authorization import (
    get_audit_log,
    get_ownership_store,
    require_building_member,
    require_committee_member,
    require_resource_owner,
)
from models.enums import ResourceType


# ------------------------------------------------------------------
# In-memory collaborators
# ------------------------------------------------------------------
class FakeOwnershipStore:
    """
    rows:        {table: {resource_id: row_dict}}
    committee:   {(building_id, user_id), ...}
    owners:      {(building_id, user_id), ...}
    tenants:     {(building_id, user_id), ...}  (active tenancies only)
    Every call is recorded in .calls.
    """

    def __init__(self, rows=None, committee=(), owners=(), tenants=()):
        self.rows = rows or {}
        self.committee = set(committee)
        self.owners = set(owners)
        self.tenants = set(tenants)
        self.calls = []

    def _row(self, table, resource_id):
        return self.rows.get(table, {}).get(resource_id)

    def select_field(self, table, resource_id, field):
        self.calls.append(("select_field", table, resource_id, field))
        row = self._row(table, resource_id)
        return row.get(field) if row else None

    def select_related_field(self, table, resource_id, relation, field):
        self.calls.append(("select_related_field", table, resource_id, relation, field))
        row = self._row(table, resource_id)
        related = (row or {}).get(relation)
        return related.get(field) if related else None

    def find_committee_membership(self, building_id, user_id):
        self.calls.append(("find_committee_membership", building_id, user_id))
        if (building_id, user_id) in self.committee:
            return {"id": f"committee-{building_id}-{user_id}"}
        return None

    def find_apartment_owner(self, building_id, user_id):
        self.calls.append(("find_apartment_owner", building_id, user_id))
        if (building_id, user_id) in self.owners:
            return {"id": f"owner-{building_id}-{user_id}"}
        return None

    def find_active_tenancy(self, building_id, user_id):
        self.calls.append(("find_active_tenancy", building_id, user_id))
        if (building_id, user_id) in self.tenants:
            return {"id": f"tenant-{building_id}-{user_id}"}
        return None

    def calls_named(self, name):
        return [c for c in self.calls if c[0] == name]


class FakeAuditSink:
    def __init__(self):
        self.entries = []

    def log(self, entry):
        self.entries.append(entry)


# ------------------------------------------------------------------
# Fixtures
# ------------------------------------------------------------------
@pytest.fixture
def store_factory():
    """The fake store class itself, for tests that need a fresh one per example."""
    return FakeOwnershipStore


@pytest.fixture
def audit_sink_factory():
    return FakeAuditSink


@pytest.fixture
def store():
    return FakeOwnershipStore()


@pytest.fixture
def audit_sink():
    return FakeAuditSink()


@pytest.fixture
def caller():
    return CurrentUser(id="user-123", email="resident@example.com", role="owner")


@pytest.fixture
def admin_user():
    return CurrentUser(id="admin-1", email="admin@example.com", role="admin")


@pytest.fixture
def tenant_user():
    return CurrentUser(id="tenant-1", email="tenant@example.com", role="tenant")


def build_protected_router() -> APIRouter:
    """Routes that exercise each guard the way feature routers declare them."""
    router = APIRouter()

    @router.patch(
        "/maintenance-requests/{id}",
        dependencies=[Depends(require_resource_owner(ResourceType.maintenance_request))],
    )
    def update_maintenance_request(id: str):
        return {"updated": id}

    @router.delete(
        "/payments/{resourceId}",
        dependencies=[Depends(require_resource_owner(ResourceType.payment))],
    )
    def delete_payment(resourceId: str):
        return {"deleted": resourceId}

    @router.patch(
        "/users/{userId}",
        dependencies=[Depends(require_resource_owner(ResourceType.user_profile))],
    )
    def update_profile(userId: str):
        return {"updated": userId}

    @router.patch(
        "/undeclared/{id}",
        dependencies=[Depends(require_resource_owner(None))],
    )
    def undeclared(id: str):
        return {"updated": id}

    @router.post(
        "/documents/bulk-archive",
        dependencies=[Depends(require_resource_owner(ResourceType.document))],
    )
    def bulk_archive():
        return {"archived": True}

    @router.post("/buildings/{buildingId}/announcements")
    def post_announcement(buildingId: str, user: CurrentUser = Depends(require_committee_member)):
        return {"building": buildingId, "author": user.id}

    @router.post("/committee/actions")
    def committee_action(user: CurrentUser = Depends(require_committee_member)):
        return {"actor": user.id}

    @router.get("/buildings/{buildingId}/directory")
    def building_directory(buildingId: str, user: CurrentUser = Depends(require_building_member)):
        return {"building": buildingId, "viewer": user.id}

    return router


@pytest.fixture(scope="function")
def app(store, audit_sink):
    """Application with fake collaborators and the protected test routes."""
    application = create_app()
    application.include_router(build_protected_router())
    application.dependency_overrides[get_ownership_store] = lambda: store
    application.dependency_overrides[get_audit_log] = lambda: audit_sink
    application.dependency_overrides[get_optional_user] = lambda: None
    yield application
    application.dependency_overrides = {}


@pytest.fixture(scope="function")
def client(app) -> Generator[TestClient, None, None]:
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def login_as(app):
    """Attach a caller to every request (None = anonymous)."""

    def _login(user):
        app.dependency_overrides[get_optional_user] = lambda: user
        if user is not None:
            app.dependency_overrides[get_current_user] = lambda: user

    return _login


@pytest.fixture(autouse=True)
def reset_cache():
    """Reset the membership cache before each test."""
    from core.cache import cache_clear
    cache_clear()
    yield
    cache_clear()
