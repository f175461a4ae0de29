# dependencies/authorization.py

"""
Route-level wiring for the authorization policies.

Each protected route declares its resource type explicitly when it is
registered:

    @router.patch(
        "/{id}",
        dependencies=[Depends(require_resource_owner(ResourceType.maintenance_request))],
    )

Denials are translated to HTTP here. Missing context (no caller, no
resource id, no resource type) and ownership failures must stay
distinguishable at the boundary: 401/400 vs 403.
"""

from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.concurrency import run_in_threadpool

from core.audit_log import AuditLogService, AuditSink
from core.building_access import BuildingAccessPolicy, extract_building_id
from core.ownership_store import OwnershipStore, SupabaseOwnershipStore
from core.resource_authorization import ResourceOwnerPolicy, extract_resource_id
from dependencies.auth import CurrentUser, get_optional_user
from models.authorization import AuthorizationDecision
from models.enums import DenyReason, ResourceType


NOT_OWNER_MESSAGE = "Access denied: You do not own this resource"

DENIAL_RESPONSES = {
    DenyReason.missing_caller: (status.HTTP_401_UNAUTHORIZED, "Authentication required"),
    DenyReason.missing_resource_id: (status.HTTP_400_BAD_REQUEST, "Resource id is required"),
    DenyReason.missing_resource_type: (status.HTTP_400_BAD_REQUEST, "Resource type is not declared for this route"),
    DenyReason.missing_building_id: (status.HTTP_400_BAD_REQUEST, "buildingId is required"),
    DenyReason.not_resource_owner: (status.HTTP_403_FORBIDDEN, NOT_OWNER_MESSAGE),
    DenyReason.not_committee_member: (status.HTTP_403_FORBIDDEN, "Access denied: Committee member role required"),
    DenyReason.not_building_member: (status.HTTP_403_FORBIDDEN, "Access denied: You do not belong to this building"),
}


def enforce(decision: AuthorizationDecision) -> None:
    """Raise the HTTP error for a denial; return quietly on allow."""
    if decision.allowed:
        return

    status_code, detail = DENIAL_RESPONSES[decision.reason]
    headers = {"WWW-Authenticate": "Bearer"} if status_code == 401 else None
    raise HTTPException(status_code=status_code, detail=detail, headers=headers)


def request_endpoint(request: Request) -> str:
    """Path plus query string, as recorded in audit metadata."""
    if request.url.query:
        return f"{request.url.path}?{request.url.query}"
    return request.url.path


# ============================================================
# Collaborators (override these in tests)
# The Supabase client is created on first query, so a request the
# policies reject before any read never needs credentials.
# ============================================================
def get_ownership_store() -> OwnershipStore:
    return SupabaseOwnershipStore()


def get_audit_log() -> AuditSink:
    return AuditLogService()


def get_resource_owner_policy(
    store: OwnershipStore = Depends(get_ownership_store),
    audit_log: AuditSink = Depends(get_audit_log),
) -> ResourceOwnerPolicy:
    return ResourceOwnerPolicy(store, audit_log)


def get_building_access_policy(
    store: OwnershipStore = Depends(get_ownership_store),
    audit_log: AuditSink = Depends(get_audit_log),
) -> BuildingAccessPolicy:
    return BuildingAccessPolicy(store, audit_log)


# ============================================================
# Resource owner guard
# ============================================================
def require_resource_owner(resource_type: Optional[ResourceType]):
    """
    Dependency factory binding a route to one resource type.
    Returns the caller on success.
    """

    def dependency(
        request: Request,
        current_user: Optional[CurrentUser] = Depends(get_optional_user),
        policy: ResourceOwnerPolicy = Depends(get_resource_owner_policy),
    ) -> CurrentUser:
        decision = policy.authorize(
            current_user,
            resource_type,
            extract_resource_id(request.path_params),
            request_endpoint(request),
        )
        enforce(decision)
        return current_user

    return dependency


# ============================================================
# Building guards
# ============================================================
async def _request_building_id(request: Request) -> Optional[str]:
    body = None
    if "buildingId" not in request.path_params and request.headers.get("content-type", "").startswith("application/json"):
        try:
            body = await request.json()
        except ValueError:
            body = None
    return extract_building_id(request.path_params, body)


async def require_committee_member(
    request: Request,
    current_user: Optional[CurrentUser] = Depends(get_optional_user),
    policy: BuildingAccessPolicy = Depends(get_building_access_policy),
) -> CurrentUser:
    building_id = await _request_building_id(request)
    decision = await run_in_threadpool(
        policy.check_committee_member, current_user, building_id, request_endpoint(request)
    )
    enforce(decision)
    return current_user


async def require_building_member(
    request: Request,
    current_user: Optional[CurrentUser] = Depends(get_optional_user),
    policy: BuildingAccessPolicy = Depends(get_building_access_policy),
) -> CurrentUser:
    building_id = await _request_building_id(request)
    decision = await run_in_threadpool(
        policy.check_building_member, current_user, building_id, request_endpoint(request)
    )
    enforce(decision)
    return current_user
