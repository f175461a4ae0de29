# core/resource_policies.py

"""
Static policy table: ResourceType -> how to find its building and its owner.

Adding a protected resource type means adding one row to POLICIES.
The evaluation order in core.resource_authorization never changes.
"""

from dataclasses import dataclass
from typing import Callable, Dict, Optional

from core.ownership_store import OwnershipStore
from models.enums import ResourceType


# (store, resource_id) -> building_id / owner user id, or None
Resolver = Callable[[OwnershipStore, str], Optional[str]]


def column(table: str, field: str) -> Resolver:
    """Resolve a value stored directly on the resource row."""

    def resolve(store: OwnershipStore, resource_id: str) -> Optional[str]:
        return store.select_field(table, resource_id, field)

    resolve.__name__ = f"{table}.{field}"
    return resolve


def related_column(table: str, relation: str, field: str) -> Resolver:
    """Resolve a value one relation away (e.g. a payment's apartment)."""

    def resolve(store: OwnershipStore, resource_id: str) -> Optional[str]:
        return store.select_related_field(table, resource_id, relation, field)

    resolve.__name__ = f"{table}->{relation}.{field}"
    return resolve


@dataclass(frozen=True)
class ResourcePolicy:
    building_resolver: Optional[Resolver] = None
    owner_resolver: Optional[Resolver] = None


# ============================================
# RESOURCE TYPE → POLICY
# ============================================
POLICIES: Dict[ResourceType, ResourcePolicy] = {

    # Only reachable through the self-service fast path
    ResourceType.user_profile: ResourcePolicy(),

    # Committee-only
    ResourceType.apartment: ResourcePolicy(
        building_resolver=column("apartments", "building_id"),
    ),
    ResourceType.payment: ResourcePolicy(
        building_resolver=related_column("payments", "apartments", "building_id"),
    ),

    # Committee or requester
    ResourceType.maintenance_request: ResourcePolicy(
        building_resolver=column("maintenance_requests", "building_id"),
        owner_resolver=column("maintenance_requests", "requester_id"),
    ),

    # Owner-only
    ResourceType.announcement: ResourcePolicy(
        owner_resolver=column("announcements", "author_id"),
    ),
    ResourceType.document: ResourcePolicy(
        owner_resolver=column("documents", "uploaded_by"),
    ),
}


def get_policy(resource_type) -> Optional[ResourcePolicy]:
    """Policy for a tag, or None when the tag is not a known ResourceType."""
    parsed = ResourceType.parse(resource_type)
    if parsed is None:
        return None
    return POLICIES.get(parsed)
