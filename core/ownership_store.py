# core/ownership_store.py

"""
Data access for authorization checks.

Every read is a single minimal projection: only the column(s) a check
needs are selected, and a missing row comes back as None rather than
raising. Errors from the Supabase client itself (network, auth, bad
table) are NOT caught here; they propagate to the app error handler.
"""

from typing import Optional, Protocol

from supabase import Client

from core.supabase_client import require_supabase_client


class OwnershipStore(Protocol):
    def select_field(self, table: str, resource_id: str, field: str) -> Optional[str]:
        ...

    def select_related_field(
        self, table: str, resource_id: str, relation: str, field: str
    ) -> Optional[str]:
        ...

    def find_committee_membership(self, building_id: str, user_id: str) -> Optional[dict]:
        ...

    def find_apartment_owner(self, building_id: str, user_id: str) -> Optional[dict]:
        ...

    def find_active_tenancy(self, building_id: str, user_id: str) -> Optional[dict]:
        ...


def _first(result) -> Optional[dict]:
    rows = result.data or []
    return rows[0] if rows else None


class SupabaseOwnershipStore:
    """OwnershipStore backed by PostgREST queries through the service-role client."""

    def __init__(self, client: Optional[Client] = None):
        self._client = client

    @property
    def client(self) -> Client:
        # Created on first query; guards that deny before reading never connect
        if self._client is None:
            self._client = require_supabase_client()
        return self._client

    # -----------------------------------------------------
    # Resource projections
    # -----------------------------------------------------
    def select_field(self, table: str, resource_id: str, field: str) -> Optional[str]:
        row = _first(
            self.client.table(table)
            .select(field)
            .eq("id", resource_id)
            .limit(1)
            .execute()
        )
        if not row:
            return None
        return row.get(field)

    def select_related_field(
        self, table: str, resource_id: str, relation: str, field: str
    ) -> Optional[str]:
        """
        One-hop lookup through an embedded relation, e.g.
        payments -> apartments(building_id), in a single request.
        """
        row = _first(
            self.client.table(table)
            .select(f"{relation}({field})")
            .eq("id", resource_id)
            .limit(1)
            .execute()
        )
        if not row:
            return None

        related = row.get(relation)
        # PostgREST embeds to-one relations as an object, to-many as a list
        if isinstance(related, list):
            related = related[0] if related else None
        if not related:
            return None
        return related.get(field)

    # -----------------------------------------------------
    # Building membership
    # -----------------------------------------------------
    def find_committee_membership(self, building_id: str, user_id: str) -> Optional[dict]:
        # (building_id, user_id) is unique on building_committee_members
        return _first(
            self.client.table("building_committee_members")
            .select("id")
            .eq("building_id", building_id)
            .eq("user_id", user_id)
            .limit(1)
            .execute()
        )

    def find_apartment_owner(self, building_id: str, user_id: str) -> Optional[dict]:
        return _first(
            self.client.table("apartment_owners")
            .select("id, apartments!inner(building_id)")
            .eq("user_id", user_id)
            .eq("apartments.building_id", building_id)
            .limit(1)
            .execute()
        )

    def find_active_tenancy(self, building_id: str, user_id: str) -> Optional[dict]:
        return _first(
            self.client.table("apartment_tenants")
            .select("id, apartments!inner(building_id)")
            .eq("user_id", user_id)
            .eq("is_active", True)
            .eq("apartments.building_id", building_id)
            .limit(1)
            .execute()
        )
