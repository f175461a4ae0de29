# core/building_access.py

"""
Building-scoped membership checks.

  • committee member: a building_committee_members row for (building, user)
  • building member:  committee member, apartment owner in the building,
                      or active tenant in the building

Decisions are cached per (user, building). A cached denial is returned
as-is without writing another audit row.
"""

from typing import Optional

from core.audit_log import AuditSink
from core.cache import SimpleCache, building_member_key, committee_key, get_cache
from core.config import settings
from core.logging_config import get_logger
from core.ownership_store import OwnershipStore
from models.audit_log import AUTHORIZATION_FAILED, AuditLogEntry
from models.authorization import AuthorizationDecision
from models.enums import DenyReason

logger = get_logger("building_access")

BUILDING_RESOURCE_TYPE = "Building"


def extract_building_id(path_params: Optional[dict], body=None) -> Optional[str]:
    """buildingId path parameter first, then buildingId in a JSON object body."""
    if path_params and path_params.get("buildingId"):
        return str(path_params["buildingId"])
    if isinstance(body, dict) and body.get("buildingId"):
        return str(body["buildingId"])
    return None


class BuildingAccessPolicy:
    def __init__(
        self,
        store: OwnershipStore,
        audit_log: AuditSink,
        cache: SimpleCache = None,
        ttl_seconds: int = None,
    ):
        self.store = store
        self.audit_log = audit_log
        self.cache = cache or get_cache()
        self.ttl_seconds = (
            settings.MEMBERSHIP_CACHE_TTL_SECONDS if ttl_seconds is None else ttl_seconds
        )

    # -----------------------------------------------------
    # Committee
    # -----------------------------------------------------
    def check_committee_member(self, caller, building_id: Optional[str], endpoint: str = None) -> AuthorizationDecision:
        missing = self._missing_context(caller, building_id)
        if missing:
            return missing

        key = committee_key(caller.id, building_id)
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug(f"Cache hit: {key}")
            return self._cached_decision(cached, DenyReason.not_committee_member)

        is_member = self.store.find_committee_membership(building_id, caller.id) is not None
        self.cache.set(key, is_member, self.ttl_seconds)

        if is_member:
            return AuthorizationDecision.allow()
        return self._deny(caller, building_id, endpoint, DenyReason.not_committee_member)

    # -----------------------------------------------------
    # Any building member
    # -----------------------------------------------------
    def check_building_member(self, caller, building_id: Optional[str], endpoint: str = None) -> AuthorizationDecision:
        missing = self._missing_context(caller, building_id)
        if missing:
            return missing

        key = building_member_key(caller.id, building_id)
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug(f"Cache hit: {key}")
            return self._cached_decision(cached, DenyReason.not_building_member)

        # Cheapest and most privileged first; stop at the first match
        is_member = (
            self.store.find_committee_membership(building_id, caller.id) is not None
            or self.store.find_apartment_owner(building_id, caller.id) is not None
            or self.store.find_active_tenancy(building_id, caller.id) is not None
        )
        self.cache.set(key, is_member, self.ttl_seconds)

        if is_member:
            return AuthorizationDecision.allow()
        return self._deny(caller, building_id, endpoint, DenyReason.not_building_member)

    # -----------------------------------------------------
    # Helpers
    # -----------------------------------------------------
    @staticmethod
    def _missing_context(caller, building_id) -> Optional[AuthorizationDecision]:
        if caller is None:
            return AuthorizationDecision.deny(DenyReason.missing_caller)
        if not building_id:
            return AuthorizationDecision.deny(DenyReason.missing_building_id)
        return None

    @staticmethod
    def _cached_decision(cached: bool, reason: DenyReason) -> AuthorizationDecision:
        if cached:
            return AuthorizationDecision.allow()
        return AuthorizationDecision.deny(reason)

    def _deny(self, caller, building_id, endpoint, reason: DenyReason) -> AuthorizationDecision:
        self.audit_log.log(AuditLogEntry(
            user_id=caller.id,
            action=AUTHORIZATION_FAILED,
            resource_type=BUILDING_RESOURCE_TYPE,
            resource_id=building_id,
            metadata={"reason": reason.value, "endpoint": endpoint},
        ))
        logger.warning(f"Denied {caller.id} on Building:{building_id} ({reason.value})")
        return AuthorizationDecision.deny(reason)
