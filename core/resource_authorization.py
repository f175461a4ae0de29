# core/resource_authorization.py

"""
Resource-ownership authorization.

Decides whether a caller may act on one specific resource instance:

  1. missing caller / resource id / resource type   -> deny, no audit
  2. UserProfile where resource id == caller id      -> allow, no queries
  3. resource's building has the caller on its committee -> allow
  4. resource's owner field equals the caller        -> allow
  5. anything else (including unknown types)         -> audit, deny

Reads are point-in-time and not transactional with the protected
action: a committee seat revoked after this check is not noticed by
the request that already passed it.
"""

from typing import Mapping, Optional, Union

from core.audit_log import AuditSink
from core.logging_config import get_logger
from core.ownership_store import OwnershipStore
from core.resource_policies import get_policy
from models.audit_log import AUTHORIZATION_FAILED, AuditLogEntry
from models.authorization import AuthorizationDecision
from models.enums import DenyReason, ResourceType

logger = get_logger("authorization")

# Path parameter names checked for the target resource id, in order
RESOURCE_ID_PARAMS = ("id", "resourceId", "userId")


def extract_resource_id(params: Optional[Mapping]) -> Optional[str]:
    if not params:
        return None
    for name in RESOURCE_ID_PARAMS:
        value = params.get(name)
        if value:
            return str(value)
    return None


class ResourceOwnerPolicy:
    def __init__(self, store: OwnershipStore, audit_log: AuditSink):
        self.store = store
        self.audit_log = audit_log

    def authorize(
        self,
        caller,
        resource_type: Union[ResourceType, str, None],
        resource_id: Optional[str],
        endpoint: Optional[str] = None,
    ) -> AuthorizationDecision:
        if caller is None:
            return AuthorizationDecision.deny(DenyReason.missing_caller)
        if not resource_id:
            return AuthorizationDecision.deny(DenyReason.missing_resource_id)
        if not resource_type:
            return AuthorizationDecision.deny(DenyReason.missing_resource_type)

        # Users can always act on their own profile
        if resource_type == ResourceType.user_profile and resource_id == caller.id:
            return AuthorizationDecision.allow()

        policy = get_policy(resource_type)
        if policy is None:
            logger.warning(f"Unknown resource type '{resource_type}' for {endpoint}")
            return self._deny_not_owner(caller, resource_type, resource_id, endpoint)

        if policy.building_resolver is not None:
            building_id = policy.building_resolver(self.store, resource_id)
            if building_id and self.store.find_committee_membership(building_id, caller.id):
                return AuthorizationDecision.allow()

        if policy.owner_resolver is not None:
            owner_id = policy.owner_resolver(self.store, resource_id)
            if owner_id is not None and owner_id == caller.id:
                return AuthorizationDecision.allow()

        return self._deny_not_owner(caller, resource_type, resource_id, endpoint)

    def _deny_not_owner(self, caller, resource_type, resource_id, endpoint) -> AuthorizationDecision:
        self.audit_log.log(AuditLogEntry(
            user_id=caller.id,
            action=AUTHORIZATION_FAILED,
            resource_type=str(resource_type),
            resource_id=resource_id,
            metadata={
                "reason": DenyReason.not_resource_owner.value,
                "endpoint": endpoint,
            },
        ))
        logger.warning(
            f"Denied {caller.id} on {resource_type}:{resource_id} ({endpoint})"
        )
        return AuthorizationDecision.deny(DenyReason.not_resource_owner)
