# -------------------------
# Enums
# -------------------------
from .enums import (
    ResourceType,
    DenyReason,
    AuthAction,
    DataAction,
    PermissionAction,
)

# -------------------------
# Authorization
# -------------------------
from .authorization import AuthorizationDecision

# -------------------------
# Audit Logs
# -------------------------
from .audit_log import (
    AUTHORIZATION_FAILED,
    AuditLogEntry,
    AuditLogFilters,
)

__all__ = [
    # enums
    "ResourceType",
    "DenyReason",
    "AuthAction",
    "DataAction",
    "PermissionAction",

    # authorization
    "AuthorizationDecision",

    # audit logs
    "AUTHORIZATION_FAILED",
    "AuditLogEntry",
    "AuditLogFilters",
]
