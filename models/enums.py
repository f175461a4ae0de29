from enum import Enum
from typing import Optional


class BaseStrEnum(str, Enum):
    """
    Base enum that serializes cleanly to a string
    and provides a .list() method for UI dropdowns.
    """

    def __str__(self):
        return str(self.value)

    @classmethod
    def list(cls):
        return [item.value for item in cls]


# -----------------------------------------------------
# RESOURCE TYPE
# -----------------------------------------------------
class ResourceType(BaseStrEnum):
    """
    Resource types that can be protected by ownership checks.
    Values match the tags stored in audit_logs.resource_type.
    """

    user_profile = "UserProfile"
    apartment = "Apartment"
    payment = "Payment"
    maintenance_request = "MaintenanceRequest"
    announcement = "Announcement"
    document = "Document"

    @classmethod
    def parse(cls, value) -> Optional["ResourceType"]:
        """Return the matching member, or None for unrecognized tags."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None


# -----------------------------------------------------
# DENIAL REASON
# -----------------------------------------------------
class DenyReason(BaseStrEnum):
    """Why an authorization check refused the request."""

    missing_caller = "missing_caller"
    missing_resource_id = "missing_resource_id"
    missing_resource_type = "missing_resource_type"
    missing_building_id = "missing_building_id"
    not_resource_owner = "not_resource_owner"
    not_committee_member = "not_committee_member"
    not_building_member = "not_building_member"


# -----------------------------------------------------
# AUDIT ACTIONS
# -----------------------------------------------------
class AuthAction(BaseStrEnum):
    login = "login"
    logout = "logout"
    login_failed = "login_failed"
    password_reset = "password_reset"


class DataAction(BaseStrEnum):
    read = "read"
    create = "create"
    update = "update"
    delete = "delete"


class PermissionAction(BaseStrEnum):
    grant = "grant"
    revoke = "revoke"
