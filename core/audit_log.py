# core/audit_log.py

"""
Audit trail for authorization and security events.

Writes are fire-and-forget: a failed insert is logged and dropped so an
audit outage never turns a decision into a 500.
"""

from typing import List, Optional, Protocol, Union

from fastapi import Request
from supabase import Client

from core.config import settings
from core.errors import extract_supabase_error
from core.supabase_client import require_supabase_client
from core.logging_config import get_logger
from models.audit_log import AuditLogEntry, AuditLogFilters
from models.enums import AuthAction, DataAction, PermissionAction, ResourceType

logger = get_logger("audit")


class AuditSink(Protocol):
    def log(self, entry: AuditLogEntry) -> None:
        ...


def get_client_ip(request: Optional[Request]) -> str:
    """First X-Forwarded-For hop, else the socket peer, else "unknown"."""
    if request is None:
        return "unknown"

    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()

    if request.client and request.client.host:
        return request.client.host

    return "unknown"


def _user_agent(request: Optional[Request]) -> Optional[str]:
    if request is None:
        return None
    return request.headers.get("user-agent")


class AuditLogService:
    def __init__(self, client: Optional[Client] = None, table: str = None):
        self._client = client
        self.table = table or settings.AUDIT_LOG_TABLE

    @property
    def client(self) -> Client:
        if self._client is None:
            self._client = require_supabase_client()
        return self._client

    # -----------------------------------------------------
    # Write
    # -----------------------------------------------------
    def log(self, entry: AuditLogEntry) -> None:
        try:
            self.client.table(self.table).insert(entry.to_row()).execute()
            logger.info(f"Audit: {entry.action} by user {entry.user_id or 'system'}")
        except Exception as e:
            logger.error(f"Failed to create audit log: {extract_supabase_error(e)}")

    def log_authentication(
        self,
        user_id: str,
        action: AuthAction,
        request: Optional[Request] = None,
        metadata: Optional[dict] = None,
    ) -> None:
        self.log(AuditLogEntry(
            user_id=user_id,
            action=f"auth.{AuthAction(action).value}",
            ip_address=get_client_ip(request),
            user_agent=_user_agent(request),
            metadata=metadata,
        ))

    def log_data_access(
        self,
        user_id: str,
        resource_type: Union[ResourceType, str],
        resource_id: str,
        action: DataAction,
        request: Optional[Request] = None,
        metadata: Optional[dict] = None,
    ) -> None:
        self.log(AuditLogEntry(
            user_id=user_id,
            action=f"data.{DataAction(action).value}",
            resource_type=str(resource_type),
            resource_id=resource_id,
            ip_address=get_client_ip(request),
            user_agent=_user_agent(request),
            metadata=metadata,
        ))

    def log_permission_change(
        self,
        user_id: str,
        target_user_id: str,
        action: PermissionAction,
        permission: str,
        request: Optional[Request] = None,
        metadata: Optional[dict] = None,
    ) -> None:
        self.log(AuditLogEntry(
            user_id=user_id,
            action=f"permission.{PermissionAction(action).value}",
            resource_type=ResourceType.user_profile.value,
            resource_id=target_user_id,
            ip_address=get_client_ip(request),
            user_agent=_user_agent(request),
            metadata={**(metadata or {}), "permission": permission},
        ))

    def log_security_event(
        self,
        user_id: Optional[str],
        event: str,
        request: Optional[Request] = None,
        metadata: Optional[dict] = None,
    ) -> None:
        self.log(AuditLogEntry(
            user_id=user_id,
            action=f"security.{event}",
            ip_address=get_client_ip(request),
            user_agent=_user_agent(request),
            metadata=metadata,
        ))

    # -----------------------------------------------------
    # Read (errors propagate; callers map them to HTTP)
    # -----------------------------------------------------
    def get_user_audit_logs(self, user_id: str, limit: int = 100, offset: int = 0) -> List[dict]:
        result = (
            self.client.table(self.table)
            .select("*")
            .eq("user_id", user_id)
            .order("created_at", desc=True)
            .range(offset, offset + limit - 1)
            .execute()
        )
        return result.data or []

    def get_resource_audit_logs(
        self,
        resource_type: str,
        resource_id: str,
        limit: int = 100,
        offset: int = 0,
    ) -> List[dict]:
        result = (
            self.client.table(self.table)
            .select("*")
            .eq("resource_type", resource_type)
            .eq("resource_id", resource_id)
            .order("created_at", desc=True)
            .range(offset, offset + limit - 1)
            .execute()
        )
        return result.data or []

    def search_audit_logs(
        self,
        filters: AuditLogFilters,
        limit: int = 100,
        offset: int = 0,
    ) -> List[dict]:
        query = self.client.table(self.table).select("*")

        if filters.user_id:
            query = query.eq("user_id", filters.user_id)

        if filters.action:
            query = query.ilike("action", f"%{filters.action}%")

        if filters.resource_type:
            query = query.eq("resource_type", filters.resource_type)

        if filters.start_date:
            query = query.gte("created_at", filters.start_date.isoformat())

        if filters.end_date:
            query = query.lte("created_at", filters.end_date.isoformat())

        result = (
            query
            .order("created_at", desc=True)
            .range(offset, offset + limit - 1)
            .execute()
        )
        return result.data or []
