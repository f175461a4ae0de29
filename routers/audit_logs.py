# routers/audit_logs.py

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query

from core.audit_log import AuditLogService
from core.errors import handle_supabase_error
from core.permission_helpers import requires_permission
from dependencies.authorization import get_audit_log
from models.audit_log import AuditLogFilters

router = APIRouter(
    prefix="/audit-logs",
    tags=["Audit Logs"],
    dependencies=[Depends(requires_permission("audit_logs:read"))],
)


# -----------------------------------------------------
# GET /audit-logs/users/{user_id}
# -----------------------------------------------------
@router.get("/users/{user_id}", summary="Audit trail for one user")
def list_user_audit_logs(
    user_id: str,
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    audit_log: AuditLogService = Depends(get_audit_log),
):
    try:
        rows = audit_log.get_user_audit_logs(user_id, limit=limit, offset=offset)
    except Exception as e:
        raise handle_supabase_error(e, "Audit log lookup") from e

    return {"success": True, "data": rows}


# -----------------------------------------------------
# GET /audit-logs/resources/{resource_type}/{resource_id}
# -----------------------------------------------------
@router.get("/resources/{resource_type}/{resource_id}", summary="Audit trail for one resource")
def list_resource_audit_logs(
    resource_type: str,
    resource_id: str,
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    audit_log: AuditLogService = Depends(get_audit_log),
):
    try:
        rows = audit_log.get_resource_audit_logs(
            resource_type, resource_id, limit=limit, offset=offset
        )
    except Exception as e:
        raise handle_supabase_error(e, "Audit log lookup") from e

    return {"success": True, "data": rows}


# -----------------------------------------------------
# GET /audit-logs/search
# -----------------------------------------------------
@router.get("/search", summary="Search audit logs")
def search_audit_logs(
    user_id: Optional[str] = None,
    action: Optional[str] = None,
    resource_type: Optional[str] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    audit_log: AuditLogService = Depends(get_audit_log),
):
    """
    Filters combine with AND. `action` is a substring match
    (e.g. "authorization" finds every authorization.failed row).
    """
    filters = AuditLogFilters(
        user_id=user_id,
        action=action,
        resource_type=resource_type,
        start_date=start_date,
        end_date=end_date,
    )

    try:
        rows = audit_log.search_audit_logs(filters, limit=limit, offset=offset)
    except Exception as e:
        raise handle_supabase_error(e, "Audit log search") from e

    return {"success": True, "data": rows}
