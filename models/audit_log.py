from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


AUTHORIZATION_FAILED = "authorization.failed"


# -----------------------------------------------------
# Audit entry (write side)
# -----------------------------------------------------
class AuditLogEntry(BaseModel):
    """
    One append-only row in audit_logs.
    user_id is None for system-originated events.
    """

    user_id: Optional[str] = None
    action: str
    resource_type: Optional[str] = None
    resource_id: Optional[str] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None

    def to_row(self) -> dict:
        return self.model_dump(exclude_none=True)


# -----------------------------------------------------
# Search filters
# -----------------------------------------------------
class AuditLogFilters(BaseModel):
    user_id: Optional[str] = None
    action: Optional[str] = Field(None, description="Substring match on action")
    resource_type: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
