from typing import Optional

from pydantic import BaseModel

from models.enums import DenyReason


class AuthorizationDecision(BaseModel):
    """Outcome of one authorization evaluation."""

    allowed: bool
    reason: Optional[DenyReason] = None

    @classmethod
    def allow(cls) -> "AuthorizationDecision":
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: DenyReason) -> "AuthorizationDecision":
        return cls(allowed=False, reason=reason)
