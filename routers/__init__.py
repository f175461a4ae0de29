# routers/__init__.py

from fastapi import APIRouter

from .audit_logs import router as audit_logs_router
from .health import router as health_router


api_router = APIRouter()

api_router.include_router(audit_logs_router)
api_router.include_router(health_router)

__all__ = ["api_router"]
