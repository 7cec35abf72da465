# Central API router include file
from fastapi import APIRouter

from .router import router as compliance_router

api_router = APIRouter()

api_router.include_router(compliance_router)

__all__ = ["api_router"]
