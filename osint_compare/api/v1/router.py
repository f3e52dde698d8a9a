from fastapi import APIRouter

from osint_compare.api.v1.investigations import router as investigations_router
from osint_compare.api.v1.normalize import router as normalize_router
from osint_compare.api.v1.tools import router as tools_router

api_v1_router = APIRouter(prefix="/api/v1")
api_v1_router.include_router(tools_router)
api_v1_router.include_router(investigations_router)
api_v1_router.include_router(normalize_router)
