from fastapi import APIRouter

from .health import router as health_router
from .meeting import router as meeting_router


api_router = APIRouter()

api_router.include_router(health_router, tags=["health"])
api_router.include_router(meeting_router)
