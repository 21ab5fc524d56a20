"""
Health Routes - Health check endpoints
"""
from fastapi import APIRouter

from streakkeeper.core.config import settings

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "ok",
        "message": "Server is alive",
        "storage": "supabase" if settings.supabase_configured else "memory",
        "timezone": settings.APP_TIMEZONE
    }
