"""
Health check endpoints.
Used for monitoring and deployment readiness checks.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, HTTPException

from civic_pulse.config.firebase import get_db
from civic_pulse.core.settings import settings
from civic_pulse.services.ai_priority import get_ai_priority_assessor

router = APIRouter(prefix="/health", tags=["Health"])


@router.get("")
async def health_check():
    """
    Basic health check endpoint.
    Reports whether the AI path is configured; triage works either way.
    """
    assessor = get_ai_priority_assessor()
    return {
        "status": "healthy",
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "ai_provider": assessor.provider.get_model_info()["provider"] if assessor.available else None,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/db")
async def database_health():
    """
    Issue store connectivity check.
    """
    try:
        db = get_db()
        list(db.collection(settings.ISSUES_COLLECTION).limit(1).stream())

        return {
            "status": "healthy",
            "database": "firestore",
            "connected": True,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
    except Exception as e:
        raise HTTPException(
            status_code=503,
            detail=f"Database connection failed: {str(e)}",
        )
