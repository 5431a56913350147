"""
Health check API route
"""

from datetime import datetime, timezone
from fastapi import APIRouter, HTTPException

from blog_api.config.settings import ENV
from blog_api.database.connection import get_database

router = APIRouter()


@router.get("/health")
async def health_check():
    """Report service health, including database reachability"""
    store = get_database()
    if store is None:
        raise HTTPException(status_code=503, detail="Health check failed: database not initialized")

    try:
        reachable = await store.ping()
    except Exception as e:
        raise HTTPException(status_code=503, detail=f"Health check failed: {str(e)}")

    if not reachable:
        raise HTTPException(status_code=503, detail="Health check failed: database unreachable")

    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "database": "connected",
        "environment": ENV
    }
