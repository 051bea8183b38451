# pitch2angels/routes/health.py
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from sqlalchemy import text
import psutil
import datetime
import logging

from pitch2angels import __version__
from pitch2angels.config import settings
from pitch2angels.database import get_db
from pitch2angels.utils.upload import LocalBlobStore, get_blob_store

logger = logging.getLogger(__name__)
router = APIRouter(
    prefix="/api/health",
    tags=["Health Check"]
)

SERVICE_NAME = "pitch2angels-api"


@router.get("")
async def health_check(
    db: Session = Depends(get_db),
    store: LocalBlobStore = Depends(get_blob_store)
):
    """
    Health check with database connectivity
    """
    health_status = {
        "status": "healthy",
        "timestamp": datetime.datetime.now(datetime.timezone.utc).isoformat(),
        "service": SERVICE_NAME,
        "version": __version__,
        "environment": settings.ENVIRONMENT,
        "storage": store.backend,
    }

    try:
        db.execute(text("SELECT 1"))
        health_status["database"] = {"status": "connected"}
    except Exception as e:
        logger.error(f"Health check database probe failed: {e}")
        health_status["database"] = {"status": "disconnected", "error": str(e)}
        health_status["status"] = "degraded"

    process = psutil.Process()
    health_status["process"] = {
        "pid": process.pid,
        "memory_mb": round(process.memory_info().rss / (1024 * 1024), 2),
        "memory_percent": round(psutil.virtual_memory().percent, 1),
    }

    return JSONResponse(
        content=health_status,
        headers={
            "Cache-Control": "no-cache, no-store, must-revalidate",
            "X-Health-Check": "true"
        }
    )


@router.get("/ping")
async def ping():
    """Minimal keep-alive response"""
    return JSONResponse(
        content={
            "status": "pong",
            "timestamp": datetime.datetime.now(datetime.timezone.utc).isoformat(),
            "service": SERVICE_NAME
        },
        headers={"Cache-Control": "no-cache"}
    )
