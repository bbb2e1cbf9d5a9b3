# online_forms/routes/health.py
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from sqlalchemy import text
import psutil
import datetime
import sys
import logging

from online_forms.config import settings
from online_forms.database import get_db

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/health", tags=["Health Check"])


@router.get("")
def health_check(db: Session = Depends(get_db)):
    """
    Liveness plus database connectivity
    """
    health_status = {
        "status": "healthy",
        "timestamp": datetime.datetime.now(datetime.timezone.utc).isoformat(),
        "service": settings.APP_NAME,
        "version": "1.0.0",
    }

    try:
        db.execute(text("SELECT 1"))
        health_status["database"] = {
            "status": "connected",
            "type": db.get_bind().dialect.name,
        }
    except Exception as e:
        logger.error(f"Health check database probe failed: {str(e)}")
        health_status["database"] = {
            "status": "disconnected",
            "error": str(e)
        }
        health_status["status"] = "degraded"

    process = psutil.Process()
    health_status["system"] = {
        "python_version": sys.version.split()[0],
        "platform": sys.platform,
        "memory_percent": psutil.virtual_memory().percent,
        "process_memory_mb": round(process.memory_info().rss / (1024 * 1024), 2),
    }

    status_code = 200 if health_status["status"] == "healthy" else 503
    return JSONResponse(content=health_status, status_code=status_code)
