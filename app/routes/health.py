import logging
from fastapi import APIRouter, Depends
from sqlmodel import Session, text
from datetime import datetime, timezone

from app.config import settings
from app.database import get_session

logger = logging.getLogger(__name__)

router = APIRouter()

@router.get("/check")
def health_check(session: Session = Depends(get_session)):
    db_status = "ok"

    try:
        session.exec(text("SELECT 1"))
    except Exception as e:
        logger.error(f"Database ping failed: {e}")
        db_status = "failed"

    return {
        "status": "ok" if db_status == "ok" else "degraded",
        "env": settings.env,
        "database": db_status,
        "timestamp": datetime.now(timezone.utc).isoformat()
    }
