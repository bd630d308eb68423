import logging
from datetime import datetime

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, text

from app.config import settings
from app.database import get_session

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/check")
def health_check(session: Session = Depends(get_session)):
    db_status = "ok"

    try:
        session.exec(text("SELECT 1"))
    except SQLAlchemyError:
        logger.exception("Database ping failed")
        db_status = "failed"

    return {
        "status": "ok" if db_status == "ok" else "degraded",
        "env": settings.env,
        "database": db_status,
        "timestamp": datetime.utcnow().isoformat(),
    }
