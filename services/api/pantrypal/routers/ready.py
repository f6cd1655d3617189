import logging

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.ai_client import ai_client
from ..db import get_db

logger = logging.getLogger("pantrypal")

router = APIRouter()


@router.get("/ready")
def ready(db: Session = Depends(get_db)):
    db_ok = False
    try:
        db.execute(text("SELECT 1"))
        db_ok = True
    except SQLAlchemyError as e:
        logger.error(f"Readiness DB check failed: {e}")

    return {
        "ok": db_ok,
        "db_ok": db_ok,
        "ai_mode": ai_client.mode,
        "ai_available": ai_client.mode == "mock" or ai_client.is_available(),
        "ai_last_error": ai_client.last_error,
        "ai_last_error_at": ai_client.last_error_at,
    }
