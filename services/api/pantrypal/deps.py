"""FastAPI dependencies for PantryPal API.

Provides:
- Database session dependency
- Lookups that turn a missing prerequisite into a 404
"""

from fastapi import Depends, HTTPException
from sqlalchemy.orm import Session

from .db import get_db
from .models import Plan, MealSession, UserProfile
from .services.profile import require_profile


def get_profile_required(db: Session = Depends(get_db)) -> UserProfile:
    return require_profile(db)


def get_plan(plan_id: str, db: Session = Depends(get_db)) -> Plan:
    plan = db.get(Plan, plan_id)
    if not plan:
        raise HTTPException(status_code=404, detail="Plan not found")
    return plan


def get_session_or_404(db: Session, session_id: str) -> MealSession:
    session = db.get(MealSession, session_id)
    if not session:
        raise HTTPException(status_code=404, detail="Session not found")
    return session
