from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session, selectinload

from ..db import get_db
from ..deps import get_session_or_404
from ..models import MealSession, OptionItem, RecommendationSet
from ..schemas import SessionCreate, SessionOut

router = APIRouter()


def _with_options():
    return (
        selectinload(MealSession.recommendation_sets)
        .selectinload(RecommendationSet.options)
        .selectinload(OptionItem.feedback)
    )


@router.post("/sessions", response_model=SessionOut, status_code=status.HTTP_201_CREATED)
def create_session(payload: SessionCreate, db: Session = Depends(get_db)):
    session = MealSession(
        extra_ingredients_text=payload.extra_ingredients_text,
        constraints_json=payload.constraints.model_dump(by_alias=True, exclude_none=True),
    )
    db.add(session)
    db.commit()
    db.refresh(session)
    return session


@router.get("/sessions", response_model=list[SessionOut])
def list_sessions(db: Session = Depends(get_db)):
    """All sessions, newest first, with their sets, options and feedback."""
    return (
        db.query(MealSession)
        .options(_with_options())
        .order_by(MealSession.created_at.desc())
        .all()
    )


@router.get("/sessions/{session_id}", response_model=SessionOut)
def get_session(session_id: str, db: Session = Depends(get_db)):
    return get_session_or_404(db, session_id)
