from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..db import get_db
from ..schemas import FeedbackCreate, FeedbackOut
from ..services.feedback import upsert_feedback

router = APIRouter()


@router.post("/feedback", response_model=FeedbackOut)
def submit_feedback(payload: FeedbackCreate, db: Session = Depends(get_db)):
    """Record a decision on an option; resubmitting replaces the earlier one."""
    return upsert_feedback(
        db,
        option_item_id=payload.option_item_id,
        decision=payload.decision,
        reason=payload.reason,
        reason_note=payload.reason_note,
    )
