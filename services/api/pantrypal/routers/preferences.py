from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from ..db import get_db
from ..rate_limit import limiter
from ..schemas import PreferenceSummaryOut, PreferenceSummaryResponse
from ..services.preferences import current_summary, refresh_preference_summary
from ..settings import settings

router = APIRouter()


@router.get("/preference-summary", response_model=PreferenceSummaryResponse)
def get_preference_summary(db: Session = Depends(get_db)):
    summary = current_summary(db)
    if not summary:
        return PreferenceSummaryResponse(message="No preference summary generated yet")
    return PreferenceSummaryResponse(summary=PreferenceSummaryOut.model_validate(summary))


@router.post("/preference-summary", response_model=PreferenceSummaryResponse)
@limiter.limit(settings.generation_rate_limit)
def regenerate_preference_summary(request: Request, db: Session = Depends(get_db)):
    """Recompute from the latest feedback. No feedback is a normal, non-error result."""
    summary = refresh_preference_summary(db)
    if summary is None:
        return PreferenceSummaryResponse(message="No feedback to summarize")
    return PreferenceSummaryResponse(summary=PreferenceSummaryOut.model_validate(summary))
