"""Rolling preference summary: one row, recomputed on demand."""
import logging
from typing import Optional

from sqlalchemy.orm import Session

from ..agents.mocks import mock_preference_summary
from ..ai.summary import clip_summary, summarize_preferences
from ..core.ai_client import ai_client
from ..models import PreferenceSummary
from .feedback import SUMMARY_FEEDBACK_WINDOW, feedback_events

logger = logging.getLogger("pantrypal.preferences")


def current_summary(db: Session) -> Optional[PreferenceSummary]:
    return db.query(PreferenceSummary).order_by(PreferenceSummary.updated_at.desc()).first()


def current_summary_text(db: Session) -> Optional[str]:
    summary = current_summary(db)
    return summary.summary_text if summary else None


def refresh_preference_summary(db: Session, client=None) -> Optional[PreferenceSummary]:
    """
    Recompute the summary from the latest feedback window.

    Returns None, without touching the table, when there is no feedback.
    Otherwise overwrites the single existing row (or creates it).
    """
    events = feedback_events(db, SUMMARY_FEEDBACK_WINDOW)
    if not events:
        logger.info("No feedback to summarize")
        return None

    client = client or ai_client
    if client.mode == "mock":
        summary_text = clip_summary(mock_preference_summary())
    else:
        summary_text = summarize_preferences(client, events)

    summary = db.query(PreferenceSummary).first()
    if summary:
        summary.summary_text = summary_text
    else:
        summary = PreferenceSummary(summary_text=summary_text)
        db.add(summary)

    db.commit()
    db.refresh(summary)
    logger.info(f"Preference summary refreshed from {len(events)} feedback events ({len(summary_text)} chars)")
    return summary
