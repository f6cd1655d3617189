"""Feedback storage and the feedback windows used for personalization."""
import logging

from fastapi import HTTPException
from sqlalchemy.orm import Session, joinedload

from ..models import OptionFeedback, OptionItem, RecommendationSet
from ..schemas import FeedbackEvent, FeedbackSummary

logger = logging.getLogger("pantrypal.feedback")

RECENT_FEEDBACK_LIMIT = 10  # generation prompts
SUMMARY_FEEDBACK_WINDOW = 30  # preference summarization


def upsert_feedback(
    db: Session,
    option_item_id: str,
    decision: str,
    reason: str | None = None,
    reason_note: str | None = None,
) -> OptionFeedback:
    """One feedback row per option: a second submission replaces the first."""
    option = db.get(OptionItem, option_item_id)
    if not option:
        raise HTTPException(status_code=404, detail="Option not found")

    note = reason_note if reason == "OTHER" else None

    feedback = db.query(OptionFeedback).filter(OptionFeedback.option_item_id == option_item_id).first()
    if feedback:
        feedback.decision = decision
        feedback.reason = reason
        feedback.reason_note = note
    else:
        feedback = OptionFeedback(
            option_item_id=option_item_id,
            decision=decision,
            reason=reason,
            reason_note=note,
        )
        db.add(feedback)

    db.commit()
    db.refresh(feedback)
    logger.info(f"Feedback {decision} recorded for option {option_item_id}")
    return feedback


def _latest_feedback(db: Session, limit: int) -> list[OptionFeedback]:
    return (
        db.query(OptionFeedback)
        .options(
            joinedload(OptionFeedback.option_item)
            .joinedload(OptionItem.recommendation_set)
            .joinedload(RecommendationSet.session)
        )
        .order_by(OptionFeedback.updated_at.desc())
        .limit(limit)
        .all()
    )


def recent_feedback_summaries(db: Session, limit: int = RECENT_FEEDBACK_LIMIT) -> list[FeedbackSummary]:
    return [
        FeedbackSummary(title=f.option_item.title, decision=f.decision)
        for f in _latest_feedback(db, limit)
    ]


def feedback_events(db: Session, limit: int = SUMMARY_FEEDBACK_WINDOW) -> list[FeedbackEvent]:
    events = []
    for f in _latest_feedback(db, limit):
        option = f.option_item
        constraints = option.recommendation_set.session.constraints_json
        events.append(FeedbackEvent(
            title=option.title,
            decision=f.decision,
            reason=f.reason,
            reason_note=f.reason_note,
            time_mins=option.time_mins,
            difficulty=option.difficulty,
            ingredients_used=option.ingredients_used_json,
            missing_ingredients=option.missing_ingredients_json,
            constraints=constraints if isinstance(constraints, dict) else {},
        ))
    return events
