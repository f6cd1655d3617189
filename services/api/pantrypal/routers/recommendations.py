import logging

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from ..agents.recommendation_agent import generate_chat_recommendations, generate_recommendations
from ..ai.prompts import CHAT_PROMPT_VERSION, PROMPT_VERSION
from ..db import get_db
from ..deps import get_session_or_404
from ..models import MealSession
from ..rate_limit import limiter
from ..schemas import ChatRequest, ChatResponse, Constraints, RecommendationRequest, RecommendationSetOut
from ..services.feedback import recent_feedback_summaries
from ..services.preferences import current_summary_text
from ..services.profile import require_profile
from ..services.recommendations import build_recommendation_set, create_recommendation_set
from ..settings import settings

logger = logging.getLogger("pantrypal.recommendations")

router = APIRouter()


@router.post("/recommendations", response_model=RecommendationSetOut)
@limiter.limit(settings.generation_rate_limit)
def create_recommendations(
    request: Request,
    payload: RecommendationRequest,
    db: Session = Depends(get_db),
):
    """Generate three options for an existing session and store them as a new set."""
    session = get_session_or_404(db, payload.session_id)
    profile = require_profile(db)

    constraints_data = session.constraints_json if isinstance(session.constraints_json, dict) else {}
    constraints = Constraints.model_validate(constraints_data)

    result = generate_recommendations(
        pantry_text=profile.pantry_text,
        utensils_text=profile.utensils_text,
        extra_ingredients_text=session.extra_ingredients_text,
        constraints=constraints,
        recent_feedback=recent_feedback_summaries(db),
        preference_summary=current_summary_text(db),
    )

    rec_set = create_recommendation_set(db, session, result, PROMPT_VERSION)
    logger.info(f"Session {session.id}: stored recommendation set {rec_set.id} (repaired={rec_set.repaired})")
    return rec_set


@router.post("/chat", response_model=ChatResponse)
@limiter.limit(settings.generation_rate_limit)
def chat(
    request: Request,
    payload: ChatRequest,
    db: Session = Depends(get_db),
):
    """Free-text request. The session is only created once generation succeeded."""
    profile = require_profile(db)

    result = generate_chat_recommendations(
        message=payload.message,
        pantry_text=profile.pantry_text,
        utensils_text=profile.utensils_text,
        recent_feedback=recent_feedback_summaries(db),
        preference_summary=current_summary_text(db),
    )

    session = MealSession(
        extra_ingredients_text=payload.message,
        constraints_json={"chatInput": payload.message},
    )
    rec_set = build_recommendation_set(session, result, CHAT_PROMPT_VERSION)
    db.add(session)
    db.add(rec_set)
    db.commit()
    db.refresh(rec_set)

    return ChatResponse(
        session_id=session.id,
        recommendation_set=RecommendationSetOut.model_validate(rec_set),
    )
