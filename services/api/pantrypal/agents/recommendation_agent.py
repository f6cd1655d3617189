"""Recommendation Agent: three meal options per request."""
import logging
from typing import Optional, Sequence

from ..ai.pipeline import GenerationResult, generate_validated
from ..ai.prompts import RECIPE_JSON_SCHEMA, build_chat_prompt, build_recommendation_prompt
from ..ai.validation import parse_and_validate
from ..core.ai_client import ai_client
from ..schemas import Constraints, FeedbackSummary, RecommendationResponse
from ..settings import settings
from .mocks import MOCK_MODEL, mock_recommendations_json

logger = logging.getLogger("pantrypal.recommendations")

RECOMMENDATION_TEMPERATURE = 0.7
RECOMMENDATION_FAILURE = "Failed to generate valid meal recommendations. Please try again."


def _mock_result() -> GenerationResult[RecommendationResponse]:
    logger.info("AI mock mode: returning canned recommendations")
    raw = mock_recommendations_json()
    return GenerationResult(
        value=parse_and_validate(raw, RecommendationResponse), raw_json=raw, model=MOCK_MODEL
    )


def generate_recommendations(
    pantry_text: str,
    utensils_text: str,
    extra_ingredients_text: str,
    constraints: Constraints,
    recent_feedback: Sequence[FeedbackSummary],
    preference_summary: Optional[str] = None,
) -> GenerationResult[RecommendationResponse]:
    """Structured request: pantry + extra ingredients + constraints."""
    if ai_client.mode == "mock":
        return _mock_result()

    prompt = build_recommendation_prompt(
        pantry_text,
        utensils_text,
        extra_ingredients_text,
        constraints,
        recent_feedback,
        preference_summary,
    )
    return generate_validated(
        ai_client,
        prompt,
        RecommendationResponse,
        model=settings.gemini_text_model,
        temperature=RECOMMENDATION_TEMPERATURE,
        repair_schema=RECIPE_JSON_SCHEMA,
        failure_message=RECOMMENDATION_FAILURE,
    )


def generate_chat_recommendations(
    message: str,
    pantry_text: str,
    utensils_text: str,
    recent_feedback: Sequence[FeedbackSummary],
    preference_summary: Optional[str] = None,
) -> GenerationResult[RecommendationResponse]:
    """Free-text request from the chat composer."""
    if ai_client.mode == "mock":
        return _mock_result()

    prompt = build_chat_prompt(message, pantry_text, utensils_text, recent_feedback, preference_summary)
    return generate_validated(
        ai_client,
        prompt,
        RecommendationResponse,
        model=settings.gemini_text_model,
        temperature=RECOMMENDATION_TEMPERATURE,
        repair_schema=RECIPE_JSON_SCHEMA,
        failure_message=RECOMMENDATION_FAILURE,
    )
