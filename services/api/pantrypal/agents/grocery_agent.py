"""Grocery Agent: categorized shopping list for a plan."""
import logging
from typing import Sequence

from ..ai.pipeline import GenerationResult, generate_validated
from ..ai.prompts import SHOPPING_LIST_SCHEMA, build_shopping_list_prompt
from ..ai.validation import parse_and_validate
from ..core.ai_client import ai_client
from ..schemas import PlanDayRecipe, ShoppingListResponse
from ..settings import settings
from .mocks import MOCK_MODEL, mock_shopping_list_json

logger = logging.getLogger("pantrypal.grocery")

SHOPPING_LIST_TEMPERATURE = 0.2
SHOPPING_LIST_FAILURE = "Failed to generate a valid shopping list. Please try again."


def collect_needed_ingredients(days: Sequence[PlanDayRecipe]) -> list[str]:
    """Every missing ingredient, then every extra one, duplicates dropped."""
    needed: dict[str, None] = {}
    for day in days:
        for item in day.missing_ingredients:
            needed.setdefault(item, None)
    for day in days:
        for item in day.ingredients_used.extra:
            needed.setdefault(item, None)
    return list(needed)


def generate_shopping_list(
    days: Sequence[PlanDayRecipe],
    pantry_text: str,
) -> GenerationResult[ShoppingListResponse]:
    ingredients = collect_needed_ingredients(days)
    logger.info(f"Building shopping list from {len(ingredients)} ingredients across {len(days)} days")

    if ai_client.mode == "mock":
        raw = mock_shopping_list_json(ingredients)
        return GenerationResult(
            value=parse_and_validate(raw, ShoppingListResponse), raw_json=raw, model=MOCK_MODEL
        )

    prompt = build_shopping_list_prompt(ingredients, pantry_text)
    return generate_validated(
        ai_client,
        prompt,
        ShoppingListResponse,
        model=settings.gemini_light_model,
        temperature=SHOPPING_LIST_TEMPERATURE,
        repair_schema=SHOPPING_LIST_SCHEMA,
        failure_message=SHOPPING_LIST_FAILURE,
    )
