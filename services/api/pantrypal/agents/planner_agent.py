"""Planner Agent: multi-day dinner plans and single-day swaps."""
import logging
from typing import Optional, Sequence

from ..ai.errors import OutputValidationError, ValidationIssue
from ..ai.pipeline import GenerationResult, generate_validated
from ..ai.prompts import (
    PLAN_DAY_SCHEMA,
    WEEKLY_PLAN_SCHEMA,
    build_swap_day_prompt,
    build_weekly_plan_prompt,
)
from ..ai.validation import parse_and_validate
from ..core.ai_client import ai_client
from ..schemas import FeedbackSummary, PlanDayRecipe, PlanInputs, WeeklyPlanResponse
from ..settings import settings
from .mocks import MOCK_MODEL, mock_swap_day_json, mock_weekly_plan_json

logger = logging.getLogger("pantrypal.plans")

PLAN_TEMPERATURE = 0.7
SWAP_TEMPERATURE = 0.8  # a little more variety than the original plan
PLAN_FAILURE = "Failed to generate valid meal plan. Please try again."
SWAP_FAILURE = "Failed to generate a valid replacement meal. Please try again."


def require_day_count(expected: int):
    """Caller-side check: the plan schema does not know how many days were asked for."""
    def check(plan: WeeklyPlanResponse) -> None:
        if len(plan.days) != expected:
            raise OutputValidationError(
                "Plan has the wrong number of days",
                [ValidationIssue("days", "day_count", f"expected exactly {expected} days, got {len(plan.days)}")],
            )
    return check


def generate_weekly_plan(
    pantry_text: str,
    utensils_text: str,
    inputs: PlanInputs,
    recent_feedback: Sequence[FeedbackSummary],
    preference_summary: Optional[str] = None,
) -> GenerationResult[WeeklyPlanResponse]:
    check = require_day_count(inputs.days)

    if ai_client.mode == "mock":
        logger.info("AI mock mode: returning canned %s-day plan", inputs.days)
        raw = mock_weekly_plan_json(inputs.days)
        value = parse_and_validate(raw, WeeklyPlanResponse)
        check(value)
        return GenerationResult(value=value, raw_json=raw, model=MOCK_MODEL)

    prompt = build_weekly_plan_prompt(
        pantry_text, utensils_text, inputs, recent_feedback, preference_summary
    )
    return generate_validated(
        ai_client,
        prompt,
        WeeklyPlanResponse,
        model=settings.gemini_text_model,
        temperature=PLAN_TEMPERATURE,
        repair_schema=WEEKLY_PLAN_SCHEMA,
        repair_requirements=(
            f'This is a {inputs.days}-day meal plan: ensure the "days" array has exactly {inputs.days} items.'
        ),
        failure_message=PLAN_FAILURE,
        check=check,
    )


def generate_swap_day(
    pantry_text: str,
    utensils_text: str,
    inputs: PlanInputs,
    day_index: int,
    days: Sequence[PlanDayRecipe],
    preference_summary: Optional[str] = None,
) -> GenerationResult[PlanDayRecipe]:
    """
    Generate one replacement recipe for `day_index` (0-based).

    The replacement is steered away from every other day's title (and the
    one being replaced) and toward the ingredients those days already buy.
    """
    if not 0 <= day_index < len(days):
        raise IndexError(f"day_index {day_index} out of range for a {len(days)}-day plan")

    if ai_client.mode == "mock":
        logger.info("AI mock mode: returning canned swap for day %s", day_index + 1)
        raw = mock_swap_day_json(day_index)
        return GenerationResult(
            value=parse_and_validate(raw, PlanDayRecipe), raw_json=raw, model=MOCK_MODEL
        )

    other_days = [(idx, day) for idx, day in enumerate(days) if idx != day_index]
    prompt = build_swap_day_prompt(
        pantry_text,
        utensils_text,
        inputs,
        day_index,
        other_days,
        replaced_title=days[day_index].title,
        preference_summary=preference_summary,
    )
    return generate_validated(
        ai_client,
        prompt,
        PlanDayRecipe,
        model=settings.gemini_text_model,
        temperature=SWAP_TEMPERATURE,
        repair_schema=PLAN_DAY_SCHEMA,
        failure_message=SWAP_FAILURE,
    )
