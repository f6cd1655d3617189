"""Multi-day plans: generate, swap a day, shopping list.

Endpoints:
- GET/POST /api/plans
- GET/DELETE /api/plans/{plan_id}
- POST /api/plans/{plan_id}/swap
- GET/POST /api/plans/{plan_id}/shopping-list
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from ..agents.grocery_agent import generate_shopping_list
from ..agents.planner_agent import generate_swap_day, generate_weekly_plan
from ..ai.prompts import PLAN_PROMPT_VERSION
from ..db import get_db
from ..deps import get_plan, get_profile_required
from ..models import Plan, ShoppingList, UserProfile
from ..rate_limit import limiter
from ..schemas import (
    PlanDayOut,
    PlanInputs,
    PlanOut,
    ShoppingListOut,
    SwapDayRequest,
    SwapDayResponse,
)
from ..services.feedback import recent_feedback_summaries
from ..services.plans import (
    create_plan,
    list_plans,
    plan_inputs,
    plan_recipes,
    replace_day,
    upsert_shopping_list,
)
from ..services.preferences import current_summary_text
from ..services.profile import require_profile
from ..settings import settings

logger = logging.getLogger("pantrypal.plans")

router = APIRouter()


@router.get("/plans", response_model=list[PlanOut])
def get_plans(db: Session = Depends(get_db)):
    return list_plans(db)


@router.post("/plans", response_model=PlanOut, status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.generation_rate_limit)
def create_weekly_plan(
    request: Request,
    inputs: PlanInputs,
    db: Session = Depends(get_db),
    profile: UserProfile = Depends(get_profile_required),
):
    logger.info(f"Generating {inputs.days}-day plan (max {inputs.max_cook_time} mins)")
    result = generate_weekly_plan(
        pantry_text=profile.pantry_text,
        utensils_text=profile.utensils_text,
        inputs=inputs,
        recent_feedback=recent_feedback_summaries(db),
        preference_summary=current_summary_text(db),
    )
    return create_plan(db, inputs, result, PLAN_PROMPT_VERSION)


@router.get("/plans/{plan_id}", response_model=PlanOut)
def read_plan(plan: Plan = Depends(get_plan)):
    return plan


@router.delete("/plans/{plan_id}")
def delete_plan(plan: Plan = Depends(get_plan), db: Session = Depends(get_db)):
    """Deletes the plan with its days and shopping list."""
    db.delete(plan)
    db.commit()
    return {"success": True}


@router.post("/plans/{plan_id}/swap", response_model=SwapDayResponse)
@limiter.limit(settings.generation_rate_limit)
def swap_day(
    request: Request,
    payload: SwapDayRequest,
    plan: Plan = Depends(get_plan),
    db: Session = Depends(get_db),
):
    """
    Replace one day of a plan with a freshly generated recipe.

    The index is checked against the plan before anything else so an
    out-of-range request never reaches the provider. A successful swap
    removes the plan's shopping list.
    """
    inputs = plan_inputs(plan)
    day_index = payload.day_index
    if day_index < 0 or day_index >= inputs.days or day_index >= len(plan.days):
        raise HTTPException(status_code=400, detail="day_index out of range")

    profile = require_profile(db)

    result = generate_swap_day(
        pantry_text=profile.pantry_text,
        utensils_text=profile.utensils_text,
        inputs=inputs,
        day_index=day_index,
        days=plan_recipes(plan),
        preference_summary=current_summary_text(db),
    )

    day = replace_day(db, plan, day_index, result)
    logger.info(f"Plan {plan.id}: day {day_index + 1} swapped for '{result.value.title}'")
    return SwapDayResponse(day=PlanDayOut.model_validate(day), recipe=day.recipe_json)


@router.get("/plans/{plan_id}/shopping-list", response_model=ShoppingListOut)
def read_shopping_list(plan: Plan = Depends(get_plan), db: Session = Depends(get_db)):
    shopping_list = db.query(ShoppingList).filter(ShoppingList.plan_id == plan.id).first()
    if not shopping_list:
        raise HTTPException(status_code=404, detail="Shopping list not generated yet")
    return shopping_list


@router.post("/plans/{plan_id}/shopping-list", response_model=ShoppingListOut)
@limiter.limit(settings.generation_rate_limit)
def create_shopping_list(
    request: Request,
    plan: Plan = Depends(get_plan),
    db: Session = Depends(get_db),
    profile: UserProfile = Depends(get_profile_required),
):
    result = generate_shopping_list(plan_recipes(plan), profile.pantry_text)
    return upsert_shopping_list(db, plan, result)
