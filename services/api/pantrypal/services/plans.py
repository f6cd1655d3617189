"""Plan persistence: days, swaps and the plan's shopping list."""
import logging

from sqlalchemy.orm import Session

from ..ai.pipeline import GenerationResult
from ..models import Plan, PlanDay, ShoppingList
from ..schemas import PlanDayRecipe, PlanInputs, ShoppingListResponse, WeeklyPlanResponse

logger = logging.getLogger("pantrypal.plans")

PLAN_LIST_LIMIT = 20


def _recipe_json(recipe: PlanDayRecipe) -> dict:
    return recipe.model_dump(by_alias=True, exclude_none=True)


def plan_inputs(plan: Plan) -> PlanInputs:
    return PlanInputs.model_validate(plan.inputs_json)


def plan_recipes(plan: Plan) -> list[PlanDayRecipe]:
    return [PlanDayRecipe.model_validate(day.recipe_json) for day in plan.days]


def list_plans(db: Session, limit: int = PLAN_LIST_LIMIT) -> list[Plan]:
    return db.query(Plan).order_by(Plan.created_at.desc()).limit(limit).all()


def create_plan(
    db: Session,
    inputs: PlanInputs,
    result: GenerationResult[WeeklyPlanResponse],
    prompt_version: str,
) -> Plan:
    plan = Plan(
        inputs_json=inputs.model_dump(by_alias=True, exclude_none=True),
        reuse_strategy_json=result.value.reuse_strategy.model_dump(by_alias=True),
        model=result.model,
        repair_model=result.repair_model,
        prompt_version=prompt_version,
    )
    plan.days = [
        PlanDay(day_index=idx, recipe_json=_recipe_json(recipe), raw_response_json=result.raw_json)
        for idx, recipe in enumerate(result.value.days)
    ]
    db.add(plan)
    db.commit()
    db.refresh(plan)
    logger.info(f"Plan {plan.id} created with {len(plan.days)} days")
    return plan


def replace_day(
    db: Session,
    plan: Plan,
    day_index: int,
    result: GenerationResult[PlanDayRecipe],
) -> PlanDay:
    """Swap one day in place and drop the plan's now-stale shopping list."""
    day = db.query(PlanDay).filter(
        PlanDay.plan_id == plan.id,
        PlanDay.day_index == day_index
    ).one()
    day.recipe_json = _recipe_json(result.value)
    day.raw_response_json = result.raw_json

    deleted = db.query(ShoppingList).filter(ShoppingList.plan_id == plan.id).delete(synchronize_session=False)
    db.commit()
    db.refresh(day)
    db.expire(plan)
    if deleted:
        logger.info(f"Plan {plan.id}: shopping list invalidated by swap of day {day_index + 1}")
    return day


def upsert_shopping_list(
    db: Session,
    plan: Plan,
    result: GenerationResult[ShoppingListResponse],
) -> ShoppingList:
    shopping_list = db.query(ShoppingList).filter(ShoppingList.plan_id == plan.id).first()
    if shopping_list:
        shopping_list.list_json = result.value.model_dump()
        shopping_list.raw_response_json = result.raw_json
    else:
        shopping_list = ShoppingList(
            plan_id=plan.id,
            list_json=result.value.model_dump(),
            raw_response_json=result.raw_json,
        )
        db.add(shopping_list)

    db.commit()
    db.refresh(shopping_list)
    return shopping_list
