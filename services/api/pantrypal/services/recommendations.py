from sqlalchemy.orm import Session

from ..ai.pipeline import GenerationResult
from ..models import MealSession, OptionItem, RecommendationSet
from ..schemas import RecommendationResponse


def build_recommendation_set(
    session: MealSession,
    result: GenerationResult[RecommendationResponse],
    prompt_version: str,
) -> RecommendationSet:
    """Set + its options as one unit; the caller commits once."""
    rec_set = RecommendationSet(
        session=session,
        model=result.model,
        repair_model=result.repair_model,
        prompt_version=prompt_version,
        raw_response_json=result.raw_json,
        repaired=result.repaired,
    )
    rec_set.options = [
        OptionItem(
            idx=idx,
            title=opt.title,
            why=opt.why,
            time_mins=float(opt.time_mins),
            difficulty=opt.difficulty,
            ingredients_used_json=opt.ingredients_used.model_dump(),
            missing_ingredients_json=list(opt.missing_ingredients),
            steps_json=list(opt.steps),
            substitutions_json=list(opt.substitutions),
        )
        for idx, opt in enumerate(result.value.options, start=1)
    ]
    return rec_set


def create_recommendation_set(
    db: Session,
    session: MealSession,
    result: GenerationResult[RecommendationResponse],
    prompt_version: str,
) -> RecommendationSet:
    rec_set = build_recommendation_set(session, result, prompt_version)
    db.add(rec_set)
    db.commit()
    db.refresh(rec_set)
    return rec_set
