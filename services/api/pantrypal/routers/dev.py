"""Dev-only endpoints for seeding.

Endpoints:
- POST /api/dev/seed - Create the default pantry/utensil profile
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..db import get_db
from ..schemas import ProfileOut, SeedResponse
from ..services.profile import get_profile, save_profile

router = APIRouter()


DEFAULT_PANTRY = [
    "salt",
    "pepper",
    "olive oil",
    "garlic",
    "onions",
    "butter",
    "flour",
    "sugar",
    "eggs",
    "milk",
    "rice",
    "pasta",
    "soy sauce",
    "vinegar",
    "vegetable oil",
]

DEFAULT_UTENSILS = [
    "knife",
    "cutting board",
    "frying pan",
    "saucepan",
    "pot",
    "baking sheet",
    "mixing bowls",
    "spatula",
    "whisk",
    "tongs",
    "measuring cups",
    "measuring spoons",
    "colander",
]


@router.post("/dev/seed", response_model=SeedResponse)
def seed(db: Session = Depends(get_db)):
    """Create the default profile. An existing profile is left untouched."""
    profile = get_profile(db)
    if profile:
        return SeedResponse(created=False, profile=ProfileOut.model_validate(profile))

    profile = save_profile(db, "\n".join(DEFAULT_PANTRY), "\n".join(DEFAULT_UTENSILS))
    return SeedResponse(created=True, profile=ProfileOut.model_validate(profile))
