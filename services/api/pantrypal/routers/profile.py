from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..db import get_db
from ..schemas import ProfileOut, ProfileUpdate
from ..services.profile import get_or_create_profile, save_profile

router = APIRouter()


@router.get("/profile", response_model=ProfileOut)
def read_profile(db: Session = Depends(get_db)):
    """Return the pantry/utensil profile, creating an empty one on first access."""
    return get_or_create_profile(db)


@router.put("/profile", response_model=ProfileOut)
def update_profile(payload: ProfileUpdate, db: Session = Depends(get_db)):
    return save_profile(db, payload.pantry_text, payload.utensils_text)
