"""Single pantry/utensil profile (lazy-create, overwrite-on-write)."""
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ..models import UserProfile


def get_profile(db: Session) -> Optional[UserProfile]:
    return db.query(UserProfile).order_by(UserProfile.created_at).first()


def get_or_create_profile(db: Session) -> UserProfile:
    profile = get_profile(db)
    if profile:
        return profile

    profile = UserProfile(pantry_text="", utensils_text="")
    db.add(profile)
    db.commit()
    db.refresh(profile)
    return profile


def save_profile(db: Session, pantry_text: str, utensils_text: str) -> UserProfile:
    """Upsert: update the existing row in place, never add a second one."""
    profile = get_profile(db)
    if profile is None:
        profile = UserProfile()
        db.add(profile)

    profile.pantry_text = pantry_text
    profile.utensils_text = utensils_text
    db.commit()
    db.refresh(profile)
    return profile


def require_profile(db: Session) -> UserProfile:
    """Generation needs a profile the user has actually set up."""
    profile = get_profile(db)
    if not profile:
        raise HTTPException(
            status_code=404,
            detail="Profile not found. Please set up your profile first."
        )
    return profile
