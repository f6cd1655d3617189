from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session, selectinload

from ..db import get_db
from ..models import OptionItem, SavedMeal
from ..schemas import SavedMealOut, SavedMealRequest

router = APIRouter()


@router.get("/saved-meals", response_model=list[SavedMealOut])
def list_saved_meals(db: Session = Depends(get_db)):
    return (
        db.query(SavedMeal)
        .options(selectinload(SavedMeal.option_item).selectinload(OptionItem.feedback))
        .order_by(SavedMeal.created_at.desc())
        .all()
    )


@router.post("/saved-meals", response_model=SavedMealOut)
def save_meal(payload: SavedMealRequest, db: Session = Depends(get_db)):
    """Bookmark an option. Saving twice returns the existing bookmark."""
    option = db.get(OptionItem, payload.option_item_id)
    if not option:
        raise HTTPException(status_code=404, detail="Option not found")

    existing = db.query(SavedMeal).filter(SavedMeal.option_item_id == option.id).first()
    if existing:
        return existing

    saved = SavedMeal(option_item_id=option.id)
    db.add(saved)
    db.commit()
    db.refresh(saved)
    return saved


@router.delete("/saved-meals/{option_item_id}")
def unsave_meal(option_item_id: str, db: Session = Depends(get_db)):
    saved = db.query(SavedMeal).filter(SavedMeal.option_item_id == option_item_id).first()
    if not saved:
        raise HTTPException(status_code=404, detail="Saved meal not found")

    db.delete(saved)
    db.commit()
    return {"success": True}
