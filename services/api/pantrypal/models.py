"""SQLAlchemy ORM models for PantryPal.

Tables:
- user_profiles: Single pantry/utensil profile (single-tenant, lazily created)
- sessions: One request for meal recommendations
- recommendation_sets: One generation attempt for a session (raw JSON kept for audit)
- option_items: The three meal options of a recommendation set
- option_feedback: Accept/reject/not-now decision per option (overwrite semantics)
- saved_meals: Bookmarks on options
- preference_summaries: Single rolling natural-language preference profile
- plans / plan_days / shopping_lists: Multi-day dinner plans
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import (
    String,
    DateTime,
    Text,
    Integer,
    Float,
    Boolean,
    ForeignKey,
    Index,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .db import Base
from .orm_types import JSONType, utcnow


def generate_uuid() -> str:
    return str(uuid.uuid4())


class UserProfile(Base):
    """Pantry staples and kitchen equipment.

    At most one row exists. Both text fields are newline-delimited lists.
    """
    __tablename__ = "user_profiles"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    pantry_text: Mapped[str] = mapped_column(Text, nullable=False, default="")
    utensils_text: Mapped[str] = mapped_column(Text, nullable=False, default="")

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )


class MealSession(Base):
    """A single request for recommendations.

    constraints_json holds a serialized Constraints record, or
    {"chatInput": "..."} for sessions created from the chat composer.
    """
    __tablename__ = "sessions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    extra_ingredients_text: Mapped[str] = mapped_column(Text, nullable=False, default="")
    constraints_json: Mapped[dict] = mapped_column(JSONType, nullable=False, default=dict)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    recommendation_sets: Mapped[list["RecommendationSet"]] = relationship(
        "RecommendationSet", back_populates="session", cascade="all, delete-orphan",
        order_by="desc(RecommendationSet.created_at)"
    )


class RecommendationSet(Base):
    __tablename__ = "recommendation_sets"
    __table_args__ = (
        Index("ix_recommendation_sets_session_id", "session_id"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    session_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("sessions.id", ondelete="CASCADE"), nullable=False
    )
    model: Mapped[str] = mapped_column(String(100), nullable=False)
    # Lightweight model that produced raw_response_json when the first output was repaired
    repair_model: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    prompt_version: Mapped[str] = mapped_column(String(40), nullable=False)
    # Exact text that passed validation. Write-once, never parsed back by the app.
    raw_response_json: Mapped[str] = mapped_column(Text, nullable=False)
    repaired: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    session: Mapped["MealSession"] = relationship("MealSession", back_populates="recommendation_sets")
    options: Mapped[list["OptionItem"]] = relationship(
        "OptionItem", back_populates="recommendation_set", cascade="all, delete-orphan",
        order_by="OptionItem.idx"
    )


class OptionItem(Base):
    """One of the three meal options in a recommendation set."""
    __tablename__ = "option_items"
    __table_args__ = (
        Index("ix_option_items_set_id", "recommendation_set_id"),
        UniqueConstraint("recommendation_set_id", "idx", name="uq_option_items_set_idx"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    recommendation_set_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("recommendation_sets.id", ondelete="CASCADE"), nullable=False
    )
    idx: Mapped[int] = mapped_column(Integer, nullable=False)  # 1..3
    title: Mapped[str] = mapped_column(String(300), nullable=False)
    why: Mapped[str] = mapped_column(Text, nullable=False)
    time_mins: Mapped[float] = mapped_column(Float, nullable=False)
    difficulty: Mapped[str] = mapped_column(String(10), nullable=False)  # Easy | Medium | Hard

    ingredients_used_json: Mapped[dict] = mapped_column(JSONType, nullable=False)  # {pantry: [], extra: []}
    missing_ingredients_json: Mapped[list] = mapped_column(JSONType, nullable=False)
    steps_json: Mapped[list] = mapped_column(JSONType, nullable=False)
    substitutions_json: Mapped[list] = mapped_column(JSONType, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    recommendation_set: Mapped["RecommendationSet"] = relationship(
        "RecommendationSet", back_populates="options"
    )
    feedback: Mapped[Optional["OptionFeedback"]] = relationship(
        "OptionFeedback", back_populates="option_item", cascade="all, delete-orphan",
        uselist=False
    )
    saved_meal: Mapped[Optional["SavedMeal"]] = relationship(
        "SavedMeal", back_populates="option_item", cascade="all, delete-orphan",
        uselist=False
    )

    @property
    def is_saved(self) -> bool:
        return self.saved_meal is not None


class OptionFeedback(Base):
    """User decision on one option. One row per option; resubmission overwrites."""
    __tablename__ = "option_feedback"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    option_item_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("option_items.id", ondelete="CASCADE"),
        nullable=False, unique=True
    )
    decision: Mapped[str] = mapped_column(String(10), nullable=False)  # ACCEPT | REJECT | NOT_NOW
    reason: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    reason_note: Mapped[Optional[str]] = mapped_column(Text, nullable=True)  # only for reason == OTHER

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )

    option_item: Mapped["OptionItem"] = relationship("OptionItem", back_populates="feedback")


class SavedMeal(Base):
    __tablename__ = "saved_meals"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    option_item_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("option_items.id", ondelete="CASCADE"),
        nullable=False, unique=True
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    option_item: Mapped["OptionItem"] = relationship("OptionItem", back_populates="saved_meal")


class PreferenceSummary(Base):
    """Rolling preference profile fed into every prompt. At most one row."""
    __tablename__ = "preference_summaries"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    summary_text: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )


class Plan(Base):
    """Multi-day dinner plan."""
    __tablename__ = "plans"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    inputs_json: Mapped[dict] = mapped_column(JSONType, nullable=False)  # PlanInputs
    reuse_strategy_json: Mapped[Optional[dict]] = mapped_column(JSONType, nullable=True)
    model: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    repair_model: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    prompt_version: Mapped[Optional[str]] = mapped_column(String(40), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    days: Mapped[list["PlanDay"]] = relationship(
        "PlanDay", back_populates="plan", cascade="all, delete-orphan",
        order_by="PlanDay.day_index"
    )
    shopping_list: Mapped[Optional["ShoppingList"]] = relationship(
        "ShoppingList", back_populates="plan", cascade="all, delete-orphan",
        uselist=False
    )


class PlanDay(Base):
    __tablename__ = "plan_days"
    __table_args__ = (
        UniqueConstraint("plan_id", "day_index", name="uq_plan_days_plan_day"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    plan_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("plans.id", ondelete="CASCADE"), nullable=False
    )
    day_index: Mapped[int] = mapped_column(Integer, nullable=False)  # 0-based
    recipe_json: Mapped[dict] = mapped_column(JSONType, nullable=False)  # PlanDayRecipe (wire shape)
    raw_response_json: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )

    plan: Mapped["Plan"] = relationship("Plan", back_populates="days")


class ShoppingList(Base):
    __tablename__ = "shopping_lists"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    plan_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("plans.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    list_json: Mapped[dict] = mapped_column(JSONType, nullable=False)  # produce/pantry/dairy/protein/spices
    raw_response_json: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )

    plan: Mapped["Plan"] = relationship("Plan", back_populates="shopping_list")
