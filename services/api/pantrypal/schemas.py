"""Pydantic schemas for PantryPal.

Two families live here:

- Provider contracts: the JSON shapes the model must return
  (recommendations, weekly plan, single plan day, shopping list). Wire keys
  are camelCase and nothing is coerced: strings must be strings, timeMins
  must be a JSON number.
- API models: request/response bodies for the HTTP surface (snake_case).
"""

import math
from datetime import datetime
from typing import Optional, Literal, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictFloat,
    StrictInt,
    StrictStr,
    field_validator,
)
from pydantic.alias_generators import to_camel

Difficulty = Literal["Easy", "Medium", "Hard"]
Decision = Literal["ACCEPT", "REJECT", "NOT_NOW"]
Reason = Literal[
    "TOO_LONG",
    "TOO_COMPLEX",
    "DONT_LIKE_INGREDIENT",
    "NOT_IN_MOOD",
    "TOO_UNHEALTHY",
    "OTHER",
]


class WireModel(BaseModel):
    """camelCase on the wire, snake_case in Python."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Provider contracts ---

class IngredientsUsed(WireModel):
    pantry: list[StrictStr]
    extra: list[StrictStr]


class MealOption(WireModel):
    title: StrictStr
    why: StrictStr
    time_mins: Union[StrictInt, StrictFloat]
    difficulty: Difficulty
    ingredients_used: IngredientsUsed
    missing_ingredients: list[StrictStr]
    steps: list[StrictStr]
    substitutions: list[StrictStr]

    @field_validator("time_mins")
    @classmethod
    def _positive_time(cls, value):
        if not math.isfinite(value) or value <= 0:
            raise ValueError("timeMins must be a positive, finite number")
        return value


class RecommendationResponse(WireModel):
    options: list[MealOption] = Field(min_length=3, max_length=3)


class PlanDayRecipe(MealOption):
    reuse_notes: Optional[StrictStr] = None  # e.g. "Uses leftover rice from Day 1"


class ReuseStrategy(WireModel):
    shared_ingredients: list[StrictStr]
    leftovers_strategy: StrictStr


class WeeklyPlanResponse(WireModel):
    # Day count is checked against the request by the caller, not here.
    days: list[PlanDayRecipe]
    reuse_strategy: ReuseStrategy


class ShoppingListResponse(WireModel):
    produce: list[StrictStr]
    pantry: list[StrictStr]
    dairy: list[StrictStr]
    protein: list[StrictStr]
    spices: list[StrictStr]


# --- Generation inputs ---

class Constraints(WireModel):
    time_mins: Optional[float] = Field(None, gt=0, allow_inf_nan=False)
    cuisine_mood: Optional[str] = None
    spice_level: Optional[Literal["mild", "medium", "spicy"]] = None
    diet: Optional[str] = None
    effort: Optional[Literal["minimal", "moderate", "involved"]] = None
    chat_input: Optional[str] = None  # free-text request of a chat-created session


class PlanInputs(WireModel):
    days: Literal[3, 5, 7]
    max_cook_time: int = Field(..., ge=15, le=120)
    diet: Optional[str] = None
    include_cuisines: Optional[list[str]] = None
    exclude_cuisines: Optional[list[str]] = None


class FeedbackSummary(BaseModel):
    """Compact feedback line used in generation prompts."""
    title: str
    decision: str


class FeedbackEvent(WireModel):
    """Full feedback record used for preference summarization."""
    title: str
    decision: str
    reason: Optional[str] = None
    reason_note: Optional[str] = None
    time_mins: float
    difficulty: str
    ingredients_used: dict
    missing_ingredients: list
    constraints: dict


# --- Profile ---

class ProfileUpdate(BaseModel):
    pantry_text: str = ""
    utensils_text: str = ""


class ProfileOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    pantry_text: str
    utensils_text: str
    updated_at: datetime


# --- Feedback ---

class FeedbackCreate(BaseModel):
    option_item_id: str
    decision: Decision
    reason: Optional[Reason] = None
    reason_note: Optional[str] = None


class FeedbackOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    option_item_id: str
    decision: str
    reason: Optional[str]
    reason_note: Optional[str]
    created_at: datetime
    updated_at: datetime


# --- Sessions & recommendations ---

class SessionCreate(BaseModel):
    extra_ingredients_text: str = ""
    constraints: Constraints = Field(default_factory=Constraints)


class OptionItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    idx: int
    title: str
    why: str
    time_mins: float
    difficulty: str
    ingredients_used: dict = Field(validation_alias="ingredients_used_json")
    missing_ingredients: list[str] = Field(validation_alias="missing_ingredients_json")
    steps: list[str] = Field(validation_alias="steps_json")
    substitutions: list[str] = Field(validation_alias="substitutions_json")
    feedback: Optional[FeedbackOut] = None
    is_saved: bool = False


class RecommendationSetOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    session_id: str
    model: str
    repair_model: Optional[str] = None
    prompt_version: str
    repaired: bool
    created_at: datetime
    options: list[OptionItemOut] = []


class SessionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    extra_ingredients_text: str
    constraints: dict = Field(validation_alias="constraints_json")
    created_at: datetime
    recommendation_sets: list[RecommendationSetOut] = []


class RecommendationRequest(BaseModel):
    session_id: str


class ChatRequest(BaseModel):
    message: str = Field(..., min_length=1, max_length=2000)


class ChatResponse(BaseModel):
    session_id: str
    recommendation_set: RecommendationSetOut


# --- Saved meals ---

class SavedMealRequest(BaseModel):
    option_item_id: str


class SavedMealOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    option_item_id: str
    created_at: datetime
    option_item: Optional[OptionItemOut] = None


# --- Preference summary ---

class PreferenceSummaryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    summary_text: str
    updated_at: datetime


class PreferenceSummaryResponse(BaseModel):
    summary: Optional[PreferenceSummaryOut] = None
    message: Optional[str] = None


# --- Plans ---

class PlanDayOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    day_index: int
    recipe: dict = Field(validation_alias="recipe_json")
    updated_at: datetime


class ShoppingListOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    plan_id: str
    items: dict = Field(validation_alias="list_json")
    updated_at: datetime


class PlanOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    inputs: dict = Field(validation_alias="inputs_json")
    reuse_strategy: Optional[dict] = Field(None, validation_alias="reuse_strategy_json")
    model: Optional[str]
    repair_model: Optional[str] = None
    prompt_version: Optional[str]
    created_at: datetime
    days: list[PlanDayOut] = []
    shopping_list: Optional[ShoppingListOut] = None


class SwapDayRequest(BaseModel):
    day_index: int


class SwapDayResponse(BaseModel):
    day: PlanDayOut
    recipe: dict


# --- Misc ---

class SeedResponse(BaseModel):
    created: bool
    profile: ProfileOut
