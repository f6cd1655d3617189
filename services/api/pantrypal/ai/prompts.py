"""Prompt assembly.

Every builder here is a pure function of its inputs: the same pantry,
constraints, feedback and preference profile always render the same text.
The instruction text carries product rules (realistic timing, equipment,
reuse across days) that the validator cannot check; only the JSON shape is
enforced in code.
"""

import json
from dataclasses import dataclass
from typing import Optional, Sequence

from ..schemas import Constraints, FeedbackEvent, FeedbackSummary, PlanDayRecipe, PlanInputs

PROMPT_VERSION = "v2"
CHAT_PROMPT_VERSION = "chat-v2"
PLAN_PROMPT_VERSION = "plan-v1"

NOT_SPECIFIED = "Not specified"
NONE_SPECIFIED = "None specified"

RECIPE_JSON_SCHEMA = """{
  "options": [
    {
      "title": "string - meal name",
      "why": "string - brief explanation",
      "timeMins": "number - cooking time in minutes",
      "difficulty": "Easy|Medium|Hard",
      "ingredientsUsed": {
        "pantry": ["array of strings - pantry items used"],
        "extra": ["array of strings - extra ingredients used"]
      },
      "missingIngredients": ["array of strings - items needed but not available"],
      "steps": ["array of strings - detailed cooking steps"],
      "substitutions": ["array of strings - possible substitutions"]
    }
  ]
}"""

WEEKLY_PLAN_SCHEMA = """{
  "days": [
    {
      "title": "string - meal name",
      "why": "string - brief explanation of why this fits the plan",
      "timeMins": "number - cooking time in minutes",
      "difficulty": "Easy|Medium|Hard",
      "ingredientsUsed": {
        "pantry": ["array of strings - pantry items used"],
        "extra": ["array of strings - ingredients to buy"]
      },
      "missingIngredients": ["array of strings - items needed to buy"],
      "steps": ["array of strings - detailed cooking steps"],
      "substitutions": ["array of strings - possible substitutions"],
      "reuseNotes": "string - notes about ingredient reuse or leftovers strategy (optional)"
    }
  ],
  "reuseStrategy": {
    "sharedIngredients": ["array of strings - ingredients used across multiple days"],
    "leftoversStrategy": "string - overall leftovers strategy explanation"
  }
}"""

PLAN_DAY_SCHEMA = """{
  "title": "string",
  "why": "string",
  "timeMins": "number",
  "difficulty": "Easy|Medium|Hard",
  "ingredientsUsed": { "pantry": ["..."], "extra": ["..."] },
  "missingIngredients": ["..."],
  "steps": ["..."],
  "substitutions": ["..."],
  "reuseNotes": "string (optional - explain if using shared ingredients)"
}"""

SHOPPING_LIST_SCHEMA = """{
  "produce": ["fresh vegetables, fruits, herbs"],
  "pantry": ["canned goods, grains, pasta, oils"],
  "dairy": ["milk, cheese, yogurt, eggs, butter"],
  "protein": ["meat, fish, poultry, tofu, legumes"],
  "spices": ["spices, seasonings, condiments"]
}"""

COOKING_REALISM_RULES = """COOKING REALISM RULES (STRICT):
1. Timing must be realistic - include prep time, actual cooking time, and any waiting/resting periods
2. Steps must be detailed and actionable - specify temperatures, quantities, visual cues ("until golden brown")
3. Never suggest techniques that don't match available equipment (no sous vide without immersion circulator)
4. Account for parallel tasks - if something simmers while you prep, mention it"""


@dataclass(frozen=True)
class PromptPair:
    system: str
    user: str


def _or_placeholder(text: Optional[str], placeholder: str = NOT_SPECIFIED) -> str:
    return text if text else placeholder


def render_feedback_block(feedback: Sequence[FeedbackSummary]) -> str:
    if not feedback:
        return ""
    lines = "\n".join(f'- "{f.title}": {f.decision}' for f in feedback)
    return f"\n\nRecent meal feedback (learn from this):\n{lines}"


def render_preference_block(summary: Optional[str], label: str) -> str:
    if not summary:
        return ""
    return f"\n\n{label}:\n{summary}"


def render_constraints(constraints: Constraints) -> str:
    """One "- key: value" line per present, non-empty constraint."""
    data = constraints.model_dump(by_alias=True, exclude_none=True)
    lines = []
    for key, value in data.items():
        if value == "":
            continue
        if isinstance(value, float) and value.is_integer():
            value = int(value)
        lines.append(f"- {key}: {value}")
    return "\n".join(lines)


def build_recommendation_prompt(
    pantry_text: str,
    utensils_text: str,
    extra_ingredients_text: str,
    constraints: Constraints,
    recent_feedback: Sequence[FeedbackSummary],
    preference_summary: Optional[str] = None,
) -> PromptPair:
    feedback_context = render_feedback_block(recent_feedback)
    preference_context = render_preference_block(
        preference_summary,
        "USER PREFERENCE PROFILE (important - tailor recommendations to these learned preferences)",
    )
    constraints_text = render_constraints(constraints)

    system = f"""You are a practical home cooking assistant. Generate exactly 3 meal recommendations based on the user's available ingredients and constraints.

{COOKING_REALISM_RULES}
5. Missing ingredients should be truly necessary - don't pad the list

PRIORITIZATION RULES:
1. Use ingredients the user already has (pantry + extra ingredients) - this is the main goal
2. Minimize missing ingredients - ideally 0-2 items max
3. Respect all dietary constraints strictly - no exceptions
4. Consider the available utensils when suggesting cooking methods

RESPONSE FORMAT:
You MUST respond with valid JSON. Do not include any text outside the JSON object.
{RECIPE_JSON_SCHEMA}

Provide EXACTLY 3 options. Each option must have all required fields. Steps should be detailed enough for a beginner to follow."""

    user = f"""Generate 3 meal recommendations for me.

PANTRY STAPLES (always available):
{_or_placeholder(pantry_text)}

UTENSILS/EQUIPMENT (available):
{_or_placeholder(utensils_text)}

EXTRA INGREDIENTS (available for this meal):
{_or_placeholder(extra_ingredients_text, NONE_SPECIFIED)}

CONSTRAINTS:
{_or_placeholder(constraints_text, NONE_SPECIFIED)}{preference_context}{feedback_context}

Remember: Prioritize using what I have, minimize missing ingredients, be realistic about timing, and provide detailed, practical recipes."""

    return PromptPair(system=system, user=user)


def build_chat_prompt(
    message: str,
    pantry_text: str,
    utensils_text: str,
    recent_feedback: Sequence[FeedbackSummary],
    preference_summary: Optional[str] = None,
) -> PromptPair:
    """Conversational variant: the user's own words are the user turn."""
    feedback_context = render_feedback_block(recent_feedback)
    preference_context = render_preference_block(
        preference_summary,
        "USER PREFERENCE PROFILE (tailor recommendations to these learned preferences)",
    )

    system = f"""You are a practical home cooking assistant. The user will describe what they want to eat in natural language. Based on their request and available ingredients, generate exactly 3 meal recommendations.

AVAILABLE PANTRY STAPLES:
{_or_placeholder(pantry_text)}

AVAILABLE UTENSILS/EQUIPMENT:
{_or_placeholder(utensils_text)}{preference_context}{feedback_context}

{COOKING_REALISM_RULES}

PRIORITIZATION RULES:
1. Prioritize using ingredients from the pantry staples
2. If the user mentions specific ingredients, use those as "extra" ingredients
3. Respect any constraints the user mentions (time, cuisine, diet, etc.)
4. Minimize missing ingredients - ideally 0-2 items max

RESPONSE FORMAT:
You MUST respond with valid JSON. Do not include any text outside the JSON object.
{RECIPE_JSON_SCHEMA}

Provide EXACTLY 3 options. Each option must have all required fields."""

    return PromptPair(system=system, user=message)


def build_weekly_plan_prompt(
    pantry_text: str,
    utensils_text: str,
    inputs: PlanInputs,
    recent_feedback: Sequence[FeedbackSummary],
    preference_summary: Optional[str] = None,
) -> PromptPair:
    feedback_context = render_feedback_block(recent_feedback)
    preference_context = render_preference_block(
        preference_summary,
        "USER PREFERENCE PROFILE (important - tailor the plan to these learned preferences)",
    )

    cuisine_context = []
    if inputs.include_cuisines:
        cuisine_context.append(f"Include these cuisines: {', '.join(inputs.include_cuisines)}")
    if inputs.exclude_cuisines:
        cuisine_context.append(f"Avoid these cuisines: {', '.join(inputs.exclude_cuisines)}")

    diet_line = f"Dietary requirement: {inputs.diet}" if inputs.diet else "No specific dietary restrictions"

    system = f"""You are a practical home cooking assistant specializing in weekly meal planning. Generate a {inputs.days}-day dinner plan that is efficient, practical, and minimizes food waste.

CRITICAL PLANNING RULES:
1. Maximum cooking time per meal: {inputs.max_cook_time} minutes
2. {diet_line}
3. {'. '.join(cuisine_context) or 'No cuisine restrictions'}

INGREDIENT REUSE REQUIREMENTS (MANDATORY):
1. At least 2 ingredients must be reused across multiple days (e.g., buy one bunch of cilantro, use in days 1 and 4)
2. Include at least 1 leftovers strategy (e.g., "cook extra rice on day 1 for fried rice on day 3")
3. Plan shopping efficiently - if you buy fresh herbs or vegetables, use them multiple times

COOKING REALISM RULES:
1. Timing must be realistic - each meal must be achievable within the max cook time, including prep and resting time
2. Steps must be detailed and actionable; call out steps that can run in parallel
3. Never suggest techniques that don't match the available equipment
4. Consider ingredient freshness - don't use fresh herbs on day 7 if bought for day 1
5. Vary the meals - don't repeat proteins on consecutive days

RESPONSE FORMAT:
You MUST respond with valid JSON matching this exact schema:
{WEEKLY_PLAN_SCHEMA}

The "days" array must have exactly {inputs.days} meals. Each day must include reuseNotes if it uses ingredients from other days or creates leftovers for later use."""

    user = f"""Generate a {inputs.days}-day dinner plan for me.

PANTRY STAPLES (always available - don't include in shopping):
{_or_placeholder(pantry_text)}

UTENSILS/EQUIPMENT (available):
{_or_placeholder(utensils_text)}{preference_context}{feedback_context}

Remember:
- Maximum {inputs.max_cook_time} minutes per meal
- Reuse at least 2 ingredients across the week
- Include at least 1 leftovers strategy
- Vary the proteins and cuisines
- Be realistic about timing"""

    return PromptPair(system=system, user=user)


def shared_ingredients(days: Sequence[PlanDayRecipe]) -> list[str]:
    """Union of every day's extra + missing ingredients, first occurrence wins."""
    seen: dict[str, None] = {}
    for day in days:
        for item in day.ingredients_used.extra:
            seen.setdefault(item, None)
        for item in day.missing_ingredients:
            seen.setdefault(item, None)
    return list(seen)


def build_swap_day_prompt(
    pantry_text: str,
    utensils_text: str,
    inputs: PlanInputs,
    day_index: int,
    other_days: Sequence[tuple[int, PlanDayRecipe]],
    replaced_title: Optional[str] = None,
    preference_summary: Optional[str] = None,
) -> PromptPair:
    """
    Prompt for one replacement day.

    other_days holds (day_index, recipe) for every day that stays in the plan.
    """
    preference_context = render_preference_block(preference_summary, "USER PREFERENCE PROFILE")
    existing_meals = "\n".join(f"Day {idx + 1}: {recipe.title}" for idx, recipe in other_days)
    reuse = ", ".join(shared_ingredients([recipe for _, recipe in other_days]))
    diet_line = f"Dietary requirement: {inputs.diet}" if inputs.diet else "No dietary restrictions"

    avoid_titles = [recipe.title for _, recipe in other_days]
    if replaced_title:
        avoid_titles.append(replaced_title)

    system = f"""You are a practical home cooking assistant. Generate 1 replacement dinner recipe for Day {day_index + 1} of a meal plan.

CONSTRAINTS:
- Maximum cooking time: {inputs.max_cook_time} minutes
- {diet_line}

EXISTING MEALS IN PLAN:
{existing_meals or 'None'}

INGREDIENTS ALREADY IN SHOPPING LIST (try to reuse these):
{reuse or 'None yet'}

RESPONSE FORMAT:
You MUST respond with valid JSON matching this schema:
{PLAN_DAY_SCHEMA}

Generate something DIFFERENT from the existing meals. If possible, reuse ingredients from other days."""

    user = f"""Generate a replacement dinner for Day {day_index + 1}.

PANTRY STAPLES:
{_or_placeholder(pantry_text)}

UTENSILS:
{_or_placeholder(utensils_text)}{preference_context}

Make it different from: {', '.join(avoid_titles)}"""

    return PromptPair(system=system, user=user)


def build_shopping_list_prompt(needed_ingredients: Sequence[str], pantry_text: str) -> PromptPair:
    system = f"""You are a shopping list organizer. Categorize the following ingredients into the appropriate grocery sections. Remove any items that are likely already in a typical pantry (listed below).

PANTRY STAPLES (user already has these - DO NOT include in shopping list):
{pantry_text or 'salt, pepper, olive oil, basic spices'}

RESPONSE FORMAT:
You MUST respond with valid JSON matching this schema:
{SHOPPING_LIST_SCHEMA}

Each category should contain only items the user needs to buy. Consolidate duplicates (e.g., "cilantro" appearing twice becomes one entry). If an ingredient could go in multiple categories, pick the most common one."""

    user = f"""Organize these ingredients into a shopping list:

{chr(10).join(needed_ingredients)}

Remember: Don't include items that are in the pantry staples. Consolidate duplicates."""

    return PromptPair(system=system, user=user)


def build_summary_prompt(events: Sequence[FeedbackEvent]) -> str:
    payload = [e.model_dump(by_alias=True) for e in events]
    return f"""Analyze this meal feedback history and create a concise user preference profile.

FEEDBACK DATA:
{json.dumps(payload, indent=2)}

Create a preference summary that includes:
1. Likes/dislikes (ingredients, cuisines, cooking styles)
2. Preferred cooking time range
3. Cuisines/dishes often accepted
4. Ingredients or meal types often rejected (with reasons if available)
5. Difficulty preferences
6. Any patterns in rejection reasons

IMPORTANT: Keep the summary under 1200 characters. Be specific and actionable - this will be used to personalize future recommendations.

Format as plain text paragraphs, not JSON."""


def build_repair_prompt(schema_text: str, malformed_text: str, requirements: Optional[str] = None) -> str:
    """The malformed text is embedded verbatim. `requirements` is appended as
    an extra instruction (e.g. the exact day count of a plan)."""
    tail = "Return ONLY the repaired valid JSON, nothing else."
    if requirements:
        tail = f"{tail} {requirements}"
    return f"""The following JSON is malformed. Fix it to be valid JSON matching this schema:
{schema_text}

Malformed JSON:
{malformed_text}

{tail}"""
