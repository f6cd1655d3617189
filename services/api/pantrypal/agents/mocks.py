"""Canned provider output for AI_MODE=mock.

Each helper returns the raw JSON text a well-behaved model would send, so
mock results still go through the real validators.
"""

import json

MOCK_MODEL = "mock"


def _meal(title: str, time_mins: int, difficulty: str, extra: list[str], missing: list[str]) -> dict:
    return {
        "title": title,
        "why": f"[MOCK] {title} uses what you already have.",
        "timeMins": time_mins,
        "difficulty": difficulty,
        "ingredientsUsed": {"pantry": ["olive oil", "garlic", "salt"], "extra": extra},
        "missingIngredients": missing,
        "steps": [
            "Prep all ingredients before turning on the heat.",
            "Heat olive oil in a pan over medium heat until shimmering.",
            "Cook until golden brown, then season to taste.",
        ],
        "substitutions": ["Swap olive oil for butter"],
    }


def mock_recommendations_json() -> str:
    return json.dumps({
        "options": [
            _meal("Garlic Butter Pasta", 20, "Easy", ["parmesan"], []),
            _meal("Vegetable Fried Rice", 25, "Easy", ["frozen peas"], ["spring onions"]),
            _meal("Spanish Tortilla", 40, "Medium", ["potatoes"], []),
        ]
    })


def mock_plan_day(day_number: int, title: str | None = None) -> dict:
    day = _meal(title or f"Mock Dinner {day_number}", 30, "Easy", ["spinach", "chicken thighs"], ["lemon"])
    day["reuseNotes"] = "Uses the spinach bought for Day 1"
    return day


def mock_weekly_plan_json(days: int) -> str:
    return json.dumps({
        "days": [mock_plan_day(i + 1) for i in range(days)],
        "reuseStrategy": {
            "sharedIngredients": ["spinach", "chicken thighs"],
            "leftoversStrategy": "Cook extra rice on Day 1 for fried rice later in the week.",
        },
    })


def mock_swap_day_json(day_index: int) -> str:
    return json.dumps(mock_plan_day(day_index + 1, title=f"Mock Swap Dinner {day_index + 1}"))


def mock_shopping_list_json(ingredients: list[str]) -> str:
    return json.dumps({
        "produce": [i for i in ingredients if i in ("spinach", "lemon", "spring onions")],
        "pantry": [],
        "dairy": [],
        "protein": [i for i in ingredients if "chicken" in i],
        "spices": [],
    })


def mock_preference_summary() -> str:
    return "[MOCK] Prefers quick (under 30 minutes), easy dinners. Often rejects long or complex recipes."
