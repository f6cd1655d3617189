import copy
import json

import pytest

from pantrypal.ai.errors import OutputValidationError
from pantrypal.ai.validation import parse_and_validate, validate_payload
from pantrypal.agents.mocks import mock_plan_day
from pantrypal.schemas import (
    PlanDayRecipe,
    RecommendationResponse,
    ShoppingListResponse,
    WeeklyPlanResponse,
)

from conftest import valid_recommendations_text


def _options(n):
    data = json.loads(valid_recommendations_text())
    base = data["options"][0]
    return {"options": [copy.deepcopy(base) for _ in range(n)]}


def _issue_constraints(exc_info):
    return {(i.path, i.constraint) for i in exc_info.value.issues}


def test_valid_recommendations_accepted():
    result = parse_and_validate(valid_recommendations_text(), RecommendationResponse)
    assert len(result.options) == 3
    assert result.options[0].title == "Garlic Butter Pasta"
    assert result.options[0].ingredients_used.pantry == ["olive oil", "garlic", "salt"]


@pytest.mark.parametrize("count,constraint", [(2, "too_short"), (4, "too_long"), (0, "too_short")])
def test_option_count_must_be_exactly_three(count, constraint):
    with pytest.raises(OutputValidationError) as exc_info:
        validate_payload(_options(count), RecommendationResponse)
    assert ("options", constraint) in _issue_constraints(exc_info)


def test_time_as_string_rejected():
    data = _options(3)
    data["options"][1]["timeMins"] = "30"
    with pytest.raises(OutputValidationError) as exc_info:
        validate_payload(data, RecommendationResponse)
    paths = {i.path for i in exc_info.value.issues}
    assert any(p.startswith("options.1.timeMins") for p in paths)


def test_fractional_time_accepted_and_non_positive_rejected():
    data = _options(3)
    data["options"][0]["timeMins"] = 12.5
    assert validate_payload(data, RecommendationResponse).options[0].time_mins == 12.5

    data["options"][0]["timeMins"] = 0
    with pytest.raises(OutputValidationError):
        validate_payload(data, RecommendationResponse)


def test_unknown_difficulty_rejected():
    data = _options(3)
    data["options"][2]["difficulty"] = "Trivial"
    with pytest.raises(OutputValidationError) as exc_info:
        validate_payload(data, RecommendationResponse)
    assert any(i.path == "options.2.difficulty" for i in exc_info.value.issues)


def test_non_string_list_elements_rejected():
    data = _options(3)
    data["options"][0]["steps"] = ["Boil water", 2]
    with pytest.raises(OutputValidationError) as exc_info:
        validate_payload(data, RecommendationResponse)
    assert any(i.path == "options.0.steps.1" for i in exc_info.value.issues)


def test_missing_nested_field_reports_path():
    data = _options(3)
    del data["options"][0]["ingredientsUsed"]["extra"]
    with pytest.raises(OutputValidationError) as exc_info:
        validate_payload(data, RecommendationResponse)
    assert ("options.0.ingredientsUsed.extra", "missing") in _issue_constraints(exc_info)


def test_non_object_top_level_rejected():
    with pytest.raises(OutputValidationError) as exc_info:
        parse_and_validate("[1, 2, 3]", RecommendationResponse)
    assert _issue_constraints(exc_info) == {("$", "object_type")}


def test_malformed_json_reports_syntax_and_keeps_raw_text():
    with pytest.raises(OutputValidationError) as exc_info:
        parse_and_validate("not json at all", RecommendationResponse)
    assert _issue_constraints(exc_info) == {("$", "json_syntax")}
    assert exc_info.value.raw_text == "not json at all"


def test_validation_does_not_mutate_input_and_is_repeatable():
    data = _options(3)
    snapshot = copy.deepcopy(data)
    first = validate_payload(data, RecommendationResponse)
    second = validate_payload(data, RecommendationResponse)
    assert data == snapshot
    assert first == second


def test_serialized_value_revalidates_to_equal_value():
    value = parse_and_validate(valid_recommendations_text(), RecommendationResponse)
    dumped = value.model_dump(by_alias=True)
    assert validate_payload(dumped, RecommendationResponse) == value
    assert "timeMins" in dumped["options"][0]


def test_plan_day_reuse_notes_optional():
    day = mock_plan_day(1)
    del day["reuseNotes"]
    assert validate_payload(day, PlanDayRecipe).reuse_notes is None

    day["reuseNotes"] = 5
    with pytest.raises(OutputValidationError):
        validate_payload(day, PlanDayRecipe)


def test_weekly_plan_schema_does_not_own_day_count():
    data = {
        "days": [mock_plan_day(1)],
        "reuseStrategy": {"sharedIngredients": [], "leftoversStrategy": "None"},
    }
    assert len(validate_payload(data, WeeklyPlanResponse).days) == 1


def test_weekly_plan_requires_reuse_strategy():
    with pytest.raises(OutputValidationError) as exc_info:
        validate_payload({"days": [mock_plan_day(1)]}, WeeklyPlanResponse)
    assert ("reuseStrategy", "missing") in _issue_constraints(exc_info)


def test_shopping_list_requires_all_five_categories():
    data = {"produce": ["lemon"], "pantry": [], "dairy": [], "protein": [], "spices": []}
    assert validate_payload(data, ShoppingListResponse).produce == ["lemon"]

    del data["spices"]
    with pytest.raises(OutputValidationError) as exc_info:
        validate_payload(data, ShoppingListResponse)
    assert ("spices", "missing") in _issue_constraints(exc_info)


@pytest.mark.parametrize("token", ["NaN", "Infinity", "-Infinity"])
def test_non_finite_time_rejected(token):
    raw = valid_recommendations_text().replace('"timeMins": 20', f'"timeMins": {token}', 1)
    assert token in raw

    with pytest.raises(OutputValidationError) as exc_info:
        parse_and_validate(raw, RecommendationResponse)
    assert any(i.path.startswith("options.0.timeMins") for i in exc_info.value.issues)
