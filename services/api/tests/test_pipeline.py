import json

import pytest

from pantrypal.agents.planner_agent import PLAN_FAILURE, require_day_count
from pantrypal.ai.errors import ProviderTimeoutError, RepairExhaustedError, RepairUnavailableError
from pantrypal.ai.pipeline import generate_validated
from pantrypal.ai.prompts import (
    RECIPE_JSON_SCHEMA,
    WEEKLY_PLAN_SCHEMA,
    PromptPair,
)
from pantrypal.schemas import RecommendationResponse, WeeklyPlanResponse
from pantrypal.settings import settings

from conftest import fake_ai, valid_plan_text, valid_recommendations_text

PROMPT = PromptPair(system="system text", user="user text")


def _recommend(client, **kwargs):
    return generate_validated(
        client,
        PROMPT,
        RecommendationResponse,
        model="capable-model",
        temperature=0.7,
        repair_schema=RECIPE_JSON_SCHEMA,
        failure_message="Failed to generate valid meal recommendations. Please try again.",
        **kwargs,
    )


def test_valid_first_attempt_makes_one_call():
    client = fake_ai(valid_recommendations_text())

    result = _recommend(client)

    assert client.complete.call_count == 1
    assert result.repaired is False
    assert result.raw_json == valid_recommendations_text()
    assert result.repair_model is None
    assert result.model == "capable-model"
    args, kwargs = client.complete.call_args
    assert args[0] == "user text"
    assert kwargs["system_instruction"] == "system text"
    assert kwargs["temperature"] == 0.7
    assert kwargs["json_output"] is True


def test_malformed_output_is_repaired_with_second_call():
    repaired_text = valid_recommendations_text()
    client = fake_ai("not json at all", repaired_text)

    result = _recommend(client)

    assert client.complete.call_count == 2
    assert result.repaired is True
    assert result.raw_json == repaired_text
    assert result.model == "capable-model"
    assert result.repair_model == settings.gemini_light_model
    assert len(result.value.options) == 3

    repair_args, repair_kwargs = client.complete.call_args_list[1]
    repair_prompt = repair_args[0]
    assert "not json at all" in repair_prompt
    assert RECIPE_JSON_SCHEMA in repair_prompt
    assert repair_prompt.rstrip().endswith("Return ONLY the repaired valid JSON, nothing else.")
    assert repair_kwargs["model"] == settings.gemini_light_model
    assert repair_kwargs["temperature"] == 0.0


def test_schema_failure_is_repaired():
    two_options = json.loads(valid_recommendations_text())
    two_options["options"] = two_options["options"][:2]
    client = fake_ai(json.dumps(two_options), valid_recommendations_text())

    result = _recommend(client)

    assert result.repaired is True
    assert len(result.value.options) == 3


def test_repair_failure_is_terminal_after_two_calls():
    client = fake_ai("not json at all", '{"options": []}', valid_recommendations_text())

    with pytest.raises(RepairExhaustedError) as exc_info:
        _recommend(client)

    assert client.complete.call_count == 2
    err = exc_info.value
    assert err.error_kind == "invalid_output"
    assert err.generated is True
    assert err.status_code == 502
    assert err.first_error.issues[0].constraint == "json_syntax"
    assert err.repair_error.issues[0].path == "options"
    assert "Please try again" in err.message


def test_provider_failure_is_not_repaired():
    client = fake_ai(ProviderTimeoutError("The AI provider did not respond in time."))

    with pytest.raises(ProviderTimeoutError):
        _recommend(client)

    assert client.complete.call_count == 1


def test_provider_failure_during_repair_reports_generated_output():
    timeout = ProviderTimeoutError("timeout")
    client = fake_ai("not json at all", timeout)

    with pytest.raises(RepairUnavailableError) as exc_info:
        _recommend(client)

    err = exc_info.value
    assert err.generated is True
    assert err.error_kind == "invalid_output"
    assert err.status_code == 504
    assert err.retryable is True
    assert err.provider_error is timeout
    assert err.__cause__ is timeout
    assert err.first_error.issues[0].constraint == "json_syntax"


def test_non_finite_time_goes_through_repair():
    nan_text = valid_recommendations_text().replace('"timeMins": 20', '"timeMins": NaN', 1)
    client = fake_ai(nan_text, valid_recommendations_text())

    result = _recommend(client)

    assert client.complete.call_count == 2
    assert result.repaired is True
    assert result.value.options[0].time_mins == 20
    assert "NaN" in client.complete.call_args_list[1][0][0]


def test_day_count_mismatch_goes_through_repair_with_requirement():
    client = fake_ai(valid_plan_text(3), valid_plan_text(5))

    result = generate_validated(
        client,
        PROMPT,
        WeeklyPlanResponse,
        model="capable-model",
        temperature=0.7,
        repair_schema=WEEKLY_PLAN_SCHEMA,
        repair_requirements='This is a 5-day meal plan: ensure the "days" array has exactly 5 items.',
        failure_message=PLAN_FAILURE,
        check=require_day_count(5),
    )

    assert result.repaired is True
    assert len(result.value.days) == 5
    repair_prompt = client.complete.call_args_list[1][0][0]
    assert repair_prompt.rstrip().endswith('ensure the "days" array has exactly 5 items.')


def test_day_count_still_wrong_after_repair_fails():
    client = fake_ai(valid_plan_text(3), valid_plan_text(4))

    with pytest.raises(RepairExhaustedError) as exc_info:
        generate_validated(
            client,
            PROMPT,
            WeeklyPlanResponse,
            model="capable-model",
            temperature=0.7,
            repair_schema=WEEKLY_PLAN_SCHEMA,
            failure_message=PLAN_FAILURE,
            check=require_day_count(5),
        )

    assert exc_info.value.repair_error.issues[0].constraint == "day_count"
    assert client.complete.call_count == 2
