from unittest.mock import patch

from pantrypal.ai.errors import ProviderTimeoutError, ProviderUnavailableError
from pantrypal.models import MealSession, OptionItem, RecommendationSet
from pantrypal.settings import settings

from conftest import fake_ai, valid_recommendations_text


def _create_session(client, **body):
    response = client.post("/api/sessions", json=body)
    assert response.status_code == 201
    return response.json()


def test_create_session_stores_constraints(client):
    session = _create_session(
        client,
        extra_ingredients_text="chicken\nspinach",
        constraints={"timeMins": 30, "spiceLevel": "mild"},
    )
    assert session["extra_ingredients_text"] == "chicken\nspinach"
    assert session["constraints"] == {"timeMins": 30, "spiceLevel": "mild"}
    assert session["recommendation_sets"] == []


def test_create_session_rejects_bad_constraints(client):
    response = client.post("/api/sessions", json={"constraints": {"timeMins": -5}})
    assert response.status_code == 422


def test_recommendations_in_mock_mode(client, profile):
    session = _create_session(client, extra_ingredients_text="chicken")

    response = client.post("/api/recommendations", json={"session_id": session["id"]})

    assert response.status_code == 200
    rec_set = response.json()
    assert rec_set["session_id"] == session["id"]
    assert rec_set["model"] == "mock"
    assert rec_set["repaired"] is False
    assert [o["idx"] for o in rec_set["options"]] == [1, 2, 3]
    assert rec_set["options"][0]["title"] == "Garlic Butter Pasta"
    assert rec_set["options"][0]["ingredients_used"]["pantry"] == ["olive oil", "garlic", "salt"]
    assert rec_set["options"][0]["is_saved"] is False


def test_session_detail_nests_sets_and_options(client, profile):
    session = _create_session(client)
    client.post("/api/recommendations", json={"session_id": session["id"]})
    client.post("/api/recommendations", json={"session_id": session["id"]})

    detail = client.get(f"/api/sessions/{session['id']}").json()
    assert len(detail["recommendation_sets"]) == 2
    assert all(len(s["options"]) == 3 for s in detail["recommendation_sets"])

    listing = client.get("/api/sessions").json()
    assert [s["id"] for s in listing] == [session["id"]]


def test_missing_session_is_404(client, profile):
    assert client.get("/api/sessions/nope").status_code == 404
    response = client.post("/api/recommendations", json={"session_id": "nope"})
    assert response.status_code == 404


def test_missing_profile_is_404(client):
    session = _create_session(client)
    response = client.post("/api/recommendations", json={"session_id": session["id"]})
    assert response.status_code == 404
    assert "Profile not found" in response.json()["detail"]


def test_repaired_output_is_persisted_verbatim(client, profile, db_session):
    session = _create_session(client)
    fake = fake_ai("Sure! Here are some meals: {", valid_recommendations_text())

    with patch("pantrypal.agents.recommendation_agent.ai_client", fake):
        response = client.post("/api/recommendations", json={"session_id": session["id"]})

    assert response.status_code == 200
    assert response.json()["repaired"] is True
    stored = db_session.query(RecommendationSet).one()
    assert stored.raw_response_json == valid_recommendations_text()
    assert stored.model == settings.gemini_text_model
    assert stored.repair_model == settings.gemini_light_model
    assert response.json()["repair_model"] == settings.gemini_light_model


def test_exhausted_repair_maps_to_502_and_persists_nothing(client, profile, db_session):
    session = _create_session(client)
    fake = fake_ai('{"options": []}', '{"options": [{}]}')

    with patch("pantrypal.agents.recommendation_agent.ai_client", fake):
        response = client.post("/api/recommendations", json={"session_id": session["id"]})

    assert response.status_code == 502
    body = response.json()
    assert body["error_kind"] == "invalid_output"
    assert body["generated"] is True
    assert body["retryable"] is True
    assert body["detail"] == "Failed to generate valid meal recommendations. Please try again."
    assert db_session.query(RecommendationSet).count() == 0
    assert db_session.query(OptionItem).count() == 0


def test_provider_timeout_maps_to_504(client, profile):
    session = _create_session(client)
    fake = fake_ai(ProviderTimeoutError("The AI provider did not respond in time."))

    with patch("pantrypal.agents.recommendation_agent.ai_client", fake):
        response = client.post("/api/recommendations", json={"session_id": session["id"]})

    assert response.status_code == 504
    assert response.json()["error_kind"] == "provider_timeout"
    assert response.json()["generated"] is False
    assert fake.complete.call_count == 1


def test_provider_unavailable_maps_to_503(client, profile):
    session = _create_session(client)
    fake = fake_ai(ProviderUnavailableError("AI generation is not configured."))

    with patch("pantrypal.agents.recommendation_agent.ai_client", fake):
        response = client.post("/api/recommendations", json={"session_id": session["id"]})

    assert response.status_code == 503
    assert response.json()["retryable"] is False


def test_chat_creates_session_and_set(client, profile, db_session):
    response = client.post("/api/chat", json={"message": "something quick with eggs"})

    assert response.status_code == 200
    data = response.json()
    assert data["recommendation_set"]["prompt_version"] == "chat-v2"
    assert len(data["recommendation_set"]["options"]) == 3

    session = db_session.get(MealSession, data["session_id"])
    assert session.constraints_json == {"chatInput": "something quick with eggs"}


def test_chat_failure_creates_no_session(client, profile, db_session):
    fake = fake_ai("nope", "still nope")

    with patch("pantrypal.agents.recommendation_agent.ai_client", fake):
        response = client.post("/api/chat", json={"message": "pasta please"})

    assert response.status_code == 502
    assert db_session.query(MealSession).count() == 0


def test_chat_rejects_empty_message(client, profile):
    assert client.post("/api/chat", json={"message": ""}).status_code == 422


def test_regenerating_chat_session_keeps_request_text(client, profile):
    chat = client.post("/api/chat", json={"message": "spicy tofu bowl"}).json()
    fake = fake_ai(valid_recommendations_text())

    with patch("pantrypal.agents.recommendation_agent.ai_client", fake):
        response = client.post("/api/recommendations", json={"session_id": chat["session_id"]})

    assert response.status_code == 200
    prompt = fake.complete.call_args.args[0]
    assert "CONSTRAINTS:\n- chatInput: spicy tofu bowl" in prompt


def test_non_finite_time_never_stored(client, profile, db_session):
    session = _create_session(client)
    nan_text = valid_recommendations_text().replace('"timeMins": 20', '"timeMins": NaN', 1)
    fake = fake_ai(nan_text, nan_text)

    with patch("pantrypal.agents.recommendation_agent.ai_client", fake):
        response = client.post("/api/recommendations", json={"session_id": session["id"]})

    assert response.status_code == 502
    assert response.json()["error_kind"] == "invalid_output"
    assert fake.complete.call_count == 2
    assert db_session.query(OptionItem).count() == 0


def test_repair_timeout_reported_as_generated(client, profile):
    session = _create_session(client)
    fake = fake_ai("Sure! {", ProviderTimeoutError("The AI provider did not respond in time."))

    with patch("pantrypal.agents.recommendation_agent.ai_client", fake):
        response = client.post("/api/recommendations", json={"session_id": session["id"]})

    assert response.status_code == 504
    body = response.json()
    assert body["error_kind"] == "invalid_output"
    assert body["generated"] is True
    assert body["retryable"] is True
