from unittest.mock import MagicMock, patch

import httpx
import pytest
from google.genai import errors as genai_errors

from pantrypal.ai.errors import ProviderError, ProviderTimeoutError, ProviderUnavailableError
from pantrypal.core.ai_client import AIClient
from pantrypal.settings import settings


@pytest.fixture
def gemini_client(monkeypatch):
    monkeypatch.setattr(settings, "ai_mode", "gemini")
    monkeypatch.setattr(settings, "gemini_api_key", "test-key")
    monkeypatch.setattr(settings, "ai_timeout_seconds", 12.5)
    with patch("pantrypal.core.ai_client.genai.Client") as client_cls:
        client = AIClient()
        yield client, client_cls


def _api_error(code: int) -> genai_errors.APIError:
    return genai_errors.APIError(code, {"error": {"code": code, "message": "boom", "status": "ERROR"}})


def test_mock_mode_is_not_available_for_real_calls(monkeypatch):
    monkeypatch.setattr(settings, "ai_mode", "mock")
    client = AIClient()
    assert client.is_available() is False
    with pytest.raises(ProviderUnavailableError) as exc_info:
        client.complete("hello")
    assert exc_info.value.status_code == 503
    assert exc_info.value.generated is False


def test_deadline_configured_on_sdk_client(gemini_client):
    client, client_cls = gemini_client
    assert client.is_available()
    http_options = client_cls.call_args.kwargs["http_options"]
    assert http_options.timeout == 12500


def test_complete_returns_raw_text(gemini_client):
    client, _ = gemini_client
    client._client.models.generate_content.return_value = MagicMock(text='{"ok": true}')

    text = client.complete("user turn", system_instruction="system", model="m", temperature=0.2)

    assert text == '{"ok": true}'
    kwargs = client._client.models.generate_content.call_args.kwargs
    assert kwargs["model"] == "m"
    assert kwargs["contents"] == "user turn"
    assert kwargs["config"].system_instruction == "system"
    assert kwargs["config"].temperature == 0.2
    assert kwargs["config"].response_mime_type == "application/json"


def test_empty_response_text_becomes_empty_string(gemini_client):
    client, _ = gemini_client
    client._client.models.generate_content.return_value = MagicMock(text=None)
    assert client.complete("x") == ""


def test_transport_timeout_classified_as_timeout(gemini_client):
    client, _ = gemini_client
    client._client.models.generate_content.side_effect = httpx.ReadTimeout("timed out")

    with pytest.raises(ProviderTimeoutError) as exc_info:
        client.complete("x")

    assert exc_info.value.status_code == 504
    assert exc_info.value.error_kind == "provider_timeout"
    assert client.last_error.startswith("ReadTimeout")
    assert client.last_error_at is not None


def test_deadline_status_classified_as_timeout(gemini_client):
    client, _ = gemini_client
    client._client.models.generate_content.side_effect = _api_error(504)

    with pytest.raises(ProviderTimeoutError):
        client.complete("x")


def test_other_api_errors_are_provider_errors(gemini_client):
    client, _ = gemini_client
    client._client.models.generate_content.side_effect = _api_error(500)

    with pytest.raises(ProviderError) as exc_info:
        client.complete("x")

    assert not isinstance(exc_info.value, ProviderTimeoutError)
    assert exc_info.value.error_kind == "provider_error"
    assert exc_info.value.generated is False


def test_network_errors_are_provider_errors(gemini_client):
    client, _ = gemini_client
    client._client.models.generate_content.side_effect = httpx.ConnectError("refused")

    with pytest.raises(ProviderError):
        client.complete("x")
