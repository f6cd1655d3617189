import logging
from typing import Optional
from datetime import datetime, timezone

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from ..ai.errors import ProviderError, ProviderTimeoutError, ProviderUnavailableError
from ..settings import settings

logger = logging.getLogger("pantrypal.ai")

# Status codes the API uses for deadline problems
_TIMEOUT_STATUS_CODES = {408, 504}


class AIClient:
    """Thin wrapper over the Gemini text API.

    Every call returns the provider's raw text. Parsing and validation are
    the pipeline's job; this class only classifies transport failures.
    """
    _instance = None

    def __init__(self):
        self.api_key = settings.gemini_api_key
        self.mode = settings.ai_mode  # "mock" or "gemini"
        self.timeout_seconds = settings.ai_timeout_seconds
        self._client: Optional[genai.Client] = None
        self.last_error: Optional[str] = None
        self.last_error_at: Optional[datetime] = None

        if self.mode == "gemini" and self.api_key:
            self._client = genai.Client(
                api_key=self.api_key,
                http_options=types.HttpOptions(timeout=int(self.timeout_seconds * 1000)),
            )

    @classmethod
    def get_instance(cls):
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def is_available(self) -> bool:
        return self.mode == "gemini" and self._client is not None

    def _record_error(self, e: Exception) -> None:
        self.last_error = f"{e.__class__.__name__}: {str(e)}"
        self.last_error_at = datetime.now(timezone.utc)

    def complete(
        self,
        prompt: str,
        *,
        system_instruction: Optional[str] = None,
        model: Optional[str] = None,
        temperature: float = 0.7,
        json_output: bool = True,
        max_output_tokens: Optional[int] = None,
    ) -> str:
        """
        Send one system/user turn pair and return the raw completion text.

        Raises ProviderUnavailableError if AI is disabled, ProviderTimeoutError
        when the deadline passes and ProviderError for any other API failure.
        """
        if not self.is_available():
            logger.warning("AI is not available (mode=%s), refusing generation", self.mode)
            raise ProviderUnavailableError(
                "AI generation is not configured. Set AI_MODE=gemini and GEMINI_API_KEY."
            )

        model_id = model or settings.gemini_text_model
        config = types.GenerateContentConfig(
            system_instruction=system_instruction,
            temperature=temperature,
            response_mime_type="application/json" if json_output else "text/plain",
            max_output_tokens=max_output_tokens,
        )

        try:
            logger.info("Calling model=%s temperature=%s json=%s", model_id, temperature, json_output)
            response = self._client.models.generate_content(
                model=model_id,
                contents=prompt,
                config=config,
            )
        except httpx.TimeoutException as e:
            self._record_error(e)
            logger.error(f"Gemini call timed out after {self.timeout_seconds}s: {e}")
            raise ProviderTimeoutError(
                "The AI provider did not respond in time. Nothing was generated; please retry."
            ) from e
        except genai_errors.APIError as e:
            self._record_error(e)
            logger.error(f"Gemini call failed: {e}")
            if getattr(e, "code", None) in _TIMEOUT_STATUS_CODES:
                raise ProviderTimeoutError(
                    "The AI provider did not respond in time. Nothing was generated; please retry."
                ) from e
            raise ProviderError(
                "The AI provider request failed. Nothing was generated; please retry."
            ) from e
        except httpx.HTTPError as e:
            self._record_error(e)
            logger.error(f"Gemini network error: {e}")
            raise ProviderError(
                "Could not reach the AI provider. Nothing was generated; please retry."
            ) from e

        return response.text or ""


# Singleton instance access
ai_client = AIClient.get_instance()
