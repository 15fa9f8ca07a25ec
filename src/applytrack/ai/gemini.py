"""Gemini caller — Google GenAI SDK client."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from applytrack.ai.base import AIRequest, AIResponse, ProviderProfile
from applytrack.ai.cache import inline_context
from applytrack.errors import ConfigurationError, EmptyResponseError, ProviderCallError

logger = logging.getLogger(__name__)


class GeminiCaller:
    """Sends the composed prompt as one content string to ``generate_content``."""

    name = "gemini"

    def __init__(self, profile: ProviderProfile, client: Any = None):
        self.profile = profile
        self._client = client

    def _get_client(self):
        if self._client is None:
            from google import genai
            self._client = genai.Client(api_key=self.profile.api_key)
        return self._client

    def call(self, request: AIRequest) -> AIResponse:
        if not self.profile.configured:
            raise ConfigurationError(self.name, "GEMINI_API_KEY is missing")

        from google.genai import errors as genai_errors
        from google.genai import types as genai_types

        client = self._get_client()
        model = self.profile.default_model
        contents = inline_context(request.prompt, request.cacheable_context)

        kwargs: dict[str, Any] = {"model": model, "contents": contents}
        if request.wants_json:
            kwargs["config"] = genai_types.GenerateContentConfig(
                response_mime_type="application/json",
            )

        try:
            response = client.models.generate_content(**kwargs)
        except genai_errors.APIError as e:
            raise ProviderCallError(self.name, f"Gemini error {e.code}: {e.message}", http_status=e.code) from e
        except genai_errors.UnknownApiResponseError as e:
            raise EmptyResponseError(self.name, f"Gemini response unreadable: {e}") from e
        except httpx.HTTPError as e:
            raise ProviderCallError(self.name, f"Gemini request failed: {e}") from e

        text = response.text
        if not text:
            raise EmptyResponseError(self.name, "Gemini response empty")

        logger.debug("Gemini returned %d chars (model=%s)", len(text), model)
        return AIResponse(text=text, provider_used=self.name, model_used=model)
