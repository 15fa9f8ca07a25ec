"""OpenAI chat-completions caller — plain HTTPS POST with a bearer key."""

from __future__ import annotations

import logging

import httpx

from applytrack.ai.base import AIRequest, AIResponse, ProviderProfile
from applytrack.ai.cache import cached_messages
from applytrack.errors import ConfigurationError, EmptyResponseError, ProviderCallError

logger = logging.getLogger(__name__)


def _first_choice_content(data) -> str | None:
    """Return ``choices[0].message.content`` if every level has the expected shape."""
    if not isinstance(data, dict):
        return None
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    choice = choices[0]
    if not isinstance(choice, dict):
        return None
    message = choice.get("message")
    if not isinstance(message, dict):
        return None
    content = message.get("content")
    if not isinstance(content, str) or not content:
        return None
    return content


class OpenAICaller:
    """Chat-completions client for OpenAI or any compatible endpoint."""

    name = "openai"

    def __init__(
        self,
        profile: ProviderProfile,
        timeout: float = 120.0,
        transport: httpx.BaseTransport | None = None,
    ):
        self.profile = profile
        self.timeout = timeout
        self._transport = transport

    def build_payload(self, request: AIRequest) -> dict:
        """Return the JSON body for *request* (exposed for inspection in tests)."""
        payload: dict = {
            "model": request.model_override or self.profile.default_model,
            "messages": cached_messages(request.prompt, request.cacheable_context),
        }
        if request.wants_json:
            payload["response_format"] = {"type": "json_object"}
        return payload

    def call(self, request: AIRequest) -> AIResponse:
        if not self.profile.configured:
            raise ConfigurationError(self.name, "OpenAI API key not configured")

        payload = self.build_payload(request)
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.profile.api_key}",
        }

        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                resp = client.post(
                    f"{self.profile.endpoint}/chat/completions",
                    json=payload,
                    headers=headers,
                )
        except httpx.HTTPError as e:
            raise ProviderCallError(self.name, f"OpenAI request failed: {e}") from e

        if not resp.is_success:
            raise ProviderCallError(
                self.name,
                f"OpenAI error {resp.status_code}: {resp.text}",
                http_status=resp.status_code,
            )

        try:
            data = resp.json()
        except ValueError as e:
            raise EmptyResponseError(self.name, "OpenAI response is not JSON", http_status=resp.status_code) from e

        content = _first_choice_content(data)
        if content is None:
            raise EmptyResponseError(self.name, "OpenAI response empty", http_status=resp.status_code)

        used_model = data.get("model") or payload["model"]
        logger.debug("OpenAI returned %d chars (model=%s)", len(content), used_model)
        return AIResponse(text=content, provider_used=self.name, model_used=used_model)
