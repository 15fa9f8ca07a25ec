"""AI router — picks a provider per call and falls back from Gemini to OpenAI."""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from applytrack.ai.base import (
    AIRequest,
    AIResponse,
    OutputMode,
    ProviderCaller,
    ProviderPolicy,
)
from applytrack.errors import ProviderError

if TYPE_CHECKING:
    from applytrack.config import AIConfig

logger = logging.getLogger(__name__)


@dataclass
class Attempt:
    """Outcome of one provider call: exactly one of ``response`` / ``error`` is set."""

    provider: str
    response: AIResponse | None = None
    error: ProviderError | None = None

    @property
    def ok(self) -> bool:
        return self.response is not None


@dataclass
class RouteResult:
    """Outcome of a full routing sequence, attempts kept in call order."""

    attempts: list[Attempt] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return bool(self.attempts) and self.attempts[-1].ok

    @property
    def response(self) -> AIResponse | None:
        return self.attempts[-1].response if self.attempts else None

    @property
    def error(self) -> ProviderError | None:
        return self.attempts[-1].error if self.attempts else None

    @property
    def providers_tried(self) -> list[str]:
        return [a.provider for a in self.attempts]


class AIRouter:
    """Central entry point for every AI call.

    Usage::

        router = AIRouter.from_config(config.ai)
        text = router.generate("Summarise this offer: ...", output_mode="json")

    Ordering is fixed: Gemini (primary) then OpenAI (secondary). Only the
    ``auto`` policy falls back, and only once.
    """

    def __init__(self, primary: ProviderCaller, secondary: ProviderCaller):
        self.primary = primary
        self.secondary = secondary

    @classmethod
    def from_config(cls, ai_config: AIConfig) -> AIRouter:
        from applytrack.ai.gemini import GeminiCaller
        from applytrack.ai.openai_chat import OpenAICaller

        return cls(
            primary=GeminiCaller(ai_config.gemini_profile()),
            secondary=OpenAICaller(ai_config.openai_profile(), timeout=ai_config.request_timeout),
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def generate(
        self,
        prompt: str,
        output_mode: OutputMode | str = OutputMode.TEXT,
        policy: ProviderPolicy | str = ProviderPolicy.AUTO,
        model_override: str | None = None,
        cacheable_context: str | None = None,
    ) -> str:
        """Return the generated text or raise the last provider's error.

        The text is returned as-is: in JSON mode it is not parsed here, so a
        malformed answer surfaces later as the caller's parse failure.
        """
        request = AIRequest(
            prompt=prompt,
            output_mode=output_mode,
            policy=policy,
            model_override=model_override or None,
            cacheable_context=cacheable_context,
        )
        result = self.route(request)
        if not result.ok:
            raise result.error
        return result.response.text

    def route(self, request: AIRequest) -> RouteResult:
        """Run the attempt sequence for *request* without raising provider errors."""
        result = RouteResult()

        if request.policy is ProviderPolicy.GEMINI:
            result.attempts.append(self._attempt(self.primary, request))
            return result

        if request.policy is ProviderPolicy.OPENAI:
            result.attempts.append(self._attempt(self.secondary, request))
            return result

        first = self._attempt(self.primary, request)
        result.attempts.append(first)
        if first.ok:
            return result

        logger.warning(
            "%s failed, attempting %s fallback: %s",
            self.primary.name, self.secondary.name, first.error,
        )
        result.attempts.append(self._attempt(self.secondary, request))
        if not result.ok:
            logger.error("%s fallback failed: %s", self.secondary.name, result.error)
        return result

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _attempt(self, caller: ProviderCaller, request: AIRequest) -> Attempt:
        # The model override names a chat-completions model; the primary keeps its own.
        if caller is self.primary and request.model_override:
            request = dataclasses.replace(request, model_override=None)
        try:
            response = caller.call(request)
        except ProviderError as e:
            return Attempt(provider=caller.name, error=e)

        cache_note = ""
        if caller is self.secondary:
            cache_note = " (cacheable CV used)" if request.cacheable_context else " (cacheable CV skipped)"
        logger.info(
            "Provider=%s model=%s success%s",
            response.provider_used, response.model_used, cache_note,
        )
        return Attempt(provider=caller.name, response=response)
