"""Request/response values and the provider caller protocol."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Protocol, runtime_checkable


class OutputMode(str, Enum):
    TEXT = "text"
    JSON = "json"


class ProviderPolicy(str, Enum):
    AUTO = "auto"
    GEMINI = "gemini"
    OPENAI = "openai"


@dataclass(frozen=True)
class ProviderProfile:
    """Identity of one vendor, resolved once from configuration."""

    name: str
    default_model: str
    endpoint: str
    api_key: str = ""

    @property
    def configured(self) -> bool:
        return bool(self.api_key)


@dataclass(frozen=True)
class AIRequest:
    """A single generation request.

    ``cacheable_context`` is large reused content (the CV) kept apart from the
    per-call instructions in ``prompt`` so each vendor can attach it its own way.
    """

    prompt: str
    output_mode: OutputMode = OutputMode.TEXT
    policy: ProviderPolicy = ProviderPolicy.AUTO
    model_override: str | None = None
    cacheable_context: str | None = None

    def __post_init__(self):
        if not self.prompt or not self.prompt.strip():
            raise ValueError("prompt must be a non-empty string")
        # Accept plain strings from callers ("json", "auto", ...)
        object.__setattr__(self, "output_mode", OutputMode(self.output_mode))
        object.__setattr__(self, "policy", ProviderPolicy(self.policy))

    @property
    def wants_json(self) -> bool:
        return self.output_mode is OutputMode.JSON


@dataclass(frozen=True)
class AIResponse:
    text: str
    provider_used: str
    model_used: str


@runtime_checkable
class ProviderCaller(Protocol):
    """One vendor adapter.

    Implementations make exactly one outbound call per ``call`` and raise a
    :class:`~applytrack.errors.ProviderError` subclass on any failure.
    """

    name: str

    def call(self, request: AIRequest) -> AIResponse:
        ...
