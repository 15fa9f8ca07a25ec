"""AI provider routing."""

from __future__ import annotations

from applytrack.ai.base import AIRequest, AIResponse, OutputMode, ProviderCaller, ProviderPolicy, ProviderProfile
from applytrack.ai.router import AIRouter, Attempt, RouteResult

__all__ = [
    "AIRequest",
    "AIResponse",
    "AIRouter",
    "Attempt",
    "OutputMode",
    "ProviderCaller",
    "ProviderPolicy",
    "ProviderProfile",
    "RouteResult",
]
