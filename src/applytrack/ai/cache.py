"""Attach the cacheable context (the CV) to a request, per vendor.

Gemini has no prompt caching here, so the context is simply prepended to the
prompt on every call. This only mimics the shape of a cached call: no tokens
are saved. The chat-completions vendor gets the context as its own system
message marked ``cache_control: ephemeral`` so repeated calls can reuse it.
"""

from __future__ import annotations

CONTEXT_LABEL = "CV (cacheable)"


def inline_context(prompt: str, context: str | None, label: str = CONTEXT_LABEL) -> str:
    """Return a single prompt string with the context prepended, if any."""
    if not context:
        return prompt
    return f"{label}:\n{context}\n\n{prompt}"


def cached_messages(prompt: str, context: str | None) -> list[dict]:
    """Return chat messages: an ephemeral-cache system block (when non-empty) then the prompt."""
    messages: list[dict] = []
    if context:
        messages.append({
            "role": "system",
            "content": context,
            "cache_control": {"type": "ephemeral"},
        })
    messages.append({"role": "user", "content": prompt})
    return messages
