"""CV-versus-offer gap analysis."""

from __future__ import annotations

import logging

from applytrack.ai.base import OutputMode, ProviderPolicy
from applytrack.ai.prompts import build_gap_analysis_prompt
from applytrack.ai.router import AIRouter
from applytrack.errors import GenerationError, ProfileIncompleteError, ProviderError
from applytrack.models import UserProfile

logger = logging.getLogger(__name__)


def analyze_gap(
    router: AIRouter,
    profile: UserProfile | None,
    job_description: str,
    policy: ProviderPolicy | str = ProviderPolicy.AUTO,
    openai_model: str | None = None,
) -> str:
    """Return a Markdown relevance score, strengths and gaps for the offer."""
    cv_text = profile.cv_content if profile else None
    if not cv_text:
        raise ProfileIncompleteError("CV introuvable dans le profil.")

    prompt = build_gap_analysis_prompt(job_description, profile.bio_preferences)
    try:
        text = router.generate(
            prompt,
            output_mode=OutputMode.TEXT,
            policy=policy,
            model_override=openai_model,
            cacheable_context=cv_text,
        )
    except ProviderError as e:
        logger.error("Error analyzing gap: %s", e)
        raise GenerationError(
            f"Failed to analyze gap: {e}. Vérifiez que votre CV est bien enregistré dans le profil."
        ) from e
    return text.strip()
