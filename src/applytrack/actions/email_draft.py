"""Short application email that accompanies the CV and letter."""

from __future__ import annotations

import logging

from applytrack.actions.cover_letter import require_contact
from applytrack.ai.base import OutputMode, ProviderPolicy
from applytrack.ai.prompts import build_email_prompt
from applytrack.ai.router import AIRouter
from applytrack.config import ProfileDefaults
from applytrack.errors import GenerationError, ProviderError
from applytrack.models import UserProfile

logger = logging.getLogger(__name__)


def generate_email(
    router: AIRouter,
    profile: UserProfile | None,
    job_description: str,
    user_note: str | None = None,
    policy: ProviderPolicy | str = ProviderPolicy.AUTO,
    openai_model: str | None = None,
    defaults: ProfileDefaults | None = None,
) -> str:
    """Return a plain-text email: subject line then a 50-80 word body."""
    profile = require_contact(profile)
    defaults = defaults or ProfileDefaults()

    prompt = build_email_prompt(
        job_description=job_description,
        full_name=profile.full_name.strip(),
        city=(profile.city or "").strip() or defaults.email_city,
        bio_preferences=profile.bio_preferences,
        note=user_note,
    )

    try:
        text = router.generate(
            prompt,
            output_mode=OutputMode.TEXT,
            policy=policy,
            model_override=openai_model,
            cacheable_context=profile.cv_content or "",
        )
    except ProviderError as e:
        logger.error("Email generation error: %s", e)
        raise GenerationError(
            f"Failed to generate email: {e}. Vérifiez que votre CV est bien enregistré dans le profil."
        ) from e
    return text.strip()
