"""Cover letter drafting (HTML)."""

from __future__ import annotations

import logging
import re
from datetime import date

from applytrack.ai.base import OutputMode, ProviderPolicy
from applytrack.ai.prompts import build_cover_letter_prompt, french_long_date
from applytrack.ai.router import AIRouter
from applytrack.config import ProfileDefaults
from applytrack.errors import GenerationError, ProfileIncompleteError, ProviderError
from applytrack.models import UserProfile

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"```(?:html?)?")


def strip_code_fences(text: str) -> str:
    """Remove Markdown code fences some models wrap HTML in."""
    return _FENCE_RE.sub("", text).strip()


def _clean(value: str | None) -> str:
    return value.strip() if value else ""


def require_contact(profile: UserProfile | None) -> UserProfile:
    """Letters and emails need at least the candidate's name and email."""
    if profile is None or not _clean(profile.full_name) or not _clean(profile.email):
        raise ProfileIncompleteError("Complétez vos coordonnées dans Profil (nom + email au minimum).")
    return profile


def generate_cover_letter(
    router: AIRouter,
    profile: UserProfile | None,
    job_description: str,
    policy: ProviderPolicy | str = ProviderPolicy.AUTO,
    openai_model: str | None = None,
    user_context: str | None = None,
    defaults: ProfileDefaults | None = None,
    today: date | None = None,
) -> str:
    """Return the letter as an HTML fragment (``<p>``, ``<strong>``, ``<br>``, lists)."""
    profile = require_contact(profile)
    defaults = defaults or ProfileDefaults()
    today = today or date.today()

    city = _clean(profile.city) or defaults.city
    if isinstance(profile.availability_duration_months, int):
        duration = f"{profile.availability_duration_months} mois"
    else:
        duration = defaults.availability_duration

    prompt = build_cover_letter_prompt(
        job_description=job_description,
        full_name=_clean(profile.full_name),
        email=_clean(profile.email),
        phone=_clean(profile.phone),
        address=_clean(profile.address),
        city=city,
        school=_clean(profile.school) or defaults.school,
        availability_start=_clean(profile.availability_start) or defaults.availability_start,
        availability_duration=duration,
        today=french_long_date(today),
        bio_preferences=profile.bio_preferences,
        user_context=user_context,
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
        logger.error("Error generating cover letter: %s", e)
        raise GenerationError(
            f"Failed to generate letter: {e}. Vérifiez que votre CV est bien enregistré dans le profil."
        ) from e
    return strip_code_fences(text)
