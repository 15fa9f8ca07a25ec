"""Structured extraction of a job posting."""

from __future__ import annotations

import json
import logging

from pydantic import ValidationError

from applytrack.ai.base import OutputMode, ProviderPolicy
from applytrack.ai.prompts import build_job_analysis_prompt
from applytrack.ai.router import AIRouter
from applytrack.ai.schemas import JobAnalysis
from applytrack.errors import DownstreamParseError, GenerationError, ProviderError

logger = logging.getLogger(__name__)


def parse_job_analysis(text: str) -> JobAnalysis:
    """Parse the provider's JSON answer.

    The router hands back raw text even in JSON mode; this is where a
    malformed answer is caught.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise DownstreamParseError(f"Job analysis is not valid JSON: {e}", raw_text=text) from e
    if not isinstance(data, dict):
        raise DownstreamParseError("Job analysis must be a JSON object", raw_text=text)
    try:
        return JobAnalysis.model_validate(data)
    except ValidationError as e:
        raise DownstreamParseError(f"Job analysis does not match the expected fields: {e}", raw_text=text) from e


def analyze_job_description(
    router: AIRouter,
    description: str,
    policy: ProviderPolicy | str = ProviderPolicy.AUTO,
    openai_model: str | None = None,
) -> JobAnalysis:
    """Extract company, role, insights and the rest of JobAnalysis from *description*."""
    if not description or not description.strip():
        raise ValueError("Job description is empty")

    prompt = build_job_analysis_prompt(description)
    try:
        text = router.generate(
            prompt,
            output_mode=OutputMode.JSON,
            policy=policy,
            model_override=openai_model,
        )
    except ProviderError as e:
        logger.error("Error analyzing job description: %s", e)
        raise GenerationError(f"Failed to analyze job description: {e}") from e

    return parse_job_analysis(text)
