"""Job posting metadata: a few meta-tag regexes over the fetched HTML."""

from __future__ import annotations

import logging
import re

import httpx

from applytrack.errors import ScrapeError
from applytrack.models import JobMetadata

logger = logging.getLogger(__name__)


def _meta(attr: str, name: str) -> re.Pattern:
    return re.compile(
        rf"""<meta[^>]+{attr}=["']{re.escape(name)}["'][^>]+content=(["'])(.+?)\1[^>]*>""",
        re.IGNORECASE,
    )


def _link(rel: str) -> re.Pattern:
    return re.compile(
        rf"""<link[^>]+rel=["']{re.escape(rel)}["'][^>]+href=(["'])(.+?)\1[^>]*>""",
        re.IGNORECASE,
    )


# Candidates tried in order, first match wins
TITLE_PATTERNS = [
    _meta("property", "og:title"),
    _meta("name", "twitter:title"),
    re.compile(r"<title>([^<]+)</title>", re.IGNORECASE),
]
COMPANY_PATTERNS = [
    _meta("property", "og:site_name"),
    _meta("name", "application-name"),
]
LOGO_PATTERNS = [
    _meta("property", "og:image"),
    _link("icon"),
    _link("shortcut icon"),
]
LOCATION_PATTERNS = [
    _meta("property", "og:locale"),
]
DESCRIPTION_PATTERNS = [
    _meta("name", "description"),
    _meta("property", "og:description"),
    _meta("name", "twitter:description"),
]

_SCRIPT_RE = re.compile(r"<script[^>]*>[\s\S]*?</script>", re.IGNORECASE)
_STYLE_RE = re.compile(r"<style[^>]*>[\s\S]*?</style>", re.IGNORECASE)
_TAG_RE = re.compile(r"<[^>]+>")
_WS_RE = re.compile(r"\s+")


def _first(html: str, patterns: list[re.Pattern]) -> str | None:
    for pattern in patterns:
        m = pattern.search(html)
        # the value is always the last group; quote groups come first
        if m and m.groups()[-1].strip():
            return m.groups()[-1].strip()
    return None


def extract_meta(html: str) -> JobMetadata:
    """Pull title, company, logo, locale and description from meta tags."""
    return JobMetadata(
        title=_first(html, TITLE_PATTERNS),
        company=_first(html, COMPANY_PATTERNS),
        company_logo=_first(html, LOGO_PATTERNS),
        location=_first(html, LOCATION_PATTERNS),
        description=_first(html, DESCRIPTION_PATTERNS),
    )


def html_to_text(html: str) -> str:
    """Visible text with scripts, styles and tags removed and whitespace collapsed."""
    text = _SCRIPT_RE.sub(" ", html)
    text = _STYLE_RE.sub(" ", text)
    text = _TAG_RE.sub(" ", text)
    return _WS_RE.sub(" ", text).strip()


def fetch_job_metadata(
    url: str,
    client: httpx.Client | None = None,
    timeout: float = 20.0,
    user_agent: str | None = None,
    description_chars: int = 1600,
) -> JobMetadata:
    """Fetch *url* and return its metadata.

    When the page has no description meta tag, the first ``description_chars``
    characters of its visible text are used instead.
    """
    headers = {"User-Agent": user_agent} if user_agent else {}
    try:
        if client is None:
            with httpx.Client(timeout=timeout, follow_redirects=True) as own_client:
                resp = own_client.get(url, headers=headers)
        else:
            resp = client.get(url, headers=headers)
    except httpx.HTTPError as e:
        logger.error("job-metadata fetch failed for %s: %s", url, e)
        raise ScrapeError(f"Fetch failed: {e}") from e

    html = resp.text
    meta = extract_meta(html)
    if not meta.description:
        meta.description = html_to_text(html)[:description_chars] or None
    return meta
