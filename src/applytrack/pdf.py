"""Cover letter HTML → PDF through headless Chromium (Playwright)."""

from __future__ import annotations

import re

from applytrack.config import PdfConfig

LETTER_CSS = """
@page { size: A4; margin: 15mm; }
body { font-family: Arial, sans-serif; font-size: 10.5pt; line-height: 1.45; text-align: justify; margin: 0; padding: 0; }
p { margin: 0 0 9pt 0; }
ul { margin: 0 0 9pt 14pt; padding: 0; }
li { margin: 0 0 6pt 0; }
strong { font-weight: 600; }
br + br { line-height: 0; }
"""

_UNSAFE_FILENAME_RE = re.compile(r'[^\w\-. ]+', re.ASCII)


def wrap_letter_html(html: str) -> str:
    """Embed a letter fragment in a complete printable document."""
    return (
        "<!doctype html>\n"
        "<html>\n"
        "  <head>\n"
        '    <meta charset="utf-8" />\n'
        f"    <style>{LETTER_CSS}</style>\n"
        "  </head>\n"
        f"  <body>{html}</body>\n"
        "</html>\n"
    )


def safe_filename(name: str | None, default: str = "lettre_motivation.pdf") -> str:
    """Return a header-safe ``.pdf`` file name."""
    if not name:
        return default
    cleaned = _UNSAFE_FILENAME_RE.sub("_", name).strip(" ._")
    if not cleaned:
        return default
    if not cleaned.lower().endswith(".pdf"):
        cleaned += ".pdf"
    return cleaned


def render_pdf(html: str, config: PdfConfig | None = None) -> bytes:
    """Render a letter fragment to PDF bytes."""
    if not html or not html.strip():
        raise ValueError("Missing HTML content")
    config = config or PdfConfig()

    from playwright.sync_api import sync_playwright

    with sync_playwright() as p:
        browser = p.chromium.launch(headless=True)
        try:
            page = browser.new_page()
            page.set_content(wrap_letter_html(html), wait_until="networkidle")
            return page.pdf(
                format=config.page_format,
                print_background=True,
                margin={
                    "top": config.margin_top,
                    "right": config.margin_right,
                    "bottom": config.margin_bottom,
                    "left": config.margin_left,
                },
            )
        finally:
            browser.close()
