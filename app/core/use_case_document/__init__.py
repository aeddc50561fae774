"""Deterministic .docx rendering of a use case form.

Structure always comes from the form. Generated prose contributes at most the
description narrative, and only when the form has no description of its own.
"""

import html
import io
import logging
import re
from datetime import date

from docx import Document

from app.core.config import get_settings
from app.core.content_sanitizer import sanitize_generated_content
from app.core.logging import get_logger, log_with_context
from app.core.schemas_use_cases import UseCaseForm
from app.core.use_case_document.assets import AssetError, load_image
from app.core.use_case_document.header_footer import add_footer, add_header, set_margins
from app.core.use_case_document.sections import (
    add_conditions,
    add_description,
    add_flows,
    add_project_info,
    add_revision_history,
    add_rules_and_requirements,
    add_test_cases,
    add_wireframes,
)
from app.core.use_case_document.styles import add_title, configure_base_style

logger = get_logger(__name__)

_FIRST_PARAGRAPH_RE = re.compile(r"<p\b[^>]*>(.*?)</p>", re.IGNORECASE | re.DOTALL)
_TAG_RE = re.compile(r"<[^>]+>")


def narrative_from_content(generated_content: str | None) -> str | None:
    """Plain text of the first paragraph of sanitized generated content."""
    if not generated_content:
        return None
    match = _FIRST_PARAGRAPH_RE.search(sanitize_generated_content(generated_content))
    if not match:
        return None
    text = html.unescape(_TAG_RE.sub("", match.group(1)))
    return " ".join(text.split()) or None


def _header_logo(custom_header_image: str | None, asset_root: str, logo_path: str | None):
    reference = custom_header_image or logo_path
    if not reference:
        return None
    try:
        return load_image(reference, asset_root)
    except AssetError as e:
        log_with_context(logger, logging.WARNING, "Header logo unavailable", error=str(e))
        return None


def build_use_case_document(
    form: UseCaseForm,
    *,
    custom_header_image: str | None = None,
    generated_content: str | None = None,
    today: date | None = None,
) -> bytes:
    """
    Render the complete use case document.

    Args:
        form: Form data; the source of every structural section
        custom_header_image: Image reference overriding the configured header logo
        generated_content: Provider HTML; its first paragraph is the fallback description
        today: Date for the revision table (defaults to the current date)

    Returns:
        .docx file bytes
    """
    settings = get_settings()
    document = Document()
    configure_base_style(document)

    section = document.sections[0]
    set_margins(section)
    add_header(
        section,
        form.project_name,
        _header_logo(custom_header_image, settings.ASSET_ROOT, settings.HEADER_LOGO_PATH),
    )
    add_footer(section, form.use_case_name)

    narrative = None if form.description else narrative_from_content(generated_content)

    add_title(document, form.use_case_name or "CASO DE USO")
    add_project_info(document, form)
    add_description(document, form, narrative)
    add_flows(document, form)
    add_rules_and_requirements(document, form)
    add_conditions(document, form)
    add_wireframes(document, form, settings.ASSET_ROOT)
    add_test_cases(document, form)
    add_revision_history(document, today)

    buffer = io.BytesIO()
    document.save(buffer)
    log_with_context(
        logger,
        logging.INFO,
        "Use case document built",
        use_case_type=form.use_case_type.value,
        size_bytes=buffer.tell(),
    )
    return buffer.getvalue()


__all__ = ["AssetError", "build_use_case_document", "narrative_from_content"]
