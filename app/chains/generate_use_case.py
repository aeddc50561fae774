"""Generate and edit use case documents through the provider fallback chain."""

import logging
import re
from dataclasses import dataclass, field

from app.core.config import get_settings
from app.core.content_sanitizer import sanitize_generated_content
from app.core.logging import get_logger, log_with_context
from app.core.offline_content import demo_document, demo_edit
from app.core.orchestrator import AggregatedGenerationError, Orchestrator
from app.core.prompt_builder import (
    build_edit_prompt,
    build_expansion_prompt,
    build_rules,
    build_use_case_prompt,
)
from app.core.schemas_generation import (
    OFFLINE_PROVIDER_ID,
    GenerationTask,
    ProviderAttempt,
    TaskKind,
)
from app.core.schemas_use_cases import UseCaseForm
from app.core.section_enforcer import ensure_required_sections

logger = get_logger(__name__)

_HTML_TAG_RE = re.compile(r"<[^>]+>")


@dataclass
class GeneratedUseCase:
    """Outcome of a generate request."""

    content: str
    form: UseCaseForm
    provider: str
    expanded_description: str | None = None
    attempts: list[ProviderAttempt] = field(default_factory=list)


def word_count(text: str | None) -> int:
    return len((text or "").split())


def strip_html(text: str) -> str:
    return _HTML_TAG_RE.sub("", text or "").strip()


async def expand_description(form: UseCaseForm, orchestrator: Orchestrator) -> str | None:
    """
    Expand a short description into two paragraphs.

    Runs once per request. Returns None when the description is long enough or
    every provider failed; the caller keeps the original description then.
    """
    min_words = get_settings().DESCRIPTION_MIN_WORDS
    if word_count(form.description) >= min_words:
        return None

    task = GenerationTask(
        provider_id=form.ai_model.value,
        kind=TaskKind.DESCRIPTION_EXPANSION,
        payload=build_expansion_prompt(form),
    )
    try:
        result = await orchestrator.generate(task)
    except AggregatedGenerationError as e:
        logger.warning(f"Description expansion failed, keeping original: {e}")
        return None

    expanded = strip_html(result.content)
    if not expanded:
        return None

    log_with_context(
        logger,
        logging.INFO,
        "Description expanded",
        provider=result.provider,
        words_before=word_count(form.description),
        words_after=word_count(expanded),
    )
    return expanded


async def generate_use_case(form: UseCaseForm, orchestrator: Orchestrator) -> GeneratedUseCase:
    """
    Generate the HTML narrative of a use case.

    Offline requests get deterministic local content and never touch a provider.
    Otherwise a short description is expanded first, the document prompt runs
    through the fallback chain, and the answer is sanitized and completed with any
    mandatory section the provider dropped.

    Args:
        form: Validated form snapshot
        orchestrator: Orchestrator holding the provider registry

    Returns:
        GeneratedUseCase with the content and the (possibly updated) form

    Raises:
        AggregatedGenerationError: If every provider failed on the document task
    """
    if Orchestrator.is_offline(form.ai_model.value):
        logger.info("Offline provider selected, building demo document")
        return GeneratedUseCase(
            content=demo_document(form),
            form=form,
            provider=OFFLINE_PROVIDER_ID,
        )

    expanded = await expand_description(form, orchestrator)
    if expanded:
        form = form.model_copy(update={"description": expanded})

    prompt = build_use_case_prompt(form, build_rules(form))
    result = await orchestrator.generate(
        GenerationTask(provider_id=form.ai_model.value, kind=TaskKind.DOCUMENT, payload=prompt)
    )

    content = sanitize_generated_content(result.content)
    content = ensure_required_sections(content, form.use_case_type)

    return GeneratedUseCase(
        content=content,
        form=form,
        provider=result.provider,
        expanded_description=expanded,
        attempts=result.attempts,
    )


async def edit_use_case(
    content: str,
    instructions: str,
    provider_id: str,
    orchestrator: Orchestrator,
) -> str:
    """Apply free-text edit instructions to existing content.

    Raises:
        AggregatedGenerationError: If every provider failed
    """
    if Orchestrator.is_offline(provider_id):
        return demo_edit(content, instructions)

    result = await orchestrator.generate(
        GenerationTask(
            provider_id=provider_id,
            kind=TaskKind.DOCUMENT_EDIT,
            payload=build_edit_prompt(content, instructions),
        )
    )
    return sanitize_generated_content(result.content)
