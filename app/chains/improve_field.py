"""Field-level assistance: improve one form field, or derive lists from free text."""

import json
import logging

from app.core.llm import ParseError, parse_json_array
from app.core.logging import get_logger, log_with_context
from app.core.offline_content import (
    demo_field_improvement,
    enhanced_entity_fields,
    smart_columns,
    smart_filters,
)
from app.core.orchestrator import AggregatedGenerationError, Orchestrator
from app.core.prompt_builder import (
    build_field_prompt,
    build_fields_extraction_prompt,
    build_list_extraction_prompt,
)
from app.core.schemas_generation import GenerationTask, TaskKind

logger = get_logger(__name__)

MAX_FILTERS = 8
MAX_COLUMNS = 10

FILTERS_FROM_TEXT = "filtersFromText"
COLUMNS_FROM_TEXT = "columnsFromText"
FIELDS_FROM_TEXT = "fieldsFromText"


def clean_field_response(raw: str | None) -> str:
    """Trim and drop one pair of surrounding quotes."""
    cleaned = (raw or "").strip()
    if len(cleaned) >= 2 and cleaned[0] == cleaned[-1] and cleaned[0] in "\"'":
        cleaned = cleaned[1:-1].strip()
    return cleaned


def _list_lines(raw: str, header_word: str, limit: int) -> list[str]:
    lines = []
    for line in raw.splitlines():
        line = line.strip().lstrip("-•* ").strip()
        if not line or header_word in line.lower() or ":" in line:
            continue
        lines.append(line)
    return lines[:limit]


async def _generate_text(
    provider_id: str, kind: TaskKind, prompt: str, orchestrator: Orchestrator
) -> str | None:
    """Run a task and return its text, or None when every provider failed."""
    try:
        result = await orchestrator.generate(
            GenerationTask(provider_id=provider_id, kind=kind, payload=prompt)
        )
    except AggregatedGenerationError as e:
        logger.warning(f"{kind.value} failed on every provider: {e}")
        return None
    return result.content


async def filters_from_text(text: str | None, provider_id: str, orchestrator: Orchestrator) -> str:
    """Search filters described in free text, one per line."""
    if not (text or "").strip():
        return smart_filters("")
    if Orchestrator.is_offline(provider_id):
        return demo_field_improvement("filtros", text, FILTERS_FROM_TEXT)

    raw = await _generate_text(
        provider_id,
        TaskKind.FIELD_IMPROVEMENT,
        build_list_extraction_prompt("filters", text),
        orchestrator,
    )
    if raw is None:
        return demo_field_improvement("filtros", text, FILTERS_FROM_TEXT)
    filters = _list_lines(raw, "filtros", MAX_FILTERS)
    return "\n".join(filters) if filters else smart_filters(text)


async def columns_from_text(text: str | None, provider_id: str, orchestrator: Orchestrator) -> str:
    """Result columns described in free text, one per line."""
    if not (text or "").strip():
        return smart_columns("")
    if Orchestrator.is_offline(provider_id):
        return demo_field_improvement("columnas", text, COLUMNS_FROM_TEXT)

    raw = await _generate_text(
        provider_id,
        TaskKind.FIELD_IMPROVEMENT,
        build_list_extraction_prompt("columns", text),
        orchestrator,
    )
    if raw is None:
        return demo_field_improvement("columnas", text, COLUMNS_FROM_TEXT)
    columns = _list_lines(raw, "columnas", MAX_COLUMNS)
    return "\n".join(columns) if columns else smart_columns(text)


async def fields_from_text(text: str | None, provider_id: str, orchestrator: Orchestrator) -> str:
    """
    Entity fields described in free text, as a JSON array string.

    The array is isolated between the first '[' and the last ']' of the answer;
    unusable answers fall back to keyword detection over the text itself.
    """
    if Orchestrator.is_offline(provider_id) or not (text or "").strip():
        fields = enhanced_entity_fields(text or "")
        return json.dumps(fields, ensure_ascii=False, indent=2)

    raw = await _generate_text(
        provider_id, TaskKind.EXTRACTION, build_fields_extraction_prompt(text), orchestrator
    )
    fields = None
    if raw is not None:
        try:
            fields = [f for f in parse_json_array(raw) if isinstance(f, dict) and f.get("name")]
        except ParseError as e:
            logger.warning(f"Entity fields payload unusable: {e}")
    if not fields:
        fields = enhanced_entity_fields(text)
    return json.dumps(fields, ensure_ascii=False, indent=2)


_LIST_EXTRACTORS = {
    FILTERS_FROM_TEXT: filters_from_text,
    COLUMNS_FROM_TEXT: columns_from_text,
    FIELDS_FROM_TEXT: fields_from_text,
}


async def improve_field(
    field_name: str,
    field_value: str | None,
    field_type: str | None,
    context: dict | None,
    provider_id: str,
    orchestrator: Orchestrator,
) -> str:
    """
    Improve a single form field.

    Offline requests, failed chains and empty answers all degrade to the
    deterministic improvement, so callers always get a value back.

    Args:
        field_name: Field key or label
        field_value: Current value
        field_type: Type hint (also selects the from-text extractors)
        context: Client context; fullFormData supplies project details
        provider_id: Selected provider
        orchestrator: Orchestrator holding the provider registry

    Returns:
        Improved value
    """
    extractor = _LIST_EXTRACTORS.get(field_type or "")
    if extractor is not None:
        return await extractor(field_value, provider_id, orchestrator)

    if Orchestrator.is_offline(provider_id):
        return demo_field_improvement(field_name, field_value, field_type)

    prompt = build_field_prompt(field_name, field_value, field_type, context)
    raw = await _generate_text(provider_id, TaskKind.FIELD_IMPROVEMENT, prompt, orchestrator)
    improved = clean_field_response(raw)
    if not improved:
        log_with_context(
            logger,
            logging.INFO,
            "Falling back to offline field improvement",
            field_name=field_name,
            field_type=field_type,
        )
        return demo_field_improvement(field_name, field_value, field_type)
    return improved
