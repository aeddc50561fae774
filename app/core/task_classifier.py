"""Task classification for provider call budgets.

Every generation request carries an explicit TaskKind. The classifier maps a kind to
the call profile (token budget, temperature, whether JSON is expected).
"""

from dataclasses import dataclass

from app.core.schemas_generation import TaskKind


@dataclass(frozen=True)
class TaskProfile:
    """Provider call parameters for one task kind."""

    kind: TaskKind
    max_tokens: int
    temperature: float
    expects_json: bool


DEFAULT_MAX_TOKENS = 4000

TASK_PROFILES: dict[TaskKind, TaskProfile] = {
    TaskKind.DOCUMENT: TaskProfile(TaskKind.DOCUMENT, DEFAULT_MAX_TOKENS, 0.3, False),
    TaskKind.DOCUMENT_EDIT: TaskProfile(TaskKind.DOCUMENT_EDIT, DEFAULT_MAX_TOKENS, 0.3, False),
    TaskKind.DESCRIPTION_EXPANSION: TaskProfile(
        TaskKind.DESCRIPTION_EXPANSION, DEFAULT_MAX_TOKENS, 0.5, False
    ),
    TaskKind.FIELD_IMPROVEMENT: TaskProfile(
        TaskKind.FIELD_IMPROVEMENT, DEFAULT_MAX_TOKENS, 0.3, False
    ),
    TaskKind.TEST_GENERATION: TaskProfile(TaskKind.TEST_GENERATION, 12000, 0.3, True),
    TaskKind.EXTRACTION: TaskProfile(TaskKind.EXTRACTION, 10000, 0.1, True),
}


def classify_task(kind: TaskKind | str) -> TaskProfile:
    """
    Get the call profile for a task kind.

    Args:
        kind: TaskKind or its string value

    Returns:
        TaskProfile for the kind

    Raises:
        ValueError: If kind is not a known TaskKind
    """
    return TASK_PROFILES[TaskKind(kind)]

