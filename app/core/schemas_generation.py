"""Types exchanged between the prompt builder, the orchestrator and the providers."""

from dataclasses import dataclass, field
from enum import Enum


class ProviderId(str, Enum):
    """Provider ids accepted from clients."""

    DEMO = "demo"
    OPENAI = "openai"
    CLAUDE = "claude"
    GROK = "grok"
    GEMINI = "gemini"
    COPILOT = "copilot"


OFFLINE_PROVIDER_ID = ProviderId.DEMO.value


class TaskKind(str, Enum):
    """What a generation request is for."""

    DOCUMENT = "document"
    FIELD_IMPROVEMENT = "field_improvement"
    TEST_GENERATION = "test_generation"
    EXTRACTION = "extraction"
    DESCRIPTION_EXPANSION = "description_expansion"
    DOCUMENT_EDIT = "document_edit"


@dataclass
class GenerationTask:
    """One unit of work for the orchestrator."""

    provider_id: str
    kind: TaskKind
    payload: str
    system_prompt: str | None = None


@dataclass
class ProviderAttempt:
    """A provider that was tried; error is only set when it failed."""

    provider: str
    error: str | None = None


@dataclass
class GenerationResult:
    """Non-empty text returned by the first provider that answered."""

    content: str
    provider: str
    attempts: list[ProviderAttempt] = field(default_factory=list)
