"""Shared FastAPI dependencies."""

from functools import lru_cache

from app.core.orchestrator import Orchestrator
from app.core.providers import build_provider_registry


@lru_cache
def get_orchestrator() -> Orchestrator:
    """Process-wide orchestrator over the configured provider registry."""
    return Orchestrator(build_provider_registry())
