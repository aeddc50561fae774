"""Pytest configuration and fixtures."""

import os

import pytest

from app.core.config import get_settings


@pytest.fixture(scope="session", autouse=True)
def setup_test_env():
    """Set up test environment variables."""
    os.environ["USECASE_ENGINE_ENV"] = "test"
    os.environ["PROVIDER_FALLBACK_ORDER"] = "copilot,gemini,openai,claude,grok"
    for key in (
        "OPENAI_API_KEY",
        "ANTHROPIC_API_KEY",
        "XAI_API_KEY",
        "GEMINI_API_KEY",
        "COPILOT_API_KEY",
        "HEADER_LOGO_PATH",
    ):
        os.environ.pop(key, None)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def clear_store():
    """Start every test with an empty record store."""
    from app.db.use_cases import clear_use_cases

    clear_use_cases()
    yield
    clear_use_cases()
