"""Configuration management for the Use Case Document Engine."""

from functools import lru_cache

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables from .env file (only if accessible)
try:
    load_dotenv()
except (PermissionError, OSError):
    # In sandboxed environments, .env might not be accessible
    pass


DEFAULT_FALLBACK_ORDER = "copilot,gemini,openai,claude,grok"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    # Environment
    USECASE_ENGINE_ENV: str = Field(default="dev", description="Environment: dev, staging, prod")

    # Provider credentials (all optional, a missing key only disables that provider)
    OPENAI_API_KEY: str | None = Field(default=None, description="OpenAI API key")
    ANTHROPIC_API_KEY: str | None = Field(default=None, description="Anthropic API key")
    XAI_API_KEY: str | None = Field(default=None, description="xAI (Grok) API key")
    GEMINI_API_KEY: str | None = Field(default=None, description="Google Gemini API key")
    COPILOT_API_KEY: str | None = Field(default=None, description="Copilot API key")

    # Provider models
    OPENAI_MODEL: str = Field(default="gpt-4o", description="OpenAI chat model")
    CLAUDE_MODEL: str = Field(default="claude-sonnet-4-20250514", description="Claude model")
    GROK_MODEL: str = Field(default="grok-2-1212", description="Grok model")
    GEMINI_MODEL: str = Field(default="gemini-2.5-flash", description="Gemini model")
    COPILOT_MODEL: str = Field(default="gpt-4", description="Copilot model")

    # Provider endpoints
    GROK_BASE_URL: str = Field(default="https://api.x.ai/v1", description="xAI API base URL")
    COPILOT_BASE_URL: str = Field(
        default="https://api.copilot.microsoft.com/v1", description="Copilot API base URL"
    )
    GEMINI_BASE_URL: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        description="Gemini REST API base URL",
    )
    PROVIDER_TIMEOUT_SECONDS: float = Field(default=120.0, description="Per-call provider timeout")

    # Fallback chain
    PROVIDER_FALLBACK_ORDER: str = Field(
        default=DEFAULT_FALLBACK_ORDER,
        description="Comma-separated provider ids tried after the selected one",
    )

    # Generation
    DESCRIPTION_MIN_WORDS: int = Field(
        default=50, description="Descriptions shorter than this are expanded before generation"
    )

    # Assets and uploads
    ASSET_ROOT: str = Field(default=".", description="Root for relative wireframe image paths")
    HEADER_LOGO_PATH: str | None = Field(
        default=None, description="Logo image used in the document header"
    )
    MAX_UPLOAD_BYTES: int = Field(default=10 * 1024 * 1024, description="Max upload size in bytes")

    @property
    def fallback_order(self) -> list[str]:
        """Provider ids of the global fallback order, in priority order."""
        return [p.strip() for p in self.PROVIDER_FALLBACK_ORDER.split(",") if p.strip()]


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings instance loaded from environment
    """
    return Settings()
