import os
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings


class ConfigurationError(Exception):
    """Raised when settings are missing for the selected backend or model."""


class Settings(BaseSettings):
    """
    Application settings with validation.
    Loaded from environment variables (or a .env file) by Pydantic Settings.
    """

    # --- Model Configuration ---
    chat_model: str = Field(
        default="gemini-2.5-flash",
        description="LLM answering as the assistant or the bound specialist",
    )

    router_model: str = Field(
        default="gemini-2.5-flash",
        description="Fast LLM for intent fallback and summarization",
    )

    # --- LLM Service Configuration ---
    llm_timeout: int = Field(
        default=30,
        description="Timeout in seconds for LLM calls",
        ge=5,
        le=120,
    )
    llm_max_retries: int = Field(
        default=1,
        description="Attempts per LLM call (1 means a single best-effort call)",
        ge=1,
        le=5,
    )
    llm_rate_limit: int = Field(
        default=3,
        description="Maximum concurrent LLM requests (rate limiting)",
        ge=1,
        le=10,
    )

    # --- Conversation Memory ---
    compaction_threshold: int = Field(
        default=30,
        description="Message count at which older turns are summarized",
        ge=2,
    )
    compaction_keep_recent: int = Field(
        default=10,
        description="Messages kept verbatim after a compaction",
        ge=1,
    )
    prompt_history_window: int = Field(
        default=10,
        description="Recent messages rendered into each chat prompt",
        ge=1,
    )

    # --- Storage ---
    store_backend: Literal["supabase", "memory"] = Field(
        default="supabase",
        description="Document store backing conversations and specialists",
    )

    # --- Server ---
    host: str = Field(default="0.0.0.0", description="API bind address")
    port: int = Field(default=8000, description="API port")

    # --- Logging ---
    log_level: str = Field(default="INFO", description="Root log level")
    structured_logs: bool = Field(
        default=True, description="Emit JSON log lines"
    )

    # --- API Keys ---
    google_api_key: str | None = Field(
        default=None, description="Google API key for Gemini"
    )
    openai_api_key: str | None = Field(default=None, description="OpenAI API key")
    supabase_url: str | None = Field(default=None, description="Supabase project URL")
    supabase_service_key: str | None = Field(
        default=None, description="Supabase service key"
    )

    class Config:
        """Pydantic config."""

        env_file = os.getenv("DOTENV_PATH", ".env")
        case_sensitive = False
        extra = "ignore"

    def api_key_for(self, model_name: str) -> str:
        """
        Returns the API key matching the provider of a model.

        Raises:
            ConfigurationError: If the key for that provider is not set
        """
        if "gpt" in model_name:
            key, name = self.openai_api_key, "OPENAI_API_KEY"
        else:
            key, name = self.google_api_key, "GOOGLE_API_KEY"
        if not key:
            raise ConfigurationError(f"{name} is required for model '{model_name}'")
        return key


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """
    Get or create settings instance.
    Singleton pattern for consistent configuration.

    Returns:
        Settings instance

    Raises:
        ValidationError: If env vars are present but invalid
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
