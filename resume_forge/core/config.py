"""Configuration settings for resume_forge.

This module provides a Settings class that loads configuration from environment variables
with support for .env files. It uses pydantic for validation and type conversion.
"""

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

PACKAGE_ROOT = Path(__file__).resolve().parent.parent
API_KEY_MIN_LENGTH = 10


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Required settings:
        OPENAI_API_KEY: API key for OpenAI

    Optional settings with defaults:
        LOG_LEVEL: Logging level (default: "INFO")
        LOG_FILE: Optional path of a rotating log file
        DEFAULT_MODEL_NAME: OpenAI model used for tailoring, ingestion and skill-gap reports
        PROMPTS_DIRECTORY: Directory holding the prompt templates
        STORE_DIRECTORY: Directory holding the SQLite resume store
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
    )

    # Required settings
    OPENAI_API_KEY: str = Field(..., description="API key for OpenAI")

    # Optional settings with defaults
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str | None = None
    DEFAULT_MODEL_NAME: str = "gpt-4.1"

    # OpenAI API settings
    OPENAI_TEMPERATURE: float = 0.7
    OPENAI_MAX_RETRIES: int = 0
    OPENAI_TIMEOUT_SECONDS: int = 60

    # Response extraction diagnostics
    EXTRACTION_EXCERPT_CHARS: int = 500
    EXTRACTION_ERROR_WINDOW_CHARS: int = 200

    # Tailoring rules
    PROTECTED_BASICS_FIELDS: list[str] = ["name", "email", "phone", "url", "location"]

    # File paths and directories
    PROMPTS_DIRECTORY: Path = PACKAGE_ROOT / "prompts"
    TAILOR_SYSTEM_PROMPT_FILE: str = "sys_prompt_tailor_resume.txt"
    INGEST_SYSTEM_PROMPT_FILE: str = "sys_prompt_ingest_resume.txt"
    SKILL_GAP_SYSTEM_PROMPT_FILE: str = "sys_prompt_skill_gap.txt"
    STORE_DIRECTORY: Path = Path(".resume_forge")

    @field_validator("OPENAI_API_KEY")
    @classmethod
    def validate_api_key(cls, v: str) -> str:
        """Validate the API key is non-empty and has reasonable length."""
        if not v or len(v.strip()) < API_KEY_MIN_LENGTH:
            raise ValueError(f"API key must be at least {API_KEY_MIN_LENGTH} characters long")
        return v.strip()

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a valid logging level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {', '.join(sorted(valid_levels))}")
        return v.upper()

    @field_validator("OPENAI_TEMPERATURE")
    @classmethod
    def validate_temperature(cls, v: float) -> float:
        """Validate temperature is between 0 and 2."""
        if not 0 <= v <= 2:
            raise ValueError("Temperature must be between 0 and 2")
        return v

    @field_validator("EXTRACTION_EXCERPT_CHARS", "EXTRACTION_ERROR_WINDOW_CHARS")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("Excerpt sizes must be positive")
        return v


# Global settings instance - using a function to ensure it's only created once
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the global settings instance.

    This ensures we only load settings once and cache them.
    """
    global _settings
    if _settings is None:
        _settings = Settings()  # type: ignore[call-arg]
    return _settings


if __name__ == "__main__":
    settings = Settings()  # type: ignore[call-arg]
    print("Configuration loaded successfully:")
    print(f"LOG_LEVEL: {settings.LOG_LEVEL}")
    print(f"DEFAULT_MODEL_NAME: {settings.DEFAULT_MODEL_NAME}")
    print(f"PROMPTS_DIRECTORY: {settings.PROMPTS_DIRECTORY}")
    print(f"STORE_DIRECTORY: {settings.STORE_DIRECTORY}")
    print(f"OPENAI_API_KEY: {'*' * 10}...{settings.OPENAI_API_KEY[-4:]}")
