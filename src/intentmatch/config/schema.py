"""Configuration schema using Pydantic.

Why this exists:
- Type-safe configuration with validation
- Environment variable support
- Clear documentation of all settings

How to extend:
1. Add new fields to existing config classes
2. Create new config classes for new components
3. Update config.toml with new settings
"""

from enum import Enum
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SIMILARITY_THRESHOLD = 0.6

DEFAULT_FALLBACK_MESSAGE = "Sorry, I don't understand. Could you rephrase your question?"


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class EmbeddingProviderType(str, Enum):
    """Supported embedding providers."""

    GEMINI = "gemini"
    OPENAI = "openai"


class EmbeddingConfig(BaseModel):
    """Embedding provider configuration.

    ``api_key`` may hold the key itself or the name of the environment
    variable that holds it.
    """

    provider: EmbeddingProviderType = EmbeddingProviderType.GEMINI
    model_name: str = "text-embedding-004"
    api_key: Optional[str] = "GEMINI_API_KEY"
    base_url: Optional[str] = None
    timeout_seconds: float = Field(default=30.0, gt=0)
    extra_params: dict[str, Any] = Field(default_factory=dict)


class MatcherConfig(BaseModel):
    """Intent matcher configuration."""

    similarity_threshold: float = Field(
        default=DEFAULT_SIMILARITY_THRESHOLD,
        ge=-1.0,
        le=1.0,
        description="Minimum cosine similarity for a match: higher is stricter",
    )
    fallback_message: str = DEFAULT_FALLBACK_MESSAGE


class KnowledgeItem(BaseModel):
    """A question/answer pair declared in configuration."""

    question: str
    answer: str


class KnowledgeBaseConfig(BaseModel):
    """Knowledge base sources: an optional file plus inline entries."""

    path: Optional[Path] = None
    entries: list[KnowledgeItem] = Field(default_factory=list)

    @field_validator("path")
    @classmethod
    def expand_path(cls, v: Optional[Path]) -> Optional[Path]:
        return v.expanduser() if v else v


class AppConfig(BaseSettings):
    """Main application configuration.

    Loads from:
    1. Config file (TOML)
    2. Environment variables (prefixed with INTENTMATCH_)
    3. .env file
    """

    model_config = SettingsConfigDict(
        env_prefix="INTENTMATCH_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    # Application settings
    app_name: str = "intentmatch"
    log_level: LogLevel = LogLevel.INFO
    json_logs: bool = False

    # Component configurations
    embedding: EmbeddingConfig = Field(default_factory=EmbeddingConfig)
    matcher: MatcherConfig = Field(default_factory=MatcherConfig)
    knowledge_base: KnowledgeBaseConfig = Field(default_factory=KnowledgeBaseConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        """Let environment variables override values read from the config file."""
        return env_settings, dotenv_settings, init_settings, file_secret_settings
