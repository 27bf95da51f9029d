"""Configuration schema using Pydantic.

Why this exists:
- Type-safe configuration with validation
- Environment variable support (TESTGEN_ prefix, __ for nesting)
- Clear documentation of all settings

How to extend:
1. Add new fields to existing config classes
2. Create new config classes for new components
3. Update config.example.toml with new settings
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LLMProviderType(str, Enum):
    """Supported LLM providers."""

    OPENAI = "openai"
    GEMINI = "gemini"


class StoreType(str, Enum):
    """Supported persistence stores."""

    MEMORY = "memory"


class GitHubConfig(BaseModel):
    """GitHub REST API configuration."""

    base_url: str = "https://api.github.com"
    api_version: str = "2022-11-28"
    timeout: float = Field(default=30.0, gt=0)
    per_page: int = Field(default=50, gt=0, le=100)


class LLMConfig(BaseModel):
    """LLM provider configuration.

    ``model_name`` is used for test-case summaries, ``code_model_name`` for
    code generation (falls back to ``model_name`` when unset).
    """

    provider: LLMProviderType = LLMProviderType.OPENAI
    model_name: str = "gpt-4o-mini"
    code_model_name: Optional[str] = None
    api_key: Optional[str] = None
    base_url: Optional[str] = None
    max_tokens: int = Field(default=4000, gt=0)
    temperature: float = Field(default=0.2, ge=0.0, le=2.0)
    timeout: float = Field(default=120.0, gt=0)
    extra_params: dict[str, Any] = Field(default_factory=dict)


class SyncConfig(BaseModel):
    """Repository file sync limits."""

    max_file_bytes: int = Field(default=1_000_000, gt=0, description="Files at or above this size are skipped")
    skip_dirs: list[str] = Field(default_factory=lambda: ["node_modules"])


class StorageConfig(BaseModel):
    """Persistence store configuration."""

    store_type: StoreType = StoreType.MEMORY
    extra_params: dict[str, Any] = Field(default_factory=dict)


class GenerationConfig(BaseModel):
    """Test generation defaults."""

    default_framework: str = "Jest"


class ServerConfig(BaseModel):
    """HTTP server configuration."""

    host: str = "127.0.0.1"
    port: int = Field(default=5000, gt=0, lt=65536)
    cors_origins: list[str] = Field(default_factory=lambda: ["http://localhost:3000", "http://localhost:5173"])


class AppConfig(BaseSettings):
    """Main application configuration.

    Loads from:
    1. Config file (TOML)
    2. Environment variables (prefixed with TESTGEN_)
    3. .env file
    """

    model_config = SettingsConfigDict(
        env_prefix="TESTGEN_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    app_name: str = "testgen"
    log_level: LogLevel = LogLevel.INFO
    json_logs: bool = False

    github: GitHubConfig = Field(default_factory=GitHubConfig)
    llm: LLMConfig = Field(default_factory=LLMConfig)
    sync: SyncConfig = Field(default_factory=SyncConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    generation: GenerationConfig = Field(default_factory=GenerationConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
