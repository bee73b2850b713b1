from functools import lru_cache
from typing import Literal, Optional

from pydantic import BaseModel, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class CustomSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )


class AppSettings(CustomSettings):
    ENVIRONMENT: Literal["local", "dev", "prod"] = Field(default="local")
    LOG_LEVEL: str = Field(default="INFO")
    JSON_LOGS: bool = Field(default=False)
    API_PREFIX: str = Field(default="/api")
    SEED_DEMO_DATA: bool = Field(default=False)


class AISettings(CustomSettings):
    """Which language-model backend answers chats and how long it may take.

    Set via env vars:
    - AI_PROVIDER: "openai" (hosted) or "ollama" (local)
    - AI_MODEL: overrides the provider's baseline model when non-empty
    - AI_TIMEOUT_SECONDS
    - AI_TEMPERATURE
    """

    PROVIDER: Literal["openai", "ollama"] = Field(
        default="openai", validation_alias="AI_PROVIDER"
    )
    MODEL: Optional[str] = Field(default=None, validation_alias="AI_MODEL")
    TIMEOUT_SECONDS: float = Field(
        default=30.0, gt=0, validation_alias="AI_TIMEOUT_SECONDS"
    )
    TEMPERATURE: float = Field(default=0.7, validation_alias="AI_TEMPERATURE")


class OpenAISettings(CustomSettings):
    OPENAI_API_KEY: SecretStr = Field(default="")
    OPENAI_BASE_URL: Optional[str] = Field(default=None)
    OPENAI_DEFAULT_MODEL: str = Field(default="gpt-4o-mini")


class OllamaSettings(CustomSettings):
    # Ollama serves an OpenAI-compatible API under /v1
    OLLAMA_BASE_URL: str = Field(default="http://localhost:11434/v1")
    OLLAMA_DEFAULT_MODEL: str = Field(default="llama3.2")


class Settings(BaseModel):
    APP: AppSettings = Field(default_factory=AppSettings)
    AI: AISettings = Field(default_factory=AISettings)
    OPENAI: OpenAISettings = Field(default_factory=OpenAISettings)
    OLLAMA: OllamaSettings = Field(default_factory=OllamaSettings)


@lru_cache
def get_settings() -> Settings:
    return Settings()


SETTINGS = get_settings()
