from functools import lru_cache
from urllib.parse import urlsplit

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = Field(default="textscan", alias="APP_NAME")
    environment: str = Field(default="development", alias="ENVIRONMENT")
    api_prefix: str = Field(default="/v1", alias="API_PREFIX")

    cors_allowed_origins: str = Field(default="http://localhost:3000", alias="CORS_ALLOWED_ORIGINS")
    sentry_dsn: str = Field(default="", alias="SENTRY_DSN")

    openai_api_key: str = Field(default="", alias="OPENAI_API_KEY")
    openai_base_url: str = Field(default="https://api.openai.com/v1", alias="OPENAI_BASE_URL")
    openai_timeout_seconds: float = Field(default=60.0, gt=0, alias="OPENAI_TIMEOUT_SECONDS")
    credential_prefix: str = Field(default="sk-", alias="CREDENTIAL_PREFIX")

    completion_model: str = Field(default="gpt-4o", alias="COMPLETION_MODEL")
    embedding_model: str = Field(default="text-embedding-ada-002", alias="EMBEDDING_MODEL")
    embedding_dimensions: int = Field(default=1536, ge=1, alias="EMBEDDING_DIMENSIONS")

    hybrid_scoring_enabled: bool = Field(default=True, alias="HYBRID_SCORING_ENABLED")
    hybrid_min_words: int = Field(default=100, ge=0, alias="HYBRID_MIN_WORDS")
    completion_weight: float = Field(default=0.7, ge=0, le=1, alias="COMPLETION_WEIGHT")
    embedding_weight: float = Field(default=0.3, ge=0, le=1, alias="EMBEDDING_WEIGHT")

    ai_reference_fill: float = Field(default=0.1, alias="AI_REFERENCE_FILL")
    human_reference_fill: float = Field(default=0.2, alias="HUMAN_REFERENCE_FILL")
    embedding_reference_path: str = Field(default="", alias="EMBEDDING_REFERENCE_PATH")

    batch_group_size: int = Field(default=3, ge=1, alias="BATCH_GROUP_SIZE")
    batch_group_delay_seconds: float = Field(default=1.0, ge=0, alias="BATCH_GROUP_DELAY_SECONDS")

    @field_validator("openai_base_url", mode="before")
    @classmethod
    def strip_base_url(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().rstrip("/")
        return value

    @property
    def cors_origins(self) -> list[str]:
        origins = []
        for entry in self.cors_allowed_origins.split(","):
            entry = entry.strip()
            if not entry:
                continue
            parts = urlsplit(entry if "://" in entry else f"https://{entry}")
            if parts.scheme and parts.netloc:
                # Browsers send the bare origin; any path would never match.
                origins.append(f"{parts.scheme}://{parts.netloc}")
        return origins


@lru_cache
def get_settings() -> Settings:
    return Settings()
