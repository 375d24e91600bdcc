from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class RuntimeConfig(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    LOG_LEVEL: str = Field(default="WARNING")
    LOG_FORMAT: str = Field(default="json")

    # Indexing
    EMBED_BATCH_SIZE: int = Field(default=10, ge=1)

    # Retrieval
    MAX_CONTEXT_CHARS: int = Field(default=32_000, ge=0)
    N_RESULTS: int = Field(default=10, ge=1)
    QUERY_CONCURRENCY: int = Field(default=4, ge=1)


runtime_config = RuntimeConfig()
