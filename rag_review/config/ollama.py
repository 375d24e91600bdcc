from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class OllamaConfig(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    OLLAMA_HOST: str = Field(default="http://localhost:11434")
    EMBEDDING_MODEL: str = Field(default="nomic-embed-text")
    RAG_REVIEW_MODEL: str = Field(default="qwen2.5-coder:7b")
    RAG_REVIEW_TEMPERATURE: float = Field(default=0.3)


ollama_config = OllamaConfig()
