from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class StoreConfig(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    STORE_TYPE: str = Field(default="chroma")

    # Chroma connection
    CHROMA_HOST: str = Field(default="http://localhost:8000")
    CHROMA_TENANT: str = Field(default="default_tenant")
    CHROMA_DATABASE: str = Field(default="default_database")


store_config = StoreConfig()
