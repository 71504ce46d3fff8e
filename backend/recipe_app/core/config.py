# Environment settings (.env)
# Presence/absence of webhook, OpenAI and identity settings selects the provider path.
from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENVIRONMENT: str = "production"  # development | production | test
    LOG_LEVEL: str = "INFO"

    MONGODB_URI: str = "mongodb://localhost:27017"
    MONGODB_DB_NAME: str = "recipe_generator"
    DB_CONNECT_ATTEMPTS: int = 5

    # external workflow engine (n8n)
    N8N_WEBHOOK_URL: Optional[str] = None
    N8N_WEBHOOK_TOKEN: Optional[str] = None
    N8N_TRANSLATION_WEBHOOK: Optional[str] = None
    WEBHOOK_TIMEOUT_SECONDS: float = 60.0

    OPENAI_API_KEY: Optional[str] = None
    OPENAI_MODEL: str = "gpt-3.5-turbo"

    # hosted identity service
    SUPABASE_URL: Optional[str] = None
    SUPABASE_ANON_KEY: Optional[str] = None

    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT.lower() == "development"

    @property
    def translation_webhook_url(self) -> Optional[str]:
        return self.N8N_TRANSLATION_WEBHOOK or self.N8N_WEBHOOK_URL


@lru_cache
def get_settings() -> Settings:
    return Settings()
