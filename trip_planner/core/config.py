from functools import lru_cache
from typing import List, Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    project_name: str = "Trip Planner API"
    api_v1_prefix: str = "/api/v1"

    openai_api_key: str = Field(default="", description="Optional OpenAI API key")
    openai_model_itinerary: str = "gpt-4.1-mini"
    generation_timeout_seconds: Optional[float] = None

    trip_store_backend: Literal["memory", "sql", "supabase"] = "sql"
    database_url: str = "sqlite:///./trip_planner.db"

    supabase_url: str | None = None
    supabase_anon_key: str | None = None

    cors_origins: List[str] = Field(default_factory=lambda: ["*"])
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    return Settings()  # type: ignore[arg-type]


settings = get_settings()
