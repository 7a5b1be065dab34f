"""Application configuration managed via environment variables."""
from functools import lru_cache
from typing import List, Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "Planwise Backend"
    debug: bool = False
    log_level: str = "INFO"
    database_url: str = "postgresql+psycopg2://planwise@localhost:5432/planwise"

    gemini_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("GEMINI_API_KEY", "GOOGLE_GEMINI_API"),
    )
    gemini_model: str = "gemini-1.5-flash"
    gemini_base_url: str = "https://generativelanguage.googleapis.com"
    gemini_api_versions: List[str] = Field(default_factory=lambda: ["v1beta", "v1"])
    gemini_timeout_seconds: float = 30.0
    plan_validation_strictness: Literal["lenient", "strict"] = "lenient"
    plan_mode: Literal["daily", "full"] = "daily"

    session_secret: str = "planwise-dev-secret"
    session_ttl_seconds: int = 86400

    storage_provider: str = "local"
    storage_root: str = "./uploads"
    storage_public_base_url: str = "/files"

    opik_enabled: bool = False
    opik_api_key: str | None = None
    opik_project: str = "planwise"


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance."""
    return Settings()


settings = get_settings()
