"""Application configuration managed via environment variables."""
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "Day Planner Backend"
    debug: bool = False
    log_level: str = "INFO"
    database_url: str = "postgresql+psycopg2://planner@localhost:5432/dayplanner"
    schedule_storage_key: str = "dailyPlanner.schedule.v8"
    base_unit_minutes: int = 60
    upcoming_window_size: int = 3
    opik_enabled: bool = False
    opik_api_key: str | None = None
    opik_project: str = "dayplanner"


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance."""
    return Settings()


settings = get_settings()
