from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    PROJECT_NAME: str = "Books Reviews API"
    VERSION: str = "v1"
    DESCRIPTION: str = "A Rest API for browsing books and their reviews"

    API_V1_STR: str = "/api/v1"

    # --- Database ---
    DATABASE_URL: str = "sqlite+aiosqlite:///./books_reviews.db"
    DB_ECHO: bool = False

    # --- Cache Configuration ---
    REDIS_URL: str = "redis://localhost:6379/0"
    CACHE_BACKEND: Literal["redis", "memory"] = "redis"
    CACHE_TTL: int = 3600  # seconds

    # --- Logging ---
    LOG_LEVEL: str = "INFO"
    LOGGING_EXCLUDE_PATHS: set[str] = {"/health", "/favicon.ico"}

    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:8000"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


settings = Settings()
