# app/core/config.py
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Required env vars (.env):
      - JWT_SECRET (shared HS256 secret of the identity provider issuing tokens)

    Optional:
      - DATABASE_URL (defaults to a local SQLite file)
      - CORS_ORIGINS, LOG_LEVEL
    """

    PROJECT_NAME: str = "Shafe's Handcraft API"
    API_PREFIX: str = "/api"

    DATABASE_URL: str = "sqlite:///./shafe.db"

    # JWT verification (backend-side)
    JWT_SECRET: str
    JWT_ALG: str = "HS256"

    CORS_ORIGINS: list[str] = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
        "http://localhost:3000",
    ]

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()
