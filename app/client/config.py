# app/client/config.py
from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class ClientSettings(BaseSettings):
    """
    Settings of the storefront cart client.

    Env vars are prefixed with SHAFE_, e.g. SHAFE_API_BASE_URL.
    """

    API_BASE_URL: str = "http://localhost:5000"

    # Browser-style local storage: one JSON file, string values per key
    CART_STORAGE_PATH: Path = Path(".shafe_local_storage.json")
    CART_STORAGE_KEY: str = "shafe_cart"

    # Upper bound on an embedded design image (characters of the data URL)
    MAX_DESIGN_IMAGE_CHARS: int = 10_000_000

    model_config = SettingsConfigDict(env_prefix="SHAFE_", env_file=".env", extra="ignore")


@lru_cache
def get_client_settings() -> ClientSettings:
    return ClientSettings()
