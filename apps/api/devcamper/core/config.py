"""Application configuration."""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables."""

    auth_provider: Literal["mock", "firebase"] = "firebase"
    firebase_project_id: str | None = None
    firebase_audience: str | None = None

    geocoder_provider: Literal["mapquest", "static"] = "mapquest"
    geocoder_api_key: str | None = None
    geocoder_base_url: str = "https://www.mapquestapi.com/geocoding/v1/address"
    geocoder_timeout_seconds: float = Field(default=5.0, gt=0)
    # JSON file of query -> location rows used by the static provider.
    geocoder_static_table: Path | None = None

    max_file_upload_bytes: int = Field(default=1_000_000, ge=1)
    file_upload_path: Path = Path("public/uploads")

    default_page_limit: int = Field(default=100, ge=1)
    # Unset keeps the historical behavior of accepting any requested limit.
    max_page_limit: int | None = Field(default=None, ge=1)

    model_config = SettingsConfigDict(env_prefix="DEVCAMPER_", extra="ignore")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
