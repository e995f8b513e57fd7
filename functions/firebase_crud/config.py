"""
Configuration and settings for the backend.
"""

from __future__ import annotations

from datetime import datetime, timezone
from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-backed settings for the FastAPI service."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    api_prefix: str = Field(default="")
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3000)
    debug: bool = Field(default=False)
    log_level: str = Field(default="INFO")

    # Firebase Admin. SERVICE_ACCOUNT may hold the JSON key itself or a path to it.
    service_account: Optional[str] = Field(default=None)
    project_id: Optional[str] = Field(default=None)
    storage_bucket: Optional[str] = Field(default=None)
    database_url: Optional[str] = Field(default=None)

    # Development toggles
    use_in_memory_backends: bool = Field(default=False)

    # Blob storage
    storage_backend: Literal["firebase", "s3"] = Field(default="firebase")
    s3_endpoint: Optional[str] = Field(default=None)
    s3_region: Optional[str] = Field(default=None)
    s3_bucket: Optional[str] = Field(default=None)
    aws_access_key_id: Optional[str] = Field(default=None)
    aws_secret_access_key: Optional[str] = Field(default=None)

    # Uploads
    upload_folder: str = Field(default="gambar")
    signed_url_expires_at: datetime = Field(
        default=datetime(2030, 3, 1, tzinfo=timezone.utc)
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
