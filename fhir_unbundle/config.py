"""
Configuration settings for fhir-unbundle.

Uses Pydantic Settings to load environment variables (and an optional `.env`
file) for the output location, failure policy and logging. Command-line
options take precedence over anything loaded here.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from fhir_unbundle.utils.logging import normalize_level


class Settings(BaseSettings):
    # Unbundling
    output_dir: Path = Field(Path("."), alias="UNBUNDLE_OUTPUT_DIR")
    fail_fast: bool = Field(True, alias="UNBUNDLE_FAIL_FAST")

    # Application
    app_env: str = Field("development", alias="APP_ENV")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_json: bool = Field(False, alias="LOG_JSON")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("log_level")
    @classmethod
    def _normalize_level(cls, value: str) -> str:
        return normalize_level(value)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["Settings", "get_settings"]
