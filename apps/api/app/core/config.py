"""Application configuration for the listings backend."""
from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    app_env: str = Field(default="development")
    log_level: str = Field(default="INFO")
    cors_allow_origins: list[str] = Field(default_factory=lambda: ["*"])

    property_api_base_url: str = Field(default="http://localhost:3000/api")
    property_api_timeout: float = Field(default=15.0)

    firebase_api_key: str = Field(default="")
    firebase_project_id: str = Field(default="")
    identity_toolkit_url: str = Field(default="https://identitytoolkit.googleapis.com/v1")
    firestore_url: str = Field(default="https://firestore.googleapis.com/v1")
    auth_timeout: float = Field(default=15.0)

    discovery_base_url: str = Field(default="https://bayut.p.rapidapi.com")
    discovery_api_host: str = Field(default="bayut.p.rapidapi.com")
    discovery_api_key: str = Field(default="")
    discovery_location_ids: list[str] = Field(default_factory=lambda: ["5002", "6020"])
    discovery_timeout: float = Field(default=10.0)

    featured_window: int = Field(default=8, ge=0)
    recommended_window: int = Field(default=8, ge=0)
    session_ttl_seconds: int = Field(default=3600, ge=1)

    @field_validator("cors_allow_origins", "discovery_location_ids", mode="before")
    @classmethod
    def _split_csv(cls, value: object) -> object:
        """Allow comma-separated env values for list settings."""

        if isinstance(value, str):
            parts = [item.strip() for item in value.split(",") if item.strip()]
            return parts
        return value


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""

    return Settings()


settings = get_settings()
