"""Application configuration using pydantic-settings."""
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Remote record store - leave the URL empty to use the local JSON fallback store
    record_store_url: str = Field(default="", validation_alias="RECORD_STORE_URL")
    record_store_project_id: str = Field(
        default="", validation_alias="VITE_RECORD_STORE_PROJECT_ID",
    )
    record_store_public_key: str = Field(
        default="", validation_alias="VITE_RECORD_STORE_PUBLIC_KEY",
    )
    record_store_timeout: float = Field(default=30.0, validation_alias="RECORD_STORE_TIMEOUT")

    # Local fallback persistence (one JSON blob per table)
    local_data_dir: Path = Field(default=Path(".linkvault"), validation_alias="LOCAL_DATA_DIR")

    # URLs - the public origin is used to build shareable folder links
    public_base_url: str = Field(
        default="http://localhost:5173",
        validation_alias="VITE_FRONTEND_URL",
    )
    favicon_service_url: str = Field(
        default="https://www.google.com/s2/favicons?sz=32",
        validation_alias="FAVICON_SERVICE_URL",
    )

    # CORS - comma-separated list of allowed origins (stored as string, parsed via property)
    cors_origins_str: str = Field(
        default="http://localhost:5173",
        validation_alias="CORS_ORIGINS",
    )

    # Listing and aggregate parameters
    page_size: int = Field(default=100, validation_alias="PAGE_SIZE")
    recent_window_days: int = Field(default=7, validation_alias="RECENT_WINDOW_DAYS")
    default_color: str = Field(default="#2563eb", validation_alias="DEFAULT_COLOR")

    # Field length limits - shared with frontend (VITE_ prefix for Vite exposure)
    max_folder_name_length: int = Field(
        default=50, validation_alias="VITE_MAX_FOLDER_NAME_LENGTH",
    )
    max_description_length: int = Field(
        default=2000, validation_alias="VITE_MAX_DESCRIPTION_LENGTH",
    )
    max_title_length: int = Field(
        default=500, validation_alias="VITE_MAX_TITLE_LENGTH",
    )

    # Description generation - OpenAI-compatible chat completions endpoint
    openai_api_key: str = Field(default="", validation_alias="OPENAI_API_KEY")
    openai_base_url: str = Field(
        default="https://api.openai.com/v1", validation_alias="OPENAI_BASE_URL",
    )
    description_model: str = Field(default="gpt-3.5-turbo", validation_alias="DESCRIPTION_MODEL")
    description_timeout: float = Field(default=30.0, validation_alias="DESCRIPTION_TIMEOUT")

    @field_validator("record_store_url", "public_base_url", "openai_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Store base URLs without a trailing slash so paths can be appended."""
        return v.strip().rstrip("/")

    @property
    def cors_origins(self) -> list[str]:
        """Parse comma-separated CORS origins string into a list."""
        if not self.cors_origins_str:
            return []
        return [origin.strip() for origin in self.cors_origins_str.split(",") if origin.strip()]

    @property
    def description_enabled(self) -> bool:
        """True when an API key for description generation is configured."""
        return bool(self.openai_api_key)

    @property
    def use_remote_store(self) -> bool:
        """True when a remote record store is configured."""
        return bool(self.record_store_url)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
