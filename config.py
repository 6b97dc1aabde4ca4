"""Configuration via pydantic-settings. Reads from .env or environment."""

from typing import Annotated

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # ===== SERVER =====
    port: int = 3000
    log_level: str = "INFO"
    cors_origins: Annotated[list[str], NoDecode] = ["*"]  # Comma separated

    # ===== GEMINI (fit scoring) =====
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.5-flash"

    # ===== GOOGLE SERVICE ACCOUNT (Analytics + Search Console) =====
    google_client_email: str = ""
    google_private_key: str = ""  # literal "\n" sequences are accepted
    ga4_property_id: str = ""
    search_console_site_url: str = ""  # https://example.com or sc-domain:example.com

    # ===== PAGESPEED INSIGHTS =====
    google_api_key: str = ""  # Optional, raises quota

    # ===== VENDOR HTTP =====
    http_timeout_seconds: float = 60.0

    # ===== EXTERNAL AUTH SERVICE =====
    auth_api_url: str = ""  # Empty = same origin

    @field_validator("cors_origins", mode="before")
    @classmethod
    def split_origins(cls, value):
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value


settings = Settings()
