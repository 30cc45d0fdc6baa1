"""
Application Configuration

Uses Pydantic Settings for type-safe configuration.
"""

from typing import List, Optional
from pydantic_settings import BaseSettings
from pydantic import AliasChoices, Field, field_validator, ConfigDict

from sheetsync.shared.constants import DEFAULT_ACTIVITIES_PER_PAGE


class Settings(BaseSettings):
    """Application settings with validation."""

    # === Core ===
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="INFO", description="Logging level")
    base_url: str = Field(
        default="http://localhost:8000",
        description="Public URL of this service, used for OAuth redirects"
    )

    # === CORS ===
    cors_origins: List[str] = Field(
        default_factory=lambda: ["http://localhost:3000"],
        description="Allowed CORS origins"
    )

    # === Strava ===
    strava_client_id: Optional[str] = Field(default=None)
    strava_client_secret: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("strava_client_secret", "strava_secret")
    )
    activities_per_page: int = Field(
        default=DEFAULT_ACTIVITIES_PER_PAGE,
        description="Activities requested per sync (single page)"
    )
    http_timeout_seconds: float = Field(default=30.0)

    # === Google Sheets ===
    google_spreadsheet_id: Optional[str] = Field(default=None)
    google_client_email: Optional[str] = Field(default=None)
    google_private_key: Optional[str] = Field(default=None)
    google_service_account_file: Optional[str] = Field(
        default=None,
        description="Path to a service account JSON key (overrides email/key)"
    )
    metadata_sheet_title: str = Field(default="_Metadata")

    @field_validator('google_private_key')
    @classmethod
    def unescape_private_key(cls, v: Optional[str]) -> Optional[str]:
        """Env files usually carry the PEM key with literal \\n sequences."""
        if v:
            return v.replace("\\n", "\n")
        return v

    @field_validator('cors_origins', mode='before')
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS origins from comma-separated string."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(',')]
        return v

    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


# Global settings instance
settings = Settings()
