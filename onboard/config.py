"""
Configuration module for the onboarding service.
Loads environment variables and provides settings.
"""
from pathlib import Path
from typing import List
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Bot configuration
    BOT_TOKEN: str = Field(
        default="",
        description="Telegram Bot Token (only needed to run the chat client)"
    )

    # Database
    DB_URL: str = Field(
        default="sqlite+aiosqlite:///./onboarding.db",
        description="Database connection URL"
    )

    # Access control
    ALLOWED_CREATORS: str = Field(
        default="",
        description="Comma-separated list of Telegram user IDs allowed to onboard employees"
    )
    ADMIN_IDS: str = Field(
        default="",
        description="Comma-separated list of admin Telegram user IDs"
    )
    API_KEY: str = Field(
        default="",
        description="X-API-Key required by the employee/profile endpoints; empty disables the check"
    )

    # Timezone
    TIMEZONE: str = Field(
        default="Asia/Kolkata",
        description="Timezone for date/time operations"
    )

    # Validation
    PHONE_PATTERN: str = Field(
        default=r"^(?:\+91[-\s]?|0)?[6-9]\d{9}$",
        description="Regular expression a phone number must match"
    )
    PASSWORD_MIN_LENGTH: int = Field(
        default=8,
        description="Minimum password length"
    )

    # Storage
    MEDIA_ROOT: Path = Field(
        default=Path("./media"),
        description="Directory where uploaded avatars are stored"
    )
    PUBLIC_BASE_URL: str = Field(
        default="http://localhost:8000",
        description="Base URL used to build public links to uploaded files"
    )
    SEED_FILE: Path = Field(
        default=Path("./data/initial-employees.json"),
        description="JSON file used to restore the initial employee list"
    )

    # Logging
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Minimum log level"
    )

    @property
    def allowed_creators_list(self) -> List[int]:
        """Parse ALLOWED_CREATORS into list of integers."""
        if not self.ALLOWED_CREATORS:
            return []
        return [int(x.strip()) for x in self.ALLOWED_CREATORS.split(",") if x.strip()]

    @property
    def admin_ids_list(self) -> List[int]:
        """Parse ADMIN_IDS into list of integers."""
        if not self.ADMIN_IDS:
            return []
        return [int(x.strip()) for x in self.ADMIN_IDS.split(",") if x.strip()]

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


# Global settings instance
settings = Settings()
