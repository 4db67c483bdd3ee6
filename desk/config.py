"""
Check-in desk client configuration (environment prefix ``CHECKIN_``).
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class DeskSettings(BaseSettings):
    """Settings for a check-in desk session"""

    base_url: str = Field(
        default="http://localhost:8000", description="MealCheckin API base URL"
    )
    debounce_seconds: float = Field(
        default=0.3, ge=0, description="Pause in typing before a search is sent"
    )
    refresh_interval_seconds: float = Field(
        default=30.0, gt=0, description="How often today's total is re-fetched"
    )
    history_limit: int = Field(
        default=10, ge=1, description="Recent entries kept on screen"
    )
    log_level: str = Field(default="WARNING", description="Logging level")

    model_config = SettingsConfigDict(
        env_prefix="CHECKIN_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )
