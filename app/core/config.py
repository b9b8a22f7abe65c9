from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    database_url: str = Field(..., alias="DATABASE_URL")

    admin_username: str = Field("admin", alias="ADMIN_USERNAME")
    admin_password: str = Field(..., alias="ADMIN_PASSWORD")
    session_ttl_hours: int = Field(24, alias="SESSION_TTL_HOURS")

    login_rate_limit: str = Field("5/15minutes", alias="LOGIN_RATE_LIMIT")
    login_rate_limit_enabled: bool = Field(True, alias="LOGIN_RATE_LIMIT_ENABLED")

    display_timezone: str = Field("UTC", alias="DISPLAY_TIMEZONE")

    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_format: str = Field("console", alias="LOG_FORMAT")  # console | json

    cors_origins: List[str] = Field(default_factory=lambda: ["*"], alias="CORS_ORIGINS")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


settings = Settings()
