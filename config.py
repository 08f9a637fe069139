"""
Configuration management using Pydantic Settings.
Loads environment variables from .env file.
"""
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # AWS Configuration (empty keys fall back to the boto3 credential chain)
    aws_region: str = "us-east-1"
    aws_access_key_id: str = ""
    aws_secret_access_key: str = ""
    aws_session_token: str = ""
    s3_bucket_name: str = ""
    s3_signature_version: str = "s3v4"

    # Environment label used as the first segment of dated folders
    app_env: str = "dev"

    # Link durations (hours)
    default_link_hours: int = Field(default=72, ge=1)
    sts_link_hours: int = Field(default=36, ge=1, le=36)
    sts_max_link_hours: int = Field(default=36, ge=1, le=36)

    # Polling for object visibility after a put
    object_wait_delay_seconds: float = Field(default=5.0, ge=0)
    object_wait_max_attempts: int = Field(default=20, ge=1)

    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    Uses lru_cache to ensure settings are loaded only once.
    """
    return Settings()
