"""
Configuration management using Pydantic settings.
Handles the API base URL, request timeout, credential storage and upload limits.
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings
from typing import List
from functools import lru_cache
import os


class Settings(BaseSettings):
    """Client settings with environment variable support."""

    # Application configuration
    app_name: str = "GalactaVista Client"
    app_version: str = "1.0.0"
    environment: str = "development"
    debug: bool = False
    log_level: str = "INFO"

    # API configuration
    api_base_url: str = "http://localhost:8080/api/v1"
    request_timeout: float = 10.0

    # Persisted credentials
    credential_store_path: str = os.path.join("~", ".galactavista", "credentials.json")

    # Media upload configuration
    max_upload_size: int = 10 * 1024 * 1024  # 10MB
    allowed_media_types: List[str] = [
        "image/jpeg",
        "image/jpg",
        "image/png",
        "image/gif",
        "image/webp",
        "video/mp4",
        "video/avi",
        "video/mov",
    ]

    # Pagination defaults
    default_page_size: int = 10
    max_page_size: int = 100

    @field_validator("api_base_url")
    @classmethod
    def validate_api_base_url(cls, v):
        """Require an http(s) URL and drop the trailing slash."""
        if not v or not v.startswith(("http://", "https://")):
            raise ValueError("API_BASE_URL must start with http:// or https://")
        return v.rstrip("/")

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v):
        """Validate environment setting."""
        allowed_envs = ["development", "testing", "staging", "production"]
        if v not in allowed_envs:
            raise ValueError(f"Environment must be one of: {allowed_envs}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Normalize and validate the log level name."""
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {v}")
        return level

    @field_validator("request_timeout")
    @classmethod
    def validate_request_timeout(cls, v):
        if v <= 0:
            raise ValueError("REQUEST_TIMEOUT must be greater than 0")
        return v

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment == "development"

    @property
    def is_testing(self) -> bool:
        """Check if running in testing mode."""
        return self.environment == "testing"

    @property
    def credential_store_file(self) -> str:
        """Credential store path with the user directory expanded."""
        return os.path.expanduser(self.credential_store_path)

    model_config = {
        "env_prefix": "GALACTAVISTA_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    This ensures we only create one instance of settings throughout the client lifecycle.
    """
    return Settings()
