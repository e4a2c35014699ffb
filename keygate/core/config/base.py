"""
Base configuration settings for the gateway
"""
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Every environment-provided value the gateway needs, in one place"""

    model_config = {
        "case_sensitive": True,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "validate_default": True,
        "extra": "ignore"
    }

    # API Settings
    PROJECT_NAME: str = Field("Goose Hacknight Key Gateway", description="Project name")
    VERSION: str = Field("1.0.0", description="API version")
    DESCRIPTION: str = Field(
        "Registration gateway provisioning OpenRouter keys for Goose Hacknight",
        description="API description"
    )
    DEBUG: bool = Field(False, description="Debug mode")

    # OpenRouter Settings
    OPENROUTER_API_KEY: SecretStr = Field(
        "",
        description="OpenRouter provisioning key used to manage keys"
    )
    OPENROUTER_API_URL: str = Field(
        "https://openrouter.ai/api/v1",
        description="OpenRouter API base URL"
    )
    OPENROUTER_TIMEOUT: float = Field(
        30, gt=0,
        description="OpenRouter API timeout in seconds"
    )
    OPENROUTER_PRESET_CREDITS: int = Field(
        5, ge=1,
        description="Credit limit assigned to every new key"
    )
    KEY_NAME_PREFIX: str = Field(
        "Goose Hacknight - ",
        description="Prefix joined with the email to name a key"
    )

    # Admin Settings
    ADMIN_SECRET_TOKEN: SecretStr = Field(
        "",
        description="Shared secret expected in the x-admin-token header"
    )
    ADMIN_BULK_CONCURRENCY: int = Field(
        5, ge=1, le=50,
        description="Maximum concurrent upstream calls in bulk admin operations"
    )

    # Registration flag and static assets
    REGISTRATION_CONFIG_PATH: Path = Field(
        Path("config.json"),
        description="JSON file holding the registrationEnabled flag"
    )
    STATIC_DIR: Path = Field(
        Path("public"),
        description="Front-end assets served for unmatched paths"
    )

    # CORS Settings
    CORS_ORIGINS: List[str] = Field(
        default=["*"],
        description="Allowed CORS origins"
    )

    # Server Settings
    HOST: str = Field("0.0.0.0", description="Listen address")
    PORT: int = Field(5000, ge=1, le=65535, description="Listen port")

    # Logging Settings
    LOG_LEVEL: str = Field("INFO", description="Logging level")
    LOG_TO_FILE: bool = Field(False, description="Enable file logging")
    LOG_FILE: Optional[Path] = Field(
        Path("logs/gateway.log"),
        description="Log file path used when LOG_TO_FILE is set"
    )

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v):
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"Log level must be one of {allowed}")
        return v.upper()

    @property
    def admin_token_configured(self) -> bool:
        return bool(self.ADMIN_SECRET_TOKEN.get_secret_value())


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Settings loaded once from the environment and .env file"""
    return Settings()
