"""Configuration management."""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings pulled from environment variables."""

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    log_format: str = Field(default="json", description="Logging format (plain or json)")

    # Generation
    default_city_width: int = Field(default=30, gt=0, description="Default grid width")
    default_city_height: int = Field(default=20, gt=0, description="Default grid height")
    max_city_width: int = Field(default=1000, gt=0, description="Max allowed grid width")
    max_city_height: int = Field(default=1000, gt=0, description="Max allowed grid height")
    default_seed: Optional[str] = Field(
        default=None, description="Seed used when none is passed to the generator"
    )

    model_config = SettingsConfigDict(
        env_prefix="CITYGEN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()
