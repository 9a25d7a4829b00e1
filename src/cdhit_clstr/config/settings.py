"""
Configuration settings for cdhit-clstr.

This module provides centralized configuration management using pydantic-settings
for environment variables, file-based configuration, and defaults.
"""

import json
from pathlib import Path
from typing import Optional, Dict, Any
from functools import lru_cache

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ParserSettings(BaseModel):
    """Settings for reading .clstr files."""

    encoding: str = "utf-8"
    check_order: bool = False  # reject repeated or decreasing cluster ids


class WriterSettings(BaseModel):
    """Settings for writing .clstr files."""

    encoding: str = "utf-8"
    default_precision: int = Field(default=1, ge=0, le=6)


class ToolSettings(BaseModel):
    """Defaults for the cluster tools exposed on the command line."""

    top_n: int = Field(default=500, ge=1)
    filter_min_size: int = Field(default=20, ge=1)
    show_progress: bool = True
    strict_lookup: bool = False  # fail instead of warning on ids missing from the database


class LoggingSettings(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    format: str = "{time:YYYY-MM-DD HH:mm:ss} | {level} | {name}:{function}:{line} | {message}"
    log_file: Optional[Path] = None
    enable_json_logging: bool = False

    @field_validator("level")
    @classmethod
    def normalize_level(cls, v: str) -> str:
        """Accept lowercase level names."""
        level = v.upper()
        if level not in {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown logging level: {v}")
        return level


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="CLSTR_",
        case_sensitive=False,
        env_nested_delimiter="__",
        extra="ignore",
    )

    debug: bool = False

    parser: ParserSettings = Field(default_factory=ParserSettings)
    writer: WriterSettings = Field(default_factory=WriterSettings)
    tools: ToolSettings = Field(default_factory=ToolSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    def get_logging_config(self) -> Dict[str, Any]:
        """Get logging configuration as dictionary."""
        return self.logging.model_dump()

    def save_config(self, path: Path) -> None:
        """Save current configuration to file."""
        with open(path, 'w') as f:
            json.dump(self.model_dump(), f, indent=2, default=str)

    @classmethod
    def load_config(cls, path: Path) -> "Settings":
        """Load configuration from file."""
        with open(path, 'r') as f:
            config_data = json.load(f)
        return cls(**config_data)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

