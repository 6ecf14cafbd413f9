"""
Application Settings
===================

Rendering settings and environment configuration using Pydantic Settings.
Supports development, testing, and production environments.
"""

from typing import Optional, List, Union
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
import json
from pathlib import Path


class Settings(BaseSettings):
    """Static rendering settings with environment variable support."""

    # Application Configuration
    app_name: str = Field(default="Static Component Renderer", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: str = Field(
        default="development", description="Environment: development, testing, production"
    )
    debug: bool = Field(default=False, description="Debug mode")

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_dir: Optional[Path] = Field(
        default=None, description="Directory for rotating log files (console only when unset)"
    )

    # Template Configuration
    template_dirs: List[Path] = Field(
        default_factory=list, description="Directories searched for component template files"
    )
    autoescape: bool = Field(default=True, description="HTML-escape template expressions")

    # Rendering Configuration
    render_timeout: Optional[float] = Field(
        default=None, gt=0, description="Upper bound in seconds for a single render pass"
    )
    dispatcher_thread_prefix: str = Field(
        default="static-render-dispatcher", description="Name prefix for render dispatcher threads"
    )

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment value."""
        allowed = {"development", "testing", "production"}
        if v not in allowed:
            raise ValueError(f"Environment must be one of: {allowed}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"Log level must be one of: {allowed}")
        return v.upper()

    @field_validator("template_dirs", mode="before")
    @classmethod
    def parse_template_dirs(cls, v: Union[str, List[str], List[Path]]) -> List[str]:
        """Parse template directories from string or list."""
        if isinstance(v, str):
            # Handle JSON-like string: ["a", "b"]
            v = v.strip()
            if v.startswith("[") and v.endswith("]"):
                try:
                    return json.loads(v)
                except json.JSONDecodeError:
                    pass
            # Handle comma-separated string: "a,b"
            return [path.strip() for path in v.split(",") if path.strip()]
        return v

    @field_validator("log_dir")
    @classmethod
    def create_log_dir(cls, v: Optional[Path]) -> Optional[Path]:
        """Ensure the log directory exists."""
        if v is not None:
            v.mkdir(parents=True, exist_ok=True)
        return v

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, env_prefix="STATIC_RENDER_"
    )


# Global settings instance - will be initialized when needed
settings = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global settings
    if settings is None:
        settings = Settings()
    return settings


def reload_settings() -> Settings:
    """Reload settings from environment."""
    global settings
    settings = Settings()
    return settings
