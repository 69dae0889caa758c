"""Configuration management for automodel."""

import os
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _find_env_file() -> Optional[str]:
    """Find .env file in multiple locations.

    Search order:
    1. Current working directory
    2. ~/.automodel/.env
    3. Package directory (where this file is located)
    """
    # Current directory
    if os.path.exists(".env"):
        return ".env"

    # User config directory
    user_env = Path.home() / ".automodel" / ".env"
    if user_env.exists():
        return str(user_env)

    # Package directory
    package_dir = Path(__file__).parent.parent
    package_env = package_dir / ".env"
    if package_env.exists():
        return str(package_env)

    return None


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="AUTOMODEL_",
        env_file=_find_env_file(),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Connection defaults
    database_url: Optional[str] = Field(
        default=None,
        description="Connection URL used when no spec is given (e.g. sqlite:///library.db)"
    )
    configurations: Dict[str, Dict[str, Any]] = Field(
        default_factory=dict,
        description="Named connection specs, resolvable by name"
    )

    # Namespaces
    default_namespace: Optional[str] = Field(
        default=None,
        description="Namespace for generated models when none is given (default: registry root)"
    )
    connectors_namespace: str = Field(
        default="Automodel::Connectors",
        description="Namespace under which per-invocation base classes are registered"
    )

    # Logging
    log_level: str = Field(
        default="WARNING",
        description="Log level used by the CLI when --verbose is not given"
    )


# Global settings instance
settings = Settings()
