"""Application configuration management using Pydantic Settings.

This module provides a centralized configuration class that loads settings
from environment variables (.env file). Bootstrap credentials are wrapped in
Pydantic's SecretStr type so they never show up in logs.

Only the outer shell (the MCP server) reads these settings. The session core
takes every value it needs as an explicit argument.
"""

from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_AUTH_FILE = "~/.opal"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Opal site and persisted session
    opal_base_url: str = Field(
        default="https://www.opal.com.au", description="Opal website base URL"
    )
    opal_auth_file: str = Field(
        default=DEFAULT_AUTH_FILE,
        description="Path to the owner-only JSON file holding credentials and cookies",
    )
    opal_username: str | None = Field(
        default=None,
        description="Username used to create the auth file when it does not exist",
    )
    opal_password: SecretStr | None = Field(
        default=None,
        description="Password used to create the auth file when it does not exist",
    )
    save_after_login: bool = Field(
        default=False,
        description="Write the auth file back after a tool call that had to log in again",
    )

    # HTTP transport
    http_timeout_seconds: float = Field(
        default=30.0, description="Per-request timeout for the HTTP transport"
    )

    # MCP Server Configuration
    mcp_transport: str = Field(
        default="stdio", description="MCP transport (stdio, http or sse)"
    )
    mcp_host: str = Field(
        default="127.0.0.1", description="MCP server host to bind to (http and sse only)"
    )
    mcp_port: int = Field(default=8000, description="MCP server port (http and sse only)")

    # Logging Configuration
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    log_format: str = Field(
        default="console", description="Log output format (json or console)"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    def resolved_auth_file(self) -> Path:
        """Return the auth file path with ``~`` expanded."""
        return Path(self.opal_auth_file).expanduser()


@lru_cache(maxsize=1)
def load_selectors() -> dict[str, Any]:
    """Load the CSS selectors used by the page parsers.

    Returns:
        Mapping of page name to its selector table.
    """
    text = resources.files("opal").joinpath("selectors.yaml").read_text(encoding="utf-8")
    return yaml.safe_load(text)


# Singleton instance - import this to access settings throughout the application
settings = Settings()
