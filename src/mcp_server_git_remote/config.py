"""Runtime configuration for the MCP Git Remote Server.

Configuration is a small pydantic model bound to environment variables:

    LOG_LEVEL                   root log level (default INFO)
    MCP_GIT_OPERATION_TIMEOUT   seconds allowed for the repository probe plus
                                the git operation of one tool call; 0 disables
                                the limit (default 300)

Environment variables may be supplied through ``.env`` files, see
:func:`load_environment_variables`.
"""

import logging
import os
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)

DEFAULT_OPERATION_TIMEOUT_SECONDS = 300.0

_VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ServerConfig(BaseModel):
    """Top-level server configuration."""

    log_level: str = "INFO"
    operation_timeout_seconds: Optional[float] = Field(
        default=DEFAULT_OPERATION_TIMEOUT_SECONDS, gt=0
    )
    log_file: Optional[Path] = None

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level == "WARN":
            level = "WARNING"
        if level not in _VALID_LOG_LEVELS:
            raise ValueError(
                f"Unknown log level '{value}'. Valid levels: {', '.join(_VALID_LOG_LEVELS)}"
            )
        return level

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **overrides) -> "ServerConfig":
        """Build configuration from environment variables.

        Explicit keyword overrides win over the environment.
        """
        env = os.environ if environ is None else environ
        values = {}

        if env.get("LOG_LEVEL"):
            values["log_level"] = env["LOG_LEVEL"]

        raw_timeout = env.get("MCP_GIT_OPERATION_TIMEOUT")
        if raw_timeout is not None and raw_timeout.strip():
            try:
                timeout = float(raw_timeout)
            except ValueError as e:
                raise ValueError(
                    f"MCP_GIT_OPERATION_TIMEOUT must be a number, got '{raw_timeout}'"
                ) from e
            values["operation_timeout_seconds"] = timeout if timeout > 0 else None

        values.update(overrides)
        return cls(**values)


def load_environment_variables(repository_path: Optional[Path] = None) -> list[str]:
    """Load environment variables from .env files.

    Order of precedence:
    1. System environment variables (never overridden)
    2. Project-specific .env file (current working directory)
    3. Repository-specific .env file (if repository path provided)

    Returns:
        The .env files that were loaded, in load order.
    """
    loaded_files: list[str] = []

    candidates = [Path.cwd() / ".env"]
    if repository_path:
        candidates.append(Path(repository_path) / ".env")

    for env_file in candidates:
        if not env_file.exists() or str(env_file) in loaded_files:
            continue
        try:
            load_dotenv(env_file, override=False)
            loaded_files.append(str(env_file))
            logger.info(f"Loaded environment variables from {env_file}")
        except OSError as e:
            logger.warning(f"Failed to load .env file {env_file}: {e}")

    if not loaded_files:
        logger.info("No .env files found, using system environment variables only")

    return loaded_files
