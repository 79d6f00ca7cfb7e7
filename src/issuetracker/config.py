"""Runtime configuration for the issue tracker service."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field

DEFAULT_DB_PATH = "issuetracker.db"
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 5001
DEFAULT_LOG_DIR = "logs"
DEFAULT_LOG_LEVEL = "INFO"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigError(Exception):
    """Raised when configuration is invalid."""


def _parse_origins(raw: str) -> list[str]:
    origins = [origin.strip() for origin in raw.split(",")]
    return [origin for origin in origins if origin]


@dataclass
class Settings:
    """Service settings.

    Every value can be overridden through the environment, see ``from_env``.
    """

    db_path: str = DEFAULT_DB_PATH
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    cors_origins: list[str] = field(default_factory=lambda: ["*"])
    log_dir: str = DEFAULT_LOG_DIR
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """Build settings from environment variables.

        Args:
            environ: Mapping to read from. Defaults to ``os.environ``.

        Returns:
            Parsed settings.

        Raises:
            ConfigError: If a value cannot be parsed.
        """
        env = os.environ if environ is None else environ

        raw_port = env.get("PORT", str(DEFAULT_PORT))
        try:
            port = int(raw_port)
        except ValueError as e:
            raise ConfigError(f"PORT must be an integer, got '{raw_port}'") from e
        if not 0 < port < 65536:
            raise ConfigError(f"PORT must be between 1 and 65535, got {port}")

        log_level = env.get("ISSUETRACKER_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
        if log_level not in _LOG_LEVELS:
            raise ConfigError(
                f"ISSUETRACKER_LOG_LEVEL must be one of {', '.join(_LOG_LEVELS)}, "
                f"got '{log_level}'"
            )

        origins = _parse_origins(env.get("ISSUETRACKER_CORS_ORIGINS", "*")) or ["*"]

        return cls(
            db_path=env.get("ISSUETRACKER_DB_PATH", DEFAULT_DB_PATH),
            host=env.get("ISSUETRACKER_HOST", DEFAULT_HOST),
            port=port,
            cors_origins=origins,
            log_dir=env.get("ISSUETRACKER_LOG_DIR", DEFAULT_LOG_DIR),
            log_level=log_level,
        )
