"""
Runtime settings read from the environment (and a local .env file).

Variables:
  AGGREGATOR_USER_AGENT    User-Agent sent to every source
  AGGREGATOR_TIMEOUT       Per-request timeout in seconds
  AGGREGATOR_MAX_WORKERS   Concurrent fetches per run (1 = sequential)
  AGGREGATOR_DEFAULT_YEAR  Ranking year used when a request names none
  AGGREGATOR_LOG_LEVEL     DEBUG, INFO, WARNING, ...
  AGGREGATOR_LOG_FILE      Optional log file path
"""

import logging
import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel

from .exceptions import ConfigurationError
from .sources import DEFAULT_RANKING_YEAR

load_dotenv()

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


class Settings(BaseModel):
    """Aggregator settings."""
    user_agent: str = DEFAULT_USER_AGENT
    timeout: float = 20.0
    max_workers: int = 1
    default_year: str = DEFAULT_RANKING_YEAR
    log_level: int = logging.INFO
    log_file: Optional[str] = None

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from AGGREGATOR_* environment variables."""
        values = {}

        user_agent = os.getenv("AGGREGATOR_USER_AGENT")
        if user_agent:
            values["user_agent"] = user_agent

        timeout = _read_number("AGGREGATOR_TIMEOUT", float)
        if timeout is not None:
            if timeout <= 0:
                raise ConfigurationError("Timeout must be positive", setting="AGGREGATOR_TIMEOUT")
            values["timeout"] = timeout

        max_workers = _read_number("AGGREGATOR_MAX_WORKERS", int)
        if max_workers is not None:
            if max_workers < 1:
                raise ConfigurationError("Worker count must be at least 1",
                                         setting="AGGREGATOR_MAX_WORKERS")
            values["max_workers"] = max_workers

        default_year = os.getenv("AGGREGATOR_DEFAULT_YEAR")
        if default_year:
            values["default_year"] = default_year.strip()

        log_level = os.getenv("AGGREGATOR_LOG_LEVEL")
        if log_level:
            level = logging.getLevelName(log_level.strip().upper())
            if not isinstance(level, int):
                raise ConfigurationError(f"Unknown log level: {log_level}",
                                         setting="AGGREGATOR_LOG_LEVEL")
            values["log_level"] = level

        log_file = os.getenv("AGGREGATOR_LOG_FILE")
        if log_file:
            values["log_file"] = log_file

        return cls(**values)


def _read_number(name: str, kind):
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    try:
        return kind(raw.strip())
    except ValueError:
        raise ConfigurationError(f"Invalid value for {name}: {raw!r}", setting=name,
                                 details={"value": raw})


# Process-wide settings, built on first use
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get or create the process-wide settings."""
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings
