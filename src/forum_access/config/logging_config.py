"""Logging configuration for forum-access.

Importing the library never touches logging; applications call
``setup_logging()`` once at startup.
"""

import logging
import logging.config
import os
from enum import Enum


class LogVerbosity(str, Enum):
    """Log verbosity modes."""
    QUIET = "QUIET"      # Only errors and critical
    NORMAL = "NORMAL"    # Warnings and above
    VERBOSE = "VERBOSE"  # Info level logging
    DEBUG = "DEBUG"      # Full debug logging


class LogFormat(str, Enum):
    """Log format options."""
    SIMPLE = "simple"
    DETAILED = "detailed"
    JSON = "json"


_VERBOSITY_LEVELS = {
    LogVerbosity.QUIET: "ERROR",
    LogVerbosity.NORMAL: "WARNING",
    LogVerbosity.VERBOSE: "INFO",
    LogVerbosity.DEBUG: "DEBUG",
}

_FORMATS = {
    LogFormat.SIMPLE: "%(asctime)s - %(levelname)s - %(message)s",
    LogFormat.DETAILED: "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s",
    LogFormat.JSON: '{"time":"%(asctime)s","level":"%(levelname)s","module":"%(name)s","message":"%(message)s"}',
}


def get_log_level_from_verbosity(verbosity: str) -> str:
    """Map a verbosity mode to a log level, defaulting to WARNING."""
    try:
        return _VERBOSITY_LEVELS[LogVerbosity(verbosity.upper())]
    except ValueError:
        return "WARNING"


class LoggingConfig:
    """Logging configuration manager."""

    # Store adapters are chatty at DEBUG
    QUIET_MODULES = [
        "forum_access.storage",
    ]

    ERROR_ONLY_MODULES = [
        "redis",
        "asyncio",
    ]

    @classmethod
    def build(cls) -> dict:
        """Build a ``dictConfig`` mapping from the environment."""
        verbosity = os.getenv("LOG_VERBOSITY", "NORMAL")
        level = os.getenv("LOG_LEVEL", "").upper() or get_log_level_from_verbosity(verbosity)
        try:
            log_format = LogFormat(os.getenv("LOG_FORMAT", "simple").lower())
        except ValueError:
            log_format = LogFormat.SIMPLE

        config = {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "format": _FORMATS[log_format],
                    "datefmt": "%Y-%m-%d %H:%M:%S",
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "level": level,
                    "formatter": "default",
                    "stream": "ext://sys.stdout",
                },
            },
            "root": {
                "level": level,
                "handlers": ["console"],
            },
            "loggers": {},
        }

        for module in cls.QUIET_MODULES:
            config["loggers"][module] = {
                "level": "WARNING" if level != "DEBUG" else "DEBUG",
                "handlers": ["console"],
                "propagate": False,
            }

        for module in cls.ERROR_ONLY_MODULES:
            config["loggers"][module] = {
                "level": "ERROR",
                "handlers": ["console"],
                "propagate": False,
            }

        return config

    @classmethod
    def configure(cls) -> None:
        """Apply the logging configuration."""
        config = cls.build()
        logging.config.dictConfig(config)
        logging.getLogger(__name__).debug(f"Logging configured: level={config['root']['level']}")


def setup_logging() -> None:
    """Setup logging configuration from environment variables.

    Call once at application startup.
    """
    LoggingConfig.configure()
