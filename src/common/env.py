"""Environment configuration interface for answer-formatting.

This module provides a clean interface for accessing environment variables,
centralizing all environment variable access in one place.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file if it exists
load_dotenv()

_TRUE_VALUES = {"1", "true", "yes", "on"}


class Environment:
    """Interface for accessing environment configuration."""

    @staticmethod
    def log_level() -> str:
        """Get the default log level.

        Returns:
            Log level name, defaults to 'INFO'
        """
        return os.getenv("LOG_LEVEL", "INFO").upper()

    @staticmethod
    def pass_threshold() -> int:
        """Get the minimum score for an answer to pass validation.

        Returns:
            Pass threshold, defaults to 70
        """
        return int(os.getenv("FORMAT_PASS_THRESHOLD", "70"))

    @staticmethod
    def error_penalty() -> int:
        """Get the score penalty applied per error violation.

        Returns:
            Penalty, defaults to 30
        """
        return int(os.getenv("FORMAT_ERROR_PENALTY", "30"))

    @staticmethod
    def warning_penalty() -> int:
        """Get the score penalty applied per warning violation.

        Returns:
            Penalty, defaults to 10
        """
        return int(os.getenv("FORMAT_WARNING_PENALTY", "10"))

    @staticmethod
    def info_penalty() -> int:
        """Get the score penalty applied per info violation.

        Returns:
            Penalty, defaults to 2
        """
        return int(os.getenv("FORMAT_INFO_PENALTY", "2"))

    @staticmethod
    def patterns_path() -> Path | None:
        """Get the pattern definition file.

        Returns:
            Path to a patterns JSON file, or None to use the bundled patterns
        """
        value = os.getenv("FORMAT_PATTERNS_PATH")
        return Path(value) if value else None

    @staticmethod
    def auto_fix_enabled() -> bool:
        """Check whether the pipeline should auto-format failing answers.

        Returns:
            True unless FORMAT_AUTO_FIX is set to a false value
        """
        return os.getenv("FORMAT_AUTO_FIX", "true").strip().lower() in _TRUE_VALUES

    @staticmethod
    def metrics_retention_days() -> int:
        """Get how many days of metric events are retained.

        Returns:
            Retention in days, defaults to 30 (0 disables age pruning)
        """
        return int(os.getenv("METRICS_RETENTION_DAYS", "30"))

    @staticmethod
    def metrics_max_events() -> int:
        """Get the maximum number of retained events per event kind.

        Returns:
            Event cap, defaults to 10000 (0 disables count pruning)
        """
        return int(os.getenv("METRICS_MAX_EVENTS", "10000"))


# Singleton instance for convenient access
env = Environment()
