"""Configuration settings for the hnfetch client."""

from dataclasses import dataclass
from pathlib import Path
import math
import os

from dotenv import load_dotenv

from hnfetch import __version__


DEFAULT_API_BASE_URL = "https://hacker-news.firebaseio.com/v0"

# Discussion page for stories without an external link
DEFAULT_ITEM_PAGE_URL = "https://news.ycombinator.com/item?id={id}"

# The listing endpoints return at most 500 ids
MIN_COUNT = 1
MAX_COUNT = 500

MAX_WORKERS_LIMIT = 32


class ConfigurationError(Exception):
    """Raised when configuration validation fails."""

    pass


@dataclass
class Settings:
    """Configuration settings for the hnfetch client.

    Attributes:
        api_base_url: Base URL of the Hacker News Firebase API
        item_page_url: Template for a story's discussion page, with an {id} field
        request_timeout_seconds: Per-request timeout for HTTP calls
        default_count: Number of stories to show when --count is not given
        max_workers: Detail fetch workers (1 means sequential)
        max_retries: Retry attempts for a failed detail fetch (0 disables retry)
        user_agent: User-Agent header sent with every request
    """

    api_base_url: str = DEFAULT_API_BASE_URL
    item_page_url: str = DEFAULT_ITEM_PAGE_URL
    request_timeout_seconds: float = 10.0
    default_count: int = 30
    max_workers: int = 1
    max_retries: int = 0
    user_agent: str = f"hnfetch/{__version__}"

    def validate(self) -> None:
        """Validate configuration values.

        Raises:
            ConfigurationError: If any configuration value is invalid.
        """
        errors: list[str] = []

        if not self.api_base_url.startswith(("http://", "https://")):
            errors.append("api_base_url must be an http(s) URL")

        if "{id}" not in self.item_page_url:
            errors.append("item_page_url must contain an {id} placeholder")

        if not math.isfinite(self.request_timeout_seconds) or self.request_timeout_seconds <= 0.0:
            errors.append("request_timeout_seconds must be a positive finite number")

        if self.default_count < MIN_COUNT or self.default_count > MAX_COUNT:
            errors.append(
                f"default_count must be between {MIN_COUNT} and {MAX_COUNT}"
            )

        if self.max_workers < 1 or self.max_workers > MAX_WORKERS_LIMIT:
            errors.append(f"max_workers must be between 1 and {MAX_WORKERS_LIMIT}")

        if self.max_retries < 0:
            errors.append("max_retries must be non-negative")

        if not self.user_agent.strip():
            errors.append("user_agent must not be empty")

        if errors:
            raise ConfigurationError("; ".join(errors))


def _parse_float(value: str | None, default: float) -> float:
    """Parse a string to float, returning default if None or invalid."""
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _parse_int(value: str | None, default: int) -> int:
    """Parse a string to int, returning default if None or invalid."""
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def load_settings(env_path: str | Path | None = None, validate: bool = True) -> Settings:
    """Load settings from environment variables and .env file.

    Args:
        env_path: Optional path to .env file. If None, searches for .env
                  in current directory and parent directories.
        validate: If True, validate settings after loading.

    Returns:
        Settings instance with loaded configuration.

    Raises:
        ConfigurationError: If validate=True and configuration is invalid.
    """
    if env_path:
        load_dotenv(env_path)
    else:
        load_dotenv()

    defaults = Settings()
    settings = Settings(
        api_base_url=os.getenv("HN_API_BASE_URL", defaults.api_base_url).rstrip("/"),
        item_page_url=os.getenv("HN_ITEM_PAGE_URL", defaults.item_page_url),
        request_timeout_seconds=_parse_float(
            os.getenv("HN_REQUEST_TIMEOUT"), defaults.request_timeout_seconds
        ),
        default_count=_parse_int(
            os.getenv("HN_DEFAULT_COUNT"), defaults.default_count
        ),
        max_workers=_parse_int(
            os.getenv("HN_MAX_WORKERS"), defaults.max_workers
        ),
        max_retries=_parse_int(
            os.getenv("HN_MAX_RETRIES"), defaults.max_retries
        ),
        user_agent=os.getenv("HN_USER_AGENT", defaults.user_agent),
    )

    if validate:
        settings.validate()

    return settings
