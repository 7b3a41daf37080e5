"""
Utility functions for the Release Notifier.

This module provides:
- Central logging configuration
- Environment variable helpers
- The watcher configuration object shared across modules
"""

import logging
import os
import sys
from typing import Any, Dict, List, Optional


# Defaults for the watched release channel
DEFAULT_RELEASES_URL = "https://kubernetes.io/releases/"
DEFAULT_RELEASE_SELECTOR = "span.release-inline-value"
DEFAULT_RELEASE_KEYWORD = "release"
DEFAULT_PRODUCT_NAME = "Kubernetes"
DEFAULT_ALIGNED_VERSION = "unknown"
DEFAULT_STORE_PATH = "data/last_release"
DEFAULT_FETCH_TIMEOUT = 30  # seconds


class WatcherConfig:
    """Settings for a single release check run."""

    def __init__(
        self,
        releases_url: str = DEFAULT_RELEASES_URL,
        selector: str = DEFAULT_RELEASE_SELECTOR,
        keyword: str = DEFAULT_RELEASE_KEYWORD,
        include_prereleases: bool = False,
        product_name: str = DEFAULT_PRODUCT_NAME,
        aligned_version: str = DEFAULT_ALIGNED_VERSION,
        store_path: str = DEFAULT_STORE_PATH,
        template_dir: Optional[str] = None,
        fetch_timeout: int = DEFAULT_FETCH_TIMEOUT,
    ):
        if fetch_timeout <= 0:
            raise ValueError(f"Fetch timeout must be positive, got: {fetch_timeout}")

        self.releases_url = releases_url
        self.selector = selector
        self.keyword = keyword
        self.include_prereleases = include_prereleases
        self.product_name = product_name
        self.aligned_version = aligned_version
        self.store_path = store_path
        self.template_dir = template_dir
        self.fetch_timeout = fetch_timeout

    def __repr__(self) -> str:
        return (
            f"WatcherConfig(releases_url={self.releases_url}, "
            f"store_path={self.store_path}, "
            f"include_prereleases={self.include_prereleases})"
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "releases_url": self.releases_url,
            "selector": self.selector,
            "keyword": self.keyword,
            "include_prereleases": self.include_prereleases,
            "product_name": self.product_name,
            "aligned_version": self.aligned_version,
            "store_path": self.store_path,
            "template_dir": self.template_dir,
            "fetch_timeout": self.fetch_timeout,
        }


def setup_logging(level: str = "INFO") -> logging.Logger:
    """
    Configure and return the root logger for the application.

    Args:
        level: Logging level as string (DEBUG, INFO, WARNING, ERROR, CRITICAL).
               Defaults to INFO.

    Returns:
        Configured logger instance.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout)
        ]
    )

    logger = logging.getLogger("release_notifier")
    logger.setLevel(log_level)

    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance with the specified name.

    Args:
        name: Name for the logger, typically the module name.

    Returns:
        Logger instance configured as a child of the main application logger.
    """
    return logging.getLogger(f"release_notifier.{name}")


def get_env_var(name: str, required: bool = True, default: Optional[str] = None) -> Optional[str]:
    """
    Get an environment variable with optional requirement enforcement.

    Args:
        name: Name of the environment variable.
        required: If True, raises ValueError when variable is not set.
                  Defaults to True.
        default: Default value if variable is not set and not required.

    Returns:
        Value of the environment variable or default.

    Raises:
        ValueError: If required=True and the variable is not set.
    """
    value = os.environ.get(name)

    if value is None or value.strip() == "":
        if required:
            raise ValueError(f"Required environment variable '{name}' is not set")
        return default

    return value.strip()


def split_addresses(value: str) -> List[str]:
    """Split a comma-separated address list, dropping blanks."""
    return [part.strip() for part in value.split(",") if part.strip()]


def sanitize_text(text: str) -> str:
    """
    Clean and normalize text content.

    Removes extra whitespace, newlines, and normalizes spacing.

    Args:
        text: Raw text to sanitize.

    Returns:
        Cleaned text string.
    """
    if not text:
        return ""

    import re
    cleaned = re.sub(r"\s+", " ", text)
    return cleaned.strip()
