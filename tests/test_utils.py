"""
Tests for the utils module.
"""

import logging
import os
import pytest
from unittest.mock import patch

from release_notifier.utils import (
    DEFAULT_FETCH_TIMEOUT,
    DEFAULT_RELEASES_URL,
    WatcherConfig,
    get_env_var,
    get_logger,
    sanitize_text,
    split_addresses,
)


class TestWatcherConfig:
    """Tests for the watcher configuration."""

    def test_defaults(self):
        """Test default settings watch the Kubernetes releases page."""
        config = WatcherConfig()

        assert config.releases_url == DEFAULT_RELEASES_URL
        assert config.include_prereleases is False
        assert config.fetch_timeout == DEFAULT_FETCH_TIMEOUT
        assert config.template_dir is None

    def test_non_positive_timeout_rejected(self):
        """Test the fetch timeout must be finite and positive."""
        with pytest.raises(ValueError):
            WatcherConfig(fetch_timeout=0)

    def test_to_dict(self):
        """Test dictionary conversion includes every setting."""
        data = WatcherConfig(store_path="state/release").to_dict()

        assert data["store_path"] == "state/release"
        assert set(data) == {
            "releases_url", "selector", "keyword", "include_prereleases",
            "product_name", "aligned_version", "store_path", "template_dir",
            "fetch_timeout",
        }


class TestGetEnvVar:
    """Tests for environment variable access."""

    def test_value_is_stripped(self):
        with patch.dict(os.environ, {"RN_TEST": "  value "}, clear=True):
            assert get_env_var("RN_TEST") == "value"

    def test_required_missing(self):
        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(ValueError, match="RN_TEST"):
                get_env_var("RN_TEST")

    def test_optional_default(self):
        with patch.dict(os.environ, {"RN_TEST": "   "}, clear=True):
            assert get_env_var("RN_TEST", required=False, default="x") == "x"


class TestHelpers:
    """Tests for small text helpers."""

    def test_split_addresses(self):
        assert split_addresses("a@example.com, b@example.com,,") == [
            "a@example.com", "b@example.com"
        ]

    def test_sanitize_text(self):
        assert sanitize_text("  1.27.0 \n\t release ") == "1.27.0 release"
        assert sanitize_text("") == ""

    def test_logger_namespace(self):
        logger = get_logger("fetch")

        assert isinstance(logger, logging.Logger)
        assert logger.name == "release_notifier.fetch"
