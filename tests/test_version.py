"""
Tests for the version module.

Tests cover:
- Parsing of valid, prefixed and short version tokens
- Rejection of malformed tokens
- The minimum sentinel version
- Selection of the maximum version with and without pre-releases
"""

import semver

from release_notifier.version import (
    MIN_VERSION,
    is_min_version,
    max_version,
    parse_version,
)


class TestParseVersion:
    """Tests for version token parsing."""

    def test_plain_version(self):
        """Test a full major.minor.patch version."""
        assert parse_version("1.29.1") == semver.Version(1, 29, 1)

    def test_leading_v(self):
        """Test that a leading 'v' is accepted."""
        assert parse_version("v1.28.3") == semver.Version(1, 28, 3)
        assert parse_version("V1.28.3") == semver.Version(1, 28, 3)

    def test_short_version(self):
        """Test that missing minor/patch components default to zero."""
        assert parse_version("1.27") == semver.Version(1, 27, 0)

    def test_prerelease_version(self):
        """Test that pre-release qualifiers are kept."""
        version = parse_version("1.28.0-beta.1")

        assert version is not None
        assert version.prerelease == "beta.1"

    def test_surrounding_whitespace(self):
        """Test that whitespace around the token is ignored."""
        assert parse_version("  1.2.3\n") == semver.Version(1, 2, 3)

    def test_malformed_tokens(self):
        """Test that non-version tokens are discarded."""
        for token in ["release", "1.x.3", "latest", "1.2.3.4", "v", "-1.2.3", "1..2"]:
            assert parse_version(token) is None, token

    def test_empty_token(self):
        """Test empty and missing tokens."""
        assert parse_version("") is None
        assert parse_version(None) is None

    def test_versions_at_or_below_minimum_rejected(self):
        """Test that the sentinel value itself is never accepted as a release."""
        assert parse_version("0.0.0") is None
        assert parse_version("0.0.0-alpha") is None
        assert parse_version("0.0.1") == semver.Version(0, 0, 1)


class TestMinVersion:
    """Tests for the minimum sentinel version."""

    def test_sentinel_below_real_versions(self):
        """Test the sentinel compares below every accepted version."""
        for token in ["0.0.1", "0.1.0-alpha", "1.0.0", "1.0.0-rc.1"]:
            assert MIN_VERSION < parse_version(token)

    def test_is_min_version(self):
        """Test sentinel detection."""
        assert is_min_version(MIN_VERSION) is True
        assert is_min_version(semver.Version(0, 0, 0)) is True
        assert is_min_version(semver.Version(1, 0, 0)) is False


class TestMaxVersion:
    """Tests for selecting the latest version."""

    def test_returns_semantic_maximum(self):
        """Test numeric component comparison, not string comparison."""
        tokens = ["1.9.0", "1.10.0", "1.2.11"]

        assert max_version(tokens) == semver.Version(1, 10, 0)

    def test_order_independent(self):
        """Test the result does not depend on token order."""
        tokens = ["1.26.3", "1.29.1", "1.27.0"]

        assert max_version(tokens) == max_version(list(reversed(tokens)))

    def test_malformed_tokens_discarded(self):
        """Test malformed tokens do not abort selection."""
        tokens = ["garbage", "1.26.3", "", "v1.27.0", "not.a.version"]

        assert max_version(tokens) == semver.Version(1, 27, 0)

    def test_no_valid_tokens(self):
        """Test the sentinel is returned when nothing parses."""
        assert max_version(["foo", "bar"]) == MIN_VERSION
        assert max_version([]) == MIN_VERSION

    def test_prereleases_excluded_by_default(self):
        """Test pre-releases are skipped unless requested."""
        tokens = ["1.26.3", "1.27.0", "1.28.0-beta"]

        assert max_version(tokens) == semver.Version(1, 27, 0)

    def test_prereleases_included_when_requested(self):
        """Test pre-releases can win when included."""
        tokens = ["1.26.3", "1.27.0", "1.28.0-beta"]

        assert str(max_version(tokens, include_prereleases=True)) == "1.28.0-beta"

    def test_release_beats_its_prerelease(self):
        """Test a release ranks above its own pre-release."""
        tokens = ["1.28.0-rc.1", "1.28.0"]

        assert max_version(tokens, include_prereleases=True) == semver.Version(1, 28, 0)

    def test_only_prereleases_excluded(self):
        """Test a listing with only pre-releases yields the sentinel by default."""
        assert max_version(["2.0.0-alpha", "2.0.0-beta"]) == MIN_VERSION
