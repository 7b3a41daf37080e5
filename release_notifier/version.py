"""
Version handling for the Release Notifier.

Versions are ``semver.Version`` values compared by SemVer 2.0 precedence.
``MIN_VERSION`` stands for "no version found" and "no prior record"; parsing
only accepts versions strictly above it, so it never collides with a real
release.
"""

from typing import Iterable, Optional

import semver

from release_notifier.utils import get_logger


logger = get_logger("version")

MIN_VERSION = semver.Version(0, 0, 0)


def parse_version(token: Optional[str]) -> Optional[semver.Version]:
    """
    Parse a version-like token into a semantic version.

    Accepts an optional leading ``v`` and short forms such as ``1.27``
    (missing components become 0).

    Args:
        token: Raw token, e.g. ``"v1.28.0-beta.1"``.

    Returns:
        Parsed version, or None if the token is not a valid version above
        MIN_VERSION.
    """
    if not token:
        return None

    candidate = token.strip()
    if candidate[:1] in ("v", "V"):
        candidate = candidate[1:]

    try:
        version = semver.Version.parse(candidate, optional_minor_and_patch=True)
    except (ValueError, TypeError):
        logger.debug(f"Discarding non-version token: {token!r}")
        return None

    if version <= MIN_VERSION:
        logger.debug(f"Discarding token at or below minimum version: {token!r}")
        return None

    return version


def is_min_version(version: semver.Version) -> bool:
    """Check whether a version is the "nothing found" sentinel."""
    return version == MIN_VERSION


def max_version(
    tokens: Iterable[str],
    include_prereleases: bool = False
) -> semver.Version:
    """
    Return the highest valid version among the tokens.

    Args:
        tokens: Candidate tokens, possibly malformed.
        include_prereleases: If False, pre-release versions are skipped.

    Returns:
        The maximum version, or MIN_VERSION if no token qualifies.
    """
    latest = MIN_VERSION

    for token in tokens:
        version = parse_version(token)
        if version is None:
            continue
        if version.prerelease and not include_prereleases:
            logger.debug(f"Skipping pre-release version: {version}")
            continue
        if version > latest:
            latest = version

    return latest
