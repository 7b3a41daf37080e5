"""
Parse module for the Release Notifier.

This module extracts version-like tokens from the release listing page and
reduces them to the single latest version. Page structure is not guaranteed
stable, so every step degrades to "nothing found" instead of raising.
"""

from typing import List

import semver
from bs4 import BeautifulSoup

from release_notifier.fetch import fetch_release_page
from release_notifier.utils import (
    DEFAULT_FETCH_TIMEOUT,
    DEFAULT_RELEASE_KEYWORD,
    DEFAULT_RELEASE_SELECTOR,
    get_logger,
    sanitize_text,
)
from release_notifier.version import MIN_VERSION, is_min_version, max_version


# Module logger
logger = get_logger("parse")


def extract_version_candidates(
    html: str,
    selector: str = DEFAULT_RELEASE_SELECTOR,
    keyword: str = DEFAULT_RELEASE_KEYWORD
) -> List[str]:
    """
    Extract candidate version tokens from HTML content.

    Each element matching the selector contributes the first word of its
    text, provided the text contains the keyword. An empty keyword accepts
    every matching element.

    Args:
        html: Raw HTML content string.
        selector: CSS selector for release elements.
        keyword: Text an element must contain to be considered.

    Returns:
        List of raw candidate tokens (not yet validated).
    """
    if not html:
        logger.warning("Empty HTML content, no version candidates")
        return []

    try:
        soup = BeautifulSoup(html, "html.parser")
        elements = soup.select(selector)
    except Exception as e:
        logger.warning(f"Failed to parse release page with selector '{selector}': {e}")
        return []

    candidates = []
    needle = keyword.lower()

    for element in elements:
        text = sanitize_text(element.get_text())
        if not text:
            continue
        if needle and needle not in text.lower():
            continue
        candidates.append(text.split(" ")[0])

    logger.debug(f"Found {len(candidates)} candidate token(s) for selector '{selector}'")

    return candidates


def fetch_latest_version(
    url: str,
    selector: str = DEFAULT_RELEASE_SELECTOR,
    keyword: str = DEFAULT_RELEASE_KEYWORD,
    include_prereleases: bool = False,
    timeout: int = DEFAULT_FETCH_TIMEOUT
) -> semver.Version:
    """
    Fetch the release page and return the latest published version.

    Args:
        url: Release listing URL.
        selector: CSS selector for release elements.
        keyword: Text an element must contain to be considered.
        include_prereleases: Whether pre-release versions may be the latest.
        timeout: Request timeout in seconds.

    Returns:
        The highest valid version on the page, or MIN_VERSION if the page
        could not be fetched or contained no valid version.
    """
    result = fetch_release_page(url, timeout=timeout)

    if not result.success or not result.html_content:
        logger.warning(
            f"Can't load the release page {url}: {result.error_message or 'empty response'}"
        )
        return MIN_VERSION

    candidates = extract_version_candidates(result.html_content, selector, keyword)
    latest = max_version(candidates, include_prereleases=include_prereleases)

    if is_min_version(latest):
        logger.warning(f"No valid release version found on {url}")
    else:
        logger.info(f"Latest published version: {latest}")

    return latest
