"""
Fetch module for the Release Notifier.

One read-only GET of the release listing page. The request carries a finite
timeout and is retried a bounded number of times on 429 and 5xx responses.
Server Retry-After headers are ignored so a busy server cannot stretch the
run. Nothing here raises to the caller: every failure becomes an
unsuccessful FetchResult.
"""

from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlparse

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from release_notifier import __version__
from release_notifier.utils import DEFAULT_FETCH_TIMEOUT, get_logger


# Module logger
logger = get_logger("fetch")

DEFAULT_MAX_RETRIES = 3
DEFAULT_BACKOFF_FACTOR = 0.5  # sleeps 0s, 1s, 2s between attempts
RETRY_STATUSES = (429, 500, 502, 503, 504)
USER_AGENT = f"release-notifier/{__version__}"


@dataclass
class FetchResult:
    """
    Outcome of fetching the release listing page.

    Attributes:
        source_url: The URL that was fetched.
        html_content: Page body if successful, None otherwise.
        success: Whether the page was retrieved with HTTP 200.
        error_message: Why the fetch failed, None on success.
        status_code: HTTP status code if a response arrived.
    """
    source_url: str
    html_content: Optional[str]
    success: bool
    error_message: Optional[str] = None
    status_code: Optional[int] = None


def _failed(url: str, message: str, status_code: Optional[int] = None) -> FetchResult:
    return FetchResult(
        source_url=url,
        html_content=None,
        success=False,
        error_message=message,
        status_code=status_code,
    )


def create_session(
    max_retries: int = DEFAULT_MAX_RETRIES,
    backoff_factor: float = DEFAULT_BACKOFF_FACTOR
) -> requests.Session:
    """
    Create a requests session for polling the release page.

    Args:
        max_retries: Maximum number of retry attempts.
        backoff_factor: Multiplier for exponential backoff between retries.

    Returns:
        Configured requests.Session instance.
    """
    session = requests.Session()

    retry_strategy = Retry(
        total=max_retries,
        backoff_factor=backoff_factor,
        status_forcelist=RETRY_STATUSES,
        allowed_methods=["GET"],
        respect_retry_after_header=False,
        raise_on_status=False
    )

    adapter = HTTPAdapter(max_retries=retry_strategy)
    session.mount("http://", adapter)
    session.mount("https://", adapter)

    session.headers.update({
        "User-Agent": USER_AGENT,
        "Accept": "text/html",
    })

    return session


def validate_url(url: str) -> bool:
    """Check that a URL is absolute and uses HTTP or HTTPS."""
    try:
        parsed = urlparse(url)
        return parsed.scheme in ("http", "https") and bool(parsed.netloc)
    except ValueError:
        return False


def fetch_page(
    url: str,
    session: requests.Session,
    timeout: int = DEFAULT_FETCH_TIMEOUT
) -> FetchResult:
    """
    GET the release listing page through the given session.

    Args:
        url: Release listing URL.
        session: Session from create_session().
        timeout: Connect and read timeout in seconds.

    Returns:
        FetchResult, successful only for HTTP 200.
    """
    if not validate_url(url):
        logger.warning(f"Release page URL is not http(s): {url}")
        return _failed(url, "Invalid URL format")

    try:
        response = session.get(url, timeout=timeout)
    except requests.exceptions.Timeout:
        logger.warning(f"Release page did not answer within {timeout}s: {url}")
        return _failed(url, "Request timeout")
    except requests.exceptions.ConnectionError as e:
        logger.warning(f"Could not connect to release page {url}: {e}")
        return _failed(url, f"Connection error: {e}")
    except requests.exceptions.RequestException as e:
        logger.error(f"Release page request failed for {url}: {e}")
        return _failed(url, f"Request failed: {e}")

    if response.status_code != 200:
        logger.warning(f"Release page returned HTTP {response.status_code}: {url}")
        return _failed(url, f"HTTP {response.status_code}", response.status_code)

    logger.info(f"Fetched release page {url} ({len(response.text)} bytes)")
    return FetchResult(
        source_url=url,
        html_content=response.text,
        success=True,
        status_code=response.status_code
    )


def fetch_release_page(
    url: str,
    timeout: int = DEFAULT_FETCH_TIMEOUT,
    max_retries: int = DEFAULT_MAX_RETRIES,
    backoff_factor: float = DEFAULT_BACKOFF_FACTOR
) -> FetchResult:
    """
    Fetch the release listing page using a short-lived session.

    Args:
        url: Release listing URL.
        timeout: Request timeout in seconds.
        max_retries: Maximum retry attempts.
        backoff_factor: Exponential backoff multiplier for retries.

    Returns:
        FetchResult for the page.
    """
    logger.info(f"Querying {url}")

    session = create_session(
        max_retries=max_retries,
        backoff_factor=backoff_factor
    )

    try:
        return fetch_page(url, session, timeout)
    finally:
        session.close()
