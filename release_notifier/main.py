#!/usr/bin/env python3
"""
Command line entry point for the Release Notifier.

Each invocation performs one release check and exits, so the tool can be
driven by cron or a CI schedule. Every option can also be supplied through
the environment variable named in its help text.
"""

from typing import Optional

import click

from release_notifier import __version__
from release_notifier.detect import run_release_check
from release_notifier.errors import ReleaseNotifierError
from release_notifier.notify import missing_email_settings
from release_notifier.utils import (
    DEFAULT_ALIGNED_VERSION,
    DEFAULT_FETCH_TIMEOUT,
    DEFAULT_PRODUCT_NAME,
    DEFAULT_RELEASE_KEYWORD,
    DEFAULT_RELEASE_SELECTOR,
    DEFAULT_RELEASES_URL,
    DEFAULT_STORE_PATH,
    WatcherConfig,
    get_logger,
    setup_logging,
)


# Exit codes
EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_ENV_ERROR = 2


@click.group()
@click.version_option(version=__version__, prog_name="release-notifier")
@click.option("--log-level", envvar="LOG_LEVEL", default="INFO", show_default=True,
              help="Logging level [env: LOG_LEVEL].")
def cli(log_level: str) -> None:
    """Release Notifier: email once when a new release is published."""
    setup_logging(log_level)


@cli.command()
@click.option("--url", "releases_url", envvar="RELEASES_URL", default=DEFAULT_RELEASES_URL,
              show_default=True, help="Release listing page [env: RELEASES_URL].")
@click.option("--selector", envvar="RELEASE_SELECTOR", default=DEFAULT_RELEASE_SELECTOR,
              show_default=True, help="CSS selector for release entries [env: RELEASE_SELECTOR].")
@click.option("--keyword", envvar="RELEASE_KEYWORD", default=DEFAULT_RELEASE_KEYWORD,
              show_default=True, help="Text a release entry must contain [env: RELEASE_KEYWORD].")
@click.option("--include-prereleases", is_flag=True, envvar="INCLUDE_PRERELEASES",
              help="Treat pre-release versions as eligible [env: INCLUDE_PRERELEASES].")
@click.option("--product", "product_name", envvar="PRODUCT_NAME", default=DEFAULT_PRODUCT_NAME,
              show_default=True, help="Project name used in the email [env: PRODUCT_NAME].")
@click.option("--aligned-version", envvar="ALIGNED_VERSION", default=DEFAULT_ALIGNED_VERSION,
              show_default=True, help="Version currently in use [env: ALIGNED_VERSION].")
@click.option("--store", "store_path", envvar="STORE_PATH", default=DEFAULT_STORE_PATH,
              show_default=True, help="File holding the last observed version [env: STORE_PATH].")
@click.option("--template-dir", envvar="TEMPLATE_DIR", default=None,
              help="Directory with an overriding email template [env: TEMPLATE_DIR].")
@click.option("--timeout", "fetch_timeout", envvar="FETCH_TIMEOUT", type=click.IntRange(min=1),
              default=DEFAULT_FETCH_TIMEOUT, show_default=True,
              help="HTTP timeout in seconds [env: FETCH_TIMEOUT].")
@click.option("--dry-run", is_flag=True, envvar="DRY_RUN",
              help="Render the email without sending it or updating the store [env: DRY_RUN].")
@click.pass_context
def check(
    ctx: click.Context,
    releases_url: str,
    selector: str,
    keyword: str,
    include_prereleases: bool,
    product_name: str,
    aligned_version: str,
    store_path: str,
    template_dir: Optional[str],
    fetch_timeout: int,
    dry_run: bool,
) -> None:
    """Check for a new release and notify if one was published."""
    config = WatcherConfig(
        releases_url=releases_url,
        selector=selector,
        keyword=keyword,
        include_prereleases=include_prereleases,
        product_name=product_name,
        aligned_version=aligned_version,
        store_path=store_path,
        template_dir=template_dir,
        fetch_timeout=fetch_timeout,
    )
    ctx.exit(run_check(config, dry_run=dry_run))


def validate_environment(dry_run: bool) -> bool:
    """
    Validate that the email transport is configured.

    Args:
        dry_run: Dry runs never send email, so nothing is required.

    Returns:
        True if the run can proceed, False otherwise.
    """
    logger = get_logger("main")

    if dry_run:
        return True

    missing_vars = missing_email_settings()
    if missing_vars:
        logger.error(f"Missing required environment variables: {', '.join(missing_vars)}")
        return False

    logger.debug("Environment validation passed")
    return True


def run_check(config: WatcherConfig, dry_run: bool = False) -> int:
    """
    Run one release check and map the outcome to an exit code.

    Args:
        config: Watcher settings.
        dry_run: If True, skip sending and persisting.

    Returns:
        Exit code (0 for success or no-op, non-zero for failure).
    """
    logger = get_logger("main")

    logger.info("=" * 60)
    logger.info("Release Notifier - Starting")
    logger.info("=" * 60)

    if dry_run:
        logger.info("Running in DRY RUN mode - notifications will be skipped")

    if not validate_environment(dry_run):
        logger.error("Environment validation failed")
        return EXIT_ENV_ERROR

    logger.debug(f"Configuration: {config.to_dict()}")

    try:
        result = run_release_check(config, dry_run=dry_run)

    except ValueError as e:
        logger.error(f"Configuration error: {e}")
        return EXIT_ENV_ERROR

    except ReleaseNotifierError as e:
        logger.error(f"Release check failed: {e}")
        return EXIT_FAILURE

    except KeyboardInterrupt:
        logger.warning("Release check interrupted by user")
        return EXIT_FAILURE

    except Exception as e:
        logger.exception(f"Unexpected error in release check: {e}")
        return EXIT_FAILURE

    logger.info("=" * 60)
    logger.info("Release Notifier - Complete")
    logger.info(
        f"Summary: observed {result.observed}, stored {result.stored}, "
        f"notified={result.notified}, saved={result.saved}"
    )
    logger.info("=" * 60)

    return EXIT_SUCCESS


if __name__ == "__main__":
    cli()
