"""
Change detection for the Release Notifier.

One run fetches the latest published version, compares it with the stored
one and, only when it is strictly newer, sends a notification and records
the new version. Dispatch always happens before the record is written, so a
failed notification is retried on the next run instead of being lost.
"""

from dataclasses import dataclass

import semver

from release_notifier.notify import NotificationPayload, notify_new_release
from release_notifier.parse import fetch_latest_version
from release_notifier.store import (
    ensure_store_writable,
    load_stored_version,
    save_stored_version,
)
from release_notifier.utils import WatcherConfig, get_logger


# Module logger
logger = get_logger("detect")


@dataclass
class CheckResult:
    """
    Outcome of a single release check.

    Attributes:
        observed: Latest version found at the source (MIN_VERSION if none).
        stored: Version recorded by the previous completed run.
        notified: Whether a notification email was sent.
        saved: Whether the store was updated.
    """
    observed: semver.Version
    stored: semver.Version
    notified: bool = False
    saved: bool = False

    @property
    def is_new_release(self) -> bool:
        return self.observed > self.stored


def run_release_check(config: WatcherConfig, dry_run: bool = False) -> CheckResult:
    """
    Run one detect-and-notify cycle.

    Args:
        config: Watcher settings.
        dry_run: If True, render the notification without sending it and
                 leave the store untouched.

    Returns:
        CheckResult describing what happened.

    Raises:
        ReleaseNotifierError: On template, delivery or store write failure.
        ValueError: If email settings are missing or invalid.
    """
    observed = fetch_latest_version(
        config.releases_url,
        selector=config.selector,
        keyword=config.keyword,
        include_prereleases=config.include_prereleases,
        timeout=config.fetch_timeout,
    )
    stored = load_stored_version(config.store_path)

    result = CheckResult(observed=observed, stored=stored)

    if not result.is_new_release:
        logger.info(f"No new release (observed {observed}, stored {stored})")
        return result

    logger.info(f"New release detected: {stored} -> {observed}")

    if not dry_run:
        ensure_store_writable(config.store_path)

    payload = NotificationPayload(
        new_version=str(observed),
        contextual_version=config.aligned_version,
    )
    result.notified = notify_new_release(
        payload,
        config.product_name,
        template_dir=config.template_dir,
        dry_run=dry_run,
    )

    if dry_run:
        logger.info("[DRY RUN] Release record not updated")
        return result

    save_stored_version(observed, config.store_path)
    result.saved = True

    return result
