"""
Store module for the Release Notifier.

This module persists the last observed release version between runs as a
single UTF-8 text file. A missing file is the normal first-run state. Any
read problem degrades to MIN_VERSION; a write problem is fatal, since losing
the record would re-send the same notification on every later run.
"""

import os
import tempfile
from pathlib import Path

import semver

from release_notifier.errors import StoreWriteError
from release_notifier.utils import DEFAULT_STORE_PATH, get_logger
from release_notifier.version import MIN_VERSION, parse_version


# Module logger
logger = get_logger("store")

# World-readable, unlike the 0600 of mkstemp
RECORD_MODE = 0o644


def load_stored_version(filepath: str = DEFAULT_STORE_PATH) -> semver.Version:
    """
    Load the last observed version from storage.

    Args:
        filepath: Path to the version record.

    Returns:
        The stored version, or MIN_VERSION if there is no usable record.
    """
    path = Path(filepath)

    try:
        if not path.exists():
            logger.info(f"No previous release record at {filepath}, treating as first run")
            return MIN_VERSION

        raw = path.read_text(encoding="utf-8").strip()

    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"Could not read release record {filepath}: {e}")
        return MIN_VERSION

    version = parse_version(raw)
    if version is None:
        logger.warning(f"Ignoring unparseable release record in {filepath}: {raw!r}")
        return MIN_VERSION

    logger.info(f"Previously observed version: {version}")
    return version


def save_stored_version(version: semver.Version, filepath: str = DEFAULT_STORE_PATH) -> None:
    """
    Save a version to storage using an atomic write.

    Args:
        version: Version to persist.
        filepath: Path to the version record.

    Raises:
        StoreWriteError: If the record cannot be written.
    """
    logger.debug(f"Saving version {version} to {filepath}")

    temp_path = None

    try:
        path = Path(filepath)
        path.parent.mkdir(parents=True, exist_ok=True)

        # Write to a temporary file next to the target, then rename over it
        fd, temp_path = tempfile.mkstemp(prefix=".release_", dir=path.parent)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(str(version))

        os.chmod(temp_path, RECORD_MODE)
        # Fails if filepath is a directory
        os.replace(temp_path, filepath)
        temp_path = None

    except OSError as e:
        logger.error(f"Failed to save release record to {filepath}: {e}")
        raise StoreWriteError(f"Cannot write release record {filepath}", original_error=e) from e

    finally:
        if temp_path is not None and os.path.exists(temp_path):
            os.unlink(temp_path)

    logger.info(f"Saved version {version} to {filepath}")


def ensure_store_writable(filepath: str = DEFAULT_STORE_PATH) -> None:
    """
    Fail early when the record path can never hold the record.

    Raises:
        StoreWriteError: If filepath is an existing directory.
    """
    if Path(filepath).is_dir():
        logger.error(f"Release record path {filepath} is a directory")
        raise StoreWriteError(f"Release record path {filepath} is a directory")
