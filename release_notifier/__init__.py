"""
Release Notifier - Automated release channel monitoring.

This package provides functionality to:
- Fetch a project's release listing page
- Parse it into the latest semantic version
- Compare it with the last version seen by a previous run
- Send a single email notification per new release
"""

__version__ = "1.0.0"
__author__ = "Release Notifier Team"
