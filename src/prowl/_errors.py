"""Prowl error hierarchy.

All prowl-specific errors inherit from ProwlError for easy catching.

Problems found in the scanned files themselves (bad segment syntax, page/route
conflicts) are never raised; they are reported as validation records on the
manifest. Only caller contract violations raise.
"""


class ProwlError(Exception):
    """Base error for all prowl operations."""


class ConfigError(ProwlError):
    """Invalid or missing configuration."""


class ScanError(ProwlError):
    """The app directory cannot be scanned (missing or not a directory)."""


class WatchError(ProwlError):
    """Error in the file watcher (start/stop lifecycle misuse)."""
