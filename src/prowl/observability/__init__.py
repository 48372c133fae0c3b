"""Build observability: a unified event model for route discovery.

Records events from:
- **Scanner**: directory walks (files found, walk time)
- **Manifest**: compile/resolve/validate runs (routes, errors, warnings)
- **Watcher**: full rebuilds triggered by file changes

All events are frozen dataclasses with monotonic nanosecond timestamps.

Quick Start:
    >>> from prowl.observability import BuildCollector, EventLog
    >>> log = EventLog()
    >>> collector = BuildCollector(log)
    >>> # build_manifest(config, collector=collector)

"""

from prowl.observability.collector import BuildCollector
from prowl.observability.events import (
    BuildEvent,
    ManifestBuilt,
    ManifestRebuilt,
    ScanCompleted,
    elapsed_ms,
    now_ns,
)
from prowl.observability.log import EventLog

__all__ = [
    "BuildCollector",
    "BuildEvent",
    "EventLog",
    "ManifestBuilt",
    "ManifestRebuilt",
    "ScanCompleted",
    "elapsed_ms",
    "now_ns",
]
