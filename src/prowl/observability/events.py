"""Event model for route discovery builds.

All events are frozen dataclasses with:
- ``timestamp_ns``: Monotonic nanosecond timestamp
- Descriptive fields for the specific event type

Thread Safety:
    All events are frozen (immutable) and safe to share across threads.

"""

import time
from dataclasses import dataclass
from typing import Literal


# ---------------------------------------------------------------------------
# Build pipeline events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ScanCompleted:
    """The app directory was walked.

    Attributes:
        root: Absolute path of the scanned app directory.
        files: Number of convention files found.
        duration_ms: Time spent walking in milliseconds.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    root: str
    files: int
    duration_ms: float
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class ManifestBuilt:
    """A manifest was compiled, resolved and validated.

    Attributes:
        root: Absolute path of the app directory.
        routes: Number of registrable routes.
        errors: Number of validation errors.
        warnings: Number of validation warnings.
        duration_ms: Time from scan start to validated manifest.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    root: str
    routes: int
    errors: int
    warnings: int
    duration_ms: float
    timestamp_ns: int


# ---------------------------------------------------------------------------
# Watcher events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ManifestRebuilt:
    """The watcher rebuilt the manifest after a file change.

    Attributes:
        trigger_path: File whose change triggered the rebuild.
        kind: Type of filesystem change.
        routes: Number of registrable routes after the rebuild.
        errors: Number of validation errors after the rebuild.
        duration_ms: Rebuild time in milliseconds.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    trigger_path: str
    kind: Literal["created", "modified", "deleted"]
    routes: int
    errors: int
    duration_ms: float
    timestamp_ns: int


# ---------------------------------------------------------------------------
# Union type
# ---------------------------------------------------------------------------

type BuildEvent = ScanCompleted | ManifestBuilt | ManifestRebuilt


def now_ns() -> int:
    """Return the current monotonic clock value in nanoseconds."""
    return time.monotonic_ns()


def elapsed_ms(start_ns: int) -> float:
    """Milliseconds elapsed since *start_ns* (a :func:`now_ns` value)."""
    return (now_ns() - start_ns) / 1_000_000
