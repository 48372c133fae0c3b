"""Build collector: records pipeline events into an EventLog.

Passed explicitly to ``build_manifest`` and ``ManifestWatcher``; there is no
module-level collector.

Thread Safety:
    The collector delegates to ``EventLog`` which is internally locked.

"""

from __future__ import annotations

from typing import TYPE_CHECKING

from prowl.observability.events import ManifestBuilt, ManifestRebuilt, ScanCompleted, now_ns
from prowl.observability.log import EventLog

if TYPE_CHECKING:
    from prowl.routes.types import RouteManifest


class BuildCollector:
    """Records scan and manifest events.

    Args:
        log: The EventLog to store events in.

    """

    __slots__ = ("_log",)

    def __init__(self, log: EventLog | None = None) -> None:
        self._log = log if log is not None else EventLog()

    @property
    def log(self) -> EventLog:
        """The underlying event log."""
        return self._log

    def record_scan(self, root: str, *, files: int, duration_ms: float = 0.0) -> None:
        """Record a completed directory scan."""
        self._log.append(
            ScanCompleted(
                root=root,
                files=files,
                duration_ms=duration_ms,
                timestamp_ns=now_ns(),
            )
        )

    def record_manifest(self, manifest: RouteManifest, *, duration_ms: float = 0.0) -> None:
        """Record a validated manifest."""
        self._log.append(
            ManifestBuilt(
                root=manifest.root_dir,
                routes=len(manifest.routes),
                errors=len(manifest.errors),
                warnings=len(manifest.warnings),
                duration_ms=duration_ms,
                timestamp_ns=now_ns(),
            )
        )

    def record_rebuild(
        self,
        manifest: RouteManifest,
        *,
        trigger_path: str,
        kind: str = "modified",
        duration_ms: float = 0.0,
    ) -> None:
        """Record a watcher-triggered rebuild."""
        self._log.append(
            ManifestRebuilt(
                trigger_path=trigger_path,
                kind=kind,  # type: ignore[arg-type]
                routes=len(manifest.routes),
                errors=len(manifest.errors),
                duration_ms=duration_ms,
                timestamp_ns=now_ns(),
            )
        )
