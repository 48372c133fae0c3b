"""File watcher — rebuilds the route manifest when convention files change.

Monitors the project root for changes. A batch of changes that touches a
convention file (page, route, layout, ...) or the prowl config triggers a
full, fresh ``build_manifest`` run:

- Route file created/deleted/modified -> rebuild
- Boundary file (layout, middleware, loading, error, not-found) -> rebuild
- Directory added, removed or renamed -> rebuild (its name is a URL segment)
- prowl.yaml / prowl.toml changed -> reload config, then rebuild

There is deliberately no incremental patching of the previous manifest.
"""

from __future__ import annotations

import asyncio
import queue
import sys
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Literal

from watchfiles import Change

from prowl._errors import ConfigError, ScanError, WatchError
from prowl.config_loader import CONFIG_FILE_NAMES, load_config
from prowl.observability.events import elapsed_ms, now_ns
from prowl.routes.manifest import build_manifest
from prowl.routes.scanner import get_file_type, is_excluded_file, is_ignored_dir

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Callable, Iterable

    from prowl.config import ProwlConfig
    from prowl.observability.collector import BuildCollector
    from prowl.routes.types import RouteManifest

type ChangeCategory = Literal["route", "boundary", "directory", "config"]


@dataclass(frozen=True, slots=True)
class ChangeEvent:
    """A relevant file change detected by the watcher.

    Attributes:
        path: Absolute path to the changed file.
        kind: Type of filesystem change.
        category: What kind of file changed.

    """

    path: Path
    kind: Literal["created", "modified", "deleted"]
    category: ChangeCategory


@dataclass(frozen=True, slots=True)
class Rebuild:
    """Result of one watcher-triggered rebuild.

    Attributes:
        manifest: The freshly built manifest.
        changes: The relevant changes that triggered it.
        duration_ms: Rebuild time in milliseconds.

    """

    manifest: RouteManifest
    changes: tuple[ChangeEvent, ...]
    duration_ms: float


# Mapping from watchfiles Change enum to our kind literals.
_CHANGE_KIND_MAP: dict[Change, Literal["created", "modified", "deleted"]] = {
    Change.added: "created",
    Change.modified: "modified",
    Change.deleted: "deleted",
}


def categorize_change(path: Path, config: ProwlConfig) -> ChangeCategory | None:
    """Determine the category of a changed file based on its location and name.

    Returns None if the file cannot affect the manifest.

    A moved or renamed directory is reported by watchfiles only on the
    directory paths, so any path under the app directory that is, or looks
    like it was, a directory (no suffix) counts as ``directory``.

    """
    try:
        rel = path.relative_to(config.root)
    except ValueError:
        return None

    parts = rel.parts
    if not parts:
        return None

    if len(parts) == 1 and parts[0] in CONFIG_FILE_NAMES:
        return "config"

    try:
        app_parts = path.relative_to(config.app_path).parts
    except ValueError:
        return None
    if not app_parts or any(is_ignored_dir(part) for part in app_parts[:-1]):
        return None

    if is_excluded_file(path.name):
        return None
    file_type = get_file_type(path.name, config.extensions)
    if file_type is None:
        if is_ignored_dir(path.name):
            return None
        if path.is_dir() or not path.suffix:
            return "directory"
        return None
    if file_type in ("page", "route"):
        return "route"
    return "boundary"


class ManifestWatcher:
    """Watches the project and keeps an up-to-date manifest.

    The watcher runs watchfiles in a background thread. Each relevant change
    batch produces a Rebuild which is stored as the current manifest, passed
    to *on_rebuild* (from the watcher thread), and queued for :meth:`rebuilds`.

    Args:
        config: Configuration to build with; replaced when the config file changes.
        on_rebuild: Optional callback invoked after every rebuild.
        collector: Optional collector receiving ``ManifestRebuilt`` events.

    """

    def __init__(
        self,
        config: ProwlConfig,
        *,
        on_rebuild: Callable[[Rebuild], None] | None = None,
        collector: BuildCollector | None = None,
    ) -> None:
        self._config = config
        self._on_rebuild = on_rebuild
        self._collector = collector
        self._queue: queue.SimpleQueue[Rebuild] = queue.SimpleQueue()
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self._manifest: RouteManifest | None = None

    @property
    def config(self) -> ProwlConfig:
        return self._config

    @property
    def manifest(self) -> RouteManifest:
        """The most recent manifest, built on first access if necessary."""
        if self._manifest is None:
            self._manifest = build_manifest(self._config, collector=self._collector)
        return self._manifest

    @property
    def is_running(self) -> bool:
        """Whether the watcher background thread is active."""
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Build the initial manifest and start watching in a background thread.

        Raises:
            WatchError: If the app directory does not exist.

        """
        if self.is_running:
            return

        try:
            self._manifest = build_manifest(self._config, collector=self._collector)
        except ScanError as exc:
            msg = f"Cannot watch {self._config.app_path}: {exc}"
            raise WatchError(msg) from exc

        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._watch_loop,
            name="prowl-watcher",
            daemon=True,
        )
        self._thread.start()

    def stop(self) -> None:
        """Signal the watcher to stop and wait for the thread to finish."""
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout=5.0)
            self._thread = None

    async def rebuilds(self) -> AsyncIterator[Rebuild]:
        """Async iterator that yields each Rebuild as it happens."""
        while self.is_running or not self._queue.empty():
            try:
                rebuild = await asyncio.to_thread(self._queue.get, timeout=0.5)
            except queue.Empty:
                if not self.is_running:
                    break
                continue
            yield rebuild

    def process_changes(self, raw_changes: Iterable[tuple[Change, str]]) -> Rebuild | None:
        """Filter one watchfiles batch and rebuild if anything relevant changed."""
        events: list[ChangeEvent] = []
        for change_type, path_str in raw_changes:
            path = Path(path_str)
            category = categorize_change(path, self._config)
            if category is None:
                continue
            kind = _CHANGE_KIND_MAP.get(change_type, "modified")
            events.append(ChangeEvent(path=path, kind=kind, category=category))

        if not events:
            return None
        events.sort(key=lambda e: str(e.path))

        if any(e.category == "config" for e in events):
            self._reload_config()

        start = now_ns()
        try:
            manifest = build_manifest(self._config)
        except ScanError as exc:
            # App directory removed mid-session; keep the last good manifest
            print(f"  Rebuild error: {exc}", file=sys.stderr)
            return None

        rebuild = Rebuild(manifest=manifest, changes=tuple(events), duration_ms=elapsed_ms(start))
        self._manifest = manifest
        if self._collector is not None:
            trigger = events[0]
            self._collector.record_rebuild(
                manifest,
                trigger_path=str(trigger.path),
                kind=trigger.kind,
                duration_ms=rebuild.duration_ms,
            )
        self._queue.put(rebuild)
        if self._on_rebuild is not None:
            self._on_rebuild(rebuild)
        return rebuild

    def _reload_config(self) -> None:
        try:
            self._config = load_config(self._config.root)
        except ConfigError as exc:
            print(f"  Config error (keeping previous config): {exc}", file=sys.stderr)

    def _watch_loop(self) -> None:
        """Background thread: run watchfiles and rebuild per change batch."""
        from watchfiles import watch

        for raw_changes in watch(
            self._config.root,
            stop_event=self._stop_event,
            debounce=300,
            step=100,
        ):
            self._handle_batch(raw_changes)

    def _handle_batch(self, raw_changes: Iterable[tuple[Change, str]]) -> None:
        """Process one batch; a failure is reported and watching continues."""
        try:
            self.process_changes(raw_changes)
        except Exception as exc:
            print(f"  Watcher error ({type(exc).__name__}): {exc}", file=sys.stderr)
