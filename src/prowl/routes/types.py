"""Data types for the route discovery pipeline.

Everything here is a frozen dataclass: scan results, parsed segments, route
entries and the manifest are created fresh per build and never mutated.

Thread Safety:
    All types are immutable and safe to share across threads.

"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Sequence

    from prowl._types import (
        DirPath,
        ErrorType,
        FileType,
        RelativePath,
        RouteFileType,
        SegmentKind,
        UrlPattern,
        WarningType,
    )


# ---------------------------------------------------------------------------
# Scanner output
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ScannedFile:
    """A convention file discovered under the app directory.

    Attributes:
        relative_path: Path relative to the app directory, ``/``-separated.
        absolute_path: Absolute filesystem path.
        name: File name without extension (``page``, ``layout``, ``index``...).
        extension: File extension including the dot.
        file_type: Convention kind of the file.
        is_in_group: Whether any parent directory is a route group.
        groups: Route group names (without parentheses), outermost first.

    """

    relative_path: RelativePath
    absolute_path: str
    name: str
    extension: str
    file_type: FileType
    is_in_group: bool = False
    groups: tuple[str, ...] = ()

    @property
    def directory(self) -> DirPath:
        """Directory of the file relative to the app directory (``""`` for root)."""
        head, sep, _ = self.relative_path.rpartition("/")
        return head if sep else ""


@dataclass(frozen=True, slots=True)
class ScanResult:
    """Scanned files grouped by kind, each tuple sorted by relative path."""

    routes: tuple[ScannedFile, ...] = ()
    layouts: tuple[ScannedFile, ...] = ()
    middleware: tuple[ScannedFile, ...] = ()
    loading: tuple[ScannedFile, ...] = ()
    errors: tuple[ScannedFile, ...] = ()
    not_found: tuple[ScannedFile, ...] = ()

    def __len__(self) -> int:
        return (
            len(self.routes)
            + len(self.layouts)
            + len(self.middleware)
            + len(self.loading)
            + len(self.errors)
            + len(self.not_found)
        )


# ---------------------------------------------------------------------------
# Segments
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class StaticSegment:
    """A literal path component, e.g. ``users``."""

    kind: ClassVar[SegmentKind] = "static"
    value: str


@dataclass(frozen=True, slots=True)
class DynamicSegment:
    """``[name]``: captures exactly one path component."""

    kind: ClassVar[SegmentKind] = "dynamic"
    name: str


@dataclass(frozen=True, slots=True)
class CatchAllSegment:
    """``[...name]``: captures one or more remaining components."""

    kind: ClassVar[SegmentKind] = "catch_all"
    name: str


@dataclass(frozen=True, slots=True)
class OptionalCatchAllSegment:
    """``[[...name]]``: captures zero or more remaining components."""

    kind: ClassVar[SegmentKind] = "optional_catch_all"
    name: str


type Segment = StaticSegment | DynamicSegment | CatchAllSegment | OptionalCatchAllSegment

type ParamSegment = DynamicSegment | CatchAllSegment | OptionalCatchAllSegment


def is_catch_all(segment: Segment) -> bool:
    """True for catch-all and optional catch-all segments."""
    return isinstance(segment, (CatchAllSegment, OptionalCatchAllSegment))


# ---------------------------------------------------------------------------
# Route entries
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class RouteEntry:
    """A compiled page or API route ready for registration.

    Attributes:
        url_pattern: Router pattern (``/users/:id``, ``/docs/:path{.+}``).
        file_path: Source path relative to the app directory.
        absolute_path: Absolute source path, used for importing.
        file_type: ``page`` (rendered) or ``route`` (API handler).
        segments: Parsed URL segments, route groups excluded.
        layouts: Layout files wrapping this route, root to closest.
        middleware: Middleware files applied to this route, root to closest.
        priority: Rank vector (tuple of ints, compared lexicographically);
            lower sorts (and registers) first.
        loading_boundary: Closest loading file, if any.
        error_boundary: Closest error boundary file, if any.
        not_found_boundary: Closest not-found boundary file, if any.

    """

    url_pattern: UrlPattern
    file_path: RelativePath
    absolute_path: str
    file_type: RouteFileType
    segments: tuple[Segment, ...]
    layouts: tuple[str, ...] = ()
    middleware: tuple[str, ...] = ()
    priority: tuple[int, ...] = ()
    loading_boundary: str | None = None
    error_boundary: str | None = None
    not_found_boundary: str | None = None

    @property
    def params(self) -> tuple[str, ...]:
        """Names captured by dynamic and catch-all segments, in order."""
        return tuple(s.name for s in self.segments if not isinstance(s, StaticSegment))

    @property
    def has_optional_catch_all(self) -> bool:
        return any(isinstance(s, OptionalCatchAllSegment) for s in self.segments)


# ---------------------------------------------------------------------------
# Boundary association
# ---------------------------------------------------------------------------


def dir_depth(directory: DirPath) -> int:
    """Number of components in a relative directory (root is 0)."""
    return directory.count("/") + 1 if directory else 0


@dataclass(frozen=True, slots=True)
class BoundaryMap:
    """Ordered ``directory -> absolute path`` association for one boundary kind.

    Entries are sorted by directory depth, then directory name, so iteration
    always runs from the root outwards. Lookups walk the entries explicitly;
    nothing depends on hash-map iteration order.

    """

    entries: tuple[tuple[DirPath, str], ...] = ()

    @classmethod
    def from_files(cls, files: Iterable[ScannedFile]) -> BoundaryMap:
        """Build a map from scanned files; a later file in the same directory wins."""
        by_dir: list[tuple[DirPath, str]] = []
        for file in files:
            directory = file.directory
            by_dir = [(d, p) for d, p in by_dir if d != directory]
            by_dir.append((directory, file.absolute_path))
        by_dir.sort(key=lambda item: (dir_depth(item[0]), item[0]))
        return cls(tuple(by_dir))

    def get(self, directory: DirPath) -> str | None:
        depth = dir_depth(directory)
        for entry_dir, path in self.entries:
            entry_depth = dir_depth(entry_dir)
            if entry_depth > depth:
                break
            if entry_dir == directory:
                return path
        return None

    def chain(self, directories: Sequence[DirPath]) -> list[tuple[DirPath, str]]:
        """Entries found in *directories*, in the order the directories are given."""
        found: list[tuple[DirPath, str]] = []
        for directory in directories:
            path = self.get(directory)
            if path is not None:
                found.append((directory, path))
        return found

    def closest(self, directories: Sequence[DirPath]) -> str | None:
        """Entry of the last directory in *directories* that has one."""
        for directory in reversed(directories):
            path = self.get(directory)
            if path is not None:
                return path
        return None

    def directories(self) -> tuple[DirPath, ...]:
        return tuple(d for d, _ in self.entries)

    def __iter__(self) -> Iterator[tuple[DirPath, str]]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, directory: object) -> bool:
        return isinstance(directory, str) and self.get(directory) is not None


# ---------------------------------------------------------------------------
# Validation records
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class RouteValidationError:
    """A problem that keeps a route out of registration.

    Attributes:
        type: Error code (``invalid-pattern``, ``conflict``, ...).
        message: Human-readable description.
        files: Relative paths of the files involved.

    """

    type: ErrorType
    message: str
    files: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class RouteValidationWarning:
    """A non-blocking finding (shadowed routes, deep nesting)."""

    type: WarningType
    message: str
    files: tuple[str, ...]


# ---------------------------------------------------------------------------
# Manifest
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class RouteManifest:
    """Validated output of one scan → compile → resolve → validate run.

    ``generated_at`` is informational and excluded from equality, so two
    builds of the same tree compare equal.

    """

    routes: tuple[RouteEntry, ...]
    layouts: BoundaryMap
    middleware: BoundaryMap
    root_dir: str
    loading_boundaries: BoundaryMap = field(default_factory=BoundaryMap)
    error_boundaries: BoundaryMap = field(default_factory=BoundaryMap)
    not_found_boundaries: BoundaryMap = field(default_factory=BoundaryMap)
    errors: tuple[RouteValidationError, ...] = ()
    warnings: tuple[RouteValidationWarning, ...] = ()
    generated_at: datetime = field(default_factory=datetime.now, compare=False)
