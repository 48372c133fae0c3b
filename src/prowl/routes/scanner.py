"""Scanner: find convention files under an app directory.

Walks the directory tree and classifies each file by base name::

    app/page.tsx                    -> page
    app/api/users/route.ts          -> route
    app/(marketing)/layout.tsx      -> layout  (group "marketing")
    app/dashboard/loading.tsx       -> loading
    app/index.ts                    -> page    (index is a page alias)

Test files (``*.test.*``, ``*.spec.*``), type-only files (``*.d.*``) and
build/VCS directories are skipped. Directories wrapped in parentheses are
route groups: transparent in the URL but recorded on every file beneath them.

The walk order of the filesystem is never relied upon; every tuple in the
returned ScanResult is sorted by relative path.
"""

from __future__ import annotations

import asyncio
import os
import re
from pathlib import Path
from typing import TYPE_CHECKING

from prowl._errors import ScanError
from prowl.config import SUPPORTED_EXTENSIONS, validate_extensions
from prowl.routes.types import ScannedFile, ScanResult

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from prowl._types import FileType

# Convention names mapped to their file kind
ROUTE_FILE_NAMES: tuple[FileType, ...] = (
    "page",
    "route",
    "layout",
    "middleware",
    "loading",
    "error",
    "not-found",
)

# ``index`` files are treated as pages
_INDEX_NAME = "index"

# Directories never descended into
IGNORED_DIRS: frozenset[str] = frozenset({
    "node_modules",
    ".git",
    "dist",
    "__tests__",
    "__pycache__",
})

_ROUTE_GROUP_RE = re.compile(r"^\([A-Za-z_][A-Za-z0-9_-]*\)$")

# Inner name parts that mark test and type-declaration files
_EXCLUDED_MARKERS: frozenset[str] = frozenset({"test", "spec", "d"})


# ---------------------------------------------------------------------------
# File type detection
# ---------------------------------------------------------------------------


def get_file_type(
    filename: str,
    extensions: Sequence[str] = SUPPORTED_EXTENSIONS,
) -> FileType | None:
    """Return the convention kind of *filename*, or None if it is not one.

    ``page.tsx`` -> ``page``, ``not-found.ts`` -> ``not-found``,
    ``index.ts`` -> ``page``, ``page.test.tsx`` -> None, ``random.ts`` -> None.

    """
    stem, dot, ext = filename.rpartition(".")
    if not dot or not stem:
        return None
    if f".{ext}" not in extensions:
        return None

    # page.test.tsx / route.spec.ts / layout.d.ts
    if "." in stem:
        return None

    if stem in ROUTE_FILE_NAMES:
        return stem  # type: ignore[return-value]
    if stem == _INDEX_NAME:
        return "page"
    return None


def is_excluded_file(filename: str) -> bool:
    """True for test (``*.test.*``, ``*.spec.*``) and type-only (``*.d.*``) files."""
    parts = filename.split(".")
    return any(part in _EXCLUDED_MARKERS for part in parts[1:-1])


def is_route_file(filename: str) -> bool:
    """True for page and route (API) files."""
    return get_file_type(filename) in ("page", "route")


def is_layout_file(filename: str) -> bool:
    return get_file_type(filename) == "layout"


def is_middleware_file(filename: str) -> bool:
    return get_file_type(filename) == "middleware"


def is_ignored_dir(name: str) -> bool:
    """True for build, VCS and hidden directories the scanner never enters."""
    return name in IGNORED_DIRS or name.startswith(".")


# ---------------------------------------------------------------------------
# Route groups
# ---------------------------------------------------------------------------


def is_route_group(name: str) -> bool:
    """True for a parenthesized directory name such as ``(marketing)``."""
    return bool(_ROUTE_GROUP_RE.match(name))


def extract_route_groups(relative_path: str) -> tuple[str, ...]:
    """Route group names along *relative_path*, outermost first.

    ``(auth)/(admin)/users/page.tsx`` -> ``("auth", "admin")``

    """
    normalized = relative_path.replace("\\", "/")
    return tuple(part[1:-1] for part in normalized.split("/") if is_route_group(part))


def has_route_groups(relative_path: str) -> bool:
    return bool(extract_route_groups(relative_path))


# ---------------------------------------------------------------------------
# Scanning
# ---------------------------------------------------------------------------


def create_scanned_file(
    path: Path,
    root: Path,
    file_type: FileType,
) -> ScannedFile:
    """Build a ScannedFile for *path*, which must lie under *root*."""
    relative = path.relative_to(root).as_posix()
    groups = extract_route_groups(relative)
    return ScannedFile(
        relative_path=relative,
        absolute_path=str(path),
        name=path.stem,
        extension=path.suffix,
        file_type=file_type,
        is_in_group=bool(groups),
        groups=groups,
    )


def scan_routes(
    root: Path | str,
    extensions: Sequence[str] = SUPPORTED_EXTENSIONS,
) -> ScanResult:
    """Scan *root* recursively and return every convention file found.

    Raises:
        ConfigError: If *extensions* is malformed.
        ScanError: If *root* does not exist, is not a directory, or a
            directory under it cannot be read.

    """
    exts = validate_extensions(extensions)
    base = _resolve_root(root)

    found: list[ScannedFile] = []
    pending: list[Path] = [base]
    while pending:
        directory = pending.pop()
        files, subdirs = _list_directory(directory, base, exts)
        found.extend(files)
        pending.extend(subdirs)

    return categorize(found)


async def scan_routes_async(
    root: Path | str,
    extensions: Sequence[str] = SUPPORTED_EXTENSIONS,
) -> ScanResult:
    """Async variant of :func:`scan_routes`.

    Sibling directories are listed concurrently in worker threads. Each
    listing returns its own private lists which are merged once the whole
    tree has been walked, so the result is identical to the sync scan.

    """
    exts = validate_extensions(extensions)
    base = _resolve_root(root)

    found: list[ScannedFile] = []
    level: list[Path] = [base]
    while level:
        listings = await asyncio.gather(
            *(asyncio.to_thread(_list_directory, d, base, exts) for d in level)
        )
        level = []
        for files, subdirs in listings:
            found.extend(files)
            level.extend(subdirs)

    return categorize(found)


def categorize(files: Iterable[ScannedFile]) -> ScanResult:
    """Group scanned files by kind, each group sorted by relative path."""
    buckets: dict[str, list[ScannedFile]] = {
        "routes": [],
        "layouts": [],
        "middleware": [],
        "loading": [],
        "errors": [],
        "not_found": [],
    }
    for file in files:
        buckets[_BUCKET_FOR_TYPE[file.file_type]].append(file)

    def ordered(key: str) -> tuple[ScannedFile, ...]:
        return tuple(sorted(buckets[key], key=lambda f: f.relative_path))

    return ScanResult(
        routes=ordered("routes"),
        layouts=ordered("layouts"),
        middleware=ordered("middleware"),
        loading=ordered("loading"),
        errors=ordered("errors"),
        not_found=ordered("not_found"),
    )


_BUCKET_FOR_TYPE: dict[str, str] = {
    "page": "routes",
    "route": "routes",
    "layout": "layouts",
    "middleware": "middleware",
    "loading": "loading",
    "error": "errors",
    "not-found": "not_found",
}


def _resolve_root(root: Path | str) -> Path:
    base = Path(root).resolve()
    if not base.exists():
        msg = f"App directory does not exist: {base}"
        raise ScanError(msg)
    if not base.is_dir():
        msg = f"App directory is not a directory: {base}"
        raise ScanError(msg)
    return base


def _list_directory(
    directory: Path,
    root: Path,
    extensions: Sequence[str],
) -> tuple[list[ScannedFile], list[Path]]:
    """List one directory: convention files found and subdirectories to visit.

    A subdirectory removed between being found and being listed counts as
    empty; the change that removed it triggers its own rebuild.

    Raises:
        ScanError: If the directory cannot be read.

    """
    files: list[ScannedFile] = []
    subdirs: list[Path] = []
    try:
        it = os.scandir(directory)
    except (FileNotFoundError, NotADirectoryError) as exc:
        if directory != root:
            return files, subdirs
        msg = f"App directory disappeared during scan: {directory}"
        raise ScanError(msg) from exc
    except OSError as exc:
        msg = f"Cannot read directory {directory}: {exc}"
        raise ScanError(msg) from exc

    with it:
        for entry in it:
            if entry.is_dir(follow_symlinks=False):
                if is_ignored_dir(entry.name):
                    continue
                subdirs.append(Path(entry.path))
            elif entry.is_file():
                if is_excluded_file(entry.name):
                    continue
                file_type = get_file_type(entry.name, extensions)
                if file_type is None:
                    continue
                files.append(create_scanned_file(Path(entry.path), root, file_type))
    return files, subdirs
