"""Resolver: which layouts, middleware and boundaries apply to a route.

Two resolution rules, both driven purely by path strings:

- **All apply** (layouts, middleware): every ancestor directory of the route,
  root to leaf, contributes its file if it has one. The result is the order
  in which handlers wrap the route, outermost first.
- **Closest wins** (loading, error, not-found): ancestors are searched leaf
  to root and the first directory holding a file is the only result.

For a route at ``dashboard/settings/page.tsx`` the ancestors are
``["", "dashboard", "dashboard/settings"]``. Route group directories are
ordinary ancestors here, so a ``(shop)/layout.tsx`` applies to routes inside
``(shop)/`` and to nothing else.

No function in this module touches the filesystem.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from prowl.routes.scanner import is_route_group
from prowl.routes.types import BoundaryMap

if TYPE_CHECKING:
    from collections.abc import Iterable

    from prowl._types import DirPath
    from prowl.routes.types import ScannedFile


@dataclass(frozen=True, slots=True)
class ResolvedBoundary:
    """A boundary file selected for a route, with the group scope it came from.

    Attributes:
        directory: Directory holding the file, relative to the app directory.
        path: Absolute path of the file.
        groups: Route groups active at *directory*, outermost first.

    """

    directory: DirPath
    path: str
    groups: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class RouteContext:
    """Layouts and middleware for one route, both root to leaf."""

    layouts: tuple[str, ...]
    middleware: tuple[str, ...]


# ---------------------------------------------------------------------------
# Path utilities
# ---------------------------------------------------------------------------


def get_ancestor_dirs(relative_path: str) -> list[DirPath]:
    """Directories from the root down to the file's own directory.

    ``users/[id]/profile/page.tsx`` ->
    ``["", "users", "users/[id]", "users/[id]/profile"]``

    """
    normalized = relative_path.replace("\\", "/")
    directory, sep, _ = normalized.rpartition("/")
    ancestors: list[DirPath] = [""]
    if not sep or directory in ("", "."):
        return ancestors

    current = ""
    for part in directory.split("/"):
        if not part or part == ".":
            continue
        current = f"{current}/{part}" if current else part
        ancestors.append(current)
    return ancestors


def build_boundary_map(files: Iterable[ScannedFile] | BoundaryMap) -> BoundaryMap:
    """Index boundary files by directory. BoundaryMaps pass through unchanged."""
    if isinstance(files, BoundaryMap):
        return files
    return BoundaryMap.from_files(files)


def _groups_at(directory: DirPath) -> tuple[str, ...]:
    if not directory:
        return ()
    return tuple(part[1:-1] for part in directory.split("/") if is_route_group(part))


# ---------------------------------------------------------------------------
# All-apply resolution
# ---------------------------------------------------------------------------


def _resolve_chain(
    relative_path: str,
    files: Iterable[ScannedFile] | BoundaryMap,
) -> list[tuple[DirPath, str]]:
    return build_boundary_map(files).chain(get_ancestor_dirs(relative_path))


def resolve_layouts(
    relative_path: str,
    all_layouts: Iterable[ScannedFile] | BoundaryMap,
) -> list[str]:
    """Layouts wrapping the route, root layout first, closest last."""
    return [path for _, path in _resolve_chain(relative_path, all_layouts)]


def resolve_middleware(
    relative_path: str,
    all_middleware: Iterable[ScannedFile] | BoundaryMap,
) -> list[str]:
    """Middleware applied to the route, root middleware first, closest last."""
    return [path for _, path in _resolve_chain(relative_path, all_middleware)]


def resolve_layouts_with_groups(
    relative_path: str,
    all_layouts: Iterable[ScannedFile] | BoundaryMap,
) -> list[ResolvedBoundary]:
    """Like :func:`resolve_layouts`, annotated with each layout's group scope.

    A layout inside ``(marketing)/`` reports ``groups=("marketing",)`` and
    only ever appears for routes under that group.

    """
    return [
        ResolvedBoundary(directory=d, path=p, groups=_groups_at(d))
        for d, p in _resolve_chain(relative_path, all_layouts)
    ]


def resolve_middleware_with_groups(
    relative_path: str,
    all_middleware: Iterable[ScannedFile] | BoundaryMap,
) -> list[ResolvedBoundary]:
    """Like :func:`resolve_middleware`, annotated with each file's group scope."""
    return [
        ResolvedBoundary(directory=d, path=p, groups=_groups_at(d))
        for d, p in _resolve_chain(relative_path, all_middleware)
    ]


def resolve_route_context(
    relative_path: str,
    all_layouts: Iterable[ScannedFile] | BoundaryMap,
    all_middleware: Iterable[ScannedFile] | BoundaryMap,
) -> RouteContext:
    """Layouts and middleware for a route in one call."""
    return RouteContext(
        layouts=tuple(resolve_layouts(relative_path, all_layouts)),
        middleware=tuple(resolve_middleware(relative_path, all_middleware)),
    )


# ---------------------------------------------------------------------------
# Closest-wins resolution
# ---------------------------------------------------------------------------


def _resolve_closest(
    relative_path: str,
    files: Iterable[ScannedFile] | BoundaryMap,
) -> str | None:
    return build_boundary_map(files).closest(get_ancestor_dirs(relative_path))


def resolve_loading_boundary(
    relative_path: str,
    all_loading: Iterable[ScannedFile] | BoundaryMap,
) -> str | None:
    """Closest loading file for the route, or None."""
    return _resolve_closest(relative_path, all_loading)


def resolve_error_boundary(
    relative_path: str,
    all_errors: Iterable[ScannedFile] | BoundaryMap,
) -> str | None:
    """Closest error boundary for the route, or None.

    Given ``error.tsx`` and ``dashboard/error.tsx``, a route at
    ``dashboard/settings/page.tsx`` resolves to ``dashboard/error.tsx``.

    """
    return _resolve_closest(relative_path, all_errors)


def resolve_not_found_boundary(
    relative_path: str,
    all_not_found: Iterable[ScannedFile] | BoundaryMap,
) -> str | None:
    """Closest not-found boundary for the route, or None."""
    return _resolve_closest(relative_path, all_not_found)
