"""Compiler: turn relative file paths into router patterns and route entries.

Path grammar, one directory component at a time::

    users           -> static      "users"
    [id]            -> dynamic     ":id"
    [...path]       -> catch-all   ":path{.+}"   (one or more components)
    [[...cat]]      -> optional    ":cat{.*}"    (zero or more components)
    (marketing)     -> route group (elided from the URL)

Examples::

    index.ts                         -> /
    users/[id]/page.tsx              -> /users/:id
    docs/[...path]/page.tsx          -> /docs/:path{.+}
    shop/[[...cat]]/page.tsx         -> /shop/:cat{.*}
    (marketing)/about/page.tsx       -> /about

Every function here is pure: identical input always yields identical output.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from prowl.routes.scanner import is_route_group
from prowl.routes.types import (
    CatchAllSegment,
    DynamicSegment,
    OptionalCatchAllSegment,
    RouteEntry,
    Segment,
    StaticSegment,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from prowl.routes.types import ScannedFile

_DYNAMIC_RE = re.compile(r"^\[([A-Za-z_][A-Za-z0-9_]*)\]$")
_CATCH_ALL_RE = re.compile(r"^\[\.\.\.([A-Za-z_][A-Za-z0-9_]*)\]$")
_OPTIONAL_CATCH_ALL_RE = re.compile(r"^\[\[\.\.\.([A-Za-z_][A-Za-z0-9_]*)\]\]$")
_STATIC_RE = re.compile(r"^[A-Za-z0-9_-]+$")

# Rank per segment kind; lower is more specific
_KIND_RANK: dict[str, int] = {
    "static": 1,
    "dynamic": 2,
    "catch_all": 4,
    "optional_catch_all": 5,
}

# Appended after the last segment. Sits between dynamic and catch-all: a
# route extended by static or dynamic segments sorts before its prefix, but
# a catch-all never sorts before the exact prefix it would swallow.
_END_RANK = 3


# ---------------------------------------------------------------------------
# Segment parsing
# ---------------------------------------------------------------------------


def parse_segment(component: str) -> Segment | None:
    """Parse one path component into a typed segment.

    Returns None for empty components, route groups, and components with
    characters outside ``[A-Za-z0-9_-]`` that are not bracket syntax.

    """
    if not component or not component.strip():
        return None
    if is_route_group(component):
        return None

    # Most specific bracket form first
    if match := _OPTIONAL_CATCH_ALL_RE.match(component):
        return OptionalCatchAllSegment(match.group(1))
    if match := _CATCH_ALL_RE.match(component):
        return CatchAllSegment(match.group(1))
    if match := _DYNAMIC_RE.match(component):
        return DynamicSegment(match.group(1))

    if not _STATIC_RE.match(component):
        return None
    return StaticSegment(component)


def segment_to_pattern(segment: Segment) -> str:
    """Router syntax for a single segment."""
    match segment:
        case StaticSegment(value=value):
            return value
        case DynamicSegment(name=name):
            return f":{name}"
        case CatchAllSegment(name=name):
            return f":{name}{{.+}}"
        case OptionalCatchAllSegment(name=name):
            return f":{name}{{.*}}"
    msg = f"Unknown segment type: {type(segment).__name__}"
    raise TypeError(msg)


def segments_to_pattern(segments: Iterable[Segment]) -> str:
    return "/" + "/".join(segment_to_pattern(s) for s in segments)


# ---------------------------------------------------------------------------
# Path to URL pattern
# ---------------------------------------------------------------------------


def file_path_to_route_path(file_path: str) -> tuple[str, tuple[Segment, ...]] | None:
    """Convert a path relative to the app directory into a URL pattern.

    The trailing file name is dropped and route groups are elided. Returns
    ``(url_pattern, segments)``, or None when any remaining component fails
    to parse.

    """
    normalized = file_path.replace("\\", "/")
    directory, sep, _ = normalized.rpartition("/")
    if not sep or directory in ("", "."):
        return "/", ()

    segments: list[Segment] = []
    for component in directory.split("/"):
        if not component or component == ".":
            continue
        if is_route_group(component):
            continue
        segment = parse_segment(component)
        if segment is None:
            return None
        segments.append(segment)

    return segments_to_pattern(segments), tuple(segments)


# ---------------------------------------------------------------------------
# Priority and ordering
# ---------------------------------------------------------------------------


def calculate_route_priority(segments: Sequence[Segment]) -> tuple[int, ...]:
    """Rank vector for a route; compare lexicographically, lower registers first.

    One rank per segment (static < dynamic < catch-all < optional catch-all)
    followed by an end marker. At the first position where two routes differ
    the more specific kind wins, and when one route's kinds extend the
    other's with static or dynamic segments the longer route wins::

        /users/profile   (1, 1, 3)
        /users/:id       (1, 2, 3)
        /users           (1, 3)
        /users/:p{.+}    (1, 4, 3)
        /users/:p{.*}    (1, 5, 3)

    The priority is a tuple rather than a single number, and
    ``manifest_to_dict`` emits it as a list of ints. Compare priorities
    element by element; summing or otherwise collapsing them to a scalar
    loses the ordering.

    """
    return (*(_KIND_RANK[s.kind] for s in segments), _END_RANK)


def route_sort_key(route: RouteEntry) -> tuple[tuple[int, ...], int, str, str]:
    """Total ordering key: priority, more segments first, then pattern and file."""
    return (route.priority, -len(route.segments), route.url_pattern, route.file_path)


def sort_routes(routes: Iterable[RouteEntry]) -> list[RouteEntry]:
    """Return *routes* in registration order (most specific first)."""
    return sorted(routes, key=route_sort_key)


# ---------------------------------------------------------------------------
# Route compilation
# ---------------------------------------------------------------------------


def compile_route(
    file: ScannedFile,
    layouts: Sequence[str] = (),
    middleware: Sequence[str] = (),
    *,
    loading: str | None = None,
    error: str | None = None,
    not_found: str | None = None,
) -> RouteEntry | None:
    """Compile a scanned page/route file into a RouteEntry.

    Layout, middleware and boundary paths come from the resolver. Returns
    None when the file's path does not parse, so the caller can record a
    validation error and carry on with the rest of the build.

    """
    if file.file_type not in ("page", "route"):
        return None

    result = file_path_to_route_path(file.relative_path)
    if result is None:
        return None

    url_pattern, segments = result
    return RouteEntry(
        url_pattern=url_pattern,
        file_path=file.relative_path,
        absolute_path=file.absolute_path,
        file_type=file.file_type,  # type: ignore[arg-type]
        segments=segments,
        layouts=tuple(layouts),
        middleware=tuple(middleware),
        priority=calculate_route_priority(segments),
        loading_boundary=loading,
        error_boundary=error,
        not_found_boundary=not_found,
    )


# ---------------------------------------------------------------------------
# Registration
# ---------------------------------------------------------------------------


def registration_paths(route: RouteEntry, base_path: str = "/") -> tuple[str, ...]:
    """Paths a router registers for *route*, in registration order.

    An optional catch-all needs two registrations so that both the bare
    prefix and one-or-more trailing components reach the same handler::

        /shop/:cat{.*}  ->  ("/shop", "/shop/:cat{.*}")

    """
    paths: list[str] = []
    if route.segments and isinstance(route.segments[-1], OptionalCatchAllSegment):
        paths.append(segments_to_pattern(route.segments[:-1]))
    paths.append(route.url_pattern)
    return tuple(_join_base(base_path, p) for p in paths)


def _join_base(base_path: str, path: str) -> str:
    base = base_path.rstrip("/")
    if not base:
        return path
    if path == "/":
        return base
    return base + path
