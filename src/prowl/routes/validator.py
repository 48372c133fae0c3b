"""Validator: structural and cross-route checks over compiled routes.

Nothing in this module raises for bad input. Every finding is returned as a
RouteValidationError (blocks the route) or RouteValidationWarning (reported
only), so a single build surfaces every problem at once.

Error codes::

    invalid-pattern     malformed path syntax or segment layout
    conflict            page and route files serving the same URL

Warning codes::

    naming-convention   a route that may shadow a later one
    deep-nesting        more segments than the configured maximum
"""

from __future__ import annotations

from dataclasses import replace
from itertools import combinations
from typing import TYPE_CHECKING

from prowl.routes.compiler import sort_routes
from prowl.routes.types import (
    RouteValidationError,
    RouteValidationWarning,
    StaticSegment,
    is_catch_all,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from prowl.routes.types import RouteEntry, RouteManifest, ScannedFile, ScanResult

# Segment count above which a route is flagged as deeply nested
DEFAULT_MAX_DEPTH = 5


# ---------------------------------------------------------------------------
# Single route
# ---------------------------------------------------------------------------


def validate_route(route: RouteEntry) -> list[RouteValidationError]:
    """Structural checks for one route. Returns every violation found."""
    errors: list[RouteValidationError] = []
    files = (route.file_path,)

    def fail(message: str) -> None:
        errors.append(RouteValidationError("invalid-pattern", message, files))

    if not route.url_pattern or not route.url_pattern.strip():
        fail("Route URL pattern cannot be empty")
    if not route.url_pattern.startswith("/"):
        fail(f"Route URL pattern must start with /: {route.url_pattern}")

    catch_all_positions = [i for i, s in enumerate(route.segments) if is_catch_all(s)]
    if len(catch_all_positions) > 1:
        fail("Route cannot have multiple catch-all segments")
    if catch_all_positions and catch_all_positions[-1] != len(route.segments) - 1:
        fail("Catch-all segment must be the last segment in the route")

    names = route.params
    duplicates = sorted({n for n in names if names.count(n) > 1})
    if duplicates:
        fail(f"Route cannot have duplicate dynamic segment names: {', '.join(duplicates)}")

    return errors


# ---------------------------------------------------------------------------
# Cross-route checks
# ---------------------------------------------------------------------------


def _group_by_pattern(routes: Iterable[RouteEntry]) -> dict[str, list[RouteEntry]]:
    grouped: dict[str, list[RouteEntry]] = {}
    for route in routes:
        grouped.setdefault(route.url_pattern, []).append(route)
    return grouped


def detect_page_route_conflicts(routes: Iterable[RouteEntry]) -> list[RouteValidationError]:
    """One ``conflict`` error per URL served by both a page and a route file."""
    errors: list[RouteValidationError] = []
    for pattern, matching in _group_by_pattern(routes).items():
        kinds = {r.file_type for r in matching}
        if {"page", "route"} <= kinds:
            errors.append(RouteValidationError(
                "conflict",
                f"Cannot have both page and route files at the same path: {pattern}",
                tuple(sorted(r.file_path for r in matching)),
            ))
    return errors


def structural_key(route: RouteEntry) -> tuple[tuple[str, str], ...]:
    """The route's shape with parameter names erased.

    ``/users/:id`` and ``/users/:userId`` share the key
    ``(("static", "users"), ("dynamic", ""))``.

    """
    return tuple(
        (s.kind, s.value) if isinstance(s, StaticSegment) else (s.kind, "")
        for s in route.segments
    )


def _is_page_route_pair(a: RouteEntry, b: RouteEntry) -> bool:
    return a.url_pattern == b.url_pattern and a.file_type != b.file_type


def catch_all_overlaps(earlier: RouteEntry, later: RouteEntry) -> bool:
    """True when *earlier*'s catch-all can capture requests meant for *later*.

    The segments before the catch-all are compared position by position
    against *later*; only two static segments with different values rule
    the overlap out. ``/docs/:path{.+}`` overlaps ``/docs/:rest{.*}`` and
    ``/a/:p{.+}`` overlaps ``/:x/y``.

    """
    index = next((i for i, s in enumerate(earlier.segments) if is_catch_all(s)), None)
    if index is None or len(later.segments) < index:
        return False
    for mine, theirs in zip(earlier.segments[:index], later.segments[:index], strict=True):
        if (
            isinstance(mine, StaticSegment)
            and isinstance(theirs, StaticSegment)
            and mine.value != theirs.value
        ):
            return False
    return True


def detect_shadowed_routes(routes: Sequence[RouteEntry]) -> list[RouteValidationWarning]:
    """Warn for every pair of routes where the earlier one may shadow the later.

    Routes are taken in registration order. A pair is reported once when
    both match exactly the same URLs (``[id]`` vs ``[userId]``, or the same
    path through two route groups), or when the earlier route's catch-all
    covers the later route (see :func:`catch_all_overlaps`). Page vs route
    pairs on an identical pattern are left to
    :func:`detect_page_route_conflicts`.

    """
    warnings: list[RouteValidationWarning] = []
    for earlier, later in combinations(sort_routes(routes), 2):
        if _is_page_route_pair(earlier, later):
            continue
        if earlier.url_pattern == later.url_pattern:
            message = (
                f"Routes {earlier.file_path} and {later.file_path} both resolve "
                f"to {earlier.url_pattern}"
            )
        elif structural_key(earlier) == structural_key(later):
            message = (
                f"Route {earlier.url_pattern} may shadow {later.url_pattern}: "
                "same pattern with different parameter names"
            )
        elif catch_all_overlaps(earlier, later):
            message = (
                f"Route {earlier.url_pattern} may shadow {later.url_pattern}: "
                "its catch-all covers the later route"
            )
        else:
            continue
        warnings.append(RouteValidationWarning(
            "naming-convention",
            message,
            (earlier.file_path, later.file_path),
        ))
    return warnings


def detect_deep_nesting(
    routes: Iterable[RouteEntry],
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> list[RouteValidationWarning]:
    return [
        RouteValidationWarning(
            "deep-nesting",
            f"Route has {len(route.segments)} levels of nesting. Consider flattening.",
            (route.file_path,),
        )
        for route in routes
        if len(route.segments) > max_depth
    ]


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------


def validate_scan_result(scan: ScanResult) -> list[RouteValidationError]:
    """Pre-compile check: page and route files in the same directory."""
    by_dir: dict[str, list[ScannedFile]] = {}
    for file in scan.routes:
        by_dir.setdefault(file.directory, []).append(file)

    errors: list[RouteValidationError] = []
    for directory, files in by_dir.items():
        kinds = {f.file_type for f in files}
        if {"page", "route"} <= kinds:
            errors.append(RouteValidationError(
                "conflict",
                f"Cannot have both page and route files in the same directory: {directory or '/'}",
                tuple(sorted(f.relative_path for f in files)),
            ))
    return errors


def dedupe[T: (RouteValidationError, RouteValidationWarning)](findings: Iterable[T]) -> list[T]:
    """Drop findings with the same type and file set as an earlier one."""
    seen: set[tuple[str, frozenset[str]]] = set()
    unique: list[T] = []
    for finding in findings:
        key = (finding.type, frozenset(finding.files))
        if key in seen:
            continue
        seen.add(key)
        unique.append(finding)
    return unique


def validate_manifest(
    manifest: RouteManifest,
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> RouteManifest:
    """Run every check and return a new manifest carrying the findings.

    Routes with a per-route error are dropped from ``routes``. Cross-route
    conflicts keep both routes so the output stays deterministic and every
    problem shows up in one pass.

    """
    errors: list[RouteValidationError] = list(manifest.errors)
    warnings: list[RouteValidationWarning] = list(manifest.warnings)

    valid: list[RouteEntry] = []
    for route in manifest.routes:
        route_errors = validate_route(route)
        if route_errors:
            errors.extend(route_errors)
        else:
            valid.append(route)

    errors.extend(detect_page_route_conflicts(valid))
    warnings.extend(detect_shadowed_routes(valid))
    warnings.extend(detect_deep_nesting(valid, max_depth))

    return replace(
        manifest,
        routes=tuple(valid),
        errors=tuple(dedupe(errors)),
        warnings=tuple(dedupe(warnings)),
    )


# ---------------------------------------------------------------------------
# Error surface
# ---------------------------------------------------------------------------


def has_errors(manifest: RouteManifest) -> bool:
    """True when the manifest has blocking errors; build tools should exit non-zero."""
    return len(manifest.errors) > 0


def has_warnings(manifest: RouteManifest) -> bool:
    return len(manifest.warnings) > 0


def _format(findings: Sequence[RouteValidationError | RouteValidationWarning]) -> str:
    return "\n\n".join(
        f"{i}. [{f.type}] {f.message}\n   Files: {', '.join(f.files)}"
        for i, f in enumerate(findings, start=1)
    )


def format_errors(errors: Sequence[RouteValidationError]) -> str:
    """Numbered, human-readable listing of *errors*."""
    if not errors:
        return "No errors"
    return _format(errors)


def format_warnings(warnings: Sequence[RouteValidationWarning]) -> str:
    """Numbered, human-readable listing of *warnings*."""
    if not warnings:
        return "No warnings"
    return _format(warnings)
