"""File-based route discovery.

Scans an app directory for convention files and produces a validated,
ordered RouteManifest.

Public API::

    from prowl.routes import build_manifest, iter_registrations

    manifest = build_manifest(Path("my-app"))
    for path, route in iter_registrations(manifest):
        ...
"""

from prowl.routes.compiler import (
    calculate_route_priority,
    compile_route,
    file_path_to_route_path,
    parse_segment,
    registration_paths,
    sort_routes,
)
from prowl.routes.manifest import (
    build_manifest,
    build_manifest_async,
    build_route_manifest,
    iter_registrations,
    manifest_to_dict,
)
from prowl.routes.resolver import (
    ResolvedBoundary,
    RouteContext,
    get_ancestor_dirs,
    resolve_error_boundary,
    resolve_layouts,
    resolve_layouts_with_groups,
    resolve_loading_boundary,
    resolve_middleware,
    resolve_middleware_with_groups,
    resolve_not_found_boundary,
    resolve_route_context,
)
from prowl.routes.scanner import (
    extract_route_groups,
    get_file_type,
    has_route_groups,
    is_route_group,
    scan_routes,
    scan_routes_async,
)
from prowl.routes.types import (
    BoundaryMap,
    CatchAllSegment,
    DynamicSegment,
    OptionalCatchAllSegment,
    RouteEntry,
    RouteManifest,
    RouteValidationError,
    RouteValidationWarning,
    ScannedFile,
    ScanResult,
    Segment,
    StaticSegment,
)
from prowl.routes.validator import (
    detect_page_route_conflicts,
    detect_shadowed_routes,
    format_errors,
    format_warnings,
    has_errors,
    has_warnings,
    validate_manifest,
    validate_route,
    validate_scan_result,
)

__all__ = [
    "BoundaryMap",
    "CatchAllSegment",
    "DynamicSegment",
    "OptionalCatchAllSegment",
    "ResolvedBoundary",
    "RouteContext",
    "RouteEntry",
    "RouteManifest",
    "RouteValidationError",
    "RouteValidationWarning",
    "ScanResult",
    "ScannedFile",
    "Segment",
    "StaticSegment",
    "build_manifest",
    "build_manifest_async",
    "build_route_manifest",
    "calculate_route_priority",
    "compile_route",
    "detect_page_route_conflicts",
    "detect_shadowed_routes",
    "extract_route_groups",
    "file_path_to_route_path",
    "format_errors",
    "format_warnings",
    "get_ancestor_dirs",
    "get_file_type",
    "has_errors",
    "has_route_groups",
    "has_warnings",
    "is_route_group",
    "iter_registrations",
    "manifest_to_dict",
    "parse_segment",
    "registration_paths",
    "resolve_error_boundary",
    "resolve_layouts",
    "resolve_layouts_with_groups",
    "resolve_loading_boundary",
    "resolve_middleware",
    "resolve_middleware_with_groups",
    "resolve_not_found_boundary",
    "resolve_route_context",
    "scan_routes",
    "scan_routes_async",
    "sort_routes",
    "validate_manifest",
    "validate_route",
    "validate_scan_result",
]
