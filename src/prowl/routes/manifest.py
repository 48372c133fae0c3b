"""Manifest building: scan → compile → resolve → validate.

Every call performs a full, fresh pipeline run. There is no incremental
mode and no cache between builds; a file watcher that wants an up-to-date
manifest simply calls :func:`build_manifest` again.

Public API::

    from prowl.routes import build_manifest, has_errors, format_errors

    manifest = build_manifest(ProwlConfig(root=Path("my-app")))
    if has_errors(manifest):
        print(format_errors(manifest.errors))
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

from prowl.config import ProwlConfig
from prowl.observability.events import elapsed_ms, now_ns
from prowl.routes.compiler import compile_route, registration_paths, sort_routes
from prowl.routes.resolver import (
    resolve_error_boundary,
    resolve_layouts,
    resolve_loading_boundary,
    resolve_middleware,
    resolve_not_found_boundary,
)
from prowl.routes.scanner import scan_routes, scan_routes_async
from prowl.routes.types import (
    BoundaryMap,
    RouteEntry,
    RouteManifest,
    RouteValidationError,
    StaticSegment,
)
from prowl.routes.validator import DEFAULT_MAX_DEPTH, validate_manifest, validate_scan_result

if TYPE_CHECKING:
    from collections.abc import Iterator

    from prowl.observability.collector import BuildCollector
    from prowl.routes.types import ScanResult


def build_route_manifest(
    scan: ScanResult,
    root_dir: Path | str,
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> RouteManifest:
    """Compile, resolve and validate a scan result into a manifest.

    Files whose path fails to parse are reported as ``invalid-pattern``
    errors and left out; everything else is compiled, sorted into
    registration order, and validated.

    """
    layouts = BoundaryMap.from_files(scan.layouts)
    middleware = BoundaryMap.from_files(scan.middleware)
    loading = BoundaryMap.from_files(scan.loading)
    error_boundaries = BoundaryMap.from_files(scan.errors)
    not_found = BoundaryMap.from_files(scan.not_found)

    routes: list[RouteEntry] = []
    errors: list[RouteValidationError] = list(validate_scan_result(scan))

    for file in scan.routes:
        path = file.relative_path
        route = compile_route(
            file,
            resolve_layouts(path, layouts),
            resolve_middleware(path, middleware),
            loading=resolve_loading_boundary(path, loading),
            error=resolve_error_boundary(path, error_boundaries),
            not_found=resolve_not_found_boundary(path, not_found),
        )
        if route is None:
            errors.append(RouteValidationError(
                "invalid-pattern",
                f"Invalid route pattern in file: {file.relative_path}",
                (file.relative_path,),
            ))
            continue
        routes.append(route)

    manifest = RouteManifest(
        routes=tuple(sort_routes(routes)),
        layouts=layouts,
        middleware=middleware,
        loading_boundaries=loading,
        error_boundaries=error_boundaries,
        not_found_boundaries=not_found,
        errors=tuple(errors),
        root_dir=str(root_dir),
    )
    return validate_manifest(manifest, max_depth=max_depth)


def _as_config(target: ProwlConfig | Path | str) -> ProwlConfig:
    if isinstance(target, ProwlConfig):
        return target
    return ProwlConfig(root=Path(target))


def build_manifest(
    target: ProwlConfig | Path | str,
    *,
    collector: BuildCollector | None = None,
) -> RouteManifest:
    """Scan the app directory of *target* and build its manifest.

    *target* is a ProwlConfig, or a project root using default settings.

    Raises:
        ScanError: If the app directory does not exist.

    """
    config = _as_config(target)
    start = now_ns()
    scan = scan_routes(config.app_path, config.extensions)
    return _finish(config, scan, start, collector)


async def build_manifest_async(
    target: ProwlConfig | Path | str,
    *,
    collector: BuildCollector | None = None,
) -> RouteManifest:
    """Async variant of :func:`build_manifest`; only the scan suspends."""
    config = _as_config(target)
    start = now_ns()
    scan = await scan_routes_async(config.app_path, config.extensions)
    return _finish(config, scan, start, collector)


def _finish(
    config: ProwlConfig,
    scan: ScanResult,
    start: int,
    collector: BuildCollector | None,
) -> RouteManifest:
    app_path = str(config.app_path.resolve())
    if collector is not None:
        collector.record_scan(app_path, files=len(scan), duration_ms=elapsed_ms(start))
    manifest = build_route_manifest(scan, app_path, max_depth=config.max_depth)
    if collector is not None:
        collector.record_manifest(manifest, duration_ms=elapsed_ms(start))
    return manifest


# ---------------------------------------------------------------------------
# Consumers
# ---------------------------------------------------------------------------


def iter_registrations(
    manifest: RouteManifest,
    base_path: str = "/",
) -> Iterator[tuple[str, RouteEntry]]:
    """Yield ``(path, route)`` pairs in the order a router should register them.

    Optional catch-all routes yield twice: once for the bare prefix and once
    for the wildcard path.

    """
    for route in manifest.routes:
        for path in registration_paths(route, base_path):
            yield path, route


def _segment_to_dict(segment: Any) -> dict[str, str]:
    if isinstance(segment, StaticSegment):
        return {"type": segment.kind, "value": segment.value}
    return {"type": segment.kind, "name": segment.name}


def route_to_dict(route: RouteEntry) -> dict[str, Any]:
    return {
        "url_pattern": route.url_pattern,
        "file_path": route.file_path,
        "absolute_path": route.absolute_path,
        "file_type": route.file_type,
        "segments": [_segment_to_dict(s) for s in route.segments],
        "layouts": list(route.layouts),
        "middleware": list(route.middleware),
        "priority": list(route.priority),
        "loading_boundary": route.loading_boundary,
        "error_boundary": route.error_boundary,
        "not_found_boundary": route.not_found_boundary,
    }


def manifest_to_dict(manifest: RouteManifest) -> dict[str, Any]:
    """JSON-ready representation of *manifest*."""
    return {
        "root_dir": manifest.root_dir,
        "generated_at": manifest.generated_at.isoformat(),
        "routes": [route_to_dict(r) for r in manifest.routes],
        "layouts": dict(manifest.layouts),
        "middleware": dict(manifest.middleware),
        "loading_boundaries": dict(manifest.loading_boundaries),
        "error_boundaries": dict(manifest.error_boundaries),
        "not_found_boundaries": dict(manifest.not_found_boundaries),
        "errors": [
            {"type": e.type, "message": e.message, "files": list(e.files)}
            for e in manifest.errors
        ],
        "warnings": [
            {"type": w.type, "message": w.message, "files": list(w.files)}
            for w in manifest.warnings
        ],
    }
