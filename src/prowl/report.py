"""Terminal report — route table and validation summary for a manifest.

Prints to stderr with ANSI styling. Detects ``NO_COLOR`` / ``TERM`` for safe
fallback.
"""

from __future__ import annotations

import os
import sys
from typing import TYPE_CHECKING

from prowl.routes.compiler import registration_paths
from prowl.routes.validator import format_errors, format_warnings

if TYPE_CHECKING:
    from typing import TextIO

    from prowl.routes.types import RouteManifest


# ---------------------------------------------------------------------------
# ANSI helpers, respecting NO_COLOR (https://no-color.org)
# ---------------------------------------------------------------------------

def _supports_color() -> bool:
    """Return True if the terminal supports ANSI colors."""
    if os.environ.get("NO_COLOR"):
        return False
    if os.environ.get("TERM") == "dumb":
        return False
    return hasattr(sys.stderr, "isatty") and sys.stderr.isatty()


_COLOR = _supports_color()

_RESET = "\033[0m" if _COLOR else ""
_BOLD = "\033[1m" if _COLOR else ""
_DIM = "\033[2m" if _COLOR else ""
_CYAN = "\033[36m" if _COLOR else ""
_GREEN = "\033[32m" if _COLOR else ""
_YELLOW = "\033[33m" if _COLOR else ""
_RED = "\033[31m" if _COLOR else ""
_ORANGE = "\033[38;5;214m" if _COLOR else ""


# ---------------------------------------------------------------------------
# Route kind badges
# ---------------------------------------------------------------------------

_KIND_STYLES: dict[str, tuple[str, str]] = {
    "page": (_GREEN, "page "),
    "route": (_CYAN, "route"),
}


def _kind_badge(file_type: str) -> str:
    """Return a styled fixed-width route kind label."""
    color, label = _KIND_STYLES.get(file_type, (_DIM, file_type))
    return f"{color}{label}{_RESET}"


def _plural(count: int, word: str) -> str:
    return f"{count} {word}" if count == 1 else f"{count} {word}s"


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def format_route_table(manifest: RouteManifest, *, base_path: str = "/") -> list[str]:
    """Lines of the route table, one per registration, in registration order."""
    rows = [
        (path, route.file_type, route.file_path)
        for route in manifest.routes
        for path in registration_paths(route, base_path)
    ]
    if not rows:
        return [f"  {_DIM}(no routes){_RESET}"]

    width = max(len(path) for path, _, _ in rows)
    return [
        f"  {_kind_badge(kind)}  {_BOLD}{path.ljust(width)}{_RESET}  {_DIM}{source}{_RESET}"
        for path, kind, source in rows
    ]


def print_report(
    manifest: RouteManifest,
    *,
    base_path: str = "/",
    show_routes: bool = True,
    show_warnings: bool = True,
    load_ms: float = 0.0,
    stream: TextIO | None = None,
) -> None:
    """Print the manifest summary, route table and findings.

    Args:
        manifest: The manifest to report on.
        base_path: URL prefix applied to registration paths.
        show_routes: Include the route table.
        show_warnings: Include warnings (errors are always shown).
        load_ms: Build time in milliseconds, shown in the header when > 0.
        stream: Output stream (default: stderr).

    """
    from prowl import __version__

    out = stream if stream is not None else sys.stderr

    header = f"  {_ORANGE}{_BOLD}prowl{_RESET} {_DIM}v{__version__}{_RESET}"
    lines: list[str] = ["", header, f"  {_DIM}{'─' * 43}{_RESET}"]

    timing = f" {_DIM}in {load_ms:.0f}ms{_RESET}" if load_ms > 0 else ""
    lines.append(f"  {_DIM}├─{_RESET} {_plural(len(manifest.routes), 'route')}{timing}")
    lines.append(
        f"  {_DIM}├─{_RESET} {_plural(len(manifest.layouts), 'layout')}, "
        f"{len(manifest.middleware)} middleware"
    )
    lines.append(f"  {_DIM}└─{_RESET} app: {_DIM}{manifest.root_dir}{_RESET}")

    if show_routes:
        lines.append("")
        lines.extend(format_route_table(manifest, base_path=base_path))

    if manifest.errors:
        lines.append("")
        lines.append(f"  {_RED}{_BOLD}{_plural(len(manifest.errors), 'error')}{_RESET}")
        lines.extend(f"  {line}" for line in format_errors(manifest.errors).splitlines())

    if show_warnings and manifest.warnings:
        lines.append("")
        lines.append(f"  {_YELLOW}{_plural(len(manifest.warnings), 'warning')}{_RESET}")
        lines.extend(f"  {line}" for line in format_warnings(manifest.warnings).splitlines())

    lines.append("")

    print("\n".join(lines), file=out)
