"""Prowl CLI — prowl routes / prowl check / prowl watch.

Entry point for the ``prowl`` command-line interface.
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from prowl.config import ProwlConfig
    from prowl.watcher import Rebuild


def _add_common(sub: argparse.ArgumentParser) -> None:
    sub.add_argument("root", nargs="?", default=".", help="Project root directory")
    sub.add_argument("--app-dir", default=None, help="App directory relative to root")
    sub.add_argument("--base-path", default=None, help="URL prefix for registrations")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the prowl CLI."""
    parser = argparse.ArgumentParser(
        prog="prowl",
        description="File-based route discovery.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_get_version()}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # prowl routes
    routes_parser = subparsers.add_parser(
        "routes",
        help="List discovered routes in registration order",
    )
    _add_common(routes_parser)
    routes_parser.add_argument(
        "--json", action="store_true", help="Print the manifest as JSON to stdout",
    )

    # prowl check
    check_parser = subparsers.add_parser(
        "check",
        help="Validate routes; exit 1 when there are errors",
    )
    _add_common(check_parser)

    # prowl watch
    watch_parser = subparsers.add_parser(
        "watch",
        help="Rebuild the manifest whenever convention files change",
    )
    _add_common(watch_parser)

    return parser


def _get_version() -> str:
    """Get the package version."""
    from prowl import __version__

    return __version__


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns the process exit code."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    from prowl._errors import ProwlError
    from prowl.config_loader import load_config

    try:
        config = load_config(args.root, app_dir=args.app_dir, base_path=args.base_path)
        if args.command == "routes":
            return _cmd_routes(config, as_json=args.json)
        if args.command == "check":
            return _cmd_check(config)
        if args.command == "watch":
            return _cmd_watch(config)
    except ProwlError as exc:
        print(f"prowl: {exc}", file=sys.stderr)
        return 2
    return 0


def _cmd_routes(config: ProwlConfig, *, as_json: bool) -> int:
    from prowl.observability import elapsed_ms, now_ns
    from prowl.report import print_report
    from prowl.routes.manifest import build_manifest, manifest_to_dict

    start = now_ns()
    manifest = build_manifest(config)
    if as_json:
        json.dump(manifest_to_dict(manifest), sys.stdout, indent=2)
        sys.stdout.write("\n")
    else:
        print_report(
            manifest,
            base_path=config.base_path,
            show_warnings=config.strict,
            load_ms=elapsed_ms(start),
        )
    return 0


def _cmd_check(config: ProwlConfig) -> int:
    from prowl.report import print_report
    from prowl.routes.manifest import build_manifest
    from prowl.routes.validator import has_errors

    manifest = build_manifest(config)
    print_report(manifest, show_routes=False, show_warnings=config.strict)
    return 1 if has_errors(manifest) else 0


def _cmd_watch(config: ProwlConfig) -> int:
    import time

    from prowl.report import print_report
    from prowl.watcher import ManifestWatcher

    def on_rebuild(rebuild: Rebuild) -> None:
        changed = ", ".join(str(c.path.name) for c in rebuild.changes)
        print(f"  Rebuilt after change: {changed}", file=sys.stderr)
        print_report(rebuild.manifest, base_path=config.base_path, load_ms=rebuild.duration_ms)

    watcher = ManifestWatcher(config, on_rebuild=on_rebuild)
    watcher.start()
    print_report(watcher.manifest, base_path=config.base_path)
    print("  Watching for changes...", file=sys.stderr)
    try:
        while watcher.is_running:
            time.sleep(0.5)
    except KeyboardInterrupt:
        pass
    finally:
        watcher.stop()
    return 0


if __name__ == "__main__":
    sys.exit(main())
