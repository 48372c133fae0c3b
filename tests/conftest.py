"""Shared test fixtures for prowl."""

from __future__ import annotations

from pathlib import Path

import pytest

from prowl.routes.scanner import extract_route_groups, get_file_type
from prowl.routes.types import ScannedFile

APP_ROOT = "/app"


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """An empty project root with an ``app/`` directory."""
    (tmp_path / "app").mkdir()
    return tmp_path


@pytest.fixture
def app_dir(project: Path) -> Path:
    return project / "app"


def write_files(root: Path, *relative_paths: str) -> list[Path]:
    """Create empty files under *root*, making parent directories as needed."""
    created: list[Path] = []
    for rel in relative_paths:
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("export default {}\n")
        created.append(path)
    return created


def make_scanned(relative_path: str, root: str = APP_ROOT) -> ScannedFile:
    """Build a ScannedFile without touching the filesystem."""
    filename = relative_path.rsplit("/", maxsplit=1)[-1]
    stem, _, ext = filename.rpartition(".")
    file_type = get_file_type(filename)
    assert file_type is not None, f"not a convention file: {relative_path}"
    groups = extract_route_groups(relative_path)
    return ScannedFile(
        relative_path=relative_path,
        absolute_path=f"{root}/{relative_path}",
        name=stem,
        extension=f".{ext}",
        file_type=file_type,
        is_in_group=bool(groups),
        groups=groups,
    )
