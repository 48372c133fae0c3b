"""Load ProwlConfig from prowl.yaml or prowl.toml if present.

Merges file config with CLI kwargs. CLI overrides file.
"""

from __future__ import annotations

import tomllib
from pathlib import Path

import yaml

from prowl._errors import ConfigError
from prowl.config import ProwlConfig

CONFIG_FILE_NAMES: tuple[str, ...] = ("prowl.yaml", "prowl.yml", "prowl.toml")

_KNOWN_KEYS: frozenset[str] = frozenset({
    "app_dir",
    "extensions",
    "base_path",
    "max_depth",
    "strict",
})


def find_config_file(root: Path) -> Path | None:
    """Return the first config file present in *root*, in priority order."""
    for name in CONFIG_FILE_NAMES:
        path = root / name
        if path.is_file():
            return path
    return None


def load_config(root: Path | str, **overrides: object) -> ProwlConfig:
    """Load ProwlConfig from root, optionally merging prowl.yaml / prowl.toml.

    Overrides whose value is ``None`` are ignored so that unset CLI flags do
    not mask file values.

    Raises:
        ConfigError: If the config file cannot be parsed or holds bad values.

    """
    root = Path(root)
    file_config = _read_prowl_config(root)
    merged = {**file_config, **{k: v for k, v in overrides.items() if v is not None}}
    if "extensions" in merged and isinstance(merged["extensions"], list):
        merged["extensions"] = tuple(merged["extensions"])
    try:
        return ProwlConfig(root=root, **merged)
    except TypeError as exc:
        msg = f"Invalid prowl configuration: {exc}"
        raise ConfigError(msg) from exc


def _read_prowl_config(root: Path) -> dict[str, object]:
    """Read prowl config from yaml/toml if present. Returns empty dict otherwise."""
    path = find_config_file(root)
    if path is None:
        return {}
    if path.suffix == ".toml":
        return _parse_toml(path)
    return _parse_yaml(path)


def _parse_yaml(path: Path) -> dict[str, object]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as exc:
        msg = f"Failed to read {path}: {exc}"
        raise ConfigError(msg) from exc
    if not isinstance(data, dict):
        msg = f"{path} must contain a mapping, got {type(data).__name__}"
        raise ConfigError(msg)
    return _flatten_prowl_section(data)


def _parse_toml(path: Path) -> dict[str, object]:
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError) as exc:
        msg = f"Failed to read {path}: {exc}"
        raise ConfigError(msg) from exc
    return _flatten_prowl_section(data)


def _flatten_prowl_section(data: dict[str, object]) -> dict[str, object]:
    """Extract prowl.* keys into top-level config.

    Top-level keys are accepted too; a ``prowl:`` section wins over them.
    Unknown keys are ignored.
    """
    result: dict[str, object] = {k: v for k, v in data.items() if k in _KNOWN_KEYS}
    section = data.get("prowl")
    if isinstance(section, dict):
        for k, v in section.items():
            if k in _KNOWN_KEYS:
                result[k] = v
    return result
