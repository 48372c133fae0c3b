"""Prowl configuration.

ProwlConfig is the central configuration object, frozen after creation.
"""

import re
from dataclasses import dataclass, field
from pathlib import Path

from prowl._errors import ConfigError

# Extensions the scanner knows how to classify
SUPPORTED_EXTENSIONS: tuple[str, ...] = (".ts", ".tsx", ".js", ".jsx", ".py")

_EXTENSION_RE = re.compile(r"^\.[A-Za-z0-9]+$")


@dataclass(frozen=True, slots=True)
class ProwlConfig:
    """Configuration for a route discovery build.

    Attributes:
        root: Project root directory (contains the app directory and the
              optional prowl.yaml). Always resolved to an absolute path.
        app_dir: Directory, relative to *root*, holding the convention files.
        extensions: File extensions recognised by the scanner.
        base_path: URL prefix applied when expanding registrations.
        max_depth: Segment count above which a route gets a deep-nesting warning.
        strict: Show warnings in ``prowl check`` output.

    Raises:
        ConfigError: On malformed extensions or base path.

    """

    root: Path = field(default_factory=Path.cwd)
    app_dir: str = "app"
    extensions: tuple[str, ...] = SUPPORTED_EXTENSIONS
    base_path: str = "/"
    max_depth: int = 5
    strict: bool = True

    def __post_init__(self) -> None:
        if not self.root.is_absolute():
            object.__setattr__(self, "root", self.root.resolve())
        object.__setattr__(self, "extensions", validate_extensions(self.extensions))
        if not isinstance(self.base_path, str) or not self.base_path.startswith("/"):
            msg = f"base_path must start with '/', got {self.base_path!r}"
            raise ConfigError(msg)
        if not isinstance(self.max_depth, int) or self.max_depth < 1:
            msg = f"max_depth must be a positive int, got {self.max_depth!r}"
            raise ConfigError(msg)

    @property
    def app_path(self) -> Path:
        """Absolute path to the app directory."""
        return self.root / self.app_dir


def validate_extensions(extensions: object) -> tuple[str, ...]:
    """Check a recognised-extension configuration and return it as a tuple.

    Raises:
        ConfigError: If *extensions* is a bare string, empty, or contains an
            entry that is not a supported ``.ext`` string.

    """
    if isinstance(extensions, str) or not isinstance(extensions, (list, tuple, set, frozenset)):
        msg = f"extensions must be a sequence of strings, got {type(extensions).__name__}"
        raise ConfigError(msg)
    if not extensions:
        msg = "extensions must not be empty"
        raise ConfigError(msg)

    result: list[str] = []
    for ext in extensions:
        if not isinstance(ext, str) or not _EXTENSION_RE.match(ext):
            msg = f"Invalid extension {ext!r}: expected a leading '.' followed by letters or digits"
            raise ConfigError(msg)
        if ext not in SUPPORTED_EXTENSIONS:
            msg = (
                f"Unsupported extension {ext!r}; "
                f"supported: {', '.join(SUPPORTED_EXTENSIONS)}"
            )
            raise ConfigError(msg)
        if ext not in result:
            result.append(ext)
    # Sets have no stable order
    if isinstance(extensions, (set, frozenset)):
        result.sort()
    return tuple(result)
