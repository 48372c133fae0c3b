"""Shared type definitions for prowl."""

from typing import Literal

# Convention file kinds recognised by the scanner
type FileType = Literal[
    "page",
    "route",
    "layout",
    "middleware",
    "loading",
    "error",
    "not-found",
]

# File kinds that produce a URL endpoint
type RouteFileType = Literal["page", "route"]

# Segment kinds, ordered from most to least specific
type SegmentKind = Literal["static", "dynamic", "catch_all", "optional_catch_all"]

# Validation error codes
type ErrorType = Literal["conflict", "invalid-pattern"]

# Validation warning codes
type WarningType = Literal["deep-nesting", "naming-convention"]

# Path relative to the app directory, always ``/``-separated
type RelativePath = str

# Directory relative to the app directory; ``""`` is the root
type DirPath = str

# URL pattern (e.g., "/users/:id", "/docs/:path{.+}")
type UrlPattern = str
