"""Prowl — file-based route discovery for server frameworks.

Turns a directory of convention files into a validated, ordered route
manifest: URL patterns, layout and middleware chains, closest loading/error/
not-found boundaries, and registration priority.

Quick start::

    import prowl

    manifest = prowl.build_manifest("my-app/")
    if prowl.has_errors(manifest):
        print(prowl.format_errors(manifest.errors))

Convention files, under ``app/`` by default::

    page      rendered route          route      API route
    layout    wraps nested routes     middleware  runs before nested routes
    loading   closest loading state   error       closest error boundary
    not-found closest 404 boundary

"""

# PEP 703: Declare this module as free-threading safe
_Py_mod_gil = 0

__version__ = "0.1.0-dev"
__all__ = [
    "ProwlConfig",
    "__version__",
    "build_manifest",
    "format_errors",
    "format_warnings",
    "has_errors",
    "has_warnings",
    "load_config",
]

# Name -> module holding it; resolved lazily by __getattr__
_LAZY: dict[str, str] = {
    "ProwlConfig": "prowl.config",
    "load_config": "prowl.config_loader",
    "build_manifest": "prowl.routes.manifest",
    "format_errors": "prowl.routes.validator",
    "format_warnings": "prowl.routes.validator",
    "has_errors": "prowl.routes.validator",
    "has_warnings": "prowl.routes.validator",
}


def __getattr__(name: str) -> object:
    """Lazy imports for the public API.

    Keeps ``import prowl`` fast; the routes package is only loaded on use.
    """
    module_name = _LAZY.get(name)
    if module_name is None:
        msg = f"module {__name__!r} has no attribute {name!r}"
        raise AttributeError(msg)

    import importlib

    return getattr(importlib.import_module(module_name), name)
