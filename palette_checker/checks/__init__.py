"""Auto-discovery of audit check modules.

Every .py file in this package that defines a `check` object is
auto-registered by palette_checker.registry.discover().

The explicit imports below keep the modules importable where
pkgutil.iter_modules cannot list the package (zipapps, frozen builds).
"""

# keep this list in sync with the check modules
import palette_checker.checks.anchor as _anchor  # noqa: F401
import palette_checker.checks.chroma as _chroma  # noqa: F401
import palette_checker.checks.gaps as _gaps  # noqa: F401
import palette_checker.checks.proximity as _proximity  # noqa: F401
