"""Check auto-discovery and registration.

Scans palette_checker/checks/ for modules that define a `check` object of
type Check. Collects them into a dict keyed by name, in run order.

Falls back to a known module list where pkgutil.iter_modules returns
nothing (zipapps, frozen builds).
"""

import importlib
import pkgutil

from palette_checker.core.types import Check

_registry: dict[str, Check] = {}

# Known check module names, for when pkgutil cannot list the package
_CHECK_MODULES = [
    'anchor',
    'chroma',
    'gaps',
    'proximity',
]


def discover() -> dict[str, Check]:
    """Import all check modules and return the registry, ordered by Check.order."""
    if _registry:
        return _registry

    import palette_checker.checks as pkg

    found_modules = [
        modname for _importer, modname, _ispkg in pkgutil.iter_modules(pkg.__path__) if not modname.startswith('_')
    ]
    if not found_modules:
        found_modules = _CHECK_MODULES

    found: list[Check] = []
    for modname in found_modules:
        module = importlib.import_module(f'palette_checker.checks.{modname}')
        chk = getattr(module, 'check', None)
        if isinstance(chk, Check):
            found.append(chk)

    for chk in sorted(found, key=lambda c: (c.order, c.name)):
        _registry[chk.name] = chk
    return _registry


def get(name: str) -> Check:
    """Get a check by name."""
    reg = discover()
    if name not in reg:
        raise KeyError(f'Unknown check: {name}. Available: {", ".join(sorted(reg))}')
    return reg[name]


def all_checks() -> dict[str, Check]:
    """Return all registered checks in run order."""
    return discover()
