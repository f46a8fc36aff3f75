"""
dimensia.units
==============

Unit declarations: the SI prefix table and the units registry.

The registry module bootstraps (and freezes) the default registry on import,
so it is loaded on first access of ``u``, ``DEFAULT_REGISTRY`` or
``UnitsRegistry`` rather than when this package is imported.
"""
from typing import Any

_LAZY = ("DEFAULT_REGISTRY", "UnitsRegistry", "UnitNamespace")


def __getattr__(name: str) -> Any:
    # Import here to avoid import-time side-effects / circular imports.
    if name == "u":
        from dimensia.units.registry import DEFAULT_REGISTRY

        return DEFAULT_REGISTRY.as_namespace()
    if name in _LAZY:
        from dimensia.units import registry

        return getattr(registry, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


def __dir__() -> list[str]:
    # Improve discoverability in REPL / autocomplete.
    return sorted(list(globals().keys()) + ["u", *_LAZY])
