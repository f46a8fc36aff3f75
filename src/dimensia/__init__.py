"""
Dimensia: dimensional analysis with exact unit conversions.

Physical units attach to plain Python numbers so that arithmetic mixing
incompatible dimensions fails immediately, conversions happen automatically,
and conversions that are exact (``3000 mm`` to ``3 m``) stay exact for
``int`` and ``Fraction`` values.

    >>> from dimensia import u, convert_to
    >>> convert_to(u.m, 3000 * u.mm)
    3 m

The default units registry is imported lazily (via ``dimensia.u``) to avoid
import-time side effects and circular imports.
"""

from importlib import metadata as _metadata
from typing import Any

from dimensia.core.conversion import (
    DEFAULT_RTOL,
    EXACT_LIMIT,
    Compat,
    compatibility,
    convfact,
    preferred_units,
    promote_units,
)
from dimensia.core.dimensions import Dimension, Dimensions, NoDims
from dimensia.core.exceptions import DimensionError, IrrationalExponentError
from dimensia.core.functions import (
    abs2,
    atan2,
    cbrt,
    cis,
    cld,
    div,
    fld,
    fma,
    isapprox,
    isapprox_all,
    mod,
    muladd,
    qmax,
    qmin,
    rem,
    sqrt,
)
from dimensia.core.quantity import (
    DimensionlessQuantity,
    Quantity,
    convert_to,
    dimension_of,
    preferred,
    promote,
    quantity_of,
    strip_unit,
    uconvert,
    unit_of,
    upreferred,
    ustrip,
)
from dimensia.core.unit import NoUnits, Unit, Units

__author__ = "Parneet Sidhu"
__license__ = "MIT"

# Try to read the installed package version first; fall back to a default for local dev.
try:
    __version__ = _metadata.version("dimensia")
except _metadata.PackageNotFoundError:
    import tomllib
    with open("pyproject.toml", "rb") as f:
        __version__ = tomllib.load(f)["project"]["version"]


def __getattr__(name: str) -> Any:
    """Accessing ``u`` builds a namespace over the default registry on first use."""
    if name == "u":
        from dimensia.units.registry import DEFAULT_REGISTRY

        return DEFAULT_REGISTRY.as_namespace()
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


def __dir__() -> list[str]:
    return sorted(list(globals().keys()) + ["u"])


__all__ = [
    "__version__", "__author__", "__license__",
    "u",
    "Dimension", "Dimensions", "NoDims",
    "Unit", "Units", "NoUnits",
    "Quantity", "DimensionlessQuantity",
    "DimensionError", "IrrationalExponentError",
    "quantity_of", "strip_unit", "ustrip", "unit_of", "dimension_of",
    "convert_to", "uconvert", "preferred", "upreferred", "promote",
    "convfact", "preferred_units", "promote_units", "Compat", "compatibility",
    "EXACT_LIMIT", "DEFAULT_RTOL",
    "sqrt", "cbrt", "atan2", "cis", "abs2",
    "div", "fld", "cld", "mod", "rem", "qmin", "qmax",
    "fma", "muladd", "isapprox", "isapprox_all",
]
