"""
dimensia.core.conversion
========================

Conversion factors between units of the same dimension.

Every unit name in the registry maps to a pair ``(inexact, exact)``: a float
and an exact rational whose product converts one of that unit into the
reference unit of its dimension. Factors are carried on two tracks so that
conversions which are mathematically exact (``1000 mm == 1 m``,
``1 ft == 3048/10000 m``) stay exact for ``int`` and ``Fraction`` values,
while inherently inexact factors degrade to ``float`` without corrupting the
exact track.

The exact track is abandoned (folded into the float) when the magnitude or
its reciprocal would exceed ``EXACT_LIMIT`` or when a factor is raised to a
fractional power.
"""

from __future__ import annotations

import logging
import math
import sys
from enum import Enum
from fractions import Fraction
from functools import lru_cache
from numbers import Rational
from typing import TYPE_CHECKING, Optional, Tuple, Union

from dimensia.core.dimensions import Dimensions
from dimensia.core.exceptions import DimensionError
from dimensia.core.unit import NoUnits, Unit, Units
from dimensia.core.utils import Exponent, is_integral, simplify_fraction

if TYPE_CHECKING:  # pragma: no cover - typing aid only
    from dimensia.units.registry import UnitsRegistry

logger = logging.getLogger(__name__)

Exact = Union[int, Fraction]
Factor = Tuple[float, Exact]

# Largest magnitude kept on the exact track (a signed 64-bit integer).
EXACT_LIMIT = 2**63 - 1

# Relative tolerance used for approximate comparisons (sqrt of float epsilon).
DEFAULT_RTOL = math.sqrt(sys.float_info.epsilon)


def _registry(registry: Optional["UnitsRegistry"]) -> "UnitsRegistry":
    if registry is not None:
        return registry
    # Import here to avoid import-time side-effects / circular imports.
    from dimensia.units.registry import DEFAULT_REGISTRY

    return DEFAULT_REGISTRY


def _fpow(x: float, p: Exponent) -> float:
    try:
        return float(x) ** float(p)
    except OverflowError:
        return math.inf


def _dpow(x: Exact, p: int) -> Exact:
    if p == 0:
        return 1
    if p == 1:
        return x
    if p == -1:
        return 1 / Fraction(x)
    return Fraction(x) ** p


def _fits_exact(x: float) -> bool:
    x = abs(x)
    return 0.0 < x < EXACT_LIMIT and 1.0 / x < EXACT_LIMIT


@lru_cache(maxsize=None, typed=True)
def basefactor(inexact: float, exact: Exact, eq: Union[Exact, float], tens: int, power: Exponent) -> Factor:
    """
    Raise a unit's base factor to ``power``, keeping as much of it exact as possible.

    Parameters
    ----------
    inexact, exact
        The unit's factor relative to its reference unit, ``inexact * exact``.
    eq
        An extra multiplier (exact if ``int``/``Fraction``, inexact if ``float``).
    tens
        Power-of-ten prefix of the unit.
    power
        Exponent the whole factor is raised to.

    Returns
    -------
    (float, int | Fraction)
        ``(inexact_result, exact_result)`` whose product is
        ``(inexact * exact * eq * 10**tens) ** power``.
    """
    if is_integral(power):
        power = int(power)
    integral = isinstance(power, int)
    eq_is_exact = isinstance(eq, Rational) and not isinstance(eq, bool)

    ex2 = _fpow(_fpow(10.0, tens) * float(exact), power)
    eq2 = _fpow(eq, power)
    if eq_is_exact:
        ex2 *= eq2

    can_exact = integral and _fits_exact(ex2)
    can_exact2 = integral and _fits_exact(eq2)

    if can_exact:
        if eq_is_exact:
            x = _dpow(Fraction(eq) * Fraction(exact) * Fraction(10) ** tens, power)
            return _fpow(inexact, power), simplify_fraction(Fraction(x))
        x = _dpow(Fraction(exact) * Fraction(10) ** tens, power)
        return _fpow(inexact * float(eq), power), simplify_fraction(Fraction(x))

    logger.debug(
        "exact factor dropped for (%r, %r, eq=%r, tens=%d) ** %s",
        inexact, exact, eq, tens, power,
    )
    if eq_is_exact and can_exact2:
        x = _dpow(Fraction(eq), power)
        return _fpow(inexact * float(exact) * _fpow(10.0, tens), power), simplify_fraction(Fraction(x))
    return _fpow(inexact * float(exact) * _fpow(10.0, tens) * float(eq), power), 1


def unit_basefactor(u: Unit, registry: Optional["UnitsRegistry"] = None) -> Factor:
    """Factor converting one ``u`` (prefix and power included) into reference units."""
    inexact, exact = _registry(registry).basefactor(u.name)
    return basefactor(inexact, exact, 1, u.tens, u.power)


def units_basefactor(units: Units, registry: Optional["UnitsRegistry"] = None) -> Factor:
    """Product of the atomic factors of a composite: floats multiply, exact parts stay exact."""
    reg = _registry(registry)
    inexact = 1.0
    exact: Fraction = Fraction(1)
    for u in units:
        i, e = unit_basefactor(u, reg)
        inexact *= i
        exact *= e
    return inexact, simplify_fraction(exact)


def conversion_scale(units: Units, registry: Optional["UnitsRegistry"] = None) -> float:
    """Single float factor to reference units; used where only ordering matters."""
    inexact, exact = units_basefactor(units, registry)
    return inexact * float(exact)


@lru_cache(maxsize=4096)
def _convfact(target: Units, source: Units, reg: "UnitsRegistry") -> Union[Exact, float]:
    inex1, ex1 = units_basefactor(source, reg)
    inex2, ex2 = units_basefactor(target, reg)

    a = inex1 / inex2
    ex = simplify_fraction(Fraction(ex1) / Fraction(ex2))
    if math.isclose(a, 1.0, rel_tol=DEFAULT_RTOL):
        return ex
    return a * ex


def convfact(target: Units, source: Units, registry: Optional["UnitsRegistry"] = None) -> Union[Exact, float]:
    """
    Factor that turns a value expressed in ``source`` into one in ``target``.

    Exact (``int``/``Fraction``) when every factor on the path is exact,
    ``float`` otherwise.

    Raises
    ------
    DimensionError
        If the two composites measure different dimensions.
    """
    if target.dims != source.dims:
        raise DimensionError(source, target, "convert")
    if target == source:
        return 1
    return _convfact(target, source, _registry(registry))


# ---------------------------------------------------------------------------
# Promotion
# ---------------------------------------------------------------------------

def preferred_units(x: "Dimensions | Units", registry: Optional["UnitsRegistry"] = None) -> Units:
    """Preferred units of a dimension: each base dimension's promotion unit raised to its power."""
    dims = x.dims if isinstance(x, Units) else x
    reg = _registry(registry)
    return Units.product(*(reg.promotion(d.name) ** d.power for d in dims))


def promote_units(a: Units, b: Units, registry: Optional["UnitsRegistry"] = None) -> Units:
    """Common units for two operands: unchanged if equal, else the dimension's preferred units."""
    if a == b:
        return a
    if a.dims != b.dims:
        raise DimensionError(a, b, "promote")
    if not a.dims:
        return NoUnits
    return preferred_units(a.dims, registry)


class Compat(Enum):
    """How two unit composites relate for a binary operation."""

    SAME_UNITS = "same-units"
    SAME_DIMENSION = "same-dimension"
    MISMATCH = "mismatch"


def compatibility(a: Units, b: Units) -> Compat:
    """Dimension equality gates legality; unit equality gates whether a conversion is needed."""
    if a == b:
        return Compat.SAME_UNITS
    if a.dims == b.dims:
        return Compat.SAME_DIMENSION
    return Compat.MISMATCH


__all__ = [
    "EXACT_LIMIT",
    "DEFAULT_RTOL",
    "basefactor",
    "unit_basefactor",
    "units_basefactor",
    "conversion_scale",
    "convfact",
    "preferred_units",
    "promote_units",
    "Compat",
    "compatibility",
]
