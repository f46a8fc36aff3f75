"""
dimensia.core.utils
===================

Small numeric and formatting helpers shared by the dimension and unit types.

Exponents throughout dimensia are kept exact: integral exponents are plain
``int`` and everything else is a ``fractions.Fraction``. The helpers here
perform that normalization and render exponents as unicode superscripts
(e.g. ``'m·s⁻²'``).
"""

from __future__ import annotations

from fractions import Fraction
from math import isclose, isfinite
from numbers import Rational
from typing import Iterable, Tuple, Union

from dimensia.core.exceptions import IrrationalExponentError

Exponent = Union[int, Fraction]

# Largest denominator tried first when turning a float exponent into a rational.
MAX_DENOMINATOR = 1000

_SUPERSCRIPTS = str.maketrans("0123456789-/", "⁰¹²³⁴⁵⁶⁷⁸⁹⁻ᐟ")


def simplify_fraction(x: Union[int, Fraction]) -> Exponent:
    """Return ``x`` as an ``int`` when it is integral, else as a reduced ``Fraction``."""
    if isinstance(x, bool):
        raise TypeError("bool is not a valid exponent")
    if isinstance(x, int):
        return x
    if isinstance(x, Rational):
        x = Fraction(x)
        return x.numerator if x.denominator == 1 else x
    raise TypeError(f"expected an int or Fraction, got {type(x).__name__}")


def rationalize(x: float, as_fraction: bool = False) -> Exponent:
    """
    Convert a float exponent (e.g. ``0.5``) into an exact rational.

    The simplest rational with denominator up to ``MAX_DENOMINATOR`` is used
    when it reproduces ``x``; otherwise ``x`` is taken exactly
    (``Fraction(math.pi)``), so every finite float is a valid exponent.

    Raises
    ------
    IrrationalExponentError
        If ``x`` is not finite.
    """
    if not isfinite(x):
        raise IrrationalExponentError(f"exponent {x!r} is not finite")
    frac = Fraction(x).limit_denominator(MAX_DENOMINATOR)
    if not isclose(float(frac), x, rel_tol=1e-12, abs_tol=0.0):
        frac = Fraction(x)
    return frac if as_fraction else simplify_fraction(frac)


def as_exponent(n: object) -> Exponent:
    """Normalize an exponent given as int, Fraction or float."""
    if isinstance(n, bool):
        raise TypeError("bool is not a valid exponent")
    if isinstance(n, float):
        return rationalize(n)
    if isinstance(n, Rational):
        return simplify_fraction(Fraction(n))
    raise TypeError(f"Exponent must be int, float, or Fraction, got {type(n).__name__}")


def is_integral(x: object) -> bool:
    if isinstance(x, int):
        return True
    if isinstance(x, Fraction):
        return x.denominator == 1
    if isinstance(x, float):
        return x.is_integer()
    return False


def sup(n: Exponent) -> str:
    """Superscript for an exponent; empty for 1."""
    if n == 1:
        return ""
    return str(n).translate(_SUPERSCRIPTS)


def format_factors(factors: Iterable[Tuple[str, Exponent]]) -> str:
    """Join ``(symbol, power)`` pairs as ``'kg·m·s⁻²'``; ``''`` when empty."""
    return "·".join(f"{sym}{sup(p)}" for sym, p in factors)


__all__ = [
    "Exponent",
    "MAX_DENOMINATOR",
    "simplify_fraction",
    "rationalize",
    "as_exponent",
    "is_integral",
    "sup",
    "format_factors",
]
