"""
dimensia.core.functions
=======================

Mathematical functions over quantities and plain numbers.

* roots (`sqrt`, `cbrt`) take the root of the value and of the unit;
* transcendental functions (`sin`, `log`, ...) accept only dimensionless
  input, converted to a plain number first;
* integer division (`div`, `fld`, `cld`) and remainders (`mod`, `rem`)
  express the dividend in the divisor's unit first;
* `qmin` / `qmax` return one of their original operands, unconverted;
* value-only helpers (`floor`, `sign`, `isfinite`, ...) leave the unit alone.
"""

from __future__ import annotations

import cmath
import math
from decimal import Decimal
from fractions import Fraction
from functools import reduce
from numbers import Number, Rational
from typing import Any, Iterable, Tuple

from dimensia.core.conversion import DEFAULT_RTOL, conversion_scale, preferred_units, promote_units
from dimensia.core.dimensions import Dimensions, NoDims
from dimensia.core.exceptions import DimensionError
from dimensia.core.quantity import (
    DimensionlessQuantity,
    Quantity,
    QuantityLike,
    convert_to,
    dimension_of,
    promote,
    quantity_of,
    scale_value,
    strip_unit,
    unit_of,
)
from dimensia.core.unit import NoUnits, Units


def _value(x: Any) -> Any:
    return x.value if isinstance(x, Quantity) else x


def _plain(x: Any, fname: str) -> Any:
    """Plain number for dimensionless input; `DimensionError` for anything with a dimension."""
    if isinstance(x, DimensionlessQuantity):
        return convert_to(NoUnits, x)
    if isinstance(x, Quantity):
        raise DimensionError(x, NoDims, fname)
    if isinstance(x, Number):
        return x
    raise TypeError(f"{fname}() argument must be a number or quantity, not {type(x).__name__}")


def _apply(real_fn, complex_fn, v: Any) -> Any:
    if isinstance(v, complex):
        return complex_fn(v)
    return real_fn(v)


# ---------------------------------------------------------------------------
# Roots
# ---------------------------------------------------------------------------

def sqrt(x: Any) -> Any:
    """Square root; unit composites (and dimensions) take the root of every power."""
    if isinstance(x, (Units, Dimensions)):
        return x.sqrt()
    if isinstance(x, Quantity):
        return quantity_of(_apply(math.sqrt, cmath.sqrt, x.value), x.unit.sqrt())
    return _apply(math.sqrt, cmath.sqrt, x)


def _cbrt(v: Any) -> Any:
    if isinstance(v, complex):
        return v ** (1 / 3)
    return math.cbrt(v)


def cbrt(x: Any) -> Any:
    if isinstance(x, (Units, Dimensions)):
        return x.cbrt()
    if isinstance(x, Quantity):
        return quantity_of(_cbrt(x.value), x.unit.cbrt())
    return _cbrt(x)


# ---------------------------------------------------------------------------
# Dimensionless-only functions
# ---------------------------------------------------------------------------

def sin(x: QuantityLike) -> Any:
    return _apply(math.sin, cmath.sin, _plain(x, "sin"))


def cos(x: QuantityLike) -> Any:
    return _apply(math.cos, cmath.cos, _plain(x, "cos"))


def tan(x: QuantityLike) -> Any:
    return _apply(math.tan, cmath.tan, _plain(x, "tan"))


def _recip(v: Any) -> Any:
    # real poles give a signed infinity
    if v == 0 and not isinstance(v, complex):
        return math.copysign(math.inf, v)
    return 1 / v


def cot(x: QuantityLike) -> Any:
    """Cotangent; ``inf`` at the poles (``cot(0) == inf``)."""
    return _recip(tan(x))


def sec(x: QuantityLike) -> Any:
    return _recip(cos(x))


def csc(x: QuantityLike) -> Any:
    return _recip(sin(x))


def cis(x: QuantityLike) -> complex:
    """``exp(i·x)``."""
    return cmath.exp(1j * _plain(x, "cis"))


def exp(x: QuantityLike) -> Any:
    return _apply(math.exp, cmath.exp, _plain(x, "exp"))


def log(x: QuantityLike) -> Any:
    return _apply(math.log, cmath.log, _plain(x, "log"))


def log10(x: QuantityLike) -> Any:
    return _apply(math.log10, cmath.log10, _plain(x, "log10"))


def atan2(y: QuantityLike, x: QuantityLike) -> float:
    """Angle of ``(x, y)``; both must share a dimension."""
    a, b, _ = promote(y, x)
    return math.atan2(a, b)


# ---------------------------------------------------------------------------
# Division family
# ---------------------------------------------------------------------------

def _divisor_pair(x: Any, y: Any) -> Tuple[Any, Any]:
    """Values of ``x`` and ``y`` with ``x`` expressed in ``y``'s unit."""
    uy = unit_of(y)
    if unit_of(x) == uy:
        return _value(x), _value(y)
    return strip_unit(convert_to(uy, x)), _value(y)


def _tdiv(a: Any, b: Any) -> Any:
    q = a // b
    if a - q * b != 0 and (a < 0) != (b < 0):
        q += 1
    return q


def _by_scalar(x: Any, y: Any) -> bool:
    # dimensionless dividends are divided as plain numbers
    return isinstance(x, Quantity) and not isinstance(x, DimensionlessQuantity) and not isinstance(y, Quantity)


def div(x: QuantityLike, y: QuantityLike) -> Any:
    """Quotient rounded toward zero. Dividing a quantity by a plain number keeps its unit."""
    if _by_scalar(x, y):
        return quantity_of(_tdiv(x.value, y), x.unit)
    a, b = _divisor_pair(x, y)
    return _tdiv(a, b)


def fld(x: QuantityLike, y: QuantityLike) -> Any:
    """Quotient rounded toward negative infinity (``//``)."""
    if _by_scalar(x, y):
        return quantity_of(x.value // y, x.unit)
    a, b = _divisor_pair(x, y)
    return a // b


def cld(x: QuantityLike, y: QuantityLike) -> Any:
    """Quotient rounded toward positive infinity."""
    if _by_scalar(x, y):
        return quantity_of(-(-x.value // y), x.unit)
    a, b = _divisor_pair(x, y)
    return -(-a // b)


def mod(x: QuantityLike, y: QuantityLike) -> QuantityLike:
    """
    Floored remainder (sign of ``y``), in ``y``'s unit.

    A plain-number divisor keeps ``x``'s unit, so that
    ``divmod(q, n) == (q // n, q % n)``.
    """
    if _by_scalar(x, y):
        return quantity_of(x.value % y, x.unit)
    a, b = _divisor_pair(x, y)
    return quantity_of(a % b, unit_of(y))


def _trem(a: Any, b: Any) -> Any:
    if isinstance(a, float) or isinstance(b, float):
        return math.fmod(a, b)
    return a - b * _tdiv(a, b)


def rem(x: QuantityLike, y: QuantityLike) -> QuantityLike:
    """Truncated remainder (sign of ``x``), in ``y``'s unit (``x``'s for a plain divisor)."""
    if _by_scalar(x, y):
        return quantity_of(_trem(x.value, y), x.unit)
    a, b = _divisor_pair(x, y)
    return quantity_of(_trem(a, b), unit_of(y))


# ---------------------------------------------------------------------------
# min / max
# ---------------------------------------------------------------------------

def _pick(x: Any, y: Any, take_x, op: str) -> Any:
    ux, uy = unit_of(x), unit_of(y)
    if ux == uy:
        return x if take_x(_value(x), _value(y)) else y
    if ux.dims != uy.dims:
        raise DimensionError(x, y, op)
    # compare in reference units, return the untouched operand
    vx = scale_value(_value(x), conversion_scale(ux))
    vy = scale_value(_value(y), conversion_scale(uy))
    return x if take_x(vx, vy) else y


def qmin(x: QuantityLike, y: QuantityLike, *more: QuantityLike) -> QuantityLike:
    """Smallest operand, returned in its own unit (ties go to the later operand)."""
    return reduce(lambda a, b: _pick(a, b, lambda p, q: p < q, "min"), more, _pick(x, y, lambda p, q: p < q, "min"))


def qmax(x: QuantityLike, y: QuantityLike, *more: QuantityLike) -> QuantityLike:
    """Largest operand, returned in its own unit (ties go to the later operand)."""
    return reduce(lambda a, b: _pick(a, b, lambda p, q: p > q, "max"), more, _pick(x, y, lambda p, q: p > q, "max"))


# ---------------------------------------------------------------------------
# Value-only helpers
# ---------------------------------------------------------------------------

def _same_unit(fn, x: QuantityLike) -> QuantityLike:
    if isinstance(x, Quantity):
        return quantity_of(fn(x.value), x.unit)
    return fn(x)


def floor(x: QuantityLike) -> QuantityLike:
    return _same_unit(math.floor, x)


def ceil(x: QuantityLike) -> QuantityLike:
    return _same_unit(math.ceil, x)


def trunc(x: QuantityLike) -> QuantityLike:
    return _same_unit(math.trunc, x)


def zero(x: QuantityLike) -> QuantityLike:
    return _same_unit(lambda v: type(v)(0), x)


def one(x: QuantityLike) -> Any:
    """Multiplicative identity: a plain number, never a quantity."""
    v = _value(x)
    return type(v)(1)


def real(x: QuantityLike) -> QuantityLike:
    return _same_unit(lambda v: v.real, x)


def imag(x: QuantityLike) -> QuantityLike:
    return _same_unit(lambda v: v.imag, x)


def conj(x: QuantityLike) -> QuantityLike:
    return _same_unit(lambda v: v.conjugate(), x)


def to_float(x: QuantityLike) -> QuantityLike:
    return _same_unit(float, x)


def nextfloat(x: QuantityLike) -> QuantityLike:
    return _same_unit(lambda v: math.nextafter(_require_float(v), math.inf), x)


def prevfloat(x: QuantityLike) -> QuantityLike:
    return _same_unit(lambda v: math.nextafter(_require_float(v), -math.inf), x)


def _require_float(v: Any) -> float:
    if not isinstance(v, float):
        raise TypeError(f"expected a float value, got {type(v).__name__}")
    return v


def frexp(x: QuantityLike) -> Tuple[QuantityLike, int]:
    """``(mantissa in x's unit, exponent)``."""
    m, e = math.frexp(_require_float(_value(x)))
    if isinstance(x, Quantity):
        return quantity_of(m, x.unit), e
    return m, e


def copysign(x: QuantityLike, y: QuantityLike) -> QuantityLike:
    """``x`` with the sign of ``y``'s value."""
    neg = signbit(y)

    def _copy(v: Any) -> Any:
        if isinstance(v, float):
            return math.copysign(v, -1.0 if neg else 1.0)
        return -abs(v) if neg else abs(v)

    return _same_unit(_copy, x)


def flipsign(x: QuantityLike, y: QuantityLike) -> QuantityLike:
    """``x`` negated when ``y``'s value is negative."""
    neg = signbit(_value(y))
    return _same_unit(lambda v: -v if neg else v, x)


def abs2(x: QuantityLike) -> QuantityLike:
    """Squared magnitude; the unit is squared too."""
    v = _value(x)
    sq = abs(v) ** 2 if isinstance(v, complex) else v * v
    if isinstance(x, Quantity):
        return quantity_of(sq, x.unit * x.unit)
    return sq


def sign(x: QuantityLike) -> Any:
    """Sign of the value as a plain number (``-1``, ``0``, ``1``; NaN stays NaN)."""
    v = _value(x)
    if isinstance(v, complex):
        return v / abs(v) if v else v
    if isinstance(v, float):
        if math.isnan(v) or v == 0:
            return v
        return math.copysign(1.0, v)
    return (v > 0) - (v < 0)


def signbit(x: QuantityLike) -> bool:
    v = _value(x)
    if isinstance(v, float):
        return math.copysign(1.0, v) < 0
    return v < 0


def isinteger(x: QuantityLike) -> bool:
    v = _value(x)
    if isinstance(v, int):
        return True
    if isinstance(v, Fraction):
        return v.denominator == 1
    if isinstance(v, complex):
        return v.imag == 0 and float(v.real).is_integer()
    return math.isfinite(v) and v == math.floor(v)


def isreal(x: QuantityLike) -> bool:
    v = _value(x)
    return not isinstance(v, complex) or v.imag == 0


def isfinite(x: QuantityLike) -> bool:
    return _apply(math.isfinite, cmath.isfinite, _value(x))


def isinf(x: QuantityLike) -> bool:
    return _apply(math.isinf, cmath.isinf, _value(x))


def isnan(x: QuantityLike) -> bool:
    return _apply(math.isnan, cmath.isnan, _value(x))


# ---------------------------------------------------------------------------
# Ordering with NaN
# ---------------------------------------------------------------------------

def isless(x: QuantityLike, y: QuantityLike) -> bool:
    """Total order: like ``<`` but NaN sorts after every other value."""
    a, b, _ = promote(x, y)
    a_nan = isinstance(a, float) and math.isnan(a)
    b_nan = isinstance(b, float) and math.isnan(b)
    if a_nan or b_nan:
        return not a_nan
    return a < b


# ---------------------------------------------------------------------------
# Fused multiply-add
# ---------------------------------------------------------------------------

def fma(x: QuantityLike, y: QuantityLike, z: QuantityLike) -> QuantityLike:
    """
    ``x * y + z`` computed in ``unit(x) * unit(y)`` and returned in the
    units ``unit(x) * unit(y)`` and ``unit(z)`` promote to.
    """
    if dimension_of(x) * dimension_of(y) != dimension_of(z):
        raise DimensionError(x, z, "fma")
    u_in = unit_of(x) * unit_of(y)
    u_out = promote_units(u_in, unit_of(z))
    c = strip_unit(x) * strip_unit(y) + strip_unit(convert_to(u_in, z))
    return convert_to(u_out, quantity_of(c, u_in))


muladd = fma


# ---------------------------------------------------------------------------
# Approximate equality
# ---------------------------------------------------------------------------

def _as_decimal(v: Any) -> Decimal:
    if isinstance(v, Fraction):
        return Decimal(v.numerator) / v.denominator
    return Decimal(v)


def _isclose(a: Any, b: Any, rtol: float, atol: Any) -> bool:
    if a == b:
        return True
    if not (isfinite(a) and isfinite(b)):
        return False
    if isinstance(a, Decimal) or isinstance(b, Decimal):
        a, b, rtol, atol = (_as_decimal(v) for v in (a, b, rtol, atol))
    return abs(a - b) <= atol + rtol * max(abs(a), abs(b))


def _atol_in(atol: Any, unit: Any) -> Any:
    if isinstance(atol, Quantity):
        return strip_unit(convert_to(unit, atol))
    if atol == 0:
        return 0
    return strip_unit(convert_to(unit, atol))


def _default_rtol(values: Iterable[Any]) -> float:
    """Zero when every value is exact (``int``/``Fraction``), else ``DEFAULT_RTOL``."""
    if all(isinstance(v, Rational) for v in values):
        return 0
    return DEFAULT_RTOL


def isapprox(x: QuantityLike, y: QuantityLike, *, rtol: float | None = None, atol: Any = 0) -> bool:
    """
    Approximate equality, after expressing ``x`` in ``y``'s unit.

    ``atol`` may be a quantity. ``rtol`` defaults to ``DEFAULT_RTOL``, or to 0
    when both values are exact after conversion. Mismatched dimensions raise
    `DimensionError`.
    """
    ux, uy = unit_of(x), unit_of(y)
    if ux == uy:
        a, b = _value(x), _value(y)
    else:
        a, b = strip_unit(convert_to(uy, x)), _value(y)
    if rtol is None:
        rtol = _default_rtol((a, b))
    return _isclose(a, b, rtol, _atol_in(atol, uy))


def _norm(values: Iterable[Any]) -> float:
    return math.hypot(*(abs(v) for v in values))


def isapprox_all(xs: Iterable[QuantityLike], ys: Iterable[QuantityLike], *, rtol: float | None = None, atol: Any = 0) -> bool:
    """
    Approximate equality of two sequences.

    Compares the Euclidean norm of the differences (in the preferred units of
    the shared dimension) against ``atol + rtol * max(|xs|, |ys|)``. When that
    norm is not finite, falls back to element-wise `isapprox`. Sequences of
    different length or mixed dimensions are simply not approximately equal.
    """
    xs, ys = list(xs), list(ys)
    if len(xs) != len(ys):
        return False
    if not xs:
        return True
    dims = {dimension_of(v) for v in xs + ys}
    if len(dims) != 1:
        return False
    target = preferred_units(dims.pop())
    a = [strip_unit(convert_to(target, v)) for v in xs]
    b = [strip_unit(convert_to(target, v)) for v in ys]
    tol = _atol_in(atol, target)
    if rtol is None:
        rtol = _default_rtol(a + b)

    d = _norm(p - q for p, q in zip(a, b))
    if math.isfinite(d):
        return d <= tol + rtol * max(_norm(a), _norm(b))
    return all(_isclose(p, q, rtol, tol) for p, q in zip(a, b))


__all__ = [
    "sqrt", "cbrt",
    "sin", "cos", "tan", "cot", "sec", "csc", "cis", "exp", "log", "log10", "atan2",
    "div", "fld", "cld", "mod", "rem",
    "qmin", "qmax",
    "floor", "ceil", "trunc", "zero", "one", "real", "imag", "conj",
    "to_float", "nextfloat", "prevfloat", "frexp", "copysign", "flipsign",
    "abs2", "sign", "signbit", "isinteger", "isreal", "isfinite", "isinf", "isnan",
    "isless", "fma", "muladd", "isapprox", "isapprox_all",
]
