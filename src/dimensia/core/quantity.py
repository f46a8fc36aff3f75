"""
dimensia.core.quantity
======================

Defines the `Quantity` class: a numeric value paired with a canonical `Units`
composite, plus the free functions that construct, inspect and convert
quantities.

The numeric value is stored untouched (``int``, ``Fraction``, ``float``,
``complex``, ``Decimal``...). Conversions multiply it by an exact factor when
the units involved are related exactly, so ``3000 * u.mm`` converts to exactly
``3`` meters.

Every binary operation follows the same two-tier check:

1. dimension equality decides whether the operation is legal at all
   (otherwise `DimensionError`);
2. unit equality decides whether a conversion is needed first.

Plain numbers take part as quantities in ``NoUnits``.
"""

from __future__ import annotations

import math
from decimal import Decimal
from fractions import Fraction
from numbers import Number
from typing import Any, Tuple, Union

from dimensia.core.conversion import (
    Compat,
    compatibility,
    convfact,
    preferred_units,
    promote_units,
)
from dimensia.core.dimensions import Dimensions, NoDims
from dimensia.core.exceptions import DimensionError
from dimensia.core.unit import NoUnits, Unit, Units
from dimensia.core.utils import as_exponent

QuantityLike = Union["Quantity", Number]


class Quantity:
    """
    A physical quantity: a numeric value in a given unit.

    Attributes
    ----------
    value : number
        The numeric value expressed in ``unit``.
    dim : Dimensions
        The physical dimension; always ``unit.dims``.
    unit : Units
        The canonical unit composite the value is expressed in.

    Constructing a ``Quantity`` whose unit is dimensionless yields a
    `DimensionlessQuantity`. Prefer `quantity_of`, which also collapses
    ``NoUnits`` quantities to plain numbers.
    """

    __slots__ = ["value", "dim", "unit"]

    def __new__(cls, value: Any = 0, unit: "Units | Unit" = NoUnits) -> "Quantity":
        if cls is Quantity and not _as_units(unit).dims:
            cls = DimensionlessQuantity
        return object.__new__(cls)

    def __init__(self, value: Any, unit: "Units | Unit") -> None:
        if isinstance(value, Quantity):
            raise TypeError("Quantity value must be a plain number; multiply quantities instead")
        unit = _as_units(unit)
        self.value = value
        self.dim: Dimensions = unit.dims
        self.unit: Units = unit

    def __reduce__(self) -> tuple:
        return (Quantity, (self.value, self.unit))

    # --- Conversion helpers ---
    def to(self, target: "Units | Unit") -> QuantityLike:
        """Convert into ``target`` units. Same as ``convert_to(target, self)``."""
        return convert_to(target, self)

    def preferred(self) -> QuantityLike:
        """This quantity expressed in the preferred units of its dimension."""
        return convert_to(preferred_units(self.dim), self)

    @property
    def si(self) -> QuantityLike:
        return self.preferred()

    @property
    def is_dimensionless(self) -> bool:
        return not self.dim

    # --- Arithmetic ---
    def __add__(self, other: Any) -> QuantityLike:
        if not _is_operand(other):
            return NotImplemented
        a, b, unit = promote(self, other)
        return quantity_of(a + b, unit)

    def __radd__(self, other: Any) -> QuantityLike:
        if not _is_operand(other):
            return NotImplemented
        a, b, unit = promote(other, self)
        return quantity_of(a + b, unit)

    def __sub__(self, other: Any) -> QuantityLike:
        if not _is_operand(other):
            return NotImplemented
        a, b, unit = promote(self, other)
        return quantity_of(a - b, unit)

    def __rsub__(self, other: Any) -> QuantityLike:
        if not _is_operand(other):
            return NotImplemented
        a, b, unit = promote(other, self)
        return quantity_of(a - b, unit)

    def __neg__(self) -> "Quantity":
        return Quantity(-self.value, self.unit)

    def __pos__(self) -> "Quantity":
        return Quantity(+self.value, self.unit)

    def __abs__(self) -> "Quantity":
        return Quantity(abs(self.value), self.unit)

    def __mul__(self, other: Any) -> QuantityLike:
        # quantity × quantity
        if isinstance(other, Quantity):
            return quantity_of(self.value * other.value, self.unit * other.unit)
        # quantity × unit
        if isinstance(other, (Units, Unit)):
            return quantity_of(self.value, self.unit * other)
        # quantity × scalar
        if isinstance(other, Number):
            return quantity_of(self.value * other, self.unit)
        return NotImplemented

    def __rmul__(self, other: Any) -> QuantityLike:
        if isinstance(other, Number):
            return quantity_of(other * self.value, self.unit)
        return NotImplemented

    def __truediv__(self, other: Any) -> QuantityLike:
        if isinstance(other, Quantity):
            return quantity_of(self.value / other.value, self.unit / other.unit)
        if isinstance(other, (Units, Unit)):
            return quantity_of(self.value, self.unit / _as_units(other))
        if isinstance(other, Number):
            return quantity_of(self.value / other, self.unit)
        return NotImplemented

    def __rtruediv__(self, other: Any) -> QuantityLike:
        # scalar / quantity -> inverse unit
        if isinstance(other, Number):
            return quantity_of(other / self.value, self.unit.inv())
        return NotImplemented

    def __floordiv__(self, other: Any) -> Any:
        if not _is_operand(other):
            return NotImplemented
        from dimensia.core.functions import fld

        return fld(self, other)

    def __rfloordiv__(self, other: Any) -> Any:
        if not _is_operand(other):
            return NotImplemented
        from dimensia.core.functions import fld

        return fld(other, self)

    def __mod__(self, other: Any) -> QuantityLike:
        if not _is_operand(other):
            return NotImplemented
        from dimensia.core.functions import mod

        return mod(self, other)

    def __rmod__(self, other: Any) -> QuantityLike:
        if not _is_operand(other):
            return NotImplemented
        from dimensia.core.functions import mod

        return mod(other, self)

    def __divmod__(self, other: Any) -> Tuple[Any, QuantityLike]:
        if not _is_operand(other):
            return NotImplemented
        from dimensia.core.functions import fld, mod

        return fld(self, other), mod(self, other)

    def __pow__(self, n: Any, modulo: Any | None = None) -> QuantityLike:
        if modulo is not None:
            raise TypeError("Modulo exponentiation is not supported for Quantity.")
        if isinstance(n, Quantity):
            n = _dimensionless_number(n, "pow")
        if not isinstance(n, Number):
            return NotImplemented
        if isinstance(n, float):
            # rationalize for the unit, keep the float for the value
            return quantity_of(self.value ** n, self.unit ** as_exponent(n))
        n = as_exponent(n)
        return quantity_of(self.value ** n, self.unit ** n)

    def __rpow__(self, base: Any) -> Any:
        if not isinstance(base, Number):
            return NotImplemented
        return base ** _dimensionless_number(self, "pow")

    # --- Comparison ---
    def __eq__(self, other: object) -> bool:
        if not _is_operand(other):
            return NotImplemented
        ux, uy = unit_of(self), unit_of(other)
        if ux == uy:
            return self.value == _value(other)
        if ux.dims != uy.dims:
            # mismatched dimensions are unequal, not an error
            return False
        return strip_unit(convert_to(uy, self)) == _value(other)

    def __ne__(self, other: object) -> bool:
        eq = self.__eq__(other)
        if eq is NotImplemented:
            return NotImplemented
        return not eq

    __hash__ = None  # type: ignore[assignment]  # equality converts units

    def __lt__(self, other: Any) -> bool:
        if not _is_operand(other):
            return NotImplemented
        a, b, _ = promote(self, other)
        return a < b

    def __gt__(self, other: Any) -> bool:
        if not _is_operand(other):
            return NotImplemented
        a, b, _ = promote(other, self)
        return a < b

    def __le__(self, other: Any) -> bool:
        if not _is_operand(other):
            return NotImplemented
        return _le(self, other)

    def __ge__(self, other: Any) -> bool:
        if not _is_operand(other):
            return NotImplemented
        return _le(other, self)

    # --- Rounding (value only, unit kept) ---
    def __round__(self, ndigits: int | None = None) -> "Quantity":
        if ndigits is None:
            return Quantity(round(self.value), self.unit)
        return Quantity(round(self.value, ndigits), self.unit)

    def __floor__(self) -> "Quantity":
        return Quantity(math.floor(self.value), self.unit)

    def __ceil__(self) -> "Quantity":
        return Quantity(math.ceil(self.value), self.unit)

    def __trunc__(self) -> "Quantity":
        return Quantity(math.trunc(self.value), self.unit)

    def __bool__(self) -> bool:
        return bool(self.value)

    # --- Display ---
    def __repr__(self) -> str:
        return f"{self.value} {self.unit}"

    def __format__(self, spec: str) -> str:
        """
        Format the numeric value with ``spec`` and append the unit.

        The special spec ``"si"`` first converts to the preferred units of
        the quantity's dimension.

        >>> f"{2.5 * u.km:.2f}"
        '2.50 km'
        >>> f"{2.5 * u.km:si}"
        '2500.0 m'
        """
        spec = (spec or "").strip()
        if spec == "si":
            return repr(self.preferred())
        if not spec:
            return repr(self)
        return f"{format(self.value, spec)} {self.unit}"


class DimensionlessQuantity(Quantity):
    """
    A quantity whose dimension is ``NoDims`` but whose unit is not ``NoUnits``
    (``5 * u.percent``, ``3 * u.km / u.m``). Only these convert to plain
    numbers, so functions such as ``log`` and ``sin`` accept them.
    """

    __slots__ = []

    def to_number(self) -> Any:
        return convert_to(NoUnits, self)

    def __float__(self) -> float:
        return float(self.to_number())

    def __int__(self) -> int:
        return int(self.to_number())

    def __complex__(self) -> complex:
        return complex(self.to_number())


# ---------------------------------------------------------------------------
# Public functions
# ---------------------------------------------------------------------------

def quantity_of(value: Any, unit: "Units | Unit") -> QuantityLike:
    """Attach ``unit`` to ``value``; ``NoUnits`` returns the plain value."""
    unit = _as_units(unit)
    if not unit:
        return value
    return Quantity(value, unit)


def strip_unit(x: Any) -> Any:
    """The numeric value of ``x`` in its own unit (``x`` itself for plain numbers)."""
    if isinstance(x, Quantity):
        return x.value
    return x


def unit_of(x: Any) -> Units:
    if isinstance(x, Quantity):
        return x.unit
    if isinstance(x, Units):
        return x
    if isinstance(x, Unit):
        return Units([x])
    if isinstance(x, Number):
        return NoUnits
    raise TypeError(f"{type(x).__name__} has no unit")


def dimension_of(x: Any) -> Dimensions:
    if isinstance(x, Quantity):
        return x.dim
    if isinstance(x, Units):
        return x.dims
    if isinstance(x, Unit):
        return x.dims
    if isinstance(x, Dimensions):
        return x
    if isinstance(x, Number):
        return NoDims
    raise TypeError(f"{type(x).__name__} has no dimension")


def convert_to(target: "Units | Unit", x: Any) -> QuantityLike:
    """
    Express ``x`` in ``target`` units.

    Raises
    ------
    DimensionError
        If ``x`` and ``target`` measure different dimensions.
    """
    target = _as_units(target)
    source = unit_of(x)
    if source == target:
        return x if target else _value(x)
    return quantity_of(scale_value(_value(x), convfact(target, source)), target)


def scale_value(value: Any, factor: Any) -> Any:
    """
    ``value * factor`` for a conversion factor (``int``, ``Fraction`` or ``float``).

    ``Decimal`` values only mix with ``int``, so a ``Fraction`` factor is
    applied as numerator then denominator and a ``float`` one is converted
    exactly first.
    """
    if isinstance(value, Decimal):
        if isinstance(factor, Fraction):
            return value * factor.numerator / factor.denominator
        if isinstance(factor, float):
            return value * Decimal(factor)
    return value * factor


def preferred(x: Any) -> Any:
    """Preferred units of a dimension/units, or ``x`` converted into them."""
    if isinstance(x, (Dimensions, Units)):
        return preferred_units(x)
    return convert_to(preferred_units(dimension_of(x)), x)


def promote(x: Any, y: Any) -> Tuple[Any, Any, Units]:
    """
    Bring two operands to a common unit.

    Returns ``(x_value, y_value, unit)``: raw values unchanged when the units
    already match, converted to the dimension's preferred units when only the
    dimensions match.

    Raises
    ------
    DimensionError
        If the dimensions differ.
    """
    ux, uy = unit_of(x), unit_of(y)
    compat = compatibility(ux, uy)
    if compat is Compat.SAME_UNITS:
        return _value(x), _value(y), ux
    if compat is Compat.MISMATCH:
        raise DimensionError(x, y)
    unit = promote_units(ux, uy)
    return strip_unit(convert_to(unit, x)), strip_unit(convert_to(unit, y)), unit


# Short aliases
ustrip = strip_unit
uconvert = convert_to
upreferred = preferred


# ---------------------------------------------------------------------------
# Internals
# ---------------------------------------------------------------------------

def _as_units(unit: Any) -> Units:
    if isinstance(unit, Units):
        return unit
    if isinstance(unit, Unit):
        return Units([unit])
    raise TypeError(f"expected Units, got {type(unit).__name__}")


def _is_operand(x: object) -> bool:
    return isinstance(x, (Quantity, Number))


def _value(x: Any) -> Any:
    return x.value if isinstance(x, Quantity) else x


def _le(x: Any, y: Any) -> bool:
    a, b, _ = promote(x, y)
    if a < b:
        return True
    ux, uy = unit_of(x), unit_of(y)
    if ux == uy:
        return a == b
    return strip_unit(convert_to(uy, x)) == _value(y)


def _dimensionless_number(x: Any, op: str) -> Any:
    """Plain number for a dimensionless operand; `DimensionError` otherwise."""
    if isinstance(x, DimensionlessQuantity):
        return x.to_number()
    if isinstance(x, Quantity):
        raise DimensionError(x, NoDims, op)
    return x


__all__ = [
    "Quantity",
    "DimensionlessQuantity",
    "quantity_of",
    "strip_unit",
    "unit_of",
    "dimension_of",
    "convert_to",
    "preferred",
    "promote",
    "scale_value",
    "ustrip",
    "uconvert",
    "upreferred",
]
