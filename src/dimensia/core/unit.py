"""
dimensia.core.unit
==================

Atomic units and their canonical products.

A :class:`Unit` is a named unit at a power-of-ten prefix raised to a rational
power (``mm²`` is ``Unit("meter", tens=-3, power=2)``). A :class:`Units` is a
normalized product of such atoms together with the cached dimension of the
whole product. Two ``Units`` describing the same composite are structurally
equal regardless of how they were built::

    >>> u.m * u.m == u.m ** 2
    True
    >>> u.kg * u.m / u.s ** 2 == u.m / u.s * u.kg / u.s
    True

Multiplying a number by a ``Units`` creates a quantity (``3 * u.km``); calling
a ``Units`` converts a quantity into it (``u.m(3 * u.km)``).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from fractions import Fraction
from numbers import Number
from typing import TYPE_CHECKING, Any, ClassVar, Iterable, List

from dimensia.core.dimensions import Dimensions, NoDims
from dimensia.core.utils import Exponent, as_exponent, format_factors, simplify_fraction
from dimensia.units.prefixes import prefix_symbol

if TYPE_CHECKING:  # pragma: no cover - imported only for type checking
    from dimensia.core.quantity import Quantity


@dataclass(frozen=True, slots=True, order=True)
class Unit:
    """
    An atomic unit, compared and ordered by ``(name, tens, power)``.

    Attributes
    ----------
    name : str
        Registry name shared by every prefixed form (``"meter"`` for m, km, mm).
    tens : int
        Power-of-ten prefix (``3`` for kilo, ``-3`` for milli).
    power : int | Fraction
        Exponent the unit is raised to.
    dimension : Dimensions
        Dimension of the unit at power 1. Determined by ``name``.
    abbr : str
        Unprefixed display symbol (``"m"``).
    """

    name: str
    tens: int = 0
    power: Exponent = 1
    dimension: Dimensions = field(default=NoDims, compare=False)
    abbr: str = field(default="", compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "power", simplify_fraction(self.power))

    def __pow__(self, n: Exponent) -> "Unit":
        return Unit(
            self.name,
            self.tens,
            simplify_fraction(self.power * as_exponent(n)),
            self.dimension,
            self.abbr,
        )

    @property
    def dims(self) -> Dimensions:
        return self.dimension ** self.power

    @property
    def symbol(self) -> str:
        return prefix_symbol(self.tens) + (self.abbr or self.name)

    def __repr__(self) -> str:
        return format_factors([(self.symbol, self.power)])


def _is_scalar(x: object) -> bool:
    return isinstance(x, Number)


class Units(tuple):
    """
    Canonical product of atomic units with a cached composite dimension.

    Invariants: one entry per ``(name, tens)``, sorted primarily by name, no
    zero powers, ``dims`` equal to the product of the entries' dimensions.
    The empty product is the singleton ``NoUnits``.
    """

    # no __slots__: each instance carries its cached ``dims``
    dims: Dimensions

    _identity: ClassVar["Units | None"] = None

    def __new__(cls, factors: Iterable[Unit] = ()) -> "Units":
        if isinstance(factors, Units):
            return factors
        return cls._canonical(list(factors))

    @classmethod
    def _canonical(cls, items: List[Unit]) -> "Units":
        # stable sorts: by power, then tens, then name
        items.sort(key=lambda u: u.power)
        items.sort(key=lambda u: u.tens)
        items.sort(key=lambda u: u.name)

        merged: List[Unit] = []
        for u in items:
            if merged and merged[-1].name == u.name and merged[-1].tens == u.tens:
                last = merged.pop()
                p = simplify_fraction(last.power + u.power)
                merged.append(Unit(last.name, last.tens, p, last.dimension, last.abbr or u.abbr))
            else:
                merged.append(u)
        merged = [u for u in merged if u.power != 0]

        if not merged:
            if cls._identity is None:
                ident = tuple.__new__(cls, ())
                ident.dims = NoDims
                cls._identity = ident
            return cls._identity

        obj = tuple.__new__(cls, merged)
        obj.dims = Dimensions.product(*(u.dims for u in merged))
        return obj

    @classmethod
    def product(cls, *composites: "Units | Unit") -> "Units":
        """Multiply any number of composites (or atomic units) together."""
        items: List[Unit] = []
        for c in composites:
            if isinstance(c, Unit):
                items.append(c)
            else:
                items.extend(c)
        return cls._canonical(items)

    # --- Algebra between units ---
    def __pow__(self, n: Exponent | float, modulo: Any | None = None) -> "Units":
        if modulo is not None:
            raise TypeError("Modulo exponentiation is not supported for Units.")
        n = as_exponent(n)
        if not self:
            return self

        if n == 0:
            return Units._canonical([])
        if n == 1:
            return self
        if n == 2:
            return self * self
        if n == 3:
            return self * self * self
        if n == -1:
            return self.inv()
        if n == -2:
            return (self * self).inv()
        if n == -3:
            return (self * self * self).inv()
        return Units._canonical([u ** n for u in self])

    def inv(self) -> "Units":
        if not self:
            return self
        return Units._canonical([u ** -1 for u in self])

    def sqrt(self) -> "Units":
        return self ** Fraction(1, 2)

    def cbrt(self) -> "Units":
        return self ** Fraction(1, 3)

    # --- Mixed algebra with numbers and quantities ---
    def __mul__(self, other: Any) -> "Units | Quantity":  # type: ignore[override]
        from dimensia.core.quantity import Quantity, quantity_of

        if isinstance(other, (Units, Unit)):
            if not self:
                return Units.product(other)
            if not other:
                return self
            return Units.product(self, other)
        if isinstance(other, Quantity):
            return quantity_of(other.value, self * other.unit)
        if _is_scalar(other):
            return quantity_of(other, self)
        # NotImplemented would fall back to tuple repetition
        raise TypeError(f"cannot multiply Units by {type(other).__name__}")

    def __rmul__(self, other: Any) -> "Quantity":
        from dimensia.core.quantity import quantity_of

        if _is_scalar(other):
            return quantity_of(other, self)
        raise TypeError(f"cannot multiply {type(other).__name__} by Units")

    def __truediv__(self, other: Any) -> "Units | Quantity":
        from dimensia.core.quantity import Quantity, quantity_of

        if isinstance(other, Unit):
            other = Units([other])
        if isinstance(other, Units):
            return self * other.inv()
        if isinstance(other, Quantity):
            return quantity_of(1 / other.value, self / other.unit)
        if _is_scalar(other):
            return quantity_of(1 / other, self)
        return NotImplemented

    def __rtruediv__(self, other: Any) -> "Quantity":
        from dimensia.core.quantity import quantity_of

        if _is_scalar(other):
            return quantity_of(other, self.inv())
        return NotImplemented

    def __add__(self, other: Any) -> "Units":
        raise TypeError("Units cannot be added; attach them to numbers first")

    def __radd__(self, other: Any) -> "Units":
        raise TypeError("Units cannot be added; attach them to numbers first")

    def __call__(self, x: Any) -> Any:
        """Convert ``x`` into these units (``u.m(3 * u.km)``)."""
        from dimensia.core.quantity import convert_to

        return convert_to(self, x)

    # --- Identity ---
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Units):
            return False
        return tuple.__eq__(self, other)

    def __ne__(self, other: object) -> bool:
        return not self.__eq__(other)

    def __hash__(self) -> int:
        return hash((Units, tuple(self)))

    def __reduce__(self) -> tuple:
        return (Units, (tuple(self),))

    @property
    def is_dimensionless(self) -> bool:
        return not self.dims

    def __repr__(self) -> str:
        if not self:
            return "NoUnits"
        return format_factors((u.symbol, u.power) for u in self)

    __str__ = __repr__


NoUnits: Units = Units()


def unit(name: str, abbr: str = "", dimension: Dimensions = NoDims, tens: int = 0) -> Units:
    """Composite holding a single atomic unit at power 1."""
    return Units([Unit(name, tens, 1, dimension, abbr)])


__all__ = ["Unit", "Units", "NoUnits", "unit"]
