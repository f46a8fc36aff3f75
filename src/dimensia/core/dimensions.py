# dimensia.core.dimensions

from __future__ import annotations

from dataclasses import dataclass, field
from fractions import Fraction
from typing import Any, ClassVar, Iterable, List, Union

from dimensia.core.utils import Exponent, as_exponent, format_factors, simplify_fraction

DimLike = Union["Dimension", "Dimensions"]


@dataclass(frozen=True, slots=True, order=True)
class Dimension:
    """
    An atomic physical dimension raised to a rational power, e.g. Length².

    Equality and ordering use ``(name, power)``; ``abbr`` is display only.
    """

    name: str
    power: Exponent = 1
    abbr: str = field(default="", compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "power", simplify_fraction(self.power))

    def __pow__(self, n: Exponent) -> "Dimension":
        return Dimension(self.name, simplify_fraction(self.power * as_exponent(n)), self.abbr)

    @property
    def symbol(self) -> str:
        return self.abbr or self.name

    def __repr__(self) -> str:
        return format_factors([(self.symbol, self.power)])


class Dimensions(tuple):
    """
    Canonical product of atomic dimensions.

    Tuple subclass, so instances are hashable and usable as dict keys. Every
    instance is normalized on construction: one entry per name, sorted by
    name, no zero powers. The empty product is the singleton ``NoDims``.
    """

    __slots__ = ()

    _identity: ClassVar["Dimensions | None"] = None

    def __new__(cls, factors: Iterable[Dimension] = ()) -> "Dimensions":
        if isinstance(factors, Dimensions):
            return factors
        return cls._canonical(list(factors))

    @classmethod
    def _canonical(cls, items: List[Dimension]) -> "Dimensions":
        # stable sorts: by power, then by name
        items.sort(key=lambda d: d.power)
        items.sort(key=lambda d: d.name)

        merged: List[Dimension] = []
        for d in items:
            if merged and merged[-1].name == d.name:
                last = merged.pop()
                p = simplify_fraction(last.power + d.power)
                merged.append(Dimension(last.name, p, last.abbr or d.abbr))
            else:
                merged.append(d)
        merged = [d for d in merged if d.power != 0]

        if not merged:
            if cls._identity is None:
                cls._identity = tuple.__new__(cls, ())
            return cls._identity
        return tuple.__new__(cls, merged)

    @classmethod
    def product(cls, *composites: DimLike) -> "Dimensions":
        """Multiply any number of composites (or atomic dimensions) together."""
        items: List[Dimension] = []
        for c in composites:
            if isinstance(c, Dimension):
                items.append(c)
            else:
                items.extend(c)
        return cls._canonical(items)

    # --- Algebra (operator overloads) ---
    def __mul__(self, other: Any) -> "Dimensions":  # type: ignore[override]
        if not isinstance(other, (Dimensions, Dimension)):
            # NotImplemented would fall back to tuple repetition
            raise TypeError(f"cannot multiply Dimensions by {type(other).__name__}")
        if not self:
            return Dimensions.product(other)
        if not other:
            return self
        return Dimensions.product(self, other)

    def __truediv__(self, other: Any) -> "Dimensions":
        if isinstance(other, Dimension):
            other = Dimensions([other])
        if not isinstance(other, Dimensions):
            return NotImplemented
        return self * other.inv()

    def __pow__(self, n: Exponent | float, modulo: Any | None = None) -> "Dimensions":
        # Python may call __pow__ with a third arg (modulo); reject it explicitly
        if modulo is not None:
            raise TypeError("Modulo exponentiation is not supported for Dimensions.")
        n = as_exponent(n)
        if not self:
            return self

        if n == 0:
            return Dimensions._canonical([])
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
        return Dimensions._canonical([d ** n for d in self])

    def inv(self) -> "Dimensions":
        if not self:
            return self
        return Dimensions._canonical([d ** -1 for d in self])

    def sqrt(self) -> "Dimensions":
        return self ** Fraction(1, 2)

    def cbrt(self) -> "Dimensions":
        return self ** Fraction(1, 3)

    def __rmul__(self, other: Any) -> "Dimensions":
        """Prevent (int * Dimensions) from falling back to tuple repetition."""
        raise TypeError(f"cannot multiply {type(other).__name__} by Dimensions")

    def __add__(self, other: Any) -> "Dimensions":
        """Block tuple concatenation (e.g., LENGTH + MASS)."""
        raise TypeError("Dimensions cannot be added; multiply them instead")

    def __radd__(self, other: Any) -> "Dimensions":
        raise TypeError("Dimensions cannot be added; multiply them instead")

    # --- Identity ---
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Dimensions):
            return False
        return tuple.__eq__(self, other)

    def __ne__(self, other: object) -> bool:
        return not self.__eq__(other)

    def __hash__(self) -> int:
        return hash((Dimensions, tuple(self)))

    # --- Helpers ---
    @property
    def is_dimensionless(self) -> bool:
        return not self

    def __repr__(self) -> str:
        if not self:
            return "NoDims"
        return format_factors((d.symbol, d.power) for d in self)

    __str__ = __repr__


NoDims: Dimensions = Dimensions()


def base_dimension(name: str, abbr: str = "") -> Dimensions:
    """Composite holding a single base dimension at power 1."""
    return Dimensions([Dimension(name, 1, abbr)])


# --- Public constants --------------------------------------------------------

LENGTH: Dimensions = base_dimension("Length", "𝐋")
MASS: Dimensions = base_dimension("Mass", "𝐌")
TIME: Dimensions = base_dimension("Time", "𝐓")
CURRENT: Dimensions = base_dimension("Current", "𝐈")
TEMPERATURE: Dimensions = base_dimension("Temperature", "𝚯")
AMOUNT: Dimensions = base_dimension("Amount", "𝐍")
LUMINOSITY: Dimensions = base_dimension("Luminosity", "𝐉")


__all__ = [
    "Dimension",
    "Dimensions",
    "NoDims",
    "base_dimension",
    "LENGTH",
    "MASS",
    "TIME",
    "CURRENT",
    "TEMPERATURE",
    "AMOUNT",
    "LUMINOSITY",
]
