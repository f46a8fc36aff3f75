"""
dimensia.units.registry
=======================

The units registry: the single place where base dimensions, reference units
and derived units are declared.

- Encapsulates unit state in a `UnitsRegistry` class (thread-safe).
- Every unit name maps to an ``(inexact, exact)`` base factor relative to the
  reference unit of its dimension; the conversion engine reads it from here.
- Each base dimension has a promotion unit used when two quantities of the
  same dimension but different units meet (``1 m + 1 ft`` is in meters).
- Normalization handles ASCII fallbacks and Unicode NFC.
- Lazy, safe synthesis of SI-prefixed units (``km``, ``µs``) with
  anti-stacking checks.
- Aliases (e.g., "ohm" → "Ω", "foot" → "ft").
- Registries are populated in an explicit bootstrap step and then frozen;
  any declaration after `freeze` raises `RuntimeError`.

This registry does *not* parse compound expressions (like "m/s^2"); build
those with the unit algebra (``u.m / u.s**2``).
"""
from __future__ import annotations

import logging
import math
import re
import threading
import unicodedata
from fractions import Fraction
from numbers import Number
from typing import ClassVar, Dict, Mapping, Optional, Tuple

from dimensia.core.conversion import Factor, basefactor, units_basefactor
from dimensia.core.dimensions import Dimensions, base_dimension
from dimensia.core.quantity import Quantity
from dimensia.core.unit import NoUnits, Unit, Units
from dimensia.units.prefixes import PREFIX_BY_SYMBOL, PREFIXES

logger = logging.getLogger(__name__)


# Ordered list of prefix symbols by descending length for robust matching
_PREFIX_SYMBOLS_DESC = tuple(sorted((p.symbol for p in PREFIXES), key=len, reverse=True))

# ---------------------------------------------------------------------------
# Normalization
# ---------------------------------------------------------------------------
_OHM_RE = re.compile(r"(?i)ohm")


def normalize_symbol(s: str) -> str:
    """Normalize user-provided unit symbols.

    Rules:
    - Unicode normalize to NFC (composed forms like "µ").
    - Replace ASCII leading 'u' micro (or Greek small mu) with the micro sign
      'µ' **only** at start.
    - Map textual aliases to canonical symbols (e.g. any 'ohm' → 'Ω').
    - Strip surrounding whitespace.
    """
    if not s:
        return s

    s = s.strip()
    s = unicodedata.normalize("NFC", s)

    if s.startswith(("u", "μ")):
        s = "µ" + s[1:]

    s = _OHM_RE.sub("Ω", s)
    return s


# ---------------------------------------------------------------------------
# Units registry
# ---------------------------------------------------------------------------
class UnitsRegistry:
    """Thread-safe registry of dimensions and units with SI prefix synthesis."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._dimensions: Dict[str, Dimensions] = {}
        self._units: Dict[str, Units] = {}
        self._prefixed: Dict[str, Units] = {}
        self._aliases: Dict[str, str] = {}
        self._non_prefixable: set[str] = set()
        self._basefactors: Dict[str, Factor] = {}
        self._promotion: Dict[str, Units] = {}
        self._frozen = False

    def __contains__(self, symbol: str) -> bool:
        return self.has(symbol)

    @property
    def frozen(self) -> bool:
        return self._frozen

    # ------------------------ declarations ---------------------------------
    def dimension(self, name: str, abbr: str = "") -> Dimensions:
        """Declare a base dimension and return it as a composite."""
        with self._lock:
            self._check_open()
            if name in self._dimensions:
                raise ValueError(f"Cannot declare dimension '{name}': it already exists.")
            dim = base_dimension(name, abbr)
            self._dimensions[name] = dim
            logger.debug("declared dimension %s (%s)", name, abbr or name)
            return dim

    def refunit(
        self,
        symbol: str,
        name: str,
        dimension: Dimensions,
        *,
        exact: "int | Fraction" = 1,
        prefixable: bool = True,
    ) -> Units:
        """
        Declare the reference unit of a base dimension.

        ``exact`` is its factor relative to the dimension's reference scale
        (``Fraction(1, 1000)`` for the gram, so that the kilogram is 1). The
        new unit becomes the promotion target of its dimension.
        """
        if len(dimension) != 1 or dimension[0].power != 1:
            raise ValueError(f"Reference unit '{symbol}' needs a base dimension, got {dimension!r}")
        with self._lock:
            units = self._declare(symbol, name, dimension, (1.0, exact), prefixable)
            self._promotion[dimension[0].name] = units
            return units

    def unit(self, symbol: str, name: str, equals: object, *, prefixable: bool = True) -> Units:
        """
        Declare a unit by the quantity it equals (``unit("ft", "foot", 3048/10000 * m)``).

        ``equals`` may be a plain number for dimensionless units.
        """
        if isinstance(equals, Quantity):
            value, ref = equals.value, equals.unit
        elif isinstance(equals, Number):
            value, ref = equals, NoUnits
        else:
            raise TypeError(f"unit '{symbol}' must equal a quantity or number, not {type(equals).__name__}")
        if isinstance(value, Number) and not isinstance(value, (int, Fraction, float)):
            value = float(value)

        with self._lock:
            inexact, exact = units_basefactor(ref, self)
            factor = basefactor(inexact, exact, value, 0, 1)
            return self._declare(symbol, name, ref.dims, factor, prefixable)

    def alias(self, alias: str, canonical: str, replace: bool = False) -> None:
        """Register another spelling of ``canonical``."""
        # 1) normalized form (e.g., 'ohm' -> 'Ω')
        norm_key = normalize_symbol(alias)

        # 2) literal, NFC/trimmed spelling (for discoverability in __dir__)
        literal_key = unicodedata.normalize("NFC", alias.strip())

        # 3) casefolded literal (for case-insensitive alias matching)
        folded_key = literal_key.casefold()

        with self._lock:
            self._check_open()
            reserved = UnitNamespace._reserved_names
            if literal_key in reserved or folded_key in reserved or norm_key in reserved:
                raise ValueError(
                    f"Cannot register alias '{alias}': "
                    "name conflicts with UnitNamespace attribute/method."
                )
            if canonical not in self._units:
                raise ValueError(f"Cannot alias '{alias}' to unknown unit '{canonical}'.")
            if not replace:
                # a key may name the alias target itself, never a different unit
                for key in {literal_key, folded_key, norm_key}:
                    if key in self._units and key != canonical:
                        raise ValueError(
                            f"Cannot register alias '{alias}' (which maps to '{key}'): "
                            f"a unit with the name '{key}' already exists."
                        )

            self._aliases[norm_key] = canonical
            self._aliases[literal_key] = canonical
            self._aliases[folded_key] = canonical

    def preferred(self, spec: "str | Units") -> None:
        """Make ``spec`` the promotion target of its (base) dimension, e.g. ``preferred("kg")``."""
        units = self.get(spec) if isinstance(spec, str) else spec
        dims = units.dims
        if len(units) != 1 or len(dims) != 1 or dims[0].power != 1:
            raise ValueError(f"Preferred unit must be a single unit of a base dimension, got {units!r}")
        with self._lock:
            self._check_open()
            self._promotion[dims[0].name] = units
            logger.debug("promotion for %s is now %r", dims[0].name, units)

    def freeze(self) -> None:
        """Close the registry to further declarations. Lookups keep working."""
        with self._lock:
            self._frozen = True
        logger.debug("registry frozen with %d units", len(self._units))

    # -------------------------- lookups ------------------------------------
    def has(self, symbol: str) -> bool:
        try:
            self.get(symbol)
            return True
        except ValueError:
            return False

    def get(self, symbol: str) -> Units:
        """Lookup a unit by symbol. If missing, try to synthesize via SI prefix.

        Raises `ValueError` if unknown.
        """
        sym = normalize_symbol(symbol)
        with self._lock:
            target = self._aliases.get(sym)
            if target is None:
                target = self._aliases.get(sym.casefold())
            if target is not None:
                sym = target

            u = self._units.get(sym)
            if u is not None:
                return u

            synthesized = self._try_synthesize_prefixed(sym)
            if synthesized is not None:
                return synthesized

        raise ValueError(f"Unknown unit symbol: {symbol}")

    def all(self) -> Mapping[str, Units]:
        with self._lock:
            return dict(self._units)

    def get_dimension(self, name: str) -> Dimensions:
        try:
            return self._dimensions[name]
        except KeyError:
            raise ValueError(f"Unknown dimension: {name}") from None

    def basefactor(self, name: str) -> Factor:
        """``(inexact, exact)`` factor of one unit ``name`` in reference units."""
        try:
            return self._basefactors[name]
        except KeyError:
            raise ValueError(f"No base factor for unit '{name}'") from None

    def promotion(self, dim_name: str) -> Units:
        """Units a quantity of base dimension ``dim_name`` promotes to."""
        try:
            return self._promotion[dim_name]
        except KeyError:
            raise ValueError(f"No promotion unit for dimension '{dim_name}'") from None

    def as_namespace(self) -> UnitNamespace:
        return UnitNamespace(self)

    # ------------------------- internals -----------------------------------
    def _check_open(self) -> None:
        if self._frozen:
            raise RuntimeError("units registry is frozen; declare units before freeze()")

    def _declare(
        self,
        symbol: str,
        name: str,
        dimension: Dimensions,
        factor: Factor,
        prefixable: bool,
    ) -> Units:
        sym = normalize_symbol(symbol)
        self._check_open()
        if sym in UnitNamespace._reserved_names or name in UnitNamespace._reserved_names:
            raise ValueError(
                f"Cannot register unit '{symbol}': "
                "name conflicts with UnitNamespace attribute/method."
            )
        if sym in self._units:
            raise ValueError(f"Cannot register unit '{symbol}': a unit with this name already exists.")
        if sym in self._aliases:
            raise ValueError(f"Cannot register unit '{symbol}': an alias with this name already exists.")
        if name in self._basefactors:
            raise ValueError(f"Cannot register unit '{symbol}': the name '{name}' is taken.")

        units = Units([Unit(name, 0, 1, dimension, sym)])
        self._units[sym] = units
        self._basefactors[name] = factor
        if not prefixable:
            self._non_prefixable.add(sym)
        logger.debug("declared unit %s (%s) = %r, factor %r", sym, name, dimension, factor)
        return units

    def _split_prefix(self, symbol: str) -> Tuple[Optional[str], str]:
        for p in _PREFIX_SYMBOLS_DESC:
            if symbol.startswith(p):
                return p, symbol[len(p):]
        return None, symbol

    def _try_synthesize_prefixed(self, sym: str) -> Optional[Units]:
        cached = self._prefixed.get(sym)
        if cached is not None:
            return cached

        prefix, base_sym = self._split_prefix(sym)
        if prefix is None or not base_sym:
            return None

        # only declared units take a prefix, so stacked prefixes never resolve
        base = self._units.get(base_sym)
        if base is None or base_sym in self._non_prefixable:
            return None

        (atom,) = base
        tens = atom.tens + PREFIX_BY_SYMBOL[prefix].tens
        new_unit = Units([Unit(atom.name, tens, 1, atom.dimension, atom.abbr)])
        self._prefixed[sym] = new_unit
        logger.debug("synthesized %s as 10^%d %s", sym, tens, atom.name)
        return new_unit


class UnitNamespace:
    """Attribute-style access to a registry: ``u.km``, ``u("µs")``, ``"ft" in u``."""

    _reserved_names: ClassVar[set[str]] = set()

    def __init__(self, reg: "UnitsRegistry") -> None:
        self._reg = reg

    def __contains__(self, spec: str) -> bool:
        return self._reg.has(spec)

    def define(self, symbol: str, equals: object, name: str | None = None, prefixable: bool = True) -> Units:
        """Declare a new unit on the underlying registry (fails once it is frozen)."""
        if symbol in UnitNamespace._reserved_names:
            raise ValueError(
                f"Cannot define unit '{symbol}': "
                "name conflicts with UnitNamespace attribute/method."
            )
        return self._reg.unit(symbol, name or symbol, equals, prefixable=prefixable)

    def __call__(self, spec: str) -> Units:
        return self._reg.get(spec)

    def __getattr__(self, name: str) -> Units:
        if name.startswith("__"):
            raise AttributeError(name)
        try:
            return self._reg.get(name)
        except ValueError as e:
            # Unknown symbol should look like a missing attribute
            raise AttributeError(name) from e

    def __dir__(self) -> list[str]:
        """List all available unit symbols for autocomplete."""
        base_dir = set(super().__dir__())
        units = set(self._reg.all().keys())
        aliases = set(self._reg._aliases.keys())
        return sorted(base_dir | units | aliases)


UnitNamespace._reserved_names = set(dir(UnitNamespace))


# ---------------------------------------------------------------------------
# Bootstrap the default registry
# ---------------------------------------------------------------------------

def _bootstrap_default_registry() -> UnitsRegistry:
    reg = UnitsRegistry()

    # Base dimensions
    length = reg.dimension("Length", "𝐋")
    mass = reg.dimension("Mass", "𝐌")
    time = reg.dimension("Time", "𝐓")
    current = reg.dimension("Current", "𝐈")
    temperature = reg.dimension("Temperature", "𝚯")
    amount = reg.dimension("Amount", "𝐍")
    luminosity = reg.dimension("Luminosity", "𝐉")

    # Reference units; the gram is 1/1000 of the kilogram, which is preferred
    m = reg.refunit("m", "meter", length)
    s = reg.refunit("s", "second", time)
    reg.refunit("g", "gram", mass, exact=Fraction(1, 1000))
    A = reg.refunit("A", "ampere", current)
    K = reg.refunit("K", "kelvin", temperature)
    mol = reg.refunit("mol", "mole", amount)
    cd = reg.refunit("cd", "candela", luminosity)
    reg.preferred("kg")
    kg = reg.get("kg")

    # Named, dimensionless
    rad = reg.unit("rad", "radian", 1)
    sr = reg.unit("sr", "steradian", 1)
    reg.unit("%", "percent", Fraction(1, 100), prefixable=False)
    reg.unit("ppm", "permillion", Fraction(1, 10**6), prefixable=False)
    reg.unit("ppb", "perbillion", Fraction(1, 10**9), prefixable=False)
    reg.unit("°", "degree", (math.pi / 180) * rad, prefixable=False)

    # SI derived (symbol, name, definition)
    derived_units = (
        ("Hz",  "hertz",     1 / s),
        ("N",   "newton",    1 * kg * m / s**2),
        ("Pa",  "pascal",    1 * kg / m / s**2),
        ("J",   "joule",     1 * kg * m**2 / s**2),
        ("W",   "watt",      1 * kg * m**2 / s**3),
        ("C",   "coulomb",   1 * A * s),
        ("V",   "volt",      1 * kg * m**2 / s**3 / A),
        ("Ω",   "ohm",       1 * kg * m**2 / s**3 / A**2),
        ("S",   "siemens",   1 * s**3 * A**2 / kg / m**2),
        ("F",   "farad",     1 * s**4 * A**2 / kg / m**2),
        ("Wb",  "weber",     1 * kg * m**2 / s**2 / A),
        ("T",   "tesla",     1 * kg / s**2 / A),
        ("H",   "henry",     1 * kg * m**2 / s**2 / A**2),
        ("lm",  "lumen",     1 * cd * sr),
        ("lx",  "lux",       1 * cd * sr / m**2),
        ("Bq",  "becquerel", 1 / s),
        ("Gy",  "gray",      1 * m**2 / s**2),
        ("Sv",  "sievert",   1 * m**2 / s**2),
        ("kat", "katal",     1 * mol / s),
    )
    for sym, name, equals in derived_units:
        reg.unit(sym, name, equals)

    # Time
    minute = reg.unit("min", "minute", 60 * s, prefixable=False)
    hour = reg.unit("h", "hour", 60 * minute, prefixable=False)
    day = reg.unit("d", "day", 24 * hour, prefixable=False)
    reg.unit("wk", "week", 7 * day, prefixable=False)
    reg.unit("yr", "year", Fraction(36525, 100) * day, prefixable=False)

    # Length, area, volume
    inch = reg.unit("inch", "inch", Fraction(254, 10000) * m, prefixable=False)
    ft = reg.unit("ft", "foot", 12 * inch, prefixable=False)
    reg.unit("yd", "yard", 3 * ft, prefixable=False)
    reg.unit("mi", "mile", 1760 * 3 * ft, prefixable=False)
    reg.unit("Å", "angstrom", Fraction(1, 10**10) * m, prefixable=False)
    reg.unit("ha", "hectare", 10**4 * m**2, prefixable=False)
    reg.unit("L", "liter", Fraction(1, 1000) * m**3)

    # Mass, force, pressure
    lb = reg.unit("lb", "pound", Fraction(45359237, 10**8) * kg, prefixable=False)
    reg.unit("oz", "ounce", Fraction(1, 16) * lb, prefixable=False)
    gn = reg.unit("gn", "standard_gravity", Fraction(980665, 100000) * m / s**2, prefixable=False)
    lbf = reg.unit("lbf", "pound_force", 1 * lb * gn, prefixable=False)
    reg.unit("psi", "pound_per_square_inch", 1 * lbf / inch**2, prefixable=False)
    pa = reg.get("Pa")
    reg.unit("bar", "bar", 100000 * pa)
    reg.unit("atm", "atmosphere", 101325 * pa, prefixable=False)

    # Energy, temperature intervals
    J = reg.get("J")
    reg.unit("eV", "electronvolt", 1.602176634e-19 * J)
    reg.unit("cal", "calorie", Fraction(4184, 1000) * J)
    reg.unit("Wh", "watthour", 3600 * J)
    reg.unit("Ra", "rankine", Fraction(5, 9) * K, prefixable=False)

    # Aliases
    for alias, canonical in (
        ("ohm", "Ω"), ("Ohm", "Ω"), ("OHM", "Ω"),
        ("meter", "m"), ("metre", "m"), ("second", "s"), ("gram", "g"),
        ("percent", "%"), ("deg", "°"), ("degree", "°"),
        ("minute", "min"), ("hr", "h"), ("hour", "h"), ("day", "d"),
        ("week", "wk"), ("year", "yr"),
        ("inches", "inch"), ("foot", "ft"), ("feet", "ft"), ("yard", "yd"), ("mile", "mi"),
        ("angstrom", "Å"), ("liter", "L"), ("litre", "L"),
        ("pound", "lb"), ("ounce", "oz"),
    ):
        reg.alias(alias, canonical)

    reg.freeze()
    return reg


# Public, shared default registry
DEFAULT_REGISTRY: UnitsRegistry = _bootstrap_default_registry()


__all__ = [
    "UnitsRegistry",
    "UnitNamespace",
    "normalize_symbol",
    "DEFAULT_REGISTRY",
]
