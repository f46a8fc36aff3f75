# dimensia.units.prefixes

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple


@dataclass(frozen=True, slots=True)
class Prefix:
    """An SI prefix: a symbol standing for a power of ten."""

    name: str
    symbol: str
    tens: int


PREFIXES: Tuple[Prefix, ...] = (
    Prefix("quetta", "Q", 30),
    Prefix("ronna", "R", 27),
    Prefix("yotta", "Y", 24),
    Prefix("zetta", "Z", 21),
    Prefix("exa", "E", 18),
    Prefix("peta", "P", 15),
    Prefix("tera", "T", 12),
    Prefix("giga", "G", 9),
    Prefix("mega", "M", 6),
    Prefix("kilo", "k", 3),
    Prefix("hecto", "h", 2),
    Prefix("deca", "da", 1),
    Prefix("deci", "d", -1),
    Prefix("centi", "c", -2),
    Prefix("milli", "m", -3),
    Prefix("micro", "µ", -6),
    Prefix("nano", "n", -9),
    Prefix("pico", "p", -12),
    Prefix("femto", "f", -15),
    Prefix("atto", "a", -18),
    Prefix("zepto", "z", -21),
    Prefix("yocto", "y", -24),
    Prefix("ronto", "r", -27),
    Prefix("quecto", "q", -30),
)

PREFIX_BY_SYMBOL: Dict[str, Prefix] = {p.symbol: p for p in PREFIXES}
PREFIX_BY_TENS: Dict[int, Prefix] = {p.tens: p for p in PREFIXES}


def prefix_symbol(tens: int) -> str:
    """Symbol for ``10**tens`` (``''`` for 0, ``'(10^n)'`` when no prefix exists)."""
    if tens == 0:
        return ""
    p = PREFIX_BY_TENS.get(tens)
    if p is None:
        return f"(10^{tens})"
    return p.symbol


__all__ = ["Prefix", "PREFIXES", "PREFIX_BY_SYMBOL", "PREFIX_BY_TENS", "prefix_symbol"]
