# pytest tests for dimensia.units.registry.UnitNamespace

from fractions import Fraction

import pytest

from dimensia.core.conversion import convfact
from dimensia.core.dimensions import LENGTH
from dimensia.units.registry import UnitNamespace


@pytest.fixture()
def ns(reg):
    """A UnitNamespace over an isolated, unfrozen registry."""
    length = reg.dimension("Length")
    reg.refunit("m", "meter", length)
    return reg.as_namespace()


def test_as_namespace_wraps_registry(reg):
    ns = reg.as_namespace()
    assert isinstance(ns, UnitNamespace)
    assert ns._reg is reg


def test_attribute_and_call_access(ns):
    assert ns.m == ns("m")
    assert ns.km == ns("km")
    assert ns.km.dims == LENGTH


def test_contains(ns):
    assert "m" in ns
    assert "km" in ns
    assert "kkm" not in ns
    assert "s" not in ns


def test_missing_symbol_is_attribute_error(ns):
    with pytest.raises(AttributeError):
        _ = ns.parsec
    assert not hasattr(ns, "parsec")


def test_missing_symbol_call_is_value_error(ns):
    with pytest.raises(ValueError):
        ns("parsec")


def test_dunder_lookups_do_not_hit_registry(ns):
    with pytest.raises(AttributeError):
        _ = ns.__wrapped__


def test_define_declares_on_registry(ns):
    furlong = ns.define("fur", Fraction(201168, 1000) * ns.m, name="furlong", prefixable=False)
    assert ns.fur == furlong
    assert convfact(ns.m, ns.fur, ns._reg) == Fraction(201168, 1000)
    assert "kfur" not in ns


def test_define_reserved_name_rejected(ns):
    with pytest.raises(ValueError):
        ns.define("define", 1 * ns.m)


def test_define_on_frozen_default_namespace():
    from dimensia import u

    with pytest.raises(RuntimeError):
        u.define("smoot", Fraction(1702, 1000) * u.m)


def test_dir_lists_units_and_aliases(ns, reg):
    reg.alias("meter", "m")
    listing = dir(ns)
    assert "m" in listing
    assert "meter" in listing
    assert "define" in listing
