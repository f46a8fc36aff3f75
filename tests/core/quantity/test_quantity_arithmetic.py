import math
from fractions import Fraction

import pytest

from dimensia import u
from dimensia.core.exceptions import DimensionError
from dimensia.core.quantity import DimensionlessQuantity, Quantity


# -------------------------------
# Addition and subtraction
# -------------------------------

def test_add_same_units_keeps_unit():
    s = 1 * u.m + 2 * u.m
    assert s.value == 3
    assert s.unit == u.m


def test_add_promotes_mixed_units_exactly():
    s = 1 * u.m + 1 * u.ft
    assert s.unit == u.m
    assert s.value == Fraction(1631, 1250)


def test_add_prefixed_units_promotes_to_reference():
    s = 1 * u.km + 1 * u.m
    assert s.unit == u.m
    assert s.value == 1001


def test_sub_promotes():
    d = 1 * u.km - 500 * u.m
    assert d == 500 * u.m


@pytest.mark.parametrize("a, b", [
    (1 * u.m, 1 * u.kg),
    (1 * u.m, 1 * u.s),
    (1 * u.m, 1),
    (1, 1 * u.m),
])
def test_add_dimension_mismatch_raises(a, b):
    with pytest.raises(DimensionError):
        _ = a + b
    with pytest.raises(DimensionError):
        _ = a - b


def test_dimension_error_is_type_error():
    with pytest.raises(TypeError):
        _ = 1 * u.m + 1 * u.kg


def test_dimensionless_quantities_mix_with_numbers():
    assert 50 * u.percent + 1 == Fraction(3, 2)
    assert 1 - 50 * u.percent == Fraction(1, 2)
    assert isinstance(50 * u.percent + 1, Fraction)


def test_add_unsupported_type():
    with pytest.raises(TypeError):
        _ = 1 * u.m + "1 m"


def test_unary_ops():
    q = 2 * u.m
    assert (-q).value == -2 and (-q).unit == u.m
    assert (+q) == q
    assert abs(-3 * u.s) == 3 * u.s


# -------------------------------
# Multiplication and division
# -------------------------------

def test_quantity_times_quantity():
    q = (2 * u.m) * (3 * u.s)
    assert q.value == 6
    assert q.unit == u.m * u.s


def test_quantity_div_quantity():
    q = (6 * u.m) / (2 * u.s)
    assert q.value == 3.0
    assert q.unit == u.m / u.s


def test_same_units_cancel_to_plain_number():
    r = (2 * u.m) / (4 * u.m)
    assert r == 0.5
    assert not isinstance(r, Quantity)


def test_prefixed_ratio_is_dimensionless_quantity():
    r = (1 * u.km) / (1 * u.m)
    assert isinstance(r, DimensionlessQuantity)
    assert r.to_number() == 1000.0


def test_quantity_times_units_and_scalars():
    q = 3 * u.m * u.s
    assert q.unit == u.m * u.s
    assert (2 * u.m * 3).value == 6
    assert (2 * u.m / 4).value == 0.5
    assert (6 * u.m / u.s).unit == u.m / u.s


def test_scalar_over_quantity_inverts_unit():
    q = 1 / (2 * u.s)
    assert q.value == 0.5
    assert q.unit == u.s ** -1


def test_multiplication_associates_up_to_canonical_form():
    a, b, c = 2 * u.kg, 3 * u.m, 4 / u.s ** 2
    assert ((a * b) * c).unit == (a * (b * c)).unit
    assert ((a * b) * c).value == (a * (b * c)).value == 24
    assert ((a * b) * c).unit == u.kg * u.m / u.s ** 2


# -------------------------------
# Powers
# -------------------------------

def test_integer_power():
    q = (2 * u.m) ** 2
    assert q.value == 4
    assert q.unit == u.m ** 2
    assert ((2 * u.m) ** -1).unit == u.m.inv()
    assert (2 * u.m) ** 0 == 1


def test_float_power_is_rationalized_for_the_unit():
    q = (4 * u.m ** 2) ** 0.5
    assert q.value == 2.0
    assert q.unit == u.m


@pytest.mark.regression(reason="real exponents are always legal")
def test_real_power_keeps_float_exponent_exactly():
    q = (2.0 * u.m) ** math.pi
    assert q.value == pytest.approx(2.0 ** math.pi)
    assert q.unit == u.m ** Fraction(math.pi)
    tiny = (2.0 * u.m) ** 1e-5
    assert tiny.unit == u.m ** Fraction(1e-5)
    assert tiny.dim == u.m.dims ** Fraction(1e-5)


def test_fractional_power():
    q = (9 * u.m) ** Fraction(1, 2)
    assert q.value == pytest.approx(3.0)
    assert q.unit == u.m ** Fraction(1, 2)


def test_dimensionless_quantity_as_exponent():
    q = (2 * u.m) ** (200 * u.percent)
    assert q.value == 4
    assert q.unit == u.m ** 2
    assert 2 ** (200 * u.percent) == 4


def test_dimensional_exponent_raises():
    with pytest.raises(DimensionError):
        _ = (2 * u.m) ** (2 * u.m)
    with pytest.raises(DimensionError):
        _ = 2 ** (3 * u.m)


def test_modulo_pow_rejected():
    with pytest.raises(TypeError):
        pow(2 * u.m, 2, 3)


# -------------------------------
# Integer division and remainder
# -------------------------------

def test_floordiv_same_units_is_plain():
    assert (7 * u.m) // (2 * u.m) == 3


def test_floordiv_converts_into_divisor_unit():
    assert (1 * u.km) // (300 * u.m) == 3


def test_floordiv_by_number_keeps_unit():
    q = (7 * u.m) // 2
    assert q.value == 3
    assert q.unit == u.m


def test_mod_result_in_divisor_unit():
    r = (1 * u.km) % (300 * u.m)
    assert r.value == 100
    assert r.unit == u.m


def test_divmod():
    assert divmod(7 * u.m, 2 * u.m) == (3, 1 * u.m)


@pytest.mark.regression(reason="divmod by a plain number must agree with // and %")
def test_divmod_by_plain_number_keeps_unit():
    q = 7 * u.m
    assert divmod(q, 2) == (q // 2, q % 2) == (3 * u.m, 1 * u.m)
    assert (q % 2).unit == u.m
    assert (-7.5 * u.m) % 2 == 0.5 * u.m


def test_dimensionless_divmod_by_plain_number_is_plain():
    assert divmod(150 * u.percent, 1) == (1, Fraction(1, 2))


def test_floordiv_mismatch_raises():
    with pytest.raises(DimensionError):
        _ = (1 * u.m) // (1 * u.s)


# -------------------------------
# Rounding and truthiness
# -------------------------------

def test_rounding_keeps_unit():
    assert round(2.567 * u.m, 2) == 2.57 * u.m
    assert round(2.5 * u.m).unit == u.m
    assert math.floor(2.7 * u.m) == 2 * u.m
    assert math.ceil(2.1 * u.m) == 3 * u.m
    assert math.trunc(-2.7 * u.m) == -2 * u.m


def test_bool_follows_value():
    assert bool(1 * u.m)
    assert not bool(0 * u.m)
