# pytest tests for dimensia.core.functions

import math
from decimal import Decimal
from fractions import Fraction

import pytest

from dimensia import u
from dimensia.core.dimensions import LENGTH
from dimensia.core.exceptions import DimensionError
from dimensia.core.functions import (
    abs2,
    atan2,
    cbrt,
    ceil,
    cis,
    cld,
    conj,
    copysign,
    cos,
    cot,
    csc,
    div,
    exp,
    fld,
    flipsign,
    floor,
    fma,
    frexp,
    imag,
    isapprox,
    isapprox_all,
    isfinite,
    isinf,
    isinteger,
    isless,
    isnan,
    isreal,
    log,
    log10,
    mod,
    muladd,
    nextfloat,
    one,
    prevfloat,
    qmax,
    qmin,
    real,
    rem,
    sec,
    sign,
    signbit,
    sin,
    sqrt,
    tan,
    to_float,
    trunc,
    zero,
)
from dimensia.core.quantity import strip_unit


# -------------------------------
# Roots
# -------------------------------

def test_sqrt_of_units_and_quantities():
    assert sqrt(u.m ** 2) == u.m
    assert sqrt(LENGTH ** 2) == LENGTH
    q = sqrt(4 * u.m ** 2)
    assert q.unit == u.m
    assert q.value == 2.0
    assert sqrt(9) == 3.0
    assert sqrt(-4 + 0j) == 2j


def test_cbrt():
    assert cbrt(u.s ** 3) == u.s
    q = cbrt(27 * u.m ** 3)
    assert q.unit == u.m
    assert strip_unit(q) == pytest.approx(3.0)
    assert cbrt(-8) == pytest.approx(-2.0)


# -------------------------------
# Dimensionless-only functions
# -------------------------------

def test_trig_on_angles():
    assert sin(30 * u.deg) == pytest.approx(0.5)
    assert cos(60 * u.deg) == pytest.approx(0.5)
    assert tan(45 * u.deg) == pytest.approx(1.0)
    assert sin(math.pi / 2 * u.rad) == pytest.approx(1.0)


def test_reciprocal_trig_poles_are_infinite():
    assert cot(0) == math.inf
    assert cot(-0.0 * u.rad) == -math.inf
    assert csc(0 * u.deg) == math.inf
    assert sec(60 * u.deg) == pytest.approx(2.0)
    assert cot(45 * u.deg) == pytest.approx(1.0)


def test_exp_and_log():
    assert exp(0) == 1.0
    assert log(100 * u.percent) == 0.0
    assert log10(1000) == pytest.approx(3.0)
    assert exp(1j * math.pi) == pytest.approx(-1 + 0j)


def test_cis():
    assert cis(0) == 1 + 0j
    assert cis(180 * u.deg) == pytest.approx(-1 + 0j)


@pytest.mark.parametrize("fn", [sin, cos, tan, exp, log, log10, cis])
def test_dimensional_argument_raises(fn):
    with pytest.raises(DimensionError):
        fn(1 * u.m)


def test_non_numeric_argument_raises_type_error():
    with pytest.raises(TypeError):
        sin("1")


def test_atan2_promotes():
    assert atan2(1 * u.m, 1 * u.m) == pytest.approx(math.pi / 4)
    assert atan2(1 * u.ft, 304.8 * u.mm) == pytest.approx(math.pi / 4)
    with pytest.raises(DimensionError):
        atan2(1 * u.m, 1 * u.s)


# -------------------------------
# Division family
# -------------------------------

@pytest.mark.parametrize("x, y, d, f, c", [
    (7, 2, 3, 3, 4),
    (-7, 2, -3, -4, -3),
    (7, -2, -3, -4, -3),
    (6, 2, 3, 3, 3),
])
def test_integer_division_rounding(x, y, d, f, c):
    assert div(x * u.m, y * u.m) == d
    assert fld(x * u.m, y * u.m) == f
    assert cld(x * u.m, y * u.m) == c


def test_division_converts_into_divisor_unit():
    assert div(1 * u.km, 300 * u.m) == 3
    assert cld(1 * u.km, 300 * u.m) == 4


def test_division_by_plain_number_keeps_unit():
    assert div(7 * u.m, 2) == 3 * u.m
    assert fld(-7 * u.m, 2) == -4 * u.m
    assert cld(7 * u.m, 2) == 4 * u.m


def test_rem_and_mod_signs():
    assert rem(-7 * u.m, 2 * u.m) == -1 * u.m
    assert mod(-7 * u.m, 2 * u.m) == 1 * u.m
    assert rem(5.5 * u.m, 2 * u.m) == 1.5 * u.m
    assert rem(-5.5 * u.m, 2 * u.m) == -1.5 * u.m


def test_rem_and_mod_by_plain_number_keep_unit():
    assert mod(-7 * u.m, 2) == 1 * u.m
    assert rem(-7 * u.m, 2) == -1 * u.m
    assert rem(-5.5 * u.m, 2).unit == u.m
    assert rem(250 * u.percent, 1) == Fraction(1, 2)


def test_mod_result_unit_is_divisor_unit():
    r = mod(1 * u.km, 300 * u.m)
    assert r.unit == u.m
    assert r.value == 100


def test_division_mismatch_raises():
    for fn in (div, fld, cld, mod, rem):
        with pytest.raises(DimensionError):
            fn(1 * u.m, 1 * u.s)


# -------------------------------
# min / max
# -------------------------------

def test_qmin_returns_original_operand():
    a, b = 1000 * u.mm, 2 * u.m
    assert qmin(a, b) is a
    assert qmax(a, b) is b
    assert qmin(a, b).unit == u.mm


def test_qmin_qmax_variadic():
    a, b, c = 3 * u.m, 1 * u.m, 2 * u.m
    assert qmin(a, b, c) is b
    assert qmax(a, b, c) is a


def test_qmin_tie_returns_second():
    a, b = 1 * u.m, 1000 * u.mm
    assert qmin(a, b) is b
    assert qmax(a, b) is b


def test_qmin_mismatch_raises():
    with pytest.raises(DimensionError):
        qmin(1 * u.m, 1 * u.s)
    with pytest.raises(DimensionError):
        qmax(1 * u.m, 1 * u.s)


def test_qmin_plain_numbers():
    assert qmin(3, 2) == 2
    assert qmax(50 * u.percent, 1) == 1


# -------------------------------
# Unit-preserving helpers
# -------------------------------

def test_rounding_helpers():
    assert floor(2.7 * u.m) == 2 * u.m
    assert ceil(2.1 * u.m) == 3 * u.m
    assert trunc(-2.7 * u.m) == -2 * u.m
    assert floor(2.7) == 2


def test_zero_and_one():
    z = zero(3 * u.m)
    assert z.value == 0 and z.unit == u.m
    assert isinstance(zero(3.5 * u.m).value, float)
    o = one(3 * u.m)
    assert o == 1 and isinstance(o, int)


def test_complex_parts():
    q = (1 + 2j) * u.m
    assert real(q) == 1.0 * u.m
    assert imag(q) == 2.0 * u.m
    assert conj(q) == (1 - 2j) * u.m


def test_to_float_and_neighbours():
    assert isinstance(to_float(3 * u.m).value, float)
    assert nextfloat(1.0 * u.m).value > 1.0
    assert prevfloat(1.0 * u.m).value < 1.0
    assert nextfloat(1.0 * u.m).unit == u.m
    with pytest.raises(TypeError):
        nextfloat(1 * u.m)


def test_frexp():
    assert frexp(8.0 * u.m) == (0.5 * u.m, 4)
    assert frexp(8.0) == (0.5, 4)


def test_copysign_and_flipsign():
    assert copysign(2 * u.m, -1) == -2 * u.m
    assert copysign(-2.0 * u.m, 1.0 * u.s) == 2.0 * u.m
    assert flipsign(2 * u.m, -5) == -2 * u.m
    assert flipsign(2 * u.m, 5) == 2 * u.m


def test_abs2_squares_the_unit():
    q = abs2(-3 * u.m)
    assert q.value == 9
    assert q.unit == u.m ** 2
    assert abs2((3 + 4j) * u.m).value == pytest.approx(25.0)


# -------------------------------
# Predicates
# -------------------------------

def test_sign_and_signbit():
    assert sign(-3 * u.m) == -1
    assert sign(0 * u.m) == 0
    assert sign(2.5 * u.m) == 1.0
    assert signbit(-0.0 * u.m)
    assert not signbit(0.0 * u.m)


def test_value_predicates():
    assert isinteger(3 * u.m)
    assert isinteger(3.0 * u.m)
    assert isinteger(Fraction(4, 2) * u.m)
    assert not isinteger(2.5 * u.m)
    assert isreal(3 * u.m)
    assert not isreal((1 + 2j) * u.m)
    assert isfinite(1 * u.m)
    assert isinf(math.inf * u.m)
    assert isnan(math.nan * u.m)
    assert not isnan(1.0 * u.m)


def test_isless_orders_nan_last():
    assert isless(1 * u.m, 2 * u.m)
    assert isless(1 * u.m, math.nan * u.m)
    assert not isless(math.nan * u.m, 1 * u.m)
    with pytest.raises(DimensionError):
        isless(1 * u.m, 1 * u.s)


# -------------------------------
# Fused multiply-add
# -------------------------------

def test_fma_same_units():
    r = fma(2 * u.m, 3 * u.m, 4 * u.m ** 2)
    assert r.value == 10
    assert r.unit == u.m ** 2


def test_fma_promotes_mixed_units():
    r = fma(2 * u.m, 3 * u.m, 10000 * u.cm ** 2)
    assert r.unit == u.m ** 2
    assert r.value == 7


def test_fma_mismatch_raises():
    with pytest.raises(DimensionError):
        fma(1 * u.m, 1 * u.m, 1 * u.s)


def test_muladd_is_fma():
    assert muladd is fma
    assert muladd(2, 3, 4) == 10


# -------------------------------
# Approximate equality
# -------------------------------

def test_isapprox_converts_units():
    assert isapprox(1 * u.m, 1000.0000001 * u.mm)
    assert not isapprox(1 * u.m, 1.1 * u.m)


def test_isapprox_with_quantity_atol():
    assert isapprox(1 * u.m, 1.05 * u.m, atol=10 * u.cm)
    assert not isapprox(1 * u.m, 1.05 * u.m, atol=1 * u.cm)


def test_isapprox_rtol():
    assert isapprox(100 * u.m, 101 * u.m, rtol=0.02)


def test_decimal_values_in_qmin_and_isapprox():
    a, b = Decimal("1000") * u.mm, Decimal("2") * u.m
    assert qmin(a, b) is a
    assert isapprox(Decimal("1") * u.m, Decimal("1000.0000001") * u.mm)
    assert not isapprox(Decimal("1") * u.m, Decimal("1.1") * u.m)


def test_isapprox_exact_values_default_to_zero_rtol():
    big = 10 ** 12
    assert not isapprox(big * u.m, (big + 1) * u.m)
    assert not isapprox(Fraction(big) * u.km, (big * 1000 + 1) * u.m)
    assert isapprox(float(big) * u.m, float(big + 1) * u.m)
    assert isapprox(1 * u.km, 1000 * u.m)
    assert not isapprox_all([big * u.m], [(big + 1) * u.m])


def test_isapprox_dimensionless_vs_number():
    assert isapprox(0.5, 50 * u.percent)


def test_isapprox_mismatch_raises():
    with pytest.raises(DimensionError):
        isapprox(1 * u.m, 1 * u.s)


def test_isapprox_all():
    xs = [1 * u.m, 2 * u.m]
    ys = [1000 * u.mm, 2000.0000001 * u.mm]
    assert isapprox_all(xs, ys)
    assert not isapprox_all(xs, [1 * u.m, 3 * u.m])


def test_isapprox_all_length_or_dimension_mismatch_is_false():
    assert not isapprox_all([1 * u.m], [1 * u.m, 2 * u.m])
    assert not isapprox_all([1 * u.m], [1 * u.s])
    assert isapprox_all([], [])


def test_isapprox_all_falls_back_for_non_finite_norm():
    xs = [math.inf * u.m, 1 * u.m]
    assert isapprox_all(xs, [math.inf * u.m, 1 * u.m])
    assert not isapprox_all(xs, [math.inf * u.m, 2 * u.m])
