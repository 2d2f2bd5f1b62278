import pytest

from arithmetic import FloatArithmetic, OperatorKind
from calculator_engine import CalculatorEngine
from input_adapter import action_for_key


def test_operator_symbols():
    assert OperatorKind("+").symbol == "+"
    assert OperatorKind("-").symbol == "−"
    assert OperatorKind("*").symbol == "×"
    assert OperatorKind("/").symbol == "÷"


def test_unknown_operator():
    with pytest.raises(ValueError):
        OperatorKind("^")


# ── FloatArithmetic ──────────────────────────────────────────────

@pytest.mark.parametrize("text", ["Error", "", "inf", "nan", "abc"])
def test_float_parse_rejects_non_numeric(text):
    with pytest.raises(ValueError):
        FloatArithmetic().parse(text)


def test_float_parse_accepts_trailing_point():
    assert FloatArithmetic().parse("12.") == 12.0


def test_float_division_by_zero():
    with pytest.raises(ZeroDivisionError):
        FloatArithmetic().apply(OperatorKind.DIVIDE, 5.0, 0.0)


def test_float_overflow():
    with pytest.raises(OverflowError):
        FloatArithmetic().apply(OperatorKind.MULTIPLY, 1e300, 1e300)


@pytest.mark.parametrize(
    "value, expected",
    [
        (0.30000000000000004, 0.3),
        (1.23456789049, 1.23456789),
        (1.2345678906, 1.234567891),
        (-1.2345678906, -1.234567891),
        (1e-12, 0.0),
        (1e20, 1e20),
    ],
)
def test_float_round_half_away_from_zero(value, expected):
    assert FloatArithmetic().round(value) == expected


@pytest.mark.parametrize(
    "value, expected",
    [
        (5.0, "5"),
        (2.5, "2.5"),
        (-0.0, "0"),
        (1e21, "1000000000000000000000"),
        (1e-7, "0.0000001"),
        (-42.125, "-42.125"),
    ],
)
def test_float_to_string(value, expected):
    assert FloatArithmetic.to_string(value) == expected


# ── MPMathArithmetic ─────────────────────────────────────────────

@pytest.fixture
def mp_arith():
    pytest.importorskip("mpmath")
    from arbitrary_precision_arithmetic import MPMathArithmetic

    return MPMathArithmetic(working_digits=60)


def test_mpmath_parse_rejects_error(mp_arith):
    with pytest.raises(ValueError):
        mp_arith.parse("Error")


def test_mpmath_division_by_zero(mp_arith):
    with pytest.raises(ZeroDivisionError):
        mp_arith.apply(OperatorKind.DIVIDE, mp_arith.parse("5"), mp_arith.parse("0"))


@pytest.mark.parametrize(
    "keys, expected",
    [
        ("2+3=", "5"),
        ("10/4=", "2.5"),
        ("0.1+0.2=", "0.3"),
        ("1/3=", "0.333333333"),
        ("12345678901234567890+1=", "12345678901234567891"),
        ("50%", "0.5"),
    ],
)
def test_engine_with_mpmath_backend(mp_arith, keys, expected):
    engine = CalculatorEngine(arithmetic=mp_arith)
    for key in keys:
        engine.dispatch(action_for_key(key))
    assert engine.current_operand == expected
