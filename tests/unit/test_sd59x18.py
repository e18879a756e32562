"""Tests for the signed SD59x18 operation set."""

import pytest

from prbmath.constants import (
    E,
    EXP2_INPUT_LIMIT,
    EXP2_MIN_INPUT,
    EXP_INPUT_LIMIT,
    EXP_MIN_INPUT,
    MAX_SD59x18,
    MAX_WHOLE_SD59x18,
    MIN_SD59x18,
    MIN_WHOLE_SD59x18,
    PI,
    SCALE,
)
from prbmath.errors import (
    ErrorKind,
    FixedPointDivisionByZeroError,
    FixedPointDomainError,
    FixedPointError,
    FixedPointOverflowError,
)
from prbmath.functions import sd59x18 as sd

SQRT_2 = 1_414213562373095048


class TestInputValidation:
    """Raw inputs must be int256 values."""

    def test_rejects_non_int(self):
        """Floats and strings are rejected."""
        with pytest.raises(TypeError):
            sd.ceil(1.5)  # type: ignore[arg-type]
        with pytest.raises(TypeError):
            sd.ceil("1")  # type: ignore[arg-type]

    def test_rejects_out_of_range(self):
        """Values outside int256 are rejected."""
        with pytest.raises(ValueError, match="out of range"):
            sd.ceil(MAX_SD59x18 + 1)
        with pytest.raises(ValueError, match="out of range"):
            sd.avg(0, MIN_SD59x18 - 1)


class TestAvg:
    """Tests for avg()."""

    def test_whole_values(self):
        """avg(1, 2) = 1.5."""
        assert sd.avg(SCALE, 2 * SCALE) == 1_500000000000000000

    def test_truncates_toward_zero(self):
        """Half units are dropped toward zero for both signs."""
        assert sd.avg(1, 2) == 1
        assert sd.avg(-1, -2) == -1

    def test_extremes(self):
        """Averaging the bounds does not overflow."""
        assert sd.avg(MAX_SD59x18, MAX_SD59x18) == MAX_SD59x18
        assert sd.avg(MIN_SD59x18, MAX_SD59x18) == 0


class TestCeil:
    """Tests for ceil()."""

    def test_positive_fraction(self):
        """ceil(1.5) = 2."""
        assert sd.ceil(1_500000000000000000) == 2 * SCALE

    def test_negative_fraction(self):
        """ceil(-1.5) = -1."""
        assert sd.ceil(-1_500000000000000000) == -SCALE

    def test_whole_value_unchanged(self):
        """Whole values are already their own ceiling."""
        assert sd.ceil(7 * SCALE) == 7 * SCALE

    def test_max_whole(self):
        """ceil(MAX_WHOLE) = MAX_WHOLE."""
        assert sd.ceil(MAX_WHOLE_SD59x18) == MAX_WHOLE_SD59x18

    def test_above_max_whole_overflows(self):
        """One unit above MAX_WHOLE cannot be rounded up."""
        with pytest.raises(FixedPointOverflowError) as exc_info:
            sd.ceil(MAX_WHOLE_SD59x18 + 1)
        assert exc_info.value.kind is ErrorKind.SD_CEIL_OVERFLOW
        assert exc_info.value.operands == {"x": MAX_WHOLE_SD59x18 + 1}

    def test_min_value(self):
        """The most negative value rounds up to MIN_WHOLE."""
        assert sd.ceil(MIN_SD59x18) == MIN_WHOLE_SD59x18


class TestFloor:
    """Tests for floor()."""

    def test_positive_fraction(self):
        """floor(1.5) = 1."""
        assert sd.floor(1_500000000000000000) == SCALE

    def test_negative_fraction(self):
        """floor(-1.5) = -2."""
        assert sd.floor(-1_500000000000000000) == -2 * SCALE

    def test_min_whole(self):
        """floor(MIN_WHOLE) = MIN_WHOLE."""
        assert sd.floor(MIN_WHOLE_SD59x18) == MIN_WHOLE_SD59x18

    def test_below_min_whole_underflows(self):
        """One unit below MIN_WHOLE cannot be rounded down."""
        with pytest.raises(FixedPointOverflowError) as exc_info:
            sd.floor(MIN_WHOLE_SD59x18 - 1)
        assert exc_info.value.kind is ErrorKind.SD_FLOOR_UNDERFLOW

    def test_max_value(self):
        """The largest value rounds down to MAX_WHOLE."""
        assert sd.floor(MAX_SD59x18) == MAX_WHOLE_SD59x18


class TestFrac:
    """Tests for frac()."""

    def test_positive(self):
        """frac(2.5) = 0.5."""
        assert sd.frac(2_500000000000000000) == 500000000000000000

    def test_negative_keeps_sign(self):
        """frac(-2.5) = -0.5, like the EVM remainder."""
        assert sd.frac(-2_500000000000000000) == -500000000000000000

    def test_whole_values(self):
        """Whole values have no fractional part."""
        assert sd.frac(3 * SCALE) == 0
        assert sd.frac(-3 * SCALE) == 0

    def test_extremes(self):
        """frac of the bounds is their 18-decimal tail."""
        assert sd.frac(MAX_SD59x18) == 792003956564819967
        assert sd.frac(MIN_SD59x18) == -792003956564819968


class TestMul:
    """Tests for mul()."""

    def test_basic(self):
        """2.0 * 1.5 = 3.0."""
        assert sd.mul(2 * SCALE, 1_500000000000000000) == 3 * SCALE

    def test_signs(self):
        """Sign rules follow ordinary multiplication."""
        assert sd.mul(-2 * SCALE, 1_500000000000000000) == -3 * SCALE
        assert sd.mul(-2 * SCALE, -1_500000000000000000) == 3 * SCALE

    def test_rounds_half_up(self):
        """Half units round away from zero."""
        assert sd.mul(1, 500000000000000000) == 1
        assert sd.mul(-1, 500000000000000000) == -1
        assert sd.mul(1, 400000000000000000) == 0

    def test_min_input_rejected(self):
        """MIN has no absolute value, so it cannot be multiplied."""
        with pytest.raises(FixedPointOverflowError) as exc_info:
            sd.mul(MIN_SD59x18, SCALE)
        assert exc_info.value.kind is ErrorKind.SD_MUL_INPUT_TOO_SMALL

    def test_overflow(self):
        """2 * MAX fits in 256 bits but not in SD59x18."""
        with pytest.raises(FixedPointOverflowError) as exc_info:
            sd.mul(MAX_SD59x18, 2 * SCALE)
        assert exc_info.value.kind is ErrorKind.SD_MUL_OVERFLOW
        assert exc_info.value.operands == {"x": MAX_SD59x18, "y": 2 * SCALE}

    def test_product_equal_to_min_overflows(self):
        """A product of exactly MIN has no positive counterpart."""
        with pytest.raises(FixedPointOverflowError) as exc_info:
            sd.mul(-(2**254), 2 * SCALE)
        assert exc_info.value.kind is ErrorKind.SD_MUL_OVERFLOW

    def test_largest_negative_product(self):
        """-MAX is still representable."""
        assert sd.mul(-MAX_SD59x18, SCALE) == -MAX_SD59x18

    def test_overflow_beyond_256_bits(self):
        """Products of 2^256 or more fail in the shared mulDiv routine."""
        with pytest.raises(FixedPointOverflowError) as exc_info:
            sd.mul(MAX_SD59x18, MAX_SD59x18)
        assert exc_info.value.kind is ErrorKind.MUL_DIV_FIXED_POINT_OVERFLOW


class TestDiv:
    """Tests for div()."""

    def test_one_third(self):
        """1/3 is truncated to 18 decimals."""
        assert sd.div(SCALE, 3 * SCALE) == 333333333333333333

    def test_truncates_toward_zero(self):
        """Negative quotients are truncated toward zero."""
        assert sd.div(-SCALE, 3 * SCALE) == -333333333333333333
        assert sd.div(2 * SCALE, -3 * SCALE) == -666666666666666666

    def test_by_zero(self):
        """Division by zero has its own kind."""
        with pytest.raises(FixedPointDivisionByZeroError) as exc_info:
            sd.div(SCALE, 0)
        assert exc_info.value.kind is ErrorKind.DIVISION_BY_ZERO
        assert exc_info.value.message == "Cannot divide by zero"

    def test_min_input_rejected(self):
        """MIN cannot be divided."""
        with pytest.raises(FixedPointOverflowError) as exc_info:
            sd.div(MIN_SD59x18, SCALE)
        assert exc_info.value.kind is ErrorKind.SD_DIV_INPUT_TOO_SMALL

    def test_overflow(self):
        """2 * MAX fits in 256 bits but not in SD59x18."""
        with pytest.raises(FixedPointOverflowError) as exc_info:
            sd.div(MAX_SD59x18, SCALE // 2)
        assert exc_info.value.kind is ErrorKind.SD_DIV_OVERFLOW

    def test_quotient_equal_to_min_overflows(self):
        """A quotient of exactly MIN has no positive counterpart."""
        with pytest.raises(FixedPointOverflowError) as exc_info:
            sd.div(-(2**254), SCALE // 2)
        assert exc_info.value.kind is ErrorKind.SD_DIV_OVERFLOW

    def test_overflow_beyond_256_bits(self):
        """Quotients of 2^256 or more fail in the shared mulDiv routine."""
        with pytest.raises(FixedPointOverflowError) as exc_info:
            sd.div(MAX_SD59x18, 1)
        assert exc_info.value.kind is ErrorKind.MUL_DIV_OVERFLOW
        assert exc_info.value.revert_reason == f"PRBMath__MulDivOverflow({MAX_SD59x18}, 1)"


class TestInv:
    """Tests for inv()."""

    def test_basic(self):
        """1/2 = 0.5 and 1/0.5 = 2."""
        assert sd.inv(2 * SCALE) == 500000000000000000
        assert sd.inv(500000000000000000) == 2 * SCALE

    def test_negative(self):
        """1/-4 = -0.25."""
        assert sd.inv(-4 * SCALE) == -250000000000000000

    def test_smallest_unit(self):
        """1 / 10^-18 = 10^18."""
        assert sd.inv(1) == SCALE * SCALE

    def test_zero(self):
        """The inverse of zero is a division by zero."""
        with pytest.raises(FixedPointDivisionByZeroError) as exc_info:
            sd.inv(0)
        assert exc_info.value.kind is ErrorKind.DIVISION_BY_ZERO


class TestPow:
    """Tests for pow()."""

    def test_square_root_exponent(self):
        """4 ^ 0.5 = 2."""
        assert sd.pow(4 * SCALE, 500000000000000000) == 2 * SCALE

    def test_integral_exponent(self):
        """2 ^ 3 = 8."""
        assert sd.pow(2 * SCALE, 3 * SCALE) == 8 * SCALE

    def test_negative_exponent(self):
        """2 ^ -1 = 0.5."""
        assert sd.pow(2 * SCALE, -SCALE) == 500000000000000000

    def test_zero_base(self):
        """0 ^ 0 = 1 and 0 ^ y = 0."""
        assert sd.pow(0, 0) == SCALE
        assert sd.pow(0, 2 * SCALE) == 0

    def test_zero_exponent(self):
        """x ^ 0 = 1."""
        assert sd.pow(PI, 0) == SCALE

    def test_negative_base(self):
        """Negative bases are rejected."""
        with pytest.raises(FixedPointDomainError) as exc_info:
            sd.pow(-SCALE, 2 * SCALE)
        assert exc_info.value.kind is ErrorKind.SD_LOG_INPUT_TOO_SMALL
        assert "negative base" in exc_info.value.message

    def test_too_large(self):
        """2 ^ 192 reaches the exp2 input limit."""
        with pytest.raises(FixedPointOverflowError) as exc_info:
            sd.pow(2 * SCALE, 192 * SCALE)
        assert exc_info.value.kind is ErrorKind.SD_EXP2_INPUT_TOO_BIG


class TestPowu:
    """Tests for powu()."""

    def test_basic(self):
        """2 ^ 3 = 8 and 1.5 ^ 2 = 2.25."""
        assert sd.powu(2 * SCALE, 3) == 8 * SCALE
        assert sd.powu(1_500000000000000000, 2) == 2_250000000000000000

    def test_negative_base(self):
        """Odd powers of a negative base stay negative."""
        assert sd.powu(-2 * SCALE, 3) == -8 * SCALE
        assert sd.powu(-2 * SCALE, 2) == 4 * SCALE

    def test_zero_exponent(self):
        """x ^ 0 = 1, including 0 ^ 0."""
        assert sd.powu(5 * SCALE, 0) == SCALE
        assert sd.powu(0, 0) == SCALE

    def test_zero_base(self):
        """0 ^ y = 0 for y > 0."""
        assert sd.powu(0, 5) == 0

    def test_tiny_result_truncates_to_zero(self):
        """0.5 ^ 1000 is below 10^-18."""
        assert sd.powu(500000000000000000, 1000) == 0

    def test_overflow(self):
        """10 ^ 59 fits in 256 bits but not in SD59x18."""
        with pytest.raises(FixedPointOverflowError) as exc_info:
            sd.powu(10 * SCALE, 59)
        assert exc_info.value.kind is ErrorKind.SD_POWU_OVERFLOW

    def test_result_equal_to_min_overflows(self):
        """MIN ^ 1 is MIN, which has no positive counterpart."""
        with pytest.raises(FixedPointOverflowError) as exc_info:
            sd.powu(MIN_SD59x18, 1)
        assert exc_info.value.kind is ErrorKind.SD_POWU_OVERFLOW

    def test_overflow_beyond_256_bits(self):
        """2 ^ 197 exceeds 256 bits once scaled."""
        with pytest.raises(FixedPointOverflowError) as exc_info:
            sd.powu(2 * SCALE, 197)
        assert exc_info.value.kind is ErrorKind.MUL_DIV_FIXED_POINT_OVERFLOW

    def test_huge_exponent_overflows_fast(self):
        """Hopeless exponents are rejected before evaluation."""
        with pytest.raises(FixedPointOverflowError) as exc_info:
            sd.powu(2 * SCALE, 10**30)
        assert exc_info.value.kind is ErrorKind.MUL_DIV_FIXED_POINT_OVERFLOW

    def test_exponent_must_be_uint256(self):
        """The exponent is a plain non-negative integer."""
        with pytest.raises(ValueError, match="uint256"):
            sd.powu(2 * SCALE, -1)
        with pytest.raises(TypeError):
            sd.powu(2 * SCALE, 1.5)  # type: ignore[arg-type]


class TestSqrt:
    """Tests for sqrt()."""

    def test_perfect_square(self):
        """sqrt(4) = 2."""
        assert sd.sqrt(4 * SCALE) == 2 * SCALE

    def test_irrational(self):
        """sqrt(2) is truncated to 18 decimals."""
        assert sd.sqrt(2 * SCALE) == SQRT_2

    def test_zero_and_unit(self):
        """sqrt(0) = 0 and sqrt(10^-18) = 10^-9."""
        assert sd.sqrt(0) == 0
        assert sd.sqrt(1) == 10**9

    def test_negative(self):
        """Negative inputs are rejected."""
        with pytest.raises(FixedPointDomainError) as exc_info:
            sd.sqrt(-SCALE)
        assert exc_info.value.kind is ErrorKind.SD_SQRT_NEGATIVE_INPUT

    def test_overflow(self):
        """Inputs above MAX / 10^18 are rejected."""
        with pytest.raises(FixedPointOverflowError) as exc_info:
            sd.sqrt(MAX_SD59x18 // SCALE + 1)
        assert exc_info.value.kind is ErrorKind.SD_SQRT_OVERFLOW

    def test_largest_input(self):
        """MAX / 10^18 is still accepted."""
        assert sd.sqrt(MAX_SD59x18 // SCALE) > 0


class TestGm:
    """Tests for gm()."""

    def test_basic(self):
        """gm(4, 9) = 6."""
        assert sd.gm(4 * SCALE, 9 * SCALE) == 6 * SCALE

    def test_two_negatives(self):
        """A positive product of two negatives is fine."""
        assert sd.gm(-4 * SCALE, -9 * SCALE) == 6 * SCALE

    def test_zero(self):
        """A zero operand gives zero."""
        assert sd.gm(0, 9 * SCALE) == 0
        assert sd.gm(-9 * SCALE, 0) == 0

    def test_irrational(self):
        """gm(1, 2) = sqrt(2)."""
        assert sd.gm(SCALE, 2 * SCALE) == SQRT_2

    def test_negative_product(self):
        """Mixed signs are rejected."""
        with pytest.raises(FixedPointDomainError) as exc_info:
            sd.gm(-4 * SCALE, 9 * SCALE)
        assert exc_info.value.kind is ErrorKind.SD_GM_NEGATIVE_PRODUCT

    def test_overflow(self):
        """The raw product must fit in int256."""
        with pytest.raises(FixedPointOverflowError) as exc_info:
            sd.gm(MAX_SD59x18, 2)
        assert exc_info.value.kind is ErrorKind.SD_GM_OVERFLOW


class TestExp:
    """Tests for exp()."""

    def test_zero(self):
        """e^0 = 1."""
        assert sd.exp(0) == SCALE

    def test_one(self):
        """e^1 is e truncated."""
        assert sd.exp(SCALE) == E

    def test_minus_one(self):
        """e^-1 = 0.367879441171442321..."""
        assert sd.exp(-SCALE) == 367879441171442321

    def test_below_lower_threshold(self):
        """Very negative inputs give zero."""
        assert sd.exp(EXP_MIN_INPUT - 1) == 0
        assert sd.exp(MIN_SD59x18) == 0

    def test_threshold(self):
        """The largest accepted input is one unit below the limit."""
        assert sd.exp(EXP_INPUT_LIMIT - 1) > 0
        with pytest.raises(FixedPointOverflowError) as exc_info:
            sd.exp(EXP_INPUT_LIMIT)
        assert exc_info.value.kind is ErrorKind.SD_EXP_INPUT_TOO_BIG


class TestExp2:
    """Tests for exp2()."""

    def test_integral(self):
        """2^3 = 8 and 2^-1 = 0.5."""
        assert sd.exp2(3 * SCALE) == 8 * SCALE
        assert sd.exp2(-SCALE) == 500000000000000000

    def test_half(self):
        """2^0.5 = sqrt(2)."""
        assert sd.exp2(500000000000000000) == SQRT_2

    def test_largest(self):
        """2^191 is exact."""
        assert sd.exp2(191 * SCALE) == 2**191 * SCALE

    def test_threshold(self):
        """2^192 is rejected."""
        with pytest.raises(FixedPointOverflowError) as exc_info:
            sd.exp2(EXP2_INPUT_LIMIT)
        assert exc_info.value.kind is ErrorKind.SD_EXP2_INPUT_TOO_BIG

    def test_below_lower_threshold(self):
        """Very negative inputs give zero."""
        assert sd.exp2(EXP2_MIN_INPUT - 1) == 0


class TestLogarithms:
    """Tests for ln(), log2() and log10()."""

    def test_ln_one(self):
        """ln(1) = 0."""
        assert sd.ln(SCALE) == 0

    def test_ln_two(self):
        """ln(2) = 0.693147180559945309..."""
        assert sd.ln(2 * SCALE) == 693147180559945309

    def test_ln_e_truncates(self):
        """E is truncated, so ln(E) is just below 1."""
        assert sd.ln(E) == 999999999999999999

    def test_ln_fraction_is_negative(self):
        """ln(0.5) = -ln(2), truncated toward zero."""
        assert sd.ln(500000000000000000) == -693147180559945309

    def test_log2(self):
        """log2(8) = 3 and log2(0.5) = -1."""
        assert sd.log2(8 * SCALE) == 3 * SCALE
        assert sd.log2(500000000000000000) == -SCALE

    def test_log2_smallest_unit(self):
        """log2(10^-18) matches the exp2 lower threshold."""
        assert sd.log2(1) == EXP2_MIN_INPUT

    def test_log10(self):
        """log10(1000) = 3 and log10(10^-18) = -18."""
        assert sd.log10(1000 * SCALE) == 3 * SCALE
        assert sd.log10(1) == -18 * SCALE

    @pytest.mark.parametrize(
        "operation,description",
        [("ln", "natural"), ("log2", "binary"), ("log10", "common")],
    )
    def test_zero(self, operation, description):
        """log(0) is rejected with a zero-specific message."""
        with pytest.raises(FixedPointDomainError) as exc_info:
            getattr(sd, operation)(0)
        assert exc_info.value.kind is ErrorKind.SD_LOG_INPUT_TOO_SMALL
        assert exc_info.value.message == f"Cannot calculate the {description} logarithm of zero"

    @pytest.mark.parametrize("operation", ["ln", "log2", "log10"])
    def test_negative(self, operation):
        """log(negative) is rejected with a negative-specific message."""
        with pytest.raises(FixedPointDomainError) as exc_info:
            getattr(sd, operation)(-SCALE)
        assert exc_info.value.kind is ErrorKind.SD_LOG_INPUT_TOO_SMALL
        assert exc_info.value.message.endswith("of a negative number")


class TestIntegerConversion:
    """Tests for from_int(), to_int() and abs()."""

    def test_from_int(self):
        """Integers are scaled by 10^18."""
        assert sd.from_int(5) == 5 * SCALE
        assert sd.from_int(-5) == -5 * SCALE

    def test_from_int_bounds(self):
        """Integers beyond the whole range are rejected."""
        with pytest.raises(FixedPointOverflowError) as exc_info:
            sd.from_int(MAX_SD59x18 // SCALE + 1)
        assert exc_info.value.kind is ErrorKind.SD_FROM_INT_OVERFLOW
        with pytest.raises(FixedPointOverflowError) as exc_info:
            sd.from_int(MIN_WHOLE_SD59x18 // SCALE - 1)
        assert exc_info.value.kind is ErrorKind.SD_FROM_INT_UNDERFLOW

    def test_from_int_extremes(self):
        """The whole bounds convert exactly."""
        assert sd.from_int(MAX_WHOLE_SD59x18 // SCALE) == MAX_WHOLE_SD59x18
        assert sd.from_int(MIN_WHOLE_SD59x18 // SCALE) == MIN_WHOLE_SD59x18

    def test_to_int_truncates(self):
        """to_int drops the fraction toward zero."""
        assert sd.to_int(2_900000000000000000) == 2
        assert sd.to_int(-2_500000000000000000) == -2

    def test_abs(self):
        """abs flips negative values."""
        assert sd.abs(-5 * SCALE) == 5 * SCALE
        assert sd.abs(5 * SCALE) == 5 * SCALE

    def test_abs_min(self):
        """MIN has no positive counterpart."""
        with pytest.raises(FixedPointOverflowError) as exc_info:
            sd.abs(MIN_SD59x18)
        assert exc_info.value.kind is ErrorKind.SD_ABS_INPUT_TOO_SMALL


class TestAddSub:
    """Tests for add() and sub()."""

    def test_add(self):
        """Raw addition."""
        assert sd.add(SCALE, -3 * SCALE) == -2 * SCALE

    def test_add_overflow(self):
        """Overflow is the checked-arithmetic panic."""
        with pytest.raises(FixedPointOverflowError) as exc_info:
            sd.add(MAX_SD59x18, 1)
        assert exc_info.value.kind is ErrorKind.ARITHMETIC_OVERFLOW
        assert exc_info.value.revert_reason == "Panic(0x11)"

    def test_sub_underflow(self):
        """Going below MIN panics."""
        with pytest.raises(FixedPointError) as exc_info:
            sd.sub(MIN_SD59x18, 1)
        assert exc_info.value.kind is ErrorKind.ARITHMETIC_OVERFLOW


class TestConstants:
    """Tests for e(), pi() and scale()."""

    def test_values(self):
        """Constants are the truncated 18-decimal values."""
        assert sd.e() == 2_718281828459045235
        assert sd.pi() == 3_141592653589793238
        assert sd.scale() == SCALE
