"""Fixed-point operation set shared by the SD59x18 and UD60x18 formats.

Every operation takes raw scaled integers, decodes them to Decimal working
values, evaluates with the engine's primitives, re-encodes the result at 18
decimals and checks it against the format's bounds. Failures raise a
FixedPointError tagged with the kind the on-chain library reverts with.

Usage:
    from prbmath.functions import sd59x18, ud60x18

    sd59x18.mul(2 * SCALE, 1_500000000000000000)  # 3 * SCALE
    ud60x18.sqrt(4 * SCALE)                        # 2 * SCALE
"""

from __future__ import annotations

from decimal import Decimal

import structlog

from prbmath.codec import RoundingMode, decode, encode, solidity_mod
from prbmath.constants import (
    E,
    EXP2_INPUT_LIMIT,
    EXP2_MIN_INPUT,
    EXP_INPUT_LIMIT,
    EXP_MIN_INPUT,
    PI,
    SCALE,
    UINT256_MAX,
)
from prbmath.engine import get_engine
from prbmath.errors import ErrorKind, FixedPointError
from prbmath.formats import SD59x18, UD60x18, FixedPointFormat, get_format

logger = structlog.get_logger()

_ONE = Decimal(1)
_TWO = Decimal(2)

# Operations whose arguments are all raw scaled values of the format.
# powu takes a plain integer exponent; from_int takes a plain integer.
OPERATIONS: dict[str, int] = {
    "abs": 1,
    "add": 2,
    "avg": 2,
    "ceil": 1,
    "div": 2,
    "exp": 1,
    "exp2": 1,
    "floor": 1,
    "frac": 1,
    "from_int": 1,
    "gm": 2,
    "inv": 1,
    "ln": 1,
    "log10": 1,
    "log2": 1,
    "mul": 2,
    "pow": 2,
    "powu": 2,
    "sqrt": 1,
    "sub": 2,
    "to_int": 1,
}


def _div_trunc(a: int, b: int) -> int:
    """Integer division truncating toward zero, like Solidity's `/`.

    Python's // rounds toward negative infinity, which differs when the
    operands have different signs.
    """
    if (a >= 0) == (b >= 0):
        return a // b
    return -(abs(a) // abs(b))


class FixedPointMath:
    """The operation set bound to one fixed-point format.

    Attributes:
        fmt: Format descriptor supplying bounds and error kinds
    """

    __slots__ = ("fmt",)

    def __init__(self, fmt: FixedPointFormat) -> None:
        self.fmt = fmt

    def __repr__(self) -> str:
        return f"FixedPointMath({self.fmt.name})"

    # =========================================================================
    # Helpers
    # =========================================================================

    def _fail(self, kind: ErrorKind, message: str, operation: str, **operands: int) -> FixedPointError:
        """Build (and log) the error for a rejected operation."""
        logger.debug(
            "fixed_point_error",
            fmt=self.fmt.name,
            operation=operation,
            kind=kind.name,
            operands={name: str(value) for name, value in operands.items()},
        )
        return FixedPointError.from_kind(kind, message, operation=operation, operands=operands)

    def _fit(self, value: int, kind: ErrorKind, operation: str, **operands: int) -> int:
        """Return value if it is a valid raw value of the format, else raise kind."""
        if not self.fmt.contains(value):
            raise self._fail(
                kind,
                f"{self.fmt.name} {operation} result {value} is out of range",
                operation,
                **operands,
            )
        return value

    def _fit_magnitude(
        self, value: int, kind: ErrorKind, wide_kind: ErrorKind, operation: str, **operands: int
    ) -> int:
        """Range-check a mulDiv result by its absolute value.

        The on-chain libraries compute |result| in 256 bits and then compare it
        with MAX, so |result| >= 2^256 reverts in the shared mulDiv routine
        (wide_kind) and MAX < |result| < 2^256 reverts with the format's kind.
        In the signed format this also rejects a result equal to MIN.
        """
        magnitude = abs(value)
        if magnitude > UINT256_MAX:
            raise self._fail(
                wide_kind,
                f"{self.fmt.name} {operation} intermediate {magnitude} exceeds 256 bits",
                operation,
                **operands,
            )
        if magnitude > self.fmt.max_value:
            raise self._fail(
                kind, f"{self.fmt.name} {operation} result {value} is out of range", operation, **operands
            )
        return value

    def _check_log_input(self, x: int, operation: str, description: str) -> None:
        kind = self.fmt.errors.log_input_too_small
        if x == 0:
            raise self._fail(kind, f"Cannot calculate the {description} of zero", operation, x=x)
        if x < 0:
            raise self._fail(
                kind, f"Cannot calculate the {description} of a negative number", operation, x=x
            )
        if not self.fmt.signed and x < SCALE:
            # The logarithm would be negative, which the unsigned format cannot hold
            raise self._fail(
                kind, f"Cannot calculate the {description} of a number less than one", operation, x=x
            )

    def _reject_min(self, kind: ErrorKind | None, operation: str, x: int, y: int) -> None:
        """Signed mul/div take absolute values first; MIN has no positive counterpart."""
        if kind is not None and (x == self.fmt.min_value or y == self.fmt.min_value):
            raise self._fail(
                kind, f"{self.fmt.name} {operation} input cannot be the minimum value", operation, x=x, y=y
            )

    # =========================================================================
    # Constants
    # =========================================================================

    def e(self) -> int:
        """Euler's number in the format."""
        return E

    def pi(self) -> int:
        """Pi in the format."""
        return PI

    def scale(self) -> int:
        """1.0 in the format."""
        return SCALE

    # =========================================================================
    # Integer conversion and checked arithmetic
    # =========================================================================

    def from_int(self, n: int) -> int:
        """Convert a plain integer to the format: n * 10^18."""
        if not isinstance(n, int) or isinstance(n, bool):
            raise TypeError(f"from_int requires int, got {type(n).__name__}")
        errors = self.fmt.errors
        if errors.from_int_underflow is None and n < 0:
            raise ValueError(f"{self.fmt.name} from_int requires a non-negative integer, got {n}")
        if errors.from_int_underflow is not None and n < self.fmt.min_from_int:
            raise self._fail(errors.from_int_underflow, f"{n} is too small to convert", "from_int", x=n)
        if n > self.fmt.max_from_int:
            raise self._fail(errors.from_int_overflow, f"{n} is too large to convert", "from_int", x=n)
        return n * SCALE

    def to_int(self, x: int) -> int:
        """Drop the fractional part, truncating toward zero."""
        self.fmt.validate(x)
        return _div_trunc(x, SCALE)

    def abs(self, x: int) -> int:
        self.fmt.validate(x)
        kind = self.fmt.errors.abs_input_too_small
        if kind is not None and x == self.fmt.min_value:
            raise self._fail(kind, "Cannot take the absolute value of the minimum value", "abs", x=x)
        return x if x >= 0 else -x

    def add(self, x: int, y: int) -> int:
        self.fmt.validate(x)
        self.fmt.validate(y, "y")
        return self._fit(x + y, self.fmt.errors.add_overflow, "add", x=x, y=y)

    def sub(self, x: int, y: int) -> int:
        self.fmt.validate(x)
        self.fmt.validate(y, "y")
        return self._fit(x - y, self.fmt.errors.sub_underflow, "sub", x=x, y=y)

    # =========================================================================
    # Rounding
    # =========================================================================

    def avg(self, x: int, y: int) -> int:
        """Arithmetic mean, truncated toward zero."""
        self.fmt.validate(x)
        self.fmt.validate(y, "y")
        return encode(get_engine().mean(decode(x), decode(y)))

    def ceil(self, x: int) -> int:
        """Smallest whole value greater than or equal to x.

        Raises:
            FixedPointOverflowError: If x > max_whole (rounding up leaves the range)
        """
        self.fmt.validate(x)
        if x > self.fmt.max_whole:
            raise self._fail(
                self.fmt.errors.ceil_overflow, f"Cannot round {x} up within range", "ceil", x=x
            )
        return encode(get_engine().ceil(decode(x)))

    def floor(self, x: int) -> int:
        """Largest whole value less than or equal to x.

        Raises:
            FixedPointOverflowError: If x < min_whole (signed format only)
        """
        self.fmt.validate(x)
        kind = self.fmt.errors.floor_underflow
        if kind is not None and x < self.fmt.min_whole:
            raise self._fail(kind, f"Cannot round {x} down within range", "floor", x=x)
        return encode(get_engine().floor(decode(x)))

    def frac(self, x: int) -> int:
        """Fractional part of x; keeps the sign of x like the EVM remainder."""
        self.fmt.validate(x)
        return solidity_mod(x, SCALE)

    # =========================================================================
    # Multiplication and division
    # =========================================================================

    def mul(self, x: int, y: int) -> int:
        """Product x * y, rounded half-up at the 18th decimal.

        Raises:
            FixedPointOverflowError: If either input is the signed minimum, or
                the product does not fit
        """
        self.fmt.validate(x)
        self.fmt.validate(y, "y")
        self._reject_min(self.fmt.errors.mul_input_too_small, "mul", x, y)
        product = get_engine().multiply(decode(x), decode(y))
        result = encode(product, RoundingMode.HALF_UP)
        return self._fit_magnitude(
            result, self.fmt.errors.mul_overflow, ErrorKind.MUL_DIV_FIXED_POINT_OVERFLOW, "mul", x=x, y=y
        )

    def div(self, x: int, y: int) -> int:
        """Quotient x / y, truncated toward zero.

        Raises:
            FixedPointDivisionByZeroError: If y is zero
            FixedPointOverflowError: If either input is the signed minimum, or
                the quotient does not fit
        """
        self.fmt.validate(x)
        self.fmt.validate(y, "y")
        if y == 0:
            raise self._fail(ErrorKind.DIVISION_BY_ZERO, "Cannot divide by zero", "div", x=x, y=y)
        self._reject_min(self.fmt.errors.div_input_too_small, "div", x, y)
        quotient = get_engine().divide(decode(x), decode(y))
        return self._fit_magnitude(
            encode(quotient), self.fmt.errors.div_overflow, ErrorKind.MUL_DIV_OVERFLOW, "div", x=x, y=y
        )

    def inv(self, x: int) -> int:
        """Inverse 1 / x, truncated toward zero.

        Raises:
            FixedPointDivisionByZeroError: If x is zero
        """
        self.fmt.validate(x)
        if x == 0:
            raise self._fail(
                ErrorKind.DIVISION_BY_ZERO, "Cannot calculate the inverse of zero", "inv", x=x
            )
        quotient = get_engine().divide(_ONE, decode(x))
        return self._fit(encode(quotient), self.fmt.errors.div_overflow, "inv", x=x)

    # =========================================================================
    # Powers and roots
    # =========================================================================

    def pow(self, x: int, y: int) -> int:
        """x raised to the fixed-point power y, i.e. 2^(y * log2(x)).

        Unsigned bases below 1.0 are accepted and evaluated exactly. This
        differs from the UD60x18 contract, whose pow goes through log2 and
        reverts with LogInputTooSmall for such bases.

        Raises:
            FixedPointDomainError: If x is negative
            FixedPointOverflowError: If y * log2(x) reaches the exp2 input limit
        """
        self.fmt.validate(x)
        self.fmt.validate(y, "y")
        if x < 0:
            raise self._fail(
                self.fmt.errors.log_input_too_small,
                "Cannot raise a negative base to a power",
                "pow",
                x=x,
                y=y,
            )
        if x == 0:
            return SCALE if y == 0 else 0
        if y == 0:
            return SCALE

        engine = get_engine()
        base, exponent = decode(x), decode(y)
        kind = self.fmt.errors.exp2_input_too_big
        binary_exponent = engine.multiply(engine.log2(base), exponent)
        if engine.compare(binary_exponent, decode(EXP2_INPUT_LIMIT)) >= 0:
            raise self._fail(kind, f"{x} ** {y} is too large", "pow", x=x, y=y)
        return self._fit(encode(engine.pow(base, exponent)), kind, "pow", x=x, y=y)

    def powu(self, x: int, y: int) -> int:
        """x raised to the plain (unscaled) non-negative integer power y.

        Raises:
            FixedPointOverflowError: If the result does not fit
        """
        self.fmt.validate(x)
        if not isinstance(y, int) or isinstance(y, bool):
            raise TypeError(f"powu exponent must be int, got {type(y).__name__}")
        if not 0 <= y <= UINT256_MAX:
            raise ValueError(f"powu exponent must be a uint256, got {y}")
        if y == 0:
            return SCALE
        if x == 0:
            return 0

        engine = get_engine()
        kind = self.fmt.errors.powu_overflow
        wide_kind = ErrorKind.MUL_DIV_FIXED_POINT_OVERFLOW
        base, exponent = decode(x), Decimal(y)
        if abs(x) > SCALE:
            # Reject hopeless cases before evaluating a huge power
            digits = engine.multiply(engine.log10(decode(abs(x))), exponent)
            limit = engine.add(engine.log10(decode(self.fmt.max_value)), _ONE)
            if engine.compare(digits, limit) > 0:
                raise self._fail(wide_kind, f"{x} ** {y} is too large", "powu", x=x, y=y)
        return self._fit_magnitude(encode(engine.pow(base, exponent)), kind, wide_kind, "powu", x=x, y=y)

    def sqrt(self, x: int) -> int:
        """Principal square root, truncated.

        Raises:
            FixedPointDomainError: If x is negative
            FixedPointOverflowError: If x * 10^18 would not fit in the raw width
        """
        self.fmt.validate(x)
        negative_kind = self.fmt.errors.sqrt_negative_input
        if negative_kind is not None and x < 0:
            raise self._fail(
                negative_kind, "Cannot calculate the square root of a negative number", "sqrt", x=x
            )
        if x > self.fmt.max_sqrt_input:
            raise self._fail(
                self.fmt.errors.sqrt_overflow, f"Cannot calculate the square root of {x}", "sqrt", x=x
            )
        return encode(get_engine().sqrt(decode(x)))

    def gm(self, x: int, y: int) -> int:
        """Geometric mean sqrt(x * y).

        Raises:
            FixedPointDomainError: If x * y is negative
            FixedPointOverflowError: If the raw product x * y does not fit
        """
        self.fmt.validate(x)
        self.fmt.validate(y, "y")
        if x == 0 or y == 0:
            return 0
        errors = self.fmt.errors
        raw_product = x * y
        if raw_product < 0 and errors.gm_negative_product is not None:
            raise self._fail(
                errors.gm_negative_product,
                "Cannot calculate the geometric mean of a negative product",
                "gm",
                x=x,
                y=y,
            )
        if not self.fmt.contains(raw_product):
            raise self._fail(errors.gm_overflow, f"{x} * {y} overflows", "gm", x=x, y=y)
        engine = get_engine()
        return encode(engine.sqrt(engine.multiply(decode(x), decode(y))))

    # =========================================================================
    # Exponentials and logarithms
    # =========================================================================

    def exp(self, x: int) -> int:
        """Natural exponential e^x.

        Raises:
            FixedPointOverflowError: If x >= 133.084258667509499441
        """
        self.fmt.validate(x)
        if x < EXP_MIN_INPUT:
            return 0
        kind = self.fmt.errors.exp_input_too_big
        if x >= EXP_INPUT_LIMIT:
            raise self._fail(kind, f"exp input {x} is too big", "exp", x=x)
        return self._fit(encode(get_engine().exp(decode(x))), kind, "exp", x=x)

    def exp2(self, x: int) -> int:
        """Binary exponential 2^x.

        Raises:
            FixedPointOverflowError: If x >= 192
        """
        self.fmt.validate(x)
        if x < EXP2_MIN_INPUT:
            return 0
        kind = self.fmt.errors.exp2_input_too_big
        if x >= EXP2_INPUT_LIMIT:
            raise self._fail(kind, f"exp2 input {x} is too big", "exp2", x=x)
        return self._fit(encode(get_engine().pow(_TWO, decode(x))), kind, "exp2", x=x)

    def ln(self, x: int) -> int:
        self.fmt.validate(x)
        self._check_log_input(x, "ln", "natural logarithm")
        return encode(get_engine().ln(decode(x)))

    def log2(self, x: int) -> int:
        self.fmt.validate(x)
        self._check_log_input(x, "log2", "binary logarithm")
        return encode(get_engine().log2(decode(x)))

    def log10(self, x: int) -> int:
        self.fmt.validate(x)
        self._check_log_input(x, "log10", "common logarithm")
        return encode(get_engine().log10(decode(x)))


sd59x18 = FixedPointMath(SD59x18)
ud60x18 = FixedPointMath(UD60x18)


def get_math(format_name: str) -> FixedPointMath:
    """Return the operation set for "sd59x18" or "ud60x18".

    Raises:
        ValueError: If the format name is unknown
    """
    fmt = get_format(format_name)
    return sd59x18 if fmt is SD59x18 else ud60x18


__all__ = [
    "OPERATIONS",
    "FixedPointMath",
    "sd59x18",
    "ud60x18",
    "get_math",
]
