"""Scaled-integer codec.

Converts between raw scaled integers (the on-chain encoding, real value
times 10^18) and Decimal working values. `encode` is the only place where
digits below 10^-18 are dropped, under an explicit rounding mode.
"""

from __future__ import annotations

import decimal
from decimal import Decimal
from enum import Enum

from prbmath.constants import DECIMALS
from prbmath.engine import get_engine

__all__ = ["RoundingMode", "decode", "encode", "solidity_mod"]

# 10^-18: the smallest representable step
_QUANTUM = Decimal((0, (1,), -DECIMALS))


class RoundingMode(str, Enum):
    """How `encode` treats digits below the 18th decimal."""

    TRUNCATE = decimal.ROUND_DOWN
    HALF_UP = decimal.ROUND_HALF_UP


def decode(value: int) -> Decimal:
    """Reinterpret a raw scaled integer as a Decimal with 18 fractional digits.

    Exact: the digits are reused with a shifted exponent, no context rounding.

    Examples:
        decode(1_500000000000000000) == Decimal("1.5")
        decode(-1) == Decimal("-0.000000000000000001")
    """
    sign, digits, _ = Decimal(value).as_tuple()
    return Decimal((sign, digits, -DECIMALS))


def encode(value: Decimal, rounding: RoundingMode = RoundingMode.TRUNCATE) -> int:
    """Format a working value to exactly 18 decimals and parse it as a raw integer.

    Args:
        value: Finite Decimal working value
        rounding: Rounding applied at the 18th decimal (default: truncate toward zero)

    Returns:
        Raw scaled integer (not range-checked; callers check their format bounds)

    Raises:
        ValueError: If value is NaN or infinite
    """
    if not value.is_finite():
        raise ValueError(f"Cannot encode non-finite value {value}")
    # Enough digits for the integer part plus 18 decimals, so quantize never fails
    context = decimal.Context(
        prec=max(value.adjusted(), 0) + DECIMALS + 2,
        rounding=rounding.value,
        Emax=decimal.MAX_EMAX,
        Emin=decimal.MIN_EMIN,
        traps=[decimal.InvalidOperation],
    )
    fixed = format(value.quantize(_QUANTUM, context=context), "f")
    integer_part, _, fraction = fixed.partition(".")
    return int(integer_part + fraction.ljust(DECIMALS, "0"))


def solidity_mod(x: int, m: int) -> int:
    """Remainder of x / m with the sign of the dividend (EVM `smod` semantics).

    The engine's modulo follows the divisor, as mathematical modulo does, so a
    non-zero remainder of a negative dividend is shifted back by one divisor.

    Examples:
        solidity_mod(2_500000000000000000, SCALE) == 500000000000000000
        solidity_mod(-2_500000000000000000, SCALE) == -500000000000000000

    Raises:
        ValueError: If m is not positive
    """
    if m <= 0:
        raise ValueError(f"Modulus must be positive, got {m}")
    engine = get_engine()
    divisor = decode(m)
    remainder = engine.mod(decode(x), divisor)
    if x < 0 and remainder != 0:
        remainder = engine.subtract(remainder, divisor)
    return encode(remainder)
