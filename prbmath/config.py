"""Configuration for the high-precision engine."""

import os
from dataclasses import dataclass

from prbmath.constants import DECIMALS

# 60 integer digits (UD60x18), 18 fractional digits, 2 guard digits
MIN_PRECISION = 60 + DECIMALS + 2


@dataclass(frozen=True)
class EngineConfig:
    """Settings the engine is built from, fixed for the life of the process.

    Attributes:
        precision: Significant decimal digits carried by every primitive
            (default: 80, the minimum that rounds every operation correctly)
        guard_digits: Extra digits used while evaluating logarithms before
            rounding back to `precision`
        decimals: Fractional digits of the scaled-integer encoding
    """

    precision: int = MIN_PRECISION
    guard_digits: int = 10
    decimals: int = DECIMALS

    def __post_init__(self) -> None:
        if self.precision < MIN_PRECISION:
            raise ValueError(
                f"Engine precision must be at least {MIN_PRECISION} digits, got {self.precision}"
            )
        if self.guard_digits < 0:
            raise ValueError(f"Guard digits must be non-negative, got {self.guard_digits}")
        if self.decimals != DECIMALS:
            raise ValueError(f"Only {DECIMALS}-decimal encodings are supported, got {self.decimals}")

    @classmethod
    def from_env(cls) -> "EngineConfig":
        """Build a config from PRBMATH_PRECISION / PRBMATH_GUARD_DIGITS.

        Raises:
            ValueError: If a variable is set but is not a valid integer
        """
        precision = os.environ.get("PRBMATH_PRECISION", str(MIN_PRECISION))
        guard_digits = os.environ.get("PRBMATH_GUARD_DIGITS", "10")
        try:
            return cls(precision=int(precision), guard_digits=int(guard_digits))
        except ValueError as err:
            raise ValueError(f"Invalid engine configuration in environment: {err}") from err


# Default configuration instance
DEFAULT_ENGINE_CONFIG = EngineConfig()
