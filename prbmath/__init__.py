"""PRBMath reference implementation.

Reproduces, off-chain, the results and reverts of the PRBMath SD59x18 and
UD60x18 fixed-point libraries, for use as the expected side of contract tests.
"""

from prbmath.codec import RoundingMode, decode, encode, solidity_mod
from prbmath.constants import (
    DECIMALS,
    E,
    HALF_SCALE,
    MAX_SD59x18,
    MAX_UD60x18,
    MAX_WHOLE_SD59x18,
    MAX_WHOLE_UD60x18,
    MIN_SD59x18,
    MIN_WHOLE_SD59x18,
    PI,
    SCALE,
    SQRT_MAX_SD59x18,
    SQRT_MAX_UD60x18,
)
from prbmath.errors import (
    ErrorCategory,
    ErrorKind,
    FixedPointDivisionByZeroError,
    FixedPointDomainError,
    FixedPointError,
    FixedPointOverflowError,
)
from prbmath.formats import SD59x18, UD60x18, FixedPointFormat
from prbmath.functions import FixedPointMath, get_math, sd59x18, ud60x18

__version__ = "0.1.0"
__all__ = [
    # Operation sets
    "FixedPointMath",
    "sd59x18",
    "ud60x18",
    "get_math",
    # Formats
    "FixedPointFormat",
    "SD59x18",
    "UD60x18",
    # Codec
    "RoundingMode",
    "decode",
    "encode",
    "solidity_mod",
    # Errors
    "ErrorCategory",
    "ErrorKind",
    "FixedPointError",
    "FixedPointOverflowError",
    "FixedPointDomainError",
    "FixedPointDivisionByZeroError",
    # Constants
    "DECIMALS",
    "SCALE",
    "HALF_SCALE",
    "E",
    "PI",
    "MAX_SD59x18",
    "MIN_SD59x18",
    "MAX_WHOLE_SD59x18",
    "MIN_WHOLE_SD59x18",
    "SQRT_MAX_SD59x18",
    "MAX_UD60x18",
    "MAX_WHOLE_UD60x18",
    "SQRT_MAX_UD60x18",
    "__version__",
]
