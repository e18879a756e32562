"""Constant table for the PRBMath fixed-point formats.

All values are raw scaled integers (real value * 10^18) unless noted.
SD59x18 is the signed format (int256), UD60x18 the unsigned one (uint256).
"""

# =============================================================================
# Scale
# =============================================================================

DECIMALS = 18
SCALE = 10**DECIMALS
HALF_SCALE = SCALE // 2

# 256-bit integer ranges
UINT256_MAX = 2**256 - 1
INT256_MAX = 2**255 - 1
INT256_MIN = -(2**255)

# =============================================================================
# Mathematical constants (truncated to 18 decimals)
# =============================================================================

E = 2_718281828459045235
PI = 3_141592653589793238

# =============================================================================
# UD60x18 boundaries
# =============================================================================

MAX_UD60x18 = UINT256_MAX  # 115792089237316195423570985008687907853269984665640564039457.584007913129639935
MAX_WHOLE_UD60x18 = MAX_UD60x18 - MAX_UD60x18 % SCALE
MIN_UD60x18 = 0

# floor(sqrt(MAX_UD60x18 / 10^18) * 10^18): largest x such that mul(x, x) fits
SQRT_MAX_UD60x18 = 340282366920938463463374607431768211455_999999999

# =============================================================================
# SD59x18 boundaries
# =============================================================================

MAX_SD59x18 = INT256_MAX  # 57896044618658097711785492504343953926634992332820282019728.792003956564819967
MIN_SD59x18 = INT256_MIN  # -57896044618658097711785492504343953926634992332820282019728.792003956564819968
MAX_WHOLE_SD59x18 = MAX_SD59x18 - MAX_SD59x18 % SCALE
MIN_WHOLE_SD59x18 = -MAX_WHOLE_SD59x18

SQRT_MAX_SD59x18 = 240615969168004511545033772477625056927_114980741

# =============================================================================
# Exponential thresholds (match the on-chain reverts)
# =============================================================================

# exp(x) reverts for x >= this value: e^133.08 is the largest power the
# 192.64-bit exp2 core can produce.
EXP_INPUT_LIMIT = 133_084258667509499441

# exp2(x) reverts for x >= 192.0
EXP2_INPUT_LIMIT = 192 * SCALE

# Signed format only: below these, the result is smaller than 10^-18 and
# the on-chain implementation returns zero without computing.
EXP_MIN_INPUT = -41_446531673892822322
EXP2_MIN_INPUT = -59_794705707972522261


__all__ = [
    "DECIMALS",
    "SCALE",
    "HALF_SCALE",
    "UINT256_MAX",
    "INT256_MAX",
    "INT256_MIN",
    "E",
    "PI",
    "MAX_UD60x18",
    "MAX_WHOLE_UD60x18",
    "MIN_UD60x18",
    "SQRT_MAX_UD60x18",
    "MAX_SD59x18",
    "MIN_SD59x18",
    "MAX_WHOLE_SD59x18",
    "MIN_WHOLE_SD59x18",
    "SQRT_MAX_SD59x18",
    "EXP_INPUT_LIMIT",
    "EXP2_INPUT_LIMIT",
    "EXP_MIN_INPUT",
    "EXP2_MIN_INPUT",
]
