"""Format descriptors for the signed (SD59x18) and unsigned (UD60x18) encodings.

The operation set is written once against FixedPointFormat; each descriptor
supplies the boundaries and the error kinds its on-chain library reverts with.
"""

from __future__ import annotations

from dataclasses import dataclass

from prbmath.constants import (
    MAX_SD59x18,
    MAX_UD60x18,
    MAX_WHOLE_SD59x18,
    MAX_WHOLE_UD60x18,
    MIN_SD59x18,
    MIN_UD60x18,
    MIN_WHOLE_SD59x18,
    SCALE,
)
from prbmath.errors import ErrorKind


@dataclass(frozen=True)
class FormatErrors:
    """Error kind raised by each checked operation.

    None means the check cannot trigger in that format (e.g. an unsigned
    floor never underflows).
    """

    add_overflow: ErrorKind
    sub_underflow: ErrorKind
    ceil_overflow: ErrorKind
    floor_underflow: ErrorKind | None
    mul_overflow: ErrorKind
    mul_input_too_small: ErrorKind | None
    div_overflow: ErrorKind
    div_input_too_small: ErrorKind | None
    exp_input_too_big: ErrorKind
    exp2_input_too_big: ErrorKind
    powu_overflow: ErrorKind
    sqrt_negative_input: ErrorKind | None
    sqrt_overflow: ErrorKind
    log_input_too_small: ErrorKind
    gm_overflow: ErrorKind
    gm_negative_product: ErrorKind | None
    from_int_overflow: ErrorKind
    from_int_underflow: ErrorKind | None
    abs_input_too_small: ErrorKind | None


@dataclass(frozen=True)
class FixedPointFormat:
    """Boundaries and error kinds of one 18-decimal fixed-point encoding.

    Attributes:
        name: Format name as used on-chain ("SD59x18", "UD60x18")
        signed: Whether raw values are two's-complement signed
        min_value: Smallest raw value
        max_value: Largest raw value
        min_whole: Smallest raw value with a zero fractional part
        max_whole: Largest raw value with a zero fractional part
        errors: Error kinds for the checked operations
    """

    name: str
    signed: bool
    min_value: int
    max_value: int
    min_whole: int
    max_whole: int
    errors: FormatErrors

    @property
    def max_sqrt_input(self) -> int:
        """Largest x accepted by sqrt: x * 10^18 must fit in the raw width."""
        return self.max_value // SCALE

    @property
    def max_from_int(self) -> int:
        """Largest integer accepted by from_int."""
        return self.max_value // SCALE

    @property
    def min_from_int(self) -> int:
        """Smallest integer accepted by from_int (division truncates toward zero)."""
        return -(-self.min_value // SCALE)

    def contains(self, value: int) -> bool:
        """True if value is a valid raw value of this format."""
        return self.min_value <= value <= self.max_value

    def validate(self, value: int, name: str = "x") -> int:
        """Check that a caller-supplied raw value belongs to this format.

        Raises:
            TypeError: If value is not an int
            ValueError: If value is outside [min_value, max_value]
        """
        if not isinstance(value, int) or isinstance(value, bool):
            raise TypeError(f"{self.name} {name} must be int, got {type(value).__name__}")
        if not self.contains(value):
            raise ValueError(
                f"{self.name} {name} out of range: {value} not in "
                f"[{self.min_value}, {self.max_value}]"
            )
        return value

    def __str__(self) -> str:
        return self.name


SD59x18 = FixedPointFormat(
    name="SD59x18",
    signed=True,
    min_value=MIN_SD59x18,
    max_value=MAX_SD59x18,
    min_whole=MIN_WHOLE_SD59x18,
    max_whole=MAX_WHOLE_SD59x18,
    errors=FormatErrors(
        add_overflow=ErrorKind.ARITHMETIC_OVERFLOW,
        sub_underflow=ErrorKind.ARITHMETIC_OVERFLOW,
        ceil_overflow=ErrorKind.SD_CEIL_OVERFLOW,
        floor_underflow=ErrorKind.SD_FLOOR_UNDERFLOW,
        mul_overflow=ErrorKind.SD_MUL_OVERFLOW,
        mul_input_too_small=ErrorKind.SD_MUL_INPUT_TOO_SMALL,
        div_overflow=ErrorKind.SD_DIV_OVERFLOW,
        div_input_too_small=ErrorKind.SD_DIV_INPUT_TOO_SMALL,
        exp_input_too_big=ErrorKind.SD_EXP_INPUT_TOO_BIG,
        exp2_input_too_big=ErrorKind.SD_EXP2_INPUT_TOO_BIG,
        powu_overflow=ErrorKind.SD_POWU_OVERFLOW,
        sqrt_negative_input=ErrorKind.SD_SQRT_NEGATIVE_INPUT,
        sqrt_overflow=ErrorKind.SD_SQRT_OVERFLOW,
        log_input_too_small=ErrorKind.SD_LOG_INPUT_TOO_SMALL,
        gm_overflow=ErrorKind.SD_GM_OVERFLOW,
        gm_negative_product=ErrorKind.SD_GM_NEGATIVE_PRODUCT,
        from_int_overflow=ErrorKind.SD_FROM_INT_OVERFLOW,
        from_int_underflow=ErrorKind.SD_FROM_INT_UNDERFLOW,
        abs_input_too_small=ErrorKind.SD_ABS_INPUT_TOO_SMALL,
    ),
)

UD60x18 = FixedPointFormat(
    name="UD60x18",
    signed=False,
    min_value=MIN_UD60x18,
    max_value=MAX_UD60x18,
    min_whole=MIN_UD60x18,
    max_whole=MAX_WHOLE_UD60x18,
    errors=FormatErrors(
        add_overflow=ErrorKind.UD_ADD_OVERFLOW,
        sub_underflow=ErrorKind.UD_SUB_UNDERFLOW,
        ceil_overflow=ErrorKind.UD_CEIL_OVERFLOW,
        floor_underflow=None,
        mul_overflow=ErrorKind.MUL_DIV_FIXED_POINT_OVERFLOW,
        mul_input_too_small=None,
        div_overflow=ErrorKind.MUL_DIV_OVERFLOW,
        div_input_too_small=None,
        exp_input_too_big=ErrorKind.UD_EXP_INPUT_TOO_BIG,
        exp2_input_too_big=ErrorKind.UD_EXP2_INPUT_TOO_BIG,
        powu_overflow=ErrorKind.MUL_DIV_FIXED_POINT_OVERFLOW,
        sqrt_negative_input=None,
        sqrt_overflow=ErrorKind.UD_SQRT_OVERFLOW,
        log_input_too_small=ErrorKind.UD_LOG_INPUT_TOO_SMALL,
        gm_overflow=ErrorKind.UD_GM_OVERFLOW,
        gm_negative_product=None,
        from_int_overflow=ErrorKind.UD_FROM_UINT_OVERFLOW,
        from_int_underflow=None,
        abs_input_too_small=None,
    ),
)

FORMATS: dict[str, FixedPointFormat] = {
    "sd59x18": SD59x18,
    "ud60x18": UD60x18,
}


def get_format(name: str) -> FixedPointFormat:
    """Look up a format by name (case-insensitive).

    Raises:
        ValueError: If the name is unknown
    """
    try:
        return FORMATS[name.lower()]
    except KeyError as err:
        raise ValueError(f"Unknown fixed-point format: {name!r}") from err


__all__ = [
    "FormatErrors",
    "FixedPointFormat",
    "SD59x18",
    "UD60x18",
    "FORMATS",
    "get_format",
]
