"""Error taxonomy for fixed-point operations.

Each failure an operation can raise is tagged with an ErrorKind whose value
is the identifier the on-chain library reverts with, so callers can compare
a reference failure with an observed revert directly.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum


class ErrorCategory(Enum):
    """Broad class of a failure: undefined math vs. a result that does not fit."""

    OVERFLOW = "overflow"
    DOMAIN = "domain"
    DIVISION_BY_ZERO = "division_by_zero"


class ErrorKind(str, Enum):
    """Closed set of failure kinds, valued by the on-chain error identifier."""

    # Shared (PRBMath core)
    MUL_DIV_FIXED_POINT_OVERFLOW = "PRBMath__MulDivFixedPointOverflow"
    MUL_DIV_OVERFLOW = "PRBMath__MulDivOverflow"
    MUL_DIV_SIGNED_INPUT_TOO_SMALL = "PRBMath__MulDivSignedInputTooSmall"
    MUL_DIV_SIGNED_OVERFLOW = "PRBMath__MulDivSignedOverflow"

    # Solidity built-in checks
    ARITHMETIC_OVERFLOW = "Panic(0x11)"
    DIVISION_BY_ZERO = "Panic(0x12)"

    # SD59x18
    SD_ABS_INPUT_TOO_SMALL = "PRBMathSD59x18__AbsInputTooSmall"
    SD_CEIL_OVERFLOW = "PRBMathSD59x18__CeilOverflow"
    SD_DIV_INPUT_TOO_SMALL = "PRBMathSD59x18__DivInputTooSmall"
    SD_DIV_OVERFLOW = "PRBMathSD59x18__DivOverflow"
    SD_EXP_INPUT_TOO_BIG = "PRBMathSD59x18__ExpInputTooBig"
    SD_EXP2_INPUT_TOO_BIG = "PRBMathSD59x18__Exp2InputTooBig"
    SD_FLOOR_UNDERFLOW = "PRBMathSD59x18__FloorUnderflow"
    SD_FROM_INT_OVERFLOW = "PRBMathSD59x18__FromIntOverflow"
    SD_FROM_INT_UNDERFLOW = "PRBMathSD59x18__FromIntUnderflow"
    SD_GM_NEGATIVE_PRODUCT = "PRBMathSD59x18__GmNegativeProduct"
    SD_GM_OVERFLOW = "PRBMathSD59x18__GmOverflow"
    SD_LOG_INPUT_TOO_SMALL = "PRBMathSD59x18__LogInputTooSmall"
    SD_MUL_INPUT_TOO_SMALL = "PRBMathSD59x18__MulInputTooSmall"
    SD_MUL_OVERFLOW = "PRBMathSD59x18__MulOverflow"
    SD_POWU_OVERFLOW = "PRBMathSD59x18__PowuOverflow"
    SD_SQRT_NEGATIVE_INPUT = "PRBMathSD59x18__SqrtNegativeInput"
    SD_SQRT_OVERFLOW = "PRBMathSD59x18__SqrtOverflow"

    # UD60x18
    UD_ADD_OVERFLOW = "PRBMathUD60x18__AddOverflow"
    UD_CEIL_OVERFLOW = "PRBMathUD60x18__CeilOverflow"
    UD_EXP_INPUT_TOO_BIG = "PRBMathUD60x18__ExpInputTooBig"
    UD_EXP2_INPUT_TOO_BIG = "PRBMathUD60x18__Exp2InputTooBig"
    UD_FROM_UINT_OVERFLOW = "PRBMathUD60x18__FromUintOverflow"
    UD_GM_OVERFLOW = "PRBMathUD60x18__GmOverflow"
    UD_LOG_INPUT_TOO_SMALL = "PRBMathUD60x18__LogInputTooSmall"
    UD_SQRT_OVERFLOW = "PRBMathUD60x18__SqrtOverflow"
    UD_SUB_UNDERFLOW = "PRBMathUD60x18__SubUnderflow"

    @property
    def category(self) -> ErrorCategory:
        """Whether this kind means undefined math, zero division or overflow."""
        if self is ErrorKind.DIVISION_BY_ZERO:
            return ErrorCategory.DIVISION_BY_ZERO
        if self in _DOMAIN_KINDS:
            return ErrorCategory.DOMAIN
        return ErrorCategory.OVERFLOW


_DOMAIN_KINDS = frozenset(
    {
        ErrorKind.SD_GM_NEGATIVE_PRODUCT,
        ErrorKind.SD_LOG_INPUT_TOO_SMALL,
        ErrorKind.SD_SQRT_NEGATIVE_INPUT,
        ErrorKind.UD_LOG_INPUT_TOO_SMALL,
    }
)


# =============================================================================
# Exceptions
# =============================================================================


class FixedPointError(ArithmeticError):
    """A fixed-point operation failed the way the on-chain call would revert.

    Attributes:
        kind: The failure kind (its value is the on-chain error identifier)
        message: Human-readable description
        operation: Name of the failing operation (e.g. "mul")
        operands: Raw scaled arguments of the revert, in declaration order
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        *,
        operation: str | None = None,
        operands: Mapping[str, int] | None = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.operation = operation
        self.operands: dict[str, int] = dict(operands or {})

    @classmethod
    def from_kind(
        cls,
        kind: ErrorKind,
        message: str,
        *,
        operation: str | None = None,
        operands: Mapping[str, int] | None = None,
    ) -> FixedPointError:
        """Build the exception subclass matching the kind's category."""
        error_cls = _CATEGORY_CLASSES[kind.category]
        return error_cls(kind, message, operation=operation, operands=operands)

    @property
    def category(self) -> ErrorCategory:
        return self.kind.category

    @property
    def revert_reason(self) -> str:
        """Render the failure like a decoded Solidity revert: ``Name(arg, ...)``."""
        if self.kind.value.startswith("Panic("):
            return self.kind.value
        args = ", ".join(str(v) for v in self.operands.values())
        return f"{self.kind.value}({args})"

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.kind.name}, {self.message!r})"


class FixedPointOverflowError(FixedPointError):
    """The result (or an intermediate value) does not fit in the format."""

    pass


class FixedPointDomainError(FixedPointError):
    """The operation is mathematically undefined for the given input."""

    pass


class FixedPointDivisionByZeroError(FixedPointError):
    """Division or inversion by zero."""

    pass


_CATEGORY_CLASSES: dict[ErrorCategory, type[FixedPointError]] = {
    ErrorCategory.OVERFLOW: FixedPointOverflowError,
    ErrorCategory.DOMAIN: FixedPointDomainError,
    ErrorCategory.DIVISION_BY_ZERO: FixedPointDivisionByZeroError,
}


class EngineAlreadyConfiguredError(RuntimeError):
    """The engine was already built with a different configuration."""

    pass


__all__ = [
    "ErrorCategory",
    "ErrorKind",
    "FixedPointError",
    "FixedPointOverflowError",
    "FixedPointDomainError",
    "FixedPointDivisionByZeroError",
    "EngineAlreadyConfiguredError",
]
