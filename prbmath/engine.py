"""High-precision decimal engine shared by every fixed-point operation.

The engine wraps two decimal contexts built once per process:

- an arithmetic context (ROUND_DOWN) for add/multiply/divide/mean/modulo, so
  that truncating the working value to 18 decimals gives the same digits as
  truncating the exact value;
- a transcendental context (ROUND_HALF_EVEN) for exp/log/pow/sqrt, which the
  decimal module rounds correctly at the working precision.

Only the primitives listed in HighPrecisionEngine.PRIMITIVES are exposed.
Every operation in prbmath.functions is built from these and nothing else.

Usage:
    from prbmath.engine import get_engine

    engine = get_engine()
    root = engine.sqrt(Decimal(2))
"""

from __future__ import annotations

import decimal
import threading
from decimal import Decimal
from typing import ClassVar

import structlog

from prbmath.config import EngineConfig
from prbmath.errors import EngineAlreadyConfiguredError

logger = structlog.get_logger()

_TRAPS = [decimal.InvalidOperation, decimal.DivisionByZero, decimal.Overflow]

_TWO = Decimal(2)


class HighPrecisionEngine:
    """Fixed-precision decimal primitives.

    Instances are immutable after construction and safe to share between
    threads: each call enters a thread-local copy of the engine's context.
    """

    PRIMITIVES: ClassVar[frozenset[str]] = frozenset(
        {
            "add",
            "subtract",
            "multiply",
            "divide",
            "compare",
            "ceil",
            "floor",
            "exp",
            "ln",
            "log2",
            "log10",
            "mean",
            "mod",
            "pow",
            "sqrt",
        }
    )

    __slots__ = ("_config", "_arithmetic", "_transcendental", "_guarded")

    def __init__(self, config: EngineConfig) -> None:
        self._config = config
        self._arithmetic = _make_context(config.precision, decimal.ROUND_DOWN)
        self._transcendental = _make_context(config.precision, decimal.ROUND_HALF_EVEN)
        self._guarded = _make_context(
            config.precision + config.guard_digits, decimal.ROUND_HALF_EVEN
        )

    @property
    def config(self) -> EngineConfig:
        return self._config

    @property
    def precision(self) -> int:
        """Significant decimal digits carried by every primitive."""
        return self._config.precision

    def __repr__(self) -> str:
        return f"HighPrecisionEngine(precision={self.precision})"

    # --- Arithmetic ---

    def add(self, a: Decimal, b: Decimal) -> Decimal:
        with decimal.localcontext(self._arithmetic):
            return a + b

    def subtract(self, a: Decimal, b: Decimal) -> Decimal:
        with decimal.localcontext(self._arithmetic):
            return a - b

    def multiply(self, a: Decimal, b: Decimal) -> Decimal:
        with decimal.localcontext(self._arithmetic):
            return a * b

    def divide(self, a: Decimal, b: Decimal) -> Decimal:
        """Quotient a / b truncated at the working precision.

        Raises:
            decimal.DivisionByZero: If b is zero (callers check first)
        """
        with decimal.localcontext(self._arithmetic):
            return a / b

    def mean(self, a: Decimal, b: Decimal) -> Decimal:
        """Arithmetic mean of two values."""
        with decimal.localcontext(self._arithmetic):
            return (a + b) / _TWO

    def mod(self, a: Decimal, m: Decimal) -> Decimal:
        """Mathematical modulo: the remainder takes the sign of the divisor.

        The decimal module's % follows the dividend, so shift by one divisor
        when the signs disagree.
        """
        with decimal.localcontext(self._arithmetic):
            remainder = a % m
            if remainder and (remainder < 0) != (m < 0):
                remainder += m
            return remainder

    def compare(self, a: Decimal, b: Decimal) -> int:
        """Return -1, 0 or 1 as a is less than, equal to or greater than b."""
        with decimal.localcontext(self._arithmetic):
            return int(a.compare(b))

    def ceil(self, a: Decimal) -> Decimal:
        with decimal.localcontext(self._arithmetic):
            return a.to_integral_value(rounding=decimal.ROUND_CEILING)

    def floor(self, a: Decimal) -> Decimal:
        with decimal.localcontext(self._arithmetic):
            return a.to_integral_value(rounding=decimal.ROUND_FLOOR)

    # --- Transcendental ---

    def exp(self, a: Decimal) -> Decimal:
        return a.exp(self._transcendental)

    def ln(self, a: Decimal) -> Decimal:
        return a.ln(self._transcendental)

    def log10(self, a: Decimal) -> Decimal:
        return a.log10(self._transcendental)

    def log2(self, a: Decimal) -> Decimal:
        """Binary logarithm, exact for powers of two.

        Computed as ln(a) / ln(2) with guard digits, then rounded back to the
        working precision so that log2(2^k) lands exactly on k.
        """
        with decimal.localcontext(self._guarded) as ctx:
            quotient = ctx.divide(a.ln(ctx), _TWO.ln(ctx))
        return self._transcendental.plus(quotient)

    def pow(self, base: Decimal, exponent: Decimal) -> Decimal:
        """base ** exponent; integral exponents take the exact-power path."""
        return self._transcendental.power(base, exponent)

    def sqrt(self, a: Decimal) -> Decimal:
        return a.sqrt(self._transcendental)


def _make_context(precision: int, rounding: str) -> decimal.Context:
    return decimal.Context(
        prec=precision,
        rounding=rounding,
        Emax=decimal.MAX_EMAX,
        Emin=decimal.MIN_EMIN,
        traps=_TRAPS,
    )


# =============================================================================
# Process-wide instance
# =============================================================================

_engine: HighPrecisionEngine | None = None
_engine_lock = threading.Lock()


def configure_engine(config: EngineConfig) -> HighPrecisionEngine:
    """Build the process-wide engine from an explicit config.

    Calling again with an equal config returns the existing engine.

    Raises:
        EngineAlreadyConfiguredError: If the engine already exists with a
            different config
    """
    global _engine
    with _engine_lock:
        if _engine is None:
            _engine = HighPrecisionEngine(config)
            logger.info(
                "engine_configured",
                precision=config.precision,
                guard_digits=config.guard_digits,
            )
        elif _engine.config != config:
            raise EngineAlreadyConfiguredError(
                f"Engine already configured with {_engine.config}, cannot switch to {config}"
            )
        return _engine


def get_engine() -> HighPrecisionEngine:
    """Return the process-wide engine, building it from the environment on first use."""
    engine = _engine
    if engine is not None:
        return engine
    with _engine_lock:
        if _engine is not None:
            return _engine
    return configure_engine(EngineConfig.from_env())


def _reset_engine() -> None:
    """Drop the process-wide engine. Test-only."""
    global _engine
    with _engine_lock:
        _engine = None


__all__ = [
    "HighPrecisionEngine",
    "configure_engine",
    "get_engine",
]
