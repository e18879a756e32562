"""Reference vectors: expected outcomes of fixed-point calls.

A vector names a format, an operation and its raw inputs, and records either
the expected raw result or the error kind the call must fail with. Vectors
are stored as JSON lists and checked against the reference implementation,
or used as the expected side when checking a deployed contract.

Example vector:
    {"format": "sd59x18", "operation": "mul",
     "inputs": ["2000000000000000000", "1500000000000000000"],
     "expected": "3000000000000000000"}
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, Any, Literal

import structlog
from pydantic import BaseModel, BeforeValidator, Field, field_validator, model_validator

from prbmath.errors import ErrorKind, FixedPointError
from prbmath.functions import OPERATIONS, get_math

logger = structlog.get_logger()


def validate_int256(value: Any) -> int:
    """Accept a raw value as int or decimal string.

    JSON cannot hold 256-bit integers portably, so strings are the usual form.

    Raises:
        ValueError: If value is not an integer or a decimal integer string
    """
    if isinstance(value, bool):
        raise ValueError("Raw value cannot be a boolean")
    if isinstance(value, int):
        return value
    if not isinstance(value, str):
        raise ValueError(f"Raw value must be string or int, got {type(value).__name__}")
    try:
        return int(value.replace("_", ""))
    except ValueError as err:
        raise ValueError(f"Raw value must be a decimal integer string: '{value}'") from err


# Raw scaled integer given as int or decimal string
RawValue = Annotated[int, BeforeValidator(validate_int256)]


class ReferenceVector(BaseModel):
    """One fixed-point call and its expected outcome."""

    format: Literal["sd59x18", "ud60x18"]
    operation: str
    inputs: list[RawValue] = Field(min_length=1, max_length=2)
    expected: RawValue | None = None
    error: ErrorKind | None = None
    description: str | None = None

    @field_validator("format", mode="before")
    @classmethod
    def lowercase_format(cls, value: Any) -> Any:
        return value.lower() if isinstance(value, str) else value

    @field_validator("error", mode="before")
    @classmethod
    def error_by_name_or_value(cls, value: Any) -> Any:
        """Accept either the enum name (SD_CEIL_OVERFLOW) or the on-chain identifier."""
        if isinstance(value, str) and value in ErrorKind.__members__:
            return ErrorKind[value]
        return value

    @model_validator(mode="after")
    def check_shape(self) -> ReferenceVector:
        if self.operation not in OPERATIONS:
            raise ValueError(f"Unknown operation: {self.operation!r}")
        arity = OPERATIONS[self.operation]
        if len(self.inputs) != arity:
            raise ValueError(
                f"{self.operation} takes {arity} input(s), got {len(self.inputs)}"
            )
        if (self.expected is None) == (self.error is None):
            raise ValueError("Exactly one of 'expected' or 'error' must be set")
        return self


@dataclass(frozen=True)
class VectorOutcome:
    """What the reference implementation produced for a vector.

    Attributes:
        value: Raw result, or None if the call failed
        error: Failure kind, or None if the call succeeded
        detail: Error message for failed calls
    """

    value: int | None
    error: ErrorKind | None = None
    detail: str | None = None

    @property
    def is_error(self) -> bool:
        return self.error is not None

    def matches(self, vector: ReferenceVector) -> bool:
        """True if this outcome is exactly what the vector expects."""
        if vector.error is not None:
            return self.error is vector.error
        return self.error is None and self.value == vector.expected


def evaluate(vector: ReferenceVector) -> VectorOutcome:
    """Run the vector's call through the reference implementation.

    FixedPointError is captured in the outcome; invalid inputs (TypeError,
    ValueError) propagate since they describe a broken vector.
    """
    math = get_math(vector.format)
    operation = getattr(math, vector.operation)
    try:
        return VectorOutcome(value=operation(*vector.inputs))
    except FixedPointError as err:
        return VectorOutcome(value=None, error=err.kind, detail=err.message)


def check_vector(vector: ReferenceVector) -> bool:
    """Evaluate a vector and report whether the outcome matches."""
    outcome = evaluate(vector)
    if outcome.matches(vector):
        return True
    logger.warning(
        "vector_mismatch",
        fmt=vector.format,
        operation=vector.operation,
        inputs=[str(i) for i in vector.inputs],
        expected=str(vector.expected) if vector.error is None else vector.error.name,
        actual=str(outcome.value) if outcome.error is None else outcome.error.name,
    )
    return False


def load_vectors(path: Path | str) -> list[ReferenceVector]:
    """Load a JSON list of vectors.

    Raises:
        pydantic.ValidationError: If an entry is malformed
    """
    with open(path) as f:
        data = json.load(f)
    return [ReferenceVector.model_validate(entry) for entry in data]


__all__ = [
    "RawValue",
    "ReferenceVector",
    "VectorOutcome",
    "evaluate",
    "check_vector",
    "load_vectors",
    "validate_int256",
]
