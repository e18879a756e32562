"""Pytest configuration and fixtures."""

from collections.abc import Iterator
from pathlib import Path

import pytest

from prbmath.engine import _reset_engine
from prbmath.functions import FixedPointMath, sd59x18, ud60x18

FIXTURES_DIR = Path(__file__).parent / "fixtures"
VECTORS_DIR = FIXTURES_DIR / "vectors"


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the fixtures directory path."""
    return FIXTURES_DIR


@pytest.fixture
def vectors_dir() -> Path:
    """Return the reference vectors directory path."""
    return VECTORS_DIR


@pytest.fixture
def sd() -> FixedPointMath:
    """Signed SD59x18 operation set."""
    return sd59x18


@pytest.fixture
def ud() -> FixedPointMath:
    """Unsigned UD60x18 operation set."""
    return ud60x18


@pytest.fixture
def fresh_engine(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Drop the process-wide engine (and env overrides) around the test."""
    monkeypatch.delenv("PRBMATH_PRECISION", raising=False)
    monkeypatch.delenv("PRBMATH_GUARD_DIGITS", raising=False)
    _reset_engine()
    yield
    _reset_engine()
