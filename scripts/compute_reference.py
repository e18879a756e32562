#!/usr/bin/env python3
"""Compute one PRBMath reference value from the command line.

Usage:
    python scripts/compute_reference.py sd59x18 mul 2000000000000000000 1500000000000000000
    python scripts/compute_reference.py ud60x18 ln 0 --verbose
    python scripts/compute_reference.py --vectors tests/fixtures/vectors/sd59x18.json

Exit codes:
    0 - Result computed (or every vector matched)
    1 - The call reverted (or a vector mismatched)
    2 - Invalid arguments
"""

import argparse
import logging
import sys
from pathlib import Path

import structlog

from prbmath.errors import FixedPointError
from prbmath.functions import OPERATIONS, get_math
from prbmath.vectors import check_vector, load_vectors

logger = structlog.get_logger()


def run_single(format_name: str, operation: str, raw_args: list[str]) -> int:
    """Evaluate one call and print the raw result or the revert reason."""
    if operation not in OPERATIONS:
        print(f"Error: unknown operation {operation!r}")
        return 2
    if len(raw_args) != OPERATIONS[operation]:
        print(f"Error: {operation} takes {OPERATIONS[operation]} argument(s), got {len(raw_args)}")
        return 2

    try:
        math = get_math(format_name)
        args = [int(a.replace("_", "")) for a in raw_args]
        result = getattr(math, operation)(*args)
    except FixedPointError as err:
        print(f"revert: {err.revert_reason}")
        print(f"        {err.message}")
        return 1
    except (TypeError, ValueError) as err:
        print(f"Error: {err}")
        return 2

    print(result)
    return 0


def run_vectors(path: Path) -> int:
    """Check every vector in a JSON file, printing a summary."""
    if not path.exists():
        logger.error("vectors_file_not_found", path=str(path))
        print(f"Error: vectors file not found: {path}")
        return 2

    vectors = load_vectors(path)
    failures = sum(1 for vector in vectors if not check_vector(vector))
    print(f"{len(vectors) - failures}/{len(vectors)} vectors matched")
    return 1 if failures else 0


def main() -> int:
    parser = argparse.ArgumentParser(description="Compute PRBMath reference values")
    parser.add_argument("format", nargs="?", help="sd59x18 or ud60x18")
    parser.add_argument("operation", nargs="?", help=f"One of: {', '.join(sorted(OPERATIONS))}")
    parser.add_argument("args", nargs="*", help="Raw scaled integer arguments")
    parser.add_argument(
        "--vectors",
        type=Path,
        default=None,
        help="Check a JSON file of reference vectors instead of a single call",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )

    args = parser.parse_args()

    log_level = logging.DEBUG if args.verbose else logging.INFO
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
    )

    if args.vectors is not None:
        return run_vectors(args.vectors)

    if args.format is None or args.operation is None:
        parser.print_usage()
        return 2

    return run_single(args.format, args.operation, args.args)


if __name__ == "__main__":
    sys.exit(main())
