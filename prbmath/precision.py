"""Digit-level comparison of an on-chain result with its reference value.

On-chain logarithms and exponentials are approximations, so integration
checks compare the leading digits rather than the full 18-decimal value.
"""


def leading_digits(number: int, count: int = 12) -> int:
    """First `count` decimal digits of |number| (fewer if it is shorter).

    Raises:
        ValueError: If count is not positive
    """
    if count <= 0:
        raise ValueError(f"Digit count must be positive, got {count}")
    return int(str(abs(number))[:count])


def matching_digits(a: int, b: int) -> int:
    """Number of leading decimal digits two integers share.

    Signs must agree for any digit to count.

    Examples:
        matching_digits(123456, 123499) == 4
        matching_digits(5, 6) == 0
    """
    if (a < 0) != (b < 0):
        return 0
    digits_a, digits_b = str(abs(a)), str(abs(b))
    matched = 0
    for char_a, char_b in zip(digits_a, digits_b):
        if char_a != char_b:
            break
        matched += 1
    return matched


__all__ = ["leading_digits", "matching_digits"]
