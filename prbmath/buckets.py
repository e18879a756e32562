"""Price-bucket oracle.

Prices live on a geometric grid: bucket `i` has price 1.005^i, for integer
indexes in [MIN_BUCKET_INDEX, MAX_BUCKET_INDEX]. Both directions are
computed in SD59x18 through the same operation set a pool contract uses,
so the results serve as expected values for on-chain bucket math.

    index_to_price(i) = 2^(i * log2(1.005))
    price_to_index(p) = floor(log2(p) / log2(1.005))
"""

from __future__ import annotations

from prbmath.functions import sd59x18

__all__ = [
    "PRICE_STEP",
    "MIN_BUCKET_INDEX",
    "MAX_BUCKET_INDEX",
    "MIN_PRICE",
    "MAX_PRICE",
    "index_to_price",
    "price_to_index",
    "price_to_index_safe",
]

# 1.005: each bucket is 0.5% above the previous one
PRICE_STEP = 1_005000000000000000

MIN_BUCKET_INDEX = -3232
MAX_BUCKET_INDEX = 4156

# Prices of the extreme buckets (scaled by 10^18)
MIN_PRICE = 99836282890
MAX_PRICE = 1_004968987606512354182109771


def _log2_step() -> int:
    return sd59x18.log2(PRICE_STEP)


def index_to_price(index: int) -> int:
    """Price of a bucket index, scaled by 10^18.

    Args:
        index: Bucket index in [MIN_BUCKET_INDEX, MAX_BUCKET_INDEX]

    Returns:
        1.005^index as an SD59x18 value

    Raises:
        ValueError: If the index is outside the bucket range
    """
    if not MIN_BUCKET_INDEX <= index <= MAX_BUCKET_INDEX:
        raise ValueError(
            f"Bucket index {index} outside [{MIN_BUCKET_INDEX}, {MAX_BUCKET_INDEX}]"
        )
    exponent = sd59x18.mul(sd59x18.from_int(index), _log2_step())
    return sd59x18.exp2(exponent)


def price_to_index(price: int) -> int:
    """Index of the highest bucket whose price does not exceed `price`.

    Args:
        price: Price scaled by 10^18, in [MIN_PRICE, MAX_PRICE]

    Returns:
        floor(log_1.005(price)) as a plain integer

    Raises:
        ValueError: If the price is outside [MIN_PRICE, MAX_PRICE]
    """
    if not MIN_PRICE <= price <= MAX_PRICE:
        raise ValueError(f"Price {price} outside [{MIN_PRICE}, {MAX_PRICE}]")
    ratio = sd59x18.div(sd59x18.log2(price), _log2_step())
    return sd59x18.to_int(sd59x18.floor(ratio))


def price_to_index_safe(price: int) -> int:
    """Like price_to_index, but clamps the price and the index into the bucket range.

    MIN_PRICE and MAX_PRICE are truncated bucket prices, so their floor index
    can land one bucket outside the range.
    """
    index = price_to_index(min(max(price, MIN_PRICE), MAX_PRICE))
    return min(max(index, MIN_BUCKET_INDEX), MAX_BUCKET_INDEX)

