"""Numeric helpers used by the p-value calculators and Venn-ABERS fusion."""

import math
from typing import Iterable, Sequence

import numpy as np

DEFAULT_TOLERANCE = 1e-5


def truncate(value: float, lower: float = 0.0, upper: float = 1.0) -> float:
    """Clamp ``value`` into ``[lower, upper]``."""
    if lower > upper:
        raise ValueError(f"lower bound {lower} is greater than upper bound {upper}")
    return float(min(max(value, lower), upper))


def approx_equal(a: float, b: float, tolerance: float = DEFAULT_TOLERANCE) -> bool:
    """Tolerance based equality.

    Two NaNs compare equal and infinities are equal only to an infinity of the
    same sign.
    """
    if math.isnan(a) or math.isnan(b):
        return math.isnan(a) and math.isnan(b)
    if math.isinf(a) or math.isinf(b):
        return a == b
    return abs(a - b) < tolerance


def geometric_mean(values: Iterable[float]) -> float:
    """Geometric mean computed in log space.

    Returns 0 for an empty input or when any value is 0.
    """
    arr = np.asarray(list(values), dtype=float)
    if arr.size == 0 or np.any(arr == 0):
        return 0.0
    if np.any(arr < 0):
        raise ValueError("Geometric mean is only defined for non-negative values")
    return float(np.exp(np.mean(np.log(arr))))


def mean(values: Sequence[float]) -> float:
    if len(values) == 0:
        return float("nan")
    return float(np.mean(values))


def median(values: Sequence[float]) -> float:
    if len(values) == 0:
        return float("nan")
    return float(np.median(values))
