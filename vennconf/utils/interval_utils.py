"""Helpers for capping and combining prediction intervals."""

import logging
import math
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PredictionInterval:
    """Closed interval ``[lower, upper]`` produced by a regression predictor."""
    lower: float
    upper: float

    @property
    def width(self) -> float:
        return self.upper - self.lower

    def contains(self, value: float) -> bool:
        return self.lower <= value <= self.upper


def cap_interval(interval: PredictionInterval, min_observed: float,
                 max_observed: float) -> PredictionInterval:
    """Cap an interval to the range of observed labels.

    NaN endpoints are replaced by the observed bounds. An interval that lies
    completely outside the observed range collapses to the nearest bound.
    """
    if min_observed > max_observed:
        raise ValueError(
            f"Invalid observed range: min {min_observed} is greater than max {max_observed}"
        )

    lower = interval.lower
    upper = interval.upper
    if math.isnan(lower):
        logger.debug(f"NaN lower endpoint, using observed minimum {min_observed}")
        lower = min_observed
    if math.isnan(upper):
        logger.debug(f"NaN upper endpoint, using observed maximum {max_observed}")
        upper = max_observed

    if lower > max_observed:
        return PredictionInterval(max_observed, max_observed)
    if upper < min_observed:
        return PredictionInterval(min_observed, min_observed)

    return PredictionInterval(max(lower, min_observed), min(upper, max_observed))


def intersection(a: PredictionInterval, b: PredictionInterval) -> PredictionInterval:
    """Intersection of two intervals; ``ValueError`` if they are disjoint."""
    lower = max(a.lower, b.lower)
    upper = min(a.upper, b.upper)
    if lower > upper:
        raise ValueError(f"Intervals {a} and {b} do not intersect")
    return PredictionInterval(lower, upper)
