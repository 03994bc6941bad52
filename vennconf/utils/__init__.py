"""Shared utilities for vennconf."""

from .exceptions import NotTrainedError, VennConfError
from .interval_utils import PredictionInterval, cap_interval, intersection
from .math_utils import approx_equal, geometric_mean, mean, median, truncate

__all__ = [
    "NotTrainedError",
    "VennConfError",
    "PredictionInterval",
    "cap_interval",
    "intersection",
    "approx_equal",
    "geometric_mean",
    "mean",
    "median",
    "truncate",
]
