"""
P-value Calculators

Strategies that turn calibration nonconformity scores into p-values and
confidence thresholds.
"""

from .base import PValueCalculator
from .interpolated import LinearInterpolationPValue, SplineInterpolationPValue
from .interpolation import get_confidence_to_ncs, get_ncs_to_pvalue
from .registry import available_calculators, get_calculator, get_calculator_class
from .standard import SmoothedPValue, StandardPValue

__all__ = [
    "PValueCalculator",
    "StandardPValue",
    "SmoothedPValue",
    "LinearInterpolationPValue",
    "SplineInterpolationPValue",
    "get_confidence_to_ncs",
    "get_ncs_to_pvalue",
    "available_calculators",
    "get_calculator",
    "get_calculator_class",
]
