"""
Interpolating P-value Calculators

Both calculators map confidence to nonconformity score over the knots
``((i+1)/(n+1), s[i])`` and nonconformity score to p-value over one knot per
distinct calibration score. ``LinearInterpolationPValue`` connects the knots
with straight lines, ``SplineInterpolationPValue`` with natural cubic
splines that are kept monotone on every knot interval.
"""

import logging
from typing import Optional

import numpy as np
from scipy.interpolate import CubicSpline

from ..utils.math_utils import approx_equal, truncate
from .base import PValueCalculator
from .interpolation import get_confidence_to_ncs, get_ncs_to_pvalue

logger = logging.getLogger(__name__)


class _InterpolatedPValue(PValueCalculator):
    """Shared knot handling and range checks."""

    def __init__(self):
        super().__init__()
        self._conf_knots: Optional[np.ndarray] = None
        self._conf_values: Optional[np.ndarray] = None
        self._ncs_knots: Optional[np.ndarray] = None
        self._pvalue_values: Optional[np.ndarray] = None

    def _fit(self, sorted_scores: np.ndarray) -> None:
        self._conf_knots, self._conf_values = get_confidence_to_ncs(sorted_scores)
        self._ncs_knots, self._pvalue_values = get_ncs_to_pvalue(sorted_scores)
        self._fit_functions()

    def _fit_functions(self) -> None:
        """Hook for calculators that precompute interpolants."""

    def _nc_score(self, confidence: float) -> float:
        min_conf = self._conf_knots[0]
        max_conf = self._conf_knots[-1]
        if confidence <= min_conf:
            return float(self._conf_values[0])
        if confidence > max_conf:
            return self._too_high_confidence(confidence)
        if approx_equal(confidence, max_conf):
            return float(self._conf_values[-1])
        return self._interpolate_ncs(confidence)

    def _pvalue(self, ncs: float) -> float:
        n = self._scores.size
        if ncs <= self._scores[0]:
            return 1.0
        if ncs >= self._scores[-1]:
            return 1.0 / (n + 1.0)
        return truncate(self._interpolate_pvalue(ncs), 0.0, 1.0)

    def _interpolate_ncs(self, confidence: float) -> float:
        raise NotImplementedError

    def _interpolate_pvalue(self, ncs: float) -> float:
        raise NotImplementedError


class LinearInterpolationPValue(_InterpolatedPValue):
    """Piecewise linear interpolation between the calibration knots."""

    name = "LinearInterpolation"
    calculator_id = 3
    min_calibration_size = 2

    def _interpolate_ncs(self, confidence: float) -> float:
        return float(np.interp(confidence, self._conf_knots, self._conf_values))

    def _interpolate_pvalue(self, ncs: float) -> float:
        return float(np.interp(ncs, self._ncs_knots, self._pvalue_values))


def _monotone_intervals(spline: CubicSpline, increasing: bool) -> np.ndarray:
    """Flag the spline pieces whose derivative keeps one sign.

    Piece ``i`` is ``c0*t**3 + c1*t**2 + c2*t + c3`` for ``t`` in
    ``[0, h_i]``, so its derivative is a quadratic whose minimum lies at an
    end point or at the vertex.
    """
    c = spline.c
    h = np.diff(spline.x)
    sign = 1.0 if increasing else -1.0
    a = sign * 3.0 * c[0]
    b = sign * 2.0 * c[1]
    d = sign * c[2]

    min_slope = np.minimum(d, a * h * h + b * h + d)
    convex = a > 0
    safe_a = np.where(convex, a, 1.0)
    vertex = -b / (2.0 * safe_a)
    inside = convex & (vertex > 0) & (vertex < h)
    vertex_slope = d - b * b / (4.0 * safe_a)
    min_slope = np.where(inside, np.minimum(min_slope, vertex_slope), min_slope)
    return min_slope >= 0


class SplineInterpolationPValue(_InterpolatedPValue):
    """Natural cubic spline interpolation, monotone on every knot interval.

    Spline pieces that change direction between two knots are replaced by
    the straight line through those knots.
    """

    name = "SplineInterpolation"
    calculator_id = 4
    min_calibration_size = 3

    def __init__(self):
        super().__init__()
        self._conf_spline: Optional[CubicSpline] = None
        self._pvalue_spline: Optional[CubicSpline] = None
        self._conf_monotone: Optional[np.ndarray] = None
        self._pvalue_monotone: Optional[np.ndarray] = None

    def _fit_functions(self) -> None:
        self._conf_spline = CubicSpline(self._conf_knots, self._conf_values, bc_type="natural")
        self._conf_monotone = _monotone_intervals(self._conf_spline, increasing=True)
        # all-equal scores leave a single knot, those are never interpolated
        if self._ncs_knots.size >= 2:
            self._pvalue_spline = CubicSpline(self._ncs_knots, self._pvalue_values, bc_type="natural")
            self._pvalue_monotone = _monotone_intervals(self._pvalue_spline, increasing=False)
        else:
            self._pvalue_spline = None
            self._pvalue_monotone = None

        num_linear = int(np.sum(~self._conf_monotone))
        if num_linear:
            logger.debug(f"Spline falls back to linear on {num_linear} confidence intervals")

    def _interpolate_ncs(self, confidence: float) -> float:
        index = int(np.searchsorted(self._conf_knots, confidence, side="left"))
        if self._conf_knots[index] == confidence:
            return float(self._conf_values[index])
        low, high = index - 1, index
        if self._conf_monotone[low]:
            value = float(self._conf_spline(confidence))
        else:
            value = float(np.interp(confidence, self._conf_knots[low:high + 1], self._conf_values[low:high + 1]))
        return truncate(value, self._conf_values[low], self._conf_values[high])

    def _interpolate_pvalue(self, ncs: float) -> float:
        index = int(np.searchsorted(self._ncs_knots, ncs, side="left"))
        if self._ncs_knots[index] == ncs:
            return float(self._pvalue_values[index])
        low, high = index - 1, index
        if self._pvalue_monotone[low]:
            value = float(self._pvalue_spline(ncs))
        else:
            value = float(np.interp(ncs, self._ncs_knots[low:high + 1], self._pvalue_values[low:high + 1]))
        # p-values decrease with the score
        return truncate(value, self._pvalue_values[high], self._pvalue_values[low])
