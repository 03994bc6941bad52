"""Rank based conformal p-values, deterministic and smoothed."""

import logging
import math
from typing import Optional

import numpy as np

from ..utils.math_utils import DEFAULT_TOLERANCE, approx_equal
from .base import PValueCalculator

logger = logging.getLogger(__name__)


class StandardPValue(PValueCalculator):
    """Conservative conformal p-value, ties count as at least as nonconforming."""

    name = "Standard"
    calculator_id = 1
    min_calibration_size = 2

    def _nc_score(self, confidence: float) -> float:
        if confidence > self._max_supported_confidence():
            return self._too_high_confidence(confidence)
        n = self._scores.size
        index = min(n - 1, max(0, math.ceil(confidence * (n + 1)) - 1))
        return float(self._scores[index])

    def _pvalue(self, ncs: float) -> float:
        n = self._scores.size
        # number of calibration scores >= ncs
        num_greater_equal = n - int(np.searchsorted(self._scores, ncs, side="left"))
        return (num_greater_equal + 1.0) / (n + 1.0)


class SmoothedPValue(StandardPValue):
    """Smoothed conformal p-value with randomised tie breaking.

    Ties with the query score are weighted by a uniform draw from an
    instance-owned generator, which makes the p-value exactly uniform under
    exchangeability. The generator is (re)created from the seed when the
    calculator is built and whenever the seed is changed.
    """

    name = "Smoothed"
    calculator_id = 2
    min_calibration_size = 2

    def __init__(self, seed: Optional[int] = None, tolerance: float = DEFAULT_TOLERANCE):
        super().__init__()
        if seed is None:
            seed = int(np.random.SeedSequence().entropy % (2 ** 32))
        self._seed = int(seed)
        self.tolerance = tolerance
        self._rng: Optional[np.random.Generator] = None

    def _fit(self, sorted_scores: np.ndarray) -> None:
        self._rng = np.random.default_rng(self._seed)

    def _pvalue(self, ncs: float) -> float:
        n = self._scores.size
        greater_than_current = 0
        equal_to_current = 0
        for score in self._scores[::-1]:
            if score > ncs and not approx_equal(score, ncs, self.tolerance):
                greater_than_current += 1
            elif approx_equal(score, ncs, self.tolerance):
                equal_to_current += 1
            else:
                break
        # the query example itself
        equal_to_current += 1
        return (greater_than_current + self._rng.random() * equal_to_current) / (n + 1.0)

    def set_rng_seed(self, seed: int) -> None:
        self._seed = int(seed)
        if self.is_ready():
            self._rng = np.random.default_rng(self._seed)

    def get_rng_seed(self) -> Optional[int]:
        return self._seed

    def with_seed(self, seed: int) -> "SmoothedPValue":
        """New unbuilt calculator using ``seed``."""
        return SmoothedPValue(seed=seed, tolerance=self.tolerance)

    def get_config(self) -> dict:
        return {"seed": self._seed, "tolerance": self.tolerance}
