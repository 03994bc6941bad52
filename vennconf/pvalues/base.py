"""
P-value Calculator Interface

A p-value calculator is built from the nonconformity scores of a calibration
set and maps in both directions between confidence levels and
nonconformity scores:

* ``get_nc_score(confidence)`` returns the largest nonconformity score that
  still belongs to the prediction region at ``confidence``.
* ``get_pvalue(ncs)`` returns the p-value of a new nonconformity score.
"""

import logging
import math
from abc import ABC, abstractmethod
from typing import Iterable, Optional, Tuple

import numpy as np

from ..utils.exceptions import NotTrainedError

logger = logging.getLogger(__name__)


class PValueCalculator(ABC):
    """Base class for all p-value calculators."""

    name: str = "abstract"
    calculator_id: int = 0
    min_calibration_size: int = 2

    def __init__(self):
        self._scores: Optional[np.ndarray] = None
        self._warned_high_confidence = False

    def build(self, scores: Iterable[float]) -> "PValueCalculator":
        """Fit the calculator on calibration nonconformity scores."""
        sorted_scores = np.sort(np.asarray(list(scores), dtype=float))
        if sorted_scores.size < self.min_calibration_size:
            raise ValueError(
                f"{self.name} requires at least {self.min_calibration_size} calibration "
                f"scores, got {sorted_scores.size}"
            )
        if np.any(np.isnan(sorted_scores)):
            raise ValueError("Calibration scores must not contain NaN")

        self._scores = sorted_scores
        self._warned_high_confidence = False
        self._fit(sorted_scores)
        logger.debug(f"Built {self.name} p-value calculator on {sorted_scores.size} scores")
        return self

    def _fit(self, sorted_scores: np.ndarray) -> None:
        """Hook for subclasses that precompute state from the sorted scores."""

    def is_ready(self) -> bool:
        return self._scores is not None

    def get_ncs_scores(self) -> Tuple[float, ...]:
        """Sorted calibration scores as an immutable tuple."""
        self._check_ready()
        return tuple(float(s) for s in self._scores)

    @property
    def num_calibration_scores(self) -> int:
        self._check_ready()
        return int(self._scores.size)

    def get_nc_score(self, confidence: float) -> float:
        """Nonconformity threshold for ``confidence`` (``+inf`` if unsupported)."""
        self._check_confidence(confidence)
        self._check_ready()
        return self._nc_score(float(confidence))

    def get_pvalue(self, ncs: float) -> float:
        """P-value of the nonconformity score ``ncs``."""
        self._check_ready()
        return self._pvalue(float(ncs))

    @abstractmethod
    def _nc_score(self, confidence: float) -> float:
        ...

    @abstractmethod
    def _pvalue(self, ncs: float) -> float:
        ...

    def set_rng_seed(self, seed: int) -> None:
        """Deterministic calculators ignore the seed."""

    def get_rng_seed(self) -> Optional[int]:
        return None

    def get_config(self) -> dict:
        return {}

    def clone(self) -> "PValueCalculator":
        """Unbuilt calculator with the same configuration."""
        return type(self)(**self.get_config())

    def _check_confidence(self, confidence: float) -> None:
        if confidence is None or math.isnan(confidence) or confidence < 0 or confidence > 1:
            raise ValueError(f"Confidence must be in the range [0,1], got {confidence}")

    def _check_ready(self) -> None:
        if not self.is_ready():
            raise NotTrainedError(f"{self.name} p-value calculator must be built before use")

    def _max_supported_confidence(self) -> float:
        n = self._scores.size
        return n / (n + 1.0)

    def _too_high_confidence(self, confidence: float) -> float:
        if not self._warned_high_confidence:
            logger.debug(
                f"Confidence {confidence} is higher than supported by a calibration set of "
                f"{self._scores.size} scores, returning infinite nonconformity score"
            )
            self._warned_high_confidence = True
        return math.inf

    def __repr__(self) -> str:
        state = f"n={self._scores.size}" if self.is_ready() else "unbuilt"
        return f"{type(self).__name__}({state})"
