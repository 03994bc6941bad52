"""Isotonic regression over Venn-ABERS calibration points."""

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np
from sklearn.isotonic import IsotonicRegression

from ..utils.exceptions import NotTrainedError
from ..utils.math_utils import truncate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CalibrationPoint:
    """Calibration score with a binary label and a weight."""
    score: float
    label: int
    weight: float = 1.0

    def __post_init__(self):
        if self.label not in (0, 1):
            raise ValueError(f"Calibration point label must be 0 or 1, got {self.label}")
        if self.weight <= 0:
            raise ValueError(f"Calibration point weight must be positive, got {self.weight}")


class IsotonicCalibrator:
    """Monotone non-decreasing least squares fit of labels against scores."""

    def __init__(self):
        self._regressor: Optional[IsotonicRegression] = None

    @property
    def is_fitted(self) -> bool:
        return self._regressor is not None

    def fit(self, points: Sequence[CalibrationPoint]) -> "IsotonicCalibrator":
        if len(points) == 0:
            raise ValueError("Cannot fit isotonic regression without calibration points")
        x = np.array([p.score for p in points], dtype=float)
        y = np.array([p.label for p in points], dtype=float)
        w = np.array([p.weight for p in points], dtype=float)

        regressor = IsotonicRegression(y_min=0.0, y_max=1.0, increasing=True, out_of_bounds="clip")
        regressor.fit(x, y, sample_weight=w)
        self._regressor = regressor
        return self

    def predict(self, score: float) -> float:
        """Fitted value at ``score``, truncated to [0,1]."""
        if self._regressor is None:
            raise NotTrainedError("Isotonic calibrator must be fitted before making predictions")
        value = float(self._regressor.predict(np.array([score], dtype=float))[0])
        return truncate(value, 0.0, 1.0)


def fit_and_predict(points: Sequence[CalibrationPoint], score: float) -> float:
    """Fit on ``points`` and read the fitted value at ``score``."""
    return IsotonicCalibrator().fit(points).predict(score)
