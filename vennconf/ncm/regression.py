"""
Nonconformity Measures for Regression

Every measure predicts a midpoint ``y_hat`` and a per example scaling
``sigma``; nonconformity scores are ``|y - y_hat| / sigma`` and prediction
intervals are ``y_hat +/- threshold * sigma``.
"""

import logging
import math
import sys
from typing import Optional, Tuple

import numpy as np

from ..data.dataset import Dataset
from ..models.scorers import RegressionScorer
from ..utils.exceptions import NotTrainedError

logger = logging.getLogger(__name__)

_MIN_POSITIVE = sys.float_info.min


class NCMRegression:
    """Base class for regression nonconformity measures."""

    name = "abstract"

    def __init__(self, model: RegressionScorer):
        if not isinstance(model, RegressionScorer):
            raise ValueError(f"{self.name} requires a RegressionScorer, got {type(model).__name__}")
        self.model = model

    def train_ncm(self, dataset: Dataset) -> "NCMRegression":
        self.model.train(dataset)
        return self

    @property
    def is_fitted(self) -> bool:
        return self.model.is_fitted

    def predict_midpoint(self, example) -> float:
        self._check_fitted()
        return self.model.predict_value(example)

    def interval_scaling(self, example) -> float:
        return 1.0

    def calculate_ncs(self, example, label: float) -> float:
        self._check_fitted()
        residual = abs(float(label) - self.model.predict_value(example))
        return residual / self.interval_scaling(example)

    def predict_interval(self, example, threshold: float) -> Tuple[float, float]:
        """Interval around the prediction, infinite bounds for an infinite threshold."""
        self._check_fitted()
        if threshold < 0:
            raise ValueError(f"Threshold must be non-negative, got {threshold}")
        midpoint = self.predict_midpoint(example)
        if math.isinf(threshold):
            return -math.inf, math.inf
        half_width = threshold * self.interval_scaling(example)
        return midpoint - half_width, midpoint + half_width

    def holds_resources(self) -> bool:
        return self.model.holds_resources()

    def release_resources(self) -> bool:
        return self.model.release_resources()

    def clone(self) -> "NCMRegression":
        return type(self)(self.model.clone())

    def _check_fitted(self) -> None:
        if not self.is_fitted:
            raise NotTrainedError(f"{self.name} requires a fitted model, call train_ncm first")


class AbsoluteDifferenceNCM(NCMRegression):
    """ncs = |y - y_hat|, intervals are ``y_hat +/- threshold``."""

    name = "AbsoluteDifference"


class LogNormalizedNCM(NCMRegression):
    """Residuals normalised by an error model trained on log residuals.

    The error model predicts ``log|y - y_hat|`` from the features, giving
    ``sigma = exp(e_hat) + beta``. Easy examples get narrow intervals and
    hard ones wide intervals; ``beta`` limits the influence of the error
    model and keeps ``sigma`` away from zero.
    """

    name = "LogNormalized"
    DEFAULT_BETA = 0.01

    def __init__(self, model: RegressionScorer, error_model: Optional[RegressionScorer] = None,
                 beta: float = DEFAULT_BETA):
        super().__init__(model)
        if beta < 0:
            raise ValueError(f"Beta must be in the range [0, inf), got {beta}")
        if error_model is None:
            logger.debug("No error model given, using the settings of the scoring model")
            error_model = model.clone()
        elif not isinstance(error_model, RegressionScorer):
            raise ValueError(f"Error model must be a RegressionScorer, got {type(error_model).__name__}")
        self.error_model = error_model
        self.beta = float(beta)

    def train_ncm(self, dataset: Dataset) -> "LogNormalizedNCM":
        self.model.train(dataset)
        residuals = np.abs(dataset.labels.astype(float) - self.model.predict_values(dataset.features))
        log_residuals = np.log(np.maximum(residuals, _MIN_POSITIVE))
        self.error_model.train(Dataset(dataset.features, log_residuals))
        logger.debug(f"Trained {self.name} error model on {len(dataset)} records")
        return self

    @property
    def is_fitted(self) -> bool:
        return self.model.is_fitted and self.error_model.is_fitted

    def interval_scaling(self, example) -> float:
        self._check_fitted()
        return max(math.exp(self.error_model.predict_value(example)) + self.beta, _MIN_POSITIVE)

    def holds_resources(self) -> bool:
        return self.model.holds_resources() or self.error_model.holds_resources()

    def release_resources(self) -> bool:
        released = self.model.release_resources()
        return self.error_model.release_resources() or released

    def clone(self) -> "LogNormalizedNCM":
        return LogNormalizedNCM(self.model.clone(), self.error_model.clone(), self.beta)
