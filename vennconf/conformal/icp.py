"""
Inductive Conformal Predictors

Mondrian (label-conditional) inductive conformal classification and
inductive conformal regression on top of a nonconformity measure and a
p-value calculator.
"""

import logging
import math
from typing import Any, Dict, List, Optional, Set

from ..data.dataset import TrainSplit
from ..ncm.classification import NCMClassification
from ..ncm.regression import NCMRegression
from ..pvalues.base import PValueCalculator
from ..pvalues.standard import StandardPValue
from ..sampling.validator import TrainingSetValidator
from ..utils.exceptions import NotTrainedError
from ..utils.interval_utils import PredictionInterval, cap_interval

logger = logging.getLogger(__name__)


def _check_confidence(confidence: float) -> None:
    if confidence < 0 or confidence > 1:
        raise ValueError(f"Confidence must be in the range [0,1], got {confidence}")


class ICPClassifier:
    """Label-conditional inductive conformal classifier."""

    def __init__(self, ncm: NCMClassification, pvalue_calculator: Optional[PValueCalculator] = None,
                 validator: Optional[TrainingSetValidator] = None):
        self.ncm = ncm
        self.pvalue_calculator = pvalue_calculator or StandardPValue()
        self.validator = validator or TrainingSetValidator()
        self.calculators: Dict[Any, PValueCalculator] = {}
        self.is_fitted = False
        self._num_observations = 0

    def train(self, split: TrainSplit) -> "ICPClassifier":
        self.validator.validate_classification(split)
        self.ncm.train_ncm(split.proper_training_set)
        labels = self.ncm.get_labels()

        scores_per_label: Dict[Any, List[float]] = {label: [] for label in labels}
        calibration = split.calibration_set
        for features, label in zip(calibration.features, calibration.labels):
            label = label.item() if hasattr(label, "item") else label
            if label not in scores_per_label:
                raise ValueError(f"Calibration label {label!r} not present in proper training set")
            scores_per_label[label].append(self.ncm.calculate_ncs(features)[label])

        calculators = {}
        for label, scores in scores_per_label.items():
            try:
                calculators[label] = self.pvalue_calculator.clone().build(scores)
            except ValueError as e:
                raise ValueError(f"Cannot calibrate label {label!r}: {e}") from e

        self.calculators = calculators
        self._num_observations = split.total_num_training_records
        self.is_fitted = True
        logger.debug(f"ICP calibrated {len(calculators)} labels on {len(calibration)} records")
        return self

    def is_trained(self) -> bool:
        return self.is_fitted

    def get_labels(self) -> List:
        self._check_fitted()
        return list(self.calculators)

    def predict(self, example) -> Dict[Any, float]:
        """P-value for every label."""
        self._check_fitted()
        if example is None:
            raise ValueError("Example must not be None")
        ncs = self.ncm.calculate_ncs(example)
        return {label: calc.get_pvalue(ncs[label]) for label, calc in self.calculators.items()}

    def predict_set(self, example, confidence: float) -> Set:
        """Labels whose p-value exceeds ``1 - confidence``."""
        _check_confidence(confidence)
        pvalues = self.predict(example)
        return {label for label, p in pvalues.items() if p > 1 - confidence}

    def get_num_observations_used(self) -> int:
        return self._num_observations

    def holds_resources(self) -> bool:
        return self.ncm.holds_resources()

    def release_resources(self) -> bool:
        return self.ncm.release_resources()

    def clone(self) -> "ICPClassifier":
        return ICPClassifier(self.ncm.clone(), self.pvalue_calculator.clone(), self.validator)

    def _check_fitted(self) -> None:
        if not self.is_fitted:
            raise NotTrainedError("ICP must be trained before making predictions")


class ICPRegressor:
    """Inductive conformal regressor producing capped prediction intervals."""

    def __init__(self, ncm: NCMRegression, pvalue_calculator: Optional[PValueCalculator] = None,
                 validator: Optional[TrainingSetValidator] = None):
        if not isinstance(ncm, NCMRegression):
            raise ValueError(f"ICPRegressor requires a regression NCM, got {type(ncm).__name__}")
        self.ncm = ncm
        self.pvalue_calculator = pvalue_calculator or StandardPValue()
        self.validator = validator or TrainingSetValidator()
        self.calculator: Optional[PValueCalculator] = None
        self.min_observed_label: Optional[float] = None
        self.max_observed_label: Optional[float] = None
        self._num_observations = 0

    @property
    def is_fitted(self) -> bool:
        return self.calculator is not None

    def train(self, split: TrainSplit) -> "ICPRegressor":
        self.validator.validate_regression(split)
        self.ncm.train_ncm(split.proper_training_set)

        calibration = split.calibration_set
        scores = [self.ncm.calculate_ncs(features, label)
                  for features, label in zip(calibration.features, calibration.labels)]
        self.calculator = self.pvalue_calculator.clone().build(scores)
        self.min_observed_label = split.min_observed_label
        self.max_observed_label = split.max_observed_label
        self._num_observations = split.total_num_training_records
        logger.debug(f"ICP regressor calibrated on {len(scores)} records")
        return self

    def is_trained(self) -> bool:
        return self.is_fitted

    def predict_midpoint(self, example) -> float:
        self._check_fitted()
        return self.ncm.predict_midpoint(example)

    def predict_half_width(self, example, confidence: float) -> float:
        """Half width of the uncapped interval, ``inf`` when the confidence is unsupported."""
        _check_confidence(confidence)
        self._check_fitted()
        threshold = self.calculator.get_nc_score(confidence)
        if math.isinf(threshold):
            return math.inf
        return threshold * self.ncm.interval_scaling(example)

    def predict_interval(self, example, confidence: float) -> PredictionInterval:
        _check_confidence(confidence)
        self._check_fitted()
        threshold = self.calculator.get_nc_score(confidence)
        lower, upper = self.ncm.predict_interval(example, threshold)
        interval = PredictionInterval(lower, upper)
        if self.min_observed_label is None or self.max_observed_label is None:
            return interval
        return cap_interval(interval, self.min_observed_label, self.max_observed_label)

    def predict_pvalue(self, example, label: float) -> float:
        self._check_fitted()
        return self.calculator.get_pvalue(self.ncm.calculate_ncs(example, label))

    def get_num_observations_used(self) -> int:
        return self._num_observations

    def holds_resources(self) -> bool:
        return self.ncm.holds_resources()

    def release_resources(self) -> bool:
        return self.ncm.release_resources()

    def clone(self) -> "ICPRegressor":
        return ICPRegressor(self.ncm.clone(), self.pvalue_calculator.clone(), self.validator)

    def _check_fitted(self) -> None:
        if not self.is_fitted:
            raise NotTrainedError("ICP regressor must be trained before making predictions")
