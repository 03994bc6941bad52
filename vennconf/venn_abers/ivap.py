"""
Inductive Venn-ABERS Predictor

Calibrates the scores of a two-class scoring model with isotonic
regression. For every query the calibration points are augmented with the
query score under both hypothetical labels, giving the probability pair
(p0, p1) that brackets the probability of the first label.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..data.dataset import TrainSplit
from ..models.scorers import ScoringClassifier
from ..sampling.validator import TrainingSetValidator
from ..utils.exceptions import NotTrainedError
from .isotonic import CalibrationPoint, fit_and_predict

logger = logging.getLogger(__name__)


class IVAPClassifier:
    """Inductive Venn-ABERS predictor for binary classification."""

    def __init__(self, model: ScoringClassifier, validator: Optional[TrainingSetValidator] = None):
        if not isinstance(model, ScoringClassifier):
            raise ValueError(f"IVAP requires a ScoringClassifier, got {type(model).__name__}")
        self.model = model
        self.validator = validator or TrainingSetValidator()
        self.is_fitted = False
        self._labels: Optional[List] = None
        self._calibration_points: Tuple[CalibrationPoint, ...] = ()
        self._num_observations = 0

    def train(self, split: TrainSplit) -> "IVAPClassifier":
        """Train the scorer on the proper training set and collect calibration points."""
        self.validator.validate_classification(split)

        labels = split.proper_training_set.get_labels()
        if len(labels) != 2:
            raise ValueError(f"IVAP requires exactly 2 labels, got {len(labels)}: {labels}")

        logger.debug(f"Training IVAP scorer on {len(split.proper_training_set)} records")
        self.model.train(split.proper_training_set)
        self._labels = list(self.model.get_labels())
        label0 = self._labels[0]

        calibration = split.calibration_set
        points = []
        for features, label in zip(calibration.features, calibration.labels):
            score = self.model.predict_scores(features)[label0]
            points.append(CalibrationPoint(score=score, label=1 if label == label0 else 0))

        self._calibration_points = tuple(points)
        self._num_observations = split.total_num_training_records
        self.is_fitted = True
        logger.debug(f"IVAP calibrated with {len(points)} calibration points")
        return self

    def is_trained(self) -> bool:
        return self.is_fitted

    def predict(self, example) -> Dict[Any, Tuple[float, float]]:
        """Return ``{label0: (p0, p1), label1: (1 - p1, 1 - p0)}``."""
        if not self.is_fitted:
            raise NotTrainedError("IVAP must be trained before making predictions")
        if example is None:
            raise ValueError("Example must not be None")

        label0, label1 = self._labels
        score = self.model.predict_scores(example)[label0]
        p0, p1 = self.predict_probabilities_for_score(score)
        return {label0: (p0, p1), label1: (1.0 - p1, 1.0 - p0)}

    def predict_probabilities_for_score(self, score: float) -> Tuple[float, float]:
        """(p0, p1) for an already computed score of label0."""
        if not self._calibration_points:
            raise NotTrainedError("IVAP has no calibration points")
        calibration = list(self._calibration_points)
        p0 = fit_and_predict(calibration + [CalibrationPoint(score, 0)], score)
        p1 = fit_and_predict(calibration + [CalibrationPoint(score, 1)], score)
        return p0, p1

    def get_labels(self) -> List:
        if self._labels is None:
            raise NotTrainedError("IVAP must be trained before its labels are known")
        return list(self._labels)

    def get_calibration_points(self) -> Tuple[CalibrationPoint, ...]:
        return self._calibration_points

    def set_calibration_points(self, points: Sequence[CalibrationPoint]) -> None:
        """Replace the calibration points, e.g. after loading them from storage."""
        points = tuple(points)
        for point in points:
            if not isinstance(point, CalibrationPoint):
                raise ValueError(f"Expected CalibrationPoint, got {type(point).__name__}")
        self._calibration_points = points

    def get_num_observations_used(self) -> int:
        return self._num_observations

    def holds_resources(self) -> bool:
        return self.model.holds_resources()

    def release_resources(self) -> bool:
        return self.model.release_resources()

    def clone(self) -> "IVAPClassifier":
        """Untrained predictor over a copy of the scorer configuration."""
        return IVAPClassifier(self.model.clone(), self.validator)

    def __repr__(self) -> str:
        return f"IVAPClassifier(model={self.model!r}, calibration_points={len(self._calibration_points)})"
