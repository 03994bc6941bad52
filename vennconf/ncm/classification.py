"""
Nonconformity Measures for Classification

Each measure wraps a scoring classifier and turns its output for one
example into a nonconformity score per class label. Lower scores mean the
example conforms better to that label.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Type

from ..data.dataset import Dataset
from ..models.scorers import DistanceScorer, ProbabilisticScorer, ScoringClassifier
from ..utils.exceptions import NotTrainedError

logger = logging.getLogger(__name__)


class NCMClassification(ABC):
    """Base class for classification nonconformity measures."""

    name: str = "abstract"
    required_model: Type[ScoringClassifier] = ScoringClassifier

    def __init__(self, model: ScoringClassifier):
        if not isinstance(model, self.required_model):
            raise ValueError(
                f"{self.name} requires a {self.required_model.__name__}, "
                f"got {type(model).__name__}"
            )
        self.model = model

    def train_ncm(self, dataset: Dataset) -> "NCMClassification":
        self.model.train(dataset)
        return self

    @property
    def is_fitted(self) -> bool:
        return self.model.is_fitted

    def get_labels(self) -> List:
        self._check_fitted()
        return self.model.get_labels()

    def calculate_ncs(self, example) -> Dict[Any, float]:
        """Nonconformity score of ``example`` for every label."""
        self._check_fitted()
        return self._calculate(example)

    @abstractmethod
    def _calculate(self, example) -> Dict[Any, float]:
        ...

    def holds_resources(self) -> bool:
        return self.model.holds_resources()

    def release_resources(self) -> bool:
        return self.model.release_resources()

    def clone(self) -> "NCMClassification":
        """Measure over an unfitted copy of the model."""
        return type(self)(self.model.clone())

    def _check_fitted(self) -> None:
        if not self.model.is_fitted:
            raise NotTrainedError(f"{self.name} requires a fitted model, call train_ncm first")

    def __repr__(self) -> str:
        return f"{type(self).__name__}(model={self.model!r})"


class NegativeDistanceToHyperplaneNCM(NCMClassification):
    """ncs = -(signed distance to the hyperplane of the label)."""

    name = "NegativeDistanceToHyperplane"
    required_model = DistanceScorer

    def _calculate(self, example) -> Dict[Any, float]:
        distances = self.model.predict_distance_to_hyperplane(example)
        return {label: -distance for label, distance in distances.items()}


class ProbabilityMarginNCM(NCMClassification):
    """ncs = 0.5 - (P(label) - max P(other label)) / 2, bounded in [0,1]."""

    name = "ProbabilityMargin"
    required_model = ProbabilisticScorer

    def _calculate(self, example) -> Dict[Any, float]:
        probabilities = self.model.predict_probabilities(example)
        scores = {}
        for label, prob in probabilities.items():
            others = [p for other, p in probabilities.items() if other != label]
            max_other = max(others) if others else 0.0
            scores[label] = 0.5 - (prob - max_other) / 2.0
        return scores


class InverseProbabilityNCM(NCMClassification):
    """ncs = 1 - P(label)."""

    name = "InverseProbability"
    required_model = ProbabilisticScorer

    def _calculate(self, example) -> Dict[Any, float]:
        probabilities = self.model.predict_probabilities(example)
        return {label: 1.0 - prob for label, prob in probabilities.items()}
