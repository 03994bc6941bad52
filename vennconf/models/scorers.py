"""
Scoring Models

Thin adapters around scikit-learn estimators exposing the interface the
conformal and Venn-ABERS predictors consume: ``train``, ``predict_scores``,
``get_labels``, ``clone`` and the ``is_fitted`` flag.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

import numpy as np
from sklearn.base import BaseEstimator
from sklearn.linear_model import LogisticRegression, Ridge
from sklearn.svm import SVC, SVR

from ..data.dataset import Dataset
from ..utils.exceptions import NotTrainedError

logger = logging.getLogger(__name__)


def _as_row(example) -> np.ndarray:
    if example is None:
        raise ValueError("Example must not be None")
    return np.asarray(example, dtype=float).reshape(1, -1)


def _as_python(value):
    return value.item() if hasattr(value, "item") else value


class ScoringModel(ABC):
    """Base class wrapping a scikit-learn estimator."""

    name: str = "abstract"

    def __init__(self, keep_training_data: bool = False, **params):
        self.params = params
        self.keep_training_data = keep_training_data
        self.model: Optional[BaseEstimator] = None
        self.is_fitted = False
        self.training_data: Optional[Dataset] = None

    @abstractmethod
    def _create_model(self) -> BaseEstimator:
        ...

    def train(self, dataset: Dataset) -> "ScoringModel":
        if len(dataset) == 0:
            raise ValueError("Cannot train on an empty dataset")
        model = self._create_model()
        model.fit(dataset.features, dataset.labels)
        self.model = model
        self.is_fitted = True
        self.training_data = dataset if self.keep_training_data else None
        logger.debug(f"Trained {self.name} on {len(dataset)} records")
        return self

    def holds_resources(self) -> bool:
        return self.training_data is not None

    def release_resources(self) -> bool:
        """Drop the retained training set; the fitted model is kept."""
        if self.training_data is None:
            return False
        self.training_data = None
        return True

    def get_params(self) -> Dict[str, Any]:
        return {"keep_training_data": self.keep_training_data, **self.params}

    def clone(self) -> "ScoringModel":
        """Unfitted model with the same parameters."""
        return type(self)(**self.get_params())

    def _check_fitted(self) -> None:
        if not self.is_fitted:
            raise NotTrainedError(f"{self.name} must be fitted before making predictions")

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.params})"


class ScoringClassifier(ScoringModel):
    """Classifier producing one real valued score per class label."""

    def get_labels(self) -> List:
        self._check_fitted()
        return [_as_python(c) for c in self.model.classes_]

    @abstractmethod
    def predict_scores(self, example) -> Dict[Any, float]:
        ...


class DistanceScorer(ScoringClassifier):
    """Classifier scoring classes by signed distance to a separating hyperplane."""

    def predict_distance_to_hyperplane(self, example) -> Dict[Any, float]:
        self._check_fitted()
        decision = np.atleast_1d(self.model.decision_function(_as_row(example))[0])
        labels = self.get_labels()
        if len(labels) == 2:
            d = float(decision[0])
            return {labels[0]: -d, labels[1]: d}
        return {label: float(v) for label, v in zip(labels, decision)}

    def predict_scores(self, example) -> Dict[Any, float]:
        return self.predict_distance_to_hyperplane(example)


class ProbabilisticScorer(ScoringClassifier):
    """Classifier producing class probabilities."""

    def predict_probabilities(self, example) -> Dict[Any, float]:
        self._check_fitted()
        proba = self.model.predict_proba(_as_row(example))[0]
        return {label: float(p) for label, p in zip(self.get_labels(), proba)}

    def predict_scores(self, example) -> Dict[Any, float]:
        return self.predict_probabilities(example)


class SVCScorer(DistanceScorer):
    """Support vector classifier (linear kernel by default)."""

    name = "SVC"

    def __init__(self, keep_training_data: bool = False, kernel: str = "linear",
                 C: float = 1.0, **params):
        super().__init__(keep_training_data=keep_training_data, kernel=kernel, C=C, **params)

    def _create_model(self) -> BaseEstimator:
        return SVC(**self.params)


class LogisticRegressionScorer(ProbabilisticScorer):
    name = "LogisticRegression"

    def __init__(self, keep_training_data: bool = False, C: float = 1.0,
                 max_iter: int = 1000, **params):
        super().__init__(keep_training_data=keep_training_data, C=C, max_iter=max_iter, **params)

    def _create_model(self) -> BaseEstimator:
        return LogisticRegression(**self.params)


class RegressionScorer(ScoringModel):
    """Regressor predicting a single real value per example."""

    def predict_value(self, example) -> float:
        self._check_fitted()
        return float(self.model.predict(_as_row(example))[0])

    def predict_values(self, features) -> np.ndarray:
        self._check_fitted()
        return np.asarray(self.model.predict(np.asarray(features, dtype=float)), dtype=float)


class RidgeScorer(RegressionScorer):
    name = "Ridge"

    def __init__(self, keep_training_data: bool = False, alpha: float = 1.0, **params):
        super().__init__(keep_training_data=keep_training_data, alpha=alpha, **params)

    def _create_model(self) -> BaseEstimator:
        return Ridge(**self.params)


class SVRScorer(RegressionScorer):
    name = "SVR"

    def __init__(self, keep_training_data: bool = False, kernel: str = "rbf",
                 C: float = 1.0, **params):
        super().__init__(keep_training_data=keep_training_data, kernel=kernel, C=C, **params)

    def _create_model(self) -> BaseEstimator:
        return SVR(**self.params)
