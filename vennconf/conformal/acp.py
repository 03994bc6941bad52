"""
Aggregated Conformal Predictors

Train one inductive predictor per split of a sampling strategy and combine
their outputs with the median. Classification aggregates p-values per
label; regression aggregates the midpoints and the interval half widths and
caps the result to the labels observed while training.

Splits can be trained one at a time with ``train(dataset, index)``.
"""

import logging
import math
from typing import Any, Dict, List, Optional, Set

import numpy as np

from ..data.dataset import Dataset
from ..ncm.classification import NCMClassification
from ..ncm.regression import NCMRegression
from ..pvalues.base import PValueCalculator
from ..sampling.strategies import SamplingStrategy
from ..sampling.validator import TrainingSetValidator
from ..utils.exceptions import NotTrainedError
from ..utils.interval_utils import PredictionInterval, cap_interval
from .icp import ICPClassifier, ICPRegressor, _check_confidence

logger = logging.getLogger(__name__)


class _AggregatedPredictor:
    """Split bookkeeping shared by the aggregated predictors."""

    kind = "ACP"

    def __init__(self, template, strategy: SamplingStrategy, seed: Optional[int] = None):
        self.template = template
        self.strategy = strategy
        self.seed = int(np.random.SeedSequence().entropy % (2 ** 31)) if seed is None else int(seed)
        self.predictors: Dict[int, Any] = {}

    def train(self, dataset: Dataset, index: Optional[int] = None):
        """Train every split, or only split ``index``."""
        num_samples = self.strategy.get_num_samples()
        if index is not None:
            if index < 0 or index >= num_samples:
                raise ValueError(
                    f"Cannot train index {index}, only allowed indexes are [0, {num_samples - 1}]"
                )
            split = self.strategy.get_split(dataset, index, self.seed)
            self.predictors[index] = self.template.clone().train(split)
            logger.info(f"✅ Trained {self.kind} split {index} ({len(self.predictors)}/{num_samples})")
            return self

        logger.info(f"🔧 Training {self.kind} with {num_samples} splits on {len(dataset)} records...")
        self.predictors = {
            i: self.template.clone().train(split)
            for i, split in enumerate(self.strategy.get_iterator(dataset, self.seed))
        }
        logger.info(f"✅ {self.kind} trained with {len(self.predictors)} ICPs")
        return self

    def is_trained(self) -> bool:
        return len(self.predictors) == self.strategy.get_num_samples()

    def is_partially_trained(self) -> bool:
        return len(self.predictors) > 0

    def get_num_observations_used(self) -> int:
        if not self.predictors:
            return 0
        return max(p.get_num_observations_used() for p in self.predictors.values())

    def get_num_trained_predictors(self) -> int:
        return len(self.predictors)

    def get_models(self) -> Dict[int, Any]:
        return dict(self.predictors)

    def holds_resources(self) -> bool:
        return any(p.holds_resources() for p in self.predictors.values())

    def release_resources(self) -> bool:
        released = False
        for predictor in self.predictors.values():
            released = predictor.release_resources() or released
        return released

    def get_seed(self) -> int:
        return self.seed

    def set_seed(self, seed: int) -> None:
        self.seed = int(seed)

    def _check_trained(self) -> None:
        if not self.is_trained():
            raise NotTrainedError(
                f"{self.kind} must be trained before making predictions "
                f"({len(self.predictors)}/{self.strategy.get_num_samples()} splits trained)"
            )

    def _ordered_predictors(self) -> List:
        return [self.predictors[i] for i in sorted(self.predictors)]

    def __repr__(self) -> str:
        return (f"{type(self).__name__}(strategy={self.strategy!r}, "
                f"trained={len(self.predictors)}/{self.strategy.get_num_samples()})")


class ACPClassifier(_AggregatedPredictor):
    """One ICP per split, p-values aggregated by their median."""

    def __init__(self, ncm: NCMClassification, strategy: SamplingStrategy,
                 pvalue_calculator: Optional[PValueCalculator] = None,
                 seed: Optional[int] = None, validator: Optional[TrainingSetValidator] = None):
        super().__init__(ICPClassifier(ncm, pvalue_calculator, validator), strategy, seed)

    def get_labels(self) -> List:
        if not self.predictors:
            raise NotTrainedError("ACP has no trained predictors")
        return self.predictors[min(self.predictors)].get_labels()

    def predict(self, example) -> Dict[Any, float]:
        self._check_trained()
        per_label: Dict[Any, List[float]] = {}
        for predictor in self._ordered_predictors():
            for label, pvalue in predictor.predict(example).items():
                per_label.setdefault(label, []).append(pvalue)
        return {label: float(np.median(values)) for label, values in per_label.items()}

    def predict_set(self, example, confidence: float) -> Set:
        _check_confidence(confidence)
        return {label for label, p in self.predict(example).items() if p > 1 - confidence}

    def clone(self) -> "ACPClassifier":
        return ACPClassifier(self.template.ncm.clone(), self.strategy.clone(),
                             self.template.pvalue_calculator.clone(), seed=self.seed,
                             validator=self.template.validator)


class ACPRegressor(_AggregatedPredictor):
    """One ICP regressor per split, intervals from median midpoint and half width."""

    kind = "ACP regressor"

    def __init__(self, ncm: NCMRegression, strategy: SamplingStrategy,
                 pvalue_calculator: Optional[PValueCalculator] = None,
                 seed: Optional[int] = None, validator: Optional[TrainingSetValidator] = None):
        super().__init__(ICPRegressor(ncm, pvalue_calculator, validator), strategy, seed)

    def predict_midpoint(self, example) -> float:
        self._check_trained()
        return float(np.median([icp.predict_midpoint(example) for icp in self._ordered_predictors()]))

    def predict_interval(self, example, confidence: float) -> PredictionInterval:
        _check_confidence(confidence)
        self._check_trained()
        icps = self._ordered_predictors()
        midpoint = float(np.median([icp.predict_midpoint(example) for icp in icps]))
        half_width = float(np.median([icp.predict_half_width(example, confidence) for icp in icps]))
        if math.isinf(half_width):
            interval = PredictionInterval(-math.inf, math.inf)
        else:
            interval = PredictionInterval(midpoint - half_width, midpoint + half_width)

        observed_min = [icp.min_observed_label for icp in icps if icp.min_observed_label is not None]
        observed_max = [icp.max_observed_label for icp in icps if icp.max_observed_label is not None]
        if not observed_min or not observed_max:
            return interval
        return cap_interval(interval, min(observed_min), max(observed_max))

    def predict_pvalue(self, example, label: float) -> float:
        self._check_trained()
        return float(np.median([icp.predict_pvalue(example, label) for icp in self._ordered_predictors()]))

    def clone(self) -> "ACPRegressor":
        return ACPRegressor(self.template.ncm.clone(), self.strategy.clone(),
                            self.template.pvalue_calculator.clone(), seed=self.seed,
                            validator=self.template.validator)
