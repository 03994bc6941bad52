"""
Aggregated Venn-ABERS Predictor

Trains one IVAP per split of a sampling strategy and fuses their
probability pairs with geometric means:

    p = GM(p1) / (GM(1 - p0) + GM(p1))

Splits can be trained one at a time with ``train(dataset, index)`` so that
an external scheduler can distribute them.
"""

import logging
import math
from typing import Dict, List, Optional

import numpy as np

from ..data.dataset import Dataset
from ..models.scorers import ScoringClassifier
from ..sampling.strategies import SamplingStrategy
from ..sampling.validator import TrainingSetValidator
from ..utils.exceptions import NotTrainedError
from ..utils.math_utils import geometric_mean
from .ivap import IVAPClassifier
from .prediction import CVAPPrediction

logger = logging.getLogger(__name__)


class AVAPClassifier:
    """Aggregated (cross) Venn-ABERS predictor."""

    def __init__(self, model: ScoringClassifier, strategy: SamplingStrategy,
                 seed: Optional[int] = None, validator: Optional[TrainingSetValidator] = None):
        self.template = IVAPClassifier(model, validator)
        self.strategy = strategy
        self.seed = int(np.random.SeedSequence().entropy % (2 ** 31)) if seed is None else int(seed)
        self.predictors: Dict[int, IVAPClassifier] = {}

    def train(self, dataset: Dataset, index: Optional[int] = None) -> "AVAPClassifier":
        """Train every split, or only split ``index``."""
        if index is not None:
            return self._train_index(dataset, index)

        num_samples = self.strategy.get_num_samples()
        logger.info(f"🔧 Training AVAP with {num_samples} splits on {len(dataset)} records...")
        predictors = {}
        for i, split in enumerate(self.strategy.get_iterator(dataset, self.seed)):
            predictors[i] = self.template.clone().train(split)
        self.predictors = predictors
        logger.info(f"✅ AVAP trained with {len(self.predictors)} IVAPs")
        return self

    def _train_index(self, dataset: Dataset, index: int) -> "AVAPClassifier":
        num_samples = self.strategy.get_num_samples()
        if index < 0 or index >= num_samples:
            raise ValueError(
                f"Cannot train index {index}, only allowed indexes are [0, {num_samples - 1}]"
            )
        split = self.strategy.get_split(dataset, index, self.seed)
        self.predictors[index] = self.template.clone().train(split)
        logger.info(f"✅ Trained AVAP split {index} ({len(self.predictors)}/{num_samples})")
        return self

    def is_trained(self) -> bool:
        return len(self.predictors) == self.strategy.get_num_samples()

    def is_partially_trained(self) -> bool:
        return len(self.predictors) > 0

    def predict(self, example) -> CVAPPrediction:
        if not self.is_trained():
            raise NotTrainedError(
                f"AVAP must be trained before making predictions "
                f"({len(self.predictors)}/{self.strategy.get_num_samples()} splits trained)"
            )

        ivaps = [self.predictors[i] for i in sorted(self.predictors)]
        label0, label1 = ivaps[0].get_labels()

        p0_list = []
        p1_list = []
        for ivap in ivaps:
            p0, p1 = ivap.predict(example)[label0]
            p0_list.append(p0)
            p1_list.append(p1)

        gm_p1 = geometric_mean(p1_list)
        gm_1m_p0 = geometric_mean([1.0 - p0 for p0 in p0_list])
        denominator = gm_1m_p0 + gm_p1

        degenerate = denominator == 0
        if degenerate:
            logger.warning(
                "Degenerate AVAP prediction: geometric means of p1 and 1-p0 are both 0, "
                "probability is undefined"
            )
            probability = math.nan
        else:
            probability = gm_p1 / denominator

        return CVAPPrediction(
            p0_list=tuple(p0_list),
            p1_list=tuple(p1_list),
            label0=label0,
            label1=label1,
            probabilities={label0: probability, label1: 1.0 - probability},
            is_degenerate=degenerate,
        )

    def get_labels(self) -> List:
        if not self.predictors:
            raise NotTrainedError("AVAP has no trained predictors")
        return self.predictors[min(self.predictors)].get_labels()

    def get_num_observations_used(self) -> int:
        if not self.predictors:
            return 0
        return max(p.get_num_observations_used() for p in self.predictors.values())

    def get_num_trained_predictors(self) -> int:
        return len(self.predictors)

    def get_models(self) -> Dict[int, IVAPClassifier]:
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

    def clone(self) -> "AVAPClassifier":
        return AVAPClassifier(self.template.model.clone(), self.strategy.clone(),
                              seed=self.seed, validator=self.template.validator)

    def __repr__(self) -> str:
        return (f"AVAPClassifier(strategy={self.strategy!r}, "
                f"trained={len(self.predictors)}/{self.strategy.get_num_samples()})")
