"""
Sampling Strategies

A sampling strategy partitions a training set into proper training and
calibration sets. Strategies declare the number of splits they produce up
front, and every split can be regenerated on its own from the dataset, the
seed and the split index, which lets aggregated predictors train splits
independently.
"""

import logging
from abc import ABC, abstractmethod
from typing import Iterator, Optional, Tuple

import numpy as np
from sklearn.model_selection import KFold, ShuffleSplit, StratifiedKFold, StratifiedShuffleSplit

from ..data.dataset import Dataset, TrainSplit

logger = logging.getLogger(__name__)


def _random_seed() -> int:
    return int(np.random.SeedSequence().entropy % (2 ** 31))


class SamplingStrategy(ABC):
    """Base class for sampling strategies."""

    name: str = "abstract"

    def __init__(self, num_samples: int, stratified: bool = False):
        if num_samples < 1:
            raise ValueError(f"Number of samples must be at least 1, got {num_samples}")
        self.num_samples = int(num_samples)
        self.stratified = stratified

    def get_num_samples(self) -> int:
        return self.num_samples

    def get_iterator(self, dataset: Dataset, seed: Optional[int] = None) -> Iterator[TrainSplit]:
        """Yield every split of ``dataset`` in index order."""
        seed = _random_seed() if seed is None else seed
        for index in range(self.num_samples):
            yield self.get_split(dataset, index, seed)

    def get_split(self, dataset: Dataset, index: int, seed: Optional[int] = None) -> TrainSplit:
        if index < 0 or index >= self.num_samples:
            raise ValueError(
                f"Split index {index} out of range, allowed indexes are [0, {self.num_samples - 1}]"
            )
        if len(dataset) < 2:
            raise ValueError(f"Cannot split a dataset of {len(dataset)} records")
        seed = _random_seed() if seed is None else seed
        proper_idx, calib_idx = self._split_indices(dataset, index, seed)
        return self._make_split(dataset, proper_idx, calib_idx)

    @abstractmethod
    def _split_indices(self, dataset: Dataset, index: int, seed: int) -> Tuple[np.ndarray, np.ndarray]:
        ...

    @abstractmethod
    def clone(self) -> "SamplingStrategy":
        ...

    def _make_split(self, dataset: Dataset, proper_idx: np.ndarray, calib_idx: np.ndarray) -> TrainSplit:
        min_label = max_label = None
        if np.issubdtype(dataset.labels.dtype, np.number):
            min_label = float(np.min(dataset.labels))
            max_label = float(np.max(dataset.labels))
        return TrainSplit(
            proper_training_set=dataset.subset(proper_idx),
            calibration_set=dataset.subset(calib_idx),
            total_num_training_records=len(dataset),
            min_observed_label=min_label,
            max_observed_label=max_label,
        )


class RandomSampling(SamplingStrategy):
    """Independent random calibration sets, one generator per split index."""

    name = "Random"

    def __init__(self, num_samples: int = 1, calibration_ratio: float = 0.2, stratified: bool = False):
        super().__init__(num_samples, stratified)
        if not 0 < calibration_ratio < 1:
            raise ValueError(f"Calibration ratio must be in (0,1), got {calibration_ratio}")
        self.calibration_ratio = calibration_ratio

    def _split_indices(self, dataset, index, seed):
        splitter_cls = StratifiedShuffleSplit if self.stratified else ShuffleSplit
        splitter = splitter_cls(n_splits=1, test_size=self.calibration_ratio, random_state=seed + index)
        proper_idx, calib_idx = next(splitter.split(dataset.features, dataset.labels))
        return proper_idx, calib_idx

    def clone(self) -> "RandomSampling":
        return RandomSampling(self.num_samples, self.calibration_ratio, self.stratified)

    def __repr__(self) -> str:
        return f"RandomSampling(num_samples={self.num_samples}, calibration_ratio={self.calibration_ratio})"


class FoldedSampling(SamplingStrategy):
    """K-fold splits, fold i is the calibration set of split i."""

    name = "Folded"

    def __init__(self, num_folds: int = 10, stratified: bool = False):
        if num_folds < 2:
            raise ValueError(f"Folded sampling requires at least 2 folds, got {num_folds}")
        super().__init__(num_folds, stratified)

    @property
    def num_folds(self) -> int:
        return self.num_samples

    def _split_indices(self, dataset, index, seed):
        if len(dataset) < self.num_folds:
            raise ValueError(
                f"Cannot create {self.num_folds} folds from {len(dataset)} records"
            )
        splitter_cls = StratifiedKFold if self.stratified else KFold
        splitter = splitter_cls(n_splits=self.num_folds, shuffle=True, random_state=seed)
        for fold, (proper_idx, calib_idx) in enumerate(splitter.split(dataset.features, dataset.labels)):
            if fold == index:
                return proper_idx, calib_idx
        raise ValueError(f"Fold {index} was not generated")

    def clone(self) -> "FoldedSampling":
        return FoldedSampling(self.num_folds, self.stratified)

    def __repr__(self) -> str:
        return f"FoldedSampling(num_folds={self.num_folds})"
