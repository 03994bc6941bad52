"""In-memory dataset of feature vectors and labels."""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)


class Dataset:
    """Feature matrix and label vector kept as numpy arrays."""

    def __init__(self, features, labels, feature_names: Optional[List[str]] = None):
        features = np.asarray(features, dtype=float)
        labels = np.asarray(labels)
        if features.ndim == 1:
            features = features.reshape(-1, 1)
        if features.ndim != 2:
            raise ValueError(f"Features must be a 2D array, got {features.ndim} dimensions")
        if features.shape[0] != labels.shape[0]:
            raise ValueError(
                f"Number of feature rows ({features.shape[0]}) does not match "
                f"number of labels ({labels.shape[0]})"
            )
        self.features = features
        self.labels = labels
        self.feature_names = feature_names or [f"f{i}" for i in range(features.shape[1])]

    @classmethod
    def from_dataframe(cls, df: pd.DataFrame, target: str) -> "Dataset":
        if target not in df.columns:
            raise ValueError(f"Target column '{target}' not found in dataframe")
        feature_cols = [c for c in df.columns if c != target]
        return cls(df[feature_cols].to_numpy(dtype=float), df[target].to_numpy(),
                   feature_names=feature_cols)

    def to_dataframe(self, target: str = "label") -> pd.DataFrame:
        df = pd.DataFrame(self.features, columns=self.feature_names)
        df[target] = self.labels
        return df

    def __len__(self) -> int:
        return int(self.labels.shape[0])

    @property
    def num_features(self) -> int:
        return int(self.features.shape[1])

    def subset(self, indices: Sequence[int]) -> "Dataset":
        idx = np.asarray(indices, dtype=int)
        return Dataset(self.features[idx], self.labels[idx], feature_names=list(self.feature_names))

    def join(self, other: "Dataset") -> "Dataset":
        if other.num_features != self.num_features:
            raise ValueError("Cannot join datasets with different number of features")
        return Dataset(np.vstack([self.features, other.features]),
                       np.concatenate([self.labels, other.labels]),
                       feature_names=list(self.feature_names))

    def get_labels(self) -> List:
        """Distinct labels in ascending order."""
        return [label.item() if hasattr(label, "item") else label for label in np.unique(self.labels)]

    def label_frequencies(self) -> Dict:
        values, counts = np.unique(self.labels, return_counts=True)
        return {(v.item() if hasattr(v, "item") else v): int(c) for v, c in zip(values, counts)}

    def __repr__(self) -> str:
        return f"Dataset(records={len(self)}, features={self.num_features})"


@dataclass(frozen=True)
class TrainSplit:
    """Proper training and calibration partition of one training set."""
    proper_training_set: Dataset
    calibration_set: Dataset
    total_num_training_records: int
    min_observed_label: Optional[float] = None
    max_observed_label: Optional[float] = None
