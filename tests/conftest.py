"""Shared fixtures for vennconf tests."""

import numpy as np
import pytest
from sklearn.datasets import make_classification, make_regression

from vennconf.data import Dataset


@pytest.fixture
def binary_dataset() -> Dataset:
    """Two well separated classes, 150 records."""
    X, y = make_classification(
        n_samples=150, n_features=4, n_informative=3, n_redundant=0,
        n_clusters_per_class=1, class_sep=1.5, random_state=7,
    )
    return Dataset(X, y)


@pytest.fixture
def multiclass_dataset() -> Dataset:
    """Three classes, 400 records."""
    X, y = make_classification(
        n_samples=400, n_features=5, n_informative=4, n_redundant=0,
        n_classes=3, n_clusters_per_class=1, class_sep=1.0, random_state=11,
    )
    return Dataset(X, y)


@pytest.fixture
def regression_dataset() -> Dataset:
    X, y = make_regression(n_samples=200, n_features=3, noise=10.0, random_state=3)
    return Dataset(X, y)


@pytest.fixture
def small_scores() -> list:
    return [4.0, 2.0, 1.0, 2.0]


@pytest.fixture
def skewed_scores() -> np.ndarray:
    rng = np.random.default_rng(5)
    return np.concatenate([rng.exponential(0.2, size=40), rng.exponential(5.0, size=5)])


@pytest.fixture
def duplicate_scores() -> np.ndarray:
    return np.repeat([0.1, 0.1, 0.5, 2.0, 2.0, 2.0, 7.5], 4)
