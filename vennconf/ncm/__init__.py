"""Nonconformity measures."""

from .classification import (
    InverseProbabilityNCM,
    NCMClassification,
    NegativeDistanceToHyperplaneNCM,
    ProbabilityMarginNCM,
)
from .regression import AbsoluteDifferenceNCM, LogNormalizedNCM, NCMRegression

__all__ = [
    "NCMClassification",
    "NegativeDistanceToHyperplaneNCM",
    "ProbabilityMarginNCM",
    "InverseProbabilityNCM",
    "NCMRegression",
    "AbsoluteDifferenceNCM",
    "LogNormalizedNCM",
]
