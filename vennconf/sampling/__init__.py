"""Sampling strategies and split validation."""

from .strategies import FoldedSampling, RandomSampling, SamplingStrategy
from .validator import TrainingSetValidator

__all__ = [
    "SamplingStrategy",
    "RandomSampling",
    "FoldedSampling",
    "TrainingSetValidator",
]
