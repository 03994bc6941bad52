"""Scoring models wrapped for use by the conformal predictors."""

from .scorers import (
    DistanceScorer,
    LogisticRegressionScorer,
    ProbabilisticScorer,
    RegressionScorer,
    RidgeScorer,
    ScoringClassifier,
    ScoringModel,
    SVCScorer,
    SVRScorer,
)

__all__ = [
    "ScoringModel",
    "ScoringClassifier",
    "DistanceScorer",
    "ProbabilisticScorer",
    "RegressionScorer",
    "SVCScorer",
    "LogisticRegressionScorer",
    "RidgeScorer",
    "SVRScorer",
]
