"""Inductive and aggregated conformal predictors."""

from .acp import ACPClassifier, ACPRegressor
from .icp import ICPClassifier, ICPRegressor

__all__ = ["ACPClassifier", "ACPRegressor", "ICPClassifier", "ICPRegressor"]
