"""Evaluation metrics, hold-out evaluation and plots."""

from .evaluator import EvaluationConfig, EvaluationResult, PredictorEvaluator
from .metrics import CPAccuracy, VAPCalibration, VAPIntervalWidth
from .plots import plot_calibration_curve

__all__ = [
    "CPAccuracy",
    "VAPCalibration",
    "VAPIntervalWidth",
    "EvaluationConfig",
    "EvaluationResult",
    "PredictorEvaluator",
    "plot_calibration_curve",
]
