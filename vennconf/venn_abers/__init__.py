"""
Venn-ABERS Predictors

Isotonic-regression based probability calibration for binary classifiers.
"""

from .avap import AVAPClassifier
from .isotonic import CalibrationPoint, IsotonicCalibrator
from .ivap import IVAPClassifier
from .prediction import CVAPPrediction

__all__ = [
    "AVAPClassifier",
    "CalibrationPoint",
    "CVAPPrediction",
    "IsotonicCalibrator",
    "IVAPClassifier",
]
