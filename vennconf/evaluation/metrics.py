"""
Evaluation Metrics

Accumulating metrics for conformal and Venn-ABERS predictions: accuracy of
conformal prediction sets at fixed confidences, calibration of Venn-ABERS
probabilities and the width of the (p0, p1) intervals.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence

import numpy as np
import pandas as pd

from ..utils.math_utils import mean, median
from ..venn_abers.prediction import CVAPPrediction

logger = logging.getLogger(__name__)


class CPAccuracy:
    """Fraction of examples whose true label is in the prediction set."""

    def __init__(self, confidences: Sequence[float] = (0.8, 0.9, 0.95)):
        for c in confidences:
            if c < 0 or c > 1:
                raise ValueError(f"Confidence must be in the range [0,1], got {c}")
        self.confidences = sorted(confidences)
        self._true_label_pvalues: List[float] = []

    def add_prediction(self, pvalues: Mapping[Any, float], true_label) -> None:
        if true_label not in pvalues:
            raise ValueError(f"No p-value for true label {true_label!r}")
        self._true_label_pvalues.append(float(pvalues[true_label]))

    @property
    def num_predictions(self) -> int:
        return len(self._true_label_pvalues)

    def accuracy(self, confidence: float) -> float:
        if self.num_predictions == 0:
            return float("nan")
        pvalues = np.asarray(self._true_label_pvalues)
        return float(np.mean(pvalues > 1 - confidence))

    def error_rate(self, confidence: float) -> float:
        return 1.0 - self.accuracy(confidence)

    def get_results(self) -> Dict[float, float]:
        return {c: self.accuracy(c) for c in self.confidences}

    def is_valid(self, tolerance: float = 0.05) -> bool:
        """Accuracy at every confidence is at least ``confidence - tolerance``."""
        return all(acc >= c - tolerance for c, acc in self.get_results().items())


class VAPCalibration:
    """Observed accuracy of Venn-ABERS probabilities per probability bin."""

    def __init__(self, num_bins: int = 10):
        if num_bins < 5 or num_bins > 100:
            raise ValueError(f"Number of bins must be in [5, 100], got {num_bins}")
        self.num_bins = num_bins
        self._probabilities: List[float] = []
        self._correct: List[bool] = []

    def add_prediction(self, prediction: CVAPPrediction, true_label) -> None:
        if prediction.is_degenerate:
            logger.debug("Skipping degenerate prediction in calibration curve")
            return
        predicted = prediction.predicted_label
        self._probabilities.append(prediction.get_probability(predicted))
        self._correct.append(predicted == true_label)

    @property
    def num_predictions(self) -> int:
        return len(self._probabilities)

    def get_results(self) -> pd.DataFrame:
        """One row per non-empty bin: expected probability, observed accuracy, count."""
        if not self._probabilities:
            return pd.DataFrame(columns=["bin_lower", "bin_upper", "expected", "observed", "count"])

        edges = np.linspace(0.0, 1.0, self.num_bins + 1)
        probs = np.asarray(self._probabilities)
        correct = np.asarray(self._correct, dtype=float)
        bin_idx = np.clip(np.digitize(probs, edges[1:-1], right=True), 0, self.num_bins - 1)

        rows = []
        for b in range(self.num_bins):
            mask = bin_idx == b
            if not mask.any():
                continue
            rows.append({
                "bin_lower": edges[b],
                "bin_upper": edges[b + 1],
                "expected": float(probs[mask].mean()),
                "observed": float(correct[mask].mean()),
                "count": int(mask.sum()),
            })
        return pd.DataFrame(rows)

    def calibration_error(self) -> float:
        """Count weighted mean absolute gap between expected and observed accuracy."""
        results = self.get_results()
        if results.empty:
            return float("nan")
        gaps = (results["expected"] - results["observed"]).abs()
        return float((gaps * results["count"]).sum() / results["count"].sum())


class VAPIntervalWidth:
    """Mean and median width of the (p0, p1) intervals."""

    def __init__(self):
        self._mean_widths: List[float] = []
        self._median_widths: List[float] = []

    def add_prediction(self, prediction: CVAPPrediction) -> None:
        self._mean_widths.append(prediction.mean_interval_width)
        self._median_widths.append(prediction.median_interval_width)

    def get_results(self) -> Dict[str, Optional[float]]:
        return {
            "mean_width": mean(self._mean_widths),
            "median_width": median(self._median_widths),
            "num_predictions": len(self._mean_widths),
        }
