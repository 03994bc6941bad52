"""Control points used by the interpolating p-value calculators."""

from typing import Sequence, Tuple

import numpy as np


def get_confidence_to_ncs(sorted_scores: Sequence[float]) -> Tuple[np.ndarray, np.ndarray]:
    """Knots ``((i+1)/(n+1), s[i])`` mapping confidence to nonconformity score."""
    scores = np.asarray(sorted_scores, dtype=float)
    n = scores.size
    confidences = np.arange(1, n + 1, dtype=float) / (n + 1.0)
    return confidences, scores.copy()


def get_ncs_to_pvalue(sorted_scores: Sequence[float]) -> Tuple[np.ndarray, np.ndarray]:
    """Knots mapping nonconformity score to p-value.

    Duplicate scores collapse into a single knot. The p-value of a run is the
    number of scores above the run plus one, over ``n + 1``.
    """
    scores = np.asarray(sorted_scores, dtype=float)
    n = scores.size
    ncs = []
    pvalues = []
    for i in range(n):
        # emit at the last element of each run of equal values
        if i + 1 < n and scores[i + 1] == scores[i]:
            continue
        ncs.append(scores[i])
        pvalues.append((n - i) / (n + 1.0))
    return np.asarray(ncs, dtype=float), np.asarray(pvalues, dtype=float)
