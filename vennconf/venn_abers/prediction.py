"""Result of an aggregated Venn-ABERS prediction."""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Tuple

from ..utils.math_utils import mean, median


@dataclass(frozen=True)
class CVAPPrediction:
    """Per-split probability pairs and the fused label probabilities."""
    p0_list: Tuple[float, ...]
    p1_list: Tuple[float, ...]
    label0: Any
    label1: Any
    probabilities: Mapping[Any, float]
    is_degenerate: bool = False
    widths: Tuple[float, ...] = field(init=False)

    def __post_init__(self):
        if len(self.p0_list) != len(self.p1_list):
            raise ValueError("p0 and p1 lists must have the same length")
        object.__setattr__(self, "p0_list", tuple(self.p0_list))
        object.__setattr__(self, "p1_list", tuple(self.p1_list))
        object.__setattr__(self, "probabilities", MappingProxyType(dict(self.probabilities)))
        object.__setattr__(self, "widths", tuple(p1 - p0 for p0, p1 in zip(self.p0_list, self.p1_list)))

    @property
    def mean_interval_width(self) -> float:
        return mean(self.widths)

    @property
    def median_interval_width(self) -> float:
        return median(self.widths)

    def get_probability(self, label) -> float:
        if label not in self.probabilities:
            raise ValueError(f"Unknown label {label!r}, expected {self.label0!r} or {self.label1!r}")
        return self.probabilities[label]

    @property
    def predicted_label(self) -> Any:
        if self.probabilities[self.label1] > self.probabilities[self.label0]:
            return self.label1
        return self.label0

    def to_dict(self) -> dict:
        return {
            "label0": self.label0,
            "label1": self.label1,
            "p0": list(self.p0_list),
            "p1": list(self.p1_list),
            "probabilities": dict(self.probabilities),
            "mean_interval_width": self.mean_interval_width,
            "median_interval_width": self.median_interval_width,
            "is_degenerate": self.is_degenerate,
        }
