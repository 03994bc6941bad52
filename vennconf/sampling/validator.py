"""Size checks for proper training and calibration sets."""

import logging

from ..data.dataset import TrainSplit

logger = logging.getLogger(__name__)


class TrainingSetValidator:
    """Rejects splits too small to train and calibrate a predictor."""

    def __init__(self, min_proper_training_size: int = 5, min_calibration_per_class: int = 3,
                 large_set_threshold: int = 50):
        self.min_proper_training_size = min_proper_training_size
        self.min_calibration_per_class = min_calibration_per_class
        self.large_set_threshold = large_set_threshold

    @classmethod
    def from_config(cls, config) -> "TrainingSetValidator":
        return cls(
            min_proper_training_size=config.min_proper_training_size,
            min_calibration_per_class=config.min_calibration_per_class,
            large_set_threshold=config.large_set_threshold,
        )

    def validate_regression(self, split: TrainSplit) -> None:
        self._check_sizes(split)

    def validate_classification(self, split: TrainSplit) -> None:
        self._check_sizes(split)

        num_proper = len(split.proper_training_set)
        num_calib = len(split.calibration_set)
        if num_proper > self.large_set_threshold and num_calib > self.large_set_threshold:
            return

        calib_counts = split.calibration_set.label_frequencies()
        for label in split.proper_training_set.get_labels():
            count = calib_counts.get(label, 0)
            if count < self.min_calibration_per_class:
                raise ValueError(
                    f"Calibration set has {count} records of label {label}, "
                    f"at least {self.min_calibration_per_class} required"
                )

    def _check_sizes(self, split: TrainSplit) -> None:
        num_proper = len(split.proper_training_set)
        num_calib = len(split.calibration_set)
        if num_proper < self.min_proper_training_size:
            raise ValueError(
                f"Proper training set has {num_proper} records, "
                f"at least {self.min_proper_training_size} required"
            )
        if num_calib < self.min_calibration_per_class:
            raise ValueError(
                f"Calibration set has {num_calib} records, "
                f"at least {self.min_calibration_per_class} required"
            )
        logger.debug(f"Validated split: {num_proper} proper training, {num_calib} calibration records")
