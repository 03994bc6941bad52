"""Datasets and train/calibration splits."""

from .dataset import Dataset, TrainSplit

__all__ = ["Dataset", "TrainSplit"]
