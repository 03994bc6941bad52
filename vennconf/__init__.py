"""vennconf: conformal and Venn-ABERS calibration of scoring models."""

__version__ = "0.1.0"
