"""Exceptions shared by the vennconf predictors."""


class VennConfError(Exception):
    """Base exception for vennconf errors."""
    pass


class NotTrainedError(VennConfError, RuntimeError):
    """Raised when a calculator or predictor is used before build/train."""
    pass
