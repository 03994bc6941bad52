"""Tests for the regression nonconformity measures."""

import math

import numpy as np
import pytest

from vennconf.data import Dataset
from vennconf.models import RidgeScorer, SVCScorer
from vennconf.ncm import AbsoluteDifferenceNCM, LogNormalizedNCM
from vennconf.utils.exceptions import NotTrainedError


@pytest.fixture
def heteroscedastic_dataset() -> Dataset:
    """Noise grows with the single feature."""
    rng = np.random.default_rng(12)
    x = rng.uniform(0.0, 1.0, size=300)
    y = 2.0 * x + rng.normal(size=300) * (0.1 + 2.0 * x)
    return Dataset(x.reshape(-1, 1), y)


class TestAbsoluteDifferenceNCM:
    def test_score_and_interval(self, regression_dataset):
        ncm = AbsoluteDifferenceNCM(RidgeScorer()).train_ncm(regression_dataset)
        example = regression_dataset.features[0]
        prediction = ncm.predict_midpoint(example)
        assert ncm.calculate_ncs(example, prediction + 3.0) == pytest.approx(3.0)
        assert ncm.predict_interval(example, 2.0) == pytest.approx((prediction - 2.0, prediction + 2.0))
        assert ncm.predict_interval(example, math.inf) == (-math.inf, math.inf)

    def test_negative_threshold(self, regression_dataset):
        ncm = AbsoluteDifferenceNCM(RidgeScorer()).train_ncm(regression_dataset)
        with pytest.raises(ValueError):
            ncm.predict_interval(regression_dataset.features[0], -1.0)


class TestLogNormalizedNCM:
    """Test residuals normalised by a log error model."""

    def test_not_fitted(self, heteroscedastic_dataset):
        ncm = LogNormalizedNCM(RidgeScorer())
        assert not ncm.is_fitted
        with pytest.raises(NotTrainedError):
            ncm.calculate_ncs(heteroscedastic_dataset.features[0], 1.0)

    def test_score_is_normalized_residual(self, heteroscedastic_dataset):
        ncm = LogNormalizedNCM(RidgeScorer(), beta=0.05).train_ncm(heteroscedastic_dataset)
        assert ncm.is_fitted
        example = heteroscedastic_dataset.features[1]
        prediction = ncm.predict_midpoint(example)
        sigma = math.exp(ncm.error_model.predict_value(example)) + 0.05
        assert ncm.interval_scaling(example) == pytest.approx(sigma)
        assert ncm.calculate_ncs(example, prediction - 1.5) == pytest.approx(1.5 / sigma)
        lower, upper = ncm.predict_interval(example, 2.0)
        assert lower == pytest.approx(prediction - 2.0 * sigma)
        assert upper == pytest.approx(prediction + 2.0 * sigma)

    def test_wider_intervals_for_noisy_examples(self, heteroscedastic_dataset):
        ncm = LogNormalizedNCM(RidgeScorer()).train_ncm(heteroscedastic_dataset)
        easy = ncm.predict_interval([0.05], 1.0)
        hard = ncm.predict_interval([0.95], 1.0)
        assert hard[1] - hard[0] > easy[1] - easy[0]

    def test_zero_residuals(self):
        """Test that exact fits do not produce infinite log residuals."""
        x = np.arange(20, dtype=float)
        ncm = LogNormalizedNCM(RidgeScorer(alpha=1e-12), beta=0.0).train_ncm(Dataset(x, 3.0 * x))
        assert ncm.interval_scaling([4.0]) > 0
        assert math.isfinite(ncm.calculate_ncs([4.0], 12.0))

    def test_invalid_arguments(self):
        with pytest.raises(ValueError):
            LogNormalizedNCM(RidgeScorer(), beta=-0.1)
        with pytest.raises(ValueError):
            LogNormalizedNCM(SVCScorer())
        with pytest.raises(ValueError):
            LogNormalizedNCM(RidgeScorer(), error_model=SVCScorer())

    def test_default_error_model(self):
        model = RidgeScorer(alpha=2.0)
        ncm = LogNormalizedNCM(model)
        assert ncm.error_model is not model
        assert ncm.error_model.get_params() == model.get_params()

    def test_clone(self, heteroscedastic_dataset):
        ncm = LogNormalizedNCM(RidgeScorer(), RidgeScorer(alpha=5.0), beta=0.2).train_ncm(heteroscedastic_dataset)
        clone = ncm.clone()
        assert not clone.is_fitted
        assert clone.beta == 0.2
        assert clone.error_model.get_params()["alpha"] == 5.0

    def test_release_resources(self, heteroscedastic_dataset):
        ncm = LogNormalizedNCM(RidgeScorer(keep_training_data=True)).train_ncm(heteroscedastic_dataset)
        assert ncm.holds_resources()
        assert ncm.release_resources()
        assert not ncm.holds_resources()
