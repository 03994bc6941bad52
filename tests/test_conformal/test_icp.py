"""Tests for inductive and aggregated conformal predictors."""

import numpy as np
import pytest

from vennconf.conformal import ACPClassifier, ACPRegressor, ICPClassifier, ICPRegressor
from vennconf.data import Dataset
from vennconf.models import LogisticRegressionScorer, RidgeScorer, SVCScorer
from vennconf.ncm import (
    AbsoluteDifferenceNCM,
    LogNormalizedNCM,
    NegativeDistanceToHyperplaneNCM,
    ProbabilityMarginNCM,
)
from vennconf.pvalues import LinearInterpolationPValue, SmoothedPValue, StandardPValue
from vennconf.sampling import FoldedSampling, RandomSampling
from vennconf.utils.exceptions import NotTrainedError


def _train_test(dataset: Dataset, num_test: int):
    indices = np.random.default_rng(0).permutation(len(dataset))
    return dataset.subset(indices[num_test:]), dataset.subset(indices[:num_test])


class TestICPClassifier:
    """Test Mondrian inductive conformal classification."""

    @pytest.fixture
    def trained_icp(self, multiclass_dataset):
        train_set, _ = _train_test(multiclass_dataset, 100)
        split = RandomSampling(calibration_ratio=0.3).get_split(train_set, 0, seed=4)
        icp = ICPClassifier(ProbabilityMarginNCM(LogisticRegressionScorer()), StandardPValue())
        return icp.train(split)

    def test_one_calculator_per_label(self, trained_icp):
        assert trained_icp.get_labels() == [0, 1, 2]
        for calc in trained_icp.calculators.values():
            assert calc.is_ready()

    def test_pvalues_in_range(self, trained_icp, multiclass_dataset):
        for features in multiclass_dataset.features[:30]:
            pvalues = trained_icp.predict(features)
            assert set(pvalues) == {0, 1, 2}
            for p in pvalues.values():
                assert 0.0 < p <= 1.0

    def test_prediction_set_extremes(self, trained_icp, multiclass_dataset):
        """Test confidence 0 gives empty sets and confidence 1 all labels."""
        example = multiclass_dataset.features[0]
        assert trained_icp.predict_set(example, 0.0) == set()
        assert trained_icp.predict_set(example, 1.0) == {0, 1, 2}

    def test_prediction_sets_nested(self, trained_icp, multiclass_dataset):
        for features in multiclass_dataset.features[:20]:
            assert trained_icp.predict_set(features, 0.7) <= trained_icp.predict_set(features, 0.9)

    def test_validity(self, multiclass_dataset):
        """Test empirical accuracy is close to the confidence."""
        train_set, test_set = _train_test(multiclass_dataset, 100)
        split = RandomSampling(calibration_ratio=0.3).get_split(train_set, 0, seed=4)
        icp = ICPClassifier(ProbabilityMarginNCM(LogisticRegressionScorer()), SmoothedPValue(seed=3)).train(split)
        hits = sum(
            label in icp.predict_set(features, 0.8)
            for features, label in zip(test_set.features, test_set.labels)
        )
        assert hits / len(test_set) >= 0.8 - 0.12

    def test_invalid_confidence(self, trained_icp, multiclass_dataset):
        with pytest.raises(ValueError):
            trained_icp.predict_set(multiclass_dataset.features[0], 1.5)

    def test_not_trained(self, multiclass_dataset):
        icp = ICPClassifier(NegativeDistanceToHyperplaneNCM(SVCScorer()))
        with pytest.raises(NotTrainedError):
            icp.predict(multiclass_dataset.features[0])

    def test_clone(self, trained_icp):
        clone = trained_icp.clone()
        assert not clone.is_trained()
        assert not clone.ncm.is_fitted


class TestACPClassifier:
    """Test aggregated conformal classification."""

    def test_train_and_predict(self, binary_dataset):
        acp = ACPClassifier(NegativeDistanceToHyperplaneNCM(SVCScorer()), FoldedSampling(num_folds=3),
                            LinearInterpolationPValue(), seed=5)
        acp.train(binary_dataset)
        assert acp.is_trained()
        assert acp.get_num_trained_predictors() == 3
        pvalues = acp.predict(binary_dataset.features[0])
        assert set(pvalues) == {0, 1}
        assert all(0.0 < p <= 1.0 for p in pvalues.values())
        assert acp.predict_set(binary_dataset.features[0], 1.0) == {0, 1}

    def test_median_aggregation(self, binary_dataset):
        acp = ACPClassifier(NegativeDistanceToHyperplaneNCM(SVCScorer()), FoldedSampling(num_folds=3), seed=5)
        acp.train(binary_dataset)
        example = binary_dataset.features[7]
        per_split = [icp.predict(example) for icp in acp.predictors.values()]
        aggregated = acp.predict(example)
        for label in (0, 1):
            assert aggregated[label] == pytest.approx(np.median([p[label] for p in per_split]))

    def test_partial_training(self, binary_dataset):
        acp = ACPClassifier(NegativeDistanceToHyperplaneNCM(SVCScorer()), FoldedSampling(num_folds=3), seed=5)
        acp.train(binary_dataset, index=2)
        assert acp.is_partially_trained()
        assert not acp.is_trained()
        with pytest.raises(NotTrainedError):
            acp.predict(binary_dataset.features[0])
        with pytest.raises(ValueError):
            acp.train(binary_dataset, index=5)

    def test_clone_and_seed(self, binary_dataset):
        """Test the aggregated classifier exposes seed, models and clone."""
        acp = ACPClassifier(NegativeDistanceToHyperplaneNCM(SVCScorer()), FoldedSampling(num_folds=3),
                            LinearInterpolationPValue(), seed=5)
        acp.train(binary_dataset)
        assert acp.get_seed() == 5
        assert sorted(acp.get_models()) == [0, 1, 2]
        acp.get_models().clear()
        assert acp.get_num_trained_predictors() == 3

        clone = acp.clone()
        assert clone.get_seed() == 5
        assert not clone.is_partially_trained()
        assert isinstance(clone.template.pvalue_calculator, LinearInterpolationPValue)
        clone.train(binary_dataset)
        example = binary_dataset.features[3]
        assert clone.predict(example) == pytest.approx(acp.predict(example))

        clone.set_seed(9)
        assert clone.get_seed() == 9
        assert acp.get_seed() == 5


class TestICPRegressor:
    """Test inductive conformal regression."""

    @pytest.fixture
    def split(self, regression_dataset):
        return RandomSampling(calibration_ratio=0.25).get_split(regression_dataset, 0, seed=8)

    def test_interval_contains_prediction(self, split, regression_dataset):
        icp = ICPRegressor(AbsoluteDifferenceNCM(RidgeScorer())).train(split)
        example = regression_dataset.features[0]
        interval = icp.predict_interval(example, 0.8)
        assert interval.lower <= icp.ncm.model.predict_value(example) <= interval.upper
        assert interval.width > 0

    def test_wider_at_higher_confidence(self, split, regression_dataset):
        icp = ICPRegressor(AbsoluteDifferenceNCM(RidgeScorer())).train(split)
        example = regression_dataset.features[1]
        assert icp.predict_interval(example, 0.5).width <= icp.predict_interval(example, 0.9).width

    def test_unsupported_confidence_capped(self, split, regression_dataset):
        """Test an infinite threshold collapses to the observed label range."""
        icp = ICPRegressor(AbsoluteDifferenceNCM(RidgeScorer())).train(split)
        interval = icp.predict_interval(regression_dataset.features[2], 0.999)
        assert interval.lower == pytest.approx(float(np.min(regression_dataset.labels)))
        assert interval.upper == pytest.approx(float(np.max(regression_dataset.labels)))

    def test_coverage(self, regression_dataset):
        train_set, test_set = _train_test(regression_dataset, 60)
        split = RandomSampling(calibration_ratio=0.3).get_split(train_set, 0, seed=8)
        icp = ICPRegressor(AbsoluteDifferenceNCM(RidgeScorer())).train(split)
        covered = sum(
            icp.predict_interval(features, 0.8).contains(label)
            for features, label in zip(test_set.features, test_set.labels)
        )
        assert covered / len(test_set) >= 0.8 - 0.15

    def test_pvalue(self, split, regression_dataset):
        icp = ICPRegressor(AbsoluteDifferenceNCM(RidgeScorer())).train(split)
        example = regression_dataset.features[3]
        prediction = icp.ncm.model.predict_value(example)
        assert icp.predict_pvalue(example, prediction) == pytest.approx(1.0)

    def test_requires_regression_model(self):
        with pytest.raises(ValueError):
            AbsoluteDifferenceNCM(SVCScorer())

    def test_not_trained(self, regression_dataset):
        icp = ICPRegressor(AbsoluteDifferenceNCM(RidgeScorer()))
        with pytest.raises(NotTrainedError):
            icp.predict_interval(regression_dataset.features[0], 0.8)

    def test_normalized_ncm(self, split, regression_dataset):
        icp = ICPRegressor(LogNormalizedNCM(RidgeScorer())).train(split)
        example = regression_dataset.features[4]
        interval = icp.predict_interval(example, 0.8)
        assert interval.contains(icp.predict_midpoint(example))
        half_width = icp.predict_half_width(example, 0.8)
        assert interval.width <= 2 * half_width + 1e-9

    def test_requires_regression_ncm(self):
        with pytest.raises(ValueError):
            ICPRegressor(NegativeDistanceToHyperplaneNCM(SVCScorer()))


class TestACPRegressor:
    """Test aggregated conformal regression."""

    @pytest.fixture
    def acp(self, regression_dataset):
        return ACPRegressor(AbsoluteDifferenceNCM(RidgeScorer()), FoldedSampling(num_folds=3),
                            seed=2).train(regression_dataset)

    def test_trained(self, acp, regression_dataset):
        assert acp.is_trained()
        assert acp.get_num_trained_predictors() == 3
        assert acp.get_num_observations_used() == len(regression_dataset)

    def test_median_aggregation(self, acp, regression_dataset):
        example = regression_dataset.features[5]
        icps = list(acp.get_models().values())
        midpoint = np.median([icp.predict_midpoint(example) for icp in icps])
        half_width = np.median([icp.predict_half_width(example, 0.8) for icp in icps])
        interval = acp.predict_interval(example, 0.8)
        assert acp.predict_midpoint(example) == pytest.approx(midpoint)
        assert interval.lower == pytest.approx(max(midpoint - half_width, float(np.min(regression_dataset.labels))))
        assert interval.upper == pytest.approx(min(midpoint + half_width, float(np.max(regression_dataset.labels))))

    def test_unsupported_confidence_capped(self, acp, regression_dataset):
        interval = acp.predict_interval(regression_dataset.features[0], 0.999)
        assert interval.lower == pytest.approx(float(np.min(regression_dataset.labels)))
        assert interval.upper == pytest.approx(float(np.max(regression_dataset.labels)))

    def test_pvalue_median(self, acp, regression_dataset):
        example = regression_dataset.features[6]
        label = float(regression_dataset.labels[6])
        expected = np.median([icp.predict_pvalue(example, label) for icp in acp.get_models().values()])
        assert acp.predict_pvalue(example, label) == pytest.approx(expected)

    def test_partial_training(self, regression_dataset):
        acp = ACPRegressor(LogNormalizedNCM(RidgeScorer()), FoldedSampling(num_folds=3), seed=2)
        acp.train(regression_dataset, index=1)
        assert acp.is_partially_trained()
        assert not acp.is_trained()
        with pytest.raises(NotTrainedError):
            acp.predict_interval(regression_dataset.features[0], 0.8)
        with pytest.raises(ValueError, match=r"only allowed indexes are \[0, 2\]"):
            acp.train(regression_dataset, index=3)
        acp.train(regression_dataset, index=0).train(regression_dataset, index=2)
        assert acp.is_trained()

    def test_clone(self, acp, regression_dataset):
        clone = acp.clone()
        assert clone.get_seed() == acp.get_seed()
        assert not clone.is_partially_trained()
        clone.train(regression_dataset)
        example = regression_dataset.features[7]
        assert clone.predict_interval(example, 0.7) == acp.predict_interval(example, 0.7)
