"""Tests for classification nonconformity measures."""

import pytest

from vennconf.models import LogisticRegressionScorer, SVCScorer
from vennconf.ncm import (
    InverseProbabilityNCM,
    NegativeDistanceToHyperplaneNCM,
    ProbabilityMarginNCM,
)
from vennconf.utils.exceptions import NotTrainedError


class TestNegativeDistanceToHyperplane:
    """Test the hyperplane distance measure."""

    def test_requires_distance_model(self):
        with pytest.raises(ValueError):
            NegativeDistanceToHyperplaneNCM(LogisticRegressionScorer())

    def test_not_fitted(self, binary_dataset):
        ncm = NegativeDistanceToHyperplaneNCM(SVCScorer())
        assert not ncm.is_fitted
        with pytest.raises(NotTrainedError):
            ncm.calculate_ncs(binary_dataset.features[0])

    def test_negated_distances(self, binary_dataset):
        """Test ncs equals the negated signed distance for every label."""
        ncm = NegativeDistanceToHyperplaneNCM(SVCScorer())
        ncm.train_ncm(binary_dataset)
        example = binary_dataset.features[3]
        distances = ncm.model.predict_distance_to_hyperplane(example)
        scores = ncm.calculate_ncs(example)
        assert set(scores) == set(ncm.get_labels())
        for label, distance in distances.items():
            assert scores[label] == pytest.approx(-distance)
        label0, label1 = ncm.get_labels()
        assert scores[label0] == pytest.approx(-scores[label1])

    def test_true_label_conforms(self, binary_dataset):
        """Test most training records conform best to their own label."""
        ncm = NegativeDistanceToHyperplaneNCM(SVCScorer())
        ncm.train_ncm(binary_dataset)
        hits = 0
        for features, label in zip(binary_dataset.features, binary_dataset.labels):
            scores = ncm.calculate_ncs(features)
            hits += min(scores, key=scores.get) == label
        assert hits / len(binary_dataset) > 0.8

    def test_multiclass(self, multiclass_dataset):
        ncm = NegativeDistanceToHyperplaneNCM(SVCScorer())
        ncm.train_ncm(multiclass_dataset)
        scores = ncm.calculate_ncs(multiclass_dataset.features[0])
        assert len(scores) == 3

    def test_clone_unfitted(self, binary_dataset):
        ncm = NegativeDistanceToHyperplaneNCM(SVCScorer(C=0.5))
        ncm.train_ncm(binary_dataset)
        clone = ncm.clone()
        assert not clone.is_fitted
        assert clone.model.params["C"] == 0.5


class TestProbabilityMargin:
    """Test the probability margin measure."""

    def test_requires_probabilistic_model(self):
        with pytest.raises(ValueError):
            ProbabilityMarginNCM(SVCScorer())

    def test_not_fitted(self, binary_dataset):
        ncm = ProbabilityMarginNCM(LogisticRegressionScorer())
        with pytest.raises(NotTrainedError):
            ncm.calculate_ncs(binary_dataset.features[0])

    def test_bounded(self, multiclass_dataset):
        """Test scores lie in [0, 1]."""
        ncm = ProbabilityMarginNCM(LogisticRegressionScorer())
        ncm.train_ncm(multiclass_dataset)
        for features in multiclass_dataset.features[:50]:
            for score in ncm.calculate_ncs(features).values():
                assert 0.0 <= score <= 1.0

    def test_margin_formula(self, multiclass_dataset):
        ncm = ProbabilityMarginNCM(LogisticRegressionScorer())
        ncm.train_ncm(multiclass_dataset)
        example = multiclass_dataset.features[5]
        probabilities = ncm.model.predict_probabilities(example)
        scores = ncm.calculate_ncs(example)
        for label, prob in probabilities.items():
            max_other = max(p for other, p in probabilities.items() if other != label)
            assert scores[label] == pytest.approx(0.5 - (prob - max_other) / 2)

    def test_binary_equivalent_to_inverse_probability(self, binary_dataset):
        """Test that for two classes the margin equals 1 - P(label)."""
        margin = ProbabilityMarginNCM(LogisticRegressionScorer())
        margin.train_ncm(binary_dataset)
        inverse = InverseProbabilityNCM(margin.model)
        for features in binary_dataset.features[:30]:
            margin_scores = margin.calculate_ncs(features)
            inverse_scores = inverse.calculate_ncs(features)
            for label in margin_scores:
                assert margin_scores[label] == pytest.approx(inverse_scores[label], abs=1e-12)
