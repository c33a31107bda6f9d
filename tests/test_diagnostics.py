"""Tests for term diagnostics."""

import numpy as np
import pytest
from sklearn.datasets import make_regression

from jaxgam import (
    AdditiveModel,
    DiagnosticsConfig,
    Instances,
    Mode,
    StepFunction,
    TermAggregator,
    TermWeight,
    UnknownModeError,
    diagnose,
    rank_terms,
)
from jaxgam.diagnostics import group_by_term


def small_model():
    """Term (0,) contributes 1, 2, 3 on X below; term (1,) is always 10."""
    model = AdditiveModel()
    model.add((0,), StepFunction(0, [1.0, 2.0, np.inf], [1.0, 2.0, 3.0]))
    model.add((1,), StepFunction.constant(1, 10.0))
    return model


X_SMALL = np.array([[1.0, -4.0], [2.0, 0.0], [3.0, np.nan]])


def step_model_from_data(X, coef, n_bins=10, rounds=1):
    """Approximate x -> coef * x per feature with quantile step functions."""
    model = AdditiveModel()
    for j in range(X.shape[1]):
        edges = np.unique(np.quantile(X[:, j], np.linspace(0.1, 0.9, n_bins - 1)))
        splits = np.append(edges, np.inf)
        levels = np.append(edges, X[:, j].max())
        for _ in range(rounds):
            model.add((j,), StepFunction(j, splits, coef[j] * levels / rounds))
    return model


class TestDiagnose:
    def test_variance(self):
        """Test variance of contributions [1, 2, 3] is 2/3."""
        weights = dict(diagnose(small_model(), X_SMALL, mode=Mode.L2))

        assert weights[(0,)] == pytest.approx(2.0 / 3.0)
        assert weights[(1,)] == 0.0

    def test_mean_absolute_deviation(self):
        """Test MAD of contributions [1, 2, 3] is 2/3."""
        weights = dict(diagnose(small_model(), X_SMALL, mode=Mode.L1))

        assert weights[(0,)] == pytest.approx(2.0 / 3.0)
        assert weights[(1,)] == 0.0

    def test_default_mode_is_variance(self):
        """Test the default mode is L2."""
        model = AdditiveModel()
        model.add((0,), StepFunction(0, [0.0, np.inf], [0.0, 4.0]))
        X = np.array([[-1.0], [1.0], [1.0], [1.0]])

        # contributions [0, 4, 4, 4]: variance 3, MAD 1.5
        assert diagnose(model, X)[0].weight == pytest.approx(3.0)
        assert diagnose(model, X, mode="L1")[0].weight == pytest.approx(1.5)

    def test_one_weight_per_distinct_term(self):
        """Test repeated terms are summed before the statistic."""
        model = AdditiveModel()
        model.add((0,), StepFunction(0, [1.0, 2.0, np.inf], [1.0, 2.0, 3.0]))
        model.add((1,), StepFunction.constant(1, 5.0))
        model.add((0,), StepFunction(0, [1.5, np.inf], [0.0, 1.0]))

        weights = diagnose(model, X_SMALL)

        assert [element.term for element in weights] == [(0,), (1,)]
        # contributions [1, 3, 4]
        assert weights[0].weight == pytest.approx(np.var([1.0, 3.0, 4.0]))

    def test_rounds_cancelling_out(self):
        """Test functions that sum to a constant give zero weight."""
        f = StepFunction(0, [1.5, np.inf], [-1.0, 1.0])
        g = f.copy().scale_by(-1.0)

        weights = diagnose([((0,), f), ((0,), g)], X_SMALL)

        assert weights == [TermWeight((0,), 0.0)]

    def test_missing_values_use_missing_prediction(self):
        """Test NaN attribute values are scored, not rejected."""
        f = StepFunction(1, [0.0, np.inf], [0.0, 0.0], 6.0)

        weights = diagnose([((1,), f)], X_SMALL, mode="L1")

        # contributions [0, 0, 6]: mean 2, MAD (2 + 2 + 4) / 3
        assert weights[0].weight == pytest.approx(8.0 / 3.0)

    def test_empty_instances(self):
        """Test an empty dataset gives zero weights."""
        weights = diagnose(small_model(), np.empty((0, 2)))

        assert weights == [TermWeight((0,), 0.0), TermWeight((1,), 0.0)]

    def test_instance_sequence_matches_dataset(self):
        """Test row-wise evaluation agrees with column-wise evaluation."""
        instances = Instances(X_SMALL)

        by_column = diagnose(small_model(), instances)
        by_row = diagnose(small_model(), list(instances))

        assert [e.term for e in by_row] == [e.term for e in by_column]
        assert [e.weight for e in by_row] == pytest.approx(
            [e.weight for e in by_column]
        )

    def test_entries_are_not_modified(self):
        """Test diagnostics leave the functions untouched."""
        model = small_model()
        f = model.get_regressors()[0]

        diagnose([((0,), f), ((0,), f)], X_SMALL)

        np.testing.assert_array_equal(f.predictions, [1.0, 2.0, 3.0])

    def test_informative_features_rank_first(self):
        """Test features without effect get zero weight on real data."""
        X, y, coef = make_regression(
            n_samples=300, n_features=6, n_informative=2, coef=True, random_state=0
        )
        model = step_model_from_data(X, coef)

        ranked = rank_terms(diagnose(model, X))

        informative = {(j,) for j in np.flatnonzero(coef)}
        assert {element.term for element in ranked[:2]} == informative
        assert all(element.weight > 0 for element in ranked[:2])
        assert all(element.weight == 0.0 for element in ranked[2:])

    def test_compressed_model_has_same_weights(self):
        """Test merging rounds into one function keeps the weights."""
        X, y, coef = make_regression(
            n_samples=200, n_features=4, n_informative=3, coef=True, random_state=1
        )
        model = step_model_from_data(X, coef, rounds=3)

        compressed = model.compress()

        assert len(compressed) == 4
        for mode in (Mode.L1, Mode.L2):
            expected = diagnose(model, X, mode=mode)
            actual = diagnose(compressed, X, mode=mode)
            assert [e.term for e in actual] == [e.term for e in expected]
            assert [e.weight for e in actual] == pytest.approx(
                [e.weight for e in expected]
            )


class TestTermAggregator:
    def test_contribution(self):
        """Test per-instance contributions of one term."""
        aggregator = TermAggregator()
        functions = small_model().get_regressors()[:1]

        contribution = aggregator.contribution(functions, Instances(X_SMALL))

        np.testing.assert_array_equal(np.asarray(contribution), [1.0, 2.0, 3.0])

    def test_config_mode_string(self):
        """Test the config accepts mode names."""
        aggregator = TermAggregator(DiagnosticsConfig(mode="L1"))
        assert aggregator.config.mode is Mode.L1

    def test_verbose_prints_terms(self, capsys):
        """Test verbose mode reports each term."""
        aggregator = TermAggregator(DiagnosticsConfig(verbose=True))

        aggregator.diagnose(small_model(), X_SMALL)

        out = capsys.readouterr().out
        assert "Term [0]" in out
        assert "Term [1]" in out


class TestGrouping:
    def test_structural_equality(self):
        """Test equal terms given as different containers form one group."""
        f = StepFunction.constant(0, 1.0)
        g = StepFunction.constant(0, 2.0)
        h = StepFunction.constant(1, 3.0)

        groups = group_by_term(
            [([0, 1], f), (np.array([0, 1]), g), ((1, 0), h), (0, f)]
        )

        assert list(groups) == [(0, 1), (1, 0), (0,)]
        assert groups[(0, 1)] == [f, g]

    def test_model_entries(self):
        """Test a model is grouped through get_terms/get_regressors."""
        model = small_model()
        groups = group_by_term(model)
        assert list(groups) == [(0,), (1,)]


class TestMode:
    @pytest.mark.parametrize(
        "text, expected",
        [
            ("L1", Mode.L1),
            ("L2", Mode.L2),
            ("l1", Mode.L1),
            ("Variance", Mode.L2),
            ("MeanAbsoluteDeviation", Mode.L1),
            (None, Mode.L2),
            (Mode.L1, Mode.L1),
        ],
    )
    def test_parse(self, text, expected):
        """Test mode names are recognised."""
        assert Mode.parse(text) is expected

    @pytest.mark.parametrize("text", ["L3", "", "variance2"])
    def test_unknown_mode(self, text):
        """Test unknown names are rejected, not defaulted."""
        with pytest.raises(UnknownModeError):
            Mode.parse(text)

    def test_unknown_mode_in_diagnose(self):
        """Test diagnose rejects unknown modes."""
        with pytest.raises(UnknownModeError):
            diagnose(small_model(), X_SMALL, mode="L3")


class TestRanking:
    def test_descending_and_stable(self):
        """Test ranking sorts by weight and keeps ties in order."""
        weights = [
            TermWeight((0,), 1.0),
            TermWeight((1,), 3.0),
            TermWeight((2,), 1.0),
            TermWeight((3,), 0.0),
        ]

        ranked = rank_terms(weights)

        assert [element.term for element in ranked] == [(1,), (0,), (2,), (3,)]

    def test_to_line(self):
        """Test the output line format."""
        assert TermWeight((0, 3), 0.25).to_line() == "[0, 3]: 0.25"
        assert TermWeight((4,), 0.0).to_line() == "[4]: 0.0"
