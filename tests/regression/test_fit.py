"""
Tests for regression fit().

Tests the complete pipeline: validation, split, normalization,
decomposition, prediction, metrics and solution properties.
"""

import numpy as np
import pytest

from pywls import DecimalNormalization
from pywls.core.compute.device import detect_gpu
from pywls.core.compute.linalg import DECOMPOSITIONS
from pywls.core.exceptions import (
    DimensionError,
    InvalidTrainingSizeError,
    InvalidWeightsError,
    NormalizationOverflowError,
    NotPositiveDefiniteError,
    NullInputError,
    SolverError,
    ValidationError,
)
from pywls.regression import (
    RegressionData,
    RegressionOptions,
    WeightedSolution,
    fit,
)


METHODS = sorted(DECOMPOSITIONS)


def weighted_lstsq(X, y, w):
    """Reference WLS solution through an orthogonal solve on sqrt(W)X."""
    sw = np.sqrt(w)
    beta, *_ = np.linalg.lstsq(X * sw[:, None], y * sw, rcond=None)
    return beta


# ═══════════════════════════════════════════════════════════════════════
# End-to-end scenarios
# ═══════════════════════════════════════════════════════════════════════


class TestFitBasic:

    def test_perfect_linear_relationship(self, linear_sequence):
        x, y, w = linear_sequence
        result = fit(x, y, w, training_percentage=80)
        assert isinstance(result, WeightedSolution)
        np.testing.assert_allclose(result.predictions, [9.0, 10.0])
        np.testing.assert_allclose(result.held_out_outputs, [9.0, 10.0])
        np.testing.assert_allclose(result.coefficients, [1.0])

    def test_intercept_with_lu(self):
        inputs = [[1, 2, 3, 4], [4, 5, 2, 3]]
        outputs = [15, 20, 10, 15]
        result = fit(
            inputs, outputs, [1, 1, 1, 1],
            training_percentage=99,
            use_intercept=True,
            matrix_decomposition='lu',
        )
        assert len(result.coefficients) == 3
        assert result.intercept == 0.0
        assert result.training_size == 3
        assert result.held_out_size == 1
        assert result.backend_name == 'cpu_lu'

    def test_intercept_recovered_as_first_coefficient(self, rng):
        X = rng.standard_normal((30, 2))
        y = 2.0 + X @ [3.0, -1.0]
        result = fit(X, y, training_percentage=70, use_intercept=True,
                     matrix_layout='rows')
        np.testing.assert_allclose(result.coefficients, [2.0, 3.0, -1.0], atol=1e-10)
        assert result.intercept == 0.0

    def test_no_intercept_keeps_intercept_zero(self, weighted_data):
        X, y, w, _ = weighted_data
        result = fit(X, y, w, training_percentage=80, matrix_layout='rows')
        assert result.intercept == 0.0
        assert len(result.coefficients) == 3

    def test_weights_default_to_unit(self, linear_sequence):
        x, y, w = linear_sequence
        explicit = fit(x, y, w, training_percentage=80)
        implicit = fit(x, y, training_percentage=80)
        np.testing.assert_array_equal(explicit.coefficients, implicit.coefficients)

    def test_with_options_object(self, linear_sequence):
        x, y, w = linear_sequence
        opts = RegressionOptions(training_percentage=80, matrix_decomposition='qr')
        result = fit(x, y, w, opts)
        assert result.options == opts
        assert result.info['method'] == 'qr'

    def test_override_on_top_of_options(self, linear_sequence):
        x, y, w = linear_sequence
        opts = RegressionOptions(training_percentage=80)
        result = fit(x, y, w, opts, use_intercept=True)
        assert result.use_intercept
        assert len(result.coefficients) == 2

    def test_from_regression_data(self, linear_sequence):
        x, y, w = linear_sequence
        data = RegressionData.from_arrays(x, y, w)
        result = fit(data, training_percentage=80)
        np.testing.assert_allclose(result.predictions, [9.0, 10.0])

    def test_regression_data_with_outputs_rejected(self, linear_sequence):
        x, y, w = linear_sequence
        data = RegressionData.from_arrays(x, y, w)
        with pytest.raises(ValueError, match="must be None"):
            fit(data, y, training_percentage=80)


# ═══════════════════════════════════════════════════════════════════════
# Correctness against a reference solver
# ═══════════════════════════════════════════════════════════════════════


class TestFitCorrectness:

    @pytest.mark.parametrize("method", METHODS)
    def test_unit_weights_match_ordinary_least_squares(self, noisy_weighted_data, method):
        X, y, _ = noisy_weighted_data
        result = fit(X, y, np.ones(len(y)), training_percentage=75,
                     matrix_layout='rows', matrix_decomposition=method)
        n_train = result.training_size
        expected, *_ = np.linalg.lstsq(X[:n_train], y[:n_train], rcond=None)
        np.testing.assert_allclose(result.coefficients, expected, rtol=1e-8, atol=1e-10)

    @pytest.mark.parametrize("method", METHODS)
    def test_weighted_matches_reference(self, noisy_weighted_data, method):
        X, y, w = noisy_weighted_data
        result = fit(X, y, w, training_percentage=75,
                     matrix_layout='rows', matrix_decomposition=method)
        n_train = result.training_size
        expected = weighted_lstsq(X[:n_train], y[:n_train], w[:n_train])
        np.testing.assert_allclose(result.coefficients, expected, rtol=1e-8, atol=1e-10)

    @pytest.mark.parametrize("method", METHODS)
    def test_noise_free_recovers_truth(self, weighted_data, method):
        X, y, w, beta_true = weighted_data
        result = fit(X, y, w, training_percentage=80,
                     matrix_layout='rows', matrix_decomposition=method)
        np.testing.assert_allclose(result.coefficients, beta_true, atol=1e-10)
        np.testing.assert_allclose(result.predictions, y[40:], atol=1e-10)

    def test_weights_change_the_fit(self, noisy_weighted_data):
        X, y, w = noisy_weighted_data
        weighted = fit(X, y, w, training_percentage=75, matrix_layout='rows')
        unweighted = fit(X, y, training_percentage=75, matrix_layout='rows')
        assert not np.allclose(weighted.coefficients, unweighted.coefficients)

    def test_held_out_weights_ignored(self, noisy_weighted_data):
        X, y, w = noisy_weighted_data
        w_changed = w.copy()
        w_changed[60:] = 100.0
        a = fit(X, y, w, training_percentage=75, matrix_layout='rows')
        b = fit(X, y, w_changed, training_percentage=75, matrix_layout='rows')
        np.testing.assert_array_equal(a.coefficients, b.coefficients)

    def test_scaling_weights_leaves_coefficients(self, noisy_weighted_data):
        X, y, w = noisy_weighted_data
        a = fit(X, y, w, training_percentage=75, matrix_layout='rows')
        b = fit(X, y, 10.0 * w, training_percentage=75, matrix_layout='rows')
        np.testing.assert_allclose(a.coefficients, b.coefficients, rtol=1e-10)

    def test_zero_weight_samples_do_not_influence(self, noisy_weighted_data):
        X, y, w = noisy_weighted_data
        w = w.copy()
        w[:5] = 0.0
        y_perturbed = y.copy()
        y_perturbed[:5] += 1000.0
        a = fit(X, y, w, training_percentage=75, matrix_layout='rows')
        b = fit(X, y_perturbed, w, training_percentage=75, matrix_layout='rows')
        np.testing.assert_allclose(a.coefficients, b.coefficients, rtol=1e-10)
        assert any("zero weight" in msg for msg in a.warnings)

    def test_methods_agree(self, noisy_weighted_data):
        X, y, w = noisy_weighted_data
        results = [
            fit(X, y, w, training_percentage=75, matrix_layout='rows',
                matrix_decomposition=m).coefficients
            for m in METHODS
        ]
        for coef in results[1:]:
            np.testing.assert_allclose(coef, results[0], rtol=1e-8, atol=1e-10)


# ═══════════════════════════════════════════════════════════════════════
# Layout, normalization and determinism
# ═══════════════════════════════════════════════════════════════════════


class TestFitBehavior:

    def test_rows_and_columns_layout_agree(self, weighted_data):
        X, y, w, _ = weighted_data
        by_rows = fit(X, y, w, training_percentage=80, matrix_layout='rows')
        by_columns = fit(X.T, y, w, training_percentage=80, matrix_layout='columns')
        np.testing.assert_allclose(by_rows.coefficients, by_columns.coefficients)
        np.testing.assert_allclose(by_rows.predictions, by_columns.predictions)

    def test_list_of_feature_vectors(self):
        inputs = [[1.0, 2.0, 3.0, 4.0, 5.0], [2.0, 1.0, 0.0, 1.0, 3.0]]
        outputs = [a + 2 * b for a, b in zip(*inputs)]
        result = fit(inputs, outputs, training_percentage=80)
        np.testing.assert_allclose(result.coefficients, [1.0, 2.0], atol=1e-10)
        assert result.n_features == 2

    def test_idempotent(self, noisy_weighted_data):
        X, y, w = noisy_weighted_data
        a = fit(X, y, w, training_percentage=75, matrix_layout='rows')
        b = fit(X, y, w, training_percentage=75, matrix_layout='rows')
        assert np.array_equal(a.coefficients, b.coefficients)
        assert np.array_equal(a.predictions, b.predictions)
        assert a.metrics == b.metrics

    def test_does_not_modify_inputs(self, noisy_weighted_data):
        X, y, w = noisy_weighted_data
        X_copy, y_copy, w_copy = X.copy(), y.copy(), w.copy()
        fit(X, y, w, training_percentage=75, matrix_layout='rows',
            normalization=DecimalNormalization())
        np.testing.assert_array_equal(X, X_copy)
        np.testing.assert_array_equal(y, y_copy)
        np.testing.assert_array_equal(w, w_copy)

    def test_decimal_normalization_per_partition(self):
        x = np.array([1.0, 2.0, 3.0, 4.0, 20.0])
        result = fit(x, 3.0 * x, training_percentage=80,
                     normalization=DecimalNormalization())
        np.testing.assert_allclose(result.coefficients, [0.3])
        # each partition carries its own scale
        np.testing.assert_allclose(result.predictions, [0.06])
        np.testing.assert_allclose(result.held_out_outputs, [0.6])

    def test_normalization_overflow_propagates(self):
        x = np.array([1.0, 2.0, 3.0, 4.0, 5.0])
        y = np.array([1.0, 2.0, 3e99, 4.0, 5.0])
        with pytest.raises(NormalizationOverflowError):
            fit(x, y, training_percentage=80, normalization=DecimalNormalization())

    def test_unknown_decomposition_falls_back_to_cholesky(self, linear_sequence):
        x, y, w = linear_sequence
        with pytest.warns(UserWarning, match="Unknown matrix_decomposition"):
            result = fit(x, y, w, training_percentage=80,
                         matrix_decomposition='householder')
        assert result.options.matrix_decomposition == 'cholesky'
        assert result.backend_name == 'cpu_cholesky'
        np.testing.assert_allclose(result.predictions, [9.0, 10.0])


# ═══════════════════════════════════════════════════════════════════════
# Validation errors
# ═══════════════════════════════════════════════════════════════════════


class TestFitValidation:

    def test_default_training_percentage_leaves_nothing_to_predict(self, linear_sequence):
        x, y, w = linear_sequence
        with pytest.raises(InvalidTrainingSizeError, match="held-out"):
            fit(x, y, w)

    def test_training_partition_too_small(self, linear_sequence):
        x, y, w = linear_sequence
        with pytest.raises(InvalidTrainingSizeError, match="at least 2 required"):
            fit(x, y, w, training_percentage=10)

    def test_fewer_training_samples_than_features(self, rng):
        X = rng.standard_normal((6, 5))
        with pytest.raises(InvalidTrainingSizeError) as exc_info:
            fit(X, rng.standard_normal(6), training_percentage=50, matrix_layout='rows')
        assert exc_info.value.min_training_size == 5

    @pytest.mark.parametrize("pct", [0, -5, 150])
    def test_percentage_out_of_range(self, linear_sequence, pct):
        x, y, w = linear_sequence
        with pytest.raises(InvalidTrainingSizeError):
            fit(x, y, w, training_percentage=pct)

    def test_missing_inputs(self, linear_sequence):
        _, y, w = linear_sequence
        with pytest.raises(NullInputError):
            fit(None, y, w, training_percentage=80)

    def test_missing_outputs(self, linear_sequence):
        x, _, w = linear_sequence
        with pytest.raises(NullInputError) as exc_info:
            fit(x, None, w, training_percentage=80)
        assert exc_info.value.parameter == 'outputs'

    def test_empty_inputs(self):
        with pytest.raises(NullInputError):
            fit([], [], training_percentage=80)

    def test_none_entry_in_weights(self, linear_sequence):
        x, y, _ = linear_sequence
        weights = [1.0] * 9 + [None]
        with pytest.raises(NullInputError):
            fit(x, y, weights, training_percentage=80)

    def test_mismatched_lengths(self, linear_sequence):
        x, y, w = linear_sequence
        with pytest.raises(DimensionError, match="Inconsistent lengths"):
            fit(x, y[:-1], training_percentage=80)

    def test_ragged_feature_vectors(self):
        with pytest.raises(DimensionError):
            fit([[1.0, 2.0, 3.0], [1.0, 2.0]], [1.0, 2.0, 3.0], training_percentage=60)

    def test_3d_inputs(self):
        with pytest.raises(DimensionError):
            fit(np.zeros((2, 2, 2)), [1.0, 2.0], training_percentage=50)

    def test_weights_wrong_length(self, linear_sequence):
        x, y, _ = linear_sequence
        with pytest.raises(InvalidWeightsError, match="does not match"):
            fit(x, y, np.ones(9), training_percentage=80)

    def test_negative_weight(self, linear_sequence):
        x, y, w = linear_sequence
        w = w.copy()
        w[3] = -1.0
        with pytest.raises(InvalidWeightsError) as exc_info:
            fit(x, y, w, training_percentage=80)
        assert exc_info.value.bad_indices == (3,)

    def test_nan_weight(self, linear_sequence):
        x, y, w = linear_sequence
        w = w.copy()
        w[0] = np.nan
        with pytest.raises(InvalidWeightsError):
            fit(x, y, w, training_percentage=80)

    def test_non_finite_outputs(self, linear_sequence):
        x, y, w = linear_sequence
        y = y.copy()
        y[2] = np.inf
        with pytest.raises(ValidationError, match="outputs"):
            fit(x, y, w, training_percentage=80)

    def test_non_finite_outputs_with_normalization(self, linear_sequence):
        x, y, w = linear_sequence
        y = y.copy()
        y[2] = np.nan
        with pytest.raises(NormalizationOverflowError, match="NaN/Inf"):
            fit(x, y, w, training_percentage=80,
                normalization=DecimalNormalization())

    def test_non_finite_held_out_inputs_with_normalization(self, linear_sequence):
        x, y, w = linear_sequence
        x = x.copy()
        x[-1] = np.inf
        with pytest.raises(NormalizationOverflowError):
            fit(x, y, w, training_percentage=80,
                normalization=DecimalNormalization())

    @pytest.mark.parametrize("pct", ['80', True, None])
    def test_training_percentage_not_a_number(self, linear_sequence, pct):
        x, y, w = linear_sequence
        with pytest.raises(InvalidTrainingSizeError, match="expected a real number"):
            fit(x, y, w, training_percentage=pct)

    def test_unknown_option(self, linear_sequence):
        x, y, w = linear_sequence
        with pytest.raises(ValidationError, match="Unknown regression option"):
            fit(x, y, w, training_percentage=80, ridge=0.1)

    def test_unknown_backend(self, linear_sequence):
        x, y, w = linear_sequence
        with pytest.raises(ValueError, match="Unknown backend"):
            fit(x, y, w, training_percentage=80, backend='tpu')

    @pytest.mark.skipif(detect_gpu() is not None, reason="GPU available")
    def test_gpu_requested_without_gpu(self, linear_sequence):
        x, y, w = linear_sequence
        with pytest.raises(RuntimeError, match="GPU requested"):
            fit(x, y, w, training_percentage=80, backend='gpu')


# ═══════════════════════════════════════════════════════════════════════
# Solver failures
# ═══════════════════════════════════════════════════════════════════════


class TestFitSolverFailure:

    @pytest.mark.parametrize("method", METHODS)
    def test_zero_feature_column(self, method):
        inputs = [[1.0, 2.0, 3.0, 4.0, 5.0], [0.0, 0.0, 0.0, 0.0, 0.0]]
        with pytest.raises(SolverError):
            fit(inputs, [1.0, 2.0, 3.0, 4.0, 5.0], training_percentage=80,
                matrix_decomposition=method)

    @pytest.mark.parametrize("method", METHODS)
    def test_all_training_weights_zero(self, linear_sequence, method):
        x, y, _ = linear_sequence
        with pytest.raises(SolverError):
            fit(x, y, np.zeros(10), training_percentage=80,
                matrix_decomposition=method)

    def test_cholesky_failure_is_not_positive_definite(self, linear_sequence):
        x, y, _ = linear_sequence
        with pytest.raises(NotPositiveDefiniteError):
            fit(x, y, np.zeros(10), training_percentage=80)


# ═══════════════════════════════════════════════════════════════════════
# Solution properties
# ═══════════════════════════════════════════════════════════════════════


class TestSolution:

    @pytest.fixture
    def result(self, noisy_weighted_data):
        X, y, w = noisy_weighted_data
        return fit(X, y, w, training_percentage=75, matrix_layout='rows',
                   use_intercept=True)

    def test_partition_sizes(self, result):
        assert result.training_size == 60
        assert result.held_out_size == 20
        assert result.predictions.shape == (20,)
        assert result.held_out_outputs.shape == (20,)

    def test_arrays_read_only(self, result):
        for arr in (result.coefficients, result.predictions, result.held_out_outputs,
                    result.fitted_values, result.residuals):
            assert not arr.flags.writeable
        with pytest.raises(ValueError):
            result.predictions[0] = 0.0

    def test_training_diagnostics(self, result, noisy_weighted_data):
        _, y, w = noisy_weighted_data
        np.testing.assert_allclose(result.residuals, y[:60] - result.fitted_values)
        np.testing.assert_allclose(
            result.weighted_rss, np.sum(w[:60] * result.residuals ** 2)
        )
        assert result.rank == 4
        assert np.isfinite(result.condition_number)

    def test_metrics_counts(self, result):
        m = result.metrics
        assert m.n_predictions == 20
        assert m.n_total == 80
        assert m.n_params == 4
        assert m.degrees_of_freedom == 76
        assert 0.0 < m.r_squared <= 1.0

    def test_predict_matches_held_out_predictions(self, result, noisy_weighted_data):
        X, _, _ = noisy_weighted_data
        np.testing.assert_allclose(result.predict(X[60:]), result.predictions)

    def test_predict_wrong_feature_count(self, result):
        with pytest.raises(DimensionError, match="expected 3 features"):
            result.predict(np.zeros((4, 2)))

    def test_info_and_timing(self, result):
        assert result.info['method'] == 'cholesky'
        assert result.info['rank'] == 4
        assert 'solve' in result.timing
        assert 'total_seconds' in result.timing
        assert 'pywls_version' in result.provenance

    def test_summary(self, result):
        text = result.summary()
        assert "Weighted Linear Regression Results" in text
        assert "(Intercept)" in text
        assert "Held-out metrics:" in text
        assert "R-squared" in text
        assert "Backend: cpu_cholesky" in text

    def test_repr(self, result):
        assert repr(result).startswith("WeightedSolution(")
