"""
Tests for RegressionOptions and resolve_options().
"""

from dataclasses import FrozenInstanceError
import warnings

import pytest

from pywls.core.exceptions import InvalidTrainingSizeError, ValidationError
from pywls.normalization import DecimalNormalization
from pywls.regression.options import (
    DEFAULT_DECOMPOSITION,
    MATRIX_DECOMPOSITIONS,
    RegressionOptions,
    resolve_options,
)


class TestDefaults:

    def test_default_values(self):
        opts = RegressionOptions()
        assert opts.training_percentage == 100.0
        assert opts.normalization is None
        assert opts.matrix_layout == 'columns'
        assert opts.matrix_decomposition == 'cholesky'
        assert opts.use_intercept is False

    def test_frozen(self):
        with pytest.raises(FrozenInstanceError):
            RegressionOptions().use_intercept = True

    def test_decomposition_names(self):
        assert set(MATRIX_DECOMPOSITIONS) == {
            'cholesky', 'lu', 'qr', 'svd', 'eigen', 'gram_schmidt'
        }
        assert DEFAULT_DECOMPOSITION == 'cholesky'


class TestResolveOptions:

    def test_none_gives_defaults(self):
        assert resolve_options() == RegressionOptions()

    def test_valid_options_returned_unchanged(self):
        opts = RegressionOptions(training_percentage=80, matrix_decomposition='svd')
        with warnings.catch_warnings():
            warnings.simplefilter('error')
            assert resolve_options(opts) is opts

    def test_overrides_applied(self):
        opts = resolve_options(
            RegressionOptions(training_percentage=80),
            use_intercept=True,
            normalization=DecimalNormalization(),
        )
        assert opts.training_percentage == 80
        assert opts.use_intercept is True
        assert isinstance(opts.normalization, DecimalNormalization)

    def test_unknown_override(self):
        with pytest.raises(ValidationError, match="Unknown regression option"):
            resolve_options(shrinkage=0.5)

    def test_not_an_options_object(self):
        with pytest.raises(ValidationError, match="expected RegressionOptions"):
            resolve_options({'training_percentage': 80})

    def test_bad_percentage(self):
        with pytest.raises(InvalidTrainingSizeError):
            resolve_options(training_percentage=0)

    def test_bad_layout(self):
        with pytest.raises(ValidationError, match="matrix_layout"):
            resolve_options(matrix_layout='diagonal')

    def test_bad_normalization(self):
        with pytest.raises(ValidationError, match="normalization"):
            resolve_options(normalization='decimal')

    def test_unknown_decomposition_warns_and_falls_back(self):
        with pytest.warns(UserWarning, match="'householder'"):
            opts = resolve_options(matrix_decomposition='householder')
        assert opts.matrix_decomposition == 'cholesky'
