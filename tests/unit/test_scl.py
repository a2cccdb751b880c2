"""
Tests for tonic SCL estimation.
"""

import logging

import numpy as np
import pytest

from adaptive_eda.analysis.shared.scl import SCLEstimator


@pytest.fixture
def estimator():
    return SCLEstimator()


class TestSCLEstimator:
    def test_no_intervals_is_plain_mean(self, estimator):
        values = np.array([1.0, 2.0, 3.0])

        assert estimator.estimate(values, []) == pytest.approx(2.0)

    def test_intervals_are_closed(self, estimator):
        values = np.array([1.0, 9.0, 9.0, 9.0, 1.0])

        assert estimator.estimate(values, [(1, 3)]) == pytest.approx(1.0)

    def test_missing_samples_ignored(self, estimator):
        values = np.array([1.0, np.nan, 3.0])

        assert estimator.estimate(values, []) == pytest.approx(2.0)

    def test_overlapping_intervals(self, estimator):
        values = np.array([2.0, 5.0, 5.0, 5.0, 5.0, 2.0])

        assert estimator.estimate(values, [(1, 3), (2, 4)]) == pytest.approx(2.0)

    def test_mask_does_not_modify_input(self, estimator):
        values = np.array([1.0, 2.0, 3.0])

        masked = estimator.mask(values, [(0, 1)])

        assert np.isnan(masked[:2]).all()
        np.testing.assert_array_equal(values, [1.0, 2.0, 3.0])

    def test_undefined_when_everything_masked(self, estimator, caplog):
        values = np.array([1.0, np.nan, 3.0])

        with caplog.at_level(logging.WARNING, logger="adaptive_eda"):
            scl = estimator.estimate(values, [(0, 0), (2, 2)])

        assert scl is None
        assert "SCL undefined" in caplog.text

    def test_all_missing_signal(self, estimator):
        values = np.full(5, np.nan)

        assert estimator.estimate(values, []) is None
