from __future__ import annotations

import numpy as np
import pytest

from poisson_demand.evaluators import (
    calculate_coverage,
    calculate_mae,
    calculate_pi_width,
    calculate_rmse,
    poisson_cdf,
    poisson_interval,
    poisson_quantile,
)
from poisson_demand.exceptions import InvalidInputError

PROBS = np.linspace(0.001, 0.999, 250)


@pytest.mark.parametrize("rate", [0.05, 0.7, 2.0, 13.5, 400.0])
def test_quantile_is_monotonic_and_smallest_k_with_cdf_above_p(rate: float) -> None:
    quantiles = poisson_quantile(PROBS, rate)

    assert quantiles.dtype == np.int64
    assert np.all(np.diff(quantiles) >= 0)
    assert np.all(poisson_cdf(quantiles, rate) >= PROBS - 1e-12)
    previous = quantiles - 1
    below = previous >= 0
    assert np.all(poisson_cdf(previous[below], rate) < PROBS[below])


def test_known_quantiles_of_poisson_two() -> None:
    # CDF(0)=0.135, CDF(1)=0.406, CDF(2)=0.677, CDF(5)=0.983
    assert poisson_quantile(0.1, 2.0) == 0
    assert poisson_quantile(0.2, 2.0) == 1
    assert poisson_quantile(0.5, 2.0) == 2
    assert poisson_quantile(0.95, 2.0) == 5


def test_interval_default_is_ninety_percent() -> None:
    lower, upper = poisson_interval(np.array([2.0, 10.0]))
    np.testing.assert_array_equal(lower, poisson_quantile(0.05, np.array([2.0, 10.0])))
    np.testing.assert_array_equal(upper, poisson_quantile(0.95, np.array([2.0, 10.0])))
    assert np.all(lower <= upper)


@pytest.mark.parametrize("bad", [0.0, 1.0, -0.2, 1.5, np.nan])
def test_quantile_rejects_probability_outside_unit_interval(bad: float) -> None:
    with pytest.raises(InvalidInputError):
        poisson_quantile(bad, 1.0)
    with pytest.raises(InvalidInputError):
        poisson_interval(1.0, confidence_level=bad)


def test_quantile_rejects_non_positive_rate() -> None:
    with pytest.raises(InvalidInputError):
        poisson_quantile(0.5, 0.0)


def test_coverage_counts_inclusive_bounds() -> None:
    lower = np.array([0, 1, 2, 0])
    upper = np.array([2, 3, 4, 0])
    actual = np.array([2, 0, 4, 1])
    assert calculate_coverage(lower, upper, actual) == pytest.approx(0.5)
    assert calculate_pi_width(lower, upper) == pytest.approx(1.5)


def test_coverage_rejects_mismatched_or_empty_input() -> None:
    with pytest.raises(InvalidInputError):
        calculate_coverage([0, 1], [1, 2], [1])
    with pytest.raises(InvalidInputError):
        calculate_coverage([], [], [])


def test_point_metrics() -> None:
    actual = np.array([0, 2, 4])
    mean = np.array([1.0, 2.0, 2.0])
    assert calculate_mae(actual, mean) == pytest.approx(1.0)
    assert calculate_rmse(actual, mean) == pytest.approx(np.sqrt(5.0 / 3.0))
