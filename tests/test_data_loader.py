from __future__ import annotations

import datetime as dt

import numpy as np
import pandas as pd
import pytest

from poisson_demand.data_loader import (
    densify_series,
    observations_to_frame,
    simulate_poisson_series,
    sparse_observations,
    split_train_test,
)
from poisson_demand.exceptions import InvalidInputError


def _sparse_df() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "date": ["2021-03-01", "2021-03-04", "2021-03-05", "2021-03-11"],
            "sales": [2, 1, 5, 3],
        }
    )


def test_densify_fills_every_calendar_day_with_zeros() -> None:
    dense = densify_series(_sparse_df())

    assert len(dense) == 11  # 1st..11th inclusive
    assert list(dense.columns) == ["date", "sales"]
    assert (dense["date"].diff().dropna() == pd.Timedelta(days=1)).all()
    assert dense["sales"].tolist() == [2, 0, 0, 1, 5, 0, 0, 0, 0, 0, 3]


def test_densify_preserves_total_count_for_random_observations() -> None:
    rng = np.random.default_rng(3)
    for _ in range(20):
        n_obs = rng.integers(1, 30)
        offsets = rng.choice(200, size=n_obs, replace=False)
        dates = pd.Timestamp("2019-06-01") + pd.to_timedelta(offsets, unit="D")
        counts = rng.integers(1, 50, size=n_obs)
        dense = densify_series(pd.DataFrame({"date": dates, "sales": counts}))

        assert len(dense) == (dates.max() - dates.min()).days + 1
        assert dense["sales"].sum() == counts.sum()


def test_densify_accepts_pairs_and_sums_same_day_records() -> None:
    observations = [
        (dt.date(2022, 1, 3), 1),
        (dt.datetime(2022, 1, 1, 9, 30), 2),
        (dt.datetime(2022, 1, 1, 17, 0), 4),
    ]
    dense = densify_series(observations)

    assert dense["sales"].tolist() == [6, 0, 1]
    assert dense["date"].iloc[0] == pd.Timestamp("2022-01-01")


def test_single_observation_gives_one_day_series() -> None:
    dense = densify_series([("2020-02-29", 7)])
    assert len(dense) == 1
    assert dense["sales"].iloc[0] == 7


def test_densify_with_explicit_range() -> None:
    dense = densify_series(_sparse_df(), start="2021-02-27", end="2021-03-12")
    assert len(dense) == 14
    assert dense["sales"].sum() == 11

    with pytest.raises(InvalidInputError):
        densify_series(_sparse_df(), start="2021-03-02")


@pytest.mark.parametrize(
    "observations",
    [
        [],
        pd.DataFrame({"date": [], "sales": []}),
    ],
)
def test_empty_observations_rejected(observations) -> None:
    with pytest.raises(InvalidInputError):
        densify_series(observations)


def test_invalid_counts_rejected() -> None:
    with pytest.raises(InvalidInputError):
        observations_to_frame([("2021-01-01", -1)])
    with pytest.raises(InvalidInputError):
        observations_to_frame([("2021-01-01", 1.5)])
    with pytest.raises(InvalidInputError):
        observations_to_frame(pd.DataFrame({"day": ["2021-01-01"], "sales": [1]}))


def test_split_is_chronological() -> None:
    features = np.arange(20, dtype=float).reshape(10, 2)
    targets = np.arange(10)
    X_train, y_train, X_test, y_test = split_train_test(features, targets, test_size=3)

    assert y_train.tolist() == list(range(7))
    assert y_test.tolist() == [7, 8, 9]
    np.testing.assert_array_equal(X_test, features[7:])


@pytest.mark.parametrize("test_size", [0, -2, 10, 11, 2.5])
def test_split_rejects_bad_test_size(test_size: int) -> None:
    with pytest.raises(InvalidInputError):
        split_train_test(np.zeros((10, 2)), np.zeros(10), test_size=test_size)


def test_simulated_series_round_trips_through_sparse_observations() -> None:
    series = simulate_poisson_series(300, rate=0.4, seed=1)
    sparse = sparse_observations(series)

    assert (sparse["sales"] > 0).all()
    dense = densify_series(sparse)
    first, last = sparse["date"].iloc[0], sparse["date"].iloc[-1]
    expected = series[(series["date"] >= first) & (series["date"] <= last)].reset_index(drop=True)
    pd.testing.assert_frame_equal(dense, expected, check_dtype=False)


def test_simulate_rejects_negative_rate() -> None:
    with pytest.raises(InvalidInputError):
        simulate_poisson_series(5, rate=np.array([1.0, -1.0, 1.0, 1.0, 1.0]))
