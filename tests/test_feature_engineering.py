from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from poisson_demand.exceptions import InvalidInputError
from poisson_demand.feature_engineering import create_lag_examples

SCENARIO = [0, 0, 3, 0, 1, 2, 0, 4, 0, 0, 1, 0, 0, 5, 2]


def test_scenario_lag_three() -> None:
    features, targets, positions = create_lag_examples(np.array(SCENARIO), lag_window=3)

    assert features.shape == (12, 3)
    assert features[0].tolist() == [0, 0, 3]
    assert targets[0] == 0
    assert features[-1].tolist() == [0, 0, 5]
    assert targets[-1] == 2
    assert positions.tolist() == list(range(3, 15))


def test_example_count_and_alignment_for_many_lags() -> None:
    rng = np.random.default_rng(0)
    counts = rng.poisson(1.5, size=40)
    for lag in range(1, 40):
        features, targets, _ = create_lag_examples(counts, lag_window=lag)
        assert len(targets) == 40 - lag
        np.testing.assert_array_equal(targets, counts[lag:])
        for i in (0, len(targets) - 1):
            np.testing.assert_array_equal(features[i], counts[i:i + lag])


def test_dataframe_input_returns_target_dates() -> None:
    dates = pd.date_range("2023-05-01", periods=len(SCENARIO), freq="D")
    series = pd.DataFrame({"date": dates, "sales": SCENARIO})
    _, targets, target_dates = create_lag_examples(series, lag_window=3)

    assert pd.Timestamp(target_dates[0]) == dates[3]
    assert len(target_dates) == len(targets)


@pytest.mark.parametrize("lag", [15, 16, 0, -1, 2.5])
def test_invalid_lag_rejected(lag: int) -> None:
    with pytest.raises(InvalidInputError):
        create_lag_examples(np.array(SCENARIO), lag_window=lag)
