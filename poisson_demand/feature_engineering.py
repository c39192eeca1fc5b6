#////////////////////////////////////////////////////////////////////////////////#
# File:         feature_engineering.py                                           #
# Author:       Douglas Nyberg                                                   #
# Email:        douglas1.nyberg@gmail.com                                        #
# Date:         2025-07-16                                                       #
# Description:  Lag window features for one-step-ahead count forecasting.        #
#////////////////////////////////////////////////////////////////////////////////#

"""
Lag window feature engineering.

Every example uses the previous lag_window days of sales (oldest first) to
predict the sales of the next day. The first lag_window days of the series are
only ever context and are never a prediction target.
"""
import logging
from typing import Tuple, Union

import numpy as np
import pandas as pd

from poisson_demand import config
from poisson_demand.exceptions import InvalidInputError
from poisson_demand.utils import require_count

logger = logging.getLogger(__name__)


def create_lag_examples(
    series: Union[pd.DataFrame, np.ndarray],
    lag_window: int = None,
    date_col: str = config.DATE_COL,
    target_col: str = config.TARGET_COL
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Slide a fixed width window over a dense daily series.

    Args:
        series: dense series DataFrame (date/sales columns) or a 1D array of counts
        lag_window: number of past days per example
        date_col: date column (ignored for array input)
        target_col: count column (ignored for array input)

    Returns:
        Tuple of (features, targets, target_dates):
            - features: float array of shape (T - lag_window, lag_window),
              row i = counts[i : i + lag_window]
            - targets: int array of shape (T - lag_window,), targets[i] = counts[i + lag_window]
            - target_dates: dates of the targets, or positions when series is an array
    """
    if lag_window is None:
        lag_window = config.DEFAULT_LAG_WINDOW
    require_count("lag_window", lag_window)
    lag_window = int(lag_window)

    if isinstance(series, pd.DataFrame):
        counts = series[target_col].to_numpy()
        dates = series[date_col].to_numpy()
    else:
        counts = np.asarray(series)
        if counts.ndim != 1:
            raise InvalidInputError(f"series must be one dimensional, got shape {counts.shape}")
        dates = np.arange(len(counts))

    n_days = len(counts)
    if lag_window >= n_days:
        raise InvalidInputError(
            f"lag_window {lag_window} must be smaller than the series length {n_days}"
        )

    # windows[i] = counts[i : i + lag_window + 1], last column is the target
    windows = np.lib.stride_tricks.sliding_window_view(counts, lag_window + 1)
    features = windows[:, :lag_window].astype(np.float32)
    targets = windows[:, lag_window].astype(np.int64)
    target_dates = dates[lag_window:]

    logger.info(f"Created {len(targets)} lag examples (lag_window={lag_window}, series length={n_days})")
    return features, targets, target_dates
