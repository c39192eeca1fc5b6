#////////////////////////////////////////////////////////////////////////////////#
# File:         data_loader.py                                                   #
# Author:       Douglas Nyberg                                                   #
# Email:        douglas1.nyberg@gmail.com                                        #
# Date:         2025-07-15                                                       #
# Description:  Observation handling, calendar densification and temporal      #
#               splitting for daily demand series.                               #
#////////////////////////////////////////////////////////////////////////////////#
"""
Data handling for sparse daily sales observations.

Source data only records days with non-zero sales. Before any lag features can
be built the series has to be densified onto a full daily calendar where the
missing days are explicit zeros.
"""
import logging
from typing import Iterable, Optional, Tuple, Union

import numpy as np
import pandas as pd

from poisson_demand import config
from poisson_demand.exceptions import InvalidInputError
from poisson_demand.utils import require_count

logger = logging.getLogger(__name__)

ObservationInput = Union[pd.DataFrame, Iterable[Tuple[object, int]]]


def observations_to_frame(
    observations: ObservationInput,
    date_col: str = config.DATE_COL,
    target_col: str = config.TARGET_COL
) -> pd.DataFrame:
    """
    Normalise observations into a (date, sales) DataFrame.

    Accepts either a DataFrame holding date_col/target_col columns or an
    iterable of (date, count) pairs. Dates are truncated to the calendar day
    and several records on the same day are summed.

    Raises:
        InvalidInputError: If columns are missing, dates can't be parsed or
            counts are negative / non-integer / missing.
    """
    if isinstance(observations, pd.DataFrame):
        missing_cols = [col for col in (date_col, target_col) if col not in observations.columns]
        if missing_cols:
            raise InvalidInputError(f"Missing required columns: {missing_cols}")
        df = observations[[date_col, target_col]].copy()
    else:
        df = pd.DataFrame(list(observations), columns=[date_col, target_col])

    if df.empty:
        raise InvalidInputError("observation set is empty, no date range is defined")

    try:
        df[date_col] = pd.to_datetime(df[date_col]).dt.normalize()
    except (ValueError, TypeError) as e:
        raise InvalidInputError(f"Invalid date format: {e}") from e

    if df[date_col].isnull().any():
        raise InvalidInputError(f"Null values found in required column: {date_col}")

    counts = pd.to_numeric(df[target_col], errors="coerce")
    if counts.isnull().any():
        raise InvalidInputError(f"Null or non-numeric values found in required column: {target_col}")
    if (counts < 0).any():
        raise InvalidInputError("Negative sales values found in observations")
    if (np.mod(counts.to_numpy(dtype=float), 1.0) != 0).any():
        raise InvalidInputError("Sales counts must be integers")
    df[target_col] = counts.astype(np.int64)

    # same-day records are one day of demand
    df = df.groupby(date_col, as_index=False)[target_col].sum()
    return df.sort_values(date_col).reset_index(drop=True)


def densify_series(
    observations: ObservationInput,
    start: Optional[Union[str, pd.Timestamp]] = None,
    end: Optional[Union[str, pd.Timestamp]] = None,
    date_col: str = config.DATE_COL,
    target_col: str = config.TARGET_COL
) -> pd.DataFrame:
    """
    Turn sparse (date, count) observations into a dense daily series.

    Without start/end the range is [min(date), max(date)] inclusive. Days with
    no observation get a count of zero, so the total count is preserved.

    Args:
        observations: DataFrame with date/sales columns or iterable of (date, count)
        start: Optional first calendar day, must not be after the first observation
        end: Optional last calendar day, must not be before the last observation
        date_col: date column name
        target_col: count column name

    Returns:
        DataFrame with one row per calendar day and columns [date_col, target_col]
    """
    df = observations_to_frame(observations, date_col=date_col, target_col=target_col)

    first_date = df[date_col].iloc[0]
    last_date = df[date_col].iloc[-1]
    range_start = first_date if start is None else pd.Timestamp(start).normalize()
    range_end = last_date if end is None else pd.Timestamp(end).normalize()

    if range_start > first_date or range_end < last_date:
        raise InvalidInputError(
            f"Date range {range_start.date()}..{range_end.date()} does not cover "
            f"observations {first_date.date()}..{last_date.date()}"
        )

    calendar = pd.date_range(range_start, range_end, freq="D")
    dense = (
        df.set_index(date_col)[target_col]
        .reindex(calendar, fill_value=0)
        .astype(np.int64)
        .rename_axis(date_col)
        .reset_index()
    )

    filled_days = len(dense) - len(df)
    zero_fraction = float((dense[target_col] == 0).mean())
    logger.info(
        f"Densified {len(df)} observations to {len(dense)} days "
        f"({range_start.date()} to {range_end.date()}, {filled_days} zero-filled)"
    )
    if zero_fraction > config.ZERO_FRACTION_WARNING:
        logger.warning(f"Dense series is {zero_fraction:.1%} zeros - very intermittent demand")

    return dense


def split_train_test(
    features: np.ndarray,
    targets: np.ndarray,
    test_size: int = None
) -> Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    """
    Split lag examples chronologically into a training prefix and a test suffix.

    No shuffling: the test set is always the last test_size examples.

    Returns:
        X_train, y_train, X_test, y_test
    """
    if test_size is None:
        test_size = config.DEFAULT_TEST_SIZE
    require_count("test_size", test_size)
    test_size = int(test_size)

    n_examples = len(targets)
    if len(features) != n_examples:
        raise InvalidInputError(f"features ({len(features)}) and targets ({n_examples}) differ in length")
    if test_size >= n_examples:
        raise InvalidInputError(
            f"test_size {test_size} leaves no training examples (only {n_examples} available)"
        )

    split_idx = n_examples - test_size
    X_train, X_test = features[:split_idx], features[split_idx:]
    y_train, y_test = targets[:split_idx], targets[split_idx:]

    logger.info(f"Split data: {len(y_train)} training examples, {len(y_test)} test examples")
    return X_train, y_train, X_test, y_test


def simulate_poisson_series(
    n_days: int,
    rate: Union[float, np.ndarray],
    start_date: Union[str, pd.Timestamp] = "2020-01-01",
    seed: Optional[Union[int, np.random.Generator]] = None,
    date_col: str = config.DATE_COL,
    target_col: str = config.TARGET_COL
) -> pd.DataFrame:
    """
    generate a dense daily series of poisson counts.

    rate can be a scalar or an array of per-day rates of length n_days.
    """
    require_count("n_days", n_days)
    n_days = int(n_days)
    rates = np.broadcast_to(np.asarray(rate, dtype=float), (n_days,))
    if np.any(rates < 0) or not np.all(np.isfinite(rates)):
        raise InvalidInputError("poisson rates must be finite and non-negative")

    rng = seed if isinstance(seed, np.random.Generator) else np.random.default_rng(seed)
    counts = rng.poisson(rates).astype(np.int64)
    dates = pd.date_range(pd.Timestamp(start_date), periods=n_days, freq="D")
    return pd.DataFrame({date_col: dates, target_col: counts})


def sparse_observations(
    series: pd.DataFrame,
    target_col: str = config.TARGET_COL
) -> pd.DataFrame:
    """drop zero days, mimicking how sales are recorded at the source"""
    return series[series[target_col] > 0].reset_index(drop=True)
