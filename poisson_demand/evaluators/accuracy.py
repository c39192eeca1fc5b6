#////////////////////////////////////////////////////////////////////////////////#
# File:         accuracy.py                                                      #
# Author:       Douglas Nyberg                                                   #
# Email:        douglas1.nyberg@gmail.com                                        #
# Date:         2025-07-23                                                       #
#////////////////////////////////////////////////////////////////////////////////#

"""
Accuracy metrics for the mean forecast.
"""



import numpy as np

from sktime.performance_metrics.forecasting import (
    mean_absolute_error,
    mean_squared_error
)

from poisson_demand.exceptions import InvalidInputError


def _align(actuals: np.ndarray, predictions: np.ndarray):
    actuals = np.asarray(actuals, dtype=float)
    predictions = np.asarray(predictions, dtype=float)
    if len(actuals) != len(predictions):
        raise InvalidInputError(
            f"actuals ({len(actuals)}) and predictions ({len(predictions)}) differ in length"
        )
    if len(actuals) == 0:
        raise InvalidInputError("cannot score an empty forecast")
    return actuals, predictions


def calculate_mae(actuals: np.ndarray, predictions: np.ndarray) -> float:
    """calculate mae using sktime"""
    actuals, predictions = _align(actuals, predictions)
    return float(mean_absolute_error(actuals, predictions))


def calculate_rmse(actuals: np.ndarray, predictions: np.ndarray) -> float:
    """calculate rmse using sktime"""
    actuals, predictions = _align(actuals, predictions)
    return float(np.sqrt(mean_squared_error(actuals, predictions)))
