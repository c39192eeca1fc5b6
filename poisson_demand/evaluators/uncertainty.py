#////////////////////////////////////////////////////////////////////////////////#
# File:         uncertainty.py                                                   #
# Author:       Douglas Nyberg                                                   #
# Email:        douglas1.nyberg@gmail.com                                        #
# Date:         2025-07-23                                                       #
#////////////////////////////////////////////////////////////////////////////////#

"""
Uncertainty metrics for poisson forecasts. Discrete quantiles, prediction intervals and coverage.
"""
import numpy as np
from typing import Tuple, Union

from scipy.stats import poisson

from poisson_demand import config
from poisson_demand.exceptions import InvalidInputError
from poisson_demand.utils import require_probability

ArrayLike = Union[float, np.ndarray]


def _validate_rates(rates: ArrayLike) -> np.ndarray:
    rates = np.asarray(rates, dtype=float)
    if not np.all(np.isfinite(rates)) or np.any(rates <= 0):
        raise InvalidInputError("poisson rates must be finite and strictly positive")
    return rates


def poisson_cdf(counts: ArrayLike, rates: ArrayLike) -> np.ndarray:
    """P(Y <= counts) for Y ~ Poisson(rates)"""
    return poisson.cdf(counts, _validate_rates(rates))


def poisson_quantile(probability: ArrayLike, rates: ArrayLike) -> np.ndarray:
    """
    discrete inverse cdf of the poisson distribution.

    args:
        probability: Target probability (or array), each strictly in (0, 1)
        rates: Poisson rate (or array broadcastable against probability)

    returns:
        Smallest non-negative integer k with CDF(k) >= probability, as int64
    """
    probability = np.asarray(probability, dtype=float)
    if np.any(~np.isfinite(probability)) or np.any(probability <= 0) or np.any(probability >= 1):
        raise InvalidInputError("quantile probabilities must be strictly between 0 and 1")
    rates = _validate_rates(rates)
    return poisson.ppf(probability, rates).astype(np.int64)


def poisson_interval(
    rates: ArrayLike,
    confidence_level: float = None
) -> Tuple[np.ndarray, np.ndarray]:
    """
    central prediction interval of Poisson(rates).

    args:
        rates: Poisson rates
        confidence_level: Nominal coverage, e.g. 0.9 -> 5% / 95% quantiles

    returns:
        Tuple of (lower, upper) integer bounds
    """
    if confidence_level is None:
        confidence_level = config.DEFAULT_CONFIDENCE_LEVEL
    require_probability("confidence_level", confidence_level)

    alpha = 1.0 - confidence_level
    lower = poisson_quantile(alpha / 2.0, rates)
    upper = poisson_quantile(1.0 - alpha / 2.0, rates)
    return lower, upper


def calculate_coverage(lower: np.ndarray, upper: np.ndarray, actuals: np.ndarray) -> float:
    """
    calculate empirical coverage of prediction intervals.

    args:
        lower: Lower interval bounds
        upper: Upper interval bounds
        actuals: Array of actual values

    returns:
        Fraction of actuals with lower <= actual <= upper
    """
    lower, upper, actuals = np.asarray(lower), np.asarray(upper), np.asarray(actuals)
    if not (len(lower) == len(upper) == len(actuals)):
        raise InvalidInputError("interval bounds and actuals must have the same length")
    if len(actuals) == 0:
        raise InvalidInputError("cannot compute coverage of an empty set")

    inside = (actuals >= lower) & (actuals <= upper)
    return float(np.mean(inside))


def calculate_pi_width(lower: np.ndarray, upper: np.ndarray) -> float:
    """average width of prediction intervals"""
    lower, upper = np.asarray(lower), np.asarray(upper)
    if len(lower) != len(upper):
        raise InvalidInputError("interval bounds must have the same length")
    return float(np.mean(upper - lower))
