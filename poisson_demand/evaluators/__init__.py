#////////////////////////////////////////////////////////////////////////////////#
# File:         __init__.py                                                      #
# Author:       Douglas Nyberg                                                   #
# Email:        douglas1.nyberg@gmail.com                                        #
# Date:         2025-07-23                                                       #
# Description:  Evaluators package initialization for forecast metrics.         #
#////////////////////////////////////////////////////////////////////////////////#

# Point forecast metrics from accuracy.py
from .accuracy import (
    calculate_mae,
    calculate_rmse
)

# Probabilistic metrics from uncertainty.py
from .uncertainty import (
    poisson_cdf,
    poisson_quantile,
    poisson_interval,
    calculate_coverage,
    calculate_pi_width
)

__all__ = [
    # Point forecast metrics
    'calculate_mae',
    'calculate_rmse',
    # Probabilistic metrics
    'poisson_cdf',
    'poisson_quantile',
    'poisson_interval',
    'calculate_coverage',
    'calculate_pi_width'
]
