#////////////////////////////////////////////////////////////////////////////////#
# File:         __init__.py                                                      #
# Author:       Douglas Nyberg                                                   #
# Email:        douglas1.nyberg@gmail.com                                        #
# Date:         2025-07-18                                                       #
# Description:  Models package initialization for poisson rate models.          #
#////////////////////////////////////////////////////////////////////////////////#

"""
Models package for poisson demand forecasting.

Exports the rate networks and the poisson likelihood.
"""

from .poisson_mlp import (
    PoissonRateMLP,
    ConstantRateModel,
    create_rate_model,
    poisson_log_likelihood,
    PoissonNLLLoss,
    compute_loss_and_gradient
)

__all__ = [
    'PoissonRateMLP',
    'ConstantRateModel',
    'create_rate_model',
    'poisson_log_likelihood',
    'PoissonNLLLoss',
    'compute_loss_and_gradient'
]
