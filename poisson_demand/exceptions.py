#////////////////////////////////////////////////////////////////////////////////#
# File:         exceptions.py                                                    #
# Author:       Douglas Nyberg                                                   #
# Email:        douglas1.nyberg@gmail.com                                        #
# Date:         2025-07-14                                                       #
# Description:  Error types raised by the forecasting pipeline.                  #
#////////////////////////////////////////////////////////////////////////////////#

"""
Error types for the poisson demand forecasting pipeline.
"""
from typing import Optional


class InvalidInputError(ValueError):
    """bad observations, lag window or configuration values"""


class NumericalInstabilityError(ArithmeticError):
    """
    Raised when the poisson likelihood cannot be evaluated (rate reached zero,
    or loss became nan/inf). Fatal for the training run.
    """

    def __init__(self, message: str, iteration: Optional[int] = None):
        self.iteration = iteration
        if iteration is not None:
            message = f"{message} (iteration {iteration})"
        super().__init__(message)
