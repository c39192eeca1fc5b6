#////////////////////////////////////////////////////////////////////////////////#
# File:         __init__.py                                                      #
# Author:       Douglas Nyberg                                                   #
# Email:        douglas1.nyberg@gmail.com                                        #
# Date:         2025-07-21                                                       #
# Description:  Training package initialization for rate model fitting.         #
#////////////////////////////////////////////////////////////////////////////////#

"""
Maximum likelihood training for poisson rate models.
"""

from .trainer import train_rate_model

__all__ = ['train_rate_model']
