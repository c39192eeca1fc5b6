#////////////////////////////////////////////////////////////////////////////////#
# File:         __init__.py                                                      #
# Author:       Douglas Nyberg                                                   #
# Email:        douglas1.nyberg@gmail.com                                        #
# Date:         2025-07-14                                                       #
# Description:  Package initialization for poisson demand forecasting.          #
#////////////////////////////////////////////////////////////////////////////////#

"""
Poisson demand forecasting package.

Densifies sparse daily sales, builds lag windows and fits a feed-forward
network to the rate of a poisson distribution by maximum likelihood.
"""
