#////////////////////////////////////////////////////////////////////////////////#
# File:         config.py                                                        #
# Author:       Douglas Nyberg                                                   #
# Email:        douglas1.nyberg@gmail.com                                        #
# Date:         2025-07-14                                                       #
# Description:  Configuration settings for poisson demand forecasting.          #
#////////////////////////////////////////////////////////////////////////////////#




"""
Configuration settings for the poisson demand forecasting package.
"""

# Data settings
DEFAULT_LAG_WINDOW = 14  # Past days used as features for the next day
DEFAULT_TEST_SIZE = 100  # Number of most recent lag examples held out for evaluation
DATE_COL = "date"
TARGET_COL = "sales"
ZERO_FRACTION_WARNING = 0.9  # Warn when densified series is almost all zeros

# Training settings
RANDOM_SEED = 42
DEFAULT_LEARNING_RATE = 0.01
DEFAULT_EPOCHS = 100
DEFAULT_BATCH_SIZE = None  # None = full batch
DEFAULT_LOG_INTERVAL = 10  # Log training loss every N iterations
DEFAULT_MIN_DELTA = 0.0  # Convergence tolerance on loss improvement (0 disables early stop)
DEFAULT_PATIENCE = 10

# Rate model settings
DEFAULT_HIDDEN_DIMS = (32, 16)
DEFAULT_ACTIVATION = "relu"
# log-rate clamp keeps exp() strictly positive and finite in float32
MIN_LOG_RATE = -20.0
MAX_LOG_RATE = 20.0

# Evaluation settings
DEFAULT_CONFIDENCE_LEVEL = 0.90  # 90% interval -> 0.05 / 0.95 poisson quantiles
COVERAGE_WARNING_TOLERANCE = 0.25  # Warn when coverage is this far from nominal
