#////////////////////////////////////////////////////////////////////////////////#
# File:         forecasting.py                                                   #
# Author:       Douglas Nyberg                                                   #
# Email:        douglas1.nyberg@gmail.com                                        #
# Date:         2025-07-25                                                       #
# Description:  One-step-ahead poisson forecasts, evaluation and the end to end  #
#               pipeline from sparse observations to metrics.                    #
#////////////////////////////////////////////////////////////////////////////////#
"""
Distributional one-step-ahead forecasts from a fitted rate model.

For every test example the model gives a poisson rate; the forecast mean is
the rate itself and the interval bounds are poisson quantiles of that rate.
"""
import logging
from typing import Any, Dict, Optional, Sequence

import numpy as np
import pandas as pd
import torch
import torch.nn as nn
from scipy.stats import poisson

from poisson_demand import config
from poisson_demand.data_loader import ObservationInput, densify_series, split_train_test
from poisson_demand.evaluators.accuracy import calculate_mae, calculate_rmse
from poisson_demand.evaluators.uncertainty import (
    calculate_coverage,
    calculate_pi_width,
    poisson_interval
)
from poisson_demand.exceptions import InvalidInputError, NumericalInstabilityError
from poisson_demand.feature_engineering import create_lag_examples
from poisson_demand.models.poisson_mlp import create_rate_model
from poisson_demand.training.trainer import train_rate_model
from poisson_demand.utils import require_probability, setup_torch_device, to_tensors

logger = logging.getLogger(__name__)


def predict_rates(
    model: nn.Module,
    features: np.ndarray,
    device: str = "cpu",
    batch_size: int = 1024
) -> np.ndarray:
    """
    Predict poisson rates for lag feature vectors.

    Args:
        model: Fitted rate model
        features: Array of shape (n_examples, lag_window)
        device: Device to run on
        batch_size: Batch size for prediction

    Returns:
        Array of rates of shape (n_examples,)
    """
    model = model.to(device)
    model.eval()
    features_tensor, _ = to_tensors(features, device=device)

    n_samples = features_tensor.shape[0]
    predictions_list = []
    with torch.no_grad():
        for batch_idx in range(0, n_samples, batch_size):
            end_idx = min(batch_idx + batch_size, n_samples)
            batch_pred = model(features_tensor[batch_idx:end_idx])
            predictions_list.append(batch_pred.cpu().numpy().astype(float))

    rates = np.concatenate(predictions_list, axis=0) if predictions_list else np.empty(0)
    if not np.all(np.isfinite(rates)) or np.any(rates <= 0):
        raise NumericalInstabilityError("rate model produced a zero or non-finite rate")
    return rates


def forecast_intervals(
    model: nn.Module,
    features: np.ndarray,
    actuals: np.ndarray,
    target_dates: Optional[Sequence] = None,
    confidence_level: float = None,
    device: str = "cpu"
) -> pd.DataFrame:
    """
    Build the forecast table for held-out examples.

    Args:
        model: Fitted rate model
        features: Test lag features
        actuals: Realised targets for the test examples
        target_dates: Optional dates of the targets (positional index otherwise)
        confidence_level: Nominal interval coverage
        device: Device to run on

    Returns:
        DataFrame with columns [date, rate, mean, lower, upper, actual]
    """
    if confidence_level is None:
        confidence_level = config.DEFAULT_CONFIDENCE_LEVEL
    require_probability("confidence_level", confidence_level)

    actuals = np.asarray(actuals)
    if len(actuals) == 0:
        raise InvalidInputError("no test examples to forecast")
    if len(features) != len(actuals):
        raise InvalidInputError(f"features ({len(features)}) and actuals ({len(actuals)}) differ in length")

    rates = predict_rates(model, features, device=device)
    lower, upper = poisson_interval(rates, confidence_level)

    forecast_df = pd.DataFrame({
        "date": np.arange(len(actuals)) if target_dates is None else np.asarray(target_dates),
        "rate": rates,
        "mean": rates,
        "lower": lower,
        "upper": upper,
        "actual": actuals.astype(np.int64)
    })
    return forecast_df


def evaluate_forecasts(
    forecast_df: pd.DataFrame,
    confidence_level: float = None
) -> Dict[str, float]:
    """
    Summarise a forecast table.

    Returns:
        Dictionary with coverage, mae, rmse, mean_interval_width,
        mean_log_likelihood, n_examples and confidence_level
    """
    if confidence_level is None:
        confidence_level = config.DEFAULT_CONFIDENCE_LEVEL
    require_probability("confidence_level", confidence_level)

    actuals = forecast_df["actual"].to_numpy()
    coverage = calculate_coverage(forecast_df["lower"], forecast_df["upper"], actuals)

    metrics = {
        "coverage": coverage,
        "mae": calculate_mae(actuals, forecast_df["mean"].to_numpy()),
        "rmse": calculate_rmse(actuals, forecast_df["mean"].to_numpy()),
        "mean_interval_width": calculate_pi_width(forecast_df["lower"], forecast_df["upper"]),
        "mean_log_likelihood": float(np.mean(poisson.logpmf(actuals, forecast_df["rate"].to_numpy()))),
        "n_examples": int(len(actuals)),
        "confidence_level": float(confidence_level)
    }

    logger.info(f"Evaluated {metrics['n_examples']} forecasts: "
                f"coverage={coverage:.3f} (nominal {confidence_level:.2f}), "
                f"MAE={metrics['mae']:.4f}, RMSE={metrics['rmse']:.4f}")
    if abs(coverage - confidence_level) > config.COVERAGE_WARNING_TOLERANCE:
        logger.warning(f"Interval coverage {coverage:.3f} is far from nominal {confidence_level:.2f}")

    return metrics


def run_forecast_pipeline(
    observations: ObservationInput,
    lag_window: int = None,
    test_size: int = None,
    confidence_level: float = None,
    learning_rate: float = None,
    epochs: int = None,
    seed: int = None,
    hidden_dims: Sequence[int] = None,
    activation: str = None,
    batch_size: Optional[int] = config.DEFAULT_BATCH_SIZE,
    device: Optional[str] = None
) -> Dict[str, Any]:
    """
    Run the whole workflow: densify -> lag examples -> split -> fit -> forecast -> evaluate.

    Args:
        observations: Sparse (date, count) observations
        lag_window: Past days per example
        test_size: Number of most recent examples held out
        confidence_level: Nominal interval coverage
        learning_rate: Adam learning rate
        epochs: Training iterations
        seed: Seed for weight initialization
        hidden_dims: Hidden layer widths of the rate network
        activation: Hidden activation
        batch_size: Training mini-batch size, None for full batch
        device: Device to use, picked automatically when None

    Returns:
        Dictionary with model, history, forecasts (DataFrame) and metrics
    """
    if lag_window is None:
        lag_window = config.DEFAULT_LAG_WINDOW
    if test_size is None:
        test_size = config.DEFAULT_TEST_SIZE
    if confidence_level is None:
        confidence_level = config.DEFAULT_CONFIDENCE_LEVEL
    require_probability("confidence_level", confidence_level)
    if device is None:
        device = setup_torch_device()

    dense = densify_series(observations)
    features, targets, target_dates = create_lag_examples(dense, lag_window=lag_window)
    X_train, y_train, X_test, y_test = split_train_test(features, targets, test_size=test_size)

    model = create_rate_model(lag_window, hidden_dims=hidden_dims, activation=activation, seed=seed)
    history = train_rate_model(
        model,
        X_train,
        y_train,
        epochs=epochs,
        learning_rate=learning_rate,
        batch_size=batch_size,
        device=device
    )

    forecasts = forecast_intervals(
        model,
        X_test,
        y_test,
        target_dates=target_dates[-len(y_test):],
        confidence_level=confidence_level,
        device=device
    )
    metrics = evaluate_forecasts(forecasts, confidence_level=confidence_level)

    return {
        "model": model,
        "history": history,
        "dense_series": dense,
        "forecasts": forecasts,
        "metrics": metrics
    }
