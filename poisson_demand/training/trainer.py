#////////////////////////////////////////////////////////////////////////////////#
# File:         trainer.py                                                       #
# Author:       Douglas Nyberg                                                   #
# Email:        douglas1.nyberg@gmail.com                                        #
# Date:         2025-07-21                                                       #
# Description:  Maximum likelihood training of poisson rate models.              #
#////////////////////////////////////////////////////////////////////////////////#
"""
Maximum likelihood trainer for poisson rate models.

Minimizes the mean negative poisson log-likelihood with Adam. Examples are
visited in chronological order; nothing is shuffled. Any zero/non-finite rate
or non-finite loss stops training with NumericalInstabilityError instead of
letting NaNs propagate into the weights.
"""

import logging
import time
from typing import Any, Dict, Optional

import numpy as np
import torch
import torch.nn as nn
import torch.optim as optim

from poisson_demand import config
from poisson_demand.exceptions import InvalidInputError, NumericalInstabilityError
from poisson_demand.models.poisson_mlp import PoissonNLLLoss
from poisson_demand.utils import format_time, require_count, require_positive, to_tensors

logger = logging.getLogger(__name__)


def _check_rates(rates: torch.Tensor, epoch: int) -> None:
    """fail fast if a rate can't be fed to log()"""
    if not torch.isfinite(rates).all():
        raise NumericalInstabilityError("non-finite poisson rate predicted", iteration=epoch)
    if (rates <= 0).any():
        raise NumericalInstabilityError("poisson rate underflowed to zero", iteration=epoch)


def train_rate_model(
    model: nn.Module,
    features: np.ndarray,
    targets: np.ndarray,
    epochs: int = None,
    learning_rate: float = None,
    batch_size: Optional[int] = config.DEFAULT_BATCH_SIZE,
    min_delta: float = None,
    patience: int = None,
    log_interval: int = None,
    max_grad_norm: Optional[float] = None,
    device: str = "cpu"
) -> Dict[str, Any]:
    """
    Fit a rate model by minimizing the mean poisson negative log-likelihood.

    Args:
        model: Rate model (output must be the poisson rate per example)
        features: Lag features of shape (n_examples, lag_window)
        targets: Observed counts of shape (n_examples,)
        epochs: Number of passes over the training data
        learning_rate: Adam learning rate
        batch_size: Mini-batch size, None for full batch
        min_delta: Minimum loss improvement that resets the patience counter;
            0 disables early stopping
        patience: Number of epochs without improvement before stopping
        log_interval: Log the loss every N epochs
        max_grad_norm: Optional gradient norm clip
        device: Device to train on

    Returns:
        Dictionary with training history (loss per epoch, iterations, converged)

    Raises:
        InvalidInputError: On empty data or non-positive settings
        NumericalInstabilityError: If a rate reaches zero or the loss is not finite
    """
    if epochs is None:
        epochs = config.DEFAULT_EPOCHS
    if learning_rate is None:
        learning_rate = config.DEFAULT_LEARNING_RATE
    if min_delta is None:
        min_delta = config.DEFAULT_MIN_DELTA
    if patience is None:
        patience = config.DEFAULT_PATIENCE
    if log_interval is None:
        log_interval = config.DEFAULT_LOG_INTERVAL

    require_count("epochs", epochs)
    require_positive("learning_rate", learning_rate)
    require_count("patience", patience)
    require_count("log_interval", log_interval)
    if batch_size is not None:
        require_count("batch_size", batch_size)
    if min_delta < 0:
        raise InvalidInputError(f"min_delta must be non-negative, got {min_delta!r}")
    epochs, patience, log_interval = int(epochs), int(patience), int(log_interval)
    if batch_size is not None:
        batch_size = int(batch_size)

    targets = np.asarray(targets, dtype=float)
    if len(targets) == 0:
        raise InvalidInputError("no training examples")
    if len(features) != len(targets):
        raise InvalidInputError(
            f"features ({len(features)}) and targets ({len(targets)}) differ in length"
        )
    if not np.all(np.isfinite(targets)):
        raise InvalidInputError("training targets must be finite")
    if np.any(targets < 0):
        raise InvalidInputError("training targets must be non-negative counts")
    if (np.mod(targets, 1.0) != 0).any():
        raise InvalidInputError("training targets must be integer counts")

    # Move model and data to device
    model = model.to(device)
    features_train, targets_train = to_tensors(features, targets, device=device)

    optimizer = optim.Adam(model.parameters(), lr=learning_rate)
    criterion = PoissonNLLLoss()

    history = {"loss": [], "iterations": 0, "converged": False}

    # Early stopping variables
    best_loss = float("inf")
    no_improvement_count = 0

    n_samples = features_train.shape[0]
    if batch_size is None:
        batch_size = n_samples
    n_batches = (n_samples + batch_size - 1) // batch_size

    start_time = time.time()
    for epoch in range(1, epochs + 1):
        model.train()
        total_loss = 0.0

        for batch_idx in range(n_batches):
            start_idx = batch_idx * batch_size
            end_idx = min(start_idx + batch_size, n_samples)  # handle last batch
            features_batch = features_train[start_idx:end_idx]
            targets_batch = targets_train[start_idx:end_idx]

            optimizer.zero_grad()

            rates = model(features_batch)
            _check_rates(rates, epoch)

            loss = criterion(rates, targets_batch)
            if not torch.isfinite(loss):
                raise NumericalInstabilityError(f"non-finite loss {loss.item()}", iteration=epoch)

            loss.backward()
            if max_grad_norm is not None:
                torch.nn.utils.clip_grad_norm_(model.parameters(), max_norm=max_grad_norm)
            optimizer.step()

            # weight by batch size so the epoch loss is the mean over examples
            total_loss += loss.item() * (end_idx - start_idx)

        epoch_loss = total_loss / n_samples
        history["loss"].append(epoch_loss)
        history["iterations"] = epoch

        if epoch % log_interval == 0 or epoch == 1:
            logger.info(f"Epoch {epoch}/{epochs}, NLL: {epoch_loss:.4f}")

        if min_delta > 0:
            if epoch_loss < best_loss - min_delta:
                best_loss = epoch_loss
                no_improvement_count = 0
            else:
                no_improvement_count += 1

            if no_improvement_count >= patience:
                history["converged"] = True
                logger.info(f"Converged after {epoch} epochs (no improvement > {min_delta} "
                            f"for {patience} epochs)")
                break

    logger.info(f"Training finished in {format_time(time.time() - start_time)}, "
                f"final NLL: {history['loss'][-1]:.4f}")
    return history
