#////////////////////////////////////////////////////////////////////////////////#
# File:         utils.py                                                         #
# Author:       Douglas Nyberg                                                   #
# Email:        douglas1.nyberg@gmail.com                                        #
# Date:         2025-07-15                                                       #
#////////////////////////////////////////////////////////////////////////////////#





"""
Utility functions for the poisson demand forecasting package.
"""
import logging
from typing import Optional, Tuple, Union

import numpy as np
import torch

from poisson_demand import config
from poisson_demand.exceptions import InvalidInputError

logger = logging.getLogger(__name__)


def setup_torch_device() -> torch.device:
    """setup torch device (cpu or cuda)"""
    if torch.cuda.is_available():
        device = torch.device("cuda")
        logger.info(f"Using GPU: {torch.cuda.get_device_name(0)}")
    else:
        device = torch.device("cpu")
        logger.info("Using CPU")  # no gpu availabe
    return device


def set_random_seed(seed: int = None) -> None:
    """set random seed for reproducability"""
    if seed is None:
        seed = config.RANDOM_SEED

    np.random.seed(seed)
    torch.manual_seed(seed)
    if torch.cuda.is_available():
        torch.cuda.manual_seed_all(seed)
        torch.backends.cudnn.deterministic = True
        torch.backends.cudnn.benchmark = False


def format_time(seconds: float) -> str:
    """format seconds into readable string"""
    hours, remainder = divmod(seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    return f"{int(hours)}h {int(minutes)}m {int(seconds)}s"


def require_positive(name: str, value: Union[int, float]) -> None:
    """raise InvalidInputError unless value is a positive number"""
    if value is None or isinstance(value, bool) or not np.isfinite(value) or value <= 0:
        raise InvalidInputError(f"{name} must be positive, got {value!r}")


def require_count(name: str, value: Union[int, float]) -> None:
    """raise InvalidInputError unless value is a positive whole number"""
    require_positive(name, value)
    if int(value) != value:
        raise InvalidInputError(f"{name} must be an integer, got {value!r}")


def require_probability(name: str, value: float) -> None:
    """raise InvalidInputError unless 0 < value < 1"""
    if value is None or not np.isfinite(value) or not 0.0 < value < 1.0:
        raise InvalidInputError(f"{name} must be strictly between 0 and 1, got {value!r}")


def to_tensors(
    features: np.ndarray,
    targets: Optional[np.ndarray] = None,
    device: Optional[torch.device] = None
) -> Tuple[torch.Tensor, Optional[torch.Tensor]]:
    """
    Convert lag features (and optionally targets) to float32 tensors.

    Args:
        features: Array of shape (n_examples, lag_window)
        targets: Optional array of shape (n_examples,)
        device: PyTorch device to move tensors to

    Returns:
        Tuple of (features_tensor, targets_tensor or None)
    """
    features_tensor = torch.as_tensor(np.asarray(features, dtype=np.float32))
    if features_tensor.dim() == 1:
        features_tensor = features_tensor.unsqueeze(0)  # single example

    targets_tensor = None
    if targets is not None:
        targets_tensor = torch.as_tensor(np.asarray(targets, dtype=np.float32))

    if device is not None:
        features_tensor = features_tensor.to(device)
        if targets_tensor is not None:
            targets_tensor = targets_tensor.to(device)

    return features_tensor, targets_tensor
