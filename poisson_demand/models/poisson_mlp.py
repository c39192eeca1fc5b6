#////////////////////////////////////////////////////////////////////////////////#
# File:         poisson_mlp.py                                                   #
# Author:       Douglas Nyberg                                                   #
# Email:        douglas1.nyberg@gmail.com                                        #
# Date:         2025-07-18                                                       #
#////////////////////////////////////////////////////////////////////////////////#


"""
Feed-forward poisson rate models and the poisson negative log-likelihood.
"""


import logging
from typing import Dict, Sequence, Tuple

import torch
import torch.nn as nn

from poisson_demand import config
from poisson_demand.exceptions import InvalidInputError
from poisson_demand.utils import require_count, require_positive, set_random_seed

logger = logging.getLogger(__name__)

_ACTIVATIONS = {
    "relu": nn.ReLU,
    "tanh": nn.Tanh,
}


class PoissonRateMLP(nn.Module):
    """
    Feed-forward network mapping a lag window to a poisson rate.

    The hidden layers produce an unconstrained log-rate; exp() on the output
    makes the rate strictly positive for any input and any weights.
    """
    def __init__(
        self,
        input_dim: int,
        hidden_dims: Sequence[int] = config.DEFAULT_HIDDEN_DIMS,
        activation: str = config.DEFAULT_ACTIVATION
    ):
        """
        Initialize the rate network.

        Args:
            input_dim: Number of lag features per example
            hidden_dims: Width of each hidden layer (empty = log-linear model)
            activation: Hidden layer activation, "relu" or "tanh"
        """
        super(PoissonRateMLP, self).__init__()

        require_count("input_dim", input_dim)
        for width in hidden_dims:
            require_count("hidden layer width", width)
        if activation not in _ACTIVATIONS:
            raise InvalidInputError(
                f"Unknown activation '{activation}', expected one of {sorted(_ACTIVATIONS)}"
            )

        # Store architecture parameters for reporting
        self.input_dim = input_dim
        self.hidden_dims = tuple(hidden_dims)
        self.activation = activation

        layers = []
        previous_dim = input_dim
        for width in self.hidden_dims:
            layers.append(nn.Linear(previous_dim, width))
            layers.append(_ACTIVATIONS[activation]())
            previous_dim = width
        # Single output: the log of the poisson rate
        layers.append(nn.Linear(previous_dim, 1))
        self.network = nn.Sequential(*layers)

    def forward(self, features: torch.Tensor) -> torch.Tensor:
        """
        Forward pass.

        Args:
            features: Tensor of shape (batch_size, input_dim)

        Returns:
            Rates of shape (batch_size,), all > 0
        """
        log_rate = self.network(features).squeeze(-1)
        # clamp keeps exp() away from 0 and inf in float32
        log_rate = torch.clamp(log_rate, config.MIN_LOG_RATE, config.MAX_LOG_RATE)
        return torch.exp(log_rate)


class ConstantRateModel(nn.Module):
    """Rate model that ignores its input: rate = exp(log_rate)."""
    def __init__(self, initial_rate: float = 1.0):
        super(ConstantRateModel, self).__init__()
        require_positive("initial_rate", initial_rate)
        self.log_rate = nn.Parameter(torch.log(torch.tensor([float(initial_rate)])))

    def _clamped_rate(self) -> torch.Tensor:
        return torch.exp(torch.clamp(self.log_rate, config.MIN_LOG_RATE, config.MAX_LOG_RATE))

    def forward(self, features: torch.Tensor) -> torch.Tensor:
        return self._clamped_rate().expand(features.shape[0])

    @property
    def rate(self) -> float:
        return float(self._clamped_rate().item())


def create_rate_model(
    input_dim: int,
    hidden_dims: Sequence[int] = None,
    activation: str = None,
    seed: int = None
) -> PoissonRateMLP:
    """
    Factory function to create a seeded poisson rate network.

    Args:
        input_dim: Number of lag features per example
        hidden_dims: Hidden layer widths
        activation: Hidden activation
        seed: Random seed for weight initialization

    Returns:
        Freshly initialized PoissonRateMLP
    """
    if hidden_dims is None:
        hidden_dims = config.DEFAULT_HIDDEN_DIMS
    if activation is None:
        activation = config.DEFAULT_ACTIVATION

    set_random_seed(seed)
    model = PoissonRateMLP(input_dim=input_dim, hidden_dims=hidden_dims, activation=activation)
    n_params = sum(p.numel() for p in model.parameters())
    logger.info(f"Created rate model: input_dim={input_dim}, hidden_dims={tuple(hidden_dims)}, "
                f"activation={activation}, {n_params} parameters")
    return model


def poisson_log_likelihood(rates: torch.Tensor, targets: torch.Tensor) -> torch.Tensor:
    """
    Per-example poisson log probability log P(y | rate).

    log(y!) goes through lgamma(y + 1) so large counts don't overflow.

    Args:
        rates: Poisson rates, must be > 0
        targets: Observed counts (non-negative integers, any float/int dtype)

    Returns:
        Tensor of log probabilities with the broadcast shape of the inputs
    """
    targets = targets.to(rates.dtype)
    return targets * torch.log(rates) - rates - torch.lgamma(targets + 1.0)


class PoissonNLLLoss(nn.Module):
    """
    Mean negative poisson log-likelihood.

    Unlike torch.nn.PoissonNLLLoss this keeps the log(y!) term, so the value is
    the exact negative log-probability of the data.
    """
    def forward(self, rates: torch.Tensor, targets: torch.Tensor) -> torch.Tensor:
        return -torch.mean(poisson_log_likelihood(rates, targets))


def compute_loss_and_gradient(
    model: nn.Module,
    features: torch.Tensor,
    targets: torch.Tensor
) -> Tuple[float, Dict[str, torch.Tensor]]:
    """
    Compute the mean poisson NLL of a batch and its gradient wrt every trainable parameter.

    Parameters are not modified and model.grad buffers are left untouched.

    Args:
        model: Rate model
        features: Tensor of shape (batch_size, input_dim)
        targets: Tensor of shape (batch_size,)

    Returns:
        Tuple of (loss value, dict mapping parameter name to gradient tensor)
    """
    named_params = [(name, p) for name, p in model.named_parameters() if p.requires_grad]
    rates = model(features)
    loss = PoissonNLLLoss()(rates, targets)
    grads = torch.autograd.grad(loss, [p for _, p in named_params], allow_unused=True)

    gradients = {}
    for (name, param), grad in zip(named_params, grads):
        # parameters unused by the forward pass get a zero gradient
        gradients[name] = torch.zeros_like(param) if grad is None else grad.detach()

    return loss.item(), gradients
