"""Parametric samplers for simulated annual famine losses.

These samplers stand in for the upstream hazard and vulnerability model. The
pricing pipeline accepts any valid loss sample and never depends on how it
was produced; the samplers here only make it easy to draw one from a
parametric assumption such as the normal loss around the policy amount used
for the Indonesia case study.
"""

from abc import ABC, abstractmethod
import logging
from typing import Optional, Union
import warnings

import numpy as np

from ._warnings import DataQualityWarning
from .config import SamplerConfig

logger = logging.getLogger(__name__)


class LossDistribution(ABC):
    """Abstract base class for annual loss distributions.

    Provides a common interface for drawing loss samples and calculating
    statistical properties of the distribution.
    """

    def __init__(self, seed: Optional[Union[int, np.random.SeedSequence]] = None):
        """Initialize the loss distribution.

        Args:
            seed: Random seed for reproducibility.
        """
        self.rng = np.random.default_rng(seed)

    @abstractmethod
    def generate_losses(self, n_samples: int) -> np.ndarray:
        """Draw simulated annual losses.

        Args:
            n_samples: Number of simulated years.

        Returns:
            Array of non-negative loss amounts.
        """

    @abstractmethod
    def expected_value(self) -> float:
        """Calculate the analytical expected value of the distribution."""

    def reset_seed(self, seed) -> None:
        """Reset the random seed for reproducibility.

        Args:
            seed: New random seed to use (int or SeedSequence).
        """
        self.rng = np.random.default_rng(seed)


class NormalLoss(LossDistribution):
    """Normally distributed annual loss, floored at zero.

    Draws below zero are not valid losses, so they are set to zero and a
    :class:`DataQualityWarning` reports how many were floored.
    """

    def __init__(self, mean: float, std: float, seed: Optional[int] = None):
        """Initialize normal distribution.

        Args:
            mean: Mean annual loss.
            std: Standard deviation of annual loss.
            seed: Random seed for reproducibility.

        Raises:
            ValueError: If std is negative.
        """
        super().__init__(seed)
        if std < 0:
            raise ValueError(f"Standard deviation must be non-negative, got {std}")
        self.mean = mean
        self.std = std

    def generate_losses(self, n_samples: int) -> np.ndarray:
        if n_samples <= 0:
            return np.array([])

        losses = self.rng.normal(self.mean, self.std, size=n_samples)
        n_negative = int(np.sum(losses < 0))
        if n_negative:
            warnings.warn(
                f"Floored {n_negative} negative normal draws at zero",
                DataQualityWarning,
                stacklevel=2,
            )
            losses = np.maximum(losses, 0.0)
        return losses

    def expected_value(self) -> float:
        """Mean of the unfloored normal distribution."""
        return float(self.mean)


class LognormalLoss(LossDistribution):
    """Lognormal annual loss distribution.

    Parameters can be specified as either (mean, cv) or (mu, sigma).
    """

    def __init__(
        self,
        mean: Optional[float] = None,
        cv: Optional[float] = None,
        mu: Optional[float] = None,
        sigma: Optional[float] = None,
        seed: Optional[int] = None,
    ):
        """Initialize lognormal distribution.

        Args:
            mean: Mean of the lognormal distribution.
            cv: Coefficient of variation (std/mean).
            mu: Log-space mean parameter (alternative to mean/cv).
            sigma: Log-space standard deviation (alternative to mean/cv).
            seed: Random seed for reproducibility.

        Raises:
            ValueError: If invalid parameter combinations are provided.
        """
        super().__init__(seed)

        if mean is not None and cv is not None:
            if mean <= 0:
                raise ValueError(f"Mean must be positive, got {mean}")
            if cv < 0:
                raise ValueError(f"CV must be non-negative, got {cv}")

            self.mean = mean
            self.cv = cv
            self.sigma = np.sqrt(np.log(1 + cv**2))
            self.mu = np.log(mean) - self.sigma**2 / 2

        elif mu is not None and sigma is not None:
            if sigma < 0:
                raise ValueError(f"Sigma must be non-negative, got {sigma}")

            self.mu = mu
            self.sigma = sigma
            self.mean = np.exp(mu + sigma**2 / 2)
            self.cv = np.sqrt(np.exp(sigma**2) - 1)
        else:
            raise ValueError("Must provide either (mean, cv) or (mu, sigma) parameters")

    def generate_losses(self, n_samples: int) -> np.ndarray:
        if n_samples <= 0:
            return np.array([])

        return self.rng.lognormal(self.mu, self.sigma, size=n_samples)

    def expected_value(self) -> float:
        return float(self.mean)


def create_loss_distribution(config: SamplerConfig) -> LossDistribution:
    """Create the sampler described by a :class:`SamplerConfig`.

    Args:
        config: Sampler settings.

    Returns:
        A seeded LossDistribution.
    """
    if config.distribution == "lognormal":
        return LognormalLoss(mean=config.mean, cv=config.std / config.mean, seed=config.seed)
    return NormalLoss(mean=config.mean, std=config.std, seed=config.seed)


def sample_losses(config: SamplerConfig) -> np.ndarray:
    """Draw ``config.n_samples`` simulated annual losses."""
    distribution = create_loss_distribution(config)
    losses = distribution.generate_losses(config.n_samples)
    logger.debug(
        "Drew %d %s losses (mean %.2f, std %.2f)",
        losses.size,
        config.distribution,
        float(np.mean(losses)),
        float(np.std(losses)),
    )
    return losses
