"""Exceedance-probability (EP) curve construction.

The EP curve maps a loss amount to the share of simulated years whose loss
strictly exceeds it. Amounts are evenly spaced from zero to the largest
simulated loss, so the curve is ready for plotting and for trapezoidal
integration by :mod:`famine_catbond.loss_statistics`.

Example:
    Build a curve from a simulated sample::

        from famine_catbond.ep_curve import build_ep_curve

        curve = build_ep_curve(losses, resolution=10_000)
        df = curve.to_dataframe()  # columns: amount, prob
"""

from dataclasses import dataclass
import logging
from typing import Iterator, List, Literal, Tuple
import warnings

import numpy as np
import pandas as pd

from ._warnings import DegenerateCurveWarning
from .exceptions import InvalidInputError
from .loss_sample import LossesLike, validate_loss_sample

logger = logging.getLogger(__name__)

CurveMethod = Literal["sorted", "naive"]


@dataclass(frozen=True, eq=False)
class EPCurve:
    """Exceedance-probability curve derived from a loss sample.

    Attributes:
        amounts: Non-decreasing loss amounts, from 0 to the sample maximum.
        probabilities: Fraction of simulated years with loss strictly greater
            than the matching amount. Non-increasing.
        n_samples: Size of the loss sample the curve was built from.
    """

    amounts: np.ndarray
    probabilities: np.ndarray
    n_samples: int

    def __post_init__(self):
        if self.amounts.shape != self.probabilities.shape:
            raise InvalidInputError(
                f"Amounts {self.amounts.shape} and probabilities "
                f"{self.probabilities.shape} must have the same shape"
            )

    def __len__(self) -> int:
        return int(self.amounts.size)

    def __iter__(self) -> Iterator[Tuple[float, float]]:
        for amount, prob in zip(self.amounts, self.probabilities):
            yield float(amount), float(prob)

    @property
    def max_amount(self) -> float:
        """Largest amount on the curve (0.0 for an empty curve)."""
        return float(self.amounts[-1]) if self.amounts.size else 0.0

    @property
    def is_degenerate(self) -> bool:
        """True when the curve has no positive support."""
        return self.max_amount == 0.0

    def points(self) -> List[Tuple[float, float]]:
        """Return the curve as a list of ``(amount, probability)`` pairs."""
        return list(self)

    def to_dataframe(self) -> pd.DataFrame:
        """Return the curve as a DataFrame with ``amount`` and ``prob`` columns."""
        return pd.DataFrame({"amount": self.amounts, "prob": self.probabilities})

    def return_periods(self) -> np.ndarray:
        """Return period in years for each amount (``inf`` where never exceeded)."""
        with np.errstate(divide="ignore"):
            return np.where(self.probabilities > 0, 1.0 / self.probabilities, np.inf)

    def probability_at(self, amount: float) -> float:
        """Exceedance probability at an arbitrary amount, read off the grid.

        Uses the last grid point at or below ``amount``, so the value is exact
        on grid points and conservative between them.

        Args:
            amount: Loss amount to look up.

        Returns:
            Probability that annual loss exceeds ``amount``.
        """
        if len(self) == 0:
            raise InvalidInputError("EP curve is empty")
        if amount < self.amounts[0]:
            return 1.0
        idx = int(np.searchsorted(self.amounts, amount, side="right")) - 1
        return float(self.probabilities[idx])


def validate_curve_settings(resolution: int, method: str) -> None:
    """Reject a curve resolution below two or an unknown counting method.

    Raises:
        InvalidInputError: If either setting is unusable.
    """
    if int(resolution) != resolution or resolution < 2:
        raise InvalidInputError(f"Curve resolution must be an integer >= 2, got {resolution}")
    if method not in ("sorted", "naive"):
        raise InvalidInputError(f"Method must be 'sorted' or 'naive', got {method}")


def _count_naive(losses: np.ndarray, amounts: np.ndarray) -> np.ndarray:
    return np.array([np.mean(losses > amount) for amount in amounts], dtype=float)


def _count_sorted(losses: np.ndarray, amounts: np.ndarray) -> np.ndarray:
    sorted_losses = np.sort(losses)
    not_exceeding = np.searchsorted(sorted_losses, amounts, side="right")
    return (sorted_losses.size - not_exceeding) / sorted_losses.size


def build_ep_curve(
    losses: LossesLike,
    resolution: int = 10_000,
    method: CurveMethod = "sorted",
) -> EPCurve:
    """Build an EP curve from a loss sample.

    Args:
        losses: Simulated annual losses (at least two non-negative values).
        resolution: Number of evenly spaced amounts, including 0 and the maximum.
        method: ``"sorted"`` sorts the sample once and binary-searches each
            threshold; ``"naive"`` scans the sample for every threshold.

    Returns:
        EPCurve with ``resolution`` points.

    Raises:
        InvalidInputError: If the sample is invalid, ``resolution < 2`` or the
            method is unknown.
    """
    validate_curve_settings(resolution, method)

    values = validate_loss_sample(losses)
    max_loss = float(values.max())
    amounts = np.linspace(0.0, max_loss, int(resolution))

    if max_loss == 0.0:
        warnings.warn(
            f"All {values.size} simulated losses are zero; EP curve has no positive support",
            DegenerateCurveWarning,
            stacklevel=2,
        )
        probabilities = np.zeros_like(amounts)
    elif method == "naive":
        probabilities = _count_naive(values, amounts)
    else:
        probabilities = _count_sorted(values, amounts)

    amounts.setflags(write=False)
    probabilities.setflags(write=False)
    logger.debug(
        "Built EP curve: %d points up to %.2f from %d losses (%s)",
        amounts.size,
        max_loss,
        values.size,
        method,
    )
    return EPCurve(amounts=amounts, probabilities=probabilities, n_samples=int(values.size))
