"""Validation and transformation of simulated annual loss samples.

A loss sample is one Monte Carlo realisation of annual catastrophe loss:
an ordered 1-D array of at least two non-negative, finite amounts. It is
created once by an upstream sampler and never modified afterwards, so the
arrays returned here are read-only.
"""

import logging
from typing import Sequence, Union

import numpy as np

from .exceptions import InvalidInputError

logger = logging.getLogger(__name__)

LossesLike = Union[np.ndarray, Sequence[float]]


def _freeze(values: np.ndarray) -> np.ndarray:
    values.setflags(write=False)
    return values


def _copy_sample(losses: LossesLike) -> np.ndarray:
    try:
        return np.array(losses, dtype=float)
    except (TypeError, ValueError) as e:
        raise InvalidInputError(f"Loss sample must be numeric: {e}") from e


def validate_loss_sample(losses: LossesLike) -> np.ndarray:
    """Check a loss sample and return it as a read-only float array.

    Args:
        losses: Simulated annual losses in monetary units.

    Returns:
        A read-only 1-D ``float64`` array. A read-only ``float64`` array that
        owns its data, such as one returned by this function, is checked and
        returned as is. Anything else is copied.

    Raises:
        InvalidInputError: If the sample is not 1-D, has fewer than two values,
            or holds a negative or non-finite value.
    """
    if (
        isinstance(losses, np.ndarray)
        and losses.dtype == np.float64
        and losses.flags.owndata
        and not losses.flags.writeable
    ):
        values = losses
    else:
        values = _copy_sample(losses)

    if values.ndim != 1:
        raise InvalidInputError(f"Loss sample must be one-dimensional, got shape {values.shape}")
    if values.size < 2:
        raise InvalidInputError(
            f"Loss sample needs at least 2 values to estimate dispersion, got {values.size}"
        )

    n_bad = int(np.sum(~np.isfinite(values)))
    if n_bad:
        raise InvalidInputError(f"Loss sample contains {n_bad} non-finite values")

    n_negative = int(np.sum(values < 0))
    if n_negative:
        raise InvalidInputError(
            f"Loss sample contains {n_negative} negative values (minimum {values.min():,.2f})"
        )

    return _freeze(values)


def mitigate_losses(losses: LossesLike, payout: float) -> np.ndarray:
    """Reduce every loss by a mitigation payout, flooring at zero.

    Args:
        losses: Baseline loss sample.
        payout: Amount paid out by the mitigation intervention each year.

    Returns:
        Read-only mitigated sample ``max(loss - payout, 0)``.

    Raises:
        InvalidInputError: If the payout is negative or non-finite, or the
            baseline sample is invalid.
    """
    if not np.isfinite(payout) or payout < 0:
        raise InvalidInputError(f"Mitigation payout must be a non-negative amount, got {payout}")

    baseline = validate_loss_sample(losses)
    mitigated = np.maximum(baseline - payout, 0.0)
    logger.debug(
        "Mitigation payout %.2f zeroed %d of %d simulated years",
        payout,
        int(np.sum(mitigated == 0)),
        mitigated.size,
    )
    return _freeze(mitigated)
