"""Average annual loss and loss dispersion from an EP curve.

The average annual loss (AAL) above an attachment point is the area under the
EP curve from the attachment point to the largest simulated loss, estimated
with the trapezoidal rule over the curve points at or above the attachment.

Two dispersion measures feed the risk load:

* ``DispersionMethod.CURVE_GRID`` is the reference behaviour. It is the sample
  standard deviation of the curve's *amount grid* above the attachment point,
  which measures the width of the exposed loss range rather than the spread of
  the simulated losses. Every published premium number was produced this way.
* ``DispersionMethod.SAMPLE`` is the sample standard deviation of the raw
  simulated losses.

Under either method, fewer than two curve points at or above the attachment
point leave no layer to integrate, so both AAL and dispersion are zero.

Note:
    ``CURVE_GRID`` is a modelling simplification kept for compatibility with
    existing results. Switching the default to ``SAMPLE`` changes every
    downstream premium and must be a deliberate decision.
"""

from dataclasses import dataclass
from enum import Enum
import logging
from typing import Optional

import numpy as np
from scipy.integrate import trapezoid

from .ep_curve import EPCurve
from .exceptions import InvalidInputError
from .loss_sample import LossesLike, validate_loss_sample

logger = logging.getLogger(__name__)


class DispersionMethod(str, Enum):
    """Which standard deviation is used for the risk load."""

    CURVE_GRID = "curve_grid"
    SAMPLE = "sample"


@dataclass(frozen=True)
class LossStatistics:
    """AAL and loss dispersion above an attachment point.

    Attributes:
        aal: Average annual loss above the attachment point.
        loss_std_dev: Standard deviation used for the risk load.
        attachment_point: Attachment point the statistics were computed at.
        n_points: Number of curve points at or above the attachment point.
        dispersion: Dispersion method that produced ``loss_std_dev``.
    """

    aal: float
    loss_std_dev: float
    attachment_point: float
    n_points: int
    dispersion: DispersionMethod = DispersionMethod.CURVE_GRID


def compute_loss_statistics(
    curve: EPCurve,
    attachment_point: float,
    dispersion: DispersionMethod = DispersionMethod.CURVE_GRID,
    losses: Optional[LossesLike] = None,
) -> LossStatistics:
    """Integrate the EP curve above the attachment point.

    Args:
        curve: EP curve from :func:`famine_catbond.ep_curve.build_ep_curve`.
        attachment_point: Policy amount where the insured layer starts.
        dispersion: Dispersion method for ``loss_std_dev``.
        losses: Raw loss sample, required for ``DispersionMethod.SAMPLE``.

    Returns:
        LossStatistics. Both values are zero when the curve is degenerate or
        the attachment point lies above every amount on the curve.

    Raises:
        InvalidInputError: If the curve is empty, the attachment point is
            negative or non-finite, or ``SAMPLE`` dispersion lacks ``losses``
            or gets a sample of a different size than the curve was built from.
    """
    dispersion = DispersionMethod(dispersion)
    if len(curve) == 0:
        raise InvalidInputError("Cannot compute loss statistics from an empty EP curve")
    if not np.isfinite(attachment_point) or attachment_point < 0:
        raise InvalidInputError(
            f"Attachment point must be a non-negative amount, got {attachment_point}"
        )

    sample: Optional[np.ndarray] = None
    if dispersion is DispersionMethod.SAMPLE:
        if losses is None:
            raise InvalidInputError("SAMPLE dispersion requires the raw loss sample")
        sample = validate_loss_sample(losses)
        if sample.size != curve.n_samples:
            raise InvalidInputError(
                f"Loss sample has {sample.size} values but the EP curve was built from "
                f"{curve.n_samples}"
            )

    if curve.is_degenerate:
        logger.debug("Degenerate EP curve, loss statistics are zero")
        return LossStatistics(0.0, 0.0, float(attachment_point), 0, dispersion)

    mask = curve.amounts >= attachment_point
    x = curve.amounts[mask]
    y = curve.probabilities[mask]
    n_points = int(x.size)

    if n_points == 0:
        logger.debug(
            "Attachment %.2f is above the largest loss %.2f", attachment_point, curve.max_amount
        )
        return LossStatistics(0.0, 0.0, float(attachment_point), 0, dispersion)

    if n_points < 2:
        aal = std_dev = 0.0
    elif sample is not None:
        aal = float(trapezoid(y, x))
        std_dev = float(np.std(sample, ddof=1))
    else:
        aal = float(trapezoid(y, x))
        # Spread of the amount grid, not of the losses. See module docstring.
        std_dev = float(np.std(x, ddof=1))

    logger.debug(
        "AAL %.2f, std dev %.2f over %d points above %.2f (%s)",
        aal,
        std_dev,
        n_points,
        attachment_point,
        dispersion.value,
    )
    return LossStatistics(aal, std_dev, float(attachment_point), n_points, dispersion)
