"""Average premium rate from AAL, loss dispersion and rate parameters.

The rate follows the standard loss-cost ratemaking build-up:

    reluctance         = (target_yield * confidence_z) / (1 + target_yield)
    pure_premium       = AAL / exposure_units
    risk_load          = (reluctance * loss_std_dev) / exposure_units
    variable_load_frac = commission + premium tax + underwriting profit + trend
    average_rate       = (pure_premium + risk_load + fixed_expense) / (1 - variable_load_frac)

Example:
    Price a layer from precomputed statistics::

        from famine_catbond.config import RateParameters
        from famine_catbond.premium import calculate_premium

        result = calculate_premium(aal=1000, loss_std_dev=500, parameters=RateParameters())
        result.average_rate  # about 1549.0
"""

from dataclasses import asdict, dataclass
import logging
from typing import Dict, Optional

import numpy as np

from .config import RateParameters
from .exceptions import InvalidInputError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PremiumResult:
    """Premium rate and the components used to build it.

    Attributes:
        average_rate: Gross average annual rate per exposure unit.
        aal: Average annual loss the rate was built from.
        loss_std_dev: Loss dispersion the risk load was built from.
        pure_premium: AAL per exposure unit.
        risk_load: Risk load per exposure unit.
        reluctance_factor: Reluctance factor used for the risk load.
        variable_load_fraction: Variable expense and profit share of premium.
    """

    average_rate: float
    aal: float
    loss_std_dev: float
    pure_premium: float
    risk_load: float
    reluctance_factor: float
    variable_load_fraction: float

    def to_dict(self) -> Dict[str, float]:
        """Return the result as a plain dictionary."""
        return asdict(self)


def reluctance_factor(target_yield: float, confidence_z: float) -> float:
    """Reluctance factor scaling loss dispersion into a risk load.

    Args:
        target_yield: Desired portfolio yield.
        confidence_z: One-tailed confidence z-score.

    Returns:
        ``(target_yield * confidence_z) / (1 + target_yield)``.
    """
    return (target_yield * confidence_z) / (1 + target_yield)


def calculate_premium(
    aal: float,
    loss_std_dev: float,
    parameters: Optional[RateParameters] = None,
) -> PremiumResult:
    """Calculate the average annual rate per exposure unit.

    Args:
        aal: Average annual loss above the attachment point.
        loss_std_dev: Loss standard deviation for the risk load.
        parameters: Rate parameters (defaults to the reference values).

    Returns:
        PremiumResult with the average rate and its components.

    Raises:
        InvalidInputError: If ``aal`` or ``loss_std_dev`` is negative or non-finite.
        InvalidConfigurationError: If a rate parameter is NaN or infinite,
            ``exposure_units <= 0`` or the variable load fraction is 1 or more.
    """
    params = parameters or RateParameters()
    for name, value in (("AAL", aal), ("Loss standard deviation", loss_std_dev)):
        if not np.isfinite(value) or value < 0:
            raise InvalidInputError(f"{name} must be a non-negative amount, got {value}")
    params.validate_for_pricing()

    reluctance = reluctance_factor(params.target_yield, params.confidence_z)
    pure_premium = aal / params.exposure_units
    risk_load = (reluctance * loss_std_dev) / params.exposure_units
    variable_load = params.variable_load_fraction

    average_rate = (pure_premium + risk_load + params.fixed_expense) / (1 - variable_load)

    logger.debug(
        "Average rate %.2f = (pure %.2f + risk %.2f + fixed %.2f) / (1 - %.4f)",
        average_rate,
        pure_premium,
        risk_load,
        params.fixed_expense,
        variable_load,
    )
    return PremiumResult(
        average_rate=float(average_rate),
        aal=float(aal),
        loss_std_dev=float(loss_std_dev),
        pure_premium=float(pure_premium),
        risk_load=float(risk_load),
        reluctance_factor=float(reluctance),
        variable_load_fraction=float(variable_load),
    )
