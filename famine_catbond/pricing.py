"""CAT bond premium pricing from a simulated loss sample.

:class:`CatBondPricer` composes the pipeline stages explicitly:

    loss sample -> EP curve -> (AAL, loss std dev) -> average rate

Each call owns its inputs and outputs; the pricer keeps no state beyond its
immutable settings, so one instance can price any number of samples.

Example:
    Price the reference famine scenario::

        from famine_catbond.config import RateParameters
        from famine_catbond.pricing import CatBondPricer

        pricer = CatBondPricer(
            parameters=RateParameters(exposure_units=10),
            attachment_point=1_000_000_000,
        )
        result = pricer.price(losses)
        result.premium.average_rate

        rebate = pricer.evaluate_rebate(losses, mitigation_payout=50_000_000)
        rebate.rebate_amount
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import TYPE_CHECKING, Optional, Sequence

import numpy as np

from .config import PricingConfig, RateParameters
from .ep_curve import CurveMethod, EPCurve, build_ep_curve, validate_curve_settings
from .exceptions import InvalidInputError
from .loss_sample import LossesLike, validate_loss_sample
from .loss_statistics import DispersionMethod, LossStatistics, compute_loss_statistics
from .premium import PremiumResult, calculate_premium

if TYPE_CHECKING:
    import pandas as pd

    from .rebate import RebateResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class PricingResult:
    """Every intermediate value of one pricing run.

    Attributes:
        curve: EP curve built from the sample.
        statistics: AAL and loss dispersion above the attachment point.
        premium: Average rate and its components.
    """

    curve: EPCurve
    statistics: LossStatistics
    premium: PremiumResult

    @property
    def average_rate(self) -> float:
        """Average annual rate per exposure unit."""
        return self.premium.average_rate


class CatBondPricer:
    """Price a CAT bond layer from simulated annual losses.

    Args:
        parameters: Rate parameters for the premium formula.
        attachment_point: Policy amount where the layer attaches.
        resolution: Number of EP curve points.
        method: EP curve counting method (``"sorted"`` or ``"naive"``).
        dispersion: Standard deviation used for the risk load.

    Raises:
        InvalidInputError: If the attachment point is negative or non-finite.
        InvalidConfigurationError: If the rate parameters cannot produce a
            finite premium.
    """

    def __init__(
        self,
        parameters: Optional[RateParameters] = None,
        attachment_point: float = 1_000_000_000.0,
        resolution: int = 10_000,
        method: CurveMethod = "sorted",
        dispersion: DispersionMethod = DispersionMethod.CURVE_GRID,
    ):
        if not np.isfinite(attachment_point) or attachment_point < 0:
            raise InvalidInputError(
                f"Attachment point must be a non-negative amount, got {attachment_point}"
            )
        self.parameters = parameters or RateParameters()
        self.parameters.validate_for_pricing()
        self.attachment_point = float(attachment_point)
        validate_curve_settings(resolution, method)
        self.resolution = int(resolution)
        self.method = method
        self.dispersion = DispersionMethod(dispersion)

    @classmethod
    def from_config(cls, config: PricingConfig) -> "CatBondPricer":
        """Create a pricer from a :class:`PricingConfig`.

        Args:
            config: Scenario configuration.

        Returns:
            CatBondPricer using the config's rate, curve and attachment settings.
        """
        return cls(
            parameters=config.rate,
            attachment_point=config.attachment_point,
            resolution=config.curve.resolution,
            method=config.curve.method,
            dispersion=config.dispersion,
        )

    def build_curve(self, losses: LossesLike) -> EPCurve:
        """Build the EP curve for a loss sample."""
        return build_ep_curve(losses, resolution=self.resolution, method=self.method)

    def loss_statistics(
        self, curve: EPCurve, losses: Optional[LossesLike] = None
    ) -> LossStatistics:
        """Compute AAL and dispersion above the attachment point."""
        return compute_loss_statistics(
            curve, self.attachment_point, dispersion=self.dispersion, losses=losses
        )

    def price(self, losses: LossesLike) -> PricingResult:
        """Run the full pipeline on a loss sample.

        Args:
            losses: Simulated annual losses.

        Returns:
            PricingResult with curve, statistics and premium.
        """
        sample = validate_loss_sample(losses)
        curve = self.build_curve(sample)
        statistics = self.loss_statistics(curve, sample)
        premium = calculate_premium(statistics.aal, statistics.loss_std_dev, self.parameters)
        logger.info(
            "Priced %d simulated years at attachment %.0f: AAL %.2f, average rate %.2f",
            sample.size,
            self.attachment_point,
            premium.aal,
            premium.average_rate,
        )
        return PricingResult(curve=curve, statistics=statistics, premium=premium)

    def premium(self, losses: LossesLike) -> PremiumResult:
        """Return only the premium result for a loss sample."""
        return self.price(losses).premium

    def evaluate_rebate(self, losses: LossesLike, mitigation_payout: float) -> "RebateResult":
        """Premium rebate earned by a mitigation payout.

        See :func:`famine_catbond.rebate.evaluate_rebate`.
        """
        from .rebate import evaluate_rebate

        return evaluate_rebate(losses, mitigation_payout, self)

    def rebate_schedule(self, losses: LossesLike, payouts: Sequence[float]) -> "pd.DataFrame":
        """Rebates for a sweep of mitigation payouts.

        See :func:`famine_catbond.rebate.rebate_schedule`.
        """
        from .rebate import rebate_schedule

        return rebate_schedule(losses, payouts, self)
