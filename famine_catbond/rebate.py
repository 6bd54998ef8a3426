"""Premium rebate attributable to a risk-mitigation intervention.

A mitigation investment (for example replacement food production that pays
out in a famine year) lowers every simulated loss by its payout. Re-pricing
the mitigated sample and comparing it with the baseline premium gives the
premium discount the investment earns.

Example:
    Sweep several mitigation budgets::

        from famine_catbond.pricing import CatBondPricer
        from famine_catbond.rebate import rebate_schedule

        pricer = CatBondPricer(attachment_point=9e8)
        df = rebate_schedule(losses, [0, 1e7, 5e7, 1e8], pricer)
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import TYPE_CHECKING, Optional, Sequence

import pandas as pd

from .loss_sample import LossesLike, mitigate_losses, validate_loss_sample
from .premium import PremiumResult

if TYPE_CHECKING:
    from .pricing import CatBondPricer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RebateResult:
    """Baseline and mitigated premiums for one mitigation payout.

    Attributes:
        rebate_amount: ``baseline_premium - mitigated_premium``.
        baseline_premium: Average rate on the baseline sample.
        mitigated_premium: Average rate on the mitigated sample.
        mitigation_payout: Payout subtracted from every simulated loss.
        baseline: Full premium breakdown for the baseline sample.
        mitigated: Full premium breakdown for the mitigated sample.
    """

    rebate_amount: float
    baseline_premium: float
    mitigated_premium: float
    mitigation_payout: float
    baseline: PremiumResult
    mitigated: PremiumResult


def _default_pricer() -> "CatBondPricer":
    from .pricing import CatBondPricer

    return CatBondPricer()


def evaluate_rebate(
    losses: LossesLike,
    mitigation_payout: float,
    pricer: Optional["CatBondPricer"] = None,
    baseline: Optional[PremiumResult] = None,
) -> RebateResult:
    """Price the baseline and mitigated samples and report the difference.

    Args:
        losses: Baseline simulated annual losses.
        mitigation_payout: Amount subtracted from every loss, floored at zero.
        pricer: Pricer holding rate parameters, attachment point and curve
            settings. Defaults to the reference configuration.
        baseline: Precomputed baseline premium for ``losses`` under ``pricer``.

    Returns:
        RebateResult. The rebate is reported as computed, without clamping.

    Raises:
        InvalidInputError: If the sample or payout is invalid.
    """
    pricer = pricer or _default_pricer()
    sample = validate_loss_sample(losses)
    mitigated_sample = mitigate_losses(sample, mitigation_payout)

    baseline_result = baseline or pricer.premium(sample)
    mitigated_result = pricer.premium(mitigated_sample)
    rebate = baseline_result.average_rate - mitigated_result.average_rate

    if rebate < 0:
        logger.warning(
            "Mitigation payout %.2f raised the premium from %.2f to %.2f",
            mitigation_payout,
            baseline_result.average_rate,
            mitigated_result.average_rate,
        )
    else:
        logger.debug("Mitigation payout %.2f earns rebate %.2f", mitigation_payout, rebate)

    return RebateResult(
        rebate_amount=float(rebate),
        baseline_premium=baseline_result.average_rate,
        mitigated_premium=mitigated_result.average_rate,
        mitigation_payout=float(mitigation_payout),
        baseline=baseline_result,
        mitigated=mitigated_result,
    )


def rebate_schedule(
    losses: LossesLike,
    payouts: Sequence[float],
    pricer: Optional["CatBondPricer"] = None,
) -> pd.DataFrame:
    """Evaluate rebates for several mitigation payouts.

    The baseline premium is computed once and shared by every row.

    Args:
        losses: Baseline simulated annual losses.
        payouts: Mitigation payouts to evaluate.
        pricer: Pricer to use. Defaults to the reference configuration.

    Returns:
        DataFrame with one row per payout and columns ``mitigation_payout``,
        ``baseline_premium``, ``mitigated_premium``, ``rebate_amount``,
        ``mitigated_aal`` and ``mitigated_loss_std_dev``.
    """
    pricer = pricer or _default_pricer()
    sample = validate_loss_sample(losses)
    baseline = pricer.premium(sample)

    rows = []
    for payout in payouts:
        result = evaluate_rebate(sample, payout, pricer, baseline=baseline)
        rows.append(
            {
                "mitigation_payout": result.mitigation_payout,
                "baseline_premium": result.baseline_premium,
                "mitigated_premium": result.mitigated_premium,
                "rebate_amount": result.rebate_amount,
                "mitigated_aal": result.mitigated.aal,
                "mitigated_loss_std_dev": result.mitigated.loss_std_dev,
            }
        )

    return pd.DataFrame(
        rows,
        columns=[
            "mitigation_payout",
            "baseline_premium",
            "mitigated_premium",
            "rebate_amount",
            "mitigated_aal",
            "mitigated_loss_std_dev",
        ],
    )
