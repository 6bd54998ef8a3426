"""Tests for the mitigation rebate evaluator."""

import numpy as np
import pandas as pd
import pytest

from famine_catbond.config import RateParameters
from famine_catbond.exceptions import InvalidInputError
from famine_catbond.loss_statistics import DispersionMethod
from famine_catbond.pricing import CatBondPricer
from famine_catbond.rebate import RebateResult, evaluate_rebate, rebate_schedule

PAYOUTS = [0.0, 2e7, 5e7, 1e8, 2e8, 5e8]


class TestEvaluateRebate:
    """Test evaluate_rebate."""

    @pytest.fixture
    def pricer(self):
        """Pricer attaching below the mean loss."""
        return CatBondPricer(
            parameters=RateParameters(exposure_units=10),
            attachment_point=9e8,
            resolution=2000,
        )

    def test_result_fields(self, pricer, normal_losses):
        """Test that the rebate is the baseline minus the mitigated premium."""
        result = evaluate_rebate(normal_losses, 5e7, pricer)
        assert isinstance(result, RebateResult)
        assert result.mitigation_payout == 5e7
        assert result.rebate_amount == pytest.approx(
            result.baseline_premium - result.mitigated_premium
        )
        assert result.baseline.average_rate == result.baseline_premium
        assert result.mitigated.average_rate == result.mitigated_premium

    def test_zero_payout_gives_zero_rebate(self, pricer, normal_losses):
        """Test that no mitigation earns no rebate."""
        result = evaluate_rebate(normal_losses, 0.0, pricer)
        assert result.rebate_amount == 0.0

    def test_mitigated_premium_not_above_baseline(self, pricer, normal_losses):
        """Test that mitigation never raises the premium."""
        for payout in PAYOUTS:
            result = evaluate_rebate(normal_losses, payout, pricer)
            assert result.mitigated_premium <= result.baseline_premium
            assert result.rebate_amount >= 0.0

    @pytest.mark.parametrize("dispersion", list(DispersionMethod))
    def test_rebate_monotonicity(self, normal_losses, dispersion):
        """Test that a larger payout never gives a larger premium."""
        pricer = CatBondPricer(attachment_point=9e8, resolution=2000, dispersion=dispersion)
        premiums = [evaluate_rebate(normal_losses, p, pricer).mitigated_premium for p in PAYOUTS]
        for smaller, larger in zip(premiums, premiums[1:]):
            assert larger <= smaller

    def test_payout_beyond_exposure(self, pricer, normal_losses):
        """Test that pushing every loss below the attachment leaves only expenses."""
        result = evaluate_rebate(normal_losses, 8e8, pricer)
        params = pricer.parameters
        assert result.mitigated.aal == 0.0
        assert result.mitigated_premium == pytest.approx(
            params.fixed_expense / (1 - params.variable_load_fraction)
        )

    def test_precomputed_baseline(self, pricer, normal_losses):
        """Test that a supplied baseline premium is reused."""
        baseline = pricer.premium(normal_losses)
        result = evaluate_rebate(normal_losses, 1e8, pricer, baseline=baseline)
        assert result.baseline is baseline

    def test_default_pricer(self, small_losses):
        """Test that the reference pricer is used when none is given."""
        result = evaluate_rebate(small_losses * 1e9, 1e9)
        assert result.rebate_amount >= 0.0

    def test_pricer_method(self, pricer, normal_losses):
        """Test the CatBondPricer convenience method."""
        direct = evaluate_rebate(normal_losses, 1e8, pricer)
        via_pricer = pricer.evaluate_rebate(normal_losses, 1e8)
        assert via_pricer.rebate_amount == direct.rebate_amount

    def test_negative_payout(self, pricer, normal_losses):
        """Test that negative payouts are rejected."""
        with pytest.raises(InvalidInputError, match="payout"):
            evaluate_rebate(normal_losses, -1.0, pricer)


class TestRebateSchedule:
    """Test rebate_schedule."""

    def test_schedule_frame(self, normal_losses):
        """Test one row per payout with the expected columns."""
        pricer = CatBondPricer(attachment_point=9e8, resolution=1000)
        df = rebate_schedule(normal_losses, PAYOUTS, pricer)
        assert isinstance(df, pd.DataFrame)
        assert list(df.columns) == [
            "mitigation_payout",
            "baseline_premium",
            "mitigated_premium",
            "rebate_amount",
            "mitigated_aal",
            "mitigated_loss_std_dev",
        ]
        assert len(df) == len(PAYOUTS)
        assert df["rebate_amount"].iloc[0] == 0.0
        assert df["baseline_premium"].nunique() == 1
        assert np.all(np.diff(df["rebate_amount"].to_numpy()) >= 0)

    def test_empty_schedule(self, normal_losses):
        """Test that no payouts gives an empty frame with the same columns."""
        df = rebate_schedule(normal_losses, [], CatBondPricer(resolution=100))
        assert df.empty
        assert "rebate_amount" in df.columns

    def test_pricer_method(self, normal_losses):
        """Test the CatBondPricer convenience method."""
        pricer = CatBondPricer(attachment_point=9e8, resolution=1000)
        df = pricer.rebate_schedule(normal_losses, [0.0, 1e8])
        assert len(df) == 2
