"""Tests for the run_analysis quick-start factory."""

import numpy as np
import pandas as pd
import pytest

import famine_catbond
from famine_catbond._run_analysis import AnalysisResults, run_analysis
from famine_catbond.config import PricingConfig
from famine_catbond.exceptions import InvalidInputError


class TestRunAnalysis:
    """Test run_analysis."""

    def test_reference_scenario(self):
        """Test the default famine scenario with ten policyholders."""
        results = run_analysis(
            seed=1,
            rate__exposure_units=10,
            curve__resolution=2000,
            mitigation_payouts=[0.0, 5e7],
        )
        assert isinstance(results, AnalysisResults)
        assert results.losses.size == 1000
        assert results.config.sampler.seed == 1
        assert results.average_rate > 0
        assert len(results.rebates) == 2
        assert results.rebates["rebate_amount"].iloc[0] == 0.0

    def test_seeded_runs_repeat(self):
        """Test that a fixed seed reproduces the premium."""
        first = run_analysis(seed=5, curve__resolution=500)
        second = run_analysis(seed=5, curve__resolution=500)
        assert first.average_rate == second.average_rate

    def test_supplied_losses(self, small_losses):
        """Test pricing an externally supplied sample."""
        results = run_analysis(losses=small_losses, attachment_point=2.0, curve__resolution=5)
        np.testing.assert_array_equal(results.losses, small_losses)
        assert results.pricing.statistics.aal == pytest.approx(0.5)

    def test_config_object(self, small_losses):
        """Test that a pre-built config is used as given."""
        config = PricingConfig(attachment_point=0.0, mitigation_payouts=[1.0])
        results = run_analysis(config=config, losses=small_losses)
        assert results.config is config
        assert len(results.to_dataframe()) == 1

    def test_summary(self, small_losses):
        """Test the summary text."""
        results = run_analysis(
            losses=small_losses * 1e9, curve__resolution=100, mitigation_payouts=[5e8]
        )
        text = results.summary()
        assert "Average annual rate per policyholder" in text
        assert "Rebate for mitigation payout 500,000,000" in text

    def test_to_dataframe_is_copy(self, small_losses):
        """Test that the exported frame can be changed freely."""
        results = run_analysis(losses=small_losses, mitigation_payouts=[1.0])
        df = results.to_dataframe()
        assert isinstance(df, pd.DataFrame)
        df.loc[0, "rebate_amount"] = -1.0
        assert results.rebates.loc[0, "rebate_amount"] != -1.0

    def test_invalid_losses(self):
        """Test that sample errors propagate."""
        with pytest.raises(InvalidInputError):
            run_analysis(losses=[1.0, -1.0])

    def test_package_exports(self):
        """Test lazy package-level imports."""
        assert famine_catbond.run_analysis is run_analysis
        assert famine_catbond.CatBondPricer.__name__ == "CatBondPricer"
        with pytest.raises(AttributeError):
            famine_catbond.does_not_exist
