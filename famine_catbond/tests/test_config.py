"""Tests for pricing configuration models."""

import logging

from pydantic import ValidationError
import pytest

from famine_catbond.config import (
    CurveConfig,
    LoggingConfig,
    PricingConfig,
    RateParameters,
    SamplerConfig,
)
from famine_catbond.exceptions import InvalidConfigurationError
from famine_catbond.loss_statistics import DispersionMethod


class TestRateParameters:
    """Test RateParameters model."""

    def test_defaults(self):
        """Test reference defaults."""
        params = RateParameters()
        assert params.target_yield == 0.10
        assert params.confidence_z == 1.645
        assert params.commission_rate == 0.20
        assert params.premium_tax_rate == 0.04
        assert params.underwriting_profit_rate == 0.05
        assert params.trend_adjustment == 0.0
        assert params.fixed_expense == 25.0
        assert params.exposure_units == 1.0

    def test_derived_values(self):
        """Test reluctance factor and variable load properties."""
        params = RateParameters()
        assert params.reluctance_factor == pytest.approx(0.1645 / 1.1)
        assert params.variable_load_fraction == pytest.approx(0.29)
        assert params.check() == []

    def test_frozen(self):
        """Test that parameters cannot change after creation."""
        params = RateParameters()
        with pytest.raises(ValidationError):
            params.target_yield = 0.2

    def test_field_bounds(self):
        """Test that out-of-range fractions are rejected by validation."""
        with pytest.raises(ValidationError):
            RateParameters(commission_rate=1.5)
        with pytest.raises(ValidationError):
            RateParameters(fixed_expense=-1.0)

    def test_check_reports_issues(self):
        """Test that structural issues are listed rather than raised."""
        params = RateParameters(exposure_units=-1.0)
        issues = params.check()
        assert len(issues) == 1
        assert "exposure_units" in issues[0]
        with pytest.raises(InvalidConfigurationError):
            params.validate_for_pricing()

    def test_from_confidence_level(self):
        """Test deriving the z-score from a confidence level."""
        params = RateParameters.from_confidence_level(0.95, exposure_units=10)
        assert params.confidence_z == pytest.approx(1.645, abs=1e-3)
        assert params.exposure_units == 10

    @pytest.mark.parametrize("level", [0.0, 1.0, 1.5])
    def test_from_confidence_level_invalid(self, level):
        """Test that confidence levels outside (0, 1) are rejected."""
        with pytest.raises(InvalidConfigurationError, match="Confidence level"):
            RateParameters.from_confidence_level(level)


class TestSubConfigs:
    """Test curve, sampler and logging configs."""

    def test_curve_defaults(self):
        """Test curve defaults follow the reference resolution."""
        config = CurveConfig()
        assert config.resolution == 10_000
        assert config.method == "sorted"

    def test_curve_bounds(self):
        """Test that invalid curve settings are rejected."""
        with pytest.raises(ValidationError):
            CurveConfig(resolution=1)
        with pytest.raises(ValidationError):
            CurveConfig(method="fft")

    def test_sampler_defaults(self):
        """Test sampler defaults match the famine scenario."""
        config = SamplerConfig()
        assert config.distribution == "normal"
        assert config.mean == 1e9
        assert config.std == 1e8
        assert config.n_samples == 1000
        assert config.seed is None

    def test_logging_defaults(self):
        """Test logging defaults."""
        config = LoggingConfig()
        assert config.enabled
        assert config.level == "INFO"
        assert config.log_file is None


class TestPricingConfig:
    """Test PricingConfig master model."""

    def test_defaults(self):
        """Test default scenario."""
        config = PricingConfig()
        assert config.attachment_point == 1e9
        assert config.dispersion is DispersionMethod.CURVE_GRID
        assert config.mitigation_payouts == []

    def test_negative_payouts_rejected(self):
        """Test that negative mitigation payouts are rejected."""
        with pytest.raises(ValidationError, match="non-negative"):
            PricingConfig(mitigation_payouts=[1e7, -5.0])

    def test_override(self):
        """Test double-underscore overrides."""
        config = PricingConfig().override(
            rate__target_yield=0.12, attachment_point=9e8, sampler__seed=3
        )
        assert config.rate.target_yield == 0.12
        assert config.rate.commission_rate == 0.20
        assert config.attachment_point == 9e8
        assert config.sampler.seed == 3

    def test_from_dict_with_base(self):
        """Test merging a partial dictionary into a base config."""
        base = PricingConfig(mitigation_payouts=[1e7])
        config = PricingConfig.from_dict({"curve": {"resolution": 500}}, base_config=base)
        assert config.curve.resolution == 500
        assert config.curve.method == "sorted"
        assert config.mitigation_payouts == [1e7]

    def test_yaml_round_trip(self, tmp_path):
        """Test saving and loading YAML."""
        config = PricingConfig(
            attachment_point=8e8,
            dispersion=DispersionMethod.SAMPLE,
            mitigation_payouts=[1e7, 5e7],
        ).override(rate__exposure_units=10)
        path = tmp_path / "nested" / "scenario.yaml"
        config.to_yaml(path)
        assert path.exists()
        assert PricingConfig.from_yaml(path) == config

    def test_from_yaml_partial(self, tmp_path):
        """Test that omitted sections take defaults."""
        path = tmp_path / "partial.yaml"
        path.write_text("rate:\n  target_yield: 0.15\n", encoding="utf-8")
        config = PricingConfig.from_yaml(path)
        assert config.rate.target_yield == 0.15
        assert config.curve == CurveConfig()

    def test_from_yaml_missing(self, tmp_path):
        """Test that a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            PricingConfig.from_yaml(tmp_path / "missing.yaml")

    def test_setup_logging(self, tmp_path):
        """Test that handlers are attached to the package logger."""
        log_file = tmp_path / "logs" / "pricing.log"
        config = PricingConfig(
            logging=LoggingConfig(level="DEBUG", log_file=str(log_file), console_output=False)
        )
        config.setup_logging()
        logger = logging.getLogger("famine_catbond")
        try:
            assert logger.level == logging.DEBUG
            assert len(logger.handlers) == 1
            assert isinstance(logger.handlers[0], logging.FileHandler)
            assert log_file.parent.exists()
        finally:
            for handler in logger.handlers:
                handler.close()
            logger.handlers.clear()
            logger.setLevel(logging.NOTSET)

    def test_setup_logging_disabled(self):
        """Test that disabled logging leaves the logger untouched."""
        logger = logging.getLogger("famine_catbond")
        before = list(logger.handlers)
        PricingConfig(logging=LoggingConfig(enabled=False)).setup_logging()
        assert logger.handlers == before
