"""Configuration management using Pydantic v2 models.

This module provides the configuration classes for the famine CAT bond
pricing pipeline. Every value that the exploratory scripts kept as a
module-level variable (policy amount, expense ratios, yield target, z-score)
lives here as an explicit, validated and immutable model that is passed into
each stage.

The configuration is hierarchical: :class:`RateParameters` drives the premium
formula, :class:`CurveConfig` the EP curve builder, :class:`SamplerConfig` the
upstream Monte Carlo draw, and :class:`PricingConfig` composes them together
with the attachment point and mitigation payouts to evaluate.

Examples:
    Default Indonesia scenario::

        from famine_catbond.config import PricingConfig

        config = PricingConfig()
        config.rate.variable_load_fraction  # 0.29

    Loading from file::

        config = PricingConfig.from_yaml(Path("scenario.yaml"))

    Overriding nested values::

        config = config.override(rate__target_yield=0.12, attachment_point=9e8)

Note:
    All monetary values are in nominal USD unless otherwise specified.
    Rates and ratios are expressed as decimals (0.1 = 10%).
"""

import math
from pathlib import Path
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from scipy import stats

from .exceptions import InvalidConfigurationError
from .loss_statistics import DispersionMethod


class RateParameters(BaseModel):
    """Actuarial constants for the average-rate formula.

    The premium is built from a pure premium (AAL per exposure unit), a risk
    load scaled by the reluctance factor, and a fixed expense, all grossed up
    for the variable expense and profit load.

    Attributes:
        target_yield: Desired portfolio yield on allocated surplus.
        confidence_z: One-tailed z-score for the probability that the actual
            result requires more surplus than allocated (1.645 is about 95%).
        commission_rate: Commission as a fraction of gross premium.
        premium_tax_rate: Premium tax as a fraction of gross premium.
        underwriting_profit_rate: Underwriting profit provision.
        trend_adjustment: Loss trend adjustment added to the variable load.
        fixed_expense: Fixed expense per exposure unit in monetary units.
        exposure_units: Number of insured units (policyholders).

    Examples:
        Reference parameters with ten policyholders::

            params = RateParameters(exposure_units=10)
            params.reluctance_factor  # 0.1495...

    Note:
        Structural problems that would make the rate formula blow up are not
        rejected at construction time. They are reported by :meth:`check` and
        raised as :class:`InvalidConfigurationError` when a premium is
        calculated.
    """

    model_config = ConfigDict(frozen=True)

    target_yield: float = Field(default=0.10, ge=0, description="Desired portfolio yield")
    confidence_z: float = Field(default=1.645, description="One-tailed confidence z-score")
    commission_rate: float = Field(default=0.20, ge=0, le=1, description="Commission rate")
    premium_tax_rate: float = Field(default=0.04, ge=0, le=1, description="Premium tax rate")
    underwriting_profit_rate: float = Field(
        default=0.05, ge=-1, le=1, description="Underwriting profit provision"
    )
    trend_adjustment: float = Field(default=0.0, description="Loss trend adjustment")
    fixed_expense: float = Field(default=25.0, ge=0, description="Fixed expense per unit")
    exposure_units: float = Field(default=1.0, description="Number of insured units")

    @classmethod
    def from_confidence_level(cls, confidence_level: float, **kwargs: Any) -> "RateParameters":
        """Create parameters with ``confidence_z`` derived from a confidence level.

        Args:
            confidence_level: One-tailed confidence level in (0, 1), e.g. 0.95.
            **kwargs: Any other RateParameters field.

        Returns:
            RateParameters with ``confidence_z = norm.ppf(confidence_level)``.

        Raises:
            InvalidConfigurationError: If the level is outside (0, 1).
        """
        if not 0 < confidence_level < 1:
            raise InvalidConfigurationError(
                [f"Confidence level must be in (0, 1), got {confidence_level}"]
            )
        return cls(confidence_z=float(stats.norm.ppf(confidence_level)), **kwargs)

    @property
    def reluctance_factor(self) -> float:
        """Reluctance factor ``(y * z) / (1 + y)``."""
        return (self.target_yield * self.confidence_z) / (1 + self.target_yield)

    @property
    def variable_load_fraction(self) -> float:
        """Share of gross premium taken by commissions, tax, profit and trend."""
        return (
            self.commission_rate + self.premium_tax_rate + self.underwriting_profit_rate
        ) + self.trend_adjustment

    def check(self) -> List[str]:
        """List the critical issues that prevent a finite premium.

        Returns:
            List of human-readable issues; empty when the parameters are usable.
            NaN or infinite fields are reported without the derived load checks.
        """
        non_finite = [
            f"{name} must be a finite number, got {value}"
            for name, value in self.model_dump().items()
            if not math.isfinite(value)
        ]
        if non_finite:
            return non_finite

        issues = []
        if not self.exposure_units > 0:
            issues.append(f"exposure_units must be positive, got {self.exposure_units}")
        if self.variable_load_fraction >= 1:
            issues.append(
                f"Variable expense and profit load {self.variable_load_fraction:.4f} "
                "must be below 1.0"
            )
        return issues

    def validate_for_pricing(self) -> None:
        """Raise if :meth:`check` reports any issue.

        Raises:
            InvalidConfigurationError: With every issue found.
        """
        issues = self.check()
        if issues:
            raise InvalidConfigurationError(issues)


class CurveConfig(BaseModel):
    """EP curve builder settings.

    Attributes:
        resolution: Number of evenly spaced loss amounts on the curve.
        method: ``"sorted"`` (sort and binary search) or ``"naive"``
            (one pass over the sample per threshold). Both give identical curves.
    """

    model_config = ConfigDict(frozen=True)

    resolution: int = Field(default=10_000, ge=2, description="Number of curve points")
    method: Literal["sorted", "naive"] = Field(default="sorted", description="Counting method")


class SamplerConfig(BaseModel):
    """Upstream Monte Carlo loss sampler settings.

    Defaults reproduce the Indonesia famine scenario: a normal distribution
    of annual losses centred on the one-billion policy amount.
    """

    model_config = ConfigDict(frozen=True)

    distribution: Literal["normal", "lognormal"] = Field(default="normal")
    mean: float = Field(default=1_000_000_000.0, gt=0, description="Mean annual loss")
    std: float = Field(default=100_000_000.0, ge=0, description="Standard deviation of loss")
    n_samples: int = Field(default=1000, ge=2, description="Simulated years")
    seed: Optional[int] = Field(default=None, description="Random seed")


class LoggingConfig(BaseModel):
    """Logging configuration.

    Controls logging behavior including level, output destinations,
    and message formatting.
    """

    enabled: bool = Field(default=True, description="Enable logging")
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", description="Logging level"
    )
    log_file: Optional[str] = Field(
        default=None, description="Log file path (None=no file logging)"
    )
    console_output: bool = Field(default=True, description="Log to console")
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log message format",
    )


class PricingConfig(BaseModel):
    """Complete configuration for one pricing scenario.

    Attributes:
        rate: Premium formula constants.
        curve: EP curve builder settings.
        sampler: Loss sampler used when no sample is supplied.
        attachment_point: Insured policy amount where the layer attaches.
        dispersion: Which standard deviation feeds the risk load.
        mitigation_payouts: Mitigation payouts to evaluate rebates for.
        logging: Logging settings.
    """

    rate: RateParameters = Field(default_factory=RateParameters)
    curve: CurveConfig = Field(default_factory=CurveConfig)
    sampler: SamplerConfig = Field(default_factory=SamplerConfig)
    attachment_point: float = Field(
        default=1_000_000_000.0, ge=0, description="Policy amount where cover attaches"
    )
    dispersion: DispersionMethod = Field(default=DispersionMethod.CURVE_GRID)
    mitigation_payouts: List[float] = Field(default_factory=list)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("mitigation_payouts")
    @classmethod
    def validate_payouts(cls, v: List[float]) -> List[float]:
        """Reject negative mitigation payouts.

        Args:
            v: Payouts to validate.

        Returns:
            The payouts unchanged.
        """
        negative = [p for p in v if p < 0]
        if negative:
            raise ValueError(f"Mitigation payouts must be non-negative, got {negative}")
        return v

    @classmethod
    def from_yaml(cls, path: Path) -> "PricingConfig":
        """Load configuration from YAML file.

        Args:
            path: Path to YAML configuration file.

        Returns:
            PricingConfig object with validated parameters.

        Raises:
            FileNotFoundError: If config file doesn't exist.
            ValidationError: If configuration is invalid.
        """
        import yaml

        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        return cls(**data)

    @classmethod
    def from_dict(
        cls, data: dict, base_config: Optional["PricingConfig"] = None
    ) -> "PricingConfig":
        """Create config from dictionary, optionally overriding base config.

        Args:
            data: Dictionary with configuration parameters.
            base_config: Optional base configuration to override.

        Returns:
            PricingConfig object with validated parameters.
        """
        if base_config is None:
            return cls(**data)

        config_dict = base_config.model_dump()

        def deep_merge(base: dict, override: dict) -> dict:
            result = base.copy()
            for key, value in override.items():
                if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                    result[key] = deep_merge(result[key], value)
                else:
                    result[key] = value
            return result

        merged = deep_merge(config_dict, data)
        return cls(**merged)

    def override(self, **kwargs) -> "PricingConfig":
        """Create a new config with overridden parameters.

        Args:
            **kwargs: Parameters to override using double underscores for
                nesting, e.g. ``rate__target_yield=0.12``.

        Returns:
            New PricingConfig object with overrides applied.
        """
        override_dict: Dict[str, Any] = {}
        for key, value in kwargs.items():
            parts = key.split("__")
            current = override_dict
            for part in parts[:-1]:
                if part not in current:
                    current[part] = {}
                current = current[part]
            current[parts[-1]] = value

        return PricingConfig.from_dict(override_dict, base_config=self)

    def to_yaml(self, path: Path) -> None:
        """Save configuration to YAML file.

        Args:
            path: Path where to save the configuration.
        """
        import yaml

        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            yaml.dump(self.model_dump(mode="json"), f, default_flow_style=False, sort_keys=False)

    def setup_logging(self) -> None:
        """Configure logging based on settings.

        Sets up logging handlers for console and/or file output on the
        ``famine_catbond`` logger.
        """
        if not self.logging.enabled:
            return

        import logging
        import sys

        logger = logging.getLogger("famine_catbond")
        logger.setLevel(getattr(logging, self.logging.level))
        logger.handlers.clear()

        formatter = logging.Formatter(self.logging.format)

        if self.logging.console_output:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setFormatter(formatter)
            logger.addHandler(console_handler)

        if self.logging.log_file:
            log_path = Path(self.logging.log_file)
            log_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_path)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)
