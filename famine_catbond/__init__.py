"""Famine CAT Bond Pricing"""

from ._version import __version__

# Use lazy imports to avoid import issues during test discovery
# Direct imports are defined but modules are imported only when accessed

__all__ = [
    "__version__",
    "AnalysisResults",
    "CatBondPricer",
    "DispersionMethod",
    "EPCurve",
    "InvalidConfigurationError",
    "InvalidInputError",
    "LossStatistics",
    "PremiumResult",
    "PricingConfig",
    "PricingResult",
    "RateParameters",
    "RebateResult",
    "build_ep_curve",
    "calculate_premium",
    "compute_loss_statistics",
    "evaluate_rebate",
    "run_analysis",
]


def __getattr__(name):
    """Lazy import modules to avoid circular dependencies during test discovery."""
    if name == "AnalysisResults" or name == "run_analysis":
        from ._run_analysis import AnalysisResults, run_analysis

        return locals()[name]
    elif name == "CatBondPricer" or name == "PricingResult":
        from .pricing import CatBondPricer, PricingResult

        return locals()[name]
    elif name == "PricingConfig" or name == "RateParameters":
        from .config import PricingConfig, RateParameters

        return locals()[name]
    elif name == "EPCurve" or name == "build_ep_curve":
        from .ep_curve import EPCurve, build_ep_curve

        return locals()[name]
    elif name in ["DispersionMethod", "LossStatistics", "compute_loss_statistics"]:
        from .loss_statistics import DispersionMethod, LossStatistics, compute_loss_statistics

        return locals()[name]
    elif name == "PremiumResult" or name == "calculate_premium":
        from .premium import PremiumResult, calculate_premium

        return locals()[name]
    elif name == "RebateResult" or name == "evaluate_rebate":
        from .rebate import RebateResult, evaluate_rebate

        return locals()[name]
    elif name == "InvalidConfigurationError" or name == "InvalidInputError":
        from .exceptions import InvalidConfigurationError, InvalidInputError

        return locals()[name]
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
