"""Exceptions raised by the pricing pipeline.

Every stage validates its own inputs and raises at its boundary. Nothing is
caught and suppressed between stages, so a caller sees the original failure.
"""


class CatBondPricingError(ValueError):
    """Base class for all famine-catbond pricing errors."""


class InvalidInputError(CatBondPricingError):
    """Raised when a loss sample, EP curve or scalar input is unusable.

    Covers samples with fewer than two values, negative or non-finite
    losses, empty EP curves and negative attachment points.
    """


class InvalidConfigurationError(CatBondPricingError):
    """Raised when rate parameters cannot produce a finite premium.

    Attributes:
        issues: List of specific configuration problems found.

    Examples:
        Catching and inspecting issues::

            try:
                calculate_premium(aal, sd, parameters)
            except InvalidConfigurationError as e:
                for issue in e.issues:
                    print(f"  - {issue}")
    """

    def __init__(self, issues: list[str]) -> None:
        self.issues = issues
        bullet_list = "\n".join(f"  - {issue}" for issue in issues)
        super().__init__(
            f"Rate parameters have {len(issues)} critical "
            f"{'issue' if len(issues) == 1 else 'issues'}:\n{bullet_list}"
        )
