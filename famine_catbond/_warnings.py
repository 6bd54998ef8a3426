"""Custom warning classes for the famine-catbond package.

These warning classes allow users to programmatically filter, suppress,
or capture warnings using Python's standard ``warnings`` module.

Example:
    Silence degenerate-curve notices in a batch sweep::

        import warnings
        from famine_catbond._warnings import DegenerateCurveWarning

        warnings.filterwarnings("ignore", category=DegenerateCurveWarning)
"""


class FamineCatBondWarning(UserWarning):
    """Base class for all famine-catbond warnings."""


class DataQualityWarning(FamineCatBondWarning):
    """Runtime data-quality observations.

    Raised when a sampler has to floor negative draws at zero so that the
    resulting loss sample stays valid.
    """


class DegenerateCurveWarning(FamineCatBondWarning):
    """Every simulated loss is zero.

    The EP curve has no positive support. Loss statistics over such a curve
    are defined as zero rather than integrated over a zero-width domain.
    """
