"""Plotting helpers for EP curves.

Example:
    Compare baseline and mitigated curves::

        fig = plot_ep_curve(
            baseline.curve,
            attachment_point=1e9,
            mitigated=mitigated.curve,
        )
        fig.savefig("ep_curve.png")
"""

from typing import Optional, Tuple

from matplotlib.figure import Figure
import matplotlib.pyplot as plt
import matplotlib.ticker as mticker

from .ep_curve import EPCurve

COLORS = {
    "blue": "#0080C7",
    "orange": "#FF9800",
    "gray": "#666666",
    "light_blue": "#ADD8E6",
}


def format_currency(value: float, decimals: int = 0, abbreviate: bool = False) -> str:
    """Format value as currency.

    Args:
        value: Numeric value to format
        decimals: Number of decimal places
        abbreviate: If True, use K/M/B notation for large numbers

    Returns:
        Formatted string (e.g., "$1,000" or "$1K" if abbreviate=True)

    Examples:
        >>> format_currency(1000)
        '$1,000'
        >>> format_currency(1500000000, decimals=1, abbreviate=True)
        '$1.5B'
    """
    if abbreviate:
        if abs(value) >= 1e9:
            return f"${value/1e9:.{decimals}f}B"
        if abs(value) >= 1e6:
            return f"${value/1e6:.{decimals}f}M"
        if abs(value) >= 1e3:
            return f"${value/1e3:.{decimals}f}K"
        return f"${value:.{decimals}f}"
    if value < 0:
        return f"-${abs(value):,.{decimals}f}"
    return f"${value:,.{decimals}f}"


def plot_ep_curve(
    curve: EPCurve,
    attachment_point: Optional[float] = None,
    mitigated: Optional[EPCurve] = None,
    title: str = "Exceedance Probability Curve",
    figsize: Tuple[int, int] = (10, 6),
) -> Figure:
    """Plot an EP curve, optionally against a mitigated curve.

    The area under the baseline curve above the attachment point (the AAL)
    is shaded.

    Args:
        curve: Baseline EP curve.
        attachment_point: Policy amount where cover attaches.
        mitigated: EP curve of the mitigated loss sample.
        title: Plot title.
        figsize: Figure size (width, height).

    Returns:
        Matplotlib figure with the curve.
    """
    fig, ax = plt.subplots(figsize=figsize)

    ax.plot(
        curve.amounts, curve.probabilities, color=COLORS["blue"], linewidth=2, label="Baseline"
    )
    if mitigated is not None:
        ax.plot(
            mitigated.amounts,
            mitigated.probabilities,
            color=COLORS["orange"],
            linewidth=2,
            linestyle="--",
            label="Mitigated",
        )

    if attachment_point is not None:
        mask = curve.amounts >= attachment_point
        ax.fill_between(
            curve.amounts[mask],
            curve.probabilities[mask],
            color=COLORS["light_blue"],
            alpha=0.5,
            label="AAL",
        )
        ax.axvline(attachment_point, color=COLORS["gray"], linestyle=":", linewidth=1.5)

    ax.xaxis.set_major_formatter(
        mticker.FuncFormatter(lambda x, _: format_currency(x, decimals=1, abbreviate=True))
    )
    ax.set_xlabel("Annual Loss", fontsize=12)
    ax.set_ylabel("Exceedance Probability", fontsize=12)
    ax.set_ylim(0, 1.05)
    ax.set_title(title, fontsize=14, fontweight="bold")
    ax.grid(True, alpha=0.3)
    ax.legend(loc="upper right")
    fig.tight_layout()
    return fig
