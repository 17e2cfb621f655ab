"""
Plotting utilities for marginal-effect tables.

All plotting functions accept precomputed effect tables and do not perform
statistical calculations.

Modules:
    marginal_plots:
        Line-and-band or point-range figure of the marginal effect of
        ``term1`` across ``term2``, with a rug of observed ``term2`` values.

    style:
        Shared rcParams, axis helpers, and multi-format figure saving.
"""

from .marginal_plots import plot_marginal_effects
from .style import save_figure, set_global_style

__all__ = ["plot_marginal_effects", "save_figure", "set_global_style"]
