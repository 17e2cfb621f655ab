"""
A Python package for marginal effects of two-way interactions in linear models.

Computes the conditional effect of one constitutive term across the values of
the other, with delta-method standard errors and standard, false-discovery-rate
or custom confidence intervals.

Modules:
    - model: Read-only snapshot of a fitted OLS model.
    - terms: Resolves the interaction term and the moderator's levels.
    - stats: Marginal effects, FDR critical values, and interval strategies.
    - analysis: ``plot_me`` and ``marginal_effects`` entry points.
    - plotting: Renders effect tables with matplotlib.
    - output: Exports effect tables to CSV.
"""

__version__ = "1.0.0"

from .analysis import marginal_effects, plot_me
from .errors import (
    InteractionNotFound,
    InvalidModelKind,
    InvalidTermKind,
    NotImplementedStrategy,
    PlotMeError,
    TermNotFound,
    UnsupportedCiType,
)
from .model import FittedModel
from .output import save_effects_to_csv
from .plotting import plot_marginal_effects, save_figure
from .stats import EffectTable, fdr_critical_t
from .terms import InteractionSpec, find_interaction_key, level_grid, resolve

__all__ = [
    # Entry points
    "marginal_effects",
    "plot_me",
    # Model and terms
    "FittedModel",
    "InteractionSpec",
    "find_interaction_key",
    "level_grid",
    "resolve",
    # Statistics
    "EffectTable",
    "fdr_critical_t",
    # Output
    "plot_marginal_effects",
    "save_effects_to_csv",
    "save_figure",
    # Errors
    "PlotMeError",
    "InvalidModelKind",
    "InvalidTermKind",
    "TermNotFound",
    "InteractionNotFound",
    "UnsupportedCiType",
    "NotImplementedStrategy",
]
