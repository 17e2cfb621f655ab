"""
Statistical routines for marginal effects in interaction models.

This subpackage computes point estimates, delta-method standard errors and
confidence bounds. All functions operate on a fitted-model snapshot and
pandas tables; no plotting logic is included.

Modules:
    marginal:
        Marginal effect of the focal term at each moderator level, with the
        reference level of a categorical moderator handled separately.

    intervals:
        Standard, false-discovery-rate and custom confidence-interval
        strategies, and selection among them.

    fdr:
        Benjamini-Hochberg critical t-statistic for a family of effects.

Design Principle:
    This subpackage has no dependencies on the plotting/ modules.
"""

from .fdr import bh_threshold, fdr_critical_t, two_sided_p_values
from .intervals import (
    CI_TYPES,
    DEFAULT_CI,
    BootstrapInterval,
    CustomInterval,
    FDRInterval,
    StandardInterval,
    apply_interval,
    select_strategy,
)
from .marginal import (
    EffectTable,
    InteractionLevel,
    ReferenceLevel,
    compute,
    effect_levels,
    me_one,
)

__all__ = [
    "bh_threshold",
    "fdr_critical_t",
    "two_sided_p_values",
    "CI_TYPES",
    "DEFAULT_CI",
    "BootstrapInterval",
    "CustomInterval",
    "FDRInterval",
    "StandardInterval",
    "apply_interval",
    "select_strategy",
    "EffectTable",
    "InteractionLevel",
    "ReferenceLevel",
    "compute",
    "effect_levels",
    "me_one",
]
