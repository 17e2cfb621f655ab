"""
Marginal effects from two-way interactions in linear regressions.

This module ties the pipeline together:

1. Accept an OLS fit (a statsmodels results object or a ``FittedModel``).
2. Resolve ``term1``, ``term2`` and their interaction coefficient, in either
   order, for a continuous or categorical ``term2``.
3. Compute point estimates and delta-method standard errors at every level of
   ``term2``.
4. Apply a confidence-interval strategy: standard (normal quantile),
   false-discovery-rate limiting, or a custom t-statistic.
5. Return the effect table, or render it.

Example:
    >>> import statsmodels.formula.api as smf
    >>> fit = smf.ols("Murder ~ Income * Population", data=states).fit()
    >>> plot_me(fit, "Income", "Population", ci=95, plot=False)

References:
    Brambor, T., Clark, W. R., and Golder, M. 2006. "Understanding
    interaction models: Improving empirical analyses". Political Analysis
    14(1): 63-82.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

import pandas as pd
from matplotlib.figure import Figure

from .model import as_fitted_model
from .plotting import plot_marginal_effects
from .stats.intervals import DEFAULT_CI, apply_interval, select_strategy
from .stats.marginal import EffectTable, compute
from .terms import level_grid, resolve

logger = logging.getLogger(__name__)


def marginal_effects(
    obj: Any,
    term1: str,
    term2: str,
    fitted2: Optional[Sequence[float]] = None,
    ci: float = DEFAULT_CI,
    ci_type: str = "standard",
    t_statistic: Optional[float] = None,
    two_sided: bool = True,
) -> EffectTable:
    """Compute marginal effects of ``term1`` across ``term2`` with intervals.

    Args:
        obj: Fitted OLS model; statsmodels results or ``FittedModel``.
        term1: Name of the continuous constitutive term whose effect is
            reported.
        term2: Name of the other constitutive term (continuous or factor).
        fitted2: Values of ``term2`` to evaluate at. Defaults to all unique
            observed values. Ignored for a factor ``term2``.
        ci: Confidence level on the ``]0, 100[`` scale. Defaults to ``95``.
        ci_type: ``"standard"`` or ``"fdr"``. ``"boot"`` is reserved and
            raises.
        t_statistic: Custom critical t-statistic; overrides ``ci_type``.
        two_sided: Quantile convention of the ``"standard"`` interval.

    Returns:
        EffectTable: Effects, standard errors and bounds in level order, plus
        labelling metadata and the observed ``term2`` distribution.

    Raises:
        InvalidModelKind: If ``obj`` is not an OLS fit.
        InvalidTermKind: If ``term1`` is a factor.
        TermNotFound: If ``term1`` or ``term2`` is missing.
        InteractionNotFound: If the interaction term is missing.
        UnsupportedCiType: If ``ci_type`` is unknown.
        NotImplementedStrategy: If ``ci_type='boot'``.
    """
    model = as_fitted_model(obj)
    strategy = select_strategy(
        ci=ci,
        ci_type=ci_type,
        t_statistic=t_statistic,
        df=model.df_resid,
        two_sided=two_sided,
    )

    spec = resolve(model, term1, term2)
    grid = level_grid(spec, fitted2)
    logger.debug(
        "Evaluating %s at %d levels of %s with %s",
        term1,
        len(grid),
        term2,
        type(strategy).__name__,
    )
    table = compute(spec, model, grid)
    return apply_interval(table, strategy)


def plot_me(
    obj: Any,
    term1: str,
    term2: str,
    fitted2: Optional[Sequence[float]] = None,
    ci: float = DEFAULT_CI,
    ci_type: str = "standard",
    t_statistic: Optional[float] = None,
    plot: bool = True,
    two_sided: bool = True,
) -> Figure | pd.DataFrame:
    """Plot marginal effects from a two-way interaction in a linear regression.

    Takes the same arguments as :func:`marginal_effects`, plus ``plot``.

    Returns:
        matplotlib.figure.Figure | pandas.DataFrame: The rendered figure when
        ``plot`` is true; otherwise the effect table with columns ``fitted2``,
        ``dy_dx``, ``se_dy_dx``, ``lower`` and ``upper``.
    """
    table = marginal_effects(
        obj,
        term1,
        term2,
        fitted2=fitted2,
        ci=ci,
        ci_type=ci_type,
        t_statistic=t_statistic,
        two_sided=two_sided,
    )
    if not plot:
        return table.frame

    return plot_marginal_effects(table)
