"""False-discovery-rate critical t-statistic for a family of marginal effects.

Plotting a marginal effect across many moderator values implicitly performs
one hypothesis test per value. Esarey and Sumner (2015) show that reading
significance off a conventional 95% band then overstates the evidence. This
module finds a single critical t-statistic that controls the false discovery
rate of the whole family using the Benjamini-Hochberg step-up rule.

References:
    Benjamini, Y., and Hochberg, Y. 1995. "Controlling the False Discovery
    Rate: A Practical and Powerful Approach to Multiple Testing". Journal of
    the Royal Statistical Society, Series B 57(1): 289-300.

    Esarey, J., and Sumner, J. L. 2015. "Marginal Effects in Interaction
    Models: Determining and Controlling the False Positive Rate".
"""

from __future__ import annotations

from typing import Dict

import numpy as np
from scipy.stats import t as student_t


def two_sided_p_values(
    estimates: np.ndarray, std_errors: np.ndarray, df: float
) -> np.ndarray:
    """Two-sided t-test p-values of ``estimate / std_error`` with ``df``."""
    t_abs = np.abs(np.asarray(estimates, dtype=float) / np.asarray(std_errors, dtype=float))
    return 2.0 * student_t.sf(t_abs, df)


def bh_threshold(p_values: np.ndarray, alpha: float) -> Dict[str, float]:
    """Benjamini-Hochberg step-up threshold.

    Args:
        p_values (numpy.ndarray): Family of p-values.
        alpha (float): Target false discovery rate in ``(0, 1)``.

    Returns:
        dict[str, float]: ``p_crit`` (largest ``alpha * k / m`` met by the
        ``k``-th smallest p-value, or ``alpha / m`` when none is), ``k``
        (number of rejections) and ``m`` (family size).
    """
    p_sorted = np.sort(np.asarray(p_values, dtype=float))
    m = int(p_sorted.size)
    if m == 0:
        raise ValueError("Cannot compute an FDR threshold for an empty family.")

    ranks = np.arange(1, m + 1)
    passing = np.nonzero(p_sorted <= alpha * ranks / m)[0]
    k = int(passing[-1] + 1) if passing.size else 0
    p_crit = alpha * max(k, 1) / m
    return {"p_crit": float(p_crit), "k": k, "m": m}


def fdr_critical_t(
    estimates: np.ndarray,
    std_errors: np.ndarray,
    df: float,
    ci: float = 95,
) -> float:
    """Critical t-statistic limiting the false discovery rate of a family.

    Args:
        estimates (numpy.ndarray): Marginal-effect point estimates.
        std_errors (numpy.ndarray): Their standard errors.
        df (float): Residual degrees of freedom of the fitted model.
        ci (float, optional): Confidence level on the ``]0, 100[`` scale.
            The target false discovery rate is ``1 - ci/100``. Defaults to
            ``95``.

    Returns:
        float: ``t`` such that ``estimate +/- t * std_error`` excludes zero
        exactly for the effects the Benjamini-Hochberg rule rejects.

    Raises:
        ValueError: If ``df`` is not positive, ``ci`` is outside ``]0, 100[``,
            or no effect has a finite, positive standard error.

    Note:
        Effects with a zero or non-finite standard error carry no test and are
        left out of the family.
    """
    if not np.isfinite(df) or df <= 0:
        raise ValueError(f"Degrees of freedom must be positive; got {df}.")
    if not 0 < ci < 100:
        raise ValueError(f"ci must lie strictly between 0 and 100; got {ci}.")

    b = np.asarray(estimates, dtype=float)
    se = np.asarray(std_errors, dtype=float)
    usable = np.isfinite(b) & np.isfinite(se) & (se > 0)
    if not np.any(usable):
        raise ValueError("No marginal effect has a usable standard error.")

    alpha = 1.0 - ci / 100.0
    p_values = two_sided_p_values(b[usable], se[usable], df)
    threshold = bh_threshold(p_values, alpha)
    return float(student_t.isf(threshold["p_crit"] / 2.0, df))
