"""Confidence-interval strategies for marginal-effect tables.

Every strategy reduces to one critical value ``t`` applied to every row:
``lower = dy_dx - t * se`` and ``upper = dy_dx + t * se``. They differ only in
how ``t`` is obtained.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Union

from scipy.stats import norm

from ..errors import NotImplementedStrategy, UnsupportedCiType
from ..schema import COLUMNS
from .fdr import fdr_critical_t
from .marginal import EffectTable

logger = logging.getLogger(__name__)

DEFAULT_CI = 95
CI_TYPES = ("standard", "fdr", "boot")


def _check_ci(ci: float) -> float:
    ci = float(ci)
    if not 0 < ci < 100:
        raise ValueError(f"ci must lie strictly between 0 and 100; got {ci}.")
    return ci


@dataclass(frozen=True)
class StandardInterval:
    """Normal-quantile interval.

    ``two_sided=True`` uses ``norm.ppf((1 + ci/100) / 2)`` (1.96 at 95).
    ``two_sided=False`` uses the single upper-tail quantile
    ``norm.ppf(ci/100)`` (1.645 at 95).
    """

    ci: float = DEFAULT_CI
    two_sided: bool = True

    def critical_value(self, table: EffectTable) -> float:
        level = _check_ci(self.ci) / 100.0
        if self.two_sided:
            return float(norm.ppf((1.0 + level) / 2.0))
        return float(norm.ppf(level))


@dataclass(frozen=True)
class FDRInterval:
    """Interval limiting the false discovery rate across all levels."""

    ci: float = DEFAULT_CI
    df: float = float("nan")

    def critical_value(self, table: EffectTable) -> float:
        t_stat = fdr_critical_t(
            table.frame[COLUMNS.estimate].to_numpy(dtype=float),
            table.frame[COLUMNS.std_error].to_numpy(dtype=float),
            df=self.df,
            ci=_check_ci(self.ci),
        )
        logger.info("t-statistic used: %.3f", t_stat)
        return t_stat


@dataclass(frozen=True)
class CustomInterval:
    """Caller-supplied critical value."""

    t_statistic: float

    def critical_value(self, table: EffectTable) -> float:
        return float(self.t_statistic)


@dataclass(frozen=True)
class BootstrapInterval:
    """Bootstrap interval; reserved, not available yet."""

    ci: float = DEFAULT_CI

    def critical_value(self, table: EffectTable) -> float:
        raise NotImplementedStrategy("boot not supported yet.")


IntervalStrategy = Union[StandardInterval, FDRInterval, CustomInterval, BootstrapInterval]


def select_strategy(
    ci: float = DEFAULT_CI,
    ci_type: str = "standard",
    t_statistic: Optional[float] = None,
    df: float = float("nan"),
    two_sided: bool = True,
) -> IntervalStrategy:
    """Map user-facing arguments to one interval strategy.

    Args:
        ci: Confidence level on the ``]0, 100[`` scale.
        ci_type: ``"standard"``, ``"fdr"`` or ``"boot"`` (case-insensitive).
        t_statistic: Explicit critical value. Overrides ``ci_type``.
        df: Residual degrees of freedom, used by ``"fdr"``.
        two_sided: Quantile convention of ``"standard"``.

    Raises:
        UnsupportedCiType: If ``ci_type`` is not recognised.
        ValueError: If ``ci`` is outside ``]0, 100[``.
    """
    ci_type = str(ci_type).lower()
    if ci_type not in CI_TYPES:
        raise UnsupportedCiType(f"ci_type '{ci_type}' not supported.")

    if t_statistic is not None:
        logger.info("Using custom t-statistic (ignoring ci_type argument).")
        return CustomInterval(t_statistic=float(t_statistic))

    ci = _check_ci(ci)
    if ci_type == "fdr":
        return FDRInterval(ci=ci, df=df)
    if ci_type == "boot":
        return BootstrapInterval(ci=ci)
    return StandardInterval(ci=ci, two_sided=two_sided)


def apply_interval(table: EffectTable, strategy: IntervalStrategy) -> EffectTable:
    """Return a copy of ``table`` with ``lower``/``upper`` from ``strategy``.

    Point estimates and standard errors are left untouched.
    """
    t_stat = strategy.critical_value(table)
    frame = table.frame.copy()
    half_width = t_stat * frame[COLUMNS.std_error]
    frame[COLUMNS.upper] = frame[COLUMNS.estimate] + half_width
    frame[COLUMNS.lower] = frame[COLUMNS.estimate] - half_width
    return table.with_frame(frame, t_stat)
