"""Marginal effects of a focal term across the levels of a moderator.

For the model ``y = b0 + b1*x + b2*z + b3*x*z``, the marginal effect of
``x`` at ``z = v`` is ``dy/dx = b1 + b3*v``. Its delta-method variance is

    Var(b1) + v^2 * Var(b3) + 2 * v * Cov(b1, b3).

A categorical moderator is handled level by level. Non-reference levels use
the same formula with ``v = 1`` and the level's own dummy interaction. The
reference level has no interaction coefficient, so its effect is ``b1`` and
its standard error is the model-reported standard error of ``b1``.

References:
    Brambor, T., Clark, W. R., and Golder, M. 2006. "Understanding
    interaction models: Improving empirical analyses". Political Analysis
    14(1): 63-82.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from typing import List, Sequence, Union

import numpy as np
import pandas as pd

from ..model import FittedModel
from ..schema import COLUMNS
from ..terms import CategoricalModerator, InteractionSpec

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReferenceLevel:
    """Reference level of a categorical moderator."""

    label: object


@dataclass(frozen=True)
class InteractionLevel:
    """Level whose effect includes the interaction coefficient ``key``.

    ``value`` is the moderator value (``1`` for a treatment dummy).
    """

    label: object
    value: float
    key: str


EffectLevel = Union[ReferenceLevel, InteractionLevel]


@dataclass(frozen=True)
class EffectTable:
    """Marginal effects of ``term1`` in moderator-level order.

    Attributes:
        frame: One row per level with columns from :data:`plotme.schema.COLUMNS`.
        term1: Focal term name.
        term2: Moderator variable name, without any dummy-level suffix.
        categorical: Whether the moderator is categorical.
        term2_distribution: Observed moderator values, for rug overlays.
        t_statistic: Critical value behind ``lower``/``upper``; ``NaN`` until
            an interval has been applied.
    """

    frame: pd.DataFrame
    term1: str
    term2: str
    categorical: bool
    term2_distribution: pd.Series
    t_statistic: float = math.nan

    def with_frame(self, frame: pd.DataFrame, t_statistic: float) -> "EffectTable":
        return replace(self, frame=frame, t_statistic=float(t_statistic))

    def __len__(self) -> int:
        return len(self.frame)


def effect_levels(spec: InteractionSpec, grid: Sequence) -> List[EffectLevel]:
    """Tag each grid point with the formula variant it needs."""
    moderator = spec.moderator
    if isinstance(moderator, CategoricalModerator):
        levels: List[EffectLevel] = [ReferenceLevel(label=moderator.reference)]
        for label, key in zip(moderator.levels[1:], spec.interaction_keys):
            levels.append(InteractionLevel(label=label, value=1.0, key=key))
        return levels

    key = spec.interaction_keys[0]
    return [InteractionLevel(label=float(v), value=float(v), key=key) for v in grid]


def me_one(level: EffectLevel, term1: str, model: FittedModel) -> tuple[float, float]:
    """Point estimate and standard error of ``term1``'s effect at one level.

    Args:
        level: Reference or interaction level.
        term1: Focal coefficient name.
        model: Fitted model snapshot.

    Returns:
        tuple[float, float]: ``(dy_dx, se_dy_dx)``.
    """
    beta1 = float(model.params[term1])
    if isinstance(level, ReferenceLevel):
        return beta1, float(model.bse[term1])

    v = level.value
    dy_dx = beta1 + float(model.params[level.key]) * v
    var = (
        float(model.cov.loc[term1, term1])
        + v**2 * float(model.cov.loc[level.key, level.key])
        + 2.0 * v * float(model.cov.loc[term1, level.key])
    )
    return dy_dx, math.sqrt(max(var, 0.0))


def _continuous_effects(
    spec: InteractionSpec, model: FittedModel, grid: np.ndarray
) -> pd.DataFrame:
    term1 = spec.term1
    key = spec.interaction_keys[0]
    v = np.asarray(grid, dtype=float)

    dy_dx = model.params[term1] + model.params[key] * v
    var = (
        model.cov.loc[term1, term1]
        + v**2 * model.cov.loc[key, key]
        + 2.0 * v * model.cov.loc[term1, key]
    )
    se = np.sqrt(np.clip(var, 0.0, None))

    return pd.DataFrame(
        {
            COLUMNS.level: v,
            COLUMNS.estimate: dy_dx.astype(float),
            COLUMNS.std_error: se.astype(float),
            COLUMNS.lower: np.nan,
            COLUMNS.upper: np.nan,
        }
    )


def _categorical_effects(spec: InteractionSpec, model: FittedModel) -> pd.DataFrame:
    rows = []
    for level in effect_levels(spec, ()):
        dy_dx, se = me_one(level, spec.term1, model)
        rows.append(
            {
                COLUMNS.level: level.label,
                COLUMNS.estimate: dy_dx,
                COLUMNS.std_error: se,
                COLUMNS.lower: np.nan,
                COLUMNS.upper: np.nan,
            }
        )
    frame = pd.DataFrame(rows, columns=list(COLUMNS.all))
    labels = list(spec.moderator.levels)
    frame[COLUMNS.level] = pd.Categorical(
        frame[COLUMNS.level], categories=labels, ordered=True
    )
    return frame


def compute(spec: InteractionSpec, model: FittedModel, grid: Sequence) -> EffectTable:
    """Compute marginal effects of ``spec.term1`` at every grid level.

    Args:
        spec: Resolved interaction.
        model: Fitted model snapshot.
        grid: Level grid from :func:`plotme.terms.level_grid`.

    Returns:
        EffectTable: Point estimates and standard errors in grid order, with
        ``lower``/``upper`` left as ``NaN`` for an interval strategy to fill.

    Note:
        For a categorical moderator the reference level is always the first
        row.
    """
    if spec.categorical:
        frame = _categorical_effects(spec, model)
    else:
        frame = _continuous_effects(spec, model, np.asarray(grid, dtype=float))

    logger.debug(
        "Computed %d marginal effects of %s across %s",
        len(frame),
        spec.term1,
        spec.term2,
    )
    return EffectTable(
        frame=frame,
        term1=spec.term1,
        term2=spec.term2,
        categorical=spec.categorical,
        term2_distribution=spec.moderator.values.reset_index(drop=True),
    )
