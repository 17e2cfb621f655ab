"""Render marginal-effect tables as figures.

Two layouts are used:

- a line with a shaded confidence band and a rug of observed moderator values,
  for continuous moderators evaluated at more than a handful of points;
- point estimates with vertical interval bars, for categorical moderators and
  short continuous grids.

All functions take a precomputed :class:`plotme.stats.marginal.EffectTable`
and perform no statistics.
"""

from __future__ import annotations

from typing import Optional

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.axes import Axes
from matplotlib.figure import Figure

from ..schema import COLUMNS
from ..stats.marginal import EffectTable
from .style import (
    MAX_POINTRANGE_LEVELS,
    STYLE,
    clean_axis,
    draw_zero_line,
    label_marginal_effect,
    set_global_style,
)


def _require_columns(table: EffectTable) -> None:
    missing = set(COLUMNS.all) - set(table.frame.columns)
    if missing:
        raise KeyError(
            f"effect table missing required columns: {sorted(missing)}. "
            f"Expected columns: {list(COLUMNS.all)}"
        )


def _draw_band(ax: Axes, table: EffectTable) -> None:
    frame = table.frame
    x = frame[COLUMNS.level].to_numpy(dtype=float)
    ax.fill_between(
        x,
        frame[COLUMNS.lower].to_numpy(dtype=float),
        frame[COLUMNS.upper].to_numpy(dtype=float),
        color=STYLE.BAND_COLOR,
        alpha=STYLE.ALPHA_BAND,
        linewidth=0.0,
    )
    ax.plot(x, frame[COLUMNS.estimate].to_numpy(dtype=float), color=STYLE.LINE_COLOR)

    rug = table.term2_distribution.to_numpy(dtype=float)
    rug = rug[np.isfinite(rug)]
    ax.plot(
        rug,
        np.zeros_like(rug),
        linestyle="none",
        marker="|",
        markersize=12,
        color=STYLE.LINE_COLOR,
        alpha=STYLE.ALPHA_RUG,
        transform=ax.get_xaxis_transform(),
        clip_on=False,
    )
    ax.set_xlabel(table.term2)


def _draw_pointrange(ax: Axes, table: EffectTable) -> None:
    frame = table.frame
    y = frame[COLUMNS.estimate].to_numpy(dtype=float)
    yerr = np.vstack(
        [
            np.abs(y - frame[COLUMNS.lower].to_numpy(dtype=float)),
            np.abs(frame[COLUMNS.upper].to_numpy(dtype=float) - y),
        ]
    )

    if table.categorical:
        labels = [str(v) for v in frame[COLUMNS.level]]
        x = np.arange(len(labels), dtype=float)
        ax.set_xticks(x)
        ax.set_xticklabels(labels)
        ax.set_xlim(-0.5, len(labels) - 0.5)
    else:
        x = frame[COLUMNS.level].to_numpy(dtype=float)
        ax.plot(x, y, color=STYLE.LINE_COLOR, alpha=STYLE.ALPHA_CONNECT)
        ax.set_xticks(x)

    ax.errorbar(
        x,
        y,
        yerr=yerr,
        fmt="o",
        color=STYLE.LINE_COLOR,
        elinewidth=STYLE.LINEWIDTH,
        markersize=STYLE.MARKERSIZE,
        capsize=0,
    )
    ax.set_xlabel(table.term2)


def plot_marginal_effects(table: EffectTable, ax: Optional[Axes] = None) -> Figure:
    """Plot the marginal effect of ``term1`` across ``term2``.

    Args:
        table (EffectTable): Effects with confidence bounds applied.
        ax (matplotlib.axes.Axes, optional): Axes to draw on. A new figure is
            created when omitted.

    Returns:
        matplotlib.figure.Figure: Figure holding the plot.

    Raises:
        KeyError: If the table is missing any required column.

    Note:
        A dotted horizontal line marks a zero effect. The x label is the
        moderator's variable name, without dummy-level suffixes.
    """
    _require_columns(table)
    set_global_style()

    if ax is None:
        fig, ax = plt.subplots(figsize=STYLE.FIGSIZE_SINGLE)
    else:
        fig = ax.figure

    draw_zero_line(ax)
    if not table.categorical and len(table) > MAX_POINTRANGE_LEVELS:
        _draw_band(ax, table)
    else:
        _draw_pointrange(ax, table)

    ax.set_ylabel(label_marginal_effect(table.term1))
    clean_axis(ax)
    return fig
