"""Centralized plotting style, labels, and save helpers."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

import matplotlib.pyplot as plt
from matplotlib.axes import Axes
from matplotlib.figure import Figure
from matplotlib.ticker import MaxNLocator

OUTPUT_FORMATS: tuple[str, ...] = ("png", "pdf", "svg")
FIGURE_DPI = 300
_STYLE_STATE = {"initialized": False}

# Above this many levels a continuous moderator is drawn as a line and band.
MAX_POINTRANGE_LEVELS = 5


@dataclass(frozen=True)
class StyleConfig:
    BASE_FONTSIZE: float = 12.0
    LABEL_FONTSIZE: float = 12.0
    TICK_FONTSIZE: float = 11.0
    LINEWIDTH: float = 1.6
    LINEWIDTH_THIN: float = 1.0
    MARKERSIZE: float = 6.0
    ALPHA_BAND: float = 0.1
    ALPHA_RUG: float = 0.5
    ALPHA_CONNECT: float = 0.3
    GRID_ALPHA: float = 0.20
    FIGSIZE_SINGLE: tuple[float, float] = (7.0, 4.2)
    LINE_COLOR: str = "#1a1a1a"
    BAND_COLOR: str = "#1a1a1a"


STYLE = StyleConfig()


def apply_global_style(font_scale: float = 1.0) -> None:
    """Apply global Matplotlib style, scaled by ``font_scale``."""
    scale = float(font_scale)
    plt.rcParams.update(
        {
            "font.size": STYLE.BASE_FONTSIZE * scale,
            "axes.labelsize": STYLE.LABEL_FONTSIZE * scale,
            "xtick.labelsize": STYLE.TICK_FONTSIZE * scale,
            "ytick.labelsize": STYLE.TICK_FONTSIZE * scale,
            "axes.linewidth": STYLE.LINEWIDTH_THIN,
            "axes.spines.top": False,
            "axes.spines.right": False,
            "grid.alpha": STYLE.GRID_ALPHA,
            "grid.linestyle": ":",
            "lines.linewidth": STYLE.LINEWIDTH,
            "lines.markersize": STYLE.MARKERSIZE,
            "savefig.dpi": FIGURE_DPI,
            "savefig.bbox": "tight",
            "savefig.pad_inches": 0.12,
        }
    )


def set_global_style() -> None:
    """Apply global plotting style once per process."""
    if not _STYLE_STATE["initialized"]:
        apply_global_style()
        _STYLE_STATE["initialized"] = True


def label_marginal_effect(term1: str) -> str:
    return f"Marginal effect of\n{term1}"


def clean_axis(ax: Axes, *, nbins_y: int = 6) -> None:
    """Apply consistent ticks and spine formatting to one axis."""
    ax.yaxis.set_major_locator(MaxNLocator(nbins=nbins_y, min_n_ticks=4))
    for side in ("left", "bottom"):
        ax.spines[side].set_linewidth(STYLE.LINEWIDTH_THIN)
    ax.spines["top"].set_visible(False)
    ax.spines["right"].set_visible(False)


def draw_zero_line(ax: Axes) -> None:
    ax.axhline(0.0, color=STYLE.LINE_COLOR, linestyle=":", linewidth=STYLE.LINEWIDTH_THIN)


def save_figure(
    fig: Figure,
    savepath_base: str | Path,
    formats: Sequence[str] = OUTPUT_FORMATS,
    dpi: int = FIGURE_DPI,
    *,
    bbox_inches: str = "tight",
    pad_inches: float = 0.12,
) -> Path:
    """Save a figure to multiple formats using one extensionless base path.

    Returns:
        pathlib.Path: Path of the first format written.
    """
    base = Path(savepath_base)
    if base.suffix.lstrip(".") in OUTPUT_FORMATS:
        base = base.with_suffix("")
    base.parent.mkdir(parents=True, exist_ok=True)
    for ext in formats:
        target = base.with_name(f"{base.name}.{ext}")
        fig.savefig(
            str(target),
            dpi=dpi if ext == "png" else None,
            bbox_inches=bbox_inches,
            pad_inches=pad_inches,
        )
    return base.with_name(f"{base.name}.{formats[0]}")
