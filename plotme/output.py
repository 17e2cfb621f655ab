"""Write effect tables to reproducible CSV files.

This module is the output boundary between in-memory effect tables and files
on disk.
"""

from __future__ import annotations

import logging
import os

import pandas as pd

from .schema import COLUMNS
from .stats.marginal import EffectTable

logger = logging.getLogger(__name__)


def effects_report(table: EffectTable) -> pd.DataFrame:
    """Return the effect frame with labelling columns for export.

    Adds ``term1``, ``term2`` and ``t_statistic`` so the CSV is
    self-describing.
    """
    report = table.frame.copy()
    report[COLUMNS.level] = report[COLUMNS.level].astype(object)
    report.insert(0, "term2", table.term2)
    report.insert(0, "term1", table.term1)
    report["t_statistic"] = table.t_statistic
    return report


def save_effects_to_csv(
    table: EffectTable, output_dir: str = "output", stem: str = "marginal_effects"
) -> str:
    """Save an effect table to ``<output_dir>/<stem>.csv``.

    Args:
        table (EffectTable): Output of ``plotme.analysis.marginal_effects``.
        output_dir (str): Directory where the CSV is written.
        stem (str): File name without extension.

    Returns:
        str: Path to the written CSV.

    Raises:
        ValueError: If bounds have not been computed for every row.
    """
    if table.frame[[COLUMNS.lower, COLUMNS.upper]].isna().any().any():
        raise ValueError(
            "Confidence bounds missing; apply an interval strategy before export."
        )

    os.makedirs(output_dir, exist_ok=True)
    path = os.path.join(output_dir, f"{stem}.csv")
    effects_report(table).to_csv(path, index=False)
    logger.info("Saved marginal effects to %s", path)
    return path
