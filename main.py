#!/usr/bin/env python3
"""
Command-line entry point for marginal-effect analysis.
"""

# Pipeline overview:
# 1) Load a CSV and fit the given OLS formula with statsmodels.
# 2) Resolve term1, term2 and their interaction coefficient.
# 3) Compute marginal effects of term1 across term2 with confidence bounds.
# 4) Export the effect table as CSV and the figure as PNG/PDF/SVG.

import argparse
import logging
import os
import sys
import time

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
    handlers=[
        logging.StreamHandler(sys.stdout),
        logging.FileHandler("plotme.log", mode="w"),
    ],
)

import matplotlib

matplotlib.use("Agg")

import pandas as pd
import statsmodels.formula.api as smf

from plotme.analysis import marginal_effects
from plotme.errors import PlotMeError
from plotme.output import save_effects_to_csv
from plotme.plotting import plot_marginal_effects, save_figure


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Marginal effects from a two-way interaction in an OLS fit."
    )
    parser.add_argument("data", help="CSV file with the model variables")
    parser.add_argument("formula", help="OLS formula, e.g. 'y ~ x * z'")
    parser.add_argument("term1", help="continuous term whose effect is reported")
    parser.add_argument("term2", help="moderating term")
    parser.add_argument(
        "--fitted2",
        type=float,
        nargs="+",
        default=None,
        help="term2 values to evaluate at (default: all observed values)",
    )
    parser.add_argument("--ci", type=float, default=95.0)
    parser.add_argument("--ci-type", default="standard", choices=["standard", "fdr", "boot"])
    parser.add_argument("--t-statistic", type=float, default=None)
    parser.add_argument(
        "--one-tailed",
        action="store_true",
        help="use norm.ppf(ci/100) instead of the two-sided quantile",
    )
    parser.add_argument(
        "--categorical",
        nargs="*",
        default=[],
        help="columns to treat as factors before fitting",
    )
    parser.add_argument("--output-dir", default="output")
    parser.add_argument("--no-plot", action="store_true")
    return parser


def main(argv=None):
    """Main execution function with step timing logs."""

    args = build_parser().parse_args(argv)
    start_time = time.time()
    logging.info("Loading %s", args.data)

    data = pd.read_csv(args.data)
    for col in args.categorical:
        data[col] = data[col].astype("category")

    fit = smf.ols(args.formula, data=data).fit()
    logging.info("Fitted '%s' on %d observations", args.formula, int(fit.nobs))

    try:
        table = marginal_effects(
            fit,
            args.term1,
            args.term2,
            fitted2=args.fitted2,
            ci=args.ci,
            ci_type=args.ci_type,
            t_statistic=args.t_statistic,
            two_sided=not args.one_tailed,
        )
    except PlotMeError as exc:
        logging.error("Marginal effect analysis failed: %s", exc)
        return 1

    logging.info(
        "Computed %d marginal effects of %s across %s", len(table), args.term1, args.term2
    )

    os.makedirs(args.output_dir, exist_ok=True)
    stem = f"me_{args.term1}_by_{args.term2}"
    csv_path = save_effects_to_csv(table, args.output_dir, stem=stem)

    if not args.no_plot:
        fig = plot_marginal_effects(table)
        png_path = save_figure(fig, os.path.join(args.output_dir, stem))
        logging.info("  - Figure: %s", png_path)

    logging.info("  - Effects CSV: %s", csv_path)
    logging.info(f"Total execution time: {time.time() - start_time:.2f} seconds")
    return 0


if __name__ == "__main__":
    sys.exit(main())
