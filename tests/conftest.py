"""Pytest configuration for repository-relative imports and shared fits."""

import os
import sys

import matplotlib

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

matplotlib.use("Agg")

import numpy as np
import pandas as pd
import pytest
import statsmodels.formula.api as smf


@pytest.fixture
def states_df():
    """Continuous Income and Population with repeated Population values."""
    rng = np.random.default_rng(7)
    n = 60
    income = rng.normal(4.5, 0.6, n)
    population = rng.integers(1, 16, n).astype(float)
    murder = (
        2.0
        + 1.5 * income
        + 0.3 * population
        - 0.2 * income * population
        + rng.normal(0.0, 0.5, n)
    )
    return pd.DataFrame({"Murder": murder, "Income": income, "Population": population})


@pytest.fixture
def states_fit(states_df):
    return smf.ols("Murder ~ Income * Population", data=states_df).fit()


@pytest.fixture
def tiers_df():
    """Continuous x with a three-level factor whose reference is Low."""
    rng = np.random.default_rng(11)
    n = 90
    x = rng.normal(0.0, 1.0, n)
    tier = pd.Categorical(
        np.repeat(["Low", "Mid", "High"], n // 3), categories=["Low", "Mid", "High"]
    )
    shift = np.repeat([0.0, 1.0, 2.0], n // 3)
    slope = np.repeat([0.5, 1.0, -0.5], n // 3)
    y = 1.0 + shift + slope * x + rng.normal(0.0, 0.3, n)
    return pd.DataFrame({"y": y, "x": x, "tier": tier})


@pytest.fixture
def tiers_fit(tiers_df):
    return smf.ols("y ~ x * tier", data=tiers_df).fit()
